"""
Diagnostic/warning system for declaration extraction.

Collects and reports declarations that were dropped because they reference
types the parsed source does not define. This is the expected outcome when
a contract is parsed without its imports, so diagnostics are data, not
exceptions.
"""

import sys
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for extraction diagnostics."""
    WARNING = 'warning'
    INFO = 'info'


_MISSING_HINT = (
    'Please add the struct definition to the contract source or provide the ABI JSON.'
)


@dataclass
class Diagnostic:
    """A single diagnostic message."""
    severity: DiagnosticSeverity
    code: str
    message: str
    subject: str = ''        # declaration the diagnostic is about
    missing_type: str = ''   # type name that could not be resolved
    file_path: str = ''
    line: Optional[int] = None

    def __str__(self) -> str:
        location = self.file_path
        if self.line:
            location = f'{location}:{self.line}'
        if location:
            return f'[{self.severity.value}] {location}: {self.message} ({self.code})'
        return f'[{self.severity.value}] {self.message} ({self.code})'

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            'severity': self.severity.value,
            'code': self.code,
            'subjectName': self.subject,
            'missingTypeName': self.missing_type,
            'message': self.message,
        }
        if self.file_path:
            result['file'] = self.file_path
        if self.line is not None:
            result['line'] = self.line
        return result


class ExtractionDiagnostics:
    """
    Collects diagnostics during declaration extraction.

    Usage:
        diag = ExtractionDiagnostics()
        diag.warn_unresolved_variable_type("users", "User", line=12)
        # ... after extraction ...
        diag.print_summary()
    """

    def __init__(self, verbose: bool = False):
        self._diagnostics: List[Diagnostic] = []
        self._verbose = verbose

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """Get all collected diagnostics."""
        return list(self._diagnostics)

    @property
    def warnings(self) -> List[Diagnostic]:
        """Get only warning-level diagnostics."""
        return [d for d in self._diagnostics if d.severity == DiagnosticSeverity.WARNING]

    @property
    def count(self) -> int:
        return len(self._diagnostics)

    def clear(self) -> None:
        """Clear all diagnostics."""
        self._diagnostics.clear()

    def extend(self, diagnostics: List[Diagnostic], file_path: str = '') -> None:
        """Add diagnostics collected elsewhere, tagging them with a file."""
        for d in diagnostics:
            self._diagnostics.append(replace(d, file_path=file_path) if file_path else d)

    # =========================================================================
    # SPECIFIC WARNING METHODS
    # =========================================================================

    def warn_unresolved_variable_type(
        self,
        subject: str,
        missing_type: str,
        line: Optional[int] = None,
        file_path: str = '',
    ) -> None:
        """Warn that a state variable getter was dropped over its value type."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W001',
            message=f'Skipping "{subject}": Missing struct definition for '
                    f'"{missing_type}". {_MISSING_HINT}',
            subject=subject,
            missing_type=missing_type,
            file_path=file_path,
            line=line,
        ))

    def warn_unresolved_input_type(
        self,
        subject: str,
        missing_type: str,
        is_function: bool = True,
        line: Optional[int] = None,
        file_path: str = '',
    ) -> None:
        """Warn that a declaration was dropped over one of its input types."""
        label = f'function "{subject}"' if is_function else f'"{subject}"'
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W002',
            message=f'Skipping {label}: Missing struct definition for input type '
                    f'"{missing_type}". {_MISSING_HINT}',
            subject=subject,
            missing_type=missing_type,
            file_path=file_path,
            line=line,
        ))

    def warn_unresolved_return_type(
        self,
        subject: str,
        missing_type: str,
        line: Optional[int] = None,
        file_path: str = '',
    ) -> None:
        """Warn that a function was dropped over one of its return types."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W003',
            message=f'Skipping function "{subject}": Missing struct definition for '
                    f'return type "{missing_type}". {_MISSING_HINT}',
            subject=subject,
            missing_type=missing_type,
            file_path=file_path,
            line=line,
        ))

    def info_nothing_queryable(self, file_path: str) -> None:
        """Info that a file produced no declarations at all."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.INFO,
            code='I001',
            message='No public state variables or view/pure functions found.',
            file_path=file_path,
        ))

    # =========================================================================
    # REPORTING
    # =========================================================================

    def print_summary(self, file=None) -> None:
        """Print a summary of all diagnostics to stderr (or specified file)."""
        if file is None:
            file = sys.stderr

        if not self._diagnostics:
            return

        warnings = self.warnings
        infos = [d for d in self._diagnostics if d.severity == DiagnosticSeverity.INFO]

        if warnings:
            print(f'\nExtraction warnings ({len(warnings)}):', file=file)
            by_missing: Dict[str, List[Diagnostic]] = {}
            for w in warnings:
                by_missing.setdefault(w.missing_type or 'other', []).append(w)

            for missing, diags in sorted(by_missing.items()):
                print(f'  {missing}: {len(diags)} declaration(s) skipped', file=file)
                if self._verbose:
                    for d in diags:
                        print(f'    {d}', file=file)

        if infos and self._verbose:
            print(f'\nExtraction info ({len(infos)}):', file=file)
            for d in infos:
                print(f'  {d}', file=file)

    def get_summary(self) -> str:
        """Get a summary string of all diagnostics."""
        warnings = self.warnings
        if not warnings:
            return 'No extraction warnings.'

        by_missing: Dict[str, int] = {}
        for w in warnings:
            key = w.missing_type or 'other'
            by_missing[key] = by_missing.get(key, 0) + 1

        parts = [f'{count} missing {name}' for name, count in sorted(by_missing.items())]
        return f'Extraction warnings: {", ".join(parts)}'
