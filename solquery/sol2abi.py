#!/usr/bin/env python3
"""
Solidity to ABI extractor

Extracts the queryable interface of Solidity contracts (public state
variable getters and view/pure functions) as ABI JSON, without running a
compiler. Custom types are resolved against the file itself and against
any discovery directories, so structs defined in imported files still
expand to tuples.

Usage:
    python -m solquery.sol2abi src/Token.sol --stdout
    python -m solquery.sol2abi src/ -o abi-output -d lib/
    python -m solquery.sol2abi src/Token.sol --signatures --stdout
"""

import sys
from pathlib import Path
from typing import Dict, List, Optional

from .parser import DeclarationExtractor, ParseOptions, ParseResult
from .type_system import TypeRegistry
from .codegen import ExtractionDiagnostics, abi_to_json, extract_signatures, SignatureEntry


class SolidityInterfaceExtractor:
    """Main extractor class that runs declaration extraction over files."""

    def __init__(
        self,
        source_dir: str = '.',
        output_dir: str = './abi-output',
        discovery_dirs: Optional[List[str]] = None,
        options: Optional[ParseOptions] = None,
        verbose: bool = False
    ):
        self.source_dir = Path(source_dir)
        self.output_dir = Path(output_dir)
        self.options = options or ParseOptions()
        self.registry = TypeRegistry()
        self.diagnostics = ExtractionDiagnostics(verbose=verbose)
        self.results: Dict[str, ParseResult] = {}

        # Run type discovery on specified directories
        if discovery_dirs:
            for dir_path in discovery_dirs:
                self.registry.discover_from_directory(dir_path)

    def discover_types(self, directory: str, pattern: str = '**/*.sol') -> None:
        """Run type discovery on a directory of Solidity files."""
        self.registry.discover_from_directory(directory, pattern)

    def extract_file(self, filepath: str) -> ParseResult:
        """Extract the queryable declarations of a single Solidity file."""
        with open(filepath, 'r', encoding='utf-8') as f:
            source = f.read()

        extractor = DeclarationExtractor(self.options, self.registry)
        result = extractor.extract(source)

        self.results[filepath] = result
        self.diagnostics.extend(result.diagnostics, file_path=filepath)
        if not result.declarations:
            self.diagnostics.info_nothing_queryable(filepath)
        return result

    def signatures_for_file(self, filepath: str) -> List[SignatureEntry]:
        """List the signatures and selectors of every function and getter in a file."""
        with open(filepath, 'r', encoding='utf-8') as f:
            source = f.read()
        return extract_signatures(source, self.registry)

    def extract_directory(self, pattern: str = '**/*.sol', signatures: bool = False) -> Dict[str, str]:
        """
        Extract every Solidity file matching the pattern.

        Returns:
            Output path -> rendered content (ABI JSON, or selector lines
            when `signatures` is set). Unreadable files are reported and
            skipped.
        """
        results = {}
        suffix = '.selectors.txt' if signatures else '.abi.json'
        for sol_file in sorted(self.source_dir.glob(pattern)):
            try:
                if signatures:
                    content = format_signatures(self.signatures_for_file(str(sol_file)))
                else:
                    content = abi_to_json(self.extract_file(str(sol_file)).abi_items)
            except (OSError, UnicodeDecodeError) as e:
                print(f"Error reading {sol_file}: {e}", file=sys.stderr)
                continue
            rel_path = sol_file.relative_to(self.source_dir)
            out_path = self.output_dir / rel_path.with_suffix(suffix)
            results[str(out_path)] = content
        return results

    def write_output(self, results: Dict[str, str]) -> None:
        """Write rendered files to disk."""
        for filepath, content in results.items():
            path = Path(filepath)
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                f.write(content + '\n')
            print(f"Written: {filepath}")


def format_signatures(entries: List[SignatureEntry]) -> str:
    """Render entries one per line: `selector signature`, or an error comment."""
    lines = []
    for entry in entries:
        if entry.error:
            lines.append(f'# {entry.original}: {entry.error}')
        else:
            lines.append(f'{entry.selector} {entry.signature}')
    return '\n'.join(lines)


# =============================================================================
# CLI INTERFACE
# =============================================================================

def main(argv: Optional[List[str]] = None):
    import argparse

    parser = argparse.ArgumentParser(description='Extract queryable ABI items from Solidity source')
    parser.add_argument('input', help='Input Solidity file or directory')
    parser.add_argument('-o', '--output', default='abi-output', help='Output directory')
    parser.add_argument('--stdout', action='store_true', help='Print to stdout instead of file')
    parser.add_argument('-d', '--discover', action='append', metavar='DIR',
                        help='Directory to scan for type discovery')
    parser.add_argument('--signatures', action='store_true',
                        help='Emit canonical signatures and 4-byte selectors instead of ABI JSON')
    parser.add_argument('--include-private', action='store_true',
                        help='Include private and internal functions and state variables')
    parser.add_argument('--no-validate', action='store_true',
                        help='Keep declarations with unresolved custom types')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Print every diagnostic, not just the summary')

    args = parser.parse_args(argv)

    input_path = Path(args.input)
    options = ParseOptions(
        include_private=args.include_private,
        validate_custom_types=not args.no_validate,
    )
    discovery_dirs = args.discover or ([str(input_path)] if input_path.is_dir() else [str(input_path.parent)])

    if input_path.is_file():
        extractor = SolidityInterfaceExtractor(
            source_dir=str(input_path.parent),
            output_dir=args.output,
            discovery_dirs=discovery_dirs,
            options=options,
            verbose=args.verbose
        )

        if args.signatures:
            content = format_signatures(extractor.signatures_for_file(str(input_path)))
            output_path = Path(args.output) / input_path.with_suffix('.selectors.txt').name
        else:
            content = abi_to_json(extractor.extract_file(str(input_path)).abi_items)
            output_path = Path(args.output) / input_path.with_suffix('.abi.json').name

        if args.stdout:
            print(content)
        else:
            extractor.write_output({str(output_path): content})

    elif input_path.is_dir():
        extractor = SolidityInterfaceExtractor(
            str(input_path), args.output, discovery_dirs, options, verbose=args.verbose
        )
        results = extractor.extract_directory(signatures=args.signatures)
        if args.stdout:
            for filepath, content in results.items():
                print(f"// {filepath}")
                print(content)
        else:
            extractor.write_output(results)
    else:
        print(f"Error: {args.input} is not a valid file or directory", file=sys.stderr)
        sys.exit(1)

    extractor.diagnostics.print_summary()


if __name__ == '__main__':
    main()
