"""
Declaration extractor for Solidity source code.

The extractor turns raw contract text into the queryable items a caller
can invoke without sending a transaction: public state variable getters
and view/pure functions. It is a single forward pass over the
comment-stripped text with bounded lookahead per candidate, not a full
parser. Anything that does not fit a recognised shape is skipped; a
declaration that fits but references an undefined type is dropped with
a diagnostic.
"""

import re
from typing import Iterator, List, Optional, Tuple

from ..lexer import (
    strip_comments,
    skip_string,
    line_of,
    find_matching_close,
    patterns,
)
from ..type_system import TypeRegistry
from ..codegen.abi import build_abi_item
from ..codegen.diagnostics import ExtractionDiagnostics
from .ast_nodes import (
    Declaration,
    Param,
    ParseOptions,
    ParseResult,
    PrimitiveType,
    StateVariableMatch,
    FunctionMatch,
)
from .mappings import extract_mapping_type, is_mapping, mapping_keys, final_value_type
from .parameters import parse_clause, split_params


_ARRAY_DIMENSIONS = re.compile(r'^((?:\s*\[\s*\w*\s*\])*)(.*)$', re.DOTALL)
_SIMPLE_TYPE = re.compile(
    r'^([a-zA-Z_$][\w$.]*(?:\s*\[\s*\w*\s*\])*)\s+(.*)$', re.DOTALL
)
_TRAILING_ARRAY = re.compile(r'^(.*\S)\s*\[\s*\w*\s*\]$', re.DOTALL)

_OPAQUE_BLOCK_KEYWORDS = patterns.BODY_KEYWORDS | {'struct', 'enum'}


class DeclarationExtractor:
    """
    Extracts queryable declarations from Solidity source.

    A fresh TypeRegistry is built for every call to extract(). A shared
    registry passed to the constructor (for example one discovered from the
    rest of a project) fills in types the source itself does not define.
    """

    def __init__(
        self,
        options: Optional[ParseOptions] = None,
        registry: Optional[TypeRegistry] = None,
    ):
        self.options = options or ParseOptions()
        self.shared_registry = registry

    def extract(self, source: str) -> ParseResult:
        """
        Parse Solidity source and extract its queryable items.

        State variable getters come first, then functions, each group in
        source order. Names are deduplicated; the first occurrence wins.
        """
        cleaned = strip_comments(source)

        registry = TypeRegistry.from_source(cleaned)
        if self.shared_registry is not None:
            registry.merge(self.shared_registry)

        diagnostics = ExtractionDiagnostics()
        declarations: List[Declaration] = []
        seen = set()

        for match in self.find_state_variables(cleaned):
            if match.name in seen:
                continue
            seen.add(match.name)
            declaration = self._state_variable_declaration(
                match, registry, diagnostics, line_of(cleaned, match.index)
            )
            if declaration is not None:
                declarations.append(declaration)

        for match in self.find_functions(cleaned):
            if match.name in seen:
                continue
            seen.add(match.name)
            declaration = self._function_declaration(
                match, registry, diagnostics, line_of(cleaned, match.index)
            )
            if declaration is not None:
                declarations.append(declaration)

        return ParseResult(
            declarations=declarations,
            abi_items=[build_abi_item(d) for d in declarations],
            diagnostics=diagnostics.diagnostics,
        )

    # =========================================================================
    # STATE VARIABLES
    # =========================================================================

    def find_state_variables(self, cleaned: str) -> List[StateVariableMatch]:
        """Find the state variable declarations this extractor reports."""
        matches = []
        for index, statement in iter_contract_statements(cleaned):
            match = match_state_variable(statement, index)
            if match is None:
                continue
            if match.visibility == 'public' or self.options.include_private:
                matches.append(match)
        return matches

    def _state_variable_declaration(
        self,
        match: StateVariableMatch,
        registry: TypeRegistry,
        diagnostics: ExtractionDiagnostics,
        line: int,
    ) -> Optional[Declaration]:
        keys, value_type = getter_shape(match.type)

        inputs = [
            Param(f'key{i}', key, registry.describe(key))
            for i, key in enumerate(keys, start=1)
        ]
        output = Param('value', value_type, registry.describe(value_type))

        if self.options.validate_custom_types:
            missing = _first_unresolved([output])
            if missing:
                diagnostics.warn_unresolved_variable_type(match.name, missing, line=line)
                return None
            missing = _first_unresolved(inputs)
            if missing:
                diagnostics.warn_unresolved_input_type(
                    match.name, missing, is_function=False, line=line
                )
                return None

        return Declaration(
            name=match.name,
            inputs=inputs,
            outputs=[output],
            state_mutability='view',
            kind='variable',
            line=line,
        )

    # =========================================================================
    # FUNCTIONS
    # =========================================================================

    def find_functions(self, cleaned: str) -> List[FunctionMatch]:
        """Find the view/pure function headers this extractor reports."""
        matches = []
        for match in iter_function_headers(cleaned):
            if match.state_mutability not in patterns.QUERYABLE_MUTABILITY:
                continue
            if match.visibility in patterns.HIDDEN_VISIBILITY and not self.options.include_private:
                continue
            matches.append(match)
        return matches

    def _function_declaration(
        self,
        match: FunctionMatch,
        registry: TypeRegistry,
        diagnostics: ExtractionDiagnostics,
        line: int,
    ) -> Optional[Declaration]:
        inputs = self._parse_params(match.params, registry)
        outputs = self._parse_params(match.returns or '', registry)

        if self.options.validate_custom_types:
            missing = _first_unresolved(inputs)
            if missing:
                diagnostics.warn_unresolved_input_type(match.name, missing, line=line)
                return None
            missing = _first_unresolved(outputs)
            if missing:
                diagnostics.warn_unresolved_return_type(match.name, missing, line=line)
                return None

        if match.returns is None:
            outputs = [Param('value', 'uint256', PrimitiveType('uint256'))]
        elif not outputs:
            # A returns clause with nothing parseable in it
            return None

        return Declaration(
            name=match.name,
            inputs=inputs,
            outputs=outputs,
            state_mutability=match.state_mutability,
            kind='function',
            line=line,
        )

    def _parse_params(self, params: str, registry: TypeRegistry) -> List[Param]:
        parsed = []
        for clause in split_params(params):
            type_str, name = parse_clause(clause)
            if type_str:
                parsed.append(Param(name, type_str, registry.describe(type_str)))
        return parsed


# =============================================================================
# SCANNING HELPERS
# =============================================================================

def iter_contract_statements(cleaned: str) -> Iterator[Tuple[int, str]]:
    """
    Yield (index, text) for each ';'-terminated statement at file level or
    directly inside a contract, interface or library body.

    Every '{' is classified when it opens: it starts an opaque block if a
    function, modifier, constructor, fallback, receive, struct or enum
    keyword appears since the previous '{', '}' or ';', or if it is already
    inside one. Statements inside an opaque block are not yielded. String
    literals are skipped so braces and semicolons inside them do not count.
    """
    stack: List[bool] = []
    start = 0
    i = 0
    length = len(cleaned)
    while i < length:
        ch = cleaned[i]
        if ch in '"\'':
            i = skip_string(cleaned, i)
            continue
        if ch == '{':
            header_words = set(patterns.WORD.findall(cleaned[start:i]))
            opaque = any(stack) or bool(header_words & _OPAQUE_BLOCK_KEYWORDS)
            stack.append(opaque)
            start = i + 1
        elif ch == '}':
            if stack:
                stack.pop()
            start = i + 1
        elif ch == ';':
            if not any(stack):
                text = cleaned[start:i]
                offset = len(text) - len(text.lstrip())
                yield start + offset, text.strip()
            start = i + 1
        i += 1


def _declaration_part(statement: str) -> str:
    """Cut a statement at its initializer '=' (not '=>', '==', '<=' ...)."""
    depth = 0
    for i, ch in enumerate(statement):
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
        elif ch == '=' and depth == 0:
            nxt = statement[i + 1] if i + 1 < len(statement) else ''
            prev = statement[i - 1] if i > 0 else ''
            if nxt not in '=>' and prev not in '=!<>':
                return statement[:i]
    return statement


def match_state_variable(statement: str, index: int) -> Optional[StateVariableMatch]:
    """
    Match a contract-level statement as a state variable declaration.

    Accepts a simple or mapping type, any of the variable modifiers, and a
    trailing identifier. Returns None for anything else.
    """
    text = statement.strip()
    first = patterns.WORD.match(text)
    if first is None or first.group(0) in patterns.NON_VARIABLE_STATEMENTS:
        return None

    decl = _declaration_part(text).strip()
    decl = patterns.OVERRIDE_LIST.sub('override', decl)
    decl = patterns.ADDRESS_PAYABLE.sub('address', decl)

    if is_mapping(decl):
        split = extract_mapping_type(decl)
        if split is None or '=>' not in split.type:
            return None
        dims = _ARRAY_DIMENSIONS.match(split.remainder)
        type_str = split.type + re.sub(r'\s+', '', dims.group(1))
        rest = dims.group(2)
    else:
        simple = _SIMPLE_TYPE.match(decl)
        if simple is None:
            return None
        type_str = re.sub(r'\s+', '', simple.group(1))
        rest = simple.group(2)

    words = rest.split()
    if not words:
        return None
    name, modifiers = words[-1], words[:-1]
    if not patterns.IDENTIFIER.match(name) or name in patterns.VARIABLE_MODIFIERS:
        return None
    if any(word not in patterns.VARIABLE_MODIFIERS for word in modifiers):
        return None

    visibility = next((w for w in modifiers if w in patterns.VISIBILITY), 'internal')
    return StateVariableMatch(type=type_str, name=name, index=index, visibility=visibility)


def getter_shape(type_str: str) -> Tuple[List[str], str]:
    """
    Get the getter inputs and value type of a state variable type.

    Mapping keys become inputs (outer to inner) and the innermost value is
    the output. Each array dimension adds a uint256 index input.

    Example:
        getter_shape('mapping(address => mapping(uint256 => bool))')
        # (['address', 'uint256'], 'bool')
    """
    keys: List[str] = []
    current = type_str.strip()
    while True:
        if is_mapping(current) and not current.endswith(']'):
            keys.extend(mapping_keys(current))
            current = final_value_type(current)
            continue
        array = _TRAILING_ARRAY.match(current)
        if array:
            keys.append('uint256')
            current = array.group(1).strip()
            continue
        return keys, current


def _split_header(header: str) -> Tuple[List[str], Optional[str]]:
    """
    Split a function header (text after the parameter list) into its
    keywords and the raw returns list.

    Parenthesised modifier arguments and override lists are skipped.
    """
    words: List[str] = []
    returns = None
    i = 0
    while i < len(header):
        ch = header[i]
        if ch == '(':
            close = find_matching_close(header, i)
            if close == -1:
                break
            if words and words[-1] == 'returns' and returns is None:
                returns = header[i + 1:close]
            i = close + 1
            continue
        word = patterns.WORD.match(header, i)
        if word:
            words.append(word.group(0))
            i = word.end()
            continue
        i += 1
    return words, returns


def _header_end(text: str, start: int) -> int:
    """Index of the '{' or ';' ending a function header."""
    depth = 0
    i = start
    while i < len(text):
        ch = text[i]
        if ch in '"\'':
            i = skip_string(text, i)
            continue
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
        elif ch in '{;' and depth <= 0:
            return i
        i += 1
    return len(text)


def iter_function_headers(cleaned: str) -> Iterator[FunctionMatch]:
    """
    Yield every `function name(...)` header with its visibility and state
    mutability.

    Visibility defaults to public and mutability to nonpayable when the
    header does not state them.
    """
    for head in patterns.FUNCTION_HEAD.finditer(cleaned):
        open_index = head.end() - 1
        close_index = find_matching_close(cleaned, open_index)
        if close_index == -1:
            continue
        end = _header_end(cleaned, close_index + 1)
        words, returns = _split_header(cleaned[close_index + 1:end])

        visibility = next((w for w in words if w in patterns.VISIBILITY), 'public')
        mutability = next((w for w in words if w in patterns.STATE_MUTABILITY), 'nonpayable')

        yield FunctionMatch(
            name=head.group(1),
            params=cleaned[open_index + 1:close_index],
            returns=returns,
            index=head.start(),
            visibility=visibility,
            state_mutability=mutability,
        )


def _first_unresolved(params: List[Param]) -> Optional[str]:
    for param in params:
        names = param.descriptor.unresolved_names()
        if names:
            return names[0]
    return None


def parse_solidity_contract(
    source: str,
    options: Optional[ParseOptions] = None,
) -> ParseResult:
    """
    Parse Solidity source and extract its queryable items.

    Queryable items are public state variables (including mappings) and
    view/pure functions. Never raises for malformed input.
    """
    return DeclarationExtractor(options).extract(source)
