"""
Canonical function signatures and 4-byte selectors.

Works on fragments as well as whole contracts: a pasted list of
`function` definitions, a handful of state variable declarations, or bare
signatures such as `transfer(address,uint256)` one per line.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from eth_utils import keccak

from ..lexer import strip_comments, find_matching_close, patterns
from ..parser.mappings import is_mapping
from ..parser.parameters import parse_clause, split_params
from ..type_system import TypeRegistry, canonical_primitive, is_elementary
from ..type_system.primitives import normalize_spacing


class SignatureError(ValueError):
    """Raised when a definition cannot be rendered as a canonical signature."""


@dataclass
class SignatureEntry:
    """One definition and the signature and selector it renders to."""
    original: str
    signature: str = ''
    selector: str = ''
    error: str = ''

    @property
    def ok(self) -> bool:
        return not self.error

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'original': self.original,
            'signature': self.signature,
            'selector': self.selector,
        }
        if self.error:
            result['error'] = self.error
        return result


_SIGNATURE_HEAD = re.compile(r'^(?:function\s+)?([a-zA-Z_$][\w$]*)\s*\(')
_TUPLE_TAIL = re.compile(r'^((?:\s*\[\s*\d*\s*\])*)\s*(?:[a-zA-Z_$][\w$]*)?$')


def function_selector(signature: str) -> str:
    """
    Get the 4-byte selector of a canonical signature.

    Example:
        function_selector('transfer(address,uint256)')  # '0xa9059cbb'
    """
    return '0x' + keccak(text=signature)[:4].hex()


def canonical_param_type(clause: str) -> str:
    """
    Get the canonical type of a parameter clause, dropping its name.

    Tuples may be written `(t1,t2)` or `tuple(t1,t2)` and nest. Only
    elementary types are accepted; custom types must be substituted first.

    Raises:
        SignatureError: for mappings, unknown types or unbalanced tuples
    """
    text = normalize_spacing(patterns.STORAGE_LOCATION.sub(' ', clause))
    text = patterns.ADDRESS_PAYABLE.sub('address', text)
    if text.startswith('tuple') and text[5:].lstrip().startswith('('):
        text = text[5:].lstrip()

    if text.startswith('('):
        close = find_matching_close(text, 0)
        if close == -1:
            raise SignatureError(f'Unbalanced parentheses in "{clause.strip()}"')
        tail = _TUPLE_TAIL.match(text[close + 1:])
        if tail is None:
            raise SignatureError(f'Cannot parse parameter "{clause.strip()}"')
        components = [canonical_param_type(c) for c in split_params(text[1:close])]
        return '(' + ','.join(components) + ')' + re.sub(r'\s+', '', tail.group(1))

    if is_mapping(text):
        raise SignatureError('Mapping types cannot appear in a function signature')

    type_str = parse_clause(text).type
    base, dims = type_str, ''
    array = patterns.ARRAY_SUFFIX.match(type_str)
    if array and array.group(1).strip():
        base, dims = array.group(1).strip(), array.group(2).replace(' ', '')
    if not is_elementary(base):
        raise SignatureError(f'Unknown type "{base}"')
    return canonical_primitive(base) + dims


def parse_signature(definition: str, registry: Optional[TypeRegistry] = None) -> str:
    """
    Render a function definition or bare signature in canonical form.

    Custom types known to `registry` are replaced first, so structs become
    tuples and enums uint8. Anything after the parameter list (visibility,
    returns clause, body) is ignored.

    Example:
        parse_signature('function balanceOf(address account) external view')
        # 'balanceOf(address)'
    """
    text = normalize_spacing(definition).rstrip(';').strip()
    head = _SIGNATURE_HEAD.match(text)
    if head is None:
        raise SignatureError(f'Not a function signature: "{text}"')

    open_index = head.end() - 1
    close_index = find_matching_close(text, open_index)
    if close_index == -1:
        raise SignatureError(f'Unbalanced parentheses in "{text}"')

    params = text[open_index + 1:close_index]
    if registry is not None:
        params = registry.substitute(params)
    types = [canonical_param_type(p) for p in split_params(params)]
    return f'{head.group(1)}({",".join(types)})'


def getter_signature(name: str, keys: List[str], registry: Optional[TypeRegistry] = None) -> str:
    """Render the signature of a state variable getter from its key types."""
    if registry is not None:
        keys = [registry.substitute(k) for k in keys]
    return f'{name}({",".join(canonical_param_type(k) for k in keys)})'


def extract_function_definitions(cleaned: str) -> List[str]:
    """
    Get every `function name(...)` definition, up to its parameter list.

    Expects comment-stripped text.
    """
    definitions = []
    for head in patterns.FUNCTION_HEAD.finditer(cleaned):
        close_index = find_matching_close(cleaned, head.end() - 1)
        if close_index == -1:
            continue
        definitions.append(normalize_spacing(cleaned[head.start():close_index + 1]))
    return definitions


def _entry(original: str, render: Callable[[], str]) -> SignatureEntry:
    try:
        signature = render()
    except SignatureError as e:
        return SignatureEntry(original=original, error=str(e))
    return SignatureEntry(original=original, signature=signature,
                          selector=function_selector(signature))


def _getter_entries(cleaned: str, registry: TypeRegistry) -> List[SignatureEntry]:
    # Import here to avoid circular imports
    from ..parser.parser import iter_contract_statements, match_state_variable, getter_shape

    entries = []
    for index, statement in iter_contract_statements(cleaned):
        match = match_state_variable(statement, index)
        if match is None or match.visibility != 'public':
            continue
        keys, _ = getter_shape(match.type)
        entries.append(_entry(
            normalize_spacing(statement),
            lambda: getter_signature(match.name, keys, registry),
        ))
    return entries


def extract_signatures(
    source: str,
    registry: Optional[TypeRegistry] = None,
) -> List[SignatureEntry]:
    """
    List the signature and selector of every function and public getter.

    Functions of any visibility and mutability come first, then public state
    variable getters. When the source has neither, each non-empty line with
    a '(' is tried as a bare signature. Definitions that cannot be rendered
    yield an entry with `error` set.

    Types defined in `source` take precedence over those in `registry`.
    """
    cleaned = strip_comments(source)
    local = TypeRegistry.from_source(cleaned)
    if registry is not None:
        local.merge(registry)

    entries = [
        _entry(definition, lambda d=definition: parse_signature(d, local))
        for definition in extract_function_definitions(cleaned)
    ]
    entries.extend(_getter_entries(cleaned, local))
    if entries:
        return entries

    return [
        _entry(line, lambda line=line: parse_signature(line, local))
        for line in (raw.strip() for raw in cleaned.split('\n'))
        if line and '(' in line
    ]
