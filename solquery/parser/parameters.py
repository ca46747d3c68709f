"""
Utilities for parsing Solidity function parameters and return values.
"""

import re
from typing import List, NamedTuple

from ..lexer import split_top_level, patterns
from .mappings import extract_mapping_type


class Clause(NamedTuple):
    """A parsed parameter or return clause; `name` may be empty."""
    type: str
    name: str


_TRAILING_STORAGE = re.compile(r'\s+(?:memory|storage|calldata)\s*$')


def split_params(params: str) -> List[str]:
    """
    Split a parameter or return list on top-level commas.

    Example:
        split_params('tuple(uint256, address), bool')
        # ['tuple(uint256, address)', 'bool']
    """
    return split_top_level(params, ',')


def _strip_storage(text: str) -> str:
    text = patterns.STORAGE_LOCATION.sub(' ', text)
    return re.sub(r'\s+', ' ', text).strip()


def parse_clause(clause: str) -> Clause:
    """
    Parse a parameter or return clause into type and name.

    Storage locations are removed wherever they appear. Input that fits no
    known shape comes back whole as the type with an empty name.

    Examples:
        parse_clause('uint256[] memory values')    # Clause('uint256[]', 'values')
        parse_clause('mapping(address => uint256) balances')
        # Clause('mapping(address => uint256)', 'balances')
    """
    text = patterns.ADDRESS_PAYABLE.sub('address', clause.strip())

    split = extract_mapping_type(text)
    if split is not None:
        remainder = _strip_storage(split.remainder)
        name_match = patterns.VAR_NAME.match(remainder)
        return Clause(split.type, name_match.group(1) if name_match else '')

    text = _strip_storage(text)
    # Allow spaces inside array brackets: "uint256[ 3 ]"
    text = re.sub(r'\s*\[\s*(\w*)\s*\]', r'[\1]', text)

    match = patterns.TYPE_WITH_NAME.match(text)
    if match:
        return Clause(match.group(1).strip(), match.group(2) or '')
    return Clause(text, '')


def normalize_type(type_str: str) -> str:
    """
    Remove a trailing storage location from a type.

    Example:
        normalize_type('uint256[] memory')  # 'uint256[]'
    """
    return _TRAILING_STORAGE.sub('', type_str).strip()


def is_custom_type(type_str: str) -> bool:
    """
    Check whether a type is a custom (non-builtin) type.

    Qualified names ('IPool.Slot0') are always custom; otherwise a
    capitalised name that is not an elementary type family is.
    """
    clean = normalize_type(type_str)
    if '.' in clean:
        return True
    return (
        len(clean) > 0
        and clean[0] == clean[0].upper()
        and not patterns.BUILTIN_TYPES.match(clean)
    )
