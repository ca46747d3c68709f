"""
Utilities for decomposing Solidity mapping types.

Handles nested mappings, key extraction and value type extraction on the
raw type text. Resolution of the extracted type names is left to the
type registry.
"""

import re
from typing import List, NamedTuple, Optional

from ..lexer import find_matching_close, find_at_depth, patterns


class MappingSplit(NamedTuple):
    """A leading mapping type and whatever text follows it."""
    type: str
    remainder: str


class MappingStructure(NamedTuple):
    """Keys (outer to inner), final value type and array-ness of a mapping."""
    keys: List[str]
    value_type: str
    is_array: bool


# Named mapping members: mapping(address account => uint256 balance)
_NAMED_MEMBER = re.compile(r'^(.*\S)\s+[a-zA-Z_$][\w$]*$', re.DOTALL)


def is_mapping(type_str: str) -> bool:
    """True iff the trimmed string starts with 'mapping('."""
    return bool(patterns.MAPPING_START.match(type_str.strip()))


def _open_paren(type_str: str) -> int:
    return type_str.find('(')


def _drop_member_name(type_str: str) -> str:
    """Drop the optional name of a mapping key or value."""
    type_str = type_str.strip()
    if is_mapping(type_str):
        return type_str
    match = _NAMED_MEMBER.match(type_str)
    if match and not match.group(1).rstrip().endswith('=>'):
        return match.group(1).strip()
    return type_str


def extract_mapping_type(text: str) -> Optional[MappingSplit]:
    """
    Split a leading mapping type from the text after it.

    Example:
        extract_mapping_type('mapping(address => uint256) public balances')
        # MappingSplit(type='mapping(address => uint256)', remainder='public balances')
    """
    text = text.strip()
    if not is_mapping(text):
        return None
    close_index = find_matching_close(text, _open_paren(text), ignore_strings=False)
    if close_index == -1:
        return None
    return MappingSplit(text[:close_index + 1], text[close_index + 1:].strip())


def mapping_value_type(mapping_type: str) -> str:
    """
    Get the type on the right of the outer mapping's '=>'.

    A nested mapping value is returned unexpanded; use final_value_type()
    to get the innermost value. Non-mapping input is returned unchanged.
    """
    mapping_type = mapping_type.strip()
    if not is_mapping(mapping_type):
        return mapping_type

    arrow_index = find_at_depth(mapping_type, 0, '=>', 1)
    if arrow_index > 0:
        value_start = arrow_index + 2
        close_index = find_matching_close(
            mapping_type, _open_paren(mapping_type), ignore_strings=False
        )
        if close_index > value_start:
            return _drop_member_name(mapping_type[value_start:close_index])
    return mapping_type


def mapping_keys(mapping_type: str) -> List[str]:
    """
    Get every key type of a mapping, outermost first.

    Example:
        mapping_keys('mapping(address => mapping(uint256 => bool))')
        # ['address', 'uint256']
    """
    mapping_type = mapping_type.strip()
    if not is_mapping(mapping_type):
        return []

    keys: List[str] = []
    arrow_index = find_at_depth(mapping_type, 0, '=>', 1)
    if arrow_index > 0:
        key_start = _open_paren(mapping_type) + 1
        keys.append(_drop_member_name(mapping_type[key_start:arrow_index]))

        value = mapping_type[arrow_index + 2:].strip()
        if is_mapping(value):
            keys.extend(mapping_keys(value))
    return keys


def final_value_type(type_str: str) -> str:
    """Follow nested mappings down to the innermost value type."""
    type_str = type_str.strip()
    while is_mapping(type_str):
        value = mapping_value_type(type_str)
        if value == type_str:
            break
        type_str = value
    return type_str


def parse_mapping_structure(mapping_type: str) -> Optional[MappingStructure]:
    """
    Parse a mapping type into its keys and final value type.

    An array of mappings ('mapping(...)[]') is reported with is_array set
    and decomposed without the suffix.
    """
    if not is_mapping(mapping_type):
        return None
    clean = mapping_type.strip()
    is_array = clean.endswith('[]')
    if is_array:
        clean = clean[:-2].rstrip()
    return MappingStructure(mapping_keys(clean), final_value_type(clean), is_array)
