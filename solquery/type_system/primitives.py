"""
Elementary Solidity types and their canonical ABI spelling.

This module contains the tables and helpers for recognising elementary
types and rewriting shorthand spellings (uint, int, address payable) to
the form used in ABI JSON and canonical signatures.
"""

import re


# =============================================================================
# TYPE TABLES
# =============================================================================

# Shorthand -> canonical ABI spelling
CANONICAL_ALIASES = {
    'uint': 'uint256',
    'int': 'int256',
    'byte': 'bytes1',
    'fixed': 'fixed128x18',
    'ufixed': 'ufixed128x18',
    'address payable': 'address',
}

_ELEMENTARY = re.compile(
    r'^(?:'
    r'u?int(?:8|16|24|32|40|48|56|64|72|80|88|96|104|112|120|128|136|144|152'
    r'|160|168|176|184|192|200|208|216|224|232|240|248|256)?'
    r'|bytes(?:[1-9]|[12][0-9]|3[0-2])?'
    r'|u?fixed(?:\d+x\d+)?'
    r'|address|bool|string|byte|function'
    r')$'
)


# =============================================================================
# HELPERS
# =============================================================================

def is_elementary(type_name: str) -> bool:
    """Check whether a type name is an elementary Solidity type."""
    return bool(_ELEMENTARY.match(normalize_spacing(type_name))) or \
        normalize_spacing(type_name) == 'address payable'


def normalize_spacing(type_name: str) -> str:
    """Collapse whitespace runs and trim."""
    return re.sub(r'\s+', ' ', type_name).strip()


def canonical_primitive(type_name: str) -> str:
    """
    Get the canonical ABI spelling of an elementary type.

    Args:
        type_name: The Solidity type name (e.g., 'uint', 'bytes32')

    Returns:
        The canonical name ('uint256' for 'uint'); unknown names unchanged
    """
    name = normalize_spacing(type_name)
    return CANONICAL_ALIASES.get(name, name)
