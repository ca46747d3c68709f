"""
Type system module for the Solidity declaration scanner.

This module provides the custom type registry and elementary type helpers.
"""

from .registry import TypeRegistry
from .primitives import (
    canonical_primitive,
    is_elementary,
    CANONICAL_ALIASES,
)

__all__ = [
    'TypeRegistry',
    'canonical_primitive',
    'is_elementary',
    'CANONICAL_ALIASES',
]
