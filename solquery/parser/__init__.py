"""
Parser module for the Solidity declaration scanner.

This module provides the data model, the mapping and parameter clause
helpers and the declaration extractor.
"""

from .ast_nodes import (
    # Type descriptors
    TypeDescriptor,
    PrimitiveType,
    MappingType,
    ArrayType,
    Component,
    TupleType,
    UnresolvedType,
    # Declarations
    Param,
    Declaration,
    ParseOptions,
    ParseResult,
)
from .mappings import (
    is_mapping,
    extract_mapping_type,
    mapping_keys,
    mapping_value_type,
    final_value_type,
    parse_mapping_structure,
)
from .parameters import split_params, parse_clause, is_custom_type
from .parser import DeclarationExtractor, parse_solidity_contract

__all__ = [
    # Type descriptors
    'TypeDescriptor',
    'PrimitiveType',
    'MappingType',
    'ArrayType',
    'Component',
    'TupleType',
    'UnresolvedType',
    # Declarations
    'Param',
    'Declaration',
    'ParseOptions',
    'ParseResult',
    # Helpers
    'is_mapping',
    'extract_mapping_type',
    'mapping_keys',
    'mapping_value_type',
    'final_value_type',
    'parse_mapping_structure',
    'split_params',
    'parse_clause',
    'is_custom_type',
    # Extractor
    'DeclarationExtractor',
    'parse_solidity_contract',
]
