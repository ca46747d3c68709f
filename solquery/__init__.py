"""
Solidity declaration and type resolution

This package extracts the queryable interface of Solidity source without a
compiler: public state variable getters and view/pure functions, with
their custom types resolved to ABI form.

Module Structure:
- lexer/: Comment stripping, balanced-delimiter scanning, keyword patterns
- parser/: Data model, mapping/clause helpers and the DeclarationExtractor
- type_system/: TypeRegistry for structs, enums, aliases and contracts
- codegen/: ABI JSON, signatures/selectors and diagnostics
- sol2abi.py: File/directory driver and command line entry point

Usage:
    from solquery import parse_solidity_contract

    result = parse_solidity_contract(source)
    for item in result.abi_items:
        print(item.to_dict())
"""

# The parser package must load first; it pulls in type_system and codegen
from .parser import (
    DeclarationExtractor,
    ParseOptions,
    ParseResult,
    Declaration,
    parse_solidity_contract,
)
from .type_system import TypeRegistry
from .codegen import (
    AbiItem,
    Diagnostic,
    SignatureEntry,
    extract_signatures,
    function_selector,
)
from .lexer import strip_comments

__all__ = [
    'DeclarationExtractor',
    'ParseOptions',
    'ParseResult',
    'Declaration',
    'parse_solidity_contract',
    'TypeRegistry',
    'AbiItem',
    'Diagnostic',
    'SignatureEntry',
    'extract_signatures',
    'function_selector',
    'strip_comments',
]
