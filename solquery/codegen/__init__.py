"""
Output module for the Solidity declaration scanner.

This module renders extracted declarations as ABI JSON, canonical
signatures and selectors, and collects the diagnostics of a run.
"""

from .abi import AbiItem, build_abi_item, abi_to_json
from .diagnostics import ExtractionDiagnostics, Diagnostic, DiagnosticSeverity
from .signatures import (
    SignatureEntry,
    SignatureError,
    function_selector,
    parse_signature,
    extract_signatures,
)

__all__ = [
    'AbiItem',
    'build_abi_item',
    'abi_to_json',
    'ExtractionDiagnostics',
    'Diagnostic',
    'DiagnosticSeverity',
    'SignatureEntry',
    'SignatureError',
    'function_selector',
    'parse_signature',
    'extract_signatures',
]
