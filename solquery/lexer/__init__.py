"""
Lexer module for the Solidity declaration scanner.

This module provides comment stripping, balanced-delimiter scanning and
the keyword/pattern tables shared by the parser.
"""

from .comments import strip_comments, skip_string, line_of
from .delimiters import (
    find_matching_close,
    extract_balanced,
    find_at_depth,
    split_top_level,
)
from . import patterns

__all__ = [
    'strip_comments',
    'skip_string',
    'line_of',
    'find_matching_close',
    'extract_balanced',
    'find_at_depth',
    'split_top_level',
    'patterns',
]
