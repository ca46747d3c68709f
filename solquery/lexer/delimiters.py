"""
Balanced-delimiter scanning for Solidity source text.

These helpers locate matching closing delimiters and depth-scoped
separators without tokenizing. "Not found" is reported as -1 or None,
never raised.
"""

from typing import Optional, Tuple

from .comments import skip_string


def find_matching_close(
    text: str,
    open_index: int = 0,
    ignore_strings: bool = True,
) -> int:
    """
    Find the index of the ')' matching the '(' at or after `open_index`.

    Args:
        text: The text to search
        open_index: Where scanning starts (normally the opening paren)
        ignore_strings: Skip quoted regions so parens inside literals
            do not affect depth

    Returns:
        Index of the matching ')', or -1 if there is none

    Example:
        find_matching_close('mapping(address => uint256)', 7)  # 26
    """
    depth = 0
    i = open_index
    while i < len(text):
        ch = text[i]
        if ignore_strings and ch in '"\'':
            i = skip_string(text, i)
            continue
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def extract_balanced(
    text: str,
    open_index: int,
    open_char: str = '(',
    close_char: str = ')',
) -> Optional[Tuple[str, int]]:
    """
    Extract the content between balanced delimiters.

    Returns:
        (content, end_index) where end_index is the closing delimiter,
        or None when `open_index` is not `open_char` or nothing closes it
    """
    if open_index >= len(text) or text[open_index] != open_char:
        return None

    if open_char == '(' and close_char == ')':
        close_index = find_matching_close(text, open_index)
        if close_index == -1:
            return None
        return text[open_index + 1:close_index], close_index

    depth = 0
    for i in range(open_index, len(text)):
        if text[i] == open_char:
            depth += 1
        elif text[i] == close_char:
            depth -= 1
            if depth == 0:
                return text[open_index + 1:i], i
    return None


def find_at_depth(
    text: str,
    start_index: int,
    needle: str,
    target_depth: int = 0,
) -> int:
    """
    Find `needle` at a given parenthesis depth.

    Used to locate a mapping's '=>' at the level of the mapping being
    decomposed rather than inside a nested one. String literals are not
    special here.

    Returns:
        Index of the first occurrence at `target_depth`, or -1 when not
        found or when the parens become unbalanced (depth below zero)
    """
    depth = 0
    i = start_index
    while i < len(text):
        ch = text[i]
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
            if depth < 0:
                return -1
        if depth == target_depth and text.startswith(needle, i):
            return i
        i += 1
    return -1


def split_top_level(text: str, separator: str = ',') -> list:
    """
    Split on `separator` only where it is outside every paren pair.

    Empty segments are dropped and the rest are stripped.

    Example:
        split_top_level('mapping(address => uint256), uint256')
        # ['mapping(address => uint256)', 'uint256']
    """
    parts = []
    current = []
    depth = 0
    for ch in text:
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
        elif ch == separator and depth == 0:
            segment = ''.join(current).strip()
            if segment:
                parts.append(segment)
            current = []
            continue
        current.append(ch)
    segment = ''.join(current).strip()
    if segment:
        parts.append(segment)
    return parts
