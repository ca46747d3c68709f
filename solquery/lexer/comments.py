"""
Comment removal for Solidity source code.

Comments are erased while string literals are copied through untouched,
so a `//` inside "https://..." survives. Newlines inside comments are kept
so that line numbers computed on the stripped text still match the input.
"""


def skip_string(source: str, pos: int) -> int:
    """
    Return the index just past the string literal that starts at `pos`.

    The character at `pos` is taken as the opening quote. Backslash escapes
    are honoured. An unterminated literal runs to the end of the input.
    """
    quote = source[pos]
    i = pos + 1
    while i < len(source):
        ch = source[i]
        if ch == '\\' and i + 1 < len(source):
            i += 2
            continue
        i += 1
        if ch == quote:
            break
    return i


def strip_comments(source: str) -> str:
    """
    Remove single-line and multi-line comments from Solidity source.

    Args:
        source: The Solidity source code

    Returns:
        The source with comments removed and line structure preserved
    """
    result = []
    i = 0
    length = len(source)

    while i < length:
        ch = source[i]
        nxt = source[i + 1] if i + 1 < length else ''

        # String literals
        if ch in '"\'':
            end = skip_string(source, i)
            result.append(source[i:end])
            i = end
            continue

        # Single-line comment; the newline itself is kept
        if ch == '/' and nxt == '/':
            while i < length and source[i] != '\n':
                i += 1
            continue

        # Multi-line comment
        if ch == '/' and nxt == '*':
            i += 2
            while i < length:
                if source[i] == '*' and i + 1 < length and source[i + 1] == '/':
                    i += 2
                    break
                if source[i] == '\n':
                    result.append('\n')
                i += 1
            continue

        result.append(ch)
        i += 1

    return ''.join(result)


def line_of(source: str, index: int) -> int:
    """Get the 1-based line number of a character index."""
    return source.count('\n', 0, index) + 1
