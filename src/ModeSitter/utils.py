import re

_FIRST_WORD = re.compile(r"^\s*(\w+)")


def leading_whitespace(line: str) -> str:
    """Get the run of whitespace at the start of a line"""
    stripped = line.lstrip()
    return line[: len(line) - len(stripped)]


def first_word(line: str) -> str:
    """Get the first word on a line, or an empty string"""
    m = _FIRST_WORD.match(line)
    return "" if m is None else m.group(1)


def dedent_column(column: int, indent_width: int) -> int:
    """Remove one level of indentation from a column, floored at zero"""
    return max(0, column - indent_width)


def spaces(count: int) -> str:
    return " " * max(0, count)


def len16(val: str) -> int:
    """Get the number of utf16 code points where surrogate pairs count as 2"""
    return len(val.encode("utf-16-le")) // 2


def utf16_to_char(text: str, units: int, start: int = 0) -> int:
    """Get the code point offset reached by walking utf16 units from start

    Returns:
        The code point offset into text, clamped to its length
    """
    pos = start
    while units > 0 and pos < len(text):
        units -= 2 if ord(text[pos]) > 0xFFFF else 1
        pos += 1
    return pos
