"""
Text measurement for terminal layout.

Display width follows wcwidth (East Asian wide characters count 2,
combining and non-printable characters count 0). The ``_ansi`` variants
ignore SGR color sequences and OSC-8 hyperlinks while measuring but keep
them in the text.
"""

from __future__ import annotations

import re

import wcwidth

__all__ = [
    "ANSI_ESCAPE_RE",
    "char_width",
    "display_width",
    "display_width_ansi",
    "display_width_multiline",
    "expand_tabs",
    "line_count",
    "slice_ansi",
    "split_lines",
    "split_lines_ansi",
    "strip_ansi",
    "trim_line",
]

# CSI sequences (colors, cursor movement) and OSC strings such as OSC-8 links
ANSI_ESCAPE_RE = re.compile(
    r"\x1b\[[0-?]*[ -/]*[@-~]"
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"
)
SGR_RE = re.compile(r"\x1b\[([0-9;]*)m")
SGR_RESET = "\x1b[0m"


def char_width(ch: str) -> int:
    """Terminal columns taken by one character (0, 1 or 2)."""
    width = wcwidth.wcwidth(ch)
    # wcwidth reports -1 for control characters
    return width if width > 0 else 0


def display_width(text: str) -> int:
    """Sum of the terminal columns of every character in ``text``."""
    return sum(char_width(ch) for ch in text)


def strip_ansi(text: str) -> str:
    """Remove recognized escape sequences, leaving malformed ones as text."""
    if "\x1b" not in text:
        return text
    return ANSI_ESCAPE_RE.sub("", text)


def display_width_ansi(text: str) -> int:
    return display_width(strip_ansi(text))


def line_count(text: str) -> int:
    """Number of lines; an empty string is one line, a trailing newline adds one."""
    return text.count("\n") + 1


def split_lines(text: str) -> list[str]:
    """Split on '\\n', keeping the empty line after a trailing newline."""
    return text.split("\n")


def display_width_multiline(text: str, ansi: bool = False) -> int:
    """Width of the widest line."""
    measure = display_width_ansi if ansi else display_width
    return max(measure(line) for line in split_lines(text))


def _is_reset(params: str) -> bool:
    return params in ("", "0")


def split_lines_ansi(text: str) -> list[str]:
    """Split colored text into lines that are each self-contained.

    SGR styles still open at the end of a line are closed there and
    re-opened at the start of the next line, so text placed after a line
    (borders, padding) never inherits its color.
    """
    if "\x1b" not in text:
        return split_lines(text)

    result: list[str] = []
    active: list[str] = []
    for line in split_lines(text):
        opened = "".join(active)
        for match in SGR_RE.finditer(line):
            if _is_reset(match.group(1)):
                active.clear()
            else:
                active.append(match.group(0))
        closing = SGR_RESET if active else ""
        result.append(f"{opened}{line}{closing}")
    return result


def trim_line(line: str, ansi: bool = False) -> str:
    """Strip surrounding whitespace, keeping escape sequences in place."""
    if not ansi or "\x1b" not in line:
        return line.strip()

    tokens = _tokens(line)

    for i, (is_escape, chunk) in enumerate(tokens):
        if is_escape:
            continue
        stripped = chunk.lstrip()
        tokens[i] = (False, stripped)
        if stripped:
            break

    for i in range(len(tokens) - 1, -1, -1):
        is_escape, chunk = tokens[i]
        if is_escape:
            continue
        stripped = chunk.rstrip()
        tokens[i] = (False, stripped)
        if stripped:
            break

    return "".join(chunk for _, chunk in tokens)


def expand_tabs(text: str, tab_width: int) -> str:
    """Replace every tab with ``tab_width`` spaces."""
    if "\t" not in text:
        return text
    return text.replace("\t", " " * tab_width)


def _tokens(line: str) -> list[tuple[bool, str]]:
    """Split ``line`` into (is_escape, chunk) pieces."""
    tokens: list[tuple[bool, str]] = []
    last = 0
    for match in ANSI_ESCAPE_RE.finditer(line):
        if match.start() > last:
            tokens.append((False, line[last:match.start()]))
        tokens.append((True, match.group(0)))
        last = match.end()
    if last < len(line):
        tokens.append((False, line[last:]))
    return tokens


def _track_sgr(active: list[str], escape: str) -> None:
    match = SGR_RE.fullmatch(escape)
    if match is None:
        return
    if _is_reset(match.group(1)):
        active.clear()
    else:
        active.append(escape)


def slice_ansi(line: str, start: int, end: int) -> str:
    """The part of ``line`` between display columns ``start`` and ``end``.

    Styles opened before ``start`` are re-opened at the front of the result
    and styles still open at ``end`` are closed. A wide character cut by
    either boundary is replaced by spaces for the columns that fall inside.
    Zero-width characters stay with the character before them.
    """
    out: list[str] = []
    active: list[str] = []
    started = False
    col = 0
    for is_escape, chunk in _tokens(line):
        if is_escape:
            if not started:
                _track_sgr(active, chunk)
            elif col < end:
                out.append(chunk)
                _track_sgr(active, chunk)
            continue

        for ch in chunk:
            width = char_width(ch)
            if width == 0:
                if started and start < col <= end:
                    out.append(ch)
                continue
            if col >= end:
                break
            if col + width > start:
                if not started:
                    out.append("".join(active))
                    started = True
                if col < start or col + width > end:
                    out.append(" " * (min(col + width, end) - max(col, start)))
                else:
                    out.append(ch)
            col += width
        if col >= end and started:
            break

    if started and active:
        out.append(SGR_RESET)
    return "".join(out)
