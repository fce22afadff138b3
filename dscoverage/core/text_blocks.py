"""Heuristic extraction of object-literal blocks from component source text.

No parser is involved: a labeled block such as ``variants: { ... }`` is located
with a regex and its extent is found by counting braces, skipping string
literals and comments. Unbalanced input yields the text up to the end.
"""

from __future__ import annotations

import re

__all__ = ["find_labeled_block", "top_level_keys", "extract_block_keys"]

_KEY_RE = re.compile(r"""(["']?)([\w$][\w$-]*)\1\s*:(?!:)""")
_OPENERS = "{[("
_CLOSERS = "}])"
_QUOTES = "\"'`"


def _skip_string(text: str, start: int) -> int:
    """Return the index just past the string literal opening at *start*."""
    quote = text[start]
    i = start + 1
    while i < len(text):
        char = text[i]
        if char == "\\":
            i += 2
            continue
        if char == quote:
            return i + 1
        i += 1
    return len(text)


def _skip_line_comment(text: str, start: int) -> int:
    end = text.find("\n", start)
    return len(text) if end == -1 else end


def _skip_block_comment(text: str, start: int) -> int:
    end = text.find("*/", start + 2)
    return len(text) if end == -1 else end + 2


def find_labeled_block(content: str, label: str) -> str | None:
    """Return the inner text of the first ``label: { ... }`` block, or ``None``."""
    opener = re.compile(rf"(?<![\w$.-]){re.escape(label)}\s*:\s*\{{")
    match = opener.search(content)
    if match is None:
        return None

    start = match.end()
    depth = 1
    i = start
    while i < len(content):
        char = content[i]
        if content.startswith("//", i):
            i = _skip_line_comment(content, i)
            continue
        if content.startswith("/*", i):
            i = _skip_block_comment(content, i)
            continue
        if char in _QUOTES:
            i = _skip_string(content, i)
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return content[start:i]
        i += 1
    return content[start:]


def top_level_keys(body: str) -> list[str]:
    """Property names declared at nesting level zero of an object body."""
    keys: list[str] = []
    depth = 0
    expect_key = True
    i = 0
    while i < len(body):
        char = body[i]
        if char.isspace():
            i += 1
            continue
        if body.startswith("//", i):
            i = _skip_line_comment(body, i)
            continue
        if body.startswith("/*", i):
            i = _skip_block_comment(body, i)
            continue
        if depth == 0 and expect_key:
            match = _KEY_RE.match(body, i)
            if match:
                if match.group(2) not in keys:
                    keys.append(match.group(2))
                expect_key = False
                i = match.end()
                continue
        if char in _QUOTES:
            i = _skip_string(body, i)
        elif char in _OPENERS:
            depth += 1
            i += 1
        elif char in _CLOSERS:
            depth = max(0, depth - 1)
            i += 1
        else:
            if depth == 0 and char == ",":
                expect_key = True
            elif depth == 0:
                expect_key = False
            i += 1
    return keys


def extract_block_keys(content: str, label: str) -> list[str]:
    body = find_labeled_block(content, label)
    if body is None:
        return []
    return top_level_keys(body)
