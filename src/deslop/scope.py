"""Locate the extent of brace- and indentation-delimited blocks.

The scanner is lexical only: it knows about comments and string literals so
that braces inside them are ignored, but it builds no syntax tree.
"""

from typing import Optional

from .models import ScopeBlock


SCAN_BUDGET = 5000

QUOTES = "'\"`"


def find_block_end(text: str, open_index: int, budget: int = SCAN_BUDGET) -> Optional[int]:
    """Return the offset of the brace closing the one at `open_index`.

    Line comments, block comments and string literals are skipped. Inside a
    template literal, each `${` opens an expression whose braces are counted
    on their own until the matching `}` returns to the string. Returns None
    when the block is unmatched, a comment or string is unterminated, or the
    scan runs past `budget` characters.
    """
    limit = min(len(text), open_index + 1 + budget)
    depth = 1
    # Brace depth of every enclosing code context; a template literal pushes
    # a new context for each `${` it opens.
    contexts: list[int] = []
    quote: Optional[str] = None
    i = open_index + 1

    while i < limit:
        char = text[i]

        if quote is not None:
            if char == "\\":
                i += 2
                continue
            if quote == "`" and char == "$" and i + 1 < limit and text[i + 1] == "{":
                contexts.append(depth)
                depth = 1
                quote = None
                i += 2
                continue
            if char == quote:
                quote = None
            elif char == "\n" and quote != "`":
                # Unterminated single-line string: resume as code.
                quote = None
            i += 1
            continue

        if char == "/" and i + 1 < limit:
            following = text[i + 1]
            if following == "/":
                newline = text.find("\n", i, limit)
                if newline == -1:
                    return None
                i = newline + 1
                continue
            if following == "*":
                close = text.find("*/", i + 2, limit)
                if close == -1:
                    return None
                i = close + 2
                continue

        if char in QUOTES:
            quote = char
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                if not contexts:
                    return i
                # End of a `${...}` expression: back inside the template.
                depth = contexts.pop()
                quote = "`"
        i += 1

    return None


def extract_block(text: str, open_index: int, budget: int = SCAN_BUDGET) -> ScopeBlock:
    end = find_block_end(text, open_index, budget)
    body = text[open_index + 1:end] if end is not None else ""
    return ScopeBlock(start=open_index, end=end, body=body)


def indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def find_indented_block_end(lines: list[str], header_index: int) -> int:
    """Index of the first line after the header that leaves its block.

    The block ends at the first non-blank line indented no deeper than the
    header; `len(lines)` when it runs to the end of the file.
    """
    header_indent = indent_of(lines[header_index])
    for index in range(header_index + 1, len(lines)):
        line = lines[index]
        if line.strip() and indent_of(line) <= header_indent:
            return index
    return len(lines)


def line_number_at(text: str, offset: int) -> int:
    """1-indexed line containing `offset`."""
    return text.count("\n", 0, offset) + 1


def count_non_blank_lines(text: str) -> int:
    return sum(1 for line in text.split("\n") if line.strip())
