"""
Escape and strip-marker handling for ``${...}`` templates.

``$${`` and ``%%{`` produce a literal ``${`` / ``%{`` (shell snippets in
PostUp/PostDown rely on this), and ``~`` next to a tag delimiter strips
the adjacent whitespace. The source is rewritten into plain jinja2 syntax
before lexing, keeping line numbers unchanged.
"""

import re

from jinja2.ext import Extension

from ..config import BLOCK_START, BLOCK_END, COMMENT_START, COMMENT_END, VARIABLE_END

_RAW_OPEN = f"{BLOCK_START} raw {BLOCK_END}"
_RAW_CLOSE = f"{BLOCK_START} endraw {BLOCK_END}"

# Escaped opener first so "$${" is never read as "$" + "${"
_TAG_START = re.compile(r"(\$\$|%%)\{|[$%]\{")

_OPENERS = "{[("
_CLOSERS = "}])"


def _find_tag_end(source: str, start: int) -> int:
    """Index of the closing brace of a tag body starting at ``start``, or -1."""
    depth = 0
    quote = None
    i = start
    while i < len(source):
        c = source[i]
        if quote:
            if c == "\\":
                i += 1
            elif c == quote:
                quote = None
        elif c in "\"'":
            quote = c
        elif c in _OPENERS:
            depth += 1
        elif c in _CLOSERS:
            if c == VARIABLE_END and depth == 0:
                return i
            depth -= 1
        i += 1
    return -1


def translate(source: str) -> str:
    """
    Rewrite escapes and strip markers into jinja2 syntax.

    Args:
        source: Template text

    Returns:
        Equivalent jinja2 template text
    """
    out = []
    pos = 0
    while True:
        match = _TAG_START.search(source, pos)
        if match is None:
            out.append(source[pos:])
            break

        out.append(source[pos:match.start()])

        if match.group(1):
            # "$${" -> literal "${", "%%{" -> literal "%{"
            out.append(_RAW_OPEN + match.group(0)[1:] + _RAW_CLOSE)
            pos = match.end()
            continue

        if source.startswith(COMMENT_START, match.start()):
            # Comments are copied verbatim; their text is not tag syntax
            end = source.find(COMMENT_END, match.end())
            if end < 0:
                out.append(source[match.start():])
                break
            end += len(COMMENT_END)
            out.append(source[match.start():end])
            pos = end
            continue

        end = _find_tag_end(source, match.end())
        if end < 0:
            # Unterminated tag; left for the parser to report
            out.append(source[match.start():])
            break

        body = source[match.end():end]
        if body.startswith("~"):
            body = "-" + body[1:]
        if body.endswith("~"):
            body = body[:-1] + "-"
        out.append(match.group(0) + body + VARIABLE_END)
        pos = end + 1

    return "".join(out)


class TemplateEscapeExtension(Extension):
    """jinja2 extension applying :func:`translate` before lexing."""

    def preprocess(self, source, name, filename=None):
        return translate(source)
