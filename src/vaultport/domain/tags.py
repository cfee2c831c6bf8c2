"""Inline tag extraction.

Tags are ``#name`` tokens made of Unicode letters, digits, ``_``, ``-`` and
``/`` (for nested categories). Literal spans (fenced blocks and inline code)
are cut out before scanning, so code never contributes tags.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# Fenced blocks first so their backticks are not read as inline spans.
_LITERAL_PATTERN = re.compile(r"```.*?```|~~~.*?~~~|`[^`]+`", re.DOTALL)

# Preceded by start/whitespace/punctuation, followed by the same or end.
_TAG_PATTERN = re.compile(r"(?:^|(?<=[\s\W]))#([\w\-/]+)(?=[\s\W]|$)", re.MULTILINE)


@dataclass(frozen=True)
class TextSpan:
    """A slice of document text, flagged when it is a literal (code) span."""

    text: str
    literal: bool


def partition_literal_spans(text: str) -> list[TextSpan]:
    """Split *text* into alternating literal and non-literal spans.

    Concatenating ``span.text`` over the result reproduces *text* exactly.
    """
    spans: list[TextSpan] = []
    last = 0
    for match in _LITERAL_PATTERN.finditer(text):
        if match.start() > last:
            spans.append(TextSpan(text[last : match.start()], literal=False))
        spans.append(TextSpan(match.group(0), literal=True))
        last = match.end()
    if last < len(text):
        spans.append(TextSpan(text[last:], literal=False))
    return spans


def extract_tags(text: str) -> list[str]:
    """Return the sorted, de-duplicated inline tags of *text*.

    Examples:
        >>> extract_tags("Ideas #project/alpha and #todo, not a#b")
        ['project/alpha', 'todo']
        >>> extract_tags("`#notatag` but #real/tag")
        ['real/tag']
    """
    # Literal spans become a single space: the surrounding text keeps its
    # word boundaries and nothing inside the span can match.
    searchable = "".join(
        " " if span.literal else span.text for span in partition_literal_spans(text)
    )
    found = {match.group(1) for match in _TAG_PATTERN.finditer(searchable)}
    return sorted(tag for tag in found if tag)
