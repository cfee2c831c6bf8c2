"""Link and embed syntax — recognition, target parsing, suffix repair.

Pure functions, no filesystem access. The rewriter in
:mod:`vaultport.services.rewrite` feeds each match through the resolver.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import unquote

from vaultport.domain.exclusion import (
    ATTACHMENT_EXTENSIONS,
    DOCUMENT_EXTENSIONS,
    REPAIRABLE_EXTENSIONS,
    suffix_of,
)
from vaultport.domain.types import ReferenceKind

# One alternation so text produced for one construct is never re-read as
# another. Order matters: embeds before notes, images before links.
REFERENCE_PATTERN = re.compile(
    r"!\[\[(?P<embed>[^\[\]]+)\]\]"
    r"|\[\[(?P<note>[^\[\]]+)\]\]"
    r"|!\[(?P<image_alt>[^\]]*)\]\((?P<image>[^)]+)\)"
    r"|\[(?P<link_text>[^\]]*)\]\((?P<link>[^)]+)\)"
)

_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
_TITLE_SUFFIX = re.compile(r"""\s+(?:"[^"]*"|'[^']*')\s*$""")


@dataclass(frozen=True)
class ReferenceMatch:
    """One link/embed construct found in document text."""

    kind: ReferenceKind
    target: str  # raw target text (before the pipe for wiki syntax)
    display: str | None = None  # alias, alt text, or link text


@dataclass(frozen=True)
class WikiTarget:
    """A ``[[...]]`` body split into lookup key and alias."""

    key: str
    display: str | None = None


def parse_wiki_target(inner: str) -> WikiTarget:
    """Split ``Name|Alias`` — the key is always the trimmed text before the pipe.

    Examples:
        >>> parse_wiki_target("Draft Plan|Plan")
        WikiTarget(key='Draft Plan', display='Plan')
        >>> parse_wiki_target(" Solo ")
        WikiTarget(key='Solo', display=None)
    """
    key, sep, alias = inner.partition("|")
    display = alias.strip() if sep else None
    return WikiTarget(key=key.strip(), display=display or None)


def strip_anchor(key: str) -> str:
    """Drop a ``#heading`` or ``^block`` suffix from a wiki lookup key."""
    key = key.split("#", 1)[0]
    return key.split("^", 1)[0].strip()


def match_reference(match: re.Match[str]) -> ReferenceMatch:
    """Convert a :data:`REFERENCE_PATTERN` match into a :class:`ReferenceMatch`."""
    if match.group("embed") is not None:
        wiki = parse_wiki_target(match.group("embed"))
        return ReferenceMatch(ReferenceKind.EMBED, wiki.key, wiki.display)
    if match.group("note") is not None:
        wiki = parse_wiki_target(match.group("note"))
        return ReferenceMatch(ReferenceKind.NOTE, wiki.key, wiki.display)
    if match.group("image") is not None:
        return ReferenceMatch(ReferenceKind.IMAGE, match.group("image"), match.group("image_alt"))
    return ReferenceMatch(ReferenceKind.LINK, match.group("link"), match.group("link_text"))


def is_external(target: str) -> bool:
    """True for URLs, data URIs, protocol-relative and in-page anchors."""
    stripped = target.strip()
    return (
        not stripped
        or stripped.startswith(("#", "//"))
        or bool(_SCHEME.match(stripped))
    )


def parse_markdown_target(raw: str) -> str:
    """Extract the file path from a ``(...)`` markdown link target.

    Unwraps ``<...>``, drops a trailing quoted title, and URL-decodes.

    Examples:
        >>> parse_markdown_target("<My File.png>")
        'My File.png'
        >>> parse_markdown_target('img%20one.png "Caption"')
        'img one.png'
    """
    target = raw.strip()
    if target.startswith("<") and target.endswith(">"):
        target = target[1:-1]
    else:
        target = _TITLE_SUFFIX.sub("", target)
    return unquote(target.strip())


def repair_suffix(target: str) -> str:
    """Undo a spuriously appended document extension.

    ``chart.png.md`` becomes ``chart.png``; ``notes.md`` is unchanged. This
    is a heuristic: a real file named ``x.pdf.md`` is read as ``x.pdf``.
    """
    if not target.lower().endswith(".md"):
        return target
    stripped = target[:-3]
    if suffix_of(stripped) in REPAIRABLE_EXTENSIONS:
        return stripped
    return target


def has_known_extension(name: str) -> bool:
    suffix = suffix_of(name)
    return suffix in DOCUMENT_EXTENSIONS or suffix in ATTACHMENT_EXTENSIONS


def candidate_filename(key: str) -> str:
    """Relative file path a lookup key refers to.

    Keys with a recognized extension are used as-is; anything else is a
    note name and gets ``.md`` appended.
    """
    if has_known_extension(key):
        return key
    return f"{key}.md"
