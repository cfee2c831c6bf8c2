"""Document header parsing, metadata merging, and rendering.

A header is a leading ``---`` delimited YAML block. It is parsed with a
round-trip ruamel.yaml loader so user keys keep their order, quoting and
nesting; values are scalars, sequences or mappings. Headers that are not
valid YAML mappings fall back to plain ``key: value`` line scanning.

:func:`merge_metadata` only ever writes three keys (``type``, ``set``,
``tags``) and is idempotent: merging its own output with the same inputs
returns the same text.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from io import StringIO
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError
from ruamel.yaml.scalarstring import DoubleQuotedScalarString

# scalar | sequence | mapping, as loaded by ruamel's round-trip loader.
type HeaderValue = str | int | float | bool | None | list[HeaderValue] | dict[str, HeaderValue]

_DELIMITER = "---"


def _new_yaml() -> YAML:
    """Create a fresh round-trip YAML parser.

    ruamel's YAML object keeps emitter state between calls, so every
    parse or dump gets its own instance.
    """
    y = YAML()
    y.preserve_quotes = True
    y.default_flow_style = False
    y.width = 4096
    return y


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def split_header(content: str) -> tuple[str | None, str]:
    """Split *content* into ``(header_text, body)``.

    ``header_text`` is None when the document has no complete header
    block; *content* is then returned unchanged as the body. Line endings
    are normalized to ``\\n`` when a header is present.
    """
    normalized = content.replace("\r\n", "\n")
    lines = normalized.split("\n")
    if not lines or lines[0].strip() != _DELIMITER:
        return None, content

    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == _DELIMITER:
            header = "\n".join(lines[1:i])
            body = "\n".join(lines[i + 1 :])
            if body.startswith("\n"):
                body = body[1:]
            return header, body
    return None, content


def _scan_key_values(header: str) -> dict[str, HeaderValue]:
    """Fallback parser: top-level ``key: value`` lines, quotes stripped."""
    result: dict[str, HeaderValue] = {}
    for line in header.split("\n"):
        if not line or line[0].isspace() or line.startswith(("-", "#")):
            continue
        key, sep, value = line.partition(":")
        key = key.strip()
        if not sep or not key:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        result[key] = value
    return result


def parse_header(header: str) -> dict[str, HeaderValue]:
    """Parse header text into an ordered mapping."""
    try:
        loaded = _new_yaml().load(header)
    except YAMLError:
        return _scan_key_values(header)
    if loaded is None:
        return CommentedMap()
    if not isinstance(loaded, Mapping):
        return _scan_key_values(header)
    return loaded  # type: ignore[return-value]


def parse_frontmatter(content: str) -> tuple[dict[str, HeaderValue] | None, str]:
    """Return ``(header, body)``; header is None when the document has none."""
    header_text, body = split_header(content)
    if header_text is None:
        return None, body
    return parse_header(header_text), body


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


def normalize_tag_values(value: Any) -> list[str]:
    """Flatten a header ``tags`` value to a list of tag strings.

    Accepts a sequence, a mapping (its keys are the tags), or a
    comma-separated scalar.

    Examples:
        >>> normalize_tag_values(["a", "b"])
        ['a', 'b']
        >>> normalize_tag_values({"x/y": "x/y"})
        ['x/y']
        >>> normalize_tag_values("one, two")
        ['one', 'two']
    """
    if value is None:
        return []
    if isinstance(value, Mapping):
        items: Iterable[Any] = value.keys()
    elif isinstance(value, (list, tuple, set)):
        items = value
    else:
        items = str(value).split(",")
    tags: list[str] = []
    for item in items:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            tags.append(text)
    return tags


def tags_mapping(tags: Iterable[str]) -> CommentedMap:
    """Key-per-tag mapping (key equals value), sorted and de-duplicated."""
    mapping = CommentedMap()
    for tag in sorted(set(tags)):
        mapping[tag] = DoubleQuotedScalarString(tag)
    return mapping


# ---------------------------------------------------------------------------
# Rendering / merging
# ---------------------------------------------------------------------------


def render_frontmatter(header: Mapping[str, Any], body: str) -> str:
    """Render *header* and *body* as a document.

    A blank line always separates the closing delimiter from a non-empty
    body.
    """
    buf = StringIO()
    if header:
        _new_yaml().dump(header, buf)
    parts = [_DELIMITER, "\n", buf.getvalue(), _DELIMITER, "\n"]
    if body:
        parts.extend(["\n", body])
    return "".join(parts)


def merge_metadata(
    content: str,
    role: str,
    owning_container: str | None,
    tags: Iterable[str],
) -> str:
    """Merge computed metadata into a document's header.

    - ``type`` is always overwritten with *role*.
    - ``set`` is written only when *owning_container* is given.
    - ``tags`` becomes the sorted union of existing and new tags, rendered
      as a key-per-tag mapping; left untouched when the union is empty.

    Without a header one is synthesized holding only the computed fields.
    Output line endings are always ``\\n``.
    """
    header, body = parse_frontmatter(content.replace("\r\n", "\n"))
    new_tags = list(tags)

    if header is None:
        header = CommentedMap()
        header["type"] = role
        if owning_container:
            header["set"] = owning_container
        if new_tags:
            header["tags"] = tags_mapping(new_tags)
        return render_frontmatter(header, body)

    header["type"] = role
    if owning_container:
        header["set"] = owning_container
    merged = set(normalize_tag_values(header.get("tags"))) | set(new_tags)
    if merged:
        header["tags"] = tags_mapping(merged)
    return render_frontmatter(header, body)
