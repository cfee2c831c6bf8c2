"""Exclusion rules — deletion markers, non-content folders, file allow-lists.

Exclusion is decided per entry from its own name (or, for documents, its
own header). An ancestor folder's name never excludes a descendant by
substring; traversal simply never descends into an excluded folder.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import PurePath
from typing import Any

DEFAULT_MARKERS: tuple[str, ...] = ("deleted", "trash")

# Version-control metadata and editor/tool configuration folders.
DEFAULT_SKIP_DIRS = frozenset({".git", ".obsidian", ".trash", ".svn", ".hg"})

# Editor/OS metadata files that never belong in an export.
DEFAULT_DENY_NAMES = frozenset({".ds_store", "thumbs.db", "desktop.ini"})

DOCUMENT_EXTENSIONS = frozenset({".md", ".markdown"})

IMAGE_EXTENSIONS = frozenset(
    {".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp", ".bmp", ".ico", ".tiff", ".tif"}
    | {".heic", ".heif"}
)

ATTACHMENT_EXTENSIONS = frozenset(
    IMAGE_EXTENSIONS
    # office documents
    | {".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx", ".odt", ".ods", ".odp"}
    # audio
    | {".mp3", ".mp4", ".wav", ".ogg", ".flac", ".aac", ".m4a", ".wma"}
    # video
    | {".avi", ".mov", ".wmv", ".flv", ".mkv", ".webm"}
    # archives
    | {".zip", ".rar", ".7z", ".tar", ".gz"}
    # structured data and plain text
    | {".txt", ".csv", ".json", ".xml", ".yaml", ".yml", ".toml"}
    # source text sometimes kept as attachments
    | {".js", ".ts", ".py", ".java", ".cpp", ".c", ".h", ".html", ".css"}
    # e-books and rich text
    | {".rtf", ".epub", ".mobi", ".azw", ".fb2"}
)

# Extensions a spuriously appended ".md" may follow (see links.repair_suffix).
REPAIRABLE_EXTENSIONS = frozenset(
    IMAGE_EXTENSIONS
    | {".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx", ".odt", ".ods", ".odp"}
    | {".mp3", ".mp4", ".wav", ".ogg", ".flac", ".aac", ".m4a", ".wma"}
    | {".avi", ".mov", ".wmv", ".flv", ".mkv", ".webm"}
    | {".zip", ".rar", ".7z", ".tar", ".gz", ".txt", ".csv", ".json", ".xml"}
    | {".html", ".css", ".js"}
)

DEFAULT_ATTACHMENT_DIR_NAMES: tuple[str, ...] = ("attachments", "attachment")
DEFAULT_ATTACHMENT_DIR_PREFIXES: tuple[str, ...] = ("attachments_",)

_TRUTHY = frozenset({"true", "yes", "1"})
_DELETED_STATUSES = frozenset({"deleted", "trashed"})


def suffix_of(name: str) -> str:
    """Lower-cased extension of *name* (``""`` when there is none)."""
    return PurePath(name).suffix.lower()


def is_hidden(name: str) -> bool:
    return name.startswith(".") and name not in (".", "..")


def has_exclusion_marker(name: str, markers: Iterable[str] = DEFAULT_MARKERS) -> bool:
    """True when *name* is, starts with, or ends with an exclusion marker.

    Examples:
        >>> has_exclusion_marker("Trash")
        True
        >>> has_exclusion_marker("deleted_notes")
        True
        >>> has_exclusion_marker("old_trash")
        True
        >>> has_exclusion_marker("undeleted")
        False
    """
    lower = name.lower()
    for marker in markers:
        marker = marker.lower()
        if lower == marker or lower.startswith(f"{marker}_") or lower.endswith(f"_{marker}"):
            return True
    return False


def is_skip_dir(name: str, skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS) -> bool:
    """True for version-control and tool-configuration folders."""
    lower = name.lower()
    return any(lower == skip.lower() for skip in skip_dirs)


def declares_deleted(header: Mapping[str, Any]) -> bool:
    """True when a parsed document header marks the document as deleted.

    Recognized: ``deleted``/``trashed`` set to true/yes/1 and
    ``status`` set to ``deleted`` or ``trashed`` (all case-insensitive).
    """
    for key, value in header.items():
        lower_key = str(key).strip().lower()
        if lower_key in ("deleted", "trashed"):
            if value is True or str(value).strip().lower() in _TRUTHY:
                return True
        elif lower_key == "status":
            if str(value).strip().lower() in _DELETED_STATUSES:
                return True
    return False


def is_document(name: str, extensions: Iterable[str] = DOCUMENT_EXTENSIONS) -> bool:
    return suffix_of(name) in {ext.lower() for ext in extensions}


def should_include_file(
    name: str,
    *,
    deny_names: Iterable[str] = DEFAULT_DENY_NAMES,
    document_extensions: Iterable[str] = DOCUMENT_EXTENSIONS,
) -> bool:
    """Decide whether a (non-excluded) file belongs in the export.

    Documents and allow-listed attachments are always included. Unknown
    extensions are included too, unless the name is on the deny-list.
    """
    if is_document(name, document_extensions) or suffix_of(name) in ATTACHMENT_EXTENSIONS:
        return True
    lower = name.lower()
    if lower in {deny.lower() for deny in deny_names}:
        return False
    return ".obsidian" not in lower


def is_attachments_dir(
    name: str,
    names: Iterable[str] = DEFAULT_ATTACHMENT_DIR_NAMES,
    prefixes: Iterable[str] = DEFAULT_ATTACHMENT_DIR_PREFIXES,
) -> bool:
    """True for folders that hold attachments rather than content."""
    lower = name.lower()
    if lower in {n.lower() for n in names}:
        return True
    return any(lower.startswith(prefix.lower()) for prefix in prefixes)
