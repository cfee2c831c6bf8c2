"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, vaultport.toml only contains
overrides. An absent file reproduces the stock conversion exactly.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from vaultport.domain.exclusion import (
    DEFAULT_ATTACHMENT_DIR_NAMES,
    DEFAULT_ATTACHMENT_DIR_PREFIXES,
    DEFAULT_DENY_NAMES,
    DEFAULT_MARKERS,
    DEFAULT_SKIP_DIRS,
    DOCUMENT_EXTENSIONS,
)


class ConvertConfig(BaseModel):
    """[convert] section."""

    model_config = {"frozen": True}

    index_name: str = "vault.set.md"
    index_title: str = "vault"
    compression_level: int = Field(default=9, ge=0, le=9)
    document_extensions: list[str] = Field(default_factory=lambda: sorted(DOCUMENT_EXTENSIONS))


class ResolverConfig(BaseModel):
    """[resolver] section."""

    model_config = {"frozen": True}

    attachment_dir_names: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ATTACHMENT_DIR_NAMES)
    )
    attachment_dir_prefixes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ATTACHMENT_DIR_PREFIXES)
    )
    shallow_depth: int = Field(default=3, ge=1)
    wide_depths: list[int] = Field(default_factory=lambda: [5, 10])
    attachment_scan_depth: int = Field(default=5, ge=1)


class OutlineConfig(BaseModel):
    """[outline] section."""

    model_config = {"frozen": True}

    base_level: int = Field(default=2, ge=1, le=6)
    max_heading_level: int = Field(default=6, ge=1, le=6)
    max_depth: int = Field(default=10, ge=1)


class ExclusionConfig(BaseModel):
    """[exclusion] section."""

    model_config = {"frozen": True}

    markers: list[str] = Field(default_factory=lambda: list(DEFAULT_MARKERS))
    skip_dirs: list[str] = Field(default_factory=lambda: sorted(DEFAULT_SKIP_DIRS))
    deny_names: list[str] = Field(default_factory=lambda: sorted(DEFAULT_DENY_NAMES))


class VaultportConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    convert: ConvertConfig = Field(default_factory=ConvertConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    outline: OutlineConfig = Field(default_factory=OutlineConfig)
    exclusion: ExclusionConfig = Field(default_factory=ExclusionConfig)
