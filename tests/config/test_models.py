"""Tests for config models."""

import pytest
from pydantic import ValidationError

from vaultport.config.models import ConvertConfig, OutlineConfig, VaultportConfig


class TestDefaults:
    def test_stock_values(self) -> None:
        cfg = VaultportConfig()
        assert cfg.convert.index_title == "vault"
        assert cfg.convert.compression_level == 9
        assert cfg.convert.document_extensions == [".markdown", ".md"]
        assert cfg.resolver.attachment_dir_names == ["attachments", "attachment"]
        assert cfg.resolver.shallow_depth == 3
        assert cfg.outline.base_level == 2
        assert cfg.exclusion.markers == ["deleted", "trash"]
        assert ".git" in cfg.exclusion.skip_dirs

    def test_frozen(self) -> None:
        cfg = VaultportConfig()
        with pytest.raises(ValidationError):
            cfg.convert = ConvertConfig()  # type: ignore[misc]


class TestValidation:
    def test_compression_level_bounds(self) -> None:
        with pytest.raises(ValidationError):
            ConvertConfig(compression_level=10)

    def test_heading_level_bounds(self) -> None:
        with pytest.raises(ValidationError):
            OutlineConfig(max_heading_level=7)
