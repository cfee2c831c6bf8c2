"""Tests for header parsing and metadata merging."""

from __future__ import annotations

from vaultport.domain.frontmatter import (
    merge_metadata,
    normalize_tag_values,
    parse_frontmatter,
    parse_header,
    render_frontmatter,
    split_header,
    tags_mapping,
)


class TestSplitHeader:
    def test_no_header(self) -> None:
        assert split_header("# Title\n") == (None, "# Title\n")

    def test_header_and_body(self) -> None:
        header, body = split_header("---\ntitle: A\n---\n\nBody\n")
        assert header == "title: A"
        assert body == "Body\n"

    def test_unterminated_header_is_body(self) -> None:
        content = "---\ntitle: A\nno closing\n"
        assert split_header(content) == (None, content)

    def test_crlf_normalized(self) -> None:
        header, body = split_header("---\r\ntitle: A\r\n---\r\nBody\r\n")
        assert header == "title: A"
        assert body == "Body\n"


class TestParseHeader:
    def test_yaml_mapping(self) -> None:
        header = parse_header("title: Hello\ncount: 3\nlist:\n  - a\n  - b")
        assert header["title"] == "Hello"
        assert header["count"] == 3
        assert list(header["list"]) == ["a", "b"]  # type: ignore[arg-type]

    def test_invalid_yaml_falls_back_to_lines(self) -> None:
        header = parse_header('title: "Quoted"\nbroken: [unclosed\n')
        assert header == {"title": "Quoted", "broken": "[unclosed"}

    def test_empty_header(self) -> None:
        assert dict(parse_header("")) == {}

    def test_parse_frontmatter_without_header(self) -> None:
        assert parse_frontmatter("plain") == (None, "plain")


class TestTags:
    def test_normalize_sequence_mapping_and_scalar(self) -> None:
        assert normalize_tag_values(["a", " b ", None, ""]) == ["a", "b"]
        assert normalize_tag_values({"x/y": "x/y"}) == ["x/y"]
        assert normalize_tag_values("one, two,") == ["one", "two"]
        assert normalize_tag_values(None) == []

    def test_tags_mapping_sorted_unique(self) -> None:
        mapping = tags_mapping(["b", "a", "b"])
        assert list(mapping.items()) == [("a", "a"), ("b", "b")]


class TestRender:
    def test_blank_line_before_body(self) -> None:
        assert render_frontmatter({"type": "Page"}, "Body\n") == "---\ntype: Page\n---\n\nBody\n"

    def test_empty_body(self) -> None:
        assert render_frontmatter({"type": "Page"}, "") == "---\ntype: Page\n---\n"


class TestMergeMetadata:
    def test_synthesizes_page_header(self) -> None:
        out = merge_metadata("Just text\n", "Page", None, [])
        assert out == "---\ntype: Page\n---\n\nJust text\n"

    def test_synthesizes_set_leaf_with_tags(self) -> None:
        out = merge_metadata("Body #x\n", "SetLeaf", "Notes", ["x"])
        assert out == '---\ntype: SetLeaf\nset: Notes\ntags:\n  x: "x"\n---\n\nBody #x\n'

    def test_type_overwritten_and_user_keys_kept(self) -> None:
        content = "---\ntitle: Hello\ntype: Note\naliases:\n  - h\n---\nBody\n"
        header, body = parse_frontmatter(merge_metadata(content, "Page", None, []))
        assert header is not None
        assert header["type"] == "Page"
        assert header["title"] == "Hello"
        assert list(header["aliases"]) == ["h"]  # type: ignore[arg-type]
        assert "set" not in header
        assert body == "Body\n"

    def test_tags_union_as_mapping(self) -> None:
        content = "---\ntags: [alpha, beta]\n---\nBody\n"
        merged = merge_metadata(content, "SetLeaf", "Notes", ["gamma", "alpha"])
        header, _ = parse_frontmatter(merged)
        assert header is not None
        assert list(header["tags"].keys()) == ["alpha", "beta", "gamma"]  # type: ignore[union-attr]
        assert header["set"] == "Notes"

    def test_comma_separated_tags(self) -> None:
        content = "---\ntags: one, two\n---\n"
        header, _ = parse_frontmatter(merge_metadata(content, "Page", None, []))
        assert header is not None
        assert dict(header["tags"]) == {"one": "one", "two": "two"}  # type: ignore[arg-type]

    def test_no_tags_key_without_tags(self) -> None:
        header, _ = parse_frontmatter(merge_metadata("---\ntitle: A\n---\n", "Page", None, []))
        assert header is not None
        assert "tags" not in header

    def test_idempotent(self) -> None:
        content = "---\ntitle: T\ntags:\n  - a\n---\n\nText #b\n"
        once = merge_metadata(content, "SetLeaf", "Notes", ["b"])
        twice = merge_metadata(once, "SetLeaf", "Notes", ["b"])
        assert once == twice

    def test_idempotent_without_header(self) -> None:
        once = merge_metadata("Text\n", "Page", None, [])
        assert merge_metadata(once, "Page", None, []) == once

    def test_idempotent_without_header_crlf(self) -> None:
        once = merge_metadata("Hello\r\nworld #x\r\n", "Page", None, ["x"])
        assert "\r" not in once
        assert once.endswith("\n\nHello\nworld #x\n")
        assert merge_metadata(once, "Page", None, ["x"]) == once
