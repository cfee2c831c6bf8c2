"""Tests for operation-specific Rich renderers."""

from vaultport.output.renderers import render_quiet, render_result
from vaultport.services.result import ServiceError, ServiceResult

# ── Helpers ───────────────────────────────────────────────────────────


def _ok(op: str, **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _convert_result(unresolved: int = 0) -> ServiceResult:
    return _ok(
        "convert",
        vault_path="/notes",
        output_path="/tmp/out.zip",
        containers=2,
        documents=14,
        attachments=3,
        placeholders=1,
        excluded=0,
        skipped=0,
        resolved=9,
        unresolved_count=unresolved,
        unresolved=[
            {"document": f"A/n{i}.md", "reference": f"Ghost{i}.md"} for i in range(unresolved)
        ],
        archive_bytes=123456,
    )


# ── Error rendering ──────────────────────────────────────────────────


class TestErrorRenderer:
    def test_basic_error(self) -> None:
        result = ServiceResult.failure("convert", "VAULT_NOT_FOUND", "Vault path does not exist")
        output = render_result(result)
        assert "ERROR" in output
        assert "convert" in output
        assert "[VAULT_NOT_FOUND] Vault path does not exist" in output

    def test_verbose_shows_detail(self) -> None:
        result = ServiceResult.failure("convert", "VAULT_NOT_FOUND", "Missing", vault_path="/x")
        assert "vault_path" in render_result(result, verbose=True)
        assert "vault_path" not in render_result(result)

    def test_no_error_object(self) -> None:
        assert "Unknown error" in render_result(ServiceResult(ok=False, op="convert"))


# ── Convert renderer ─────────────────────────────────────────────────


class TestConvertRenderer:
    def test_summary_table(self) -> None:
        output = render_result(_convert_result())
        assert "OK" in output
        assert "/tmp/out.zip" in output
        assert "documents" in output
        assert "14" in output
        assert "123,456" in output
        assert "unresolved references" not in output

    def test_unresolved_preview_truncated(self) -> None:
        output = render_result(_convert_result(unresolved=12))
        assert "A/n0.md: Ghost0.md" in output
        assert "Ghost11.md" not in output
        assert "2 more" in output

    def test_verbose_lists_all_unresolved(self) -> None:
        output = render_result(_convert_result(unresolved=12), verbose=True)
        assert "A/n11.md: Ghost11.md" in output


# ── Resolve renderer ─────────────────────────────────────────────────


class TestResolveRenderer:
    def test_fields(self) -> None:
        result = _ok(
            "resolve",
            document="A/B/x.md",
            reference="[[Draft Plan]]",
            role="SetLeaf",
            set="A",
            found=True,
            strategy="top_level",
            target="A/Draft Plan.md",
            rewritten="[Draft Plan](A/Draft_Plan.md)",
        )
        output = render_result(result)
        assert "SetLeaf" in output
        assert "top_level" in output
        assert "[Draft Plan](A/Draft_Plan.md)" in output


class TestGenericAndQuiet:
    def test_unknown_op_lists_data(self) -> None:
        output = render_result(_ok("other", answer=42))
        assert "answer: 42" in output

    def test_quiet_resolve(self) -> None:
        assert render_quiet(_ok("resolve", rewritten="[a](a.md)")) == "[a](a.md)"

    def test_quiet_other(self) -> None:
        assert render_quiet(_ok("other")) == "OK: other"
