"""Tests for the format_result dispatcher and OutputSettings."""

import json

from vaultport.output.formatters import OutputSettings, format_result
from vaultport.services.result import ServiceError, ServiceResult


def _ok(op: str = "convert", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "convert", msg: str = "fail") -> ServiceResult:
    return ServiceResult(ok=False, op=op, error=ServiceError(code="ERR", message=msg))


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False


class TestFormatResult:
    def test_json_mode(self) -> None:
        output = format_result(_ok(documents=3), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is True
        assert data["data"] == {"documents": 3}

    def test_json_wins_over_quiet(self) -> None:
        settings = OutputSettings(json_output=True, quiet=True)
        assert json.loads(format_result(_err(), settings=settings))["ok"] is False

    def test_quiet_convert_prints_archive_path(self) -> None:
        output = format_result(_ok(output_path="out.zip"), settings=OutputSettings(quiet=True))
        assert output == "out.zip"

    def test_quiet_error(self) -> None:
        output = format_result(_err(msg="boom"), settings=OutputSettings(quiet=True))
        assert output == "ERROR: convert - boom"

    def test_human_default(self) -> None:
        output = format_result(_ok(output_path="out.zip"))
        assert output.startswith("OK")
        assert "out.zip" in output
