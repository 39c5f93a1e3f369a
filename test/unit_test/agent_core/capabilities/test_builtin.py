from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from datapizza_ai.agent_core.capabilities.builtin import (
    CalculatorCapability,
    DateTimeCapability,
    FileReaderCapability,
    WebSearchCapability,
)


class TestCalculatorCapability:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "expression,expected",
        [
            ("2+2", "Result: 4"),
            ("15*3", "Result: 45"),
            ("(100-20)/4", "Result: 20"),
            ("7/2", "Result: 3.5"),
            ("7 // 2", "Result: 3"),
            ("2 ** 10", "Result: 1024"),
            ("-3 + 5", "Result: 2"),
            ("sqrt(16)", "Result: 4"),
            ("abs(-7) % 4", "Result: 3"),
        ],
    )
    async def test_evaluates_arithmetic(self, expression: str, expected: str) -> None:
        assert await CalculatorCapability().execute({"expression": expression}) == expected

    @pytest.mark.asyncio
    async def test_constants_are_available(self) -> None:
        result = await CalculatorCapability().execute({"expression": "pi"})
        assert result.startswith("Result: 3.14159")

    @pytest.mark.asyncio
    async def test_division_by_zero_is_reported(self) -> None:
        result = await CalculatorCapability().execute({"expression": "1/0"})
        assert result.startswith("Calculation error:")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "expression",
        ["__import__('os').system('ls')", "open('x')", "a + 1", "2 ** 100000", "2 +"],
    )
    async def test_rejects_anything_but_arithmetic(self, expression: str) -> None:
        result = await CalculatorCapability().execute({"expression": expression})
        assert result.startswith("Calculation error:")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("expression", ["(9**999)**999", "((9**999)**999)**3", "(2**1000)**11"])
    async def test_nested_powers_are_rejected_before_computing(self, expression: str) -> None:
        result = await CalculatorCapability().execute({"expression": expression})
        assert result == "Calculation error: result too large"

    @pytest.mark.asyncio
    async def test_results_too_long_to_render_are_reported(self) -> None:
        expression = " * ".join(["9**999"] * 5)
        result = await CalculatorCapability().execute({"expression": expression})
        assert result.startswith("Calculation error:")

    @pytest.mark.asyncio
    async def test_large_power_within_budget(self) -> None:
        result = await CalculatorCapability().execute({"expression": "2 ** 1000"})
        assert result == f"Result: {2 ** 1000}"

    @pytest.mark.asyncio
    async def test_missing_expression_raises(self) -> None:
        with pytest.raises(ValueError, match="expression"):
            await CalculatorCapability().execute({})


class TestDateTimeCapability:
    @staticmethod
    def _fixed() -> datetime:
        return datetime(2025, 10, 14, 10, 30, 0, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_current_uses_default_timezone(self) -> None:
        cap = DateTimeCapability(clock=self._fixed)
        # Europe/Rome is UTC+2 in October
        assert await cap.execute({"action": "current"}) == "2025-10-14 12:30:00"

    @pytest.mark.asyncio
    async def test_current_with_timezone_and_format(self) -> None:
        cap = DateTimeCapability(clock=self._fixed)
        result = await cap.execute({"action": "current", "timezone": "UTC", "format": "%Y/%m/%d %H:%M"})
        assert result == "2025/10/14 10:30"

    @pytest.mark.asyncio
    async def test_unknown_timezone(self) -> None:
        cap = DateTimeCapability(clock=self._fixed)
        assert await cap.execute({"action": "current", "timezone": "Mars/Olympus"}) == "Unknown timezone: Mars/Olympus"

    @pytest.mark.asyncio
    async def test_format_date(self) -> None:
        result = await DateTimeCapability().execute({"action": "format", "date": "2025-12-25", "format": "%d/%m/%Y"})
        assert result == "25/12/2025"

    @pytest.mark.asyncio
    async def test_format_requires_valid_date(self) -> None:
        cap = DateTimeCapability()
        assert await cap.execute({"action": "format"}) == "Parameter 'date' required"
        assert await cap.execute({"action": "format", "date": "soon"}) == "Invalid date format: soon"

    @pytest.mark.asyncio
    async def test_diff(self) -> None:
        result = await DateTimeCapability().execute(
            {"action": "diff", "date1": "2025-10-14", "date2": "2025-12-25T03:15:00"}
        )
        assert result == "72 days, 3 hours, 15 minutes"

    @pytest.mark.asyncio
    async def test_diff_is_absolute(self) -> None:
        result = await DateTimeCapability().execute({"action": "diff", "date1": "2025-12-25", "date2": "2025-12-24"})
        assert result == "1 days, 0 hours, 0 minutes"

    @pytest.mark.asyncio
    async def test_diff_errors(self) -> None:
        cap = DateTimeCapability()
        assert await cap.execute({"action": "diff", "date1": "2025-01-01"}) == "Parameters 'date1' and 'date2' required"
        assert await cap.execute({"action": "diff", "date1": "x", "date2": "y"}) == "Invalid date format"

    @pytest.mark.asyncio
    async def test_unsupported_action(self) -> None:
        assert await DateTimeCapability().execute({"action": "rewind"}) == "Unsupported action: rewind"


class TestFileReaderCapability:
    @pytest.mark.asyncio
    async def test_reads_file_from_root(self, tmp_path: Path) -> None:
        (tmp_path / "notes.txt").write_text("hello pipeline", encoding="utf-8")
        cap = FileReaderCapability(root=str(tmp_path))
        assert await cap.execute({"filename": "notes.txt"}) == "hello pipeline"

    @pytest.mark.asyncio
    async def test_path_segments_are_stripped(self, tmp_path: Path) -> None:
        (tmp_path / "notes.txt").write_text("inside", encoding="utf-8")
        cap = FileReaderCapability(root=str(tmp_path))
        assert await cap.execute({"filename": "../../etc/notes.txt"}) == "inside"

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path: Path) -> None:
        cap = FileReaderCapability(root=str(tmp_path))
        assert await cap.execute({"filename": "nope.txt"}) == "File not found: nope.txt"

    @pytest.mark.asyncio
    async def test_unsupported_extension(self, tmp_path: Path) -> None:
        (tmp_path / "image.png").write_bytes(b"\x89PNG")
        cap = FileReaderCapability(root=str(tmp_path))
        assert await cap.execute({"filename": "image.png"}) == "Unsupported file type: png"

    @pytest.mark.asyncio
    async def test_truncates_long_files(self, tmp_path: Path) -> None:
        (tmp_path / "long.md").write_text("x" * 20, encoding="utf-8")
        cap = FileReaderCapability(root=str(tmp_path))
        result = await cap.execute({"filename": "long.md", "max_length": 5})
        assert result.startswith("xxxxx\n\n[... truncated")
        assert "5 characters" in result

    @pytest.mark.asyncio
    async def test_missing_filename_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="filename"):
            await FileReaderCapability(root=str(tmp_path)).execute({})


class TestWebSearchCapability:
    @pytest.mark.asyncio
    async def test_keyword_results(self) -> None:
        result = await WebSearchCapability().execute({"query": "Learn Python fast", "max_results": 2})
        lines = result.splitlines()
        assert lines[0] == "Search results for 'Learn Python fast':"
        assert "1. Python Documentation (https://docs.python.org/3/)" in result
        assert "3." not in result

    @pytest.mark.asyncio
    async def test_generic_fallback(self) -> None:
        result = await WebSearchCapability().execute({"query": "pizza margherita"})
        assert "Search Result for: pizza margherita" in result

    @pytest.mark.asyncio
    async def test_missing_query_raises(self) -> None:
        with pytest.raises(ValueError, match="query"):
            await WebSearchCapability().execute({})
