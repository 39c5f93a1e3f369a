from __future__ import annotations

import ast
import math
import operator
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, List, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .base import Capability, ParameterSchema


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


_BIN_OPS: Dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}

_UNARY_OPS: Dict[type, Callable[[Any], Any]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}

_FUNCTIONS: Dict[str, Callable[..., Any]] = {
    "sqrt": math.sqrt,
    "pow": math.pow,
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "log": math.log,
    "exp": math.exp,
    "abs": abs,
    "round": round,
    "floor": math.floor,
    "ceil": math.ceil,
}

_CONSTANTS: Dict[str, float] = {"pi": math.pi, "e": math.e}

_MAX_EXPONENT = 1000
# ~3000 decimal digits, below the interpreter's int/str conversion limit
_MAX_RESULT_BITS = 10_000


def _check_power(base: Any, exponent: Any) -> None:
    if abs(exponent) > _MAX_EXPONENT:
        raise ValueError("exponent too large")
    if exponent > 0 and abs(base) > 1 and exponent * math.log2(abs(base)) > _MAX_RESULT_BITS:
        raise ValueError("result too large")


def _evaluate(node: ast.AST) -> Any:
    """Evaluate a whitelisted arithmetic AST node."""
    if isinstance(node, ast.Expression):
        return _evaluate(node.body)
    if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)) and not isinstance(node.value, bool):
        return node.value
    if isinstance(node, ast.BinOp) and type(node.op) in _BIN_OPS:
        left = _evaluate(node.left)
        right = _evaluate(node.right)
        if isinstance(node.op, ast.Pow):
            _check_power(left, right)
        return _BIN_OPS[type(node.op)](left, right)
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_evaluate(node.operand))
    if isinstance(node, ast.Name) and node.id in _CONSTANTS:
        return _CONSTANTS[node.id]
    if (
        isinstance(node, ast.Call)
        and isinstance(node.func, ast.Name)
        and node.func.id in _FUNCTIONS
        and not node.keywords
    ):
        return _FUNCTIONS[node.func.id](*[_evaluate(arg) for arg in node.args])
    raise ValueError(f"unsupported expression element: {type(node).__name__}")


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class CalculatorCapability(Capability):
    """
    Capability to evaluate arithmetic expressions.

    Language models are unreliable at arithmetic, so the loop delegates it here.
    The expression is parsed with ``ast`` and only numeric literals, arithmetic
    operators, a few ``math`` functions and the constants ``pi`` and ``e`` are
    evaluated; anything else is rejected.
    """

    name: str = "calculator"
    description: str = (
        "Performs mathematical calculations. Supports +, -, *, /, //, %, **, "
        "sqrt, pow, sin, cos, tan, log, exp, abs, round, floor, ceil, pi and e."
    )
    parameter_schema: ParameterSchema = field(
        default_factory=lambda: {
            "type": "object",
            "properties": {
                "expression": {
                    "type": "string",
                    "description": 'Mathematical expression to calculate (e.g. "2+2", "15*3", "(100-20)/4")',
                }
            },
            "required": ["expression"],
        }
    )

    async def execute(self, params: Dict[str, Any]) -> str:
        """
        Evaluate ``params["expression"]``.

        Returns:
            ``Result: <value>`` on success, ``Calculation error: <reason>`` when the
            expression cannot be evaluated.

        Raises:
            ValueError: If the ``expression`` parameter is missing.
        """
        expression = str(params.get("expression") or "").strip()
        if not expression:
            raise ValueError("Parameter 'expression' required")

        try:
            value = _evaluate(ast.parse(expression, mode="eval"))
            rendered = _format_number(value)
        except (SyntaxError, ValueError, TypeError, ZeroDivisionError, OverflowError) as e:
            return f"Calculation error: {e}"
        return f"Result: {rendered}"


@dataclass(frozen=True)
class DateTimeCapability(Capability):
    """
    Capability providing the current time, date formatting and date differences.

    Models have no notion of "now"; this tool supplies it. One tool covers
    several operations, selected by the ``action`` parameter.
    """

    name: str = "datetime"
    description: str = "Provides date and time information, calculates date differences, formats dates."
    parameter_schema: ParameterSchema = field(
        default_factory=lambda: {
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": ["current", "format", "diff"],
                    "description": "Operation to perform: current, format, or diff",
                },
                "format": {"type": "string", "description": 'strftime format string (e.g. "%Y-%m-%d %H:%M:%S")'},
                "timezone": {"type": "string", "description": 'IANA timezone (e.g. "Europe/Rome", "America/New_York")'},
                "date": {"type": "string", "description": "ISO 8601 date to format"},
                "date1": {"type": "string", "description": "First ISO 8601 date for difference calculation"},
                "date2": {"type": "string", "description": "Second ISO 8601 date for difference calculation"},
            },
            "required": ["action"],
        }
    )
    default_timezone: str = "Europe/Rome"
    default_format: str = "%Y-%m-%d %H:%M:%S"
    clock: Callable[[], datetime] = field(default=_utc_now, repr=False, compare=False)

    async def execute(self, params: Dict[str, Any]) -> str:
        action = str(params.get("action") or "current")
        if action == "current":
            return self._current(params)
        if action == "format":
            return self._format(params)
        if action == "diff":
            return self._diff(params)
        return f"Unsupported action: {action}"

    def _current(self, params: Dict[str, Any]) -> str:
        tz_name = str(params.get("timezone") or self.default_timezone)
        try:
            tz = ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError):
            return f"Unknown timezone: {tz_name}"
        return self.clock().astimezone(tz).strftime(str(params.get("format") or self.default_format))

    def _format(self, params: Dict[str, Any]) -> str:
        raw = params.get("date")
        if not raw:
            return "Parameter 'date' required"
        try:
            parsed = datetime.fromisoformat(str(raw))
        except ValueError:
            return f"Invalid date format: {raw}"
        return parsed.strftime(str(params.get("format") or self.default_format))

    def _diff(self, params: Dict[str, Any]) -> str:
        raw1, raw2 = params.get("date1"), params.get("date2")
        if not raw1 or not raw2:
            return "Parameters 'date1' and 'date2' required"
        try:
            first = datetime.fromisoformat(str(raw1))
            second = datetime.fromisoformat(str(raw2))
        except ValueError:
            return "Invalid date format"

        # naive dates are read as UTC so mixed inputs stay comparable
        if first.tzinfo is None:
            first = first.replace(tzinfo=timezone.utc)
        if second.tzinfo is None:
            second = second.replace(tzinfo=timezone.utc)

        seconds = int(abs((second - first).total_seconds()))
        days, rest = divmod(seconds, 86400)
        hours, rest = divmod(rest, 3600)
        minutes = rest // 60
        return f"{days} days, {hours} hours, {minutes} minutes"


@dataclass(frozen=True)
class FileReaderCapability(Capability):
    """
    Capability reading text files from a sandbox directory.

    Only the basename of the requested file is used, so ``../`` segments cannot
    leave ``root``. Only text extensions are served and the content is cut at
    ``max_length`` characters.
    """

    root: str = "data"
    name: str = "file_reader"
    description: str = "Reads content of text files (txt, md, json, csv, log, py)."
    parameter_schema: ParameterSchema = field(
        default_factory=lambda: {
            "type": "object",
            "properties": {
                "filename": {"type": "string", "description": 'Name of file to read (e.g. "config.json", "notes.txt")'},
                "max_length": {"type": "integer", "description": "Maximum characters to read (default: 5000)"},
            },
            "required": ["filename"],
        }
    )
    allowed_extensions: FrozenSet[str] = frozenset({"txt", "md", "json", "csv", "log", "py"})
    default_max_length: int = 5000

    async def execute(self, params: Dict[str, Any]) -> str:
        """
        Read a file below ``root``.

        Raises:
            ValueError: If the ``filename`` parameter is missing.
        """
        filename = str(params.get("filename") or "").strip()
        if not filename:
            raise ValueError("Parameter 'filename' required")

        path = Path(self.root) / Path(filename).name
        if not path.is_file():
            return f"File not found: {filename}"

        extension = path.suffix.lower().lstrip(".")
        if extension not in self.allowed_extensions:
            return f"Unsupported file type: {extension}"

        content = path.read_text(encoding="utf-8", errors="replace")
        max_length = int(params.get("max_length") or self.default_max_length)
        if len(content) > max_length:
            content = content[:max_length] + f"\n\n[... truncated, file is longer than {max_length} characters]"
        return content


_MOCK_SEARCH_INDEX: Dict[str, List[Tuple[str, str, str]]] = {
    "python": [
        ("Python Documentation", "https://docs.python.org/3/", "Official Python language and library reference"),
        ("Python Packaging User Guide", "https://packaging.python.org", "How to package and distribute projects"),
        ("PyPI", "https://pypi.org", "The Python Package Index"),
    ],
    "ai": [
        ("OpenAI Platform", "https://platform.openai.com", "Build AI applications with GPT models"),
        ("DataPizza AI Framework", "https://datapizza.tech", "Open source AI framework for developers"),
        ("Anthropic Claude", "https://anthropic.com", "Advanced AI assistant"),
    ],
    "raspberry": [
        ("Raspberry Pi Official", "https://raspberrypi.org", "Official Raspberry Pi website and projects"),
        ("Raspberry Pi Projects", "https://projects.raspberrypi.org", "Community project ideas and tutorials"),
        ("MagPi Magazine", "https://magpi.cc", "Free Raspberry Pi magazine"),
    ],
}


@dataclass(frozen=True)
class WebSearchCapability(Capability):
    """
    Offline web search returning canned results.

    Results are matched on keywords of the query, with a generic fallback, so
    agents can be developed and demonstrated without a search API key.
    """

    name: str = "web_search"
    description: str = "Searches the web and returns the top results (offline mock, no real API calls)."
    parameter_schema: ParameterSchema = field(
        default_factory=lambda: {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search query"},
                "max_results": {"type": "integer", "description": "Maximum number of results (default: 5)"},
            },
            "required": ["query"],
        }
    )

    async def execute(self, params: Dict[str, Any]) -> str:
        query = str(params.get("query") or params.get("q") or "").strip()
        if not query:
            raise ValueError("Parameter 'query' required")
        max_results = int(params.get("max_results") or 5)

        lowered = query.lower()
        results: List[Tuple[str, str, str]] = []
        for keyword, entries in _MOCK_SEARCH_INDEX.items():
            if keyword in lowered:
                results = entries
                break
        if not results:
            results = [
                (f"Search Result for: {query}", "https://example.com/search", "Mock result for educational purposes"),
                ("Related Topic", "https://example.com/related", "Additional mock result"),
            ]

        lines = [f"Search results for '{query}':"]
        for idx, (title, url, snippet) in enumerate(results[:max_results], start=1):
            lines.append(f"{idx}. {title} ({url})\n   {snippet}")
        return "\n".join(lines)
