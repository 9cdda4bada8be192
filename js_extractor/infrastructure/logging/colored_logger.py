"""Colored pipeline logger — ANSI-colored console logging for script extraction.

Console counterpart of the per-job log: each extraction stage gets its own
color so interleaved jobs stay readable in the terminal.

Color scheme:
    🔵 Blue    — Page fetch
    🟡 Yellow  — Script discovery
    🟣 Magenta — Script downloads
    🟢 Green   — Artifacts / completion
    🔴 Red     — Errors
    ⚪ Gray    — Details / stats
"""

import logging
from typing import Any


# ── ANSI Color Codes ─────────────────────────────────────────────────

class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    GRAY = "\033[90m"


# ── Pipeline Stage Definitions ───────────────────────────────────────

class PipelineStage:
    """Extraction stages as (label, color, icon)."""

    PAGE = ("PAGE", _Colors.BLUE, "🌐")
    DISCOVERY = ("DISCOVER", _Colors.YELLOW, "🔎")
    DOWNLOAD = ("DOWNLOAD", _Colors.MAGENTA, "📥")
    ARTIFACTS = ("ARTIFACTS", _Colors.GREEN, "💾")
    ERROR = ("ERROR", _Colors.RED, "❌")
    COMPLETE = ("COMPLETE", _Colors.GREEN, "✅")


def _format_details(kwargs: dict[str, Any], color: str) -> str:
    details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
    return f" {color}({details}){_Colors.RESET}"


# ── PipelineLogger ───────────────────────────────────────────────────

class PipelineLogger:
    """Color-coded logger for the extraction pipeline.

    Usage:
        log = PipelineLogger("ExtractionService")
        log.step_start(PipelineStage.PAGE, "Fetching https://example.com")
        log.detail("status=200")
        log.step_complete(PipelineStage.PAGE, "Saved page.html")
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        if kwargs:
            formatted += _format_details(kwargs, _Colors.GRAY)
        self._logger.info(formatted)

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}"
        )
        if kwargs:
            formatted += _format_details(kwargs, _Colors.GRAY)
        self._logger.info(formatted)

    def step_error(self, stage: tuple[str, str, str], message: str, error: BaseException | None = None) -> None:
        """Log a stage failure in red; the exception type is appended when given."""
        label, _, _ = stage
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}❌ [{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted)

    def detail(self, message: str, **kwargs: Any) -> None:
        formatted = f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}"
        if kwargs:
            formatted += _format_details(kwargs, _Colors.DIM)
        self._logger.info(formatted)

    def separator(self, title: str = "") -> None:
        if title:
            self._logger.info(
                f"{_Colors.GRAY}{'─' * 10} {title} {'─' * max(50 - len(title), 4)}{_Colors.RESET}"
            )
        else:
            self._logger.info(f"{_Colors.GRAY}{'─' * 60}{_Colors.RESET}")

    def stats(self, **kwargs: Any) -> None:
        parts = [f"{k}: {v}" for k, v in kwargs.items()]
        self._logger.info(f"   {_Colors.GRAY}📈 {' | '.join(parts)}{_Colors.RESET}")
