"""Per-run log buffer.

Each slideshow run gets its own RunLog, passed explicitly through the call
chain and returned with the result, so concurrent runs never share lines.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path


logger = logging.getLogger("uvicorn.error")


class RunLog:
    """Collects the lines of one run and mirrors them to the server logger."""

    def __init__(self, label: str = "run") -> None:
        self.label = label
        self._lines: list[str] = []

    def log(self, message: str) -> None:
        self._append("INFO", message)
        logger.info("[%s] %s", self.label, message)

    def warning(self, message: str) -> None:
        self._append("WARN", message)
        logger.warning("[%s] %s", self.label, message)

    def _append(self, level: str, message: str) -> None:
        stamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
        self._lines.append(f"{stamp} {level} {message}")

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    def text(self) -> str:
        return "\n".join(self._lines) + ("\n" if self._lines else "")

    def write(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.text(), encoding="utf-8")
        return path

    def __len__(self) -> int:
        return len(self._lines)
