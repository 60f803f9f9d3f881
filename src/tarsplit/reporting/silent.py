from __future__ import annotations

from typing import Any, List, Tuple

from .base import Reporter, TaskStatus


class SilentReporter(Reporter):
    """Quiet mode. Nothing is printed; warnings and errors are kept on the
    instance so library callers can still look at them afterwards."""

    def __init__(self) -> None:
        self.messages: List[Tuple[str, str]] = []

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        pass

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        pass

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None:
        pass

    def status(self, message: str, **fields: Any) -> None:
        pass

    def warning(self, message: str, **fields: Any) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str, **fields: Any) -> None:
        self.messages.append(("error", message))

    def section(self, title: str) -> None:
        pass
