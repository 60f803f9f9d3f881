"""Error definitions for the split pipeline."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_OPEN = "E_OPEN"
E_READ = "E_READ"
E_WRITE = "E_WRITE"
E_ROUTING = "E_ROUTING"


@dataclass
class SplitError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class OpenError(SplitError):
    pass


class ReadError(SplitError):
    pass


class WriteError(SplitError):
    pass


class RoutingError(SplitError):
    pass


def open_error(message: str, **context: Any) -> OpenError:
    return OpenError(code=E_OPEN, message=message, context=context or None)


def read_error(message: str, **context: Any) -> ReadError:
    return ReadError(code=E_READ, message=message, context=context or None)


def write_error(message: str, **context: Any) -> WriteError:
    return WriteError(code=E_WRITE, message=message, context=context or None)


def routing_error(message: str, **context: Any) -> RoutingError:
    return RoutingError(
        code=E_ROUTING, message=message, context=context or None
    )


__all__ = [
    "SplitError",
    "OpenError",
    "ReadError",
    "WriteError",
    "RoutingError",
    "open_error",
    "read_error",
    "write_error",
    "routing_error",
    "E_OPEN",
    "E_READ",
    "E_WRITE",
    "E_ROUTING",
]
