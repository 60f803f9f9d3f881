from .base import (
    Reporter,
    TaskStatus,
    get_reporter,
    set_reporter,
    task,
)
from .base import (
    set_verbosity,
    get_verbosity,
)
from .plain import PlainReporter
from .jsonl import JsonLinesReporter
from .silent import SilentReporter
from .rich_reporter import RichReporter

__all__ = [
    "Reporter",
    "TaskStatus",
    "get_reporter",
    "set_reporter",
    "task",
    "set_verbosity",
    "get_verbosity",
    "make_reporter",
    "PlainReporter",
    "JsonLinesReporter",
    "SilentReporter",
    "RichReporter",
]

REPORTER_CHOICES = ("plain", "rich", "json", "silent")


def make_reporter(name: str, *, isatty: bool, stream=None) -> Reporter:
    """Build a reporter backend by CLI name.

    ``rich`` needs a terminal for live progress and falls back to ``plain``
    when stderr is not one. ``stream`` redirects the ``json`` events, which
    default to stdout.
    """
    if name == "json":
        return JsonLinesReporter(stream=stream)
    if name == "silent":
        return SilentReporter()
    if name == "rich" and isatty:
        return RichReporter()
    return PlainReporter()
