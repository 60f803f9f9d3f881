from __future__ import annotations

import pytest

from tarsplit.reporting import SilentReporter, set_reporter, set_verbosity


@pytest.fixture(autouse=True)
def _quiet_reporter():
    """Each test starts with a fresh silent reporter and verbosity 0.

    The reporter is process-global; CLI tests replace it with one bound to
    a captured stream that does not outlive the test.
    """
    rep = SilentReporter()
    set_reporter(rep)
    set_verbosity(0)
    yield rep
    set_reporter(SilentReporter())
    set_verbosity(0)
