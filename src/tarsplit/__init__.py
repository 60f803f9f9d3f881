"""tarsplit: repartition a tar archive into size-bounded archives.

Entry contents are never altered; every regular file of the source ends up
in exactly one output archive. See :mod:`tarsplit.api` for the programmatic
interface and :mod:`tarsplit.cli` for the command line.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
