"""Recording of per-file conversion results."""

from formatrouter.results.sink import (
    CollectingResultSink,
    DatabaseResultSink,
    ResultSink,
)

__all__ = [
    "CollectingResultSink",
    "DatabaseResultSink",
    "ResultSink",
]
