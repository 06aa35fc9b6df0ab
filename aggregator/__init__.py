"""Aggregator role: merge section results into corpus reports."""

# Lazy imports to avoid requiring all dependencies at import time
# Use explicit imports when needed:
# from aggregator.state import CorpusState, AggregatorPhase
# from aggregator.reports import build_report, write_reports

__all__ = [
    # State
    "CorpusState",
    "AggregatorPhase",
    "SentimentSummary",
    "merge_top_words",
    # Reports
    "CorpusReport",
    "build_report",
    "write_reports",
]
