"""Worker role: analyze sections pulled from the task queue."""

# Lazy imports to avoid requiring all dependencies at import time
# Use explicit imports when needed:
# from worker.main import SectionWorker
# from worker.analysis.analyzer import TextAnalyzer

__all__ = [
    "SectionWorker",
    "TextAnalyzer",
    "AnalyzerConfig",
]


from typing import Any


def __getattr__(name: str) -> Any:
    """Lazy import for worker submodules."""
    if name == "SectionWorker":
        from worker.main import SectionWorker

        return SectionWorker
    elif name in ("TextAnalyzer", "AnalyzerConfig"):
        from worker.analysis.analyzer import AnalyzerConfig, TextAnalyzer

        return locals()[name]
    raise AttributeError(f"module 'worker' has no attribute '{name}'")
