"""Corpus report assembly and output files."""

from dataclasses import dataclass, field
from pathlib import Path

import structlog

from aggregator.state import CorpusState, SentimentSummary
from pipeline.config import Settings

logger = structlog.get_logger(__name__)


@dataclass
class CorpusReport:
    """Everything written once the corpus is complete."""

    sections_processed: int
    total_words: int
    sentiment: SentimentSummary
    top_n: int
    top_words: list[tuple[str, int]] = field(default_factory=list)
    sentences: list[str] = field(default_factory=list)  # Longest first
    redacted_texts: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "sections_processed": self.sections_processed,
            "total_words": self.total_words,
            "sentiment": self.sentiment.to_dict(),
            "top_n": self.top_n,
            "top_words": [[word, count] for word, count in self.top_words],
            "sentence_count": len(self.sentences),
        }


@dataclass
class ReportPaths:
    """Locations of the generated report files."""

    report: Path
    sorted_text: Path
    processed_text: Path

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        report_dir: str | Path | None = None,
    ) -> "ReportPaths":
        """Resolve report file paths from settings."""
        directory = Path(report_dir if report_dir is not None else settings.report_dir)
        return cls(
            report=directory / settings.report_filename,
            sorted_text=directory / settings.sorted_text_filename,
            processed_text=directory / settings.processed_text_filename,
        )


def build_report(state: CorpusState, top_n: int) -> CorpusReport:
    """Materialize the corpus report from aggregator state."""
    return CorpusReport(
        sections_processed=state.received_count,
        total_words=state.total_words,
        sentiment=state.sentiment_summary(),
        top_n=top_n,
        top_words=state.global_top_words(top_n),
        sentences=state.sentence_ranking(),
        redacted_texts=state.redacted_texts(),
    )


def format_sentiment(summary: SentimentSummary) -> str:
    """Format the aggregated sentiment summary line."""
    return (
        f"Average: {summary.average:g} (Positive: {summary.positive}, "
        f"Negative: {summary.negative}, Neutral: {summary.neutral})"
    )


def render_text_report(report: CorpusReport) -> str:
    """Render the text summary report."""
    lines = [
        f"Sections processed: {report.sections_processed}",
        f"Word count: {report.total_words}",
        f"Sentiment result: {format_sentiment(report.sentiment)}",
        "",
        f"Top {report.top_n} words",
    ]
    lines.extend(f"{word}: {count}" for word, count in report.top_words)
    return "\n".join(lines) + "\n"


def _render_lines(lines: list[str]) -> str:
    return "".join(f"{line}\n" for line in lines)


def write_reports(report: CorpusReport, paths: ReportPaths) -> ReportPaths:
    """
    Write the summary, sentence ranking and redacted text files.

    Args:
        report: Materialized corpus report
        paths: Output locations; parent directories are created

    Returns:
        The paths written
    """
    for path in (paths.report, paths.sorted_text, paths.processed_text):
        path.parent.mkdir(parents=True, exist_ok=True)

    paths.report.write_text(render_text_report(report), encoding="utf-8")
    paths.sorted_text.write_text(_render_lines(report.sentences), encoding="utf-8")
    paths.processed_text.write_text(_render_lines(report.redacted_texts), encoding="utf-8")

    logger.info(
        "reports_written",
        report=str(paths.report),
        sorted_text=str(paths.sorted_text),
        processed_text=str(paths.processed_text),
    )
    return paths
