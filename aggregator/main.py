"""Aggregator entrypoint: collect section results and write reports."""

import argparse
import sys
from pathlib import Path

import structlog

from aggregator.reports import CorpusReport, ReportPaths, build_report, write_reports
from aggregator.state import AggregatorPhase, CorpusState
from pipeline.cli import positive_int
from pipeline.codec import MessageCodec
from pipeline.config import Settings, get_settings
from pipeline.exceptions import MalformedMessage, PipelineError
from pipeline.logging import setup_logging
from pipeline.queue import QueueService, get_queue_service

logger = structlog.get_logger(__name__)


class Aggregator:
    """Single-threaded consumer of the result queue."""

    def __init__(
        self,
        queue: QueueService,
        settings: Settings,
        top_n: int,
        report_paths: ReportPaths | None = None,
        codec: MessageCodec | None = None,
    ):
        self.queue = queue
        self.settings = settings
        self.top_n = top_n
        self.report_paths = report_paths or ReportPaths.from_settings(settings)
        self.codec = codec or MessageCodec(settings.wire_format)
        self.state = CorpusState()
        self.report: CorpusReport | None = None

    @property
    def phase(self) -> AggregatorPhase:
        """Current phase of the corpus state machine."""
        return self.state.phase

    def setup(self) -> None:
        """Declare the result queue."""
        self.queue.declare(self.settings.result_queue)

    def handle_message(self, body: bytes) -> bool:
        """
        Apply one result-queue message to the corpus state.

        Malformed messages are logged and dropped.

        Returns:
            Whether the corpus is complete
        """
        try:
            message = self.codec.decode_result_message(body)
        except MalformedMessage as e:
            logger.warning("malformed_message_dropped", error=e.message, **e.details)
            return self.state.is_complete

        if isinstance(message, int):
            return self.state.set_expected_count(message)
        return self.state.record(message)

    def collect(self) -> CorpusReport:
        """
        Consume results until the corpus is complete, then write the reports.

        There is no timeout: if the count announcement or a section result
        never arrives, this never returns.
        """
        if not self.state.is_complete:
            for body in self.queue.consume(
                self.settings.result_queue,
                timeout=self.settings.consume_timeout_seconds,
            ):
                if self.handle_message(body):
                    break
        return self.finish()

    def finish(self) -> CorpusReport:
        """Build and write the reports. Runs once; later calls return the same report."""
        if self.report is None:
            self.report = build_report(self.state, self.top_n)
            write_reports(self.report, self.report_paths)
            logger.info(
                "aggregation_finished",
                sections_processed=self.report.sections_processed,
                total_words=self.report.total_words,
            )
        return self.report


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Aggregate section results into reports")
    parser.add_argument("top_word_count", help="Number of words in the global top list")
    parser.add_argument(
        "--report-dir",
        type=Path,
        default=None,
        help="Directory for report files (defaults to REPORT_DIR)",
    )
    return parser.parse_args(argv)


def run_aggregator(argv: list[str] | None = None) -> int:
    """Run the aggregator until completion. Returns the process exit code."""
    args = parse_args(argv)

    try:
        top_n = positive_int(args.top_word_count, "top_word_count")
        settings = get_settings()
        setup_logging("aggregator")

        logger.info(
            "aggregator_starting",
            env=settings.env,
            top_n=top_n,
            queue=settings.result_queue,
        )

        queue = get_queue_service(settings)
        aggregator = Aggregator(
            queue,
            settings,
            top_n,
            report_paths=ReportPaths.from_settings(settings, args.report_dir),
        )
        try:
            aggregator.setup()
            aggregator.collect()
        finally:
            queue.close()
    except PipelineError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def main() -> None:
    sys.exit(run_aggregator())


if __name__ == "__main__":
    main()
