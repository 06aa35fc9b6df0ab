"""Worker entrypoint: analyze sections from the task queue."""

import argparse
import sys

import structlog

from pipeline.cli import positive_int
from pipeline.codec import MessageCodec
from pipeline.config import Settings, get_settings
from pipeline.exceptions import MalformedMessage, PipelineError
from pipeline.logging import setup_logging
from pipeline.models import SectionResult
from pipeline.queue import QueueService, get_queue_service
from worker.analysis.analyzer import AnalyzerConfig, TextAnalyzer

logger = structlog.get_logger(__name__)


class SectionWorker:
    """Pulls one task at a time, analyzes it and publishes the result."""

    def __init__(
        self,
        queue: QueueService,
        analyzer: TextAnalyzer,
        settings: Settings,
        codec: MessageCodec | None = None,
    ):
        self.queue = queue
        self.analyzer = analyzer
        self.settings = settings
        self.codec = codec or MessageCodec(settings.wire_format)
        self.processed = 0

    def setup(self) -> None:
        """Declare the queues this worker reads from and writes to."""
        self.queue.declare(self.settings.task_queue)
        self.queue.declare(self.settings.result_queue)

    def handle_message(self, body: bytes) -> SectionResult | None:
        """
        Process one task message.

        Malformed tasks are logged and dropped.

        Returns:
            The published result, or None if the task was dropped
        """
        try:
            section = self.codec.decode_task(body)
        except MalformedMessage as e:
            logger.warning("malformed_task_dropped", error=e.message, **e.details)
            return None

        result = self.analyzer.analyze(section)
        self.queue.publish(self.settings.result_queue, self.codec.encode_result(result))
        self.processed += 1

        logger.info(
            "section_processed",
            section_id=result.section_id,
            word_count=result.word_count,
            sentiment=result.sentiment_label.value,
            score=round(result.sentiment_score, 4),
        )
        return result

    def run(self, max_tasks: int | None = None, stop_when_idle: bool = False) -> int:
        """
        Consume tasks until stopped.

        Args:
            max_tasks: Stop after this many messages (None for no limit)
            stop_when_idle: Stop when a receive times out instead of polling again

        Returns:
            Number of sections processed
        """
        received = 0
        while max_tasks is None or received < max_tasks:
            body = self.queue.receive(
                self.settings.task_queue,
                timeout=self.settings.consume_timeout_seconds,
            )
            if body is None:
                if stop_when_idle:
                    break
                continue
            received += 1
            self.handle_message(body)

        logger.info("worker_stopped", processed=self.processed)
        return self.processed


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Analyze sections from the task queue")
    parser.add_argument("top_word_count", help="Number of top words reported per section")
    parser.add_argument(
        "--max-tasks",
        type=int,
        default=None,
        help="Exit after processing this many tasks",
    )
    return parser.parse_args(argv)


def run_worker(argv: list[str] | None = None) -> int:
    """Start a worker. Returns the process exit code."""
    args = parse_args(argv)

    try:
        top_k = positive_int(args.top_word_count, "top_word_count")
        settings = get_settings()
        setup_logging("worker")

        logger.info(
            "worker_starting",
            env=settings.env,
            top_k=top_k,
            task_queue=settings.task_queue,
            result_queue=settings.result_queue,
        )

        queue = get_queue_service(settings)
        analyzer = TextAnalyzer(AnalyzerConfig.from_settings(settings, top_k))
        worker = SectionWorker(queue, analyzer, settings)
        try:
            worker.setup()
            worker.run(max_tasks=args.max_tasks)
        finally:
            queue.close()
    except PipelineError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("worker_interrupted")

    return 0


def main() -> None:
    sys.exit(run_worker())


if __name__ == "__main__":
    main()
