"""Producer entrypoint: sectionize a document and publish the tasks."""

import argparse
import sys
from pathlib import Path

import structlog

from pipeline.cli import positive_int
from pipeline.codec import MessageCodec
from pipeline.config import Settings, get_settings
from pipeline.exceptions import ConfigError, PipelineError
from pipeline.logging import setup_logging
from pipeline.models import Section
from pipeline.queue import QueueService, get_queue_service
from pipeline.sectionizer import split

logger = structlog.get_logger(__name__)


def read_document(path: str | Path) -> str:
    """Read the source document as UTF-8 text."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot open file: {path} ({e.strerror})", field="filename") from e


def publish_sections(
    queue: QueueService,
    settings: Settings,
    sections: list[Section],
    codec: MessageCodec | None = None,
) -> int:
    """
    Publish every section as a task, then announce the section count.

    The count goes to the result queue so the aggregator knows when it
    has everything.

    Returns:
        Number of sections published
    """
    codec = codec or MessageCodec(settings.wire_format)

    queue.declare(settings.task_queue)
    queue.declare(settings.result_queue)

    for section in sections:
        queue.publish(settings.task_queue, codec.encode_task(section))
        logger.info("section_published", section_id=section.id, total=len(sections))

    queue.publish(settings.result_queue, codec.encode_total(len(sections)))
    logger.info("total_sections_announced", total=len(sections))
    return len(sections)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Split a document and publish section tasks")
    parser.add_argument("filename", help="Source document")
    parser.add_argument("sentences_per_section", help="Sentences grouped into each section")
    return parser.parse_args(argv)


def run_producer(argv: list[str] | None = None) -> int:
    """Publish a document's sections once. Returns the process exit code."""
    args = parse_args(argv)

    try:
        sentences_per_section = positive_int(args.sentences_per_section, "sentences_per_section")
        settings = get_settings()
        setup_logging("producer")

        sections = split(read_document(args.filename), sentences_per_section)
        logger.info(
            "document_sectionized",
            filename=args.filename,
            sections=len(sections),
            sentences_per_section=sentences_per_section,
        )

        queue = get_queue_service(settings)
        try:
            publish_sections(queue, settings, sections)
        finally:
            queue.close()
    except PipelineError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    return 0


def main() -> None:
    sys.exit(run_producer())


if __name__ == "__main__":
    main()
