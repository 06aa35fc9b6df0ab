#!/usr/bin/env python
"""Run producer, workers and aggregator in one process.

Uses the in-memory queue service, so no Redis is needed. Handy for
checking reports on a document before running the distributed roles.

Usage:
    python scripts/run_local.py book.txt 5 10 --workers 4 --report-dir out/
"""

import argparse
import os
import sys
import threading

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from aggregator.main import Aggregator  # noqa: E402
from aggregator.reports import ReportPaths, render_text_report  # noqa: E402
from pipeline.cli import positive_int  # noqa: E402
from pipeline.config import get_settings  # noqa: E402
from pipeline.exceptions import PipelineError  # noqa: E402
from pipeline.logging import setup_logging  # noqa: E402
from pipeline.queue import MemoryQueueService  # noqa: E402
from pipeline.sectionizer import split  # noqa: E402
from producer.main import publish_sections, read_document  # noqa: E402
from worker.analysis.analyzer import AnalyzerConfig, TextAnalyzer  # noqa: E402
from worker.main import SectionWorker  # noqa: E402


def run_local(
    filename: str,
    sentences_per_section: int,
    top_k: int,
    workers: int = 2,
    report_dir: str | None = None,
) -> str:
    """Run the whole pipeline and return the text report."""
    settings = get_settings().model_copy(update={"consume_timeout_seconds": 0.2})
    queue = MemoryQueueService()

    sections = split(read_document(filename), sentences_per_section)
    publish_sections(queue, settings, sections)

    analyzer = TextAnalyzer(AnalyzerConfig.from_settings(settings, top_k))
    threads = [
        threading.Thread(
            target=SectionWorker(queue, analyzer, settings).run,
            kwargs={"stop_when_idle": True},
            name=f"section-worker-{i}",
        )
        for i in range(workers)
    ]
    for thread in threads:
        thread.start()

    aggregator = Aggregator(
        queue,
        settings,
        top_k,
        report_paths=ReportPaths.from_settings(settings, report_dir),
    )
    report = aggregator.collect()

    for thread in threads:
        thread.join()

    return render_text_report(report)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run the full pipeline in one process")
    parser.add_argument("filename", help="Source document")
    parser.add_argument("sentences_per_section", help="Sentences grouped into each section")
    parser.add_argument("top_word_count", help="Number of top words to report")
    parser.add_argument("--workers", type=int, default=2, help="Worker threads")
    parser.add_argument("--report-dir", default=None, help="Directory for report files")
    args = parser.parse_args()

    try:
        setup_logging("local")
        print(
            run_local(
                args.filename,
                positive_int(args.sentences_per_section, "sentences_per_section"),
                positive_int(args.top_word_count, "top_word_count"),
                workers=max(args.workers, 1),
                report_dir=args.report_dir,
            )
        )
    except PipelineError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)
