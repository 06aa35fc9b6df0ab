"""Shared building blocks for the section analytics pipeline."""

# Lazy imports to avoid requiring all dependencies at import time
# Use explicit imports when needed:
# from pipeline.codec import MessageCodec
# from pipeline.sectionizer import split
# from pipeline.queue import QueueService, get_queue_service

__all__ = [
    # Models
    "Section",
    "SectionResult",
    "SentimentLabel",
    # Codec
    "MessageCodec",
    "WireFormat",
    # Sectionizer
    "split",
    "split_sentences",
    # Queue
    "QueueService",
    "get_queue_service",
]
