"""Per-section text analysis package."""

# Lazy imports to avoid requiring all dependencies at import time
# Use explicit imports when needed:
# from worker.analysis.analyzer import TextAnalyzer
# from worker.analysis.lexicon import SentimentLexicon, DEFAULT_LEXICON

__all__ = [
    # Analyzer
    "TextAnalyzer",
    # Lexicon
    "SentimentLexicon",
    "DEFAULT_LEXICON",
    # Text functions
    "count_words",
    "top_words",
    "analyze_sentiment",
    "redact_names",
    "rank_sentences",
]
