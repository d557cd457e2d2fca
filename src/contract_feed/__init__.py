"""Government contract opportunity feed: ingest, normalize, store, query."""

__version__ = "0.1.0"
