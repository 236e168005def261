"""zcash-analytics — Zcash network analytics and viewing-key explorer backend."""

__version__ = "0.1.0"
