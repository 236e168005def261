"""API middleware — CORS."""

from zcash_analytics.api.middleware.cors import setup_cors

__all__ = ["setup_cors"]
