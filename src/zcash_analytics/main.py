"""Application entry point for the Zcash analytics server."""

from __future__ import annotations

import uvicorn

from zcash_analytics.config.settings import ServerConfig


def main() -> None:
    """Start the Zcash analytics server."""
    server = ServerConfig()
    uvicorn.run(
        "zcash_analytics.api.app:create_app",
        factory=True,
        host=server.host,
        port=server.port,
        reload=server.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
