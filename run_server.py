#!/usr/bin/env python3
"""FastAPI server entry point for the AI search service."""

import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()


def main() -> None:
    import argparse

    parser = argparse.ArgumentParser(description="AI Search server")
    parser.add_argument("--host", default=os.getenv("HOST", "127.0.0.1"), help="Host to bind to")
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")), help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload (development only)")
    args = parser.parse_args()

    # A single worker keeps one process-wide result cache and one set of pools
    uvicorn.run(
        "server.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=1,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
