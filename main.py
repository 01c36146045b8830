#!/usr/bin/env python3
"""
============================================================================
Customer Service v1.0.0
Service Launcher
============================================================================

Runs the FastAPI application under uvicorn.

ENVIRONMENT:
    HOST       Bind address (default 0.0.0.0)
    PORT       Listen port (default 8080)
    LOG_LEVEL  Log level (default INFO)

USAGE:
    python main.py
    python -m app.messaging.consumer    # notification consumer

============================================================================
"""

import os

import uvicorn
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()


def main():
    uvicorn.run(
        "app.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
        log_level=os.getenv("LOG_LEVEL", "INFO").lower(),
    )


if __name__ == "__main__":
    main()
