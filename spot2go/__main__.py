"""
API server runner
Run with: python -m spot2go
"""

import logging

import uvicorn

from .config import PORT

logger = logging.getLogger(__name__)


def main():
    logger.info(f"🚀 Starting Spot2Go API on port {PORT}...")
    uvicorn.run("spot2go.main:app", host="0.0.0.0", port=PORT)  # noqa: S104


if __name__ == "__main__":
    main()
