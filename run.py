"""
Entry point for the pixel feature service.

Running this script with ``python run.py`` starts the FastAPI server
defined in ``pixelfeatures/app/main.py``.  The repository root is put
on ``sys.path`` first so the package imports without installation.
"""

from __future__ import annotations

import sys
from pathlib import Path

import logging
import uvicorn

logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def main() -> None:
    """Run the Uvicorn server hosting the feature service."""
    repo_root = Path(__file__).resolve().parent
    if str(repo_root) not in sys.path:
        sys.path.append(str(repo_root))

    # Imported inside main() to avoid modifying sys.path at import time.
    from pixelfeatures.app.main import app  # type: ignore

    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
