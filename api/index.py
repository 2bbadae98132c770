"""Vercel serverless entrypoint."""

from __future__ import annotations

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Data files are bundled next to the function, not in the working directory.
os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from kitchen_planner.api.asgi import app  # noqa: E402

__all__ = ["app"]
