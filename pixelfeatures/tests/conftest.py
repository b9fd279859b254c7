"""Shared pytest configuration.

The app reads its settings once at import time, so the storage
directory and run parameters are pinned here before any test module
imports it.
"""

import os
import tempfile

os.environ.setdefault("PIXELFEATURES_STORAGE_DIR", tempfile.mkdtemp(prefix="pixelfeatures-test-"))
os.environ.setdefault("PIXELFEATURES_FEATURE_RADIUS", "2")
os.environ.setdefault("PIXELFEATURES_CHANNELS", '["red", "green", "blue"]')
