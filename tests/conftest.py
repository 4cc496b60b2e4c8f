"""Root conftest — sets env vars BEFORE any noteref module is imported.

load_settings() reads NOTEREF_DIR and NOTEREF_WORKSPACE; point the first
at an empty temp dir and drop the second so a developer's own settings
never leak into tests.
"""

import os
import tempfile

# Force-set (not setdefault) to prevent real env vars from leaking into tests
os.environ["NOTEREF_DIR"] = tempfile.mkdtemp(prefix="noteref-test-")
os.environ.pop("NOTEREF_WORKSPACE", None)
