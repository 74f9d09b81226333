"""
Shared test setup.

The web app loads its settings at import time, so the environment it reads
must be in place before any test module imports it.
"""
import os
import tempfile

os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("SCHEMA_DATA_ROOT", tempfile.mkdtemp(prefix="schema-builder-tests-"))
