# tests/conftest.py
"""
Global test bootstrap
- Pins the environment BEFORE the app is imported (settings read env at import)
- Keeps logs on stdout only (no file sink during tests)
- Pulls in the shared fixtures (fake Mux client, signing keys, app builders)
"""

from __future__ import annotations

import os

# ──────────────────────────────────────────────────────────────────────────────
# 🌱 Test env (set before importing anything under `app`)
# ──────────────────────────────────────────────────────────────────────────────
os.environ["LOG_TO_FILE"] = "0"
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ["MUX_STREAM_BASE_URL"] = "https://stream.mux.com"
os.environ["MUX_TOKEN_ID"] = "test-token-id"
os.environ["MUX_TOKEN_SECRET"] = "test-token-secret"
for _name in ("MUX_SIGNING_KEY_ID", "MUX_SIGNING_PRIVATE_KEY", "ADMIN_PASSWORD", "MUX_DEFAULT_POLICY"):
    os.environ.pop(_name, None)

# ──────────────────────────────────────────────────────────────────────────────
# 📦 Fixtures
# ──────────────────────────────────────────────────────────────────────────────
from tests.fixtures.mux import *      # noqa: F401,F403,E402
from tests.fixtures.signing import *  # noqa: F401,F403,E402
from tests.fixtures.app import *      # noqa: F401,F403,E402
