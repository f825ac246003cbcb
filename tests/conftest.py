"""Test configuration shared by the whole suite."""

import os

# Must run before any src.user_api module loads its configuration
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("LOG_FILE", "")
os.environ.setdefault("USER_STORE_BACKEND", "memory")

from tests.fixtures import *  # noqa: E402,F401,F403
