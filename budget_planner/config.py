"""Configuration management for the budget planner.

This module centralizes all configuration values including paths,
advisor settings, and environment variable overrides.  A ``.env`` file in
the working directory is honoured.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Base project root - assumes this file is in budget_planner/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("QAWAM_DATA_DIR", _PROJECT_ROOT / "data"))
REPORTS_DIR = DATA_DIR / "reports"

# Key-value store standing in for browser local storage
STORE_PATH = Path(
    os.getenv("QAWAM_STORE_PATH", DATA_DIR / "qawam_store.json")
).resolve()

# Advisor
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
ADVISOR_MODEL = os.getenv("QAWAM_ADVISOR_MODEL", "gemini-2.5-flash")
ADVISOR_ENDPOINT = os.getenv(
    "QAWAM_ADVISOR_ENDPOINT",
    "https://generativelanguage.googleapis.com/v1beta/models",
)
ADVISOR_TIMEOUT_CONNECT = int(os.getenv("QAWAM_ADVISOR_TIMEOUT_CONNECT", "10"))
ADVISOR_TIMEOUT_READ = int(os.getenv("QAWAM_ADVISOR_TIMEOUT", "60"))

# Interface language for canned texts and category labels ('ar' or 'en')
DEFAULT_LANGUAGE = os.getenv("QAWAM_LANG", "ar")

# Logging level for the app (DEBUG, INFO, WARNING, ...)
LOG_LEVEL = os.getenv("QAWAM_LOG_LEVEL", "INFO").upper()


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, REPORTS_DIR, STORE_PATH.parent]:
        directory.mkdir(parents=True, exist_ok=True)

