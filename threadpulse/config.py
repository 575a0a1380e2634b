"""Environment configuration for thread analysis."""

import os

from dotenv import load_dotenv

load_dotenv()

# Analysis tunables file (falls back to threadpulse.yaml lookup when unset)
CONFIG_PATH = os.environ.get("THREADPULSE_CONFIG")

# Logging
LOG_LEVEL = os.environ.get("THREADPULSE_LOG_LEVEL", "INFO").upper()
LOG_FILE = os.environ.get("THREADPULSE_LOG_FILE")  # None -> stderr

# Concurrency
WORKERS = int(os.environ.get("THREADPULSE_WORKERS", "4"))  # Threads analyzed in parallel
