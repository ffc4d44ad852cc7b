"""
Tastelog Configuration
Centralized settings for the application, overridable from the environment or .env
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Storage
DATA_DIR = os.getenv("TASTELOG_DATA_DIR", "data")

# Logging
LOG_LEVEL = os.getenv("TASTELOG_LOG_LEVEL", "INFO")

# Record store retries (transient failures only)
STORE_RETRY_ATTEMPTS = int(os.getenv("TASTELOG_STORE_RETRY_ATTEMPTS", "3"))
STORE_RETRY_MIN_WAIT = float(os.getenv("TASTELOG_STORE_RETRY_MIN_WAIT", "0.5"))
STORE_RETRY_MAX_WAIT = float(os.getenv("TASTELOG_STORE_RETRY_MAX_WAIT", "4.0"))
