"""Numeric limits and timeouts - no circular dependencies."""

from __future__ import annotations

# Event loop
EVENT_WAIT_TIMEOUT = 0.25
STATUS_MESSAGE_TTL = 5.0
SHUTDOWN_TIMEOUT = 2.0

# Remote service
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100
METADATA_PAGE_SIZE = 50
DEFAULT_REQUEST_TIMEOUT = 30.0

# View state
MAX_BACK_STACK = 2

MAX_LOG_MESSAGE_LENGTH = 4096
MAX_LOG_LINES = 2000
