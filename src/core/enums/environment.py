"""Runtime environments.

Used by Settings to pick environment-specific behaviour (log rendering,
cookie ``Secure`` flag, database pool sizing).
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
