"""Pure security rules (no I/O)."""

from src.domain.security.suspicious_login import (
    LoginAssessment,
    LoginObservation,
    UsualHours,
    assess_login,
    origin_network,
)

__all__ = [
    "LoginAssessment",
    "LoginObservation",
    "UsualHours",
    "assess_login",
    "origin_network",
]
