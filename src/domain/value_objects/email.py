"""Email value object with validation.

Email addresses are the lookup key for accounts, so every entry point
normalizes them the same way: trimmed and lowercased.
"""

from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email


def normalize_email(raw: str) -> str:
    """Trim and lowercase an email address without validating it.

    Login uses this directly so malformed input still takes the generic
    invalid-credentials path.

    Args:
        raw: Email as typed by the user or returned by the provider.

    Returns:
        str: Normalized email.
    """
    return raw.strip().lower()


@dataclass(frozen=True)
class Email:
    """Email value object with format validation.

    Attributes:
        value: The email address string (validated, normalized).

    Raises:
        ValueError: If email format is invalid.

    Example:
        >>> str(Email("  User@Example.COM "))
        'user@example.com'
    """

    value: str

    def __post_init__(self) -> None:
        """Validate email format after initialization.

        Raises:
            ValueError: If email format is invalid.
        """
        normalized = normalize_email(self.value)
        try:
            validate_email(normalized, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email: {e}") from e
        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        """Return email address as string."""
        return self.value

    def __repr__(self) -> str:
        """Return repr for debugging."""
        return f"Email('{self.value}')"
