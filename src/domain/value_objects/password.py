"""Password value object with complexity validation.

Applied whenever a local password is chosen (activation, reset). Login never
validates complexity: it only compares hashes.
"""

import re
from dataclasses import dataclass

MIN_PASSWORD_LENGTH = 8


@dataclass(frozen=True)
class Password:
    """Password value object with complexity validation.

    Password Requirements:
        - At least 8 characters
        - At least one uppercase letter
        - At least one lowercase letter
        - At least one digit
        - At least one special character

    Attributes:
        value: The password string (validated).

    Raises:
        ValueError: If password does not meet complexity requirements.

    Example:
        >>> Password("weak")
        Traceback (most recent call last):
        ...
        ValueError: Password must be at least 8 characters
    """

    value: str

    def __post_init__(self) -> None:
        """Validate password complexity after initialization.

        Raises:
            ValueError: If password does not meet requirements.
        """
        if len(self.value) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

        if not re.search(r"[A-Z]", self.value):
            raise ValueError("Password must contain uppercase letter")

        if not re.search(r"[a-z]", self.value):
            raise ValueError("Password must contain lowercase letter")

        if not re.search(r"\d", self.value):
            raise ValueError("Password must contain digit")

        if not re.search(r"[^A-Za-z0-9]", self.value):
            raise ValueError("Password must contain special character")

    def __str__(self) -> str:
        """Return masked password; plaintext never reaches logs."""
        return "*" * len(self.value)

    def __repr__(self) -> str:
        """Return masked representation."""
        return f"Password('{'*' * len(self.value)}')"
