"""Purpose of a single-use token."""

from enum import Enum


class TokenPurpose(str, Enum):
    """What a single-use token authorizes."""

    ACTIVATION = "activation"
    PASSWORD_RESET = "password_reset"
