"""Single-use token generation protocol (activation and password reset)."""

from typing import Protocol


class SingleUseTokenServiceProtocol(Protocol):
    """Generates unguessable tokens and their keyed storage hashes.

    Usage:
        raw_token, token_hash = token_service.generate()
        # email raw_token, store token_hash
        token_hash = token_service.hash_token(submitted_token)
    """

    def generate(self) -> tuple[str, str]:
        """Create a fresh token.

        Returns:
            tuple[str, str]: (raw token to send, hash to store).
        """
        ...

    def hash_token(self, token: str) -> str:
        """Keyed hash used to look up a presented token."""
        ...
