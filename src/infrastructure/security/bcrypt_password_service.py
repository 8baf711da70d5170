"""Bcrypt password hashing service (adapter).

Implements PasswordHashingProtocol with bcrypt.

Architecture:
    - Implements PasswordHashingProtocol (no inheritance required)
    - Structural typing via Protocol
    - Injected via dependency container

Event Loop:
    bcrypt is CPU-bound (~250ms at cost 12), so every hash and comparison
    runs in a worker thread via asyncio.to_thread.

Timing:
    A real hash of a random secret is created at start-up with the configured
    cost. verify_dummy() compares against it so that logins for unknown or
    hashless accounts take as long as a real comparison.
"""

import asyncio
import secrets

import bcrypt


class BcryptPasswordService:
    """Bcrypt password hashing service.

    Usage:
        from src.core.container import get_password_service

        password_service = get_password_service()
        password_hash = await password_service.hash_password("SecurePass123!")
        is_valid = await password_service.verify_password(
            "SecurePass123!", password_hash
        )
    """

    def __init__(self, cost_factor: int = 12) -> None:
        """Initialize bcrypt password service.

        Args:
            cost_factor: Bcrypt cost factor (default: 12). Each +1 doubles
                the work. Values below 10 are only meant for tests.

        Raises:
            ValueError: If cost_factor is outside bcrypt's 4-31 range.
        """
        if not 4 <= cost_factor <= 31:
            msg = "Cost factor must be between 4 and 31"
            raise ValueError(msg)

        self._cost_factor = cost_factor
        self._dummy_hash = self._hash_sync(secrets.token_urlsafe(32))

    async def hash_password(self, password: str) -> str:
        """Hash a plaintext password.

        Returns:
            Hashed password string (bcrypt format: $2b$<cost>$...).
        """
        return await asyncio.to_thread(self._hash_sync, password)

    async def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a plaintext password against a bcrypt hash.

        Returns:
            True if password matches hash, False otherwise (also for a
            malformed hash).
        """
        return await asyncio.to_thread(self._verify_sync, password, password_hash)

    async def verify_dummy(self, password: str) -> None:
        """Compare against the start-up dummy hash and discard the answer."""
        await asyncio.to_thread(self._verify_sync, password, self._dummy_hash)

    def _hash_sync(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._cost_factor)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def _verify_sync(password: str, password_hash: str) -> bool:
        try:
            # bcrypt.checkpw does constant-time comparison
            return bcrypt.checkpw(
                password.encode("utf-8"), password_hash.encode("utf-8")
            )
        except (ValueError, AttributeError):
            return False
