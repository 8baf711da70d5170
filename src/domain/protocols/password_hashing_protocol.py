"""Password hashing protocol for domain layer.

This protocol defines the interface for password hashing and verification.
Infrastructure layer provides the bcrypt implementation.

Architecture:
    - Domain defines protocol (port)
    - Infrastructure implements adapter (BcryptPasswordService)
    - No framework dependencies in domain

Methods are async because hashing is CPU-bound and runs in a worker thread,
keeping the event loop responsive during login bursts.
"""

from typing import Protocol


class PasswordHashingProtocol(Protocol):
    """Password hashing and verification interface.

    Usage:
        password_hash = await password_service.hash_password("SecurePass123!")
        ok = await password_service.verify_password("SecurePass123!", password_hash)

        # Unknown account: spend the same time as a real comparison
        await password_service.verify_dummy(submitted_password)
    """

    async def hash_password(self, password: str) -> str:
        """Hash a plaintext password (bcrypt format: $2b$12$...)."""
        ...

    async def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a plaintext password against a hash.

        Returns:
            True if password matches hash, False otherwise (including for a
            malformed hash).
        """
        ...

    async def verify_dummy(self, password: str) -> None:
        """Run a full comparison against a throwaway hash and discard it."""
        ...
