"""Security infrastructure adapters.

This package contains security-related infrastructure implementations:
- Password hashing (bcrypt, off the event loop)
- Signed session tokens (PyJWT, asymmetric keys)
- Single-use activation and reset tokens (keyed hashes)
"""

from src.infrastructure.security.bcrypt_password_service import BcryptPasswordService
from src.infrastructure.security.session_token_service import (
    JWTSessionTokenService,
    generate_rsa_key_pair,
)
from src.infrastructure.security.single_use_token_service import (
    SingleUseTokenService,
)

__all__ = [
    "BcryptPasswordService",
    "JWTSessionTokenService",
    "SingleUseTokenService",
    "generate_rsa_key_pair",
]
