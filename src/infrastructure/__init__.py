"""Infrastructure layer - Adapters and external integrations.

This layer contains implementations of domain protocols (ports):
- Database repositories and the hash-chained audit log
- Redis-backed sliding window rate limiting
- Identity provider API client
- Credential primitives (bcrypt, signed session tokens, single-use tokens)

Structure:
- persistence/: Database adapters (PostgreSQL repositories)
- audit/: Hash-chained audit adapter
- rate_limit/: Sliding window limiter and Lua script
- providers/: Identity provider integration (user directory export)
- security/: Password hashing and token services
- email/: Notification delivery
- enrichers/: Device fingerprinting
- logging/: structlog adapters

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
