"""Test suite for the identity control plane.

Test structure follows the test pyramid:
- unit/: Unit tests - domain rules and handlers with mocked ports
- integration/: Integration tests - repositories on SQLite (aiosqlite),
  the rate limiter on fakeredis, the provider client on a mocked transport
- api/: API endpoint tests - HTTP surface with dependency overrides

No external services are needed: the database is an in-memory SQLite and
Redis is emulated by fakeredis with Lua support.
"""
