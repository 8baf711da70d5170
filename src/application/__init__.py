"""Application layer - Use cases and orchestration.

Use cases follow the CQRS pattern:
- commands/: Login, logout, activation, password reset, import, cohort
  advance and rollback (write operations)
- queries/: Session validation, migration progress, rollback candidates
  and audit verification (read operations)
- services/: Orchestration shared by several handlers (migration,
  rollback, token redemption, suspicious login checks)

Business rules live in the domain layer; handlers sequence them and talk
to infrastructure only through domain protocols.
"""
