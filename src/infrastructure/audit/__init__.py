"""Audit infrastructure implementations.

Hash-chained audit log backed by the relational database.
"""

from src.infrastructure.audit.hash_chain_adapter import HashChainAuditAdapter

__all__ = ["HashChainAuditAdapter"]
