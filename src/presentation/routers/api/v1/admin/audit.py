"""Audit admin handlers.

Handlers:
    get_audit_verification - Walk the hash chain of the audit log
"""

from fastapi import Depends, Request
from fastapi.responses import JSONResponse

from src.application.queries.handlers.migration_query_handlers import (
    VerifyAuditChainHandler,
)
from src.application.queries.migration_queries import VerifyAuditChain
from src.core.container import get_verify_audit_chain_handler
from src.core.result import Failure, Success
from src.presentation.routers.api.middleware.auth_dependencies import AdminActor
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder
from src.schemas.migration_schemas import AuditVerificationResponse


async def get_audit_verification(
    request: Request,
    actor: AdminActor,
    handler: VerifyAuditChainHandler = Depends(get_verify_audit_chain_handler),
) -> AuditVerificationResponse | JSONResponse:
    """Verify the audit chain.

    GET /api/v1/admin/audit/verification -> 200 OK

    A broken chain returns 409 naming the first broken entry.
    """
    result = await handler.handle(VerifyAuditChain(actor=actor))

    match result:
        case Success(value=verification):
            return AuditVerificationResponse.model_validate(verification)
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
