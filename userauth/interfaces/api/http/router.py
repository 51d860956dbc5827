"""
Name: HTTP Router Aggregator

Responsibilities:
  - Compose the per-resource routers into the single router mounted at /api
  - Attach the shared RFC7807 error responses to the OpenAPI schema

Collaborators:
  - routers.users, routers.claims
  - crosscutting.error_responses.OPENAPI_ERROR_RESPONSES
"""

from fastapi import APIRouter

from userauth.crosscutting.error_responses import OPENAPI_ERROR_RESPONSES

from .routers import claims_router, users_router

router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)
router.include_router(users_router)
router.include_router(claims_router)

__all__ = ["router"]
