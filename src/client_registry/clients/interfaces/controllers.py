"""
Clients Controllers (API Routes)
================================

FastAPI routes for client registration and listing.

Controllers are thin: they delegate to ClientService and turn repository
failures into a 500 response for the failing request only.
"""

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError

from client_registry.clients.application import (
    ClientService,
    ClientListResponse,
)
from client_registry.clients.infrastructure import SQLAlchemyClientRepository
from client_registry.core import RepositoryException
from client_registry.infrastructure.database import Database, get_database
from client_registry.shared.api.middleware import get_correlation_id
from client_registry.shared.infrastructure.logging import get_context_logger

router = APIRouter(tags=["Clients"])


# ========== Example payloads for Swagger ==========

SUMMARY_RESPONSE_EXAMPLE = "Clients are: 1. Alice; 2. Bob; "

CLIENT_LIST_RESPONSE_EXAMPLE = {
    "clients": [
        {"id": 1, "name": "Alice"},
        {"id": 2, "name": "Bob"}
    ],
    "total": 2
}

ERROR_RESPONSES = {
    500: {
        "description": "Database unavailable or query failed",
        "content": {
            "application/json": {
                "example": {"detail": "Couldn't list clients, please try again later"}
            }
        }
    }
}


# ========== Dependencies ==========

def get_client_service(database: Database = Depends(get_database)) -> ClientService:
    """Build the client service on top of the shared pool."""
    return ClientService(SQLAlchemyClientRepository(database))


def _failure(request: Request, action: str, exc: RepositoryException) -> HTTPException:
    logger = get_context_logger(__name__, get_correlation_id(request))
    logger.error(
        f"Couldn't {action}: {exc.message}",
        extra={"error_type": type(exc).__name__, **exc.details}
    )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Couldn't {action}, please try again later"
    )


# ========== Route Handlers ==========

@router.post(
    "/",
    response_model=str,
    summary="Register a client",
    description="Stores the submitted form field `name` and thanks the client.",
    responses={
        200: {
            "description": "Client stored",
            "content": {"application/json": {"example": "Thanks, Alice"}}
        },
        **ERROR_RESPONSES
    }
)
async def handle_form(
    request: Request,
    name: str = Form("", description="Client name; may be empty"),
    service: ClientService = Depends(get_client_service)
):
    # FastAPI maps an empty value to the default, so presence is checked on
    # the raw form: `name=` registers "", no `name` field at all is a 422
    form = await request.form()
    if "name" not in form:
        raise RequestValidationError([{
            "type": "missing",
            "loc": ("body", "name"),
            "msg": "Field required",
            "input": None,
        }])

    try:
        return await service.register(name)
    except RepositoryException as exc:
        raise _failure(request, "register client", exc) from exc


@router.get(
    "/clients",
    response_model=str,
    summary="List clients as a summary line",
    responses={
        200: {
            "description": "All clients in ascending id order",
            "content": {"application/json": {"example": SUMMARY_RESPONSE_EXAMPLE}}
        },
        **ERROR_RESPONSES
    }
)
async def list_clients(
    request: Request,
    service: ClientService = Depends(get_client_service)
):
    try:
        return await service.summarize()
    except RepositoryException as exc:
        raise _failure(request, "list clients", exc) from exc


@router.get(
    "/api/clients",
    response_model=ClientListResponse,
    summary="List clients as records",
    responses={
        200: {
            "description": "All clients in ascending id order",
            "content": {"application/json": {"example": CLIENT_LIST_RESPONSE_EXAMPLE}}
        },
        **ERROR_RESPONSES
    }
)
async def list_client_records(
    request: Request,
    service: ClientService = Depends(get_client_service)
):
    try:
        clients = await service.list_clients()
    except RepositoryException as exc:
        raise _failure(request, "list clients", exc) from exc
    return ClientListResponse.from_domain(clients)
