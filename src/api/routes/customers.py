"""Customer endpoints."""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_customers, require_collections
from src.application.dto.requests import CustomerRequest
from src.application.dto.responses import (
    CustomerListResponse,
    CustomerResponse,
    DeleteResponse,
    ErrorResponse,
)
from src.core.entities import Workspace
from src.core.services import CustomerManager

router = APIRouter(prefix="/api/customers", tags=["customers"])


@router.get("", response_model=CustomerListResponse)
async def list_customers(
    workspace: Workspace = Depends(require_collections("customers")),
    manager: CustomerManager = Depends(get_customers),
) -> CustomerListResponse:
    customers = manager.list_records(workspace)
    return CustomerListResponse(
        customers=[CustomerResponse.model_validate(c) for c in customers],
        total=len(customers),
    )


@router.post(
    "",
    response_model=CustomerResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_customer(
    request: CustomerRequest,
    workspace: Workspace = Depends(require_collections("customers")),
    manager: CustomerManager = Depends(get_customers),
) -> CustomerResponse:
    customer = await manager.add(workspace, request.to_entity())
    return CustomerResponse.model_validate(customer)


@router.put(
    "/{customer_id}",
    response_model=CustomerResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_customer(
    customer_id: str,
    request: CustomerRequest,
    workspace: Workspace = Depends(require_collections("customers")),
    manager: CustomerManager = Depends(get_customers),
) -> CustomerResponse:
    customer = await manager.update(workspace, request.to_entity(customer_id))
    return CustomerResponse.model_validate(customer)


@router.delete("/{customer_id}", response_model=DeleteResponse)
async def delete_customer(
    customer_id: str,
    workspace: Workspace = Depends(require_collections("customers")),
    manager: CustomerManager = Depends(get_customers),
) -> DeleteResponse:
    """Delete a customer. Invoices billed to them are left as they are."""
    deleted = await manager.delete(workspace, customer_id)
    return DeleteResponse(id=customer_id, deleted=deleted)
