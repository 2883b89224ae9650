"""Invoice endpoints."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response

from src.api.dependencies import (
    get_export_invoice_pdf_use_case,
    get_invoices,
    get_save_invoice_use_case,
    require_collections,
)
from src.application.dto.requests import InvoiceStatusRequest, SaveInvoiceRequest
from src.application.dto.responses import (
    ErrorResponse,
    InvoiceListResponse,
    InvoiceResponse,
    SaveInvoiceResponse,
)
from src.application.use_cases import ExportInvoicePdfUseCase, SaveInvoiceUseCase
from src.core.entities import Workspace
from src.core.services import InvoiceManager

router = APIRouter(prefix="/api/invoices", tags=["invoices"])

# saving an invoice reads the catalog and customers as well as the invoices
_composing = require_collections("products", "customers", "invoices")


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    workspace: Workspace = Depends(require_collections("invoices")),
    manager: InvoiceManager = Depends(get_invoices),
) -> InvoiceListResponse:
    """List invoices, newest date first."""
    invoices = manager.sorted_by_date(workspace)
    return InvoiceListResponse(
        invoices=[InvoiceResponse.model_validate(i) for i in invoices],
        total=len(invoices),
    )


@router.post(
    "",
    response_model=SaveInvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_invoice(
    request: SaveInvoiceRequest,
    workspace: Workspace = Depends(_composing),
    use_case: SaveInvoiceUseCase = Depends(get_save_invoice_use_case),
) -> SaveInvoiceResponse:
    """Compose and save a new pending invoice, optionally exporting a PDF."""
    result = await use_case.execute(workspace, request)
    return use_case.to_response(result)


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_invoice(
    invoice_id: str,
    workspace: Workspace = Depends(require_collections("invoices")),
    manager: InvoiceManager = Depends(get_invoices),
) -> InvoiceResponse:
    return InvoiceResponse.model_validate(manager.get(workspace, invoice_id))


@router.put(
    "/{invoice_id}",
    response_model=SaveInvoiceResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def update_invoice(
    invoice_id: str,
    request: SaveInvoiceRequest,
    workspace: Workspace = Depends(_composing),
    use_case: SaveInvoiceUseCase = Depends(get_save_invoice_use_case),
) -> SaveInvoiceResponse:
    """Edit an invoice. Number, date and status are kept."""
    result = await use_case.execute(workspace, request, invoice_id=invoice_id)
    return use_case.to_response(result)


@router.post(
    "/{invoice_id}/toggle-status",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def toggle_invoice_status(
    invoice_id: str,
    workspace: Workspace = Depends(require_collections("invoices")),
    manager: InvoiceManager = Depends(get_invoices),
) -> InvoiceResponse:
    """Paid becomes pending; anything else becomes paid."""
    invoice = await manager.toggle_status(workspace, invoice_id)
    return InvoiceResponse.model_validate(invoice)


@router.put(
    "/{invoice_id}/status",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def set_invoice_status(
    invoice_id: str,
    request: InvoiceStatusRequest,
    workspace: Workspace = Depends(require_collections("invoices")),
    manager: InvoiceManager = Depends(get_invoices),
) -> InvoiceResponse:
    invoice = await manager.set_status(workspace, invoice_id, request.status)
    return InvoiceResponse.model_validate(invoice)


@router.get(
    "/{invoice_id}/pdf",
    responses={
        404: {"model": ErrorResponse, "description": "Invoice not found"},
        500: {"model": ErrorResponse, "description": "Export failed"},
    },
)
async def download_invoice_pdf(
    invoice_id: str,
    workspace: Workspace = Depends(require_collections("invoices")),
    use_case: ExportInvoicePdfUseCase = Depends(get_export_invoice_pdf_use_case),
) -> Response:
    """Export the invoice as invoice_<number>.pdf and download it."""
    result = use_case.execute(workspace, invoice_id)
    return Response(
        content=result.pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{result.filename}"',
        },
    )
