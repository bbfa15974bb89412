"""Routes exporting and importing the full data set."""

from __future__ import annotations

from fastapi import APIRouter, Request, Response

from ...deps import TransferServiceDependency
from ...schemas import ExportDocument, ImportResult

router = APIRouter(tags=["transfer"])


@router.get(
    "/export",
    response_model=ExportDocument,
    summary="Download every task and category as a backup document",
)
async def export_data(service: TransferServiceDependency, response: Response) -> ExportDocument:
    document = await service.export_document()
    response.headers["Content-Disposition"] = f'attachment; filename="{service.export_filename()}"'
    return document


@router.post(
    "/import",
    response_model=ImportResult,
    summary="Import a backup document",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": {"type": "object"}}},
        }
    },
)
async def import_data(request: Request, service: TransferServiceDependency) -> ImportResult:
    """Import a document previously produced by ``GET /export``.

    The raw body is parsed here so malformed JSON surfaces as an
    ``invalid_format`` error rather than a request validation failure.
    """
    return await service.import_document(await request.body())
