"""Board CSV Routes — export, template download and import.

Invariants:
    - Downloads are text/csv with a Content-Disposition filename
    - Import takes the raw CSV document as the request body (UTF-8)
    - Import answers only aggregate counts: {"imported", "failed"}
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from tablero.core.errors import ParseError
from tablero.services.csv_transceiver import CsvExport, CsvTransceiver
from tablero.api.dependencies import get_csv_transceiver

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/boards", tags=["csv"])


def _download(export: CsvExport) -> Response:
    return Response(
        content=export.content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@router.get("/{board_id}/export.csv")
async def export_csv(
    board_id: str, transceiver: CsvTransceiver = Depends(get_csv_transceiver),
):
    return _download(await transceiver.export_cards(board_id))


@router.get("/{board_id}/template.csv")
async def export_template(
    board_id: str, transceiver: CsvTransceiver = Depends(get_csv_transceiver),
):
    """One example row per column, for users preparing an import."""
    return _download(await transceiver.export_template(board_id))


@router.post("/{board_id}/import")
async def import_csv(
    board_id: str,
    request: Request,
    transceiver: CsvTransceiver = Depends(get_csv_transceiver),
):
    raw = await request.body()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise ParseError("CSV document is not valid UTF-8")
    summary = await transceiver.import_cards(board_id, text)
    return summary.to_dict()
