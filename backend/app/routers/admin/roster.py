"""
Educator roster import and export.
"""

from fastapi import APIRouter, Depends, Request, Response

from app.core.exceptions import RecordValidationError
from app.routers.auth import get_store
from app.schemas.progress import ImportReport
from app.services.roster import EXPORT_FILENAME, export_users_csv, import_users_csv
from app.services.store import DocumentStore


router = APIRouter()


@router.post("/import", response_model=ImportReport)
async def import_users(
    request: Request,
    store: DocumentStore = Depends(get_store)
) -> dict:
    """
    Import staff from a CSV body of ``id,name,pin,role`` lines.

    New ids are created, known ids get the new name, PIN and role while
    keeping their progress. Malformed lines are counted as skipped.
    """
    body = await request.body()
    try:
        text = body.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise RecordValidationError("Roster file must be UTF-8 text")

    created, updated, skipped = import_users_csv(store, text)
    return {
        "created": [user.id for user in created],
        "updated": [user.id for user in updated],
        "skipped": skipped,
    }


@router.get("/export")
async def export_users(
    store: DocumentStore = Depends(get_store)
) -> Response:
    """
    Download every staff record as CSV.
    """
    return Response(
        content=export_users_csv(store.users()),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )
