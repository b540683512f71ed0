"""
Educator routers for the microlearning backend.

- compliance: course completion figures across nurses
- users/import, users/export: CSV roster exchange
"""

from fastapi import APIRouter, Depends

from app.routers.auth import get_current_educator, get_store
from app.schemas import User
from app.schemas.progress import ComplianceReport
from app.services import progress
from app.services.store import DocumentStore

from .roster import router as roster_router


# Create admin router
admin_router = APIRouter()

admin_router.include_router(
    roster_router,
    prefix="/users",
    tags=["admin-users"],
    dependencies=[Depends(get_current_educator)]
)


@admin_router.get("/compliance", response_model=ComplianceReport)
async def get_compliance(
    educator: User = Depends(get_current_educator),
    store: DocumentStore = Depends(get_store)
) -> dict:
    """
    Share of nurse/course assignments completed, with a per-nurse
    breakdown.
    """
    return progress.compliance_report(store.users(), store.courses())


__all__ = ["admin_router"]
