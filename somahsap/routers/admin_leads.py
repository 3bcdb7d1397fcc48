# somahsap/routers/admin_leads.py
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from somahsap.auth.deps import AdminIdentity, require_admin
from somahsap.core.logging_config import get_logger
from somahsap.dependencies import Services, get_services
from somahsap.routers.common import NO_STORE

router = APIRouter(prefix="/api/admin/leads", tags=["admin-leads"])
logger = get_logger(__name__)


@router.get("")
def list_leads(
    admin: AdminIdentity = Depends(require_admin),
    services: Services = Depends(get_services),
):
    leads = services.leads.list()
    return JSONResponse(
        {"ok": True, "leads": [lead.model_dump(exclude_none=True) for lead in leads]},
        headers=NO_STORE,
    )


@router.delete("")
def delete_lead(
    id: Optional[str] = None,
    admin: AdminIdentity = Depends(require_admin),
    services: Services = Depends(get_services),
):
    if not id:
        return JSONResponse({"ok": False, "error": "ID gerekli."}, status_code=400)

    # onbekend id is geen fout
    removed = services.leads.remove(id)
    logger.info("admin_lead_deleted", lead_id=id, found=removed)
    return JSONResponse({"ok": True}, headers=NO_STORE)
