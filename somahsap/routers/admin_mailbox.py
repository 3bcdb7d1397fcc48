# somahsap/routers/admin_mailbox.py
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from somahsap.auth.deps import AdminIdentity, require_admin
from somahsap.dependencies import Services, get_services
from somahsap.routers.common import NO_STORE, read_json_body

router = APIRouter(prefix="/api/admin/mailbox", tags=["admin-mailbox"])


@router.get("")
def get_mailbox(
    admin: AdminIdentity = Depends(require_admin),
    services: Services = Depends(get_services),
):
    settings = services.mail_settings.read()
    return JSONResponse({"ok": True, "settings": settings.model_dump()}, headers=NO_STORE)


@router.put("")
async def put_mailbox(
    request: Request,
    admin: AdminIdentity = Depends(require_admin),
    services: Services = Depends(get_services),
):
    body = await read_json_body(request)
    await run_in_threadpool(services.mail_settings.write, body)
    return JSONResponse({"ok": True}, headers=NO_STORE)
