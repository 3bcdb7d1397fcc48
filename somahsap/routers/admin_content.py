# somahsap/routers/admin_content.py
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from somahsap.auth.deps import AdminIdentity, require_admin
from somahsap.core.errors import ContentValidationError
from somahsap.core.logging_config import get_logger
from somahsap.dependencies import Services, get_services
from somahsap.observability.metrics import content_write_counter
from somahsap.routers.common import NO_STORE, read_json_body

router = APIRouter(prefix="/api/admin/content", tags=["admin-content"])
logger = get_logger(__name__)


@router.get("")
def get_content(
    admin: AdminIdentity = Depends(require_admin),
    services: Services = Depends(get_services),
):
    content = services.content.read_optional()
    if content is None:
        # nog nooit opgeslagen: lege editor
        return JSONResponse({"ok": True, "content": {}}, headers=NO_STORE)
    return JSONResponse({"ok": True, "content": content.to_document()}, headers=NO_STORE)


@router.put("")
async def put_content(
    request: Request,
    admin: AdminIdentity = Depends(require_admin),
    services: Services = Depends(get_services),
):
    body = await read_json_body(request)
    try:
        saved = await run_in_threadpool(services.content.write, body)
    except ContentValidationError:
        content_write_counter.labels(result="invalid").inc()
        raise

    content_write_counter.labels(result="success").inc()
    logger.info("admin_content_saved", version=saved.version)
    return JSONResponse({"ok": True}, headers=NO_STORE)
