# somahsap/routers/admin_upload.py
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from somahsap.auth.deps import AdminIdentity, require_admin
from somahsap.dependencies import Services, get_services
from somahsap.services.uploads import UploadRejected

router = APIRouter(prefix="/api/admin/upload", tags=["admin-upload"])


@router.post("")
async def upload_image(
    file: Optional[UploadFile] = File(None),
    admin: AdminIdentity = Depends(require_admin),
    services: Services = Depends(get_services),
):
    if file is None:
        return JSONResponse({"ok": False, "error": "Dosya bulunamadı."}, status_code=400)

    uploads = services.uploads
    # één byte extra lezen is genoeg om "te groot" te detecteren
    data = await file.read(uploads.max_bytes + 1)
    try:
        stored = await run_in_threadpool(uploads.save, file.filename or "image", file.content_type, data)
    except UploadRejected as e:
        return JSONResponse({"ok": False, "error": str(e)}, status_code=400)

    return {"ok": True, "src": stored.src, "thumb": stored.thumb}
