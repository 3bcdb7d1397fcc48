# somahsap/routers/contact.py
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter

from somahsap.dependencies import Services, get_services
from somahsap.routers.common import read_json_body


def build_router(limiter: Limiter, contact_limit: str) -> APIRouter:
    """Router per app: de limiet hoort bij de Limiter van die app."""
    router = APIRouter(prefix="/api/contact", tags=["contact"])

    @router.post("")
    @limiter.limit(contact_limit)
    async def submit_contact(request: Request, services: Services = Depends(get_services)):
        body = await read_json_body(request)
        result = await services.intake.submit(body)

        if not result.delivered:
            # lead is opgeslagen, alleen de mail naar het bedrijf is mislukt
            return JSONResponse(
                {"ok": False, "error": "Mail gönderilemedi.", "message": result.delivery_error},
                status_code=502,
            )
        return JSONResponse({"ok": True})

    return router
