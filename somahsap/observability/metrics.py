# somahsap/observability/metrics.py
from fastapi import APIRouter
from starlette.responses import Response

from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST

router = APIRouter(tags=["observability"])

contact_counter = Counter(
    "somahsap_contact_submissions_total",
    "Aantal formulier-inzendingen",
    ["type", "result"],  # quote|message|quick x ok|invalid|dropped|mail_failed
)

content_write_counter = Counter(
    "somahsap_content_writes_total",
    "Aantal content-schrijfpogingen vanuit de admin",
    ["result"],  # success|invalid
)

login_counter = Counter(
    "somahsap_admin_logins_total",
    "Aantal admin login pogingen",
    ["result"],  # success|invalid|missing_env
)


@router.get("/metrics", include_in_schema=True)
def metrics() -> Response:
    # Prometheus expects text/plain; version=0.0.4
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
