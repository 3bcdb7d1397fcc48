# somahsap/aws/s3_errors.py
from typing import Any, Dict, Optional, Tuple

from botocore.exceptions import ClientError

NOT_FOUND_CODES = {"NoSuchKey", "NotFound", "404", "ParameterNotFound", "ResourceNotFoundException"}


def is_not_found(e: Exception) -> bool:
    """True als een AWS-fout betekent: object/parameter bestaat (nog) niet."""
    if not isinstance(e, ClientError):
        return False
    err = e.response.get("Error", {}) or {}
    meta = e.response.get("ResponseMetadata", {}) or {}
    if err.get("Code", "") in NOT_FOUND_CODES:
        return True
    return int(meta.get("HTTPStatusCode", 0) or 0) == 404


def describe_client_error(e: ClientError) -> Tuple[str, Dict[str, Any]]:
    """Korte code + log-vriendelijke context voor een botocore ClientError."""
    err = e.response.get("Error", {}) or {}
    meta = e.response.get("ResponseMetadata", {}) or {}

    code: str = err.get("Code", "") or "Unknown"
    aws_request_id: Optional[str] = meta.get("RequestId")
    hint = None

    # Veelvoorkomende cases
    if code in {"AccessDenied", "AccessDeniedException"}:
        hint = "Controleer IAM/bucket policy (s3:GetObject/PutObject, ssm:GetParameters)."
    elif code in {"SignatureDoesNotMatch"}:
        hint = "Controleer AWS_REGION vs bucket-regio en tijdsync (NTP)."
    elif code in {"RequestTimeout", "SlowDown", "Throttling", "ThrottlingException"}:
        hint = "AWS throttling/timeout; probeer zo opnieuw."

    return code, {
        "code": code,
        "message": err.get("Message", "") or str(e),
        "hint": hint,
        "aws_request_id": aws_request_id,
        "aws_http": meta.get("HTTPStatusCode"),
    }
