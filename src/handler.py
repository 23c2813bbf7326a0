import base64
import binascii
import os
from typing import Optional

from config import ConfigError, load_config
from followup import SqsFollowupScheduler
from interactions import HttpResponse, process_request
from logger_util import get_logger, log, log_exception, set_request_id

_logger = get_logger()


def _log(level: str, event_type: str, data: dict) -> None:
    log(_logger, level, event_type, data, service="gifland-interaction-handler")


def _get_method(event: dict) -> str:
    """HTTP method from a Function URL / HTTP API (v2) or REST API (v1) event."""
    http = (event.get("requestContext") or {}).get("http") or {}
    return http.get("method") or event.get("httpMethod") or ""


def _get_raw_body(event: dict) -> Optional[bytes]:
    """Request body bytes as signed by Discord; None when the base64 encoding is corrupt."""
    body = event.get("body") or ""
    if event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as e:
            _log("WARN", "body_base64_decode_failed", {"error": str(e)})
            return None
    return body.encode("utf-8", errors="surrogatepass")


def _to_proxy_response(response: HttpResponse) -> dict:
    return {
        "statusCode": response.status_code,
        "headers": {"Content-Type": response.content_type},
        "body": response.body_text(),
    }


def lambda_handler(event, context):
    """
    Discord interactions endpoint (Lambda Function URL / API Gateway proxy).

    - Verifies the Ed25519 signature before anything else (401 on failure)
    - Answers PING, /gifland commands and picker button clicks
    - Button-click follow-ups are enqueued on FOLLOWUP_QUEUE_URL and posted
      by the follow-up poster Lambda, never inline
    """
    set_request_id(getattr(context, "aws_request_id", None) if context else None)
    try:
        try:
            config = load_config()
        except ConfigError as e:
            _log("ERROR", "configuration_missing", {"error": e.message})
            return _to_proxy_response(HttpResponse(500, "Internal server error"))

        scheduler = SqsFollowupScheduler(
            queue_url=(os.environ.get("FOLLOWUP_QUEUE_URL") or "").strip(),
        )
        response = process_request(
            method=_get_method(event),
            headers=event.get("headers") or {},
            body=_get_raw_body(event),
            config=config,
            schedule_followup=scheduler,
        )
        _log("INFO", "response_sent", {"status_code": response.status_code})
        return _to_proxy_response(response)

    except Exception as e:
        log_exception(_logger, "unhandled_exception", {}, e, service="gifland-interaction-handler")
        return _to_proxy_response(HttpResponse(500, "Internal server error"))
