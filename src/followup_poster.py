"""
Follow-up Poster Lambda: consumes follow-up jobs from SQS and posts them to Discord.

The interaction handler enqueues one job per picker button click and returns
immediately. Message body (JSON): application_id, interaction_token, message.

Delivery is fire-and-forget. Failed records are logged but not reported in
batchItemFailures, so SQS never redelivers them (an interaction token is
single-use and short-lived anyway).
"""

import json

from followup import post_followup
from logger_util import get_logger, log, set_request_id

_logger = get_logger()


def _log(level: str, event_type: str, data: dict) -> None:
    log(_logger, level, event_type, data, service="gifland-followup-poster")


def lambda_handler(event, context):
    """
    Process SQS event: post each follow-up job.

    Returns:
        dict with an always-empty "batchItemFailures" list
    """
    set_request_id(getattr(context, "aws_request_id", None) if context else None)
    posted = 0
    dropped = 0

    for record in event.get("Records", []):
        message_id = record.get("messageId", "")
        try:
            job = json.loads(record.get("body") or "{}")
        except (json.JSONDecodeError, TypeError) as e:
            _log("ERROR", "followup_job_parse_error", {"message_id": message_id, "error": str(e)})
            dropped += 1
            continue

        if not isinstance(job, dict):
            _log("ERROR", "followup_job_parse_error", {
                "message_id": message_id,
                "error": f"job is a JSON {type(job).__name__}, not an object",
            })
            dropped += 1
            continue

        application_id = job.get("application_id") or ""
        interaction_token = job.get("interaction_token") or ""
        message = job.get("message")
        if not application_id or not interaction_token or not isinstance(message, dict):
            _log("ERROR", "followup_job_invalid", {
                "message_id": message_id,
                "has_application_id": bool(application_id),
                "has_interaction_token": bool(interaction_token),
                "has_message": isinstance(message, dict),
            })
            dropped += 1
            continue

        if post_followup(application_id, interaction_token, message):
            posted += 1
        else:
            dropped += 1

    _log("INFO", "followup_batch_completed", {"posted": posted, "dropped": dropped})
    return {"batchItemFailures": []}
