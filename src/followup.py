"""
Follow-up delivery for button clicks.

After a picker button is clicked the interaction response only edits the
ephemeral picker. The GIF itself is posted publicly through Discord's
follow-up webhook, addressed by application id and the interaction's one-time
token. That call must never hold up, or change, the interaction response, so
the pipeline only *schedules* it through a FollowupScheduler:

- SqsFollowupScheduler (Lambda host): enqueue a job; followup_poster consumes it.
- The FastAPI host schedules post_followup as a background task.

Delivery is best effort: no retry, failures are logged and dropped.
"""

import json
import os
from typing import Any, Callable, Optional

import boto3
import requests

from logger_util import get_logger, log, log_exception

_logger = get_logger()

DISCORD_API_BASE = "https://discord.com/api/v10"
FOLLOWUP_TIMEOUT_SECONDS = 10

# (application_id, interaction_token, message) -> None
FollowupScheduler = Callable[[str, str, dict], None]


def followup_url(application_id: str, interaction_token: str) -> str:
    return f"{DISCORD_API_BASE}/webhooks/{application_id}/{interaction_token}"


def post_followup(
    application_id: str,
    interaction_token: str,
    message: dict,
    session: Any = requests,
) -> bool:
    """
    POST a follow-up message to the interaction webhook.

    Returns:
        True if Discord accepted the message, False otherwise (never raises)
    """
    try:
        response = session.post(
            followup_url(application_id, interaction_token),
            json=message,
            headers={"Content-Type": "application/json"},
            timeout=FOLLOWUP_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        log(_logger, "WARN", "followup_post_failed", {
            "application_id": application_id,
            "error": str(e),
            "error_type": type(e).__name__,
        }, service="gifland-followup")
        return False

    if not response.ok:
        log(_logger, "WARN", "followup_post_failed", {
            "application_id": application_id,
            "status_code": response.status_code,
            "response_body": response.text[:500],
        }, service="gifland-followup")
        return False

    log(_logger, "INFO", "followup_posted", {
        "application_id": application_id,
        "status_code": response.status_code,
    }, service="gifland-followup")
    return True


class SqsFollowupScheduler:
    """Hands follow-up jobs to an SQS queue consumed by the follow-up poster Lambda."""

    def __init__(self, queue_url: str, region: Optional[str] = None, client: Any = None):
        self.queue_url = queue_url
        self.region = region or os.environ.get("AWS_REGION_NAME", "ap-northeast-1")
        self._client = client

    def _sqs(self):
        if self._client is None:
            self._client = boto3.client("sqs", region_name=self.region)
        return self._client

    def __call__(self, application_id: str, interaction_token: str, message: dict) -> None:
        if not self.queue_url:
            log(_logger, "ERROR", "followup_queue_url_missing", {
                "error": "FOLLOWUP_QUEUE_URL environment variable not set",
            }, service="gifland-followup")
            return

        job = {
            "application_id": application_id,
            "interaction_token": interaction_token,
            "message": message,
        }
        try:
            self._sqs().send_message(QueueUrl=self.queue_url, MessageBody=json.dumps(job))
            log(_logger, "INFO", "followup_enqueued", {"application_id": application_id},
                service="gifland-followup")
        except Exception as e:
            log_exception(_logger, "followup_enqueue_failed", {"application_id": application_id}, e,
                          service="gifland-followup")
