"""
Discord interaction pipeline shared by the Lambda and FastAPI hosts.

process_request() runs one inbound request end to end:

1. POST only (anything else -> 404)
2. Ed25519 signature gate (-> 401 before any parsing)
3. JSON parse
4. Dispatch on interaction type:
   - PING -> PONG
   - APPLICATION_COMMAND -> random GIF, or search picker
   - MESSAGE_COMPONENT -> confirm in place, schedule public follow-up
   - anything else -> 400

Hosts translate the returned HttpResponse into their own response objects and
supply the FollowupScheduler used for button clicks.
"""

import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

import requests

from config import BotConfig
from custom_id import decode_post_action
from discord_verifier import verify_signature
from followup import FollowupScheduler
from gif_catalog import CatalogUnavailableError, Gif, fetch_gifs, pick_random, search_gifs, shuffled
from logger_util import get_logger, log
from message_builder import (
    MAX_GIFS_SHOWN,
    build_ephemeral_message,
    build_gif_picker,
    build_single_gif_message,
)

_logger = get_logger()

SIGNATURE_HEADER = "X-Signature-Ed25519"
TIMESTAMP_HEADER = "X-Signature-Timestamp"
SEARCH_OPTION = "search"


class InteractionType:
    PING = 1
    APPLICATION_COMMAND = 2
    MESSAGE_COMPONENT = 3


class InteractionResponseType:
    PONG = 1
    CHANNEL_MESSAGE_WITH_SOURCE = 4
    UPDATE_MESSAGE = 7


CATALOG_UNAVAILABLE_MESSAGE = "Could not reach gif.land right now. Try again in a moment."
EMPTY_CATALOG_MESSAGE = "No GIFs are available right now. Try again later."
UNKNOWN_ACTION_MESSAGE = "Unknown action."


@dataclass(frozen=True)
class HttpResponse:
    """Host-neutral HTTP response: a JSON dict or a plain-text body."""

    status_code: int
    body: Union[dict, str]

    @property
    def content_type(self) -> str:
        return "application/json" if isinstance(self.body, dict) else "text/plain"

    def body_text(self) -> str:
        return json.dumps(self.body) if isinstance(self.body, dict) else self.body


def _log(level: str, event_type: str, data: dict) -> None:
    log(_logger, level, event_type, data, service="gifland-interactions")


def _reply(response_type: int, data: Optional[dict] = None) -> HttpResponse:
    body: dict = {"type": response_type}
    if data is not None:
        body["data"] = data
    return HttpResponse(200, body)


def _get_header(headers: Optional[Mapping[str, str]], name: str) -> str:
    """Case-insensitive header lookup; missing headers read as empty strings."""
    if not headers:
        return ""
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value or ""
    return ""


def get_search_query(interaction: dict) -> str:
    """Return the stripped search option value, or "" when absent or blank."""
    options = (interaction.get("data") or {}).get("options") or []
    for option in options:
        if isinstance(option, dict) and option.get("name") == SEARCH_OPTION:
            value = option.get("value")
            return value.strip() if isinstance(value, str) else ""
    return ""


def handle_ping() -> HttpResponse:
    return _reply(InteractionResponseType.PONG)


def handle_slash_command(interaction: dict, session: Any = requests) -> HttpResponse:
    """
    Handle the /gifland command.

    Without a search term a random GIF is posted publicly. With one, an
    ephemeral picker shows up to MAX_GIFS_SHOWN shuffled matches.
    """
    query = get_search_query(interaction)

    try:
        all_gifs = fetch_gifs(session)
    except CatalogUnavailableError as e:
        _log("WARN", "catalog_fetch_failed", {"error": str(e)})
        return _reply(
            InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE,
            build_ephemeral_message(CATALOG_UNAVAILABLE_MESSAGE),
        )

    if not query:
        gif = pick_random(all_gifs)
        if gif is None:
            _log("WARN", "catalog_empty", {})
            return _reply(
                InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE,
                build_ephemeral_message(EMPTY_CATALOG_MESSAGE),
            )
        _log("INFO", "random_gif_selected", {"url": gif.url, "catalog_size": len(all_gifs)})
        return _reply(InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE, build_single_gif_message(gif))

    matches = search_gifs(all_gifs, query)
    _log("INFO", "search_completed", {
        "query_length": len(query),
        "match_count": len(matches),
        "catalog_size": len(all_gifs),
    })

    if not matches:
        return _reply(
            InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE,
            build_ephemeral_message(f'No GIFs found for "{query}". Try a different search.'),
        )

    shown = shuffled(matches)[:MAX_GIFS_SHOWN]
    return _reply(
        InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE,
        build_gif_picker(shown, query, total_matches=len(matches)),
    )


def handle_button_click(
    interaction: dict,
    config: BotConfig,
    schedule_followup: FollowupScheduler,
) -> HttpResponse:
    """
    Handle a picker button click.

    The ephemeral picker is replaced by a short confirmation, and the GIF is
    handed to schedule_followup for public posting. The confirmation does not
    depend on the follow-up outcome.
    """
    custom_id = (interaction.get("data") or {}).get("custom_id") or ""
    action = decode_post_action(custom_id)
    if action is None:
        _log("WARN", "unknown_component_action", {"custom_id_prefix": custom_id[:16]})
        return _reply(InteractionResponseType.UPDATE_MESSAGE, {
            "content": UNKNOWN_ACTION_MESSAGE,
            "components": [],
            "embeds": [],
        })

    confirmation = _reply(InteractionResponseType.UPDATE_MESSAGE, {
        "content": f"Posted **{action.url}**",
        "embeds": [],
        "components": [],
    })

    gif = Gif(url=action.url, tags=action.tags)
    try:
        schedule_followup(config.application_id, interaction.get("token") or "", build_single_gif_message(gif))
        _log("INFO", "followup_scheduled", {"url": action.url})
    except Exception as e:
        _log("ERROR", "followup_schedule_failed", {"url": action.url, "error": str(e)})
    return confirmation


def handle_interaction(
    interaction: dict,
    config: BotConfig,
    schedule_followup: FollowupScheduler,
    session: Any = requests,
) -> HttpResponse:
    """Route a verified interaction by its type."""
    interaction_type = interaction.get("type")
    _log("INFO", "interaction_received", {"interaction_type": interaction_type})

    if interaction_type == InteractionType.PING:
        return handle_ping()
    if interaction_type == InteractionType.APPLICATION_COMMAND:
        return handle_slash_command(interaction, session)
    if interaction_type == InteractionType.MESSAGE_COMPONENT:
        return handle_button_click(interaction, config, schedule_followup)

    _log("WARN", "unknown_interaction_type", {"interaction_type": interaction_type})
    return HttpResponse(400, "Unknown interaction type")


def process_request(
    method: str,
    headers: Optional[Mapping[str, str]],
    body: Optional[Union[str, bytes]],
    config: BotConfig,
    schedule_followup: FollowupScheduler,
    session: Any = requests,
) -> HttpResponse:
    """
    Run one inbound HTTP request through the full pipeline.

    Args:
        method: HTTP method
        headers: Request headers (any casing)
        body: Raw request body, exactly as signed (decoded only after verification)
        config: Bot configuration
        schedule_followup: Scheduler for button-click follow-ups
        session: requests-compatible object used for the catalog fetch

    Returns:
        HttpResponse to send back to Discord
    """
    if (method or "").upper() != "POST":
        return HttpResponse(404, "Not found")

    signature = _get_header(headers, SIGNATURE_HEADER)
    timestamp = _get_header(headers, TIMESTAMP_HEADER)
    if not verify_signature(body=body, timestamp=timestamp, signature=signature, public_key=config.public_key):
        _log("WARN", "signature_verification_failed", {
            "has_signature": bool(signature),
            "has_timestamp": bool(timestamp),
        })
        return HttpResponse(401, "Invalid signature")

    try:
        text = body.decode("utf-8") if isinstance(body, bytes) else body
        interaction = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        _log("WARN", "payload_parse_error", {"error": str(e)})
        return HttpResponse(400, "Invalid JSON payload")

    if not isinstance(interaction, dict):
        _log("WARN", "payload_parse_error", {"error": "payload is not a JSON object"})
        return HttpResponse(400, "Invalid JSON payload")

    return handle_interaction(interaction, config, schedule_followup, session)
