"""
Button custom_id encoding.

A picker button carries everything needed to post its GIF later:

    post:<url>||<tags>

Discord round-trips the string untouched and limits it to 100 characters.
When the limit is exceeded only the tag string is shortened, so the decoded
url stays exact and just the follow-up embed title loses its tail.

A url longer than MAX_URL_LENGTH cannot fit at all. Such an identifier is
cut at the limit without a separator, and the click then posts the shortened
path (logged as custom_id_url_too_long).
"""

from typing import NamedTuple, Optional

from logger_util import get_logger, log

_logger = get_logger()

POST_ACTION_PREFIX = "post:"
FIELD_SEPARATOR = "||"
MAX_CUSTOM_ID_LENGTH = 100
MAX_URL_LENGTH = MAX_CUSTOM_ID_LENGTH - len(POST_ACTION_PREFIX) - len(FIELD_SEPARATOR)


class PostAction(NamedTuple):
    url: str
    tags: str


def encode_post_action(url: str, tags: str = "") -> str:
    tags = tags or ""
    if len(url) > MAX_URL_LENGTH:
        log(_logger, "WARN", "custom_id_url_too_long", {
            "url": url,
            "url_length": len(url),
            "max_url_length": MAX_URL_LENGTH,
        })
        return f"{POST_ACTION_PREFIX}{url}"[:MAX_CUSTOM_ID_LENGTH]

    tag_budget = MAX_URL_LENGTH - len(url)
    if len(tags) > tag_budget:
        log(_logger, "WARN", "custom_id_truncated", {
            "url": url,
            "tags_length": len(tags),
            "kept_tags_length": tag_budget,
        })
        tags = tags[:tag_budget]
    return f"{POST_ACTION_PREFIX}{url}{FIELD_SEPARATOR}{tags}"


def decode_post_action(custom_id: Optional[str]) -> Optional[PostAction]:
    """Decode a post button id; None when it is not a post action."""
    if not custom_id or not custom_id.startswith(POST_ACTION_PREFIX):
        return None
    payload = custom_id[len(POST_ACTION_PREFIX):]
    url, _, tags = payload.partition(FIELD_SEPARATOR)
    return PostAction(url=url, tags=tags)
