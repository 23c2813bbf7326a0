"""
Discord message payloads for GIF replies.

Two shapes are produced:

- a single-GIF message (one embed, no components), posted publicly for a
  random pick and for the follow-up after a button click;
- an ephemeral picker (header, one embed and one button per GIF).

Discord allows at most 5 action rows per message. Two buttons per row keeps
the picker at 10 GIFs, which is where MAX_GIFS_SHOWN comes from.
"""

from typing import List

from custom_id import encode_post_action
from gif_catalog import SITE_URL, Gif

EPHEMERAL = 1 << 6  # 64

MAX_GIFS_SHOWN = 10
BUTTONS_PER_ROW = 2
MAX_BUTTON_LABEL_LENGTH = 80

COMPONENT_ACTION_ROW = 1
COMPONENT_BUTTON = 2
BUTTON_STYLE_PRIMARY = 1


def gif_image_url(gif: Gif) -> str:
    return f"{SITE_URL}/{gif.url}"


def gif_title(gif: Gif) -> str:
    return f"{gif.url} | {gif.tags}" if gif.tags else gif.url


def build_gif_embed(gif: Gif) -> dict:
    return {
        "title": gif_title(gif),
        "image": {"url": gif_image_url(gif)},
    }


def build_single_gif_message(gif: Gif) -> dict:
    return {"embeds": [build_gif_embed(gif)]}


def build_ephemeral_message(content: str) -> dict:
    return {"content": content, "flags": EPHEMERAL}


def build_post_button(gif: Gif) -> dict:
    return {
        "type": COMPONENT_BUTTON,
        "style": BUTTON_STYLE_PRIMARY,
        "label": f"Post: {gif.url}"[:MAX_BUTTON_LABEL_LENGTH],
        "custom_id": encode_post_action(gif.url, gif.tags),
    }


def build_picker_header(shown: int, total_matches: int, query: str) -> str:
    """
    Header line for the picker.

    The exact count is stated when every match is shown; when matches were
    cut down to the display cap the header suggests a narrower search.
    """
    if total_matches > shown:
        return (
            f"Showing {shown} GIFs for **{query}** - "
            "try a more specific search to narrow results."
        )
    plural = "" if shown == 1 else "s"
    return f"Found {shown} GIF{plural} for **{query}**"


def build_gif_picker(gifs: List[Gif], query: str, total_matches: int) -> dict:
    """
    Build the ephemeral picker message.

    Args:
        gifs: GIFs to show (at most MAX_GIFS_SHOWN; extra entries are dropped)
        query: Search term, echoed in the header
        total_matches: Size of the full match set before capping

    Returns:
        Message data dict with content, embeds, components and ephemeral flags
    """
    gifs = gifs[:MAX_GIFS_SHOWN]
    action_rows = [
        {
            "type": COMPONENT_ACTION_ROW,
            "components": [build_post_button(g) for g in gifs[i:i + BUTTONS_PER_ROW]],
        }
        for i in range(0, len(gifs), BUTTONS_PER_ROW)
    ]
    return {
        "content": build_picker_header(len(gifs), total_matches, query),
        "embeds": [build_gif_embed(g) for g in gifs],
        "components": action_rows,
        "flags": EPHEMERAL,
    }
