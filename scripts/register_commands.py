#!/usr/bin/env python3
"""
Register the /gifland slash command with Discord.

Overwrites the application's global commands with the single /gifland
command (one optional "search" string option) via the bulk-overwrite
endpoint. Run once after creating the application, or after changing the
command definition.

Usage:
    DISCORD_APP_ID=... DISCORD_TOKEN=... python3 scripts/register_commands.py
    python3 scripts/register_commands.py --app-id 123 --token xyz --dry-run

Exit codes:
    0  Success (or --dry-run)
    1  Missing application id or bot token
    2  Discord API error
"""

import argparse
import json
import os
import sys

import requests

DISCORD_API_BASE = "https://discord.com/api/v10"
OPTION_TYPE_STRING = 3


def build_command() -> dict:
    """Build the /gifland command definition."""
    return {
        "name": "gifland",
        "description": "Search and post a GIF from gif.land",
        "options": [
            {
                "name": "search",
                "description": "Search term to filter GIFs (leave empty for random)",
                "type": OPTION_TYPE_STRING,
                "required": False,
            }
        ],
    }


def register_commands(app_id: str, token: str, commands: list) -> requests.Response:
    """PUT the command list to the application's global commands."""
    return requests.put(
        f"{DISCORD_API_BASE}/applications/{app_id}/commands",
        headers={
            "Content-Type": "application/json",
            "Authorization": f"Bot {token}",
        },
        data=json.dumps(commands),
        timeout=30,
    )


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Register the /gifland slash command with Discord")
    parser.add_argument("--app-id", default=os.environ.get("DISCORD_APP_ID", ""), help="Discord application id (default: DISCORD_APP_ID env)")
    parser.add_argument("--token", default=os.environ.get("DISCORD_TOKEN", ""), help="Bot token (default: DISCORD_TOKEN env)")
    parser.add_argument("--dry-run", action="store_true", help="Print command JSON without registering")
    args = parser.parse_args(argv)

    commands = [build_command()]

    if args.dry_run:
        print(json.dumps(commands, indent=2))
        return 0

    if not args.app_id or not args.token:
        print("ERROR: Missing credentials. Set DISCORD_APP_ID and DISCORD_TOKEN before running.", file=sys.stderr)
        return 1

    try:
        response = register_commands(args.app_id, args.token, commands)
    except requests.RequestException as e:
        print(f"ERROR: Failed to register command: {e}", file=sys.stderr)
        return 2

    if not response.ok:
        print(f"ERROR: Failed to register command: {response.status_code} {response.text}", file=sys.stderr)
        return 2

    print("Command registered successfully:", json.dumps(response.json(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
