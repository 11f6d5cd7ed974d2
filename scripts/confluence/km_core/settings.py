"""Settings resolution and user config merging for the Confluence panel."""

from __future__ import annotations

import json
import os
from pathlib import Path

from km_core.descriptors.confluence import KEY, PARAMETER_HELP, PARAMETER_URL
from km_core.models import Configuration, Node

DEFAULTS: dict = {
    "url": None,
    "query": "rest/prototype/1/space.json",
    "refresh_seconds": 30,
    "help": None,
    "cookies": {},
}

ENV_OVERRIDES = {
    "url": "CONFLUENCE_URL",
    "query": "CONFLUENCE_QUERY",
}


def load_user_config(path: str | None) -> dict:
    if not path:
        return {}

    config_path = Path(path)
    if not config_path.exists():
        raise ValueError(f"config path not found: {config_path}")

    try:
        config = json.loads(config_path.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON config: {exc}") from exc
    if not isinstance(config, dict):
        raise ValueError("config must be a JSON object")
    return config


def resolve_settings(
    config_path: str | None = None,
    base_url: str | None = None,
    query: str | None = None,
    refresh_seconds: int | None = None,
) -> dict:
    resolved = dict(DEFAULTS)
    user_config = load_user_config(config_path)
    for key in DEFAULTS:
        if user_config.get(key) is not None:
            resolved[key] = user_config[key]

    for key, env_name in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            resolved[key] = value

    if base_url:
        resolved["url"] = base_url
    if query:
        resolved["query"] = query
    if refresh_seconds is not None:
        resolved["refresh_seconds"] = refresh_seconds

    if not resolved["url"]:
        raise ValueError("Confluence URL is required (--url, CONFLUENCE_URL or config 'url')")
    if not isinstance(resolved["cookies"], dict):
        raise ValueError("config 'cookies' must be an object of name/value pairs")

    resolved["url"] = str(resolved["url"]).rstrip("/")
    resolved["query"] = str(resolved["query"]).lstrip("/")
    resolved["refresh_seconds"] = max(1, int(resolved["refresh_seconds"]))
    return resolved


def to_configuration(settings: dict) -> Configuration:
    node_parameters = {PARAMETER_URL: settings["url"]}
    if settings.get("help"):
        node_parameters[PARAMETER_HELP] = settings["help"]
    return Configuration(
        node=Node(id=KEY, parameters=node_parameters),
        parameters={"query": settings["query"]},
    )
