from __future__ import annotations

import base64
import logging
import sys
from pathlib import Path
from typing import Any

import requests

from statuscheck.config import settings

logger = logging.getLogger(__name__)

SCRIPT_TEMPLATE_PATH = Path(__file__).resolve().parents[1] / "templates" / "synthetics.js"
URL_PLACEHOLDER = "$$$URL$$$"

FREQUENCY = 15
STATUS = "ENABLED"
SLA_THRESHOLD = 7
MONITOR_TYPE = "SCRIPT_API"
CHANNEL_TYPE = "EMAIL"
PAGE_SIZE = 100
LOCATIONS = [
    "AWS_AP_NORTHEAST_1",
    "AWS_AP_NORTHEAST_2",
    "AWS_AP_SOUTH_1",
    "AWS_AP_SOUTHEAST_1",
    "AWS_AP_SOUTHEAST_2",
    "AWS_CA_CENTRAL_1",
    "AWS_EU_CENTRAL_1",
    "AWS_EU_WEST_1",
    "AWS_EU_WEST_2",
    "AWS_EU_WEST_3",
    "AWS_SA_EAST_1",
    "AWS_US_EAST_1",
    "AWS_US_EAST_2",
    "AWS_US_WEST_1",
    "AWS_US_WEST_2",
    "LINODE_US_CENTRAL_1",
    "LINODE_US_EAST_1",
    "LINODE_US_WEST_1",
]


class NewRelicClientError(RuntimeError):
    pass


def _request(method: str, url: str, auth: str, **kwargs: Any) -> requests.Response:
    try:
        resp = requests.request(
            method,
            url,
            headers={"X-Api-Key": auth},
            timeout=settings.NEWRELIC_TIMEOUT_S,
            **kwargs,
        )
    except requests.RequestException as exc:
        raise NewRelicClientError(
            f"New Relic API request failed: {exc.__class__.__name__}: {exc}"
        ) from exc

    if resp.status_code >= 400:
        snippet = resp.text[:240].replace("\n", "\\n")
        raise NewRelicClientError(f"New Relic API returned HTTP {resp.status_code}: {snippet}")
    return resp


def _json(resp: requests.Response) -> dict[str, Any]:
    try:
        payload = resp.json()
    except ValueError as exc:
        raise NewRelicClientError("New Relic API returned invalid JSON") from exc
    if not isinstance(payload, dict):
        raise NewRelicClientError("New Relic API returned an unexpected payload")
    return payload


def get_monitors(
    auth: str, name: str | None = None, monitor_id: str | None = None
) -> list[dict[str, Any]]:
    try:
        loaded: list[dict[str, Any]] = []
        more = True
        while more:
            payload = _json(
                _request(
                    "GET",
                    f"{settings.NEWRELIC_SYNTHETICS_URL}/monitors",
                    auth,
                    params={"limit": PAGE_SIZE, "offset": len(loaded)},
                )
            )
            # a page with fewer than 10 monitors is taken as the last one
            if payload.get("count", 0) < 10:
                more = False
            loaded.extend(payload.get("monitors") or [])
    except NewRelicClientError as exc:
        logger.error("Unable to retrieve monitors: %s", exc)
        return []

    monitors = [{"id": m.get("id"), "name": m.get("name")} for m in loaded]
    if monitor_id:
        return [m for m in monitors if m["id"] == monitor_id]
    if name:
        return [m for m in monitors if m["name"] == name]
    return []


def build_script(url: str, template_path: Path = SCRIPT_TEMPLATE_PATH) -> str:
    script = template_path.read_text(encoding="utf-8").replace(URL_PLACEHOLDER, url)
    return base64.b64encode(script.encode("utf-8")).decode("ascii")


def update_script(auth: str, monitor: dict[str, Any], url: str) -> None:
    logger.info("Updating the script for monitor %s", monitor["name"])
    _request(
        "PUT",
        f"{settings.NEWRELIC_SYNTHETICS_URL}/monitors/{monitor['id']}/script",
        auth,
        json={"scriptText": build_script(url)},
    )


def update_or_create_monitor(
    auth: str, name: str, monitor_id: str | None, url: str, _created: bool = False
) -> str:
    monitors = get_monitors(auth, name, monitor_id)
    if monitors:
        monitor = monitors[0]
        logger.info("Monitor ID: %s", monitor["id"])
        try:
            update_script(auth, monitor, url)
        except NewRelicClientError as exc:
            logger.error("Script update failed: %s", exc)
            sys.exit(1)
        return monitor["id"]

    if _created:
        logger.error("Monitor %s was created but could not be found", name)
        sys.exit(1)

    logger.info("Creating a new monitor %s", name)
    try:
        _request(
            "POST",
            f"{settings.NEWRELIC_SYNTHETICS_URL}/monitors",
            auth,
            json={
                "name": name,
                "type": MONITOR_TYPE,
                "frequency": FREQUENCY,
                "locations": LOCATIONS,
                "status": STATUS,
                "slaThreshold": SLA_THRESHOLD,
            },
        )
    except NewRelicClientError as exc:
        logger.error("Monitor creation failed: %s", exc)
        sys.exit(1)
    # look up by name, the id of a new monitor is not known yet
    return update_or_create_monitor(auth, name, None, url, _created=True)


def get_notification_channels(auth: str, email: str | None) -> list[dict[str, Any]]:
    try:
        payload = _json(_request("GET", f"{settings.NEWRELIC_API_URL}/alerts_channels.json", auth))
    except NewRelicClientError as exc:
        logger.error("Unable to retrieve channels: %s", exc)
        return []

    if not email:
        return []
    channels = [
        {
            "id": c.get("id"),
            "name": c.get("name"),
            "type": c.get("type"),
            "recipients": (c.get("configuration") or {}).get("recipients", c.get("recipients")),
        }
        for c in payload.get("channels") or []
    ]
    return [
        c for c in channels if (c["type"] or "").upper() == CHANNEL_TYPE and c["recipients"] == email
    ]


def create_notification_channel(auth: str, name: str, email: str):
    channels = get_notification_channels(auth, email)
    if channels:
        channel = channels[0]
        logger.info("Reusing existing notification channel %s with same recipients", channel["name"])
        return channel["id"]

    logger.info("Creating a new notification channel %s", email)
    payload = _json(
        _request(
            "POST",
            f"{settings.NEWRELIC_API_URL}/alerts_channels.json",
            auth,
            json={
                "channel": {
                    "name": name,
                    "type": CHANNEL_TYPE,
                    "configuration": {
                        "recipients": email,
                        "include_json_attachment": True,
                    },
                }
            },
        )
    )
    # the API answers with {"channels": [...]}; older versions with {"channel": {...}}
    created = payload.get("channel") or (payload.get("channels") or [None])[0]
    if not isinstance(created, dict) or "id" not in created:
        raise NewRelicClientError("New Relic API did not return the created channel")
    return created["id"]


def update_or_create_alert_policy(
    auth: str, name: str, monitor_id: str | None, policy_id: str | None, channel_id
) -> None:
    # TODO: create or update the alert policy and link the monitor and channel to it
    logger.debug(
        "Alert policy linkage not implemented (name=%s monitor=%s policy=%s channel=%s)",
        name,
        monitor_id,
        policy_id,
        channel_id,
    )
    return None


def update_or_create(
    auth: str,
    name: str,
    url: str,
    email: str | None = None,
    monitor_id: str | None = None,
    policy_id: str | None = None,
) -> None:
    created_monitor_id = update_or_create_monitor(auth, name, monitor_id, url)

    channel_id = None
    if email:
        try:
            channel_id = create_notification_channel(auth, name, email)
        except NewRelicClientError as exc:
            logger.error("Notification channel setup failed: %s", exc)

    update_or_create_alert_policy(auth, name, created_monitor_id, policy_id, channel_id)
    logger.info("done.")
