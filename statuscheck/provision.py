import logging

from statuscheck.clients.newrelic import update_or_create


def run(
    auth: str,
    name: str,
    url: str,
    email: str | None = None,
    monitor_id: str | None = None,
    policy_id: str | None = None,
) -> int:
    """Provision the New Relic monitor for ``url`` with progress logged to stderr."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    update_or_create(
        auth,
        name,
        url,
        email=email,
        monitor_id=monitor_id,
        policy_id=policy_id,
    )
    return 0
