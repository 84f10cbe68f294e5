import os
from dotenv import load_dotenv

load_dotenv()


def parse_checks(raw: str | None) -> dict[str, str]:
    """Parse ``name=url,name=url`` into a check specification."""
    checks: dict[str, str] = {}
    for item in (raw or "").split(","):
        name, sep, url = item.strip().partition("=")
        if sep and name.strip() and url.strip():
            checks[name.strip()] = url.strip()
    return checks


class Settings:
    STATUSCHECK_TIMEOUT_MS: int = int(os.getenv("STATUSCHECK_TIMEOUT_MS", 10000))
    STATUSCHECK_DIST_NAME: str = os.getenv("STATUSCHECK_DIST_NAME", "ow-status-check")
    STATUSCHECK_CHECKS: dict[str, str] = parse_checks(os.getenv("STATUSCHECK_CHECKS"))
    NEWRELIC_SYNTHETICS_URL: str = os.getenv(
        "NEWRELIC_SYNTHETICS_URL", "https://synthetics.newrelic.com/synthetics/api/v3"
    )
    NEWRELIC_API_URL: str = os.getenv("NEWRELIC_API_URL", "https://api.newrelic.com/v2")
    NEWRELIC_TIMEOUT_S: float = float(os.getenv("NEWRELIC_TIMEOUT_S", "30"))


settings = Settings()
