import functools
import logging
from collections.abc import Mapping

from fastapi import FastAPI, Response

from statuscheck.api_schemas import HealthResponse
from statuscheck.config import settings
from statuscheck.formatting import JSON_DECORATOR, PINGDOM_DECORATOR
from statuscheck.reporting import DEFAULT_TIMEOUT_MS, report

logger = logging.getLogger(__name__)

PINGDOM_XML_PATH = "/_status_check/pingdom.xml"
HEALTHCHECK_PATH = "/_status_check/healthcheck.json"


def wrap(func, checks=None):
    """
    Wrap an action handler so the status check paths return a report.

    Any other invocation is passed through to ``func`` untouched.
    """
    if not callable(func):
        raise TypeError("Invalid Arguments: expected a function to wrap")
    checks = dict(checks or {})

    @functools.wraps(func)
    def wrapper(params=None):
        path = params.get("__ow_path") if isinstance(params, Mapping) else None
        # Pingdom status check?
        if path == PINGDOM_XML_PATH:
            logger.debug("Routing %s to status report", path)
            return report(checks)
        # New Relic status check?
        if path == HEALTHCHECK_PATH:
            logger.debug("Routing %s to status report", path)
            return report(checks, DEFAULT_TIMEOUT_MS, JSON_DECORATOR)
        return func(params)

    return wrapper


def status_check(checks=None):
    """Decorator form of :func:`wrap`."""
    return functools.partial(wrap, checks=checks)


def direct_report(params):
    """
    Status report for an action invoked directly: the params are the checks.

    Each key is the name of a check and each value the URL to ping.
    """
    if not isinstance(params, Mapping):
        raise TypeError("Invalid Arguments: expected a mapping of checks")
    return report(params)


app = FastAPI(
    title="Status Check",
    version="1.0.0",
    description=(
        "Serves uptime reports for the dependencies configured in "
        "STATUSCHECK_CHECKS, as Pingdom XML or health-check JSON."
    ),
)


def _to_response(result: dict) -> Response:
    return Response(
        content=result["body"],
        status_code=result["statusCode"],
        headers={"X-Version": result["headers"]["X-Version"]},
        media_type=result["headers"]["Content-Type"],
    )


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["system"],
    summary="Health Check",
    description="Liveness endpoint used by probes and orchestration.",
)
def health():
    return {"status": "ok"}


@app.get(
    PINGDOM_XML_PATH,
    tags=["status"],
    summary="Pingdom Status Report",
    description="Probes every configured dependency and renders a Pingdom custom check XML.",
    response_class=Response,
)
def pingdom_status():
    return _to_response(
        report(settings.STATUSCHECK_CHECKS, settings.STATUSCHECK_TIMEOUT_MS, PINGDOM_DECORATOR)
    )


@app.get(
    HEALTHCHECK_PATH,
    tags=["status"],
    summary="Health-Check JSON Report",
    description="Probes every configured dependency and renders the report as JSON.",
    response_class=Response,
)
def healthcheck_status():
    return _to_response(
        report(settings.STATUSCHECK_CHECKS, settings.STATUSCHECK_TIMEOUT_MS, JSON_DECORATOR)
    )
