from __future__ import annotations

import logging
import os
import re
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Mapping

from statuscheck.api_schemas import StatusReport, StatusResponse
from statuscheck.checks.http_check import run_probe
from statuscheck.checks.results import ProbeResult
from statuscheck.formatting import PINGDOM_DECORATOR, Decorator
from statuscheck.version import VersionCache, version_cache as default_version_cache

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 10000
CHECK_KEY_PATTERN = re.compile(r"[a-z0-9]+")
RESERVED_KEYS = frozenset(StatusReport.model_fields)
ACTIVATION_ENV = "__OW_ACTIVATION_ID"


def filter_checks(checks: Mapping[str, Any] | None) -> dict[str, str]:
    out: dict[str, str] = {}
    for key, url in (checks or {}).items():
        if not isinstance(key, str) or not CHECK_KEY_PATTERN.fullmatch(key):
            continue
        out[key] = str(url)
    return out


def run_checks(checks: dict[str, str], timeout_ms: int) -> tuple[dict[str, int], ProbeResult | None]:
    """
    Probe every check concurrently and join fail-fast.

    Returns the per-check timings and, if a probe failed, the first failure.
    On failure, probes that have not started are cancelled and running ones
    are abandoned; their results are discarded.
    """
    if not checks:
        return {}, None

    timings: dict[str, int] = {}
    pool = ThreadPoolExecutor(max_workers=len(checks), thread_name_prefix="statuscheck")
    failure: ProbeResult | None = None
    try:
        futures = [pool.submit(run_probe, key, url, timeout_ms) for key, url in checks.items()]
        for fut in as_completed(futures):
            res = fut.result()
            if not res.ok:
                failure = res
                break
            timings[res.key] = res.elapsed_ms
    finally:
        pool.shutdown(wait=failure is None, cancel_futures=True)

    if failure is not None:
        return {}, failure
    # keep the order of the check specification
    return {key: timings[key] for key in checks}, None


def _response_time_ms(start: float) -> int:
    return int(abs(time.perf_counter() - start) * 1000)


def build_report(
    version: str,
    response_time: int,
    timings: dict[str, int],
    failure: ProbeResult | None,
) -> StatusReport:
    payload: dict[str, Any] = {
        "status": "OK" if failure is None else "failed",
        "version": version,
        "response_time": response_time,
        "process": {"activation": os.environ.get(ACTIVATION_ENV)},
    }
    if failure is not None:
        payload["error"] = {
            "url": failure.url,
            "statuscode": failure.status_code or 500,
            "body": failure.body or failure.error,
        }
    else:
        # report fields win over timings of checks sharing their name
        payload.update({k: v for k, v in timings.items() if k not in RESERVED_KEYS})
    return StatusReport.model_validate(payload)


def report(
    checks: Mapping[str, Any] | None = None,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    decorator: Decorator = PINGDOM_DECORATOR,
    version_cache: VersionCache | None = None,
) -> dict[str, Any]:
    version = (version_cache or default_version_cache).get()
    start = time.perf_counter()

    timings, failure = run_checks(filter_checks(checks), timeout_ms)
    status_report = build_report(version, _response_time_ms(start), timings, failure)

    if failure is None:
        status_code = 200
        logger.debug("Status check OK in %sms: %s", status_report.response_time, timings)
    else:
        status_code = status_report.error.statuscode
        logger.warning(
            "Status check %s failed: url=%s status=%s error=%s",
            failure.key,
            failure.url,
            failure.status_code,
            failure.error,
        )

    return StatusResponse(
        statusCode=status_code,
        headers={"Content-Type": decorator.mime, "X-Version": version},
        body=decorator.body(status_report.to_dict(), decorator.name),
    ).model_dump()
