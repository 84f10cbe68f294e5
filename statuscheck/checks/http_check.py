from __future__ import annotations

import math
import time
import requests

from statuscheck.checks.results import ProbeResult


def run_probe(key: str, url: str, timeout_ms: int) -> ProbeResult:
    start = time.perf_counter()
    try:
        r = requests.get(url, timeout=timeout_ms / 1000)
        # reading .text pulls the whole body, so elapsed_ms is the response end
        body = r.text
        elapsed_ms = math.floor((time.perf_counter() - start) * 1000)
        if 200 <= r.status_code < 300:
            return ProbeResult(key=key, url=url, ok=True, elapsed_ms=elapsed_ms, status_code=r.status_code)
        return ProbeResult(
            key=key,
            url=url,
            ok=False,
            elapsed_ms=elapsed_ms,
            status_code=r.status_code,
            body=body,
            error=f"HTTP {r.status_code}",
        )
    except Exception as e:
        elapsed_ms = math.floor((time.perf_counter() - start) * 1000)
        return ProbeResult(key=key, url=url, ok=False, elapsed_ms=elapsed_ms, error=str(e))
