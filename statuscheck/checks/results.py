from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ProbeResult:
    key: str
    url: str
    ok: bool
    elapsed_ms: int
    status_code: int | None = None
    body: str | None = None
    error: str | None = None
