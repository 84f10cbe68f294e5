from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Mapping
from xml.sax.saxutils import escape


def xml(value: Any, name: str) -> str:
    if isinstance(value, Mapping):
        inner = "\n".join(xml(v, k) for k, v in value.items())
    elif isinstance(value, str):
        inner = escape(value, {'"': "&quot;", "'": "&apos;"})
    else:
        inner = str(value)
    return f"<{name}>{inner}</{name}>"


def json_body(report: dict[str, Any], _name: str | None = None) -> str:
    return json.dumps(report)


@dataclass(frozen=True)
class Decorator:
    body: Callable[[dict[str, Any], str | None], str]
    mime: str
    name: str | None = None


PINGDOM_DECORATOR = Decorator(body=xml, mime="application/xml", name="pingdom_http_custom_check")
JSON_DECORATOR = Decorator(body=json_body, mime="application/json")
