import json
from collections.abc import Iterable
from dataclasses import dataclass
from hashlib import sha256
from typing import Any

from app.api.modules.fingerprint.schema import FingerprintPayload

UNKNOWN_IP = "unknown"


@dataclass(frozen=True, slots=True)
class ServerSignals:
    user_agent: str
    accept_language: str | None
    accept_encoding: str | None
    client_ip: str


def _dump(model: Any) -> Any:
    if model is None:
        return None
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def canonical_snapshot(payload: FingerprintPayload, signals: ServerSignals) -> dict[str, Any]:
    components = payload.components
    return {
        "clientFingerprint": payload.fingerprint,
        "userAgent": signals.user_agent,
        "acceptLanguage": signals.accept_language,
        "acceptEncoding": signals.accept_encoding,
        "ip": signals.client_ip,
        "screen": _dump(components.screen) if components else None,
        "timezone": components.timezone if components else None,
        "hardware": _dump(components.hardware) if components else None,
        "platform": components.platform if components else None,
    }


def build_fingerprint_hash(payload: FingerprintPayload, signals: ServerSignals) -> str:
    snapshot = canonical_snapshot(payload, signals)
    body = json.dumps(snapshot, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return sha256(body).hexdigest()


def unique(items: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(items))


__all__ = (
    "UNKNOWN_IP",
    "ServerSignals",
    "build_fingerprint_hash",
    "canonical_snapshot",
    "unique",
)
