import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from app.api.modules.fingerprint.schema import FingerprintPayload

logger = logging.getLogger(__name__)


class FingerprintExtractor:
    """Pulls the client fingerprint out of a request.

    Carriers are tried in order: body field, header, query parameter.
    The first populated carrier that parses into a payload wins. Malformed
    carriers are logged and skipped; a missing fingerprint is ``None``.
    """

    def __init__(self, body_field: str, header_name: str, query_param: str):
        self._body_field = body_field
        self._header_name = header_name.lower()
        self._query_param = query_param

    def candidates(
        self,
        body: Any,
        headers: Mapping[str, str],
        query: Mapping[str, str],
    ) -> list[Any]:
        from_body = body.get(self._body_field) if isinstance(body, Mapping) else None
        return [
            from_body,
            headers.get(self._header_name),
            query.get(self._query_param),
        ]

    def extract(
        self,
        body: Any,
        headers: Mapping[str, str],
        query: Mapping[str, str],
    ) -> FingerprintPayload | None:
        for candidate in self.candidates(body, headers, query):
            if not candidate:
                continue
            payload = self.parse(candidate)
            if payload is not None:
                return payload
        return None

    def parse(self, candidate: Any) -> FingerprintPayload | None:
        raw = candidate
        if isinstance(candidate, (str, bytes)):
            try:
                raw = json.loads(candidate)
            except ValueError as exc:
                logger.warning("Invalid fingerprint data format")
                logger.debug("Fingerprint JSON decode error: %s", exc)
                return None

        if not isinstance(raw, dict):
            logger.warning("Fingerprint data is not an object")
            return None

        try:
            return FingerprintPayload.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Fingerprint data failed validation")
            logger.debug("Fingerprint validation errors: %s", exc.errors())
            return None


__all__ = ("FingerprintExtractor",)
