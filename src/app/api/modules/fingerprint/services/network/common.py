from ipaddress import ip_address

from starlette.requests import Request

from app.settings import FingerprintConfig


def normalize_ip(value: str | None) -> str | None:
    if not value:
        return None

    candidate = value.split(",", 1)[0].strip()
    try:
        return str(ip_address(candidate))
    except ValueError:
        return None


def is_local_or_private_ip(value: str | None) -> bool:
    if not value:
        return True
    try:
        address = ip_address(value)
    except ValueError:
        return True
    return address.is_private or address.is_loopback or address.is_link_local


class RequestIpResolver:
    def __init__(self, config: FingerprintConfig):
        self._trust_forwarded_ip = config.trust_forwarded_ip

    def get_request_ip(self, request: Request) -> str | None:
        if self._trust_forwarded_ip:
            for header in ("cf-connecting-ip", "x-forwarded-for", "x-real-ip"):
                value = request.headers.get(header)
                ip = normalize_ip(value)
                if ip:
                    return ip

        if request.client and request.client.host:
            return normalize_ip(request.client.host)

        return None


__all__ = (
    "RequestIpResolver",
    "is_local_or_private_ip",
    "normalize_ip",
)
