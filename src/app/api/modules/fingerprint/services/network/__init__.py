from app.api.modules.fingerprint.services.network.client import IpGeoClient
from app.api.modules.fingerprint.services.network.common import (
    RequestIpResolver,
    is_local_or_private_ip,
    normalize_ip,
)

__all__ = (
    "IpGeoClient",
    "RequestIpResolver",
    "is_local_or_private_ip",
    "normalize_ip",
)
