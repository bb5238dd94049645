from app.api.modules.fingerprint.services.scoring.decision import decide
from app.api.modules.fingerprint.services.scoring.geo import (
    calculate_location_risk,
    location_flags,
)
from app.api.modules.fingerprint.services.scoring.risk import (
    calculate_risk_score,
    generate_flags,
    risk_level_for_score,
)

__all__ = (
    "calculate_location_risk",
    "calculate_risk_score",
    "decide",
    "generate_flags",
    "location_flags",
    "risk_level_for_score",
)
