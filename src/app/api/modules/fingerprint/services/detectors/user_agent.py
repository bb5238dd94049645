import re

BOT_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"bot",
        r"crawler",
        r"spider",
        r"scraper",
        r"headless",
        r"phantom",
        r"selenium",
        r"puppeteer",
    )
)

# The last entry was written as a "chromium AND headless" rule but has always
# evaluated to the headless pattern alone. Kept as-is until product decides
# whether a conjunctive rule was intended.
AUTOMATION_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"webdriver",
        r"automation",
        r"chrome-automation",
        r"headless",
    )
)

VPN_KEYWORD_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"vpn",
        r"proxy",
        r"tunnel",
        r"anonymous",
    )
)


def matches_any(value: str, patterns: tuple[re.Pattern[str], ...]) -> bool:
    return any(pattern.search(value) for pattern in patterns)


def detect_bot(user_agent: str) -> bool:
    return matches_any(user_agent, BOT_PATTERNS)


def detect_automation(user_agent: str) -> bool:
    return matches_any(user_agent, AUTOMATION_PATTERNS)


def detect_vpn_indicators(user_agent: str) -> bool:
    return matches_any(user_agent, VPN_KEYWORD_PATTERNS)


__all__ = (
    "AUTOMATION_PATTERNS",
    "BOT_PATTERNS",
    "VPN_KEYWORD_PATTERNS",
    "detect_automation",
    "detect_bot",
    "detect_vpn_indicators",
    "matches_any",
)
