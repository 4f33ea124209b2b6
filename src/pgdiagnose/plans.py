from pgdiagnose.domain import Plan

_TIER_PREFIXES = ("enterprise-", "premium-", "standard-", "hobby-")

_CONNECTION_LIMITS: dict[str, int] = {
    "dev": 20,
    "basic": 20,
    "crane": 60,
    "yanari": 60,
    "kappa": 120,
    "0": 120,
    "ronin": 200,
    "tengu": 200,
    "fugu": 200,
    "ika": 400,
    "2": 400,
    "zilla": 500,
    "baku": 500,
    "mecha": 500,
    "ryu": 500,
    "4": 500,
    "5": 500,
    "6": 500,
    "7": 500,
}


def _trim_tier(name: str) -> str:
    for prefix in _TIER_PREFIXES:
        name = name.removeprefix(prefix)
    return name


def get_plan(name: str) -> Plan:
    """Look up the connection limit for a plan name.

    Unknown names map to a zero limit, which the connection count probe
    reports as red.
    """
    return Plan(connection_limit=_CONNECTION_LIMITS.get(_trim_tier(name), 0))
