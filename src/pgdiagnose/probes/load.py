from pgdiagnose.domain import ProbeOutcome, Severity

NAME = "Load"
YELLOW_LOAD = 1.0
RED_LOAD = 4.0


def check_load(load_avg_1m: float | None) -> ProbeOutcome:
    """Classify a client-reported 1-minute load average.

    The value comes with the request rather than from the database, so this
    runs after the battery instead of inside it.
    """
    if load_avg_1m is None:
        return ProbeOutcome.skipped(NAME, {"error": "load data not available"})

    if load_avg_1m >= RED_LOAD:
        severity = Severity.RED
    elif load_avg_1m >= YELLOW_LOAD:
        severity = Severity.YELLOW
    else:
        severity = Severity.GREEN
    return ProbeOutcome(name=NAME, severity=severity, findings=[{"load_avg_1m": load_avg_1m}])
