import logging

from pgdiagnose.db import open_connection
from pgdiagnose.domain import Plan, Report
from pgdiagnose.probes import ProbeBattery

logger = logging.getLogger(__name__)


async def run_battery(
    dsn: str,
    plan: Plan,
    battery: ProbeBattery | None = None,
    connect_timeout: float = 10.0,
    command_timeout: float | None = None,
) -> Report:
    """Open ``dsn`` and run the probe battery on it.

    Raises:
        ConnectionFailedError: If the target cannot be opened or pinged. No
            probe runs in that case.
    """
    battery = battery or ProbeBattery.default()
    async with open_connection(dsn, connect_timeout, command_timeout) as conn:
        report = await battery.run(conn, plan)
    logger.info("Probe battery finished with %d outcomes", len(report))
    return report
