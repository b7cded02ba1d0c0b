"""The reverse sequence shared by a session's own exit and ``clean``."""
from __future__ import annotations

import logging

from aserve.core.models import PublishTarget, StepOutcome, TeardownReport

from .services import PublishServices

logger = logging.getLogger(__name__)


def teardown_publish(
    target: PublishTarget,
    services: PublishServices,
    *,
    mounted: bool = True,
    granted: bool = True,
    recorded: bool = True,
) -> TeardownReport:
    """Unmount and remove, revoke, delete the record, reload.

    Each step is independent and best-effort; the whole sequence always
    runs. The flags let an aborted session skip steps it never reached.
    Running it twice is harmless.
    """
    report = TeardownReport()

    if mounted:
        report.extend(services.mounts.unmount(target.destination))

    if granted:
        report.extend(services.grantor.revoke(target.source_path, target.home_dir).outcomes)

    if recorded:
        try:
            removed = services.records.delete(target.alias)
        except OSError as exc:
            logger.warning("Could not delete record for %s: %s", target.alias, exc)
            report.add(StepOutcome.failure("record.delete", target.alias, str(exc)))
        else:
            if removed:
                report.add(StepOutcome.success("record.delete", target.alias))
            else:
                report.add(StepOutcome.skip("record.delete", target.alias, "no record"))

    report.add(services.reloader.reload())
    return report


__all__ = ["teardown_publish"]
