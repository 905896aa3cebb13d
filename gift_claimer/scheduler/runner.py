from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.job import Job
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from loguru import logger

from gift_claimer.claims.client import ClaimClient
from gift_claimer.config import Settings
from gift_claimer.exceptions import ScheduleRuleInvalid
from gift_claimer.notifications.notifier import Notifier
from gift_claimer.scheduler.jobs import run_claim

CRON_FIELDS = ("second", "minute", "hour", "day", "month", "day_of_week")
MISFIRE_GRACE_TIME = 30  # seconds


@dataclass(frozen=True)
class ScheduleEntry:
    name: str
    rule: str
    bundle_id: int


def parse_rule(rule: str, timezone: Optional[str] = None) -> CronTrigger:
    """Parse a six-field cron rule: second minute hour day month day_of_week.

    ``day_of_week`` uses APScheduler semantics (mon-sun, 0 is Monday).
    """
    fields = rule.split()
    if len(fields) != len(CRON_FIELDS):
        raise ScheduleRuleInvalid(
            rule, f"expected {len(CRON_FIELDS)} fields, got {len(fields)}"
        )
    try:
        return CronTrigger(timezone=timezone, **dict(zip(CRON_FIELDS, fields)))
    except (ValueError, TypeError) as e:
        raise ScheduleRuleInvalid(rule, str(e)) from e


def build_schedule(settings: Settings) -> List[ScheduleEntry]:
    entries = [
        ScheduleEntry("every_10m", settings.schedule_10m, settings.bundle_id_10m),
        ScheduleEntry("every_4h", settings.schedule_4h, settings.bundle_id_4h),
    ]
    entries.extend(
        ScheduleEntry("daily", settings.schedule_daily, bundle_id)
        for bundle_id in settings.daily_fanout
    )
    return entries


class ClaimScheduler:
    """Fires claim jobs on independent cron triggers.

    Every firing runs on its own worker thread, so a slow claim for one entry
    does not delay the others. Overlapping firings of the same entry run side
    by side unless ``skip_overlapping_firings`` is set.
    """

    def __init__(
        self,
        client: ClaimClient,
        notifier: Notifier,
        max_workers: int = 20,
        max_overlap: int = 10,
        skip_overlapping_firings: bool = False,
        timezone: Optional[str] = None,
    ):
        self.client = client
        self.notifier = notifier
        self.timezone = timezone
        scheduler_kwargs = {
            "executors": {"default": ThreadPoolExecutor(max_workers)},
            "job_defaults": {
                "coalesce": False,
                "max_instances": 1 if skip_overlapping_firings else max_overlap,
                "misfire_grace_time": MISFIRE_GRACE_TIME,
            },
        }
        if timezone:
            scheduler_kwargs["timezone"] = timezone
        self._scheduler = BackgroundScheduler(**scheduler_kwargs)

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def get_jobs(self) -> List[Job]:
        return self._scheduler.get_jobs()

    def register(self, rule: str, bundle_id: int, name: str = "claim") -> Job:
        """Add a claim job for ``bundle_id`` firing on ``rule``.

        Raises:
            ScheduleRuleInvalid: if the rule cannot be parsed.
        """
        trigger = parse_rule(rule, self.timezone)
        job = self._scheduler.add_job(
            run_claim,
            trigger,
            args=(bundle_id, self.client, self.notifier),
            id=f"{name}:{bundle_id}",
            name=f"Claim {bundle_id} ({name})",
        )
        logger.info(f"Scheduled bundle ID {bundle_id} on '{rule}' ({name})")
        return job

    def start(self) -> None:
        self._scheduler.start()
        logger.info(f"Scheduler started with {len(self.get_jobs())} jobs")

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")


def create_scheduler(
    settings: Settings, client: ClaimClient, notifier: Notifier
) -> ClaimScheduler:
    scheduler = ClaimScheduler(
        client,
        notifier,
        max_workers=settings.scheduler_max_workers,
        max_overlap=settings.scheduler_max_overlap,
        skip_overlapping_firings=settings.skip_overlapping_firings,
        timezone=settings.timezone,
    )
    for entry in build_schedule(settings):
        scheduler.register(entry.rule, entry.bundle_id, entry.name)

    logger.info("Scheduler configured with jobs")
    return scheduler


def start_scheduler(
    settings: Settings, client: ClaimClient, notifier: Notifier
) -> ClaimScheduler:
    scheduler = create_scheduler(settings, client, notifier)
    scheduler.start()
    return scheduler
