# SPDX-License-Identifier: MIT

import datetime
import logging
import math
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.schedulers.blocking import BlockingScheduler

from lifeline.model.entry import DAILY_WORKFLOW_TYPES, PENDING_STATUS, Entry
from lifeline.model.occurrence import ReminderEvent
from lifeline.service.timeline import project
from lifeline.time import date_to_iso_str, now_local

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD_MINUTES = 15
DEFAULT_INTERVAL_SECONDS = 60

SCAN_JOB_ID = "reminder-scan"


@dataclass(frozen=True)
class RemindedSet:
    """
    Entry ids already reminded on a given day.

    A set belonging to an earlier day is discarded on the next scan, so an
    entry that recurs daily reminds again after local midnight.
    """

    day: Optional[str] = None
    entry_ids: frozenset[str] = field(default_factory=frozenset)


def minutes_until(now: datetime.datetime, minutes_of_day: int) -> int:
    """Whole minutes from now until minutes_of_day on the same day, truncated toward zero."""
    now_seconds = (
        now.hour * 3600 + now.minute * 60 + now.second + now.microsecond / 1_000_000
    )
    return math.trunc((minutes_of_day * 60 - now_seconds) / 60)


def scan_for_reminders(
    entries: list[Entry],
    now: datetime.datetime,
    reminded: RemindedSet,
    threshold_minutes: int = DEFAULT_THRESHOLD_MINUTES,
) -> tuple[list[ReminderEvent], RemindedSet]:
    """
    Find pending medication and appointment occurrences starting within
    threshold_minutes of now.

    Each entry reminds at most once per day. Returns the reminders to emit and
    the reminded set to pass into the next scan; the input set is not changed.
    """
    today = now.date()
    today_str = date_to_iso_str(today)

    reminded_ids = set(reminded.entry_ids) if reminded.day == today_str else set()

    events: list[ReminderEvent] = []
    for occurrence in project(entries, today):
        entry = occurrence["entry"]
        if entry["type"] not in DAILY_WORKFLOW_TYPES:
            continue
        if occurrence["resolved_status"] != PENDING_STATUS:
            continue
        if occurrence["minutes"] is None or occurrence["time"] is None:
            continue
        if entry["id"] is None or entry["id"] in reminded_ids:
            continue

        until = minutes_until(now, occurrence["minutes"])
        if 0 < until <= threshold_minutes:
            events.append(
                {
                    "entry_id": entry["id"],
                    "title": entry["title"],
                    "minutes_until": until,
                    "occurrence_date": occurrence["occurrence_date"],
                    "time": occurrence["time"],
                }
            )
            reminded_ids.add(entry["id"])

    return events, RemindedSet(day=today_str, entry_ids=frozenset(reminded_ids))


class ScannerState(Enum):
    IDLE = "idle"
    SCANNING = "scanning"


class ReminderScanner:
    """
    Periodic reminder sweep over the current entry snapshot.

    The scanner owns the reminded set between ticks. Ticks never overlap: a
    tick that starts while another is still scanning is skipped.
    """

    def __init__(
        self,
        entries_source: Callable[[], list[Entry]],
        sink: Callable[[ReminderEvent], None],
        clock: Callable[[], datetime.datetime] = now_local,
        threshold_minutes: int = DEFAULT_THRESHOLD_MINUTES,
        interval_seconds: int = DEFAULT_INTERVAL_SECONDS,
    ) -> None:
        self._entries_source = entries_source
        self._sink = sink
        self._clock = clock
        self.threshold_minutes = threshold_minutes
        self.interval_seconds = interval_seconds
        self.reminded = RemindedSet()
        self.state = ScannerState.IDLE
        self._lock = threading.Lock()
        self._scheduler: Optional[BaseScheduler] = None

    def tick(self) -> Optional[list[ReminderEvent]]:
        """Run one sweep. Returns the emitted reminders, or None if skipped."""
        if not self._lock.acquire(blocking=False):
            logger.debug("Reminder scan already in progress, skipping tick")
            return None

        try:
            self.state = ScannerState.SCANNING
            now = self._clock()
            events, self.reminded = scan_for_reminders(
                self._entries_source(), now, self.reminded, self.threshold_minutes
            )
            for event in events:
                logger.info(
                    "Reminder for entry %s in %s minutes",
                    event["entry_id"],
                    event["minutes_until"],
                )
                self._sink(event)
            return events
        finally:
            self.state = ScannerState.IDLE
            self._lock.release()

    def start(self, blocking: bool = False) -> None:
        """
        Scan now and then every interval_seconds.

        With blocking=True this call does not return until the scheduler is
        shut down (e.g. by KeyboardInterrupt).
        """
        scheduler: BaseScheduler = (
            BlockingScheduler() if blocking else BackgroundScheduler()
        )
        scheduler.add_job(
            self.tick,
            "interval",
            seconds=self.interval_seconds,
            id=SCAN_JOB_ID,
            max_instances=1,
            coalesce=True,
            next_run_time=datetime.datetime.now(),
        )
        self._scheduler = scheduler
        scheduler.start()

    def stop(self) -> None:
        if self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running
