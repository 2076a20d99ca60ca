# ===== bookly/services/availability/availability_service.py =====
from typing import List, NamedTuple, Optional
from datetime import date, datetime, time
from uuid import UUID
from sqlalchemy.orm import Session
from bookly.core.constants import MINUTES_PER_DAY
from bookly.core.exceptions import AvailabilityBlockNotFound, InvalidAvailabilityBlock
from bookly.models.availability import AvailabilityBlock
from bookly.repositories.availability_repository import AvailabilityRepository
import logging

logger = logging.getLogger(__name__)


class TimeWindow(NamedTuple):
    """Half-open window [start_minute, end_minute) in minutes since midnight"""
    start_minute: int
    end_minute: int

    def covers(self, start_minute: int, end_minute: int) -> bool:
        return start_minute >= self.start_minute and end_minute <= self.end_minute

    def to_dict(self):
        return {"start": self.start_minute, "end": self.end_minute}


FULL_DAY = TimeWindow(0, MINUTES_PER_DAY)

NULLABLE_BLOCK_FIELDS = ("date", "day_of_week", "reason")


def parse_time_string(value: str) -> int:
    """'HH:MM' -> minutes since midnight ('24:00' is 1440)"""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minute_of_day(value: datetime) -> int:
    return value.hour * 60 + value.minute


class AvailabilityService:
    """Resolves the windows a staff member works in on a given date"""

    @staticmethod
    def windows_for(
            db: Session,
            business_id: UUID,
            staff_id: UUID,
            on_date: date
    ) -> List[TimeWindow]:
        """
        Windows for one staff member on one date:
        1. Any override dated on_date replaces the weekly template for that date,
           even when every override is a day off and no window remains
        2. Otherwise the weekly template rows for that weekday
        3. No rows at all: available all day
        """
        windows = AvailabilityService._restricted_windows(db, business_id, staff_id, on_date)
        if windows is None:
            return [FULL_DAY]
        return windows

    @staticmethod
    def is_available_during(
            db: Session,
            business_id: UUID,
            staff_id: UUID,
            start: datetime,
            end: datetime
    ) -> bool:
        """
        True if [start, end) lies entirely inside a single window of start's date.
        A staff member with no rows for that date is available for any interval,
        including one that runs past midnight.
        """
        windows = AvailabilityService._restricted_windows(db, business_id, staff_id, start.date())
        if windows is None:
            return True

        start_minute, end_minute = AvailabilityService._interval_minutes(start, end)

        return any(window.covers(start_minute, end_minute) for window in windows)

    @staticmethod
    def _restricted_windows(
            db: Session,
            business_id: UUID,
            staff_id: UUID,
            on_date: date
    ) -> Optional[List[TimeWindow]]:
        """Windows from the rows that apply on on_date; None when no row applies"""
        blocks = AvailabilityRepository.get_blocks_for_day(db, business_id, staff_id, on_date)

        overrides = [block for block in blocks if block.is_override]
        if overrides:
            logger.debug(f"Staff {staff_id} has {len(overrides)} override(s) on {on_date}")
            return AvailabilityService._to_windows(
                [block for block in overrides if block.is_available]
            )

        template = [block for block in blocks if not block.is_override]
        if not template:
            return None

        return AvailabilityService._to_windows(template)

    @staticmethod
    def _interval_minutes(start: datetime, end: datetime) -> tuple:
        """
        Minutes since start's midnight for both ends. An end on a later day
        lands past 1440 and so never fits a configured window.
        """
        midnight = datetime.combine(start.date(), time.min, tzinfo=start.tzinfo)
        end_minute = int((end - midnight).total_seconds() // 60)
        return minute_of_day(start), end_minute

    @staticmethod
    def _to_windows(blocks: List[AvailabilityBlock]) -> List[TimeWindow]:
        windows = {
            TimeWindow(parse_time_string(block.start_time), parse_time_string(block.end_time))
            for block in blocks
        }
        return sorted(windows)

    # ------------------------------------------------------------------------
    # Block management
    # ------------------------------------------------------------------------

    @staticmethod
    def update_block(
            db: Session,
            business_id: UUID,
            block_id: UUID,
            **changes
    ) -> AvailabilityBlock:
        """
        Apply a partial update. The merged row must still be a valid template
        or override row; the stored row is untouched otherwise.
        """
        block = AvailabilityRepository.get_block(db, business_id, block_id)
        if not block:
            raise AvailabilityBlockNotFound()

        changes = {
            key: value for key, value in changes.items()
            if value is not None or key in NULLABLE_BLOCK_FIELDS
        }
        merged = {**block.to_dict(), **changes}
        if isinstance(merged["date"], str):
            merged["date"] = date.fromisoformat(merged["date"])
        AvailabilityService._check_block(merged)

        block = AvailabilityRepository.update_block(db, block, **changes)
        logger.info(f"Updated availability block {block.id} for staff {block.staff_id}")
        return block

    @staticmethod
    def delete_block(db: Session, business_id: UUID, block_id: UUID) -> None:
        block = AvailabilityRepository.get_block(db, business_id, block_id)
        if not block:
            raise AvailabilityBlockNotFound()

        AvailabilityRepository.delete_block(db, block)
        logger.info(f"Deleted availability block {block_id}")

    @staticmethod
    def _check_block(values: dict) -> None:
        if parse_time_string(values["end_time"]) <= parse_time_string(values["start_time"]):
            raise InvalidAvailabilityBlock("endTime must be greater than startTime")

        if values["is_override"]:
            if values["date"] is None or values["day_of_week"] is not None:
                raise InvalidAvailabilityBlock("Overrides require an exact date and no day_of_week.")
        else:
            if values["date"] is not None or values["day_of_week"] is None:
                raise InvalidAvailabilityBlock("Weekly templates require day_of_week and no date.")
            if not values["is_available"]:
                raise InvalidAvailabilityBlock("Only overrides can mark a day off.")
