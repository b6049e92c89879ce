from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, time
from typing import Optional, Sequence

from ..common.datetime_utils import format_date, format_hhmm, minutes_between
from ..common.validators import require_lunch_minutes
from ..core.constants import DEFAULT_LOG_LIMIT, DEFAULT_SOURCE
from ..core.enums import EventKind, Location, PairingMode
from ..core.exceptions import InvalidPositionError, InvalidTimeError, NoEventsForDateError, ValidationError
from ..core.work_config import WorkConfig
from ..days.aggregator import aggregate_day_position, day_bounds, distinct_locations, latest_out_lunch
from ..days.model import DayRecord
from ..events.model import Event, LogEntry, sort_events
from ..events.repository import EventStore
from ..summary.expected import parse_lunch_window
from ..timeline.pairing import assign_pairs, pair_by_index

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PairPatch:
    """Fields to change on one pair; None means "leave as is"."""

    position: Optional[Location] = None
    start: Optional[time] = None
    end: Optional[time] = None
    lunch: Optional[int] = None

    def is_empty(self) -> bool:
        return self.position is None and self.start is None and self.end is None and self.lunch is None


def _describe(event: Event) -> str:
    return f"{event.kind.value.upper()} {format_date(event.date)} {format_hhmm(event.time)}"


def _reject_mixed(position: Optional[Location]) -> None:
    if position == Location.MIXED:
        raise InvalidPositionError("Position 'M' (Mixed) is derived and cannot be set on a punch")


class PunchService:
    """Add, edit and delete punches, keeping pairs and the day aggregate in sync.

    Every operation runs in one store transaction: the change, the pair
    recomputation, the day aggregate and the audit row commit together or
    not at all.
    """

    def __init__(self, store: EventStore, config: WorkConfig, *, source: str = DEFAULT_SOURCE):
        self._store = store
        self._config = config
        self._source = source

    # -------- Add --------
    def apply_add(
        self,
        day: date,
        *,
        position: Optional[Location] = None,
        start: Optional[time] = None,
        end: Optional[time] = None,
        lunch: Optional[int] = None,
    ) -> Optional[DayRecord]:
        _reject_mixed(position)
        lunch = require_lunch_minutes(lunch)
        if start is None and end is None and lunch is None:
            raise InvalidTimeError("Nothing to add: provide a start time, an end time or a lunch value")
        if start is not None and end is not None and end <= start:
            raise InvalidTimeError(
                f"End time {format_hhmm(end)} must be after start time {format_hhmm(start)}"
            )

        def _tx(tx: EventStore) -> Optional[DayRecord]:
            events = list(tx.load_events(day))
            if start is None and end is None:
                changed = self._set_latest_lunch(tx, day, events, lunch)
                messages = [f"lunch {lunch}m on {_describe(changed)}"]
            elif end is None:
                in_event = self._insert(tx, day, EventKind.IN, start, position or self._config.default_position, lunch)
                messages = [f"added {_describe(in_event)}"]
                adjusted = self._auto_lunch(tx, events, in_event)
                if adjusted is not None:
                    messages.append(f"auto lunch {adjusted.lunch}m on {_describe(adjusted)}")
            elif start is None:
                out_event = self._close_open_in(tx, day, events, end, position, lunch)
                messages = [f"added {_describe(out_event)}"]
            else:
                location = position or self._config.default_position
                in_event = self._insert(tx, day, EventKind.IN, start, location, None)
                out_event = self._insert(tx, day, EventKind.OUT, end, location, lunch)
                messages = [f"added {_describe(in_event)}", f"added {_describe(out_event)}"]
                adjusted = self._auto_lunch(tx, events, in_event)
                if adjusted is not None:
                    messages.append(f"auto lunch {adjusted.lunch}m on {_describe(adjusted)}")

            record = self._recompute(tx, day)
            for message in messages:
                tx.append_log(operation="add", target=format_date(day), message=message)
            return record

        record = self._store.run_in_transaction(_tx)
        logger.info("add on %s committed", format_date(day))
        return record

    def _set_latest_lunch(self, tx: EventStore, day: date, events: Sequence[Event], lunch: int) -> Event:
        if not events:
            raise NoEventsForDateError(format_date(day))
        latest = sort_events(events)[-1]
        changed = replace(latest, lunch_minutes=lunch)
        tx.update_event(changed)
        return changed

    def _close_open_in(
        self,
        tx: EventStore,
        day: date,
        events: Sequence[Event],
        end: time,
        position: Optional[Location],
        lunch: Optional[int],
    ) -> Event:
        open_ins = [p.event for p in assign_pairs(events) if p.unmatched and p.event.is_in]
        if not open_ins:
            raise InvalidTimeError(f"No open IN on {format_date(day)} to close at {format_hhmm(end)}")
        last_in = open_ins[-1]
        if end <= last_in.time:
            raise InvalidTimeError(
                f"End time {format_hhmm(end)} must be after the open IN at {format_hhmm(last_in.time)}"
            )
        return self._insert(tx, day, EventKind.OUT, end, position or last_in.location, lunch)

    def _auto_lunch(self, tx: EventStore, events: Sequence[Event], in_event: Event) -> Optional[Event]:
        """Store the break before a new IN as lunch on the OUT that started it.

        Only when enabled, when that OUT falls inside the lunch window and has
        no lunch yet, and never for holidays.
        """
        if not self._config.auto_lunch or in_event.location == Location.HOLIDAY:
            return None

        earlier_outs = [e for e in events if e.is_out and e.time <= in_event.time]
        if not earlier_outs:
            return None
        out_event = sort_events(earlier_outs)[-1]
        if out_event.lunch or out_event.location == Location.HOLIDAY:
            return None

        window_start, window_end = parse_lunch_window(self._config.lunch_window)
        if not window_start <= out_event.time <= window_end:
            return None

        gap = minutes_between(out_event.time, in_event.time)
        if gap <= 0:
            return None
        lunch = min(max(gap, self._config.min_lunch), self._config.max_lunch)
        adjusted = replace(out_event, lunch_minutes=lunch)
        tx.update_event(adjusted)
        return adjusted

    # -------- Edit --------
    def apply_edit(self, day: date, pair_index: int, patch: PairPatch) -> Optional[DayRecord]:
        if patch.is_empty():
            raise ValidationError("Nothing to edit: provide position, start, end or lunch")
        _reject_mixed(patch.position)
        lunch = require_lunch_minutes(patch.lunch)

        def _tx(tx: EventStore) -> Optional[DayRecord]:
            events = tx.load_events(day)
            if not events:
                raise NoEventsForDateError(format_date(day))
            target = pair_by_index(events, pair_index)

            in_event = target.in_event
            out_event = target.out_event
            if in_event is not None:
                in_event = replace(
                    in_event,
                    time=patch.start or in_event.time,
                    location=patch.position or in_event.location,
                )
            elif patch.start is not None:
                in_event = self._new_event(
                    day, EventKind.IN, patch.start, patch.position or out_event.location, None
                )
            if out_event is not None:
                out_event = replace(
                    out_event,
                    time=patch.end or out_event.time,
                    location=patch.position or out_event.location,
                )
            elif patch.end is not None:
                out_event = self._new_event(
                    day, EventKind.OUT, patch.end, patch.position or in_event.location, None
                )

            if in_event is not None and out_event is not None and out_event.time <= in_event.time:
                raise InvalidTimeError(
                    f"End time {format_hhmm(out_event.time)} must be after start time {format_hhmm(in_event.time)}"
                )

            if lunch is not None:
                if out_event is not None:
                    out_event = replace(out_event, lunch_minutes=lunch)
                else:
                    in_event = replace(in_event, lunch_minutes=lunch)

            for event in (in_event, out_event):
                if event is None:
                    continue
                if event.is_persisted:
                    tx.update_event(event)
                else:
                    tx.insert_event(event)

            record = self._recompute(tx, day)
            tx.append_log(
                operation="edit",
                target=format_date(day),
                message=f"edited pair {pair_index}: "
                + ", ".join(_describe(e) for e in (in_event, out_event) if e is not None),
            )
            return record

        record = self._store.run_in_transaction(_tx)
        logger.info("edit of pair %s on %s committed", pair_index, format_date(day))
        return record

    # -------- Delete --------
    def apply_delete(self, day: date, pair_index: Optional[int] = None) -> Optional[DayRecord]:
        def _tx(tx: EventStore) -> Optional[DayRecord]:
            events = tx.load_events(day)
            if not events:
                raise NoEventsForDateError(format_date(day))

            if pair_index is None:
                removed = tx.delete_events_for_date(day)
                survivors: list[Event] = []
                message = f"deleted all {removed} events"
            else:
                target = pair_by_index(events, pair_index)
                doomed = {e.id for e in target.events}
                for event_id in doomed:
                    tx.delete_event(event_id)
                survivors = [e for e in events if e.id not in doomed]
                message = f"deleted pair {pair_index}: " + ", ".join(_describe(e) for e in target.events)

            self._write_pairs(tx, survivors, PairingMode.LENIENT)
            record = self._refresh_after_delete(tx, day, survivors)
            tx.append_log(operation="del", target=format_date(day), message=message)
            return record

        record = self._store.run_in_transaction(_tx)
        logger.info("delete on %s committed (pair=%s)", format_date(day), pair_index or "all")
        return record

    def _refresh_after_delete(self, tx: EventStore, day: date, survivors: Sequence[Event]) -> Optional[DayRecord]:
        if not survivors:
            tx.delete_day(day)
            return None

        previous = tx.get_day(day)
        locations = distinct_locations(survivors)
        if len(locations) == 1:
            position = next(iter(locations))
        elif previous is not None:
            # A day that is legitimately mixed keeps its stored code.
            position = previous.position
        else:
            position = Location.MIXED

        start_time, end_time = day_bounds(survivors)
        record = DayRecord(
            date=day,
            position=position,
            start_time=start_time,
            end_time=end_time,
            lunch_minutes=latest_out_lunch(survivors) or 0,
        )
        tx.upsert_day(record)
        return record

    # -------- Maintenance --------
    def rebuild_all(self) -> int:
        """Recompute stored pairs and day aggregates for every date; returns the number of dates."""

        def _tx(tx: EventStore) -> int:
            dates = tx.list_dates()
            for day in dates:
                events = tx.load_events(day)
                self._write_pairs(tx, events, PairingMode.LENIENT)
                self._refresh_day(tx, day, events)
            tx.append_log(operation="rebuild", target="*", message=f"rebuilt {len(dates)} days")
            return len(dates)

        count = self._store.run_in_transaction(_tx)
        logger.info("rebuilt %d days", count)
        return count

    def list_log(self, limit: int = DEFAULT_LOG_LIMIT) -> Sequence[LogEntry]:
        return self._store.list_log(max(int(limit), 1))

    # -------- Internals --------
    def _new_event(
        self,
        day: date,
        kind: EventKind,
        at: time,
        location: Location,
        lunch: Optional[int],
    ) -> Event:
        return Event(
            id=0,
            date=day,
            time=at,
            kind=kind,
            location=location,
            lunch_minutes=lunch,
            source=self._source,
        )

    def _insert(
        self,
        tx: EventStore,
        day: date,
        kind: EventKind,
        at: time,
        location: Location,
        lunch: Optional[int],
    ) -> Event:
        event = self._new_event(day, kind, at, location, lunch)
        return replace(event, id=tx.insert_event(event))

    def _recompute(self, tx: EventStore, day: date) -> Optional[DayRecord]:
        """Strict pair recomputation plus day aggregate, after add or edit."""
        events = tx.load_events(day)
        self._write_pairs(tx, events, PairingMode.STRICT)
        return self._refresh_day(tx, day, events)

    def _write_pairs(self, tx: EventStore, events: Sequence[Event], mode: PairingMode) -> None:
        stored = {e.id: e.pair for e in events}
        for paired in assign_pairs(events, mode):
            if stored.get(paired.event.id) != paired.pair:
                tx.set_pair(paired.event.id, paired.pair)

    def _refresh_day(self, tx: EventStore, day: date, events: Sequence[Event]) -> Optional[DayRecord]:
        position = aggregate_day_position(events)
        if position is None:
            tx.delete_day(day)
            return None

        start_time, end_time = day_bounds(events)
        record = DayRecord(
            date=day,
            position=position,
            start_time=start_time,
            end_time=end_time,
            lunch_minutes=latest_out_lunch(events) or 0,
        )
        tx.upsert_day(record)
        return record
