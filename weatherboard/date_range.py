from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import NamedTuple

LAST_7_DAYS = "last7days"
LAST_30_DAYS = "last30days"
LAST_90_DAYS = "last90days"
YEAR_TO_DATE = "ytd"
CUSTOM = "custom"

PRESET_DAYS = {
    LAST_7_DAYS: 7,
    LAST_30_DAYS: 30,
    LAST_90_DAYS: 90,
}
PRESET_LABELS = {
    LAST_7_DAYS: "Last 7 Days",
    LAST_30_DAYS: "Last 30 Days",
    LAST_90_DAYS: "Last 90 Days",
    YEAR_TO_DATE: "Year to Date",
}
DEFAULT_PRESET = LAST_7_DAYS

END_OF_DAY = time(23, 59, 59, 999000)


class DateRange(NamedTuple):
    start: datetime
    end: datetime
    preset: str = CUSTOM

    @property
    def is_inverted(self) -> bool:
        return self.start > self.end

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end

    def describe(self) -> str:
        if self.preset in PRESET_LABELS:
            return PRESET_LABELS[self.preset]
        return f"{self.start.date().isoformat()} to {self.end.date().isoformat()}"


def _as_datetime(value: date | datetime, tz: tzinfo | None) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min, tzinfo=tz)


def start_of_day(value: date | datetime, tz: tzinfo | None = None) -> datetime:
    moment = _as_datetime(value, tz)
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)


def end_of_day(value: date | datetime, tz: tzinfo | None = None) -> datetime:
    moment = _as_datetime(value, tz)
    return datetime.combine(moment.date(), END_OF_DAY, tzinfo=moment.tzinfo)


def resolve_preset(preset: str, now: datetime) -> DateRange:
    end = end_of_day(now)
    if preset in PRESET_DAYS:
        start = start_of_day(end.date() - timedelta(days=PRESET_DAYS[preset]), tz=now.tzinfo)
    elif preset == YEAR_TO_DATE:
        start = start_of_day(date(now.year, 1, 1), tz=now.tzinfo)
    else:
        raise ValueError(f"Unknown date range preset: {preset!r}")
    return DateRange(start, end, preset)


def resolve_custom(
    start_input: date | datetime,
    end_input: date | datetime,
    tz: tzinfo | None = None,
) -> DateRange:
    """
    Build a custom range from user-picked bounds.

    Bounds are not reordered: a start after the end gives an inverted range,
    and store queries over it return no rows.
    """
    return DateRange(start_of_day(start_input, tz=tz), end_of_day(end_input, tz=tz), CUSTOM)


def max_end_date(now: datetime) -> date:
    return now.date()


def to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def epoch_bounds(date_range: DateRange) -> tuple[float, float]:
    return to_utc(date_range.start).timestamp(), to_utc(date_range.end).timestamp()


def query_bounds(date_range: DateRange) -> tuple[str, str]:
    start = to_utc(date_range.start).isoformat(timespec="milliseconds")
    end = to_utc(date_range.end).isoformat(timespec="milliseconds")
    return start, end


class RangeSelection:
    """
    Date filter selection for one session.

    Starts on the default preset. Editing either bound switches to custom mode
    and stays there until a preset is picked again.
    """

    def __init__(self, now: datetime, preset: str = DEFAULT_PRESET):
        self.range = resolve_preset(preset, now)

    @property
    def mode(self) -> str:
        return self.range.preset

    def select_preset(self, preset: str, now: datetime) -> DateRange:
        self.range = resolve_preset(preset, now)
        return self.range

    def edit_start(self, value: date | datetime) -> DateRange:
        moment = _as_datetime(value, self.range.start.tzinfo)
        self.range = DateRange(start_of_day(moment), self.range.end, CUSTOM)
        return self.range

    def edit_end(self, value: date | datetime) -> DateRange:
        moment = _as_datetime(value, self.range.end.tzinfo)
        self.range = DateRange(self.range.start, end_of_day(moment), CUSTOM)
        return self.range
