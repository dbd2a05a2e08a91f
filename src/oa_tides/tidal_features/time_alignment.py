"""
Time alignment onto a fixed civil standard-time offset.

Sensor loggers and published tide tables disagree on time zones: one may be
recorded in local daylight time, the other in local standard time, and
neither reliably carries a zone label.  Every series is therefore
reinterpreted on a single fixed UTC offset (no daylight saving) before any
cross-series comparison is made.  The wall-clock fields are kept as
recorded; only the zone label changes.
"""
from __future__ import annotations

import logging
from datetime import timedelta, timezone

import pandas as pd

logger = logging.getLogger(__name__)

DEFAULT_UTC_OFFSET_HOURS = -8.0
"""Pacific Standard Time (UTC-8), observed year-round."""


class TimestampParseError(ValueError):
    """A timestamp could not be parsed into date and time components."""


class AlignmentError(ValueError):
    """Two time series are not expressed on the same fixed UTC offset."""


def fixed_offset(offset_hours: float = DEFAULT_UTC_OFFSET_HOURS) -> timezone:
    """Return the fixed-offset zone for *offset_hours* east of UTC."""
    if not -24.0 < offset_hours < 24.0:
        raise ValueError(
            f"offset_hours must be strictly between -24 and 24, got "
            f"{offset_hours}."
        )
    return timezone(timedelta(hours=offset_hours))


def to_fixed_offset(
    timestamps,
    offset_hours: float = DEFAULT_UTC_OFFSET_HOURS,
) -> pd.DatetimeIndex:
    """
    Reinterpret timestamps as wall-clock times on a fixed UTC offset.

    Any zone already attached to *timestamps* is discarded without
    converting the clock reading, then the fixed offset is attached.
    Applying the function to its own output returns identical instants.

    Parameters
    ----------
    timestamps : array-like
        Strings, ``datetime`` objects or a ``DatetimeIndex``.
    offset_hours : float, optional
        Hours east of UTC of the target zone (default ``-8.0``).

    Returns
    -------
    pd.DatetimeIndex
        Timestamps localized to the fixed offset.

    Raises
    ------
    TimestampParseError
        If any entry is missing or cannot be parsed.  The message names
        the first offending value and its position.
    """
    tz = fixed_offset(offset_hours)

    parsed = [_parse_one(value, position)
              for position, value in enumerate(list(timestamps))]
    # Drop zone labels (keeping wall clock), then attach the fixed offset
    wall_clock = [ts.tz_localize(None) if ts.tzinfo is not None else ts
                  for ts in parsed]
    return pd.DatetimeIndex(wall_clock).as_unit('ns').tz_localize(tz)


def align_time_series(
    table: pd.DataFrame,
    time_column: str = 'DateTime',
    offset_hours: float = DEFAULT_UTC_OFFSET_HOURS,
    logger: logging.Logger | None = None,
) -> pd.DataFrame:
    """
    Return a copy of *table* with its time column on the fixed offset.

    Parameters
    ----------
    table : pd.DataFrame
        Observation or tide-extremum table.
    time_column : str, optional
        Name of the column holding timestamps (default ``"DateTime"``).
    offset_hours : float, optional
        Target fixed offset in hours east of UTC (default ``-8.0``).
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    pd.DataFrame
        Copy sorted by the aligned time, with ``RawDateTime`` holding the
        values as loaded and ``DateTime`` the aligned timestamps.  The
        index is reset.

    Raises
    ------
    ValueError
        If *time_column* is absent.
    TimestampParseError
        If a timestamp cannot be parsed.
    """
    _log = logger or logging.getLogger(__name__)

    if time_column not in table.columns:
        raise ValueError(f"Column '{time_column}' not found in table.")

    aligned = to_fixed_offset(table[time_column].to_numpy(), offset_hours)

    out = table.copy()
    out['RawDateTime'] = table[time_column].to_numpy()
    if time_column != 'DateTime':
        out = out.drop(columns=[time_column])
    out['DateTime'] = aligned
    out = out.sort_values('DateTime', kind='stable').reset_index(drop=True)

    _log.info(
        'Aligned %d timestamps to UTC%+.1f (%s to %s).',
        len(out), offset_hours,
        out['DateTime'].min() if len(out) else None,
        out['DateTime'].max() if len(out) else None,
    )
    return out


def ensure_same_offset(first, second) -> None:
    """
    Check that two timestamp collections share one fixed UTC offset.

    Raises
    ------
    AlignmentError
        If either side is zone-naive or the offsets differ.
    """
    first_offset = _utc_offset(first)
    second_offset = _utc_offset(second)
    if first_offset is None or second_offset is None:
        raise AlignmentError(
            'Both series must be aligned to a fixed UTC offset before they '
            'are compared; got a zone-naive series.'
        )
    if first_offset != second_offset:
        raise AlignmentError(
            f"Series are on different UTC offsets ({first_offset} vs "
            f"{second_offset})."
        )


def _parse_one(value, position: int) -> pd.Timestamp:
    """Parse a single timestamp or raise :class:`TimestampParseError`."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        raise TimestampParseError(
            f"Missing timestamp at row {position}."
        )
    try:
        parsed = pd.Timestamp(value)
    except (ValueError, TypeError, OverflowError) as err:
        raise TimestampParseError(
            f"Cannot parse timestamp {value!r} at row {position}: {err}"
        ) from err
    if pd.isna(parsed):
        raise TimestampParseError(
            f"Cannot parse timestamp {value!r} at row {position}."
        )
    return parsed


def _utc_offset(timestamps) -> timedelta | None:
    """Return the fixed UTC offset of *timestamps*, or ``None`` if naive."""
    index = pd.DatetimeIndex(timestamps)
    if index.tz is None:
        return None
    if len(index) == 0:
        return index.tz.utcoffset(None)
    offsets = {ts.utcoffset() for ts in index}
    if len(offsets) != 1:
        raise AlignmentError(
            f"Series mixes several UTC offsets ({sorted(offsets)}); align it "
            f"to a fixed offset first."
        )
    return offsets.pop()
