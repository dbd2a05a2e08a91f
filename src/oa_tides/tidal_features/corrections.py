"""
Manual corrections to the published hi/lo tide record.

The downloaded hi/lo table has no entries at all for 2019-03-10, the day
clocks moved to daylight time.  The four extrema for that day were read off
the station's printed tide table (local standard time, feet above MLLW) and
are supplied here verbatim.
"""
from __future__ import annotations

import logging

import pandas as pd

from .time_alignment import (
    DEFAULT_UTC_OFFSET_HOURS,
    ensure_same_offset,
    to_fixed_offset,
)

logger = logging.getLogger(__name__)

MISSING_DAY_PATCH: tuple[tuple[str, float, str], ...] = (
    ('2019-03-10 05:24', 9.30, 'HH'),
    ('2019-03-10 11:47', 4.05, 'L'),
    ('2019-03-10 16:58', 8.41, 'H'),
    ('2019-03-10 23:36', 1.15, 'LL'),
)
"""``(wall-clock time, water level, type)`` rows for the missing day."""


def apply_missing_day_patch(
    extrema: pd.DataFrame,
    patch: tuple[tuple[str, float, str], ...] = MISSING_DAY_PATCH,
    offset_hours: float = DEFAULT_UTC_OFFSET_HOURS,
    logger: logging.Logger | None = None,
) -> pd.DataFrame:
    """
    Insert manually supplied extrema for days absent from the record.

    A patch day is a gap only when it falls strictly between the first and
    last days of *extrema* and has no extrema of its own.  Other patch days
    are skipped with an INFO message, so the patch never extends a record
    past its own span and re-applying it changes nothing.

    Parameters
    ----------
    extrema : pd.DataFrame
        Aligned tide-extremum table (``DateTime``, ``WaterLevel``,
        ``Type``).
    patch : tuple of (str, float, str), optional
        Literal rows to insert (default :data:`MISSING_DAY_PATCH`).
    offset_hours : float, optional
        Fixed UTC offset of the patch wall-clock times; must match the
        offset *extrema* was aligned to.
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    pd.DataFrame
        Copy of *extrema* with the rows for gap days appended, sorted by
        time.

    Raises
    ------
    ValueError
        If *patch* is empty.
    AlignmentError
        If *extrema* is not on the offset the patch rows are aligned to.
    """
    _log = logger or logging.getLogger(__name__)

    if not patch:
        raise ValueError('patch must contain at least one row.')

    times, levels, types = zip(*patch)
    rows = pd.DataFrame({
        'RawDateTime': list(times),
        'DateTime': to_fixed_offset(times, offset_hours),
        'WaterLevel': [float(level) for level in levels],
        'Type': list(types),
    })

    if extrema.empty:
        _log.info('Extrema table is empty; manual patch skipped.')
        return extrema.copy()

    ensure_same_offset(rows['DateTime'], extrema['DateTime'])

    existing_days = set(pd.DatetimeIndex(extrema['DateTime']).date)
    first_day, last_day = min(existing_days), max(existing_days)
    row_days = list(rows['DateTime'].dt.date)

    outside = sorted({d for d in row_days if not first_day < d < last_day})
    present = sorted({
        d for d in row_days if first_day < d < last_day and d in existing_days
    })
    if outside:
        _log.info(
            'Patch day(s) outside the record %s to %s, skipped: %s.',
            first_day, last_day, ', '.join(str(d) for d in outside),
        )
    if present:
        _log.info(
            'Patch day(s) already in the record, skipped: %s.',
            ', '.join(str(d) for d in present),
        )

    keep = [d not in outside and d not in present for d in row_days]
    rows = rows[keep]
    if rows.empty:
        return extrema.copy()

    out = pd.concat([extrema, rows], ignore_index=True)
    out = out.sort_values('DateTime', kind='stable').reset_index(drop=True)

    _log.info(
        'Patched %d extrema for %s.',
        len(rows),
        ', '.join(str(d) for d in sorted(set(rows['DateTime'].dt.date))),
    )
    return out
