"""
Hi/lo tide extrema from a continuous water level record.

Used when a station publishes verified water levels but no hi/lo table.
Local maxima and minima are located with :func:`scipy.signal.argrelextrema`
under a minimum-separation constraint, then labelled with the CO-OPS hi/lo
codes (``HH``, ``H``, ``L``, ``LL``) day by day.
"""
from __future__ import annotations

import logging

import numpy as np
import pandas as pd
from scipy.signal import argrelextrema

logger = logging.getLogger(__name__)


def extract_water_level_extrema(
    time: np.ndarray,
    water_level: np.ndarray,
    min_separation_hours: float = 4.0,
    logger: logging.Logger | None = None,
) -> dict:
    """
    Extract high-water and low-water extrema from a water level series.

    Parameters
    ----------
    time : np.ndarray
        Timestamps (datetime64 or DatetimeIndex), roughly equally spaced.
    water_level : np.ndarray
        Water level values.  NaN samples are never picked as extrema.
    min_separation_hours : float, optional
        Minimum time between consecutive extrema of the same type
        (default 4.0 hours).
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    dict
        ``"high_water_times"`` : timestamps of high water.
        ``"high_water_amplitudes"`` : np.ndarray of water levels at HW.
        ``"low_water_times"`` : timestamps of low water.
        ``"low_water_amplitudes"`` : np.ndarray of water levels at LW.

    Raises
    ------
    ValueError
        If *time* and *water_level* have different lengths or fewer than
        3 points.
    """
    _log = logger or logging.getLogger(__name__)

    time = pd.DatetimeIndex(time).as_unit('ns')
    water_level = np.asarray(water_level, dtype=float)

    if len(time) != len(water_level):
        raise ValueError(
            f"time ({len(time)}) and water_level ({len(water_level)}) must "
            f"have the same length."
        )
    if len(time) < 3:
        raise ValueError('At least 3 data points are required.')

    dt_hours = _median_dt_hours(time)
    order = max(1, int(min_separation_hours / dt_hours))

    # NaN compares False both ways, so gaps never produce extrema
    hw_idx = argrelextrema(water_level, np.greater, order=order)[0]
    lw_idx = argrelextrema(water_level, np.less, order=order)[0]

    _log.info(
        'Extrema extraction: %d HW, %d LW (order=%d samples, dt=%.3f h).',
        len(hw_idx), len(lw_idx), order, dt_hours,
    )

    return {
        'high_water_times': time[hw_idx],
        'high_water_amplitudes': water_level[hw_idx],
        'low_water_times': time[lw_idx],
        'low_water_amplitudes': water_level[lw_idx],
    }


def classify_extrema(
    time,
    water_level: np.ndarray,
    kind: str,
) -> np.ndarray:
    """
    Label highs or lows with hi/lo codes, one calendar day at a time.

    The highest high of a day is ``HH`` and any other high ``H``; the
    lowest low of a day is ``LL`` and any other low ``L``.

    Parameters
    ----------
    time : array-like
        Event timestamps; calendar days follow their wall clock.
    water_level : np.ndarray
        Water level at each event.
    kind : str
        ``"high"`` or ``"low"``.

    Returns
    -------
    np.ndarray
        Object array of codes, in input order.
    """
    if kind not in ('high', 'low'):
        raise ValueError(f"kind must be 'high' or 'low', got '{kind}'.")

    events = pd.DataFrame({
        'Date': pd.DatetimeIndex(time).date,
        'WaterLevel': np.asarray(water_level, dtype=float),
    })
    by_day = events.groupby('Date')['WaterLevel']
    # idxmax/idxmin pick the first event of the day on ties
    if kind == 'high':
        dominant = by_day.transform('idxmax').to_numpy()
        codes = np.where(events.index == dominant, 'HH', 'H')
    else:
        dominant = by_day.transform('idxmin').to_numpy()
        codes = np.where(events.index == dominant, 'LL', 'L')
    return codes.astype(object)


def build_extrema_table(
    time,
    water_level: np.ndarray,
    min_separation_hours: float = 4.0,
    logger: logging.Logger | None = None,
) -> pd.DataFrame:
    """
    Build a hi/lo tide-extremum table from a water level record.

    Parameters
    ----------
    time : array-like
        Aligned water level timestamps.
    water_level : np.ndarray
        Water level values.
    min_separation_hours : float, optional
        Minimum separation between extrema of the same type (default 4.0).
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    pd.DataFrame
        Columns ``DateTime``, ``WaterLevel``, ``Type``, sorted by time.
    """
    _log = logger or logging.getLogger(__name__)

    found = extract_water_level_extrema(
        time, water_level, min_separation_hours=min_separation_hours,
        logger=_log,
    )
    highs = pd.DataFrame({
        'DateTime': found['high_water_times'],
        'WaterLevel': found['high_water_amplitudes'],
        'Type': classify_extrema(found['high_water_times'],
                                 found['high_water_amplitudes'], 'high'),
    })
    lows = pd.DataFrame({
        'DateTime': found['low_water_times'],
        'WaterLevel': found['low_water_amplitudes'],
        'Type': classify_extrema(found['low_water_times'],
                                 found['low_water_amplitudes'], 'low'),
    })

    table = pd.concat([highs, lows], ignore_index=True)
    table = table.sort_values('DateTime', kind='stable').reset_index(drop=True)
    _log.info('Extrema table: %d events over %d days.',
              len(table), table['DateTime'].dt.date.nunique())
    return table


def _median_dt_hours(time: pd.DatetimeIndex) -> float:
    """Estimate the median sampling interval in hours."""
    diffs = np.diff(time.asi8)
    return float(np.median(diffs)) / 3.6e12  # ns to hours
