"""
Assign every observation to the tidal cycle it falls in.

A tidal cycle runs from one high (or higher-high) water event up to, but not
including, the next.  Cycles are numbered from 1 in the order of the sorted
high-tide reference sequence.  Observations recorded before the first known
high tide belong to no cycle and carry ``<NA>``.
"""
from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from .time_alignment import ensure_same_offset

logger = logging.getLogger(__name__)

HIGH_TIDE_TYPES = ('HH', 'H')
"""Extremum classes that open a tidal cycle."""


def high_tide_reference(
    extrema: pd.DataFrame,
    logger: logging.Logger | None = None,
) -> pd.DatetimeIndex:
    """
    Build the sorted sequence of high-tide event times.

    Parameters
    ----------
    extrema : pd.DataFrame
        Aligned tide-extremum table with ``DateTime`` and ``Type`` columns.
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    pd.DatetimeIndex
        Times of ``HH`` and ``H`` events in ascending order.

    Raises
    ------
    ValueError
        If required columns are missing or no high tide is present.
    """
    _log = logger or logging.getLogger(__name__)

    missing = {'DateTime', 'Type'} - set(extrema.columns)
    if missing:
        raise ValueError(
            f"extrema table is missing columns: {sorted(missing)}."
        )

    highs = extrema.loc[extrema['Type'].isin(HIGH_TIDE_TYPES), 'DateTime']
    if highs.empty:
        raise ValueError('extrema table contains no high-tide events.')

    reference = pd.DatetimeIndex(highs).sort_values()
    _log.info(
        'High-tide reference: %d events from %s to %s.',
        len(reference), reference[0], reference[-1],
    )
    return reference


def assign_tide_index(
    obs_time,
    reference: pd.DatetimeIndex,
    logger: logging.Logger | None = None,
) -> pd.DataFrame:
    """
    Find the most recent preceding high tide for each observation.

    For each observation time *t* the cycle is the largest *i* with
    ``reference[i] <= t``, located by binary search over the sorted
    reference (``O(log M)`` per observation).

    Parameters
    ----------
    obs_time : array-like
        Aligned observation timestamps.
    reference : pd.DatetimeIndex
        Sorted high-tide times on the same fixed offset, as returned by
        :func:`high_tide_reference`.
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    pd.DataFrame
        One row per observation, in input order:

        ``TideIndex`` : Int64, 1-based cycle number, ``<NA>`` before the
        first high tide.
        ``HighTideTime`` : time of the cycle's opening high tide.
        ``HoursSinceHighTide`` : Int64, whole hours elapsed (truncated).
        ``MinutesSinceHighTide`` : Int64, whole minutes elapsed (truncated).

    Raises
    ------
    AlignmentError
        If the two series are not on the same fixed UTC offset.
    ValueError
        If *reference* is empty or not sorted.
    """
    _log = logger or logging.getLogger(__name__)

    obs_index = pd.DatetimeIndex(obs_time).as_unit('ns')
    reference = pd.DatetimeIndex(reference).as_unit('ns')

    if len(reference) == 0:
        raise ValueError('reference must contain at least one high tide.')
    if not reference.is_monotonic_increasing:
        raise ValueError('reference must be sorted in ascending order.')
    ensure_same_offset(obs_index, reference)

    # Rightmost insertion point minus one gives the preceding high tide
    position = np.searchsorted(
        reference.asi8, obs_index.asi8, side='right'
    ) - 1
    assigned = position >= 0

    tide_index = pd.array(
        np.where(assigned, position + 1, 0), dtype='Int64'
    )
    tide_index[~assigned] = pd.NA

    high_time = pd.Series(
        reference[np.clip(position, 0, None)]
    ).where(assigned)

    elapsed = pd.Series(obs_index) - high_time
    hours = elapsed // pd.Timedelta(hours=1)
    minutes = elapsed // pd.Timedelta(minutes=1)

    n_unassigned = int((~assigned).sum())
    if n_unassigned:
        _log.warning(
            '%d of %d observations precede the first high tide (%s) and '
            'belong to no tidal cycle.',
            n_unassigned, len(obs_index), reference[0],
        )
    _log.info(
        'Assigned %d observations to %d tidal cycles.',
        int(assigned.sum()), int(pd.Series(tide_index).nunique()),
    )

    return pd.DataFrame({
        'TideIndex': tide_index,
        'HighTideTime': high_time,
        'HoursSinceHighTide': hours.astype('Int64'),
        'MinutesSinceHighTide': minutes.astype('Int64'),
    })


def index_observations(
    observations: pd.DataFrame,
    extrema: pd.DataFrame,
    logger: logging.Logger | None = None,
) -> pd.DataFrame:
    """
    Append tidal-cycle columns to an aligned observation table.

    Parameters
    ----------
    observations : pd.DataFrame
        Aligned observation table with a ``DateTime`` column.
    extrema : pd.DataFrame
        Aligned tide-extremum table.
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    pd.DataFrame
        Copy of *observations* with the columns produced by
        :func:`assign_tide_index`.
    """
    _log = logger or logging.getLogger(__name__)

    if 'DateTime' not in observations.columns:
        raise ValueError("observations table has no 'DateTime' column.")

    reference = high_tide_reference(extrema, logger=_log)
    cycles = assign_tide_index(
        observations['DateTime'], reference, logger=_log
    )
    cycles.index = observations.index

    out = observations.copy()
    for column in cycles.columns:
        out[column] = cycles[column]
    return out
