"""
Daily tidal range from hi/lo tide extrema.

A mixed semidiurnal tide can have up to two highs and two lows a day.  The
day's high side is the mean higher-high level, falling back to the mean high
level only when no higher-high was recorded that day; the low side uses
lower-low with low as the fallback.  The two classes are never averaged
together.
"""
from __future__ import annotations

import logging

import pandas as pd

logger = logging.getLogger(__name__)

EXTREMUM_TYPES = ('HH', 'H', 'L', 'LL')
"""CO-OPS hi/lo codes: higher high, high, low, lower low."""

SEASONS: dict[int, str] = {
    12: 'Winter', 1: 'Winter', 2: 'Winter',
    3: 'Spring', 4: 'Spring', 5: 'Spring',
    6: 'Summer', 7: 'Summer', 8: 'Summer',
    9: 'Fall', 10: 'Fall', 11: 'Fall',
}


def season_from_month(month: int) -> str:
    """Return the meteorological season for a calendar month (1-12)."""
    try:
        return SEASONS[int(month)]
    except (KeyError, TypeError, ValueError) as err:
        raise ValueError(f"month must be in 1..12, got {month!r}.") from err


def daily_tidal_range(
    extrema: pd.DataFrame,
    drop_undefined: bool = True,
    logger: logging.Logger | None = None,
) -> pd.DataFrame:
    """
    Collapse tide extrema into one tidal range per calendar day.

    Parameters
    ----------
    extrema : pd.DataFrame
        Aligned tide-extremum table with ``DateTime``, ``WaterLevel`` and
        ``Type`` columns.  Days are taken from the aligned ``DateTime``.
    drop_undefined : bool, optional
        If ``True`` (default), days whose range cannot be computed (no high
        side or no low side) are removed; otherwise they are kept with a
        ``NaN`` range.
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    pd.DataFrame
        Columns ``Date``, ``HighLevel``, ``LowLevel``, ``Range``, ``Year``,
        ``Month``, ``Season``; one row per day, sorted by date.

    Raises
    ------
    ValueError
        If required columns are missing or ``Type`` holds an unknown code.
    """
    _log = logger or logging.getLogger(__name__)

    missing = {'DateTime', 'WaterLevel', 'Type'} - set(extrema.columns)
    if missing:
        raise ValueError(
            f"extrema table is missing columns: {sorted(missing)}."
        )

    unknown = ~extrema['Type'].isin(EXTREMUM_TYPES)
    if unknown.any():
        bad = extrema.loc[unknown].iloc[0]
        raise ValueError(
            f"Unknown extremum type {bad['Type']!r} at {bad['DateTime']}; "
            f"expected one of {EXTREMUM_TYPES}."
        )

    dates = pd.DatetimeIndex(extrema['DateTime']).date
    levels = (
        extrema.assign(Date=dates, WaterLevel=extrema['WaterLevel'].astype(float))
        .groupby(['Date', 'Type'])['WaterLevel']
        .mean()
        .unstack('Type')
        .reindex(columns=list(EXTREMUM_TYPES))
    )

    # Fall back to the other member of the same tidal half, never average
    high = levels['HH'].combine_first(levels['H'])
    low = levels['LL'].combine_first(levels['L'])

    daily = pd.DataFrame({
        'Date': levels.index,
        'HighLevel': high.to_numpy(),
        'LowLevel': low.to_numpy(),
        'Range': (high - low).to_numpy(),
    })
    date_index = pd.DatetimeIndex(daily['Date'])
    daily['Year'] = date_index.year
    daily['Month'] = date_index.month
    daily['Season'] = daily['Month'].map(SEASONS)

    undefined = daily['Range'].isna()
    if undefined.any():
        _log.warning(
            '%d of %d days have no defined tidal range: %s.',
            int(undefined.sum()), len(daily),
            ', '.join(str(d) for d in daily.loc[undefined, 'Date']),
        )
        if drop_undefined:
            daily = daily.loc[~undefined].reset_index(drop=True)

    _log.info(
        'Daily tidal range: %d days, mean range=%.3f.',
        len(daily), daily['Range'].mean(),
    )
    return daily


def daily_medians(
    observations: pd.DataFrame,
    variables: list[str],
    logger: logging.Logger | None = None,
) -> pd.DataFrame:
    """
    Median of each variable per aligned calendar day.

    Returns
    -------
    pd.DataFrame
        Indexed by ``Date`` (``datetime.date``), one column per variable.
    """
    _log = logger or logging.getLogger(__name__)

    missing = [v for v in ['DateTime', *variables]
               if v not in observations.columns]
    if missing:
        raise ValueError(f"Columns not found in observations: {missing}.")

    dates = pd.DatetimeIndex(observations['DateTime']).date
    medians = (
        observations[list(variables)]
        .astype(float)
        .groupby(dates)
        .median()
    )
    medians.index.name = 'Date'

    _log.info('Daily medians: %d days, %d variables.',
              len(medians), len(variables))
    return medians


def join_daily_medians(
    daily: pd.DataFrame,
    medians: pd.DataFrame,
    variables: list[str] | None = None,
    logger: logging.Logger | None = None,
) -> pd.DataFrame:
    """
    Left-join per-day parameter medians onto the daily tidal range.

    Days with no usable value for any of *variables* are dropped after the
    join.

    Parameters
    ----------
    daily : pd.DataFrame
        Output of :func:`daily_tidal_range`.
    medians : pd.DataFrame
        Output of :func:`daily_medians`.
    variables : list of str, optional
        Columns that must hold at least one value per kept day.  Defaults
        to all columns of *medians*.
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    pd.DataFrame
        *daily* columns followed by the median columns.
    """
    _log = logger or logging.getLogger(__name__)

    if variables is None:
        variables = list(medians.columns)

    joined = daily.merge(
        medians, how='left', left_on='Date', right_index=True,
        validate='one_to_one',
    )
    before = len(joined)
    joined = joined.dropna(subset=list(variables), how='all')
    joined = joined.reset_index(drop=True)

    _log.info(
        'Joined daily medians: kept %d of %d days with parameter data.',
        len(joined), before,
    )
    return joined
