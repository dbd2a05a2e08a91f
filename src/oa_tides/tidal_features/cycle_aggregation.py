"""
Within-cycle centering of sensor variables.

Each tracked variable is centered on its tidal-cycle mean so that the
remaining signal reflects timing within the cycle rather than the
cycle-to-cycle baseline.  Per-cycle statistics are kept in their own table
keyed by ``TideIndex`` and joined back onto the observations on read; the
observation table itself is never modified.
"""
from __future__ import annotations

import logging

import pandas as pd

logger = logging.getLogger(__name__)

MIN_CYCLE_COVERAGE = 8
"""Minimum non-missing samples of a variable for a cycle's residuals to be kept."""


def cycle_statistics(
    observations: pd.DataFrame,
    variables: list[str],
    logger: logging.Logger | None = None,
) -> pd.DataFrame:
    """
    Compute per-cycle sample counts and means for each variable.

    Observations without a tidal cycle (``TideIndex`` is ``<NA>``) are
    excluded.

    Parameters
    ----------
    observations : pd.DataFrame
        Observation table carrying a ``TideIndex`` column.
    variables : list of str
        Names of the numeric columns to summarize.
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    pd.DataFrame
        Indexed by ``TideIndex``; columns ``<var>_Count`` (non-missing
        samples) and ``<var>_Mean`` for each variable, in *variables*
        order.

    Raises
    ------
    ValueError
        If ``TideIndex`` or any variable column is missing, or a variable
        is not numeric.
    """
    _log = logger or logging.getLogger(__name__)

    values = _numeric_values(observations, variables)
    values['TideIndex'] = observations['TideIndex']

    grouped = values.dropna(subset=['TideIndex']).groupby('TideIndex')
    counts = grouped[list(variables)].count()
    means = grouped[list(variables)].mean()

    columns = {}
    for var in variables:
        columns[f"{var}_Count"] = counts[var].astype(int)
        columns[f"{var}_Mean"] = means[var]
    stats = pd.DataFrame(columns, index=counts.index)
    stats.index.name = 'TideIndex'

    _log.info(
        'Cycle statistics: %d cycles, %d variables.',
        len(stats), len(variables),
    )
    return stats


def center_by_cycle(
    observations: pd.DataFrame,
    variables: list[str],
    min_count: int = MIN_CYCLE_COVERAGE,
    stats: pd.DataFrame | None = None,
    logger: logging.Logger | None = None,
) -> pd.DataFrame:
    """
    Add a within-cycle residual column for each variable.

    The residual is the observed value minus the mean of that variable over
    its tidal cycle, without rescaling.  It is ``NaN`` where the value is
    missing, where the observation belongs to no cycle, or where the cycle
    holds fewer than *min_count* non-missing values of that variable.  The
    coverage gate is applied to each variable independently and never
    touches the raw values.

    Parameters
    ----------
    observations : pd.DataFrame
        Observation table carrying a ``TideIndex`` column.
    variables : list of str
        Names of the numeric columns to center.
    min_count : int, optional
        Minimum per-cycle sample count (default 8).
    stats : pd.DataFrame, optional
        Output of :func:`cycle_statistics` for the same *observations* and
        *variables*; computed here when omitted.
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    pd.DataFrame
        Copy of *observations* with one ``<var>_Residual`` column per
        variable.  No rows are added or removed.

    Raises
    ------
    ValueError
        If *min_count* is less than 1, or the inputs are malformed.
    """
    _log = logger or logging.getLogger(__name__)

    if min_count < 1:
        raise ValueError(f"min_count must be at least 1, got {min_count}.")

    if stats is None:
        stats = cycle_statistics(observations, variables, logger=_log)
    values = _numeric_values(observations, variables)
    missing = [
        column
        for var in variables
        for column in (f"{var}_Count", f"{var}_Mean")
        if column not in stats.columns
    ]
    if missing:
        raise ValueError(f"Cycle statistics lack columns: {missing}.")
    # Left join keeps the observation index; unassigned rows get NaN
    per_row = observations[['TideIndex']].join(stats, on='TideIndex')

    out = observations.copy()
    for var in variables:
        count = per_row[f"{var}_Count"].astype(float)
        mean = per_row[f"{var}_Mean"].astype(float)

        # Coverage gate: drop residuals from under-sampled cycles
        out[f"{var}_Residual"] = (values[var] - mean).where(count >= min_count)

        n_suppressed = int((stats[f"{var}_Count"] < min_count).sum())
        if n_suppressed:
            _log.warning(
                '%s: residuals suppressed in %d of %d cycles with fewer '
                'than %d samples.',
                var, n_suppressed, len(stats), min_count,
            )

    return out


def _numeric_values(
    observations: pd.DataFrame,
    variables: list[str],
) -> pd.DataFrame:
    """Return the variable columns as floats, validating the table."""
    if 'TideIndex' not in observations.columns:
        raise ValueError(
            "observations table has no 'TideIndex' column; assign tidal "
            "cycles first."
        )
    if not variables:
        raise ValueError('At least one variable is required.')

    missing = [var for var in variables if var not in observations.columns]
    if missing:
        raise ValueError(f"Variables not found in observations: {missing}.")

    try:
        return observations[list(variables)].astype(float)
    except (TypeError, ValueError) as err:
        raise ValueError(f"Variables must be numeric: {err}") from err
