"""
End-to-end derivation of tidal-cycle features.

Runs the stages in their required order: both series are aligned to the
same fixed offset, the missing hi/lo day is patched, observations are
assigned to tidal cycles and centered within them, and daily tidal range is
joined to daily parameter medians.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

import pandas as pd

from oa_tides.config import FeatureConfig
from oa_tides.tidal_features.amplitude import (
    daily_medians,
    daily_tidal_range,
    join_daily_medians,
)
from oa_tides.tidal_features.corrections import (
    MISSING_DAY_PATCH,
    apply_missing_day_patch,
)
from oa_tides.tidal_features.cycle_aggregation import (
    center_by_cycle,
    cycle_statistics,
)
from oa_tides.tidal_features.high_tide_index import index_observations
from oa_tides.tidal_features.time_alignment import align_time_series

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TidalFeatures:
    """Tables produced by :func:`build_tidal_features`."""

    observations: pd.DataFrame
    """Aligned observations with cycle columns and ``<var>_Residual``."""
    cycles: pd.DataFrame
    """Per-cycle counts and means, indexed by ``TideIndex``."""
    extrema: pd.DataFrame
    """Aligned and patched tide extrema."""
    daily: pd.DataFrame
    """Daily tidal range joined to daily parameter medians."""


def build_tidal_features(
    observations: pd.DataFrame,
    extrema: pd.DataFrame,
    config: FeatureConfig | None = None,
    patch: tuple[tuple[str, float, str], ...] | None = MISSING_DAY_PATCH,
    time_column: str = 'DateTime',
    logger: logging.Logger | None = None,
) -> TidalFeatures:
    """
    Derive tidal-cycle features from sensor observations and tide extrema.

    Parameters
    ----------
    observations : pd.DataFrame
        Deduplicated sensor readings: a time column and one column per
        parameter.
    extrema : pd.DataFrame
        Deduplicated hi/lo tide table: a time column, ``WaterLevel`` and
        ``Type``.
    config : FeatureConfig, optional
        Run parameters; defaults to :class:`FeatureConfig()`.  Only the
        configured variables present in *observations* are processed.
    patch : tuple of (str, float, str), optional
        Manual extrema for days missing from *extrema* (default
        :data:`MISSING_DAY_PATCH`).  Only days falling inside the record
        with no extrema of their own are inserted.  ``None`` skips the
        patch step.
    time_column : str, optional
        Name of the time column in both inputs (default ``"DateTime"``).
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    TidalFeatures

    Raises
    ------
    ValueError
        If none of the configured variables is present, or any stage
        rejects its input.
    """
    _log = logger or logging.getLogger(__name__)
    config = config or FeatureConfig()

    variables = [v for v in config.variables if v in observations.columns]
    if not variables:
        raise ValueError(
            f"None of the configured variables {list(config.variables)} "
            f"is present in observations."
        )
    skipped = sorted(set(config.variables) - set(variables))
    if skipped:
        _log.info('Variables not in observations, skipped: %s.', skipped)

    # Both series must share the fixed offset before any comparison
    obs = align_time_series(
        observations, time_column, config.utc_offset_hours, logger=_log
    )
    tides = align_time_series(
        extrema, time_column, config.utc_offset_hours, logger=_log
    )
    if patch:
        tides = apply_missing_day_patch(
            tides, patch, config.utc_offset_hours, logger=_log
        )

    obs = index_observations(obs, tides, logger=_log)
    cycles = cycle_statistics(obs, variables, logger=_log)
    obs = center_by_cycle(
        obs, variables, min_count=config.min_cycle_coverage, stats=cycles,
        logger=_log,
    )

    daily = daily_tidal_range(
        tides, drop_undefined=config.drop_undefined_range, logger=_log
    )
    medians = daily_medians(obs, variables, logger=_log)
    daily = join_daily_medians(daily, medians, variables, logger=_log)

    _log.info(
        'Tidal features built: %d observations, %d cycles, %d days.',
        len(obs), len(cycles), len(daily),
    )
    return TidalFeatures(
        observations=obs, cycles=cycles, extrema=tides, daily=daily,
    )
