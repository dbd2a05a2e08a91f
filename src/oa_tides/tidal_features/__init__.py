"""
Tidal Features Subpackage

Provides functionality for:
- Fixed-offset time alignment of sensor and tide records
- Manual correction of missing hi/lo tide days
- Hi/lo extrema extraction from continuous water levels
- Tidal-cycle assignment (time since preceding high tide)
- Within-cycle centering with a per-cycle coverage gate
- Daily tidal range, seasons, and daily parameter medians
- Correlation and AR(1) regression on the derived features
"""

from oa_tides.tidal_features.amplitude import (
    EXTREMUM_TYPES,
    SEASONS,
    daily_medians,
    daily_tidal_range,
    join_daily_medians,
    season_from_month,
)
from oa_tides.tidal_features.corrections import (
    MISSING_DAY_PATCH,
    apply_missing_day_patch,
)
from oa_tides.tidal_features.cycle_aggregation import (
    MIN_CYCLE_COVERAGE,
    center_by_cycle,
    cycle_statistics,
)
from oa_tides.tidal_features.extremes import (
    build_extrema_table,
    classify_extrema,
    extract_water_level_extrema,
)
from oa_tides.tidal_features.high_tide_index import (
    HIGH_TIDE_TYPES,
    assign_tide_index,
    high_tide_reference,
    index_observations,
)
from oa_tides.tidal_features.inference import (
    correlate_with_range,
    fit_ar1_trend,
)
from oa_tides.tidal_features.time_alignment import (
    DEFAULT_UTC_OFFSET_HOURS,
    AlignmentError,
    TimestampParseError,
    align_time_series,
    ensure_same_offset,
    fixed_offset,
    to_fixed_offset,
)

__all__ = [
    # Time alignment
    'DEFAULT_UTC_OFFSET_HOURS',
    'AlignmentError',
    'TimestampParseError',
    'fixed_offset',
    'to_fixed_offset',
    'align_time_series',
    'ensure_same_offset',
    # Corrections
    'MISSING_DAY_PATCH',
    'apply_missing_day_patch',
    # Extrema extraction
    'extract_water_level_extrema',
    'classify_extrema',
    'build_extrema_table',
    # High-tide indexing
    'HIGH_TIDE_TYPES',
    'high_tide_reference',
    'assign_tide_index',
    'index_observations',
    # Cycle aggregation
    'MIN_CYCLE_COVERAGE',
    'cycle_statistics',
    'center_by_cycle',
    # Daily amplitude
    'EXTREMUM_TYPES',
    'SEASONS',
    'season_from_month',
    'daily_tidal_range',
    'daily_medians',
    'join_daily_medians',
    # Inference
    'correlate_with_range',
    'fit_ar1_trend',
]
