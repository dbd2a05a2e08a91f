"""
Run configuration for the tidal feature derivation.

Settings live in an INI file and are read one section at a time::

    [tidal_features]
    utc_offset_hours = -8
    min_cycle_coverage = 8
    variables = pCO2, pH, Temperature
    drop_undefined_range = true
"""
from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path

from oa_tides.tidal_features.cycle_aggregation import MIN_CYCLE_COVERAGE
from oa_tides.tidal_features.time_alignment import (
    DEFAULT_UTC_OFFSET_HOURS,
    fixed_offset,
)

logger = logging.getLogger(__name__)

DEFAULT_VARIABLES: tuple[str, ...] = (
    'pCO2', 'pCO2_TempCorrected', 'pH', 'Temperature', 'Salinity', 'DO',
    'OmegaAragonite',
)


@dataclass(frozen=True)
class FeatureConfig:
    """Parameters of one feature-derivation run."""

    utc_offset_hours: float = DEFAULT_UTC_OFFSET_HOURS
    min_cycle_coverage: int = MIN_CYCLE_COVERAGE
    variables: tuple[str, ...] = field(default=DEFAULT_VARIABLES)
    drop_undefined_range: bool = True

    def __post_init__(self):
        fixed_offset(self.utc_offset_hours)
        if self.min_cycle_coverage < 1:
            raise ValueError(
                f"min_cycle_coverage must be at least 1, got "
                f"{self.min_cycle_coverage}."
            )
        if not self.variables:
            raise ValueError('variables must name at least one column.')


def read_config_section(
    config_file: str | Path,
    section: str = 'tidal_features',
    logger: logging.Logger | None = None,
) -> FeatureConfig:
    """
    Read a :class:`FeatureConfig` from one section of an INI file.

    Keys omitted from the section keep their defaults.

    Raises
    ------
    FileNotFoundError
        If *config_file* does not exist.
    ValueError
        If the section is absent, holds unknown keys, or a value cannot be
        converted.
    """
    _log = logger or logging.getLogger(__name__)

    path = Path(config_file)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    parser = configparser.ConfigParser()
    parser.read(path, encoding='utf-8')
    if not parser.has_section(section):
        raise ValueError(f"Section [{section}] not found in {path}.")

    known = {f.name for f in fields(FeatureConfig)}
    unknown = sorted(set(parser[section]) - known)
    if unknown:
        raise ValueError(
            f"Unknown keys in [{section}] of {path}: {unknown}."
        )

    options = parser[section]
    kwargs = {}
    try:
        if 'utc_offset_hours' in options:
            kwargs['utc_offset_hours'] = options.getfloat('utc_offset_hours')
        if 'min_cycle_coverage' in options:
            kwargs['min_cycle_coverage'] = options.getint('min_cycle_coverage')
        if 'drop_undefined_range' in options:
            kwargs['drop_undefined_range'] = options.getboolean(
                'drop_undefined_range'
            )
    except ValueError as err:
        raise ValueError(f"Invalid value in [{section}] of {path}: {err}") \
            from err
    if 'variables' in options:
        kwargs['variables'] = tuple(
            v.strip() for v in options['variables'].split(',') if v.strip()
        )

    config = FeatureConfig(**kwargs)
    _log.info('Loaded [%s] from %s: %s', section, path, config)
    return config
