"""
Inferential statistics on the derived tidal features.

Thin wrappers that hand the derived tables to :mod:`scipy.stats` and
:mod:`statsmodels`: rank or linear correlation between daily tidal range and
daily parameter medians, and a regression of within-cycle residuals on time
since high tide with first-order autoregressive errors.
"""
from __future__ import annotations

import logging

import numpy as np
import pandas as pd
from scipy import stats
import statsmodels.api as sm

logger = logging.getLogger(__name__)

_CORRELATIONS = {
    'spearman': stats.spearmanr,
    'pearson': stats.pearsonr,
}


def correlate_with_range(
    daily: pd.DataFrame,
    variables: list[str],
    method: str = 'spearman',
    logger: logging.Logger | None = None,
) -> pd.DataFrame:
    """
    Correlate daily tidal range with each daily parameter median.

    Parameters
    ----------
    daily : pd.DataFrame
        Joined daily table with a ``Range`` column and one column per
        variable.
    variables : list of str
        Parameter columns to correlate against ``Range``.
    method : str, optional
        ``"spearman"`` (default) or ``"pearson"``.
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    pd.DataFrame
        Columns ``Parameter``, ``N``, ``r``, ``p_value``.  Parameters with
        fewer than 3 complete days get ``NaN`` statistics.

    Raises
    ------
    ValueError
        If *method* is unknown or a column is missing.
    """
    _log = logger or logging.getLogger(__name__)

    if method not in _CORRELATIONS:
        raise ValueError(
            f"method must be one of {sorted(_CORRELATIONS)}, got '{method}'."
        )
    missing = [c for c in ['Range', *variables] if c not in daily.columns]
    if missing:
        raise ValueError(f"Columns not found in daily table: {missing}.")

    rows = []
    for var in variables:
        pairs = daily[['Range', var]].astype(float).dropna()
        n = len(pairs)
        if n < 3:
            r, p_value = np.nan, np.nan
        else:
            result = _CORRELATIONS[method](pairs['Range'], pairs[var])
            r, p_value = float(result[0]), float(result[1])
        rows.append({'Parameter': var, 'N': n, 'r': r, 'p_value': p_value})
        _log.info('%s correlation of Range with %s: r=%.3f, p=%.4f, n=%d.',
                  method.capitalize(), var, r, p_value, n)

    return pd.DataFrame(rows, columns=['Parameter', 'N', 'r', 'p_value'])


def fit_ar1_trend(
    table: pd.DataFrame,
    response: str,
    predictor: str = 'HoursSinceHighTide',
    max_iterations: int = 10,
    logger: logging.Logger | None = None,
) -> dict:
    """
    Regress *response* on *predictor* with AR(1) errors.

    Rows are used in table order, which should be time order, so that the
    autocorrelation is estimated between successive observations.  The fit
    is delegated to :class:`statsmodels.regression.linear_model.GLSAR`
    with iterative estimation of the autoregressive coefficient.

    Parameters
    ----------
    table : pd.DataFrame
        Observation table, typically the output of the cycle centering.
    response : str
        Column to explain (e.g. ``"pCO2_Residual"``).
    predictor : str, optional
        Explanatory column (default ``"HoursSinceHighTide"``).
    max_iterations : int, optional
        Maximum GLSAR iterations (default 10).
    logger : logging.Logger, optional
        Logger instance for diagnostic messages.

    Returns
    -------
    dict
        ``"params"``, ``"bse"``, ``"pvalues"`` : :class:`pandas.Series`
        indexed by ``const`` and *predictor*.
        ``"rho"`` : float, estimated AR(1) coefficient.
        ``"nobs"`` : int, rows used.

    Raises
    ------
    ValueError
        If a column is missing or fewer than 10 complete rows remain.
    """
    _log = logger or logging.getLogger(__name__)

    missing = [c for c in (response, predictor) if c not in table.columns]
    if missing:
        raise ValueError(f"Columns not found in table: {missing}.")

    data = table[[predictor, response]].astype(float).dropna()
    if len(data) < 10:
        raise ValueError(
            f"At least 10 complete rows are required for an AR(1) fit; got "
            f"{len(data)}."
        )

    exog = sm.add_constant(data[[predictor]], has_constant='add')
    model = sm.GLSAR(data[response], exog, rho=1)
    result = model.iterative_fit(maxiter=max_iterations)
    rho = float(np.atleast_1d(model.rho)[0])

    _log.info(
        'AR(1) fit of %s on %s: slope=%.4g (p=%.4f), rho=%.3f, n=%d.',
        response, predictor, result.params[predictor],
        result.pvalues[predictor], rho, len(data),
    )
    return {
        'params': result.params,
        'bse': result.bse,
        'pvalues': result.pvalues,
        'rho': rho,
        'nobs': len(data),
    }
