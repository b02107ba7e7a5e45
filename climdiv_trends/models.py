import logging
from dataclasses import dataclass, asdict, fields

import numpy as np
import pandas as pd
from scipy import stats
from climdiv_trends.errors import InsufficientData
from climdiv_trends.utils import SPAN_YEARS, dF_to_dC

logger = logging.getLogger(__name__)

SIGNIFICANCE = 0.05


@dataclass(frozen=True)
class TrendResult:
    """Linear trend of temperature (F) against year for one series."""
    slope: float  # F/year
    intercept: float  # F at year 0
    p_value: float  # two-sided t-test on the slope
    r_squared: float
    n_years: int
    tempchg: float  # F over the analysis window
    centurychg: float  # F/century
    decadechg: float  # F/decade
    tempchg_c: float  # C over the analysis window
    decadechg_c: float  # C/decade
    significant: bool  # p_value < SIGNIFICANCE


TREND_FIELDS = [f.name for f in fields(TrendResult)]


def fit_trend(years, values, key=None):
    """Fit an OLS trend of values on year, with intercept.

    Parameters
    ----------
    years : numpy.ndarray
        Year of each observation
    values : numpy.ndarray
        Observed value (F) for each year. Same size as years.
    key : object
        Identifier of the series, only used in error messages

    Returns
    -------
    result : TrendResult
        Slope, intercept, significance, goodness of fit and derived changes
    """

    years = np.asarray(years, dtype=float)
    values = np.asarray(values, dtype=float)

    n = len(years)
    n_years = len(np.unique(years))
    if n < 2 or n_years < 2:
        raise InsufficientData(key, n, n_years)

    # Center years and values on their means, so the slope is decoupled from the intercept
    mean_year = np.mean(years)
    mean_value = np.mean(values)
    x = years - mean_year
    y = values - mean_value
    sxx = np.dot(x, x)

    # A flat series has zero slope; R^2 and the t statistic are undefined
    flat = np.ptp(values) == 0
    slope = 0.0 if flat else float(np.dot(x, y)/sxx)
    intercept = float(mean_value - slope*mean_year)

    resid = y - slope*x
    ssr = np.dot(resid, resid)
    sst = np.dot(y, y)
    dof = n - 2

    with np.errstate(divide='ignore', invalid='ignore'):
        r_squared = np.nan if flat else float(1 - ssr/sst)
        if flat:
            p_value = np.nan
        elif dof > 0:
            stderr = np.sqrt(ssr/dof/sxx)
            tstat = np.divide(slope, stderr)
            p_value = float(2*stats.t.sf(np.abs(tstat), dof))
        else:  # two points leave no residual degrees of freedom
            p_value = np.nan

    tempchg = slope*SPAN_YEARS
    decadechg = slope*10

    return TrendResult(slope=slope,
                       intercept=intercept,
                       p_value=p_value,
                       r_squared=r_squared,
                       n_years=n_years,
                       tempchg=tempchg,
                       centurychg=slope*100,
                       decadechg=decadechg,
                       tempchg_c=dF_to_dC(tempchg),
                       decadechg_c=dF_to_dC(decadechg),
                       significant=bool(p_value < SIGNIFICANCE))


def fit_groups(df, by, year_col='year', value_col='temp', on_insufficient='skip'):
    """Fit a trend to each group of a data frame.

    Parameters
    ----------
    df : pandas.DataFrame
        Long-format records, one value per row
    by : str or list of str
        Column(s) defining a group, e.g. 'fips' or ['fips', 'season']
    year_col : str
        Column holding the year to regress on (e.g. 'year' or 'season_year')
    value_col : str
        Column holding the value to model
    on_insufficient : str
        'skip' drops groups that cannot be fit (with a warning);
        'raise' propagates InsufficientData.

    Returns
    -------
    results : pandas.DataFrame
        One row per fitted group: the group columns plus all TrendResult fields
    """

    if on_insufficient not in ('skip', 'raise'):
        raise ValueError("on_insufficient must be 'skip' or 'raise', got %r" % (on_insufficient,))

    by = [by] if isinstance(by, str) else list(by)
    df = df[df[value_col].notna()]

    rows = []
    nskip = 0
    for key, group in df.groupby(by, sort=True):
        key = key if isinstance(key, tuple) else (key,)
        # one value per year: average repeated years
        if len(group) != group[year_col].nunique():
            logger.warning('Averaging %i duplicate year rows in group %s',
                           len(group) - group[year_col].nunique(), key)
            group = group.groupby(year_col, as_index=False)[value_col].mean()
        try:
            result = fit_trend(group[year_col].values, group[value_col].values, key=key)
        except InsufficientData as e:
            if on_insufficient == 'raise':
                raise
            logger.warning('Skipping group: %s', e)
            nskip += 1
            continue
        row = dict(zip(by, key))
        row.update(asdict(result))
        rows.append(row)

    logger.info('Fit %i groups by %s (%i skipped)', len(rows), ', '.join(by), nskip)

    return pd.DataFrame(rows, columns=by + TREND_FIELDS)
