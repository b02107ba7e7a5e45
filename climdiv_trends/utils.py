import numpy as np
import pandas as pd
from climdiv_trends.errors import UnrecognizedMonth

# Analysis window (inclusive). tempchg projects the slope over its length.
START_YEAR = 1895
END_YEAR = 2019
SPAN_YEARS = END_YEAR - START_YEAR

# Size of one degree C in degrees F
F_PER_C = 1.8

SEASONS = ['Winter', 'Spring', 'Summer', 'Fall']
MONTHS = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
          'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']
MONTH_SEASON = {'Dec': 'Winter', 'Jan': 'Winter', 'Feb': 'Winter',
                'Mar': 'Spring', 'Apr': 'Spring', 'May': 'Spring',
                'Jun': 'Summer', 'Jul': 'Summer', 'Aug': 'Summer',
                'Sep': 'Fall', 'Oct': 'Fall', 'Nov': 'Fall'}

# Months that belong to the previous year's winter
PREV_YEAR_MONTHS = ('Jan', 'Feb')

# Warming bins over the Celsius change, right-closed
BIN_EDGES = [-np.inf, 0, 0.5, 1.0, 1.5, 2.0, np.inf]
BIN_LABELS = ['<= 0', '0 - 0.5', '0.5 - 1.0', '1.0 - 1.5', '1.5 - 2.0', '> 2.0']


def dF_to_dC(delta):
    """Convert a temperature difference (or rate) from degrees F to degrees C.

    Parameters
    ----------
    delta : float or numpy.ndarray or pandas.Series
        Temperature difference in F

    Returns
    -------
    delta_c : same type as delta
        Temperature difference in C
    """
    return delta/F_PER_C


def classify_season(month, year):
    """Assign a monthly record to its season and season year.

    December stays with the January and February that follow it, so the
    winter of season year Y is Dec(Y), Jan(Y + 1), Feb(Y + 1).

    Parameters
    ----------
    month : str
        Three-letter month abbreviation, e.g. 'Dec'
    year : int
        Calendar year of the record

    Returns
    -------
    season : str
        One of 'Winter', 'Spring', 'Summer', 'Fall'
    season_year : int
        Year the season is attributed to
    """

    if month not in MONTH_SEASON:
        raise UnrecognizedMonth([month])

    season_year = year - 1 if month in PREV_YEAR_MONTHS else year
    return MONTH_SEASON[month], season_year


def add_season_columns(df, month_col='month', year_col='year', unit_col='fips'):
    """Add season and season_year columns to a monthly data frame.

    Parameters
    ----------
    df : pandas.DataFrame
        Monthly records with month abbreviations and calendar years
    month_col : str
        Name of the month column
    year_col : str
        Name of the calendar year column
    unit_col : str
        Name of the unit id column, used only to report bad records

    Returns
    -------
    df : pandas.DataFrame
        Copy of the input with additional columns: season, season_year
    """

    season = df[month_col].map(MONTH_SEASON)
    bad = season.isna()
    if bad.any():
        units = []
        if unit_col in df.columns:
            units = df.loc[bad, unit_col].drop_duplicates().tolist()
        raise UnrecognizedMonth(df.loc[bad, month_col].drop_duplicates().tolist(), units)

    df = df.copy()
    df['season'] = season
    df['season_year'] = df[year_col] - df[month_col].isin(PREV_YEAR_MONTHS).astype(int)

    return df


def warming_bin(tempchg_c):
    """Bucket Celsius changes into the fixed warming bins.

    Parameters
    ----------
    tempchg_c : array-like
        Projected change over the analysis window, in C

    Returns
    -------
    bins : pandas.Categorical or pandas.Series
        Bin label for each value (NaN stays NaN)
    """

    return pd.cut(tempchg_c, bins=BIN_EDGES, labels=BIN_LABELS, right=True, include_lowest=True)
