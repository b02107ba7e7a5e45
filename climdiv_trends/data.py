"""Loaders for the clean input tables.

Each loader reads a CSV, checks that the columns the pipeline depends on are
present (and numeric where needed) and zero-pads the unit ids.
"""
import numpy as np
import pandas as pd
from pandas.api.types import is_numeric_dtype
from climdiv_trends.errors import SchemaError

# Width of the zero-padded unit id at each level
ID_WIDTHS = {'national': 3, 'state': 2, 'county': 5}

# climdiv missing value flag
MISSING_VALUE = -99.9


def check_columns(df, required, numeric=(), table='table'):
    """Raise SchemaError if required columns are missing or not numeric.

    Parameters
    ----------
    df : pandas.DataFrame
        Table to check
    required : list of str
        Columns that must be present
    numeric : list of str
        Subset of columns that must hold numbers
    table : str
        Name of the table, for the error message
    """

    missing = [c for c in required if c not in df.columns]
    mistyped = [c for c in numeric if (c in df.columns) and not is_numeric_dtype(df[c])]
    if missing or mistyped:
        raise SchemaError(table, missing=missing, mistyped=mistyped)


def pad_fips(ids, width):
    """Zero-pad unit ids to a fixed width."""
    return ids.astype(str).str.strip().str.zfill(width)


def load_series(path, level, monthly=False):
    """Load a national, state or county temperature series.

    Parameters
    ----------
    path : str
        CSV with columns fips, year, temp (F) and, if monthly, month
    level : str
        'national', 'state' or 'county'
    monthly : bool
        Whether the table holds monthly records

    Returns
    -------
    df : pandas.DataFrame
        Series with padded ids and missing values set to NaN
    """

    if level not in ID_WIDTHS:
        raise ValueError('level must be one of %s' % ', '.join(ID_WIDTHS))

    df = pd.read_csv(path, dtype={'fips': str, 'month': str})
    required = ['fips', 'year', 'month', 'temp'] if monthly else ['fips', 'year', 'temp']
    check_columns(df, required, numeric=['year', 'temp'], table=str(path))

    df['fips'] = pad_fips(df['fips'], ID_WIDTHS[level])
    # years must be whole numbers, with no blanks
    years = df['year']
    if years.isna().any() or not np.all(np.mod(years, 1) == 0):
        raise SchemaError(str(path), mistyped=['year'])
    df['year'] = years.astype(int)
    df.loc[np.isclose(df['temp'], MISSING_VALUE), 'temp'] = np.nan

    return df[required]


def load_population(path):
    """Load county population estimates (fips, pop2018)."""
    df = pd.read_csv(path, dtype={'fips': str})
    check_columns(df, ['fips', 'pop2018'], numeric=['pop2018'], table=str(path))
    df['fips'] = pad_fips(df['fips'], ID_WIDTHS['county'])
    return df[['fips', 'pop2018']]


def load_names(path):
    """Load county display names (fips, county_name, state_name)."""
    df = pd.read_csv(path, dtype={'fips': str})
    check_columns(df, ['fips', 'county_name', 'state_name'], table=str(path))
    df['fips'] = pad_fips(df['fips'], ID_WIDTHS['county'])
    return df[['fips', 'county_name', 'state_name']]


def load_state_fips(path):
    """Load the state lookup, renamed to the state-level id column (fips, state_name, state_abbr)."""
    df = pd.read_csv(path, dtype={'state_fips': str})
    check_columns(df, ['state_fips', 'state_name', 'state_abbr'], table=str(path))
    df = df.rename(columns={'state_fips': 'fips'})
    df['fips'] = pad_fips(df['fips'], ID_WIDTHS['state'])
    return df[['fips', 'state_name', 'state_abbr']]
