# -*- coding: utf-8 -*-

"""Trend pipeline.

Workflow:
(1) average monthly records to calendar years (annual path) or to season years (seasonal path)
(2) fit a linear trend per unit, or per unit and season
(3) pivot seasons into columns and find the season warming the most
(4) join names and population, rank by annual change, bin counties by warming
"""
import logging

import numpy as np
import pandas as pd
from climdiv_trends.errors import JoinMismatch
from climdiv_trends.models import fit_groups
from climdiv_trends.utils import (START_YEAR, END_YEAR, SEASONS, add_season_columns,
                                  warming_bin)

logger = logging.getLogger(__name__)

SQ_METERS_PER_SQ_MILE = 2589988.110336


def filter_years(df, year_col='year', start_year=START_YEAR, end_year=END_YEAR):
    """Keep rows with start_year <= year_col <= end_year."""
    return df[(df[year_col] >= start_year) & (df[year_col] <= end_year)]


def rank(df, sort_col):
    """Sort descending by sort_col, ties in ascending fips order, missing values last."""
    df = df.sort_values([sort_col, 'fips'], ascending=[False, True], na_position='last')
    return df.reset_index(drop=True)


def check_join(left_ids, right_ids, left_name, right_name, strict=False):
    """Compare the ids on both sides of a join.

    Parameters
    ----------
    left_ids : array-like
        Ids on the left side of the join
    right_ids : array-like
        Ids on the right side of the join
    left_name : str
        Name of the left table, e.g. 'shapes'
    right_name : str
        Name of the right table, e.g. 'data'
    strict : bool
        Raise the mismatch instead of returning it

    Returns
    -------
    mismatch : JoinMismatch
        Ids found on only one side. False-y when the sides match.
    """

    left = set(left_ids)
    right = set(right_ids)
    mismatch = JoinMismatch(left_name, right_name, left - right, right - left)

    if mismatch.left_only:
        logger.warning('%i ids in %s without %s: %s', len(mismatch.left_only), left_name, right_name,
                       ', '.join(map(str, mismatch.left_only[:10])))
    if mismatch.right_only:
        logger.warning('%i ids in %s without %s: %s', len(mismatch.right_only), right_name, left_name,
                       ', '.join(map(str, mismatch.right_only[:10])))

    if strict and mismatch:
        raise mismatch

    return mismatch


def annual_means(df):
    """Average monthly records to calendar-year means. Annual tables pass through."""
    if 'month' not in df.columns:
        return df
    return df.groupby(['fips', 'year'], as_index=False)['temp'].mean()


def build_annual(df, on_insufficient='skip', start_year=START_YEAR, end_year=END_YEAR):
    """Fit the annual trend for each unit.

    Parameters
    ----------
    df : pandas.DataFrame
        Annual (fips, year, temp) or monthly (fips, year, month, temp) records
    on_insufficient : str
        'skip' or 'raise', see fit_groups
    start_year : int
        First year (inclusive) for the analysis
    end_year : int
        Last year (inclusive) for the analysis

    Returns
    -------
    results : pandas.DataFrame
        One row per unit with trend fields and warming_bin
    """

    annual = filter_years(annual_means(df), 'year', start_year, end_year)
    results = fit_groups(annual, 'fips', year_col='year', value_col='temp',
                         on_insufficient=on_insufficient)
    results['warming_bin'] = warming_bin(results['tempchg_c'])

    return results


def seasonal_means(df):
    """Average monthly values within each unit, season and season year.

    Parameters
    ----------
    df : pandas.DataFrame
        Monthly records (fips, year, month, temp)

    Returns
    -------
    means : pandas.DataFrame
        Columns fips, season, season_year, temp. Cells with no valid month are absent.
    """

    df = add_season_columns(df)
    means = df.groupby(['fips', 'season', 'season_year'], as_index=False)['temp'].mean()

    return means[means['temp'].notna()]


def max_warming_season(table):
    """Season with the largest change in each row.

    Ties go to the first of Winter, Spring, Summer, Fall. Rows with no seasons are NaN.
    """
    present = table[SEASONS].notna().any(axis=1)
    out = pd.Series(np.nan, index=table.index, dtype=object)
    if present.any():
        out[present] = table.loc[present, SEASONS].astype(float).idxmax(axis=1)
    return out


def build_seasonal(monthly, annual_results, lookup=None, lookup_name='lookup',
                   on_insufficient='skip', strict=False,
                   start_year=START_YEAR, end_year=END_YEAR):
    """Build the ranked seasonal summary, one row per unit.

    Parameters
    ----------
    monthly : pandas.DataFrame
        Monthly records (fips, year, month, temp)
    annual_results : pandas.DataFrame
        Output of build_annual for the same units
    lookup : pandas.DataFrame or None
        Names (and any other columns) keyed by fips
    lookup_name : str
        Name of the lookup table in join diagnostics
    on_insufficient : str
        'skip' or 'raise', see fit_groups
    strict : bool
        Raise on join mismatches instead of reporting them
    start_year : int
        First season year (inclusive) for the analysis
    end_year : int
        Last season year (inclusive) for the analysis

    Returns
    -------
    table : pandas.DataFrame
        fips, lookup columns, Annual, Winter, Spring, Summer, Fall, max_warming_season (C),
        sorted descending by Annual
    mismatches : list of JoinMismatch
        Join diagnostics against the annual results and the lookup
    """

    means = filter_years(seasonal_means(monthly), 'season_year', start_year, end_year)
    results = fit_groups(means, ['fips', 'season'], year_col='season_year', value_col='temp',
                         on_insufficient=on_insufficient)

    table = results.pivot(index='fips', columns='season', values='tempchg_c')
    table = table.reindex(columns=SEASONS).reset_index()
    table.columns.name = None
    table['max_warming_season'] = max_warming_season(table)

    mismatches = [check_join(table['fips'], annual_results['fips'], 'seasonal', 'annual', strict)]
    annual = annual_results[['fips', 'tempchg_c']].rename(columns={'tempchg_c': 'Annual'})
    table = table.merge(annual, on='fips', how='left', validate='one_to_one')

    lookup_cols = []
    if lookup is not None:
        mismatches.append(check_join(table['fips'], lookup['fips'], 'seasonal', lookup_name, strict))
        lookup_cols = [c for c in lookup.columns if c != 'fips']
        table = table.merge(lookup, on='fips', how='left', validate='one_to_one')

    table = table[['fips'] + lookup_cols + ['Annual'] + SEASONS + ['max_warming_season']]

    return rank(table, 'Annual'), mismatches


def finalize(annual_results, lookup, lookup_name='lookup', sort_col='tempchg_c', strict=False):
    """Join annual results to a lookup and rank them.

    Parameters
    ----------
    annual_results : pandas.DataFrame
        Output of build_annual
    lookup : pandas.DataFrame
        Names and/or population keyed by fips
    lookup_name : str
        Name of the lookup table in join diagnostics
    sort_col : str
        Column to rank on, e.g. 'tempchg_c' or 'tempchg'
    strict : bool
        Raise on join mismatches instead of reporting them

    Returns
    -------
    table : pandas.DataFrame
        Results with lookup columns and warming_bin, sorted descending by sort_col
    mismatch : JoinMismatch
        Ids in results without lookup, and ids in lookup without results
    """

    mismatch = check_join(annual_results['fips'], lookup['fips'], 'results', lookup_name, strict)
    table = annual_results.merge(lookup, on='fips', how='left', validate='many_to_one')
    table['warming_bin'] = warming_bin(table['tempchg_c'])

    return rank(table, sort_col), mismatch


def population_by_bin(county_results, population):
    """Total county population in each warming bin.

    Parameters
    ----------
    county_results : pandas.DataFrame
        County-level output of build_annual
    population : pandas.DataFrame
        fips, pop2018

    Returns
    -------
    summary : pandas.DataFrame
        One row per warming bin (all six): warming_bin, population, n_counties, pct.
        pct is the share of the population of all counties with a known population.
    """

    df = county_results[['fips', 'tempchg_c']].merge(population, on='fips', how='left')
    df = df[df['pop2018'].notna()].copy()
    df['warming_bin'] = warming_bin(df['tempchg_c'])

    summary = df.groupby('warming_bin', observed=False).agg(population=('pop2018', 'sum'),
                                                            n_counties=('fips', 'count'))
    summary = summary.reset_index()

    total = summary['population'].sum()
    summary['pct'] = 100*summary['population']/total if total > 0 else np.nan

    return summary


def build_county_geodata(shapes, county_results, population, strict=False):
    """Join county boundaries with warming and population.

    Parameters
    ----------
    shapes : geopandas.GeoDataFrame
        County boundaries with GEOID and ALAND (land area, square meters)
    county_results : pandas.DataFrame
        County-level output of build_annual
    population : pandas.DataFrame
        fips, pop2018
    strict : bool
        Raise on join mismatches instead of reporting them

    Returns
    -------
    gdf : geopandas.GeoDataFrame
        Every boundary, with tempchg, tempchg_c, pop2018, pop_density (per square mile).
        Boundaries without a modeled county keep NaN in these columns.
    mismatch : JoinMismatch
        Shapes without data, and data without shapes
    """

    data = county_results[['fips', 'tempchg', 'tempchg_c']].merge(population, on='fips', how='left')
    mismatch = check_join(shapes['GEOID'], data['fips'], 'shapes', 'data', strict)

    gdf = shapes.merge(data, left_on='GEOID', right_on='fips', how='left', validate='one_to_one')
    gdf = gdf.drop(columns='fips')

    land_sq_miles = gdf['ALAND'].where(gdf['ALAND'] > 0)/SQ_METERS_PER_SQ_MILE
    gdf['pop_density'] = gdf['pop2018']/land_sq_miles

    return gdf, mismatch


def run(tables, on_insufficient='skip', strict_joins=False):
    """Run every level of the analysis.

    Parameters
    ----------
    tables : dict
        Input tables: national, state, county (annual or monthly series),
        state_monthly, county_monthly, population, names, state_fips, and optionally shapes
    on_insufficient : str
        'skip' or 'raise', see fit_groups
    strict_joins : bool
        Raise on join mismatches instead of reporting them

    Returns
    -------
    outputs : dict
        national_annual, state_seasonal, county_seasonal, county_annual, population_by_bin
        and, if shapes were given, county_geodata
    mismatches : list of JoinMismatch
        All join diagnostics collected along the way
    """

    outputs = {}
    mismatches = []

    logger.info('National annual trend')
    national = build_annual(tables['national'], on_insufficient=on_insufficient)
    outputs['national_annual'] = rank(national, 'tempchg_c')

    logger.info('State trends')
    state_annual = build_annual(tables['state'], on_insufficient=on_insufficient)
    outputs['state_seasonal'], found = build_seasonal(tables['state_monthly'], state_annual,
                                                      lookup=tables['state_fips'],
                                                      lookup_name='state_fips',
                                                      on_insufficient=on_insufficient,
                                                      strict=strict_joins)
    mismatches += found

    logger.info('County trends')
    county_annual = build_annual(tables['county'], on_insufficient=on_insufficient)
    outputs['county_seasonal'], found = build_seasonal(tables['county_monthly'], county_annual,
                                                       lookup=tables['names'],
                                                       lookup_name='names',
                                                       on_insufficient=on_insufficient,
                                                       strict=strict_joins)
    mismatches += found

    county_lookup = tables['names'].merge(tables['population'], on='fips', how='outer')
    outputs['county_annual'], found = finalize(county_annual, county_lookup,
                                               lookup_name='names/population',
                                               strict=strict_joins)
    mismatches.append(found)

    outputs['population_by_bin'] = population_by_bin(county_annual, tables['population'])

    if tables.get('shapes') is not None:
        outputs['county_geodata'], found = build_county_geodata(tables['shapes'], county_annual,
                                                                tables['population'],
                                                                strict=strict_joins)
        mismatches.append(found)

    return outputs, mismatches
