"""Synthetic climate division records with known trends."""
import numpy as np
import pandas as pd
from climdiv_trends.utils import MONTHS, classify_season

YEARS = np.arange(1895, 2020)


def make_annual(trends, years=YEARS, base=50.0):
    """Annual records, temp = base + slope*(year - 1895) for each {fips: slope}."""
    frames = []
    for fips, slope in trends.items():
        frames.append(pd.DataFrame({'fips': fips,
                                    'year': years,
                                    'temp': base + slope*(years - years[0])}))
    return pd.concat(frames, ignore_index=True)


def make_monthly(trends, years=np.arange(1895, 2021), base=50.0):
    """Monthly records for each {fips: {season: slope}}.

    Every month of a season year carries the same value, base + slope*(season_year - 1895),
    so seasonal means lie exactly on the line.
    """
    rows = []
    for fips, slopes in trends.items():
        for year in years:
            for month in MONTHS:
                season, season_year = classify_season(month, year)
                if season not in slopes:
                    continue
                rows.append((fips, year, month, base + slopes[season]*(season_year - 1895)))
    return pd.DataFrame(rows, columns=['fips', 'year', 'month', 'temp'])
