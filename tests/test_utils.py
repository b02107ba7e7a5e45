#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""Tests for season assignment, unit conversion and warming bins."""

import unittest

import numpy as np
import pandas as pd

from climdiv_trends.errors import UnrecognizedMonth
from climdiv_trends.utils import (BIN_LABELS, MONTHS, SEASONS, add_season_columns,
                                  classify_season, dF_to_dC, warming_bin)


class TestSeasons(unittest.TestCase):

    def test_december_stays_in_its_year(self):
        self.assertEqual(classify_season('Dec', 1999), ('Winter', 1999))

    def test_jan_feb_belong_to_previous_winter(self):
        self.assertEqual(classify_season('Jan', 2000), ('Winter', 1999))
        self.assertEqual(classify_season('Feb', 2000), ('Winter', 1999))

    def test_other_months(self):
        expected = {'Mar': 'Spring', 'Apr': 'Spring', 'May': 'Spring',
                    'Jun': 'Summer', 'Jul': 'Summer', 'Aug': 'Summer',
                    'Sep': 'Fall', 'Oct': 'Fall', 'Nov': 'Fall'}
        for month, season in expected.items():
            self.assertEqual(classify_season(month, 1950), (season, 1950))

    def test_unrecognized_month(self):
        for month in ['dec', 'December', '12', '', None]:
            with self.assertRaises(UnrecognizedMonth):
                classify_season(month, 2000)

    def test_frame_matches_scalar(self):
        df = pd.DataFrame({'fips': '01',
                           'year': np.repeat([1999, 2000, 2001], 12),
                           'month': MONTHS * 3})
        out = add_season_columns(df)
        for _, row in out.iterrows():
            self.assertEqual((row['season'], row['season_year']),
                             classify_season(row['month'], row['year']))
        self.assertNotIn('season', df.columns)

    def test_seasons_partition_records(self):
        years = np.arange(1990, 2000)
        df = pd.DataFrame({'fips': '01',
                           'year': np.repeat(years, 12),
                           'month': MONTHS * len(years)})
        out = add_season_columns(df)

        # every record gets exactly one season
        self.assertEqual(len(out), len(df))
        self.assertTrue(out['season'].isin(SEASONS).all())

        # interior season years have exactly three months in each season, with no overlap
        interior = out[(out['season_year'] > years[0]) & (out['season_year'] < years[-1])]
        counts = interior.groupby(['season_year', 'season']).size()
        self.assertTrue((counts == 3).all())
        self.assertEqual(len(counts), 4*(len(years) - 2))

        winter = out[(out['season'] == 'Winter') & (out['season_year'] == 1995)]
        self.assertEqual(sorted(zip(winter['year'], winter['month'])),
                         [(1995, 'Dec'), (1996, 'Feb'), (1996, 'Jan')])

    def test_frame_unrecognized_month(self):
        df = pd.DataFrame({'fips': ['01', '02', '02'],
                           'year': [2000, 2000, 2000],
                           'month': ['Jan', 'Janu', 'feb']})
        with self.assertRaises(UnrecognizedMonth) as cm:
            add_season_columns(df)
        self.assertEqual(sorted(cm.exception.values), ['Janu', 'feb'])
        self.assertEqual(cm.exception.units, ['02'])


class TestWarmingBins(unittest.TestCase):

    def test_boundaries(self):
        values = [-3.0, 0.0, 1e-9, 0.5, 0.5001, 1.0, 1.2, 1.5, 2.0, 2.0001, 40.0]
        expected = ['<= 0', '<= 0', '0 - 0.5', '0 - 0.5', '0.5 - 1.0', '0.5 - 1.0',
                    '1.0 - 1.5', '1.0 - 1.5', '1.5 - 2.0', '> 2.0', '> 2.0']
        self.assertEqual(list(warming_bin(values)), expected)

    def test_total_and_exclusive(self):
        np.random.seed(123)
        values = np.concatenate((10*np.random.randn(1000), [-np.inf, np.inf]))
        bins = pd.Series(warming_bin(values))
        self.assertTrue(bins.notna().all())
        self.assertTrue(bins.isin(BIN_LABELS).all())

    def test_missing_stays_missing(self):
        bins = warming_bin(pd.Series([np.nan, 1.0]))
        self.assertTrue(pd.isna(bins.iloc[0]))
        self.assertEqual(bins.iloc[1], '0.5 - 1.0')


class TestConversion(unittest.TestCase):

    def test_dF_to_dC(self):
        self.assertAlmostEqual(dF_to_dC(1.8), 1.0)
        self.assertAlmostEqual(dF_to_dC(3.72), 2.0666666666666667)


if __name__ == '__main__':
    unittest.main()
