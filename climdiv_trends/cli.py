# -*- coding: utf-8 -*-

"""Console script for climdiv_trends."""
import logging
import os
import sys

import click
import geopandas as gpd
from climdiv_trends import data
from climdiv_trends.data import check_columns
from climdiv_trends.errors import ClimdivError, InputReadError
from climdiv_trends.pipeline import run

CSV_OUTPUTS = ['national_annual', 'state_seasonal', 'county_seasonal', 'county_annual',
               'population_by_bin']


def load_tables(national, state, county, state_monthly, county_monthly, population, names,
                state_fips, shapes=None):
    """Read every input table, checking schemas as they are loaded."""
    tables = {'national': data.load_series(national, 'national'),
              'state': data.load_series(state, 'state'),
              'county': data.load_series(county, 'county'),
              'state_monthly': data.load_series(state_monthly, 'state', monthly=True),
              'county_monthly': data.load_series(county_monthly, 'county', monthly=True),
              'population': data.load_population(population),
              'names': data.load_names(names),
              'state_fips': data.load_state_fips(state_fips)}
    if shapes is not None:
        try:
            gdf = gpd.read_file(shapes)
        except (OSError, RuntimeError, ValueError) as e:  # pyogrio DataSourceError is a RuntimeError
            raise InputReadError(shapes, e)
        check_columns(gdf, ['GEOID', 'ALAND'], numeric=['ALAND'], table=shapes)
        tables['shapes'] = gdf
    return tables


def write_outputs(outputs, outdir):
    """Write (and overwrite) the output tables in outdir.

    The geodata goes first, so a failed GeoJSON write leaves no new CSVs behind.
    """
    os.makedirs(outdir, exist_ok=True)
    if 'county_geodata' in outputs:
        outputs['county_geodata'].to_file(os.path.join(outdir, 'county_geodata.geojson'),
                                          driver='GeoJSON')
    for name in CSV_OUTPUTS:
        outputs[name].to_csv(os.path.join(outdir, '%s.csv' % name), index=False)


@click.command()
@click.option('--national', required=True, type=click.Path(exists=True, dir_okay=False),
              help='National annual (or monthly) series.')
@click.option('--state', required=True, type=click.Path(exists=True, dir_okay=False),
              help='State annual (or monthly) series.')
@click.option('--county', required=True, type=click.Path(exists=True, dir_okay=False),
              help='County annual (or monthly) series.')
@click.option('--state-monthly', required=True, type=click.Path(exists=True, dir_okay=False),
              help='State monthly series.')
@click.option('--county-monthly', required=True, type=click.Path(exists=True, dir_okay=False),
              help='County monthly series.')
@click.option('--population', required=True, type=click.Path(exists=True, dir_okay=False),
              help='County population estimates.')
@click.option('--names', required=True, type=click.Path(exists=True, dir_okay=False),
              help='County and state names.')
@click.option('--state-fips', required=True, type=click.Path(exists=True, dir_okay=False),
              help='State FIPS lookup.')
@click.option('--shapes', default=None, type=click.Path(exists=True),
              help='County boundaries (any format geopandas reads).')
@click.option('--outdir', required=True, type=click.Path(file_okay=False),
              help='Directory for the output tables.')
@click.option('--on-insufficient', default='skip', show_default=True,
              type=click.Choice(['skip', 'raise']),
              help='What to do with series too short to fit a trend.')
@click.option('--strict-joins', is_flag=True, help='Fail on ids missing from one side of a join.')
@click.option('-v', '--verbose', is_flag=True, help='Log progress.')
def main(national, state, county, state_monthly, county_monthly, population, names, state_fips,
         shapes, outdir, on_insufficient, strict_joins, verbose):
    """Compute and rank long-term temperature trends from climate division records."""
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    try:
        tables = load_tables(national, state, county, state_monthly, county_monthly, population,
                             names, state_fips, shapes)
        outputs, mismatches = run(tables, on_insufficient=on_insufficient,
                                  strict_joins=strict_joins)
    except (ClimdivError, ValueError, OSError) as e:  # includes pandas parser and merge errors
        raise click.ClickException(str(e))

    for mismatch in mismatches:
        if mismatch:
            click.echo('Join check: %s' % mismatch, err=True)

    try:
        write_outputs(outputs, outdir)
    except (OSError, RuntimeError) as e:
        raise click.ClickException('writing %s failed: %s' % (outdir, e))
    click.echo('Wrote %i tables to %s' % (len(outputs), outdir))

    top = outputs['county_seasonal'].head(5)
    for _, row in top.iterrows():
        click.echo('%s %s, %s: %0.2f C' % (row['fips'], row['county_name'], row['state_name'],
                                           row['Annual']))
    return 0


if __name__ == '__main__':
    sys.exit(main())  # pragma: no cover
