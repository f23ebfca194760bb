"""
Inspect SAS XPORT/XPT-format files from the command line.
"""

# Standard Library
import copy
import functools
import json
import logging
import logging.config
import sys

# Community Packages
import click
import yaml

# Xptview Modules
import xptview
import xptview.v56

__all__ = [
    'cli',
]

yaml_load = functools.partial(yaml.load, Loader=getattr(yaml, 'CSafeLoader', yaml.SafeLoader))

try:
    with open('logging.yml') as file:
        LOG_CONFIG = yaml_load(file)
except FileNotFoundError:
    LOG_CONFIG = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'brief': {'format': '%(levelname)s %(name)s: %(message)s'},
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'brief',
                'stream': 'ext://sys.stderr',
            },
        },
        'loggers': {
            'xptview': {'level': 'WARNING', 'handlers': ['console']},
        },
    }
logging.config.dictConfig(LOG_CONFIG)

LOG = logging.getLogger(__name__)
log_levels = [name for x, name in sorted(logging._levelToName.items()) if x]


@click.command(
    context_settings={'help_option_names': ['-h', '--help']},
)
@click.argument('input', type=click.File('rb'))
@click.argument(
    'output',
    type=click.File('wt'),
    default=sys.stdout,
)
@click.option(
    '--dataset', metavar='NAME', help='Select a dataset by name.  Defaults to the first dataset.'
)
@click.option(
    '--list', 'list_datasets', is_flag=True, help='List the datasets and their observation counts.'
)
@click.option('--contents', is_flag=True, help='Show the variables of the selected dataset.')
@click.option('--json', 'as_json', is_flag=True, help='Dump every dataset and its preview as JSON.')
@click.option(
    '--loglevel',
    metavar='LEVEL',
    type=click.Choice(log_levels, case_sensitive=False),
    help=f'Set logging level.  {{{", ".join(log_levels[:-1])}}}',
)
@click.version_option(version=str(xptview.__version__))
def cli(input, output, dataset, list_datasets, contents, as_json, loglevel):
    """
    Preview SAS Transport (XPORT) files as comma-separated values (CSV).
    """
    if loglevel:
        config = copy.deepcopy(LOG_CONFIG)
        for name, logger in config.get('loggers', {}).items():
            logger['level'] = loglevel.upper()
        logging.config.dictConfig(config)

    LOG.debug('Xptview version %s', xptview.__version__)
    LOG.debug('CLI arg --loglevel = %r', loglevel)
    LOG.debug('Using logging config %s', json.dumps(LOG_CONFIG, indent=2))

    try:
        xpt = xptview.v56.load(input)
    except xptview.XportError as e:
        raise click.ClickException(f'{type(e).__name__}: {e}') from e

    if as_json:
        json.dump(xpt.to_dict(), output, indent=2)
        output.write('\n')
        return
    if list_datasets:
        for ds in xpt:
            label = ds.label if ds.label is not None else ''
            output.write(f'{ds.name}\t{ds.observation_count}\t{len(ds.fields)}\t{label}\n')
        return

    if dataset is not None:
        try:
            ds = xpt[dataset]
        except KeyError:
            raise click.ClickException(f'No dataset named {dataset!r}, choose from {xpt.names}')
    elif xpt:
        ds = next(iter(xpt))
    else:
        raise click.ClickException('File has no member datasets')
    LOG.info(f'Selected dataset {ds.name!r}')

    if contents:
        output.write(ds.contents.to_string() + '\n')
    else:
        ds.to_dataframe().to_csv(output, index=False)
