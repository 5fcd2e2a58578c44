"""Command-line front end.

    cachesim [-hv] -s <num> -E <num> -b <num> -t <file>

Replays a memory trace through the simulated cache, prints
`hits:H misses:M evictions:E` and stores `H M E` in the results file.
"""
import logging

import click

from cachesim.core.address import CacheGeometry, ConfigurationError
from cachesim.core.cache import Cache
from cachesim.core.simulator import CacheSimulator
from cachesim.core.trace import TraceFormatError
from cachesim.data.stats_export import (
    RESULTS_FILE,
    Exporter,
    export_chart_pdf,
    export_stats_json,
    summary_line,
)

logger = logging.getLogger(__name__)

EXAMPLES = """\b
Examples:
  cachesim -s 4 -E 1 -b 4 -t traces/t1.trace
  cachesim -s 8 -E 2 -b 4 -t traces/t1.trace -v
"""


def _setup_logging(verbose: int):
    level = logging.WARNING
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    logging.basicConfig(level=level, format='%(message)s')


def _echo_access(record, outcome):
    click.echo(f"{record.format()} {' '.join(outcome.events())}")


@click.command(epilog=EXAMPLES, context_settings={'help_option_names': ['-h', '--help']})
@click.option('-s', 's', type=int, default=0, help='Number of set index bits.')
@click.option('-E', 'E', type=int, default=0, help='Number of lines per set.')
@click.option('-b', 'b', type=int, default=0, help='Number of block offset bits.')
@click.option('-t', 'trace_file', type=click.Path(dir_okay=False), default=None, help='Trace filename.')
@click.option('-v', 'verbose', count=True, help='Print verbose output (repeat for debug logging).')
@click.option('--results-file', type=click.Path(dir_okay=False), default=RESULTS_FILE, show_default=True,
              help='Where to write "hits misses evictions".')
@click.option('--csv', 'csv_path', type=click.Path(dir_okay=False), default=None, help='Also export statistics as CSV.')
@click.option('--json', 'json_path', type=click.Path(dir_okay=False), default=None, help='Also export statistics as JSON.')
@click.option('--chart', 'chart_path', type=click.Path(dir_okay=False), default=None,
              help='Save a hit/miss/eviction bar chart (format from extension).')
@click.option('--skip-malformed', is_flag=True, help='Skip unparsable trace lines instead of aborting.')
@click.pass_context
def main(ctx, s, E, b, trace_file, verbose, results_file, csv_path, json_path, chart_path, skip_malformed):
    """Simulate an LRU set-associative cache over a memory trace."""
    # Make sure that all required command line args were specified
    if s <= 0 or E <= 0 or b <= 0 or trace_file is None:
        click.echo(f"{ctx.info_name}: Missing required command line argument")
        click.echo(ctx.get_help())
        ctx.exit(1)

    _setup_logging(verbose)

    try:
        geometry = CacheGeometry(s=s, b=b, E=E)
    except ConfigurationError as e:
        raise click.UsageError(str(e), ctx=ctx)
    logger.info("S=%d sets, E=%d lines, B=%d bytes per block", geometry.num_sets, geometry.E, geometry.block_size)

    sim = CacheSimulator(Cache(geometry=geometry))
    try:
        stats = sim.run_trace(trace_file, callback=_echo_access if verbose else None,
                              skip_malformed=skip_malformed)
    except OSError as e:
        raise click.FileError(trace_file, hint=e.strerror or str(e))
    except TraceFormatError as e:
        raise click.ClickException(f"{trace_file}: {e}")

    # Output the final cache statistics
    click.echo(summary_line(stats))
    Exporter.write_results(results_file, stats)
    if csv_path:
        Exporter.export_stats_csv(csv_path, stats)
    if json_path:
        export_stats_json(stats, json_path)
    if chart_path:
        export_chart_pdf(stats, chart_path)
