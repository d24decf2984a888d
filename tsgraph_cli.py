#!/usr/bin/env python3
"""
tsgraph CLI - build and evaluate time-series model graphs

Install: pip install -e .
Run: python tsgraph_cli.py --help
"""

import logging
import sys

import click
import yaml

from tsgraph import __version__
from tsgraph.core import (
    ComponentRegistry,
    CycleDetectedError,
    InvalidSocketError,
    DirectedGraph,
    GraphBuilder,
    describe_sockets,
)
from tsgraph.data import TimeSeries, MVTimeSeries, Longitudinal, read_csv_series
from tsgraph.numerics import adfuller
from tsgraph.utils import load_config, setup_logging


BANNER = """
 ████████╗███████╗ ██████╗ ██████╗  █████╗ ██████╗ ██╗  ██╗
 ╚══██╔══╝██╔════╝██╔════╝ ██╔══██╗██╔══██╗██╔══██╗██║  ██║
    ██║   ███████╗██║  ███╗██████╔╝███████║██████╔╝███████║
    ██║   ╚════██║██║   ██║██╔══██╗██╔══██║██╔═══╝ ██╔══██║
    ██║   ███████║╚██████╔╝██║  ██║██║  ██║██║     ██║  ██║
    ╚═╝   ╚══════╝ ╚═════╝ ╚═╝  ╚═╝╚═╝  ╚═╝╚═╝     ╚═╝  ╚═╝
"""


def describe_value(value) -> str:
    """One-line summary of a socket value."""
    if value is None:
        return "(invalid)"
    if isinstance(value, TimeSeries):
        if len(value) == 0:
            return f"{value!r}"
        return f"{value!r} last={value[len(value) - 1]:.6g}"
    if isinstance(value, (MVTimeSeries, Longitudinal)):
        return repr(value)
    return repr(value)


@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def tsgraph(ctx, verbose):
    """
    tsgraph: composable time-series models wired as a dataflow graph.

    Describe nodes and links in YAML, then build, cascade and inspect the
    resulting graph.
    """
    setup_logging('tsgraph', level=logging.DEBUG if verbose else logging.WARNING)
    if ctx.invoked_subcommand is None:
        click.secho(BANNER, fg='bright_blue', bold=True)
        click.echo(ctx.get_help())


@tsgraph.command()
@click.argument('config', type=click.Path(exists=True))
def run(config):
    """Build a graph from CONFIG, cascade from its sources and print outputs."""
    click.echo()
    click.secho("▶ Running graph ", fg='cyan', nl=False)
    click.secho(config, fg='bright_cyan', bold=True)
    click.echo()

    try:
        graph_config = load_config(config)
        built = GraphBuilder.build(graph_config)
        if not graph_config.cascade_on_build:
            built.cascade_all()
    except (ValueError, CycleDetectedError, InvalidSocketError, OSError) as e:
        click.secho(f"❌ Run failed: {e}", fg='red', bold=True)
        sys.exit(1)

    for name, record in built.records.items():
        item = record.item
        valid = getattr(item, 'is_valid', False)
        icon = "✅" if valid else "⚠️ "
        click.secho(f"   {icon} ", fg='green' if valid else 'yellow', nl=False)
        click.secho(f"{name:<16}", bold=True, nl=False)
        click.secho(type(item).__name__, fg='white', dim=True)
        for socket in range(item.num_outputs()):
            click.echo(f"      └─ {item.get_output_name(socket)}: "
                       f"{describe_value(item.get_output(socket))}")

    click.echo()


@tsgraph.command()
@click.argument('config', type=click.Path(exists=True))
@click.option('--verbose', '-v', is_flag=True, help='Show detailed validation')
def validate(config, verbose):
    """Validate a graph configuration file."""
    click.echo()
    click.secho("🔍 Validating Configuration", fg='cyan', bold=True)
    click.echo("   " + "─" * 50)
    click.echo()

    try:
        graph_config = load_config(config)
        graph_config.cascade_on_build = False
        built = GraphBuilder.build(graph_config)
    except (ValueError, OSError) as e:
        click.secho(f"❌ Validation failed: {e}", fg='red', bold=True)
        sys.exit(1)

    click.secho("   ✅ ", fg='green', nl=False)
    click.echo(f"{len(graph_config.nodes)} nodes instantiated")

    graph: DirectedGraph = built.graph
    problems = []
    for link in graph.links():
        source = graph[link.start].item
        target = graph[link.end].item
        if link.start_socket >= source.num_outputs():
            problems.append(f"{built.name_of(graph[link.start])} has no output socket {link.start_socket}")
        if link.end_socket >= target.num_inputs():
            problems.append(f"{built.name_of(graph[link.end])} has no input socket {link.end_socket}")

    cycles = graph.detect_cycles()
    for cycle in cycles:
        names = [built.name_of(graph[i]) for i in cycle]
        problems.append(f"cycle: {' -> '.join(names)}")

    if problems:
        for problem in problems:
            click.secho("   ❌ ", fg='red', nl=False)
            click.echo(problem)
        click.echo()
        click.secho(f"❌ {len(problems)} problem(s) found", fg='red', bold=True)
        sys.exit(1)

    click.secho("   ✅ ", fg='green', nl=False)
    click.echo(f"{len(graph_config.links)} links reference valid sockets")
    click.secho("   ✅ ", fg='green', nl=False)
    click.echo("No cycles")
    click.echo()
    click.secho("✅ Configuration is valid!", fg='green', bold=True)

    if verbose:
        click.echo()
        click.secho("📋 Configuration Summary:", fg='cyan')
        click.echo(yaml.dump(graph_config.to_dict(), default_flow_style=False, sort_keys=False))


@tsgraph.command()
@click.option('--sockets', '-s', is_flag=True, help='Show socket declarations')
def components(sockets):
    """List registered node components."""
    click.echo()
    for category in ComponentRegistry.list_categories():
        names = ComponentRegistry.list_components(category)
        click.secho(f"📦 {category}", fg='cyan', bold=True)
        if not names:
            click.secho("   (none)", fg='white', dim=True)
        for name in names:
            component_cls = ComponentRegistry.get(category, name)
            click.secho(f"   {name:<22}", fg='bright_cyan', nl=False)
            click.secho(component_cls.__name__, fg='white', dim=True)
            if sockets:
                try:
                    instance = component_cls()
                except TypeError:
                    continue
                for spec in describe_sockets(instance):
                    click.echo(f"      └─ {spec!r}")
    click.echo()


@tsgraph.command()
@click.argument('csv', type=click.Path(exists=True))
@click.option('--column', '-c', required=True, help='Value column')
@click.option('--time-column', '-t', default='date', show_default=True, help='Timestamp column')
@click.option('--lags', '-l', default=1, show_default=True, help='Lagged differences')
@click.option('--significance', '-a', default='0.05', show_default=True,
              type=click.Choice(['0.01', '0.05', '0.1']), help='Test level')
def adf(csv, column, time_column, lags, significance):
    """Augmented Dickey-Fuller unit-root test on one CSV column."""
    try:
        series = read_csv_series(csv, column, time_column=time_column)
        result = adfuller(series, significance=float(significance), lags=lags)
    except (ValueError, OSError) as e:
        click.secho(f"❌ ADF test failed: {e}", fg='red', bold=True)
        sys.exit(1)

    click.echo()
    click.secho(f"📈 ADF test on {column} (n={len(series)})", fg='cyan', bold=True)
    click.echo(f"   Statistic:      {result.statistic:.4f}")
    click.echo(f"   Critical value: {result.critical_value:.2f} "
               f"({result.significance:.0%}, n≈{result.table_size})")
    click.echo(f"   Lags:           {result.lags}")
    if result.is_stationary:
        click.secho("   ✅ Unit root rejected: series looks stationary", fg='green')
    else:
        click.secho("   ⚠️  Unit root not rejected", fg='yellow')
    click.echo()


@tsgraph.command()
def info():
    """Show tsgraph information."""
    click.secho(BANNER, fg='bright_blue', bold=True)
    click.secho("📊 Framework Information", fg='cyan', bold=True)
    click.echo("   " + "─" * 50)

    info_items = [
        ("Version", __version__),
        ("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"),
        ("Components", str(sum(len(ComponentRegistry.list_components(c))
                               for c in ComponentRegistry.list_categories()))),
    ]

    for label, value in info_items:
        click.secho(f"   {label:<15}", fg='white', dim=True, nl=False)
        click.secho(value, fg='cyan')

    click.echo()


if __name__ == '__main__':
    tsgraph()
