"""Command-line interface for querybench.

Generates devops benchmark queries for a time-series backend and writes
them one per line, either as JSON records or as rendered query text.

Example:
    querybench generate --dialect cassandra --scale-var 100 --queries 10000 -o queries.jsonl
"""

import json
import logging
import sys
from datetime import datetime

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from querybench import __version__
from querybench.catalog import QUERY_TYPE_ALIASES
from querybench.config import GeneratorConfig
from querybench.errors import QueryGenError
from querybench.generators.registry import DIALECTS, create_generator
from querybench.queries.base import Query
from querybench.runners.query_driver import QueryDriver

# stdout may carry the generated queries
console = Console(stderr=True)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _parse_weights(raw: str | None) -> dict[str, int] | None:
    """Parse "name=weight,name=weight" into a dict."""
    if not raw:
        return None
    weights = {}
    for item in raw.split(","):
        name, sep, weight = item.partition("=")
        if not sep:
            raise click.BadParameter(f"expected name=weight, got '{item}'", param_hint="--weights")
        try:
            weights[name.strip()] = int(weight)
        except ValueError:
            raise click.BadParameter(f"weight for '{name}' is not an integer", param_hint="--weights") from None
    return weights


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    help="Logging verbosity",
    show_default=True,
)
def main(log_level: str) -> None:
    """querybench: synthetic devops queries for time-series load tests.

    Produces a stream of randomized aggregation queries (random hosts,
    random time windows) shaped for Cassandra or InfluxDB.
    """
    _setup_logging(log_level)


@main.command()
@click.option(
    "--dialect",
    "-d",
    type=click.Choice(sorted(DIALECTS)),
    default=None,
    help="Target backend  [default: cassandra]",
)
@click.option("--target", "-t", type=str, default=None, help="Keyspace or database name  [default: benchmark_db]")
@click.option(
    "--start",
    type=click.DateTime(formats=["%Y-%m-%dT%H:%M:%SZ", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d"]),
    default=None,
    help="Start of the loaded data (UTC)  [default: 2016-01-01T00:00:00Z]",
)
@click.option(
    "--end",
    type=click.DateTime(formats=["%Y-%m-%dT%H:%M:%SZ", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d"]),
    default=None,
    help="End of the loaded data (UTC)  [default: 2016-01-02T06:00:00Z]",
)
@click.option("--scale-var", "-s", type=int, default=None, help="Number of simulated hosts  [default: 1]")
@click.option("--queries", "-n", type=int, default=None, help="Number of queries to generate  [default: 1000]")
@click.option(
    "--query-type",
    "-q",
    type=str,
    default=None,
    help=f"'all', a catalog entry, or one of: {', '.join(QUERY_TYPE_ALIASES)}",
)
@click.option("--weights", type=str, default=None, help="Weighted schedule, e.g. '1-host-1-hr=3,groupby=1'")
@click.option("--seed", type=int, default=None, help="Random seed for reproducibility")
@click.option("--workers", "-w", type=int, default=None, help="Generator threads  [default: 1]")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, allow_dash=True),
    default="-",
    help="Output file, '-' for stdout",
    show_default=True,
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"]),
    default="json",
    help="One JSON record or one rendered query per line",
    show_default=True,
)
@click.option("--include-unsupported", is_flag=True, help="Rotate over placeholder shapes too (they are skipped)")
@click.option("--progress/--no-progress", default=False, help="Show a progress bar")
def generate(
    dialect: str | None,
    target: str | None,
    start: datetime | None,
    end: datetime | None,
    scale_var: int | None,
    queries: int | None,
    query_type: str | None,
    weights: str | None,
    seed: int | None,
    workers: int | None,
    output: str,
    output_format: str,
    include_unsupported: bool,
    progress: bool,
) -> None:
    """Generate benchmark queries.

    Options not given on the command line fall back to QUERYBENCH_*
    environment variables (a .env file is read), then to the defaults.

    Example:
        querybench generate -d influx -s 100 -n 1000 -q 8-host-1-hr --format text
    """
    try:
        config = GeneratorConfig.from_env(
            dialect=dialect,
            target_name=target,
            start=start,
            end=end,
            scale_var=scale_var,
            total_queries=queries,
            query_type=query_type,
            seed=seed,
            workers=workers,
            weights=_parse_weights(weights),
        )
    except ValidationError as e:
        console.print(f"[red]Error: invalid configuration[/red]\n{e}")
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    try:
        generator = create_generator(
            config.dialect,
            config.target_name,
            config.start,
            config.end,
            seed=config.seed,
        )
        driver = QueryDriver(
            generator,
            query_type=config.query_type,
            weights=config.weights,
            workers=config.workers,
            include_unsupported=include_unsupported,
        )
    except (QueryGenError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    with click.open_file(output, "w") as out:

        def write(q: Query) -> None:
            if output_format == "json":
                out.write(json.dumps(q.to_dict()) + "\n")
            else:
                out.write(q.render() + "\n")

        try:
            stats = driver.run(
                total_queries=config.total_queries,
                scale_var=config.scale_var,
                sink=write,
                show_progress=progress,
            )
        except QueryGenError as e:
            console.print(f"[red]Error: {e}[/red]")
            sys.exit(1)

    table = Table(title=f"{stats.dialect} queries ({stats.query_type})")
    table.add_column("Label", style="cyan")
    table.add_column("Count", justify="right", style="green")
    for label, count in sorted(stats.by_label.items()):
        table.add_row(label, str(count))
    for entry, count in sorted(stats.skipped_entries.items()):
        table.add_row(f"[yellow]{entry} (unsupported, skipped)[/yellow]", str(count))
    console.print(table)

    console.print(
        f"[bold green]✓ Generated {stats.generated} queries[/bold green] "
        f"in {stats.elapsed:.2f}s ({stats.queries_per_second:,.0f} q/s), "
        f"pool reuse {stats.pool_reused}/{stats.pool_reused + stats.pool_allocated}"
    )


@main.command(name="catalog")
@click.option(
    "--dialect",
    "-d",
    type=click.Choice(sorted(DIALECTS)),
    default="cassandra",
    show_default=True,
    help="Dialect whose catalog to list",
)
def show_catalog(dialect: str) -> None:
    """List the query shapes a dialect can generate."""
    config = GeneratorConfig(dialect=dialect)
    generator = create_generator(config.dialect, config.target_name, config.start, config.end)

    aliases = {name: alias for alias, name in QUERY_TYPE_ALIASES.items()}
    table = Table(title=f"{dialect} catalog")
    table.add_column("Name", style="cyan")
    table.add_column("Alias")
    table.add_column("Label")
    table.add_column("Hosts", justify="right")
    table.add_column("Supported")
    for row in generator.describe():
        table.add_row(
            row["name"],
            aliases.get(row["name"], ""),
            row["label"],
            str(row["hosts"]),
            "[green]yes[/green]" if row["supported"] else "[yellow]no[/yellow]",
        )
    console.print(table)


if __name__ == "__main__":
    main()
