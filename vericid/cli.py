"""
VERICID CLI - content identifiers and provenance lookups from the terminal
"""
import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from vericid.cid.encoder import CIDEncoder
from vericid.cid.hashing import HashEngine
from vericid.config import get_config
from vericid.provenance.aggregator import ProvenanceAggregator
from vericid.provenance.certificate import ReportCertificate
from vericid.service import ProvenanceService
from vericid.sources.api_clients import WorkerSourceClient
from vericid.sources.fetcher import ProvenanceFetcher
from vericid.sources.index import InMemoryOriginIndex
from vericid.utils import VericidError, get_logger, setup_logging, read_json

console = Console()
logger = get_logger(__name__)


# ═══════════════════════════════════════════════════════════════════
# MAIN CLI GROUP
# ═══════════════════════════════════════════════════════════════════

@click.group()
@click.version_option(version="0.1.0")
@click.option("--log-level", default=None, help="Override VERICID_LOG_LEVEL")
def main(log_level):
    """
    VERICID - content identifiers and provenance

    Compute CIDv0/CIDv1 for files and find where that content has
    been seen before.
    """
    config = get_config()
    setup_logging(log_level or config.log_level, config.log_file)


# ═══════════════════════════════════════════════════════════════════
# CID COMMANDS
# ═══════════════════════════════════════════════════════════════════

@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--algorithm", "-a", default=None, help="Multihash function (default from config)")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
def cid(path, algorithm, as_json):
    """Compute CIDv0 and CIDv1 for a file"""
    config = get_config()
    try:
        engine = HashEngine(algorithm or config.hash_algorithm, config.hash_chunk_size)
        digest = engine.digest_file(path)
        cids = CIDEncoder().encode(digest)
    except VericidError as e:
        console.print(f"[red]✗ Error: {e}[/red]")
        raise SystemExit(1)

    if as_json:
        click.echo(json.dumps({
            "v0": cids.v0,
            "v1": cids.v1,
            "digest": digest.hex(),
            "hash_function": digest.algorithm,
        }, indent=2))
        return

    table = Table(title=f"Content identifiers for {Path(path).name}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_row("CIDv0", cids.v0)
    table.add_row("CIDv1", cids.v1)
    table.add_row("Digest", f"{digest.algorithm}:{digest.hex()}")
    console.print(table)


@main.command()
@click.argument("identifier")
def decode(identifier):
    """Decode a CID string and show its parts"""
    try:
        parsed = CIDEncoder().decode(identifier)
    except VericidError as e:
        console.print(f"[red]✗ Error: {e}[/red]")
        raise SystemExit(1)

    table = Table(title="Decoded CID")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="magenta")
    for key, value in parsed.to_dict().items():
        table.add_row(key, str(value))
    console.print(table)


# ═══════════════════════════════════════════════════════════════════
# PROVENANCE COMMANDS
# ═══════════════════════════════════════════════════════════════════

def _build_fetcher(sources, index_path) -> ProvenanceFetcher:
    config = get_config()
    if not sources and not index_path:
        return ProvenanceFetcher.from_config(config)

    clients = []
    if index_path:
        clients.append(InMemoryOriginIndex.from_json(index_path))
    for url in sources:
        clients.append(WorkerSourceClient(
            url,
            timeout=config.source_timeout,
            max_retries=config.source_max_retries,
            retry_delay=config.source_retry_delay,
        ))
    return ProvenanceFetcher(clients, max_workers=config.fetch_max_workers)


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--source", "-s", "sources", multiple=True, help="Lookup worker URL (repeatable)")
@click.option("--index", "-i", "index_path", type=click.Path(exists=True, dir_okay=False),
              help="Local origin index JSON")
@click.option("--format", "-f", "fmt", type=click.Choice(["table", "json", "markdown"]),
              default="table", show_default=True)
@click.option("--output", "-o", type=click.Path(), help="Write the certificate to a file")
@click.option("--deadline", type=float, default=None, help="Stop waiting for sources after N seconds")
def lookup(path, sources, index_path, fmt, output, deadline):
    """Find where a file's content has been seen before"""
    config = get_config()
    try:
        fetcher = _build_fetcher(sources, index_path)
    except (OSError, ValueError) as e:
        console.print(f"[red]✗ Error: cannot load origin index: {e}[/red]")
        raise SystemExit(1)
    if not fetcher.sources:
        console.print("[yellow]No provenance sources configured (use --source or --index).[/yellow]")

    service = ProvenanceService(
        fetcher=fetcher,
        engine=HashEngine(config.hash_algorithm, config.hash_chunk_size),
        aggregator=ProvenanceAggregator(),
        deadline=deadline if deadline is not None else config.fetch_deadline,
    )

    try:
        with console.status("[bold green]Querying provenance sources..."):
            check = service.check_file(path)
    except VericidError as e:
        console.print(f"\n[red]✗ Error: {e}[/red]")
        raise SystemExit(1)

    certificate = ReportCertificate()
    if fmt == "json":
        rendered = json.dumps(certificate.generate(check.result, check.cids), indent=2)
    elif fmt == "markdown":
        rendered = certificate.generate_markdown(check.result, check.cids)
    else:
        rendered = None
        _print_report(check)

    if rendered is not None:
        if output:
            output_path = Path(output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(rendered, encoding="utf-8")
            console.print(f"[green]✓ Saved to {output}[/green]")
        else:
            click.echo(rendered)

    if check.result.all_failed:
        raise SystemExit(2)


def _print_report(check) -> None:
    report = check.result.report
    console.print(f"\n[bold blue]CIDv0:[/bold blue] {check.cids.v0}")
    console.print(f"[bold blue]CIDv1:[/bold blue] {check.cids.v1}")

    table = Table(title=f"Origins ({report.total_origins}) - trust tier: {report.trust_tier.value}")
    table.add_column("Network", style="cyan")
    table.add_column("Address", style="magenta")
    table.add_column("Type")
    table.add_column("Seen", style="green")
    table.add_column("Explorer")
    for origin in report.origins:
        table.add_row(
            origin.network,
            origin.address,
            origin.metadata.get("standard") or origin.metadata.get("type", ""),
            origin.observed_at.isoformat() if origin.observed_at else "-",
            origin.explorer_url or "-",
        )
    console.print(table)

    for failure in check.result.failures:
        console.print(f"[yellow]! {failure.source} ({failure.identifier}): {failure.error}[/yellow]")
    if check.result.all_failed:
        console.print("[red]✗ Every lookup failed - no origins does not mean unseen.[/red]")


@main.command()
@click.argument("certificate_path", type=click.Path(exists=True, dir_okay=False))
def verify(certificate_path):
    """Verify the checksum of a JSON provenance certificate"""
    try:
        data = read_json(certificate_path)
    except (OSError, ValueError) as e:
        console.print(f"[red]✗ Cannot read certificate: {e}[/red]")
        raise SystemExit(1)

    if isinstance(data, dict) and ReportCertificate().verify(data):
        console.print("[green]✓ Certificate checksum is valid[/green]")
    else:
        console.print("[red]✗ Certificate checksum does not match[/red]")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
