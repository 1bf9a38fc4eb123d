"""
CLI — configuration tooling for kubebigbrother.

Commands:
    kubebigbrother check     — Validate a watch config and show effective policies
    kubebigbrother notify    — Send a sample event through one channel
"""

from __future__ import annotations

import asyncio
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from kubebigbrother import __version__
from kubebigbrother.errors import ConfigError, DeliveryError

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """kubebigbrother — watch cluster resources and notify on change."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@main.command()
@click.option("--config", "config_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Watch config (.json or .yaml)")
def check(config_path: str) -> None:
    """Validate a watch config and print the effective per-resource policies."""
    from kubebigbrother.core import load_config_from_file
    from kubebigbrother.core.policy import resolve_policies
    from kubebigbrother.notifications.factory import build_channels

    try:
        config = load_config_from_file(config_path)
        policies = resolve_policies(config)
        build_channels(config.channels)
    except ConfigError as e:
        console.print(f"[red]Invalid config:[/red] {e}", soft_wrap=True)
        sys.exit(1)

    table = Table(title="Effective policies")
    table.add_column("Namespace")
    table.add_column("Resource")
    table.add_column("Notice")
    table.add_column("Update on")
    table.add_column("Channels")
    table.add_column("Workers", justify="right")
    table.add_column("Retries", justify="right")
    table.add_column("Min resync", justify="right")

    for policy in policies.values():
        notice = "".join(
            flag
            for flag, enabled in (
                ("A", policy.notice_when_added),
                ("D", policy.notice_when_deleted),
                ("U", policy.notice_when_updated),
            )
            if enabled
        )
        table.add_row(
            policy.namespace or "*",
            policy.resource,
            notice or "-",
            ", ".join(policy.update_on) or "-",
            ", ".join(policy.channel_names) or "[yellow]none[/yellow]",
            str(policy.workers),
            str(policy.max_retries),
            f"{policy.min_resync_period:g}s",
        )

    console.print(table)
    console.print(
        f"\n[green]>[/green] {len(policies)} resources, {len(config.channels)} channels"
    )


@main.command()
@click.option("--config", "config_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Watch config (.json or .yaml)")
@click.option("--channel", "channel_name", required=True, help="Channel name to send to")
@click.option("--type", "event_type", type=click.Choice(["ADDED", "DELETED", "UPDATED"]), default="ADDED")
def notify(config_path: str, channel_name: str, event_type: str) -> None:
    """Send a sample event through one configured channel."""
    from kubebigbrother.core import load_config_from_file
    from kubebigbrother.events import Event, EventType
    from kubebigbrother.notifications.factory import build_channels

    try:
        config = load_config_from_file(config_path)
        channels = build_channels(config.channels)
    except ConfigError as e:
        console.print(f"[red]Invalid config:[/red] {e}", soft_wrap=True)
        sys.exit(1)

    channel = channels.get(channel_name)
    if channel is None:
        console.print(f"[red]Error: no channel named {channel_name!r}[/red]")
        sys.exit(1)

    sample = {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {"namespace": "default", "name": "kubebigbrother-test"},
    }
    event = Event(
        type=EventType(event_type),
        resource="configmaps",
        obj=sample,
        old_obj=sample if event_type == "UPDATED" else None,
    )

    try:
        asyncio.run(channel.send(event))
    except DeliveryError as e:
        console.print(f"[red]Delivery failed:[/red] {e}", soft_wrap=True)
        sys.exit(1)
    console.print(f"[green]>[/green] Sent {event_type} event to {channel_name}")


if __name__ == "__main__":
    main()
