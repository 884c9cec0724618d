"""CLI entry point for Tubecast."""

import sys
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from tubecast.config.logging import setup_logging
from tubecast.config.manager import ConfigManager
from tubecast.config.schema import ChannelConfig
from tubecast.feeds.normalizer import episode_from_feed_item
from tubecast.feeds.repository import FeedRepository
from tubecast.sources.youtube import YouTubeChannelSource
from tubecast.sync import FeedSynchronizer
from tubecast.utils.errors import (
    ChannelNotFoundError,
    ConfigError,
    FeedNotFoundError,
    NormalizationError,
    TubecastError,
)
from tubecast.utils.retry import RetryConfig

app = typer.Typer(
    name="tubecast",
    help="Turn a video channel into a podcast feed",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"
    ),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Write logs to file"
    ),
) -> None:
    """Tubecast - keep a podcast feed in sync with a video channel."""
    level = "INFO"
    manager = ConfigManager()
    # Only read an existing config; commands create the default one on demand
    if manager.config_file.exists():
        try:
            level = manager.load_config().log_level
        except ConfigError as e:
            console.print(f"[red]✗[/red] {e}")
            sys.exit(1)

    setup_logging(verbose=verbose, log_file=log_file, level=level)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    from tubecast import __version__

    console.print(f"[bold cyan]Tubecast[/bold cyan] v{__version__}")


@app.command("add")
def add_channel(
    name: str = typer.Argument(..., help="Feed name (also the feed file name)"),
    channel_id: str = typer.Option(..., "--channel-id", help="Channel id, @handle or URL"),
    title: str = typer.Option(..., "--title", help="Podcast title"),
    link: str = typer.Option(..., "--link", help="Podcast website link"),
    description: str = typer.Option(..., "--description", help="Podcast description"),
    author: str = typer.Option(..., "--author", help="Podcast author"),
    media_base_url: str = typer.Option(
        ..., "--media-base-url", help="Base URL the audio files are served from"
    ),
    language: str | None = typer.Option(None, "--language", help="Feed language code"),
    image_url: str | None = typer.Option(None, "--image-url", help="Podcast artwork URL"),
    block: bool = typer.Option(
        True, "--block/--no-block", help="Hide episodes from podcast directories"
    ),
) -> None:
    """Add a channel to synchronize.

    Examples:
        tubecast add my-show --channel-id UCNmv1Cmjm3Hk8Vc9kIgv0AQ --title "My Show" \\
            --link https://example.com --description "..." --author "Me" \\
            --media-base-url https://media.example.com
    """
    try:
        channel = ChannelConfig(
            channel_id=channel_id,
            title=title,
            link=link,  # type: ignore[arg-type]
            description=description,
            author=author,
            media_base_url=media_base_url,  # type: ignore[arg-type]
            language=language,
            image_url=image_url,  # type: ignore[arg-type]
            block=block,
        )
        ConfigManager().add_channel(name, channel)

        console.print(f"[green]✓[/green] Channel '[bold]{name}[/bold]' added successfully")

    except ValidationError as e:
        console.print(f"[red]✗[/red] Invalid channel settings: {e}")
        sys.exit(1)
    except TubecastError as e:
        console.print(f"[red]✗[/red] Error: {e}")
        sys.exit(1)


@app.command("list")
def list_channels() -> None:
    """List configured channels."""
    try:
        channels = ConfigManager().list_channels()

        if not channels:
            console.print("[yellow]No channels configured yet.[/yellow]")
            console.print("\nAdd a channel: [cyan]tubecast add <name> --channel-id <id> ...[/cyan]")
            return

        table = Table(title="[bold]Configured Channels[/bold]")
        table.add_column("Name", style="cyan", no_wrap=True)
        table.add_column("Channel", style="blue")
        table.add_column("Title", style="white")
        table.add_column("Blocked", justify="center", style="yellow")

        for name, channel in channels.items():
            table.add_row(name, channel.channel_id, channel.title, "✓" if channel.block else "—")

        console.print(table)
        console.print(f"\n[dim]Total: {len(channels)} channel(s)[/dim]")

    except TubecastError as e:
        console.print(f"[red]✗[/red] Error: {e}")
        sys.exit(1)


@app.command("remove")
def remove_channel(
    name: str = typer.Argument(..., help="Channel to remove"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Remove a channel. Its feed file is kept."""
    try:
        manager = ConfigManager()

        try:
            channel = manager.get_channel(name)
        except ChannelNotFoundError:
            console.print(f"[red]✗[/red] Channel '[bold]{name}[/bold]' not found")
            sys.exit(1)

        if not force:
            console.print(f"\nChannel: [bold]{name}[/bold] ({channel.channel_id})")
            if not typer.confirm("\nAre you sure you want to remove this channel?"):
                console.print("[yellow]Cancelled[/yellow]")
                return

        manager.remove_channel(name)
        console.print(f"[green]✓[/green] Channel '[bold]{name}[/bold]' removed")

    except TubecastError as e:
        console.print(f"[red]✗[/red] Error: {e}")
        sys.exit(1)


@app.command("sync")
def sync_channel(
    name: str = typer.Argument(..., help="Channel to synchronize"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show new episodes without writing the feed"
    ),
    media_base_url: str | None = typer.Option(
        None,
        "--media-base-url",
        envvar="TUBECAST_MEDIA_BASE_URL",
        help="Override the channel's media base URL",
    ),
) -> None:
    """Add a channel's newest videos to its podcast feed.

    Examples:
        tubecast sync my-show

        tubecast sync my-show --dry-run
    """
    try:
        manager = ConfigManager()
        config = manager.load_config()
        channel = manager.get_channel(name)
        if media_base_url:
            channel = ChannelConfig.model_validate(
                {**channel.model_dump(), "media_base_url": media_base_url}
            )

        source = YouTubeChannelSource(
            max_videos=config.source.max_videos,
            socket_timeout=config.source.socket_timeout,
            retry_config=RetryConfig(max_attempts=config.source.max_attempts),
        )
        synchronizer = FeedSynchronizer(
            name,
            channel,
            source,
            FeedRepository(config.feeds_dir.expanduser()),
            on_invalid_candidate=config.on_invalid_candidate,
        )

        with console.status(f"Synchronizing '{name}'..."):
            result = synchronizer.run(dry_run=dry_run)

        for skipped in result.skipped:
            console.print(
                f"[yellow]![/yellow] Skipped video {skipped.video_id}: {skipped.reason}"
            )

        if not result.new_episodes:
            console.print(f"[dim]No new episodes for '{name}'[/dim]")
        for episode in reversed(result.new_episodes):
            console.print(f"  [cyan]#{episode.episode_number}[/cyan] {episode.title}")

        if dry_run:
            console.print(f"\n[yellow]Dry run:[/yellow] {len(result.new_episodes)} episode(s) not written")
        elif result.saved:
            console.print(
                f"\n[green]✓[/green] Added {len(result.new_episodes)} episode(s) to '[bold]{name}[/bold]'"
            )

    except ValidationError as e:
        console.print(f"[red]✗[/red] Invalid setting: {e}")
        sys.exit(1)
    except ConfigError as e:
        console.print(f"[red]✗[/red] {e}")
        sys.exit(1)
    except TubecastError as e:
        console.print(f"[red]✗[/red] Error: {e}")
        sys.exit(1)


@app.command("episodes")
def list_episodes(
    name: str = typer.Argument(..., help="Feed to show"),
) -> None:
    """Show the episodes currently published in a feed."""
    try:
        config = ConfigManager().load_config()
        document = FeedRepository(config.feeds_dir.expanduser()).load(name)
        episodes = [episode_from_feed_item(item) for item in document.items]

        if not episodes:
            console.print(f"[yellow]Feed '{name}' has no episodes yet.[/yellow]")
            return

        table = Table(title=f"[bold]{document.metadata.title}[/bold]")
        table.add_column("#", justify="right", style="cyan")
        table.add_column("Title", style="white")
        table.add_column("Published", style="green")
        table.add_column("Duration", justify="right", style="magenta")
        table.add_column("ID", style="dim")

        for episode in episodes:
            table.add_row(
                str(episode.episode_number),
                episode.title,
                episode.publish_date.strftime("%Y-%m-%d"),
                episode.duration_display,
                episode.id,
            )

        console.print(table)
        console.print(f"\n[dim]Total: {len(episodes)} episode(s)[/dim]")

    except FeedNotFoundError:
        console.print(f"[red]✗[/red] Feed '[bold]{name}[/bold]' not found")
        console.print("[dim]  Run 'tubecast sync' to create it[/dim]")
        sys.exit(1)
    except NormalizationError as e:
        console.print(f"[red]✗[/red] Feed '{name}' is corrupt: {e}")
        sys.exit(1)
    except TubecastError as e:
        console.print(f"[red]✗[/red] Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    app()
