import click

from tk.config import MetaData, Settings
from tk.shared.tools import Duration
from .source import create_source, source_command

metadata = MetaData()


@click.group(invoke_without_command=True)
@click.option(
    "--interval",
    default=metadata.interval,
    show_default=True,
    type=Duration(),
    help="source sync interval",
)
@click.pass_context
def create(ctx: click.Context, interval: str) -> None:
    """Create or update sources and resources."""
    settings: Settings = ctx.ensure_object(Settings)
    settings.interval = interval

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


create.add_command(source_command)
