"""clientgen CLI - TypeScript client models from reflectable types."""

import typer

app = typer.Typer(
    name="clientgen",
    help="Generate read-only DTO interfaces and Knockout Edit classes in TypeScript",
    no_args_is_help=True,
)


@app.callback()
def main(ctx: typer.Context) -> None:
    """clientgen - TypeScript client model generator."""
    # Log command invocation
    from .logging import log_from_cli
    try:
        log_from_cli()
    except OSError:
        # Don't let logging failures break the CLI
        pass


# Import and register command modules
from .commands import generate as generate_cmd
from .commands import types_cmd
from .commands import config_cmd
from .commands import logs as logs_cmd

# Register generate and types as direct commands
app.command(name="generate")(generate_cmd.generate)
app.command(name="types")(types_cmd.types)

# Register config commands as a subcommand group
app.add_typer(config_cmd.app, name="config")

# Register logs commands as a subcommand group
app.add_typer(logs_cmd.app, name="logs")


if __name__ == "__main__":
    app()
