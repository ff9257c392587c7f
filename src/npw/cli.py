from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .schemas.options import InvocationOptions, LauncherConfig
from .stages.scope import describe, scope_args
from .stages.supervise import ProcessExit, run_supervised
from .util.repo import find_workspace_root

app = typer.Typer(add_completion=False)
# stdout belongs to the child command.
console = Console(stderr=True)

FORWARD_ARGS = {
    "allow_extra_args": True,
    "ignore_unknown_options": True,
    "allow_interspersed_args": False,
}


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def normalize_argv(argv: list[str]) -> list[str]:
    """Rewrite a bare leading ``--shell`` to ``--shell=`` so it never eats the command name."""
    out = []
    for i, tok in enumerate(argv):
        if tok == "--" or not tok.startswith("-"):
            out.extend(argv[i:])
            break
        out.append("--shell=" if tok == "--shell" else tok)
    return out


@app.command(context_settings=FORWARD_ARGS)
def main(
    ctx: typer.Context,
    args: list[str] | None = typer.Argument(None, metavar="COMMAND [ARGS]...", help="npm command and arguments to run at the workspace root."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Don't print the command being run."),
    shell: str | None = typer.Option(None, "--shell", metavar="[=PATH]", help="Run the command through a shell (default /bin/sh, or --shell=PATH)."),
):
    """Run an npm command from the workspace root, scoped to the current package."""
    opts = InvocationOptions(quiet=quiet, shell=shell, args=tuple(args or ()))
    if not opts.args:
        typer.echo(ctx.get_usage(), err=True)
        raise typer.Exit(1)

    config = LauncherConfig.from_env()
    _configure_logging(LauncherConfig.debug_enabled())

    cwd = Path(os.path.abspath(os.getcwd()))
    root = find_workspace_root(cwd, config.manifest_name)
    if root is None:
        console.print("[red]Failed to find workspace root[/red]")
        raise typer.Exit(1)

    argv = scope_args(opts.args, root, cwd, config.scope_flag)
    if not opts.quiet:
        console.print(f"[bold]{escape(describe(config.command, argv))}[/bold] [dim]in {escape(str(root))}[/dim]", highlight=False)

    outcome = run_supervised(config.command, argv, cwd=root, shell=opts.shell, config=config)
    if isinstance(outcome, ProcessExit):
        raise typer.Exit(outcome.code)


def run() -> None:
    app(args=normalize_argv(sys.argv[1:]), prog_name="npw")


if __name__ == "__main__":
    run()
