from __future__ import annotations

from pathlib import Path

import typer

from rdist.bundle.bundler import PackageBundler
from rdist.cli.context import build_context
from rdist.core.result import Err
from rdist.output.console import Style
from rdist.output.errors import bundle_error_exit_code, print_bundle_error


def bundle(
    path: Path = typer.Argument(..., help="File or directory to bundle"),
    work_dir: Path | None = typer.Option(
        None, "--work-dir", help="Where to write the archive (default: config, then cwd)"
    ),
    config: Path | None = typer.Option(None, "--config", help="Path to rdist.toml"),
) -> None:
    """Bundle a file or directory into a single release artifact."""
    ctx = build_context(config)
    bundler = PackageBundler(work_dir=work_dir or ctx.config.bundle.work_dir)

    result = bundler.bundle(path)
    if isinstance(result, Err):
        print_bundle_error(result.error, ctx.console)
        raise typer.Exit(code=bundle_error_exit_code(result.error))

    artifact = result.value
    ctx.console.success(str(artifact.path))
    if artifact.is_temporary:
        ctx.console.print("temporary archive: delete it once uploaded", Style.DIM)
    else:
        ctx.console.print("input file used as-is", Style.DIM)
