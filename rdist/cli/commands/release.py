from __future__ import annotations

from pathlib import Path

import typer

from rdist.bundle.bundler import PackageBundler
from rdist.cli.context import build_context
from rdist.core.errors import ErrorCode
from rdist.core.result import Err
from rdist.output.errors import print_release_error, release_error_exit_code
from rdist.sdk.http import RealHttpClient
from rdist.sdk.release import PackageInfo, ReleaseService


def release(
    app_name: str = typer.Argument(..., help="App to release to"),
    deployment: str = typer.Argument(..., help="Deployment name (e.g. Staging)"),
    path: Path = typer.Argument(..., help="File or directory to upload"),
    target_binary_version: str = typer.Option(
        ..., "--target-binary-version", "-t", help="Binary version range this release targets"
    ),
    description: str | None = typer.Option(None, "--description", "-d"),
    mandatory: bool = typer.Option(False, "--mandatory", "-m", help="Mark the release mandatory"),
    disabled: bool = typer.Option(False, "--disabled", help="Upload without enabling the release"),
    rollout: int | None = typer.Option(
        None, "--rollout", "-r", min=1, max=100, help="Percentage of users to roll out to"
    ),
    access_key: str | None = typer.Option(
        None, "--access-key", help="Access key (default: from the configured env var)"
    ),
    config: Path | None = typer.Option(None, "--config", help="Path to rdist.toml"),
) -> None:
    """Bundle PATH and upload it as a new release."""
    ctx = build_context(config)
    cfg = ctx.config

    key = access_key or cfg.auth.access_key()
    if not key:
        ctx.console.error(
            f"A token must be specified (--access-key or ${cfg.auth.access_key_env})."
        )
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    http = RealHttpClient(
        cfg.server.url,
        key,
        headers=cfg.headers,
        proxy=cfg.server.proxy,
        timeout=cfg.server.timeout,
    )
    service = ReleaseService(
        http=http,
        bundler=PackageBundler(work_dir=cfg.bundle.work_dir),
        console=ctx.console,
    )
    info = PackageInfo(
        description=description,
        is_mandatory=mandatory,
        is_disabled=disabled,
        rollout=rollout,
    )

    result = service.release(app_name, deployment, path, target_binary_version, info)
    if isinstance(result, Err):
        print_release_error(result.error, ctx.console)
        raise typer.Exit(code=release_error_exit_code(result.error))

    label = result.value.get("label")
    suffix = f" as {label}" if isinstance(label, str) else ""
    ctx.console.success(f"Released {path} to {app_name}/{deployment}{suffix}")
