from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from rdist.core.config import Config, load_config_or_default
from rdist.core.errors import ErrorCode
from rdist.core.result import Err
from rdist.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: ConsoleProtocol


def build_context(config_path: Path | None = None) -> CLIContext:
    console = RichConsole()
    config_result = load_config_or_default(config_path)
    if isinstance(config_result, Err):
        console.error(config_result.error.message)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    return CLIContext(config=config_result.value, console=console)
