#!/usr/bin/env python3
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from .config import ShellConfig
from .core.shell import Shell
from .errors import ShellError
from .logs import configure_logging

logger = logging.getLogger(__name__)


def main(config_dir: Optional[Path] = None, debug: bool = False) -> int:
    console = Console()

    try:
        config = ShellConfig.load(config_dir)
    except (ShellError, OSError) as error:
        console.print(f"[red]Failed to load configuration:[/red] {escape(str(error))}", highlight=False)
        return 1

    if debug:
        config.debug = True

    configure_logging(config.debug, config.log_file)
    logger.debug("Starting simpl-sh with config dir %s", config.config_dir)

    shell = Shell(config, console=console)
    shell.run()
    return 0
