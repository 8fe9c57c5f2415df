#!/usr/bin/env python3
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simpl-sh",
        description="Interactive shell with alias, variable and git-aware completion support.",
    )
    parser.add_argument("--version", action="version", version=f"simpl-sh {__version__}")
    parser.add_argument(
        "--config",
        metavar="DIR",
        type=Path,
        help="configuration directory (default: ~/.config/simpl_sh)",
    )
    parser.add_argument("--debug", action="store_true", help="enable debug output")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        from . import app

        return app.main(config_dir=args.config, debug=args.debug)

    except KeyboardInterrupt:
        print("\nBye!")
        return 0


if __name__ == "__main__":
    sys.exit(main())
