#!/usr/bin/env python3
"""
MemFS - entry point

Boot sequence:
1. Load configuration
2. Initialize logging
3. Create the filesystem
4. Apply the user seed file
5. Start the shell (or run a script headless)

Usage:
    memfs [--config FILE] [--users FILE] [--headless SCRIPT] user

Author: YSNRFD
Version: 1.0.0
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from memfs.core.config_loader import ConfigLoader
from memfs.exceptions import ConfigError, SeedFileError
from memfs.filesystem.fs import create_filesystem
from memfs.logger import Logger, LogLevel, get_logger
from memfs.shell.shell import create_shell
from memfs.users.seed_loader import SeedLoader


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='memfs',
        description='In-memory multi-user filesystem shell'
    )
    parser.add_argument('user', help='user to run the shell as')
    parser.add_argument('--config', help='JSON configuration file')
    parser.add_argument('--users', help='user seed file (overrides users.seed_file)')
    parser.add_argument(
        '--headless', metavar='SCRIPT',
        help='run commands from SCRIPT instead of starting the interactive shell'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for MemFS."""
    args = build_arg_parser().parse_args(argv)

    loader = ConfigLoader()
    try:
        config = loader.load(args.config) if args.config else loader.config
    except ConfigError as e:
        print(f"memfs: {e}", file=sys.stderr)
        return 1

    try:
        level = LogLevel.from_name(config.logging.level)
    except ValueError as e:
        print(f"memfs: {e}", file=sys.stderr)
        return 1

    Logger.initialize(
        level=level,
        log_file=config.logging.log_file,
        console_output=config.logging.console_output
    )
    log = get_logger('main')

    fs = create_filesystem(config.filesystem)

    seed_path = args.users or config.users.seed_file
    try:
        applied = SeedLoader().load_into(fs, seed_path)
        log.info("Applied user seed", context={'path': seed_path, 'grants': applied})
    except SeedFileError as e:
        # An explicitly requested seed file must exist.
        if args.users:
            print(f"memfs: {e}", file=sys.stderr)
            return 1
        log.warning("No user seed file loaded", context={'path': seed_path})

    if not fs.is_known_user(args.user):
        print(f"memfs: unknown user: {args.user}", file=sys.stderr)
        return 1

    shell = create_shell(fs, args.user)

    if args.headless:
        try:
            script = Path(args.headless).read_text(encoding='utf-8')
        except OSError as e:
            print(f"memfs: cannot read script {args.headless}: {e}", file=sys.stderr)
            return 1
        return shell.run_script(script)

    try:
        shell.run()
    except KeyboardInterrupt:
        print("\n\nInterrupted")

    return 0


if __name__ == '__main__':
    sys.exit(main())
