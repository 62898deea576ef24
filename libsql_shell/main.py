#!/usr/bin/env python3
"""
libsql-shell - CLI Entry Point
==============================
Runs SQL against a SQLite/libSQL database file and prints the results as
plain text tables, or renders the whole database as SQL with ``.dump``.
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

import yaml

from .config import ConfigLoader
from .connection import DatabaseConnection
from .database_dumper import dump_database
from .errors import MissingConnectionError
from .models import DbCmdConfig
from .output import print_error, print_statements_result
from .utils import setup_logging

DUMP_COMMAND = '.dump'


async def run_command(config: DbCmdConfig, command: str) -> None:
    """Run a shell command or SQL text against the context's database."""
    if command.strip() == DUMP_COMMAND:
        await dump_database(config)
        return

    if config.db is None:
        raise MissingConnectionError()

    result = await config.db.execute_statements(command)
    await print_statements_result(result, config.out_f, config.without_header)


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='libsql-shell - query and dump SQLite/libSQL databases'
    )
    parser.add_argument(
        'database',
        nargs='?',
        help='Path to the database file (default: from config, else in-memory)'
    )
    parser.add_argument(
        'command',
        nargs='?',
        help=f'SQL to run, or {DUMP_COMMAND} (default: read SQL from stdin)'
    )
    parser.add_argument(
        '-c', '--config',
        help='Path to YAML configuration file'
    )
    parser.add_argument(
        '-o', '--output',
        help='Write results to this file instead of stdout'
    )
    parser.add_argument(
        '--without-header',
        action='store_true',
        help='Do not print column headers'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    args = parser.parse_args(argv)

    # Load configuration
    try:
        config = ConfigLoader(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file '{args.config}' not found", file=sys.stderr)
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file: {e}", file=sys.stderr)
        sys.exit(1)

    # Setup logging
    log_settings = dict(config.get_logging_settings())
    log_settings.setdefault('level', 'WARNING')
    if args.verbose:
        log_settings['level'] = 'DEBUG'
    setup_logging(log_settings)

    output_settings = config.get_output_settings()
    database = args.database or config.get_database() or DatabaseConnection.MEMORY_DATABASE
    output_path = args.output or output_settings.get('file')
    without_header = args.without_header or bool(output_settings.get('without_header', False))

    command = args.command if args.command is not None else sys.stdin.read()

    out_f = sys.stdout
    try:
        if output_path:
            out_f = open(output_path, 'w', encoding='utf-8')
        with DatabaseConnection(database) as conn:
            cmd_config = DbCmdConfig(
                db=conn,
                out_f=out_f,
                err_f=sys.stderr,
                without_header=without_header
            )
            asyncio.run(run_command(cmd_config, command))
    except Exception as e:
        logging.debug("Command failed", exc_info=True)
        print_error(e, sys.stderr)
        sys.exit(1)
    finally:
        if out_f is not sys.stdout:
            out_f.close()


if __name__ == '__main__':
    main()
