"""
Main database dumping orchestration for libsql-shell.
"""

import logging
from typing import Any, TextIO

from .errors import MissingConnectionError
from .formatter import format_row
from .models import DbCmdConfig, DumpStats, RenderMode
from .table_dumper import TableDumper, first_statement


class DatabaseDumper:
    """Writes a whole database as a replayable SQL script."""

    PREAMBLE = "PRAGMA foreign_keys=OFF;"
    SYSTEM_TABLE_PREFIX = "sqlite_"
    # Replication and WASM bookkeeping tables
    IGNORED_TABLES = ("_litestream_seq", "_litestream_lock", "libsql_wasm_func_table")

    def __init__(self, connection: Any, out_f: TextIO):
        self.connection = connection
        self.out_f = out_f
        self.stats = DumpStats()

    def _build_list_tables_query(self) -> str:
        query = (
            "SELECT name FROM sqlite_master WHERE type='table' "
            f"and name not like '{self.SYSTEM_TABLE_PREFIX}%'"
        )
        for table in self.IGNORED_TABLES:
            query += f" and name != '{table}'"
        return query

    async def run(self) -> DumpStats:
        """
        Run the dump.

        The first error aborts the dump; output already written is kept.
        """
        self.out_f.write(self.PREAMBLE + "\n")

        tables = await self._get_tables()
        logging.info(f"Dumping {len(tables)} table(s)")

        dumper = TableDumper(self.connection, self.out_f)
        for table in tables:
            table_stats = await dumper.dump_table(table)

            self.stats.tables.append(table_stats)
            self.stats.total_rows += table_stats.rows_dumped
            logging.info(f"  ✓ {table_stats.table}: {table_stats.rows_dumped} rows")

        return self.stats

    async def _get_tables(self) -> list[str]:
        """Get the names of the user tables, in the order the engine lists them."""
        statement = await first_statement(self.connection, self._build_list_tables_query())

        tables = []
        async for row in statement.rows:
            if row.error is not None:
                raise row.error
            tables.append(format_row(row.values, RenderMode.DISPLAY)[0])
        return tables


async def dump_database(config: DbCmdConfig) -> DumpStats:
    """Render the database of a shell context as SQL on its output."""
    if config is None or config.db is None:
        raise MissingConnectionError()

    stats = await DatabaseDumper(config.db, config.out_f).run()

    logging.info("=" * 50)
    logging.info("DUMP COMPLETE")
    logging.info(f"Tables: {stats.total_tables}")
    logging.info(f"Total Rows: {stats.total_rows}")
    return stats
