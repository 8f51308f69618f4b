"""
Transfer - Cross-engine column conversion and SQL dumps

convert_columns() rewrites source column types for a target engine through
the portable model: source native type -> CommonType -> target converter rule.

dump_table() streams a table's DDL and batched INSERT statements to a text
stream, using the engine's dialect hooks. post_transfer() runs the engine's
follow-up statements once a bulk load has finished.
"""

from typing import List, Optional, Sequence, TextIO

from ..errors import MappingError
from .connection import DbConn
from .datatypes.base import CommonType
from .models import Column, DuplicateStrategy, Table
from .registry import Meta

import logging
logger = logging.getLogger(__name__)

# Logical kind used when a source type is not declared by its engine
FALLBACK_COMMON_TYPE = CommonType.VARCHAR


def convert_columns(columns: Sequence[Column], source_meta: Meta, target_meta: Meta) -> List[Column]:
    """
    Convert column definitions from one engine to another.

    Args:
        columns: Columns as introspected on the source engine
        source_meta: Source engine bundle
        target_meta: Target engine bundle

    Returns:
        New Column objects carrying the target native type; the inputs are
        not modified. Nullability, keys, comments and sizes are preserved.
    """
    source_types = source_meta.get_db_data_types()
    converter = target_meta.get_common_type_converter()

    converted = []
    for column in columns:
        try:
            common_type = source_types.resolve(column.data_type).common_type
        except MappingError:
            logger.warning(
                f"Unknown {source_meta.db_type} type '{column.data_type}' on "
                f"{column.table_name}.{column.column_name}, converting as {FALLBACK_COMMON_TYPE.name}"
            )
            common_type = FALLBACK_COMMON_TYPE

        target_type = converter.convert(common_type, column)
        converted.append(column.copy(data_type=target_type.render(column)))

    logger.debug(
        f"Converted {len(converted)} column(s) from {source_meta.db_type} to {target_meta.db_type}"
    )
    return converted


def dump_table(
    conn: DbConn,
    table_name: str,
    writer: TextIO,
    drop_before_create: bool = True,
    batch_size: Optional[int] = None,
    duplicate_strategy: DuplicateStrategy = DuplicateStrategy.NONE
) -> int:
    """
    Write CREATE TABLE, indexes and data of one table as a SQL script.

    Args:
        conn: Source connection
        table_name: Table to dump
        writer: Text stream receiving the script
        drop_before_create: Emit DROP TABLE IF EXISTS before the CREATE
        batch_size: Rows per INSERT (defaults to the engine's recommendation)
        duplicate_strategy: Conflict policy of the generated INSERTs

    Returns:
        Number of rows written
    """
    dialect = conn.get_dialect()
    metadata = conn.get_metadata()
    generator = dialect.get_sql_generator()
    helper = dialect.get_dump_helper()
    batch_size = batch_size or conn.meta.batch_size

    tables = metadata.get_tables(table_name)
    table = tables[0] if tables else Table(table_name=table_name)
    columns = metadata.get_columns(table_name)

    writer.write(f"-- Table structure for {table_name}\n")
    for sql in generator.gen_table_ddl(table, columns, drop_before_create):
        writer.write(f"{sql};\n")
    for sql in generator.gen_index_ddl(table, metadata.get_table_index(table_name)):
        writer.write(f"{sql};\n")

    if not columns:
        return 0

    names = [column.column_name for column in columns]
    select = f"SELECT {dialect.quoter.join(names)} FROM {dialect.quote_identifier(table_name)}"
    quote_schema = dialect.quote_identifier(conn.info.get_database(metadata.get_default_db()))
    prefix = helper.before_insert_sql(quote_schema, table_name)

    total = 0
    for batch in conn.iter_batches(select, batch_size):
        if total == 0:
            writer.write(f"\n-- Records of {table_name}\n")
            helper.before_insert(writer, table_name)
        values = [[row[name] for name in names] for row in batch]
        for sql in generator.gen_insert(table_name, columns, values, duplicate_strategy):
            writer.write(f"{prefix}{sql};\n")
        total += len(batch)

    if total:
        helper.after_insert(writer, table_name, columns)
    logger.info(f"Dumped {total} row(s) of {table_name}")
    return total


def post_transfer(conn: DbConn, table_name: str) -> List[str]:
    """
    Run the engine's follow-up statements after a bulk load into ``table_name``
    (``OPTIMIZE TABLE ... FINAL`` on ClickHouse, nothing on SQLite).

    Returns:
        The executed statements
    """
    statements = conn.get_dialect().post_transfer_sql(table_name)
    for sql in statements:
        conn.exec(sql)
    if statements:
        logger.info(f"Ran {len(statements)} post-transfer statement(s) on {table_name}")
    return statements
