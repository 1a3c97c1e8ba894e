"""Table values, their deferred transformations and the literal parser."""

from table_engine.table.data_table import DataTable, ensure_table
from table_engine.table.literal import parse_table_literal
from table_engine.table.pipeline import (
    ColumnMapper,
    HeaderMapper,
    Materialized,
    TransformPipeline,
    symbolize,
)

__all__ = [
    "ColumnMapper",
    "DataTable",
    "HeaderMapper",
    "Materialized",
    "TransformPipeline",
    "ensure_table",
    "parse_table_literal",
    "symbolize",
]
