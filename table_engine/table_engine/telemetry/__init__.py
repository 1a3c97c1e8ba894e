"""Lightweight timing instrumentation for table operations."""

from table_engine.telemetry.profiling import OperationLog, OperationTiming, profile_operation, table_shape

__all__ = ["OperationLog", "OperationTiming", "profile_operation", "table_shape"]
