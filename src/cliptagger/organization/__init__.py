"""Rename planning and execution."""

from .errors import ExecutionError
from .executor import OperationExecutor
from .models import ExecutionMode, ExecutionResult, RenameOperation
from .planner import (
    RenamePlanner,
    detect_change_type,
    detect_conflicts,
    format_number,
    generate_filename,
    generate_target_path,
)

__all__ = [
    "ExecutionError",
    "ExecutionMode",
    "ExecutionResult",
    "OperationExecutor",
    "RenameOperation",
    "RenamePlanner",
    "detect_change_type",
    "detect_conflicts",
    "format_number",
    "generate_filename",
    "generate_target_path",
]
