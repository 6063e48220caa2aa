"""
Tuning module - Applies OS tuning idempotently.

Components:
- TuningParameter / build_parameter_table: Declarative tuning rows
- TuningExecutor: Read-compare-write apply of a row
- FstabValidator: Mount table verification with revert
- TuningOperations: CPU, memory, disk I/O, network and kernel steps
"""

from .parameters import TuningParameter, ParameterTable, build_parameter_table
from .executor import TuningExecutor, ParameterResult, Outcome
from .verifier import FstabValidator
from .operations import TuningOperations, OperationReport

__all__ = [
    "TuningParameter",
    "ParameterTable",
    "build_parameter_table",
    "TuningExecutor",
    "ParameterResult",
    "Outcome",
    "FstabValidator",
    "TuningOperations",
    "OperationReport",
]
