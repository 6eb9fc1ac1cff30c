"""
Stored procedure source analysis (best-effort, heuristic).
"""

from .analyzer import (
    ProcedureAnalyzer,
    RegexProcedureAnalyzer,
    analyze_procedure_tables,
    parse_procedure_blocks,
)

__all__ = [
    'ProcedureAnalyzer',
    'RegexProcedureAnalyzer',
    'analyze_procedure_tables',
    'parse_procedure_blocks',
]
