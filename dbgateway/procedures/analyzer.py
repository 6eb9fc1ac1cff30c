"""
Best-effort static analysis of stored procedure source.

This is a line/regex heuristic, not a SQL parser: dynamic SQL, comments and
string literals containing keywords are over- or under-matched. Callers go
through the ProcedureAnalyzer protocol so a real tokenizer can replace
RegexProcedureAnalyzer without touching them.
"""

import re
from typing import List, Protocol

from ..models import ProcedureBlock, TableUsage

IDENTIFIER = r'([A-Z_][A-Z0-9_]*)'

OPERATION_PATTERNS = {
    'SELECT': re.compile(rf'FROM\s+{IDENTIFIER}', re.IGNORECASE),
    'INSERT': re.compile(rf'INSERT\s+INTO\s+{IDENTIFIER}', re.IGNORECASE),
    'UPDATE': re.compile(rf'UPDATE\s+{IDENTIFIER}', re.IGNORECASE),
    'DELETE': re.compile(rf'DELETE\s+FROM\s+{IDENTIFIER}', re.IGNORECASE),
    'MERGE': re.compile(rf'MERGE\s+INTO\s+{IDENTIFIER}', re.IGNORECASE),
}

BLOCK_TABLE_PATTERN = re.compile(rf'(?:FROM|INTO|UPDATE|JOIN)\s+{IDENTIFIER}', re.IGNORECASE)

SQL_KEYWORDS = ('SELECT', 'INSERT', 'UPDATE', 'DELETE')


class ProcedureAnalyzer(Protocol):
    def analyze_tables(self, source: str) -> TableUsage:
        ...

    def parse_blocks(self, source: str) -> List[ProcedureBlock]:
        ...


class RegexProcedureAnalyzer:
    """Keyword-pattern analyzer over raw procedure text."""

    def analyze_tables(self, source: str) -> TableUsage:
        """
        Map every referenced table to the operations seen on it.

        Args:
            source: Full procedure source

        Returns:
            Upper-cased table name -> set of SELECT/INSERT/UPDATE/DELETE/MERGE
        """
        usage: TableUsage = {}
        for operation, pattern in OPERATION_PATTERNS.items():
            for match in pattern.finditer(source):
                usage.setdefault(match.group(1).upper(), set()).add(operation)
        return usage

    def parse_blocks(self, source: str) -> List[ProcedureBlock]:
        """
        Split source into declaration/begin/cursor/sql/exception/end blocks.

        A BEGIN line opens a block, a CURSOR mention reclassifies the current
        one, the first SELECT/INSERT/UPDATE/DELETE line opens an sql block,
        EXCEPTION opens an exception block and END closes the current block.
        """
        lines = source.split('\n')
        blocks: List[ProcedureBlock] = []

        current: List[str] = []
        block_start = 0
        block_type = 'declaration'

        for i, raw in enumerate(lines):
            line = raw.strip().upper()

            if line.startswith('BEGIN'):
                if current:
                    blocks.append(self._make_block(block_type, current, block_start, i - 1))
                current = [raw]
                block_start = i
                block_type = 'begin'
            elif 'CURSOR' in line:
                block_type = 'cursor'
                current.append(raw)
            elif any(keyword in line for keyword in SQL_KEYWORDS):
                if block_type != 'sql':
                    if current:
                        blocks.append(self._make_block(block_type, current, block_start, i - 1))
                    current = [raw]
                    block_start = i
                    block_type = 'sql'
                else:
                    current.append(raw)
            elif line.startswith('EXCEPTION'):
                if current:
                    blocks.append(self._make_block(block_type, current, block_start, i - 1))
                current = [raw]
                block_start = i
                block_type = 'exception'
            elif line.startswith('END'):
                if not current:
                    block_start = i
                current.append(raw)
                blocks.append(self._make_block(block_type, current, block_start, i))
                current = []
                block_start = i + 1
                block_type = 'end'
            else:
                current.append(raw)

        if current:
            blocks.append(self._make_block(block_type, current, block_start, len(lines) - 1))

        return blocks

    def _make_block(self, block_type: str, lines: List[str], start: int, end: int) -> ProcedureBlock:
        content = '\n'.join(lines)
        return ProcedureBlock(
            type=block_type,
            content=content,
            tables=self.extract_tables(content),
            line_start=start + 1,
            line_end=end + 1,
        )

    @staticmethod
    def extract_tables(code: str) -> List[str]:
        """Tables after FROM/INTO/UPDATE/JOIN, upper-cased, first-seen order."""
        tables: List[str] = []
        for match in BLOCK_TABLE_PATTERN.finditer(code):
            name = match.group(1).upper()
            if name not in tables:
                tables.append(name)
        return tables


default_analyzer = RegexProcedureAnalyzer()


def analyze_procedure_tables(source: str) -> TableUsage:
    return default_analyzer.analyze_tables(source)


def parse_procedure_blocks(source: str) -> List[ProcedureBlock]:
    return default_analyzer.parse_blocks(source)
