"""
Metrics collection for parse runs.

Tracks, per parsed script:
- Wall-clock duration
- Token, batch and statement counts
- Diagnostics by severity and code
"""

import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from tsqlparser.utils.logging import get_logger

logger = get_logger(__name__)


class ParseMetrics:
    """
    Collects metrics while a script is parsed.

    Tracks:
    - Start/end time and duration
    - Tokens, batches and statements produced
    - Diagnostics by severity and code
    - Statements that fell back to Unrecognized
    """

    def __init__(self, script_id: Optional[str] = None):
        """
        Initialize metrics collector.

        Args:
            script_id: Optional label for the script being parsed
        """
        self.script_id = script_id

        # Timing metrics
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None
        self.duration_ms: Optional[float] = None
        self._perf_start: Optional[float] = None

        # Parse metrics
        self.source_length: int = 0
        self.token_count: int = 0
        self.batch_count: int = 0
        self.statement_count: int = 0
        self.unrecognized_count: int = 0

        # Diagnostics
        self.diagnostics_by_severity: Dict[str, int] = {}
        self.diagnostics_by_code: Dict[str, int] = {}

        self.status: str = "pending"

    def start(self, source_length: int = 0) -> None:
        """Mark the start of a parse."""
        self.start_time = datetime.now(timezone.utc)
        self._perf_start = time.perf_counter()
        self.source_length = source_length
        self.status = "running"

    def record_tokens(self, count: int) -> None:
        self.token_count += count

    def record_batch(self, statement_count: int, unrecognized_count: int = 0) -> None:
        """
        Record one parsed batch.

        Args:
            statement_count: Statements in the batch
            unrecognized_count: How many of them are Unrecognized
        """
        self.batch_count += 1
        self.statement_count += statement_count
        self.unrecognized_count += unrecognized_count

    def record_diagnostic(self, diagnostic) -> None:
        severity = diagnostic.severity.value
        code = diagnostic.code.value
        self.diagnostics_by_severity[severity] = self.diagnostics_by_severity.get(severity, 0) + 1
        self.diagnostics_by_code[code] = self.diagnostics_by_code.get(code, 0) + 1

    def complete(self) -> None:
        """Mark the parse as finished and log a summary."""
        self.end_time = datetime.now(timezone.utc)
        if self._perf_start is not None:
            self.duration_ms = round((time.perf_counter() - self._perf_start) * 1000, 3)

        error_count = self.diagnostics_by_severity.get("error", 0)
        self.status = "completed_with_errors" if error_count else "completed"

        logger.info(
            "Parse completed",
            extra={
                "script_id": self.script_id,
                "status": self.status,
                "duration_ms": self.duration_ms,
                "token_count": self.token_count,
                "batch_count": self.batch_count,
                "statement_count": self.statement_count,
                "error_count": error_count,
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        """Summary suitable for attaching to a parse result."""
        return {
            "script_id": self.script_id,
            "status": self.status,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_ms": self.duration_ms,
            "source_length": self.source_length,
            "token_count": self.token_count,
            "batch_count": self.batch_count,
            "statement_count": self.statement_count,
            "unrecognized_count": self.unrecognized_count,
            "diagnostics_by_severity": dict(self.diagnostics_by_severity),
            "diagnostics_by_code": dict(self.diagnostics_by_code),
        }
