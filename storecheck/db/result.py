"""
Outcome of a per-test database cleanup.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CleanupResult:
    """
    Result of purging every table after a test.

    Cleanup problems are reported here rather than raised: callers may log
    the result but never escalate it.

    Attributes:
        skipped: True when there was no open connection to clean
        purged: Deleted row count per table
        errors: Error message per table that could not be purged
    """

    skipped: bool = False
    purged: dict[str, int] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    @classmethod
    def skip(cls) -> "CleanupResult":
        return cls(skipped=True)

    @property
    def ok(self) -> bool:
        """True when every table was purged, or cleanup was skipped."""
        return not self.errors

    @property
    def rows(self) -> int:
        return sum(self.purged.values())

    def log(self, lg: Any) -> None:
        """Log the result: debug when clean, warning per failed table."""
        if self.skipped:
            lg.debug("cleanup skipped, connection closed")
            return

        lg.debug(
            "cleaned tables",
            extra={"tables": len(self.purged), "rows": self.rows},
        )
        for table, error in self.errors.items():
            lg.warning("failed to clean table", extra={"table": table, "error": error})
