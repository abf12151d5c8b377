"""Local JSON persistence for the usage ledger."""
import json
import logging
import os
from decimal import InvalidOperation
from pathlib import Path

from maint.fileio import atomic_write_text
from maint.ledger.models import UsageLedgerState

logger = logging.getLogger(__name__)


class UsageStore:
    """Reads and writes the usage ledger file.

    Single writer: every save rewrites the whole file atomically, so readers
    never observe a partial write. Concurrent processes are not coordinated.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> UsageLedgerState:
        """Load ledger state, starting empty if the file is missing or corrupt."""
        if not self.path.exists():
            return UsageLedgerState()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return UsageLedgerState.from_dict(data)
        except (OSError, ValueError, InvalidOperation, AttributeError, TypeError) as e:
            backup = self.path.with_name(self.path.name + ".corrupt")
            logger.warning(
                "Usage ledger %s is unreadable (%s); starting fresh, old file kept as %s",
                self.path, e, backup,
            )
            try:
                os.replace(self.path, backup)
            except OSError:
                logger.warning("Could not back up %s", self.path, exc_info=True)
            return UsageLedgerState()

    def save(self, state: UsageLedgerState) -> None:
        """Persist ledger state"""
        atomic_write_text(self.path, json.dumps(state.to_dict(), indent=2) + "\n")
