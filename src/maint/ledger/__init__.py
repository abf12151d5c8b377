"""Usage metering and budget tracking."""
from maint.ledger.github import GitHubIssueSink, LedgerSink, NullLedgerSink
from maint.ledger.models import AgentUsage, MonthlyUsage, UsageLedgerState, UsageRecord
from maint.ledger.pricing import calculate_cost
from maint.ledger.store import UsageStore
from maint.ledger.tracker import UsageLedger

__all__ = [
    "AgentUsage",
    "GitHubIssueSink",
    "LedgerSink",
    "MonthlyUsage",
    "NullLedgerSink",
    "UsageLedger",
    "UsageLedgerState",
    "UsageRecord",
    "UsageStore",
    "calculate_cost",
]
