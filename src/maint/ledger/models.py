"""Usage ledger records."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


def to_decimal(value: Any) -> Decimal:
    """Read a stored amount (decimal string, or a legacy JSON number)."""
    if isinstance(value, Decimal):
        return value
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


@dataclass
class AgentUsage:
    """Cost and call count for one agent within one month"""
    cost: Decimal = Decimal("0")
    calls: int = 0

    @property
    def average_cost(self) -> Decimal:
        if not self.calls:
            return Decimal("0")
        return self.cost / self.calls

    def to_dict(self) -> dict:
        return {"cost": str(self.cost), "calls": self.calls}

    @classmethod
    def from_dict(cls, data: dict) -> "AgentUsage":
        return cls(cost=to_decimal(data.get("cost")), calls=int(data.get("calls", 0)))


@dataclass
class MonthlyUsage:
    """Totals for one calendar month (``YYYY-MM``)"""
    cost: Decimal = Decimal("0")
    agents: dict[str, AgentUsage] = field(default_factory=dict)
    ledger_record_id: str | None = None
    alert_raised: bool = False

    def add(self, agent: str, cost: Decimal) -> None:
        """Add one call's cost to the agent and month totals"""
        usage = self.agents.setdefault(agent, AgentUsage())
        usage.cost += cost
        usage.calls += 1
        self.cost += cost

    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization"""
        return {
            "cost": str(self.cost),
            "agents": {name: usage.to_dict() for name, usage in self.agents.items()},
            "ledgerRecordId": self.ledger_record_id,
            "alertRaised": self.alert_raised,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MonthlyUsage":
        """Load from dict"""
        record_id = data.get("ledgerRecordId", data.get("issueNumber"))
        return cls(
            cost=to_decimal(data.get("cost")),
            agents={
                name: AgentUsage.from_dict(usage)
                for name, usage in (data.get("agents") or {}).items()
            },
            ledger_record_id=str(record_id) if record_id is not None else None,
            alert_raised=bool(data.get("alertRaised", data.get("alertIssueCreated", False))),
        )


@dataclass
class UsageLedgerState:
    """Everything the usage ledger persists"""
    total_spent: Decimal = Decimal("0")
    monthly: dict[str, MonthlyUsage] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization"""
        return {
            "totalSpent": str(self.total_spent),
            "monthly": {month: usage.to_dict() for month, usage in self.monthly.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UsageLedgerState":
        """Load from dict"""
        return cls(
            total_spent=to_decimal(data.get("totalSpent")),
            monthly={
                month: MonthlyUsage.from_dict(usage)
                for month, usage in (data.get("monthly") or {}).items()
            },
        )


@dataclass(frozen=True)
class UsageRecord:
    """Result of recording one generation call"""
    cost: Decimal
    monthly_total: Decimal
    warnings: tuple[str, ...] = ()
