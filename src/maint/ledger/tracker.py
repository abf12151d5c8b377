"""Usage ledger: per-call cost metering, monthly totals, budget alerts."""
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from maint.errors import LedgerSyncError
from maint.ledger import report
from maint.ledger.github import LedgerSink, NullLedgerSink
from maint.ledger.models import MonthlyUsage, UsageLedgerState, UsageRecord
from maint.ledger.pricing import calculate_cost
from maint.ledger.store import UsageStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def month_key(moment: datetime) -> str:
    return moment.strftime("%Y-%m")


class UsageLedger:
    """Meters generation calls and keeps the external record in sync.

    Every call is an event: recording the same arguments twice counts twice.
    Local state is saved before any external call is attempted; external
    failures are logged and returned as warnings, never retried.
    """

    def __init__(
        self,
        store: UsageStore,
        sink: LedgerSink | None = None,
        monthly_budget: Decimal | float | str = Decimal("50"),
        alert_threshold: Decimal | float | str = Decimal("0.90"),
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.sink = sink or NullLedgerSink()
        self.monthly_budget = Decimal(str(monthly_budget))
        self.alert_threshold = Decimal(str(alert_threshold))
        self.clock = clock
        self.state: UsageLedgerState = store.load()

    @classmethod
    def from_path(cls, path: Path | str, **kwargs) -> "UsageLedger":
        return cls(UsageStore(path), **kwargs)

    @property
    def alert_level(self) -> Decimal:
        return self.monthly_budget * self.alert_threshold

    async def record_usage(
        self, agent: str, model: str, input_tokens: int, output_tokens: int
    ) -> UsageRecord:
        """Record one generation call and return its cost and the month total."""
        cost = calculate_cost(model, input_tokens, output_tokens)
        month = month_key(self.clock())
        warnings: list[str] = []

        usage = self.state.monthly.get(month)
        if usage is None:
            usage = MonthlyUsage()
            self.state.monthly[month] = usage
            usage.ledger_record_id = await self._create_record(month, usage, warnings)

        usage.add(agent, cost)
        self.state.total_spent += cost
        self._save()

        await self._update_record(month, usage, warnings)
        await self._check_budget(month, usage, warnings)

        logger.debug(
            "%s on %s: %s in / %s out tokens, cost %s, month %s",
            agent, model, input_tokens, output_tokens, cost, usage.cost,
        )
        return UsageRecord(cost=cost, monthly_total=usage.cost, warnings=tuple(warnings))

    def summary(self, month: str | None = None) -> MonthlyUsage:
        """Totals for ``month`` (current month by default)."""
        month = month or month_key(self.clock())
        return self.state.monthly.get(month, MonthlyUsage())

    def current_month(self) -> str:
        return month_key(self.clock())

    def _save(self) -> None:
        self.store.save(self.state)

    async def _create_record(
        self, month: str, usage: MonthlyUsage, warnings: list[str]
    ) -> str | None:
        body = report.render_usage_body(month, usage, self.monthly_budget)
        try:
            return await self.sink.create(report.usage_title(month), body, report.USAGE_LABELS)
        except LedgerSyncError as e:
            logger.error("Failed to create monthly usage record: %s", e)
            warnings.append(f"Ledger record not created: {e}")
            return None

    async def _update_record(self, month: str, usage: MonthlyUsage, warnings: list[str]) -> None:
        if not usage.ledger_record_id:
            return
        body = report.render_usage_body(month, usage, self.monthly_budget, self.clock())
        try:
            await self.sink.update(usage.ledger_record_id, body)
        except LedgerSyncError as e:
            logger.error("Failed to update usage record #%s: %s", usage.ledger_record_id, e)
            warnings.append(f"Ledger record not updated: {e}")

    async def _check_budget(self, month: str, usage: MonthlyUsage, warnings: list[str]) -> None:
        if usage.alert_raised or usage.cost < self.alert_level:
            return

        # Marked before notifying so a failing sink cannot cause repeat alerts
        usage.alert_raised = True
        self._save()

        title, body = report.render_alert(month, usage, self.monthly_budget)
        logger.warning(
            "Monthly spend %s reached %s of the %s budget",
            report.format_money(usage.cost),
            self.alert_threshold,
            report.format_money(self.monthly_budget),
        )
        try:
            await self.sink.create(title, body, report.ALERT_LABELS)
        except LedgerSyncError as e:
            logger.error("Failed to raise budget alert: %s", e)
            warnings.append(f"Budget alert not delivered: {e}")
