"""Per-model token pricing.

Rates are USD per single token, kept as ``Decimal`` so costs accumulate
without float drift.
"""

from dataclasses import dataclass
from decimal import Decimal

_PER_1K = Decimal("1000")


@dataclass(frozen=True)
class ModelPricing:
    """Per-token pricing for a specific model."""

    input_rate: Decimal
    output_rate: Decimal

    @classmethod
    def per_1k(cls, input_per_1k: str, output_per_1k: str) -> "ModelPricing":
        return cls(Decimal(input_per_1k) / _PER_1K, Decimal(output_per_1k) / _PER_1K)


FALLBACK_MODEL = "gpt-4o-mini"

# Fixed pricing table; unknown models are billed at the fallback model's rate
PRICING_TABLE: dict[str, ModelPricing] = {
    "gpt-4o": ModelPricing.per_1k("0.0025", "0.01"),
    "gpt-4o-mini": ModelPricing.per_1k("0.00015", "0.0006"),
    "gpt-4.1": ModelPricing.per_1k("0.002", "0.008"),
    "gpt-4.1-mini": ModelPricing.per_1k("0.0004", "0.0016"),
    "claude-3-5-haiku-latest": ModelPricing.per_1k("0.0008", "0.004"),
    "claude-sonnet-4-20250514": ModelPricing.per_1k("0.003", "0.015"),
}


def get_pricing(model: str) -> ModelPricing:
    """Rates for ``model``, falling back to the default model's rates."""
    return PRICING_TABLE.get(model, PRICING_TABLE[FALLBACK_MODEL])


def calculate_cost(model: str, input_tokens: int, output_tokens: int) -> Decimal:
    """Full-precision cost of one call (no rounding)."""
    pricing = get_pricing(model)
    return Decimal(input_tokens) * pricing.input_rate + Decimal(output_tokens) * pricing.output_rate
