# This module maps an order subtotal (or an explicit reset price) to the protection fee price.
# Exactly one rule fires per call: reset, below-threshold fixed price, or dynamic percentage.
# The functions are pure so the policy can be tested without any network or lock machinery.

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

from protection_relay.common.errors import InvalidInput
from protection_relay.pricing.policy_config import ProtectionPolicyConfig

CENTS = Decimal("0.01")

RULE_RESET = "reset"
RULE_FIXED = "fixed"
RULE_DYNAMIC = "dynamic"

RESET_PRICE_ERROR = "Invalid new_price for reset"
SUBTOTAL_ERROR = "subtotal must be a positive number (USD)"

# Fractional digits kept exact when the dynamic rate is applied.
_EXACT_DIGITS = 32


@dataclass(frozen=True)
class PolicyDecision:
    price: Decimal
    rule: str
    note: str


def quantize_cents(value: Decimal) -> Decimal:
    """Round a currency amount to two decimals, half-up."""

    with localcontext() as ctx:
        # Enough digits for every whole unit plus the cents.
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def _finite_number(value: Any) -> Decimal | None:
    # bool is an int subclass but never a valid amount.
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    return Decimal(str(value))


def reset_price(new_price: Any) -> PolicyDecision:
    price = _finite_number(new_price)
    if price is None or price <= 0:
        raise InvalidInput(RESET_PRICE_ERROR)
    return PolicyDecision(price=price, rule=RULE_RESET, note=f"Reset price to {price}")


def compute_protection_price(subtotal: Any, config: ProtectionPolicyConfig) -> PolicyDecision:
    amount = _finite_number(subtotal)
    if amount is None or amount < 0:
        raise InvalidInput(SUBTOTAL_ERROR)

    shown_subtotal = quantize_cents(amount)
    if amount < config.threshold:
        return PolicyDecision(
            price=config.fixed_price,
            rule=RULE_FIXED,
            note=(
                f"Set fixed protection price because subtotal {shown_subtotal} "
                f"< {config.threshold}"
            ),
        )

    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + _EXACT_DIGITS)
        raw = amount * config.percent_rate + config.base_increment
    price = quantize_cents(raw)
    return PolicyDecision(
        price=price,
        rule=RULE_DYNAMIC,
        note=f"Set dynamic protection price based on subtotal {shown_subtotal}",
    )


def decide_protection_price(
    *,
    subtotal: Any,
    reset: bool,
    new_price: Any,
    config: ProtectionPolicyConfig,
) -> PolicyDecision:
    """Apply the policy rules in order and return the single rule that fired."""

    if reset is True:
        return reset_price(new_price)
    return compute_protection_price(subtotal, config)
