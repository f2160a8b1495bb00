# This file implements the protection price update flow behind the API route.
# It exists so the router stays transport-focused while policy, locking, and the remote write live here.
# The updater holds the variant lock for the whole Admin API call and releases it on every exit path.
# The blocking HTTP call runs in the threadpool so other variants keep being served meanwhile.

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal

from prometheus_client import Counter
from starlette.concurrency import run_in_threadpool

from protection_relay.api.api_config import ApiConfig
from protection_relay.api.schemas.protection_schemas import PriceUpdateRequest, ResetRequest
from protection_relay.common.errors import RemoteError
from protection_relay.pricing.policy_config import ProtectionPolicyConfig
from protection_relay.pricing.protection_policy import decide_protection_price
from protection_relay.pricing.variant_locks import VariantLockRegistry
from protection_relay.storefront.admin_client import ShopifyAdminClient, UpdatedVariant

LOGGER = logging.getLogger("protection")

PROTECTION_PRICE_UPDATES_TOTAL = Counter(
    "protection_price_updates_total",
    "Protection price update attempts by policy rule and outcome.",
    ["rule", "outcome"],
)


@dataclass(frozen=True)
class PricingResult:
    variant_id: int | str
    new_price: str
    note: str


class SerializedVariantUpdater:
    """Writes variant prices with at most one in-flight write per variant id."""

    def __init__(self, *, client: ShopifyAdminClient, locks: VariantLockRegistry) -> None:
        self.client = client
        self.locks = locks

    async def update(self, variant_id: str, price: Decimal) -> UpdatedVariant:
        async with self.locks.hold(variant_id):
            write = asyncio.ensure_future(
                run_in_threadpool(self.client.update_variant_price, variant_id, price)
            )
            try:
                return await asyncio.shield(write)
            except asyncio.CancelledError:
                # The worker thread cannot be interrupted; keep the lock until its write lands.
                await _wait_out(write)
                raise


async def _wait_out(write: asyncio.Future[UpdatedVariant]) -> None:
    while not write.done():
        try:
            await asyncio.wait({write})
        except asyncio.CancelledError:
            continue
    if not write.cancelled() and write.exception() is not None:
        LOGGER.warning("price write failed after its request was cancelled", exc_info=write.exception())


class ProtectionPricingService:
    def __init__(
        self,
        *,
        config: ApiConfig,
        policy: ProtectionPolicyConfig,
        updater: SerializedVariantUpdater,
    ) -> None:
        self.config = config
        self.policy = policy
        self.updater = updater

    def target_variant_id(self, request: PriceUpdateRequest) -> str:
        if isinstance(request, ResetRequest) and request.variant_id:
            return request.variant_id
        return self.config.default_variant_id

    async def apply(self, request: PriceUpdateRequest) -> PricingResult:
        is_reset = isinstance(request, ResetRequest)
        decision = decide_protection_price(
            subtotal=None if is_reset else request.subtotal,
            reset=is_reset,
            new_price=request.new_price if is_reset else None,
            config=self.policy,
        )
        variant_id = self.target_variant_id(request)
        LOGGER.info(
            "protection price decided rule=%s variant_id=%s price=%s",
            decision.rule,
            variant_id,
            decision.price,
        )

        try:
            updated = await self.updater.update(variant_id, decision.price)
        except RemoteError:
            PROTECTION_PRICE_UPDATES_TOTAL.labels(rule=decision.rule, outcome="remote_error").inc()
            raise
        except Exception:
            PROTECTION_PRICE_UPDATES_TOTAL.labels(rule=decision.rule, outcome="error").inc()
            raise

        PROTECTION_PRICE_UPDATES_TOTAL.labels(rule=decision.rule, outcome="success").inc()
        return PricingResult(variant_id=updated.id, new_price=updated.price, note=decision.note)
