# This file provides dependency factories for FastAPI routes.
# It exists so the lock registry, Admin API client, and pricing service are created once and shared.
# Tests override these factories instead of patching module globals.

from __future__ import annotations

from functools import lru_cache

from protection_relay.api.api_config import get_api_config
from protection_relay.api.services.protection_service import (
    ProtectionPricingService,
    SerializedVariantUpdater,
)
from protection_relay.pricing.policy_config import ProtectionPolicyConfig, load_policy_config
from protection_relay.pricing.variant_locks import VariantLockRegistry
from protection_relay.storefront.admin_client import ShopifyAdminClient


@lru_cache(maxsize=1)
def get_lock_registry() -> VariantLockRegistry:
    return VariantLockRegistry()


@lru_cache(maxsize=1)
def get_policy_config() -> ProtectionPolicyConfig:
    return load_policy_config()


@lru_cache(maxsize=1)
def get_admin_client() -> ShopifyAdminClient:
    config = get_api_config()
    return ShopifyAdminClient(
        shop_domain=config.shop_domain,
        api_version=config.admin_api_version,
        access_token=config.admin_api_token,
        timeout_seconds=config.request_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_protection_service() -> ProtectionPricingService:
    updater = SerializedVariantUpdater(client=get_admin_client(), locks=get_lock_registry())
    return ProtectionPricingService(
        config=get_api_config(),
        policy=get_policy_config(),
        updater=updater,
    )
