# This file provides shared helpers for API endpoint tests.
# It exists so tests can override service dependencies without touching the real storefront.
# The helpers build consistent config objects, fake Admin API sessions, and scoped TestClient contexts.

from __future__ import annotations

import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal
from typing import Any

from fastapi.testclient import TestClient

from protection_relay.api.api_config import ApiConfig
from protection_relay.api.app import app
from protection_relay.api.dependencies import get_protection_service
from protection_relay.api.services.protection_service import (
    ProtectionPricingService,
    SerializedVariantUpdater,
)
from protection_relay.pricing.policy_config import ProtectionPolicyConfig
from protection_relay.pricing.variant_locks import VariantLockRegistry
from protection_relay.storefront.admin_client import ShopifyAdminClient

DEFAULT_VARIANT_ID = "45626932789401"


def build_test_config(**overrides: Any) -> ApiConfig:
    """Create deterministic API config for tests."""

    values: dict[str, Any] = {
        "api_name": "Test Protection Relay",
        "host": "0.0.0.0",
        "port": 3000,
        "environment": "test",
        "allowed_origins": ["*"],
        "request_timeout_seconds": 5,
        "shop_domain": "test-shop.myshopify.com",
        "admin_api_version": "2025-07",
        "admin_api_token": "shpat_test_token",
        "default_variant_id": DEFAULT_VARIANT_ID,
        "app_version": "0.1.0",
    }
    values.update(overrides)
    return ApiConfig(**values)


class FakeResponse:
    def __init__(
        self,
        *,
        status_code: int,
        payload: Any = None,
        text: str = "",
        reason: str = "",
    ) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.reason = reason

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON payload")
        return self._payload


class FakeAdminSession:
    """Stands in for `requests.Session`; echoes the written price back like the storefront does."""

    def __init__(
        self,
        *,
        status_code: int = 200,
        text: str = "",
        reason: str = "OK",
        raise_error: Exception | None = None,
        delay_seconds: float = 0.0,
    ) -> None:
        self.status_code = status_code
        self.text = text
        self.reason = reason
        self.raise_error = raise_error
        self.delay_seconds = delay_seconds
        self.calls: list[dict[str, Any]] = []
        self.windows: list[tuple[str, float, float]] = []
        self._guard = threading.Lock()

    def put(self, url: str, *, json: dict[str, Any], headers: dict[str, str], timeout: int) -> FakeResponse:
        started = time.perf_counter()
        with self._guard:
            self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.raise_error is not None:
            raise self.raise_error
        if self.delay_seconds:
            time.sleep(self.delay_seconds)
        with self._guard:
            self.windows.append((str(json["variant"]["id"]), started, time.perf_counter()))

        if self.status_code >= 400:
            return FakeResponse(status_code=self.status_code, text=self.text, reason=self.reason)
        return FakeResponse(
            status_code=self.status_code,
            payload={"variant": {"id": json["variant"]["id"], "price": json["variant"]["price"]}},
            reason=self.reason,
        )


def build_service(
    *,
    session: FakeAdminSession,
    config: ApiConfig | None = None,
    policy: ProtectionPolicyConfig | None = None,
    locks: VariantLockRegistry | None = None,
) -> ProtectionPricingService:
    resolved_config = config or build_test_config()
    client = ShopifyAdminClient(
        shop_domain=resolved_config.shop_domain,
        api_version=resolved_config.admin_api_version,
        access_token=resolved_config.admin_api_token,
        timeout_seconds=resolved_config.request_timeout_seconds,
        session=session,
    )
    updater = SerializedVariantUpdater(client=client, locks=locks or VariantLockRegistry())
    return ProtectionPricingService(
        config=resolved_config,
        policy=policy or ProtectionPolicyConfig(),
        updater=updater,
    )


def sent_price(session: FakeAdminSession) -> Decimal:
    return Decimal(session.calls[-1]["json"]["variant"]["price"])


@contextmanager
def api_test_client(
    *,
    protection_service: ProtectionPricingService | None = None,
    raise_server_exceptions: bool = True,
) -> Iterator[TestClient]:
    """Yield a TestClient with scoped dependency overrides."""

    if protection_service is not None:
        app.dependency_overrides[get_protection_service] = lambda: protection_service

    try:
        with TestClient(app, raise_server_exceptions=raise_server_exceptions) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
