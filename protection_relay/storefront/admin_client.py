# This file implements the outbound client for the Shopify Admin REST API.
# It exists so the relay has one place that knows the variant endpoint, auth header, and payload shape.
# Non-success statuses become RemoteError with the status and body; transport failures become UnknownError.
# Every call is bounded by a timeout so a hung storefront cannot hold a variant lock forever.

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import requests

from protection_relay.common.errors import RemoteError, UnknownError
from protection_relay.pricing.protection_policy import quantize_cents

LOGGER = logging.getLogger("storefront")

ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"


@dataclass(frozen=True)
class UpdatedVariant:
    """Variant as stored by the storefront after a price write."""

    id: int | str
    price: str


def format_price(price: Decimal) -> str:
    return str(quantize_cents(price))


class ShopifyAdminClient:
    def __init__(
        self,
        *,
        shop_domain: str,
        api_version: str,
        access_token: str,
        timeout_seconds: int = 30,
        session: requests.Session | None = None,
    ) -> None:
        self.shop_domain = shop_domain
        self.api_version = api_version
        self.access_token = access_token
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def variant_url(self, variant_id: str) -> str:
        return f"https://{self.shop_domain}/admin/api/{self.api_version}/variants/{variant_id}.json"

    def update_variant_price(self, variant_id: str, price: Decimal) -> UpdatedVariant:
        url = self.variant_url(variant_id)
        body = {"variant": {"id": int(variant_id), "price": format_price(price)}}
        headers = {
            "Content-Type": "application/json",
            ACCESS_TOKEN_HEADER: self.access_token,
        }

        LOGGER.info("updating variant price variant_id=%s price=%s", variant_id, body["variant"]["price"])
        try:
            response = self.session.put(url, json=body, headers=headers, timeout=self.timeout_seconds)
        except requests.RequestException as exc:
            raise UnknownError(f"Admin API request failed for {url}: {exc}") from exc

        if not response.ok:
            LOGGER.warning(
                "admin api rejected price update variant_id=%s status=%s",
                variant_id,
                response.status_code,
            )
            raise RemoteError(
                status=response.status_code,
                reason=response.reason or "",
                body=response.text,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UnknownError(f"Admin API did not return valid JSON for {url}") from exc

        return _parse_variant(payload, url=url)


def _parse_variant(payload: Any, *, url: str) -> UpdatedVariant:
    variant = payload.get("variant") if isinstance(payload, dict) else None
    if not isinstance(variant, dict) or "id" not in variant or "price" not in variant:
        raise UnknownError(f"Unexpected payload shape from {url}")
    return UpdatedVariant(id=variant["id"], price=str(variant["price"]))
