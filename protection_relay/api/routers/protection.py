# This file defines the protection price update endpoint.
# It exists so storefront scripts can push a subtotal (or an explicit reset price) and get the stored price back.
# The router parses the raw JSON body itself so invalid input is reported as 400 with the relay's error shape.
# Pricing, locking, and the Admin API call are delegated to the service layer.

from __future__ import annotations

import json
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from protection_relay.api.dependencies import get_protection_service
from protection_relay.api.schemas.protection_schemas import (
    ErrorResponse,
    ProtectionUpdateResponse,
    parse_update_request,
)
from protection_relay.api.services.protection_service import ProtectionPricingService
from protection_relay.common.errors import InvalidInput

LOGGER = logging.getLogger("protection")

router = APIRouter(tags=["protection"])
ProtectionServiceDep = Annotated[ProtectionPricingService, Depends(get_protection_service)]


@router.post(
    "/update-protection",
    response_model=ProtectionUpdateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def update_protection(
    request: Request,
    service: ProtectionServiceDep,
) -> dict[str, object]:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidInput("Request body must be valid JSON") from exc

    LOGGER.info("update-protection called request_id=%s body=%s", request.state.request_id, body)
    update_request = parse_update_request(body)
    result = await service.apply(update_request)

    return {
        "success": True,
        "variant_id": result.variant_id,
        "new_price": result.new_price,
        "note": result.note,
    }
