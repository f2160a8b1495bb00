# This file defines request and response schemas for the protection price endpoint.
# Incoming bodies are split into a reset request or a calculate request before any pricing happens.
# Numbers must arrive as JSON numbers; strings, booleans, NaN, and infinities are rejected.
# Response models keep the success and error envelopes explicit for API consumers.

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, ValidationError, field_validator

from protection_relay.common.errors import InvalidInput
from protection_relay.pricing.protection_policy import RESET_PRICE_ERROR, SUBTOTAL_ERROR


class ResetRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Whole numbers stay int so the note reads "Reset price to 10", not "10.0".
    new_price: (
        Annotated[StrictInt, Field(gt=0)]
        | Annotated[StrictFloat, Field(allow_inf_nan=False, gt=0)]
    )
    variant_id: StrictStr | StrictInt | None = None

    @field_validator("variant_id")
    @classmethod
    def normalize_variant_id(cls, value: str | int | None) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        if text == "":
            return None
        if not text.isdigit():
            raise ValueError("variant_id must be a numeric variant identifier")
        return text


class CalculateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    subtotal: Annotated[float, Field(strict=True, allow_inf_nan=False, ge=0)]


PriceUpdateRequest = ResetRequest | CalculateRequest


def parse_update_request(body: Any) -> PriceUpdateRequest:
    """Validate a raw JSON body into the matching request variant."""

    if not isinstance(body, dict):
        raise InvalidInput("Request body must be a JSON object")

    if body.get("reset") is True:
        try:
            return ResetRequest.model_validate(body)
        except ValidationError as exc:
            failed_fields = {error["loc"][0] for error in exc.errors() if error["loc"]}
            if "new_price" not in failed_fields and "variant_id" in failed_fields:
                raise InvalidInput("variant_id must be a numeric variant identifier") from exc
            raise InvalidInput(RESET_PRICE_ERROR) from exc

    try:
        return CalculateRequest.model_validate(body)
    except ValidationError as exc:
        raise InvalidInput(SUBTOTAL_ERROR) from exc


class ProtectionUpdateResponse(BaseModel):
    success: bool = True
    variant_id: int | str
    new_price: str
    note: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class HealthResponse(BaseModel):
    ok: bool
