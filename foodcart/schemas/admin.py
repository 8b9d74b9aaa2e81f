"""Admin API schemas."""

from decimal import Decimal

from pydantic import BaseModel, Field


class PricingSettingsPayload(BaseModel):
    """Delivery pricing: fee floor and per-km rate."""

    base_delivery_fee: Decimal = Field(ge=0)
    delivery_fee_per_km: Decimal = Field(ge=0)
