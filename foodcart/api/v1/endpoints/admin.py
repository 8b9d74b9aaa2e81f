"""Admin endpoints for delivery pricing."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from foodcart.api.v1.deps import get_pricing_cache
from foodcart.core.security import get_current_user
from foodcart.db.session import get_db
from foodcart.models.user import User
from foodcart.schemas.admin import PricingSettingsPayload
from foodcart.services.pricing_cache import PricingCache
from foodcart.services.security_guards import ensure_role
from foodcart.services.settings_service import get_pricing_settings, save_pricing_settings

router: APIRouter = APIRouter()


@router.get("/settings", response_model=PricingSettingsPayload)
def read_pricing_settings(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PricingSettingsPayload:
    """Return stored delivery pricing (defaults when never saved)."""
    ensure_role(current_user, {"ADMIN"})
    pricing = get_pricing_settings(db)
    return PricingSettingsPayload(base_delivery_fee=pricing.base_fee, delivery_fee_per_km=pricing.per_km_rate)


@router.put("/settings", response_model=PricingSettingsPayload)
def update_pricing_settings(
    payload: PricingSettingsPayload,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    pricing_cache: PricingCache = Depends(get_pricing_cache),
) -> PricingSettingsPayload:
    """Store delivery pricing and drop the cached copy."""
    ensure_role(current_user, {"ADMIN"})
    pricing = save_pricing_settings(
        db,
        base_delivery_fee=payload.base_delivery_fee,
        delivery_fee_per_km=payload.delivery_fee_per_km,
    )
    pricing_cache.invalidate()
    return PricingSettingsPayload(base_delivery_fee=pricing.base_fee, delivery_fee_per_km=pricing.per_km_rate)
