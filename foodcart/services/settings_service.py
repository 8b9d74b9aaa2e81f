"""Application settings helpers."""

from decimal import Decimal, InvalidOperation

from sqlalchemy.orm import Session

from foodcart.core.config import settings
from foodcart.models.app_setting import AppSetting
from foodcart.services.delivery_fee import PricingSettings
from foodcart.services.errors import SettingsUnavailableError

BASE_DELIVERY_FEE_KEY: str = "base_delivery_fee"
DELIVERY_FEE_PER_KM_KEY: str = "delivery_fee_per_km"


def parse_fee(value: str) -> Decimal:
    """Parse a stored non-negative fee value."""
    try:
        parsed = Decimal(value)
    except InvalidOperation as exc:
        raise ValueError(f"invalid fee value: {value!r}") from exc
    if not parsed.is_finite() or parsed < 0:
        raise ValueError(f"invalid fee value: {value!r}")
    return parsed


def get_pricing_settings(db: Session) -> PricingSettings:
    """Read delivery pricing from DB, falling back to configured defaults for unset keys."""
    rows: list[AppSetting] = (
        db.query(AppSetting)
        .filter(AppSetting.key.in_([BASE_DELIVERY_FEE_KEY, DELIVERY_FEE_PER_KM_KEY]))
        .all()
    )
    values: dict[str, str] = {row.key: row.value for row in rows}

    try:
        base_fee = parse_fee(values[BASE_DELIVERY_FEE_KEY]) if BASE_DELIVERY_FEE_KEY in values else settings.default_base_delivery_fee
        per_km_rate = (
            parse_fee(values[DELIVERY_FEE_PER_KM_KEY]) if DELIVERY_FEE_PER_KM_KEY in values else settings.default_delivery_fee_per_km
        )
    except ValueError as exc:
        raise SettingsUnavailableError from exc

    return PricingSettings(base_fee=base_fee, per_km_rate=per_km_rate)


def save_pricing_settings(db: Session, *, base_delivery_fee: Decimal, delivery_fee_per_km: Decimal) -> PricingSettings:
    """Persist delivery pricing in app settings table."""
    if base_delivery_fee < 0 or delivery_fee_per_km < 0:
        raise ValueError("Fees cannot be negative")

    for key, value in (
        (BASE_DELIVERY_FEE_KEY, base_delivery_fee),
        (DELIVERY_FEE_PER_KM_KEY, delivery_fee_per_km),
    ):
        setting: AppSetting | None = db.query(AppSetting).filter(AppSetting.key == key).first()
        if setting is None:
            setting = AppSetting(key=key, value=str(value))
            db.add(setting)
        else:
            setting.value = str(value)

    db.commit()
    return PricingSettings(base_fee=base_delivery_fee, per_km_rate=delivery_fee_per_km)
