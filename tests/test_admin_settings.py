"""Admin delivery pricing endpoint tests."""

from decimal import Decimal
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from foodcart.api.v1.deps import get_distance_provider
from foodcart.core.security import create_access_token
from foodcart.db import session as db_session
from foodcart.db.base import Base
from foodcart.main import app
from foodcart.models import Restaurant, User
from foodcart.services.delivery_fee import GeoPoint


class StubDistanceProvider:
    def route_distance_km(self, origin: GeoPoint, destination: GeoPoint) -> Decimal:
        return Decimal("4.2")


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _prepare(tmp_path: Path, monkeypatch) -> tuple[sessionmaker, dict[str, int]]:
    engine = _build_test_engine(tmp_path / "test_admin_settings.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    monkeypatch.setitem(app.dependency_overrides, get_distance_provider, StubDistanceProvider)

    with testing_session_local() as db:
        restaurant = Restaurant(
            name="Karahi House",
            order_code="KH",
            location_lat=31.5204,
            location_lng=74.3587,
            location_address="12 Mall Road, Lahore",
            online_start_minute=540,
            online_end_minute=1320,
            is_verified=True,
        )
        admin = User(email="admin@example.com", role="ADMIN", is_verified=True)
        customer = User(email="customer@example.com", role="CUSTOMER", is_verified=True)
        db.add_all([restaurant, admin, customer])
        db.commit()
        ids = {"restaurant_id": restaurant.id, "admin_id": admin.id, "customer_id": customer.id}
    return testing_session_local, ids


def _auth(user_id: int) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user_id)})}"}


def _preview_fee(client: TestClient, restaurant_id: int) -> Decimal:
    response = client.post(
        "/api/v1/checkout/delivery-fee",
        json={"restaurant_id": restaurant_id, "delivery_location": {"lat": 31.4697, "lng": 74.2728}},
    )
    assert response.status_code == 200
    return Decimal(response.json()["delivery_fee"])


def test_admin_reads_default_pricing(tmp_path: Path, monkeypatch) -> None:
    _, ids = _prepare(tmp_path, monkeypatch)

    with TestClient(app) as client:
        response = client.get("/api/v1/admin/settings", headers=_auth(ids["admin_id"]))

    assert response.status_code == 200
    assert Decimal(response.json()["base_delivery_fee"]) == Decimal("75")
    assert Decimal(response.json()["delivery_fee_per_km"]) == Decimal("25")


def test_saving_pricing_applies_to_next_quote(tmp_path: Path, monkeypatch) -> None:
    _, ids = _prepare(tmp_path, monkeypatch)

    with TestClient(app) as client:
        before = _preview_fee(client, ids["restaurant_id"])
        saved = client.put(
            "/api/v1/admin/settings",
            json={"base_delivery_fee": "150", "delivery_fee_per_km": "40"},
            headers=_auth(ids["admin_id"]),
        )
        after = _preview_fee(client, ids["restaurant_id"])

    assert before == Decimal("105")
    assert saved.status_code == 200
    assert Decimal(saved.json()["base_delivery_fee"]) == Decimal("150")
    assert after == Decimal("168")


def test_pricing_endpoints_are_admin_only(tmp_path: Path, monkeypatch) -> None:
    _, ids = _prepare(tmp_path, monkeypatch)

    with TestClient(app) as client:
        read = client.get("/api/v1/admin/settings", headers=_auth(ids["customer_id"]))
        write = client.put(
            "/api/v1/admin/settings",
            json={"base_delivery_fee": "0", "delivery_fee_per_km": "0"},
            headers=_auth(ids["customer_id"]),
        )

    assert read.status_code == 403
    assert write.status_code == 403


def test_negative_pricing_is_rejected(tmp_path: Path, monkeypatch) -> None:
    _, ids = _prepare(tmp_path, monkeypatch)

    with TestClient(app) as client:
        response = client.put(
            "/api/v1/admin/settings",
            json={"base_delivery_fee": "-1", "delivery_fee_per_km": "25"},
            headers=_auth(ids["admin_id"]),
        )

    assert response.status_code == 422
