"""Checkout API tests: verification, fee preview and order placement."""

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
from foodcart.models import AppSetting, MenuItem, MenuOption, MenuOptionChoice, Order, Restaurant, User
from foodcart.services.delivery_fee import GeoPoint
from foodcart.services.errors import RouteUnavailableError

NOON = 720
DROPOFF = {"lat": 31.4697, "lng": 74.2728, "address": "House 5, Block C, Model Town, Lahore"}


class StubDistanceProvider:
    def __init__(self, distance_km: str = "4.2") -> None:
        self.distance_km = Decimal(distance_km)

    def route_distance_km(self, origin: GeoPoint, destination: GeoPoint) -> Decimal:
        return self.distance_km


class NoRouteProvider:
    def route_distance_km(self, origin: GeoPoint, destination: GeoPoint) -> Decimal:
        raise RouteUnavailableError


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _prepare(tmp_path: Path, monkeypatch, provider=None) -> sessionmaker:
    engine = _build_test_engine(tmp_path / "test_checkout_api.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    monkeypatch.setattr("foodcart.services.cart_validation.local_minute_of_day", lambda: NOON)
    monkeypatch.setitem(app.dependency_overrides, get_distance_provider, lambda: provider or StubDistanceProvider())
    return testing_session_local


def _seed(testing_session_local: sessionmaker) -> dict[str, int]:
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
        db.add(restaurant)
        db.flush()

        karahi = MenuItem(
            restaurant_id=restaurant.id,
            name="Chicken Karahi",
            base_price=Decimal("550"),
            image_url="https://img.example/karahi.png",
            category="Mains",
            options=[
                MenuOption(
                    option_header="Size",
                    required=True,
                    choices=[
                        MenuOptionChoice(name="Half", additional_price=Decimal("0"), position=0),
                        MenuOptionChoice(name="Full", additional_price=Decimal("50"), position=1),
                    ],
                )
            ],
        )
        db.add(karahi)

        customer = User(email="customer@example.com", role="CUSTOMER", is_verified=True)
        unverified = User(email="new@example.com", role="CUSTOMER", is_verified=False)
        owner = User(email="owner@example.com", role="RESTAURANT", is_verified=True, restaurant_id=restaurant.id)
        db.add_all([customer, unverified, owner])
        db.commit()
        return {
            "restaurant_id": restaurant.id,
            "karahi_id": karahi.id,
            "customer_id": customer.id,
            "unverified_id": unverified.id,
            "owner_id": owner.id,
        }


def _auth(user_id: int) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user_id)})}"}


def _checkout_payload(ids: dict[str, int], *, base_price: str = "550", **extra) -> dict:
    payload = {
        "restaurant_id": ids["restaurant_id"],
        "items": [
            {
                "menu_item_id": ids["karahi_id"],
                "name": "Chicken Karahi",
                "base_price": base_price,
                "quantity": 2,
                "options": [{"option_header": "Size", "selected": "Full", "additional_price": "50"}],
            }
        ],
        "delivery_location": DROPOFF,
    }
    payload.update(extra)
    return payload


def test_verify_returns_items_and_fee(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _prepare(tmp_path, monkeypatch)
    ids = _seed(testing_session_local)

    with TestClient(app) as client:
        response = client.post("/api/v1/checkout/verify", json=_checkout_payload(ids), headers=_auth(ids["customer_id"]))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Order verified successfully"
    assert body["restaurant_id"] == ids["restaurant_id"]
    assert body["verified_items"][0]["menu_item_id"] == ids["karahi_id"]
    assert body["verified_items"][0]["options"][0]["selected"] == "Full"
    assert Decimal(body["delivery_fee_details"]["delivery_fee"]) == Decimal("105")
    assert Decimal(body["delivery_fee_details"]["base_fee"]) == Decimal("75")
    assert Decimal(body["delivery_fee_details"]["distance_km"]) == Decimal("4.2")


def test_verify_reports_removed_items(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _prepare(tmp_path, monkeypatch)
    ids = _seed(testing_session_local)

    with TestClient(app) as client:
        response = client.post(
            "/api/v1/checkout/verify",
            json=_checkout_payload(ids, base_price="500"),
            headers=_auth(ids["customer_id"]),
        )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Some items are no longer available or have been modified"
    removed = body["removed_items"][0]
    assert removed["menu_item_id"] == ids["karahi_id"]
    assert removed["reason"] == "Item price has changed"
    assert removed["reason_code"] == "price_changed"
    assert "delivery_fee_details" not in body


def test_verify_offline_restaurant_is_conflict(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _prepare(tmp_path, monkeypatch)
    ids = _seed(testing_session_local)
    monkeypatch.setattr("foodcart.services.cart_validation.local_minute_of_day", lambda: 1325)

    with TestClient(app) as client:
        response = client.post("/api/v1/checkout/verify", json=_checkout_payload(ids), headers=_auth(ids["customer_id"]))

    assert response.status_code == 409
    assert response.json() == {
        "success": False,
        "message": "Restaurant is currently offline",
        "code": "restaurant_offline",
    }


def test_verify_unknown_restaurant_is_not_found(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _prepare(tmp_path, monkeypatch)
    ids = _seed(testing_session_local)
    payload = _checkout_payload(ids)
    payload["restaurant_id"] = 99999

    with TestClient(app) as client:
        response = client.post("/api/v1/checkout/verify", json=payload, headers=_auth(ids["customer_id"]))

    assert response.status_code == 404
    assert response.json()["code"] == "restaurant_not_found"


def test_verify_route_unavailable(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _prepare(tmp_path, monkeypatch, provider=NoRouteProvider())
    ids = _seed(testing_session_local)

    with TestClient(app) as client:
        response = client.post("/api/v1/checkout/verify", json=_checkout_payload(ids), headers=_auth(ids["customer_id"]))

    assert response.status_code == 422
    assert response.json()["code"] == "route_unavailable"
    assert response.json()["message"].startswith("Unable to calculate delivery route")


def test_verify_with_broken_pricing_returns_zero_fee(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _prepare(tmp_path, monkeypatch)
    ids = _seed(testing_session_local)
    with testing_session_local() as db:
        db.add(AppSetting(key="delivery_fee_per_km", value="not-a-number"))
        db.commit()

    with TestClient(app) as client:
        response = client.post("/api/v1/checkout/verify", json=_checkout_payload(ids), headers=_auth(ids["customer_id"]))

    assert response.status_code == 503
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Failed to calculate delivery fee"
    assert {key: Decimal(value) for key, value in body["delivery_fee_details"].items()} == {
        "delivery_fee": Decimal("0"),
        "base_fee": Decimal("0"),
        "distance_km": Decimal("0"),
    }


def test_verify_requires_token(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _prepare(tmp_path, monkeypatch)
    ids = _seed(testing_session_local)

    with TestClient(app) as client:
        response = client.post("/api/v1/checkout/verify", json=_checkout_payload(ids))

    assert response.status_code in {401, 403}


def test_verify_rejects_unverified_and_non_customer_accounts(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _prepare(tmp_path, monkeypatch)
    ids = _seed(testing_session_local)

    with TestClient(app) as client:
        unverified = client.post(
            "/api/v1/checkout/verify",
            json=_checkout_payload(ids),
            headers=_auth(ids["unverified_id"]),
        )
        owner = client.post("/api/v1/checkout/verify", json=_checkout_payload(ids), headers=_auth(ids["owner_id"]))

    assert unverified.status_code == 401
    assert unverified.json()["detail"] == "Please verify your account before placing orders."
    assert owner.status_code == 401
    assert owner.json()["detail"] == "Only customer accounts can place orders."


def test_verify_validates_payload_shape(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _prepare(tmp_path, monkeypatch)
    ids = _seed(testing_session_local)
    short_address = _checkout_payload(ids, delivery_location={"lat": 31.4, "lng": 74.2, "address": "short"})
    empty_cart = _checkout_payload(ids, items=[])

    with TestClient(app) as client:
        first = client.post("/api/v1/checkout/verify", json=short_address, headers=_auth(ids["customer_id"]))
        second = client.post("/api/v1/checkout/verify", json=empty_cart, headers=_auth(ids["customer_id"]))

    assert first.status_code == 422
    assert second.status_code == 422


def test_delivery_fee_preview_matches_checkout(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _prepare(tmp_path, monkeypatch)
    ids = _seed(testing_session_local)

    with TestClient(app) as client:
        preview = client.post(
            "/api/v1/checkout/delivery-fee",
            json={"restaurant_id": ids["restaurant_id"], "delivery_location": {"lat": 31.4697, "lng": 74.2728}},
        )
        verify = client.post("/api/v1/checkout/verify", json=_checkout_payload(ids), headers=_auth(ids["customer_id"]))

    assert preview.status_code == 200
    assert preview.json()["success"] is True
    assert Decimal(preview.json()["delivery_fee"]) == Decimal(verify.json()["delivery_fee_details"]["delivery_fee"])


def test_delivery_fee_preview_unknown_restaurant(tmp_path: Path, monkeypatch) -> None:
    _prepare(tmp_path, monkeypatch)

    with TestClient(app) as client:
        response = client.post(
            "/api/v1/checkout/delivery-fee",
            json={"restaurant_id": 12345, "delivery_location": {"lat": 31.4697, "lng": 74.2728}},
        )

    assert response.status_code == 404


def test_place_order_writes_order_with_sequential_number(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _prepare(tmp_path, monkeypatch)
    ids = _seed(testing_session_local)
    payload = _checkout_payload(ids, special_instructions="Ring the bell", payment_slip_url="https://slips.example/1.png")

    with TestClient(app) as client:
        first = client.post("/api/v1/checkout/place-order", json=payload, headers=_auth(ids["customer_id"]))
        second = client.post("/api/v1/checkout/place-order", json=payload, headers=_auth(ids["customer_id"]))

    assert first.status_code == 201
    assert first.json() == {"success": True, "message": "Order created successfully", "order_number": "KH-1"}
    assert second.json()["order_number"] == "KH-2"

    with testing_session_local() as db:
        order = db.query(Order).filter(Order.order_number == "KH-1").one()
        assert order.customer_id == ids["customer_id"]
        assert order.status == "PENDING"
        assert order.payment_status == "UNPAID"
        assert order.order_amount == Decimal("1200")
        assert order.delivery_fee == Decimal("105")
        assert order.distance_km == Decimal("4.2")
        assert order.pickup_address == "12 Mall Road, Lahore"
        assert order.dropoff_address == DROPOFF["address"]
        assert order.special_instructions == "Ring the bell"
        assert order.payment_slip_url == "https://slips.example/1.png"
        assert len(order.items) == 1
        assert order.items[0].name == "Chicken Karahi"
        assert order.items[0].quantity == 2
        assert [(option.option_header, option.selected) for option in order.items[0].options] == [("Size", "Full")]


def test_place_order_with_changed_items_writes_nothing(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _prepare(tmp_path, monkeypatch)
    ids = _seed(testing_session_local)

    with TestClient(app) as client:
        response = client.post(
            "/api/v1/checkout/place-order",
            json=_checkout_payload(ids, base_price="500"),
            headers=_auth(ids["customer_id"]),
        )

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["removed_items"][0]["reason_code"] == "price_changed"
    with testing_session_local() as db:
        assert db.query(Order).count() == 0


def test_delivery_fee_preview_accepts_optional_address(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _prepare(tmp_path, monkeypatch)
    ids = _seed(testing_session_local)

    with TestClient(app) as client:
        with_address = client.post(
            "/api/v1/checkout/delivery-fee",
            json={"restaurant_id": ids["restaurant_id"], "delivery_location": DROPOFF},
        )
        too_long = client.post(
            "/api/v1/checkout/delivery-fee",
            json={
                "restaurant_id": ids["restaurant_id"],
                "delivery_location": {"lat": 31.4697, "lng": 74.2728, "address": "x" * 201},
            },
        )

    assert with_address.status_code == 200
    assert Decimal(with_address.json()["delivery_fee"]) == Decimal("105")
    assert too_long.status_code == 422
