import uuid
from datetime import datetime, timedelta

import pytest

from faceyoga.core.cache import MemoryCacheBackend, CacheManager
from faceyoga.core.constants import SubscriptionStatusEnum
from faceyoga.core.logging import build_logging_config
from faceyoga.core.scheduler import expire_lapsed_subscriptions
from faceyoga.models.subscription import UserSubscription
from faceyoga.services.cloudinary import public_id_from_url


def test_health_and_request_id(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Request-ID"] == "req-123"


def test_error_envelope_carries_request_id(client):
    response = client.get("/courses/987654", headers={"X-Request-ID": "req-404"})

    body = response.json()
    assert response.status_code == 404
    assert body["error"] == {"code": "NOT_FOUND", "message": "Course not found.", "details": None}
    assert body["request_id"] == "req-404"


@pytest.mark.asyncio
async def test_subscription_sweep_expires_only_lapsed(db_session):
    lapsed = UserSubscription(
        user_id=f"user-{uuid.uuid4().hex}",
        status=SubscriptionStatusEnum.ACTIVE,
        expires_at=datetime.utcnow() - timedelta(hours=1),
    )
    current = UserSubscription(
        user_id=f"user-{uuid.uuid4().hex}",
        status=SubscriptionStatusEnum.ACTIVE,
        expires_at=datetime.utcnow() + timedelta(days=10),
    )
    db_session.add_all([lapsed, current])
    db_session.commit()

    expired = await expire_lapsed_subscriptions()

    assert expired >= 1
    db_session.refresh(lapsed)
    db_session.refresh(current)
    assert lapsed.status == SubscriptionStatusEnum.EXPIRED
    assert current.status == SubscriptionStatusEnum.ACTIVE


@pytest.mark.asyncio
async def test_catalog_invalidation_only_touches_catalog_keys():
    manager = CacheManager(MemoryCacheBackend())
    await manager.set("catalog:exercises:page=1", [1])
    await manager.set("catalog:courses", [2])
    await manager.set("profile:me", {"id": 3})

    removed = await manager.invalidate_catalog()

    assert removed == 2
    assert await manager.get("catalog:exercises:page=1") is None
    assert await manager.get("profile:me") == {"id": 3}


@pytest.mark.parametrize("url, expected", [
    ("https://res.cloudinary.com/demo/image/upload/v1712/avatars/abc.jpg", "avatars/abc"),
    ("https://res.cloudinary.com/demo/image/upload/progress/u1/day1.png", "progress/u1/day1"),
    ("https://example.com/not-cloudinary.png", None),
    (None, None),
])
def test_public_id_from_url(url, expected):
    assert public_id_from_url(url) == expected


def test_logging_config_routes_payments_to_their_own_file():
    config = build_logging_config("DEBUG", to_file=True)

    assert config["loggers"]["faceyoga"]["level"] == "DEBUG"
    assert "payments_file" in config["loggers"]["faceyoga.services.stripe"]["handlers"]
    assert "payments_file" in config["loggers"]["faceyoga.services.purchase"]["handlers"]
    assert "payments_file" not in config["loggers"]["faceyoga"]["handlers"]
    assert config["handlers"]["payments_file"]["filename"].endswith("payments.log")


def test_logging_config_without_files_uses_console_only():
    config = build_logging_config("INFO", to_file=False)

    assert set(config["handlers"]) == {"console"}
    assert all(logger["handlers"] == ["console"] for logger in config["loggers"].values())
