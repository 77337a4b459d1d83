import json
import uuid
from datetime import datetime, timedelta
from unittest.mock import patch

import stripe

from faceyoga.core.constants import PurchaseStatusEnum, SubscriptionStatusEnum
from faceyoga.models.purchase import CourseAccess, CoursePurchase
from faceyoga.models.subscription import UserSubscription
from tests.helpers.asserts import auth_headers


def _succeeded_event(intent_id, user_id, course_id, amount=1999):
    return {
        "id": f"evt_{uuid.uuid4().hex}",
        "type": "payment_intent.succeeded",
        "data": {"object": {
            "id": intent_id,
            "amount": amount,
            "amount_received": amount,
            "currency": "usd",
            "payment_method_types": ["card"],
            "metadata": {"user_id": user_id, "course_id": str(course_id)},
        }},
    }


def _post_webhook(client, event):
    with patch("stripe.Webhook.construct_event", return_value=event):
        return client.post(
            "/stripe-webhook",
            content=json.dumps(event if isinstance(event, dict) else event.to_dict()),
            headers={"stripe-signature": "t=1,v1=test"},
        )


def test_create_payment_intent(client, user_session, course_factory):
    course = course_factory(price=19.99)
    fake_intent = {"id": "pi_created", "client_secret": "pi_created_secret"}

    with patch("stripe.PaymentIntent.create", return_value=fake_intent) as create:
        response = client.post(
            "/payments/intent",
            json={"course_id": course.id, "amount": 19.99},
            headers=auth_headers(user_session),
        )

    assert response.status_code == 200
    assert response.json()["data"] == {"client_secret": "pi_created_secret", "payment_intent_id": "pi_created"}
    kwargs = create.call_args.kwargs
    assert kwargs["amount"] == 1999
    assert kwargs["metadata"] == {"user_id": user_session.user_id, "course_id": str(course.id)}


def test_create_payment_intent_rejects_wrong_amount_and_free_course(client, user_session, course_factory):
    paid = course_factory(price=19.99)
    free = course_factory(price=0)

    with patch("stripe.PaymentIntent.create") as create:
        wrong = client.post("/payments/intent", json={"course_id": paid.id, "amount": 5}, headers=auth_headers(user_session))
        gratis = client.post("/payments/intent", json={"course_id": free.id, "amount": 0}, headers=auth_headers(user_session))

    assert wrong.status_code == 400
    assert wrong.json()["error"]["code"] == "BAD_REQUEST"
    assert gratis.status_code == 400
    create.assert_not_called()


def test_payment_endpoints_require_a_session(client, course_factory):
    course = course_factory()

    response = client.post("/payments/intent", json={"course_id": course.id, "amount": 19.99})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"

    response = client.get("/payments/purchases", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_stripe_failure_maps_to_bad_gateway(client, user_session, course_factory):
    course = course_factory(price=19.99)

    with patch("stripe.PaymentIntent.create", side_effect=stripe.APIConnectionError("network down")):
        response = client.post(
            "/payments/intent",
            json={"course_id": course.id, "amount": 19.99},
            headers=auth_headers(user_session),
        )

    assert response.status_code == 502


def test_confirm_payment_records_purchase(client, db_session, user_session, course_factory):
    course = course_factory(price=19.99)
    intent_id = f"pi_{uuid.uuid4().hex}"
    intent = _succeeded_event(intent_id, user_session.user_id, course.id)["data"]["object"]
    intent["status"] = "succeeded"

    with patch("stripe.PaymentIntent.retrieve", return_value=intent):
        response = client.post(
            "/payments/confirm",
            json={"payment_intent_id": intent_id, "course_id": course.id},
            headers=auth_headers(user_session),
        )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["course_id"] == course.id
    assert data["expires_at"] is None

    purchases = client.get("/payments/purchases", headers=auth_headers(user_session)).json()["data"]
    assert [p["payment_intent_id"] for p in purchases] == [intent_id]


def test_confirm_payment_accepts_stripe_objects(client, db_session, user_session, course_factory):
    course = course_factory(price=19.99)
    intent_id = f"pi_{uuid.uuid4().hex}"
    values = _succeeded_event(intent_id, user_session.user_id, course.id)["data"]["object"]
    values.update({"object": "payment_intent", "status": "succeeded"})
    intent = stripe.PaymentIntent.construct_from(values, "sk_test_dummy")

    with patch("stripe.PaymentIntent.retrieve", return_value=intent):
        response = client.post(
            "/payments/confirm",
            json={"payment_intent_id": intent_id, "course_id": course.id},
            headers=auth_headers(user_session),
        )

    assert response.status_code == 200
    purchase = db_session.query(CoursePurchase).filter(CoursePurchase.payment_intent_id == intent_id).one()
    assert purchase.amount == 19.99
    assert purchase.payment_method == "card"


def test_confirm_payment_rejects_unpaid_or_foreign_intent(client, session_factory, course_factory):
    course = course_factory(price=19.99)
    buyer = session_factory()
    other = session_factory()
    intent_id = f"pi_{uuid.uuid4().hex}"
    intent = _succeeded_event(intent_id, buyer.user_id, course.id)["data"]["object"]

    intent["status"] = "requires_payment_method"
    with patch("stripe.PaymentIntent.retrieve", return_value=intent):
        unpaid = client.post(
            "/payments/confirm",
            json={"payment_intent_id": intent_id, "course_id": course.id},
            headers=auth_headers(buyer),
        )
    assert unpaid.status_code == 400

    intent["status"] = "succeeded"
    with patch("stripe.PaymentIntent.retrieve", return_value=intent):
        foreign = client.post(
            "/payments/confirm",
            json={"payment_intent_id": intent_id, "course_id": course.id},
            headers=auth_headers(other),
        )
    assert foreign.status_code == 400


def test_duplicate_webhook_delivery_grants_once(client, db_session, user_session, course_factory):
    course = course_factory(price=19.99)
    intent_id = f"pi_{uuid.uuid4().hex}"
    event = _succeeded_event(intent_id, user_session.user_id, course.id)

    first = _post_webhook(client, event)
    second = _post_webhook(client, event)

    assert first.status_code == 200
    assert second.status_code == 200
    assert db_session.query(CoursePurchase).filter(CoursePurchase.payment_intent_id == intent_id).count() == 1
    grants = db_session.query(CourseAccess).filter(
        CourseAccess.user_id == user_session.user_id, CourseAccess.course_id == course.id
    ).all()
    assert len(grants) == 1

    access = client.get(f"/access/courses/{course.id}", headers=auth_headers(user_session))
    assert access.json()["data"] == {"has_access": True}


def test_full_refund_webhook_revokes_access(client, db_session, user_session, course_factory):
    course = course_factory(price=19.99)
    intent_id = f"pi_{uuid.uuid4().hex}"
    _post_webhook(client, _succeeded_event(intent_id, user_session.user_id, course.id))

    refund = {
        "id": f"evt_{uuid.uuid4().hex}",
        "type": "charge.refunded",
        "data": {"object": {"id": "ch_1", "refunded": True, "payment_intent": intent_id}},
    }
    response = _post_webhook(client, refund)

    assert response.status_code == 200
    purchase = db_session.query(CoursePurchase).filter(CoursePurchase.payment_intent_id == intent_id).one()
    db_session.refresh(purchase)
    assert purchase.status == PurchaseStatusEnum.REFUNDED
    access = client.get(f"/access/courses/{course.id}", headers=auth_headers(user_session))
    assert access.json()["data"] == {"has_access": False}


def test_partial_refund_keeps_access(client, user_session, course_factory):
    course = course_factory(price=19.99)
    intent_id = f"pi_{uuid.uuid4().hex}"
    _post_webhook(client, _succeeded_event(intent_id, user_session.user_id, course.id))

    partial = {
        "id": f"evt_{uuid.uuid4().hex}",
        "type": "charge.refunded",
        "data": {"object": {"id": "ch_2", "refunded": False, "payment_intent": intent_id}},
    }
    _post_webhook(client, partial)

    access = client.get(f"/access/courses/{course.id}", headers=auth_headers(user_session))
    assert access.json()["data"] == {"has_access": True}


def test_subscription_webhook_tracks_status(client, db_session, user_session):
    subscription_id = f"sub_{uuid.uuid4().hex}"
    created = {
        "id": f"evt_{uuid.uuid4().hex}",
        "type": "customer.subscription.created",
        "data": {"object": {
            "id": subscription_id,
            "status": "active",
            "current_period_end": 4102444800,
            "metadata": {"user_id": user_session.user_id},
        }},
    }
    _post_webhook(client, created)

    row = db_session.query(UserSubscription).filter(UserSubscription.user_id == user_session.user_id).one()
    assert row.status == SubscriptionStatusEnum.ACTIVE
    assert row.expires_at.year == 2100

    deleted = {
        "id": f"evt_{uuid.uuid4().hex}",
        "type": "customer.subscription.deleted",
        "data": {"object": {"id": subscription_id, "status": "canceled", "metadata": {}}},
    }
    _post_webhook(client, deleted)

    db_session.refresh(row)
    assert row.status == SubscriptionStatusEnum.CANCELED


def test_webhook_with_bad_signature_is_rejected(client):
    with patch(
        "stripe.Webhook.construct_event",
        side_effect=stripe.SignatureVerificationError("bad signature", "t=1,v1=bad"),
    ):
        response = client.post("/stripe-webhook", content=b"{}", headers={"stripe-signature": "t=1,v1=bad"})

    assert response.status_code == 400


def test_unhandled_webhook_event_is_acknowledged(client):
    event = {"id": "evt_other", "type": "customer.created", "data": {"object": {"id": "cus_1"}}}

    response = _post_webhook(client, event)

    assert response.status_code == 200
    assert response.json() == {"status": "success"}


def test_webhook_events_built_by_stripe_are_handled(client, db_session, user_session, course_factory):
    course = course_factory(price=19.99)
    intent_id = f"pi_{uuid.uuid4().hex}"
    values = _succeeded_event(intent_id, user_session.user_id, course.id)
    values["object"] = "event"
    values["data"]["object"]["object"] = "payment_intent"
    event = stripe.Event.construct_from(values, "sk_test_dummy")

    response = _post_webhook(client, event)

    assert response.status_code == 200
    assert db_session.query(CoursePurchase).filter(CoursePurchase.payment_intent_id == intent_id).count() == 1

    refund = stripe.Event.construct_from({
        "id": f"evt_{uuid.uuid4().hex}",
        "object": "event",
        "type": "charge.refunded",
        "data": {"object": {"id": "ch_3", "object": "charge", "refunded": True, "payment_intent": intent_id}},
    }, "sk_test_dummy")
    assert _post_webhook(client, refund).status_code == 200

    access = client.get(f"/access/courses/{course.id}", headers=auth_headers(user_session))
    assert access.json()["data"] == {"has_access": False}


def test_redelivered_payment_does_not_renew_ended_access(client, db_session, user_session, course_factory):
    course = course_factory(price=19.99)
    intent_id = f"pi_{uuid.uuid4().hex}"
    event = _succeeded_event(intent_id, user_session.user_id, course.id)
    _post_webhook(client, event)

    grant = db_session.query(CourseAccess).filter(
        CourseAccess.user_id == user_session.user_id, CourseAccess.course_id == course.id
    ).one()
    grant.expires_at = datetime.utcnow() - timedelta(days=1)
    db_session.commit()

    response = _post_webhook(client, event)

    assert response.status_code == 200
    access = client.get(f"/access/courses/{course.id}", headers=auth_headers(user_session))
    assert access.json()["data"] == {"has_access": False}
