import logging
from fastapi import APIRouter, Request, Depends, HTTPException
from sqlalchemy.orm import Session
import stripe
from stripe import SignatureVerificationError

from faceyoga.core.config import settings
from faceyoga.utils import deps
from faceyoga.services.stripe import stripe_service

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/stripe-webhook")
async def stripe_webhook(request: Request, db: Session = Depends(deps.get_db)):
    payload = await request.body()
    sig_header = request.headers.get('stripe-signature')

    try:
        event = stripe.Webhook.construct_event(
            payload, sig_header, settings.STRIPE_WEBHOOK_SECRET
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SignatureVerificationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if event['type'] == 'payment_intent.succeeded':
        await stripe_service.handle_payment_intent_succeeded_event(db, event)
    elif event['type'] == 'charge.refunded':
        await stripe_service.handle_charge_refunded_event(db, event)
    elif event['type'] in (
        'customer.subscription.created',
        'customer.subscription.updated',
        'customer.subscription.deleted',
    ):
        await stripe_service.handle_subscription_event(db, event)
    else:
        logger.info(f"Unhandled event type {event['type']}")

    return {"status": "success"}
