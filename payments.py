"""
Stripe payment-intent client.

The gateway is built once in ``create_app`` and stored on ``app.state`` so
tests can swap in a fake with the same ``create_payment_intent`` method.
"""
import logging

import stripe
from fastapi import Request

from errors import UpstreamFailure

logger = logging.getLogger(__name__)


def to_minor_units(price: float) -> int:
    # truncates like the storefront's parseInt(price * 100)
    return int(price * 100)


class StripeGateway:
    def __init__(self, api_key: str, currency: str = "usd"):
        self.api_key = api_key
        self.currency = currency

    def create_payment_intent(self, amount: int, currency: str = None) -> str:
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount,
                currency=currency or self.currency,
                payment_method_types=["card"],
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            logger.error("Stripe rejected payment intent for amount %s: %s", amount, e)
            raise UpstreamFailure()
        return intent.client_secret


def get_gateway(request: Request):
    return request.app.state.gateway
