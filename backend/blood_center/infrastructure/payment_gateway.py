"""Payment Gateway — Stripe PaymentIntent creation behind a narrow async contract.

Invariants:
    - create_intent(amount) takes currency units and sends integer cents
    - Returns the client secret only; no card data passes through this service
    - Every Stripe failure maps to PaymentProviderError (message passthrough)
    - A call that exceeds timeout_seconds raises UpstreamTimeoutError
    - No retries: the caller sees the first failure

Design Decisions:
    - Blocking stripe SDK call runs in a worker thread via asyncio.to_thread
    - api_key passed per call instead of setting stripe.api_key globally
    - Decimal → cents with ROUND_HALF_UP so 10.005 never becomes 1000
"""

import asyncio
import logging
from decimal import Decimal, ROUND_HALF_UP

import stripe

from blood_center.core.errors import PaymentProviderError, UpstreamTimeoutError

logger = logging.getLogger(__name__)


def to_cents(amount: Decimal) -> int:
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class StripePaymentGateway:
    """Creates card PaymentIntents and hands back their client secret."""

    def __init__(
        self, secret_key: str, currency: str = "usd", timeout_seconds: float = 15.0,
    ):
        self._secret_key = secret_key
        self.currency = currency
        self.timeout_seconds = timeout_seconds

    async def create_intent(self, amount: Decimal) -> str:
        cents = to_cents(amount)
        try:
            intent = await asyncio.wait_for(
                asyncio.to_thread(
                    stripe.PaymentIntent.create,
                    api_key=self._secret_key,
                    amount=cents,
                    currency=self.currency,
                    payment_method_types=["card"],
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            raise UpstreamTimeoutError("Payment intent creation", self.timeout_seconds)
        except stripe.StripeError as e:
            logger.error(f"Stripe error creating intent: {e}")
            raise PaymentProviderError(getattr(e, "user_message", None) or str(e))

        logger.info(f"Payment intent created: {cents} {self.currency} minor units")
        return intent.client_secret
