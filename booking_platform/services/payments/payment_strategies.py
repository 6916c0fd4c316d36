"""
Payment method handlers and the dispatch table that routes to them.

Handlers are stateless placeholders: no real gateway is contacted, each one
answers with a plausible settlement (COMPLETED plus a prefixed transaction id).
Adding a method means registering one more handler, the dispatcher stays as is.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
import logging
import uuid

from booking_platform.cores.exceptions import UnsupportedPaymentMethodError
from booking_platform.models.common.status import PaymentStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettlementResult:
    payment_status: str
    transaction_id: str
    created_at: datetime


class PaymentStrategy:
    """Contract for one payment method. Subclasses set the name and the transaction prefix."""

    payment_method: str = ""
    transaction_prefix: str = ""

    def generate_transaction_id(self) -> str:
        return f"{self.transaction_prefix}{uuid.uuid4().hex[:10]}"

    def process_payment(self, amount: Decimal, booking_group_id: int) -> SettlementResult:
        logger.info(f"Processing {self.payment_method} payment of {amount} for booking group {booking_group_id}")
        result = SettlementResult(
            payment_status=PaymentStatus.COMPLETED.value,
            transaction_id=self.generate_transaction_id(),
            created_at=datetime.utcnow()
        )
        logger.info(f"✅ {self.payment_method} payment processed with transaction ID: {result.transaction_id}")
        return result


class CreditCardPaymentStrategy(PaymentStrategy):
    payment_method = "Credit Card"
    transaction_prefix = "cc_"


class PayPalPaymentStrategy(PaymentStrategy):
    payment_method = "PayPal"
    transaction_prefix = "pp_"


class BankTransferPaymentStrategy(PaymentStrategy):
    # Bank transfers would start as pending with a real bank; confirmed immediately here
    payment_method = "Bank Transfer"
    transaction_prefix = "bt_"


class PaymentDispatcher:
    """Routing table from payment method name to handler."""

    def __init__(self, strategies: Optional[Iterable[PaymentStrategy]] = None):
        self._strategies: Dict[str, PaymentStrategy] = {}
        for strategy in strategies or []:
            self.register_strategy(strategy)

    def register_strategy(self, strategy: PaymentStrategy) -> None:
        self._strategies[strategy.payment_method] = strategy
        logger.info(f"Registered payment strategy for method: {strategy.payment_method}")

    def get_strategy(self, payment_method: str) -> PaymentStrategy:
        strategy = self._strategies.get(payment_method)
        if strategy is None:
            logger.error(f"No payment strategy found for method: {payment_method}")
            raise UnsupportedPaymentMethodError(payment_method)
        return strategy

    def get_supported_methods(self) -> List[str]:
        return sorted(self._strategies)

    def process_payment(self, payment_method: str, amount: Decimal, booking_group_id: int) -> SettlementResult:
        return self.get_strategy(payment_method).process_payment(amount, booking_group_id)


def create_default_dispatcher() -> PaymentDispatcher:
    return PaymentDispatcher([
        CreditCardPaymentStrategy(),
        PayPalPaymentStrategy(),
        BankTransferPaymentStrategy(),
    ])
