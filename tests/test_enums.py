"""Order and payment state machines."""

import pytest

from sigecob.domain.enums import (
    OrderStatus,
    PaymentStatus,
    ensure_transition,
    parse_status,
)
from sigecob.domain.errors import InvalidStatusTransition


class TestOrderTransitions:
    @pytest.mark.parametrize(
        "current,target",
        [
            (OrderStatus.PENDING, OrderStatus.PROCESSING),
            (OrderStatus.PENDING, OrderStatus.CANCELLED),
            (OrderStatus.PROCESSING, OrderStatus.SHIPPED),
            (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
            (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
        ],
    )
    def test_allowed(self, current, target):
        ensure_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            (OrderStatus.PENDING, OrderStatus.SHIPPED),
            (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
            (OrderStatus.DELIVERED, OrderStatus.PROCESSING),
            (OrderStatus.CANCELLED, OrderStatus.PENDING),
        ],
    )
    def test_rejected(self, current, target):
        with pytest.raises(InvalidStatusTransition):
            ensure_transition(current, target)


class TestPaymentTransitions:
    def test_refund_only_after_confirmation(self):
        ensure_transition(PaymentStatus.CONFIRMED, PaymentStatus.REFUNDED)
        with pytest.raises(InvalidStatusTransition):
            ensure_transition(PaymentStatus.PENDING, PaymentStatus.REFUNDED)

    def test_cancelled_is_terminal(self):
        with pytest.raises(InvalidStatusTransition):
            ensure_transition(PaymentStatus.CANCELLED, PaymentStatus.CONFIRMED)


class TestParseStatus:
    def test_known_value(self):
        assert parse_status(OrderStatus, "Shipped") is OrderStatus.SHIPPED

    def test_unknown_value(self):
        with pytest.raises(InvalidStatusTransition) as exc:
            parse_status(PaymentStatus, "Lost")
        assert "Refunded" in exc.value.to_dict()["allowed"]
