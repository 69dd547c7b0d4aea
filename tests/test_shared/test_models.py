"""
Tests for shared domain models.

These tests verify that the models validate order data and that the
helper methods behave as the dispatcher expects.
"""

import pytest
from datetime import datetime, timezone
from pydantic import ValidationError

from shared.models import (
    Currency,
    Customer,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    utc_now,
)


class TestCustomer:
    """Tests for Customer model."""

    def test_phone_is_optional(self):
        """A customer without phone is valid."""
        customer = Customer(id=1, name="Test User", email="test@example.com")

        assert customer.phone is None

    def test_requires_email(self):
        """Email is required for the email channel."""
        with pytest.raises(ValidationError):
            Customer(id=1, name="Test User")


class TestOrderItem:
    """Tests for OrderItem model."""

    def test_line_total(self):
        """Line total multiplies price by quantity."""
        item = OrderItem(product_name="Seat", quantity=3, unit_price=10.5)

        assert item.line_total == 31.5

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            OrderItem(product_name="Seat", quantity=0, unit_price=10.0)


class TestOrder:
    """Tests for Order model."""

    def test_defaults(self):
        """A new order is pending and unpaid."""
        order = Order(id=1, order_number="ORD-1", customer_id=1, total_amount=10.0)

        assert order.status == OrderStatus.PENDING
        assert order.payment_status == "pending"  # enum serialized to string
        assert order.transaction_reference is None
        assert order.items == []

    def test_is_paid_requires_paid_at(self):
        """Payment status alone is not enough; paid_at must be set."""
        order = Order(
            id=1,
            order_number="ORD-1",
            customer_id=1,
            total_amount=10.0,
            payment_status=PaymentStatus.PAID,
        )
        assert order.is_paid() is False

        paid = order.model_copy(update={"paid_at": datetime(2026, 1, 1)})
        assert paid.is_paid() is True

    def test_items_count(self):
        order = Order(
            id=1,
            order_number="ORD-1",
            customer_id=1,
            total_amount=20.0,
            items=[
                OrderItem(product_name="A", quantity=1, unit_price=10.0),
                OrderItem(product_name="B", quantity=2, unit_price=5.0),
            ],
        )

        assert order.items_count() == 2

    def test_created_at_defaults_to_naive_utc(self):
        """Default timestamps compare cleanly with the stored naive ones."""
        before = datetime.now(timezone.utc).replace(tzinfo=None)
        order = Order(id=1, order_number="ORD-1", customer_id=1, total_amount=1.0)
        after = utc_now()

        assert order.created_at.tzinfo is None
        assert before <= order.created_at <= after

    def test_id_must_be_positive(self):
        with pytest.raises(ValidationError):
            Order(id=0, order_number="ORD-0", customer_id=1, total_amount=1.0)


class TestCurrency:
    """Tests for Currency model."""

    def test_code_must_be_three_letters(self):
        with pytest.raises(ValidationError):
            Currency(id=1, code="PESO")
