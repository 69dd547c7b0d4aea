"""
Tests for confirmation context assembly.

The context is the snapshot both channels render from: the order, its
related rows, and a payment snapshot derived once per dispatch.
"""

import re
import pytest
from pydantic import ValidationError

from confirmations.context import (
    OrderConfirmationContext,
    build_confirmation_context,
    generate_authorization_code,
    generate_reference,
)
from confirmations.errors import OrderNotFoundError


class TestBuildConfirmationContext:
    """Tests for build_confirmation_context."""

    def test_full_order(self, full_context: OrderConfirmationContext):
        """Order #7 keeps its gateway reference and paid_at."""
        assert full_context.order_id == 7
        assert full_context.customer.email == "ana.torres@example.com"
        assert full_context.linked_account.domain == "torresconsultores.onmicrosoft.com"
        assert full_context.billing_profile.organization == "Torres Consultores SA de CV"

        payment = full_context.payment
        assert payment.reference == "TX-7781"
        assert payment.amount == 348.0
        assert payment.currency == "USD"
        assert payment.processed_at == "2026-02-01T10:15:00"
        assert re.fullmatch(r"AUTH-\d{6}", payment.authorization_code)

    def test_missing_reference_is_generated(self, no_phone_context: OrderConfirmationContext):
        """Order #1042 has no transaction reference; one is generated from the clock."""
        payment = no_phone_context.payment

        assert payment.reference.startswith("generated-20260504123000000000-")
        assert payment.currency == "MXN"
        assert payment.processed_at == "2026-03-10T15:20:00"

    def test_missing_currency_uses_default(self, data_store, no_currency_order_id, settings, clock):
        context = build_confirmation_context(
            data_store, no_currency_order_id, settings=settings, clock=clock
        )

        assert context.currency is None
        assert context.payment.currency == "MXN"

    def test_unpaid_order_uses_current_time(self, data_store, pending_order_id, settings, clock):
        """Dispatch is allowed for unpaid orders; processed_at falls back to now."""
        context = build_confirmation_context(
            data_store, pending_order_id, settings=settings, clock=clock
        )

        assert context.payment.processed_at == "2026-05-04T12:30:00"
        assert context.payment.reference.startswith("generated-")

    def test_default_clock_is_naive_utc(self, data_store, pending_order_id, settings):
        context = build_confirmation_context(data_store, pending_order_id, settings=settings)

        assert "+" not in context.payment.processed_at

    def test_unknown_order(self, data_store, settings, clock):
        with pytest.raises(OrderNotFoundError) as exc_info:
            build_confirmation_context(data_store, 999999, settings=settings, clock=clock)

        assert exc_info.value.order_id == 999999
        assert str(exc_info.value) == "Order not found: 999999"

    def test_non_positive_id(self, data_store, settings):
        with pytest.raises(ValueError):
            build_confirmation_context(data_store, 0, settings=settings)

    def test_missing_customer_row(self, data_store, orphan_order_id, settings, clock):
        """A dangling customer reference is a data error, not a not-found."""
        with pytest.raises(ValueError, match="missing customer"):
            build_confirmation_context(data_store, orphan_order_id, settings=settings, clock=clock)

    def test_generated_references_differ_between_dispatches(
        self, data_store, no_phone_order_id, settings, clock
    ):
        """Two dispatches at the same instant still get distinct references."""
        first = build_confirmation_context(data_store, no_phone_order_id, settings=settings, clock=clock)
        second = build_confirmation_context(data_store, no_phone_order_id, settings=settings, clock=clock)

        assert first.payment.reference != second.payment.reference

    def test_custom_reference_prefix(self, data_store, no_phone_order_id, settings, clock):
        settings = settings.model_copy(update={"generated_reference_prefix": "test-"})

        context = build_confirmation_context(
            data_store, no_phone_order_id, settings=settings, clock=clock
        )

        assert context.payment.reference.startswith("test-2026")


class TestOrderConfirmationContext:
    """Tests for the context model itself."""

    def test_is_frozen(self, full_context: OrderConfirmationContext):
        with pytest.raises(ValidationError):
            full_context.customer = None

    def test_payment_is_frozen(self, full_context: OrderConfirmationContext):
        with pytest.raises(ValidationError):
            full_context.payment.reference = "changed"

    def test_order_summary(self, no_phone_context: OrderConfirmationContext):
        assert no_phone_context.order_summary() == {
            "id": 1042,
            "order_number": "ORD-1042",
            "total_amount": 1160.0,
            "customer_email": "a@b.com",
            "customer_phone": None,
        }

    def test_customer_phone(self, full_context, no_phone_context):
        assert full_context.customer_phone == "55 1234 5678"
        assert no_phone_context.customer_phone is None


class TestGenerators:
    def test_generate_reference_format(self, fixed_now):
        reference = generate_reference("generated-", fixed_now)

        assert re.fullmatch(r"generated-20260504123000000000-[0-9a-f]{6}", reference)

    def test_generate_authorization_code(self):
        for _ in range(20):
            assert re.fullmatch(r"AUTH-[1-9]\d{5}", generate_authorization_code())
