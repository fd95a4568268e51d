"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from decimal import Decimal
from uuid import UUID

import pytest

from ticketing.domain import (
    EventId,
    Money,
    Order,
    OrderId,
    PaymentStatus,
    Quantity,
    TicketCode,
)
from ticketing.domain.value_objects import MAX_TICKETS_PER_ORDER, TICKET_CODE_PATTERN
from tests.fakes import make_attendee, make_event


class TestMoney:
    """Tests for Money value object."""

    def test_money_accepts_zero(self):
        """Money can be created with zero."""
        assert Money(Decimal("0")).amount == Decimal("0")

    def test_money_rejects_negative_amount(self):
        """Money raises ValueError for negative amount."""
        with pytest.raises(ValueError):
            Money(Decimal("-0.01"))

    def test_money_str_format(self):
        """Money string representation is formatted to 2 decimal places."""
        assert str(Money(Decimal("50000"))) == "50000.00"

    def test_times_multiplies_by_quantity(self):
        """Money.times scales the amount by a quantity."""
        assert Money(Decimal("50000.00")).times(Quantity(2)) == Money(Decimal("100000.00"))


class TestQuantity:
    def test_quantity_rejects_zero(self):
        """An order needs at least one ticket."""
        with pytest.raises(ValueError):
            Quantity(0)

    def test_quantity_accepts_one(self):
        assert Quantity(1).value == 1

    def test_quantity_accepts_order_limit(self):
        assert Quantity(MAX_TICKETS_PER_ORDER).value == 10

    def test_quantity_rejects_above_order_limit(self):
        with pytest.raises(ValueError, match="at most 10"):
            Quantity(MAX_TICKETS_PER_ORDER + 1)


class TestIdentifiers:
    """Tests for UUID-backed identifiers."""

    def test_from_string_valid_uuid(self):
        """EventId.from_string parses valid UUID."""
        raw = "6f1c2b5e-8d7a-4c3b-9e2f-1a0b9c8d7e6f"
        assert EventId.from_string(raw).value == UUID(raw)

    def test_from_string_invalid_uuid(self):
        """OrderId.from_string raises ValueError for invalid UUID."""
        with pytest.raises(ValueError):
            OrderId.from_string("not-a-uuid")

    def test_generated_order_ids_differ(self):
        assert OrderId.generate() != OrderId.generate()


class TestTicketCode:
    """Tests for ticket code generation and validation."""

    def test_generated_code_matches_format(self):
        """Generated codes are TKT-<base36 time>-<8 chars>, upper case."""
        code = TicketCode.generate()
        assert TICKET_CODE_PATTERN.match(code.value)
        assert code.value == code.value.upper()

    def test_rejects_malformed_code(self):
        with pytest.raises(ValueError):
            TicketCode("tkt-abc")

    def test_artifact_filenames_derive_from_code(self):
        """QR and PDF filenames are addressable from the code alone."""
        code = TicketCode("TKT-LZ1K2M3N-ABCD1234")
        assert code.qr_filename == "qr-TKT-LZ1K2M3N-ABCD1234.png"
        assert code.pdf_filename == "ticket-TKT-LZ1K2M3N-ABCD1234.pdf"

    def test_ten_thousand_codes_are_unique(self):
        """No collisions across 10,000 codes generated back to back."""
        codes = {TicketCode.generate().value for _ in range(10_000)}
        assert len(codes) == 10_000


class TestPaymentStatus:
    @pytest.mark.parametrize("value", ["PAID", "EXPIRED", "PENDING"])
    def test_provider_vocabulary_maps_one_to_one(self, value):
        assert PaymentStatus.from_provider(value) is PaymentStatus(value)

    @pytest.mark.parametrize("value", ["SETTLED", "paid", "", None])
    def test_unknown_provider_status_maps_to_none(self, value):
        assert PaymentStatus.from_provider(value) is None


class TestOrderPlacement:
    def test_total_is_quantity_times_current_price(self):
        """A placed order snapshots the price and fixes the total."""
        event = make_event(price=Money(Decimal("50000.00")))
        order = Order.place(make_attendee(), event, Quantity(2))

        assert order.unit_price == Money(Decimal("50000.00"))
        assert order.total == Money(Decimal("100000.00"))
        assert order.payment_status is PaymentStatus.PENDING
        assert order.payment_ref is None

    def test_attendee_display_name_falls_back_to_email(self):
        assert make_attendee(name="").display_name == "buyer@example.com"
        assert make_attendee().display_name == "Budi Santoso"
