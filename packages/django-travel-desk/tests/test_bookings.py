"""Tests for ticket/invoice creation requests and submission payloads."""
import pytest
from decimal import Decimal

from django.core.exceptions import ValidationError

from django_travel_desk.bookings import (
    InvoiceCreationRequest,
    ReceiptCreationRequest,
    TicketCreationRequest,
    TicketSource,
    build_invoice_payload,
    build_receipt_payload,
    build_ticket_payload,
    resize_line_items,
)
from django_travel_desk.calculator import (
    InvoiceLine,
    LineItem,
    price_invoice,
    price_ticket,
)


def make_request(**overrides):
    """Build a complete, valid ticket request."""
    defaults = dict(
        customer_id="c-1",
        source=TicketSource.VENDOR,
        vendor_id="v-1",
        route="DXB-LHR",
        airlines="Emirates",
        flight_number="EK001",
        pnr="ABC123",
        travel_date="2026-11-01",
        line_items=[
            LineItem("500", "2026-11-01", "DXB-LHR", "Aisha Khan", "176-1234567890"),
            LineItem("500", "2026-11-01", "DXB-LHR", "Omar Khan", "176-1234567891"),
        ],
        addition="100",
    )
    defaults.update(overrides)
    return TicketCreationRequest(**defaults)


class TestResizeLineItems:
    """Test suite for the line-item lifecycle."""

    def test_grow_copies_template_without_passenger(self):
        items = [LineItem("500", "2026-11-01", "DXB-LHR", "Aisha Khan", "176-1")]
        resized = resize_line_items(items, 3)
        assert len(resized) == 3
        assert resized[0].passenger_name == "Aisha Khan"
        assert resized[1].unit_price == Decimal("500")
        assert resized[1].sector == "DXB-LHR"
        assert resized[1].passenger_name == ""
        assert resized[1].ticket_number is None

    def test_shrink_drops_trailing_rows(self):
        items = [LineItem("1", passenger_name=name) for name in "ABC"]
        resized = resize_line_items(items, 1)
        assert [item.passenger_name for item in resized] == ["A"]

    def test_zero_empties(self):
        assert resize_line_items([LineItem("1")], 0) == []

    def test_garbage_quantity_keeps_rows(self):
        items = [LineItem("1"), LineItem("2")]
        assert resize_line_items(items, "lots") == items

    def test_grow_from_empty_uses_explicit_template(self):
        resized = resize_line_items([], 2, template=LineItem("750", sector="DXB-BOM"))
        assert [item.unit_price for item in resized] == [Decimal("750"), Decimal("750")]

    def test_does_not_mutate_input(self):
        items = [LineItem("1")]
        resize_line_items(items, 4)
        assert len(items) == 1


class TestTicketSource:
    """Test suite for the ticket source discriminant."""

    def test_price_field_routing(self):
        assert TicketSource.DIRECT.price_field == "airlinePrice"
        assert TicketSource.VENDOR.price_field == "vendorPrice"
        assert TicketSource.AGENT.price_field == "vendorPrice"

    def test_string_source_is_coerced(self):
        request = make_request(source="agent")
        assert request.source is TicketSource.AGENT

    def test_unknown_source_is_rejected(self):
        with pytest.raises(ValueError):
            make_request(source="charter")


class TestTicketCreationRequestClean:
    """Test suite for ticket request validation."""

    def test_valid_request_passes(self):
        make_request().clean()

    def test_direct_ticket_needs_no_vendor(self):
        make_request(source=TicketSource.DIRECT, vendor_id=None).clean()

    def test_vendor_ticket_requires_vendor(self):
        with pytest.raises(ValidationError) as exc_info:
            make_request(vendor_id=None).clean()
        assert exc_info.value.message_dict["vendor_id"] == ["Vendor is required"]

    def test_round_trip_requires_return_date(self):
        with pytest.raises(ValidationError) as exc_info:
            make_request(trip_type="round_trip").clean()
        assert "return_date" in exc_info.value.message_dict

    def test_missing_fields_reported_together(self):
        with pytest.raises(ValidationError) as exc_info:
            make_request(customer_id=None, route="  ", airlines="", travel_date="").clean()
        errors = exc_info.value.message_dict
        assert errors["customer_id"] == ["Customer is required"]
        assert errors["route"] == ["Route is required"]
        assert errors["airlines"] == ["Airlines is required"]
        assert errors["travel_date"] == ["Travel date is required"]

    def test_lead_passenger_name_required(self):
        with pytest.raises(ValidationError) as exc_info:
            make_request(line_items=[LineItem("500")]).clean()
        assert exc_info.value.message_dict["passenger_name"] == ["Passenger name is required"]

    def test_negative_addition_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            make_request(addition="-5").clean()
        assert exc_info.value.message_dict["addition"] == ["Amount must be positive"]

    def test_long_pnr_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            make_request(pnr="ABCDEFGHIJK").clean()
        assert "pnr" in exc_info.value.message_dict

    def test_vendor_balance_needs_vendor(self):
        with pytest.raises(ValidationError) as exc_info:
            make_request(
                source=TicketSource.DIRECT,
                vendor_id=None,
                vendor_balance_source="credit",
            ).clean()
        assert "vendor_balance_source" in exc_info.value.message_dict


class TestTicketRequestPassengers:
    """Test suite for passenger-derived properties."""

    def test_passenger_count_defaults_to_line_items(self):
        assert make_request().effective_passenger_count == 2

    def test_explicit_passenger_count_wins(self):
        assert make_request(passenger_count="3").effective_passenger_count == 3

    def test_no_line_items_means_one_passenger(self):
        assert make_request(line_items=[]).effective_passenger_count == 1

    def test_names_and_ticket_numbers(self):
        request = make_request()
        assert request.lead_passenger == "Aisha Khan"
        assert request.passenger_names == ["Aisha Khan", "Omar Khan"]
        assert request.ticket_numbers == ["176-1234567890", "176-1234567891"]


class TestBuildTicketPayload:
    """Test suite for the ticket submission payload."""

    def price(self, request, **kwargs):
        return price_ticket(
            request.line_items,
            request.addition,
            request.effective_passenger_count,
            **kwargs,
        )

    def test_vendor_ticket_routes_to_vendor_price(self):
        request = make_request()
        payload = build_ticket_payload(request, self.price(request), issued_by="bc-1")
        assert payload["faceValue"] == "1100"
        assert payload["passengerCount"] == 2
        assert payload["vendorPrice"] == "550"
        assert payload["airlinePrice"] == "0"
        assert payload["issuedBy"] == "bc-1"

    def test_direct_ticket_routes_to_airline_price(self):
        request = make_request(source=TicketSource.DIRECT, vendor_id=None)
        payload = build_ticket_payload(request, self.price(request))
        assert payload["airlinePrice"] == "550"
        assert payload["vendorPrice"] == "0"
        assert payload["vendorId"] == ""

    def test_agent_ticket_routes_to_vendor_price(self):
        request = make_request(source=TicketSource.AGENT)
        payload = build_ticket_payload(request, self.price(request))
        assert payload["vendorPrice"] == "550"
        assert payload["source"] == "agent"

    def test_deposit_fields(self):
        request = make_request(deduct_from_deposit=True)
        pricing = self.price(request, deposit_enabled=True, available_deposit="300")
        payload = build_ticket_payload(request, pricing)
        assert payload["deductFromDeposit"] is True
        assert payload["depositDeducted"] == "300"

    def test_passenger_fields(self):
        request = make_request()
        payload = build_ticket_payload(request, self.price(request))
        assert payload["passengerName"] == "Aisha Khan"
        assert payload["passengerNames"] == ["Aisha Khan", "Omar Khan"]
        assert payload["additionalCost"] == "100"


class TestInvoiceCreationRequest:
    """Test suite for invoice request validation and payload."""

    def make(self, **overrides):
        defaults = dict(
            customer_id="c-1",
            vendor_id="v-1",
            lines=[InvoiceLine("DXB-LHR", 2, "500"), InvoiceLine("Visa", 1, "200")],
            discount_percent="10",
        )
        defaults.update(overrides)
        return InvoiceCreationRequest(**defaults)

    def test_valid_request_passes(self):
        self.make().clean()

    def test_requires_items(self):
        with pytest.raises(ValidationError) as exc_info:
            self.make(lines=[]).clean()
        assert exc_info.value.message_dict["lines"] == ["At least one item is required"]

    def test_rejects_zero_quantity(self):
        with pytest.raises(ValidationError) as exc_info:
            self.make(lines=[InvoiceLine("Fare", 0, "100")]).clean()
        assert exc_info.value.message_dict["lines"] == ["Item 1: Quantity must be at least 1"]

    def test_rejects_discount_out_of_range(self):
        with pytest.raises(ValidationError) as exc_info:
            self.make(discount_percent="120").clean()
        assert "discount_percent" in exc_info.value.message_dict

    def test_agent_credit_only_for_agents(self):
        with pytest.raises(ValidationError) as exc_info:
            self.make(use_agent_credit=True).clean()
        assert "use_agent_credit" in exc_info.value.message_dict

    def test_payload(self):
        request = self.make(use_customer_deposit=True)
        pricing = price_invoice(
            request.lines, request.discount_percent, True, Decimal("300")
        )
        payload = build_invoice_payload(request, pricing, issued_by="bc-1")
        assert payload["subtotal"] == "1200"
        assert payload["discountAmount"] == "120"
        assert payload["depositUsed"] == "300"
        assert payload["total"] == "780"
        assert payload["items"][0] == {
            "description": "DXB-LHR",
            "quantity": 2,
            "unitPrice": "500",
        }

    def test_form_toggles_are_coerced(self):
        request = self.make(use_customer_deposit="false", use_agent_credit="off")
        assert request.use_customer_deposit is False
        assert request.use_agent_credit is False
        request.clean()


class TestTicketRequestToggles:
    """Test suite for deposit toggle coercion on ticket requests."""

    def test_string_false_does_not_deduct(self):
        request = make_request(deduct_from_deposit="false")
        assert request.deduct_from_deposit is False

    def test_string_on_deducts(self):
        request = make_request(deduct_from_deposit="on")
        assert request.deduct_from_deposit is True
        pricing = price_ticket(
            request.line_items, request.addition, request.effective_passenger_count,
            request.deduct_from_deposit, "300",
        )
        assert build_ticket_payload(request, pricing)["deductFromDeposit"] is True


class TestReceiptCreationRequest:
    """Test suite for cash receipt validation and payload."""

    def make(self, **overrides):
        defaults = dict(
            party_type="customer",
            party_id="c-1",
            source_type="flight",
            pnr="XK4P2Q",
            amount="1100",
        )
        defaults.update(overrides)
        return ReceiptCreationRequest(**defaults)

    def test_valid_request_passes(self):
        self.make().clean()

    def test_vendor_party_passes(self):
        self.make(party_type="vendor", payment_method="bank_transfer").clean()

    def test_requires_party(self):
        with pytest.raises(ValidationError) as exc_info:
            self.make(party_id="").clean()
        assert exc_info.value.message_dict["party_id"] == ["Party is required"]

    @pytest.mark.parametrize("amount", ["0", "0.001", "-5", "", None, "abc", "1e1000000"])
    def test_amount_must_be_positive(self, amount):
        with pytest.raises(ValidationError) as exc_info:
            self.make(amount=amount).clean()
        assert exc_info.value.message_dict["amount"] == ["Amount must be positive"]

    def test_smallest_amount_accepted(self):
        self.make(amount="0.01").clean()

    def test_rejects_unknown_choices(self):
        with pytest.raises(ValidationError) as exc_info:
            self.make(party_type="airline", source_type="hotel", payment_method="crypto").clean()
        errors = exc_info.value.message_dict
        assert "party_type" in errors
        assert "source_type" in errors
        assert "payment_method" in errors

    def test_flight_payload_drops_service_name(self):
        payload = build_receipt_payload(self.make(service_name="Visa"), issued_by="bc-1")
        assert payload["pnr"] == "XK4P2Q"
        assert payload["serviceName"] == ""
        assert payload["amount"] == "1100"
        assert payload["issuedBy"] == "bc-1"

    def test_other_payload_drops_pnr(self):
        payload = build_receipt_payload(self.make(source_type="other", service_name="Visa"))
        assert payload["pnr"] == ""
        assert payload["serviceName"] == "Visa"
