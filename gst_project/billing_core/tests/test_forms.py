import datetime
from decimal import Decimal

from django.test import TestCase

from ..forms import BillForm, ChallanForm, PartyForm, PaymentForm
from .helpers import ADDRESS, TODAY, make_party, make_user


def bill_payload(party, **extra):
    payload = {
        "party": party.pk,
        "date": TODAY.isoformat(),
        "gst_rate": "18",
        "discount": "5",
        "challan_no": "12-34",
        "items": [{"name": "Widget", "hsn": "8471", "quantity": "2",
                   "unit_price": "500"}],
    }
    payload.update(extra)
    return payload


class BillFormTests(TestCase):
    def setUp(self):
        self.user = make_user()
        self.party = make_party(self.user)

    def test_valid_payload(self):
        form = BillForm(bill_payload(self.party), owner=self.user)
        self.assertTrue(form.is_valid(), form.errors)
        data = form.cleaned_data
        self.assertEqual(data["gst_rate"], Decimal("18"))
        self.assertEqual(data["discount"], Decimal("5"))
        self.assertEqual(data["items"][0]["quantity"], Decimal("2"))
        self.assertIsNone(data["bill_no"])

    def test_blank_discount_is_zero(self):
        form = BillForm(bill_payload(self.party, discount=""),
                        owner=self.user)
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data["discount"], Decimal("0"))

    def test_price_alias_in_items(self):
        form = BillForm(bill_payload(self.party, items=[
            {"name": "Widget", "quantity": "1", "price": "9.5"}]),
            owner=self.user)
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data["items"][0]["unit_price"],
                         Decimal("9.5"))

    def test_field_errors_are_reported_inline(self):
        tomorrow = TODAY + datetime.timedelta(days=1)
        form = BillForm(bill_payload(
            self.party, gst_rate="7", discount="120",
            date=tomorrow.isoformat(), challan_no="AB/12",
            notes="x" * 501), owner=self.user)

        self.assertFalse(form.is_valid())
        for field in ("gst_rate", "discount", "date", "challan_no", "notes"):
            self.assertIn(field, form.errors)

    def test_discount_limited_to_two_places(self):
        form = BillForm(bill_payload(self.party, discount="2.555"),
                        owner=self.user)
        self.assertFalse(form.is_valid())
        self.assertIn("discount", form.errors)

    def test_item_rules(self):
        bad_items = [
            {"name": "", "quantity": "1", "unit_price": "1"},
            {"name": "Neg", "quantity": "-1", "unit_price": "1"},
            {"name": "Zero", "quantity": "0", "unit_price": "1"},
            {"name": "Huge", "quantity": "10001", "unit_price": "1"},
            {"name": "Price", "quantity": "1", "unit_price": "-0.01"},
            {"name": "Dear", "quantity": "1", "unit_price": "1000001"},
            {"name": "Hsn", "hsn": "12", "quantity": "1", "unit_price": "1"},
            {"name": "Text", "quantity": "two", "unit_price": "1"},
        ]
        for item in bad_items:
            form = BillForm(bill_payload(self.party, items=[item]),
                            owner=self.user)
            self.assertFalse(form.is_valid(), item)
            self.assertIn("items", form.errors, item)
            self.assertNotIn("items", form.cleaned_data)

    def test_at_least_one_item(self):
        form = BillForm(bill_payload(self.party, items=[]), owner=self.user)
        self.assertFalse(form.is_valid())
        self.assertIn("items", form.errors)

    def test_item_errors_name_the_row(self):
        form = BillForm(bill_payload(self.party, items=[
            {"name": "Fine", "quantity": "1", "unit_price": "1"},
            {"name": "Bad", "quantity": "0", "unit_price": "1"},
        ]), owner=self.user)
        self.assertFalse(form.is_valid())
        self.assertTrue(
            any(msg.startswith("Item 2 quantity")
                for msg in form.errors["items"]))
        self.assertEqual(form.item_errors[0], {})

    def test_other_owners_party_is_not_a_choice(self):
        stranger = make_party(make_user("bob"))
        form = BillForm(bill_payload(stranger), owner=self.user)
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors["party"], ["Party not found"])


class ChallanFormTests(TestCase):
    def test_optional_number_and_no_tax_fields(self):
        user = make_user()
        party = make_party(user)
        form = ChallanForm({
            "party": party.pk,
            "date": TODAY.isoformat(),
            "items": [{"name": "Rice", "quantity": "4", "unit_price": "500"}],
        }, owner=user)
        self.assertTrue(form.is_valid(), form.errors)
        self.assertIsNone(form.cleaned_data["challan_no"])
        self.assertNotIn("gst_rate", form.fields)


class PartyFormTests(TestCase):
    def test_gstin_is_upper_cased_and_checked(self):
        form = PartyForm(dict(ADDRESS, company_name="Acme",
                              mobile_no="9000000001",
                              gst_no="27abcde1234f1z5"))
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data["gst_no"], "27ABCDE1234F1Z5")

    def test_invalid_fields(self):
        form = PartyForm(dict(ADDRESS, company_name="", mobile_no="12345",
                              pincode="41100", gst_no="XYZ",
                              email="not-an-email", city=""))
        self.assertFalse(form.is_valid())
        for field in ("company_name", "mobile_no", "pincode", "gst_no",
                      "email", "city"):
            self.assertIn(field, form.errors)

    def test_landmark_is_optional(self):
        form = PartyForm(dict(ADDRESS, company_name="Acme",
                              mobile_no="9000000001"))
        self.assertTrue(form.is_valid(), form.errors)


class PaymentFormTests(TestCase):
    base = {"amount": "1180", "taxable_amount": "1000", "tds": "2"}

    def test_cheque_requires_number_and_bank(self):
        form = PaymentForm(dict(self.base, method="cheque"))
        self.assertFalse(form.is_valid())
        self.assertIn("cheque_no", form.errors)
        self.assertIn("bank", form.errors)

        form = PaymentForm(dict(self.base, method="cheque",
                                cheque_no="CHQ123", bank="State Bank"))
        self.assertTrue(form.is_valid(), form.errors)

    def test_cheque_number_format(self):
        form = PaymentForm(dict(self.base, method="cheque",
                                cheque_no="12-34", bank="State Bank"))
        self.assertFalse(form.is_valid())
        self.assertIn("cheque_no", form.errors)

    def test_upi_and_netbanking_requirements(self):
        form = PaymentForm(dict(self.base, method="upi"))
        self.assertFalse(form.is_valid())
        self.assertIn("upi_id", form.errors)
        self.assertIn("upi_name", form.errors)

        form = PaymentForm(dict(self.base, method="netbanking",
                                rtgs_neft="imps", bank="State Bank"))
        self.assertFalse(form.is_valid())
        self.assertIn("rtgs_neft", form.errors)

    def test_cash_forces_tds_to_zero(self):
        form = PaymentForm(dict(self.base, method="cash", tds=""))
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data["tds"], Decimal("0"))

    def test_tds_required_for_non_cash(self):
        form = PaymentForm({"amount": "1", "taxable_amount": "1",
                            "method": "upi", "upi_id": "ab@bank",
                            "upi_name": "Asha"})
        self.assertFalse(form.is_valid())
        self.assertIn("tds", form.errors)

    def test_amounts_and_percentages(self):
        form = PaymentForm({"method": "cash", "amount": "0",
                            "taxable_amount": "-5", "brokerage_percentage":
                            "101", "broker_phone": "12345678901",
                            "broker_name": "R2D2"})
        self.assertFalse(form.is_valid())
        for field in ("amount", "taxable_amount", "brokerage_percentage",
                      "broker_phone", "broker_name"):
            self.assertIn(field, form.errors)
