from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, override_settings

from ..services.amounts import (LineItem, TaxConfig, compute_amounts,
                                display_round_off, is_interstate,
                                round_rupees)


class ComputeAmountsScenarioTests(SimpleTestCase):

    def test_intrastate_splits_tax_into_equal_halves(self):
        tax = TaxConfig.for_states(18, "Maharashtra", "Maharashtra")
        result = compute_amounts([{"quantity": 2, "unit_price": 500}], 0, tax)

        self.assertEqual(result.subtotal, Decimal("1000"))
        self.assertEqual(result.taxable_amount, Decimal("1000"))
        self.assertEqual(result.cgst, Decimal("90"))
        self.assertEqual(result.sgst, Decimal("90"))
        self.assertEqual(result.igst, Decimal("0"))
        self.assertEqual(result.total, Decimal("1180"))
        self.assertEqual(result.rounded_total, Decimal("1180"))
        self.assertEqual(result.round_off, Decimal("0"))

    def test_interstate_with_discount_and_round_off(self):
        tax = TaxConfig.for_states(5, "Gujarat", "Maharashtra")
        result = compute_amounts(
            [{"quantity": "3", "unit_price": "333.33"}], "10", tax)

        self.assertEqual(result.subtotal, Decimal("999.99"))
        self.assertEqual(result.discount_amount, Decimal("99.999"))
        self.assertEqual(result.taxable_amount, Decimal("899.991"))
        self.assertEqual(result.igst, Decimal("44.9996"))
        self.assertEqual(result.cgst, Decimal("0"))
        self.assertEqual(result.sgst, Decimal("0"))
        self.assertEqual(result.total.quantize(Decimal("0.01")),
                         Decimal("944.99"))
        self.assertEqual(result.rounded_total, Decimal("945"))
        # stored signed, shown as a magnitude
        self.assertEqual(result.round_off, Decimal("0.0094"))
        self.assertEqual(result.round_off_display, Decimal("0.01"))

    def test_rounding_down_gives_negative_round_off(self):
        result = compute_amounts([{"quantity": 1, "unit_price": "100.40"}])
        self.assertEqual(result.rounded_total, Decimal("100"))
        self.assertEqual(result.round_off, Decimal("-0.40"))
        self.assertEqual(display_round_off(result.round_off),
                         Decimal("0.40"))

    def test_empty_items_give_all_zero(self):
        result = compute_amounts([], None, TaxConfig(gst_rate=18))
        amounts = result.as_dict()
        self.assertEqual(amounts.pop("gst_rate"), Decimal("18"))
        for name, value in amounts.items():
            self.assertEqual(value, Decimal("0"), name)

    def test_unparsable_quantity_and_price_count_as_zero(self):
        result = compute_amounts([
            {"quantity": "abc", "unit_price": "10"},
            {"quantity": "2", "unit_price": None},
            {"quantity": "NaN", "unit_price": "Infinity"},
            {"quantity": "1", "unit_price": "5"},
        ])
        self.assertEqual(result.subtotal, Decimal("5"))

    def test_price_alias_is_accepted(self):
        item = LineItem.from_dict({"name": " Bolt ", "quantity": 3,
                                   "price": "2.5"})
        self.assertEqual(item.name, "Bolt")
        self.assertEqual(item.amount, Decimal("7.5"))
        self.assertEqual(item.as_dict()["amount"], "7.5000")

    def test_discount_out_of_range_is_rejected(self):
        for bad in ("-1", "100.01", 250):
            with self.assertRaises(ValidationError) as ctx:
                compute_amounts([{"quantity": 1, "unit_price": 10}], bad)
            self.assertIn("discount", ctx.exception.message_dict)

    def test_full_discount_leaves_nothing_taxable(self):
        tax = TaxConfig(gst_rate=18)
        result = compute_amounts([{"quantity": 1, "unit_price": 10}], 100, tax)
        self.assertEqual(result.taxable_amount, Decimal("0"))
        self.assertEqual(result.tax_total, Decimal("0"))

    def test_gst_rate_outside_the_slabs_is_rejected(self):
        for bad in (101, 7, "-5"):
            with self.assertRaises(ValidationError) as ctx:
                TaxConfig(gst_rate=bad)
            self.assertIn("gst_rate", ctx.exception.message_dict)

    @override_settings(BILLING={"ALLOWED_GST_RATES": (0, 5, 7)})
    def test_slabs_come_from_settings(self):
        self.assertEqual(TaxConfig(gst_rate=7).gst_rate, Decimal("7"))
        with self.assertRaises(ValidationError):
            TaxConfig(gst_rate=18)

    def test_tiny_taxable_amount_still_carries_tax(self):
        items = [{"quantity": "1", "unit_price": "0.0001"}]
        intra = compute_amounts(items, 0, TaxConfig(gst_rate=5))
        self.assertEqual(intra.taxable_amount, Decimal("0.0001"))
        self.assertEqual(intra.cgst, Decimal("0.0001"))
        self.assertEqual(intra.sgst, Decimal("0.0001"))
        self.assertEqual(intra.igst, Decimal("0"))

        inter = compute_amounts(
            items, 0, TaxConfig(gst_rate=5, interstate=True))
        self.assertEqual(inter.igst, Decimal("0.0001"))
        self.assertEqual(inter.cgst + inter.sgst, Decimal("0"))


class InterstateTests(SimpleTestCase):

    def test_comparison_ignores_case_and_spacing(self):
        self.assertFalse(is_interstate(" maharashtra ", "Maharashtra"))
        self.assertFalse(is_interstate("Tamil  Nadu", "tamil nadu"))
        self.assertTrue(is_interstate("Gujarat", "Maharashtra"))

    def test_blank_state_counts_as_intrastate(self):
        self.assertFalse(is_interstate("", "Maharashtra"))
        self.assertFalse(is_interstate("Gujarat", None))


# ---------- Properties over a spread of inputs ----------

ITEM_SETS = [
    [{"quantity": "1", "unit_price": "0.01"}],
    [{"quantity": "3", "unit_price": "333.33"}],
    [{"quantity": "7.5", "unit_price": "19.99"},
     {"quantity": "12", "unit_price": "4.05"}],
    [{"quantity": "10000", "unit_price": "999999.99"}],
    [{"quantity": "0.333", "unit_price": "1.11"}] * 9,
    [{"quantity": "1", "unit_price": "0.0001"}],
]


@pytest.mark.parametrize("items", ITEM_SETS)
@pytest.mark.parametrize("discount", ["0", "2.5", "33.33", "100"])
@pytest.mark.parametrize("rate", [0, 5, 12, 18, 28])
@pytest.mark.parametrize("interstate", [True, False])
def test_breakdown_invariants(items, discount, rate, interstate):
    tax = TaxConfig(gst_rate=rate, interstate=interstate)
    r = compute_amounts(items, discount, tax)

    # round-off ties the rounded total back to the unrounded parts
    assert r.rounded_total - r.round_off == (
        r.taxable_amount + r.cgst + r.sgst + r.igst)
    assert r.total == r.taxable_amount + r.tax_total
    assert round_rupees(r.rounded_total) == r.rounded_total
    assert abs(r.round_off) <= Decimal("0.5")

    assert Decimal("0") <= r.discount_amount <= r.subtotal

    # exactly one tax type when anything is taxed
    if rate and r.taxable_amount > 0:
        assert (r.igst > 0) != (r.cgst > 0 and r.sgst > 0)
        assert r.cgst == r.sgst
        assert r.tax_total > 0
    if interstate:
        assert r.cgst == r.sgst == 0
    else:
        assert r.igst == 0


@pytest.mark.parametrize("value", [
    "0", "0.5", "1.4999", "2.5", "-0.5", "944.9906", "123456789.5",
])
def test_rounding_is_idempotent(value):
    once = round_rupees(Decimal(value))
    assert round_rupees(once) == once
