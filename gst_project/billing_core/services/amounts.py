"""
Amount calculator for bills and challans.

Turns line items, a discount percentage and a tax configuration into
the amounts stored on a document. Pure arithmetic over Decimal: no
database access, no request state.

    subtotal        = sum(quantity x unit_price)
    discount_amount = subtotal x discount% / 100
    taxable_amount  = subtotal - discount_amount
    interstate      : igst = taxable x rate / 100
    intrastate      : cgst = sgst = taxable x rate / 100 / 2
    total           = taxable + cgst + sgst + igst
    rounded_total   = total rounded half-up to whole rupees
    round_off       = rounded_total - total   (signed)

Every money value is quantized to 4 places as it is produced, so the
stored parts always add up to the stored total.
"""
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.core.exceptions import ValidationError

from ..conf import billing_setting
from .parsing import ZERO, coerce_decimal

AMOUNT_PLACES = Decimal("0.0001")
HUNDRED = Decimal("100")


def quantize_amount(value):
    return value.quantize(AMOUNT_PLACES, rounding=ROUND_HALF_UP)


def round_rupees(value):
    """Round half-up to a whole currency unit."""
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def display_round_off(value):
    """Round-off as printed: magnitude only, 2 places."""
    return abs(coerce_decimal(value)).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP)


def _normalize_state(state):
    return " ".join(str(state or "").split()).casefold()


def is_interstate(party_state, issuer_state):
    """
    True when the party is billed across a state boundary.
    A blank state on either side cannot establish a crossing,
    so it counts as intrastate.
    """
    party = _normalize_state(party_state)
    issuer = _normalize_state(issuer_state)
    if not party or not issuer:
        return False
    return party != issuer


@dataclass(frozen=True)
class LineItem:
    name: str = ""
    hsn: str = ""
    quantity: Decimal = ZERO
    unit_price: Decimal = ZERO

    @classmethod
    def from_dict(cls, data):
        # "price" is accepted for documents stored by older clients
        price = data.get("unit_price", data.get("price"))
        return cls(
            name=str(data.get("name") or "").strip(),
            hsn=str(data.get("hsn") or "").strip(),
            quantity=coerce_decimal(data.get("quantity")),
            unit_price=coerce_decimal(price),
        )

    @property
    def amount(self):
        return self.quantity * self.unit_price

    def as_dict(self):
        # Strings keep the JSON column exact
        return {
            "name": self.name,
            "hsn": self.hsn,
            "quantity": str(self.quantity),
            "unit_price": str(self.unit_price),
            "amount": str(quantize_amount(self.amount)),
        }


def allowed_gst_rates():
    return {coerce_decimal(r) for r in billing_setting("ALLOWED_GST_RATES")}


def to_line_items(items):
    """Accept LineItem objects or raw mappings, in any mix."""
    result = []
    for item in items or []:
        if isinstance(item, LineItem):
            result.append(item)
        else:
            result.append(LineItem.from_dict(item))
    return result


@dataclass(frozen=True)
class TaxConfig:
    gst_rate: Decimal = ZERO
    interstate: bool = False

    def __post_init__(self):
        rate = coerce_decimal(self.gst_rate)
        allowed = allowed_gst_rates()
        # zero stays valid: challans carry no tax
        if rate and rate not in allowed:
            choices = ", ".join(str(r) for r in sorted(allowed))
            raise ValidationError(
                {"gst_rate": f"GST rate must be one of {choices}"})
        # frozen dataclass, so bypass __setattr__
        object.__setattr__(self, "gst_rate", rate)

    @classmethod
    def for_states(cls, gst_rate, party_state, issuer_state):
        return cls(
            gst_rate=gst_rate,
            interstate=is_interstate(party_state, issuer_state),
        )

    @classmethod
    def untaxed(cls):
        return cls(gst_rate=ZERO, interstate=False)


@dataclass(frozen=True)
class AmountBreakdown:
    subtotal: Decimal
    discount: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    gst_rate: Decimal
    cgst: Decimal
    sgst: Decimal
    igst: Decimal
    total: Decimal
    rounded_total: Decimal
    round_off: Decimal

    @property
    def tax_total(self):
        return self.cgst + self.sgst + self.igst

    @property
    def round_off_display(self):
        return display_round_off(self.round_off)

    def as_dict(self):
        return asdict(self)


def _tax_part(base, rate, shares=1):
    """
    One tax component at the stored precision. A positive base at a
    positive rate never comes out as zero tax: it is floored at the
    smallest stored unit.
    """
    tax = quantize_amount(base * rate / HUNDRED / shares)
    if base > 0 and rate > 0:
        return max(tax, AMOUNT_PLACES)
    return tax


def validate_discount(discount_percent):
    """Blank means no discount; anything outside [0, 100] is rejected."""
    discount = coerce_decimal(discount_percent)
    if discount < 0 or discount > HUNDRED:
        raise ValidationError(
            {"discount": "Discount must be a number between 0 and 100"})
    return discount


def compute_amounts(items, discount_percent=None, tax_config=None):
    """Compute the full AmountBreakdown for a list of line items."""
    tax_config = tax_config or TaxConfig.untaxed()
    discount = validate_discount(discount_percent)
    line_items = to_line_items(items)

    subtotal = quantize_amount(
        sum((item.amount for item in line_items), ZERO))
    discount_amount = quantize_amount(subtotal * discount / HUNDRED)
    taxable_amount = subtotal - discount_amount

    rate = tax_config.gst_rate
    cgst = sgst = igst = quantize_amount(ZERO)
    if rate and taxable_amount:
        if tax_config.interstate:
            igst = _tax_part(taxable_amount, rate)
        else:
            # Central and state halves are always equal
            cgst = sgst = _tax_part(taxable_amount, rate, shares=2)

    total = taxable_amount + cgst + sgst + igst
    rounded_total = round_rupees(total)
    round_off = rounded_total - total

    return AmountBreakdown(
        subtotal=subtotal,
        discount=discount,
        discount_amount=discount_amount,
        taxable_amount=taxable_amount,
        gst_rate=rate,
        cgst=cgst,
        sgst=sgst,
        igst=igst,
        total=total,
        rounded_total=rounded_total,
        round_off=round_off,
    )
