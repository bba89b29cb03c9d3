from decimal import Decimal

from django import forms
from django.core.exceptions import ValidationError
from django.utils import timezone

from .conf import billing_setting
from .models import Bill, BusinessProfile, Party
from .models.bill import PAYMENT_METHODS
from .validators import (validate_bank_name, validate_broker_name,
                         validate_broker_phone, validate_challan_ref,
                         validate_cheque_no, validate_hsn,
                         validate_person_name, validate_upi_id)

# -----------------------------
# Input validation at the edge.
# Nothing reaches the calculator
# before these forms accept it.
# ----------------------------


def percent_field(required=False):
    return forms.DecimalField(
        required=required,
        min_value=Decimal("0"),
        max_value=Decimal("100"),
        max_digits=5,
        decimal_places=2,
    )


class ProfileForm(forms.ModelForm):
    class Meta:
        model = BusinessProfile
        exclude = ("user",)  # always the logged-in user


class PartyForm(forms.ModelForm):
    class Meta:
        model = Party
        exclude = ("created_by",)  # set from the request owner

    def clean_gst_no(self):
        # GSTINs are printed upper-case
        return (self.cleaned_data.get("gst_no") or "").strip().upper()


class LineItemForm(forms.Form):
    name = forms.CharField(max_length=100, strip=True)
    hsn = forms.CharField(required=False, max_length=8,
                          validators=[validate_hsn])
    quantity = forms.DecimalField(
        max_digits=14, decimal_places=4, max_value=Decimal("10000"))
    unit_price = forms.DecimalField(
        max_digits=18, decimal_places=4, min_value=Decimal("0"),
        max_value=Decimal("1000000"))

    def clean_quantity(self):
        quantity = self.cleaned_data["quantity"]
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")
        return quantity


LineItemFormSet = forms.formset_factory(
    LineItemForm, extra=0, min_num=1, validate_min=True)


def items_formset(items):
    """Bind a list of item mappings (JSON body) to a LineItemFormSet."""
    items = items if isinstance(items, list) else []
    data = {
        "items-TOTAL_FORMS": str(len(items)),
        "items-INITIAL_FORMS": "0",
        "items-MIN_NUM_FORMS": "1",
        "items-MAX_NUM_FORMS": "1000",
    }
    for index, item in enumerate(items):
        item = item if isinstance(item, dict) else {}
        # older clients send "price"
        price = item.get("unit_price", item.get("price"))
        for key, value in (("name", item.get("name")),
                           ("hsn", item.get("hsn")),
                           ("quantity", item.get("quantity")),
                           ("unit_price", price)):
            data[f"items-{index}-{key}"] = "" if value is None else value
    return LineItemFormSet(data=data, prefix="items")


class DocumentForm(forms.Form):
    """Fields shared by bills and challans, plus the item list."""
    party = forms.ModelChoiceField(
        queryset=Party.objects.none(),
        error_messages={"invalid_choice": "Party not found"},
    )
    date = forms.DateField()
    discount = percent_field()
    notes = forms.CharField(required=False, max_length=500)

    def __init__(self, data=None, owner=None, **kwargs):
        super().__init__(data=data, **kwargs)
        # Only the owner's parties can be selected
        self.fields["party"].queryset = Party.objects.for_owner(owner)
        self.items_formset = items_formset((data or {}).get("items"))
        self.item_errors = []

    def clean_date(self):
        date = self.cleaned_data["date"]
        if date > timezone.localdate():
            raise ValidationError("Date cannot be in the future")
        return date

    def clean_discount(self):
        # blank discount means no discount
        return self.cleaned_data.get("discount") or Decimal("0")

    def clean(self):
        cleaned = super().clean()
        formset = self.items_formset
        if not formset.is_valid():
            self.item_errors = [dict(e) for e in formset.errors]
            messages = list(formset.non_form_errors())
            for index, errors in enumerate(formset.errors, start=1):
                for field, field_errors in errors.items():
                    messages.append(
                        f"Item {index} {field}: {' '.join(field_errors)}")
            self.add_error("items", messages or "Invalid items")
        else:
            # fully blank extra rows come back empty
            cleaned["items"] = [
                f.cleaned_data for f in formset.forms if f.cleaned_data]
        return cleaned

    def add_error(self, field, error):
        # "items" is not a declared field, record it as such anyway
        if field == "items":
            self._errors = self._errors if self._errors is not None else {}
            self._errors.setdefault("items", self.error_class()).extend(
                error if isinstance(error, list) else [error])
            self.cleaned_data.pop("items", None)
            return
        super().add_error(field, error)


class BillForm(DocumentForm):
    # Blank: take the next number from the sequence
    bill_no = forms.IntegerField(required=False, min_value=1)
    # Party's own challan reference
    challan_no = forms.CharField(
        required=False, max_length=20, validators=[validate_challan_ref])
    gst_rate = forms.TypedChoiceField(coerce=Decimal)
    payment_method = forms.ChoiceField(
        choices=PAYMENT_METHODS, required=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        rates = billing_setting("ALLOWED_GST_RATES")
        self.fields["gst_rate"].choices = [(str(r), f"{r}%") for r in rates]
        self.fields["gst_rate"].error_messages["invalid_choice"] = (
            "Invalid GST rate")


class ChallanForm(DocumentForm):
    # Blank: take the next number from the sequence
    challan_no = forms.IntegerField(required=False, min_value=1)


class PaymentForm(forms.Form):
    method = forms.ChoiceField(choices=PAYMENT_METHODS)
    date = forms.DateField(required=False)

    cheque_no = forms.CharField(required=False,
                                validators=[validate_cheque_no])
    bank = forms.CharField(required=False, validators=[validate_bank_name])
    upi_id = forms.CharField(required=False, validators=[validate_upi_id])
    upi_name = forms.CharField(required=False,
                               validators=[validate_person_name])
    rtgs_neft = forms.ChoiceField(
        required=False, choices=[("", ""), ("rtgs", "RTGS"),
                                 ("neft", "NEFT")])

    amount = forms.DecimalField(max_digits=18, decimal_places=4)
    taxable_amount = forms.DecimalField(max_digits=18, decimal_places=4)
    tds = percent_field()
    other_claim_percentage = percent_field()
    other_claim_amount = forms.DecimalField(
        required=False, min_value=Decimal("0"), max_digits=18,
        decimal_places=4)

    broker_name = forms.CharField(required=False,
                                  validators=[validate_broker_name])
    broker_phone = forms.CharField(required=False,
                                   validators=[validate_broker_phone])
    brokerage_percentage = percent_field()

    # Which method needs which extra fields
    REQUIRED_BY_METHOD = {
        "cheque": ("cheque_no", "bank", "tds"),
        "upi": ("upi_id", "upi_name", "tds"),
        "netbanking": ("rtgs_neft", "bank", "tds"),
        "cash": (),
    }

    def __init__(self, *args, bulk=False, **kwargs):
        super().__init__(*args, **kwargs)
        # Bulk settlement takes amounts from each bill
        if bulk:
            self.fields["amount"].required = False
            self.fields["taxable_amount"].required = False

    def _positive(self, name):
        value = self.cleaned_data.get(name)
        if value is not None and value <= 0:
            raise ValidationError("Must be positive")
        return value

    def clean_amount(self):
        return self._positive("amount")

    def clean_taxable_amount(self):
        return self._positive("taxable_amount")

    def clean(self):
        cleaned = super().clean()
        method = cleaned.get("method")
        for name in self.REQUIRED_BY_METHOD.get(method, ()):
            if name in self.errors:
                continue
            if cleaned.get(name) in (None, ""):
                self.add_error(name, "This field is required.")
        if method == "cash":
            # No TDS on cash payments
            cleaned["tds"] = Decimal("0")
        return cleaned


class BulkPaymentForm(PaymentForm):
    bills = forms.ModelMultipleChoiceField(queryset=Bill.objects.none())

    def __init__(self, *args, owner=None, **kwargs):
        kwargs["bulk"] = True
        super().__init__(*args, **kwargs)
        # Only unpaid bills of the owner can be settled
        self.fields["bills"].queryset = (
            Bill.objects.for_owner(owner).pending())
