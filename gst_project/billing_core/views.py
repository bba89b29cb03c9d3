import json
import logging
from functools import wraps

from django.core.exceptions import (ObjectDoesNotExist, PermissionDenied,
                                    ValidationError)
from django.db import DatabaseError
from django.http import Http404, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.utils.dateparse import parse_date

from .exceptions import SequenceAllocationError
from .forms import (BillForm, BulkPaymentForm, ChallanForm, PartyForm,
                    PaymentForm, ProfileForm)
from .models import Bill, BusinessProfile, Challan, Party
from .services import (cancel_bill, convert_challan, create_bill,
                       create_challan, delete_bill, delete_challan,
                       delete_payment, filter_bills, next_number,
                       parse_non_negative_number, party_bill_summary,
                       payment_summary, record_payment, record_payments,
                       to_words, update_bill, update_challan)
from .services.pdf import render_bill_pdf, render_challan_pdf

logger = logging.getLogger(__name__)


# ----------------------------
# Request / response plumbing
# ----------------------------
def _error_payload(exc):
    if hasattr(exc, "error_dict"):
        return {"ok": False, "errors": exc.message_dict}
    return {"ok": False, "errors": {"__all__": exc.messages}}


def api_view(methods):
    """
    JSON endpoint: checks login and method, maps known failures to
    status codes so they never surface as a 500.
    """
    def decorator(view):
        @wraps(view)
        def wrapper(request, *args, **kwargs):
            if request.method not in methods:
                return JsonResponse(
                    {"ok": False, "error": "Method not allowed"}, status=405)
            if getattr(request, "owner", None) is None:
                return JsonResponse(
                    {"ok": False, "error": "Authentication required"},
                    status=401)
            try:
                return view(request, *args, **kwargs)
            except ValidationError as e:
                return JsonResponse(_error_payload(e), status=400)
            except (Http404, ObjectDoesNotExist):
                return JsonResponse(
                    {"ok": False, "error": "Not found"}, status=404)
            except PermissionDenied:
                return JsonResponse(
                    {"ok": False, "error": "Forbidden"}, status=403)
            except (SequenceAllocationError, DatabaseError) as e:
                # backend trouble, the client may retry
                logger.exception("Backend failure in %s", view.__name__)
                return JsonResponse(
                    {"ok": False, "error": str(e)}, status=503)
        return wrapper
    return decorator


def read_json(request):
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except ValueError:
        raise ValidationError("Request body is not valid JSON")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def form_data(form):
    # Form errors use the same shape as ValidationError
    if not form.is_valid():
        raise ValidationError(form.errors.as_data())
    return form.cleaned_data


def _date_param(request, name):
    raw = request.GET.get(name)
    if not raw:
        return None
    try:
        value = parse_date(raw)
    except ValueError:
        value = None
    if value is None:
        raise ValidationError({name: "Use YYYY-MM-DD"})
    return value


def _id_param(request, name):
    raw = request.GET.get(name)
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value < 1:
        raise ValidationError({name: "Must be a record id"})
    return value


# ----------------------------
# Serializers
# ----------------------------
def profile_to_dict(profile):
    data = {
        "full_name": profile.full_name,
        "mobile_no": profile.mobile_no,
        "company_name": profile.company_name,
        "gst_owner_name": profile.gst_owner_name,
        "gst_no": profile.gst_no,
        "formatted_address": profile.formatted_address(),
    }
    data.update(profile.address_dict())
    data.update(profile.bank_details())
    return data


def party_to_dict(party):
    data = party.snapshot()
    data["formatted_address"] = party.formatted_address()
    return data


def _document_dict(doc):
    return {
        "id": doc.pk,
        "date": doc.date,
        "party": doc.party_id,
        "party_details": doc.party_details,
        "items": doc.items,
        "subtotal": doc.subtotal,
        "discount": doc.discount,
        "discount_amount": doc.discount_amount,
        "total": doc.total,
        "rounded_total": doc.rounded_total,
        "round_off": doc.round_off,
        "notes": doc.notes,
        "amount_in_words": to_words(doc.rounded_total),
    }


def bill_to_dict(bill):
    data = _document_dict(bill)
    data.update({
        "bill_no": bill.bill_no,
        "challan_no": bill.challan_no,
        "source_challan": bill.source_challan_id,
        "taxable_amount": bill.taxable_amount,
        "gst_rate": bill.gst_rate,
        "cgst": bill.cgst,
        "sgst": bill.sgst,
        "igst": bill.igst,
        "status": bill.status,
        "payment_method": bill.payment_method,
        "payment_details": bill.payment_details,
    })
    return data


def challan_to_dict(challan):
    data = _document_dict(challan)
    data["challan_no"] = challan.challan_no
    return data


def _pdf_response(content, filename):
    response = HttpResponse(content, content_type="application/pdf")
    response["Content-Disposition"] = f'inline; filename="{filename}"'
    return response


def _profile_of(owner):
    return BusinessProfile.objects.filter(user=owner).first()


# ----------------------------
# Profile
# ----------------------------
@api_view(["GET", "PUT", "POST"])
def profile_view(request):
    profile = _profile_of(request.owner)
    if request.method == "GET":
        if profile is None:
            raise Http404("No profile yet")
        return JsonResponse(profile_to_dict(profile))

    form = ProfileForm(read_json(request), instance=profile)
    form_data(form)
    profile = form.save(commit=False)
    profile.user = request.owner
    profile.save()
    return JsonResponse(profile_to_dict(profile))


# ----------------------------
# Parties
# ----------------------------
@api_view(["GET", "POST"])
def party_list(request):
    if request.method == "GET":
        parties = Party.objects.for_owner(request.owner).order_by(
            "company_name")
        return JsonResponse({"parties": [party_to_dict(p) for p in parties]})

    form = PartyForm(read_json(request))
    form_data(form)
    party = form.save(commit=False)
    party.created_by = request.owner
    party.save()
    return JsonResponse(party_to_dict(party), status=201)


@api_view(["GET", "PUT", "DELETE"])
def party_detail(request, pk):
    party = get_object_or_404(Party.objects.for_owner(request.owner), pk=pk)
    if request.method == "GET":
        return JsonResponse(party_to_dict(party))
    if request.method == "DELETE":
        party.delete()
        return JsonResponse({"ok": True})

    form = PartyForm(read_json(request), instance=party)
    form_data(form)
    party = form.save()
    return JsonResponse(party_to_dict(party))


@api_view(["GET"])
def party_bills(request, pk):
    party = get_object_or_404(Party.objects.for_owner(request.owner), pk=pk)
    bills = filter_bills(request.owner, party=party,
                         start=_date_param(request, "start"),
                         end=_date_param(request, "end"))
    return JsonResponse({
        "party": party_to_dict(party),
        "summary": party_bill_summary(request.owner, party),
        "payments": payment_summary(bills),
        "bills": [bill_to_dict(b) for b in bills],
    })


# ----------------------------
# Bills
# ----------------------------
@api_view(["GET", "POST"])
def bill_list(request):
    owner = request.owner
    if request.method == "GET":
        party = None
        party_id = _id_param(request, "party")
        if party_id is not None:
            party = get_object_or_404(
                Party.objects.for_owner(owner), pk=party_id)
        bills = filter_bills(owner, party=party,
                             start=_date_param(request, "start"),
                             end=_date_param(request, "end"),
                             status=request.GET.get("status"))
        return JsonResponse({"bills": [bill_to_dict(b) for b in bills]})

    data = form_data(BillForm(read_json(request), owner=owner))
    bill = create_bill(owner, data)
    return JsonResponse(bill_to_dict(bill), status=201)


@api_view(["GET"])
def bill_next_number(request):
    result = next_number(request.owner, "bill")
    return JsonResponse(result._asdict())


@api_view(["GET", "PUT", "DELETE"])
def bill_detail(request, pk):
    owner = request.owner
    bill = get_object_or_404(Bill.objects.for_owner(owner), pk=pk)
    if request.method == "GET":
        return JsonResponse(bill_to_dict(bill))
    if request.method == "DELETE":
        delete_bill(bill, owner)
        return JsonResponse({"ok": True})

    data = form_data(BillForm(read_json(request), owner=owner))
    bill = update_bill(bill, owner, data)
    return JsonResponse(bill_to_dict(bill))


@api_view(["POST"])
def bill_cancel(request, pk):
    bill = get_object_or_404(Bill.objects.for_owner(request.owner), pk=pk)
    bill = cancel_bill(bill, request.owner)
    return JsonResponse(bill_to_dict(bill))


@api_view(["POST", "PUT", "DELETE"])
def bill_payment(request, pk):
    owner = request.owner
    bill = get_object_or_404(Bill.objects.for_owner(owner), pk=pk)
    if request.method == "DELETE":
        bill = delete_payment(bill, owner)
        return JsonResponse(bill_to_dict(bill))

    data = form_data(PaymentForm(read_json(request)))
    bill = record_payment(bill, owner, data)
    return JsonResponse(bill_to_dict(bill))


@api_view(["POST"])
def bulk_payments(request):
    owner = request.owner
    data = form_data(BulkPaymentForm(read_json(request), owner=owner))
    bills = record_payments(list(data.pop("bills")), owner, data)
    return JsonResponse({
        "bills": [bill_to_dict(b) for b in bills],
        "summary": payment_summary(bills),
    })


@api_view(["GET"])
def bill_pdf(request, pk):
    bill = get_object_or_404(Bill.objects.for_owner(request.owner), pk=pk)
    content = render_bill_pdf(bill, _profile_of(request.owner))
    return _pdf_response(content, f"invoice-{bill.bill_no}.pdf")


# ----------------------------
# Challans
# ----------------------------
@api_view(["GET", "POST"])
def challan_list(request):
    owner = request.owner
    if request.method == "GET":
        challans = Challan.objects.for_owner(owner)
        party_id = _id_param(request, "party")
        if party_id is not None:
            challans = challans.filter(party_id=party_id)
        return JsonResponse(
            {"challans": [challan_to_dict(c) for c in challans]})

    data = form_data(ChallanForm(read_json(request), owner=owner))
    challan = create_challan(owner, data)
    return JsonResponse(challan_to_dict(challan), status=201)


@api_view(["GET"])
def challan_next_number(request):
    result = next_number(request.owner, "challan")
    return JsonResponse(result._asdict())


@api_view(["GET", "PUT", "DELETE"])
def challan_detail(request, pk):
    owner = request.owner
    challan = get_object_or_404(Challan.objects.for_owner(owner), pk=pk)
    if request.method == "GET":
        return JsonResponse(challan_to_dict(challan))
    if request.method == "DELETE":
        delete_challan(challan, owner)
        return JsonResponse({"ok": True})

    data = form_data(ChallanForm(read_json(request), owner=owner))
    challan = update_challan(challan, owner, data)
    return JsonResponse(challan_to_dict(challan))


@api_view(["POST"])
def challan_convert(request, pk):
    challan = get_object_or_404(
        Challan.objects.for_owner(request.owner), pk=pk)
    bill, created = convert_challan(challan, request.owner)
    # 200 when the challan had already been converted
    return JsonResponse({"created": created, "bill": bill_to_dict(bill)},
                        status=201 if created else 200)


@api_view(["GET"])
def challan_pdf(request, pk):
    challan = get_object_or_404(
        Challan.objects.for_owner(request.owner), pk=pk)
    content = render_challan_pdf(challan, _profile_of(request.owner))
    return _pdf_response(content, f"challan-{challan.challan_no}.pdf")


# ----------------------------
# Amount in words
# ----------------------------
@api_view(["GET"])
def words_view(request):
    amount = parse_non_negative_number(request.GET.get("amount"), "amount")
    return JsonResponse({"amount": amount, "words": to_words(amount)})
