import datetime

from django.contrib.auth import get_user_model

from billing_core.models import BusinessProfile, Party

ADDRESS = {
    "plot_house_no": "12",
    "line1": "Station Road",
    "area": "Market Yard",
    "city": "Pune",
    "state": "Maharashtra",
    "pincode": "411001",
}

TODAY = datetime.date.today()


def make_user(username="alice", password="pw"):
    return get_user_model().objects.create_user(
        username=username, password=password)


def make_profile(user, state="Maharashtra", **extra):
    fields = dict(
        ADDRESS,
        state=state,
        full_name="Asha Traders",
        mobile_no="9876543210",
        company_name="Asha Traders",
        gst_owner_name="Asha",
        gst_no="27ABCDE1234F1Z5",
    )
    fields.update(extra)
    return BusinessProfile.objects.create(user=user, **fields)


def make_party(user, company_name="Local Stores", state="Maharashtra",
               **extra):
    fields = dict(
        ADDRESS,
        state=state,
        company_name=company_name,
        mobile_no="9000000001",
    )
    fields.update(extra)
    return Party.objects.create(created_by=user, **fields)


def bill_data(party, items=None, **extra):
    """Cleaned-form shaped input for create_bill / update_bill."""
    data = {
        "party": party,
        "items": items or [{"name": "Widget", "quantity": "2",
                            "unit_price": "500"}],
        "discount": "0",
        "gst_rate": 18,
        "date": TODAY,
    }
    data.update(extra)
    return data


def challan_data(party, items=None, **extra):
    data = {
        "party": party,
        "items": items or [{"name": "Rice", "quantity": "4",
                            "unit_price": "500"}],
        "discount": "0",
        "date": TODAY,
    }
    data.update(extra)
    return data
