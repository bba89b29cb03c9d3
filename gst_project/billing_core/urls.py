from django.urls import path

from . import views

app_name = "billing_core"

urlpatterns = [
    path("profile/", views.profile_view, name="profile"),

    path("parties/", views.party_list, name="party-list"),
    path("parties/<int:pk>/", views.party_detail, name="party-detail"),
    path("parties/<int:pk>/bills/", views.party_bills, name="party-bills"),

    path("bills/", views.bill_list, name="bill-list"),
    path("bills/next-number/", views.bill_next_number,
         name="bill-next-number"),
    path("bills/payments/", views.bulk_payments, name="bill-bulk-payments"),
    path("bills/<int:pk>/", views.bill_detail, name="bill-detail"),
    path("bills/<int:pk>/cancel/", views.bill_cancel, name="bill-cancel"),
    path("bills/<int:pk>/payment/", views.bill_payment, name="bill-payment"),
    path("bills/<int:pk>/pdf/", views.bill_pdf, name="bill-pdf"),

    path("challans/", views.challan_list, name="challan-list"),
    path("challans/next-number/", views.challan_next_number,
         name="challan-next-number"),
    path("challans/<int:pk>/", views.challan_detail, name="challan-detail"),
    path("challans/<int:pk>/convert/", views.challan_convert,
         name="challan-convert"),
    path("challans/<int:pk>/pdf/", views.challan_pdf, name="challan-pdf"),

    path("words/", views.words_view, name="words"),
]
