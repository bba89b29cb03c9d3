import datetime

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from billing_core.models import BusinessProfile, Party
from billing_core.services import (convert_challan, create_bill,
                                   create_challan)

DEMO_ADDRESS = {
    "plot_house_no": "12",
    "line1": "Station Road",
    "area": "Market Yard",
    "city": "Pune",
    "state": "Maharashtra",
    "pincode": "411001",
}


class Command(BaseCommand):
    help = ("Seeds a demo user with a business profile, two parties, "
            "a bill, and a challan converted to a bill.")

    # Define command-line arguments
    def add_arguments(self, parser):
        parser.add_argument(
            "--username",
            type=str,
            default="demo",
            help="Login of the demo user (default: demo)",
        )
        parser.add_argument(
            "--password",
            type=str,
            default="demo",
            help="Password set when the user is created (default: demo)",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        username = options["username"]
        self.stdout.write(self.style.NOTICE(
            f"Seeding demo data for {username}..."))

        user, created = get_user_model().objects.get_or_create(
            username=username)
        if created:
            user.set_password(options["password"])
            user.save()

        BusinessProfile.objects.get_or_create(
            user=user,
            defaults=dict(
                full_name="Demo Owner",
                mobile_no="9876543210",
                company_name="Demo Traders",
                gst_owner_name="Demo Owner",
                gst_no="27ABCDE1234F1Z5",
                bank_name="State Bank",
                account_name="Demo Traders",
                account_number="001122334455",
                ifsc_code="SBIN0001234",
                **DEMO_ADDRESS,
            ),
        )

        local, _ = Party.objects.get_or_create(
            created_by=user,
            company_name="Local Stores",
            defaults=dict(mobile_no="9000000001", gst_no="27PQRSX6789K1Z2",
                          **DEMO_ADDRESS),
        )
        outside = dict(DEMO_ADDRESS, city="Surat", state="Gujarat",
                       pincode="395003")
        remote, _ = Party.objects.get_or_create(
            created_by=user,
            company_name="Gujarat Mills",
            defaults=dict(mobile_no="9000000002", gst_no="24LMNOP1234Q1Z9",
                          **outside),
        )

        today = datetime.date.today()
        items = [
            {"name": "Cotton bale", "hsn": "5201", "quantity": "10",
             "unit_price": "1250.50"},
            {"name": "Jute bag", "hsn": "6305", "quantity": "40",
             "unit_price": "35"},
        ]
        bill = create_bill(user, {
            "party": local, "items": items, "discount": "5",
            "gst_rate": 18, "date": today,
        })
        self.stdout.write(f"  bill {bill.bill_no}: {bill.rounded_total}")

        challan = create_challan(user, {
            "party": remote, "items": items[:1], "date": today,
        })
        converted, _ = convert_challan(challan, user)
        self.stdout.write(
            f"  challan {challan.challan_no} -> bill {converted.bill_no}: "
            f"{converted.rounded_total}")

        self.stdout.write(self.style.SUCCESS("Demo data seeded successfully!"))
