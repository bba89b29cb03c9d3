from django.contrib.auth import get_user_model
from django.contrib.auth.models import Permission
from django.test import TestCase
from django.urls import reverse

from ..models import AuditLog, Bill, Challan, SequenceCounter
from ..services.documents import create_bill, create_challan
from ..tasks import reconcile_counters
from .helpers import TODAY, bill_data, challan_data, make_party, make_user


class ReconcileCountersTaskTests(TestCase):
    def test_raises_lagging_counters_for_every_owner(self):
        alice = make_user("alice")
        bob = make_user("bob")
        # rows written without going through the counter
        Bill.objects.create(created_by=alice, bill_no=12, date=TODAY)
        Challan.objects.create(created_by=bob, challan_no=4, date=TODAY)

        result = reconcile_counters()

        self.assertEqual(result[f"{alice.pk}:bill"], 12)
        self.assertEqual(result[f"{bob.pk}:challan"], 4)
        self.assertEqual(result[f"{bob.pk}:bill"], 0)
        self.assertEqual(
            SequenceCounter.objects.get(owner=alice,
                                        document_type="bill").last_number,
            12)

    def test_single_owner(self):
        alice = make_user("alice")
        make_user("bob")
        result = reconcile_counters(owner_id=alice.pk)
        self.assertEqual(set(result), {f"{alice.pk}:bill",
                                       f"{alice.pk}:challan"})


class DeleteAuditTests(TestCase):
    def setUp(self):
        self.user = make_user()
        self.party = make_party(self.user)

    def test_party_and_challan_deletes_are_logged(self):
        challan = create_challan(self.user, challan_data(self.party))
        challan.delete()
        self.party.delete()

        actions = set(AuditLog.objects.filter(action="delete")
                      .values_list("object_type", flat=True))
        self.assertEqual(actions, {"Challan", "Party"})

    def test_documents_outlive_their_party(self):
        bill = create_bill(self.user, bill_data(self.party))
        self.party.delete()
        bill.refresh_from_db()
        self.assertIsNone(bill.party_id)
        self.assertEqual(bill.party_details["company_name"], "Local Stores")

    def test_owner_deletion_cascades_without_audit_rows(self):
        create_bill(self.user, bill_data(self.party))
        self.user.delete()
        self.assertFalse(Bill.objects.exists())
        self.assertFalse(
            AuditLog.objects.filter(action="delete").exists())


class AdminTests(TestCase):
    def setUp(self):
        self.admin = get_user_model().objects.create_superuser(
            username="root", password="pw", email="root@example.com")
        self.user = make_user()
        self.party = make_party(self.user)
        self.client.force_login(self.admin)

    def run_action(self, model, action, objects):
        url = reverse(f"admin:billing_core_{model}_changelist")
        return self.client.post(url, {
            "action": action,
            "_selected_action": [o.pk for o in objects],
        }, follow=True)

    def test_cancel_action_uses_status_rules(self):
        bill = create_bill(self.user, bill_data(self.party))
        self.run_action("bill", "cancel_bills", [bill])
        bill.refresh_from_db()
        self.assertEqual(bill.status, "cancelled")

        response = self.run_action("bill", "cancel_bills", [bill])
        self.assertContains(response, "Cannot go from cancelled")

    def test_convert_action_is_idempotent(self):
        challan = create_challan(self.user, challan_data(self.party))
        self.run_action("challan", "convert_challans", [challan])
        response = self.run_action("challan", "convert_challans", [challan])

        self.assertEqual(Bill.objects.filter(source_challan=challan).count(),
                         1)
        self.assertContains(response, "already converted")
        self.assertEqual(Bill.objects.get().created_by, self.user)

    def test_changelists_render(self):
        create_bill(self.user, bill_data(self.party))
        for model in ("bill", "challan", "party", "auditlog",
                      "sequencecounter", "businessprofile"):
            url = reverse(f"admin:billing_core_{model}_changelist")
            self.assertEqual(self.client.get(url).status_code, 200, model)


class AdminOwnerScopingTests(TestCase):
    def test_staff_sees_only_own_rows(self):
        staff = make_user("staff")
        staff.is_staff = True
        staff.save()
        staff.user_permissions.add(
            Permission.objects.get(codename="view_bill"))

        create_bill(staff, bill_data(make_party(staff)))
        other = make_user("other")
        create_bill(other, bill_data(make_party(other)))

        self.client.force_login(staff)
        response = self.client.get(
            reverse("admin:billing_core_bill_changelist"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context["cl"].result_count, 1)
