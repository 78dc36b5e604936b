from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import SimpleTestCase

from accounts.permissions import Capability, authorize, capability_permission, is_staff_user, require
from core.errors import AuthorizationDenied


def user(role, **extra):
    return get_user_model()(username=f"u_{role}", role=role, **extra)


class CapabilityTests(SimpleTestCase):
    def test_admins_hold_every_capability(self):
        for role in ("super_admin", "admin"):
            for cap in Capability:
                self.assertTrue(authorize(user(role), cap).allowed, (role, cap))

    def test_only_admins_verify_payments_and_approve_settlements(self):
        for role in ("employee", "agent", "customer"):
            self.assertFalse(authorize(user(role), Capability.VERIFY_PAYMENTS))
            self.assertFalse(authorize(user(role), Capability.APPROVE_SETTLEMENTS))

    def test_customer_capabilities(self):
        customer = user("customer")
        self.assertTrue(authorize(customer, Capability.RESPOND_TO_ESTIMATES))
        self.assertTrue(authorize(customer, Capability.SUBMIT_PAYMENTS))
        self.assertFalse(authorize(customer, Capability.MANAGE_ESTIMATES))
        self.assertFalse(authorize(customer, Capability.MANAGE_INVOICES))

    def test_denial_carries_reason(self):
        result = authorize(user("agent"), Capability.CONVERT_ESTIMATES)
        self.assertFalse(result.allowed)
        self.assertEqual(result.capability, Capability.CONVERT_ESTIMATES)
        self.assertIn("convert_estimates", result.reason)

    def test_anonymous_and_inactive_users_are_denied(self):
        self.assertFalse(authorize(AnonymousUser(), Capability.SUBMIT_PAYMENTS))
        self.assertFalse(authorize(None, Capability.SUBMIT_PAYMENTS))
        self.assertFalse(authorize(user("admin", is_active=False), Capability.AWARD_BADGES))

    def test_require_raises(self):
        with self.assertRaises(AuthorizationDenied):
            require(user("employee"), Capability.VERIFY_PAYMENTS)
        self.assertTrue(require(user("employee"), Capability.MANAGE_ESTIMATES).allowed)

    def test_permission_class_per_capability(self):
        perm_cls = capability_permission(Capability.MANAGE_SETTLEMENTS)

        class Req:
            pass

        req = Req()
        req.user = user("agent")
        self.assertTrue(perm_cls().has_permission(req, None))
        req.user = user("customer")
        self.assertFalse(perm_cls().has_permission(req, None))

    def test_staff_roles(self):
        self.assertTrue(is_staff_user(user("employee")))
        self.assertFalse(is_staff_user(user("agent")))
