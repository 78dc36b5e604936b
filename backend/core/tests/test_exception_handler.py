from unittest import mock

import pytest
from django.db import DatabaseError
from django.test import SimpleTestCase
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIClient

from core.errors import (
    AuthorizationDenied,
    BackendFailure,
    InvalidTransition,
    NotFound,
    RateUnavailable,
    ValidationFailure,
)
from core.exception_handler import billing_exception_handler
from core.tests.factories import make_user


class BillingExceptionHandlerTests(SimpleTestCase):
    def test_service_errors_map_to_detail_and_status(self):
        cases = [
            (NotFound("Estimate 9 not found"), 404),
            (ValidationFailure("weight_kg must not be negative"), 400),
            (RateUnavailable("No exchange rate for USD->TZS"), 400),
            (InvalidTransition("Estimate EST-2024-0001 is already converted"), 409),
            (AuthorizationDenied("role 'agent' lacks verify_payments"), 403),
        ]
        for exc, expected in cases:
            resp = billing_exception_handler(exc, {"view": None})
            self.assertEqual(resp.status_code, expected)
            self.assertEqual(resp.data, {"detail": exc.detail})

    def test_default_detail_is_used_without_message(self):
        resp = billing_exception_handler(InvalidTransition(), {})
        self.assertEqual(resp.data["detail"], "Status change not allowed")

    def test_backend_failure_maps_to_503(self):
        resp = billing_exception_handler(BackendFailure(), {"view": None})
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(resp.data, {"detail": "Backend failure"})

    def test_database_errors_become_backend_failures(self):
        with self.assertLogs("core.exception_handler", level="ERROR"):
            resp = billing_exception_handler(DatabaseError("connection reset"), {"view": None})
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(resp.data, {"detail": "connection reset"})

    def test_drf_errors_fall_through(self):
        resp = billing_exception_handler(ValidationError({"weight_kg": ["required"]}), {"view": None})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("weight_kg", resp.data)

    def test_unknown_errors_are_not_handled(self):
        self.assertIsNone(billing_exception_handler(KeyError("boom"), {"view": None}))


@pytest.mark.django_db
def test_database_failure_in_a_view_is_json():
    client = APIClient()
    client.force_authenticate(make_user("staff1", role="employee"))
    with mock.patch("estimates.views.visible_estimates", side_effect=DatabaseError("connection reset")):
        resp = client.get("/api/estimates/")
    assert resp.status_code == 503
    assert resp.json() == {"detail": "connection reset"}
