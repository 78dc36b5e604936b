from io import StringIO

import pytest
from django.core.management import call_command

from accounts.models import CustomUser

pytestmark = pytest.mark.django_db


def test_create_test_users_is_rerunnable():
    out = StringIO()
    call_command("create_test_users", "--password", "s3cret-pass", stdout=out)
    assert "5 test user(s) created" in out.getvalue()

    admin = CustomUser.objects.get(username="super_admin_user")
    assert admin.is_superuser and admin.is_staff
    assert admin.check_password("s3cret-pass")
    assert not CustomUser.objects.get(username="agent_user").is_staff

    out = StringIO()
    call_command("create_test_users", stdout=out)
    assert "0 test user(s) created" in out.getvalue()
