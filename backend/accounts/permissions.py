from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet

from rest_framework import permissions

from core.errors import AuthorizationDenied


class Capability(str, Enum):
    MANAGE_ESTIMATES = "manage_estimates"
    CONVERT_ESTIMATES = "convert_estimates"
    RESPOND_TO_ESTIMATES = "respond_to_estimates"
    MANAGE_INVOICES = "manage_invoices"
    SUBMIT_PAYMENTS = "submit_payments"
    VERIFY_PAYMENTS = "verify_payments"
    MANAGE_SETTLEMENTS = "manage_settlements"
    APPROVE_SETTLEMENTS = "approve_settlements"
    MANAGE_EXCHANGE_RATES = "manage_exchange_rates"
    AWARD_BADGES = "award_badges"


_ALL = frozenset(Capability)

ROLE_CAPABILITIES: Dict[str, FrozenSet[Capability]] = {
    "super_admin": _ALL,
    "admin": _ALL,
    "employee": frozenset({
        Capability.MANAGE_ESTIMATES,
        Capability.CONVERT_ESTIMATES,
        Capability.MANAGE_INVOICES,
        Capability.SUBMIT_PAYMENTS,
        Capability.MANAGE_SETTLEMENTS,
    }),
    "agent": frozenset({
        Capability.MANAGE_INVOICES,
        Capability.SUBMIT_PAYMENTS,
        Capability.MANAGE_SETTLEMENTS,
    }),
    "customer": frozenset({
        Capability.RESPOND_TO_ESTIMATES,
        Capability.SUBMIT_PAYMENTS,
    }),
}


@dataclass(frozen=True)
class AuthorizationResult:
    allowed: bool
    capability: Capability
    reason: str = ""

    def __bool__(self) -> bool:
        return self.allowed


def authorize(user, capability: Capability) -> AuthorizationResult:
    """Decide whether ``user`` holds ``capability``.

    Anonymous and inactive users never do. Everyone else is judged by the
    capability set of their role.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        return AuthorizationResult(False, capability, "authentication required")
    if not getattr(user, "is_active", True):
        return AuthorizationResult(False, capability, "user is inactive")
    role = getattr(user, "role", "")
    if capability in ROLE_CAPABILITIES.get(role, frozenset()):
        return AuthorizationResult(True, capability)
    return AuthorizationResult(False, capability, f"role '{role or 'none'}' lacks {capability.value}")


def require(user, capability: Capability) -> AuthorizationResult:
    result = authorize(user, capability)
    if not result.allowed:
        raise AuthorizationDenied(result.reason)
    return result


def is_staff_user(user) -> bool:
    return getattr(user, "role", "") in ("super_admin", "admin", "employee")


class HasCapability(permissions.BasePermission):
    """
    Grants access when the requesting user's role holds ``capability``.
    Use ``capability_permission()`` to build a concrete class per view.
    """
    capability: Capability = None

    def has_permission(self, request, view):
        return authorize(request.user, self.capability).allowed


def capability_permission(capability: Capability):
    return type(
        f"Has_{capability.value}",
        (HasCapability,),
        {"capability": capability},
    )


class IsStaffRole(permissions.BasePermission):
    """
    Only super admins, admins and employees.
    """
    def has_permission(self, request, view):
        return request.user.is_authenticated and is_staff_user(request.user)
