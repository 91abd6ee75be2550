"""RBAC helpers: permission codes granted to each role."""

from __future__ import annotations

from typing import Optional, Set

from .principal import Principal


# =============================================================================
# ROLE-PERMISSION MAPPING
# =============================================================================
# ADMIN:       everything
# MANAGER:     sales pipeline, approves quotations
# EXEC:        sales pipeline
# ACCOUNTANT:  quotations (read/write), invoices and payments
# ENGINEER:    support tickets
# CLIENT:      dashboard only

_SALES = {
    "lead.read",
    "lead.write",
    "lead.convert",
    "client.read",
    "client.write",
    "quotation.read",
    "quotation.write",
}

_BILLING = {
    "invoice.read",
    "invoice.generate",
    "invoice.payment",
}

_SUPPORT = {
    "ticket.read",
    "ticket.write",
}

ROLE_PERMISSIONS = {
    "admin": _SALES | _BILLING | _SUPPORT | {"quotation.approve", "dashboard.read"},
    "manager": _SALES | {"quotation.approve", "dashboard.read"},
    "exec": _SALES | {"dashboard.read"},
    "accountant": {"quotation.read", "quotation.write", "dashboard.read"} | _BILLING,
    "engineer": _SUPPORT | {"dashboard.read"},
    "client": {"dashboard.read"},
}


def get_user_permissions(principal: Optional[Principal]) -> Set[str]:
    """
    Return the set of permission codes for the given principal's role.

    Example codes:
        - lead.read / lead.write / lead.convert
        - quotation.approve
        - invoice.generate / invoice.payment
    """
    if principal is None or principal.role is None:
        return set()
    return set(ROLE_PERMISSIONS.get(principal.role, ()))
