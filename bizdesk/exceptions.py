"""
Custom exceptions for the BizDesk application.

This module centralizes all custom exceptions used throughout the application
to provide consistent error handling and user-friendly messages. The route
layer maps each family to an HTTP status code (see ``http_status_for``).
"""

from __future__ import annotations

from typing import Any, Optional


# =============================================================================
# BASE EXCEPTIONS
# =============================================================================

class CRMException(Exception):
    """Base exception for all BizDesk-specific errors."""

    status_code = 500

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or "CRM_ERROR"
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# AUTHENTICATION EXCEPTIONS
# =============================================================================

class AuthenticationError(CRMException):
    """Base class for authentication-related errors."""

    status_code = 401

    def __init__(self, message: str):
        super().__init__(message, code="AUTH_ERROR")


class InvalidCredentialsError(AuthenticationError):
    """Raised when login credentials are invalid."""

    def __init__(self):
        super().__init__("Invalid credentials")


class TokenExpiredError(AuthenticationError):
    """Raised when the JWT token has expired."""

    def __init__(self):
        super().__init__("Your session has expired. Please log in again.")


class TokenInvalidError(AuthenticationError):
    """Raised when the JWT token is malformed or invalid."""

    def __init__(self):
        super().__init__("Invalid token. Please log in again.")


class NotAuthenticatedError(AuthenticationError):
    """Raised when an action requires authentication but no token was sent."""

    def __init__(self):
        super().__init__("Authentication required")


# =============================================================================
# AUTHORIZATION EXCEPTIONS
# =============================================================================

class AuthorizationError(CRMException):
    """Base class for authorization-related errors."""

    status_code = 403

    def __init__(self, message: str):
        super().__init__(message, code="AUTHZ_ERROR")


class PermissionDeniedError(AuthorizationError):
    """Raised when user lacks a required permission."""

    PERMISSION_MESSAGES = {
        "lead.read": "You are not allowed to view leads.",
        "lead.write": "You are not allowed to create or modify leads.",
        "lead.convert": "You are not allowed to convert leads.",
        "client.read": "You are not allowed to view clients.",
        "client.write": "You are not allowed to create or modify clients.",
        "quotation.read": "You are not allowed to view quotations.",
        "quotation.write": "You are not allowed to create or modify quotations.",
        "quotation.approve": "Only administrators and managers can approve or reject quotations.",
        "invoice.read": "You are not allowed to view invoices.",
        "invoice.generate": "Only administrators and accountants can generate invoices.",
        "invoice.payment": "Only administrators and accountants can update invoices.",
        "ticket.read": "You are not allowed to view tickets.",
        "ticket.write": "You are not allowed to create or modify tickets.",
        "dashboard.read": "You are not allowed to view the dashboard.",
    }

    def __init__(self, permission: str, action: Optional[str] = None):
        self.permission = permission
        self.action = action

        if permission in self.PERMISSION_MESSAGES:
            message = self.PERMISSION_MESSAGES[permission]
        elif action:
            message = f"Permission denied for {action}."
        else:
            message = f"Missing required permission ({permission})."

        super().__init__(message)


# =============================================================================
# VALIDATION EXCEPTIONS
# =============================================================================

class ValidationError(CRMException):
    """Base class for validation errors."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        code = f"VALIDATION_ERROR:{field}" if field else "VALIDATION_ERROR"
        super().__init__(message, code=code)


class MissingFieldError(ValidationError):
    """Raised when a required field is missing."""

    def __init__(self, field: str, entity: str = ""):
        self.entity = entity
        message = f"Field '{field}' is required"
        if entity:
            message += f" for {entity}"
        super().__init__(message, field=field)


class InvalidStatusError(ValidationError):
    """Raised when a status value is invalid."""

    def __init__(self, status: Any, valid_values: list[str]):
        self.status = status
        self.valid_values = valid_values
        super().__init__(
            f"Invalid status: {status}. Accepted values: {', '.join(valid_values)}",
            field="status",
        )


# =============================================================================
# ENTITY EXCEPTIONS
# =============================================================================

class EntityNotFoundError(CRMException):
    """Raised when an entity is not found in storage."""

    status_code = 404

    def __init__(self, entity_type: str, identifier: Any):
        self.entity_type = entity_type
        self.identifier = identifier
        super().__init__(
            f"{entity_type} not found",
            code=f"NOT_FOUND:{entity_type.upper()}",
        )


class UserNotFoundError(EntityNotFoundError):
    def __init__(self, identifier: Any):
        super().__init__("User", identifier)


class LeadNotFoundError(EntityNotFoundError):
    def __init__(self, lead_id: int):
        super().__init__("Lead", lead_id)


class ClientNotFoundError(EntityNotFoundError):
    def __init__(self, client_id: int):
        super().__init__("Client", client_id)


class QuotationNotFoundError(EntityNotFoundError):
    def __init__(self, quotation_id: int):
        super().__init__("Quotation", quotation_id)


class InvoiceNotFoundError(EntityNotFoundError):
    def __init__(self, invoice_id: int):
        super().__init__("Invoice", invoice_id)


class TicketNotFoundError(EntityNotFoundError):
    def __init__(self, ticket_id: int):
        super().__init__("Ticket", ticket_id)


# =============================================================================
# BUSINESS RULE EXCEPTIONS
# =============================================================================

class BusinessRuleError(CRMException):
    """Base class for business rule violations."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message, code="BUSINESS_RULE_ERROR")


class QuotationNotApprovedError(BusinessRuleError):
    """Raised when an invoice is requested for a quotation that is not approved."""

    def __init__(self, quotation_id: int):
        self.quotation_id = quotation_id
        super().__init__("Quotation must be approved first")


class InvoiceAlreadyGeneratedError(BusinessRuleError):
    """Raised when a quotation has already been turned into an invoice."""

    def __init__(self, quotation_id: int, invoice_number: str):
        self.quotation_id = quotation_id
        self.invoice_number = invoice_number
        super().__init__(
            f"An invoice ({invoice_number}) has already been generated for this quotation"
        )


class LeadAlreadyConvertedError(BusinessRuleError):
    """Raised when a lead that is already a client is converted again."""

    def __init__(self, lead_id: int, client_id: Optional[int]):
        self.lead_id = lead_id
        self.client_id = client_id
        super().__init__(f"Lead has already been converted to client {client_id}")


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def http_status_for(exc: Exception) -> int:
    """
    Return the HTTP status code matching an exception.

    Args:
        exc: The exception to map.

    Returns:
        The status code declared by the exception family, 500 otherwise.
    """
    if isinstance(exc, CRMException):
        return exc.status_code
    return 500


def format_exception_for_cli(exc: Exception) -> str:
    """
    Format an exception for display in the CLI.

    Args:
        exc: The exception to format.

    Returns:
        A user-friendly error message string.
    """
    if isinstance(exc, CRMException):
        return f"[{exc.code}] {exc.message}"
    elif isinstance(exc, ValueError):
        return f"[ERROR] {str(exc)}"
    else:
        return f"[UNEXPECTED ERROR] {type(exc).__name__}: {str(exc)}"
