"""
BizDesk CRM Package.

A small-business CRM and accounting backend for leads, clients,
quotations, invoices, payments and support tickets, with role-based
access control (RBAC).
"""

__version__ = "1.0.0"
__author__ = "BizDesk"

# Main entry points
from .auth import authenticate, encode_token
from .db import Database
from .principal import Principal

__all__ = [
    "authenticate",
    "encode_token",
    "Database",
    "Principal",
]
