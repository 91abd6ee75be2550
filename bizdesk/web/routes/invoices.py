from flask import Blueprint, g, jsonify

from ...schemas import InvoiceOut, InvoiceUpdate, PaymentIn, dump, dump_many, parse_payload
from ...services import (
    get_invoice,
    list_invoices,
    mark_invoice_as_sent,
    mark_overdue_invoices,
    record_payment,
    update_invoice,
)
from ..decorators import client_id_arg, json_body, require_permission
from ..session import get_session

invoices_bp = Blueprint("invoices", __name__)


@invoices_bp.get("/invoices")
@require_permission("invoice.read")
def list_invoices_view():
    client_id = client_id_arg()
    return jsonify(dump_many(InvoiceOut, list_invoices(get_session(), client_id=client_id)))


@invoices_bp.get("/invoices/<int:invoice_id>")
@require_permission("invoice.read")
def get_invoice_view(invoice_id: int):
    return jsonify(dump(InvoiceOut, get_invoice(get_session(), invoice_id)))


@invoices_bp.patch("/invoices/<int:invoice_id>")
@require_permission("invoice.payment")
def update_invoice_view(invoice_id: int):
    data = parse_payload(InvoiceUpdate, json_body())
    return jsonify(dump(InvoiceOut, update_invoice(get_session(), invoice_id, data)))


@invoices_bp.post("/invoices/<int:invoice_id>/record-payment")
@require_permission("invoice.payment")
def record_payment_view(invoice_id: int):
    payment = parse_payload(PaymentIn, json_body())
    invoice = record_payment(get_session(), invoice_id, payment, actor=g.principal.username)
    return jsonify(dump(InvoiceOut, invoice))


@invoices_bp.post("/invoices/<int:invoice_id>/mark-sent")
@require_permission("invoice.payment")
def mark_sent_view(invoice_id: int):
    return jsonify(dump(InvoiceOut, mark_invoice_as_sent(get_session(), invoice_id)))


@invoices_bp.post("/invoices/reconcile-overdue")
@require_permission("invoice.payment")
def reconcile_overdue_view():
    """Move unpaid invoices past their due date to Overdue."""
    return jsonify(dump_many(InvoiceOut, mark_overdue_invoices(get_session())))
