from flask import Blueprint, g, jsonify

from ...schemas import (
    ApproveIn,
    InvoiceOut,
    QuotationCreate,
    QuotationOut,
    QuotationUpdate,
    dump,
    dump_many,
    parse_payload,
)
from ...services import (
    approve_quotation,
    create_quotation,
    generate_invoice,
    get_quotation,
    list_quotations,
    reject_quotation,
    submit_quotation,
    update_quotation,
)
from ..decorators import client_id_arg, json_body, require_permission
from ..session import get_session

quotations_bp = Blueprint("quotations", __name__)


@quotations_bp.get("/quotations")
@require_permission("quotation.read")
def list_quotations_view():
    client_id = client_id_arg()
    return jsonify(dump_many(QuotationOut, list_quotations(get_session(), client_id=client_id)))


@quotations_bp.get("/quotations/<int:quotation_id>")
@require_permission("quotation.read")
def get_quotation_view(quotation_id: int):
    return jsonify(dump(QuotationOut, get_quotation(get_session(), quotation_id)))


@quotations_bp.post("/quotations")
@require_permission("quotation.write")
def create_quotation_view():
    data = parse_payload(QuotationCreate, json_body())
    quotation = create_quotation(get_session(), data, actor=g.principal.username)
    return jsonify(dump(QuotationOut, quotation)), 201


@quotations_bp.patch("/quotations/<int:quotation_id>")
@require_permission("quotation.write")
def update_quotation_view(quotation_id: int):
    data = parse_payload(QuotationUpdate, json_body())
    return jsonify(dump(QuotationOut, update_quotation(get_session(), quotation_id, data)))


@quotations_bp.post("/quotations/<int:quotation_id>/approve")
@require_permission("quotation.approve")
def approve_quotation_view(quotation_id: int):
    body = parse_payload(ApproveIn, json_body())
    approved_by = body.approved_by or g.principal.username
    return jsonify(dump(QuotationOut, approve_quotation(get_session(), quotation_id, approved_by)))


@quotations_bp.post("/quotations/<int:quotation_id>/reject")
@require_permission("quotation.approve")
def reject_quotation_view(quotation_id: int):
    return jsonify(dump(QuotationOut, reject_quotation(get_session(), quotation_id)))


@quotations_bp.post("/quotations/<int:quotation_id>/submit")
@require_permission("quotation.write")
def submit_quotation_view(quotation_id: int):
    return jsonify(dump(QuotationOut, submit_quotation(get_session(), quotation_id)))


@quotations_bp.post("/quotations/<int:quotation_id>/generate-invoice")
@require_permission("invoice.generate")
def generate_invoice_view(quotation_id: int):
    invoice = generate_invoice(get_session(), quotation_id, actor=g.principal.username)
    return jsonify(dump(InvoiceOut, invoice)), 201
