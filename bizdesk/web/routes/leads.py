from flask import Blueprint, g, jsonify

from ...exceptions import LeadNotFoundError
from ...schemas import ClientOut, LeadCreate, LeadOut, LeadUpdate, NoteIn, dump, dump_many, parse_payload
from ...services import (
    add_lead_note,
    convert_lead_to_client,
    create_lead,
    delete_lead,
    get_lead,
    list_leads,
    update_lead,
)
from ..decorators import json_body, require_permission
from ..session import get_session

leads_bp = Blueprint("leads", __name__)


@leads_bp.get("/leads")
@require_permission("lead.read")
def list_leads_view():
    return jsonify(dump_many(LeadOut, list_leads(get_session())))


@leads_bp.get("/leads/<int:lead_id>")
@require_permission("lead.read")
def get_lead_view(lead_id: int):
    return jsonify(dump(LeadOut, get_lead(get_session(), lead_id)))


@leads_bp.post("/leads")
@require_permission("lead.write")
def create_lead_view():
    data = parse_payload(LeadCreate, json_body())
    lead = create_lead(get_session(), data)
    return jsonify(dump(LeadOut, lead)), 201


@leads_bp.patch("/leads/<int:lead_id>")
@require_permission("lead.write")
def update_lead_view(lead_id: int):
    data = parse_payload(LeadUpdate, json_body())
    return jsonify(dump(LeadOut, update_lead(get_session(), lead_id, data)))


@leads_bp.delete("/leads/<int:lead_id>")
@require_permission("lead.write")
def delete_lead_view(lead_id: int):
    if not delete_lead(get_session(), lead_id):
        raise LeadNotFoundError(lead_id)
    return "", 204


@leads_bp.post("/leads/<int:lead_id>/notes")
@require_permission("lead.write")
def add_lead_note_view(lead_id: int):
    note = parse_payload(NoteIn, json_body())
    lead = add_lead_note(get_session(), lead_id, note, default_user=g.principal.username)
    return jsonify(dump(LeadOut, lead))


@leads_bp.post("/leads/<int:lead_id>/convert")
@require_permission("lead.convert")
def convert_lead_view(lead_id: int):
    client = convert_lead_to_client(get_session(), lead_id)
    return jsonify(dump(ClientOut, client))
