from flask import Blueprint, g, jsonify

from ...schemas import (
    NoteIn,
    TicketCreate,
    TicketOut,
    TicketStatusIn,
    TicketUpdate,
    dump,
    dump_many,
    parse_payload,
)
from ...services import (
    add_ticket_note,
    create_ticket,
    get_ticket,
    list_tickets,
    update_ticket,
    update_ticket_status,
)
from ..decorators import client_id_arg, json_body, require_permission
from ..session import get_session

tickets_bp = Blueprint("tickets", __name__)


@tickets_bp.get("/tickets")
@require_permission("ticket.read")
def list_tickets_view():
    client_id = client_id_arg()
    return jsonify(dump_many(TicketOut, list_tickets(get_session(), client_id=client_id)))


@tickets_bp.get("/tickets/<int:ticket_id>")
@require_permission("ticket.read")
def get_ticket_view(ticket_id: int):
    return jsonify(dump(TicketOut, get_ticket(get_session(), ticket_id)))


@tickets_bp.post("/tickets")
@require_permission("ticket.write")
def create_ticket_view():
    data = parse_payload(TicketCreate, json_body())
    ticket = create_ticket(get_session(), data, actor=g.principal.username)
    return jsonify(dump(TicketOut, ticket)), 201


@tickets_bp.patch("/tickets/<int:ticket_id>")
@require_permission("ticket.write")
def update_ticket_view(ticket_id: int):
    data = parse_payload(TicketUpdate, json_body())
    return jsonify(dump(TicketOut, update_ticket(get_session(), ticket_id, data)))


@tickets_bp.post("/tickets/<int:ticket_id>/notes")
@require_permission("ticket.write")
def add_ticket_note_view(ticket_id: int):
    note = parse_payload(NoteIn, json_body())
    ticket = add_ticket_note(get_session(), ticket_id, note, default_user=g.principal.username)
    return jsonify(dump(TicketOut, ticket))


@tickets_bp.post("/tickets/<int:ticket_id>/update-status")
@require_permission("ticket.write")
def update_ticket_status_view(ticket_id: int):
    body = parse_payload(TicketStatusIn, json_body())
    return jsonify(dump(TicketOut, update_ticket_status(get_session(), ticket_id, body.status)))
