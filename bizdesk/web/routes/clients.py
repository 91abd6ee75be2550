from flask import Blueprint, g, jsonify

from ...exceptions import ClientNotFoundError
from ...schemas import ClientCreate, ClientOut, ClientUpdate, dump, dump_many, parse_payload
from ...services import create_client, delete_client, get_client, list_clients, update_client
from ..decorators import json_body, require_permission
from ..session import get_session

clients_bp = Blueprint("clients", __name__)


@clients_bp.get("/clients")
@require_permission("client.read")
def list_clients_view():
    return jsonify(dump_many(ClientOut, list_clients(get_session())))


@clients_bp.get("/clients/<int:client_id>")
@require_permission("client.read")
def get_client_view(client_id: int):
    return jsonify(dump(ClientOut, get_client(get_session(), client_id)))


@clients_bp.post("/clients")
@require_permission("client.write")
def create_client_view():
    data = parse_payload(ClientCreate, json_body())
    client = create_client(get_session(), data, actor=g.principal.username)
    return jsonify(dump(ClientOut, client)), 201


@clients_bp.patch("/clients/<int:client_id>")
@require_permission("client.write")
def update_client_view(client_id: int):
    data = parse_payload(ClientUpdate, json_body())
    client = update_client(get_session(), client_id, data, actor=g.principal.username)
    return jsonify(dump(ClientOut, client))


@clients_bp.delete("/clients/<int:client_id>")
@require_permission("client.write")
def delete_client_view(client_id: int):
    if not delete_client(get_session(), client_id, actor=g.principal.username):
        raise ClientNotFoundError(client_id)
    return "", 204
