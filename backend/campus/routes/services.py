"""Fee, hall ticket, ID card, library and hostel endpoints."""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify, request

from ..crud import ResourceCrud, register_resource
from ..db import utcnow
from ..resources import BOOKS, FEES, HALL_TICKETS, HOSTELS, ID_CARDS
from ..schemas import BookCopiesChange, HallTicketStatusChange, IDCardStatusChange

services_bp = Blueprint("services", __name__, url_prefix="/api")

logger = logging.getLogger(__name__)

fees = ResourceCrud(FEES)
hall_tickets = ResourceCrud(HALL_TICKETS)
id_cards = ResourceCrud(ID_CARDS)
books = ResourceCrud(BOOKS)
hostels = ResourceCrud(HOSTELS)

register_resource(services_bp, fees, "/fees", filters=("student", "status"))
register_resource(services_bp, hall_tickets, "/halltickets", filters=("student", "status"))
register_resource(services_bp, id_cards, "/idcards", filters=("student", "status", "cardNumber"))
register_resource(services_bp, books, "/library", filters=("category", "author", "isbn"))
register_resource(services_bp, hostels, "/hostels", filters=("warden",))


@services_bp.patch("/fees/<fee_id>/paid")
def mark_fee_paid(fee_id: str):
    updated = fees.patch_if(fee_id, {"status": "Paid", "paidAt": utcnow()}, {"status": "Unpaid"})
    if updated is None:
        # Already paid: keep the original payment time.
        logger.info("Fee %s was already marked paid", fee_id)
        updated = fees.get(fee_id)
    return jsonify(updated)


@services_bp.patch("/halltickets/<ticket_id>/status")
def update_hall_ticket_status(ticket_id: str):
    return jsonify(
        hall_tickets.apply(ticket_id, HallTicketStatusChange, request.get_json(silent=True))
    )


@services_bp.patch("/idcards/<card_id>/status")
def update_id_card_status(card_id: str):
    return jsonify(id_cards.apply(card_id, IDCardStatusChange, request.get_json(silent=True)))


@services_bp.patch("/library/<book_id>/copies")
def update_book_copies(book_id: str):
    return jsonify(books.apply(book_id, BookCopiesChange, request.get_json(silent=True)))


__all__ = ["services_bp"]
