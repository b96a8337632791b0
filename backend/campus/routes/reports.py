"""Reports and analytics endpoints."""

from __future__ import annotations

import csv
import io
import logging
from typing import Any, Dict, List

from flask import Blueprint, Response, jsonify, request
from pymongo.errors import PyMongoError

from ..db import get_collection, parse_object_id, serialize_document
from ..errors import NotFound, ServerError
from ..resources import (
    CERTIFICATES,
    EVENTS,
    FEES,
    PLACEMENT_APPLICATIONS,
    PLACEMENT_COMPANIES,
    POLLS,
    STUDENTS,
    TEACHERS,
)

reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")

logger = logging.getLogger(__name__)

APPLICATION_STATUSES = ("applied", "selected", "rejected")


def _clean_string(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _format_numeric(value: float | int | None) -> float | int | None:
    if value is None:
        return None
    number = float(value)
    if abs(number - round(number)) < 1e-9:
        return int(round(number))
    return round(number, 2)


def _database_error(action: str, exc: PyMongoError) -> ServerError:
    logger.exception("Failed to %s due to MongoDB error", action)
    return ServerError(str(exc))


@reports_bp.get("/dashboard")
def dashboard():
    try:
        payload = {
            "students": get_collection(STUDENTS.collection).count_documents({}),
            "teachers": get_collection(TEACHERS.collection).count_documents({}),
            "open_polls": get_collection(POLLS.collection).count_documents({"status": "open"}),
            "upcoming_events": get_collection(EVENTS.collection).count_documents(
                {"status": "upcoming"}
            ),
            "pending_certificates": get_collection(CERTIFICATES.collection).count_documents(
                {"status": "pending"}
            ),
            "unpaid_fees": get_collection(FEES.collection).count_documents({"status": "Unpaid"}),
        }
    except PyMongoError as exc:
        raise _database_error("build dashboard", exc) from None
    return jsonify(payload)


@reports_bp.get("/fees/summary")
def fee_summary():
    student = _clean_string(request.args.get("student"))

    pipeline: List[Dict[str, Any]] = []
    if student:
        pipeline.append({"$match": {"student": parse_object_id(student, "student")}})
    pipeline.extend(
        [
            {
                "$group": {
                    "_id": "$status",
                    "count": {"$sum": 1},
                    "amount": {"$sum": "$amount"},
                }
            },
            {"$project": {"_id": 0, "status": "$_id", "count": 1, "amount": 1}},
            {"$sort": {"status": 1}},
        ]
    )

    try:
        groups = list(get_collection(FEES.collection).aggregate(pipeline))
    except PyMongoError as exc:
        raise _database_error("summarise fees", exc) from None

    by_status = []
    total_amount = 0.0
    outstanding_amount = 0.0
    for group in groups:
        amount = float(group.get("amount") or 0)
        total_amount += amount
        if group.get("status") == "Unpaid":
            outstanding_amount += amount
        by_status.append(
            {
                "status": group.get("status"),
                "count": int(group.get("count", 0) or 0),
                "amount": _format_numeric(amount),
            }
        )

    payload: Dict[str, Any] = {
        "by_status": by_status,
        "total_amount": _format_numeric(total_amount),
        "outstanding_amount": _format_numeric(outstanding_amount),
    }
    if student:
        payload["student"] = student
    return jsonify(payload)


@reports_bp.get("/fees.csv")
def export_fees_csv():
    status = _clean_string(request.args.get("status"))
    filters = {"status": status} if status else {}

    try:
        rows = [
            serialize_document(doc)
            for doc in get_collection(FEES.collection).find(filters)
        ]
    except PyMongoError as exc:
        raise _database_error("export fees", exc) from None

    output = io.StringIO()
    fieldnames = ["_id", "student", "amount", "dueDate", "status", "paidAt"]
    writer = csv.DictWriter(output, fieldnames=fieldnames, extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow({field: row.get(field, "") for field in fieldnames})

    filename = f"fees_{status.lower()}.csv" if status else "fees.csv"
    response = Response(output.getvalue(), mimetype="text/csv")
    response.headers["Content-Disposition"] = f"attachment; filename={filename}"
    return response


@reports_bp.get("/polls/<poll_id>/results")
def poll_results(poll_id: str):
    object_id = parse_object_id(poll_id)
    try:
        poll = get_collection(POLLS.collection).find_one({"_id": object_id})
    except PyMongoError as exc:
        raise _database_error("load poll results", exc) from None
    if poll is None:
        raise NotFound("Poll not found.")

    options = poll.get("options") or []
    total_votes = sum(int(option.get("votes", 0) or 0) for option in options)

    results = []
    for index, option in enumerate(options):
        votes = int(option.get("votes", 0) or 0)
        percentage = round(votes / total_votes * 100, 2) if total_votes else 0
        results.append(
            {"index": index, "text": option.get("text"), "votes": votes, "percentage": percentage}
        )

    return jsonify(
        {
            "poll_id": str(object_id),
            "question": poll.get("question"),
            "status": poll.get("status"),
            "total_votes": total_votes,
            "options": results,
        }
    )


@reports_bp.get("/placements/summary")
def placement_summary():
    pipeline: List[Dict[str, Any]] = [
        {
            "$group": {
                "_id": {"company": "$company", "status": "$status"},
                "count": {"$sum": 1},
            }
        },
    ]

    try:
        groups = list(get_collection(PLACEMENT_APPLICATIONS.collection).aggregate(pipeline))
        company_ids = {group["_id"].get("company") for group in groups}
        company_ids.discard(None)
        names: Dict[Any, Any] = {}
        if company_ids:
            cursor = get_collection(PLACEMENT_COMPANIES.collection).find(
                {"_id": {"$in": list(company_ids)}}, {"name": 1}
            )
            names = {doc["_id"]: doc.get("name") for doc in cursor}
    except PyMongoError as exc:
        raise _database_error("summarise placements", exc) from None

    summary: Dict[Any, Dict[str, Any]] = {}
    for group in groups:
        company_id = group["_id"].get("company")
        status = group["_id"].get("status")
        entry = summary.setdefault(
            company_id,
            {
                "company_id": str(company_id) if company_id is not None else None,
                "company_name": names.get(company_id),
                "total": 0,
                **{name: 0 for name in APPLICATION_STATUSES},
            },
        )
        count = int(group.get("count", 0) or 0)
        if status in APPLICATION_STATUSES:
            entry[status] += count
        entry["total"] += count

    payload = sorted(
        summary.values(),
        key=lambda item: (item["company_name"] or "", item["company_id"] or ""),
    )
    return jsonify(payload)


__all__ = ["reports_bp"]
