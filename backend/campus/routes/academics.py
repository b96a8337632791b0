"""Assignments, learning resources, events, polls, skills and analytics."""

from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Blueprint, jsonify, request
from pymongo.errors import PyMongoError

from ..broadcast import Broadcaster
from ..crud import ResourceCrud, register_resource, validate_payload
from ..db import parse_object_id
from ..errors import BadRequest, NotFound
from ..resources import ANALYTICS, ASSIGNMENTS, EVENTS, LEARNING_RESOURCES, POLLS, SKILLS
from ..schemas import Vote

logger = logging.getLogger(__name__)


class PollCrud(ResourceCrud):
    def vote(self, poll_id: Any, option_index: int) -> Dict[str, Any]:
        """Count one vote for ``option_index`` with a single atomic ``$inc``."""

        object_id = parse_object_id(poll_id, "pollId")
        try:
            poll = self.collection.find_one({"_id": object_id}, {"options": 1, "status": 1})
        except PyMongoError as exc:
            logger.exception("Failed to load poll %s", poll_id)
            raise BadRequest(str(exc)) from None

        if poll is None:
            raise NotFound("Poll not found.")
        if poll.get("status", "open") != "open":
            raise BadRequest("Poll is closed.")

        options = poll.get("options") or []
        if option_index >= len(options):
            raise BadRequest(
                f"optionIndex must be between 0 and {len(options) - 1}."
            )

        return self.patch(object_id, {f"options.{option_index}.votes": 1}, operator="$inc")


def create_academics_blueprint(broadcaster: Broadcaster) -> Blueprint:
    """Build the academics routes; creates of assignments, events and polls
    are published on ``broadcaster``."""

    blueprint = Blueprint("academics", __name__, url_prefix="/api")

    assignments = ResourceCrud(ASSIGNMENTS, broadcaster)
    learning_resources = ResourceCrud(LEARNING_RESOURCES)
    events = ResourceCrud(EVENTS, broadcaster)
    polls = PollCrud(POLLS, broadcaster)
    skills = ResourceCrud(SKILLS)
    analytics = ResourceCrud(ANALYTICS)

    register_resource(
        blueprint, learning_resources, "/assignments/resources", filters=("uploadedBy", "type")
    )
    register_resource(blueprint, assignments, "/assignments", filters=("createdBy",))
    register_resource(blueprint, events, "/events", filters=("status", "createdBy"))
    register_resource(blueprint, polls, "/polls", filters=("status", "createdBy"))
    register_resource(blueprint, skills, "/skills", filters=("name",))
    register_resource(blueprint, analytics, "/analytics", filters=("type",))

    @blueprint.post("/polls/vote")
    def vote_poll():
        vote = validate_payload(Vote, request.get_json(silent=True), "Vote")
        return jsonify(polls.vote(vote.poll_id, vote.option_index))

    return blueprint


__all__ = ["PollCrud", "create_academics_blueprint"]
