"""Student and teacher directory endpoints."""

from flask import Blueprint

from ..crud import ResourceCrud, register_resource
from ..resources import STUDENTS, TEACHERS

people_bp = Blueprint("people", __name__, url_prefix="/api")

students = ResourceCrud(STUDENTS)
teachers = ResourceCrud(TEACHERS)

register_resource(
    people_bp, students, "/students", filters=("rollNumber", "email", "department", "section")
)
register_resource(people_bp, teachers, "/teachers", filters=("teacherId", "email", "department"))

__all__ = ["people_bp"]
