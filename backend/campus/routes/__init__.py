"""Application route blueprints."""

from .academics import create_academics_blueprint
from .internships import internships_bp
from .people import people_bp
from .placements import placements_bp
from .projects import projects_bp
from .records import records_bp
from .reports import reports_bp
from .services import services_bp
from .student_affairs import student_affairs_bp

__all__ = [
    "create_academics_blueprint",
    "internships_bp",
    "people_bp",
    "placements_bp",
    "projects_bp",
    "records_bp",
    "reports_bp",
    "services_bp",
    "student_affairs_bp",
]
