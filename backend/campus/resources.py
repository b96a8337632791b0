"""Resource table: one entry per MongoDB collection served by the API."""

from . import schemas
from .crud import Resource

STUDENTS = Resource(
    "Student", "students", schemas.Student, unique=("rollNumber", "email")
)
TEACHERS = Resource(
    "Teacher", "teachers", schemas.Teacher, unique=("teacherId", "email")
)

ASSIGNMENTS = Resource(
    "Assignment",
    "assignments",
    schemas.Assignment,
    populate=("resources", "assignedTo", "createdBy"),
    event="assignmentUpdated",
)
LEARNING_RESOURCES = Resource(
    "Resource",
    "resources",
    schemas.LearningResource,
    timestamp_field="uploadedAt",
    populate=("uploadedBy",),
)
EVENTS = Resource(
    "Event", "events", schemas.Event, populate=("createdBy",), event="eventUpdated"
)
POLLS = Resource(
    "Poll", "polls", schemas.Poll, populate=("createdBy",), event="pollUpdated"
)
SKILLS = Resource("Skill", "skills", schemas.Skill, populate=("students",))
ANALYTICS = Resource(
    "Analytics", "analytics", schemas.AnalyticsReport, timestamp_field="generatedAt"
)

ATTENDANCE = Resource(
    "Attendance",
    "attendance",
    schemas.Attendance,
    populate=("teacher", "markedBy"),
    # One register per section, subject and slot.
    unique=(("section", "subject", "date", "time"),),
)
RESULTS = Resource(
    "Result",
    "results",
    schemas.Result,
    populate=("student", "publishedBy"),
    unique=(("student", "semester", "academicYear"),),
)

FEES = Resource("Fee", "fees", schemas.Fee, populate=("student",))
HALL_TICKETS = Resource(
    "HallTicket",
    "halltickets",
    schemas.HallTicket,
    timestamp_field="issueDate",
    populate=("student",),
)
ID_CARDS = Resource(
    "IDCard",
    "idcards",
    schemas.IDCard,
    timestamp_field="issueDate",
    populate=("student",),
    unique=("cardNumber",),
)
BOOKS = Resource(
    "Library", "library", schemas.Book, timestamp_field="addedAt", unique=("isbn",)
)
HOSTELS = Resource("Hostel", "hostels", schemas.Hostel, populate=("warden",))

MENTORINGS = Resource(
    "Mentoring", "mentorings", schemas.Mentoring, populate=("mentor", "mentee")
)
CERTIFICATES = Resource(
    "Certificate",
    "certificates",
    schemas.Certificate,
    populate=("student", "verifiedBy"),
)
FEEDBACK = Resource(
    "Feedback", "feedback", schemas.Feedback, populate=("student", "teacher")
)
LEAVES = Resource(
    "Leave",
    "leaves",
    schemas.Leave,
    timestamp_field="appliedAt",
    populate=("student", "reviewedBy"),
)
NOTIFICATIONS = Resource(
    "Notification", "notifications", schemas.Notification, timestamp_field="date"
)

INTERNSHIP_BATCHES = Resource(
    "InternshipBatch",
    "internship_batches",
    schemas.InternshipBatch,
    populate=("students", "mentor"),
)
INTERNSHIP_COMPANIES = Resource(
    "InternshipCompany",
    "internship_companies",
    schemas.InternshipCompany,
    populate=("students",),
)
INTERNSHIP_DOCUMENTS = Resource(
    "InternshipDocument",
    "internship_documents",
    schemas.InternshipDocument,
    timestamp_field="uploadedAt",
    populate=("student", "batch", "company"),
)

PROJECT_GROUPS = Resource(
    "ProjectGroup",
    "project_groups",
    schemas.ProjectGroup,
    populate=("members", "guide", "coGuide"),
)
PROJECT_DOCUMENTS = Resource(
    "ProjectDocument",
    "project_documents",
    schemas.ProjectDocument,
    timestamp_field="uploadedAt",
    populate=("group",),
)
PROJECT_EVALUATIONS = Resource(
    "ProjectEvaluation",
    "project_evaluations",
    schemas.ProjectEvaluation,
    timestamp_field="evaluatedAt",
    populate=("group", "evaluatedBy"),
)

PLACEMENT_COMPANIES = Resource(
    "PlacementCompany",
    "placement_companies",
    schemas.PlacementCompany,
    populate=("rounds",),
)
PLACEMENT_APPLICATIONS = Resource(
    "PlacementApplication",
    "placement_applications",
    schemas.PlacementApplication,
    timestamp_field="appliedAt",
    populate=("student", "company"),
)
PLACEMENT_ROUNDS = Resource(
    "PlacementRound",
    "placement_rounds",
    schemas.PlacementRound,
    populate=("company",),
)
