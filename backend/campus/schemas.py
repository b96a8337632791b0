"""
Payload schemas for every campus resource.

Each model describes the client-writable shape of one MongoDB collection.
Field names are snake_case in Python and camelCase on the wire. Models carry
two pieces of class-level metadata used by the resource handlers:

- ``references``: wire field -> referenced collection (``None`` when the
  target collection varies). Referenced ids are stored as ObjectIds and are
  soft: nothing checks that the target document exists.
- ``initial``: server-managed values written on create (status fields whose
  transitions only happen through dedicated endpoints).
"""

import copy
from datetime import datetime, timezone
from typing import Annotated, Any, ClassVar, Dict, List, Literal, Optional, Union

from bson import ObjectId
from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .db import to_object_ids


def _check_object_id(value: str) -> str:
    if not ObjectId.is_valid(value):
        raise ValueError("must be a 24 character hex object id")
    return value


def _to_naive_utc(value: datetime) -> datetime:
    # Values without an offset are taken to be UTC already.
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# Largest integer BSON can store (signed 64-bit).
MAX_BSON_INT = 2**63 - 1

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
ObjectIdStr = Annotated[str, AfterValidator(_check_object_id)]
UtcDatetime = Annotated[datetime, AfterValidator(_to_naive_utc)]
Count = Annotated[int, Field(ge=0, le=MAX_BSON_INT)]

# Identifier types, one per referenced collection.
StudentId = ObjectIdStr
TeacherId = ObjectIdStr
ResourceId = ObjectIdStr
InternshipBatchId = ObjectIdStr
InternshipCompanyId = ObjectIdStr
ProjectGroupId = ObjectIdStr
PlacementCompanyId = ObjectIdStr

EventStatus = Literal["upcoming", "ongoing", "completed"]
PollStatus = Literal["open", "closed"]
HallTicketStatus = Literal["Active", "Inactive"]
IDCardStatus = Literal["Active", "Inactive", "Lost"]
ReviewDecision = Literal["approved", "rejected"]
CertificateType = Literal["nptel", "coursera", "other"]
LeaveType = Literal["MEDICAL", "DUTY", "PERSONAL", "EMERGENCY"]
LeaveDecision = Literal["Approved", "Rejected"]
NotificationTarget = Literal["all", "student", "teacher", "section", "department"]
InternshipCompanyStatus = Literal["active", "completed", "pending"]
InternshipDocumentType = Literal["offerLetter", "noc"]
ProjectDocumentType = Literal["abstract", "srs", "ppt", "report", "plagiarism"]
EvaluationStage = Literal["mid", "final"]
PlacementCompanyStatus = Literal["open", "closed"]
ApplicationStatus = Literal["applied", "selected", "rejected"]
RoundType = Literal["test", "technical", "hr"]
AttendanceMark = Literal["present", "absent", "late"]
Grade = Literal["O", "A+", "A", "B+", "B", "C", "F"]


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )

    references: ClassVar[Dict[str, Optional[str]]] = {}

    def _dump(self, **kwargs: Any) -> Dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude_none=True, **kwargs)
        for field in self.references:
            if field in data:
                data[field] = to_object_ids(data[field])
        return data


class Document(_WireModel):
    """Writable shape of a new document."""

    initial: ClassVar[Dict[str, Any]] = {}

    def to_document(self) -> Dict[str, Any]:
        document = self._dump()
        document.update(copy.deepcopy(self.initial))
        return document


class Changes(_WireModel):
    """Subset of fields overwritten by a targeted patch."""

    def to_update(self) -> Dict[str, Any]:
        return self._dump(exclude_unset=True)


# People


class Student(Document):
    name: NonEmptyStr
    roll_number: NonEmptyStr
    email: EmailStr
    department: Optional[str] = None
    section: Optional[str] = None
    phone: Optional[str] = None
    guardian_name: Optional[str] = None
    guardian_phone: Optional[str] = None


class Teacher(Document):
    name: NonEmptyStr
    teacher_id: NonEmptyStr
    email: EmailStr
    department: Optional[str] = None
    designation: Optional[str] = None
    subjects: List[str] = Field(default_factory=list)
    phone: Optional[str] = None


# Academics


class Assignment(Document):
    references = {
        "resources": "resources",
        "assignedTo": "students",
        "createdBy": "teachers",
    }

    title: NonEmptyStr
    description: Optional[str] = None
    due_date: Optional[UtcDatetime] = None
    resources: List[ResourceId] = Field(default_factory=list)
    created_by: TeacherId
    assigned_to: List[StudentId] = Field(default_factory=list)


class LearningResource(Document):
    references = {"uploadedBy": "teachers"}

    name: NonEmptyStr
    url: NonEmptyStr
    type: Optional[str] = None
    uploaded_by: TeacherId


class Event(Document):
    references = {"createdBy": "teachers"}

    title: NonEmptyStr
    description: Optional[str] = None
    date: UtcDatetime
    location: Optional[str] = None
    status: EventStatus = "upcoming"
    created_by: Optional[TeacherId] = None


class PollOption(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    text: NonEmptyStr

    @model_validator(mode="before")
    @classmethod
    def from_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"text": value}
        return value


class Poll(Document):
    references = {"createdBy": "teachers"}

    question: NonEmptyStr
    options: List[PollOption] = Field(min_length=2)
    status: PollStatus = "open"
    created_by: Optional[TeacherId] = None

    def to_document(self) -> Dict[str, Any]:
        document = super().to_document()
        # Counters always start at zero, whatever the client sent.
        document["options"] = [
            {"text": option["text"], "votes": 0} for option in document["options"]
        ]
        return document


class Vote(_WireModel):
    poll_id: ObjectIdStr
    option_index: int = Field(ge=0, le=MAX_BSON_INT)


class Skill(Document):
    references = {"students": "students"}

    name: NonEmptyStr
    description: Optional[str] = None
    students: List[StudentId] = Field(default_factory=list)


class AnalyticsReport(Document):
    references = {"generatedBy": None}

    type: NonEmptyStr
    data: Union[Dict[str, Any], List[Any]]
    generated_by: Optional[ObjectIdStr] = None


# Attendance and results


class StudentAttendance(_WireModel):
    student_id: StudentId
    status: AttendanceMark


class Attendance(Document):
    """One class session: the section, subject and slot plus a mark per student."""

    references = {"teacher": "teachers", "markedBy": "teachers"}
    initial = {"isLocked": False}

    section: NonEmptyStr
    subject: NonEmptyStr
    teacher: TeacherId
    date: UtcDatetime
    day: Optional[str] = None
    time: NonEmptyStr
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    students: List[StudentAttendance] = Field(default_factory=list)
    marked_by: Optional[TeacherId] = None

    @model_validator(mode="after")
    def check_students(self) -> "Attendance":
        seen = set()
        for entry in self.students:
            if entry.student_id in seen:
                raise ValueError(f"student {entry.student_id} is marked more than once")
            seen.add(entry.student_id)
        return self

    def to_document(self) -> Dict[str, Any]:
        document = super().to_document()
        document["students"] = [
            {"studentId": to_object_ids(entry["studentId"]), "status": entry["status"]}
            for entry in document["students"]
        ]
        return document


# Lower bound of total marks (out of 100) for each grade, best first.
GRADE_BANDS = ((90, "O"), (80, "A+"), (70, "A"), (60, "B+"), (50, "B"), (40, "C"))
GRADE_POINTS = {"O": 10, "A+": 9, "A": 8, "B+": 7, "B": 6, "C": 5, "F": 0}


def grade_for(total_marks: float) -> Grade:
    for floor, grade in GRADE_BANDS:
        if total_marks >= floor:
            return grade
    return "F"


class SubjectResult(_WireModel):
    subject_name: NonEmptyStr
    internal_marks: float = Field(ge=0, le=30)
    external_marks: float = Field(ge=0, le=70)
    credits: int = Field(default=3, ge=1, le=30)


class Result(Document):
    """Semester marks for one student.

    Totals, grades, SGPA and credit counts are always computed here from
    the submitted internal and external marks.
    """

    references = {"student": "students", "publishedBy": "teachers"}
    initial = {"status": "draft"}

    student: StudentId
    semester: int = Field(ge=1, le=8)
    academic_year: Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^\d{4}-\d{2}$")]
    subjects: List[SubjectResult] = Field(min_length=1)

    def to_document(self) -> Dict[str, Any]:
        document = super().to_document()

        subjects = []
        grade_points = total_credits = earned_credits = 0
        for subject in self.subjects:
            total = subject.internal_marks + subject.external_marks
            grade = grade_for(total)
            subjects.append(
                {
                    "subjectName": subject.subject_name,
                    "internalMarks": subject.internal_marks,
                    "externalMarks": subject.external_marks,
                    "totalMarks": total,
                    "grade": grade,
                    "credits": subject.credits,
                }
            )
            grade_points += GRADE_POINTS[grade] * subject.credits
            total_credits += subject.credits
            if grade != "F":
                earned_credits += subject.credits

        document.update(
            subjects=subjects,
            sgpa=round(grade_points / total_credits, 2),
            totalCredits=total_credits,
            earnedCredits=earned_credits,
        )
        return document


class ResultPublication(Changes):
    references = {"publishedBy": "teachers"}

    published_by: Optional[TeacherId] = None


# Campus services


class Fee(Document):
    references = {"student": "students"}
    initial = {"status": "Unpaid"}

    student: StudentId
    amount: float = Field(ge=0)
    due_date: Optional[UtcDatetime] = None


class HallTicket(Document):
    references = {"student": "students"}

    student: StudentId
    exam_name: NonEmptyStr
    status: HallTicketStatus = "Active"


class HallTicketStatusChange(Changes):
    status: HallTicketStatus


class IDCard(Document):
    references = {"student": "students"}

    student: StudentId
    card_number: NonEmptyStr
    expiry_date: Optional[UtcDatetime] = None
    status: IDCardStatus = "Active"
    photo_url: Optional[str] = None


class IDCardStatusChange(Changes):
    status: IDCardStatus


class Book(Document):
    title: NonEmptyStr
    author: Optional[str] = None
    isbn: Optional[NonEmptyStr] = None
    category: Optional[str] = None
    available_copies: Count = 1
    total_copies: Count = 1


class BookCopiesChange(Changes):
    available_copies: Optional[Count] = None
    total_copies: Optional[Count] = None


class Hostel(Document):
    references = {"warden": "teachers"}

    name: NonEmptyStr
    location: Optional[str] = None
    capacity: Optional[Count] = None
    warden: Optional[TeacherId] = None
    rooms: List[str] = Field(default_factory=list)


# Student affairs


class Mentoring(Document):
    references = {"mentor": "teachers", "mentee": "students"}

    mentor: TeacherId
    mentee: StudentId
    start_date: Optional[UtcDatetime] = None
    end_date: Optional[UtcDatetime] = None
    notes: Optional[str] = None


class Certificate(Document):
    references = {"student": "students", "verifiedBy": "teachers"}
    initial = {"status": "pending"}

    student: StudentId
    title: NonEmptyStr
    url: NonEmptyStr
    type: CertificateType


class DocumentReview(Changes):
    references = {"verifiedBy": "teachers"}

    status: ReviewDecision
    verified_by: Optional[TeacherId] = None


class Feedback(Document):
    references = {"student": "students", "teacher": "teachers"}

    student: StudentId
    teacher: Optional[TeacherId] = None
    message: NonEmptyStr
    rating: Optional[int] = Field(default=None, ge=1, le=5)


class Leave(Document):
    references = {"student": "students", "reviewedBy": "teachers"}
    initial = {"status": "Pending"}

    student: StudentId
    type: LeaveType
    reason: Optional[str] = None
    start_date: UtcDatetime
    end_date: UtcDatetime
    document_url: Optional[str] = None

    @model_validator(mode="after")
    def check_range(self) -> "Leave":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class LeaveReview(Changes):
    references = {"reviewedBy": "teachers"}

    status: LeaveDecision
    reviewed_by: Optional[TeacherId] = None
    rejection_reason: Optional[str] = None


class Notification(Document):
    references = {"postedBy": None, "targetId": None}

    title: NonEmptyStr
    message: NonEmptyStr
    posted_by: Optional[ObjectIdStr] = None
    posted_by_model: Optional[Literal["Admin", "Teacher"]] = None
    target: NotificationTarget = "all"
    target_id: Optional[ObjectIdStr] = None


# Internships


class InternshipBatch(Document):
    references = {"students": "students", "mentor": "teachers"}

    name: NonEmptyStr
    domain: NonEmptyStr
    students: List[StudentId] = Field(default_factory=list)
    mentor: Optional[TeacherId] = None
    start_date: Optional[UtcDatetime] = None
    end_date: Optional[UtcDatetime] = None


class BatchEnrollment(_WireModel):
    student: StudentId


class InternshipCompany(Document):
    references = {"students": "students"}

    name: NonEmptyStr
    duration: Optional[str] = None
    stipend: Optional[str] = None
    status: InternshipCompanyStatus = "pending"
    offer_letter: Optional[str] = None
    noc: Optional[str] = None
    students: List[StudentId] = Field(default_factory=list)


class InternshipDocument(Document):
    references = {
        "student": "students",
        "batch": "internship_batches",
        "company": "internship_companies",
        "verifiedBy": "teachers",
    }
    initial = {"status": "pending"}

    student: StudentId
    batch: Optional[InternshipBatchId] = None
    company: Optional[InternshipCompanyId] = None
    type: InternshipDocumentType
    url: NonEmptyStr


# Projects


class ProjectGroup(Document):
    references = {"members": "students", "guide": "teachers", "coGuide": "teachers"}

    name: NonEmptyStr
    members: List[StudentId] = Field(default_factory=list)
    guide: Optional[TeacherId] = None
    co_guide: Optional[TeacherId] = None
    batch: Optional[str] = None


class ProjectDocument(Document):
    references = {"group": "project_groups", "reviewedBy": "teachers"}
    initial = {"status": "pending"}

    group: ProjectGroupId
    type: ProjectDocumentType
    url: NonEmptyStr


class ProjectDocumentReview(Changes):
    references = {"reviewedBy": "teachers"}

    status: ReviewDecision
    feedback: Optional[str] = None
    marks: Optional[float] = Field(default=None, ge=0)
    reviewed_by: Optional[TeacherId] = None


class ProjectEvaluation(Document):
    references = {"group": "project_groups", "evaluatedBy": "teachers"}

    group: ProjectGroupId
    stage: EvaluationStage
    marks: Optional[float] = Field(default=None, ge=0)
    feedback: Optional[str] = None
    evaluated_by: Optional[TeacherId] = None


# Placements


class PlacementCompany(Document):
    references = {"rounds": "placement_rounds"}
    initial = {"rounds": []}

    name: NonEmptyStr
    jd: Optional[str] = None
    ctc: Optional[str] = None
    eligibility: Optional[str] = None
    status: PlacementCompanyStatus = "open"


class PlacementApplication(Document):
    references = {"student": "students", "company": "placement_companies"}
    initial = {"status": "applied"}

    student: StudentId
    company: PlacementCompanyId
    admit_card_url: Optional[str] = None


class ApplicationStatusChange(Changes):
    status: ApplicationStatus


class AdmitCardChange(Changes):
    admit_card_url: NonEmptyStr


class PlacementRound(Document):
    references = {"company": "placement_companies"}

    company: PlacementCompanyId
    type: RoundType
    date: Optional[UtcDatetime] = None
    result_url: Optional[str] = None
