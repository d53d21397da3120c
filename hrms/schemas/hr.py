from __future__ import annotations

from datetime import date
from typing import Annotated, Literal

from pydantic import UUID4, EmailStr, Field, HttpUrl, StringConstraints

from hrms.schemas.common import Code, Phone, RequestModel, Sanitized, Text255, Text2000

PersonName = Annotated[str, Sanitized, StringConstraints(min_length=1, max_length=128, pattern=r"^[a-zA-Z\s'-]+$")]
EmployeeNumber = Annotated[str, Sanitized, StringConstraints(max_length=64, pattern=r"^[A-Za-z0-9_-]*$")]
Short = Annotated[str, Sanitized, StringConstraints(max_length=128)]
Period = Annotated[str, Sanitized, StringConstraints(max_length=100)]
SubScore = Annotated[int, Field(ge=0, le=10)]


class DepartmentIn(RequestModel):
    id: UUID4 | None = None
    name: Annotated[str, Sanitized, StringConstraints(min_length=2, max_length=255)]
    code: Code | None = None
    description: Text2000 | None = None
    head_employee_id: UUID4 | None = None


class EmployeeIn(RequestModel):
    id: UUID4 | None = None
    user_id: UUID4 | None = None
    employee_number: EmployeeNumber | None = None
    first_name: PersonName
    last_name: PersonName
    email: EmailStr
    phone: Phone | None = None
    department_id: UUID4 | None = None
    position: Text255 | None = None
    hire_date: date | None = None
    employment_status: Literal["active", "inactive", "on_leave"] | None = None
    salary: float | None = Field(default=None, ge=0)
    photo_url: HttpUrl | None = None


class RecruitmentIn(RequestModel):
    id: UUID4 | None = None
    job_title: Annotated[str, Sanitized, StringConstraints(min_length=1, max_length=255)]
    department_id: UUID4 | None = None
    description: Text2000 | None = None
    requirements: Text2000 | None = None
    position_type: Literal["full_time", "part_time", "contract"] | None = None
    salary_range: Short | None = None
    posting_date: date | None = None
    closing_date: date | None = None
    status: Literal["open", "closed", "filled"] | None = None
    vacancies: int | None = Field(default=None, ge=0)
    created_by: UUID4 | None = None


ApplicationStatus = Literal["pending", "reviewed", "shortlisted", "rejected", "hired"]


class ApplicationIn(RequestModel):
    id: UUID4 | None = None
    recruitment_id: UUID4 | None = None
    applicant_name: Annotated[str, Sanitized, StringConstraints(min_length=1, max_length=255)]
    applicant_email: EmailStr | None = None
    applicant_phone: Phone | None = None
    resume_url: HttpUrl | None = None
    cover_letter: Text2000 | None = None
    application_date: date | None = None
    status: ApplicationStatus | None = None
    interview_date: date | None = None
    notes: Text2000 | None = None


class ApplicationStatusIn(RequestModel):
    status: ApplicationStatus


class TrainingProgramIn(RequestModel):
    id: UUID4 | None = None
    title: Annotated[str, Sanitized, StringConstraints(min_length=1, max_length=255)]
    description: Text2000 | None = None
    trainer: Text255 | None = None
    start_date: date | None = None
    end_date: date | None = None
    location: Text255 | None = None
    capacity: int | None = Field(default=None, ge=0)
    cost_per_person: float | None = Field(default=None, ge=0)
    status: Literal["planned", "ongoing", "completed", "cancelled"] | None = None
    created_by: UUID4 | None = None


class EnrollmentIn(RequestModel):
    id: UUID4 | None = None
    training_program_id: UUID4 | None = None
    employee_id: UUID4
    enrollment_date: date | None = None
    attendance_status: Literal["registered", "attended", "absent", "completed"] | None = None
    completion_date: date | None = None
    certificate_issued: bool | None = None
    feedback: Text2000 | None = None
    rating: int | None = Field(default=None, ge=0, le=5)


class EvaluationIn(RequestModel):
    id: UUID4 | None = None
    employee_id: UUID4
    evaluator_id: UUID4 | None = None
    evaluation_period: Period | None = None
    evaluation_date: date | None = None
    performance_score: float | None = Field(default=None, ge=0, le=100)
    technical_skills: SubScore | None = None
    communication: SubScore | None = None
    teamwork: SubScore | None = None
    leadership: SubScore | None = None
    punctuality: SubScore | None = None
    comments: Text2000 | None = None
    goals_met: bool | None = None
    status: Literal["draft", "submitted", "approved"] | None = None


class RegistrationIn(RequestModel):
    name: Annotated[str, Sanitized, StringConstraints(min_length=2, max_length=50, pattern=r"^[a-zA-Z\s]+$")]
    email: EmailStr
    uid: Annotated[str, Sanitized, StringConstraints(min_length=2, max_length=50, pattern=r"^[a-zA-Z0-9_]+$")]
    displayPicture: HttpUrl
    # Elevation only happens through appoint-hr; self-registration is always an employee.
    role: Literal["employee"] = "employee"


class AppointHrIn(RequestModel):
    uid: Annotated[str, Sanitized] | None = None
