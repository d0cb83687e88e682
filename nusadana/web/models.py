"""Shared Pydantic models for the NusaDana web API.

Request bodies are validated here; responses are built from ORM rows with
``from_attributes``. Money travels as ``Decimal`` internally and is written
to JSON as a number.

Usage:
    from nusadana.web.models import ProjectCreate, ProjectOut

    @router.post("/projects", response_model=ProjectOut)
    async def create_project(payload: ProjectCreate):
        ...
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, StrictInt, field_validator

Money = Annotated[
    Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")
]


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# Auth Models
# ============================================================================


class RegisterRequest(BaseModel):
    """Used by: POST /api/auth/register"""

    name: str
    email: str
    password: str = Field(min_length=1)
    role: str = "villager"

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        # bcrypt only looks at the first 72 bytes
        if len(v.encode()) > 72:
            raise ValueError("password must be at most 72 bytes")
        return v


class LoginRequest(BaseModel):
    """Used by: POST /api/auth/login"""

    email: str
    password: str


class UserOut(ORMModel):
    id: int
    name: str
    email: str
    role: str
    created_at: datetime


class AuthResponse(BaseModel):
    user: UserOut
    token: str


# ============================================================================
# Project Models
# ============================================================================


class ProjectCreate(BaseModel):
    """Used by: POST /api/projects"""

    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    estimated_budget: Optional[Decimal] = None


class ProjectOut(ORMModel):
    id: int
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    estimated_budget: Optional[Money] = None
    status: str
    priority: Optional[int] = None
    created_by: Optional[int] = None
    created_at: datetime


class StatusUpdate(BaseModel):
    """Used by: PUT /api/projects/{id}/status"""

    status: str


class PriorityUpdate(BaseModel):
    """Used by: PUT /api/projects/priority"""

    priority_list: list[StrictInt]

    @field_validator("priority_list", mode="before")
    @classmethod
    def must_be_array(cls, v):
        if not isinstance(v, list):
            raise ValueError("priority_list must be an array")
        return v


class PriorityResult(BaseModel):
    success: bool
    message: str


# ============================================================================
# Schedule Models
# ============================================================================


class ScheduleItemCreate(BaseModel):
    """Used by: POST /api/schedule"""

    title: str
    description: Optional[str] = None
    due_date: date


class ScheduleItemOut(ORMModel):
    id: int
    title: str
    description: Optional[str] = None
    due_date: date


# ============================================================================
# Funds, Spending & Progress Models
# ============================================================================


class DisbursementCreate(BaseModel):
    """Used by: POST /api/projects/{id}/disbursements"""

    amount: Decimal
    date_received: date
    phase: Optional[str] = None
    source_of_fund: Optional[str] = None


class DisbursementOut(ORMModel):
    id: int
    project_id: int
    amount: Money
    date_received: date
    phase: Optional[str] = None
    source_of_fund: Optional[str] = None


class ExpenseCreate(BaseModel):
    """Used by: POST /api/projects/{id}/expenses"""

    description: Optional[str] = None
    amount_spent: Decimal
    date_spent: date


class ExpenseOut(ORMModel):
    id: int
    project_id: int
    description: Optional[str] = None
    amount_spent: Money
    date_spent: date


class ProgressCreate(BaseModel):
    """Used by: POST /api/projects/{id}/progress"""

    notes: Optional[str] = None
    completion_percentage: Optional[int] = Field(default=None, ge=0, le=100)


class ProgressOut(ORMModel):
    id: int
    project_id: int
    notes: Optional[str] = None
    completion_percentage: Optional[int] = None
    created_by: Optional[int] = None
    created_at: datetime


class FeedbackCreate(BaseModel):
    """Used by: POST /api/projects/{id}/feedback"""

    comment_text: str


class FeedbackOut(ORMModel):
    id: int
    project_id: int
    comment_text: str
    created_by: Optional[int] = None
    created_at: datetime


class FundsSummaryOut(BaseModel):
    """Used by: GET /api/funds"""

    totalDisbursed: Money
    totalSpent: Money
    remaining: Money


# ============================================================================
# Documents & Reports Models
# ============================================================================


class DocumentOut(ORMModel):
    id: int
    project_id: int
    file_name: str
    file_path: str
    document_type: Optional[str] = None
    content_type: Optional[str] = None
    size_bytes: int
    uploaded_by: Optional[int] = None
    uploaded_at: datetime


class LpjSummaryOut(FundsSummaryOut):
    latestCompletion: Optional[int] = None


class LpjReportOut(BaseModel):
    """Used by: GET /api/projects/{id}/reports/lpj"""

    project: ProjectOut
    disbursements: list[DisbursementOut]
    expenses: list[ExpenseOut]
    progress: list[ProgressOut]
    feedback: list[FeedbackOut]
    summary: LpjSummaryOut


class MonthMetricsOut(BaseModel):
    """One entry of GET /api/metrics/projects-by-month"""

    projects: int
    fundsIn: Money
    fundsOut: Money
