"""Database layer for NusaDana with async SQLAlchemy."""

from nusadana.db.connection import Database
from nusadana.db.models import (
    Base,
    ExpenseModel,
    FundDisbursementModel,
    ProgressFeedbackModel,
    ProgressUpdateModel,
    ProjectDocumentModel,
    ProjectModel,
    ScheduleItemModel,
    UserModel,
)

__all__ = [
    "Base",
    "Database",
    "UserModel",
    "ProjectModel",
    "ScheduleItemModel",
    "FundDisbursementModel",
    "ExpenseModel",
    "ProgressUpdateModel",
    "ProgressFeedbackModel",
    "ProjectDocumentModel",
]
