# SQLAlchemy models - import in main.py so Base.metadata has all tables
from talencor.models.user import User
from talencor.models.submission import ContactSubmission, JobApplication
from talencor.models.client import Client, ClientActivity, ClientCodeRequest
from talencor.models.job_posting import JobPosting
from talencor.models.question_bank import (
    InterviewQuestion,
    QuestionCategory,
    QuestionFavorite,
    QuestionTag,
)
from talencor.models.resume import ResumeSection, ResumeSession
from talencor.models.dynamic_link import DynamicLink

__all__ = [
    "User",
    "ContactSubmission",
    "JobApplication",
    "Client",
    "ClientActivity",
    "ClientCodeRequest",
    "JobPosting",
    "QuestionCategory",
    "QuestionTag",
    "InterviewQuestion",
    "QuestionFavorite",
    "ResumeSession",
    "ResumeSection",
    "DynamicLink",
]
