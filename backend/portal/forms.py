# backend/portal/forms.py
"""
Facade untuk form di aplikasi portal.

Form dikelompokkan per domain:
- forms_auth: login & registrasi
- forms_thesis: judul skripsi, pembimbing, status skripsi
- forms_submission: upload & review dokumen
- forms_guidance: jadwal bimbingan
- forms_chat: chat & asisten AI
"""

from .forms_base import DateTimeInput
from .forms_auth import SignInForm, SignUpForm
from .forms_thesis import AssignLecturerForm, ThesisForm, ThesisStatusForm
from .forms_submission import SubmissionReviewForm, SubmissionUploadForm
from .forms_guidance import GuidanceScheduleForm, RescheduleForm, ScheduleStatusForm
from .forms_chat import InsightRequestForm, MessageForm

__all__ = [
    # base widgets
    "DateTimeInput",
    # auth
    "SignInForm",
    "SignUpForm",
    # skripsi
    "AssignLecturerForm",
    "ThesisForm",
    "ThesisStatusForm",
    # dokumen
    "SubmissionReviewForm",
    "SubmissionUploadForm",
    # bimbingan
    "GuidanceScheduleForm",
    "RescheduleForm",
    "ScheduleStatusForm",
    # chat & AI
    "InsightRequestForm",
    "MessageForm",
]
