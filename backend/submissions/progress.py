# backend/submissions/progress.py
"""
Perhitungan progres skripsi dari riwayat pengumpulan file.

Semua fungsi di sini murni: hasilnya hanya bergantung pada daftar submission
(dan waktu acuan ``now``), sehingga aman dihitung ulang kapan saja.
"""

from dataclasses import dataclass
from typing import Optional

from django.utils import timezone

from .models import Submission

TOTAL_EXPECTED_STEPS = 6  # Proposal, Bab 1-5, Final
STAGES = ("Proposal", "Bab 1", "Bab 2", "Bab 3", "Bab 4", "Bab 5", "Final")
STAGE_COMPLETED = "Completed"

BEHIND_AFTER_DAYS = 7

ACTIVITY_ACTIVE = "active"
ACTIVITY_REVIEW = "review"
ACTIVITY_BEHIND = "behind"

ACTIVITY_LABELS = {
    ACTIVITY_ACTIVE: "Aktif",
    ACTIVITY_REVIEW: "Siap Direview",
    ACTIVITY_BEHIND: "Tertinggal",
}


def latest_by_lineage(submissions):
    latest = {}
    for submission in submissions:
        key = submission.lineage_key
        current = latest.get(key)
        if current is None or submission.version > current.version:
            latest[key] = submission
    return latest


def approved_count(submissions) -> int:
    return sum(
        1
        for s in latest_by_lineage(submissions).values()
        if s.status == Submission.STATUS_APPROVED
    )


def progress_percentage(approved: int) -> int:
    approved = max(0, min(approved, TOTAL_EXPECTED_STEPS))
    return round(100 * approved / TOTAL_EXPECTED_STEPS)


def current_stage(approved: int) -> str:
    if approved >= TOTAL_EXPECTED_STEPS:
        return STAGE_COMPLETED
    return STAGES[max(approved, 0)]


def last_activity(submissions):
    timestamps = [s.created_at for s in submissions if s.created_at]
    return max(timestamps) if timestamps else None


def days_since(moment, now=None) -> Optional[int]:
    if moment is None:
        return None
    now = now or timezone.now()
    return (now - moment).days


def activity_status(submissions, now=None) -> str:
    submissions = list(submissions)

    idle_days = days_since(last_activity(submissions), now)
    if idle_days is not None and idle_days > BEHIND_AFTER_DAYS:
        return ACTIVITY_BEHIND

    if any(
        s.status == Submission.STATUS_SUBMITTED
        for s in latest_by_lineage(submissions).values()
    ):
        return ACTIVITY_REVIEW

    return ACTIVITY_ACTIVE


@dataclass
class ThesisProgress:
    thesis: object
    approved: int
    progress: int
    stage: str
    status: str
    days_since_last_activity: Optional[int]
    total_submissions: int
    pending_reviews: int

    @property
    def status_label(self) -> str:
        return ACTIVITY_LABELS[self.status]


def summarize_thesis(thesis, submissions=None, now=None) -> ThesisProgress:
    if submissions is None:
        submissions = thesis.submissions.all()
    submissions = list(submissions)
    now = now or timezone.now()

    approved = approved_count(submissions)
    return ThesisProgress(
        thesis=thesis,
        approved=approved,
        progress=progress_percentage(approved),
        stage=current_stage(approved),
        status=activity_status(submissions, now),
        days_since_last_activity=days_since(last_activity(submissions), now),
        total_submissions=len(submissions),
        pending_reviews=sum(
            1 for s in submissions if s.status == Submission.STATUS_SUBMITTED
        ),
    )
