# backend/insight/services.py
"""
Membentuk konteks insight dari data skripsi yang sudah ada di dashboard.
"""

from django.utils import timezone

from guidance.models import GuidanceSchedule
from submissions.progress import ACTIVITY_ACTIVE, ACTIVITY_BEHIND, ACTIVITY_REVIEW

from .prompts import (
    FileReviewContext,
    ScheduleOptimizationContext,
    StudentPerformanceContext,
    ThesisAnalysisContext,
)


def thesis_analysis_context(summary) -> ThesisAnalysisContext:
    thesis = summary.thesis
    return ThesisAnalysisContext(
        thesis_title=thesis.title,
        status=thesis.status,
        progress=summary.progress,
        total_submissions=summary.total_submissions,
        pending_reviews=summary.pending_reviews,
    )


def student_performance_context(summaries) -> StudentPerformanceContext:
    summaries = list(summaries)
    total = len(summaries)
    average = round(sum(s.progress for s in summaries) / total) if total else 0
    return StudentPerformanceContext(
        total_students=total,
        behind=sum(1 for s in summaries if s.status == ACTIVITY_BEHIND),
        review=sum(1 for s in summaries if s.status == ACTIVITY_REVIEW),
        active=sum(1 for s in summaries if s.status == ACTIVITY_ACTIVE),
        average_progress=average,
    )


def schedule_optimization_context(schedules, now=None) -> ScheduleOptimizationContext:
    schedules = list(schedules)
    now = now or timezone.now()
    open_statuses = (GuidanceSchedule.STATUS_SCHEDULED, GuidanceSchedule.STATUS_RESCHEDULED)
    return ScheduleOptimizationContext(
        total_schedules=len(schedules),
        upcoming=sum(
            1 for s in schedules if s.status in open_statuses and s.scheduled_at >= now
        ),
        completed=sum(1 for s in schedules if s.status == GuidanceSchedule.STATUS_COMPLETED),
        cancelled=sum(1 for s in schedules if s.status == GuidanceSchedule.STATUS_CANCELLED),
    )


def file_review_context(submission) -> FileReviewContext:
    return FileReviewContext(
        file_name=submission.title,
        status=submission.status,
        comments=submission.comments,
        file_type=submission.type,
        version=submission.version,
    )
