# backend/insight/prompts.py
"""
Template prompt untuk asisten AI.

Ada lima jenis konteks (``kind``) dan masing-masing punya system prompt
sendiri. Prompt akhir = system prompt + pesan + ``Konteks data: {json}``.
"""

import json
from dataclasses import asdict, dataclass, field
from typing import Optional, Union

KIND_GENERAL = "general"
KIND_THESIS_ANALYSIS = "thesis_analysis"
KIND_SCHEDULE_OPTIMIZATION = "schedule_optimization"
KIND_FILE_REVIEW = "file_review"
KIND_STUDENT_PERFORMANCE = "student_performance"

SYSTEM_PROMPTS = {
    KIND_THESIS_ANALYSIS: (
        "Anda adalah asisten AI untuk sistem manajemen skripsi. Berikan analisis "
        "mendalam tentang progress skripsi, identifikasi masalah potensial, dan "
        "berikan rekomendasi untuk meningkatkan kualitas dan progres skripsi. "
        "Jawab dalam bahasa Indonesia dengan format yang jelas dan terstruktur."
    ),
    KIND_SCHEDULE_OPTIMIZATION: (
        "Anda adalah asisten AI untuk optimalisasi jadwal bimbingan skripsi. "
        "Analisis pola jadwal, identifikasi konflik potensial, dan berikan "
        "rekomendasi untuk penjadwalan yang lebih efektif. Jawab dalam bahasa Indonesia."
    ),
    KIND_FILE_REVIEW: (
        "Anda adalah asisten AI untuk review file skripsi. Berikan analisis kualitas, "
        "struktur, dan konten file yang diupload. Identifikasi area yang perlu "
        "diperbaiki dan berikan saran konstruktif. Jawab dalam bahasa Indonesia "
        "dengan format yang mudah dipahami."
    ),
    KIND_STUDENT_PERFORMANCE: (
        "Anda adalah asisten AI untuk analisis performa mahasiswa. Evaluasi progress, "
        "pola aktivitas, dan berikan insight tentang performa akademik mahasiswa "
        "dalam pengerjaan skripsi. Jawab dalam bahasa Indonesia dengan rekomendasi "
        "yang actionable."
    ),
    KIND_GENERAL: (
        "Anda adalah asisten AI untuk sistem informasi skripsi (SISKRIPSI). Berikan "
        "bantuan yang relevan dan berguna untuk mahasiswa dan dosen dalam pengelolaan "
        "skripsi. Jawab dalam bahasa Indonesia dengan ramah dan profesional."
    ),
}


@dataclass(frozen=True)
class GeneralContext:
    message: str
    kind: str = field(default=KIND_GENERAL, init=False)

    def to_message(self):
        return self.message


@dataclass(frozen=True)
class ThesisAnalysisContext:
    thesis_title: str
    status: str
    progress: int
    total_submissions: int
    pending_reviews: int
    kind: str = field(default=KIND_THESIS_ANALYSIS, init=False)

    def to_message(self):
        return (
            f"Analisis progress skripsi berjudul \"{self.thesis_title}\" "
            f"dengan progress {self.progress}% dan berikan rekomendasi langkah berikutnya."
        )


@dataclass(frozen=True)
class ScheduleOptimizationContext:
    total_schedules: int
    upcoming: int
    completed: int
    cancelled: int
    kind: str = field(default=KIND_SCHEDULE_OPTIMIZATION, init=False)

    def to_message(self):
        return "Berikan rekomendasi untuk mengoptimalkan jadwal bimbingan berikut."


@dataclass(frozen=True)
class FileReviewContext:
    file_name: str
    status: str
    comments: str = ""
    file_type: str = ""
    version: int = 1
    kind: str = field(default=KIND_FILE_REVIEW, init=False)

    def to_message(self):
        message = (
            "Analisis file berikut dan berikan rekomendasi untuk perbaikan: "
            f"{self.file_name}. Status saat ini: {self.status}."
        )
        if self.comments:
            message += f" Komentar sebelumnya: {self.comments}"
        return message


@dataclass(frozen=True)
class StudentPerformanceContext:
    total_students: int
    behind: int
    review: int
    active: int
    average_progress: int
    kind: str = field(default=KIND_STUDENT_PERFORMANCE, init=False)

    def to_message(self):
        return "Evaluasi performa mahasiswa bimbingan berikut dan berikan insight."


InsightContext = Union[
    GeneralContext,
    ThesisAnalysisContext,
    ScheduleOptimizationContext,
    FileReviewContext,
    StudentPerformanceContext,
]


def context_data(role: Optional[str], context: InsightContext) -> dict:
    data = asdict(context)
    data.pop("kind", None)
    data.pop("message", None)
    if role:
        data["role"] = role
    return data


def build_prompt(role: Optional[str], context: InsightContext) -> str:
    """
    Susun prompt lengkap untuk satu permintaan insight.

    ``role`` adalah peran pengguna yang meminta (student/lecturer/admin);
    ikut dikirim di bagian konteks data.
    """
    system_prompt = SYSTEM_PROMPTS.get(context.kind, SYSTEM_PROMPTS[KIND_GENERAL])
    user_prompt = context.to_message()

    data = context_data(role, context)
    if data:
        user_prompt += f"\n\nKonteks data: {json.dumps(data, ensure_ascii=False)}"

    return f"{system_prompt}\n\n{user_prompt}"
