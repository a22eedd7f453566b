# backend/insight/tests.py

import json
from datetime import timedelta
from types import SimpleNamespace

from django.test import SimpleTestCase, override_settings
from django.utils import timezone

from guidance.models import GuidanceSchedule
from masterdata.exceptions import UpstreamError
from submissions.progress import ACTIVITY_ACTIVE, ACTIVITY_BEHIND, ACTIVITY_REVIEW

from . import prompts
from .client import FALLBACK_TEXT, generate_insight
from .services import schedule_optimization_context, student_performance_context


class FakeLLM:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.prompts = []

    def invoke(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=self.content)


class BuildPromptTests(SimpleTestCase):
    def test_prompt_umum(self):
        context = prompts.GeneralContext(message="Bagaimana menulis latar belakang?")
        prompt = prompts.build_prompt("student", context)

        self.assertTrue(prompt.startswith(prompts.SYSTEM_PROMPTS[prompts.KIND_GENERAL]))
        self.assertIn("\n\nBagaimana menulis latar belakang?", prompt)
        self.assertTrue(prompt.endswith('Konteks data: {"role": "student"}'))

    def test_prompt_review_file(self):
        context = prompts.FileReviewContext(
            file_name="Bab 2 Tinjauan Pustaka",
            status="revision_needed",
            comments="lengkapi referensi",
            file_type="chapter",
            version=2,
        )
        prompt = prompts.build_prompt("lecturer", context)

        self.assertTrue(prompt.startswith(prompts.SYSTEM_PROMPTS[prompts.KIND_FILE_REVIEW]))
        self.assertIn(
            "Analisis file berikut dan berikan rekomendasi untuk perbaikan: "
            "Bab 2 Tinjauan Pustaka. Status saat ini: revision_needed. "
            "Komentar sebelumnya: lengkapi referensi",
            prompt,
        )

        data = json.loads(prompt.split("Konteks data: ", 1)[1])
        self.assertEqual(data["version"], 2)
        self.assertEqual(data["role"], "lecturer")

    def test_tanpa_komentar(self):
        context = prompts.FileReviewContext(file_name="Proposal", status="submitted")
        self.assertNotIn("Komentar sebelumnya", context.to_message())


class GenerateInsightTests(SimpleTestCase):
    def test_teks_balasan_diteruskan_apa_adanya(self):
        llm = FakeLLM(content="**Saran:**\n1. Perjelas rumusan masalah.")
        result = generate_insight(
            "student", prompts.GeneralContext(message="Bantu saya"), llm=llm
        )

        self.assertTrue(result.ok)
        self.assertEqual(result.text, "**Saran:**\n1. Perjelas rumusan masalah.")
        self.assertEqual(result.kind, prompts.KIND_GENERAL)
        self.assertEqual(len(llm.prompts), 1)

    def test_gagal_memakai_teks_cadangan(self):
        llm = FakeLLM(error=ConnectionError("timeout"))
        with self.assertLogs("insight.client", level="ERROR"):
            result = generate_insight(
                "student", prompts.GeneralContext(message="Halo"), llm=llm
            )

        self.assertFalse(result.ok)
        self.assertEqual(result.text, FALLBACK_TEXT)
        self.assertIsInstance(result.error, UpstreamError)

    def test_balasan_kosong_dianggap_gagal(self):
        with self.assertLogs("insight.client", level="ERROR"):
            result = generate_insight(
                "lecturer", prompts.GeneralContext(message="Halo"), llm=FakeLLM(content="")
            )
        self.assertEqual(result.text, FALLBACK_TEXT)

    @override_settings(GEMINI_API_KEY="")
    def test_tanpa_api_key(self):
        with self.assertLogs("insight.client", level="ERROR"):
            result = generate_insight("student", prompts.GeneralContext(message="Halo"))
        self.assertFalse(result.ok)
        self.assertEqual(result.text, FALLBACK_TEXT)


class ContextBuilderTests(SimpleTestCase):
    def test_performa_mahasiswa(self):
        summaries = [
            SimpleNamespace(progress=17, status=ACTIVITY_BEHIND),
            SimpleNamespace(progress=50, status=ACTIVITY_REVIEW),
            SimpleNamespace(progress=84, status=ACTIVITY_ACTIVE),
        ]
        context = student_performance_context(summaries)

        self.assertEqual(context.total_students, 3)
        self.assertEqual((context.behind, context.review, context.active), (1, 1, 1))
        self.assertEqual(context.average_progress, 50)

    def test_performa_tanpa_mahasiswa(self):
        context = student_performance_context([])
        self.assertEqual(context.average_progress, 0)

    def test_ringkasan_jadwal(self):
        now = timezone.now()
        schedules = [
            GuidanceSchedule(status="scheduled", scheduled_at=now + timedelta(days=1)),
            GuidanceSchedule(status="rescheduled", scheduled_at=now + timedelta(days=3)),
            GuidanceSchedule(status="scheduled", scheduled_at=now - timedelta(days=1)),
            GuidanceSchedule(status="completed", scheduled_at=now - timedelta(days=5)),
            GuidanceSchedule(status="cancelled", scheduled_at=now + timedelta(days=2)),
        ]
        context = schedule_optimization_context(schedules, now=now)

        self.assertEqual(context.total_schedules, 5)
        self.assertEqual(context.upcoming, 2)
        self.assertEqual(context.completed, 1)
        self.assertEqual(context.cancelled, 1)
