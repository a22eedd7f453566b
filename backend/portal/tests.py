# backend/portal/tests.py

import csv
import io
import shutil
import tempfile
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse

from insight.client import FALLBACK_TEXT, InsightResult
from masterdata.exceptions import UpstreamError
from masterdata.factories import (
    PASSWORD,
    make_admin,
    make_lecturer,
    make_student,
    make_submission,
    make_thesis,
    pdf_file,
)
from masterdata.models import Profile, Thesis
from submissions.models import Submission
from submissions.workflow import submit_document

from . import realtime
from .realtime import ChangeEvent, ChangeHub, ScreenChannel

MEDIA_ROOT = tempfile.mkdtemp(prefix="siskripsi-portal-test-")


class ChangeHubTests(SimpleTestCase):
    def setUp(self):
        self.hub = ChangeHub()
        self.events = []

    def test_subscriber_menerima_event_tabelnya(self):
        self.hub.subscribe("submissions", self.events.append)
        event = ChangeEvent("submissions", realtime.INSERT, 1, thesis_id=7)

        self.hub.publish(event)
        self.hub.publish(ChangeEvent("messages", realtime.INSERT, 2, thesis_id=7))

        self.assertEqual(self.events, [event])

    def test_filter_per_skripsi(self):
        self.hub.subscribe(["messages"], self.events.append, thesis_id=7)

        self.hub.publish(ChangeEvent("messages", realtime.INSERT, 1, thesis_id=8))
        self.hub.publish(ChangeEvent("messages", realtime.INSERT, 2, thesis_id=7))

        self.assertEqual([e.record_id for e in self.events], [2])

    def test_tutup_langganan_idempoten(self):
        subscription = self.hub.subscribe("thesis", self.events.append)
        subscription.close()
        subscription.close()

        self.hub.publish(ChangeEvent("thesis", realtime.UPDATE, 1))
        self.assertEqual(self.events, [])
        self.assertEqual(self.hub.subscriber_count, 0)

    def test_context_manager_melepas_langganan(self):
        with self.hub.subscribe("thesis", self.events.append):
            self.assertEqual(self.hub.subscriber_count, 1)
        self.assertEqual(self.hub.subscriber_count, 0)

    def test_tabel_tidak_dikenal(self):
        with self.assertRaises(ValueError):
            self.hub.subscribe(["nilai"], self.events.append)

    def test_subscriber_gagal_tidak_menghentikan_yang_lain(self):
        def broken(event):
            raise RuntimeError("boom")

        self.hub.subscribe("thesis", broken)
        self.hub.subscribe("thesis", self.events.append)

        with self.assertLogs("portal.realtime", level="ERROR"):
            self.hub.publish(ChangeEvent("thesis", realtime.UPDATE, 1))
        self.assertEqual(len(self.events), 1)

    def test_angka_revisi(self):
        self.hub.publish(ChangeEvent("submissions", realtime.INSERT, 1, thesis_id=3))
        self.hub.publish(ChangeEvent("submissions", realtime.UPDATE, 1, thesis_id=4))

        self.assertEqual(self.hub.revision("submissions"), 2)
        self.assertEqual(self.hub.revision("submissions", thesis_id=3), 1)
        self.assertEqual(self.hub.revision(["thesis", "messages"]), 0)


class ScreenChannelTests(SimpleTestCase):
    def setUp(self):
        self.hub = ChangeHub()
        self.rows = ["a"]

    def _refetch(self):
        return list(self.rows)

    def test_muat_ulang_setiap_ada_perubahan(self):
        with ScreenChannel("submissions", self._refetch, change_hub=self.hub) as channel:
            self.assertEqual(channel.data, ["a"])

            self.rows.append("b")
            self.hub.publish(ChangeEvent("submissions", realtime.INSERT, 2))

            self.assertEqual(channel.data, ["a", "b"])
            self.assertEqual(channel.refresh_count, 1)

        self.assertFalse(channel.is_open)
        self.assertEqual(self.hub.subscriber_count, 0)

    def test_refetch_gagal_data_lama_dipertahankan(self):
        channel = ScreenChannel("thesis", self._refetch, change_hub=self.hub).open()
        self.addCleanup(channel.close)

        def broken():
            raise ConnectionError("offline")

        channel.refetch = broken
        with self.assertLogs("portal.realtime", level="ERROR"):
            self.hub.publish(ChangeEvent("thesis", realtime.UPDATE, 1))

        self.assertEqual(channel.data, ["a"])
        self.assertEqual(channel.refresh_count, 0)
        self.assertTrue(channel.is_open)


class ChangeSignalTests(TestCase):
    def test_perubahan_model_dikirim_setelah_commit(self):
        events = []
        subscription = realtime.hub.subscribe(
            [realtime.TABLE_THESIS, realtime.TABLE_SUBMISSIONS], events.append
        )
        self.addCleanup(subscription.close)

        with self.captureOnCommitCallbacks(execute=True):
            thesis = make_thesis()
        with self.captureOnCommitCallbacks(execute=True):
            submission = make_submission(thesis)
        with self.captureOnCommitCallbacks(execute=True):
            Thesis.objects.get(pk=thesis.pk).save()

        self.assertEqual(
            [(e.table, e.event, e.record_id, e.thesis_id) for e in events],
            [
                ("thesis", realtime.INSERT, thesis.pk, thesis.pk),
                ("submissions", realtime.INSERT, submission.pk, thesis.pk),
                ("thesis", realtime.UPDATE, thesis.pk, thesis.pk),
            ],
        )

    def test_hapus_dikirim_sebagai_delete(self):
        thesis = make_thesis()
        events = []
        subscription = realtime.hub.subscribe(realtime.TABLE_THESIS, events.append)
        self.addCleanup(subscription.close)

        pk = thesis.pk
        with self.captureOnCommitCallbacks(execute=True):
            thesis.delete()

        self.assertEqual([(e.event, e.record_id) for e in events], [(realtime.DELETE, pk)])


class AuthViewTests(TestCase):
    def test_login_diarahkan_ke_dashboard_sesuai_peran(self):
        make_lecturer(email="dosen@kampus.ac.id")
        response = self.client.post(
            reverse("portal:login"),
            {"email": "dosen@kampus.ac.id", "password": PASSWORD},
        )
        self.assertRedirects(response, reverse("portal:after_login"), target_status_code=302)

        response = self.client.get(reverse("portal:after_login"))
        self.assertRedirects(response, reverse("portal:dosen_dashboard"))

    def test_login_password_salah(self):
        make_student(email="mhs@kampus.ac.id")
        response = self.client.post(
            reverse("portal:login"),
            {"email": "mhs@kampus.ac.id", "password": "salah"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Email atau password salah")

    def test_next_ke_domain_lain_diabaikan(self):
        make_student(email="mhs@kampus.ac.id")
        response = self.client.post(
            reverse("portal:login") + "?next=https://contoh.com/",
            {"email": "mhs@kampus.ac.id", "password": PASSWORD},
        )
        self.assertRedirects(response, reverse("portal:after_login"), target_status_code=302)

    def test_registrasi(self):
        response = self.client.post(
            reverse("portal:register"),
            {
                "full_name": "Rina Wati",
                "email": "rina@kampus.ac.id",
                "password": "rahasia",
                "role": Profile.ROLE_STUDENT,
                "nim_nidn": "21081010099",
                "department": "Sains Data",
            },
        )
        self.assertRedirects(response, reverse("portal:login"))
        self.assertTrue(Profile.objects.filter(email="rina@kampus.ac.id").exists())

    def test_registrasi_email_ganda(self):
        make_student(email="rina@kampus.ac.id")
        response = self.client.post(
            reverse("portal:register"),
            {
                "full_name": "Rina Wati",
                "email": "rina@kampus.ac.id",
                "password": "rahasia",
                "role": Profile.ROLE_STUDENT,
                "nim_nidn": "21081010099",
                "department": "Sains Data",
            },
        )
        self.assertContains(response, "Email sudah terdaftar")

    def test_halaman_peran_lain_ditolak(self):
        self.client.force_login(make_student().user)
        self.assertEqual(self.client.get(reverse("portal:dosen_dashboard")).status_code, 403)
        self.assertEqual(self.client.get(reverse("portal:admin_dashboard")).status_code, 403)

    def test_belum_login_diarahkan_ke_login(self):
        response = self.client.get(reverse("portal:mahasiswa_dashboard"))
        self.assertEqual(response.status_code, 302)
        self.assertIn(reverse("portal:login"), response["Location"])


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class MahasiswaViewTests(TestCase):
    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self):
        self.student = make_student()
        self.lecturer = make_lecturer()
        self.thesis = make_thesis(student=self.student, lecturer=self.lecturer)
        self.client.force_login(self.student.user)

    def test_dashboard(self):
        response = self.client.get(reverse("portal:mahasiswa_dashboard"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context["summary"].stage, "Proposal")

    def test_upload_proposal(self):
        response = self.client.post(
            reverse("portal:mahasiswa_upload"),
            {"type": "proposal", "chapter": 0, "title": "Proposal", "file": pdf_file()},
        )
        self.assertRedirects(response, reverse("portal:mahasiswa_submissions"))

        submission = Submission.objects.get()
        self.assertEqual((submission.version, submission.status), (1, "submitted"))
        self.assertEqual(submission.student, self.student)

    def test_upload_png_ditolak(self):
        image = SimpleUploadedFile("grafik.png", b"\x89PNG", content_type="image/png")
        response = self.client.post(
            reverse("portal:mahasiswa_upload"),
            {"type": "proposal", "chapter": 0, "title": "Proposal", "file": image},
        )
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Hanya file PDF, DOC, dan DOCX yang diizinkan.")
        self.assertFalse(Submission.objects.exists())

    def test_unduh_file_sendiri(self):
        submission = submit_document(
            self.student, self.thesis.pk, "proposal", "Proposal", pdf_file("proposal.pdf")
        )
        response = self.client.get(reverse("portal:submission_download", args=[submission.pk]))

        self.assertEqual(response.status_code, 200)
        self.assertIn("attachment", response["Content-Disposition"])
        self.assertEqual(b"".join(response.streaming_content), b"%PDF-1.4 dummy")
        response.close()

    def test_tidak_bisa_unduh_file_orang_lain(self):
        other = make_submission(make_thesis())
        response = self.client.get(reverse("portal:submission_download", args=[other.pk]))
        self.assertRedirects(
            response, reverse("portal:after_login"), fetch_redirect_response=False
        )

    def test_daftar_judul_skripsi(self):
        other = make_student()
        self.client.force_login(other.user)
        response = self.client.post(
            reverse("portal:mahasiswa_thesis"),
            {"title": "Deteksi Hoaks", "description": "", "keywords": "nlp, bert"},
        )
        self.assertRedirects(response, reverse("portal:mahasiswa_dashboard"))
        thesis = Thesis.objects.get(student=other)
        self.assertEqual(thesis.keywords, ["nlp", "bert"])


class DosenViewTests(TestCase):
    def setUp(self):
        self.lecturer = make_lecturer(nim_nidn="0011223344")
        self.student = make_student(full_name="Andi", nim_nidn="21081010001")
        self.thesis = make_thesis(student=self.student, lecturer=self.lecturer)
        self.client.force_login(self.lecturer.user)

    def test_dashboard(self):
        make_thesis()
        response = self.client.get(reverse("portal:dosen_dashboard"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.context["supervised"]), 1)
        self.assertEqual(len(response.context["pool"]), 1)

    def test_review_file(self):
        submission = make_submission(self.thesis)
        response = self.client.post(
            reverse("portal:dosen_review", args=[submission.pk]),
            {"status": "revision_needed", "comments": "perbaiki metodologi"},
        )
        self.assertRedirects(
            response, reverse("portal:dosen_thesis_detail", args=[self.thesis.pk])
        )

        submission.refresh_from_db()
        self.assertEqual(submission.status, "revision_needed")
        self.assertEqual(submission.comments, "perbaiki metodologi")

    def test_review_skripsi_dosen_lain_ditolak(self):
        submission = make_submission(make_thesis(lecturer=make_lecturer()))
        response = self.client.post(
            reverse("portal:dosen_review", args=[submission.pk]),
            {"status": "approved"},
        )
        self.assertRedirects(response, reverse("portal:dosen_dashboard"))
        submission.refresh_from_db()
        self.assertEqual(submission.status, "submitted")

    def test_klaim_skripsi(self):
        pool = make_thesis()
        response = self.client.post(reverse("portal:dosen_claim_thesis", args=[pool.pk]))
        self.assertRedirects(response, reverse("portal:dosen_thesis_detail", args=[pool.pk]))
        pool.refresh_from_db()
        self.assertEqual(pool.lecturer, self.lecturer)

    def test_buat_jadwal(self):
        response = self.client.post(
            reverse("portal:dosen_schedule_create"),
            {
                "student": self.student.pk,
                "title": "Bimbingan Bab 1",
                "scheduled_at": "2030-01-15T10:00",
                "notes": "",
            },
        )
        self.assertRedirects(response, reverse("portal:dosen_schedule_list"))
        self.assertEqual(self.thesis.guidance_schedules.count(), 1)

    def test_export_progress_csv(self):
        make_submission(self.thesis, status="approved")
        make_thesis(lecturer=make_lecturer())

        response = self.client.get(reverse("portal:dosen_progress_export"))
        self.assertEqual(response["Content-Type"], "text/csv")
        self.assertIn("progress_bimbingan_0011223344.csv", response["Content-Disposition"])

        rows = list(csv.reader(io.StringIO(response.content.decode())))
        self.assertEqual(rows[0][:5], ["NIM", "Nama Mahasiswa", "Judul Skripsi", "Status Skripsi", "Progress (%)"])
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[1][0], "21081010001")
        self.assertEqual(rows[1][4], "17")


class AdminViewTests(TestCase):
    def setUp(self):
        self.admin = make_admin()
        self.client.force_login(self.admin.user)

    def test_dashboard(self):
        make_thesis(lecturer=make_lecturer())
        response = self.client.get(reverse("portal:admin_dashboard"))
        self.assertEqual(response.status_code, 200)
        stats = response.context["stats"]
        self.assertEqual(stats["total_theses"], 1)
        self.assertEqual(stats["total_lecturers"], 1)

    def test_tetapkan_pembimbing(self):
        thesis = make_thesis()
        lecturer = make_lecturer()
        response = self.client.post(
            reverse("portal:admin_assign_lecturer", args=[thesis.pk]),
            {f"t{thesis.pk}-lecturer": lecturer.pk},
        )
        self.assertRedirects(response, reverse("portal:admin_dashboard"))
        thesis.refresh_from_db()
        self.assertEqual(thesis.lecturer, lecturer)


class SharedViewTests(TestCase):
    def setUp(self):
        self.lecturer = make_lecturer()
        self.student = make_student()
        self.thesis = make_thesis(student=self.student, lecturer=self.lecturer)

    def test_kirim_pesan_chat(self):
        self.client.force_login(self.student.user)
        url = reverse("portal:chat_detail", args=[self.thesis.pk])

        response = self.client.post(url, {"content": "Pak, bab 1 sudah saya upload."})
        self.assertRedirects(response, url)

        response = self.client.get(url)
        self.assertContains(response, "Pak, bab 1 sudah saya upload.")

    def test_angka_revisi_berubah_setelah_perubahan(self):
        self.client.force_login(self.student.user)
        url = reverse("portal:changes")
        params = {"tables": "submissions", "thesis": self.thesis.pk}

        before = self.client.get(url, params).json()["revision"]
        with self.captureOnCommitCallbacks(execute=True):
            make_submission(self.thesis)
        after = self.client.get(url, params).json()

        self.assertEqual(after["tables"], ["submissions"])
        self.assertEqual(after["revision"], before + 1)

    def test_revisi_skripsi_orang_lain_ditolak(self):
        self.client.force_login(make_student().user)
        response = self.client.get(
            reverse("portal:changes"), {"tables": "messages", "thesis": self.thesis.pk}
        )
        self.assertEqual(response.status_code, 403)

    @mock.patch("portal.views_shared.generate_insight")
    def test_asisten_ai(self, generate):
        generate.return_value = InsightResult(text="Perjelas rumusan masalah.", kind="general")
        self.client.force_login(self.student.user)

        response = self.client.post(
            reverse("portal:insight_request"),
            {"kind": "general", "message": "Bagaimana menulis bab 1?"},
        )
        self.assertContains(response, "Perjelas rumusan masalah.")
        role, context = generate.call_args[0]
        self.assertEqual(role, Profile.ROLE_STUDENT)
        self.assertEqual(context.message, "Bagaimana menulis bab 1?")

    @mock.patch("portal.views_shared.generate_insight")
    def test_asisten_ai_tidak_tersedia(self, generate):
        generate.return_value = InsightResult(
            text=FALLBACK_TEXT, kind="thesis_analysis", error=UpstreamError()
        )
        self.client.force_login(self.student.user)

        response = self.client.post(
            reverse("portal:insight_request"), {"kind": "thesis_analysis"}
        )
        self.assertContains(response, "Asisten AI sedang tidak tersedia.")
        self.assertContains(response, "Maaf, terjadi kesalahan")
