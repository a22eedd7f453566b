# backend/submissions/tests.py

import shutil
import tempfile
from datetime import timedelta

from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import IntegrityError, transaction
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from masterdata.exceptions import Forbidden, InvalidTransition, NotFound
from masterdata.factories import (
    PASSWORD,
    make_lecturer,
    make_student,
    make_submission,
    make_thesis,
    pdf_file,
)
from submissions.models import Submission, validate_thesis_document
from submissions.progress import (
    ACTIVITY_ACTIVE,
    ACTIVITY_BEHIND,
    ACTIVITY_REVIEW,
    activity_status,
    approved_count,
    current_stage,
    progress_percentage,
    summarize_thesis,
)
from submissions.workflow import (
    allowed_targets,
    check_transition,
    get_submission_for,
    lineage_history,
    review_submission,
    submit_document,
)

MEDIA_ROOT = tempfile.mkdtemp(prefix="siskripsi-test-")

# urutan checklist: proposal, bab 1-5, final
CHECKLIST = [("proposal", 0)] + [("chapter", n) for n in range(1, 6)] + [("final", 0)]


def _unsaved(type="proposal", chapter=0, version=1, status="approved", created_at=None):
    return Submission(
        thesis_id=1,
        type=type,
        chapter=chapter,
        version=version,
        status=status,
        created_at=created_at or timezone.now(),
    )


class ValidatorDokumenTests(SimpleTestCase):
    def test_menolak_png(self):
        file_obj = SimpleUploadedFile("grafik.png", b"\x89PNG", content_type="image/png")
        with self.assertRaises(ValidationError):
            validate_thesis_document(file_obj)

    def test_menolak_pdf_palsu(self):
        file_obj = SimpleUploadedFile("skripsi.pdf", b"dummy", content_type="image/png")
        with self.assertRaises(ValidationError):
            validate_thesis_document(file_obj)

    def test_menolak_ukuran_lebih_dari_10_mb(self):
        big_content = b"x" * (10 * 1024 * 1024 + 1)
        with self.assertRaises(ValidationError):
            validate_thesis_document(pdf_file(content=big_content))

    def test_menerima_pdf_doc_docx(self):
        validate_thesis_document(pdf_file())
        validate_thesis_document(
            SimpleUploadedFile("bab1.doc", b"dummy", content_type="application/msword")
        )
        validate_thesis_document(
            SimpleUploadedFile(
                "bab2.docx",
                b"dummy",
                content_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            )
        )


class TransitionTableTests(SimpleTestCase):
    def test_submitted_ke_submitted_ditolak(self):
        for role in ("student", "lecturer"):
            with self.assertRaises(InvalidTransition):
                check_transition("submitted", "submitted", role)

    def test_mahasiswa_tidak_bisa_menyetujui(self):
        with self.assertRaises(Forbidden):
            check_transition("submitted", "approved", "student")
        with self.assertRaises(Forbidden):
            check_transition("under_review", "rejected", "student")

    def test_dosen_tidak_bisa_membuat_pengumpulan_baru(self):
        with self.assertRaises(Forbidden):
            check_transition(None, "submitted", "lecturer")

    def test_status_akhir_tidak_bisa_diubah(self):
        for final in ("approved", "rejected"):
            for target in ("submitted", "under_review", "approved", "revision_needed"):
                with self.assertRaises(InvalidTransition):
                    check_transition(final, target, "lecturer")

    def test_target_yang_diizinkan(self):
        self.assertEqual(
            set(allowed_targets("submitted", "lecturer")),
            {"under_review", "approved", "revision_needed", "rejected"},
        )
        self.assertEqual(
            set(allowed_targets("under_review", "lecturer")),
            {"approved", "revision_needed", "rejected"},
        )
        self.assertEqual(allowed_targets("revision_needed", "student"), ["submitted"])
        self.assertEqual(allowed_targets("revision_needed", "lecturer"), [])


class ProgressTests(SimpleTestCase):
    def _approved(self, count):
        return [_unsaved(type, chapter) for type, chapter in CHECKLIST[:count]]

    def test_persentase_progress(self):
        # 7 lineage disetujui (termasuk final) tetap 100
        expected = [0, 17, 33, 50, 67, 83, 100, 100]
        for count, value in enumerate(expected):
            self.assertEqual(progress_percentage(approved_count(self._approved(count))), value)

    def test_progress_tidak_melebihi_100(self):
        self.assertEqual(progress_percentage(7), 100)
        self.assertEqual(progress_percentage(12), 100)

    def test_tahap_saat_ini(self):
        self.assertEqual(current_stage(0), "Proposal")
        self.assertEqual(current_stage(1), "Bab 1")
        self.assertEqual(current_stage(3), "Bab 3")
        self.assertEqual(current_stage(5), "Bab 5")
        self.assertEqual(current_stage(6), "Completed")
        self.assertEqual(current_stage(7), "Completed")

    def test_hanya_versi_terakhir_yang_dihitung(self):
        submissions = [
            _unsaved("proposal", version=1, status="revision_needed"),
            _unsaved("proposal", version=2, status="approved"),
            _unsaved("chapter", 1, version=1, status="approved"),
            _unsaved("chapter", 1, version=2, status="submitted"),
        ]
        self.assertEqual(approved_count(submissions), 1)

    def test_bab_berbeda_dihitung_terpisah(self):
        submissions = [_unsaved("chapter", n) for n in (1, 2, 2)]
        self.assertEqual(approved_count(submissions), 2)

    def test_perhitungan_idempoten(self):
        submissions = self._approved(4)
        self.assertEqual(approved_count(submissions), approved_count(list(submissions)))


class ActivityStatusTests(SimpleTestCase):
    def setUp(self):
        self.now = timezone.now()

    def test_tertinggal_lebih_diutamakan_dari_review(self):
        old = self.now - timedelta(days=8)
        submissions = [_unsaved(status="submitted", created_at=old)]
        self.assertEqual(activity_status(submissions, self.now), ACTIVITY_BEHIND)

    def test_siap_direview(self):
        submissions = [_unsaved(status="submitted", created_at=self.now - timedelta(days=2))]
        self.assertEqual(activity_status(submissions, self.now), ACTIVITY_REVIEW)

    def test_tujuh_hari_belum_tertinggal(self):
        submissions = [_unsaved(status="approved", created_at=self.now - timedelta(days=7))]
        self.assertEqual(activity_status(submissions, self.now), ACTIVITY_ACTIVE)

    def test_tanpa_pengumpulan_dianggap_aktif(self):
        self.assertEqual(activity_status([], self.now), ACTIVITY_ACTIVE)


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class WorkflowTests(TestCase):
    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self):
        self.student = make_student()
        self.lecturer = make_lecturer()
        self.thesis = make_thesis(student=self.student, lecturer=self.lecturer)

    def _upload(self, type="proposal", chapter=None, name="proposal.pdf"):
        return submit_document(
            self.student,
            self.thesis.pk,
            type,
            f"Dokumen {type}",
            pdf_file(name),
            chapter=chapter,
        )

    def test_skenario_revisi_proposal(self):
        v1 = self._upload()
        self.assertEqual((v1.version, v1.status), (1, "submitted"))

        review_submission(self.lecturer, v1.pk, "revision_needed", "fix scope")

        v2 = self._upload(name="proposal-revisi.pdf")
        self.assertEqual((v2.version, v2.status), (2, "submitted"))

        v1.refresh_from_db()
        self.assertEqual(v1.status, "revision_needed")
        self.assertEqual(v1.comments, "fix scope")
        self.assertEqual([s.version for s in lineage_history(v2)], [1, 2])

        review_submission(self.lecturer, v2.pk, "approved")

        summary = summarize_thesis(self.thesis)
        self.assertEqual(summary.approved, 1)
        self.assertEqual(summary.progress, 17)
        self.assertEqual(summary.stage, "Bab 1")

    def test_upload_ulang_saat_menunggu_review_ditolak(self):
        self._upload()
        with self.assertRaises(InvalidTransition):
            self._upload()
        self.assertEqual(Submission.objects.count(), 1)

    def test_lineage_disetujui_atau_ditolak_tertutup(self):
        approved = self._upload()
        review_submission(self.lecturer, approved.pk, "approved")
        with self.assertRaises(InvalidTransition):
            self._upload()

    def test_versi_per_bab_terpisah(self):
        bab1 = self._upload("chapter", 1, "bab1.pdf")
        bab2 = self._upload("chapter", 2, "bab2.pdf")
        self.assertEqual((bab1.version, bab2.version), (1, 1))
        self.assertEqual(bab1.chapter, 1)

    def test_bab_wajib_diisi_untuk_jenis_bab(self):
        with self.assertRaises(ValidationError) as ctx:
            self._upload("chapter", None, "bab.pdf")
        self.assertIn("chapter", ctx.exception.message_dict)

    def test_png_ditolak_sebelum_disimpan(self):
        image = SimpleUploadedFile("foto.png", b"\x89PNG", content_type="image/png")
        with self.assertRaises(ValidationError):
            submit_document(self.student, self.thesis.pk, "proposal", "Proposal", image)
        self.assertFalse(Submission.objects.exists())

    def test_mahasiswa_lain_tidak_bisa_upload(self):
        with self.assertRaises(Forbidden):
            submit_document(make_student(), self.thesis.pk, "proposal", "Proposal", pdf_file())

    def test_dosen_bukan_pembimbing_tidak_bisa_menyetujui(self):
        submission = self._upload()
        with self.assertRaises(Forbidden):
            review_submission(make_lecturer(), submission.pk, "approved")

        submission.refresh_from_db()
        self.assertEqual(submission.status, "submitted")

    def test_dosen_boleh_review_skripsi_di_pool(self):
        pool_thesis = make_thesis()
        submission = make_submission(pool_thesis)
        reviewed = review_submission(make_lecturer(), submission.pk, "under_review")
        self.assertEqual(reviewed.status, "under_review")

    def test_mahasiswa_tidak_bisa_mereview(self):
        submission = self._upload()
        with self.assertRaises(Forbidden):
            review_submission(self.student, submission.pk, "approved")

    def test_review_status_tidak_sah_tidak_disimpan(self):
        submission = make_submission(self.thesis, status="approved")
        with self.assertRaises(InvalidTransition):
            review_submission(self.lecturer, submission.pk, "revision_needed", "ubah")

        submission.refresh_from_db()
        self.assertEqual(submission.status, "approved")
        self.assertEqual(submission.comments, "")

    def test_versi_ganda_ditolak_database(self):
        make_submission(self.thesis, version=1)
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                make_submission(self.thesis, version=1)

    def test_akses_file(self):
        submission = make_submission(self.thesis)
        self.assertEqual(get_submission_for(self.student, submission.pk), submission)
        with self.assertRaises(Forbidden):
            get_submission_for(make_student(), submission.pk)
        with self.assertRaises(NotFound):
            get_submission_for(self.student, 9999)


class SubmissionAdminTests(TestCase):
    def setUp(self):
        superuser = User.objects.create_superuser(
            "root@kampus.ac.id", "root@kampus.ac.id", PASSWORD
        )
        self.client.force_login(superuser)
        self.submission = make_submission(make_thesis(), status="approved")

    def test_status_tidak_bisa_diubah_dari_admin(self):
        response = self.client.post(
            reverse("admin:submissions_submission_change", args=[self.submission.pk]),
            {"status": "submitted", "comments": "dibuka lagi"},
        )

        self.assertEqual(response.status_code, 302)
        self.submission.refresh_from_db()
        self.assertEqual(self.submission.status, "approved")
        self.assertEqual(self.submission.comments, "")

    def test_tidak_bisa_menambah_dari_admin(self):
        response = self.client.get(reverse("admin:submissions_submission_add"))
        self.assertEqual(response.status_code, 403)
