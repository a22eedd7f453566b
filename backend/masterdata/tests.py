# backend/masterdata/tests.py

from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.db import connection
from django.test import RequestFactory, TestCase
from django.test.utils import CaptureQueriesContext
from django.urls import reverse

from masterdata.auth import (
    auth_error_message,
    register_account,
    sign_in,
)
from masterdata.capabilities import capability_for
from masterdata.exceptions import AuthError, Forbidden, InvalidTransition, NotFound
from masterdata.factories import (
    PASSWORD,
    make_admin,
    make_lecturer,
    make_student,
    make_submission,
    make_thesis,
)
from masterdata.models import Profile, Thesis
from masterdata.services import (
    assign_lecturer,
    claim_thesis,
    get_thesis,
    register_thesis,
    set_thesis_status,
    update_thesis,
)
from portal import realtime


class ProfileModelTests(TestCase):
    def test_peran_tidak_dapat_diubah(self):
        profile = make_student()
        profile.role = Profile.ROLE_LECTURER
        with self.assertRaises(ValidationError):
            profile.save()

        profile.refresh_from_db()
        self.assertEqual(profile.role, Profile.ROLE_STUDENT)

    def test_field_lain_tetap_bisa_diubah(self):
        profile = make_student()
        profile.phone = "08123456789"
        profile.save()
        profile.refresh_from_db()
        self.assertEqual(profile.phone, "08123456789")


class AuthErrorMessageTests(TestCase):
    def test_pemetaan_pesan_error(self):
        self.assertEqual(
            auth_error_message("Invalid login credentials"), "Email atau password salah"
        )
        self.assertEqual(
            auth_error_message("User already registered"), "Email sudah terdaftar"
        )
        self.assertEqual(
            auth_error_message("Email not confirmed"),
            "Silakan verifikasi email Anda terlebih dahulu",
        )
        self.assertEqual(
            auth_error_message("Password should be at least 6 characters"),
            "Password minimal 6 karakter",
        )
        self.assertEqual(auth_error_message("Invalid email"), "Format email tidak valid")

    def test_pesan_tidak_dikenal_diteruskan_apa_adanya(self):
        self.assertEqual(auth_error_message("Server meledak"), "Server meledak")
        self.assertEqual(auth_error_message(None), "Terjadi kesalahan tidak terduga")


class RegisterAccountTests(TestCase):
    def _register(self, **overrides):
        data = {
            "email": "Budi@Kampus.ac.id",
            "password": "rahasia123",
            "full_name": "Budi Santoso",
            "role": Profile.ROLE_STUDENT,
            "nim_nidn": "21081010001",
            "department": "Sains Data",
        }
        data.update(overrides)
        return register_account(**data)

    def test_membuat_user_dan_profil(self):
        profile = self._register()

        self.assertEqual(profile.email, "budi@kampus.ac.id")
        self.assertEqual(profile.user.username, "budi@kampus.ac.id")
        self.assertTrue(profile.user.check_password("rahasia123"))
        self.assertTrue(profile.is_student)

    def test_email_ganda_ditolak(self):
        self._register()
        with self.assertRaises(AuthError) as ctx:
            self._register(full_name="Budi Lain")
        self.assertEqual(ctx.exception.message, "Email sudah terdaftar")
        self.assertEqual(Profile.objects.count(), 1)

    def test_password_pendek_ditolak(self):
        with self.assertRaises(ValidationError) as ctx:
            self._register(password="123")
        self.assertIn("password", ctx.exception.message_dict)
        self.assertFalse(User.objects.exists())

    def test_email_tidak_valid_ditolak(self):
        with self.assertRaises(ValidationError) as ctx:
            self._register(email="bukan-email")
        self.assertEqual(
            ctx.exception.message_dict["email"], ["Format email tidak valid"]
        )


class SignInTests(TestCase):
    def setUp(self):
        self.profile = make_student(email="siti@kampus.ac.id")

    def _request(self):
        request = RequestFactory().post("/portal/login/")
        request.session = self.client.session
        return request

    def test_password_salah(self):
        with self.assertRaises(AuthError) as ctx:
            sign_in(self._request(), "siti@kampus.ac.id", "salah")
        self.assertEqual(ctx.exception.message, "Email atau password salah")

    def test_akun_belum_aktif(self):
        self.profile.user.is_active = False
        self.profile.user.save()

        with self.assertRaises(AuthError) as ctx:
            sign_in(self._request(), "siti@kampus.ac.id", PASSWORD)
        self.assertEqual(
            ctx.exception.message, "Silakan verifikasi email Anda terlebih dahulu"
        )

    def test_login_berhasil(self):
        user = sign_in(self._request(), "SITI@kampus.ac.id", PASSWORD)
        self.assertEqual(user.pk, self.profile.user.pk)


class CapabilityTests(TestCase):
    def setUp(self):
        self.lecturer = make_lecturer()
        self.other_lecturer = make_lecturer()
        self.own = make_thesis(lecturer=self.lecturer)
        self.pool = make_thesis()
        self.foreign = make_thesis(lecturer=self.other_lecturer)

    def test_dosen_melihat_bimbingan_dan_pool(self):
        visible = set(capability_for(self.lecturer).visible_theses())
        self.assertEqual(visible, {self.own, self.pool})

    def test_dosen_tidak_bisa_review_skripsi_dosen_lain(self):
        cap = capability_for(self.lecturer)
        self.assertTrue(cap.can_review(self.own))
        self.assertTrue(cap.can_review(self.pool))
        self.assertFalse(cap.can_review(self.foreign))

    def test_mahasiswa_hanya_skripsinya_sendiri(self):
        cap = capability_for(self.own.student)
        self.assertEqual(list(cap.visible_theses()), [self.own])
        self.assertTrue(cap.can_upload_to(self.own))
        self.assertFalse(cap.can_upload_to(self.pool))
        self.assertFalse(cap.can_review(self.own))

    def test_profil_kosong_ditolak(self):
        with self.assertRaises(Forbidden):
            capability_for(None)


class ThesisServiceTests(TestCase):
    def setUp(self):
        self.student = make_student()
        self.lecturer_a = make_lecturer()
        self.lecturer_b = make_lecturer()
        self.admin = make_admin()

    def test_daftar_judul_dan_kata_kunci(self):
        thesis = register_thesis(
            self.student, "  Prediksi Curah Hujan  ", keywords="lstm, cuaca, "
        )
        self.assertEqual(thesis.title, "Prediksi Curah Hujan")
        self.assertEqual(thesis.keywords, ["lstm", "cuaca"])
        self.assertEqual(thesis.status, Thesis.STATUS_DRAFT)
        self.assertTrue(thesis.is_unassigned)

    def test_satu_mahasiswa_satu_skripsi(self):
        register_thesis(self.student, "Judul Pertama")
        with self.assertRaises(ValidationError):
            register_thesis(self.student, "Judul Kedua")

    def test_dosen_tidak_bisa_daftar_judul(self):
        with self.assertRaises(Forbidden):
            register_thesis(self.lecturer_a, "Judul")

    def test_edit_judul_hanya_saat_draft(self):
        thesis = register_thesis(self.student, "Judul Lama")
        update_thesis(self.student, thesis.pk, "Judul Baru")
        self.assertEqual(get_thesis(thesis.pk).title, "Judul Baru")

        Thesis.objects.filter(pk=thesis.pk).update(status=Thesis.STATUS_SUBMITTED)
        with self.assertRaises(InvalidTransition):
            update_thesis(self.student, thesis.pk, "Judul Lain")

    def test_klaim_pertama_yang_menang(self):
        thesis = make_thesis(student=self.student)

        claim_thesis(self.lecturer_a, thesis.pk)
        with self.assertRaises(Forbidden):
            claim_thesis(self.lecturer_b, thesis.pk)

        thesis.refresh_from_db()
        self.assertEqual(thesis.lecturer, self.lecturer_a)

        # klaim ulang oleh pembimbing yang sama tidak mengubah apa pun
        self.assertEqual(claim_thesis(self.lecturer_a, thesis.pk).lecturer, self.lecturer_a)

    def test_skripsi_tidak_ditemukan(self):
        with self.assertRaises(NotFound):
            claim_thesis(self.lecturer_a, 9999)

    def test_hanya_admin_yang_menetapkan_pembimbing(self):
        thesis = make_thesis(student=self.student)
        with self.assertRaises(Forbidden):
            assign_lecturer(self.lecturer_a, thesis.pk, self.lecturer_a.pk)

        assign_lecturer(self.admin, thesis.pk, self.lecturer_b.pk)
        self.assertEqual(get_thesis(thesis.pk).lecturer, self.lecturer_b)

        assign_lecturer(self.admin, thesis.pk, None)
        self.assertIsNone(get_thesis(thesis.pk).lecturer)

    def test_pembimbing_harus_dosen(self):
        thesis = make_thesis(student=self.student)
        with self.assertRaises(ValidationError):
            assign_lecturer(self.admin, thesis.pk, make_student().pk)

    def test_status_skripsi_oleh_pembimbing(self):
        thesis = make_thesis(student=self.student, lecturer=self.lecturer_a)

        with self.assertRaises(Forbidden):
            set_thesis_status(self.lecturer_b, thesis.pk, Thesis.STATUS_APPROVED)

        updated = set_thesis_status(self.lecturer_a, thesis.pk, Thesis.STATUS_APPROVED)
        self.assertEqual(updated.status, Thesis.STATUS_APPROVED)
        self.assertIsNotNone(updated.approved_at)

    def test_status_skripsi_tidak_dikenal(self):
        thesis = make_thesis(student=self.student, lecturer=self.lecturer_a)
        with self.assertRaises(ValidationError):
            set_thesis_status(self.lecturer_a, thesis.pk, "selesai")


class ThesisAdminTests(TestCase):
    def setUp(self):
        self.superuser = User.objects.create_superuser(
            "root@kampus.ac.id", "root@kampus.ac.id", PASSWORD
        )
        self.client.force_login(self.superuser)
        self.changelist = reverse("admin:masterdata_thesis_changelist")

    def test_lepas_pembimbing_mengirim_notifikasi(self):
        thesis = make_thesis(lecturer=make_lecturer())
        events = []
        subscription = realtime.hub.subscribe(realtime.TABLE_THESIS, events.append)
        self.addCleanup(subscription.close)

        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(
                self.changelist,
                {"action": "release_to_pool", "_selected_action": [thesis.pk]},
            )

        self.assertEqual(response.status_code, 302)
        thesis.refresh_from_db()
        self.assertIsNone(thesis.lecturer)
        self.assertEqual(
            [(e.event, e.record_id) for e in events], [(realtime.UPDATE, thesis.pk)]
        )

    def test_ubah_status_mengisi_waktu_persetujuan(self):
        thesis = make_thesis(lecturer=make_lecturer())
        response = self.client.post(
            reverse("admin:masterdata_thesis_change", args=[thesis.pk]),
            {
                "student": thesis.student.pk,
                "lecturer": thesis.lecturer.pk,
                "title": thesis.title,
                "description": "",
                "keywords": "[]",
                "status": Thesis.STATUS_APPROVED,
            },
        )

        self.assertEqual(response.status_code, 302)
        thesis.refresh_from_db()
        self.assertEqual(thesis.status, Thesis.STATUS_APPROVED)
        self.assertIsNotNone(thesis.approved_at)

    def test_jumlah_query_daftar_tidak_bergantung_jumlah_baris(self):
        def count_queries():
            with CaptureQueriesContext(connection) as ctx:
                response = self.client.get(self.changelist)
            self.assertEqual(response.status_code, 200)
            return len(ctx.captured_queries)

        lecturer = make_lecturer()
        make_submission(make_thesis(lecturer=lecturer))
        count_queries()
        single = count_queries()

        for _ in range(3):
            make_submission(make_thesis(lecturer=lecturer), status="approved")
        self.assertEqual(count_queries(), single)
