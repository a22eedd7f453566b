# backend/chat/tests.py

from django.core.exceptions import ValidationError
from django.test import TestCase
from django.utils import timezone

from chat.models import Message
from chat.services import chat_list, messages_for, post_message
from masterdata.exceptions import Forbidden
from masterdata.factories import make_admin, make_lecturer, make_student, make_thesis


class ChatTests(TestCase):
    def setUp(self):
        self.lecturer = make_lecturer(full_name="Dr. Rina")
        self.student = make_student(full_name="Andi")
        self.thesis = make_thesis(student=self.student, lecturer=self.lecturer)

    def test_pesan_urut_sesuai_waktu_kirim(self):
        post_message(self.student, self.thesis.pk, "Pak, bab 1 sudah saya upload.")
        post_message(self.lecturer, self.thesis.pk, "Baik, saya cek dulu.")
        post_message(self.student, self.thesis.pk, "Terima kasih.")

        contents = [m.content for m in messages_for(self.student, self.thesis.pk)]
        self.assertEqual(
            contents,
            ["Pak, bab 1 sudah saya upload.", "Baik, saya cek dulu.", "Terima kasih."],
        )

    def test_waktu_sama_diurutkan_sesuai_urutan_simpan(self):
        moment = timezone.now()
        first = Message.objects.create(
            thesis=self.thesis, sender=self.student, content="satu", created_at=moment
        )
        second = Message.objects.create(
            thesis=self.thesis, sender=self.lecturer, content="dua", created_at=moment
        )
        self.assertEqual(list(messages_for(self.lecturer, self.thesis.pk)), [first, second])

    def test_pesan_kosong_ditolak(self):
        with self.assertRaises(ValidationError):
            post_message(self.student, self.thesis.pk, "   ")
        self.assertFalse(Message.objects.exists())

    def test_dosen_lain_tidak_bisa_ikut_chat(self):
        with self.assertRaises(Forbidden):
            post_message(make_lecturer(), self.thesis.pk, "Halo")
        with self.assertRaises(Forbidden):
            messages_for(make_student(), self.thesis.pk)

    def test_admin_hanya_bisa_membaca(self):
        admin = make_admin()
        post_message(self.student, self.thesis.pk, "Halo")

        self.assertEqual(messages_for(admin, self.thesis.pk).count(), 1)
        with self.assertRaises(Forbidden):
            post_message(admin, self.thesis.pk, "Pengumuman")

    def test_daftar_chat(self):
        post_message(self.lecturer, self.thesis.pk, "Jangan lupa revisi.")

        chats = chat_list(self.student)
        self.assertEqual(len(chats), 1)
        self.assertEqual(chats[0].partner, self.lecturer)
        self.assertEqual(chats[0].last_message, "Jangan lupa revisi.")
        self.assertEqual(chats[0].partner_message_count, 1)

    def test_skripsi_tanpa_pembimbing_tidak_muncul_di_daftar(self):
        make_thesis(student=make_student())
        self.assertEqual(len(chat_list(self.lecturer)), 1)
