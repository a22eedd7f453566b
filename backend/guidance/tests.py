# backend/guidance/tests.py

from datetime import timedelta

from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from guidance.models import GuidanceSchedule
from guidance.services import (
    create_schedule,
    reschedule,
    schedules_for,
    upcoming_for,
    update_schedule_status,
)
from masterdata.exceptions import Forbidden, InvalidTransition, NotFound
from masterdata.factories import (
    PASSWORD,
    make_admin,
    make_lecturer,
    make_student,
    make_thesis,
)
from portal import realtime


class GuidanceScheduleTests(TestCase):
    def setUp(self):
        self.lecturer = make_lecturer()
        self.student = make_student()
        self.thesis = make_thesis(student=self.student, lecturer=self.lecturer)
        self.tomorrow = timezone.now() + timedelta(days=1)

    def _create(self, **overrides):
        data = {
            "title": "Bimbingan Bab 2",
            "scheduled_at": self.tomorrow,
            "notes": "Bawa draft terbaru",
        }
        data.update(overrides)
        return create_schedule(self.lecturer, self.student.pk, **data)

    def test_dosen_membuat_jadwal(self):
        schedule = self._create()

        self.assertEqual(schedule.status, GuidanceSchedule.STATUS_SCHEDULED)
        self.assertEqual(schedule.thesis, self.thesis)
        self.assertEqual(schedule.student, self.student)
        self.assertEqual(schedule.lecturer, self.lecturer)

    def test_judul_wajib_diisi(self):
        with self.assertRaises(ValidationError):
            self._create(title="  ")
        self.assertFalse(GuidanceSchedule.objects.exists())

    def test_mahasiswa_bukan_bimbingan(self):
        other = make_thesis(lecturer=make_lecturer())
        pool = make_thesis()
        for thesis in (other, pool):
            with self.assertRaises(NotFound):
                create_schedule(
                    self.lecturer, thesis.student.pk, "Bimbingan", self.tomorrow
                )

    def test_mahasiswa_tidak_bisa_membuat_jadwal(self):
        with self.assertRaises(Forbidden):
            create_schedule(self.student, self.student.pk, "Bimbingan", self.tomorrow)

    def test_tandai_selesai_idempoten(self):
        schedule = self._create()

        update_schedule_status(self.lecturer, schedule.pk, GuidanceSchedule.STATUS_COMPLETED)
        again = update_schedule_status(
            self.lecturer, schedule.pk, GuidanceSchedule.STATUS_COMPLETED
        )
        self.assertEqual(again.status, GuidanceSchedule.STATUS_COMPLETED)

    def test_jadwal_selesai_tidak_bisa_dibatalkan(self):
        schedule = self._create()
        update_schedule_status(self.lecturer, schedule.pk, GuidanceSchedule.STATUS_COMPLETED)

        with self.assertRaises(InvalidTransition):
            update_schedule_status(
                self.lecturer, schedule.pk, GuidanceSchedule.STATUS_CANCELLED
            )

    def test_jadwal_tidak_ditemukan(self):
        with self.assertRaises(NotFound):
            update_schedule_status(self.lecturer, 9999, GuidanceSchedule.STATUS_COMPLETED)

    def test_dosen_lain_tidak_bisa_mengubah(self):
        schedule = self._create()
        with self.assertRaises(Forbidden):
            update_schedule_status(
                make_lecturer(), schedule.pk, GuidanceSchedule.STATUS_COMPLETED
            )

    def test_jadwal_ulang(self):
        schedule = self._create()
        later = self.tomorrow + timedelta(days=2)

        moved = reschedule(self.lecturer, schedule.pk, later)
        self.assertEqual(moved.status, GuidanceSchedule.STATUS_RESCHEDULED)
        self.assertEqual(moved.scheduled_at, later)

        done = update_schedule_status(
            self.lecturer, schedule.pk, GuidanceSchedule.STATUS_COMPLETED
        )
        self.assertEqual(done.status, GuidanceSchedule.STATUS_COMPLETED)

    def test_jadwal_dibatalkan_tidak_bisa_dijadwal_ulang(self):
        schedule = self._create()
        update_schedule_status(self.lecturer, schedule.pk, GuidanceSchedule.STATUS_CANCELLED)
        with self.assertRaises(InvalidTransition):
            reschedule(self.lecturer, schedule.pk, self.tomorrow)

    def test_daftar_jadwal_per_peran(self):
        own = self._create()
        other_thesis = make_thesis(lecturer=make_lecturer())
        other = GuidanceSchedule.objects.create(
            thesis=other_thesis,
            title="Bimbingan lain",
            scheduled_at=self.tomorrow,
        )

        self.assertEqual(list(schedules_for(self.student)), [own])
        self.assertEqual(list(schedules_for(self.lecturer)), [own])
        self.assertEqual(set(schedules_for(make_admin())), {own, other})

    def test_jadwal_mendatang_saja(self):
        past = self._create(scheduled_at=timezone.now() - timedelta(days=1))
        future = self._create()

        upcoming = list(upcoming_for(self.student))
        self.assertIn(future, upcoming)
        self.assertNotIn(past, upcoming)


class GuidanceScheduleAdminTests(TestCase):
    def setUp(self):
        superuser = User.objects.create_superuser(
            "root@kampus.ac.id", "root@kampus.ac.id", PASSWORD
        )
        self.client.force_login(superuser)
        thesis = make_thesis(lecturer=make_lecturer())
        tomorrow = timezone.now() + timedelta(days=1)
        self.open = GuidanceSchedule.objects.create(
            thesis=thesis, title="Bimbingan Bab 1", scheduled_at=tomorrow
        )
        self.done = GuidanceSchedule.objects.create(
            thesis=thesis,
            title="Bimbingan Proposal",
            scheduled_at=tomorrow,
            status=GuidanceSchedule.STATUS_CANCELLED,
        )

    def test_tandai_selesai_mengirim_notifikasi(self):
        events = []
        subscription = realtime.hub.subscribe(
            realtime.TABLE_GUIDANCE_SCHEDULE, events.append
        )
        self.addCleanup(subscription.close)

        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(
                reverse("admin:guidance_guidanceschedule_changelist"),
                {
                    "action": "mark_completed",
                    "_selected_action": [self.open.pk, self.done.pk],
                },
            )

        self.assertEqual(response.status_code, 302)
        self.open.refresh_from_db()
        self.done.refresh_from_db()
        self.assertEqual(self.open.status, GuidanceSchedule.STATUS_COMPLETED)
        self.assertEqual(self.done.status, GuidanceSchedule.STATUS_CANCELLED)
        self.assertEqual(
            [(e.event, e.record_id) for e in events], [(realtime.UPDATE, self.open.pk)]
        )
