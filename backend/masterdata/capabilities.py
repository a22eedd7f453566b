# backend/masterdata/capabilities.py
"""
Hak akses per peran.

Setiap peran (mahasiswa, dosen, admin) punya objek capability sendiri.
Kode alur kerja cukup bertanya ke capability, misalnya
``capability_for(profile).can_review(thesis)``, tanpa membandingkan string
peran di banyak tempat.
"""

from django.db.models import Q

from .exceptions import Forbidden
from .models import Profile, Thesis


class Capability:
    role = None

    def __init__(self, profile: Profile):
        self.profile = profile

    def visible_theses(self):
        return Thesis.objects.none()

    def can_view_thesis(self, thesis: Thesis) -> bool:
        return False

    def can_upload_to(self, thesis: Thesis) -> bool:
        return False

    def can_review(self, thesis: Thesis) -> bool:
        return False

    def can_claim(self, thesis: Thesis) -> bool:
        return False

    def can_set_thesis_status(self, thesis: Thesis) -> bool:
        return False

    def can_assign_lecturer(self) -> bool:
        return False

    def can_manage_schedule(self, schedule) -> bool:
        return False

    def can_chat(self, thesis: Thesis) -> bool:
        return False

    def require(self, allowed: bool, message: str = None):
        if not allowed:
            raise Forbidden(message)


class StudentCapability(Capability):
    role = Profile.ROLE_STUDENT

    def _owns(self, thesis):
        return thesis.student_id == self.profile.pk

    def visible_theses(self):
        return Thesis.objects.filter(student=self.profile)

    def can_view_thesis(self, thesis):
        return self._owns(thesis)

    def can_upload_to(self, thesis):
        return self._owns(thesis)

    def can_chat(self, thesis):
        return self._owns(thesis)


class LecturerCapability(Capability):
    role = Profile.ROLE_LECTURER

    def supervises(self, thesis) -> bool:
        # skripsi tanpa pembimbing terbuka untuk semua dosen
        return thesis.lecturer_id is None or thesis.lecturer_id == self.profile.pk

    def visible_theses(self):
        return Thesis.objects.filter(
            Q(lecturer__isnull=True) | Q(lecturer=self.profile)
        )

    def can_view_thesis(self, thesis):
        return self.supervises(thesis)

    def can_review(self, thesis):
        return self.supervises(thesis)

    def can_claim(self, thesis):
        return self.supervises(thesis)

    def can_set_thesis_status(self, thesis):
        return self.supervises(thesis)

    def can_manage_schedule(self, schedule):
        return schedule.lecturer_id == self.profile.pk

    def can_chat(self, thesis):
        return self.supervises(thesis)


class AdminCapability(Capability):
    role = Profile.ROLE_ADMIN

    def visible_theses(self):
        return Thesis.objects.all()

    def can_view_thesis(self, thesis):
        return True

    def can_set_thesis_status(self, thesis):
        return True

    def can_assign_lecturer(self):
        return True


CAPABILITIES = {
    cls.role: cls
    for cls in (StudentCapability, LecturerCapability, AdminCapability)
}


def capability_for(profile) -> Capability:
    if profile is None:
        raise Forbidden("Akun ini belum dihubungkan ke profil SISKRIPSI.")
    return CAPABILITIES[profile.role](profile)
