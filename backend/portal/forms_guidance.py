# backend/portal/forms_guidance.py

from django import forms

from guidance.models import GuidanceSchedule
from masterdata.models import Profile
from .forms_base import DateTimeInput


class GuidanceScheduleForm(forms.ModelForm):
    """
    Form yang dipakai DOSEN untuk membuat jadwal bimbingan.
    Pilihan mahasiswa dibatasi pada mahasiswa bimbingan dosen tersebut.
    """

    class Meta:
        model = GuidanceSchedule
        fields = ["student", "title", "scheduled_at", "notes"]
        widgets = {
            "student": forms.Select(attrs={"class": "form-select"}),
            "title": forms.TextInput(
                attrs={
                    "class": "form-control",
                    "placeholder": "Misal: Bimbingan Bab 2",
                }
            ),
            "scheduled_at": DateTimeInput(attrs={"class": "form-control"}),
            "notes": forms.Textarea(attrs={"class": "form-control", "rows": 3}),
        }

    def __init__(self, *args, lecturer=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["student"].label = "Mahasiswa"
        self.fields["student"].queryset = Profile.objects.filter(
            role=Profile.ROLE_STUDENT,
            thesis__lecturer=lecturer,
        ).order_by("full_name")


class ScheduleStatusForm(forms.Form):
    status = forms.ChoiceField(
        choices=GuidanceSchedule.STATUS_CHOICES,
        widget=forms.Select(attrs={"class": "form-select"}),
    )


class RescheduleForm(forms.Form):
    scheduled_at = forms.DateTimeField(
        label="Jadwal baru",
        widget=DateTimeInput(attrs={"class": "form-control"}),
    )
