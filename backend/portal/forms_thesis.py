# backend/portal/forms_thesis.py

from django import forms

from masterdata.models import Profile, Thesis
from masterdata.services import normalize_keywords


class ThesisForm(forms.ModelForm):
    keywords = forms.CharField(
        label="Kata kunci",
        required=False,
        help_text="Pisahkan dengan koma, misalnya: machine learning, klasifikasi",
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )

    class Meta:
        model = Thesis
        fields = ["title", "description", "keywords"]
        widgets = {
            "title": forms.TextInput(attrs={"class": "form-control"}),
            "description": forms.Textarea(
                attrs={"class": "form-control", "rows": 4}
            ),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance.pk and isinstance(self.instance.keywords, list):
            self.initial["keywords"] = ", ".join(self.instance.keywords)

    def clean_keywords(self):
        return normalize_keywords(self.cleaned_data.get("keywords"))


class AssignLecturerForm(forms.Form):
    lecturer = forms.ModelChoiceField(
        label="Dosen pembimbing",
        queryset=Profile.objects.filter(role=Profile.ROLE_LECTURER),
        required=False,
        empty_label="- Belum ada pembimbing -",
        widget=forms.Select(attrs={"class": "form-select"}),
    )


class ThesisStatusForm(forms.Form):
    status = forms.ChoiceField(
        choices=Thesis.STATUS_CHOICES,
        widget=forms.Select(attrs={"class": "form-select"}),
    )
