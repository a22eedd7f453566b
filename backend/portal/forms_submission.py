# backend/portal/forms_submission.py

from django import forms

from submissions.models import Submission
from submissions.workflow import STATUS_LABELS, allowed_targets


class SubmissionUploadForm(forms.ModelForm):
    """
    Form upload dokumen oleh MAHASISWA.
    Versi dan status diisi sistem, bukan oleh mahasiswa.
    """

    class Meta:
        model = Submission
        fields = ["type", "chapter", "title", "file", "comments"]
        widgets = {
            "type": forms.Select(attrs={"class": "form-select"}),
            "chapter": forms.Select(attrs={"class": "form-select"}),
            "title": forms.TextInput(attrs={"class": "form-control"}),
            "file": forms.ClearableFileInput(
                attrs={"class": "form-control", "accept": ".pdf,.doc,.docx"}
            ),
            "comments": forms.Textarea(attrs={"class": "form-control", "rows": 3}),
        }

    def clean(self):
        cleaned = super().clean()
        type = cleaned.get("type")
        chapter = cleaned.get("chapter") or 0

        if type == Submission.TYPE_CHAPTER and not 1 <= chapter <= 5:
            self.add_error("chapter", "Pilih nomor bab untuk dokumen Bab.")
        elif type and type != Submission.TYPE_CHAPTER:
            cleaned["chapter"] = 0
        return cleaned


class SubmissionReviewForm(forms.Form):
    status = forms.ChoiceField(
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    comments = forms.CharField(
        label="Komentar",
        required=False,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 4}),
    )

    def __init__(self, *args, submission=None, role=None, **kwargs):
        super().__init__(*args, **kwargs)
        # hanya status tujuan yang sah dari status saat ini
        targets = allowed_targets(submission.status, role) if submission else []
        self.fields["status"].choices = [(t, STATUS_LABELS[t]) for t in targets]
        if submission is not None and "comments" not in self.initial:
            self.initial["comments"] = submission.comments
