# backend/portal/forms_chat.py

from django import forms

from insight.prompts import (
    KIND_FILE_REVIEW,
    KIND_GENERAL,
    KIND_SCHEDULE_OPTIMIZATION,
    KIND_STUDENT_PERFORMANCE,
    KIND_THESIS_ANALYSIS,
)


class MessageForm(forms.Form):
    content = forms.CharField(
        label="Pesan",
        widget=forms.Textarea(
            attrs={"class": "form-control", "rows": 2, "placeholder": "Tulis pesan..."}
        ),
        error_messages={"required": "Pesan tidak boleh kosong."},
    )


class InsightRequestForm(forms.Form):
    KIND_CHOICES = (
        (KIND_GENERAL, "Pertanyaan umum"),
        (KIND_THESIS_ANALYSIS, "Analisis progress skripsi"),
        (KIND_SCHEDULE_OPTIMIZATION, "Optimalisasi jadwal bimbingan"),
        (KIND_FILE_REVIEW, "Review file"),
        (KIND_STUDENT_PERFORMANCE, "Performa mahasiswa bimbingan"),
    )

    kind = forms.ChoiceField(choices=KIND_CHOICES, widget=forms.HiddenInput)
    message = forms.CharField(
        label="Pertanyaan",
        required=False,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}),
    )
    submission_id = forms.IntegerField(required=False, widget=forms.HiddenInput)

    def clean(self):
        cleaned = super().clean()
        kind = cleaned.get("kind")
        if kind == KIND_GENERAL and not (cleaned.get("message") or "").strip():
            self.add_error("message", "Tulis pertanyaan terlebih dahulu.")
        if kind == KIND_FILE_REVIEW and not cleaned.get("submission_id"):
            self.add_error(None, "Pilih file yang akan direview.")
        return cleaned
