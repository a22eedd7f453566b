from django.db import models
from django.utils import timezone

from masterdata.models import Profile, Thesis


class Message(models.Model):
    thesis = models.ForeignKey(
        Thesis,
        on_delete=models.CASCADE,
        related_name="messages",
    )
    sender = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name="sent_messages",
    )
    content = models.TextField()
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        verbose_name = "Pesan"
        verbose_name_plural = "Pesan"
        # id sebagai pemecah seri kalau created_at sama
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return f"{self.sender.full_name}: {self.content[:40]}"
