# backend/chat/services.py
"""
Chat per skripsi: hanya tambah pesan (tanpa edit/hapus), dibaca urut waktu.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from django.core.exceptions import ValidationError

from masterdata.capabilities import capability_for
from masterdata.models import Profile
from masterdata.services import get_thesis

from .models import Message

logger = logging.getLogger(__name__)


def post_message(sender: Profile, thesis_id, content) -> Message:
    content = (content or "").strip()
    if not content:
        raise ValidationError({"content": "Pesan tidak boleh kosong."})

    thesis = get_thesis(thesis_id)
    cap = capability_for(sender)
    cap.require(cap.can_chat(thesis), "Anda tidak terlibat dalam bimbingan skripsi ini.")

    message = Message.objects.create(thesis=thesis, sender=sender, content=content)
    logger.debug("Message %s appended to thesis %s", message.pk, thesis.pk)
    return message


def messages_for(profile: Profile, thesis_id):
    thesis = get_thesis(thesis_id)
    cap = capability_for(profile)
    cap.require(
        cap.can_chat(thesis) or cap.can_view_thesis(thesis),
        "Anda tidak berhak membaca percakapan ini.",
    )
    return (
        Message.objects.filter(thesis=thesis)
        .select_related("sender")
        .order_by("created_at", "id")
    )


@dataclass
class ChatSummary:
    thesis: object
    partner: Optional[Profile]
    last_message: Optional[str]
    last_message_time: object
    partner_message_count: int


def chat_list(profile: Profile):
    """Daftar percakapan yang bisa dibuka user, lengkap dengan pesan terakhir."""
    cap = capability_for(profile)
    theses = cap.visible_theses().select_related("student", "lecturer")

    chats = []
    for thesis in theses:
        # percakapan butuh pasangan mahasiswa dan pembimbing
        if thesis.lecturer_id is None or not cap.can_chat(thesis):
            continue
        partner = thesis.lecturer if profile.is_student else thesis.student
        if partner is None:
            continue

        last = thesis.messages.order_by("-created_at", "-id").first()
        chats.append(
            ChatSummary(
                thesis=thesis,
                partner=partner,
                last_message=last.content if last else None,
                last_message_time=last.created_at if last else None,
                partner_message_count=thesis.messages.exclude(sender=profile).count(),
            )
        )
    return chats
