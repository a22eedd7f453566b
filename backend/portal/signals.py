# backend/portal/signals.py

from django.db import transaction
from django.db.models.signals import post_delete, post_save

from chat.models import Message
from guidance.models import GuidanceSchedule
from masterdata.models import Profile, Thesis
from submissions.models import Submission

from . import realtime

TABLE_BY_MODEL = {
    Profile: realtime.TABLE_PROFILES,
    Thesis: realtime.TABLE_THESIS,
    Submission: realtime.TABLE_SUBMISSIONS,
    GuidanceSchedule: realtime.TABLE_GUIDANCE_SCHEDULE,
    Message: realtime.TABLE_MESSAGES,
}


def _thesis_id_of(instance):
    if isinstance(instance, Thesis):
        return instance.pk
    return getattr(instance, "thesis_id", None)


def _publish(sender, instance, event):
    change = realtime.ChangeEvent(
        table=TABLE_BY_MODEL[sender],
        event=event,
        record_id=instance.pk,
        thesis_id=_thesis_id_of(instance),
    )
    # subscriber baru diberi tahu setelah data benar-benar tersimpan
    transaction.on_commit(lambda: realtime.hub.publish(change))


def publish_saved(sender, instance, created, **kwargs):
    """
    Setelah salah satu record yang dipantau disimpan, kirim event
    INSERT/UPDATE ke subscriber tabel tersebut.
    """
    _publish(sender, instance, realtime.INSERT if created else realtime.UPDATE)


def publish_deleted(sender, instance, **kwargs):
    _publish(sender, instance, realtime.DELETE)


for _model in TABLE_BY_MODEL:
    post_save.connect(
        publish_saved, sender=_model, dispatch_uid=f"realtime_save_{_model.__name__}"
    )
    post_delete.connect(
        publish_deleted, sender=_model, dispatch_uid=f"realtime_delete_{_model.__name__}"
    )
