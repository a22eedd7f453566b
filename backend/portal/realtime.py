# backend/portal/realtime.py
"""
Notifikasi perubahan data (realtime) di dalam proses.

Setiap perubahan pada tabel yang dipantau dikirim sebagai satu
``ChangeEvent`` ke semua subscriber tabel tersebut (opsional difilter per
skripsi). Layar yang berlangganan tidak menerapkan patch; ia memuat ulang
datanya lewat ``ScreenChannel`` (invalidate lalu refetch).
"""

import logging
import threading
from collections import Counter
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

TABLE_PROFILES = "profiles"
TABLE_THESIS = "thesis"
TABLE_SUBMISSIONS = "submissions"
TABLE_GUIDANCE_SCHEDULE = "guidance_schedule"
TABLE_MESSAGES = "messages"

TABLES = frozenset(
    {
        TABLE_PROFILES,
        TABLE_THESIS,
        TABLE_SUBMISSIONS,
        TABLE_GUIDANCE_SCHEDULE,
        TABLE_MESSAGES,
    }
)

INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    event: str
    record_id: object
    thesis_id: Optional[object] = None


class Subscription:
    def __init__(self, hub, tables, callback, thesis_id=None):
        self._hub = hub
        self.tables = frozenset(tables)
        self.callback = callback
        self.thesis_id = thesis_id
        self.active = True

    def matches(self, event: ChangeEvent) -> bool:
        if event.table not in self.tables:
            return False
        return self.thesis_id is None or event.thesis_id == self.thesis_id

    def close(self):
        if self.active:
            self.active = False
            self._hub._release(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class ChangeHub:
    def __init__(self):
        self._subscriptions = []
        self._revisions = Counter()
        self._lock = threading.Lock()

    def subscribe(self, tables, callback, thesis_id=None) -> Subscription:
        if isinstance(tables, str):
            tables = [tables]
        unknown = set(tables) - TABLES
        if unknown:
            raise ValueError(f"Unknown tables: {sorted(unknown)}")

        subscription = Subscription(self, tables, callback, thesis_id)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def _release(self, subscription):
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def revision(self, tables, thesis_id=None) -> int:
        """
        Penghitung perubahan untuk tabel-tabel tertentu. Halaman yang
        melakukan polling cukup membandingkan angka ini lalu memuat ulang.
        """
        if isinstance(tables, str):
            tables = [tables]
        with self._lock:
            return sum(self._revisions[(table, thesis_id)] for table in tables)

    def publish(self, event: ChangeEvent):
        with self._lock:
            self._revisions[(event.table, None)] += 1
            if event.thesis_id is not None:
                self._revisions[(event.table, event.thesis_id)] += 1
            targets = [s for s in self._subscriptions if s.matches(event)]

        for subscription in targets:
            try:
                subscription.callback(event)
            except Exception:
                # satu subscriber yang gagal tidak boleh menghentikan yang lain
                logger.exception("Subscriber failed on %s %s", event.table, event.event)


hub = ChangeHub()


class ScreenChannel:
    """
    Kanal realtime milik satu layar.

    ``open()`` memuat data awal lalu berlangganan; setiap notifikasi memanggil
    ``refetch()`` lagi. Kalau refetch gagal, data lama tetap dipakai.
    ``close()`` melepas langganan; bisa dipakai sebagai context manager.
    """

    def __init__(self, tables, refetch, thesis_id=None, change_hub=None):
        self.tables = tables
        self.refetch = refetch
        self.thesis_id = thesis_id
        self.hub = change_hub or hub
        self.data = None
        self.refresh_count = 0
        self._subscription = None

    @property
    def is_open(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def open(self):
        self.data = self.refetch()
        self._subscription = self.hub.subscribe(
            self.tables, self._on_change, thesis_id=self.thesis_id
        )
        return self

    def _on_change(self, event: ChangeEvent):
        try:
            self.data = self.refetch()
        except Exception:
            logger.exception("Refetch after %s on %s failed, keeping previous data", event.event, event.table)
            return
        self.refresh_count += 1

    def close(self):
        if self._subscription is not None:
            self._subscription.close()

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
