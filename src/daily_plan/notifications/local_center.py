# src/daily_plan/notifications/local_center.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from ..tasks.errors import NotificationSchedulingError
from .notification_models import NotificationRequest, TriggerComponents

logger = logging.getLogger(__name__)


class LocalNotificationCenter:
    """
    SQLite-backed local notification center.

    Plays the part of the host OS service: keeps pending single-shot
    requests keyed by identifier until they are due, then hands them to the
    dispatcher via take_due(). Pending requests survive restarts.

    Permission is decided by configuration (`permission_granted`); while it
    is not granted, schedule_at() raises NotificationSchedulingError.
    """

    def __init__(self, db_path: str | Path = "notifications.sqlite3", *, permission_granted: bool = True) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._permission_granted = bool(permission_granted)
        self._authorized = False
        self._ensure_schema()
        logger.info("LocalNotificationCenter ready db=%s pending=%s", self._db_path, len(self.list_pending()))

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS pending_notifications (
                    identifier TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    body TEXT NOT NULL,
                    fire_at TEXT NOT NULL,
                    created_at REAL NOT NULL
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_pending_fire_at ON pending_notifications(fire_at)")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_request(row: sqlite3.Row) -> NotificationRequest:
        return NotificationRequest(
            identifier=str(row["identifier"]),
            title=str(row["title"]),
            body=str(row["body"]),
            trigger=TriggerComponents.from_datetime(datetime.fromisoformat(row["fire_at"])),
        )

    # ---- NotificationCenter port ----

    def request_permission(self) -> bool:
        self._authorized = self._permission_granted
        return self._authorized

    def schedule_at(
        self,
        identifier: str,
        *,
        title: str,
        body: str,
        trigger: TriggerComponents,
    ) -> None:
        if not self._authorized:
            raise NotificationSchedulingError("notification permission not granted")

        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT OR REPLACE INTO pending_notifications(identifier, title, body, fire_at, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (identifier, title, body, trigger.to_datetime().isoformat(), time.time()),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise NotificationSchedulingError(f"schedule {identifier} failed: {e}") from e
        finally:
            conn.close()

    def cancel(self, identifiers: Iterable[str]) -> None:
        ids = [str(i) for i in identifiers]
        if not ids:
            return

        conn = self._get_conn()
        try:
            placeholders = ",".join("?" for _ in ids)
            conn.execute(f"DELETE FROM pending_notifications WHERE identifier IN ({placeholders})", ids)
            conn.commit()
        except sqlite3.Error as e:
            raise NotificationSchedulingError(f"cancel failed: {e}") from e
        finally:
            conn.close()

    def list_pending(self) -> list[str]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT identifier FROM pending_notifications ORDER BY fire_at ASC").fetchall()
            return [str(r["identifier"]) for r in rows]
        finally:
            conn.close()

    # ---- dispatcher side ----

    def get_pending(self, identifier: str) -> NotificationRequest | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM pending_notifications WHERE identifier = ?",
                (identifier,),
            ).fetchone()
            return self._row_to_request(row) if row else None
        finally:
            conn.close()

    def take_due(self, now: datetime) -> list[NotificationRequest]:
        """
        Remove and return every request whose trigger time has been reached.

        Delivered requests are no longer pending.

        Each row is claimed with a conditional DELETE on (identifier,
        created_at). A request re-scheduled after the SELECT has a new
        created_at, so it stays pending and the stale one is not returned.
        """
        cutoff = now.isoformat()
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM pending_notifications WHERE fire_at <= ? ORDER BY fire_at ASC",
                (cutoff,),
            ).fetchall()
            candidates = [(row["created_at"], self._row_to_request(row)) for row in rows]

            claimed: list[NotificationRequest] = []
            for created_at, request in candidates:
                cur = conn.execute(
                    """
                    DELETE FROM pending_notifications
                    WHERE identifier = ?
                      AND created_at = ?
                      AND fire_at <= ?
                    """,
                    (request.identifier, created_at, cutoff),
                )
                if cur.rowcount == 1:
                    claimed.append(request)
                else:
                    logger.debug("Request id=%s changed before it was taken; skipped", request.identifier)
            conn.commit()
            return claimed
        finally:
            conn.close()
