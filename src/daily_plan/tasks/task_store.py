# src/daily_plan/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

from .errors import PersistenceError
from .task_models import Priority, Task

logger = logging.getLogger(__name__)


class TaskStore:
    """
    SQLite task store.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Every write commits before returning. SQLite failures are raised as
    PersistenceError so callers can roll back optimistic in-memory changes.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except PersistenceError:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        except sqlite3.Error as e:
            raise PersistenceError(f"cannot open task database {self._db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    title TEXT NOT NULL,
                    category TEXT NOT NULL DEFAULT 'General',
                    start_date TEXT NOT NULL,
                    priority TEXT NOT NULL DEFAULT 'medium',
                    is_archived INTEGER NOT NULL DEFAULT 0
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("category", "TEXT NOT NULL DEFAULT 'General'")
            add_col("priority", "TEXT NOT NULL DEFAULT 'medium'")
            add_col("is_archived", "INTEGER NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_archived_category ON tasks(is_archived, category)")

            conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"cannot prepare task schema: {e}") from e
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=str(row["id"]),
            title=str(row["title"] or ""),
            category=str(row["category"] or ""),
            start_date=datetime.fromisoformat(row["start_date"]),
            priority=Priority.from_db(row["priority"]),
            is_archived=bool(row["is_archived"]),
        )

    def _write(self, sql: str, params: tuple[Any, ...], *, what: str) -> int:
        conn = self._get_conn()
        try:
            cur = conn.execute(sql, params)
            conn.commit()
            return cur.rowcount
        except sqlite3.Error as e:
            logger.debug("TaskStore %s failed: %r", what, e)
            raise PersistenceError(f"{what} failed: {e}") from e
        finally:
            conn.close()

    def _read(self, sql: str, params: tuple[Any, ...] = ()) -> list[sqlite3.Row]:
        conn = self._get_conn()
        try:
            return conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"query failed: {e}") from e
        finally:
            conn.close()

    # ---- public API ----

    def count_tasks(self) -> int:
        (row,) = self._read("SELECT COUNT(*) AS n FROM tasks")
        return int(row["n"])

    def insert(self, task: Task) -> Task:
        self._write(
            """
            INSERT INTO tasks(id, title, category, start_date, priority, is_archived)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                task.id,
                task.title,
                task.category,
                task.start_date.isoformat(),
                task.priority.value,
                int(task.is_archived),
            ),
            what=f"insert task {task.id}",
        )
        logger.debug(
            "Task added id=%s category=%s start=%s priority=%s",
            task.id,
            task.category,
            task.start_date,
            task.priority.value,
        )
        return task

    def update(self, task: Task) -> None:
        changed = self._write(
            """
            UPDATE tasks
            SET title = ?, category = ?, start_date = ?, priority = ?, is_archived = ?
            WHERE id = ?
            """,
            (
                task.title,
                task.category,
                task.start_date.isoformat(),
                task.priority.value,
                int(task.is_archived),
                task.id,
            ),
            what=f"update task {task.id}",
        )
        if changed != 1:
            raise PersistenceError(f"update task {task.id} failed: no such task")
        logger.debug("Task updated id=%s archived=%s", task.id, task.is_archived)

    def delete(self, task: Task) -> None:
        changed = self._write("DELETE FROM tasks WHERE id = ?", (task.id,), what=f"delete task {task.id}")
        if changed == 0:
            logger.debug("Task delete id=%s: nothing to delete", task.id)
        else:
            logger.debug("Task deleted id=%s", task.id)

    def get(self, task_id: str) -> Task | None:
        rows = self._read("SELECT * FROM tasks WHERE id = ?", (task_id,))
        return self._row_to_task(rows[0]) if rows else None

    def find_by_prefix(self, prefix: str) -> list[Task]:
        """Tasks whose id starts with `prefix` (short ids typed by the user)."""
        prefix = (prefix or "").strip().lower()
        if not prefix:
            return []
        rows = self._read(
            "SELECT * FROM tasks WHERE substr(id, 1, ?) = ? ORDER BY seq ASC",
            (len(prefix), prefix),
        )
        return [self._row_to_task(r) for r in rows]

    def query(self, *, archived: bool | None = None, category: str | None = None) -> list[Task]:
        """
        Tasks matching the given filters, in insertion order.

        None means "don't filter on this field".
        """
        clauses: list[str] = []
        params: list[Any] = []

        if archived is not None:
            clauses.append("is_archived = ?")
            params.append(int(archived))

        if category is not None:
            clauses.append("category = ?")
            params.append(category)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._read(f"SELECT * FROM tasks {where} ORDER BY seq ASC", tuple(params))
        return [self._row_to_task(r) for r in rows]
