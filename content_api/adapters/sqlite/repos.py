"""
SQLite repositories for the Example content entity.

One connection per operation; saving an Example replaces its dimension
contents, so the in-memory aggregate is always the source of truth.
"""

from __future__ import annotations

import builtins
import json
import logging
import sqlite3
from datetime import datetime
from typing import Any

from content_api.components.listing.models import ListQuery
from content_api.domain.entities import Example, ExampleDimensionContent

logger = logging.getLogger(__name__)


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def parse_dt(s: str | None) -> datetime | None:
    return datetime.fromisoformat(s) if s else None


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally (use with ESCAPE '\\')."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLiteRepoBase:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn


class SQLiteExampleRepo(SQLiteRepoBase):
    def save(self, example: Example) -> Example:
        """Insert or update the example together with all of its dimension contents."""
        conn = self._get_conn()
        try:
            if example.id is None:
                cursor = conn.execute(
                    "INSERT INTO examples (created, changed) VALUES (?, ?)",
                    (example.created.isoformat(), example.changed.isoformat()),
                )
                example.id = cursor.lastrowid
                logger.debug("Inserted example %s", example.id)
            else:
                conn.execute(
                    """
                    INSERT INTO examples (id, created, changed) VALUES (?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET changed=excluded.changed
                    """,
                    (example.id, example.created.isoformat(), example.changed.isoformat()),
                )

            conn.execute(
                "DELETE FROM example_dimension_contents WHERE example_id = ?", (example.id,)
            )

            for dc in example.dimension_contents:
                conn.execute(
                    """
                    INSERT INTO example_dimension_contents (
                        example_id, locale, stage, title, template_key, template_data,
                        excerpt_title, excerpt_description,
                        seo_title, seo_description, seo_no_index,
                        workflow_place, workflow_published, available_locales
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        example.id,
                        dc.locale,
                        dc.stage,
                        dc.title,
                        dc.template_key,
                        json.dumps(dc.template_data),
                        dc.excerpt_title,
                        dc.excerpt_description,
                        dc.seo_title,
                        dc.seo_description,
                        int(dc.seo_no_index),
                        dc.workflow_place,
                        dc.workflow_published.isoformat() if dc.workflow_published else None,
                        json.dumps(dc.available_locales)
                        if dc.available_locales is not None
                        else None,
                    ),
                )

            conn.commit()
            return example
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_id(self, example_id: int) -> Example | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM examples WHERE id = ?", (example_id,)).fetchone()
            if not row:
                return None

            dc_rows = conn.execute(
                "SELECT * FROM example_dimension_contents WHERE example_id = ? ORDER BY id ASC",
                (example_id,),
            ).fetchall()

            return Example(
                id=row["id"],
                created=parse_dt(row["created"]) or datetime.min,
                changed=parse_dt(row["changed"]) or datetime.min,
                dimension_contents=[self._map_dimension_content(r) for r in dc_rows],
            )
        finally:
            conn.close()

    def delete(self, example_id: int) -> None:
        conn = self._get_conn()
        try:
            # Explicit for DBs created without ON DELETE CASCADE
            conn.execute(
                "DELETE FROM example_dimension_contents WHERE example_id = ?", (example_id,)
            )
            conn.execute("DELETE FROM examples WHERE id = ?", (example_id,))
            conn.commit()
        finally:
            conn.close()

    def _map_dimension_content(self, row: dict[str, Any]) -> ExampleDimensionContent:
        return ExampleDimensionContent(
            locale=row["locale"],
            stage=row["stage"],
            title=row["title"],
            template_key=row["template_key"],
            template_data=json.loads(row["template_data"] or "{}"),
            excerpt_title=row["excerpt_title"],
            excerpt_description=row["excerpt_description"],
            seo_title=row["seo_title"],
            seo_description=row["seo_description"],
            seo_no_index=bool(row["seo_no_index"]),
            workflow_place=row["workflow_place"],
            workflow_published=parse_dt(row["workflow_published"]),
            available_locales=json.loads(row["available_locales"])
            if row["available_locales"]
            else None,
        )


class SQLiteExampleListRepo(SQLiteRepoBase):
    """Executes list queries over examples joined with their draft content in one locale."""

    # Column key -> SQL expression. Field descriptors may only reference these.
    COLUMNS: dict[str, str] = {
        "id": "e.id",
        "created": "e.created",
        "changed": "e.changed",
        "locale": "dc.locale",
        "title": "dc.title",
        "template_key": "dc.template_key",
        "excerpt_title": "dc.excerpt_title",
        "excerpt_description": "dc.excerpt_description",
        "seo_title": "dc.seo_title",
        "seo_description": "dc.seo_description",
        "workflow_place": "dc.workflow_place",
        "workflow_published": "dc.workflow_published",
    }

    def available_columns(self) -> builtins.list[str]:
        return builtins.list(self.COLUMNS)

    def _where(self, query: ListQuery) -> tuple[str, builtins.list[Any]]:
        sql = """
            FROM examples e
            JOIN example_dimension_contents dc
                ON dc.example_id = e.id AND dc.stage = 'draft' AND dc.locale = ?
            WHERE 1=1
        """
        params: builtins.list[Any] = [query.locale]

        if query.ids is not None:
            if not query.ids:
                sql += " AND 0"
            else:
                sql += f" AND e.id IN ({', '.join('?' for _ in query.ids)})"
                params.extend(query.ids)

        if query.excluded_ids:
            sql += f" AND e.id NOT IN ({', '.join('?' for _ in query.excluded_ids)})"
            params.extend(query.excluded_ids)

        if query.search and query.search_fields:
            term = f"%{escape_like(query.search)}%"
            clauses = []
            for descriptor in query.search_fields:
                clauses.append(f"{self.COLUMNS[descriptor.column]} LIKE ? ESCAPE '\\'")
                params.append(term)
            sql += f" AND ({' OR '.join(clauses)})"

        return sql, params

    def list(self, query: ListQuery) -> builtins.list[dict[str, Any]]:
        select = ", ".join(
            f'{self.COLUMNS[descriptor.column]} AS "{descriptor.name}"' for descriptor in query.select
        )
        where, params = self._where(query)
        sql = f"SELECT {select} {where}"

        if query.sort_by is not None:
            direction = "DESC" if query.sort_order == "desc" else "ASC"
            sql += f" ORDER BY {self.COLUMNS[query.sort_by.column]} {direction}, e.id ASC"
        else:
            sql += " ORDER BY e.id ASC"

        sql += " LIMIT ? OFFSET ?"
        params.extend([query.limit, query.offset])

        conn = self._get_conn()
        try:
            return conn.execute(sql, params).fetchall()
        finally:
            conn.close()

    def count(self, query: ListQuery) -> int:
        where, params = self._where(query)
        conn = self._get_conn()
        try:
            row = conn.execute(f"SELECT COUNT(*) AS cnt {where}", params).fetchone()
            return row["cnt"] if row else 0
        finally:
            conn.close()
