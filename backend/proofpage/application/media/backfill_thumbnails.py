# proofpage/application/media/backfill_thumbnails.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type

from flask import current_app
from sqlalchemy import select, update

from proofpage.models.testimonial import Testimonial
from proofpage.models.work_example import WorkExample
from proofpage.utils.thumbnails import (
    AVATAR_SIZE,
    WORK_IMAGE_SIZE,
    build_thumb_path,
    render_cover_jpeg,
    resolve_object_path,
)

DEFAULT_BATCH_SIZE = 100
THUMB_CACHE_CONTROL = "31536000"


@dataclass(frozen=True)
class MediaTable:
    model: Type[Any]
    original_column: str
    thumb_column: str
    size: Tuple[int, int]

    @property
    def name(self) -> str:
        return self.model.__tablename__


MEDIA_TABLES: List[MediaTable] = [
    MediaTable(Testimonial, "avatar_path", "avatar_thumb_path", AVATAR_SIZE),
    MediaTable(WorkExample, "image_path", "image_thumb_path", WORK_IMAGE_SIZE),
]


@dataclass(frozen=True)
class MediaRow:
    id: str
    original: Optional[str]


@dataclass
class TableStats:
    table: str
    scanned: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "scanned": self.scanned,
            "updated": self.updated,
            "skipped": self.skipped,
            "failed": self.failed,
        }

    def summary_line(self) -> str:
        return (
            f"[{self.table}] scanned={self.scanned} updated={self.updated} "
            f"skipped={self.skipped} failed={self.failed}"
        )


@dataclass
class BackfillReport:
    tables: List[TableStats] = field(default_factory=list)

    @property
    def total(self) -> TableStats:
        total = TableStats(table="total")
        for stats in self.tables:
            total.scanned += stats.scanned
            total.updated += stats.updated
            total.skipped += stats.skipped
            total.failed += stats.failed
        return total

    @property
    def exit_code(self) -> int:
        return 1 if self.total.failed > 0 else 0


def _fetch_batch(session, table: MediaTable, last_id: Optional[str], batch_size: int) -> List[MediaRow]:
    model = table.model
    original_col = getattr(model, table.original_column)
    thumb_col = getattr(model, table.thumb_column)

    query = (
        select(model.id, original_col)
        .where(thumb_col.is_(None))
        .order_by(model.id.asc())
        .limit(batch_size)
    )
    if last_id is not None:
        query = query.where(model.id > last_id)

    return [MediaRow(id=row[0], original=row[1]) for row in session.execute(query).all()]


def _process_row(session, store, table: MediaTable, row: MediaRow, stats: TableStats) -> None:
    original_path = resolve_object_path(row.original, store.bucket)
    if not original_path:
        stats.skipped += 1
        return

    thumb_path = build_thumb_path(original_path)

    source = store.download(original_path)
    thumb = render_cover_jpeg(source, table.size)
    store.upload(
        thumb_path,
        thumb,
        content_type="image/jpeg",
        upsert=True,
        cache_control=THUMB_CACHE_CONTROL,
    )

    model = table.model
    session.execute(
        update(model)
        .where(model.id == row.id)
        .values({table.thumb_column: thumb_path})
    )
    session.commit()
    stats.updated += 1


def backfill_table(session, store, table: MediaTable, *, batch_size: int = DEFAULT_BATCH_SIZE) -> TableStats:
    """
    Generate missing thumbnails for one media table.

    Rows are walked in primary-key order in batches of `batch_size`,
    selecting only rows whose thumbnail column is NULL. Rows that cannot be
    resolved to an object path are skipped; any error while downloading,
    resizing, uploading or updating is logged and counted as a failure
    without stopping the batch.
    """
    logger = current_app.logger
    stats = TableStats(table=table.name)
    last_id: Optional[str] = None

    while True:
        rows = _fetch_batch(session, table, last_id, batch_size)
        if not rows:
            break

        for row in rows:
            last_id = row.id
            stats.scanned += 1

            try:
                _process_row(session, store, table, row, stats)
            except Exception as exc:
                session.rollback()
                stats.failed += 1
                logger.error("[%s] row %s failed: %s", table.name, row.id, exc)

    return stats


def backfill_thumbnails(session, store, *, batch_size: int = DEFAULT_BATCH_SIZE,
                        tables: Optional[List[MediaTable]] = None) -> BackfillReport:
    """
    Backfill avatar and work-example thumbnails.

    Safe to re-run: rows that already have a thumbnail are never selected,
    and thumbnail objects are written with overwrite enabled.
    """
    logger = current_app.logger
    logger.info("Starting thumbnail backfill (bucket=%s, batch_size=%d)", store.bucket, batch_size)

    report = BackfillReport()
    for table in tables or MEDIA_TABLES:
        stats = backfill_table(session, store, table, batch_size=batch_size)
        report.tables.append(stats)
        logger.info(stats.summary_line())

    logger.info(report.total.summary_line())
    return report
