"""Single-table SQLAlchemy model for the persistent memory log.

One row per memory entry. Tags are stored as JSON arrays next to the
source text they were extracted from; rows are inserted once and never
updated.
"""

from __future__ import annotations

from datetime import timezone

from sqlalchemy import JSON, Column, Date, DateTime, Index, String, Text
from sqlalchemy.orm import DeclarativeBase

from .types import MediaType, MemoryEntry


def build_table(table_name: str) -> type:
    """Factory: create an EntryRow ORM class with a custom table name.

    Each call gets its own metadata, so several logs (or several tables)
    can live side by side in one process.
    """

    class Base(DeclarativeBase):
        pass

    class EntryRow(Base):
        __tablename__ = table_name

        # ── identity ────────────────────────────────────────────────
        id = Column(String(64), primary_key=True)
        user_id = Column(String(256), nullable=False)

        # ── content ─────────────────────────────────────────────────
        source_text = Column(Text, nullable=False)
        media_ref = Column(Text, nullable=True)
        media_type = Column(
            String(16),
            nullable=False,
            default=MediaType.TEXT.value,
            server_default=MediaType.TEXT.value,
        )

        # ── extracted tags ──────────────────────────────────────────
        workout_types = Column(JSON, nullable=False, default=list)
        muscle_groups = Column(JSON, nullable=False, default=list)
        exercises = Column(JSON, nullable=False, default=list)

        # ── time ────────────────────────────────────────────────────
        timestamp = Column(DateTime(timezone=True), nullable=False)
        activity_date = Column(Date, nullable=False)

        # ── indexes ─────────────────────────────────────────────────
        __table_args__ = (
            Index(f"ix_{table_name}_user", "user_id"),
            Index(f"ix_{table_name}_user_date", "user_id", "activity_date"),
            Index(f"ix_{table_name}_timestamp", "timestamp"),
        )

        def to_entry(self) -> MemoryEntry:
            """Convert ORM row → domain MemoryEntry."""
            ts = self.timestamp
            if ts.tzinfo is None:    # SQLite drops the offset
                ts = ts.replace(tzinfo=timezone.utc)
            return MemoryEntry(
                id=self.id,
                user_id=self.user_id,
                source_text=self.source_text,
                media_ref=self.media_ref,
                media_type=MediaType(self.media_type),
                workout_types=frozenset(self.workout_types or ()),
                muscle_groups=frozenset(self.muscle_groups or ()),
                exercises=frozenset(self.exercises or ()),
                timestamp=ts,
                activity_date=self.activity_date,
                source="log",
            )

        @classmethod
        def from_entry(cls, entry: MemoryEntry) -> "EntryRow":
            """Convert domain MemoryEntry → ORM row for insert."""
            return cls(
                id=entry.id,
                user_id=entry.user_id,
                source_text=entry.source_text,
                media_ref=entry.media_ref,
                media_type=entry.media_type.value
                if isinstance(entry.media_type, MediaType) else entry.media_type,
                workout_types=sorted(entry.workout_types),
                muscle_groups=sorted(entry.muscle_groups),
                exercises=sorted(entry.exercises),
                timestamp=entry.timestamp,
                activity_date=entry.activity_date,
            )

        def __repr__(self) -> str:
            return (
                f"<EntryRow id={self.id} user={self.user_id} "
                f"date={self.activity_date}>"
            )

    return EntryRow
