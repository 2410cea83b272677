"""Turn log - append-only audit trail of processed turns."""

import json
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator

from promptbot.contracts.events import EventKind, TurnEvent

_SELECT_EVENTS = """
    SELECT conversation_id, turn_id, seq, ts_monotonic, ts_wall,
           kind, payload_json, schema_version
    FROM turn_events
"""


class TurnLogWriter:
    """Single-writer append-only event log.

    Invariants:
    - Events within a turn have monotonically increasing seq
    - Events are never deleted or modified
    - Event order is deterministic (conversation_id, turn_id, seq)
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        # Sequence counters per (conversation_id, turn_id)
        self._seq_counters: dict[tuple[str, int], int] = {}

        self._init_schema()

    def _init_schema(self) -> None:
        """Create tables and indexes if they don't exist."""
        with self._conn() as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS turn_events (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    conversation_id TEXT NOT NULL,
                    turn_id INTEGER NOT NULL,
                    seq INTEGER NOT NULL,
                    ts_monotonic REAL NOT NULL,
                    ts_wall TEXT NOT NULL,
                    kind TEXT NOT NULL,
                    payload_json TEXT NOT NULL,
                    schema_version INTEGER NOT NULL DEFAULT 1,
                    UNIQUE(conversation_id, turn_id, seq)
                );

                CREATE INDEX IF NOT EXISTS idx_turn_events_conversation_turn
                    ON turn_events(conversation_id, turn_id);
                CREATE INDEX IF NOT EXISTS idx_turn_events_kind
                    ON turn_events(kind);
            """)

    @contextmanager
    def _conn(self) -> Iterator[sqlite3.Connection]:
        """Get a database connection with automatic commit/rollback."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def next_seq(self, conversation_id: str, turn_id: int) -> int:
        """Get next sequence number for a turn."""
        key = (conversation_id, turn_id)
        seq = self._seq_counters.get(key, 0)
        self._seq_counters[key] = seq + 1
        return seq

    def end_turn(self, conversation_id: str, turn_id: int) -> None:
        """Release the sequence counter of a finished turn."""
        self._seq_counters.pop((conversation_id, turn_id), None)

    @property
    def open_turns(self) -> int:
        """Number of turns with a live sequence counter."""
        return len(self._seq_counters)

    def append(self, event: TurnEvent) -> None:
        """Append an event to the log."""
        with self._conn() as conn:
            conn.execute(
                """
                INSERT INTO turn_events
                    (conversation_id, turn_id, seq, ts_monotonic, ts_wall,
                     kind, payload_json, schema_version)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    event.conversation_id,
                    event.turn_id,
                    event.seq,
                    event.ts_monotonic,
                    event.ts_wall.isoformat(),
                    event.kind.value,
                    json.dumps(event.payload),
                    event.schema_version,
                ),
            )

    @staticmethod
    def _to_event(row: sqlite3.Row) -> TurnEvent:
        return TurnEvent(
            conversation_id=row["conversation_id"],
            turn_id=row["turn_id"],
            seq=row["seq"],
            ts_monotonic=row["ts_monotonic"],
            ts_wall=datetime.fromisoformat(row["ts_wall"]),
            kind=EventKind(row["kind"]),
            payload=json.loads(row["payload_json"]),
            schema_version=row["schema_version"],
        )

    # ─────────────────────────────────────────────────────────────────────
    # Query Methods
    # ─────────────────────────────────────────────────────────────────────

    def replay_turn(self, conversation_id: str, turn_id: int) -> Iterator[TurnEvent]:
        """Replay all events for one turn, in sequence order."""
        with self._conn() as conn:
            cursor = conn.execute(
                _SELECT_EVENTS
                + "WHERE conversation_id = ? AND turn_id = ? ORDER BY seq",
                (conversation_id, turn_id),
            )
            rows = cursor.fetchall()
        for row in rows:
            yield self._to_event(row)

    def replay_conversation(self, conversation_id: str) -> Iterator[TurnEvent]:
        """Replay all events for a conversation, in (turn_id, seq) order."""
        with self._conn() as conn:
            cursor = conn.execute(
                _SELECT_EVENTS
                + "WHERE conversation_id = ? ORDER BY turn_id, seq",
                (conversation_id,),
            )
            rows = cursor.fetchall()
        for row in rows:
            yield self._to_event(row)

    def get_events_by_kind(
        self,
        conversation_id: str,
        kind: EventKind,
        limit: int = 100,
    ) -> list[TurnEvent]:
        """Most recent events of one kind, newest first."""
        with self._conn() as conn:
            cursor = conn.execute(
                _SELECT_EVENTS
                + """
                WHERE conversation_id = ? AND kind = ?
                ORDER BY turn_id DESC, seq DESC
                LIMIT ?
                """,
                (conversation_id, kind.value, limit),
            )
            return [self._to_event(row) for row in cursor]

    def get_last_turn_id(self, conversation_id: str) -> int:
        """Get the last turn ID for a conversation (0 if none)."""
        with self._conn() as conn:
            row = conn.execute(
                "SELECT MAX(turn_id) FROM turn_events WHERE conversation_id = ?",
                (conversation_id,),
            ).fetchone()
            return row[0] if row[0] is not None else 0

    def get_conversation_ids(self, limit: int = 100) -> list[str]:
        """Recently active conversation IDs, most recent first."""
        with self._conn() as conn:
            cursor = conn.execute(
                """
                SELECT conversation_id
                FROM turn_events
                GROUP BY conversation_id
                ORDER BY MAX(id) DESC
                LIMIT ?
                """,
                (limit,),
            )
            return [row[0] for row in cursor]

    def count_events(
        self, conversation_id: str | None = None, turn_id: int | None = None
    ) -> int:
        """Count events, optionally filtered."""
        with self._conn() as conn:
            if conversation_id and turn_id is not None:
                cursor = conn.execute(
                    "SELECT COUNT(*) FROM turn_events WHERE conversation_id = ? AND turn_id = ?",
                    (conversation_id, turn_id),
                )
            elif conversation_id:
                cursor = conn.execute(
                    "SELECT COUNT(*) FROM turn_events WHERE conversation_id = ?",
                    (conversation_id,),
                )
            else:
                cursor = conn.execute("SELECT COUNT(*) FROM turn_events")
            return cursor.fetchone()[0]
