"""Registry for transition tables and the sessions running them."""

from __future__ import annotations

import secrets
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import TracebackType
from typing import Any

from pdasim.contracts.errors import (
    DuplicateTableError,
    SessionTableMismatchError,
    TableValidationError,
    UnknownSessionError,
    UnknownTableError,
)
from pdasim.contracts.results import SessionInfo
from pdasim.core.config import EngineSettings
from pdasim.core.logging import get_logger
from pdasim.core.table import TransitionTable
from pdasim.engine.processor import PdaEngine

logger = get_logger(__name__)


def _random_session_id() -> str:
    return f"session_{secrets.token_hex(8)}"


@dataclass(frozen=True)
class _Session:
    table_id: int
    engine: PdaEngine


class SessionRegistry:
    """Registry that owns tables and the sessions created from them.

    Each session gets its own PdaEngine (and so its own lock); tables are
    frozen and shared across sessions. The registry's own lock only guards
    its maps and is never held while an engine operation runs.

    Example:
        registry = SessionRegistry(settings.engine)
        registry.register_table(1, table)

        session_id = registry.open_session(1)
        engine = registry.session(session_id, table_id=1)
        engine.admit(0, "a")

        # Clean up when done
        registry.close()
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        *,
        session_id_factory: Callable[[], str] | None = None,
    ) -> None:
        """Initialize an empty registry.

        Args:
            settings: Engine settings applied to every new session
            session_id_factory: Produces candidate session ids (default:
                random hex); collisions with live sessions are retried
        """
        self._settings = settings or EngineSettings()
        self._new_session_id = session_id_factory or _random_session_id
        self._tables: dict[int, TransitionTable] = {}
        self._sessions: dict[str, _Session] = {}
        self._lock = threading.Lock()

    # --- Tables ---

    def register_table(self, table_id: int, table: TransitionTable | Mapping[str, Any]) -> TransitionTable:
        """Register a table under a positive integer id.

        Raises:
            TableValidationError: If the id is not positive or the table is invalid
            DuplicateTableError: If the id is already in use
        """
        if table_id <= 0:
            raise TableValidationError(f"PDA id must be a positive integer, got {table_id}")
        if not isinstance(table, TransitionTable):
            table = TransitionTable.from_mapping(table)

        with self._lock:
            if table_id in self._tables:
                raise DuplicateTableError(table_id)
            self._tables[table_id] = table

        logger.info("PDA registered", table_id=table_id, name=table.name, rules=len(table.transitions))
        return table

    def tables(self) -> dict[int, TransitionTable]:
        with self._lock:
            return dict(self._tables)

    def get_table(self, table_id: int) -> TransitionTable:
        with self._lock:
            try:
                return self._tables[table_id]
            except KeyError:
                raise UnknownTableError(table_id) from None

    def delete_table(self, table_id: int) -> int:
        """Remove a table and invalidate every session using it.

        Returns:
            Number of sessions removed

        Raises:
            UnknownTableError: If no table has this id
        """
        with self._lock:
            if table_id not in self._tables:
                raise UnknownTableError(table_id)
            del self._tables[table_id]
            doomed = [sid for sid, session in self._sessions.items() if session.table_id == table_id]
            for session_id in doomed:
                del self._sessions[session_id]

        logger.info("PDA deleted", table_id=table_id, sessions_removed=len(doomed))
        return len(doomed)

    # --- Sessions ---

    def open_session(self, table_id: int) -> str:
        """Start a new run of a registered table and return its session id.

        Raises:
            UnknownTableError: If no table has this id
        """
        with self._lock:
            try:
                table = self._tables[table_id]
            except KeyError:
                raise UnknownTableError(table_id) from None

            session_id = self._new_session_id()
            while session_id in self._sessions:
                session_id = self._new_session_id()

            engine = PdaEngine(table, max_input_length=self._settings.max_input_length)
            self._sessions[session_id] = _Session(table_id=table_id, engine=engine)

        logger.info("Session opened", session_id=session_id, table_id=table_id)
        return session_id

    def session(self, session_id: str, table_id: int | None = None) -> PdaEngine:
        """Look up the engine for a session.

        Args:
            session_id: Id returned by open_session()
            table_id: If given, the session must belong to this table

        Raises:
            UnknownSessionError: If the session doesn't exist
            SessionTableMismatchError: If table_id is given and differs
        """
        return self._lookup(session_id, table_id).engine

    def session_info(self, session_id: str, table_id: int | None = None) -> SessionInfo:
        entry = self._lookup(session_id, table_id)
        return SessionInfo(
            session_id=session_id,
            table_id=entry.table_id,
            table_name=entry.engine.table.name,
            stack=entry.engine.stack,
        )

    def close_session(self, session_id: str) -> None:
        """End a session. Raises UnknownSessionError if it doesn't exist."""
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise UnknownSessionError(session_id)
        logger.info("Session closed", session_id=session_id)

    def _lookup(self, session_id: str, table_id: int | None) -> _Session:
        with self._lock:
            entry = self._sessions.get(session_id)
        if entry is None:
            raise UnknownSessionError(session_id)
        if table_id is not None and table_id != entry.table_id:
            raise SessionTableMismatchError(session_id, table_id, entry.table_id)
        return entry

    # --- Lifecycle ---

    def close(self) -> None:
        """Drop every session and table."""
        with self._lock:
            sessions = len(self._sessions)
            self._sessions.clear()
            self._tables.clear()
        logger.info("Registry closed", sessions_removed=sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __enter__(self) -> SessionRegistry:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
