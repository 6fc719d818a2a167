import asyncio
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

import structlog

from ..exceptions import SessionNotFoundError
from ..models.document import Document
from ..models.session import Session
from ..utils.file_utils import remove_files

logger = structlog.get_logger(__name__)


class SessionStore(ABC):

    @abstractmethod
    async def get(self, session_id: str) -> Optional[Session]:
        pass

    @abstractmethod
    async def save(self, session: Session) -> None:
        pass

    @abstractmethod
    async def delete(self, session_id: str) -> Optional[Session]:
        pass

    @abstractmethod
    def lock(self, session_id: str) -> asyncio.Lock:
        pass

    @abstractmethod
    async def purge_expired(self) -> List[Session]:
        pass

    async def create(self, documents: Iterable[Document], multi_document: bool = False) -> Session:
        session = self.new_session(documents, multi_document)
        await self.save(session)
        return session

    def new_session(self, documents: Iterable[Document], multi_document: bool = False) -> Session:
        return Session(session_id=str(uuid.uuid4()), documents=list(documents), multi_document=multi_document)

    async def require(self, session_id: str) -> Session:
        session = await self.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session


class InMemorySessionStore(SessionStore):
    """
    Process-local session map.

    Sessions live for ttl_seconds from creation. Expired entries are invisible
    to get() immediately and removed by purge_expired().
    """

    def __init__(self, ttl_seconds: int = 3600, clock: Callable[[], datetime] = datetime.utcnow):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._sessions: Dict[str, Session] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def new_session(self, documents: Iterable[Document], multi_document: bool = False) -> Session:
        return Session(
            session_id=str(uuid.uuid4()),
            documents=list(documents),
            multi_document=multi_document,
            created_at=self.clock(),
            ttl_seconds=self.ttl_seconds,
        )

    async def get(self, session_id: str) -> Optional[Session]:
        session = self._sessions.get(session_id)
        if session is None or session.is_expired(self.clock()):
            return None
        return session

    async def save(self, session: Session) -> None:
        self._sessions[session.session_id] = session

    async def delete(self, session_id: str) -> Optional[Session]:
        self._locks.pop(session_id, None)
        return self._sessions.pop(session_id, None)

    def lock(self, session_id: str) -> asyncio.Lock:
        if session_id not in self._locks:
            self._locks[session_id] = asyncio.Lock()
        return self._locks[session_id]

    async def purge_expired(self) -> List[Session]:
        now = self.clock()
        expired_ids = [sid for sid, session in self._sessions.items() if session.is_expired(now)]
        return [s for s in [await self.delete(sid) for sid in expired_ids] if s is not None]

    def __len__(self) -> int:
        return len(self._sessions)


class SessionSweeper:
    """Background task purging expired sessions and deleting their files."""

    def __init__(self, store: SessionStore, interval_seconds: float = 60.0):
        self.store = store
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    async def sweep(self) -> int:
        expired = await self.store.purge_expired()
        for session in expired:
            removed = remove_files(session.file_paths)
            logger.info("session_expired", session_id=session.session_id, files_removed=removed)
        return len(expired)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.sweep()
            except Exception as e:
                logger.error("session_sweep_failed", error=str(e), exc_info=True)

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run())
            logger.info("session_sweeper_started", interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
