"""Per-session program editing helpers: image overrides, batch uploads, autosave."""
from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from . import catalog, imaging, storage
from .constants import MAX_TIMETABLE_IMAGES, AssetKind, Portal
from .database import session_scope
from .exceptions import QuoteDeskError
from .schemas import Program

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProgramDraft:
    """Image overrides for one program, kept apart from the stored record
    until they are promoted."""

    def __init__(self, program: Program) -> None:
        self.program = program.model_copy(deep=True)
        self.hero_image = program.hero_image
        self.banner_image: Optional[str] = program.banner_image
        self.gallery_images = list(program.gallery_images)
        self.timetable_images = list(program.timetable_images)

    def append_gallery(self, url: str) -> None:
        self.gallery_images.append(url)

    def remove_gallery(self, index: int) -> str:
        return self.gallery_images.pop(index)

    def can_add_timetables(self, count: int) -> bool:
        return len(self.timetable_images) + count <= MAX_TIMETABLE_IMAGES

    def append_timetable(self, url: str) -> None:
        if not self.can_add_timetables(1):
            raise ValueError(f"At most {MAX_TIMETABLE_IMAGES} timetable images are allowed")
        self.timetable_images.append(url)

    def remove_timetable(self, index: int) -> str:
        return self.timetable_images.pop(index)

    def snapshot(self) -> Program:
        return self.program.model_copy(
            update={
                "hero_image": self.hero_image,
                "banner_image": self.banner_image,
                "gallery_images": list(self.gallery_images),
                "timetable_images": list(self.timetable_images),
            },
            deep=True,
        )

    def promote(self, session: Session, portal: Portal) -> Program:
        """Persist the current overrides as the program's defaults."""

        saved = catalog.save_program(session, self.snapshot(), portal)
        self.program = saved
        return saved

    def autosaver(
        self,
        portal: Portal,
        interval: float = 30.0,
        session_factory: Callable[[], AbstractContextManager[Session]] = session_scope,
    ) -> "Autosaver[Program]":
        def persist(program: Program) -> Program:
            with session_factory() as session:
                return catalog.save_program(session, program, portal)

        async def save(program: Program) -> None:
            self.program = await run_in_threadpool(persist, program)

        return Autosaver(self.snapshot, save, interval)


@dataclass(frozen=True)
class PendingFile:
    data: bytes
    content_type: Optional[str]
    filename: Optional[str]


@dataclass
class BatchOutcome:
    uploaded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


async def _normalize_and_upload(
    pending: PendingFile, kind: AssetKind, path_hint: str
) -> tuple[PendingFile, Optional[str]]:
    try:
        encoded = await imaging.normalize_for(
            kind, pending.data, pending.content_type, pending.filename
        )
        url = await storage.upload(encoded, path_hint)
    except QuoteDeskError as exc:
        logger.warning("Skipping %s: %s", pending.filename or "unnamed file", exc)
        return pending, None
    return pending, url


async def normalize_and_upload_batch(
    files: Sequence[PendingFile],
    kind: AssetKind,
    path_hint: str,
    on_complete: Optional[Callable[[str], None]] = None,
) -> BatchOutcome:
    """Normalize and upload each file independently.

    URLs are reported in completion order, which need not match the order
    of ``files``; one failing file never stops its siblings.
    """

    outcome = BatchOutcome()
    tasks = [asyncio.ensure_future(_normalize_and_upload(item, kind, path_hint)) for item in files]
    try:
        for finished in asyncio.as_completed(tasks):
            pending, url = await finished
            if url is None:
                outcome.failed.append(pending.filename or "")
                continue
            outcome.uploaded.append(url)
            if on_complete:
                on_complete(url)
    finally:
        unfinished = [task for task in tasks if not task.done()]
        for task in unfinished:
            task.cancel()
        if unfinished:
            await asyncio.gather(*unfinished, return_exceptions=True)
    return outcome


class Autosaver(Generic[T]):
    """Periodically hands a fresh snapshot to ``save``.

    ``snapshot`` is called when the timer fires, never earlier, so edits made
    between ticks are always included. Stopping waits for a running save.
    """

    def __init__(
        self,
        snapshot: Callable[[], T],
        save: Callable[[T], Awaitable[Any] | Any],
        interval: float = 30.0,
    ) -> None:
        self.snapshot = snapshot
        self.save = save
        self.interval = interval
        self.saves = 0
        self._stopped = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        if self._task is None:
            self._stopped.clear()
            self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        self._stopped.set()
        if self._task is not None:
            await self._task
            self._task = None

    async def flush(self) -> None:
        value = self.snapshot()
        try:
            result = self.save(value)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Autosave failed; will retry on the next tick")
            return
        self.saves += 1

    async def _run(self) -> None:
        while not self._stopped.is_set():
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                await self.flush()
