"""
Client-side bulk upload of card keys.

A key file is normalized into a list of keys, cut into batches of
UPLOAD_BATCH_SIZE and sent one batch at a time; each batch is awaited
before the next is sent. Progress is published to subscribers after
every batch. The first failing batch stops the upload: batches already
stored stay stored, and the error goes to the caller.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable

from cardshop.domain.cards.keys import chunked, normalize_card_keys

logger = logging.getLogger(__name__)

# Transport-level batch; the server sub-chunks its own INSERTs independently.
UPLOAD_BATCH_SIZE = 50

SubmitBatch = Callable[[str, list[str]], Awaitable[int]]


class NoCardsFoundError(ValueError):
    pass


class UploadInProgressError(RuntimeError):
    pass


def progress_percent(processed: int, total: int) -> int:
    if total <= 0:
        return 0
    # Half-up, like the admin UI's progress bar.
    return int(processed * 100 / total + 0.5)


@dataclass(frozen=True, slots=True)
class UploadProgress:
    product_id: str
    batch_index: int
    batch_count: int
    processed: int
    total: int
    succeeded: int

    @property
    def percent(self) -> int:
        return progress_percent(self.processed, self.total)


@dataclass(slots=True)
class UploadSession:
    total: int = 0
    processed: int = 0
    active: bool = False

    @property
    def percent(self) -> int:
        return progress_percent(self.processed, self.total)

    def reset(self) -> None:
        self.total = 0
        self.processed = 0
        self.active = False


ProgressListener = Callable[[UploadProgress], None]


class CardUploadCoordinator:
    def __init__(self, submit_batch: SubmitBatch, batch_size: int = UPLOAD_BATCH_SIZE) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be a positive integer")
        self._submit_batch = submit_batch
        self.batch_size = batch_size
        self.session = UploadSession()
        self._listeners: list[ProgressListener] = []

    @property
    def busy(self) -> bool:
        return self.session.active

    def subscribe(self, listener: ProgressListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, event: UploadProgress) -> None:
        for listener in list(self._listeners):
            listener(event)

    def _claim(self, total: int) -> UploadSession:
        if self.session.active:
            raise UploadInProgressError("An upload is already running")
        # Each upload owns its session object; late resets cannot touch a newer one.
        self.session = UploadSession(total=total, processed=0, active=True)
        return self.session

    async def run_upload(self, product_id: str, keys: list[str]) -> int:
        """Send `keys` batch by batch and return the total stored count."""
        if not keys:
            raise NoCardsFoundError("No cards found")
        session = self._claim(len(keys))
        return await self._run_claimed(product_id, list(keys), session)

    def start(self, product_id: str, keys: list[str]) -> "asyncio.Task[int]":
        """Run the upload as a task; cancelling it stops before the next batch."""
        if not keys:
            raise NoCardsFoundError("No cards found")
        loop = asyncio.get_running_loop()
        session = self._claim(len(keys))
        task = loop.create_task(self._run_claimed(product_id, list(keys), session))
        # A task cancelled before its first step never enters _run_claimed.
        task.add_done_callback(lambda _: session.reset())
        return task

    async def upload_text(self, product_id: str, raw_text: str) -> int:
        return await self.run_upload(product_id, normalize_card_keys(raw_text))

    async def upload_file(self, product_id: str, path: Path | str) -> int:
        text = Path(path).read_text(encoding="utf-8-sig")
        return await self.upload_text(product_id, text)

    async def _run_claimed(self, product_id: str, keys: list[str], session: UploadSession) -> int:
        total = len(keys)
        batch_count = (total + self.batch_size - 1) // self.batch_size
        succeeded = 0
        try:
            for index, batch in enumerate(chunked(keys, self.batch_size)):
                offset = index * self.batch_size
                succeeded += await self._submit_batch(product_id, batch)
                session.processed = min(offset + self.batch_size, total)
                self._publish(
                    UploadProgress(
                        product_id=product_id,
                        batch_index=index,
                        batch_count=batch_count,
                        processed=session.processed,
                        total=total,
                        succeeded=succeeded,
                    )
                )
        except BaseException:
            logger.warning(
                "[upload] stopped product_id=%s processed=%s/%s succeeded=%s",
                product_id,
                session.processed,
                total,
                succeeded,
            )
            raise
        finally:
            session.reset()
        logger.info("[upload] finished product_id=%s succeeded=%s", product_id, succeeded)
        return succeeded
