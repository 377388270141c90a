"""
DocumentLockRegistry -- per-document exclusive locks for read-modify-write.

Responsibility:
    Serializes writers to the same document inside one process.  Recording
    a payment is "load invoice and payments, reduce, append, update status,
    commit"; two threads doing that for the same invoice must not interleave
    or both will compute from a stale amount due.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.
    Used by InvoiceService.record_payment.  Across processes the row lock
    (``SELECT ... FOR UPDATE``) taken by the service provides the same
    guarantee on PostgreSQL.

Invariants enforced:
    - At most one holder per document key at a time.
    - The lock is held until the caller's transaction has committed or
      rolled back (the context manager wraps the whole unit of work).

Failure modes:
    - DocumentLockTimeoutError if the lock is not acquired within the
      timeout.  Nothing has been read or written at that point.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import Iterator

from ops_kernel.exceptions import DocumentLockTimeoutError
from ops_kernel.logging_config import get_logger

logger = get_logger("services.document_lock")

DEFAULT_LOCK_TIMEOUT_SECONDS = 10.0


class DocumentLockRegistry:
    """
    Registry of one ``threading.Lock`` per document key.

    Locks are created lazily and kept for the life of the registry; the
    number of live documents in a small business is bounded.

    Usage:
        registry = DocumentLockRegistry()
        with registry.hold("INV-2026-0001", timeout=5):
            ...  # load, reduce, persist, commit
    """

    def __init__(self, default_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS):
        self._default_timeout = default_timeout
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, key: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def is_locked(self, key: str) -> bool:
        with self._registry_lock:
            lock = self._locks.get(key)
        return lock is not None and lock.locked()

    @contextmanager
    def hold(self, key: str, timeout: float | None = None) -> Iterator[None]:
        """
        Hold the exclusive lock for ``key`` for the duration of the block.

        Raises:
            DocumentLockTimeoutError: If not acquired within ``timeout``
                seconds (registry default when None).
        """
        wait = self._default_timeout if timeout is None else timeout
        lock = self._lock_for(key)

        started = time.monotonic()
        if not lock.acquire(timeout=wait):
            logger.warning(
                "document_lock_timeout",
                extra={"document_key": key, "timeout_seconds": wait},
            )
            raise DocumentLockTimeoutError(key, wait)

        logger.debug(
            "document_lock_acquired",
            extra={
                "document_key": key,
                "waited_ms": round((time.monotonic() - started) * 1000, 2),
            },
        )
        try:
            yield
        finally:
            lock.release()
            logger.debug("document_lock_released", extra={"document_key": key})


_default_registry = DocumentLockRegistry()


def get_document_locks() -> DocumentLockRegistry:
    """Process-wide registry shared by every service instance."""
    return _default_registry
