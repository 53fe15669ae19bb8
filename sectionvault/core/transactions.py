"""Unit-of-work helpers for section writes.

``run_in_transaction`` runs a callable against a session and commits once at
the end. Any failure rolls the whole unit back. Write races detected by the
database (unique constraint hit, stale optimistic lock) are retried from
scratch with fresh reads, a bounded number of times.

``section_lock`` serializes in-process writers of one section so that the
commit and the post-commit notification of one write finish before the next
writer of that section starts. Locks are per (owner_id, kind) and are
dropped once no thread holds or waits on them.
"""

import logging
import threading
import weakref
from contextlib import contextmanager
from typing import Callable, Hashable, Iterator, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ..exceptions import ConflictError, StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Raised when another transaction won the race for the same section.
RETRYABLE_ERRORS = (IntegrityError, StaleDataError)


def run_in_transaction(
    db: Session,
    work: Callable[[], T],
    *,
    owner_id: str,
    kind: str,
    max_attempts: int,
) -> T:
    """Execute ``work`` as one atomic unit of work and commit it.

    Args:
        db: Session the work operates on. Must have no pending changes.
        work: Zero-argument callable doing all reads and writes of the unit.
            It is called again from the start after a retryable failure, so
            it must read everything it needs inside the call.
        owner_id, kind: Section identity, used for logging and errors.
        max_attempts: Total attempts before giving up with ConflictError.

    Raises:
        ConflictError: Every attempt lost a write race.
        StorageError: Any other database failure. Nothing was applied.
    """
    for attempt in range(1, max_attempts + 1):
        try:
            result = work()
            db.commit()
            return result
        except RETRYABLE_ERRORS as e:
            db.rollback()
            logger.warning(
                "Section write conflict, retrying",
                extra={
                    "owner_id": owner_id,
                    "kind": kind,
                    "attempt": attempt,
                    "error": type(e).__name__,
                },
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(
                "Section write failed",
                extra={"owner_id": owner_id, "kind": kind, "error": str(e)},
            )
            raise StorageError("Failed to write section", original_error=e) from e
        except BaseException:
            # Domain errors, cancellation and interrupts: nothing may stay half-applied.
            db.rollback()
            raise

    raise ConflictError(owner_id, kind, max_attempts)


_registry_lock = threading.Lock()
_section_locks: "weakref.WeakValueDictionary[Hashable, threading.Lock]" = weakref.WeakValueDictionary()


def _lock_for(key: Hashable) -> threading.Lock:
    with _registry_lock:
        lock = _section_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _section_locks[key] = lock
        return lock


@contextmanager
def section_lock(owner_id: str, kind: str) -> Iterator[None]:
    """Hold the in-process write lock of one section."""
    lock = _lock_for((owner_id, kind))
    with lock:
        yield
