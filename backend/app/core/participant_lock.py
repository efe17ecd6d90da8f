"""
Per-participant mutual exclusion for session booking.

A booking must check for overlaps and insert as one unit with respect to every
other booking that touches the same teacher or learner. Each participant maps
to one lock key; keys are always taken in sorted order so two requests sharing
both participants cannot deadlock.

The in-process lock is always taken. With ``scheduling_lock_backend="redis"``
a Redis lock is layered on top for multi-process deployments.
"""

from __future__ import annotations

from contextlib import contextmanager
import logging
import threading
from typing import Iterator, List, Optional, Tuple
import weakref

from redis import Redis
from redis.exceptions import LockError, RedisError
from redis.lock import Lock as RedisLock

from app.core.config import settings
from app.core.exceptions import SchedulingBusyException
from app.monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

_SYNC_REDIS: Optional[Redis] = None
_SYNC_REDIS_LOCK = threading.Lock()

# Entries vanish once no caller holds a reference to the lock.
_LOCAL_LOCKS: weakref.WeakValueDictionary[str, threading.Lock] = weakref.WeakValueDictionary()
_LOCAL_LOCKS_GUARD = threading.Lock()


def participant_lock_key(participant_id: str) -> str:
    return f"participant:{participant_id}:mutex"


def _namespaced_key(key: str) -> str:
    return f"{settings.scheduling_lock_namespace}:lock:{key}"


def _local_lock(key: str) -> threading.Lock:
    with _LOCAL_LOCKS_GUARD:
        lock = _LOCAL_LOCKS.get(key)
        if lock is None:
            lock = threading.Lock()
            _LOCAL_LOCKS[key] = lock
        return lock


def _get_sync_redis() -> Optional[Redis]:
    global _SYNC_REDIS
    if _SYNC_REDIS is not None:
        return _SYNC_REDIS
    with _SYNC_REDIS_LOCK:
        if _SYNC_REDIS is not None:
            return _SYNC_REDIS
        try:
            client = Redis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            client.ping()
        except RedisError as exc:
            logger.warning("participant_lock_redis_unavailable: %s", exc)
            return None
        _SYNC_REDIS = client
        return _SYNC_REDIS


def _acquire_redis_locks(keys: Tuple[str, ...], ttl_s: int, timeout_s: float) -> List[RedisLock]:
    client = _get_sync_redis()
    if client is None:
        prometheus_metrics.record_participant_lock("acquire", "redis_unavailable")
        logger.warning("participant_lock_redis_unavailable", extra={"lock_keys": list(keys)})
        return []

    acquired: List[RedisLock] = []
    for key in keys:
        lock = client.lock(_namespaced_key(key), timeout=ttl_s, blocking_timeout=timeout_s)
        try:
            got_it = lock.acquire()
        except RedisError as exc:
            prometheus_metrics.record_participant_lock("acquire", "error")
            logger.warning(
                "participant_lock_redis_acquire_failed",
                extra={"lock_key": key, "error": str(exc), "error_type": type(exc).__name__},
            )
            continue
        if not got_it:
            _release_redis_locks(acquired)
            prometheus_metrics.record_participant_lock("acquire", "blocked")
            raise SchedulingBusyException(keys)
        acquired.append(lock)
    return acquired


def _release_redis_locks(locks: List[RedisLock]) -> None:
    for lock in reversed(locks):
        try:
            lock.release()
        except (LockError, RedisError) as exc:
            prometheus_metrics.record_participant_lock("release", "error")
            logger.warning(
                "participant_lock_redis_release_failed",
                extra={"lock_key": lock.name, "error": str(exc), "error_type": type(exc).__name__},
            )


@contextmanager
def participant_locks(
    *participant_ids: str,
    ttl_s: Optional[int] = None,
    timeout_s: Optional[float] = None,
) -> Iterator[Tuple[str, ...]]:
    """
    Hold the booking mutex of every given participant for the duration of the block.

    Raises:
        SchedulingBusyException: If a lock is not acquired within ``timeout_s``.
    """
    ttl = ttl_s if ttl_s is not None else settings.scheduling_lock_ttl_seconds
    timeout = timeout_s if timeout_s is not None else settings.scheduling_lock_timeout_seconds
    keys = tuple(sorted({participant_lock_key(pid) for pid in participant_ids if pid}))

    held_local: List[threading.Lock] = []
    held_remote: List[RedisLock] = []
    try:
        for key in keys:
            lock = _local_lock(key)
            if not lock.acquire(timeout=timeout):
                prometheus_metrics.record_participant_lock("acquire", "timeout")
                raise SchedulingBusyException(keys)
            held_local.append(lock)

        if settings.scheduling_lock_backend == "redis":
            held_remote = _acquire_redis_locks(keys, ttl, timeout)

        prometheus_metrics.record_participant_lock("acquire", "success")
        yield keys
    finally:
        _release_redis_locks(held_remote)
        for lock in reversed(held_local):
            lock.release()
        if held_local:
            prometheus_metrics.record_participant_lock("release", "success")
