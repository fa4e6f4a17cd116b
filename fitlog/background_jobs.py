# backend/fitlog/background_jobs.py
"""
Progress tracking for detached account-setup work.

Jobs live in a key-value store with TTL support so a deployment can swap the
in-process store for a shared one without touching the call sites.
"""
import logging
import threading
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Optional

from .enums import JobStatus

logger = logging.getLogger(__name__)

START_PROGRESS = 5
MAX_RUNNING_PROGRESS = 95
DEFAULT_RETENTION_SECONDS = 10 * 60


class InMemoryStore:
    """Thread-safe dict with per-key expiry, checked lazily on access."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._items: Dict[str, Any] = {}
        self._expires: Dict[str, float] = {}
        self._lock = threading.Lock()

    def put(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        with self._lock:
            self._items[key] = value
            if ttl is None:
                self._expires.pop(key, None)
            else:
                self._expires[key] = self._clock() + ttl

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            expires_at = self._expires.get(key)
            if expires_at is not None and self._clock() >= expires_at:
                self._items.pop(key, None)
                self._expires.pop(key, None)
                return None
            return self._items.get(key)

    def delete(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)
            self._expires.pop(key, None)


@dataclass(frozen=True)
class Job:
    id: str
    user_id: int
    status: JobStatus
    progress: int
    started_at: float
    error: Optional[str] = None
    completed_at: Optional[float] = None

    def to_dict(self):
        return {
            "job_id": self.id,
            "status": self.status.value,
            "progress": self.progress,
            "error": self.error,
        }


class JobTracker:
    def __init__(self, store=None, retention_seconds: float = DEFAULT_RETENTION_SECONDS,
                 clock: Callable[[], float] = time.time):
        self.store = store if store is not None else InMemoryStore()
        self.retention_seconds = retention_seconds
        self._clock = clock

    def _key(self, job_id: str) -> str:
        return f"job:{job_id}"

    def _save(self, job: Job, ttl: Optional[float] = None) -> None:
        self.store.put(self._key(job.id), job, ttl=ttl)

    def create_job(self, user_id: int) -> str:
        now = self._clock()
        job_id = f"{user_id}-{int(now * 1000)}-{uuid.uuid4().hex[:7]}"
        self._save(
            Job(
                id=job_id,
                user_id=user_id,
                status=JobStatus.PENDING,
                progress=0,
                started_at=now,
            )
        )
        return job_id

    def get_job(self, job_id: str) -> Optional[Job]:
        return self.store.get(self._key(job_id))

    def start_job(self, job_id: str) -> None:
        job = self.get_job(job_id)
        if job:
            self._save(replace(job, status=JobStatus.IN_PROGRESS, progress=START_PROGRESS))

    def update_job_progress(self, job_id: str, progress: int) -> None:
        job = self.get_job(job_id)
        if job and job.status == JobStatus.IN_PROGRESS:
            self._save(replace(job, progress=min(int(progress), MAX_RUNNING_PROGRESS)))

    def complete_job(self, job_id: str) -> None:
        job = self.get_job(job_id)
        if job:
            self._save(
                replace(
                    job,
                    status=JobStatus.COMPLETED,
                    progress=100,
                    completed_at=self._clock(),
                ),
                ttl=self.retention_seconds,
            )

    def fail_job(self, job_id: str, error: str) -> None:
        job = self.get_job(job_id)
        if job:
            self._save(
                replace(
                    job,
                    status=JobStatus.FAILED,
                    error=error,
                    completed_at=self._clock(),
                ),
                ttl=self.retention_seconds,
            )


class SetupWorker:
    """Runs tasks on a small thread pool, each inside an app context."""

    def __init__(self, max_workers: int = 2, inline: bool = False):
        self.inline = inline
        self._executor = None if inline else ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="fitlog-setup"
        )

    def submit(self, app, fn: Callable, *args, **kwargs):
        if self.inline:
            return self._run(app, fn, *args, **kwargs)
        return self._executor.submit(self._run, app, fn, *args, **kwargs)

    @staticmethod
    def _run(app, fn, *args, **kwargs):
        with app.app_context():
            try:
                return fn(*args, **kwargs)
            except Exception:
                logger.exception("background task %s crashed", getattr(fn, "__name__", fn))
                raise

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)


class Jobs:
    """Flask extension holding the job tracker and the setup worker."""

    def __init__(self, app=None):
        self.tracker: Optional[JobTracker] = None
        self.worker: Optional[SetupWorker] = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app, store=None):
        self.tracker = JobTracker(
            store=store,
            retention_seconds=app.config.get("JOB_RETENTION_SECONDS", DEFAULT_RETENTION_SECONDS),
        )
        self.worker = SetupWorker(
            max_workers=app.config.get("SETUP_JOB_WORKERS", 2),
            inline=app.config.get("SETUP_JOBS_INLINE", False),
        )
        app.extensions["fitlog_jobs"] = self

    def submit(self, app, fn: Callable, *args, **kwargs):
        return self.worker.submit(app, fn, *args, **kwargs)
