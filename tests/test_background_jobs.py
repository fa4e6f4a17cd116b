from fitlog.background_jobs import InMemoryStore, JobTracker, SetupWorker
from fitlog.enums import JobStatus


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def _tracker(retention=600):
    clock = FakeClock()
    store = InMemoryStore(clock=clock)
    return JobTracker(store=store, retention_seconds=retention, clock=clock), clock


def test_job_lifecycle():
    tracker, _ = _tracker()
    job_id = tracker.create_job(42)

    assert job_id.startswith("42-")
    assert tracker.get_job(job_id).status == JobStatus.PENDING

    tracker.start_job(job_id)
    assert tracker.get_job(job_id).progress == 5

    tracker.update_job_progress(job_id, 50)
    assert tracker.get_job(job_id).progress == 50

    tracker.update_job_progress(job_id, 120)
    assert tracker.get_job(job_id).progress == 95

    tracker.complete_job(job_id)
    job = tracker.get_job(job_id)
    assert job.status == JobStatus.COMPLETED
    assert job.progress == 100
    assert job.to_dict() == {
        "job_id": job_id,
        "status": "completed",
        "progress": 100,
        "error": None,
    }


def test_progress_ignored_unless_running():
    tracker, _ = _tracker()
    job_id = tracker.create_job(1)

    tracker.update_job_progress(job_id, 40)
    assert tracker.get_job(job_id).progress == 0

    tracker.start_job(job_id)
    tracker.complete_job(job_id)
    tracker.update_job_progress(job_id, 40)
    assert tracker.get_job(job_id).progress == 100


def test_failed_job_keeps_error():
    tracker, _ = _tracker()
    job_id = tracker.create_job(1)
    tracker.start_job(job_id)
    tracker.fail_job(job_id, "boom")

    job = tracker.get_job(job_id)
    assert job.status == JobStatus.FAILED
    assert job.error == "boom"


def test_finished_jobs_expire_after_retention():
    tracker, clock = _tracker(retention=600)
    job_id = tracker.create_job(1)
    tracker.start_job(job_id)
    tracker.complete_job(job_id)

    clock.now += 599
    assert tracker.get_job(job_id) is not None
    clock.now += 1
    assert tracker.get_job(job_id) is None


def test_running_jobs_do_not_expire():
    tracker, clock = _tracker(retention=10)
    job_id = tracker.create_job(1)
    tracker.start_job(job_id)
    clock.now += 10_000
    assert tracker.get_job(job_id).status == JobStatus.IN_PROGRESS


def test_unknown_job_is_none_and_updates_are_noops():
    tracker, _ = _tracker()
    tracker.start_job("missing")
    tracker.complete_job("missing")
    assert tracker.get_job("missing") is None


def test_store_delete():
    store = InMemoryStore()
    store.put("a", 1)
    store.delete("a")
    assert store.get("a") is None


def test_setup_worker_runs_in_app_context(app):
    from flask import current_app

    worker = SetupWorker(max_workers=1)
    try:
        future = worker.submit(app, lambda: current_app.name)
        assert future.result(timeout=5) == app.name
    finally:
        worker.shutdown()


def test_inline_worker_returns_result(app):
    worker = SetupWorker(inline=True)
    assert worker.submit(app, lambda x: x * 2, 21) == 42
