import threading

import pytest

from yaffe.job_system import (
    Job,
    JobKind,
    JobResult,
    JobSystem,
    generate_job_id,
    process_results,
)


def echo(job):
    return JobResult(job.kind, job.params["n"])


def test_all_jobs_produce_results():
    with JobSystem(echo, 4) as system:
        for n in range(20):
            system.submit(Job(JobKind.SEARCH_GAME, {"n": n}))
    results = system.poll_results()
    assert sorted(r.value for r in results) == list(range(20))
    assert all(r.kind is JobKind.SEARCH_GAME for r in results)


def test_failed_and_empty_jobs_produce_no_result():
    def handler(job):
        if job.kind is JobKind.DOWNLOAD_URL:
            return None
        if job.params.get("fail"):
            raise ValueError("boom")
        return JobResult(job.kind, job.params["n"])

    system = JobSystem(handler, 2)
    system.submit(Job(JobKind.DOWNLOAD_URL, {"n": 1}))
    system.submit(Job(JobKind.SEARCH_PLATFORM, {"fail": True}))
    system.submit(Job(JobKind.SEARCH_PLATFORM, {"n": 3}))
    system.shutdown()
    results = system.poll_results()
    assert [(r.kind, r.value) for r in results] == [(JobKind.SEARCH_PLATFORM, 3)]


def test_jobs_run_on_worker_threads():
    main = threading.get_ident()

    def handler(job):
        return JobResult(job.kind, threading.get_ident())

    with JobSystem(handler, 1) as system:
        system.submit(Job(JobKind.CHECK_UPDATES))
    (result,) = system.poll_results()
    assert result.value != main
    assert result.kind is JobKind.CHECK_UPDATES


def test_poll_results_drains_queue():
    with JobSystem(echo, 1) as system:
        system.submit(Job(JobKind.LOAD_IMAGE, {"n": 0}))
    assert len(system.poll_results()) == 1
    assert system.poll_results() == []


def test_submit_after_shutdown_raises():
    system = JobSystem(echo, 1)
    system.shutdown()
    system.shutdown()
    with pytest.raises(RuntimeError):
        system.submit(Job(JobKind.CHECK_UPDATES))


def test_invalid_thread_count():
    with pytest.raises(ValueError):
        JobSystem(echo, 0)


def test_generate_job_id_is_64_bit():
    ids = [generate_job_id() for _ in range(100)]
    assert all(0 <= i < 2**64 for i in ids)
    assert len(set(ids)) > 1


def test_process_results_removes_processed_in_order():
    results = [
        JobResult(JobKind.LOAD_IMAGE, "a"),
        JobResult(JobKind.CHECK_UPDATES, True),
        JobResult(JobKind.LOAD_IMAGE, "b"),
    ]
    seen = []
    process_results(
        results,
        lambda r: r.kind is JobKind.LOAD_IMAGE,
        lambda r: seen.append(r.value),
    )
    assert seen == ["a", "b"]
    assert results == [JobResult(JobKind.CHECK_UPDATES, True)]


def test_process_results_nothing_selected_keeps_all():
    results = [JobResult(JobKind.SEARCH_GAME, 1), JobResult(JobKind.SEARCH_GAME, 2)]
    original = list(results)
    process_results(results, lambda r: False, lambda r: pytest.fail("called"))
    assert results == original