"""
Tests for the job record store: dedup, cap, clear.
"""

import threading

from skilltrends.jobs import MAX_JOBS, STORAGE_KEY, JobStore
from skilltrends.storage import MemoryStore


class TestAddJob:
    """Test appending, deduplication and capping."""

    def test_first_job_is_new(self, job_store, make_job):
        """The first record should be stored as new."""
        outcome = job_store.add_job(make_job(1))
        assert outcome == {"status": "new", "count": 1}
        assert job_store.count() == 1

    def test_size_tracks_calls_up_to_cap(self, job_store, make_job):
        """Store size should be min(calls, MAX_JOBS)."""
        for i in range(MAX_JOBS + 20):
            job_store.add_job(make_job(i))
            assert job_store.count() == min(i + 1, MAX_JOBS)

    def test_duplicate_url_not_added(self, job_store, make_job):
        """A second record with the same URL should be ignored."""
        job_store.add_job(make_job(1, skills=["Go"]))
        outcome = job_store.add_job(make_job(1, skills=["Rust"]))

        assert outcome["status"] == "duplicate"
        jobs = job_store.load_jobs()
        assert len(jobs) == 1
        assert jobs[0]["skills"] == ["Go"]

    def test_overflow_keeps_most_recent(self, job_store, make_job):
        """Overflow should drop the oldest records first."""
        total = MAX_JOBS + 5
        for i in range(total):
            job_store.add_job(make_job(i))

        urls = [j["url"] for j in job_store.load_jobs()]
        expected = [make_job(i)["url"] for i in range(5, total)]
        assert urls == expected

    def test_duplicate_of_evicted_record_is_new_again(self, job_store, make_job):
        """An evicted URL can be added again."""
        for i in range(MAX_JOBS + 1):
            job_store.add_job(make_job(i))
        outcome = job_store.add_job(make_job(0))

        assert outcome["status"] == "new"
        assert job_store.load_jobs()[-1]["url"] == make_job(0)["url"]
        assert job_store.count() == MAX_JOBS

    def test_insertion_order_preserved(self, job_store, make_job):
        """Records should stay in insertion order."""
        for i in (3, 1, 2):
            job_store.add_job(make_job(i))
        assert [j["company"] for j in job_store.load_jobs()] == ["company3", "company1", "company2"]

    def test_custom_cap(self, local_store, quiet_logger, make_job):
        """A custom max_jobs should be honoured."""
        store = JobStore(local_store, logger=quiet_logger, max_jobs=3)
        for i in range(5):
            store.add_job(make_job(i))
        assert [j["company"] for j in store.load_jobs()] == ["company2", "company3", "company4"]

    def test_badge_shows_count(self, job_store, badge, make_job):
        """The badge should show the stored count."""
        job_store.add_job(make_job(1))
        job_store.add_job(make_job(2))
        assert badge.text == "2"
        assert badge.background_color == "#30e8bd"

    def test_badge_updated_on_duplicate(self, job_store, badge, make_job):
        """A duplicate insert should still refresh the badge."""
        job_store.add_job(make_job(1))
        badge.clear()
        job_store.add_job(make_job(1))
        assert badge.text == "1"

    def test_invalid_record_rejected(self, job_store, local_store, badge, make_job):
        """Invalid records should never be persisted."""
        outcome = job_store.add_job(make_job(1, timestamp="yesterday"))

        assert outcome["status"] == "validation_error"
        assert outcome["errors"]
        assert local_store.get(STORAGE_KEY) is None
        assert badge.text == ""

    def test_metrics(self, job_store, quiet_logger, make_job):
        """Added, duplicate and rejected records should be counted."""
        job_store.add_job(make_job(1))
        job_store.add_job(make_job(1))
        job_store.add_job({"url": "nope"})

        metrics = quiet_logger.get_metrics()
        assert metrics["jobs_added"] == 1
        assert metrics["duplicates_skipped"] == 1
        assert metrics["records_rejected"] == 1

    def test_concurrent_adds_do_not_lose_updates(self, job_store, make_job):
        """Parallel adds should not lose records."""
        def worker(offset):
            for i in range(10):
                job_store.add_job(make_job(offset + i))

        threads = [threading.Thread(target=worker, args=(n * 10,)) for n in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert job_store.count() == 50


class TestLoadJobs:
    """Persisted data is validated on the way out."""

    def test_empty_store(self, job_store):
        """An untouched store should read as empty."""
        assert job_store.load_jobs() == []

    def test_malformed_records_dropped(self, quiet_logger, make_job):
        """Malformed persisted records should be skipped."""
        good = make_job(1)
        store = MemoryStore({STORAGE_KEY: [good, {"url": 5}, "junk"]})
        job_store = JobStore(store, logger=quiet_logger)
        assert job_store.load_jobs() == [good]

    def test_non_list_value_ignored(self, quiet_logger):
        """A non-list stored value should read as empty."""
        job_store = JobStore(MemoryStore({STORAGE_KEY: {"oops": True}}), logger=quiet_logger)
        assert job_store.load_jobs() == []


class TestClearAndTrends:
    def test_clear_removes_everything(self, job_store, local_store, badge, make_job):
        """Clear should delete the key and blank the badge."""
        job_store.add_job(make_job(1))
        job_store.clear()

        assert local_store.get(STORAGE_KEY) is None
        assert job_store.count() == 0
        assert badge.text == ""

    def test_get_trends_reads_store(self, job_store, make_job):
        """Trends should be computed from stored records."""
        job_store.add_job(make_job(1, skills=["Go"]))
        job_store.add_job(make_job(2, skills=["Go", "Rust"]))
        assert job_store.get_trends() == [
            {"skill": "Go", "count": 2, "pct": 100},
            {"skill": "Rust", "count": 1, "pct": 50},
        ]

    def test_get_trends_empty(self, job_store):
        """An empty store should have no trends."""
        assert job_store.get_trends() == []
