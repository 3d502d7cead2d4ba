import threading
import time
from datetime import datetime, timedelta, timezone

from wonka.watchdog import CircuitBreaker, WatchdogConfig, default_watchdog_config


def test_trips_at_threshold():
    cb = CircuitBreaker(3, timedelta(seconds=60))
    start = datetime.now() - timedelta(seconds=1)
    assert cb.record_failure("w-01", start) is False
    assert cb.record_failure("w-01", start) is False
    assert cb.tripped() is False
    assert cb.record_failure("w-01", start) is True
    assert cb.tripped() is True


def test_ignores_slow_failures():
    cb = CircuitBreaker(3, timedelta(seconds=1))
    slow = datetime.now() - timedelta(seconds=2)
    results = [cb.record_failure("w-01", slow) for _ in range(5)]
    assert results == [False] * 5
    assert cb.tripped() is False


def test_per_worker_threshold():
    cb = CircuitBreaker(3, timedelta(seconds=60))
    rapid = datetime.now() - timedelta(seconds=1)
    assert cb.record_failure("w-01", rapid) is False
    assert cb.record_failure("w-02", rapid) is False
    assert cb.record_failure("w-01", rapid) is False
    assert cb.record_failure("w-02", rapid) is False
    assert cb.tripped() is False
    assert cb.record_failure("w-01", rapid) is True
    assert cb.tripped() is True


def test_reset_clears_tripped():
    cb = CircuitBreaker(1, timedelta(seconds=60))
    cb.record_failure("w-01", datetime.now())
    assert cb.tripped() is True
    cb.reset()
    assert cb.tripped() is False


def test_reset_clears_history():
    cb = CircuitBreaker(2, timedelta(seconds=60))
    assert cb.record_failure("w-01", datetime.now()) is False
    cb.reset()
    assert cb.record_failure("w-01", datetime.now()) is False
    assert cb.tripped() is False


def test_slow_failure_reports_existing_trip():
    cb = CircuitBreaker(1, timedelta(seconds=5))
    assert cb.record_failure("w-01", datetime.now()) is True
    slow = datetime.now() - timedelta(seconds=10)
    assert cb.record_failure("w-02", slow) is True


def test_session_exactly_window_old_is_not_rapid():
    window = timedelta(seconds=2)
    cb = CircuitBreaker(1, window)
    start = datetime.now() - window - timedelta(milliseconds=1)
    assert cb.record_failure("w-01", start) is False
    assert cb.tripped() is False


def test_expired_failures_are_pruned():
    cb = CircuitBreaker(3, timedelta(milliseconds=200))
    assert cb.record_failure("w-01", datetime.now()) is False
    assert cb.record_failure("w-01", datetime.now()) is False
    time.sleep(0.3)
    assert cb.record_failure("w-01", datetime.now()) is False
    assert cb.tripped() is False


def test_timezone_aware_session_start():
    cb = CircuitBreaker(2, timedelta(seconds=60))
    start = datetime.now(timezone.utc) - timedelta(seconds=1)
    assert cb.record_failure("w-01", start) is False
    assert cb.record_failure("w-01", start) is True


def test_concurrent_failures_trip_once_threshold_reached():
    cb = CircuitBreaker(50, timedelta(seconds=60))
    start = datetime.now()

    def worker():
        for _ in range(10):
            cb.record_failure("w-01", start)

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert cb.tripped() is True


def test_default_watchdog_config_values():
    cfg = default_watchdog_config()
    assert cfg.interval == timedelta(seconds=30)
    assert cfg.cb_threshold == 3
    assert cfg.cb_window == timedelta(seconds=60)


def test_watchdog_config_defaults_match_default_function():
    assert WatchdogConfig() == default_watchdog_config()


def test_watchdog_config_override():
    cfg = WatchdogConfig(interval=timedelta(milliseconds=50), cb_threshold=5)
    assert cfg.interval == timedelta(milliseconds=50)
    assert cfg.cb_threshold == 5
    assert cfg.cb_window == timedelta(seconds=60)