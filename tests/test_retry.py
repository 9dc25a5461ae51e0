from __future__ import annotations

import pytest

from jobmate.retry import backoff_delay, retry


class Flaky:
    def __init__(self, failures: int, exc: type[Exception] = ConnectionError) -> None:
        self.failures = failures
        self.exc = exc
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc(f"failure {self.calls}")
        return "ok"


def test_succeeds_after_transient_failures():
    sleeps: list[float] = []
    fn = Flaky(failures=2)
    wrapped = retry(max_attempts=3, base_delay=1.0, jitter=False, sleep=sleeps.append)(fn)
    assert wrapped() == "ok"
    assert fn.calls == 3
    assert sleeps == [1.0, 2.0]


def test_raises_after_last_attempt(caplog):
    fn = Flaky(failures=5)
    wrapped = retry(max_attempts=2, jitter=False, sleep=lambda _: None)(fn)
    with pytest.raises(ConnectionError, match="failure 2"):
        wrapped()
    assert fn.calls == 2
    assert "failed after 2 attempts" in caplog.text


def test_non_retryable_error_propagates_immediately():
    fn = Flaky(failures=1, exc=KeyError)
    wrapped = retry(retryable=(ConnectionError,), sleep=lambda _: None)(fn)
    with pytest.raises(KeyError):
        wrapped()
    assert fn.calls == 1


def test_invalid_max_attempts():
    with pytest.raises(ValueError):
        retry(max_attempts=0)


def test_backoff_delay_grows_and_caps():
    kwargs = dict(base_delay=1.0, max_delay=5.0, backoff_factor=2.0, jitter=False)
    assert [backoff_delay(n, **kwargs) for n in (1, 2, 3, 4)] == [1.0, 2.0, 4.0, 5.0]


def test_backoff_delay_jitter_range():
    for _ in range(20):
        d = backoff_delay(2, base_delay=1.0, max_delay=30.0, backoff_factor=2.0, jitter=True)
        assert 1.0 <= d < 3.0


def test_wrapper_keeps_function_name():
    @retry(sleep=lambda _: None)
    def fetch_insights():
        return 1

    assert fetch_insights.__name__ == "fetch_insights"
