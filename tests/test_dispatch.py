"""Tests for the completion queue and error model."""

import threading

import pytest

from courier.dispatch import CompletionQueue, main_queue
from courier.errors import CourierError, invalid_url_error, status_error


class TestCompletionQueue:
    def test_runs_callbacks_in_order_on_one_thread(self, completion_queue):
        seen = []
        futures = [completion_queue.deliver(lambda i=i: seen.append((i, threading.current_thread())))
                   for i in range(10)]
        for future in futures:
            future.result(timeout=5)
        assert [i for i, _ in seen] == list(range(10))
        assert len({t for _, t in seen}) == 1

    def test_future_carries_return_value(self, completion_queue):
        assert completion_queue.deliver(lambda a, b: a + b, 2, 3).result(timeout=5) == 5

    def test_is_current(self, completion_queue):
        assert not completion_queue.is_current()
        assert completion_queue.deliver(completion_queue.is_current).result(timeout=5)

    def test_callback_exception_is_logged_and_raised(self, completion_queue, caplog):
        def broken():
            raise KeyError("x")

        with pytest.raises(KeyError):
            completion_queue.deliver(broken).result(timeout=5)
        assert "raised" in caplog.text

    def test_main_queue_is_shared(self):
        assert main_queue() is main_queue()


class TestCourierError:
    def test_str_is_message(self):
        assert str(CourierError("An error occurred.", 500)) == "An error occurred."

    def test_cause_is_chained(self):
        cause = OSError("reset")
        err = status_error(502, b"bad gateway", cause)
        assert err.cause is cause
        assert err.__cause__ is cause
        assert err.data == b"bad gateway"

    def test_empty_data_is_absent(self):
        assert status_error(500, b"").data is None

    def test_invalid_url_error(self):
        err = invalid_url_error()
        assert (err.status_code, err.message, err.data, err.cause) == (404, "Invalid URL.", None, None)

    def test_repr(self):
        assert "status_code=403" in repr(status_error(403, b"nope"))
