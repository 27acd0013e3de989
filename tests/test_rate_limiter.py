"""Tests for the rate limiter decorator and batched execution."""

import asyncio
import urllib.error
from unittest.mock import MagicMock, patch

import pytest
import requests

from tableannotator.errors import KnowledgeBaseError
from tableannotator.utils.rate_limiter import RateLimiter, run_in_batches

from conftest import run


def _http_error(status_code):
    resp = MagicMock()
    resp.status_code = status_code
    return requests.HTTPError(f"{status_code} Error", response=resp)


class TestRateLimiter:

    def test_calls_pass_through(self):
        limiter = RateLimiter(max_calls=5, period=1)
        assert limiter(lambda x: x * 2)(21) == 42

    def test_sleeps_when_limit_reached(self):
        limiter = RateLimiter(max_calls=2, period=10, name="Test")
        wrapped = limiter(lambda: "ok")
        with patch("tableannotator.utils.rate_limiter.time.sleep") as sleep:
            wrapped()
            wrapped()
            sleep.assert_not_called()
            wrapped()
        sleep.assert_called_once()
        assert 0 < sleep.call_args.args[0] <= 10

    def test_http_429_becomes_knowledge_base_error(self):
        def failing():
            raise _http_error(429)

        with pytest.raises(KnowledgeBaseError) as exc_info:
            RateLimiter(10, 1, name="Wikidata")(failing)()
        assert exc_info.value.status_code == 429
        assert isinstance(exc_info.value.__cause__, requests.HTTPError)

    def test_urllib_429_becomes_knowledge_base_error(self):
        def failing():
            raise urllib.error.HTTPError("http://example.org", 429, "Too Many Requests", {}, None)

        with pytest.raises(KnowledgeBaseError):
            RateLimiter(10, 1)(failing)()

    def test_other_errors_are_reraised(self):
        def failing():
            raise _http_error(500)

        with pytest.raises(requests.HTTPError):
            RateLimiter(10, 1)(failing)()


class TestRunInBatches:

    def test_results_keep_input_order(self):
        async def worker(item):
            await asyncio.sleep(0.01 * (5 - item))
            return item * 10

        assert run(run_in_batches(range(5), worker, batch_size=2)) == [0, 10, 20, 30, 40]

    def test_batches_run_one_after_another(self):
        active = {"now": 0, "peak": 0}

        async def worker(item):
            active["now"] += 1
            active["peak"] = max(active["peak"], active["now"])
            await asyncio.sleep(0.01)
            active["now"] -= 1
            return item

        run(run_in_batches(list("abcdefg"), worker, batch_size=3))
        assert active["peak"] == 3

    def test_delay_only_between_batches(self):
        async def worker(item):
            return item

        async def no_wait(seconds):
            return None

        async def scenario():
            with patch("tableannotator.utils.rate_limiter.asyncio.sleep", side_effect=no_wait) as sleep:
                await run_in_batches(range(5), worker, batch_size=2, delay=0.5)
                return sleep.call_count

        assert run(scenario()) == 2

    def test_empty_input(self):
        async def worker(item):
            return item

        assert run(run_in_batches([], worker, batch_size=3)) == []
