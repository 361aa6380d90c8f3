"""Tests for the retry policy and the retrying resource client."""

import asyncio

import httpx
import pytest

from idm_client.errors.exceptions import (
    ArgumentError,
    BadRequestError,
    ExhaustedRetryError,
    InvalidResponseError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    RequestTimeoutError,
    ServerError,
    TransientServerError,
)
from idm_client.testing import ScriptedTransport
from idm_client.transport.resource import RestClient
from idm_client.transport.retry import MAX_REQUEST_RETRIES, RetryPolicy, RetryRestClient

USERS_URL = "https://api.example.com/users/:id"

FAST = {"backoff_factor": 0, "jitter": 0}


def make_retry_client(http, **policy):
    return RetryRestClient(RestClient(http, USERS_URL), RetryPolicy(**{**FAST, **policy}))


class TestRetryBudget:
    """Attempts stop at max_retries + 1."""

    @pytest.mark.unit
    @pytest.mark.parametrize("max_retries", [0, 1, 3])
    async def test_always_retryable_makes_n_plus_one_attempts(self, make_http, no_sleep, max_retries):
        transport = ScriptedTransport([503])
        client = make_retry_client(make_http(transport), max_retries=max_retries)

        with pytest.raises(ExhaustedRetryError) as exc_info:
            await client.get("u1")

        assert transport.call_count == max_retries + 1
        assert exc_info.value.attempts == max_retries + 1
        assert isinstance(exc_info.value.last_error, TransientServerError)
        assert exc_info.value.status_code == 503
        assert exc_info.value.__cause__ is exc_info.value.last_error

    @pytest.mark.unit
    async def test_succeeds_on_second_attempt(self, make_http, no_sleep):
        transport = ScriptedTransport([503, {"user_id": "u1"}])
        client = make_retry_client(make_http(transport), max_retries=3)

        result = await client.get("u1")

        assert result == {"user_id": "u1"}
        assert transport.call_count == 2
        assert no_sleep.await_count == 1

    @pytest.mark.unit
    async def test_retries_network_errors(self, make_http, no_sleep):
        transport = ScriptedTransport([httpx.ConnectError("reset"), httpx.ReadTimeout("slow"), {"ok": True}])
        client = make_retry_client(make_http(transport), max_retries=3)

        assert await client.get("u1") == {"ok": True}
        assert transport.call_count == 3

    @pytest.mark.unit
    async def test_exhausted_timeout_keeps_last_error(self, make_http, no_sleep):
        transport = ScriptedTransport([httpx.ReadTimeout("slow")])
        client = make_retry_client(make_http(transport), max_retries=1)

        with pytest.raises(ExhaustedRetryError) as exc_info:
            await client.get("u1")

        assert isinstance(exc_info.value.last_error, RequestTimeoutError)
        assert exc_info.value.status_code is None

    @pytest.mark.unit
    async def test_counter_resets_between_calls(self, make_http, no_sleep):
        transport = ScriptedTransport([503, {"n": 1}, 503, 503, {"n": 2}])
        client = make_retry_client(make_http(transport), max_retries=2)

        assert await client.get("u1") == {"n": 1}
        assert await client.get("u1") == {"n": 2}
        assert transport.call_count == 5

    @pytest.mark.unit
    async def test_retried_request_is_identical(self, make_http, no_sleep):
        transport = ScriptedTransport([429, {}])
        client = make_retry_client(make_http(transport))

        await client.patch({"id": "u1", "fields": "email"}, {"blocked": True})

        first, second = transport.requests
        assert first.method == second.method == "PATCH"
        assert first.url == second.url
        assert first.content == second.content


class TestNonRetryable:
    """Non-transient errors surface on the first attempt."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("status", "error"),
        [(400, BadRequestError), (404, NotFoundError), (501, ServerError)],
    )
    async def test_not_retried(self, make_http, no_sleep, status, error):
        transport = ScriptedTransport([status])
        client = make_retry_client(make_http(transport), max_retries=5)

        with pytest.raises(error):
            await client.get("u1")

        assert transport.call_count == 1
        no_sleep.assert_not_awaited()

    @pytest.mark.unit
    async def test_status_not_in_policy_is_not_retried(self, make_http, no_sleep):
        transport = ScriptedTransport([503])
        client = make_retry_client(make_http(transport), retry_status_codes=frozenset([429]))

        with pytest.raises(TransientServerError):
            await client.get("u1")

        assert transport.call_count == 1

    @pytest.mark.unit
    async def test_argument_error_never_dispatched(self, make_http, no_sleep):
        transport = ScriptedTransport([{}])
        client = make_retry_client(make_http(transport))

        with pytest.raises(ArgumentError):
            await client.get(3.14)

        assert transport.call_count == 0

    @pytest.mark.unit
    @pytest.mark.parametrize("step", [httpx.Response(200, text="OK"), httpx.DecodingError("bad gzip")])
    async def test_invalid_response_not_retried(self, make_http, no_sleep, step):
        transport = ScriptedTransport([step])
        client = make_retry_client(make_http(transport), max_retries=5)

        with pytest.raises(InvalidResponseError):
            await client.get_all()

        assert transport.call_count == 1
        no_sleep.assert_not_awaited()


class TestPolicyVariants:
    """Disabled policies and custom conditions."""

    @pytest.mark.unit
    async def test_disabled_policy_passes_error_through(self, make_http, no_sleep):
        transport = ScriptedTransport([503])
        client = make_retry_client(make_http(transport), enabled=False)

        with pytest.raises(TransientServerError):
            await client.get("u1")

        assert transport.call_count == 1

    @pytest.mark.unit
    async def test_none_policy_is_passthrough(self, make_http):
        transport = ScriptedTransport([503])
        client = RetryRestClient(RestClient(make_http(transport), USERS_URL), None)

        with pytest.raises(TransientServerError):
            await client.get("u1")

        assert transport.call_count == 1

    @pytest.mark.unit
    async def test_custom_retry_condition(self, make_http, no_sleep):
        transport = ScriptedTransport([409, 409, {"done": True}])
        client = make_retry_client(
            make_http(transport), retry_condition=lambda e: getattr(e, "status_code", None) == 409
        )

        assert await client.create({"name": "x"}) == {"done": True}
        assert transport.call_count == 3

    @pytest.mark.unit
    async def test_all_verbs_retry(self, make_http, no_sleep):
        transport = ScriptedTransport([502, {}, 502, {}, 502, [], 502, {}, 502, 204])
        client = make_retry_client(make_http(transport))

        await client.create({"a": 1})
        await client.get("u1")
        await client.get_all()
        await client.update({"id": "u1"}, {"a": 2})
        await client.delete({"id": "u1"})

        assert [r.method for r in transport.requests] == [
            "POST", "POST", "GET", "GET", "GET", "GET", "PATCH", "PATCH", "DELETE", "DELETE",
        ]


class TestBackoff:
    """Delays follow the backoff schedule or the server's hint."""

    @pytest.mark.unit
    async def test_exponential_schedule(self, make_http, no_sleep):
        transport = ScriptedTransport([503])
        client = make_retry_client(make_http(transport), max_retries=4, backoff_factor=0.5, max_backoff=3.0)

        with pytest.raises(ExhaustedRetryError):
            await client.get("u1")

        delays = [call.args[0] for call in no_sleep.await_args_list]
        assert delays == [0.5, 1.0, 2.0, 3.0]

    @pytest.mark.unit
    async def test_retry_after_header_used(self, make_http, no_sleep):
        transport = ScriptedTransport([httpx.Response(429, headers={"Retry-After": "2"}), {}])
        client = make_retry_client(make_http(transport), backoff_factor=1.0)

        await client.get("u1")

        no_sleep.assert_awaited_once_with(2.0)

    @pytest.mark.unit
    async def test_retry_after_capped_by_max_backoff(self, make_http, no_sleep):
        transport = ScriptedTransport([httpx.Response(429, headers={"Retry-After": "3600"}), {}])
        client = make_retry_client(make_http(transport), max_backoff=5.0)

        await client.get("u1")

        no_sleep.assert_awaited_once_with(5.0)

    @pytest.mark.unit
    def test_jitter_stays_within_bounds(self):
        policy = RetryPolicy(backoff_factor=1.0, jitter=0.2, max_backoff=100)

        for retry in range(1, 6):
            base = 2 ** (retry - 1)
            delay = policy.backoff_delay(retry)
            assert base * 0.8 <= delay <= base * 1.2

    @pytest.mark.unit
    def test_rate_limit_hint_wins(self):
        policy = RetryPolicy(backoff_factor=1.0)
        error = RateLimitError("slow down", retry_after=1.5, status_code=429)

        assert policy.backoff_delay(3, error) == 1.5


class TestPolicyValidation:
    """RetryPolicy rejects impossible settings."""

    @pytest.mark.unit
    @pytest.mark.parametrize("max_retries", [-1, MAX_REQUEST_RETRIES + 1])
    def test_max_retries_range(self, max_retries):
        with pytest.raises(ArgumentError):
            RetryPolicy(max_retries=max_retries)

    @pytest.mark.unit
    def test_max_retries_type(self):
        with pytest.raises(ArgumentError):
            RetryPolicy(max_retries="3")

    @pytest.mark.unit
    def test_negative_backoff(self):
        with pytest.raises(ArgumentError):
            RetryPolicy(backoff_factor=-1)

    @pytest.mark.unit
    def test_default_classification(self):
        policy = RetryPolicy()

        assert policy.is_retryable(NetworkError("reset"))
        assert policy.is_retryable(TransientServerError("down", status_code=503))
        assert policy.is_retryable(RateLimitError("slow", status_code=429))
        assert not policy.is_retryable(NotFoundError("missing", status_code=404))
        assert not policy.is_retryable(ValueError("not an API error"))


class TestCancellation:
    """Cancelling the caller stops further attempts."""

    @pytest.mark.unit
    async def test_cancel_during_backoff(self, make_http):
        transport = ScriptedTransport([503])
        client = make_retry_client(make_http(transport), backoff_factor=10.0, max_retries=5)

        task = asyncio.create_task(client.get("u1"))
        while transport.call_count == 0:
            await asyncio.sleep(0)
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert task.cancelled()
        for _ in range(10):
            await asyncio.sleep(0)
        assert transport.call_count == 1
