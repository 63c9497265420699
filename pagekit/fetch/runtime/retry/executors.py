"""Retrying execution of a single logical HTTP operation.

This module provides the RetryingRequestExecutor, which runs a repeatable
operation, classifies each outcome, and retries transient failures with
backoff until the policy's attempt budget runs out.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from ...core.cancellation import CancellationToken
from ...core.exceptions import (
    CredentialError,
    NonRetryableHttpStatus,
    RetryableHttpStatus,
    RetryBudgetExhausted,
    TransportError,
)
from ...models.http import HttpRequest, HttpResponse
from .definitions import RetryPolicy, RetryState
from .telemetry import log_request_failed, log_retry_exhausted, log_retry_scheduled

if TYPE_CHECKING:
    from ..rest.rate_limit import RateLimiter
    from ..rest.transport import HttpTransport

Operation = Callable[[], Awaitable[HttpResponse]]
SleepFn = Callable[[float], Awaitable[None]]


class RetryingRequestExecutor:
    """Executes one idempotent network operation with retry and backoff.

    Outcome classification per attempt:
        - status outside the retryable set and below 400: returned as-is
        - status in the retryable set, or a transport failure: retried
        - any other status >= 400: raised immediately, no further attempts

    The operation must be safe to repeat; the caller owns idempotency.
    """

    def __init__(
        self,
        transport: HttpTransport | None = None,
        policy: RetryPolicy | None = None,
        *,
        rate_limiter: RateLimiter | None = None,
        sleep: SleepFn | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            transport: Transport used by send(); execute() does not need one
            policy: Default retry policy (RetryPolicy() if omitted)
            rate_limiter: Optional limiter acquired before every attempt
            sleep: Override for the backoff sleep (tests inject a recorder)
        """
        self._transport = transport
        self._policy = policy or RetryPolicy()
        self._rate_limiter = rate_limiter
        self._sleep = sleep

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def send(
        self,
        request: HttpRequest,
        policy: RetryPolicy | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        """Send ``request`` through the configured transport with retries."""
        if self._transport is None:
            raise RuntimeError("RetryingRequestExecutor.send() requires a transport")
        transport = self._transport
        return await self.execute(
            lambda: transport.request(request),
            policy,
            cancel_token=cancel_token,
            url=request.url,
        )

    async def execute(
        self,
        operation: Operation,
        policy: RetryPolicy | None = None,
        *,
        cancel_token: CancellationToken | None = None,
        url: str | None = None,
    ) -> HttpResponse:
        """Run ``operation`` until it succeeds or the budget is spent.

        Args:
            operation: Zero-argument coroutine function returning an HttpResponse
            policy: Overrides the executor's default policy for this call
            cancel_token: Checked before each attempt and during backoff
            url: Used only for log context

        Returns:
            The first non-failure response

        Raises:
            NonRetryableHttpStatus: Non-retryable failure status (CredentialError for 401)
            RetryBudgetExhausted: Every attempt failed transiently
            FetchCancelledError: The token was cancelled
        """
        policy = policy or self._policy
        state = RetryState()

        for attempt in range(policy.max_attempts):
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()
            if self._rate_limiter is not None:
                await self._rate_limiter.acquire(cancel_token)

            response: HttpResponse | None = None
            try:
                response = await operation()
            except TransportError as e:
                error: BaseException = e
            except (asyncio.TimeoutError, ConnectionError) as e:
                error = TransportError(f"{type(e).__name__}: {e}", cause=e)
            else:
                if not policy.is_retryable(response.status):
                    if response.status >= 400:
                        log_request_failed(status=response.status, attempt=attempt + 1, url=url)
                        if response.status == 401:
                            raise CredentialError.from_response(response)
                        raise NonRetryableHttpStatus.from_response(response)
                    return response
                error = RetryableHttpStatus.from_response(response)

            if attempt + 1 >= policy.max_attempts:
                state = state.after_failure(error=error, response=response)
                log_retry_exhausted(state=state, max_attempts=policy.max_attempts, url=url)
                raise RetryBudgetExhausted(
                    f"Gave up after {state.attempt_number} attempts: {error}",
                    attempts=state.attempt_number,
                    last_response=response,
                    last_error=error,
                ) from error

            delay = policy.delay_for(attempt, response)
            state = state.after_failure(error=error, response=response, next_delay=delay)
            log_retry_scheduled(state=state, max_attempts=policy.max_attempts, url=url)
            await self._suspend(delay, cancel_token)

        # range(max_attempts) always returns or raises above
        raise AssertionError("unreachable")

    async def _suspend(self, delay: float, cancel_token: CancellationToken | None) -> None:
        if cancel_token is not None and self._sleep is None:
            await cancel_token.sleep(delay)
            return
        await (self._sleep or asyncio.sleep)(delay)
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
