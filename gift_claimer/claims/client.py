from __future__ import annotations

import time
from typing import Optional

import httpx
from loguru import logger

from gift_claimer.claims.base import ClaimOutcome, FailureReason, excerpt

CLAIM_TIMEOUT = 10  # seconds


class BodyReadError(Exception):
    """The response arrived but its body could not be read."""


class ClaimClient:
    """Issue one authenticated gift claim per call. No retries."""

    def __init__(
        self,
        claim_url: str,
        bearer_token: str,
        timeout: float = CLAIM_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.claim_url = claim_url
        self.timeout = timeout
        self._bearer_token = bearer_token
        self._transport = transport

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._bearer_token}",
        }

    def _post(self, bundle_id: int):
        """POST the claim and read the full body within ``timeout`` seconds.

        httpx bounds each connect/read/write on its own; the overall deadline
        covers the whole exchange, including a body that trickles in.

        Returns:
            (status_code, reason_phrase, body_text)

        Raises:
            httpx.TimeoutException, httpx.RequestError, BodyReadError
        """
        deadline = time.monotonic() + self.timeout

        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            with client.stream(
                "POST",
                self.claim_url,
                json={"bundleId": bundle_id},
                headers=self._headers(),
            ) as response:
                chunks = []
                try:
                    self._check_deadline(deadline, response)
                    for chunk in response.iter_bytes():
                        chunks.append(chunk)
                        self._check_deadline(deadline, response)
                except httpx.TimeoutException:
                    raise
                except (httpx.HTTPError, httpx.StreamError) as e:
                    raise BodyReadError(
                        response.status_code, response.reason_phrase, str(e)
                    ) from e

                body = b"".join(chunks).decode(
                    response.encoding or "utf-8", errors="replace"
                )
                return response.status_code, response.reason_phrase, body

    def _check_deadline(self, deadline: float, response: httpx.Response) -> None:
        if time.monotonic() > deadline:
            raise httpx.ReadTimeout(
                f"claim exceeded {self.timeout}s", request=response.request
            )

    def claim(self, bundle_id: int) -> ClaimOutcome:
        """Claim one bundle and classify the result."""
        try:
            status_code, reason_phrase, body = self._post(bundle_id)
        except httpx.TimeoutException as e:
            logger.error(f"Bundle ID: {bundle_id}, request timed out: {e}")
            return ClaimOutcome.failure(bundle_id, FailureReason.timeout)
        except httpx.RequestError as e:
            logger.error(f"Bundle ID: {bundle_id}, error making request: {e}")
            return ClaimOutcome.failure(bundle_id, FailureReason.network_error)
        except BodyReadError as e:
            status_code, reason_phrase, detail = e.args
            logger.error(
                f"Bundle ID: {bundle_id}, Status: {status_code} {reason_phrase}, "
                f"error reading response body: {detail}"
            )
            return ClaimOutcome.failure(
                bundle_id, FailureReason.body_read_error, status_code=status_code
            )

        logger.info(
            f"Bundle ID: {bundle_id}, Status: {status_code} {reason_phrase}, "
            f"Response: {excerpt(body)}"
        )
        if status_code != httpx.codes.OK:
            return ClaimOutcome.failure(
                bundle_id, FailureReason.non_ok_status, status_code=status_code, body=body
            )
        return ClaimOutcome.success(bundle_id, status_code, body)
