"""
Client side of the product-match verifier boundary.

The matcher only depends on the `Verifier` protocol: an async `verify()` that
either returns a validated VerificationResult or raises VerificationError.
"""

from typing import Optional, Protocol, Sequence

import httpx
from pydantic import ValidationError

from dishbook.config import settings
from dishbook.services.ai_service import RateLimitError, ServiceUnavailableError
from dishbook.services.match_schemas import (
    VerificationCandidate,
    VerificationRequest,
    VerificationResult,
)
from dishbook.services.verification_service import (
    ProductVerificationService,
    product_verification_service,
)


class Verifier(Protocol):
    async def verify(
        self,
        recognized_name: str,
        candidates: Sequence[VerificationCandidate],
        prior_score: float,
    ) -> VerificationResult: ...


class HttpVerifierClient:
    """Calls the verify-product-match endpoint over HTTP. No automatic retries."""

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url or settings.verifier_url
        self.timeout = timeout if timeout is not None else settings.verifier_timeout
        self._transport = transport

    async def verify(
        self,
        recognized_name: str,
        candidates: Sequence[VerificationCandidate],
        prior_score: float,
    ) -> VerificationResult:
        request = VerificationRequest(
            recognized_name=recognized_name,
            candidates=list(candidates),
            match_score=prior_score,
        )

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self.url, json=request.model_dump(mode="json", by_alias=True)
                )
                response.raise_for_status()
                return VerificationResult.model_validate_json(response.content)
        except httpx.HTTPStatusError as e:
            raise VerificationError(
                f"Verifier answered HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise VerificationError(f"Verifier request failed: {e}") from e
        except ValidationError as e:
            raise VerificationError(f"Malformed verifier response: {e}") from e


class LocalVerifierClient:
    """Runs the verification service in-process, with the same failure contract as HTTP."""

    def __init__(self, service: Optional[ProductVerificationService] = None):
        self.service = service or product_verification_service

    async def verify(
        self,
        recognized_name: str,
        candidates: Sequence[VerificationCandidate],
        prior_score: float,
    ) -> VerificationResult:
        try:
            return await self.service.verify(recognized_name, candidates, prior_score)
        except (ServiceUnavailableError, RateLimitError, ValueError) as e:
            raise VerificationError(str(e)) from e
        except Exception as e:
            raise VerificationError(f"Verifier failed: {e}") from e


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================


class VerificationError(Exception):
    """Verifier call failed (transport, status, timeout or malformed payload)."""

    pass
