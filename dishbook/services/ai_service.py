"""
Claude AI integration service for semantic product-name verification.

The fuzzy matcher escalates ambiguous ingredient/product pairs here; Claude
decides whether the recognized name refers to one of up to three candidates.
"""

import json
import re
import logging

from anthropic import Anthropic
import anthropic
import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from dishbook.config import settings
from dishbook.services.ai_schemas import ProductVerificationSchema
from dishbook.services.prompts import (
    PRODUCT_VERIFICATION_SYSTEM_PROMPT,
    build_verification_message,
)


logger = logging.getLogger(__name__)


def _strip_markdown_json(text: str) -> str:
    """Strip markdown code block wrappers from JSON text."""
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0].strip()
    elif "```" in text:
        text = text.split("```")[1].split("```")[0].strip()
    return text


def _fix_trailing_commas(text: str) -> str:
    """Fix trailing commas in JSON (common LLM error)."""
    text = re.sub(r",\s*}", "}", text)
    text = re.sub(r",\s*]", "]", text)
    return text


class ClaudeService:
    """Claude API integration for product match verification."""

    def __init__(self):
        timeout = httpx.Timeout(
            timeout=settings.anthropic_timeout,
            connect=settings.anthropic_connect_timeout,
        )
        self.client = Anthropic(api_key=settings.anthropic_api_key, timeout=timeout)
        self.verifier_model = settings.verifier_model

    # =========================================================================
    # SCHEMA VALIDATION + CONVERSATIONAL RETRY
    # =========================================================================

    def _call_with_schema_retry(
        self,
        messages: list[dict],
        schema_class: type[BaseModel],
        request_params: dict,
        max_retries: int = 2,
        prefill: str | None = "{",
    ) -> tuple[dict, str, object]:
        """
        Call Claude API with JSON schema validation and conversational retry.

        On schema failure: appends the bad response + error feedback to messages,
        re-calls with full conversation context so the LLM can self-correct.

        Args:
            messages: The messages list (will be mutated on retry)
            schema_class: Pydantic model class to validate against
            request_params: Dict of params for client.messages.create
                            (model, max_tokens, system, etc.)
                            NOTE: do NOT include 'messages' - they're passed separately
            max_retries: Number of retry attempts after initial call (default 2, so 3 total)
            prefill: Assistant prefill string, or None for no prefill

        Returns:
            (validated_dict, raw_response_text, response_object) tuple

        Raises:
            ValueError: If all attempts fail schema validation
        """
        for attempt in range(1 + max_retries):
            call_messages = list(messages)
            if prefill:
                call_messages.append({"role": "assistant", "content": prefill})

            response = self.client.messages.create(
                messages=call_messages,
                **request_params,
            )

            response_text = ""
            for block in response.content:
                if hasattr(block, "text"):
                    response_text += block.text

            if not response_text:
                if attempt < max_retries:
                    messages.append(
                        {"role": "assistant", "content": "(empty response)"}
                    )
                    messages.append(
                        {
                            "role": "user",
                            "content": "Your response contained no text. Please respond with valid JSON.",
                        }
                    )
                    continue
                raise ValueError("No text content in AI response after retries")

            # Reconstruct JSON (handle prefill)
            raw_text = response_text.strip()
            json_str = (prefill or "") + raw_text if prefill else raw_text

            json_str = _strip_markdown_json(json_str)
            json_str = _fix_trailing_commas(json_str)

            try:
                parsed = json.loads(json_str)
                adapter = TypeAdapter(schema_class)
                validated = adapter.validate_python(parsed)
                return validated.model_dump(), raw_text, response
            except (json.JSONDecodeError, ValidationError) as e:
                error_msg = str(e)
                logger.warning(
                    "AI response schema validation failed (attempt %d/%d) for %s: %s",
                    attempt + 1,
                    1 + max_retries,
                    schema_class.__name__,
                    error_msg,
                )

                if attempt < max_retries:
                    messages.append(
                        {
                            "role": "assistant",
                            "content": (prefill or "") + raw_text,
                        }
                    )
                    messages.append(
                        {
                            "role": "user",
                            "content": (
                                f"Your response had a schema error:\n{error_msg}\n\n"
                                f"Please fix and return valid JSON matching the required schema."
                            ),
                        }
                    )
                    continue

                raise ValueError(
                    f"AI response failed schema validation after {1 + max_retries} attempts: {error_msg}"
                )

        raise ValueError("AI response failed schema validation")

    # =========================================================================
    # PRODUCT MATCH VERIFICATION
    # =========================================================================

    async def verify_product_match(
        self, recognized_name: str, candidate_names: list[str], match_score: float
    ) -> dict:
        """
        Ask Claude whether a recognized ingredient name matches a candidate product.

        Args:
            recognized_name: Ingredient name as returned by the recipe recognizer
            candidate_names: Up to three catalog product names, best fuzzy match first
            match_score: Fuzzy score of the best candidate (0 = identical)

        Returns:
            {
                "is_match": True,
                "matched_index": 0,
                "confidence": 0.85,
                "reason": "same product, plural form",
                "model": "claude-haiku-4-5-20251001"
            }

        Raises:
            ServiceUnavailableError: AI service temporarily down
            RateLimitError: Too many requests
            ValueError: Invalid response or request error
        """
        try:
            messages = [
                {
                    "role": "user",
                    "content": build_verification_message(
                        recognized_name, candidate_names, match_score
                    ),
                }
            ]

            validated, _raw_text, _response = self._call_with_schema_retry(
                messages=messages,
                schema_class=ProductVerificationSchema,
                request_params={
                    "model": self.verifier_model,
                    "max_tokens": 200,
                    "temperature": 0.1,
                    "system": PRODUCT_VERIFICATION_SYSTEM_PROMPT,
                },
            )

            return {
                "is_match": validated["is_match"],
                "matched_index": validated["matched_index"],
                "confidence": validated["confidence"],
                "reason": validated["reason"],
                "model": self.verifier_model,
            }

        except anthropic.APIConnectionError as e:
            raise ServiceUnavailableError("AI service temporarily unavailable") from e
        except anthropic.RateLimitError as e:
            raise RateLimitError(
                "Too many requests, please try again in 1 minute"
            ) from e
        except anthropic.APIStatusError as e:
            if e.status_code >= 500:
                raise ServiceUnavailableError("AI service error") from e
            raise ValueError(f"Request error: {e.message}") from e
        except anthropic.APIError as e:
            raise ServiceUnavailableError(f"AI service error: {e.message}") from e


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================


class ServiceUnavailableError(Exception):
    """AI service is temporarily unavailable."""

    pass


class RateLimitError(Exception):
    """Rate limit exceeded."""

    pass
