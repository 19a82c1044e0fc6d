import json
import logging
from typing import Any, Optional

import httpx

from base_models import Failure, OptimizationResult, QuotaExceeded, Success
from config import Settings
from prompt_optimizer import build_payload

logger = logging.getLogger(__name__)

QUOTA_ERROR_CODE = "insufficient_quota"


def extract_error_code(payload: Any) -> Optional[str]:
    """Return `error.code` from a provider error payload, or None if it has none."""
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if not isinstance(error, dict):
        return None
    code = error.get("code")
    return code if isinstance(code, str) else None


def extract_completion_text(payload: Any) -> Optional[str]:
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) else None


def classify_error_reply(status_code: int, body: str) -> OptimizationResult:
    try:
        payload = json.loads(body)
    except ValueError:
        payload = None

    logger.error("OpenAI API error (status %s): %s", status_code, payload if payload is not None else body)

    if extract_error_code(payload) == QUOTA_ERROR_CODE:
        return QuotaExceeded(detail=f"status {status_code}: {QUOTA_ERROR_CODE}")
    return Failure(detail=f"OpenAI API error (status {status_code}): {body[:500]}")


async def request_optimization(client: httpx.AsyncClient, settings: Settings, text: str) -> OptimizationResult:
    """
    Send `text` to the chat-completion endpoint and classify the reply.

    Never raises for provider or transport problems; they come back as
    QuotaExceeded or Failure. No retry is attempted.
    """
    if not settings.openai_api_key:
        logger.error("OPENAI_API_KEY is missing from the service configuration")
        return Failure(detail="Missing OPENAI_API_KEY")

    logger.info("Calling OpenAI API to optimize response...")
    try:
        reply = await client.post(
            f"{settings.openai_base_url}/chat/completions",
            headers={
                "Authorization": f"Bearer {settings.openai_api_key}",
                "Content-Type": "application/json",
            },
            json=build_payload(text),
        )
    except httpx.HTTPError as exc:
        logger.exception("Transport error while calling OpenAI API")
        return Failure(detail=f"{type(exc).__name__}: {exc}")

    if not reply.is_success:
        return classify_error_reply(reply.status_code, reply.text)

    try:
        data = reply.json()
    except ValueError:
        logger.exception("OpenAI API returned a non-JSON body")
        return Failure(detail="Malformed provider payload")

    optimized = extract_completion_text(data)
    if optimized is None:
        logger.error("OpenAI API reply had no completion text: %s", data)
        return Failure(detail="Missing choices[0].message.content")

    logger.info("Successfully optimized response")
    return Success(text=optimized)
