"""
Single-shot client for an OpenAI-compatible chat-completion API.
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel


class CompletionError(str, Enum):
    UPSTREAM_FAILURE = "upstream_failure"
    MALFORMED_UPSTREAM_RESPONSE = "malformed_upstream_response"


class CompletionResult(BaseModel):
    """Outcome of one completion call: either text, or an error kind."""

    text: Optional[str] = None
    error: Optional[CompletionError] = None
    status_code: Optional[int] = None
    # Server-side diagnostics only, never sent to callers.
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, text: str) -> "CompletionResult":
        return cls(text=text)

    @classmethod
    def failure(
        cls,
        error: CompletionError,
        detail: str = "",
        status_code: Optional[int] = None,
    ) -> "CompletionResult":
        return cls(error=error, detail=detail, status_code=status_code)


def extract_content(data: Any) -> Optional[str]:
    """Return choices[0].message.content, or None if the shape is wrong."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict) or not isinstance(first.get("message"), dict):
        return None
    content = first["message"].get("content")
    if not isinstance(content, str):
        return None
    return content


class CompletionGateway:
    """Sends one system/user message pair to the completion API per call."""

    def __init__(self, api_key: str, api_url: str, model: str):
        """
        Initialize the gateway.

        Args:
            api_key: Bearer credential for the completion API.
            api_url: Full URL of the chat-completions endpoint.
            model: Model identifier sent with every request.
        """
        self._api_url = api_url
        self._model = model
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def build_payload(self, system_prompt: str, user_content: str) -> Dict[str, Any]:
        return {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
        }

    async def complete(self, system_prompt: str, user_content: str) -> CompletionResult:
        """
        Run one completion.

        Args:
            system_prompt: Persona instructions.
            user_content: User-submitted text, sent verbatim.

        Returns:
            CompletionResult holding the first choice's text, or the failure kind.
        """
        payload = self.build_payload(system_prompt, user_content)

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(self._api_url, headers=self._headers, json=payload)
        except httpx.HTTPError as e:
            logging.error(f"Completion API request failed: {e}")
            return CompletionResult.failure(CompletionError.UPSTREAM_FAILURE, detail=str(e))

        if not response.is_success:
            logging.error(f"Completion API error ({response.status_code}): {response.text}")
            return CompletionResult.failure(
                CompletionError.UPSTREAM_FAILURE,
                detail=response.text,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            logging.error(f"Completion API returned invalid JSON: {e}")
            return CompletionResult.failure(
                CompletionError.MALFORMED_UPSTREAM_RESPONSE,
                detail=response.text,
                status_code=response.status_code,
            )

        content = extract_content(data)
        if content is None:
            logging.error(f"Completion API response has no message content: {data}")
            return CompletionResult.failure(
                CompletionError.MALFORMED_UPSTREAM_RESPONSE,
                detail=str(data),
                status_code=response.status_code,
            )

        return CompletionResult.success(content)
