import logging
from typing import Any

from fastapi.responses import JSONResponse

from codehelper.catalog import PromptCatalog
from codehelper.constants import INTERNAL_ERROR_MESSAGE, NO_CODE_MESSAGE, UPSTREAM_ERROR_MESSAGE
from codehelper.gateway import CompletionError, CompletionGateway


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def extract_code(payload: Any) -> str:
    """Return the non-empty `code` string of a request body, or ""."""
    if not isinstance(payload, dict):
        return ""
    code = payload.get("code")
    # Non-string values (numbers, lists, null) are rejected as missing code, not forwarded.
    if not isinstance(code, str):
        return ""
    return code


class RequestHandler:
    """Validates a request, runs the persona's completion and shapes the JSON reply."""

    def __init__(self, catalog: PromptCatalog, gateway: CompletionGateway, provider_name: str = "Groq"):
        self.catalog = catalog
        self.gateway = gateway
        self.upstream_error_message = UPSTREAM_ERROR_MESSAGE.format(provider=provider_name)

    async def handle(self, operation_id: str, payload: Any) -> JSONResponse:
        try:
            code = extract_code(payload)
            if not code:
                return error_response(400, NO_CODE_MESSAGE)

            spec = self.catalog.lookup(operation_id)
            if spec is None:
                logging.error(f"No prompt registered for operation '{operation_id}'")
                return error_response(500, INTERNAL_ERROR_MESSAGE)

            result = await self.gateway.complete(spec.system_prompt, code)

            if result.ok:
                return JSONResponse(status_code=200, content={spec.response_field: result.text})

            if result.error == CompletionError.UPSTREAM_FAILURE:
                return error_response(500, self.upstream_error_message)

            logging.error(f"Malformed completion for '{operation_id}': {result.detail}")
            return error_response(500, INTERNAL_ERROR_MESSAGE)

        except Exception as e:
            logging.exception(f"Server error: {e}")
            return error_response(500, INTERNAL_ERROR_MESSAGE)
