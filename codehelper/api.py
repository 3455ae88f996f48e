import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

import codehelper.config as config
from codehelper.catalog import PromptCatalog
from codehelper.gateway import CompletionGateway
from codehelper.handlers import RequestHandler, error_response

# Relative STATIC_DIR values are resolved against the project checkout, not the cwd.
PROJECT_ROOT = Path(__file__).resolve().parent.parent

@lru_cache
def get_settings():
    return config.Settings()

settings = get_settings()

catalog = PromptCatalog.default()
gateway = CompletionGateway(
    api_key=settings.GROQ_API_KEY,
    api_url=settings.GROQ_API_URL,
    model=settings.GROQ_MODEL,
)
handler = RequestHandler(catalog, gateway, provider_name=settings.PROVIDER_NAME)

# Interactive docs are disabled so /docs and /openapi.json stay SPA routes.
app = FastAPI(
    title="CodeHelper API",
    description="Reviews, explains, cleans and debugs code snippets through a hosted LLM.",
    version="1.0.0",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def read_payload(request: Request) -> Any:
    # Bodies that are not valid JSON are treated like an empty object.
    try:
        return await request.json()
    except ValueError:
        return {}


def make_endpoint(operation_id: str) -> Callable:
    async def endpoint(request: Request):
        payload = await read_payload(request)
        return await handler.handle(operation_id, payload)

    endpoint.__name__ = f"{operation_id}_endpoint"
    return endpoint


REQUEST_MAP: Dict[str, Callable] = {}

for spec in catalog:
    REQUEST_MAP[spec.operation_id] = make_endpoint(spec.operation_id)
    app.add_api_route(
        f"/{spec.operation_id}",
        REQUEST_MAP[spec.operation_id],
        methods=["POST"],
        tags=["Completions"],
    )


def static_root() -> Path:
    static_dir = Path(settings.STATIC_DIR)
    if not static_dir.is_absolute():
        static_dir = PROJECT_ROOT / static_dir
    return static_dir.resolve()


@app.get("/{full_path:path}", include_in_schema=False)
async def serve_frontend(full_path: str):
    """Serve a file from the SPA bundle, falling back to its index.html."""
    static_dir = static_root()

    if full_path:
        try:
            candidate = (static_dir / full_path).resolve()
            if candidate.is_relative_to(static_dir) and candidate.is_file():
                return FileResponse(candidate)
        except (ValueError, OSError) as e:
            logging.info(f"Unservable static path {full_path!r}: {e}")

    index = static_dir / "index.html"
    if not index.is_file():
        return error_response(404, "Not found")

    return FileResponse(index)


@app.api_route("/{full_path:path}", methods=["POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def unknown_route(full_path: str):
    return error_response(404, "Not found")


def main():
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.info(f"Server running on http://localhost:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
