from __future__ import annotations

import os
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.concurrency import run_in_threadpool

from feluda_providers.base.cancellation import CancellationToken
from feluda_providers.base.errors import ErrorCode, ProviderError
from feluda_providers.base.models import CompleteResult
from feluda_providers.catalog import list_models
from feluda_providers.config.defaults import FELUDA_APP_TITLE, FELUDA_SERVICE_CORS_DEFAULT_ORIGINS
from feluda_providers.dispatch import SSE_HEADERS, SSE_MEDIA_TYPE, Dispatcher
from feluda_providers.gemini.file_analysis import FileAnalyzer, UploadedFile
from feluda_providers.gemini.lively import LivelyChat
from feluda_providers.persistence.interfaces.repos import IUnitOfWork
from feluda_providers.together.images import TogetherImageClient

from .app_parts.app_core import (
    GenerateBody,
    ImagineBody,
    LivelyBody,
    _handle_generate_complete,
    _prepare_generate,
    error_response,
    get_dispatcher,
    get_file_analyzer,
    get_image_client,
    get_lively_chat,
    get_uow_dep,
    sse_body,
    validation_message,
)
from .settings import ClientSettings, load_settings, save_settings

app = FastAPI(title=FELUDA_APP_TITLE, version="0.1.0")


# ---------------------------------------------------------------------------
# CORS configuration
# ---------------------------------------------------------------------------

cors_origins_env = os.getenv("FELUDA_SERVICE_CORS_ORIGINS", FELUDA_SERVICE_CORS_DEFAULT_ORIGINS)
allow_origins = [o.strip() for o in cors_origins_env.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


@app.exception_handler(ProviderError)
async def _provider_error_handler(_request: Request, exc: ProviderError) -> JSONResponse:
    return error_response(exc)


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": validation_message(exc.errors())})


@app.get("/api/health")
def health() -> Dict[str, Any]:
    """Check the health status of the service."""
    return {"ok": True}


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


@app.post("/api/generate")
async def generate(
    body: GenerateBody,
    request: Request,
    dispatcher: Dispatcher = Depends(get_dispatcher),
    uow: IUnitOfWork = Depends(get_uow_dep),
):
    """Dispatch one prompt to the provider bound to ``body.model``.

    Streaming bindings answer with ``text/event-stream``; the rest answer
    ``{"result": text}``. A disconnecting client cancels the upstream stream.
    """
    token = CancellationToken()
    result = await run_in_threadpool(_prepare_generate, body, dispatcher, uow, token)
    if isinstance(result, CompleteResult):
        return await run_in_threadpool(_handle_generate_complete, body, result.text, uow)
    return StreamingResponse(sse_body(request, result, token), media_type=SSE_MEDIA_TYPE, headers=SSE_HEADERS)


# ---------------------------------------------------------------------------
# File analysis, images and Lively chat
# ---------------------------------------------------------------------------


@app.post("/api/vision")
async def vision(
    file: Optional[UploadFile] = File(None),
    prompt: str = Form(""),
    system_prompt: Optional[str] = Form(None, alias="systemPrompt"),
    model: Optional[str] = Form(None),
    file_type: Optional[str] = Form(None, alias="fileType"),
    analyzer: FileAnalyzer = Depends(get_file_analyzer),
) -> Dict[str, Any]:
    upload = None
    if file is not None:
        data = await file.read()
        upload = UploadedFile(
            filename=file.filename or "file",
            content_type=file.content_type or "application/octet-stream",
            data=data,
        )
    result = await run_in_threadpool(
        analyzer.analyze,
        upload,
        prompt,
        system_prompt=system_prompt,
        model=model,
        file_type=file_type,
    )
    return result.to_wire()


@app.post("/api/imagine")
def imagine(body: ImagineBody, images: TogetherImageClient = Depends(get_image_client)):
    try:
        url = images.generate(body.prompt, body.model, body.size)
    except ProviderError as err:
        if err.code is ErrorCode.VALIDATION and not err.upstream:
            return JSONResponse(status_code=400, content={"error": err.message})
        return JSONResponse(status_code=500, content={"success": False, "error": err.message})
    return {"success": True, "data": [{"url": url}]}


@app.post("/api/lively")
def lively(body: LivelyBody, chat: LivelyChat = Depends(get_lively_chat)) -> Dict[str, Any]:
    """Grounded Gemini chat turn; falls back once to ``gemini-pro`` without grounding."""
    return chat.respond(body.prompt, body.history_dicts()).to_wire()


# ---------------------------------------------------------------------------
# Model catalogs
# ---------------------------------------------------------------------------


@app.get("/api/models/{provider}")
def get_models(provider: str) -> Dict[str, Any]:
    """List a provider's models; upstream failures degrade to a static list."""
    return {"models": [entry.to_wire() for entry in list_models(provider)]}


# ---------------------------------------------------------------------------
# Settings and conversations
# ---------------------------------------------------------------------------


@app.get("/api/settings")
def get_settings(uow: IUnitOfWork = Depends(get_uow_dep)) -> Dict[str, Any]:
    return load_settings(uow.settings).to_wire()


@app.post("/api/settings")
def post_settings(body: ClientSettings, uow: IUnitOfWork = Depends(get_uow_dep)) -> Dict[str, Any]:
    saved = save_settings(uow.settings, body)
    uow.commit()
    return saved.to_wire()


@app.get("/api/conversations/{session_id}")
def get_conversation(session_id: str, uow: IUnitOfWork = Depends(get_uow_dep)) -> Dict[str, Any]:
    exchanges = uow.conversations.list_for_session(session_id)
    return {"sessionId": session_id, "exchanges": [e.to_wire() for e in exchanges]}


def get_app() -> FastAPI:
    """Return the FastAPI application instance (for ASGI servers and tests)."""
    return app
