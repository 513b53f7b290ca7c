from __future__ import annotations

from typing import Any, AsyncIterator, Dict, Iterator, List, Literal, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.concurrency import iterate_in_threadpool

from feluda_providers.base.cancellation import CancellationToken
from feluda_providers.base.errors import ErrorCode, ProviderError
from feluda_providers.base.models import GenerationRequest, StreamResult
from feluda_providers.config.defaults import CONTEXT_HISTORY_LIMIT, IMAGE_DEFAULT_MODEL, IMAGE_DEFAULT_SIZE
from feluda_providers.dispatch import Dispatcher, encode_sse
from feluda_providers.gemini.file_analysis import FileAnalyzer
from feluda_providers.gemini.lively import LivelyChat
from feluda_providers.persistence.interfaces.repos import Exchange, IUnitOfWork
from feluda_providers.persistence.sqlite import get_uow
from feluda_providers.together.images import TogetherImageClient

from ..context import build_contextual_prompt
from ..settings import OptionsBody


class GenerateBody(BaseModel):
    """Body of ``POST /api/generate``.

    ``stream`` is accepted for compatibility and ignored: the model id alone
    decides whether the answer streams.
    """

    model_config = ConfigDict(populate_by_name=True)

    model: str
    prompt: str
    options: Optional[OptionsBody] = None
    stream: Optional[bool] = None
    session_id: Optional[str] = Field(default=None, alias="sessionId")

    def to_request(self, prompt: Optional[str] = None) -> GenerationRequest:
        opts = (self.options or OptionsBody()).to_options()
        return GenerationRequest(model_id=self.model, prompt=prompt or self.prompt, options=opts, stream=self.stream)


class ImagineBody(BaseModel):
    prompt: Optional[str] = None
    model: str = IMAGE_DEFAULT_MODEL
    size: str = IMAGE_DEFAULT_SIZE


class TurnPart(BaseModel):
    text: str


class ChatTurn(BaseModel):
    role: Literal["user", "model"]
    parts: List[TurnPart]


class LivelyBody(BaseModel):
    """Body of ``POST /api/lively``; ``history`` uses Gemini's ``{role, parts}`` turns."""

    prompt: str
    history: Optional[List[ChatTurn]] = None

    def history_dicts(self) -> List[Dict[str, Any]]:
        return [turn.model_dump() for turn in self.history or ()]


# ---------------------------------------------------------------------------
# Dependencies (overridden in tests via ``app.dependency_overrides``)
# ---------------------------------------------------------------------------

_DISPATCHER: Optional[Dispatcher] = None


def get_dispatcher() -> Dispatcher:
    global _DISPATCHER  # noqa: PLW0603
    if _DISPATCHER is None:
        _DISPATCHER = Dispatcher()
    return _DISPATCHER


def get_file_analyzer() -> FileAnalyzer:
    return FileAnalyzer()


def get_image_client() -> TogetherImageClient:
    return TogetherImageClient()


def get_lively_chat() -> LivelyChat:
    return LivelyChat()


def get_uow_dep() -> Iterator[IUnitOfWork]:
    """Per-request Unit of Work; the connection is closed after the response."""
    with get_uow() as uow:
        yield uow


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

_STATUS_BY_CODE = {
    ErrorCode.TIMEOUT: 504,
    ErrorCode.VALIDATION: 400,
    ErrorCode.NOT_FOUND: 404,
}


def status_for(error: ProviderError) -> int:
    """HTTP status for an error raised by this service.

    Wrapped provider failures are always a 500 whatever their classified
    code; the upstream message still reaches the caller unchanged.
    """
    if error.upstream:
        return 500
    return _STATUS_BY_CODE.get(error.code, 500)


def error_response(error: ProviderError) -> JSONResponse:
    return JSONResponse(status_code=status_for(error), content={"error": error.message})


def validation_message(errors: List[Dict[str, Any]]) -> str:
    """Flatten pydantic errors into ``field: message; ...``."""
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request body"


# ---------------------------------------------------------------------------
# Generate helpers
# ---------------------------------------------------------------------------


def _contextual_prompt(body: GenerateBody, uow: IUnitOfWork) -> str:
    if not body.session_id:
        return body.prompt
    history = uow.conversations.list_for_session(body.session_id, limit=CONTEXT_HISTORY_LIMIT)
    return build_contextual_prompt(history, body.prompt)


def _handle_generate_complete(body: GenerateBody, text: str, uow: IUnitOfWork) -> Dict[str, Any]:
    if body.session_id:
        uow.conversations.add(
            Exchange(session_id=body.session_id, prompt=body.prompt, response=text, model=body.model)
        )
        uow.commit()
    return {"result": text}


def _prepare_generate(body: GenerateBody, dispatcher: Dispatcher, uow: IUnitOfWork, token: CancellationToken):
    request = body.to_request(_contextual_prompt(body, uow))
    return dispatcher.dispatch(request, cancellation_token=token)


async def sse_body(request: Request, result: StreamResult, token: CancellationToken) -> AsyncIterator[str]:
    """Frame chunks as SSE; stop and cancel upstream when the client goes away."""
    try:
        async for chunk in iterate_in_threadpool(result.chunks):
            if await request.is_disconnected():
                token.cancel("client disconnected")
                break
            yield encode_sse(chunk)
    finally:
        token.cancel("response closed")
        try:
            result.close()
        except ValueError:
            # a chunk is still being read in a worker thread; the cancelled
            # token ends that loop and closes the upstream stream
            pass


__all__ = [
    "GenerateBody",
    "ImagineBody",
    "get_dispatcher",
    "get_file_analyzer",
    "get_image_client",
    "get_uow_dep",
    "status_for",
    "error_response",
    "validation_message",
    "sse_body",
    "_prepare_generate",
    "_handle_generate_complete",
]
