"""Dispatcher: resolve, normalize, make exactly one provider call.

Failure policy
--------------
- Unknown model id -> ``INVALID_MODEL`` before any outbound call.
- Provider/transport errors abort the request. The upstream message is kept
  verbatim; only the error code is classified.
- Empty responses -> ``NO_CONTENT``.
- Nothing is retried, here or in the SDKs (``max_retries=0``).
- Text ending in ``...`` / ``…`` is logged as ``dispatch.truncated`` and
  returned unchanged.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from ..base.cancellation import CancellationToken
from ..base.constants import TRUNCATION_MARKERS
from ..base.errors import ErrorCode, ProviderError, as_provider_error
from ..base.logging import LogContext, get_logger, logged_phase, normalized_log_event
from ..base.models import CompleteResult, GenerationRequest, GenerationResult, StreamResult
from ..routing.bindings import BlockingHandle, ProviderBinding, StreamingHandle
from ..routing.registry import ProviderRegistry, get_registry
from .normalizer import normalize
from .response_adapter import accumulate_stream, unwrap_text


def looks_truncated(text: str) -> bool:
    return text.endswith(TRUNCATION_MARKERS)


class Dispatcher:
    """Entry point used by the HTTP layer and the CLI.

    Parameters:
        registry: Routing table; defaults to the process-wide registry.
        logger: Destination for ``dispatch.*`` and ``stream.*`` events.
    """

    def __init__(
        self,
        registry: Optional[ProviderRegistry] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._registry = registry or get_registry()
        self._logger = logger or get_logger("dispatch")

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    def _warn_if_truncated(self, text: str, ctx: LogContext) -> None:
        if looks_truncated(text):
            normalized_log_event(
                self._logger,
                "dispatch.truncated",
                ctx,
                phase="finalize",
                level=logging.WARNING,
                chars=len(text),
                tail=text[-20:],
            )

    def _resolve(self, request: GenerationRequest) -> ProviderBinding:
        try:
            return self._registry.resolve(request.model_id)
        except ProviderError as exc:
            normalized_log_event(
                self._logger,
                "dispatch.error",
                LogContext(model=request.model_id),
                phase="resolve",
                level=logging.ERROR,
                error_code=exc.code.value,
                error=exc.message,
            )
            raise

    def dispatch(
        self,
        request: GenerationRequest,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> GenerationResult:
        """Route ``request`` and return a complete text or a lazy stream.

        Raises:
            ProviderError: ``INVALID_MODEL``, ``NO_CONTENT``, ``CANCELLED`` or
                the classified upstream failure (blocking path only; stream
                failures arrive as a terminal chunk).
        """
        binding = self._resolve(request)
        call = normalize(request, binding)
        ctx = LogContext(
            provider=binding.provider.value,
            model=call.model,
            request_id=uuid.uuid4().hex[:12],
            binding=binding.key,
        )
        handle = binding.handle

        if isinstance(handle, StreamingHandle):
            client = handle.client
            chunks = accumulate_stream(
                lambda: client.open_stream(call),
                client.translate_chunk,
                cancellation_token=cancellation_token,
                logger=self._logger,
                ctx=ctx,
                on_finish=lambda text: self._warn_if_truncated(text, ctx),
            )
            return StreamResult(chunks=chunks)

        if isinstance(handle, BlockingHandle):
            if cancellation_token is not None and cancellation_token.cancelled:
                raise ProviderError(
                    ErrorCode.CANCELLED,
                    cancellation_token.reason or "operation cancelled",
                    provider=binding.provider.value,
                    model=call.model,
                )
            with logged_phase(
                self._logger,
                "dispatch",
                ctx,
                max_tokens=call.max_tokens,
                temperature=call.temperature,
                top_p=call.top_p,
            ):
                try:
                    raw = handle.client.complete(call)
                except ProviderError:
                    raise
                except Exception as exc:
                    raise as_provider_error(exc, provider=binding.provider.value, model=call.model) from exc
                text = unwrap_text(raw, provider=binding.provider.value, model=call.model)
            self._warn_if_truncated(text, ctx)
            return CompleteResult(text=text)

        raise TypeError(f"unsupported provider handle: {handle!r}")


__all__ = ["Dispatcher", "looks_truncated"]
