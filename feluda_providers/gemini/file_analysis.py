"""File analysis over the Gemini file API.

Flow for one upload:
    1. Validate size (20 MB) and MIME type (documents or images).
    2. Stage the bytes into a temp file named ``upload-<ms>-<name>``.
    3. Within the wall-clock budget (``analysis_timeout_seconds``): upload
       the file, generate with the structured analysis prompt, delete the
       remote copy.
    4. Normalize the markdown and report whether it was a document or image.

The temp file is removed on every exit path. On timeout the worker thread is
abandoned and the caller gets ``TIMEOUT``; the remote upload may still
complete in the background.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

from ..base.errors import ErrorCode, ProviderError, as_provider_error
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.timeouts import get_timeout_config, run_with_deadline
from ..config.defaults import (
    ANALYSIS_DEFAULT_SYSTEM_PROMPT,
    ANALYSIS_GENERATION_CONFIG,
    ANALYSIS_MAX_UPLOAD_BYTES,
    GEMINI_DEFAULT_MODEL,
)
from .client import GeminiClient

SUPPORTED_DOC_TYPES = frozenset(
    {
        "application/pdf",
        "application/x-javascript",
        "text/javascript",
        "application/x-python",
        "text/x-python",
        "text/plain",
        "text/html",
        "text/css",
        "text/md",
        "text/csv",
        "text/xml",
        "text/rtf",
    }
)

SUPPORTED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})

NO_FILE_MESSAGE = "No file provided"
TOO_LARGE_MESSAGE = "File size exceeds 20MB limit"
UNSUPPORTED_TYPE_MESSAGE = "Unsupported file type"
TIMEOUT_MESSAGE = "Request timed out. Please try with a smaller file or simpler request."

ANALYSIS_PROMPT_TEMPLATE = """Please analyze this {file_type} document and provide a detailed response following this structure:

## Summary
[Provide a brief overview]

## Detailed Analysis
[Main content broken into relevant sections]

## Key Points
- [Important point 1]
- [Important point 2]
- [etc...]

## Technical Details
[If applicable, include technical specifications, code analysis, or data points]

## Recommendations
[If applicable, provide actionable insights or suggestions]

## Key Takeaways
[Summarize 3-5 main takeaways]

Specific request: {prompt}

Please format the response using markdown with appropriate headers, bullet points, bold text, and code blocks where relevant."""


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class AnalysisResult:
    result: str
    file_type: str

    def to_wire(self) -> Dict[str, str]:
        return {"result": self.result, "fileType": self.file_type}


def build_analysis_prompt(file_type: str, prompt: str) -> str:
    return ANALYSIS_PROMPT_TEMPLATE.format(file_type=file_type, prompt=prompt)


def format_markdown(text: str) -> str:
    """Level-2 headers, newline after bold runs, ``- `` bullets, at most one blank line."""
    text = re.sub(r"^#(?!#)", "##", text, flags=re.MULTILINE)
    text = re.sub(r"(\*\*.*?\*\*)", r"\1\n", text)
    text = re.sub(r"^[-*]\s", "\n- ", text, flags=re.MULTILINE)
    return re.sub(r"\n{3,}", "\n\n", text)


def classify_upload(upload: Optional[UploadedFile]) -> str:
    """Return ``document`` or ``image``; raise ``VALIDATION`` otherwise."""
    if upload is None:
        raise ProviderError(ErrorCode.VALIDATION, NO_FILE_MESSAGE, provider="google")
    if upload.size > ANALYSIS_MAX_UPLOAD_BYTES:
        raise ProviderError(ErrorCode.VALIDATION, TOO_LARGE_MESSAGE, provider="google")
    if upload.content_type in SUPPORTED_DOC_TYPES:
        return "document"
    if upload.content_type in SUPPORTED_IMAGE_TYPES:
        return "image"
    raise ProviderError(ErrorCode.VALIDATION, UNSUPPORTED_TYPE_MESSAGE, provider="google")


@contextmanager
def staged_file(upload: UploadedFile, temp_dir: Optional[str] = None) -> Iterator[str]:
    """Write ``upload`` to a temp file and remove it when the block exits."""
    name = os.path.basename(upload.filename) or "file"
    path = os.path.join(temp_dir or tempfile.gettempdir(), f"upload-{int(time.time() * 1000)}-{name}")
    with open(path, "wb") as fh:
        fh.write(upload.data)
    try:
        yield path
    finally:
        if os.path.exists(path):
            os.unlink(path)


class FileAnalyzer:
    """Analyze one uploaded file with Gemini within a wall-clock budget.

    Parameters:
        client: Gemini client; defaults to a fresh :class:`GeminiClient`.
        timeout_seconds: Budget override; defaults to ``get_timeout_config()``.
        temp_dir: Staging directory; defaults to the system temp dir.
        logger: Destination for ``analysis.*`` events.
    """

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        *,
        timeout_seconds: Optional[float] = None,
        temp_dir: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._client = client or GeminiClient()
        self._timeout = timeout_seconds
        self._temp_dir = temp_dir
        self._logger = logger or get_logger("analysis")

    @property
    def timeout_seconds(self) -> float:
        return self._timeout if self._timeout is not None else get_timeout_config().analysis_timeout_seconds

    def _delete_remote(self, remote: Any, ctx: LogContext) -> None:
        name = getattr(remote, "name", None)
        if not name:
            return
        try:
            self._client.delete_file(name)
        except Exception as exc:  # remote cleanup is best-effort
            normalized_log_event(
                self._logger,
                "analysis.cleanup_failed",
                ctx,
                phase="cleanup",
                level=logging.WARNING,
                error=str(exc),
                remote_file=name,
            )

    def _process(self, path: str, upload: UploadedFile, parts_prompt: str, system_prompt: str, model: str, ctx: LogContext) -> str:
        remote = self._client.upload_file(path, mime_type=upload.content_type, display_name=upload.filename)
        try:
            text = self._client.generate_from_parts(
                model,
                [system_prompt, parts_prompt, remote],
                generation_config=dict(ANALYSIS_GENERATION_CONFIG),
            )
        finally:
            self._delete_remote(remote, ctx)
        return format_markdown(text)

    def analyze(
        self,
        upload: Optional[UploadedFile],
        prompt: str,
        *,
        system_prompt: Optional[str] = None,
        model: Optional[str] = None,
        file_type: Optional[str] = None,
    ) -> AnalysisResult:
        """Validate, stage and analyze ``upload``.

        Raises:
            ProviderError: ``VALIDATION`` for a missing, oversized or
                unsupported file; ``TIMEOUT`` when the budget elapses;
                the classified upstream failure otherwise.
        """
        kind = classify_upload(upload)
        model_name = model or GEMINI_DEFAULT_MODEL
        ctx = LogContext(provider="google", model=model_name)
        analysis_prompt = build_analysis_prompt(file_type or kind, prompt or "")
        system_text = system_prompt or ANALYSIS_DEFAULT_SYSTEM_PROMPT
        budget = self.timeout_seconds

        normalized_log_event(
            self._logger,
            "analysis.start",
            ctx,
            phase="start",
            content_type=upload.content_type,
            size=upload.size,
            budget_seconds=budget,
        )
        with staged_file(upload, self._temp_dir) as path:
            try:
                text = run_with_deadline(
                    lambda: self._process(path, upload, analysis_prompt, system_text, model_name, ctx),
                    budget,
                )
            except TimeoutError as exc:
                normalized_log_event(
                    self._logger,
                    "analysis.timeout",
                    ctx,
                    phase="error",
                    level=logging.ERROR,
                    error_code=ErrorCode.TIMEOUT.value,
                    budget_seconds=budget,
                )
                raise ProviderError(ErrorCode.TIMEOUT, TIMEOUT_MESSAGE, provider="google", model=model_name) from exc
            except ProviderError:
                raise
            except Exception as exc:
                err = as_provider_error(exc, provider="google", model=model_name)
                normalized_log_event(
                    self._logger,
                    "analysis.error",
                    ctx,
                    phase="error",
                    level=logging.ERROR,
                    error_code=err.code.value,
                    error=err.message,
                )
                raise err from exc
        normalized_log_event(self._logger, "analysis.end", ctx, phase="finalize", chars=len(text), kind=kind)
        return AnalysisResult(result=text, file_type=kind)


__all__ = [
    "SUPPORTED_DOC_TYPES",
    "SUPPORTED_IMAGE_TYPES",
    "UploadedFile",
    "AnalysisResult",
    "FileAnalyzer",
    "build_analysis_prompt",
    "classify_upload",
    "format_markdown",
    "staged_file",
]
