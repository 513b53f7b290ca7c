from __future__ import annotations

import os
import threading

import pytest

from feluda_providers.base.errors import ErrorCode, ProviderError
from feluda_providers.gemini.file_analysis import (
    FileAnalyzer,
    UploadedFile,
    build_analysis_prompt,
    classify_upload,
    format_markdown,
    staged_file,
)

from .fakes import FakeGeminiFiles


@pytest.fixture()
def staging(tmp_path):
    path = tmp_path / "staging"
    path.mkdir()
    return path


def _pdf(size: int = 10) -> UploadedFile:
    return UploadedFile(filename="report.pdf", content_type="application/pdf", data=b"%" * size)


def test_classify_upload():
    assert classify_upload(_pdf()) == "document"
    assert classify_upload(UploadedFile("a.png", "image/png", b"x")) == "image"


@pytest.mark.parametrize(
    "upload, message",
    [
        (None, "No file provided"),
        (UploadedFile("big.pdf", "application/pdf", b"0" * (20 * 1024 * 1024 + 1)), "File size exceeds 20MB limit"),
        (UploadedFile("a.exe", "application/octet-stream", b"x"), "Unsupported file type"),
    ],
)
def test_classify_upload_rejects(upload, message):
    with pytest.raises(ProviderError) as info:
        classify_upload(upload)
    assert info.value.code is ErrorCode.VALIDATION
    assert info.value.message == message


def test_format_markdown():
    raw = "# Summary\n**Bold** rest\n* one\n- two\n\n\n\nend"
    out = format_markdown(raw)
    assert out.startswith("## Summary")
    assert "**Bold**\n rest" in out
    assert "\n- one" in out and "\n- two" in out
    assert "\n\n\n" not in out


def test_analysis_prompt_names_type_and_request():
    prompt = build_analysis_prompt("document", "list the risks")
    assert "analyze this document document" in prompt
    assert prompt.rstrip().endswith("code blocks where relevant.")
    assert "Specific request: list the risks" in prompt


def test_staged_file_is_removed(staging):
    with staged_file(_pdf(), str(staging)) as path:
        assert os.path.basename(path).startswith("upload-")
        assert path.endswith("-report.pdf")
        assert os.path.exists(path)
    assert os.listdir(staging) == []


def test_analyze_success(staging):
    fake = FakeGeminiFiles()
    analyzer = FileAnalyzer(fake, temp_dir=str(staging))
    result = analyzer.analyze(_pdf(), "summarize", system_prompt="be brief")
    assert result.file_type == "document"
    assert result.result.startswith("## Title")
    assert result.to_wire() == {"result": result.result, "fileType": "document"}
    (upload,) = fake.uploaded
    assert upload["mime_type"] == "application/pdf"
    assert upload["data"] == b"%" * 10
    system, prompt, remote = fake.parts[0]
    assert system == "be brief"
    assert "Specific request: summarize" in prompt
    assert remote.name == "files/abc123"
    assert fake.deleted == ["files/abc123"]
    assert os.listdir(staging) == []


def test_explicit_file_type_overrides_detection(staging):
    fake = FakeGeminiFiles()
    FileAnalyzer(fake, temp_dir=str(staging)).analyze(_pdf(), "x", file_type="spreadsheet")
    assert "analyze this spreadsheet document" in fake.parts[0][1]


def test_timeout_leaves_no_temp_file(staging):
    gate = threading.Event()
    fake = FakeGeminiFiles(gate=gate)
    analyzer = FileAnalyzer(fake, timeout_seconds=0.05, temp_dir=str(staging))
    try:
        with pytest.raises(ProviderError) as info:
            analyzer.analyze(_pdf(), "slow please")
    finally:
        gate.set()
    assert info.value.code is ErrorCode.TIMEOUT
    assert info.value.message.startswith("Request timed out")
    assert not info.value.upstream
    assert os.listdir(staging) == []


def test_upstream_error_is_classified_and_remote_deleted(staging):
    fake = FakeGeminiFiles(error=RuntimeError("429 rate limit"))
    with pytest.raises(ProviderError) as info:
        FileAnalyzer(fake, temp_dir=str(staging)).analyze(_pdf(), "x")
    assert info.value.code is ErrorCode.RATE_LIMIT
    assert info.value.message == "429 rate limit"
    assert info.value.upstream
    assert fake.deleted == ["files/abc123"]
    assert os.listdir(staging) == []


def test_remote_cleanup_failure_does_not_fail_analysis(staging, test_logger, caplog):
    fake = FakeGeminiFiles()
    fake.delete_error = RuntimeError("gone already")
    analyzer = FileAnalyzer(fake, temp_dir=str(staging), logger=test_logger)
    with caplog.at_level("WARNING", logger=test_logger.name):
        result = analyzer.analyze(_pdf(), "x")
    assert result.result
    assert any("analysis.cleanup_failed" in r.getMessage() for r in caplog.records)


def test_validation_happens_before_staging(staging):
    fake = FakeGeminiFiles()
    with pytest.raises(ProviderError):
        FileAnalyzer(fake, temp_dir=str(staging)).analyze(None, "x")
    assert fake.uploaded == []
