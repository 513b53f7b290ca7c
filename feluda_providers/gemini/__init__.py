"""Gemini provider package (text generation, file analysis and Lively chat)."""

from .client import GeminiClient
from .file_analysis import AnalysisResult, FileAnalyzer, UploadedFile
from .lively import LivelyChat, LivelyResult

__all__ = ["GeminiClient", "FileAnalyzer", "UploadedFile", "AnalysisResult", "LivelyChat", "LivelyResult"]
