"""feluda_providers.config.defaults
================================

Central place for small, stable default values used across the
feluda_providers package and the service layer. These defaults can be
overridden via environment variables or an external config file, but provide
sensible fallbacks for local development and tests.

Module Purpose
--------------
- Provide a single import location for default constants (no I/O).
- Keep routing, normalization and service layers free of magic literals.

This module intentionally imports nothing from the rest of the package to
prevent circular dependencies.
"""

from __future__ import annotations

# ---- Service / HTTP layer ----

# Comma-separated list of allowed origins for the dev server.
FELUDA_SERVICE_CORS_DEFAULT_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"
FELUDA_SERVICE_DEFAULT_HOST = "127.0.0.1"
FELUDA_SERVICE_DEFAULT_PORT = 8091

# Title/referer headers sent to OpenRouter for attribution.
FELUDA_APP_TITLE = "FeludaAI"


# ---- Provider base URLs ----
OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
TOGETHER_DEFAULT_BASE_URL = "https://api.together.xyz/v1"
GROQ_DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
GITHUB_DEFAULT_BASE_URL = "https://models.inference.ai.azure.com"
MISTRAL_DEFAULT_BASE_URL = "https://api.mistral.ai/v1"
XAI_DEFAULT_BASE_URL = "https://api.x.ai/v1"


# ---- Model identifiers with special routing ----
# The free Hermes model is always served over the streaming path.
HERMES_STREAMING_MODEL = "nousresearch/hermes-3-llama-3.1-405b:free"
# The literal "groq" aliases to this Groq-hosted model.
GROQ_ALIAS_MODEL = "llama-3.2-90b-vision-preview"
# The literal "github-gpt4-mini" maps to this model on the GitHub endpoint.
GITHUB_MODEL_ALIAS = "github-gpt4-mini"
GITHUB_UNDERLYING_MODEL = "gpt-4o-mini"
# The literal "xai" maps to this Grok model.
XAI_ALIAS_MODEL = "grok-beta"
MISTRAL_MODELS = ("open-mistral-nemo", "pixtral-large-latest")

GEMINI_DEFAULT_MODEL = "gemini-1.5-flash"
GEMINI_PRO_MODEL = "gemini-1.5-pro"


# ---- Token ceilings ----
# Global fallback ceiling for models absent from MODEL_MAX_TOKENS.
DEFAULT_MAX_TOKENS = 8192

# Keyed by the model id as supplied by the caller.
MODEL_MAX_TOKENS = {
    GEMINI_PRO_MODEL: 1_000_000,
    GEMINI_DEFAULT_MODEL: 8192,
    "pixtral-large-latest": 128_000,
    GITHUB_MODEL_ALIAS: 1000,
}


# ---- Sampling defaults per provider family ----
# (temperature, top_p) used when the caller leaves an option unset.
SAMPLING_DEFAULTS = {
    "openrouter_stream": (0.7, 0.4),
    "openrouter": (0.7, 0.95),
    "together": (0.7, 0.4),
    "groq": (0.7, 0.95),
    "github": (1.0, 1.0),
    "mistral": (0.7, 0.4),
    "xai": (0.7, 0.4),
    "google": (1.0, 0.95),
}

# Context window advertised per provider binding.
PROVIDER_MAX_CONTEXT_TOKENS = {
    "google": 1_000_000,
    "together": 8192,
    "openrouter": 8192,
    "groq": 8192,
    "github": 128_000,
    "mistral": 128_000,
    "xai": 131_072,
}


# ---- File analysis ----
ANALYSIS_MAX_UPLOAD_BYTES = 20 * 1024 * 1024
ANALYSIS_TIMEOUT_SECONDS = 280.0
ANALYSIS_DEFAULT_SYSTEM_PROMPT = (
    "You are FeludaAI, an intelligent assistant. Analyze this file and provide a detailed response."
)
ANALYSIS_GENERATION_CONFIG = {
    "temperature": 0.7,
    "top_p": 0.9,
    "top_k": 40,
    "max_output_tokens": 8192,
}


# ---- Image generation ----
IMAGE_DEFAULT_MODEL = "black-forest-labs/FLUX.1-schnell-Free"
IMAGE_DEFAULT_SIZE = "1024x1024"
IMAGE_INFERENCE_STEPS = 30
IMAGE_GUIDANCE_SCALE = 7.5
IMAGE_MAX_SEQUENCE_LENGTH = 256


# ---- Lively chat (grounded Gemini conversation) ----
LIVELY_MODEL = GEMINI_PRO_MODEL
LIVELY_FALLBACK_MODEL = "gemini-pro"
LIVELY_GENERATION_CONFIG = {
    "temperature": 1.0,
    "top_k": 40,
    "top_p": 0.95,
    "max_output_tokens": 8192,
}
GEMINI_SAFETY_SETTINGS = tuple(
    {"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
    for category in (
        "HARM_CATEGORY_HARASSMENT",
        "HARM_CATEGORY_HATE_SPEECH",
        "HARM_CATEGORY_SEXUALLY_EXPLICIT",
        "HARM_CATEGORY_DANGEROUS_CONTENT",
    )
)


# ---- Conversation context ----
# Number of stored exchanges folded into a contextual prompt.
CONTEXT_HISTORY_LIMIT = 5


# ---- SQLite config (infrastructure) ----
SQLITE_BUSY_TIMEOUT_MS = 5000
SQLITE_JOURNAL_MODE = "WAL"
SQLITE_SYNCHRONOUS = "NORMAL"


__all__ = [
    "FELUDA_SERVICE_CORS_DEFAULT_ORIGINS",
    "FELUDA_SERVICE_DEFAULT_HOST",
    "FELUDA_SERVICE_DEFAULT_PORT",
    "FELUDA_APP_TITLE",
    "OPENROUTER_DEFAULT_BASE_URL",
    "TOGETHER_DEFAULT_BASE_URL",
    "GROQ_DEFAULT_BASE_URL",
    "GITHUB_DEFAULT_BASE_URL",
    "MISTRAL_DEFAULT_BASE_URL",
    "XAI_DEFAULT_BASE_URL",
    "HERMES_STREAMING_MODEL",
    "GROQ_ALIAS_MODEL",
    "GITHUB_MODEL_ALIAS",
    "GITHUB_UNDERLYING_MODEL",
    "XAI_ALIAS_MODEL",
    "MISTRAL_MODELS",
    "GEMINI_DEFAULT_MODEL",
    "GEMINI_PRO_MODEL",
    "DEFAULT_MAX_TOKENS",
    "MODEL_MAX_TOKENS",
    "SAMPLING_DEFAULTS",
    "PROVIDER_MAX_CONTEXT_TOKENS",
    "ANALYSIS_MAX_UPLOAD_BYTES",
    "ANALYSIS_TIMEOUT_SECONDS",
    "ANALYSIS_DEFAULT_SYSTEM_PROMPT",
    "ANALYSIS_GENERATION_CONFIG",
    "IMAGE_DEFAULT_MODEL",
    "IMAGE_DEFAULT_SIZE",
    "IMAGE_INFERENCE_STEPS",
    "IMAGE_GUIDANCE_SCALE",
    "IMAGE_MAX_SEQUENCE_LENGTH",
    "LIVELY_MODEL",
    "LIVELY_FALLBACK_MODEL",
    "LIVELY_GENERATION_CONFIG",
    "GEMINI_SAFETY_SETTINGS",
    "CONTEXT_HISTORY_LIMIT",
    "SQLITE_BUSY_TIMEOUT_MS",
    "SQLITE_JOURNAL_MODE",
    "SQLITE_SYNCHRONOUS",
]
