"""Request dispatch: normalization, the single outbound call, response adaptation."""

from .dispatcher import Dispatcher, looks_truncated
from .normalizer import default_max_tokens, normalize
from .response_adapter import accumulate_stream, extract_text, unwrap_text
from .sse import SSE_HEADERS, SSE_MEDIA_TYPE, decode_sse, encode_sse, iter_sse

__all__ = [
    "Dispatcher",
    "looks_truncated",
    "normalize",
    "default_max_tokens",
    "accumulate_stream",
    "extract_text",
    "unwrap_text",
    "encode_sse",
    "iter_sse",
    "decode_sse",
    "SSE_MEDIA_TYPE",
    "SSE_HEADERS",
]
