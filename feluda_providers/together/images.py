"""Image generation over Together's OpenAI-compatible images API.

The caller's prompt is wrapped with a composition guide for the requested
aspect ratio plus a fixed photographic style, and paired with a fixed
negative prompt. One image is requested per call and returned as a URL.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..base.errors import ErrorCode, ProviderError, as_provider_error
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..config.defaults import (
    IMAGE_DEFAULT_SIZE,
    IMAGE_GUIDANCE_SCALE,
    IMAGE_INFERENCE_STEPS,
    IMAGE_MAX_SEQUENCE_LENGTH,
)
from .client import TogetherClient

PROMPT_REQUIRED_MESSAGE = "Prompt is required"
NO_IMAGE_MESSAGE = "No image generated"

_MAX_SEED = 2147483647

COMPOSITION_GUIDES = {
    "1024x1792": (
        "vertical composition, portrait orientation, full body shot, "
        "strong vertical lines, elegant vertical framing"
    ),
    "1792x1024": (
        "horizontal composition, landscape orientation, panoramic view, "
        "wide angle perspective, cinematic aspect ratio"
    ),
}
SQUARE_GUIDE = "balanced square composition, centered framing, symmetrical arrangement"

STYLE_SUFFIX = (
    "(photorealistic:1.4), (hyperrealistic:1.3), masterpiece,\n"
    "8k resolution, highly detailed, sharp focus, HDR,\n"
    "cinematic lighting, volumetric lighting, ambient occlusion, ray tracing,\n"
    "professional color grading, dramatic atmosphere,\n"
    "shot on Hasselblad H6D-400C, 100mm f/2.8 lens, golden hour photography,\n"
    "detailed textures, intricate details, pristine quality, award-winning photography"
)

NEGATIVE_PROMPT = (
    "cartoon, anime, illustration, painting, drawing, art,\n"
    "low quality, low resolution, blurry, noisy, grainy,\n"
    "oversaturated, overexposed, underexposed,\n"
    "deformed, distorted, disfigured,\n"
    "watermark, signature, text, logo,\n"
    "bad anatomy, bad proportions, amateur, unprofessional,\n"
    "wrong aspect ratio, stretched image, poorly cropped,\n"
    "without face tattoo, without text, without design on t-shirt,\n"
    "flat lighting, awkward poses, lack of emotion, unclear symbolism,\n"
    "generic patterns, bland textures, messy composition, pixelation,\n"
    "amateurish expressions, disproportionate figures, artificial poses,\n"
    "unnatural shadows, inconsistent style, overused symbols,\n"
    "overemphasis on detail, clichéd lighting, poor resolution,\n"
    "disconnected elements, unclear focal point, generic font,\n"
    "repetitive poses, lack of depth, chaotic composition,\n"
    "misaligned elements, dull colour palette, off-balance,\n"
    "crowded, overused tropes"
)


@dataclass(frozen=True)
class EnhancedPrompt:
    prompt: str
    negative_prompt: str


def enhance_prompt(prompt: str, size: str = IMAGE_DEFAULT_SIZE) -> EnhancedPrompt:
    guide = COMPOSITION_GUIDES.get(size, SQUARE_GUIDE)
    return EnhancedPrompt(
        prompt=f"{prompt}\n{guide},\n{STYLE_SUFFIX}",
        negative_prompt=NEGATIVE_PROMPT,
    )


class TogetherImageClient:
    """Generate one image URL per prompt.

    Parameters:
        client: Together chat client whose SDK handle is reused for images.
        seed_source: Callable returning a seed; defaults to ``random.randrange``.
    """

    def __init__(
        self,
        client: Optional[TogetherClient] = None,
        *,
        seed_source: Any = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._client = client or TogetherClient()
        self._seed = seed_source or (lambda: random.randrange(_MAX_SEED))
        self._logger = logger or get_logger("image")

    def build_params(self, prompt: str, model: str, size: str) -> Dict[str, Any]:
        enhanced = enhance_prompt(prompt, size)
        return {
            "model": model,
            "prompt": enhanced.prompt,
            "n": 1,
            "size": size,
            "response_format": "url",
            "extra_body": {
                "negative_prompt": enhanced.negative_prompt,
                "num_inference_steps": IMAGE_INFERENCE_STEPS,
                "guidance_scale": IMAGE_GUIDANCE_SCALE,
                "seed": self._seed(),
                "max_sequence_length": IMAGE_MAX_SEQUENCE_LENGTH,
                "num_images_per_prompt": 1,
            },
        }

    def generate(self, prompt: Optional[str], model: str, size: Optional[str] = None) -> str:
        """Return the URL of one generated image.

        Raises:
            ProviderError: ``VALIDATION`` without a prompt, ``NO_CONTENT``
                when the API returns no image, or the classified upstream
                failure.
        """
        if not prompt:
            raise ProviderError(ErrorCode.VALIDATION, PROMPT_REQUIRED_MESSAGE, provider="together", model=model)
        size = size or IMAGE_DEFAULT_SIZE
        ctx = LogContext(provider="together", model=model)
        normalized_log_event(self._logger, "image.start", ctx, phase="start", size=size)
        try:
            response = self._client.sdk().images.generate(**self.build_params(prompt, model, size))
        except ProviderError:
            raise
        except Exception as exc:
            err = as_provider_error(exc, provider="together", model=model)
            normalized_log_event(
                self._logger,
                "image.error",
                ctx,
                phase="error",
                level=logging.ERROR,
                error_code=err.code.value,
                error=err.message,
            )
            raise err from exc
        data = getattr(response, "data", None) or []
        url = getattr(data[0], "url", None) if data else None
        if not url:
            raise ProviderError(ErrorCode.NO_CONTENT, NO_IMAGE_MESSAGE, provider="together", model=model)
        normalized_log_event(self._logger, "image.end", ctx, phase="finalize", emitted=True)
        return url


__all__ = [
    "EnhancedPrompt",
    "TogetherImageClient",
    "enhance_prompt",
    "COMPOSITION_GUIDES",
    "NEGATIVE_PROMPT",
]
