"""Conversation context: fold recent exchanges of a session into the prompt.

The stored history is rendered as ``User: ...`` / ``Assistant: ...`` turns
and wrapped with instructions telling the model to use it only when the new
request refers back to it. Without history the prompt is returned unchanged.
"""

from __future__ import annotations

from typing import Sequence

from ..config.defaults import CONTEXT_HISTORY_LIMIT
from ..persistence.interfaces.repos import Exchange

CONTEXT_TEMPLATE = """
You are FeludaAI, the Ultimate Magajastra. Here is the relevant context from our current discussion:

{context}

Current request: {prompt}

Important instructions:
1. Always maintain your identity as FeludaAI
2. Use the context above only if it's directly relevant to the current request
3. If the user is asking about modifying or referring to something from our conversation, use the context to understand what they're referring to
4. If the current request is starting a new topic, feel free to ignore the previous context
5. Keep your response focused and relevant to the current request
6. If you're unsure whether the context is relevant, prioritize responding to the current request directly

Please provide an appropriate response."""


def render_history(history: Sequence[Exchange]) -> str:
    turns = []
    for ex in history:
        turns.append(f"User: {ex.prompt}")
        turns.append(f"Assistant: {ex.response}")
    return "\n\n".join(turns)


def build_contextual_prompt(
    history: Sequence[Exchange],
    prompt: str,
    *,
    limit: int = CONTEXT_HISTORY_LIMIT,
) -> str:
    """Prepend the last ``limit`` exchanges of ``history`` (oldest first) to ``prompt``."""
    recent = list(history)[-limit:] if limit > 0 else []
    context = render_history(recent)
    if not context:
        return prompt
    return CONTEXT_TEMPLATE.format(context=context, prompt=prompt)


__all__ = ["build_contextual_prompt", "render_history", "CONTEXT_TEMPLATE"]
