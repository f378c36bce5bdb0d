import json
import logging
import os
from typing import Protocol

from cardwise.domain.errors import AugmentationFailure

logger = logging.getLogger(__name__)

MAX_CONTEXT_CHARS = 12000


class Augmenter(Protocol):
    def augment(self, query: str, context: str) -> str:
        """Return explanatory text for the query, or raise AugmentationFailure."""


class TemplateAugmenter:
    """Deterministic stand-in that restates the evidence found in the context."""

    def augment(self, query: str, context: str) -> str:
        if not context.strip():
            raise AugmentationFailure("Empty context.")
        evidence = _section(context, "Evidence:")
        statuses = _section(context, "Limit Status:")
        lines = [f"Here is what I found for: {query.strip()}"]
        if evidence:
            lines.append("Relevant rewards:")
            lines.extend(evidence)
        if statuses:
            lines.append("Limit status:")
            lines.extend(statuses)
        if len(lines) == 1:
            lines.append("None of your cards has a specific reward for this purchase.")
        return "\n".join(lines)


def _section(context: str, header: str) -> list[str]:
    for block in context.split("\n\n"):
        if block.startswith(header):
            return [line for line in block.splitlines()[1:] if line.strip()]
    return []


class OpenAIAugmenter:
    def __init__(self, api_key: str | None = None, model: str | None = None):
        self.api_key = (api_key or os.getenv("OPENAI_API_KEY", "")).strip()
        self.model = (model or os.getenv("OPENAI_MODEL", "gpt-4.1-mini")).strip()

    def augment(self, query: str, context: str) -> str:
        try:
            from openai import OpenAI
        except ImportError as exc:
            raise AugmentationFailure(
                "openai package is required for the OpenAI augmenter. Install with: pip install -e '.[llm]'"
            ) from exc

        if not self.api_key:
            raise AugmentationFailure("OPENAI_API_KEY is missing for the OpenAI augmenter.")
        if len(context) > MAX_CONTEXT_CHARS:
            raise AugmentationFailure(f"Context too large ({len(context)} chars).")

        system_prompt = (
            "You help a user choose which of their credit cards to use for a purchase. "
            "Use only the card data in the context. "
            'Return JSON only with keys: "answer" (short explanation) and "card" (card name or null).'
        )
        client = OpenAI(api_key=self.api_key)
        try:
            response = client.chat.completions.create(
                model=self.model,
                temperature=0,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": f"Context:\n{context}\n\nQuestion: {query}"},
                ],
            )
        except Exception as exc:
            raise AugmentationFailure(f"OpenAI request failed: {exc}") from exc

        content = response.choices[0].message.content
        if not content:
            raise AugmentationFailure("LLM returned empty content.")

        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise AugmentationFailure("LLM returned malformed JSON.") from exc

        answer = data.get("answer") if isinstance(data, dict) else None
        if not isinstance(answer, str) or not answer.strip():
            raise AugmentationFailure("LLM response is missing an answer.")
        logger.debug(f"OpenAI augmenter answered with model {self.model}")
        return answer.strip()


def build_augmenter(name: str, api_key: str = "", model: str = "") -> Augmenter:
    if name == "openai":
        return OpenAIAugmenter(api_key=api_key or None, model=model or None)
    if name == "template":
        return TemplateAugmenter()
    raise ValueError(f"Unknown augmenter: {name}")
