"""Prompt construction for subtitle batches."""

from typing import List

from ..models.context import TranslationBatch
from ..models.prompt import Message, PromptBundle


class PromptEngine:
    """Builds the generation request for one batch.

    The request is a single user message: a short instruction followed by
    the optional context-before block, the numbered lines to translate and
    the optional context-after block.
    """

    INSTRUCTION = (
        "You are translating {source} drama/movie subtitles to {target}.\n"
        "Use the context to understand the conversation flow, but ONLY "
        "translate the lines in [TRANSLATE THESE].\n"
        "Output ONLY the translations, one per line, numbered to match "
        "(1. 2. 3. etc.).\n"
        "Do not repeat the source text, do not add transliteration, "
        "notes or commentary."
    )

    CONTEXT_BEFORE = "[CONTEXT BEFORE]"
    TRANSLATE = "[TRANSLATE THESE]"
    CONTEXT_AFTER = "[CONTEXT AFTER]"

    @classmethod
    def render_body(cls, batch: TranslationBatch) -> str:
        """Render the context and numbered sections of a batch."""
        lines: List[str] = []

        if batch.context_before:
            lines.append(cls.CONTEXT_BEFORE)
            lines.extend(f'- "{text}"' for text in batch.context_before)
            lines.append("")

        lines.append(cls.TRANSLATE)
        lines.extend(
            f'{position}. "{text}"'
            for position, text in enumerate(batch.translatable, start=1)
        )
        lines.append("")

        if batch.context_after:
            lines.append(cls.CONTEXT_AFTER)
            lines.extend(f'- "{text}"' for text in batch.context_after)

        return "\n".join(lines).rstrip("\n")

    @classmethod
    def build(
        cls,
        batch: TranslationBatch,
        source_name: str,
        target_name: str,
        temperature: float = 0.1,
        max_tokens: int = 4096,
    ) -> PromptBundle:
        """Build the prompt bundle for a batch.

        Args:
            batch: Planned batch with a non-empty translatable set
            source_name: Display name of the source language
            target_name: Display name of the target language
            temperature: Sampling temperature
            max_tokens: Response token limit

        Returns:
            PromptBundle ready for the gateway
        """
        instruction = cls.INSTRUCTION.format(source=source_name, target=target_name)
        content = f"{instruction}\n\n{cls.render_body(batch)}"

        return PromptBundle(
            messages=[Message(role="user", content=content)],
            temperature=temperature,
            max_tokens=max_tokens,
            line_count=len(batch.translatable),
            template_variables={
                "source_language": source_name,
                "target_language": target_name,
                "batch_index": batch.index,
                "context_before": len(batch.context_before),
                "context_after": len(batch.context_after),
            },
        )
