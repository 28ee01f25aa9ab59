"""Prompt bundle models.

This module defines the prompt data structure passed to the generation
endpoint.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Message(BaseModel):
    """Single message in an LLM conversation."""

    role: str = Field(
        ..., description="Message role: 'system', 'user', or 'assistant'"
    )
    content: str = Field(..., description="Message content")


class PromptBundle(BaseModel):
    """Complete prompt package ready for the LLM.

    This is the output of the PromptEngine and input to the LLMGateway.
    """

    messages: List[Message] = Field(..., description="Conversation messages")

    # Model configuration
    temperature: float = Field(
        default=0.1, ge=0.0, le=2.0, description="Sampling temperature"
    )
    max_tokens: int = Field(
        default=4096, gt=0, description="Maximum tokens in response"
    )

    # Metadata for logging and debugging
    line_count: int = Field(default=0, description="Numbered lines in the prompt")
    template_variables: Dict[str, Any] = Field(
        default_factory=dict, description="Variables used to render the prompt"
    )

    @property
    def user_prompt(self) -> Optional[str]:
        """Extract user prompt from messages."""
        for msg in self.messages:
            if msg.role == "user":
                return msg.content
        return None

    def to_openai_format(self) -> List[Dict[str, str]]:
        """Convert to OpenAI API message format.

        Returns:
            List of message dicts with 'role' and 'content' keys
        """
        return [{"role": m.role, "content": m.content} for m in self.messages]

    def estimate_tokens(self) -> int:
        """Estimate total input tokens (~3 characters per token)."""
        total_chars = sum(len(m.content) for m in self.messages)
        return total_chars // 3
