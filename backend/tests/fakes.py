"""Test doubles and document builders shared by the test modules."""

import re
from typing import Callable, List, Optional, Sequence, Union

from subtrans.config import Settings
from subtrans.core.translation.models import LLMResponse, PromptBundle
from subtrans.core.translation.orchestrator import PipelineController
from subtrans.core.translation.pipeline import LLMGateway

_NUMBERED = re.compile(r'^(\d+)\. "(.*)"$')


def fake_translate(text: str) -> str:
    return f"[uk] {text}"


def translatable_lines(bundle: PromptBundle) -> List[str]:
    """Extract the numbered source lines from a rendered prompt."""
    section = bundle.user_prompt.split("[TRANSLATE THESE]\n", 1)[1]
    section = section.split("\n\n", 1)[0]
    lines = []
    for line in section.splitlines():
        match = _NUMBERED.match(line)
        if match:
            lines.append(match.group(2))
    return lines


def numbered_echo(bundle: PromptBundle) -> str:
    """Answer like a well-behaved endpoint: one numbered line per cue."""
    return "\n".join(
        f'{i}. "{fake_translate(text)}"'
        for i, text in enumerate(translatable_lines(bundle), start=1)
    )


class FakeGateway(LLMGateway):
    """Scripted gateway: replays queued replies, then answers with numbered_echo."""

    def __init__(
        self,
        script: Optional[Sequence[Union[str, Exception]]] = None,
        responder: Callable[[PromptBundle], str] = numbered_echo,
    ):
        self.script = list(script or [])
        self.responder = responder
        self.calls: List[PromptBundle] = []
        self.on_call: Optional[Callable[[int], None]] = None

    @property
    def provider(self) -> str:
        return "fake"

    @property
    def model(self) -> str:
        return "fake-model"

    async def call(self, bundle: PromptBundle) -> LLMResponse:
        self.calls.append(bundle)
        if self.on_call is not None:
            self.on_call(len(self.calls))
        if self.script:
            item = self.script.pop(0)
            if isinstance(item, Exception):
                raise item
            content = item
        else:
            content = self.responder(bundle)
        return LLMResponse(content=content, provider="fake", model="fake-model")

    @property
    def requested_cues(self) -> List[List[str]]:
        return [translatable_lines(bundle) for bundle in self.calls]


def make_vtt(texts: Sequence[str]) -> str:
    """Render texts as a WebVTT document with indices and timing lines."""
    lines = ["WEBVTT", ""]
    for i, text in enumerate(texts, start=1):
        lines.extend([str(i), f"00:00:{i:02d}.000 --> 00:00:{i:02d}.900", text, ""])
    return "\n".join(lines)


def make_settings(**overrides) -> Settings:
    values = dict(
        gemini_api_key="test-key",
        batch_size=5,
        context_size=2,
        batch_delay=0.1,
        rate_limit_delay=2.0,
        max_rate_limit_retries=30,
    )
    values.update(overrides)
    return Settings(**values)


def make_controller(store, gateway: LLMGateway, **overrides):
    """Build a controller wired to a fake gateway and a recording sleep.

    Returns:
        (controller, sleeps) where sleeps lists every awaited delay
    """
    sleeps: List[float] = []

    async def record_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    controller = PipelineController(
        store=store,
        gateway_factory=lambda config: gateway,
        settings=make_settings(**overrides),
        sleep=record_sleep,
    )
    return controller, sleeps
