from subtrans.core.translation.models import MatchStrategy
from subtrans.core.translation.pipeline.output_processor import (
    OutputProcessor,
    match_numbered,
    match_positional,
    response_lines,
)

CUES = ["하나", "둘", "셋", "넷", "다섯"]


def test_numbered_response_maps_every_cue() -> None:
    response = '1. "Один"\n2. "Два"\n\n3. Три\n4. "Чотири"\n5. "П\'ять"\n'

    outcomes = OutputProcessor.reconcile(response, CUES)

    assert [o.translated for o in outcomes] == ["Один", "Два", "Три", "Чотири", "П'ять"]
    assert all(o.strategy == MatchStrategy.NUMBERED for o in outcomes)


def test_missing_item_three_leaves_only_that_cue_untranslated() -> None:
    response = '1. "Один"\n2. "Два"\n4. "Чотири"\n5. "П\'ять"'

    outcomes = OutputProcessor.reconcile(response, CUES)
    translated = {o.original: o.translated for o in outcomes if o.success}

    assert set(translated) == {"하나", "둘", "넷", "다섯"}
    assert outcomes[2].success is False
    assert outcomes[2].strategy == MatchStrategy.NONE


def test_unnumbered_response_falls_back_to_positions() -> None:
    response = '"Один"\n"Два"\nТри'

    outcomes = OutputProcessor.reconcile(response, CUES[:3])

    assert [o.translated for o in outcomes] == ["Один", "Два", "Три"]
    assert all(o.strategy == MatchStrategy.POSITIONAL for o in outcomes)


def test_response_shorter_than_batch_leaves_tail_untranslated() -> None:
    outcomes = OutputProcessor.reconcile("1. Один", CUES[:3])

    assert [o.success for o in outcomes] == [True, False, False]


def test_numbered_match_ignores_other_numbers() -> None:
    lines = response_lines('10. "Десять"\n1. "Один"')

    assert match_numbered(lines, 1) == "Один"
    assert match_numbered(lines, 2) is None


def test_positional_strips_prefix_and_quotes() -> None:
    lines = ['"Привіт"  ', "2. Як справи?"]

    assert match_positional(lines, 1) == "Привіт"
    assert match_positional(lines, 2) == "Як справи?"
    assert match_positional(lines, 3) is None


def test_empty_response_translates_nothing() -> None:
    outcomes = OutputProcessor.reconcile("", CUES)

    assert not any(o.success for o in outcomes)
