import pytest

from subtrans.core.subtitles import CueParser, parse_cues
from subtrans.core.translation.errors import ParseError

from fakes import make_vtt

SAMPLE = """WEBVTT

NOTE generated by the episode exporter

STYLE ::cue { color: yellow }

1
00:00:01.000 --> 00:00:02.500
<i>Where are</i> you
going?

2
00:00:03.000 --> 00:00:04.000
Tom &amp; Jerry &lt;3

3
00:00:05.000 --> 00:00:06.000 align:start
<c.yellow>Where are you going?</c>

4
00:00:07.000 --> 00:00:08.000
Wait&nbsp;for me
"""


def test_parse_extracts_cue_text_in_order() -> None:
    assert parse_cues(SAMPLE) == [
        "Where are you going?",
        "Tom & Jerry <3",
        "Wait for me",
    ]


def test_parse_assigns_first_seen_indices() -> None:
    cues = CueParser.parse(SAMPLE)

    assert [cue.index for cue in cues] == [0, 1, 2]
    assert cues[1].text == "Tom & Jerry <3"


def test_parse_removes_duplicates_keeping_first_occurrence() -> None:
    document = make_vtt(["안녕", "고마워", "안녕", "잘 가", "고마워"])

    assert parse_cues(document) == ["안녕", "고마워", "잘 가"]


def test_parse_tolerates_missing_header_indices_and_timings() -> None:
    document = "first line\nstill first\n\nsecond\r\n\r\nthird"

    assert parse_cues(document) == ["first line still first", "second", "third"]


def test_parse_strips_byte_order_mark() -> None:
    document = "\ufeffWEBVTT\n\n00:00:01.000 --> 00:00:02.000\nHello\n"

    assert parse_cues(document) == ["Hello"]


def test_markup_only_numbers_are_not_kept_as_text() -> None:
    document = make_vtt(["<i>42</i>", "Forty-two"])

    assert parse_cues(document) == ["Forty-two"]


def test_decoded_angle_brackets_stay_text() -> None:
    document = (
        "WEBVTT\n\n1\n00:00:01.000 --> 00:00:02.000\nI &lt;3 you &gt;_&lt;\n\n"
        "2\n00:00:03.000 --> 00:00:04.000\nif a &lt; b\nand c &gt; d\n"
    )

    assert parse_cues(document) == ["I <3 you >_<", "if a < b and c > d"]


def test_entities_are_decoded_once() -> None:
    document = make_vtt(["<b>a &amp;lt;b&amp;gt; c</b>"])

    assert parse_cues(document) == ["a &lt;b&gt; c"]


def test_render_escapes_markup_characters() -> None:
    texts = ["I <3 you >_<", "Tom & Jerry", "&amp;"]

    assert CueParser.render(texts) == "I &lt;3 you &gt;_&lt;\n\nTom &amp; Jerry\n\n&amp;amp;"
    assert parse_cues(CueParser.render(texts)) == texts


@pytest.mark.parametrize(
    "document",
    [
        SAMPLE,
        "x &lt;i&gt;y&lt;/i&gt;\nwith &lt; and\n&gt; split",
        make_vtt(["a &amp;lt;b&amp;gt; c", "x", "x"]),
        make_vtt(["line with <", "> closing", "&amp;amp;"]),
        "one\n<b>\n</b>\n\ntwo",
    ],
)
def test_parse_is_idempotent(document: str) -> None:
    once = parse_cues(document)
    twice = parse_cues(CueParser.render(once))

    assert twice == once
    assert len(set(once)) == len(once)


@pytest.mark.parametrize(
    "document",
    ["", "   \n\n", "WEBVTT\n\n1\n00:00:01.000 --> 00:00:02.000\n\nNOTE nothing\n"],
)
def test_parse_without_text_raises(document: str) -> None:
    with pytest.raises(ParseError):
        CueParser.parse(document)
