import pytest

from exemel.cleaners.base import BaseCleaner
from exemel.cleaners.format import parse_xml, render_document
from exemel.cleaners.whitespace import TrimCleaner
from exemel.models import CleanOutcome
from exemel.pipeline import CleaningPipeline, clean_xml, default_cleaners, should_clean


class CountingCleaner(BaseCleaner):
    name = "counting"

    def __init__(self, settings=None, fail_with=None):
        super().__init__(settings)
        self.calls = 0
        self.fail_with = fail_with

    def clean(self, context):
        self.calls += 1
        if self.fail_with:
            return context.fail(self.fail_with)
        return context


def test_default_stage_order(test_settings):
    names = [stage.name for stage in default_cleaners(test_settings)]
    assert names == [
        "trim",
        "newline",
        "surrounding_garbage",
        "visual_studio",
        "visual_studio_vbscript",
        "added_root",
        "format",
    ]


@pytest.mark.parametrize("text", ["", "plain prose", "only < here", "only > here", "a > b < c"])
def test_gate_skips_non_xml(test_settings, text):
    counter = CountingCleaner(test_settings)
    pipeline = CleaningPipeline(stages=[counter], settings=test_settings)
    result = pipeline.clean(text)
    assert not should_clean(text)
    assert result.outcome is CleanOutcome.UNCHANGED
    assert result.text == text
    assert counter.calls == 0


def test_short_circuit_after_diagnostic(test_settings):
    first = CountingCleaner(test_settings)
    failing = CountingCleaner(test_settings, fail_with="stage broke")
    last = CountingCleaner(test_settings)
    pipeline = CleaningPipeline(stages=[first, failing, last], settings=test_settings)

    result = pipeline.clean("<a/>")

    assert (first.calls, failing.calls, last.calls) == (1, 1, 0)
    assert result.outcome is CleanOutcome.FAILED
    assert result.diagnostic == "stage broke"
    assert result.message == "stage broke"


def test_whitespace_only_error_message_does_not_halt(test_settings):
    blank = CountingCleaner(test_settings, fail_with="   ")
    last = CountingCleaner(test_settings)
    pipeline = CleaningPipeline(stages=[blank, last], settings=test_settings)
    result = pipeline.clean("<a/>")
    assert last.calls == 1
    assert result.outcome is CleanOutcome.CLEANED


def test_not_parseable_is_soft(test_settings):
    pipeline = CleaningPipeline(stages=[TrimCleaner(test_settings)], settings=test_settings)
    result = pipeline.clean("  <a>  ")
    assert result.outcome is CleanOutcome.CLEANED
    assert not result.parsed
    assert result.text == "<a>"
    assert result.message == test_settings.status_not_parseable


def test_parse_failure_keeps_working_text(pipeline):
    result = pipeline.clean("junk before <a><b></a> junk after")
    assert result.is_failed
    assert result.text == "<a><b></a>"
    assert result.diagnostic.startswith("XML could not be parsed:")


def test_exactly_one_status_per_clean(test_settings):
    messages = []
    pipeline = CleaningPipeline(settings=test_settings, status_sink=messages.append)
    pipeline.clean("<a/>")
    pipeline.clean("not xml")
    pipeline.clean("<a><b></a>")
    assert len(messages) == 3
    assert messages[0] == test_settings.status_parsed
    assert messages[1] == test_settings.status_skipped
    assert messages[2].startswith("XML could not be parsed:")


def test_multiple_roots_are_wrapped(pipeline):
    result = pipeline.clean("<a/><b/>")
    assert result.is_parsed
    assert result.text == "<Root>\n  <a/>\n  <b/>\n</Root>"


def test_single_root_is_not_wrapped(pipeline):
    result = pipeline.clean("<a><b/></a>")
    assert result.is_parsed
    assert result.text == "<a>\n  <b/>\n</a>"


def test_end_to_end_scenario(pipeline, test_settings):
    result = pipeline.clean("  <Root><A>1</A></Root>  \r\n")
    expected = render_document(parse_xml("<Root><A>1</A></Root>"), indent=test_settings.indent)
    assert result.outcome is CleanOutcome.CLEANED
    assert result.parsed
    assert result.text == expected == "<Root>\n  <A>1</A>\n</Root>"
    assert "\r" not in result.text


def test_debugger_output_end_to_end(pipeline):
    raw = r'"<Order Id=\"7\">\r\n  <Line Sku=\"A1\" />\r\n</Order>"'
    result = pipeline.clean(raw)
    assert result.is_parsed
    assert result.text == '<Order Id="7">\n  <Line Sku="A1"/>\n</Order>'


def test_vbscript_source_end_to_end(pipeline):
    raw = 'xml = "<Order Id=""7"">" & vbCrLf & "<Line/>" & vbCrLf & "</Order>"'
    result = pipeline.clean(raw)
    assert result.is_parsed
    assert result.text == '<Order Id="7">\n  <Line/>\n</Order>'


IDEMPOTENCE_SAMPLES = [
    "  <Root><A>1</A></Root>  \r\n",
    "<a/><b/>",
    "log line: <x y='1'><z>text</z></x> trailing",
    r'"<Order Id=\"7\">\r\n  <Line />\r\n</Order>"',
    '<Order Id=""7"">" & vbCrLf & "<Line/>" & vbCrLf & "</Order>',
    '<?xml version="1.0" encoding="utf-8"?><a><b>1</b></a>',
    "<!-- note --><a><b>1</b></a>",
    "<p>Hello <b>world</b> again</p>",
    "<a><![CDATA[<b/>]]></a>",
    '<a v="&lt;inner/&gt;">&amp; more</a>',
    '<a b="x&#10;y" c="tab&#9;here"/>',
    "<a>tail<![CDATA[ z ]]></a>",
    r"<Files><File>\new.txt</File></Files>",
]


@pytest.mark.parametrize("raw", IDEMPOTENCE_SAMPLES)
def test_clean_is_idempotent(raw):
    first = clean_xml(raw)
    assert first.outcome is CleanOutcome.CLEANED
    assert first.parsed
    assert clean_xml(first.text) == first


def test_windows_paths_survive_cleaning():
    result = clean_xml(r"<Files><File>\new.txt</File><Dir>C:\temp</Dir></Files>")
    assert result.is_parsed
    assert result.text == "<Files>\n  <File>\\new.txt</File>\n  <Dir>C:\\temp</Dir>\n</Files>"


def test_doubled_quotes_in_element_text_survive_cleaning():
    result = clean_xml('<Snippet><Code>s = ""abc""</Code></Snippet>')
    assert result.text == '<Snippet>\n  <Code>s = ""abc""</Code>\n</Snippet>'


def test_attribute_whitespace_is_written_as_character_references():
    result = clean_xml('<a b="x&#10;y" c="tab&#9;here"/>')
    assert result.text == '<a b="x&#10;y" c="tab&#9;here"/>'
    assert parse_xml(result.text).documentElement.getAttribute("b") == "x\ny"


def test_cdata_in_mixed_content_is_indented():
    result = clean_xml("<a>tail<![CDATA[ z ]]></a>")
    assert result.text == "<a>\n  tail\n  <![CDATA[ z ]]>\n</a>"
