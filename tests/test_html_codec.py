# tests/test_html_codec.py

from __future__ import annotations

import pytest

from trilium_todo.tasks import html_codec
from trilium_todo.tasks.task_models import Task


def _pairs(tasks: list[Task]) -> list[tuple[str, bool]]:
    return [(t.text, t.completed) for t in tasks]


def test_empty_list_encodes_to_placeholder_and_back() -> None:
    markup = html_codec.encode([])
    assert markup == html_codec.EMPTY_PLACEHOLDER
    assert html_codec.decode(markup) == []


def test_encode_exact_trilium_markup() -> None:
    markup = html_codec.encode([Task("Buy milk", completed=True), Task("Call Bob")])
    assert markup == (
        '<ul class="todo-list">'
        '<li><label class="todo-list__label"><input type="checkbox" checked="checked" disabled="disabled">'
        '<span class="todo-list__label__description">&nbsp;Buy milk&nbsp;</span></label></li>'
        '<li><label class="todo-list__label"><input type="checkbox" disabled="disabled">'
        '<span class="todo-list__label__description">&nbsp;Call Bob&nbsp;</span></label></li>'
        "</ul>"
    )


@pytest.mark.parametrize("n", [0, 1, 5])
def test_round_trip_preserves_text_state_and_order(n: int) -> None:
    tasks = [Task(f"task {i}", completed=(i % 2 == 0)) for i in range(n)]
    assert _pairs(html_codec.decode(html_codec.encode(tasks))) == _pairs(tasks)


def test_checked_marker_only_for_completed() -> None:
    assert html_codec.CHECKED_MARKER in html_codec.encode([Task("a", completed=True)])
    assert html_codec.CHECKED_MARKER not in html_codec.encode([Task("a", completed=False)])


def test_decode_restamps_created_at() -> None:
    original = Task("a", created_at=1.0)
    (decoded,) = html_codec.decode(html_codec.encode([original]))
    assert decoded.created_at > 1.0


def test_markup_significant_text_is_escaped_and_round_trips() -> None:
    text = 'Fix <b>bold</b> & "quotes" &nbsp; here'
    markup = html_codec.encode([Task(text)])

    assert "<b>" not in markup
    assert "&lt;b&gt;" in markup
    assert _pairs(html_codec.decode(markup)) == [(text, False)]


def test_decode_tolerates_whitespace_between_tags_and_extra_attributes() -> None:
    markup = (
        '<ul class="todo-list">\n'
        '<li>\n  <label class="todo-list__label"><input type="checkbox" checked="checked" data-x="1" '
        'disabled="disabled"><span class="todo-list__label__description">&nbsp;Water plants&nbsp;</span>'
        "</label>\n</li>\n"
        "</ul>"
    )
    assert _pairs(html_codec.decode(markup)) == [("Water plants", True)]


def test_decode_unescapes_entities_written_by_trilium() -> None:
    markup = html_codec.ITEM_TEMPLATE.format(checked="", text="Tom &amp; Jerry")
    assert _pairs(html_codec.decode(markup)) == [("Tom & Jerry", False)]


@pytest.mark.parametrize(
    "markup",
    [
        None,
        "",
        "   ",
        "<p>Some unrelated note</p>",
        "<ul><li>plain bullet</li></ul>",
        # missing disabled="disabled"
        '<li><label class="todo-list__label"><input type="checkbox">'
        '<span class="todo-list__label__description">&nbsp;x&nbsp;</span></label></li>',
        # empty text between the markers
        '<li><label class="todo-list__label"><input type="checkbox" disabled="disabled">'
        '<span class="todo-list__label__description">&nbsp;&nbsp;</span></label></li>',
    ],
)
def test_non_conforming_markup_decodes_to_nothing(markup: str | None) -> None:
    assert html_codec.decode(markup) == []


def test_decode_skips_foreign_content_between_items() -> None:
    good = html_codec.encode([Task("one"), Task("two", completed=True)])
    mixed = "<h1>Tasks</h1>" + good.replace("</li><li>", "</li><li>junk</li><li>") + "<p>footer</p>"
    assert _pairs(html_codec.decode(mixed)) == [("one", False), ("two", True)]


def test_item_with_inline_tags_decodes_as_plain_text() -> None:
    formatted = html_codec.ITEM_TEMPLATE.format(checked="", text="Pay <strong>rent</strong> &amp; bills")
    plain = html_codec.encode_item(Task("plain", completed=True))
    assert _pairs(html_codec.decode(formatted + plain)) == [("Pay rent & bills", False), ("plain", True)]


def test_formatted_item_survives_decode_and_re_encode() -> None:
    note = html_codec.LIST_OPEN + html_codec.ITEM_TEMPLATE.format(
        checked=" checked=\"checked\"", text='Call <a href="tel:1">Bob</a>'
    ) + html_codec.LIST_CLOSE
    pushed_back = html_codec.encode(html_codec.decode(note) + [Task("Mine")])
    assert _pairs(html_codec.decode(pushed_back)) == [("Call Bob", True), ("Mine", False)]


def test_multiline_text_round_trips() -> None:
    tasks = [Task("first line\nsecond line")]
    assert _pairs(html_codec.decode(html_codec.encode(tasks))) == [("first line\nsecond line", False)]
