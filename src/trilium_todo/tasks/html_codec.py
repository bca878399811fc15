# src/trilium_todo/tasks/html_codec.py

"""
Checkbox markup codec for the Trilium note.

The note holds a Trilium "todo list" block:

    <ul class="todo-list">
      <li><label class="todo-list__label"><input type="checkbox" checked="checked" disabled="disabled">
          <span class="todo-list__label__description">&nbsp;TEXT&nbsp;</span></label></li>
    </ul>

(one line per item in practice; wrapped here for reading). An empty list is
stored as a single placeholder paragraph.

Task text is HTML-escaped on the way out and entity-unescaped on the way in,
so `decode(encode(tasks))` keeps (text, completed) for any non-empty text.
Inline formatting added in Trilium (<strong>, <a>, ...) is stripped on decode so
the item survives as plain text. Anything that does not match the item grammar
is ignored by `decode`.
"""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Iterable

from .task_models import Task

logger = logging.getLogger(__name__)

EMPTY_PLACEHOLDER = "<p>✅ No tasks</p>"

LIST_OPEN = '<ul class="todo-list">'
LIST_CLOSE = "</ul>"

CHECKED_MARKER = 'checked="checked"'
PAD = "&nbsp;"

ITEM_TEMPLATE = (
    '<li><label class="todo-list__label">'
    '<input type="checkbox"{checked} disabled="disabled">'
    '<span class="todo-list__label__description">' + PAD + "{text}" + PAD + "</span>"
    "</label></li>"
)

ITEM_REGEX = re.compile(
    r"<li>\s*<label class=\"todo-list__label\">"
    r"<input type=\"checkbox\"(?P<attrs>[^>]*?)disabled=\"disabled\">"
    r"<span class=\"todo-list__label__description\">&nbsp;(?P<text>(?:(?!</li>)[\s\S])+?)&nbsp;</span>"
    r"</label>\s*</li>"
)

TAG_REGEX = re.compile(r"<[^>]*>")


def _escape(text: str) -> str:
    return html.escape(text, quote=False)


def encode_item(task: Task) -> str:
    checked = f" {CHECKED_MARKER}" if task.completed else ""
    return ITEM_TEMPLATE.format(checked=checked, text=_escape(task.text))


def encode(tasks: Iterable[Task]) -> str:
    """Render tasks as a Trilium checkbox list (or the empty placeholder)."""
    items = [encode_item(t) for t in tasks]
    if not items:
        return EMPTY_PLACEHOLDER
    return LIST_OPEN + "".join(items) + LIST_CLOSE


def decode(markup: str | None) -> list[Task]:
    """
    Parse every well-formed checkbox item out of `markup`.

    Never raises: empty, foreign or placeholder content yields [].
    """
    if not markup or not markup.strip():
        return []

    tasks: list[Task] = []
    for m in ITEM_REGEX.finditer(markup):
        text = html.unescape(TAG_REGEX.sub("", m.group("text")))
        if not text:
            continue
        tasks.append(Task(text=text, completed=CHECKED_MARKER in m.group("attrs")))

    logger.debug(
        "Decoded %d task(s) from note markup (completed=%d, chars=%d)",
        len(tasks),
        sum(1 for t in tasks if t.completed),
        len(markup),
    )
    return tasks
