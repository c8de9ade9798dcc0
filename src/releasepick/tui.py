"""
Curses implementation of the session view.

Layout: release tags on the left (30%), notes of the selected release on the
right, a help/status footer, and a centered progress box while a deployment is
pending. All drawing happens on the session loop thread.
"""

import curses
import textwrap
from typing import Dict, List, Optional

from releasepick.constants import (
    EMPTY_DETAIL_TEXT,
    HELP_TEXT,
    INPUT_POLL_INTERVAL_MS,
    MSG_INSTALL_STARTED,
    NO_RELEASES_TEXT,
)
from releasepick.list_model import ItemStatus, ReleaseItem, ReleaseListModel
from releasepick.session import Action, SessionView

HIGHLIGHT_SYMBOL = "► "
LIST_WIDTH_RATIO = 0.3
FOOTER_HEIGHT = 3
# Missing when curses is built against an ncurses without italics
ITALIC = getattr(curses, "A_ITALIC", 0)

KEY_BINDINGS: Dict[int, Action] = {
    ord("q"): Action.QUIT,
    27: Action.QUIT,  # Esc
    ord("h"): Action.DESELECT,
    curses.KEY_LEFT: Action.DESELECT,
    ord("j"): Action.MOVE_DOWN,
    curses.KEY_DOWN: Action.MOVE_DOWN,
    ord("k"): Action.MOVE_UP,
    curses.KEY_UP: Action.MOVE_UP,
    ord("l"): Action.ACTIVATE,
    curses.KEY_RIGHT: Action.ACTIVATE,
    curses.KEY_ENTER: Action.ACTIVATE,
    ord("\n"): Action.ACTIVATE,
    ord("\r"): Action.ACTIVATE,
    ord("g"): Action.FIRST,
    ord("G"): Action.LAST,
}


def action_for_key(key: int) -> Optional[Action]:
    return KEY_BINDINGS.get(key)


def scroll_offset(offset: int, cursor: Optional[int], visible_rows: int) -> int:
    """
    Return the first visible row so that `cursor` stays on screen.

    With no cursor the previous offset is kept, so deselecting does not jump
    the list back to the top.
    """
    if cursor is None or visible_rows <= 0:
        return offset
    if cursor < offset:
        return cursor
    if cursor >= offset + visible_rows:
        return cursor - visible_rows + 1
    return offset


def item_label(item: ReleaseItem) -> str:
    label = item.tag
    if item.status is ItemStatus.IN_PROGRESS:
        label += " (installing)"
    return label


def detail_lines(item: Optional[ReleaseItem], width: int) -> List[str]:
    if item is None:
        return textwrap.wrap(EMPTY_DETAIL_TEXT, width) or [""]

    header = [item.display_name or item.tag]
    if item.resolved_asset_name:
        header.append(f"Package: {item.resolved_asset_name}")
    else:
        header.append("Package: none")
    header.append("")

    body: List[str] = []
    for paragraph in (item.notes or "").splitlines() or [""]:
        body.extend(textwrap.wrap(paragraph, width) or [""])
    return header + body


class CursesView(SessionView):
    def __init__(self, stdscr: "curses.window") -> None:
        self.stdscr = stdscr
        self.offset = 0
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        self.stdscr.keypad(True)
        self.stdscr.timeout(INPUT_POLL_INTERVAL_MS)

    def read_action(self) -> Optional[Action]:
        key = self.stdscr.getch()
        if key == -1:
            return None
        return action_for_key(key)

    def draw(self, model: ReleaseListModel, status_message: str) -> None:
        self.stdscr.erase()
        height, width = self.stdscr.getmaxyx()
        body_height = max(height - FOOTER_HEIGHT, 3)
        list_width = max(int(width * LIST_WIDTH_RATIO), 10)

        self._draw_releases(model, 0, 0, body_height, list_width)
        self._draw_details(model, 0, list_width, body_height, width - list_width)
        self._draw_footer(status_message, body_height, width)
        if model.pending_item is not None:
            self._draw_progress(model.pending_item, body_height, width)
        self.stdscr.refresh()

    def _addstr(self, y: int, x: int, text: str, attr: int = 0, limit: int = 0) -> None:
        height, width = self.stdscr.getmaxyx()
        if y < 0 or y >= height or x < 0 or x >= width:
            return
        available = width - x - (1 if y == height - 1 else 0)
        if limit:
            available = min(available, limit)
        if available <= 0:
            return
        try:
            self.stdscr.addnstr(y, x, text, available, attr)
        except curses.error:
            pass

    def _box(self, y: int, x: int, h: int, w: int, title: str = "") -> None:
        if h < 2 or w < 2:
            return
        try:
            window = self.stdscr.derwin(h, w, y, x)
            window.box()
        except curses.error:
            return
        if title:
            self._addstr(y, x + 2, f" {title} ", curses.A_BOLD, w - 4)

    def _draw_releases(
        self, model: ReleaseListModel, y: int, x: int, h: int, w: int
    ) -> None:
        self._box(y, x, h, w, "GitHub Releases")
        rows = h - 2
        if not len(model):
            self._addstr(y + 1, x + 2, NO_RELEASES_TEXT, limit=w - 3)
            return

        self.offset = scroll_offset(self.offset, model.cursor, rows)
        visible = model.items[self.offset : self.offset + rows]
        for row, item in enumerate(visible):
            index = self.offset + row
            selected = index == model.cursor
            prefix = HIGHLIGHT_SYMBOL if selected else " " * len(HIGHLIGHT_SYMBOL)
            attr = ITALIC | curses.A_REVERSE if selected else 0
            self._addstr(y + 1 + row, x + 1, prefix + item_label(item), attr, w - 2)

    def _draw_details(
        self, model: ReleaseListModel, y: int, x: int, h: int, w: int
    ) -> None:
        self._box(y, x, h, w)
        lines = detail_lines(model.current_item(), max(w - 4, 1))
        for row, line in enumerate(lines[: h - 2]):
            self._addstr(y + 1 + row, x + 2, line, curses.A_BOLD, w - 4)

    def _draw_footer(self, status_message: str, y: int, width: int) -> None:
        self._box(y, 0, FOOTER_HEIGHT, width)
        text = f"{HELP_TEXT}  |  {status_message}"
        start = max((width - len(text)) // 2, 1)
        self._addstr(y + 1, start, text, limit=width - 2)

    def _draw_progress(self, item: ReleaseItem, body_height: int, width: int) -> None:
        box_w = max(int(width * 0.6), 20)
        box_h = 5
        top = max((body_height - box_h) // 2, 0)
        left = max((width - box_w) // 2, 0)
        for row in range(box_h):
            self._addstr(top + row, left, " " * box_w, limit=box_w)
        self._box(top, left, box_h, box_w, "Progress")
        message = MSG_INSTALL_STARTED.format(tag=item.tag)
        column = left + max((box_w - len(message)) // 2, 1)
        self._addstr(top + 2, column, message, curses.A_BOLD, box_w - 2)
