#!/usr/bin/env python3
import sys
import curses
import os
import argparse

from .log import debug_log
from .ports import KillError, kill_process, scan_ports
from .selection import Selection

POLL_TIMEOUT_MS = 100

TITLE = "rip - Kill processes on ports"
LIST_TITLE = " Processes (PORT | PROTO | PID | NAME) "
KEY_LEGEND = "↑/↓:Navigate  Enter/d:Kill  r:Refresh  q:Quit"
HIGHLIGHT_SYMBOL = ">> "

KEY_ESC = 27
KEYS_QUIT = (ord('q'), KEY_ESC)
KEYS_NEXT = (curses.KEY_DOWN, ord('j'))
KEYS_PREV = (curses.KEY_UP, ord('k'))
KEYS_KILL = (curses.KEY_ENTER, ord('\n'), ord('\r'), ord('d'))
KEYS_REFRESH = (ord('r'),)

# Color pairs
CP_TITLE = 1
CP_STATUS = 2

MIN_ROWS = 8
MIN_COLS = 20


# --------------------------------------------------
# Checks
# --------------------------------------------------
def check_python_version():
    if sys.version_info < (3, 7):
        print("Python 3.7 or newer is required.")
        sys.exit(1)


def _get_app_version():
    try:
        v_file = os.path.join(os.path.dirname(__file__), "VERSION")
        with open(v_file) as f:
            return f.read().strip()
    except OSError:
        return "0.0.0"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="rip",
        description="List processes listening on TCP/UDP ports and kill them interactively."
    )
    parser.add_argument("--version", action="version", version=f'rip {_get_app_version()}')
    return parser.parse_args(argv)


# --------------------------------------------------
# Application state
# --------------------------------------------------
class App:
    """Port list, selection and status line of one interactive session."""

    def __init__(self, scan=scan_ports, kill=kill_process):
        self._scan = scan
        self._kill = kill
        self.bindings = []
        self.selection = Selection()
        self.message = None
        self.should_quit = False
        self.refresh()

    def notify(self, msg):
        self.message = msg
        debug_log(f"NOTIFY: {msg}")

    def rescan(self):
        self.bindings = self._scan()
        self.selection.reconcile(len(self.bindings))

    def refresh(self):
        self.rescan()
        self.notify(f"Found {len(self.bindings)} processes")

    def next(self):
        self.selection.next()

    def previous(self):
        self.selection.previous()

    def selected_binding(self):
        idx = self.selection.index
        if idx is None or idx >= len(self.bindings):
            return None
        return self.bindings[idx]

    def kill_selected(self):
        binding = self.selected_binding()
        if binding is None:
            return
        try:
            self._kill(binding.pid)
        except KillError as e:
            self.notify(f"Failed to kill PID {binding.pid}: {e}")
            return
        self.notify(f"Killed process {binding.name} (PID: {binding.pid})")
        self.rescan()

    def handle_key(self, k):
        if k in KEYS_QUIT:
            self.should_quit = True
        elif k in KEYS_NEXT:
            self.next()
        elif k in KEYS_PREV:
            self.previous()
        elif k in KEYS_KILL:
            self.kill_selected()
        elif k in KEYS_REFRESH:
            self.refresh()


# --------------------------------------------------
# UI Draw
# --------------------------------------------------
def format_row(binding):
    return f":{binding.port:<6} {binding.protocol:<4} {binding.pid:>6}  {binding.name}"


def status_text(message):
    if message:
        return f"{message} | {KEY_LEGEND}"
    return KEY_LEGEND


def list_offset(selected, total, visible):
    """First row to draw so that the selected row stays on screen."""
    if selected is None or visible <= 0:
        return 0
    return min(max(selected - visible // 2, 0), max(0, total - visible))


def safe_addstr(win, y, x, text, attr=curses.A_NORMAL):
    """addstr clipped to the window; writes that still fall off are dropped."""
    h, w = win.getmaxyx()
    width = w - x - 1
    if y < 0 or y >= h or width <= 0:
        return
    try:
        win.addnstr(y, x, text, width, attr)
    except curses.error:
        pass


def color_attr(pair_id):
    if curses.has_colors():
        return curses.color_pair(pair_id)
    return curses.A_NORMAL


def draw_title(win):
    win.erase()
    win.box()
    safe_addstr(win, 1, 2, TITLE, color_attr(CP_TITLE) | curses.A_BOLD)
    win.noutrefresh()


def draw_list(win, app):
    win.erase()
    win.box()
    safe_addstr(win, 0, 2, LIST_TITLE)
    h, _ = win.getmaxyx()
    visible = h - 2
    selected = app.selection.index
    offset = list_offset(selected, len(app.bindings), visible)
    for i in range(visible):
        idx = offset + i
        if idx >= len(app.bindings):
            break
        line = format_row(app.bindings[idx])
        if idx == selected:
            safe_addstr(win, i + 1, 1, HIGHLIGHT_SYMBOL + line, curses.A_REVERSE | curses.A_BOLD)
        else:
            safe_addstr(win, i + 1, 1, " " * len(HIGHLIGHT_SYMBOL) + line)
    win.noutrefresh()


def draw_status_bar(win, app):
    win.erase()
    win.box()
    safe_addstr(win, 1, 2, status_text(app.message), color_attr(CP_STATUS))
    win.noutrefresh()


def draw_screen(stdscr, app):
    h, w = stdscr.getmaxyx()
    stdscr.erase()
    if h < MIN_ROWS or w < MIN_COLS:
        safe_addstr(stdscr, 0, 0, "Terminal too small")
        stdscr.noutrefresh()
        curses.doupdate()
        return
    stdscr.noutrefresh()
    draw_title(curses.newwin(3, w, 0, 0))
    draw_list(curses.newwin(h - 6, w, 3, 0), app)
    draw_status_bar(curses.newwin(3, w, h - 3, 0), app)
    curses.doupdate()


def init_colors():
    if not curses.has_colors():
        return
    curses.start_color()
    try:
        curses.use_default_colors()
        bg = -1
    except curses.error:
        bg = curses.COLOR_BLACK
    curses.init_pair(CP_TITLE, curses.COLOR_CYAN, bg)
    curses.init_pair(CP_STATUS, curses.COLOR_YELLOW, bg)


# --------------------------------------------------
# Main Loop
# --------------------------------------------------
def main(stdscr, app=None):
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    stdscr.keypad(True)
    stdscr.timeout(POLL_TIMEOUT_MS)
    init_colors()

    if app is None:
        app = App()

    while not app.should_quit:
        draw_screen(stdscr, app)
        k = stdscr.getch()
        app.handle_key(k)
    return app


def cli_entry():
    """terminal command 'rip' entry point"""
    check_python_version()
    parse_args()
    debug_log("MAIN: Session started.")
    try:
        curses.wrapper(main)
    except KeyboardInterrupt:
        debug_log("MAIN: Interrupted.")
        sys.exit(130)
    except (curses.error, OSError) as e:
        debug_log(f"MAIN: Fatal terminal error - {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    debug_log("MAIN: Session ended.")
