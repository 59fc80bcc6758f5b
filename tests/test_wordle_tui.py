import curses

import pytest

import wordle_tui
from game_state import EXIT, NEW_GAME, ActionKind, InterfaceUnavailable, game_loop
from wordle import ALL_EXACT, Outcome, parse_feedback
from wordle_tui import (
    BACKSPACE,
    ENTER,
    ESC,
    MAX_ROWS,
    Phase,
    TuiInputState,
    TuiInterface,
    run_tui_session,
    translate_key,
)

UNIVERSE = ["CRANE", "SLATE", "TRACE", "PLACE", "GRACE"]
OPENERS = ["TRACE", "GRACE", "CRANE", "SLATE", "PLACE"]


def feed(state, keys):
    results = [state.handle_key(key) for key in keys]
    return [r for r in results if r is not None]


def test_typing_a_guess():
    state = TuiInputState()
    assert feed(state, list("cran") + [BACKSPACE] + list("ne")) == []
    assert state.current_input == "CRANE"

    (action,) = feed(state, [ENTER])
    assert action.kind is ActionKind.GUESS and action.word == "CRANE"
    assert state.phase is Phase.MARKING_FEEDBACK
    assert state.current_row.word == "CRANE"


def test_guess_is_capped_at_five_letters():
    state = TuiInputState()
    feed(state, list("CRANES"))
    assert state.current_input == "CRANE"


def test_short_guess_and_non_letters_set_error():
    state = TuiInputState()
    feed(state, list("CRA") + [ENTER])
    assert state.error and state.phase is Phase.ENTERING_GUESS
    feed(state, ["4"])
    assert state.error == "Only letters are allowed"
    assert state.current_input == "CRA"


def test_marking_and_confirming_feedback():
    state = TuiInputState()
    feed(state, list("SLATE") + [ENTER])
    assert feed(state, list("xxgx")) == []
    assert state.marking_index == 4
    feed(state, ["G"])
    assert state.phase is Phase.CONFIRMING_FEEDBACK

    (feedback,) = feed(state, [ENTER])
    assert feedback == parse_feedback("XXGXG")
    assert state.phase is Phase.COMPUTING


def test_backspace_while_marking_and_confirming():
    state = TuiInputState()
    feed(state, list("SLATE") + [ENTER] + list("GG") + [BACKSPACE])
    assert state.marking_index == 1
    assert state.current_row.marks[1] is None

    feed(state, list("GGGG"))
    assert state.phase is Phase.CONFIRMING_FEEDBACK
    feed(state, [BACKSPACE])
    assert state.phase is Phase.MARKING_FEEDBACK
    assert state.marking_index == 4
    feed(state, ["G"])
    (feedback,) = feed(state, [ENTER])
    assert feedback == ALL_EXACT


def test_invalid_mark_sets_error():
    state = TuiInputState()
    feed(state, list("SLATE") + [ENTER] + ["Q"])
    assert state.error == "Use G, Y or X to mark each letter"
    assert state.marking_index == 0


@pytest.mark.parametrize("phase_keys", [[], list("SLATE") + [ENTER], list("SLATE") + [ENTER] + list("GGGGG")])
def test_escape_exits_from_any_input_phase(phase_keys):
    state = TuiInputState()
    feed(state, phase_keys)
    assert state.handle_key(ESC) == EXIT


def test_game_over_keys():
    state = TuiInputState()
    state.phase = Phase.GAME_OVER
    assert state.handle_key("x") is None
    assert state.handle_key("n") == NEW_GAME
    assert state.handle_key(ESC) == EXIT


def test_board_keeps_last_rows():
    state = TuiInputState()
    for word in ["AAAAA", "BBBBB", "CCCCC", "DDDDD", "EEEEE", "FFFFF", "GGGGG"]:
        state.phase = Phase.ENTERING_GUESS
        feed(state, list(word) + [ENTER])
    assert len(state.rows) == MAX_ROWS
    assert state.rows[0].word == "BBBBB"


@pytest.mark.parametrize("key,expected", [
    ("\n", ENTER),
    ("\r", ENTER),
    (curses.KEY_ENTER, ENTER),
    ("\x7f", BACKSPACE),
    (curses.KEY_BACKSPACE, BACKSPACE),
    ("\x1b", ESC),
    ("a", "a"),
    (curses.KEY_UP, None),
])
def test_translate_key(key, expected):
    assert translate_key(key) == expected


class FakeScreen:
    """Enough of a curses window to drive TuiInterface from a key script."""

    def __init__(self, keys, height=30, width=100):
        self.keys = list(keys)
        self.size = (height, width)
        self.lines = {}
        self.frames = []

    def getmaxyx(self):
        return self.size

    def erase(self):
        self.lines = {}

    def addstr(self, y, x, text, attr=0):
        line = self.lines.get(y, "")
        self.lines[y] = line.ljust(x) + text

    def refresh(self):
        self.frames.append("\n".join(self.lines[y] for y in sorted(self.lines)))

    def get_wch(self):
        return self.keys.pop(0)


def test_interface_plays_a_game(monkeypatch):
    monkeypatch.setattr(wordle_tui.curses, "has_colors", lambda: False)
    keys = (
        list("slate") + ["\n"] + list("xxgxg") + ["\n"]
        + list("crane") + ["\n"] + list("ggggg") + ["\n"]
        + ["n", "\x1b"]
    )
    screen = FakeScreen(keys)
    interface = TuiInterface(screen)

    final = game_loop(UNIVERSE, interface, OPENERS, processes=1)

    assert final == UNIVERSE
    assert screen.keys == []
    screens = "\n".join(screen.frames)
    assert "Optimal starting words: TRACE, GRACE, CRANE, SLATE, PLACE" in screens
    assert "Recommended guess: CRANE (expected pool size 1.00) [solution candidate]" in screens
    assert "Solution found: CRANE" in screens
    assert "New game started. Loaded 5 words." in screens
    assert interface.state.rows == []


def test_interface_marks_no_candidates(monkeypatch):
    monkeypatch.setattr(wordle_tui.curses, "has_colors", lambda: False)
    keys = list("crane") + ["\n"] + list("xxxxx") + ["\n", "\x1b"]
    screen = FakeScreen(keys)
    interface = TuiInterface(screen)

    final = game_loop(["CRANE", "SLATE"], interface, ["CRANE", "SLATE"], processes=1)

    assert final == []
    assert interface.state.phase is Phase.GAME_OVER
    assert interface.state.rows[0].marks == [Outcome.ABSENT] * 5
    assert "No candidates remain. Check your inputs." in screen.frames[-1]


class BrokenScreen(FakeScreen):
    def get_wch(self):
        raise curses.error("lost terminal")


def test_session_reports_unavailable_terminal(monkeypatch):
    def no_terminal(func):
        raise curses.error("setupterm: could not find terminal")

    monkeypatch.setattr(wordle_tui.curses, "wrapper", no_terminal)
    with pytest.raises(InterfaceUnavailable):
        run_tui_session(UNIVERSE, OPENERS, processes=1)


def test_session_errors_after_startup_propagate(monkeypatch):
    monkeypatch.setattr(wordle_tui.curses, "has_colors", lambda: False)
    monkeypatch.setattr(wordle_tui.curses, "wrapper", lambda func: func(BrokenScreen([])))
    with pytest.raises(curses.error) as exc:
        run_tui_session(UNIVERSE, OPENERS, processes=1)
    assert not isinstance(exc.value, InterfaceUnavailable)
