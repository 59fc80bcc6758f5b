"""Full-screen curses front end.

Key handling lives in ``TuiInputState`` and never touches the terminal;
``TuiInterface`` only translates keys and draws.
"""

import curses
import logging
from enum import Enum

from game_state import (
    EXIT,
    NEW_GAME,
    GameInterface,
    InterfaceUnavailable,
    game_loop,
    guess_action,
)
from wordle import WORD_LENGTH, Outcome

log = logging.getLogger(__name__)

MAX_ROWS = 6
MAX_DISPLAYED_CANDIDATES = 10

ENTER = "ENTER"
BACKSPACE = "BACKSPACE"
ESC = "ESC"

MARK_KEYS = {
    "G": Outcome.EXACT,
    "Y": Outcome.PRESENT,
    "X": Outcome.ABSENT,
}


class Phase(Enum):
    ENTERING_GUESS = "entering_guess"
    MARKING_FEEDBACK = "marking_feedback"
    CONFIRMING_FEEDBACK = "confirming_feedback"
    COMPUTING = "computing"
    GAME_OVER = "game_over"


INSTRUCTIONS = {
    Phase.ENTERING_GUESS: "Type your 5-letter guess | ENTER: Submit | ESC: Quit",
    Phase.MARKING_FEEDBACK: "Mark each letter: G=green Y=yellow X=gray | BACKSPACE: Undo | ESC: Quit",
    Phase.CONFIRMING_FEEDBACK: "ENTER: Confirm feedback | BACKSPACE: Go back and edit",
    Phase.COMPUTING: "Computing optimal next guess...",
    Phase.GAME_OVER: "N: New Game | ESC: Quit",
}


class GuessRow:
    """One board row: the guessed letters and the marks entered so far."""

    def __init__(self, word):
        self.word = word
        self.marks = [None] * WORD_LENGTH

    def feedback(self):
        return tuple(self.marks)


class TuiInputState:
    """Keyboard state machine for the full-screen interface.

    ``handle_key`` takes a normalised key (a single character, ``ENTER``,
    ``BACKSPACE`` or ``ESC``) and returns either None (keep reading), a
    UserAction, or a completed Outcome sequence.
    """

    def __init__(self):
        self.reset()

    def reset(self):
        self.phase = Phase.ENTERING_GUESS
        self.rows = []
        self.current_input = ""
        self.marking_index = 0
        self.error = ""

    @property
    def current_row(self):
        return self.rows[-1] if self.rows else None

    def handle_key(self, key):
        self.error = ""
        if self.phase is Phase.ENTERING_GUESS:
            return self._guess_key(key)
        if self.phase is Phase.MARKING_FEEDBACK:
            return self._marking_key(key)
        if self.phase is Phase.CONFIRMING_FEEDBACK:
            return self._confirming_key(key)
        if self.phase is Phase.GAME_OVER:
            return self._game_over_key(key)
        return None

    def _guess_key(self, key):
        if key == ESC:
            return EXIT
        if key == BACKSPACE:
            self.current_input = self.current_input[:-1]
            return None
        if key == ENTER:
            if len(self.current_input) < WORD_LENGTH:
                self.error = f"Guess must be {WORD_LENGTH} letters"
                return None
            return self._submit_guess()
        if len(key) == 1 and key.isascii() and key.isalpha():
            if len(self.current_input) < WORD_LENGTH:
                self.current_input += key.upper()
            return None
        self.error = "Only letters are allowed"
        return None

    def _submit_guess(self):
        word = self.current_input
        self.rows.append(GuessRow(word))
        del self.rows[:-MAX_ROWS]
        self.current_input = ""
        self.marking_index = 0
        self.phase = Phase.MARKING_FEEDBACK
        return guess_action(word)

    def _marking_key(self, key):
        if key == ESC:
            return EXIT
        row = self.current_row
        if key == BACKSPACE:
            if self.marking_index > 0:
                self.marking_index -= 1
                row.marks[self.marking_index] = None
            return None
        if len(key) == 1 and key.upper() in MARK_KEYS:
            row.marks[self.marking_index] = MARK_KEYS[key.upper()]
            self.marking_index += 1
            if self.marking_index == WORD_LENGTH:
                self.phase = Phase.CONFIRMING_FEEDBACK
            return None
        self.error = "Use G, Y or X to mark each letter"
        return None

    def _confirming_key(self, key):
        if key == ESC:
            return EXIT
        if key == ENTER:
            self.phase = Phase.COMPUTING
            return self.current_row.feedback()
        if key == BACKSPACE:
            self.marking_index = WORD_LENGTH - 1
            self.current_row.marks[self.marking_index] = None
            self.phase = Phase.MARKING_FEEDBACK
        return None

    def _game_over_key(self, key):
        if key == ESC:
            return EXIT
        if key in ("n", "N"):
            return NEW_GAME
        return None


def translate_key(key):
    """Map a curses get_wch() result to the keys TuiInputState understands."""
    if key in ("\n", "\r", curses.KEY_ENTER):
        return ENTER
    if key in ("\x7f", "\b", curses.KEY_BACKSPACE):
        return BACKSPACE
    if key == "\x1b":
        return ESC
    if isinstance(key, str):
        return key
    return None


class TuiInterface(GameInterface):
    """curses implementation of GameInterface."""

    def __init__(self, stdscr):
        self.stdscr = stdscr
        self.state = TuiInputState()
        self.starting_words = []
        self.cache_note = ""
        self.candidates = None
        self.recommendation = None
        self.status = ""
        self._init_colors()

    def _init_colors(self):
        self.colors = {}
        if not curses.has_colors():
            return
        curses.start_color()
        pairs = {
            Outcome.EXACT: (curses.COLOR_BLACK, curses.COLOR_GREEN),
            Outcome.PRESENT: (curses.COLOR_BLACK, curses.COLOR_YELLOW),
            Outcome.ABSENT: (curses.COLOR_WHITE, curses.COLOR_BLACK),
        }
        for i, (outcome, (fg, bg)) in enumerate(pairs.items(), start=1):
            curses.init_pair(i, fg, bg)
            self.colors[outcome] = curses.color_pair(i)

    def _addstr(self, y, x, text, attr=0):
        height, width = self.stdscr.getmaxyx()
        if y >= height or x >= width:
            return
        try:
            self.stdscr.addstr(y, x, text[:width - x - 1], attr)
        except curses.error:
            # Writing into the bottom-right cell raises after the text is drawn
            pass

    def _draw_board(self, top):
        entering = self.state.phase is Phase.ENTERING_GUESS
        # Keep the last row free for the guess being typed
        rows = self.state.rows[-(MAX_ROWS - 1):] if entering else self.state.rows
        for index in range(MAX_ROWS):
            y = top + index
            if index < len(rows):
                row = rows[index]
                for col, letter in enumerate(row.word):
                    mark = row.marks[col]
                    attr = self.colors.get(mark, curses.A_REVERSE if mark else 0)
                    if (self.state.phase is Phase.MARKING_FEEDBACK
                            and row is self.state.current_row
                            and col == self.state.marking_index):
                        attr |= curses.A_UNDERLINE
                    self._addstr(y, 2 + col * 4, f" {letter} ", attr)
            elif index == len(rows) and entering:
                padded = self.state.current_input.ljust(WORD_LENGTH, "_")
                for col, letter in enumerate(padded):
                    self._addstr(y, 2 + col * 4, f" {letter} ", curses.A_BOLD)
            else:
                self._addstr(y, 2, " _  " * WORD_LENGTH)

    def _draw_info(self, top, left):
        y = top
        if self.starting_words:
            self._addstr(y, left, "Optimal starting words: " + ", ".join(self.starting_words))
            y += 1
        if self.cache_note:
            self._addstr(y, left, self.cache_note)
            y += 1
        if self.starting_words and not self.state.rows:
            self._addstr(y, left, f"Suggested starting word: {self.starting_words[0]}")
            y += 1
        if self.candidates is not None:
            y += 1
            self._addstr(y, left, f"Possible candidates ({len(self.candidates)})")
            y += 1
            shown = self.candidates[:MAX_DISPLAYED_CANDIDATES]
            if shown:
                self._addstr(y, left, " ".join(shown))
                y += 1
        if self.recommendation is not None:
            y += 1
            rec = self.recommendation
            category = "solution candidate" if rec.is_candidate else "information-gathering"
            self._addstr(y, left, f"Recommended guess: {rec.word} "
                                  f"(expected pool size {rec.score:.2f}) [{category}]",
                         curses.A_BOLD)

    def draw(self):
        self.stdscr.erase()
        height, _ = self.stdscr.getmaxyx()
        self._addstr(0, 2, "WORDLE SOLVER", curses.A_BOLD)
        self._draw_board(2)
        self._draw_info(2 + MAX_ROWS + 1, 2)
        message = self.state.error or self.status
        if message:
            self._addstr(height - 3, 2, message)
        self._addstr(height - 2, 2, INSTRUCTIONS[self.state.phase], curses.A_DIM)
        self.stdscr.refresh()

    def _read_until_result(self):
        while True:
            self.draw()
            key = translate_key(self.stdscr.get_wch())
            if key is None:
                continue
            result = self.state.handle_key(key)
            if result is not None:
                return result

    def read_guess(self):
        if self.state.phase is not Phase.ENTERING_GUESS:
            self.state.phase = Phase.ENTERING_GUESS
        return self._read_until_result()

    def read_feedback(self, guess):
        self.status = f"Mark the feedback for {guess}"
        result = self._read_until_result()
        self.status = ""
        return result

    def read_next_action(self):
        self.state.phase = Phase.GAME_OVER
        return self._read_until_result()

    def display_starting_words(self, words, used_cache, cache_path):
        self.starting_words = list(words)
        if cache_path is None:
            self.cache_note = ""
        elif used_cache:
            self.cache_note = f"(Loaded from cache: {cache_path}.)"
        else:
            self.cache_note = f"(Computed and cached to: {cache_path}.)"

    def display_candidates(self, candidates):
        self.candidates = list(candidates)
        self.recommendation = None

    def display_computing_message(self):
        self.state.phase = Phase.COMPUTING
        self.status = "Computing optimal guess, please wait..."
        self.draw()

    def display_recommendation(self, recommendation):
        self.recommendation = recommendation
        self.status = ""
        self.state.phase = Phase.ENTERING_GUESS

    def display_no_candidates_message(self):
        self.status = "No candidates remain. Check your inputs."

    def display_solution_found(self, solution):
        self.status = f"Solution found: {solution}"

    def display_new_game_message(self, word_count):
        self.state.reset()
        self.candidates = None
        self.recommendation = None
        self.status = f"New game started. Loaded {word_count} words."

    def display_exit_message(self):
        self.status = "Exiting."


def run_tui_session(word_list, starting_words, used_cache=False, cache_path=None,
                    processes=None):
    """Play sessions in the full-screen interface; returns the final candidate pool.

    Raises InterfaceUnavailable when the terminal cannot host curses. Curses
    errors after the interface is up propagate unchanged.
    """
    started = False

    def session(stdscr):
        nonlocal started
        interface = TuiInterface(stdscr)
        started = True
        return game_loop(word_list, interface, starting_words, used_cache=used_cache,
                         cache_path=cache_path, processes=processes)

    try:
        return curses.wrapper(session)
    except curses.error as exc:
        if started:
            raise
        raise InterfaceUnavailable(str(exc)) from exc
