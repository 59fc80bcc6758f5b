"""Front-end independent game loop.

The loop is an explicit state machine driven through a ``GameInterface``;
the line-based and full-screen front ends both plug into it.
"""

import logging
from abc import ABC, abstractmethod
from collections import namedtuple
from enum import Enum

from wordle import ALL_EXACT, filter_possible_words, format_feedback, select_best_guess

log = logging.getLogger(__name__)


class GameState(Enum):
    AWAITING_GUESS = "awaiting_guess"
    AWAITING_OUTCOME = "awaiting_outcome"
    COMPUTING = "computing"
    GAME_OVER = "game_over"
    EXITED = "exited"


class ActionKind(Enum):
    GUESS = "guess"
    NEW_GAME = "new_game"
    EXIT = "exit"


UserAction = namedtuple("UserAction", ["kind", "word"], defaults=(None,))

EXIT = UserAction(ActionKind.EXIT)
NEW_GAME = UserAction(ActionKind.NEW_GAME)


class InterfaceUnavailable(RuntimeError):
    """Raised when a front end cannot start on the current terminal."""


def guess_action(word):
    return UserAction(ActionKind.GUESS, word)


class GameInterface(ABC):
    """Display and input operations a front end provides to the game loop."""

    @abstractmethod
    def display_starting_words(self, words, used_cache, cache_path):
        """Show the suggested opening words and where they came from."""

    @abstractmethod
    def read_guess(self):
        """Return a UserAction: a guess, a new-game request, or exit."""

    @abstractmethod
    def read_feedback(self, guess):
        """Return the Outcome sequence for guess, or a NEW_GAME/EXIT UserAction.

        Return None to discard the guess and ask for a new one.
        """

    @abstractmethod
    def read_next_action(self):
        """After a game ends, return NEW_GAME or EXIT."""

    @abstractmethod
    def display_candidates(self, candidates):
        ...

    @abstractmethod
    def display_computing_message(self):
        ...

    @abstractmethod
    def display_recommendation(self, recommendation):
        ...

    @abstractmethod
    def display_no_candidates_message(self):
        ...

    @abstractmethod
    def display_solution_found(self, solution):
        ...

    @abstractmethod
    def display_new_game_message(self, word_count):
        ...

    @abstractmethod
    def display_exit_message(self):
        ...


class Game:
    """One solving session over a fixed word universe.

    Args:
        word_list (list): Allowed guesses; also the initial candidate pool of every game.
        interface (GameInterface): Front end supplying input and showing results.
        starting_words (list): Precomputed opening suggestions.
        used_cache (bool): Whether starting_words came from the cache (display only).
        cache_path (Path): Cache location, or None (display only).
        processes (int): Worker processes for ranking; None means one per CPU.
    """

    def __init__(self, word_list, interface, starting_words, used_cache=False,
                 cache_path=None, processes=None):
        self.word_list = list(word_list)
        self.interface = interface
        self.starting_words = list(starting_words)
        self.used_cache = used_cache
        self.cache_path = cache_path
        self.processes = processes

        self.state = GameState.AWAITING_GUESS
        self.candidates = list(self.word_list)
        self.current_guess = None
        self.last_recommendation = None

    def run(self):
        """Drive the state machine until the user exits.

        Returns the candidate pool as it stood when the session ended.
        """
        self.interface.display_starting_words(
            self.starting_words, self.used_cache, self.cache_path)

        handlers = {
            GameState.AWAITING_GUESS: self._await_guess,
            GameState.AWAITING_OUTCOME: self._await_outcome,
            GameState.COMPUTING: self._compute,
            GameState.GAME_OVER: self._game_over,
        }
        while self.state is not GameState.EXITED:
            log.debug("State %s, %d candidates", self.state.name, len(self.candidates))
            handlers[self.state]()
        return self.candidates

    def new_game(self):
        self.candidates = list(self.word_list)
        self.current_guess = None
        self.last_recommendation = None
        self.state = GameState.AWAITING_GUESS
        log.info("New game with %d words", len(self.candidates))
        self.interface.display_new_game_message(len(self.candidates))
        self.interface.display_starting_words(self.starting_words, True, self.cache_path)

    def exit(self):
        self.state = GameState.EXITED
        self.interface.display_exit_message()

    def _handle_control(self, action):
        """Apply NEW_GAME or EXIT; return True if action was one of them."""
        if action.kind is ActionKind.EXIT:
            self.exit()
            return True
        if action.kind is ActionKind.NEW_GAME:
            self.new_game()
            return True
        return False

    def _await_guess(self):
        action = self.interface.read_guess()
        if action is None or self._handle_control(action):
            return
        self.current_guess = action.word.upper()
        self.state = GameState.AWAITING_OUTCOME

    def _await_outcome(self):
        result = self.interface.read_feedback(self.current_guess)
        if result is None:
            self.state = GameState.AWAITING_GUESS
            return
        if isinstance(result, UserAction):
            self._handle_control(result)
            return
        self.apply_feedback(self.current_guess, result)

    def apply_feedback(self, guess, feedback):
        """Narrow the pool with one guess/feedback pair and pick the next state."""
        feedback = tuple(feedback)
        before = len(self.candidates)
        self.candidates = filter_possible_words(guess, feedback, self.candidates)
        log.info("%s %s: %d -> %d candidates", guess, format_feedback(feedback),
                 before, len(self.candidates))
        self.interface.display_candidates(self.candidates)

        if feedback == ALL_EXACT:
            self.interface.display_solution_found(guess)
            self.state = GameState.GAME_OVER
        elif not self.candidates:
            self.interface.display_no_candidates_message()
            self.state = GameState.GAME_OVER
        elif len(self.candidates) == 1:
            self.interface.display_solution_found(self.candidates[0])
            self.state = GameState.GAME_OVER
        else:
            self.state = GameState.COMPUTING

    def _compute(self):
        self.interface.display_computing_message()
        self.last_recommendation = select_best_guess(
            self.word_list, self.candidates, processes=self.processes)
        self.interface.display_recommendation(self.last_recommendation)
        self.state = GameState.AWAITING_GUESS

    def _game_over(self):
        # Only NEW_GAME or EXIT leave a finished game
        action = self.interface.read_next_action()
        if action is not None:
            self._handle_control(action)


def game_loop(word_list, interface, starting_words, used_cache=False,
              cache_path=None, processes=None):
    """Run a session and return the final candidate pool."""
    game = Game(word_list, interface, starting_words, used_cache=used_cache,
                cache_path=cache_path, processes=processes)
    return game.run()
