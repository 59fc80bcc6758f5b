import argparse
import logging
import multiprocessing
import sys

from game_state import (
    EXIT,
    NEW_GAME,
    GameInterface,
    InterfaceUnavailable,
    game_loop,
    guess_action,
)
from top_starters import get_best_openers
from wordle import parse_feedback
from wordlist import is_valid_word, load_default_word_list, load_word_list

log = logging.getLogger(__name__)

MAX_DISPLAYED_CANDIDATES = 5
DEFAULT_LOG_FILE = "wordle_solver.log"
LOG_FORMAT = "[%(asctime)s %(levelname)s %(filename)s:%(lineno)d] %(message)s"

# Root handler installed by configure_logging, replaced on each call
_log_handler = None


class CliInterface(GameInterface):
    """Prompt/response front end over a pair of text streams."""

    def __init__(self, reader=None, writer=None):
        self.reader = reader if reader is not None else sys.stdin
        self.writer = writer if writer is not None else sys.stdout

    def _print(self, text=""):
        print(text, file=self.writer)

    def _read_line(self, prompt):
        """Print prompt and return the next stripped input line, or None at end of input."""
        self._print(prompt)
        line = self.reader.readline()
        if not line:
            return None
        return line.strip()

    def display_starting_words(self, words, used_cache, cache_path):
        self._print("Optimal starting words:")
        for i, word in enumerate(words, start=1):
            self._print(f"{i}. {word}")
        if cache_path is not None:
            if used_cache:
                self._print(f"(Loaded from cache: {cache_path}.)")
            else:
                self._print(f"(Computed and cached to: {cache_path}.)")
        if words:
            self._print(f"Suggested starting word: {words[0]}")

    def read_guess(self):
        text = self._read_line(
            "\nEnter your guess (5 letters, or 'exit' to quit, or 'next' to start a new game):")
        if text is None:
            return EXIT
        text = text.upper()
        if text == "EXIT":
            return EXIT
        if text == "NEXT":
            return NEW_GAME
        if not is_valid_word(text):
            self._print("Invalid guess. Please enter 5 letters.")
            return None
        return guess_action(text)

    def read_feedback(self, guess):
        text = self._read_line("Enter feedback (G=green, Y=yellow, X=gray, e.g. GYXXG):")
        if text is None:
            return EXIT
        if text.upper() == "EXIT":
            return EXIT
        if text.upper() == "NEXT":
            return NEW_GAME
        try:
            return parse_feedback(text)
        except ValueError as ve:
            self._print(f"Invalid feedback. {ve}")
            return None

    def read_next_action(self):
        text = self._read_line("\nEnter 'next' to start a new game or 'exit' to quit:")
        if text is None:
            return EXIT
        text = text.upper()
        if text == "NEXT":
            return NEW_GAME
        if text == "EXIT":
            return EXIT
        return None

    def display_candidates(self, candidates):
        self._print(f"Possible candidates ({len(candidates)})")
        for word in candidates[:MAX_DISPLAYED_CANDIDATES]:
            self._print(word)

    def display_computing_message(self):
        self._print("Computing optimal guess, please wait...")

    def display_recommendation(self, recommendation):
        category = ("solution candidate" if recommendation.is_candidate
                    else "information-gathering")
        self._print(f"Recommended guess: {recommendation.word} "
                    f"(expected pool size {recommendation.score:.2f}) [{category}]")

    def display_no_candidates_message(self):
        self._print("No candidates remain. Check your inputs.")

    def display_solution_found(self, solution):
        self._print(f"Solution found: {solution}")

    def display_new_game_message(self, word_count):
        self._print(f"New game started. Loaded {word_count} words.")

    def display_exit_message(self):
        self._print("Exiting.")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="wordle-solver",
        description="Suggest Wordle guesses that minimize the expected number of remaining words")
    parser.add_argument("-i", "--input", dest="wordlist_path",
                        help="Path to a newline-delimited word list (default: embedded list)")
    parser.add_argument("--cli", action="store_true",
                        help="Use the line-based interface instead of the full-screen one")
    parser.add_argument("--cache-dir", default=None,
                        help="Directory for cached opening words "
                             "(default: $WORDLE_SOLVER_CACHE_DIR or ~/.wordle_solver)")
    parser.add_argument("--no-cache", action="store_true",
                        help="Always recompute opening words and do not save them")
    parser.add_argument("--processes", type=int, default=None,
                        help="Worker processes for scoring (default: all CPU cores)")
    parser.add_argument("--debug", action="store_true",
                        help="Write a debug log")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE,
                        help=f"Debug log location (default: {DEFAULT_LOG_FILE})")
    return parser


def configure_logging(debug, log_file=DEFAULT_LOG_FILE):
    """Send log records to log_file at DEBUG when debug is set; otherwise stay silent."""
    global _log_handler
    root = logging.getLogger()
    if _log_handler is not None:
        root.removeHandler(_log_handler)
        _log_handler.close()
    if debug:
        _log_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        _log_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.setLevel(logging.DEBUG)
    else:
        _log_handler = logging.NullHandler()
    root.addHandler(_log_handler)


def load_universe(wordlist_path):
    if wordlist_path:
        return load_word_list(wordlist_path)
    return load_default_word_list()


def prepare_openers(word_list, args, writer=None):
    """Load or compute the opening words, announcing the slow path on writer."""
    writer = writer if writer is not None else sys.stdout

    def announce():
        print("Computing optimal starting words, please wait...", file=writer)

    return get_best_openers(
        word_list, cache_dir=args.cache_dir, use_cache=not args.no_cache,
        processes=args.processes, progress=True, on_compute=announce)


def run_cli(word_list, openers, args, reader=None, writer=None):
    """Play sessions on the line-based interface; returns the final candidate pool."""
    words, used_cache, cache_path = openers
    interface = CliInterface(reader, writer)
    return game_loop(word_list, interface, words, used_cache=used_cache,
                     cache_path=cache_path, processes=args.processes)


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.debug, args.log_file)
    log.info("Started: cli=%s wordlist_path=%s", args.cli, args.wordlist_path)

    word_list = load_universe(args.wordlist_path)
    openers = prepare_openers(word_list, args)

    if args.cli:
        run_cli(word_list, openers, args)
    else:
        words, used_cache, cache_path = openers
        try:
            from wordle_tui import run_tui_session

            run_tui_session(word_list, words, used_cache=used_cache,
                            cache_path=cache_path, processes=args.processes)
        except (ImportError, InterfaceUnavailable) as exc:
            log.warning("Full-screen interface unavailable: %s", exc)
            print(f"TUI Error: {exc}. Falling back to CLI mode.", file=sys.stderr)
            run_cli(word_list, openers, args)
    log.info("Exiting")


if __name__ == "__main__":
    if sys.platform.startswith('win'):
        multiprocessing.freeze_support()
    main()
