import logging
import multiprocessing
from collections import Counter, namedtuple
from enum import Enum

log = logging.getLogger(__name__)

WORD_LENGTH = 5

# Guesses x candidates below which scoring stays in-process
PARALLEL_THRESHOLD = 200_000


class Outcome(Enum):
    """Per-letter result of a guess against the hidden solution."""

    EXACT = "G"    # right letter, right position
    PRESENT = "Y"  # right letter, wrong position
    ABSENT = "X"   # letter not in the solution, or all occurrences claimed


ALL_EXACT = (Outcome.EXACT,) * WORD_LENGTH

Recommendation = namedtuple("Recommendation", ["word", "score", "is_candidate"])


class SolverError(ValueError):
    """Base class for caller errors detected by the solver."""


class EmptyPoolError(SolverError):
    """Raised when a guess is ranked against zero remaining candidates."""


class EmptyUniverseError(SolverError):
    """Raised when there are no allowed guesses to rank."""


def classify(guess, solution):
    """
    Compute the feedback a guess would receive if the given word were the solution.

    Args:
        guess (str): The guessed word.
        solution (str): The hidden solution word.

    Returns:
        tuple: Five Outcome values, one per guess position.
    """
    feedback = [Outcome.ABSENT] * WORD_LENGTH
    remaining = Counter()

    # First pass: exact matches consume their letter
    for i in range(WORD_LENGTH):
        if guess[i] == solution[i]:
            feedback[i] = Outcome.EXACT
        else:
            remaining[solution[i]] += 1

    # Second pass: misplaced letters claim what is left, left to right
    for i in range(WORD_LENGTH):
        if feedback[i] is Outcome.EXACT:
            continue
        letter = guess[i]
        if remaining[letter] > 0:
            feedback[i] = Outcome.PRESENT
            remaining[letter] -= 1

    return tuple(feedback)


def filter_possible_words(guess, feedback, possible_words):
    """
    Filter the list of possible words based on the feedback received from a guess.

    A word survives only if it would have produced exactly this feedback had
    it been the solution.

    Args:
        guess (str): The guessed word.
        feedback (tuple): Outcome sequence observed for the guess.
        possible_words (list): Current list of possible target words.

    Returns:
        list: Updated list of possible target words, in the original order.
    """
    feedback = tuple(feedback)
    return [word for word in possible_words if classify(guess, word) == feedback]


def expected_pool_size(guess, possible_words):
    """
    Calculate the expected number of candidates left after playing a guess.

    Each feedback pattern k groups c_k candidates; with the solution drawn
    uniformly from possible_words the expectation is sum(c_k ** 2) / n.

    Args:
        guess (str): The guessed word.
        possible_words (list): List of possible target words.

    Returns:
        float: Expected remaining pool size.
    """
    pattern_counts = Counter(classify(guess, word) for word in possible_words)
    return sum(count * count for count in pattern_counts.values()) / len(possible_words)


def _score_chunk(args):
    """Worker: score a chunk of guesses against the same candidate list."""
    guesses, possible_words = args
    return [expected_pool_size(guess, possible_words) for guess in guesses]


def _chunked(words, size):
    return [words[i:i + size] for i in range(0, len(words), size)]


def _check_inputs(word_list, possible_words):
    if not word_list:
        raise EmptyUniverseError("No allowed guesses to rank.")
    if not possible_words:
        raise EmptyPoolError("No candidates remain; nothing to rank against.")


def _process_count(processes):
    if processes is None:
        return multiprocessing.cpu_count()
    return max(1, processes)


def score_chunks(word_list, possible_words, processes=None):
    """
    Split the scoring work into per-worker chunks and yield the results in order.

    Args:
        word_list (list): Guesses to score.
        possible_words (list): Candidate solutions to score against.
        processes (int): Worker processes; None means one per CPU.

    Yields:
        list: Scores for consecutive chunks of word_list.
    """
    _check_inputs(word_list, possible_words)
    num_processes = _process_count(processes)
    work = len(word_list) * len(possible_words)

    if num_processes == 1 or work < PARALLEL_THRESHOLD:
        log.debug("Scoring %d guesses x %d candidates serially",
                  len(word_list), len(possible_words))
        for guess in word_list:
            yield [expected_pool_size(guess, possible_words)]
        return

    chunk_size = max(1, len(word_list) // (num_processes * 4))
    args = [(chunk, possible_words) for chunk in _chunked(list(word_list), chunk_size)]
    log.debug("Scoring %d guesses x %d candidates on %d processes in %d chunks",
              len(word_list), len(possible_words), num_processes, len(args))

    pool = multiprocessing.Pool(processes=num_processes)
    try:
        for scores in pool.imap(_score_chunk, args):
            yield scores
    finally:
        pool.close()
        pool.join()


def score_guesses(word_list, possible_words, processes=None):
    """
    Score every allowed guess by its expected remaining pool size.

    Args:
        word_list (list): The full list of valid guess words.
        possible_words (list): Current list of possible target words.
        processes (int): Worker processes; None means one per CPU.

    Returns:
        list: Scores aligned with word_list.

    Raises:
        EmptyUniverseError: If word_list is empty.
        EmptyPoolError: If possible_words is empty.
    """
    scores = []
    for chunk in score_chunks(word_list, possible_words, processes):
        scores.extend(chunk)
    return scores


def select_best_guess(word_list, possible_words, processes=None):
    """
    Select the guess that minimizes the expected remaining pool size.

    Ties go to the word that appears first in word_list.

    Args:
        word_list (list): The full list of valid guess words.
        possible_words (list): Current list of possible target words.
        processes (int): Worker processes; None means one per CPU.

    Returns:
        Recommendation: (word, score, is_candidate).
    """
    scores = score_guesses(word_list, possible_words, processes)

    best_index = 0
    for i in range(1, len(scores)):
        if scores[i] < scores[best_index]:
            best_index = i

    best_guess = word_list[best_index]
    recommendation = Recommendation(
        best_guess, scores[best_index], best_guess in set(possible_words))
    log.info("Recommended %s (expected pool size %.3f, candidate=%s) from %d candidates",
             recommendation.word, recommendation.score,
             recommendation.is_candidate, len(possible_words))
    return recommendation


FEEDBACK_TOKENS = {
    'g': Outcome.EXACT,
    'green': Outcome.EXACT,
    'y': Outcome.PRESENT,
    'yellow': Outcome.PRESENT,
    'x': Outcome.ABSENT,
    'b': Outcome.ABSENT,      # 'b' for black/blank
    'gray': Outcome.ABSENT,
    'grey': Outcome.ABSENT,
}


def parse_feedback(feedback_str):
    """
    Convert a feedback string into an Outcome sequence.

    Args:
        feedback_str (str): Either a compact code such as 'GYXXG' or
            separated tokens such as 'g y b b g'.

    Returns:
        tuple: Five Outcome values.

    Raises:
        ValueError: If the input format is incorrect.
    """
    text = feedback_str.strip().lower().replace(',', ' ')
    tokens = text.split()
    if len(tokens) == 1 and len(tokens[0]) == WORD_LENGTH and tokens[0] not in FEEDBACK_TOKENS:
        tokens = list(tokens[0])

    feedback = []
    for token in tokens:
        if token not in FEEDBACK_TOKENS:
            raise ValueError(
                f"Invalid feedback token: '{token}'. "
                "Use 'G' for green, 'Y' for yellow, 'X' or 'B' for gray.")
        feedback.append(FEEDBACK_TOKENS[token])
    if len(feedback) != WORD_LENGTH:
        raise ValueError(f"Feedback must consist of exactly {WORD_LENGTH} marks.")
    return tuple(feedback)


def format_feedback(feedback):
    """Render an Outcome sequence as its compact code, e.g. 'GYXXG'."""
    return "".join(outcome.value for outcome in feedback)
