import argparse
import logging
import os
import tempfile
import time
from pathlib import Path

from tqdm import tqdm

from wordle import EmptyUniverseError, score_chunks
from wordlist import (
    compute_wordlist_hash,
    is_valid_word,
    load_default_word_list,
    load_word_list,
)

log = logging.getLogger(__name__)

TOP_N = 5
CACHE_DIR_ENV = "WORDLE_SOLVER_CACHE_DIR"
DEFAULT_CACHE_DIR = Path.home() / ".wordle_solver"


def score_openers(word_list, processes=None, progress=False):
    """
    Score every word as an opening guess, with every word still possible.

    Args:
        word_list (list): Full list of valid guess words.
        processes (int): Worker processes; None means one per CPU.
        progress (bool): Show a tqdm progress bar.

    Returns:
        list: A list of (word, expected pool size) tuples in word list order.
    """
    if not word_list:
        raise EmptyUniverseError("Cannot rank opening guesses for an empty word list.")

    scores = []
    bar = tqdm(total=len(word_list), desc="Scoring opening guesses",
               unit="word", disable=not progress)
    try:
        for chunk in score_chunks(word_list, word_list, processes):
            scores.extend(chunk)
            bar.update(len(chunk))
    finally:
        bar.close()
    return list(zip(word_list, scores))


def find_top_guesses(word_list, top_n=TOP_N, processes=None, progress=False):
    """
    Find the top N opening guesses based on expected remaining pool size.

    Args:
        word_list (list): Full list of valid guess words.
        top_n (int): How many guesses to keep.
        processes (int): Worker processes; None means one per CPU.
        progress (bool): Show a tqdm progress bar.

    Returns:
        list: (word, score) tuples, best first. Equal scores keep word list order.
    """
    start = time.time()
    scored = score_openers(word_list, processes=processes, progress=progress)
    scored.sort(key=lambda x: x[1])
    log.info("Ranked %d opening guesses in %.2fs", len(scored), time.time() - start)
    return scored[:top_n]


def find_best_openers(word_list, top_n=TOP_N, processes=None, progress=False):
    """Return the top N opening words, best first."""
    return [word for word, _ in find_top_guesses(word_list, top_n, processes, progress)]


def resolve_cache_dir(cache_dir=None):
    """Pick the cache directory: explicit argument, then environment, then home."""
    if cache_dir is not None:
        return Path(cache_dir)
    env_dir = os.environ.get(CACHE_DIR_ENV)
    if env_dir:
        return Path(env_dir)
    return DEFAULT_CACHE_DIR


def cache_path_for(word_list, cache_dir=None):
    """
    Return the cache file for a word list.

    The file name embeds the word list hash, so a different word list never
    reads another list's openers.

    Args:
        word_list (list): The word universe.
        cache_dir (str): Directory override.

    Returns:
        Path: Location of the cache file.
    """
    digest = compute_wordlist_hash(word_list)[:16]
    return resolve_cache_dir(cache_dir) / f"openers-{digest}.txt"


def read_starting_words(path, word_list):
    """
    Read cached opening words.

    Args:
        path (Path): Cache file location.
        word_list (list): The word universe the cache must belong to.

    Returns:
        list: The cached words, or None if the file is missing or malformed.
    """
    path = Path(path)
    if not path.exists():
        log.debug("No opening-guess cache at %s", path)
        return None
    try:
        lines = path.read_text(encoding='utf-8').splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        log.warning("Could not read opening-guess cache %s: %s", path, exc)
        return None

    words = [line.strip().upper() for line in lines if line.strip()]
    expected = min(TOP_N, len(word_list))
    universe = set(word_list)
    if len(words) != expected or not all(is_valid_word(w) and w in universe for w in words):
        log.warning("Ignoring malformed opening-guess cache %s", path)
        return None
    return words


def save_starting_words(path, words):
    """
    Atomically write opening words to the cache (write tmp then rename).

    Args:
        path (Path): Cache file location.
        words (list): Words to persist, one per line.

    Returns:
        bool: True if the cache was written.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
    except OSError as exc:
        log.warning("Could not create opening-guess cache in %s: %s", path.parent, exc)
        return False
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as file:
            file.write("\n".join(words) + "\n")
        os.replace(tmp, str(path))
    except OSError as exc:
        log.warning("Could not write opening-guess cache %s: %s", path, exc)
        try:
            os.unlink(tmp)
        except OSError:
            pass
        return False
    log.info("Cached %d opening words to %s", len(words), path)
    return True


def get_best_openers(word_list, cache_dir=None, use_cache=True, processes=None,
                     progress=False, on_compute=None):
    """
    Retrieve the best opening words, computing and caching them if necessary.

    Args:
        word_list (list): Full list of valid guess words.
        cache_dir (str): Cache directory override.
        use_cache (bool): Skip the cache entirely when False.
        processes (int): Worker processes; None means one per CPU.
        progress (bool): Show a tqdm progress bar while computing.
        on_compute (callable): Called with no arguments just before a
            cache miss triggers the computation.

    Returns:
        tuple: (words, used_cache, cache_path). cache_path is None when
            caching is disabled or the cache could not be written.
    """
    path = cache_path_for(word_list, cache_dir) if use_cache else None

    if path is not None:
        words = read_starting_words(path, word_list)
        if words is not None:
            log.info("Loaded opening words from cache %s", path)
            return words, True, path

    if on_compute is not None:
        on_compute()
    words = find_best_openers(word_list, processes=processes, progress=progress)
    if path is not None and not save_starting_words(path, words):
        path = None
    return words, False, path


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Rank opening guesses by expected remaining pool size")
    parser.add_argument("-i", "--input", help="Word list file (default: embedded list)")
    parser.add_argument("-n", "--top", type=int, default=10,
                        help="How many guesses to show (default: 10)")
    parser.add_argument("--processes", type=int, default=None,
                        help="Worker processes (default: all CPU cores)")
    args = parser.parse_args(argv)

    word_list = load_word_list(args.input) if args.input else load_default_word_list()
    top_guesses = find_top_guesses(word_list, top_n=args.top,
                                   processes=args.processes, progress=True)

    print(f"Top {len(top_guesses)} guesses by expected remaining pool size:")
    for rank, (word, score) in enumerate(top_guesses, start=1):
        print(f"{rank}. {word} (Expected pool size: {score:.4f})")


if __name__ == "__main__":
    main()
