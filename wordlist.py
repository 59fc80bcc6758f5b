import hashlib
import logging
import sys

from unidecode import unidecode

from wordle import WORD_LENGTH

log = logging.getLogger(__name__)

# Replacement character left where a word list file held undecodable bytes
UNDECODABLE = "\ufffd"

# Default word universe, used when no word list file is supplied
EMBEDDED_WORDLIST = """\
ABOUT ABOVE ACTOR ACUTE ADMIT ADOPT ADULT AFTER AGAIN AGENT
AGREE AHEAD ALARM ALBUM ALERT ALIKE ALIVE ALLOW ALONE ALONG
ALTER AMONG ANGER ANGLE ANGRY APART APPLE APPLY ARENA ARGUE
ARISE AROSE ASIDE ASSET AUDIO AVOID AWARD AWARE BADLY BAKER
BASIC BEACH BEGAN BEGIN BEING BELOW BENCH BIRTH BLACK BLAME
BLIND BLOCK BLOOD BOARD BOOST BRAIN BRAND BREAD BREAK BRICK
BRIEF BRING BROAD BROWN BUILD BUYER CABLE CARRY CATCH CAUSE
CHAIN CHAIR CHART CHASE CHEAP CHECK CHEST CHIEF CHILD CHOSE
CIVIL CLAIM CLASS CLEAN CLEAR CLIMB CLOCK CLOSE COACH COAST
COUNT COURT COVER CRAFT CRANE CRASH CREAM CRIME CROSS CROWD
CROWN CURVE CYCLE DAILY DANCE DEATH DEPTH DIRTY DOUBT DOZEN
DRAFT DRAMA DRAWN DREAM DRESS DRINK DRIVE EARLY EARTH EIGHT
ELITE EMPTY ENEMY ENJOY ENTER ENTRY EQUAL ERROR EVENT EVERY
EXACT EXIST EXTRA FAITH FALSE FAULT FIELD FIFTH FIFTY FIGHT
FINAL FIRST FLASH FLEET FLOOR FLUID FOCUS FORCE FORTH FORUM
FOUND FRAME FRESH FRONT FRUIT FUNNY GIANT GIVEN GLASS GLOBE
GRACE GRADE GRAIN GRAND GRANT GRASS GREAT GREEN GROSS GROUP
GUARD GUESS GUEST GUIDE HAPPY HEART HEAVY HORSE HOTEL HOUSE
HUMAN IDEAL IMAGE INDEX INNER INPUT IRATE ISSUE JOINT JUDGE
KNIFE LARGE LASER LATER LAUGH LAYER LEARN LEASE LEAST LEAVE
LEGAL LEVEL LIGHT LIMIT LOCAL LOGIC LOOSE LUCKY LUNCH MAGIC
MAJOR MAKER MARCH MATCH MAYBE MAYOR MEANT MEDIA METAL MIGHT
MINOR MIXED MODEL MONEY MONTH MORAL MOTOR MOUNT MOUSE MOUTH
MOVIE MUSIC NEEDS NERVE NEVER NIGHT NOISE NORTH NOVEL NURSE
OCEAN OFFER OFTEN ORDER OTHER OUGHT OWNER PAINT PANEL PAPER
PARTY PEACE PHASE PHONE PHOTO PIECE PILOT PITCH PLACE PLAIN
PLANE PLANT PLATE POINT POUND POWER PRESS PRICE PRIDE PRIME
PRINT PRIOR PRIZE PROOF PROUD PROVE QUEEN QUICK QUIET QUITE
RADIO RAISE RANGE RAPID RATIO REACH READY REFER RIGHT RIVAL
RIVER ROUGH ROUND ROUTE ROYAL RURAL SCALE SCENE SCOPE SCORE
SENSE SERVE SEVEN SHALL SHAPE SHARE SHARP SHEET SHELF SHELL
SHIFT SHIRT SHOCK SHOOT SHORT SHOWN SIGHT SKILL SLATE SLEEP
SLIDE SMALL SMART SMILE SMOKE SOLID SOLVE SORRY SOUND SOUTH
SPACE SPARE SPEAK SPEED SPEND SPENT SPLIT SPOKE SPORT STAFF
STAGE STAKE STAND STARE START STATE STEAM STEEL STICK STILL
STOCK STONE STOOD STORE STORM STORY STRIP STUCK STUDY STUFF
STYLE SUGAR SUITE SUPER SWEET TABLE TAKEN TASTE TEACH TEETH
THANK THEFT THEIR THEME THERE THESE THICK THING THINK THIRD
THOSE THREE THREW THROW TIGHT TIMES TIRED TITLE TODAY TOPIC
TOTAL TOUCH TOUGH TOWER TRACE TRACK TRADE TRAIN TREAT TREND
TRIAL TRIED TRUCK TRULY TRUST TRUTH TWICE UNDER UNION UNITY
UNTIL UPPER UPSET URBAN USAGE USUAL VALID VALUE VIDEO VIRUS
VISIT VITAL VOICE WASTE WATCH WATER WHEEL WHERE WHICH WHILE
WHITE WHOLE WHOSE WOMAN WORLD WORRY WORSE WORST WORTH WOULD
WOUND WRITE WRONG WROTE YIELD YOUNG YOUTH
"""


def is_valid_word(word):
    """Return True if word is exactly five ASCII letters."""
    return len(word) == WORD_LENGTH and word.isascii() and word.isalpha()


def normalize_words(lines):
    """
    Normalize raw lines into the word universe.

    Each line is stripped, transliterated to ASCII, and uppercased. Lines
    that are not five alphabetic letters are dropped, as are repeats.

    Args:
        lines (iterable): Raw text lines, possibly holding several
            whitespace-separated words each.

    Returns:
        list: Uppercase five-letter words in first-seen order.
    """
    seen = set()
    words = []
    for line in lines:
        for raw in line.split():
            if UNDECODABLE in raw:
                continue
            word = unidecode(raw.strip()).upper()
            if not is_valid_word(word) or word in seen:
                continue
            seen.add(word)
            words.append(word)
    return words


def load_word_list_from_str(data):
    """
    Load a word list from in-memory text.

    Args:
        data (str): Newline or whitespace separated words.

    Returns:
        list: Uppercase five-letter words.
    """
    return normalize_words(data.splitlines())


def load_default_word_list():
    """Load the embedded default word list."""
    words = load_word_list_from_str(EMBEDDED_WORDLIST)
    log.info("Loaded %d words from the embedded word list", len(words))
    return words


def load_word_list(file_path):
    """
    Load a list of valid 5-letter words from the specified file.

    Args:
        file_path (str): Path to the word list file.

    Returns:
        list: A list of valid 5-letter words in uppercase.
    """
    try:
        with open(file_path, 'r', encoding='utf-8', errors='replace') as file:
            words = normalize_words(file)
    except FileNotFoundError:
        print(f"File '{file_path}' not found. Please check the path and try again.")
        sys.exit(1)
    except OSError as e:
        print(f"Could not read word list '{file_path}': {e}")
        sys.exit(1)
    if not words:
        print(f"The word list '{file_path}' is empty. "
              "Please ensure it contains valid 5-letter words.")
        sys.exit(1)
    log.info("Loaded %d words from %s", len(words), file_path)
    return words


def compute_wordlist_hash(word_list):
    """
    Compute a SHA256 hash of the word list to detect changes.

    Args:
        word_list (list): List of words.

    Returns:
        str: Hexadecimal SHA256 hash string.
    """
    hasher = hashlib.sha256()
    for word in word_list:
        hasher.update(word.encode('utf-8'))
    return hasher.hexdigest()
