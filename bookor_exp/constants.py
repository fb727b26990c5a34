# Centralized experiment constants: catalogs, panels, timings, assets.
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple


# Total number of test trials per session.
NUMBER_OF_TRIALS: int = 36

DEBUG_SUBJECT_ID: str = "debug"

CONNECTIVES: Tuple[str, ...] = ("and", "or", "noun")
DISPLAY_CONDITIONS: Tuple[str, ...] = ("and/or", "and/noun", "or/noun")
SIDES: Tuple[str, ...] = ("left", "right")

# Panels known to the slide controller, in the order a session visits them.
PANELS: Tuple[str, ...] = ("instructions", "startGame", "training", "stage", "finished")

PAGES_PER_BOOK: int = 4


@dataclass(frozen=True)
class Noun:
    singular: str
    plural: str


# Each entry is one Item: two nouns shown against each other in a trial.
ITEM_PAIRS: List[Tuple[Noun, Noun]] = [
    (Noun("apple", "apples"), Noun("pear", "pears")),
    (Noun("banana", "bananas"), Noun("orange", "oranges")),
    (Noun("carrot", "carrots"), Noun("strawberry", "strawberries")),
    (Noun("cake", "cakes"), Noun("donut", "donuts")),
    (Noun("cookie", "cookies"), Noun("pretzel", "pretzels")),
    (Noun("cupcake", "cupcakes"), Noun("popsicle", "popsicles")),
    (Noun("dog", "dogs"), Noun("cat", "cats")),
    (Noun("horse", "horses"), Noun("cow", "cows")),
    (Noun("tiger", "tigers"), Noun("lion", "lions")),
    (Noun("frog", "frogs"), Noun("turtle", "turtles")),
    (Noun("pig", "pigs"), Noun("goat", "goats")),
    (Noun("butterfly", "butterflies"), Noun("bee", "bees")),
    (Noun("chicken", "chickens"), Noun("duck", "ducks")),
    (Noun("penguin", "penguins"), Noun("fish", "fish")),
    (Noun("giraffe", "giraffes"), Noun("elephant", "elephants")),
    (Noun("bear", "bears"), Noun("sheep", "sheep")),
    (Noun("bird", "birds"), Noun("monkey", "monkeys")),
    (Noun("hat", "hats"), Noun("mitten", "mittens")),
    (Noun("shorts", "shorts"), Noun("shirt", "shirts")),
    (Noun("sock", "socks"), Noun("shoe", "shoes")),
    (Noun("pencil", "pencils"), Noun("crayon", "crayons")),
    (Noun("drum", "drums"), Noun("guitar", "guitars")),
    (Noun("car", "cars"), Noun("bus", "buses")),
    (Noun("plane", "planes"), Noun("boat", "boats")),
    (Noun("train", "trains"), Noun("firetruck", "firetrucks")),
    (Noun("plate", "plates"), Noun("fork", "forks")),
    (Noun("cup", "cups"), Noun("spoon", "spoons")),
    (Noun("table", "tables"), Noun("chair", "chairs")),
    (Noun("house", "houses"), Noun("barn", "barns")),
    (Noun("tree", "trees"), Noun("flower", "flowers")),
    (Noun("comb", "combs"), Noun("toothbrush", "toothbrushes")),
    (Noun("clock", "clocks"), Noun("lamp", "lamps")),
    (Noun("scissors", "scissors"), Noun("paintbrush", "paintbrushes")),
    (Noun("present", "presents"), Noun("party_hat", "party hats")),
    (Noun("purse", "purses"), Noun("watch", "watches")),
    (Noun("necklace", "necklaces"), Noun("dress", "dresses")),
]

# Every connective crossed with every display condition, four times over.
TRIAL_TYPES: List[Tuple[str, str]] = [
    (connective, condition)
    for _ in range(4)
    for connective in CONNECTIVES
    for condition in DISPLAY_CONDITIONS
]

# Sentence templates keyed by connective. "and" trials read "or" and vice
# versa; existing data was collected with this mapping.
SENTENCE_TEMPLATES = {
    "and": "I have books about {label1} or {label2}.",
    "or": "I have books about {label1} and {label2}.",
    "noun": "I have books about {label1}.",
}


# Asset locations, relative to the app directory.
IMAGE_DIR: str = "images"
DOT_DIR: str = "dots"
BLANK_IMAGE: str = f"{IMAGE_DIR}/blank.png"
CLEARED_DOT_IMAGE: str = f"{DOT_DIR}/x.jpg"

UI_IMAGES: List[str] = [
    BLANK_IMAGE,
    f"{IMAGE_DIR}/button-gradient.png",
    f"{IMAGE_DIR}/stanford.png",
]

# Nouns that have artwork but are currently left out of the item catalog.
RESERVE_NOUNS: List[str] = [
    "balloon", "bell", "bike", "block", "book", "bucket", "fence", "glasses",
    "key", "map", "peach", "peas", "phone", "pizza", "popcorn", "soccer", "stroller",
    "teddybear", "trafficlight", "zipper",
]


def image_path(noun: str) -> str:
    return f"{IMAGE_DIR}/{noun}.png"


IMAGE_MANIFEST: List[str] = sorted(
    {image_path(noun.singular) for pair in ITEM_PAIRS for noun in pair}
    | {image_path(noun) for noun in RESERVE_NOUNS}
    | set(UI_IMAGES)
)


# Training mini-game.
TRAINING_MARKER_COUNT: int = 5
TRAINING_REGION_WIDTH: int = 950
TRAINING_REGION_HEIGHT: int = 550
TRAINING_MIN_DISTANCE: int = 200
TRAINING_MAX_ATTEMPTS: int = 10_000


def dot_image(index: int) -> str:
    return f"{DOT_DIR}/dot_{index}.jpg"


DOT_MANIFEST: List[str] = [dot_image(i) for i in range(1, TRAINING_MARKER_COUNT + 1)] + [CLEARED_DOT_IMAGE]

# Layout grid the training region is mapped onto for rendering.
TRAINING_GRID_COLUMNS: int = 10
TRAINING_GRID_ROWS: int = 6


# Pacing, in seconds.
TRAINING_EXIT_DELAY: float = 0.5
RESPONSE_DISPLAY_DELAY: float = 1.0
NEXT_TRIAL_DELAY: float = 1.0


# Submission defaults.
DEFAULT_ENDPOINT: str = "http://langcog.stanford.edu/cgi-bin/AEN/book-or/book-or_process.php"
RESULT_FIELD_NAME: str = "postresult_string"
DEFAULT_TIMEOUT_SEC: float = 10.0

RESULT_COLUMNS: List[str] = [
    "subject_id",
    "trial_number",
    "item1",
    "item2",
    "word_type",
    "display_type",
    "side",
    "response",
]
