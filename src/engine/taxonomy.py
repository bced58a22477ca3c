"""Built-in category table: grand categories, their sub-categories and words.

The table backs the static membership judge and the example-word suggester.
Each category may have one parent; a word listed under a sub-category also
belongs to every ancestor ("elephant" is in Mammals and therefore in Animals).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from .text import category_key, normalize_word

# Grand category -> sub-categories.
DEFAULT_HIERARCHY: dict[str, list[str]] = {
    "Animals": ["Mammals", "Birds", "Fish", "Insects", "Reptiles", "Sea Creatures", "Farm Animals", "Pets"],
    "Foods": ["Fruits", "Vegetables", "Desserts", "Drinks", "Breakfast Foods", "Dairy Products", "Spices"],
    "Professions": ["Medical Professions", "Trades"],
    "Countries": ["European Countries", "Asian Countries", "African Countries", "Countries in the Americas"],
    "Colors": [],
    "Sports": ["Ball Sports", "Water Sports", "Winter Sports"],
    "Clothing": ["Footwear", "Accessories"],
    "Household Items": ["Kitchen Items", "Furniture", "Bathroom Items"],
    "Nature": ["Flowers", "Trees", "Weather", "Planets"],
    "Transportation": ["Vehicles", "Boats", "Aircraft"],
    "Body Parts": [],
    "Music": ["Musical Instruments", "Music Genres"],
}

DEFAULT_WORDS: dict[str, list[str]] = {
    "Animals": ["ant", "bear", "camel", "deer", "fox", "lion", "yak", "zebra"],
    "Mammals": [
        "aardvark", "bat", "beaver", "cheetah", "dolphin", "elephant", "ferret", "giraffe",
        "hippo", "hyena", "jaguar", "kangaroo", "koala", "leopard", "moose", "ocelot",
        "otter", "panda", "rabbit", "rhino", "squirrel", "tiger", "walrus", "wolf",
    ],
    "Birds": [
        "albatross", "crow", "duck", "eagle", "falcon", "flamingo", "goose", "hawk",
        "heron", "ibis", "kiwi", "ostrich", "owl", "parrot", "pelican", "penguin",
        "quail", "robin", "sparrow", "swan", "toucan", "vulture", "wren",
    ],
    "Fish": ["bass", "carp", "cod", "eel", "goldfish", "haddock", "herring", "mackerel", "perch", "salmon", "trout", "tuna"],
    "Insects": ["ant", "beetle", "butterfly", "cricket", "dragonfly", "firefly", "grasshopper", "ladybug", "mosquito", "moth", "wasp"],
    "Reptiles": ["alligator", "chameleon", "cobra", "crocodile", "gecko", "iguana", "lizard", "python", "tortoise", "turtle", "viper"],
    "Sea Creatures": ["crab", "jellyfish", "lobster", "octopus", "oyster", "seahorse", "shark", "shrimp", "squid", "starfish", "urchin", "whale"],
    "Farm Animals": ["chicken", "cow", "donkey", "goat", "horse", "llama", "pig", "sheep", "turkey"],
    "Pets": ["cat", "dog", "gerbil", "guinea pig", "hamster", "parakeet"],
    "Foods": ["bread", "noodles", "omelette", "pasta", "pizza", "rice", "sandwich", "soup", "taco"],
    "Fruits": [
        "apple", "apricot", "banana", "blueberry", "cherry", "date", "fig", "grape",
        "kiwi", "lemon", "lime", "mango", "melon", "nectarine", "orange", "papaya",
        "peach", "pear", "plum", "quince", "raspberry", "strawberry", "tangerine", "watermelon",
    ],
    "Vegetables": [
        "artichoke", "asparagus", "broccoli", "cabbage", "carrot", "cauliflower", "celery",
        "cucumber", "eggplant", "garlic", "kale", "leek", "lettuce", "onion", "pea",
        "potato", "pumpkin", "radish", "spinach", "turnip", "yam", "zucchini",
    ],
    "Desserts": ["brownie", "cake", "cookie", "cupcake", "donut", "fudge", "muffin", "pie", "pudding", "sundae", "tart"],
    "Drinks": ["coffee", "cola", "juice", "lemonade", "milkshake", "smoothie", "soda", "tea", "water"],
    "Breakfast Foods": ["bacon", "cereal", "croissant", "granola", "oatmeal", "pancake", "toast", "waffle"],
    "Dairy Products": ["butter", "cheese", "cream", "ghee", "kefir", "milk", "yogurt"],
    "Spices": ["cinnamon", "clove", "cumin", "ginger", "nutmeg", "paprika", "pepper", "saffron", "turmeric", "vanilla"],
    "Professions": ["accountant", "architect", "baker", "chef", "engineer", "farmer", "judge", "lawyer", "pilot", "teacher", "writer"],
    "Medical Professions": ["dentist", "doctor", "midwife", "nurse", "paramedic", "pharmacist", "surgeon", "vet"],
    "Trades": ["carpenter", "electrician", "mason", "mechanic", "plumber", "tailor", "welder"],
    "European Countries": [
        "austria", "belgium", "croatia", "denmark", "estonia", "finland", "france", "germany",
        "greece", "hungary", "iceland", "ireland", "italy", "latvia", "norway", "poland",
        "portugal", "romania", "spain", "sweden", "ukraine",
    ],
    "Asian Countries": ["bhutan", "cambodia", "china", "india", "indonesia", "japan", "korea", "laos", "nepal", "oman", "qatar", "thailand", "vietnam", "yemen"],
    "African Countries": ["algeria", "egypt", "ethiopia", "ghana", "kenya", "mali", "morocco", "nigeria", "rwanda", "sudan", "togo", "uganda", "zambia", "zimbabwe"],
    "Countries in the Americas": ["argentina", "bolivia", "brazil", "canada", "chile", "colombia", "cuba", "ecuador", "haiti", "jamaica", "mexico", "panama", "peru", "uruguay", "venezuela"],
    "Colors": [
        "amber", "beige", "black", "blue", "brown", "crimson", "cyan", "gold", "gray", "green",
        "indigo", "ivory", "lavender", "magenta", "maroon", "navy", "olive", "orange", "pink",
        "purple", "red", "silver", "teal", "turquoise", "violet", "white", "yellow",
    ],
    "Sports": ["archery", "boxing", "cycling", "fencing", "golf", "judo", "karate", "running", "wrestling", "yoga"],
    "Ball Sports": ["baseball", "basketball", "cricket", "football", "handball", "hockey", "netball", "rugby", "soccer", "tennis", "volleyball"],
    "Water Sports": ["diving", "kayaking", "rowing", "sailing", "surfing", "swimming", "water polo"],
    "Winter Sports": ["biathlon", "bobsled", "curling", "luge", "skating", "skiing", "snowboarding"],
    "Clothing": ["coat", "dress", "hoodie", "jacket", "jeans", "kimono", "shirt", "shorts", "skirt", "sweater", "trousers", "vest"],
    "Footwear": ["boots", "clogs", "loafers", "moccasins", "sandals", "slippers", "sneakers"],
    "Accessories": ["belt", "bracelet", "earring", "gloves", "hat", "necklace", "scarf", "tie", "umbrella", "watch"],
    "Household Items": ["broom", "candle", "clock", "lamp", "mirror", "pillow", "rug", "vase"],
    "Kitchen Items": ["blender", "fork", "kettle", "knife", "ladle", "oven", "pan", "spatula", "spoon", "toaster", "whisk"],
    "Furniture": ["armchair", "bed", "bench", "cabinet", "chair", "desk", "dresser", "ottoman", "shelf", "sofa", "stool", "table", "wardrobe"],
    "Bathroom Items": ["bathtub", "razor", "shampoo", "shower", "sink", "soap", "sponge", "toothbrush", "towel"],
    "Nature": ["canyon", "cave", "desert", "forest", "glacier", "island", "jungle", "lake", "mountain", "ocean", "river", "valley", "volcano"],
    "Flowers": ["daisy", "daffodil", "iris", "jasmine", "lavender", "lily", "lotus", "marigold", "orchid", "peony", "poppy", "rose", "sunflower", "tulip", "violet"],
    "Trees": ["ash", "birch", "cedar", "elm", "maple", "oak", "palm", "pine", "redwood", "spruce", "willow", "yew"],
    "Weather": ["blizzard", "drizzle", "fog", "hail", "hurricane", "lightning", "rain", "sleet", "snow", "storm", "thunder", "tornado", "wind"],
    "Planets": ["earth", "jupiter", "mars", "mercury", "neptune", "saturn", "uranus", "venus"],
    "Transportation": ["bicycle", "bus", "scooter", "subway", "taxi", "train", "tram"],
    "Vehicles": ["ambulance", "car", "jeep", "limousine", "motorcycle", "truck", "van", "wagon"],
    "Boats": ["canoe", "ferry", "kayak", "raft", "sailboat", "submarine", "yacht"],
    "Aircraft": ["airplane", "blimp", "glider", "helicopter", "jet", "zeppelin"],
    "Body Parts": [
        "ankle", "arm", "cheek", "chin", "elbow", "eye", "finger", "foot", "hand", "heart",
        "knee", "leg", "lung", "mouth", "neck", "nose", "shoulder", "thumb", "toe", "wrist",
    ],
    "Music": ["chorus", "melody", "opera", "rhythm", "song", "symphony"],
    "Musical Instruments": ["banjo", "cello", "clarinet", "drum", "flute", "guitar", "harp", "oboe", "piano", "saxophone", "trumpet", "ukulele", "violin", "xylophone"],
    "Music Genres": ["blues", "country", "disco", "folk", "funk", "gospel", "jazz", "pop", "punk", "reggae", "rock", "salsa", "techno"],
}


@dataclass
class CategoryNode:
    """One category in the table."""
    name: str
    parent: str | None = None
    words: list[str] = field(default_factory=list)
    children: list[str] = field(default_factory=list)


class CategoryTaxonomy:
    """Category tree with word lists, looked up case- and accent-insensitively."""

    def __init__(
        self,
        hierarchy: Mapping[str, Iterable[str]] | None = None,
        words: Mapping[str, Iterable[str]] | None = None,
    ):
        if hierarchy is None:
            hierarchy = DEFAULT_HIERARCHY
        if words is None:
            words = DEFAULT_WORDS

        self._nodes: dict[str, CategoryNode] = {}
        for grand, subs in hierarchy.items():
            self._add(grand, parent=None)
            for sub in subs:
                self._add(sub, parent=grand)
        for name, members in words.items():
            node = self._add(name, parent=None)
            for word in members:
                normalized = normalize_word(word)
                if normalized and normalized not in node.words:
                    node.words.append(normalized)

    def _add(self, name: str, parent: str | None) -> CategoryNode:
        key = category_key(name)
        node = self._nodes.get(key)
        if node is None:
            node = CategoryNode(name=name)
            self._nodes[key] = node
        if parent is not None and node.parent is None:
            parent_node = self._add(parent, parent=None)
            node.parent = parent_node.name
            parent_node.children.append(node.name)
        return node

    def find(self, name: str) -> CategoryNode | None:
        """Look up a category, tolerating a trailing plural "s"."""
        key = category_key(name)
        if not key:
            return None
        node = self._nodes.get(key)
        if node is None:
            node = self._nodes.get(key + "s") or self._nodes.get(key.removesuffix("s"))
        return node

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find(name) is not None

    def grand_categories(self) -> list[str]:
        """Top-level categories in table order."""
        return [node.name for node in self._nodes.values() if node.parent is None]

    def children(self, name: str) -> list[str]:
        node = self.find(name)
        return list(node.children) if node else []

    def root(self, name: str) -> str | None:
        """Name of the top-level category above ``name`` (itself if top-level)."""
        node = self.find(name)
        if node is None:
            return None
        while node.parent is not None:
            node = self._nodes[category_key(node.parent)]
        return node.name

    def words_in(self, name: str) -> list[str]:
        """Words of a category and all of its descendants, table order, no repeats."""
        node = self.find(name)
        if node is None:
            return []
        seen: dict[str, None] = {}
        stack = [node]
        while stack:
            current = stack.pop(0)
            for word in current.words:
                seen.setdefault(word, None)
            stack.extend(self._nodes[category_key(child)] for child in current.children)
        return list(seen)

    def contains(self, word: str, category: str) -> bool:
        """True if ``word`` is listed under ``category`` or a descendant."""
        return normalize_word(word) in self.words_in(category)

    def common_theme(self, categories: Iterable[str]) -> str | None:
        """Broadest theme shared by every category, or None.

        The theme is the top-level category all of them sit under, so
        Mammals + Birds -> Animals. Any unknown category, or categories under
        different top-level categories, yields None.
        """
        roots = set()
        for category in categories:
            root = self.root(category)
            if root is None:
                return None
            roots.add(root)
        if len(roots) != 1:
            return None
        return roots.pop()

    def example_word(self, category: str, letter: str, exclude: Iterable[str] = ()) -> str | None:
        """First word in ``category`` starting with ``letter``, skipping ``exclude``."""
        prefix = normalize_word(letter)[:1]
        if not prefix:
            return None
        excluded = {normalize_word(w) for w in exclude}
        for word in self.words_in(category):
            if word.startswith(prefix) and word not in excluded:
                return word
        return None


default_taxonomy = CategoryTaxonomy()
