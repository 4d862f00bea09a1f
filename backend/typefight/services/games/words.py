"""Built-in word source for typing games."""

import random
from typing import List, Optional, Sequence

WORDS = (
    # short
    'act', 'air', 'arm', 'art', 'ask', 'bag', 'bed', 'box', 'boy', 'bus',
    'cap', 'car', 'cat', 'cup', 'day', 'dog', 'ear', 'egg', 'eye', 'fan',
    'fog', 'fun', 'gas', 'hat', 'ice', 'ink', 'jar', 'key', 'kid', 'leg',
    'map', 'mix', 'net', 'oil', 'owl', 'pen', 'pie', 'rat', 'sky', 'sun',
    'tea', 'toy', 'van', 'web', 'zoo', 'able', 'atom', 'bark', 'bell', 'bird',
    'boat', 'bolt', 'cake', 'calm', 'chip', 'city', 'coin', 'cold', 'dark', 'dust',
    'echo', 'fire', 'fish', 'flag', 'frog', 'gold', 'hill', 'iron', 'jump', 'kite',
    'lamp', 'leaf', 'moon', 'nest', 'orbit', 'pond', 'rain', 'rock', 'salt', 'ship',
    'snow', 'star', 'tree', 'wave', 'wind', 'wolf', 'zero', 'alien', 'beach', 'bread',
    'cloud', 'comet', 'crane', 'dream', 'flame', 'ghost', 'grass', 'heart', 'laser', 'light',
    'lunar', 'mango', 'noise', 'ocean', 'plant', 'quark', 'radar', 'river', 'robot', 'solar',
    'space', 'storm', 'tiger', 'torch', 'venus', 'water', 'world', 'zebra',
    # medium
    'anchor', 'beacon', 'bridge', 'candle', 'cosmic', 'donkey', 'engine', 'falcon',
    'galaxy', 'garden', 'harbor', 'island', 'jungle', 'meteor', 'nebula', 'oxygen',
    'planet', 'pocket', 'rocket', 'shadow', 'signal', 'silver', 'sunset', 'tunnel',
    'voyage', 'window', 'antenna', 'balloon', 'capsule', 'crystal', 'eclipse', 'gravity',
    'horizon', 'journey', 'lantern', 'mercury', 'neptune', 'orbital', 'phantom', 'quantum',
    'thunder', 'uranium', 'volcano', 'asteroid', 'backpack', 'blizzard', 'calendar',
    'daylight', 'dinosaur', 'envelope', 'frontier', 'hydrogen', 'keyboard', 'magnetic',
    'mountain', 'overhead', 'parachute', 'pineapple', 'satellite', 'spaceship', 'telescope',
    'turquoise', 'universe',
    # long
    'atmosphere', 'binoculars', 'chandelier', 'collision', 'constellation', 'countdown',
    'earthquake', 'expedition', 'flashlight', 'fluorescent', 'gravitational', 'helicopter',
    'hemisphere', 'interstellar', 'laboratory', 'lighthouse', 'magnificent', 'microphone',
    'navigation', 'observatory', 'photosynthesis', 'quarantine', 'rainforest', 'revolution',
    'skyscraper', 'spectacular', 'stratosphere', 'supernova', 'thermometer', 'thunderstorm',
    'transmission', 'trajectory', 'underground', 'velociraptor', 'watermelon', 'wavelength',
)


class WordSource:
    """Random word supplier filtered by length."""

    def __init__(self, words: Optional[Sequence[str]] = None, rng: Optional[random.Random] = None):
        self.words: List[str] = list(words or WORDS)
        self.rng = rng or random.Random()

    def word(self, min_length: int = 1, max_length: Optional[int] = None) -> str:
        pool = [
            w for w in self.words
            if len(w) >= min_length and (max_length is None or len(w) <= max_length)
        ]
        if not pool:
            # Nothing fits; fall back to the closest lengths we have
            target = min_length if max_length is None else max_length
            pool = sorted(self.words, key=lambda w: abs(len(w) - target))[:5]
        return self.rng.choice(pool)
