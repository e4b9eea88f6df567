"""Label vocabularies deciding which detections are worth cropping."""

import re

PHOTO_CATEGORIES = frozenset({
    # people
    "person", "people", "man", "woman", "boy", "girl", "child", "baby", "face", "human",
    # animals
    "animal", "dog", "cat", "bird", "horse", "cattle", "sheep", "fish", "wildlife", "pet",
    # landscape
    "landscape", "mountain", "beach", "forest", "tree", "flower", "plant", "lake", "sea",
    # buildings
    "building", "house", "tower", "skyscraper", "bridge", "church", "castle", "architecture",
})

SCENE_VOCABULARY = frozenset({
    # nature
    "nature", "landscape", "sky", "cloud", "mountain", "hill", "forest", "tree", "water",
    "sea", "ocean", "beach", "coast", "lake", "river", "sunset", "sunrise", "field",
    "grass", "garden", "park", "snow", "desert", "valley", "wilderness",
    # urban
    "city", "urban", "street", "road", "building", "skyline", "architecture", "town",
    "downtown", "metropolis", "neighbourhood", "neighborhood", "bridge", "tower",
    # interior
    "interior", "room", "furniture", "kitchen", "bedroom", "living", "ceiling", "floor",
    "office", "lobby", "hall",
})

_WORD_RE = re.compile(r"[a-z]+")


def label_words(label: str) -> set[str]:
    return set(_WORD_RE.findall(label.lower()))


def is_photo_category(label: str) -> bool:
    return not label_words(label).isdisjoint(PHOTO_CATEGORIES)


def is_scene_label(label: str) -> bool:
    return not label_words(label).isdisjoint(SCENE_VOCABULARY)
