import re
from enum import Enum
from itertools import islice

import numpy as np

from coordsuite.config import UTM_THRESHOLD

NUMBER_RE = re.compile(r"[+-]?\d+(?:[.,]\d+)?(?:[eE][+-]?\d+)?")


class ConversionMode(Enum):
    UTM_TO_LATLON = "UTM to Lat/Lon"
    LATLON_TO_UTM = "Lat/Lon to UTM"

    def __str__(self):
        return self.value


def iter_numbers(text):
    """Yield every number found in text, left to right.

    A comma is accepted as decimal separator ("41,65" is 41.65).
    """
    for m in NUMBER_RE.finditer(text):
        try:
            yield float(m.group(0).replace(",", "."))
        except ValueError:
            continue


def pair_numbers(numbers):
    """Group numbers two by two. A trailing unpaired number is dropped."""
    it = iter(numbers)
    while True:
        pair = tuple(islice(it, 2))
        if len(pair) < 2:
            return
        yield pair


def parse_number_pairs(text):
    """Extract consecutive number pairs from free text as a float32 (N, 2) array."""
    pairs = list(pair_numbers(iter_numbers(text)))
    return np.array(pairs, dtype=np.float32).reshape(-1, 2)


def classify(pairs):
    """Guess which side the pairs come from.

    Returns None when there is nothing to classify.
    """
    if len(pairs) == 0:
        return None
    if abs(float(pairs[0][1])) > UTM_THRESHOLD:
        return ConversionMode.UTM_TO_LATLON
    return ConversionMode.LATLON_TO_UTM
