"""
Code point tables for the sanitization rules.

The curated sets live here so they can be audited in one place.
Category lookups use the interpreter's Unicode database (see UNICODE_VERSION).
"""

import unicodedata

UNICODE_VERSION = unicodedata.unidata_version

ZWSP = 0x200B
ZWNJ = 0x200C
ZWJ = 0x200D
LRM = 0x200E
RLM = 0x200F
ALM = 0x061C
WORD_JOINER = 0x2060
SOFT_HYPHEN = 0x00AD
MONGOLIAN_VOWEL_SEPARATOR = 0x180E
BOM = 0xFEFF
VS15 = 0xFE0E
VS16 = 0xFE0F

EMBEDDINGS_AND_OVERRIDES = frozenset(range(0x202A, 0x202F))  # LRE RLE PDF LRO RLO
ISOLATES = frozenset(range(0x2066, 0x206A))  # LRI RLI FSI PDI

INVISIBLES = frozenset(
    {ZWSP, ZWNJ, ZWJ, LRM, RLM, WORD_JOINER, SOFT_HYPHEN, MONGOLIAN_VOWEL_SEPARATOR, BOM}
) | EMBEDDINGS_AND_OVERRIDES | ISOLATES

# Unicode Bidi_Control property
BIDI_CONTROLS = frozenset({ALM, LRM, RLM}) | EMBEDDINGS_AND_OVERRIDES | ISOLATES

# Characters counted as "invisible" in the statistics block.
STATS_INVISIBLES = frozenset(chr(cp) for cp in (ZWSP, ZWNJ, ZWJ, WORD_JOINER, SOFT_HYPHEN, BOM))

ASCII_CONTROL_MAX = 0x1F
DEL = 0x7F

TAG_FIRST, TAG_LAST = 0xE0000, 0xE007F
VARIATION_SELECTOR_RANGES = ((0xFE00, 0xFE0F), (0xE0100, 0xE01EF))
NONCHARACTER_FIRST, NONCHARACTER_LAST = 0xFDD0, 0xFDEF
PRIVATE_USE_BMP = (0xE000, 0xF8FF)
PRIVATE_USE_SUPPLEMENTARY = ((0xF0000, 0xFFFFD), (0x100000, 0x10FFFD))
SURROGATE_FIRST, SURROGATE_LAST = 0xD800, 0xDFFF

SUPPORTED_UPLOAD_EXTENSIONS = (".txt", ".md", ".markdown", ".html", ".htm", ".xml", ".csv", ".json")
OUTPUT_ENCODING = "utf-8"
