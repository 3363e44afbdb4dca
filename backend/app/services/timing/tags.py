"""Closed tag vocabulary used to match classes of items to rules."""

IRON = "IRON"
DIVALENT_CATION = "DIVALENT_CATION"
THYROID_HORMONE = "THYROID_HORMONE"
BISPHOSPHONATE = "BISPHOSPHONATE"
TETRACYCLINE = "TETRACYCLINE"
FLUOROQUINOLONE = "FLUOROQUINOLONE"
INTEGRASE_INHIBITOR = "INTEGRASE_INHIBITOR"
ACID_REDUCER = "ACID_REDUCER"
BINDING_AGENT = "BINDING_AGENT"
WITH_FOOD_RECOMMENDED = "WITH_FOOD_RECOMMENDED"
STIMULANT = "STIMULANT"
CAFFEINE = "CAFFEINE"
NARROW_TW = "NARROW_TW"

# Wildcard: matches any item whose kind is "med".
ANY_MED = "ANY_MED"

ALL_TAGS = frozenset(
    {
        IRON,
        DIVALENT_CATION,
        THYROID_HORMONE,
        BISPHOSPHONATE,
        TETRACYCLINE,
        FLUOROQUINOLONE,
        INTEGRASE_INHIBITOR,
        ACID_REDUCER,
        BINDING_AGENT,
        WITH_FOOD_RECOMMENDED,
        STIMULANT,
        CAFFEINE,
        NARROW_TW,
        ANY_MED,
    }
)
