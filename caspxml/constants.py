VERSION = "2.2.0"

# Resource types
CASP_RESOURCE_TYPE = 0x034AEECB
SNIPPET_TUNING_TYPE = 0x7DF2169C
SNIPPET_TUNING_GROUP = 0x00000000
THUMBNAIL_RESOURCE_TYPE = 0x00B2D882

PACKAGE_EXTENSION = ".package"
TUNING_SUFFIX = "SnippetTuning"

DEFAULT_CREATOR = "CreatorName"
DEFAULT_ICON = "0000000000000000"

# DBPF compression types
COMPRESSION_NONE = 0x0000
COMPRESSION_ZLIB = 0x5A42
COMPRESSION_STREAMABLE = 0xFFFE
COMPRESSION_INTERNAL = 0xFFFF
COMPRESSION_DELETED = 0xFFE0

# Name field inside a decompressed CASP payload
CASP_NAME_OFFSET = 12
UNKNOWN_NAME = "UNKNOWN"

PART_TYPES = [
    "PENIS_HARD_MALE",
    "PENIS_SOFT_MALE",
    "BODY_TOP_MALE",
    "BODY_BOTTOM_MALE",
    "PUBIC_HAIR_MALE",
    "PUBIC_HAIR_FEMALE",
]

SUBTYPES = ['HUMAN', 'ALIEN', 'VAMPIRE', 'MERMAID', 'WEREWOLF', 'FAIRY']

# Hair colors the game ships swatches for
HAIR_COLORS = [
    "BLACK",
    "DARK_BROWN",
    "BROWN",
    "AUBURN",
    "RED",
    "ORANGE",
    "STRAWBERRY_BLONDE",
    "BLONDE",
    "PLATINUM",
    "GRAY",
    "WHITE",
    "SALT_AND_PEPPER",
]
CUSTOM_COLOR = "CUSTOM"

HAIR_LENGTHS = ("short", "medium", "long")
