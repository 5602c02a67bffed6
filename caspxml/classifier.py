import os
import re
from collections import namedtuple
from dataclasses import dataclass
from typing import Optional

from .constants import (
    PACKAGE_EXTENSION,
    SUBTYPES,
    HAIR_COLORS,
    CUSTOM_COLOR,
)

# Ordered, first match wins. Downstream tuning keys off these exact values.
# (keyword, part type, part type when "female" is also in the name)
PART_TYPE_RULES = [
    ("erect", "PENIS_HARD_MALE", None),
    ("soft", "PENIS_SOFT_MALE", None),
    ("semi", "PENIS_SOFT_MALE", None),
    ("top", "BODY_TOP_MALE", None),
    ("bottom", "BODY_BOTTOM_MALE", None),
    ("pubic", "PUBIC_HAIR_MALE", "PUBIC_HAIR_FEMALE"),
]

COLOR_PATTERN = re.compile(r'COLOR_([A-Z][A-Z0-9_]*)$')

ColorTag = namedtuple('ColorTag', ['subtype', 'suffix'])


@dataclass(frozen=True)
class ClassifiedPart:
    instance: int
    source_file: str
    part_type: Optional[str]
    subtype: Optional[str]
    display_name: str

    @property
    def resolved(self):
        return self.part_type is not None


def classify_part_type(filename, override=None):
    """Part type for a package filename, None when no rule matches"""
    if override:
        return override
    lower = filename.lower()
    for keyword, part_type, female_type in PART_TYPE_RULES:
        if keyword in lower:
            if female_type and "female" in lower:
                return female_type
            return part_type
    return None


def detect_subtype(filename, override=None):
    if override:
        return override
    lower = filename.lower()
    for subtype in SUBTYPES:
        if subtype.lower() in lower:
            return subtype
    return None


def strip_creator(name, creator):
    pattern = re.compile(r'\s+by\s+' + re.escape(creator) + r'$', re.IGNORECASE)
    return pattern.sub('', name).strip()


def clean_display_name(filename, creator):
    """'Top_v2 by Acme.package' -> 'Top v2'"""
    base = os.path.basename(filename)
    if base.lower().endswith(PACKAGE_EXTENSION):
        base = base[:-len(PACKAGE_EXTENSION)]
    return strip_creator(base, creator).replace('_', ' ').strip()


def _title_token(token):
    return ' '.join(w.capitalize() for w in token.split('_') if w)


def detect_color(name):
    """
    Color tag from the trailing COLOR_<TOKEN> of a decoded CASP name.

    Known hair colors map to themselves. Anything else, including a name
    without a color token, is CUSTOM; the token is still used as suffix.
    """
    match = COLOR_PATTERN.search((name or '').strip())
    if not match:
        return ColorTag(CUSTOM_COLOR, "")
    token = match.group(1).strip('_')
    subtype = token if token in HAIR_COLORS else CUSTOM_COLOR
    return ColorTag(subtype, _title_token(token))


def classify_record(instance, filename, creator, part_type_override=None, subtype_override=None):
    return ClassifiedPart(
        instance=instance,
        source_file=filename,
        part_type=classify_part_type(filename, part_type_override),
        subtype=detect_subtype(filename, subtype_override),
        display_name=clean_display_name(filename, creator),
    )
