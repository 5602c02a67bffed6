import os
import re
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .constants import HAIR_LENGTHS
from .classifier import clean_display_name, detect_color

logger = logging.getLogger("CaspXml")

LENGTH_PATTERN = re.compile(r'\b(' + '|'.join(HAIR_LENGTHS) + r')\b', re.IGNORECASE)
GROUPING_KEYWORD = "pubic"
FEMALE_KEYWORD = "female"


@dataclass(frozen=True)
class PubicHairGroup:
    style: str
    color_subtype: str
    lengths: Dict[str, Optional[int]]
    display_suffix: str = ""
    part_type: str = "PUBIC_HAIR_MALE"

    @property
    def is_complete(self):
        return all(self.lengths.get(length) is not None for length in HAIR_LENGTHS)

    @property
    def missing_lengths(self):
        return [length for length in HAIR_LENGTHS if self.lengths.get(length) is None]

    @property
    def display_name(self):
        if self.display_suffix:
            return f"{self.style} ({self.display_suffix})"
        return self.style


@dataclass(frozen=True)
class GroupingResult:
    groups: Tuple[PubicHairGroup, ...]
    skipped_files: Tuple[str, ...]
    dropped_groups: Tuple[PubicHairGroup, ...]


def is_grouping_mode(input_dir, filenames):
    """Hair grouping kicks in when the folder or any package name says 'pubic'"""
    if GROUPING_KEYWORD in os.path.basename(os.path.normpath(input_dir)).lower():
        return True
    return any(GROUPING_KEYWORD in f.lower() for f in filenames)


def hair_part_type(filename, override=None, input_dir=""):
    """Hair groups are always PUBIC_HAIR_MALE or PUBIC_HAIR_FEMALE unless overridden"""
    if override:
        return override
    folder = os.path.basename(os.path.normpath(input_dir)) if input_dir else ""
    if FEMALE_KEYWORD in filename.lower() or FEMALE_KEYWORD in folder.lower():
        return "PUBIC_HAIR_FEMALE"
    return "PUBIC_HAIR_MALE"


def split_length(filename, creator):
    """
    'Bush Short by Acme.package' -> ('Bush', 'short')

    Only the first length word counts, a second one stays in the style.
    Returns (None, None) when there is no length word.
    """
    name = clean_display_name(filename, creator)
    match = LENGTH_PATTERN.search(name)
    if not match:
        return None, None
    length = match.group(1).lower()
    style = name[:match.start()] + ' ' + name[match.end():]
    style = re.sub(r'\s+', ' ', style).strip(' -_')
    return style, length


def group_hair_parts(entries, creator, part_type_override=None, input_dir=""):
    """
    Fold (filename, instance, decoded_name) tuples into length triples.

    Buckets are keyed by style, then color. Files without a length word are
    skipped. Only groups with all of short/medium/long end up in `groups`,
    the rest are reported in `dropped_groups`.
    """
    buckets = {}
    order = []
    skipped = []

    for filename, instance, decoded_name in entries:
        style, length = split_length(filename, creator)
        if length is None:
            if filename not in skipped:
                logger.error(f"No length (short/medium/long) in '{filename}', skipping file")
                skipped.append(filename)
            continue

        color = detect_color(decoded_name)
        key = (style, color.subtype, color.suffix)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = {
                "part_type": hair_part_type(filename, part_type_override, input_dir),
                "lengths": dict.fromkeys(HAIR_LENGTHS),
            }
            buckets[key] = bucket
            order.append(key)

        current = bucket["lengths"][length]
        if current is not None and current != instance:
            logger.warning(
                f"'{style}' {color.subtype} already has a {length} part ({current}), ignoring {instance} from '{filename}'"
            )
            continue
        bucket["lengths"][length] = instance

    complete = []
    dropped = []
    for key in order:
        style, subtype, suffix = key
        bucket = buckets[key]
        group = PubicHairGroup(
            style=style,
            color_subtype=subtype,
            lengths=bucket["lengths"],
            display_suffix=suffix,
            part_type=bucket["part_type"],
        )
        if group.is_complete:
            complete.append(group)
        else:
            logger.error(
                f"Incomplete group '{group.display_name}' [{subtype}], missing: {', '.join(group.missing_lengths)}"
            )
            dropped.append(group)

    return GroupingResult(tuple(complete), tuple(skipped), tuple(dropped))
