"""
tuning.py

Renders classified CAS parts (or pubic hair length groups) into a single
WickedWhims SnippetTuning document.

The tuning instance id is the 64 bit FNV-1 hash of "<creator>:<slug>", the
same hash the game uses for tuning names. It shows up as decimal in the
document's s attribute and as 16 hex digits in the output filename.
"""

import re
from collections import namedtuple
from xml.sax.saxutils import escape

from .constants import (
    SNIPPET_TUNING_TYPE,
    SNIPPET_TUNING_GROUP,
    THUMBNAIL_RESOURCE_TYPE,
    TUNING_SUFFIX,
    HAIR_LENGTHS,
)
from .errors import UnresolvedPartsError

FNV64_OFFSET = 0xCBF29CE484222325
FNV64_PRIME = 0x100000001B3
MASK64 = 0xFFFFFFFFFFFFFFFF

TuningDocument = namedtuple('TuningDocument', ['name', 'instance_id', 'filename', 'text'])

_ATTR_ENTITIES = {'"': "&quot;"}


def slugify(text):
    """'My Cool Set!' -> 'my_cool_set'"""
    text = str(text).lower().strip()
    text = re.sub(r'[^a-z0-9\s_]+', '', text)
    text = re.sub(r'\s+', '_', text)
    return re.sub(r'__+', '_', text)


def fnv64(text):
    """64 bit FNV-1 of the lowercased UTF-8 text"""
    h = FNV64_OFFSET
    for b in text.lower().encode('utf-8'):
        h = (h * FNV64_PRIME) & MASK64
        h ^= b
    return h


def tuning_name(creator, base_name):
    return f"{creator}:{slugify(base_name)}"


def tuning_instance_id(creator, base_name):
    return fnv64(tuning_name(creator, base_name))


def normalize_icon(icon_hex):
    icon = (icon_hex or "").strip().upper()
    if icon.startswith("0X"):
        icon = icon[2:]
    if not icon:
        icon = "0"
    if not re.fullmatch(r'[0-9A-F]{1,16}', icon):
        raise ValueError(f"Icon instance must be up to 16 hex digits, got '{icon_hex}'")
    return icon.zfill(16)


def icon_key(icon_hex):
    """Type:Group:Instance key of the display icon"""
    return f"{THUMBNAIL_RESOURCE_TYPE:08X}:00000000:{normalize_icon(icon_hex)}"


def tuning_filename(creator, base_name):
    slug = slugify(base_name)
    instance_hex = f"{tuning_instance_id(creator, base_name):016X}"
    return (
        f"{SNIPPET_TUNING_TYPE:08X}!{SNIPPET_TUNING_GROUP:08X}!{instance_hex}"
        f".{creator}_{slug}.{TUNING_SUFFIX}.xml"
    )


def _text(value):
    return escape(str(value))


def _attr(value):
    return escape(str(value), _ATTR_ENTITIES)


def _part_header(display_name, creator, icon, part_type):
    return f"""
    <U>
      <T n="cas_part_raw_display_name">{_text(display_name)}</T>
      <T n="cas_part_author">{_text(creator)}</T>
      <T n="cas_part_display_icon">{icon}</T>
      <T n="cas_part_type">{part_type}</T>"""


def render_part(part, creator, icon):
    if part.part_type is None:
        raise UnresolvedPartsError([part.source_file])

    block = _part_header(part.display_name, creator, icon, part.part_type)
    block += f"""
      <T n="cas_part_id">{part.instance}</T>"""

    if part.part_type.startswith("PENIS_") and part.subtype:
        block += f"""
      <T n="cas_part_subtype">{part.subtype}</T>"""

    if part.part_type == "PENIS_HARD_MALE":
        block += """
      <U n="penis_sliders">
        <T n="length_slider_low">0</T>
        <T n="length_slider_high">0</T>
        <T n="girth_slider_low">0</T>
        <T n="girth_slider_high">0</T>
      </U>"""

    return block + """
    </U>"""


def render_hair_group(group, creator, icon):
    block = _part_header(group.display_name, creator, icon, group.part_type)
    block += f"""
      <T n="cas_part_color">{_text(group.color_subtype)}</T>
      <U n="pubic_hair_cas_parts">"""
    for length in HAIR_LENGTHS:
        block += f"""
        <T n="{length}_cas_part_id">{group.lengths[length]}</T>"""
    return block + """
      </U>
    </U>"""


def render_document(blocks, creator, base_name):
    name = tuning_name(creator, base_name)
    instance_id = fnv64(name)
    text = f"""<?xml version="1.0" encoding="utf-8"?>
<I c="WickedWhimsCASPartsPackage" i="snippet" m="wickedwhims.main.cas_parts.cas_parts_tuning" n="{_attr(name)}" s="{instance_id}">
  <T n="wickedwhims_cas_parts">1</T>
  <L n="cas_parts_list">{''.join(blocks)}
  </L>
</I>
"""
    return TuningDocument(name, instance_id, tuning_filename(creator, base_name), text)


def render_parts(parts, creator, icon_hex, base_name):
    icon = icon_key(icon_hex)
    return render_document([render_part(p, creator, icon) for p in parts], creator, base_name)


def render_hair_groups(groups, creator, icon_hex, base_name):
    icon = icon_key(icon_hex)
    blocks = []
    for group in groups:
        if not group.is_complete:
            # incomplete groups never reach the output
            continue
        blocks.append(render_hair_group(group, creator, icon))
    return render_document(blocks, creator, base_name)
