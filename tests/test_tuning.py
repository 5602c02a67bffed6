import re
import xml.etree.ElementTree as ET

import pytest

from caspxml.classifier import ClassifiedPart
from caspxml.errors import UnresolvedPartsError
from caspxml.grouping import PubicHairGroup
from caspxml.tuning import (
    fnv64,
    icon_key,
    normalize_icon,
    render_hair_groups,
    render_parts,
    slugify,
    tuning_filename,
    tuning_instance_id,
    tuning_name,
)


@pytest.mark.parametrize("text", [
    "My Cool Set!",
    "  Top   by  Acme ",
    "__already__slugged__",
    "Ünïcode & Symbols #1",
    "Acme",
    "",
])
def test_slugify_idempotent(text):
    assert slugify(slugify(text)) == slugify(text)


def test_slugify():
    assert slugify("My Cool Set!") == "my_cool_set"
    assert slugify("a  b__c") == "a_b_c"
    assert slugify("  Top ") == "top"


def test_fnv64_vectors():
    assert fnv64("") == 0xCBF29CE484222325
    assert fnv64("a") == 0xAF63BD4C8601B7BE
    assert fnv64("A") == fnv64("a")


def test_instance_id_is_stable():
    first = tuning_instance_id("Acme", "My Set")
    assert first == tuning_instance_id("Acme", "My Set")
    assert first == fnv64("Acme:my_set")
    assert tuning_name("Acme", "My Set") == "Acme:my_set"


def test_tuning_filename():
    name = tuning_filename("Acme", "My Set")
    instance_hex = f"{fnv64('Acme:my_set'):016X}"
    assert name == f"7DF2169C!00000000!{instance_hex}.Acme_my_set.SnippetTuning.xml"


def test_icon():
    assert normalize_icon("abc") == "0000000000000ABC"
    assert normalize_icon("0x1F") == "000000000000001F"
    assert icon_key("abc") == "00B2D882:00000000:0000000000000ABC"
    with pytest.raises(ValueError):
        normalize_icon("xyz")
    with pytest.raises(ValueError):
        normalize_icon("1" * 17)


def _parts():
    return [
        ClassifiedPart(1, "Top by Acme.package", "BODY_TOP_MALE", None, "Top"),
        ClassifiedPart(2, "Bottom by Acme.package", "BODY_BOTTOM_MALE", None, "Bottom"),
    ]


def test_render_parts_example():
    doc = render_parts(_parts(), "Acme", "0", "Top")
    root = ET.fromstring(doc.text.encode('utf-8'))

    assert root.get("n") == "Acme:top"
    assert root.get("s") == str(fnv64("Acme:top"))
    blocks = root.find("L").findall("U")
    assert len(blocks) == 2
    values = [{t.get("n"): t.text for t in block.findall("T")} for block in blocks]
    assert values[0]["cas_part_type"] == "BODY_TOP_MALE"
    assert values[0]["cas_part_raw_display_name"] == "Top"
    assert values[1]["cas_part_type"] == "BODY_BOTTOM_MALE"
    assert values[1]["cas_part_raw_display_name"] == "Bottom"
    assert values[1]["cas_part_id"] == "2"
    assert doc.filename == tuning_filename("Acme", "Top")


def test_hard_part_has_sliders_and_subtype():
    part = ClassifiedPart(5, "Erect Vampire.package", "PENIS_HARD_MALE", "VAMPIRE", "Erect Vampire")
    doc = render_parts([part], "Acme", "0", "Set")
    block = ET.fromstring(doc.text.encode('utf-8')).find("L/U")
    assert block.find("T[@n='cas_part_subtype']").text == "VAMPIRE"
    assert block.find("U[@n='penis_sliders']") is not None


def test_body_part_has_no_subtype():
    part = ClassifiedPart(5, "Top Alien.package", "BODY_TOP_MALE", "ALIEN", "Top Alien")
    doc = render_parts([part], "Acme", "0", "Set")
    assert "cas_part_subtype" not in doc.text


def test_display_names_are_escaped():
    part = ClassifiedPart(5, "x.package", "BODY_TOP_MALE", None, "Tops & <Bottoms>")
    doc = render_parts([part], "A&B", "0", "Set")
    block = ET.fromstring(doc.text.encode('utf-8')).find("L/U")
    assert block.find("T[@n='cas_part_raw_display_name']").text == "Tops & <Bottoms>"
    assert block.find("T[@n='cas_part_author']").text == "A&B"


def test_unresolved_part_is_refused():
    part = ClassifiedPart(5, "Mystery.package", None, None, "Mystery")
    with pytest.raises(UnresolvedPartsError):
        render_parts([part], "Acme", "0", "Set")


def test_render_hair_groups_skips_incomplete():
    complete = PubicHairGroup("Bush", "BLACK", {"short": 1, "medium": 2, "long": 3}, "Black")
    partial = PubicHairGroup("Bush", "BROWN", {"short": 4, "medium": None, "long": 6}, "Brown")
    doc = render_hair_groups([complete, partial], "Acme", "0", "Bush")
    blocks = ET.fromstring(doc.text.encode('utf-8')).findall("L/U")
    assert len(blocks) == 1
    ids = {t.get("n"): t.text for t in blocks[0].find("U[@n='pubic_hair_cas_parts']")}
    assert ids == {"short_cas_part_id": "1", "medium_cas_part_id": "2", "long_cas_part_id": "3"}
    assert blocks[0].find("T[@n='cas_part_raw_display_name']").text == "Bush (Black)"
    assert re.search(r'<T n="cas_part_color">BLACK</T>', doc.text)
