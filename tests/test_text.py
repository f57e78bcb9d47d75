import re

from indie_coffee.text import contains_any, normalize


def test_normalize_lowercases_and_strips_punctuation():
    assert normalize("Joe's  Café & Bar!") == "joe s caf bar"
    assert normalize("  Starbucks #4021 ") == "starbucks 4021"


def test_normalize_output_alphabet_and_idempotence():
    samples = [
        "",
        "   ",
        "Peet's Coffee\t&\nTea",
        "7-ELEVEN Store",
        "Ünïcödé ☕ Roasters",
        "###",
        "A  B   C",
    ]
    for sample in samples:
        once = normalize(sample)
        assert re.fullmatch(r"([a-z0-9]+( [a-z0-9]+)*)?", once)
        assert normalize(once) == once


def test_normalize_handles_none():
    assert normalize(None) == ""


def test_contains_any_normalizes_needles():
    assert contains_any("coffee bean tea leaf", ["Coffee Bean & Tea Leaf"])
    assert not contains_any("", ["coffee"])
    assert not contains_any("espresso bar", ["", "tea"])
