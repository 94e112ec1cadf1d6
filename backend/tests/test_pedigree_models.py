"""Tests for the pedigree data models."""

import os
import sys

import pytest
from pydantic import ValidationError

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pedigree_models import (
    AncestorEntry,
    Generation4,
    Generation5,
    ParsedPedigree,
    Side,
    SubjectInfo,
    slots_per_side,
)


class TestParsedPedigree:
    """Tests for slot access and the record shape."""

    def test_arrays_always_full_length(self):
        parsed = ParsedPedigree()
        assert parsed.generation4.paternal_line == [None] * 8
        assert parsed.generation4.maternal_line == [None] * 8
        assert parsed.generation5.paternal_line == [None] * 16
        assert parsed.generation5.maternal_line == [None] * 16

    def test_short_arrays_padded(self):
        gen4 = Generation4(paternal_line=["A", ""])
        assert gen4.paternal_line == ["A"] + [None] * 7

    def test_long_arrays_rejected(self):
        with pytest.raises(ValidationError):
            Generation5(maternal_line=["X"] * 17)

    def test_slots_per_side(self):
        assert [slots_per_side(g) for g in range(1, 6)] == [1, 2, 4, 8, 16]

    def test_set_and_get_named_slot(self):
        parsed = ParsedPedigree()
        parsed.set_slot(Side.PATERNAL, 3, 2, " FMF ")
        assert parsed.generation3.paternal_great_grandfather_mother == "FMF"
        assert parsed.get_slot(Side.PATERNAL, 3, 2) == "FMF"

    def test_set_and_get_array_slot(self):
        parsed = ParsedPedigree()
        parsed.set_slot(Side.MATERNAL, 4, 7, "MMMM")
        assert parsed.generation4.maternal_line[7] == "MMMM"

    def test_blank_name_clears_slot(self):
        parsed = ParsedPedigree()
        parsed.set_slot(Side.PATERNAL, 1, 0, "PADRE")
        parsed.set_slot(Side.PATERNAL, 1, 0, "   ")
        assert parsed.generation1.father is None

    def test_out_of_range(self):
        parsed = ParsedPedigree()
        with pytest.raises(ValueError):
            parsed.get_slot(Side.PATERNAL, 1, 1)
        with pytest.raises(ValueError):
            parsed.get_slot(Side.PATERNAL, 6, 0)
        with pytest.raises(ValueError):
            parsed.set_slot(Side.MATERNAL, 5, 16, "X")

    def test_iter_slots_covers_all(self):
        slots = list(ParsedPedigree().iter_slots())
        assert len(slots) == 62
        assert slots[0] == (Side.PATERNAL, 1, 0, None)
        assert slots[1] == (Side.MATERNAL, 1, 0, None)

    def test_from_entries_round_trip(self):
        entries = [
            AncestorEntry(Side.PATERNAL, 1, 0, "PADRE"),
            AncestorEntry(Side.MATERNAL, 2, 1, "ABUELA"),
            AncestorEntry(Side.PATERNAL, 5, 3, "DEEP"),
        ]
        parsed = ParsedPedigree.from_entries(entries)
        assert parsed.generation1.father == "PADRE"
        assert parsed.generation2.maternal_grandmother == "ABUELA"
        assert parsed.generation5.paternal_line[3] == "DEEP"
        assert {(e.side, e.generation, e.slot, e.name) for e in parsed.entries()} == {
            (e.side, e.generation, e.slot, e.name) for e in entries
        }
        assert parsed.ancestor_count == 3

    def test_json_uses_camel_case(self):
        parsed = ParsedPedigree(
            subject=SubjectInfo(name="LASCAUX", breed="Baudet du Poitou", sex="male", birth_year=2021),
        )
        data = parsed.model_dump(by_alias=True)
        assert data["subject"]["birthYear"] == 2021
        assert "paternalGrandfather" in data["generation2"]
        assert len(data["generation4"]["paternalLine"]) == 8
        assert "paternalGreatGrandfatherFather" in data["generation3"]
