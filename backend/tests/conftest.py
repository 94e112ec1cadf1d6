"""Shared fixtures for the pedigree reader tests."""

import os
import sys

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pedigree_models import Side


ROUND_TRIP_TEXT = """LASCAUX DU VERN  (Baudet du Poitou, Mâle, 2021)
    └── PADRE
    │   └── ABUELA PATERNA
    ┌── MADRE
    └── ABUELA MATERNA
"""

ROUND_TRIP_FIELDS = {
    "father_id": "PADRE",
    "paternal_grandmother_id": "ABUELA PATERNA",
    "mother_id": "MADRE",
    "maternal_grandmother_id": "ABUELA MATERNA",
}


def sample_name(side: Side, generation: int, slot: int) -> str:
    """
    Name of an ancestor in sample-pedigree.txt.

    Names spell the path from the subject: F for sire, M for dam, so the
    mother's father's mother is 'MFM DU VERN'.
    """
    path = "F" if side is Side.PATERNAL else "M"
    for bit in format(slot, f"0{generation - 1}b") if generation > 1 else "":
        path += "M" if bit == "1" else "F"
    return f"{path} DU VERN"


@pytest.fixture
def sample_pedigree_path():
    """Path to the sample 5-generation pedigree tree."""
    return os.path.join(
        os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
        "sample-pedigree.txt"
    )


@pytest.fixture
def sample_text(sample_pedigree_path):
    """Contents of the sample pedigree tree."""
    with open(sample_pedigree_path, encoding="utf-8") as f:
        return f.read()
