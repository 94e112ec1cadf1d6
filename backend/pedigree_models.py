"""Pedigree data models.

Internally every ancestor is an AncestorEntry addressed by (side, generation,
slot). ParsedPedigree keeps the record shape the rest of the application
expects: named fields for generations 1-3 and ordered arrays for 4-5.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


MAX_GENERATION = 5


class Side(str, Enum):
    """Lineage side of an ancestor."""
    PATERNAL = "paternal"
    MATERNAL = "maternal"


class Branch(str, Enum):
    """Which arm of a drawn fork a line hangs from."""
    UPPER = "upper"
    LOWER = "lower"


def slots_per_side(generation: int) -> int:
    """Generation 1 has one ancestor per side, and each step back doubles it."""
    return 2 ** (generation - 1)


@dataclass(frozen=True)
class AncestorEntry:
    side: Side
    generation: int
    slot: int
    name: str
    line_index: int | None = None


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SubjectInfo(_Model):
    """The animal the pedigree belongs to, read from its annotated line."""
    name: str
    breed: str
    sex: str  # "male" | "female"
    birth_year: int


class Generation1(_Model):
    father: str | None = None
    mother: str | None = None


class Generation2(_Model):
    paternal_grandfather: str | None = None
    paternal_grandmother: str | None = None
    maternal_grandfather: str | None = None
    maternal_grandmother: str | None = None


class Generation3(_Model):
    # <side>_great_<sex>_<father|mother>: the grandparent line the slot descends from
    paternal_great_grandfather_father: str | None = None
    paternal_great_grandmother_father: str | None = None
    paternal_great_grandfather_mother: str | None = None
    paternal_great_grandmother_mother: str | None = None
    maternal_great_grandfather_father: str | None = None
    maternal_great_grandmother_father: str | None = None
    maternal_great_grandfather_mother: str | None = None
    maternal_great_grandmother_mother: str | None = None


def _fixed_length(values: list[str | None], size: int) -> list[str | None]:
    if len(values) > size:
        raise ValueError(f"expected at most {size} ancestors, got {len(values)}")
    return [v or None for v in values] + [None] * (size - len(values))


class Generation4(_Model):
    paternal_line: list[str | None] = Field(default_factory=lambda: [None] * 8)
    maternal_line: list[str | None] = Field(default_factory=lambda: [None] * 8)

    @field_validator("paternal_line", "maternal_line")
    @classmethod
    def _pad(cls, values: list[str | None]) -> list[str | None]:
        return _fixed_length(values, 8)


class Generation5(_Model):
    paternal_line: list[str | None] = Field(default_factory=lambda: [None] * 16)
    maternal_line: list[str | None] = Field(default_factory=lambda: [None] * 16)

    @field_validator("paternal_line", "maternal_line")
    @classmethod
    def _pad(cls, values: list[str | None]) -> list[str | None]:
        return _fixed_length(values, 16)


# Named attributes for generations 1-3, in slot order per side.
NAMED_SLOTS: dict[int, dict[Side, tuple[str, ...]]] = {
    1: {
        Side.PATERNAL: ("father",),
        Side.MATERNAL: ("mother",),
    },
    2: {
        Side.PATERNAL: ("paternal_grandfather", "paternal_grandmother"),
        Side.MATERNAL: ("maternal_grandfather", "maternal_grandmother"),
    },
    3: {
        Side.PATERNAL: (
            "paternal_great_grandfather_father",
            "paternal_great_grandmother_father",
            "paternal_great_grandfather_mother",
            "paternal_great_grandmother_mother",
        ),
        Side.MATERNAL: (
            "maternal_great_grandfather_father",
            "maternal_great_grandmother_father",
            "maternal_great_grandfather_mother",
            "maternal_great_grandmother_mother",
        ),
    },
}


class ParsedPedigree(_Model):
    """A recovered 5-generation pedigree rooted at one subject."""

    subject: SubjectInfo | None = None
    generation1: Generation1 = Field(default_factory=Generation1)
    generation2: Generation2 = Field(default_factory=Generation2)
    generation3: Generation3 = Field(default_factory=Generation3)
    generation4: Generation4 = Field(default_factory=Generation4)
    generation5: Generation5 = Field(default_factory=Generation5)

    @classmethod
    def from_entries(cls, entries: list[AncestorEntry], subject: SubjectInfo | None = None) -> "ParsedPedigree":
        """Project uniform (side, generation, slot) entries onto the record shape."""
        pedigree = cls(subject=subject)
        for entry in entries:
            pedigree.set_slot(entry.side, entry.generation, entry.slot, entry.name)
        return pedigree

    def _generation(self, generation: int) -> BaseModel:
        if not 1 <= generation <= MAX_GENERATION:
            raise ValueError(f"Generation out of range: {generation}")
        return getattr(self, f"generation{generation}")

    def _check_slot(self, generation: int, slot: int) -> None:
        if not 0 <= slot < slots_per_side(generation):
            raise ValueError(f"Slot {slot} out of range for generation {generation}")

    def get_slot(self, side: Side, generation: int, slot: int) -> str | None:
        self._check_slot(generation, slot)
        gen = self._generation(generation)
        if generation in NAMED_SLOTS:
            return getattr(gen, NAMED_SLOTS[generation][side][slot])
        return getattr(gen, f"{side.value}_line")[slot]

    def set_slot(self, side: Side, generation: int, slot: int, name: str | None) -> None:
        self._check_slot(generation, slot)
        value = name.strip() if name and name.strip() else None
        gen = self._generation(generation)
        if generation in NAMED_SLOTS:
            setattr(gen, NAMED_SLOTS[generation][side][slot], value)
        else:
            getattr(gen, f"{side.value}_line")[slot] = value

    def iter_slots(self) -> Iterator[tuple[Side, int, int, str | None]]:
        """All 62 slots: generation by generation, paternal side first."""
        for generation in range(1, MAX_GENERATION + 1):
            for side in (Side.PATERNAL, Side.MATERNAL):
                for slot in range(slots_per_side(generation)):
                    yield side, generation, slot, self.get_slot(side, generation, slot)

    def entries(self) -> list[AncestorEntry]:
        """Populated slots as uniform entries."""
        return [
            AncestorEntry(side=side, generation=generation, slot=slot, name=name)
            for side, generation, slot, name in self.iter_slots()
            if name
        ]

    @property
    def ancestor_count(self) -> int:
        return sum(1 for *_, name in self.iter_slots() if name)
