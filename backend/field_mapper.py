"""Flattening of a ParsedPedigree into the animal record's pedigree fields."""

import logging
from typing import Any

from pedigree_models import MAX_GENERATION, ParsedPedigree, Side, slots_per_side

logger = logging.getLogger("pedigree_reader.field_mapper")


# ============================================================================
# Canonical Field Table
# ============================================================================

_GEN4_SUFFIXES = (
    "ggggf", "ggggm", "gggmf", "gggmm",
    "ggfgf", "ggfgm", "ggmgf", "ggmgm",
)

PEDIGREE_FIELDS: dict[tuple[Side, int, int], str] = {
    (Side.PATERNAL, 1, 0): "father_id",
    (Side.MATERNAL, 1, 0): "mother_id",

    (Side.PATERNAL, 2, 0): "paternal_grandfather_id",
    (Side.PATERNAL, 2, 1): "paternal_grandmother_id",
    (Side.MATERNAL, 2, 0): "maternal_grandfather_id",
    (Side.MATERNAL, 2, 1): "maternal_grandmother_id",

    (Side.PATERNAL, 3, 0): "paternal_great_grandfather_paternal_id",
    (Side.PATERNAL, 3, 1): "paternal_great_grandmother_paternal_id",
    (Side.PATERNAL, 3, 2): "paternal_great_grandfather_maternal_id",
    (Side.PATERNAL, 3, 3): "paternal_great_grandmother_maternal_id",
    (Side.MATERNAL, 3, 0): "maternal_great_grandfather_paternal_id",
    (Side.MATERNAL, 3, 1): "maternal_great_grandmother_paternal_id",
    (Side.MATERNAL, 3, 2): "maternal_great_grandfather_maternal_id",
    (Side.MATERNAL, 3, 3): "maternal_great_grandmother_maternal_id",
}

PEDIGREE_FIELDS.update({
    (side, 4, slot): f"gen4_{side.value}_{suffix}_{side.value[0]}"
    for slot, suffix in enumerate(_GEN4_SUFFIXES)
    for side in Side
})

PEDIGREE_FIELDS.update({
    (side, 5, slot): f"gen5_{side.value}_{slot + 1}"
    for slot in range(slots_per_side(5))
    for side in Side
})

FIELD_GENERATIONS: dict[str, int] = {
    field: generation for (_, generation, _), field in PEDIGREE_FIELDS.items()
}


# ============================================================================
# Mapping
# ============================================================================

def map_pedigree_to_fields(parsed: ParsedPedigree) -> dict[str, str]:
    """Canonical field name -> ancestor name, for populated slots only."""
    fields = {}
    for (side, generation, slot), field in PEDIGREE_FIELDS.items():
        name = (parsed.get_slot(side, generation, slot) or "").strip()
        if name:
            fields[field] = name
    return fields


def detect_pedigree_depth(fields: dict[str, Any]) -> int:
    """
    Deepest generation holding data in a flat pedigree record.

    Unknown keys and empty values are ignored. Returns 1 when nothing is
    filled in, since a record always tracks at least its parents.
    """
    deepest = 0
    for field, value in fields.items():
        generation = FIELD_GENERATIONS.get(field)
        if generation and value and str(value).strip():
            deepest = max(deepest, generation)
    return deepest or 1


def summarize_pedigree(parsed: ParsedPedigree) -> dict[str, Any]:
    """Per-generation fill counts and the fields still missing, for previews."""
    generations = []
    for generation in range(1, MAX_GENERATION + 1):
        populated = 0
        missing = []
        for side in (Side.PATERNAL, Side.MATERNAL):
            for slot in range(slots_per_side(generation)):
                if (parsed.get_slot(side, generation, slot) or "").strip():
                    populated += 1
                else:
                    missing.append(PEDIGREE_FIELDS[(side, generation, slot)])
        generations.append({
            "generation": generation,
            "populated": populated,
            "total": 2 * slots_per_side(generation),
            "missing": missing,
        })

    total = sum(g["populated"] for g in generations)
    logger.debug(f"Pedigree summary: {total}/{len(PEDIGREE_FIELDS)} slots filled")
    return {
        "populated": total,
        "total": len(PEDIGREE_FIELDS),
        "generations": generations,
    }
