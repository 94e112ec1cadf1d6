"""ASCII tree pedigree parser.

Recovers a 5-generation pedigree from an indented text tree. The subject is the
one line annotated as ``NAME (breed, sex, year)``; the sire's lineage is drawn
above it and the dam's below. Indentation gives the generation and order of
appearance gives the slot.

┌── PADRE
│   └── ABUELA PATERNA
LASCAUX DU VERN  (Baudet du Poitou, Mâle, 2021)
└── MADRE
"""

import logging
import math
import re

from config import PedigreeSettings
from pedigree_lines import RawLine, preprocess_lines
from pedigree_models import (
    MAX_GENERATION,
    NAMED_SLOTS,
    AncestorEntry,
    Branch,
    ParsedPedigree,
    Side,
    SubjectInfo,
    slots_per_side,
)

logger = logging.getLogger("pedigree_reader.parser")


SEX_VOCABULARY = {
    # English
    "male": "male",
    "female": "female",
    "m": "male",
    "f": "female",
    # French
    "mâle": "male",
    "femelle": "female",
    # Spanish
    "macho": "male",
    "hembra": "female",
    "masculino": "male",
    "femenino": "female",
    "h": "female",
    # Symbols
    "♂": "male",
    "♀": "female",
}

PAREN_GROUP_RE = re.compile(r"\(([^()]*)\)")
YEAR_RE = re.compile(r"\d{4}")


# ============================================================================
# Errors
# ============================================================================

class PedigreeParseError(Exception):
    """Base error: the text could not be turned into a pedigree."""
    reason = "unparseable"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoSubjectFoundError(PedigreeParseError):
    reason = "no_subject"


class AmbiguousSubjectError(PedigreeParseError):
    reason = "ambiguous_subject"

    def __init__(self, message: str, line_indexes: list[int]):
        super().__init__(message)
        self.line_indexes = line_indexes


class EmptyTreeError(PedigreeParseError):
    reason = "empty_tree"


# ============================================================================
# Subject Detection
# ============================================================================

def match_subject(content: str, settings: PedigreeSettings | None = None) -> SubjectInfo | None:
    """
    Return SubjectInfo when the line carries a ``(breed, sex, year)`` group.

    The group must hold exactly three non-empty comma-separated parts, the year
    last and exactly four digits inside the configured range. Registration
    numbers or notes in parentheses never have that shape.
    """
    settings = settings or PedigreeSettings()

    for match in PAREN_GROUP_RE.finditer(content):
        parts = [part.strip() for part in match.group(1).split(",")]
        if len(parts) != 3 or not all(parts):
            continue

        breed, sex_token, year_token = parts
        if not YEAR_RE.fullmatch(year_token):
            continue
        year = int(year_token)
        if not settings.min_birth_year <= year <= settings.max_birth_year:
            continue

        sex = SEX_VOCABULARY.get(sex_token.casefold().rstrip("."))
        if not sex:
            continue

        return SubjectInfo(
            name=content[:match.start()].strip(),
            breed=breed,
            sex=sex,
            birth_year=year,
        )

    return None


def detect_subject(lines: list[RawLine], settings: PedigreeSettings) -> tuple[RawLine, SubjectInfo]:
    """Find the single subject line. Raises when there is none or more than one."""
    candidates = []
    for line in lines:
        info = match_subject(line.content, settings)
        if info:
            candidates.append((line, info))

    if not candidates:
        raise NoSubjectFoundError(
            "No subject line found. The animal's own line must end with "
            "'(breed, sex, year)', e.g. '(Baudet du Poitou, Mâle, 2021)'."
        )
    if len(candidates) > 1:
        indexes = [line.index for line, _ in candidates]
        raise AmbiguousSubjectError(
            f"{len(candidates)} lines look like the subject (lines {', '.join(str(i + 1) for i in indexes)}). "
            "Only the animal's own line may carry the '(breed, sex, year)' annotation.",
            indexes,
        )

    subject, info = candidates[0]
    subject.is_subject = True
    return subject, info


# ============================================================================
# Generation and Lineage Classification
# ============================================================================

def infer_generation_step(distances: list[int], parent_distance: int) -> int | None:
    """Columns between the parent column and the next deeper column, if any."""
    deeper = sorted({d for d in distances if d > parent_distance})
    if not deeper:
        return None
    return deeper[0] - parent_distance


def generation_for(distance: int, step: int, offset: int = 0) -> int:
    """
    Generation of a line ``distance`` columns away from the subject.

    Every ``step`` columns is one generation, rounded half up and clamped to
    1..5. ``offset`` columns are discounted first when the parents are drawn
    further out than one step.
    """
    generation = math.floor((distance - offset) / step + 0.5)
    return max(1, min(MAX_GENERATION, generation))


def assign_sides(
    ancestors: list[RawLine],
    subject: RawLine,
    generations: dict[int, int],
) -> list[tuple[RawLine, Side]]:
    """
    Lines above the subject are paternal, lines below maternal.

    When the subject is printed first and every ancestor follows it, the block
    is split at the second line in the parent column: the lines before it are
    the sire's lineage, the rest the dam's. Lines above the subject are always
    paternal.
    """
    above = [line for line in ancestors if line.index < subject.index]
    below = [line for line in ancestors if line.index > subject.index]

    if below and not above:
        parents = [line for line in below if generations[line.index] == 1]
        if len(parents) >= 2:
            split_index = parents[1].index
            logger.debug(f"Subject printed first, splitting lineages at line {split_index}")
            return [
                (line, Side.PATERNAL if line.index < split_index else Side.MATERNAL)
                for line in below
            ]

    return [(line, Side.PATERNAL) for line in above] + [(line, Side.MATERNAL) for line in below]


def _next_slot(cursor: int, branch: Branch | None) -> int:
    """Sires take even slots and dams odd ones when the drawing says which."""
    if branch is Branch.UPPER and cursor % 2:
        return cursor + 1
    if branch is Branch.LOWER and not cursor % 2:
        return cursor + 1
    return cursor


def assign_slots(side_lines: list[tuple[RawLine, Side]], generations: dict[int, int]) -> list[AncestorEntry]:
    """
    Give each line a slot in its (side, generation) bucket, in text order.

    Named generations (1-3) overflow into the next generation when full, so a
    second parent-column line on one side becomes a grandparent. Generations 4
    and 5 fill strictly by appearance and drop anything past their capacity.
    """
    cursors: dict[tuple[Side, int], int] = {}
    entries = []

    for line, side in side_lines:
        generation = generations[line.index]

        while True:
            cursor = cursors.get((side, generation), 0)
            # generation 1 has a single slot per side, so the fork glyph means nothing there
            pinned = line.branch if generation in NAMED_SLOTS and generation > 1 else None
            slot = _next_slot(cursor, pinned)

            if slot < slots_per_side(generation):
                cursors[(side, generation)] = slot + 1
                entries.append(AncestorEntry(
                    side=side,
                    generation=generation,
                    slot=slot,
                    name=line.content,
                    line_index=line.index,
                ))
                logger.debug(f"Line {line.index}: {side.value} gen {generation} slot {slot} '{line.content}'")
                break

            if generation not in NAMED_SLOTS or generation == MAX_GENERATION:
                logger.debug(f"Line {line.index}: {side.value} gen {generation} is full, '{line.content}' dropped")
                break
            generation += 1

    return entries


def classify_lines(
    lines: list[RawLine],
    subject: RawLine,
    settings: PedigreeSettings,
) -> list[AncestorEntry]:
    """Turn every non-subject line into a (side, generation, slot) entry."""
    ancestors = [line for line in lines if not line.is_subject]
    distances = {line.index: abs(line.depth - subject.depth) for line in ancestors}
    parent_distance = min(distances.values())

    step = settings.generation_step
    if settings.infer_generation_step:
        step = infer_generation_step(list(distances.values()), parent_distance) or step
        logger.debug(f"Using generation step of {step} columns")

    # Subject printed first with the parents more than a step out
    offset = 0
    subject_first = all(line.index > subject.index for line in ancestors)
    if subject_first and parent_distance > step:
        offset = parent_distance - step
        logger.debug(f"Parents drawn {parent_distance} columns out, discounting {offset}")

    generations = {
        index: generation_for(distance, step, offset)
        for index, distance in distances.items()
    }

    side_lines = assign_sides(ancestors, subject, generations)
    return assign_slots(side_lines, generations)


# ============================================================================
# Entry Points
# ============================================================================

def analyze_pedigree_text(text: str, settings: PedigreeSettings | None = None) -> ParsedPedigree:
    """
    Parse an ASCII pedigree tree, raising PedigreeParseError on failure.

    Never returns a partially built pedigree: either every line was classified
    or an error is raised.
    """
    settings = settings or PedigreeSettings()

    lines = preprocess_lines(text or "", settings.tab_width, settings.annotation_prefixes)
    subject, info = detect_subject(lines, settings)
    logger.debug(f"Subject '{info.name}' at line {subject.index}, depth {subject.depth}")

    if len(lines) == 1:
        raise EmptyTreeError(f"Subject '{info.name}' found but the tree has no ancestor lines.")

    entries = classify_lines(lines, subject, settings)
    pedigree = ParsedPedigree.from_entries(entries, subject=info)

    paternal = sum(1 for e in entries if e.side is Side.PATERNAL)
    logger.info(
        f"Parsed pedigree for '{info.name}': {len(entries)} ancestors "
        f"({paternal} paternal, {len(entries) - paternal} maternal)"
    )
    return pedigree


def parse_ascii_tree_pedigree(text: str, settings: PedigreeSettings | None = None) -> ParsedPedigree | None:
    """Parse an ASCII pedigree tree. Returns None when the tree cannot be analysed."""
    try:
        return analyze_pedigree_text(text, settings)
    except PedigreeParseError as e:
        logger.warning(f"Pedigree text rejected ({e.reason}): {e.message}")
        return None
