"""Line pre-processing for ASCII pedigree trees.

Turns a raw text block into RawLine records: the connector prefix is treated as
indentation, so the depth of a line is the column where the ancestor's name
starts, whatever mix of spaces, tabs and box-drawing glyphs precedes it.
"""

import logging
from dataclasses import dataclass

from pedigree_models import Branch

logger = logging.getLogger("pedigree_reader.lines")


# Glyphs used to draw tree branches. They count as indentation, never as content.
VERTICAL_GLYPHS = "│┃┆┇┊┋║|"
HORIZONTAL_GLYPHS = "─━┄┅┈┉═-–—~"
UPPER_CORNER_GLYPHS = "┌┍┎┏╒╓╔╭/"
LOWER_CORNER_GLYPHS = "└┕┖┗╘╙╚╰\\`"
JUNCTION_GLYPHS = "├┝┠┣╞╟╠┤┥┨┫╡╢╣┬┯┳╤╥╦┴┷┻╧╨╩┼┿╋╪╫╬┐┑┒┓╕╖╗╮┘┙┚┛╛╜╝╯+"
BULLET_GLYPHS = "•►▸▶·*="

CONNECTOR_GLYPHS = frozenset(
    VERTICAL_GLYPHS
    + HORIZONTAL_GLYPHS
    + UPPER_CORNER_GLYPHS
    + LOWER_CORNER_GLYPHS
    + JUNCTION_GLYPHS
    + BULLET_GLYPHS
)


@dataclass
class RawLine:
    """One non-blank input line, alive only for the duration of a parse."""
    index: int
    text: str
    prefix: str
    depth: int
    content: str
    branch: Branch | None = None
    is_subject: bool = False


def is_filler(char: str) -> bool:
    """True for whitespace and tree connector glyphs."""
    return char.isspace() or char in CONNECTOR_GLYPHS


def indentation_depth(line: str) -> int:
    """Column of the first character that is neither whitespace nor a connector glyph.

    Tabs must already be expanded. A line made only of filler returns its length.
    """
    for column, char in enumerate(line):
        if not is_filler(char):
            return column
    return len(line)


def branch_from_prefix(prefix: str) -> Branch | None:
    """Read the corner glyph nearest to the name.

    An opening corner draws the upper (sire) branch of a fork, a closing corner
    the lower (dam) branch. Tees, crosses and bare indentation carry no hint.
    """
    for char in reversed(prefix):
        if char.isspace() or char in HORIZONTAL_GLYPHS:
            continue
        if char in UPPER_CORNER_GLYPHS:
            return Branch.UPPER
        if char in LOWER_CORNER_GLYPHS:
            return Branch.LOWER
        return None
    return None


def clean_name(content: str) -> str:
    """Collapse internal whitespace; parenthetical annotations are kept."""
    return " ".join(content.split())


def is_annotation(content: str, annotation_prefixes: tuple[str, ...]) -> bool:
    """Registration labels such as 'UELN: 250...' printed on their own line."""
    upper = content.upper()
    return any(upper.startswith(prefix.upper()) for prefix in annotation_prefixes)


def preprocess_lines(
    text: str,
    tab_width: int = 4,
    annotation_prefixes: tuple[str, ...] = (),
) -> list[RawLine]:
    """
    Split text into RawLines, dropping blank lines, pure decoration lines and
    annotation lines. Line indexes refer to the original text.
    """
    lines = []

    for index, original in enumerate(text.splitlines()):
        expanded = original.expandtabs(tab_width).rstrip()
        if not expanded.strip():
            continue

        depth = indentation_depth(expanded)
        content = clean_name(expanded[depth:])
        if not content:
            logger.debug(f"Line {index}: connector glyphs only, skipped")
            continue
        if is_annotation(content, annotation_prefixes):
            logger.debug(f"Line {index}: annotation '{content}' skipped")
            continue

        prefix = expanded[:depth]
        lines.append(RawLine(
            index=index,
            text=original,
            prefix=prefix,
            depth=depth,
            content=content,
            branch=branch_from_prefix(prefix),
        ))

    return lines
