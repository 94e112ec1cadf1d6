"""Runtime settings for the pedigree reader."""

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger("pedigree_reader.config")


DEFAULT_TAB_WIDTH = 4
DEFAULT_GENERATION_STEP = 4


class PedigreeSettings(BaseModel):
    """Tunable knobs for the tree parser and the HTTP layer."""

    model_config = ConfigDict(frozen=True)

    tab_width: int = Field(default=DEFAULT_TAB_WIDTH, ge=1, le=16)
    generation_step: int = Field(
        default=DEFAULT_GENERATION_STEP,
        ge=1,
        description="Columns between two generations in the drawn tree.",
    )
    infer_generation_step: bool = Field(
        default=False,
        description="Measure the step from the document instead of using generation_step.",
    )
    min_birth_year: int = 1900
    max_birth_year: int = 2099
    max_lines: int = Field(default=2000, ge=1)
    annotation_prefixes: tuple[str, ...] = ("UELN:",)


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> PedigreeSettings:
    """Build settings from the environment (and a .env file if present)."""
    load_dotenv()

    overrides: dict = {}
    env_map = {
        "PEDIGREE_TAB_WIDTH": "tab_width",
        "PEDIGREE_GENERATION_STEP": "generation_step",
        "PEDIGREE_MIN_YEAR": "min_birth_year",
        "PEDIGREE_MAX_YEAR": "max_birth_year",
        "PEDIGREE_MAX_LINES": "max_lines",
    }
    for env_name, field_name in env_map.items():
        raw = os.environ.get(env_name)
        if raw:
            overrides[field_name] = raw

    infer = os.environ.get("PEDIGREE_INFER_STEP")
    if infer:
        overrides["infer_generation_step"] = _env_bool(infer)

    prefixes = os.environ.get("PEDIGREE_ANNOTATION_PREFIXES")
    if prefixes is not None:
        overrides["annotation_prefixes"] = tuple(p.strip() for p in prefixes.split(",") if p.strip())

    try:
        settings = PedigreeSettings(**overrides)
    except ValidationError as e:
        logger.error(f"Invalid pedigree settings in environment: {e}")
        raise

    logger.debug(f"Loaded settings: {settings.model_dump()}")
    return settings
