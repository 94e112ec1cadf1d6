"""Pedigree Reader - ASCII pedigree tree import backend.

FastAPI server that turns pasted or uploaded pedigree trees into the animal
record's 62 pedigree fields.
"""

import logging
import os
from contextlib import asynccontextmanager

# Configure logging
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("pedigree_reader")

from fastapi import FastAPI, HTTPException, UploadFile, File
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from config import load_settings
from field_mapper import detect_pedigree_depth, map_pedigree_to_fields, summarize_pedigree
from pedigree_models import ParsedPedigree
from pedigree_parser import PedigreeParseError, analyze_pedigree_text

# Load settings (environment and .env)
settings = load_settings()

SUBJECT_HINT = (
    "Check that the animal's own line carries its annotation in the form "
    "'(breed, sex, year)', e.g. 'LASCAUX DU VERN (Baudet du Poitou, Mâle, 2021)'."
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan."""
    logger.info(
        f"Pedigree reader ready (tab width {settings.tab_width}, "
        f"generation step {'inferred' if settings.infer_generation_step else settings.generation_step}, "
        f"max {settings.max_lines} lines)"
    )
    yield
    logger.info("Pedigree reader stopped")


# Create FastAPI app
app = FastAPI(
    title="Pedigree Reader",
    description="Reconstructs 5-generation pedigrees from ASCII trees",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class PedigreeTextRequest(BaseModel):
    """Pasted pedigree tree."""
    text: str


class PedigreeParseResponse(BaseModel):
    """Parsed pedigree plus the flat fields ready to apply to a record."""
    message: str
    pedigree: ParsedPedigree
    fields: dict[str, str]
    summary: dict
    depth: int


def _parse_or_raise(text: str, source: str) -> PedigreeParseResponse:
    """Run the parser and mapper, converting failures to HTTP errors."""
    line_count = len(text.splitlines())
    if line_count > settings.max_lines:
        logger.warning(f"Rejected {source}: {line_count} lines exceeds limit of {settings.max_lines}")
        raise HTTPException(
            status_code=413,
            detail=f"Pedigree text too long ({line_count} lines, limit {settings.max_lines})",
        )

    try:
        pedigree = analyze_pedigree_text(text, settings)
    except PedigreeParseError as e:
        logger.warning(f"Could not analyze {source} ({e.reason}): {e.message}")
        raise HTTPException(
            status_code=422,
            detail={"reason": e.reason, "message": e.message, "hint": SUBJECT_HINT},
        )

    fields = map_pedigree_to_fields(pedigree)
    logger.info(f"Mapped {len(fields)} pedigree fields from {source}")

    return PedigreeParseResponse(
        message=f"Found {len(fields)} ancestors for {pedigree.subject.name or 'the subject'}",
        pedigree=pedigree,
        fields=fields,
        summary=summarize_pedigree(pedigree),
        depth=detect_pedigree_depth(fields),
    )


# Endpoints

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    logger.debug("Health check requested")
    return {"status": "healthy"}


@app.post("/pedigree/parse", response_model=PedigreeParseResponse)
def parse_pedigree(request: PedigreeTextRequest):
    """Parse a pasted pedigree tree."""
    logger.info(f"Received pasted pedigree ({len(request.text)} chars)")
    return _parse_or_raise(request.text, "pasted text")


@app.post("/pedigree/upload", response_model=PedigreeParseResponse)
async def upload_pedigree(file: UploadFile = File(...)):
    """Upload a plain-text pedigree tree."""
    logger.info(f"Received pedigree file upload: {file.filename}")

    if not (file.filename or "").lower().endswith(".txt"):
        logger.warning(f"Invalid file type: {file.filename}")
        raise HTTPException(status_code=400, detail="File must be a plain text file (.txt)")

    content = await file.read()
    logger.debug(f"Read {len(content)} bytes from file")
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.info("UTF-8 decode failed, trying latin-1 encoding")
        text = content.decode("latin-1")

    return _parse_or_raise(text, file.filename)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
