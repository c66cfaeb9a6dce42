from collections import Counter
from contextlib import asynccontextmanager
from fastapi import FastAPI, Body, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from typing import Any, AsyncIterator, List, Literal, Optional
import logging
import re

from api.config import settings
from api import relay
from api.demo import DEMO_LOGS, DEMO_RECORDS, DEMO_SUBJECT_ID
from api.profiler import ProfileDocument, ProfileError, ProfileGenerator
from scrapers.base import ListingRecord
from scrapers.config import CrawlConfig, get_category_summary
from scrapers.exceptions import EmptyResult, InvalidImport, TransportUnavailable
from scrapers.manager import CrawlManager
from scrapers.utils.extractors import extract_subject_id
from scrapers.utils.normalizers import normalize_imported_records
from pydantic import BaseModel, Field

# Setup logging directory
settings.log_dir.mkdir(exist_ok=True)


# Custom formatter to strip ANSI color codes from file logs
class ColorStripFormatter(logging.Formatter):
    """Formatter that strips ANSI color codes from log messages."""
    ansi_escape = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')

    def format(self, record):
        message = super().format(record)
        return self.ansi_escape.sub('', message)


# Setup logging with color support for console, stripped for file
file_handler = logging.FileHandler(settings.log_file, encoding='utf-8')
file_handler.setFormatter(ColorStripFormatter(settings.log_format))

console_handler = logging.StreamHandler()
console_handler.setFormatter(logging.Formatter(settings.log_format))

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    handlers=[file_handler, console_handler],
    force=True  # Override any existing configuration
)

# Category loggers ('scraper.MOVIE', ...) get their own handlers so lines appear once
scraper_logger = logging.getLogger('scraper')
scraper_logger.propagate = False
if not scraper_logger.handlers:
    scraper_file_handler = logging.FileHandler(settings.log_file, encoding='utf-8')
    scraper_file_handler.setFormatter(ColorStripFormatter(settings.log_format))
    scraper_logger.addHandler(scraper_file_handler)

    scraper_console_handler = logging.StreamHandler()
    scraper_console_handler.setFormatter(logging.Formatter(settings.log_format))
    scraper_logger.addHandler(scraper_console_handler)
scraper_logger.setLevel(getattr(logging, settings.log_level.upper()))

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info("=" * 60)
    logger.info("Douban Persona Backend Starting Up")
    logger.info("=" * 60)
    logger.info(f"Log file: {settings.log_file}")
    logger.info(f"Relay URL: {settings.relay_url}")
    logger.info(f"CORS origins: {settings.cors_origins}")
    if not settings.llm_api_key:
        logger.warning("LLM_API_KEY is not set; /api/analyze will fail")
    logger.info("Backend ready to accept requests")

    yield  # Application runs here

    logger.info("Shutdown complete")


app = FastAPI(
    title="Douban Persona API",
    version="1.0.0",
    lifespan=lifespan
)

# Local fetch relay used by the crawler
app.include_router(relay.router)

# Note: allow_credentials must be False when allow_origins is ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/favicon.ico", include_in_schema=False)
async def favicon():
    """Return empty response for favicon requests"""
    return Response(status_code=204)


# Pydantic models for API requests and responses
class RecordModel(BaseModel):
    title: str
    category: Literal["movie", "book", "music"] = "movie"
    rating: int = Field(0, ge=0, le=5)
    comment: str = ""
    date: str = ""
    tags: List[str] = Field(default_factory=list)

    def to_record(self) -> ListingRecord:
        return ListingRecord(**self.model_dump())


class CrawlRequest(BaseModel):
    input: str                      # Profile URL or bare user id
    cookie: Optional[str] = None


class CrawlResponse(BaseModel):
    subject_id: str
    total: int
    records: List[RecordModel]
    logs: List[str]
    summary: dict


class ImportResponse(BaseModel):
    total: int
    records: List[RecordModel]


class AnalyzeRequest(BaseModel):
    records: List[RecordModel]
    enable_image_gen: bool = False
    mode: Literal["normal", "roast"] = "normal"


# Dependencies (overridden in tests)
async def get_crawl_manager() -> AsyncIterator[CrawlManager]:
    manager = CrawlManager(CrawlConfig.from_settings(settings))
    try:
        yield manager
    finally:
        await manager.close()


def get_profile_generator() -> ProfileGenerator:
    return ProfileGenerator.from_settings(settings)


# API Endpoints

@app.get("/")
async def root():
    return {"message": "Douban Persona API", "version": "1.0.0"}


@app.get("/api/categories")
async def list_categories():
    """List the collection categories the crawler walks."""
    return get_category_summary()


@app.post("/api/crawl", response_model=CrawlResponse)
async def crawl(request: CrawlRequest, manager: CrawlManager = Depends(get_crawl_manager)):
    """Crawl a user's movie, book and music collections."""
    subject_id = extract_subject_id(request.input)
    if not subject_id:
        raise HTTPException(status_code=400, detail="Invalid Douban link or UID format")

    logs: List[str] = []
    try:
        records = await manager.crawl(subject_id, request.cookie, logs.append)
    except TransportUnavailable as e:
        logger.error(f"Crawl aborted for {subject_id}: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    except EmptyResult as e:
        logger.warning(f"Crawl for {subject_id} returned no data")
        raise HTTPException(status_code=404, detail=str(e))

    return CrawlResponse(
        subject_id=subject_id,
        total=len(records),
        records=[RecordModel(**r.to_dict()) for r in records],
        logs=logs,
        summary=manager.get_results_summary(),
    )


@app.get("/api/demo", response_model=CrawlResponse)
async def demo():
    """Return the bundled demo collection in the same shape as a crawl."""
    counts = Counter(r.category for r in DEMO_RECORDS)
    return CrawlResponse(
        subject_id=DEMO_SUBJECT_ID,
        total=len(DEMO_RECORDS),
        records=[RecordModel(**r.to_dict()) for r in DEMO_RECORDS],
        logs=list(DEMO_LOGS),
        summary={
            'total_categories': len(counts),
            'successful': len(counts),
            'failed': 0,
            'total_records': len(DEMO_RECORDS),
        },
    )


@app.post("/api/import", response_model=ImportResponse)
async def import_records(payload: Any = Body(...)):
    """Validate and normalize a JSON export of records."""
    try:
        records = normalize_imported_records(payload)
    except InvalidImport as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ImportResponse(
        total=len(records),
        records=[RecordModel(**r.to_dict()) for r in records],
    )


@app.post("/api/analyze", response_model=ProfileDocument, response_model_by_alias=True)
async def analyze(request: AnalyzeRequest, generator: ProfileGenerator = Depends(get_profile_generator)):
    """Generate a profile for a list of records."""
    if not request.records:
        raise HTTPException(status_code=400, detail="No records to analyze")

    records = [r.to_record() for r in request.records]
    try:
        return await generator.analyze(records, request.enable_image_gen, request.mode)
    except ProfileError as e:
        logger.error(f"Profile generation failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))
