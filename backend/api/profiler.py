"""
Profile generator client.

Condenses a list of ListingRecords into a prompt, sends it to an
OpenAI-compatible chat-completions endpoint (DeepSeek by default) and
parses the JSON answer into a ProfileDocument.
"""

import json
import logging
from collections import Counter
from typing import List, Literal, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from api.prompts import SYSTEM_INSTRUCTION, ROAST_MODE_INSTRUCTION, USER_PROMPT_TEMPLATE, ROAST_REMINDER
from scrapers.base import ListingRecord
from scrapers.config import CATEGORIES

logger = logging.getLogger(__name__)

# Records sent to the model at most
MAX_ITEMS = 100
# Tags reported in the statistics header
TOP_TAG_COUNT = 15
# Tags at least this long are treated as free text, not genres
MAX_TAG_LENGTH = 10

ProfileMode = Literal["normal", "roast"]


class ProfileError(Exception):
    """The profile generator could not produce a profile."""
    pass


# Pydantic models for the generated profile (camelCase on the wire)
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenreScore(CamelModel):
    name: str
    value: float = 0


class AnalysisLayer1(CamelModel):
    top_genres: List[GenreScore] = Field(default_factory=list)
    visual_preferences: List[str] = Field(default_factory=list)
    narrative_preferences: List[str] = Field(default_factory=list)
    favorites_analysis: str = ""
    hated_analysis: str = ""
    book_music_analysis: Optional[str] = None
    summary: str = ""


class AnalysisLayer2(CamelModel):
    logic_score: int = 0
    emotional_score: int = 0
    critical_thinking_level: str = ""
    vocabulary_complexity: str = ""
    writing_style_analysis: str = ""
    summary: str = ""


class AnalysisLayer3(CamelModel):
    openness: int = 0
    conscientiousness: int = 0
    extraversion: int = 0
    agreeableness: int = 0
    neuroticism: int = 0
    mbti: str = ""
    archetype: str = ""
    summary: str = ""


class AnalysisLayer4(CamelModel):
    core_values: List[str] = Field(default_factory=list)
    moral_alignment: str = ""
    ideologies: List[str] = Field(default_factory=list)
    philosophical_leaning: str = ""
    life_view_summary: str = ""


class HighlightReview(CamelModel):
    title: str
    quote: str = ""
    commentary: str = ""
    category: str = "movie"


class Recommendation(CamelModel):
    title: str
    type: str = "movie"
    reason: str = ""


class ProfileDocument(CamelModel):
    layer1: AnalysisLayer1 = Field(default_factory=AnalysisLayer1)
    layer2: AnalysisLayer2 = Field(default_factory=AnalysisLayer2)
    layer3: AnalysisLayer3 = Field(default_factory=AnalysisLayer3)
    layer4: AnalysisLayer4 = Field(default_factory=AnalysisLayer4)
    highlight_reviews: List[HighlightReview] = Field(default_factory=list)
    recommendations: List[Recommendation] = Field(default_factory=list)
    avatar_prompt: str = ""
    avatar_base64: Optional[str] = None
    overall_summary: str = ""


def select_records(records: List[ListingRecord], limit: int = MAX_ITEMS) -> List[ListingRecord]:
    """
    Pick the records worth sending to the model.

    Commented records are preferred once there are more than `limit`.
    """
    if len(records) <= limit:
        return records
    with_comments = [r for r in records if r.comment and len(r.comment) > 2]
    if len(with_comments) >= limit:
        return with_comments[:limit]
    return records[:limit]


def calculate_top_tags(records: List[ListingRecord], top: int = TOP_TAG_COUNT) -> str:
    """Most frequent short tags across all records, comma separated."""
    counts = Counter(
        tag for r in records for tag in r.tags
        if tag and len(tag) < MAX_TAG_LENGTH
    )
    return ", ".join(tag for tag, _ in counts.most_common(top))


def compress_records(records: List[ListingRecord]) -> str:
    """One line per record: year, icon, title, rating and quoted comment."""
    lines = []
    for r in records:
        config = CATEGORIES.get(r.category)
        icon = config.icon if config else CATEGORIES['movie'].icon
        comment = f'"{r.comment}"' if r.comment else ""
        lines.append(f"{r.year} {icon} 《{r.title}》 {r.rating}★ {comment}")
    return "\n".join(lines)


def clean_json(text: str) -> str:
    """Strip a markdown code fence around a JSON answer."""
    clean = text.strip()
    if clean.startswith("```json"):
        clean = clean[len("```json"):]
    elif clean.startswith("```"):
        clean = clean[len("```"):]
    if clean.endswith("```"):
        clean = clean[:-3]
    return clean.strip()


class ProfileGenerator:
    """
    Client for the profile-generating language model.

    The API key is passed in explicitly; nothing here reads the environment.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.deepseek.com/chat/completions",
        model: str = "deepseek-chat",
        max_tokens: int = 4000,
        timeout: float = 120.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings=None, client: Optional[httpx.AsyncClient] = None) -> 'ProfileGenerator':
        if settings is None:
            from api.config import settings
        return cls(
            api_key=settings.llm_api_key,
            api_url=settings.llm_api_url,
            model=settings.llm_model,
            max_tokens=settings.llm_max_tokens,
            timeout=settings.llm_timeout,
            client=client,
        )

    def build_messages(self, records: List[ListingRecord], mode: ProfileMode = "normal") -> list:
        """System and user messages for a set of records."""
        selected = select_records(records)
        system = SYSTEM_INSTRUCTION
        if mode == "roast":
            system += f"\n\n{ROAST_MODE_INSTRUCTION}"

        user = USER_PROMPT_TEMPLATE.format(
            total=len(records),
            top_tags=calculate_top_tags(records),
            selected=len(selected),
            logs=compress_records(selected),
            reminder=ROAST_REMINDER if mode == "roast" else "",
        )
        return [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ]

    async def analyze(
        self,
        records: List[ListingRecord],
        enable_image_gen: bool = False,
        mode: ProfileMode = "normal"
    ) -> ProfileDocument:
        """
        Generate a profile for the records.

        Raises:
            ProfileError: Missing key, HTTP failure or an unusable answer
        """
        if not self.api_key:
            raise ProfileError("Missing API Key")

        payload = {
            "model": self.model,
            "messages": self.build_messages(records, mode),
            "response_format": {"type": "json_object"},
            "temperature": 1.3 if mode == "roast" else 1.0,
            "max_tokens": self.max_tokens,
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

        logger.info(f"Requesting {mode} profile for {len(records)} records from {self.model}")
        try:
            if self._client is not None:
                response = await self._client.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.api_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Profile request failed: {e}")
            raise ProfileError(f"Profile request failed: {e}") from e

        if response.status_code >= 400:
            body = response.text
            logger.error(f"Profile API error {response.status_code}: {body}")
            if "Balance insufficient" in body:
                raise ProfileError("API balance insufficient, please top up the account.")
            raise ProfileError(f"Profile request failed: {response.status_code} - {body}")

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProfileError(f"Unexpected profile API response: {e}") from e
        if not content:
            raise ProfileError("Profile API returned empty content")

        try:
            profile = ProfileDocument.model_validate(json.loads(clean_json(content)))
        except (ValueError, ValidationError) as e:
            raise ProfileError(f"Profile is not valid JSON: {e}") from e

        # The model only writes the avatar prompt; no image backend is wired in
        profile.avatar_base64 = None
        if enable_image_gen and profile.avatar_prompt:
            logger.info(f"Avatar prompt generated (no image backend configured): {profile.avatar_prompt}")

        return profile
