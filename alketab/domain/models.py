"""Pydantic models for the AlKetab wire format and the normalized view model."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SortOrder(str, Enum):
    relevance = "score"
    mushaf = "mushaf"
    revelation = "tanzil"
    alphabetical = "alphabet"

    @property
    def display_name(self) -> str:
        return _SORT_DISPLAY_NAMES[self]

    @classmethod
    def from_wire(cls, value: str | None) -> "SortOrder":
        """Map a server token to a sort order, falling back to mushaf order."""

        if not value:
            return cls.mushaf
        try:
            return cls(value)
        except ValueError:
            return cls.mushaf


_SORT_DISPLAY_NAMES = {
    SortOrder.relevance: "Relevance",
    SortOrder.mushaf: "Mushaf Order",
    SortOrder.revelation: "Revelation Order",
    SortOrder.alphabetical: "Alphabetical",
}


# ---------------------------------------------------------------------------
# Wire format
# ---------------------------------------------------------------------------


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RawAdjacentAya(_WireModel):
    id: int | None = None
    sura: str | None = None
    sura_arabic: str | None = None
    text: str | None = None


class RawAya(_WireModel):
    id: int | None = None
    text: str | None = None
    text_no_highlight: str | None = None
    recitation: str | None = None
    translation: str | None = None
    next_aya: RawAdjacentAya | None = None
    prev_aya: RawAdjacentAya | None = None


class RawIdentifier(_WireModel):
    gid: int | None = None
    aya_id: int | None = None
    sura_id: int | None = None
    sura_name: str | None = None
    sura_arabic_name: str | None = None


class RawPosition(_WireModel):
    page: int | None = None
    page_in: int | None = Field(default=None, alias="page_IN")
    juz: int | None = None
    hizb: int | None = None
    rub: int | None = None
    manzil: int | None = None
    ruku: int | None = None


class RawSura(_WireModel):
    id: int | None = None
    name: str | None = None
    arabic_name: str | None = None
    english_name: str | None = None
    type: str | None = None
    arabic_type: str | None = None
    ayas: int | None = None
    order: int | None = None


class Theme(_WireModel):
    chapter: str | None = None
    topic: str | None = None
    subtopic: str | None = None


class RawSajda(_WireModel):
    exist: bool | None = None
    id: int | None = None
    type: str | None = None


class RawStat(_WireModel):
    letters: int | None = None
    words: int | None = None
    godnames: int | None = None


class RawAyaEntry(_WireModel):
    aya: RawAya | None = None
    identifier: RawIdentifier | None = None
    position: RawPosition | None = None
    sura: RawSura | None = None
    theme: Theme | None = None
    sajda: RawSajda | None = None
    stat: RawStat | None = None


class RawInterval(_WireModel):
    start: int | None = None
    end: int | None = None
    page: int | None = None
    nb_pages: int | None = None
    total: int | None = None


class RawGlobalWordStats(_WireModel):
    nb_matches: int | None = None
    nb_words: int | None = None
    nb_vocalizations: int | None = None


class RawWordStat(_WireModel):
    word: str | None = None
    nb_matches: int | None = None
    nb_ayas: int | None = None
    root: str | None = None
    lemma: str | None = None
    romanization: str | None = None
    derivations: list[str] | None = None
    nb_derivations: int | None = None
    derivations_extra: list[str] | None = None
    nb_derivations_extra: int | None = None
    synonyms: list[str] | None = None
    nb_synonyms: int | None = None
    vocalizations: list[str] | None = None
    nb_vocalizations: int | None = None


class RawWords(_WireModel):
    global_: RawGlobalWordStats | None = Field(default=None, alias="global")
    individual: dict[int, RawWordStat] | None = None


class RawSearch(_WireModel):
    # Keys are stringified positional indices; ordering happens in normalization.
    ayas: dict[str, RawAyaEntry] | None = None
    interval: RawInterval | None = None
    runtime: float | None = None
    words: RawWords | None = None


class RawAiMeta(_WireModel):
    explain: str | None = None
    generated_query: str | None = None
    sort_by: str | None = None
    user_query: str | None = None
    query_language: str | None = None
    proofread_user_query: str | None = None
    ai_timing_ms: int | None = None


class RawApiResponse(_WireModel):
    success: bool = False
    search: RawSearch | None = None
    ai: RawAiMeta | None = None


# ---------------------------------------------------------------------------
# Normalized view model
# ---------------------------------------------------------------------------


class NormalizedVerse(BaseModel):
    id: int
    text_plain: str = ""
    text_highlighted: str = ""
    surah_id: int = 0
    surah_name_local: str = ""
    surah_name_alt: str = ""
    verse_number: int = 0
    page_number: int = 0
    recitation_url: str | None = None
    prev_verse_text: str | None = None
    next_verse_text: str | None = None
    prev_verse_id: int | None = None
    next_verse_id: int | None = None
    theme: Theme | None = None


class WordStat(BaseModel):
    word: str = ""
    match_count: int = 0
    verse_count: int = 0
    root: str = ""
    lemma: str = ""
    romanization: str = ""
    derivations: list[str] = Field(default_factory=list)
    synonyms: list[str] = Field(default_factory=list)
    vocalizations: list[str] = Field(default_factory=list)


class WordStats(BaseModel):
    match_count: int = 0
    word_count: int = 0
    vocalization_count: int = 0
    # Keyed by the server's 1-based rank, in the order the server ranked them.
    words: dict[int, WordStat] = Field(default_factory=dict)


class Pagination(BaseModel):
    current_page: int = 1
    total_pages: int = 1
    total_results: int = 0
    start_index: int = 1
    end_index: int = 1


class NormalizedPage(BaseModel):
    verses: list[NormalizedVerse] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)
    runtime: float = 0.0
    word_stats: WordStats | None = None
    ai_explanation: str | None = None
    continuation_token: str | None = None
    sort_order: SortOrder = SortOrder.mushaf
    query_language: str | None = None
    proofread_query: str | None = None

    @property
    def page(self) -> int:
        return self.pagination.current_page

    @property
    def total_pages(self) -> int:
        return self.pagination.total_pages

    @property
    def total_results(self) -> int:
        return self.pagination.total_results


__all__ = [
    "NormalizedPage",
    "NormalizedVerse",
    "Pagination",
    "RawAdjacentAya",
    "RawAiMeta",
    "RawApiResponse",
    "RawAya",
    "RawAyaEntry",
    "RawIdentifier",
    "RawInterval",
    "RawPosition",
    "RawSearch",
    "RawWords",
    "RawWordStat",
    "SortOrder",
    "Theme",
    "WordStat",
    "WordStats",
]
