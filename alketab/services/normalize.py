"""Conversion of decoded API payloads into the flat view model."""

from __future__ import annotations

from alketab.domain.models import (
    NormalizedPage,
    NormalizedVerse,
    Pagination,
    RawApiResponse,
    RawAyaEntry,
    RawInterval,
    RawWords,
    SortOrder,
    WordStat,
    WordStats,
)


def normalize_response(response: RawApiResponse) -> NormalizedPage | None:
    """Build a ``NormalizedPage`` from a successful payload.

    Returns ``None`` when the payload carries no verse entries at all, which the
    client reports as "no results". Entries lacking their ``aya`` or
    ``identifier`` group are skipped individually.
    """

    search = response.search
    if search is None or not search.ayas:
        return None

    verses = [
        verse
        for _, entry in sorted(search.ayas.items(), key=lambda item: _position(item[0]))
        if (verse := normalize_verse(entry)) is not None
    ]

    ai = response.ai
    return NormalizedPage(
        verses=verses,
        pagination=normalize_interval(search.interval),
        runtime=search.runtime or 0.0,
        word_stats=normalize_words(search.words),
        ai_explanation=ai.explain if ai else None,
        continuation_token=ai.generated_query if ai else None,
        sort_order=SortOrder.from_wire(ai.sort_by if ai else None),
        query_language=ai.query_language if ai else None,
        proofread_query=ai.proofread_user_query if ai else None,
    )


def _position(key: str) -> int:
    """Numeric position of an ``ayas`` key; unparsable keys sort as 0."""

    try:
        return int(key)
    except ValueError:
        return 0


def normalize_verse(entry: RawAyaEntry) -> NormalizedVerse | None:
    aya = entry.aya
    identifier = entry.identifier
    if aya is None or identifier is None:
        return None

    prev_aya = aya.prev_aya
    next_aya = aya.next_aya
    return NormalizedVerse(
        id=identifier.gid or 0,
        text_plain=aya.text_no_highlight or "",
        text_highlighted=aya.text or "",
        surah_id=identifier.sura_id or 0,
        surah_name_local=identifier.sura_arabic_name or "",
        surah_name_alt=identifier.sura_name or "",
        verse_number=identifier.aya_id or 0,
        page_number=(entry.position.page if entry.position else None) or 0,
        recitation_url=aya.recitation,
        prev_verse_text=prev_aya.text if prev_aya else None,
        next_verse_text=next_aya.text if next_aya else None,
        prev_verse_id=prev_aya.id if prev_aya else None,
        next_verse_id=next_aya.id if next_aya else None,
        theme=entry.theme,
    )


def normalize_interval(interval: RawInterval | None) -> Pagination:
    if interval is None:
        return Pagination()
    return Pagination(
        current_page=interval.page or 1,
        total_pages=interval.nb_pages or 1,
        total_results=interval.total or 0,
        start_index=interval.start or 1,
        end_index=interval.end or 1,
    )


def normalize_words(words: RawWords | None) -> WordStats | None:
    if words is None:
        return None

    totals = words.global_
    individual = words.individual or {}
    return WordStats(
        match_count=(totals.nb_matches if totals else None) or 0,
        word_count=(totals.nb_words if totals else None) or 0,
        vocalization_count=(totals.nb_vocalizations if totals else None) or 0,
        words={
            rank: WordStat(
                word=stat.word or "",
                match_count=stat.nb_matches or 0,
                verse_count=stat.nb_ayas or 0,
                root=stat.root or "",
                lemma=stat.lemma or "",
                romanization=stat.romanization or "",
                derivations=stat.derivations or [],
                synonyms=stat.synonyms or [],
                vocalizations=stat.vocalizations or [],
            )
            for rank, stat in individual.items()
        },
    )


__all__ = [
    "normalize_interval",
    "normalize_response",
    "normalize_verse",
    "normalize_words",
]
