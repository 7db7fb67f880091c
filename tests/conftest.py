"""Shared pytest fixtures building AlKetab API payloads."""

from __future__ import annotations

from typing import Any

import pytest


def _aya_entry(gid: int, *, sura_id: int = 2, aya_id: int | None = None, page: int = 1) -> dict[str, Any]:
    return {
        "aya": {
            "id": aya_id or gid,
            "text": f"<span style=\"color:red\"><b>verse</b></span> {gid}",
            "text_no_highlight": f"verse {gid}",
            "recitation": f"https://audio.example/{gid}.mp3",
            "prev_aya": {"id": gid - 1, "sura": "Al-Baqara", "sura_arabic": "البقرة", "text": "prev"},
            "next_aya": {"id": gid + 1, "sura": "Al-Baqara", "sura_arabic": "البقرة", "text": "next"},
        },
        "identifier": {
            "gid": gid,
            "aya_id": aya_id or gid,
            "sura_id": sura_id,
            "sura_name": "Al-Baqara",
            "sura_arabic_name": "البقرة",
        },
        "position": {"page": page, "juz": 1},
        "theme": {"chapter": "c", "topic": "t", "subtopic": None},
    }


def _payload(
    ayas: dict[str, Any] | None,
    *,
    page: int = 1,
    nb_pages: int = 3,
    total: int = 30,
    generated_query: str | None = "gq-token",
    sort_by: str | None = "score",
    explain: str | None = "Verses about patience.",
    success: bool = True,
) -> dict[str, Any]:
    search: dict[str, Any] = {
        "interval": {"start": 1, "end": 10, "page": page, "nb_pages": nb_pages, "total": total},
        "runtime": 0.25,
        "words": {
            "global": {"nb_matches": 12, "nb_words": 2, "nb_vocalizations": 3},
            "individual": {
                "1": {"word": "صبر", "nb_matches": 8, "nb_ayas": 7, "root": "صبر", "synonyms": ["a"]},
                "2": {"word": "صابر", "nb_matches": 4, "nb_ayas": 4},
            },
        },
    }
    if ayas is not None:
        search["ayas"] = ayas
    return {
        "success": success,
        "search": search,
        "ai": {
            "explain": explain,
            "generated_query": generated_query,
            "sort_by": sort_by,
            "user_query": "patience",
            "query_language": "en",
        },
    }


@pytest.fixture
def aya_entry():
    return _aya_entry


@pytest.fixture
def make_payload():
    return _payload


@pytest.fixture
def sample_payload():
    return _payload({str(index): _aya_entry(gid) for index, gid in enumerate((10, 11, 12))})
