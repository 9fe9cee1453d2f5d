"""Shared fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from embedvec.core.record_definition import hotel_definition
from embedvec.core.settings import Settings
from embedvec.core.types import Hotel
from embedvec.libs.embedding import HashEmbedding
from embedvec.libs.vector_store import InMemoryVectorStore

DIMENSIONS = 512


def make_settings(**sections: Any) -> Settings:
    """Settings for the hash embedder and the in-memory store; sections override."""
    raw = {
        "embedding": {"provider": "hash", "dimensions": DIMENSIONS},
        "vector_store": {"provider": "memory", "collection_name": "hotels"},
        "search": {"default_top": 3},
        "docs": {},
        "observability": {},
    }
    raw.update(sections)
    return Settings.from_dict(raw)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def settings_factory():
    return make_settings


@pytest.fixture
def embedding() -> HashEmbedding:
    return HashEmbedding(dimensions=DIMENSIONS)


@pytest.fixture
def store() -> InMemoryVectorStore:
    return InMemoryVectorStore(collection_name="hotels")


@pytest.fixture
def definition():
    return hotel_definition(DIMENSIONS)


@pytest.fixture
def hotels() -> list[Hotel]:
    return [
        Hotel(
            hotel_id="1",
            hotel_name="Harbor View Inn",
            description="Family inn with sea view rooms and breakfast",
            tags=["sea view", "family"],
            rating=4.2,
        ),
        Hotel(
            hotel_id="2",
            hotel_name="Skyline Tower Hotel",
            description="Luxury city hotel with rooftop pool and spa",
            tags=["luxury", "pool"],
            rating=4.8,
        ),
        Hotel(
            hotel_id="3",
            hotel_name="Pine Ridge Lodge",
            description="Mountain lodge near hiking trails and ski slopes",
            tags=["mountain", "ski"],
        ),
    ]
