"""
Pytest configuration and shared fixtures.
"""

import logging

import pytest

from engine.config import ScoringSettings, SearchSettings, Settings
from engine.models import AccommodationType, Benefit, Candidate
from fuzzy.index import build_indexes


def make_candidate(id, name="", type=None, stars=None, province="", district="", ward="", benefits=(), **extra):
    """Build a Candidate with benefit names given as plain strings."""
    return Candidate(
        id=id,
        name=name,
        type=type,
        star_category=stars,
        province=province,
        district=district,
        ward=ward,
        benefits=tuple(Benefit(id=i + 1, name=b) for i, b in enumerate(benefits)),
        **extra,
    )


@pytest.fixture
def candidate_factory():
    """Factory for ad-hoc candidates."""
    return make_candidate


@pytest.fixture
def sunrise_hotel() -> Candidate:
    """Three-star hotel in Da Nang with a pool."""
    return make_candidate(
        1,
        name="Sunrise Hotel",
        type=AccommodationType.HOTEL,
        stars=3,
        province="Đà Nẵng",
        district="Hải Châu",
        ward="Thạch Thang",
        benefits=["Hồ bơi", "Wifi miễn phí"],
        status=1,
        num_bed=2,
        people=4,
    )


@pytest.fixture
def corpus(sunrise_hotel) -> list[Candidate]:
    """Small mixed corpus across three provinces."""
    return [
        sunrise_hotel,
        make_candidate(
            2,
            name="Green Homestay",
            type=AccommodationType.HOMESTAY,
            stars=2,
            province="Hà Nội",
            district="Hoàn Kiếm",
            ward="Hàng Bạc",
            benefits=["Bữa sáng"],
            status=1,
            num_bed=1,
            people=2,
        ),
        make_candidate(
            3,
            name="Ocean Villa",
            type=AccommodationType.VILLA,
            stars=5,
            province="Khánh Hòa",
            district="Nha Trang",
            ward="Lộc Thọ",
            benefits=["Hồ bơi", "Bãi đỗ xe"],
            status=0,
            num_bed=4,
            people=8,
        ),
        make_candidate(
            4,
            name="Moonlight Hotel",
            type=AccommodationType.HOTEL,
            stars=4,
            province="Đà Nẵng",
            district="Sơn Trà",
            ward="An Hải Bắc",
            benefits=["Gym"],
            status=1,
            num_bed=2,
            people=3,
        ),
        make_candidate(5, name="Zzz"),
    ]


@pytest.fixture
def indexes(corpus):
    """Shared match indexes over the sample corpus."""
    return build_indexes(corpus)


@pytest.fixture
def threaded_settings() -> Settings:
    """Settings that always go through the worker pool."""
    return Settings(
        search=SearchSettings(max_workers=4, parallel_threshold=0),
        scoring=ScoringSettings(),
    )


@pytest.fixture
def inline_settings() -> Settings:
    """Settings that score on the calling thread."""
    return Settings(
        search=SearchSettings(max_workers=1),
        scoring=ScoringSettings(),
    )


@pytest.fixture
def restore_root_logger():
    """Put root handlers and level back after a logging test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
