"""Shared pytest fixtures for directory tests."""

from __future__ import annotations

from typing import Any

import pytest

from devfinder.domain.models import ServiceProvider


def make_provider(**overrides: Any) -> ServiceProvider:
    data: dict[str, Any] = {
        "id": "dev-1",
        "name": "Ada Lovelace",
        "hourly_rate": 0.45,
        "skills": ["Python", "React"],
        "status": "available",
        "image_url": "https://example.com/ada.png",
    }
    data.update(overrides)
    return ServiceProvider.model_validate(data)


@pytest.fixture
def providers() -> list[ServiceProvider]:
    return [
        make_provider(id="1", name="Ada Lovelace", hourly_rate=0.25, skills=["Python"]),
        make_provider(id="2", name="Grace Hopper", hourly_rate=0.3, skills=["COBOL", "React"]),
        make_provider(id="3", name="Linus", hourly_rate=0.59, skills=["C"], status="busy"),
        make_provider(id="4", name="Reactor Team", hourly_rate=0.6, skills=["Go"]),
        make_provider(id="5", name="Margaret", hourly_rate=0.9, skills=["react"], status="offline"),
        make_provider(id="6", name="Barbara", hourly_rate=0.55, skills=["Rust"]),
    ]
