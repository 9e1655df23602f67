"""Tests for chat rendering of directory state."""

from __future__ import annotations

import pytest

from devfinder.bot.rendering import (
    parse_bucket_callback,
    price_keyboard,
    render_provider,
    render_state,
)
from devfinder.domain.models import PriceBucket
from devfinder.filters import build_filter
from devfinder.i18n import I18nService
from devfinder.services.directory import FetchState, FetchStatus

from conftest import make_provider


@pytest.fixture
def i18n() -> I18nService:
    return I18nService(default_locale="en")


def test_loading_state_shows_loading_message(i18n):
    state = FetchState(status=FetchStatus.loading, results=(make_provider(),))

    assert render_state(state, i18n) == "Loading developers..."


def test_empty_success_shows_empty_message_not_loading(i18n):
    state = FetchState(status=FetchStatus.success, filter=build_filter("zig", "low"))

    text = render_state(state, i18n)

    assert "No developers found matching your criteria." in text
    assert "Loading" not in text
    assert "Search: zig | Price: Under 0.3 ETH/hour" in text


def test_results_are_listed(i18n):
    state = FetchState(
        status=FetchStatus.success,
        filter=build_filter(),
        results=(
            make_provider(name="Ada", hourly_rate=0.25, skills=["Python", "Go"]),
            make_provider(id="2", name="Grace", hourly_rate=0.5, skills=[]),
        ),
    )

    text = render_state(state, i18n)

    assert "Search: any | Price: Any price" in text
    assert "Ada - 0.25 ETH/hour (available)\nSkills: Python, Go" in text
    assert "Grace - 0.5 ETH/hour (available)\nSkills: none listed" in text


def test_error_and_idle_states(i18n):
    error = FetchState(status=FetchStatus.error, error_message="timeout")

    assert render_state(error, i18n).startswith("The search did not complete")
    assert "/developers" in render_state(FetchState(), i18n)


def test_render_provider_trims_trailing_zeroes(i18n):
    assert render_provider(make_provider(name="Zero", hourly_rate=0), i18n).startswith(
        "Zero - 0 ETH/hour"
    )


def test_price_keyboard_labels_and_selection(i18n):
    keyboard = price_keyboard(i18n, selected=PriceBucket.medium)

    labels = [row[0].text for row in keyboard.inline_keyboard]
    data = [row[0].callback_data for row in keyboard.inline_keyboard]
    assert labels == [
        "Under 0.3 ETH/hour",
        "* 0.3 - 0.6 ETH/hour",
        "Over 0.6 ETH/hour",
        "Any price",
    ]
    assert data == ["bucket:low", "bucket:medium", "bucket:high", "bucket:any"]


def test_parse_bucket_callback():
    assert parse_bucket_callback("bucket:high") is PriceBucket.high
    assert parse_bucket_callback("bucket:any") is None
    with pytest.raises(ValueError):
        parse_bucket_callback("other:high")
    with pytest.raises(ValueError):
        parse_bucket_callback("bucket:cheap")


def test_bundled_bucket_labels(i18n):
    labels = [i18n.gettext(f"bucket.{bucket.value}") for bucket in PriceBucket]

    assert labels == ["Under 0.3 ETH/hour", "0.3 - 0.6 ETH/hour", "Over 0.6 ETH/hour"]
