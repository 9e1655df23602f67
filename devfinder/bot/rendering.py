"""Plain-text rendering of the directory state for chat replies."""

from __future__ import annotations

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from devfinder.domain.models import PriceBucket, ServiceProvider
from devfinder.i18n import I18nService
from devfinder.services.directory import FetchState, FetchStatus

BUCKET_CALLBACK_PREFIX = "bucket:"
ANY_BUCKET = "any"
MESSAGE_CHAR_LIMIT = 3900


def _format_rate(rate: float) -> str:
    return f"{rate:.2f}".rstrip("0").rstrip(".") or "0"


def render_provider(provider: ServiceProvider, i18n: I18nService, locale: str | None = None) -> str:
    skills = ", ".join(provider.skills) or i18n.gettext("directory.card.no_skills", locale=locale)
    return i18n.gettext(
        "directory.card",
        locale=locale,
        name=provider.name,
        rate=_format_rate(provider.hourly_rate),
        status=provider.availability_status.value,
        skills=skills,
    )


def render_filters(state: FetchState, i18n: I18nService, locale: str | None = None) -> str:
    spec = state.filter
    query = spec.text_query if spec and spec.text_query else i18n.gettext(
        "directory.filters.any_query", locale=locale
    )
    if spec and spec.price_bucket is not None:
        price = i18n.gettext(f"bucket.{spec.price_bucket.value}", locale=locale)
    else:
        price = i18n.gettext("directory.filters.any_price", locale=locale)
    return i18n.gettext("directory.filters", locale=locale, query=query, price=price)


def render_state(state: FetchState, i18n: I18nService, locale: str | None = None) -> str:
    if state.status is FetchStatus.idle:
        return i18n.gettext("directory.idle", locale=locale)
    if state.status is FetchStatus.loading:
        return i18n.gettext("directory.loading", locale=locale)
    if state.status is FetchStatus.error:
        return i18n.gettext("directory.error", locale=locale, message=state.error_message or "")

    header = [
        i18n.gettext("directory.title", locale=locale),
        render_filters(state, i18n, locale),
        "",
    ]
    if not state.results:
        return "\n".join(header + [i18n.gettext("directory.empty", locale=locale)])

    body = "\n\n".join(render_provider(provider, i18n, locale) for provider in state.results)
    text = "\n".join(header + [body])
    if len(text) > MESSAGE_CHAR_LIMIT:
        text = f"{text[:MESSAGE_CHAR_LIMIT - 15].rstrip()}\n...[truncated]"
    return text


def price_keyboard(
    i18n: I18nService,
    locale: str | None = None,
    selected: PriceBucket | None = None,
) -> InlineKeyboardMarkup:
    rows = []
    for bucket in PriceBucket:
        label = i18n.gettext(f"bucket.{bucket.value}", locale=locale)
        if bucket is selected:
            label = f"* {label}"
        rows.append(
            [InlineKeyboardButton(text=label, callback_data=f"{BUCKET_CALLBACK_PREFIX}{bucket.value}")]
        )
    rows.append(
        [
            InlineKeyboardButton(
                text=i18n.gettext("directory.filters.any_price", locale=locale),
                callback_data=f"{BUCKET_CALLBACK_PREFIX}{ANY_BUCKET}",
            )
        ]
    )
    return InlineKeyboardMarkup(inline_keyboard=rows)


def parse_bucket_callback(data: str | None) -> PriceBucket | None:
    """Return the bucket encoded in callback data; ``any`` clears the selection."""

    if not data or not data.startswith(BUCKET_CALLBACK_PREFIX):
        raise ValueError(f"Not a price bucket callback: {data!r}")
    value = data[len(BUCKET_CALLBACK_PREFIX):]
    if value == ANY_BUCKET:
        return None
    return PriceBucket(value)


__all__ = [
    "ANY_BUCKET",
    "BUCKET_CALLBACK_PREFIX",
    "parse_bucket_callback",
    "price_keyboard",
    "render_filters",
    "render_provider",
    "render_state",
]
