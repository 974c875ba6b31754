# tests/test_link_resolver.py

from __future__ import annotations

import pytest

from weekly_todo.links.resolver import (
    CALENDAR_WEEK_URL,
    SPOTIFY_FALLBACK_URL,
    LinkField,
    LinkResolver,
    LinkType,
    dispatch,
    resolver,
)
from weekly_todo.links.opener import PrintOpener

from .fakes import FakeOpener


def test_whatsapp_link_normalizes_phone_and_encodes_message() -> None:
    url = resolver.resolve("whatsapp", {"phone": "+1 555-0100", "message": "hi"})
    assert url == "https://wa.me/15550100?text=hi"


def test_whatsapp_message_is_percent_encoded() -> None:
    url = resolver.resolve("whatsapp", {"phone": "(49) 170/123", "message": "Hey! How are you?"})
    assert url == "https://wa.me/49170123?text=Hey!%20How%20are%20you%3F"


def test_whatsapp_without_message_has_no_query() -> None:
    assert resolver.resolve("whatsapp", {"phone": "+44 20 7946"}) == "https://wa.me/44207946"


@pytest.mark.parametrize("data", [{}, {"phone": ""}, {"phone": "   "}, {"phone": "abc"}])
def test_whatsapp_without_phone_resolves_to_none(data: dict[str, str]) -> None:
    assert resolver.resolve("whatsapp", data) is None


def test_calendar_ignores_payload() -> None:
    assert resolver.resolve("calendar", {}) == CALENDAR_WEEK_URL
    assert resolver.resolve("calendar", {"anything": "x"}) == CALENDAR_WEEK_URL


def test_email_link() -> None:
    assert resolver.resolve("email", {"email": "me@example.com"}) == "mailto:me@example.com"
    assert (
        resolver.resolve("email", {"email": "me@example.com", "subject": "Weekly report & notes"})
        == "mailto:me@example.com?subject=Weekly%20report%20%26%20notes"
    )
    assert resolver.resolve("email", {"subject": "no address"}) is None


def test_spotify_link_uses_url_or_fallback() -> None:
    playlist = "https://open.spotify.com/playlist/37i9dQZF1DX0XUsuxWHRQd"
    assert resolver.resolve("spotify", {"url": playlist}) == playlist
    assert resolver.resolve("spotify", {}) == SPOTIFY_FALLBACK_URL


@pytest.mark.parametrize("link_type", ["none", "telegram", "", None])
def test_none_and_unknown_types_resolve_to_none(link_type: str | None) -> None:
    assert resolver.resolve(link_type, {"phone": "123"}) is None


def test_describe_is_total() -> None:
    assert resolver.describe("whatsapp").label == "WhatsApp"
    assert resolver.describe("calendar").icon == "📅"
    assert resolver.describe("telegram") == resolver.describe("none")
    assert resolver.describe(None).label == "None"


def test_default_registry_order_and_fields() -> None:
    names = [lt.name for lt in resolver.link_types()]
    assert names == ["none", "whatsapp", "calendar", "email", "spotify"]
    assert [f.key for f in resolver.fields("whatsapp")] == ["phone", "message"]
    assert resolver.fields("calendar") == ()
    assert resolver.fields("telegram") == ()


def test_registry_is_open_to_new_types() -> None:
    custom = LinkResolver()
    custom.register(
        LinkType(
            name="telegram",
            icon="✈️",
            label="Telegram",
            build=lambda data: f"tg://resolve?domain={data['user']}" if data.get("user") else None,
            fields=(LinkField("user", "Username", required=True),),
        )
    )
    assert custom.resolve("telegram", {"user": "alice"}) == "tg://resolve?domain=alice"
    assert custom.resolve("Telegram", {}) is None
    assert custom.describe("whatsapp").label == "None"  # no "none" entry registered


def test_dispatch_routes_web_and_app_links() -> None:
    opener = FakeOpener()

    assert dispatch("https://wa.me/123", opener) is True
    assert dispatch("mailto:me@example.com", opener) is True
    assert dispatch("spotify:track:1", opener) is True

    assert [(o.url, o.new_context) for o in opener.opened] == [
        ("https://wa.me/123", True),
        ("mailto:me@example.com", False),
        ("spotify:track:1", False),
    ]


@pytest.mark.parametrize("url", [None, ""])
def test_dispatch_empty_url_is_noop(url: str | None) -> None:
    opener = FakeOpener()
    assert dispatch(url, opener) is False
    assert opener.opened == []


def test_print_opener_only_reports_the_url() -> None:
    lines: list[str] = []
    opener = PrintOpener(emit=lines.append)

    assert dispatch("https://open.spotify.com", opener) is True
    assert lines == ["Link: https://open.spotify.com"]
