# src/weekly_todo/links/resolver.py

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from urllib.parse import quote

from ..core.ports import UrlOpener

logger = logging.getLogger(__name__)

LinkBuilder = Callable[[Mapping[str, str]], str | None]

# encodeURIComponent leaves these unescaped.
_URI_COMPONENT_SAFE = "-_.!~*'()"

WEB_SCHEMES = ("http://", "https://")

CALENDAR_WEEK_URL = "https://calendar.google.com/calendar/r/week"
SPOTIFY_FALLBACK_URL = "https://open.spotify.com"


def encode_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


@dataclass(frozen=True, slots=True)
class LinkField:
    key: str
    label: str
    required: bool = False


@dataclass(frozen=True, slots=True)
class LinkInfo:
    icon: str
    label: str


@dataclass(frozen=True, slots=True)
class LinkType:
    name: str
    icon: str
    label: str
    build: LinkBuilder | None = None
    fields: tuple[LinkField, ...] = ()

    @property
    def info(self) -> LinkInfo:
        return LinkInfo(icon=self.icon, label=self.label)


class LinkResolver:
    """Open registry: link type tag -> URL builder + display metadata."""

    def __init__(self) -> None:
        self._types: dict[str, LinkType] = {}

    def register(self, link_type: LinkType) -> None:
        self._types[link_type.name.lower()] = link_type

    def get(self, name: str | None) -> LinkType | None:
        if not name:
            return None
        return self._types.get(name.lower())

    def is_known(self, name: str | None) -> bool:
        return self.get(name) is not None

    def link_types(self) -> list[LinkType]:
        return list(self._types.values())

    def describe(self, name: str | None) -> LinkInfo:
        link_type = self.get(name) or self._types.get("none")
        if link_type is None:
            return LinkInfo(icon="", label="None")
        return link_type.info

    def fields(self, name: str | None) -> tuple[LinkField, ...]:
        link_type = self.get(name)
        return link_type.fields if link_type else ()

    def resolve(self, name: str | None, link_data: Mapping[str, str] | None) -> str | None:
        link_type = self.get(name)
        if link_type is None or link_type.build is None:
            return None
        return link_type.build(link_data or {})


def dispatch(url: str | None, opener: UrlOpener) -> bool:
    """
    Open a resolved link.

    Web URLs go to a new, unrelated browsing context; anything else
    (mailto:, app schemes) is opened in place.
    """
    if not url:
        return False
    new_context = url.startswith(WEB_SCHEMES)
    logger.debug("Dispatching link new_context=%s url=%s", new_context, url)
    return opener.open(url, new_context=new_context)


# ---- builders ----


def _field(data: Mapping[str, str], key: str) -> str:
    value = data.get(key)
    return value.strip() if isinstance(value, str) else ""


def normalize_phone(phone: str) -> str:
    """Keep digits only ("+1 555-0100" -> "15550100")."""
    return re.sub(r"\D", "", phone)


def build_whatsapp(data: Mapping[str, str]) -> str | None:
    phone = normalize_phone(_field(data, "phone"))
    if not phone:
        return None
    url = f"https://wa.me/{phone}"
    message = _field(data, "message")
    if message:
        url += f"?text={encode_component(message)}"
    return url


def build_calendar(data: Mapping[str, str]) -> str | None:
    return CALENDAR_WEEK_URL


def build_email(data: Mapping[str, str]) -> str | None:
    address = _field(data, "email")
    if not address:
        return None
    url = f"mailto:{address}"
    subject = _field(data, "subject")
    if subject:
        url += f"?subject={encode_component(subject)}"
    return url


def build_spotify(data: Mapping[str, str]) -> str | None:
    return _field(data, "url") or SPOTIFY_FALLBACK_URL


resolver = LinkResolver()

resolver.register(LinkType(name="none", icon="❌", label="None"))
resolver.register(
    LinkType(
        name="whatsapp",
        icon="💬",
        label="WhatsApp",
        build=build_whatsapp,
        fields=(
            LinkField("phone", "Phone number", required=True),
            LinkField("message", "Message"),
        ),
    )
)
resolver.register(LinkType(name="calendar", icon="📅", label="Calendar", build=build_calendar))
resolver.register(
    LinkType(
        name="email",
        icon="📧",
        label="Email",
        build=build_email,
        fields=(
            LinkField("email", "Email address", required=True),
            LinkField("subject", "Subject"),
        ),
    )
)
resolver.register(
    LinkType(
        name="spotify",
        icon="🎵",
        label="Spotify",
        build=build_spotify,
        fields=(LinkField("url", "Spotify URL"),),
    )
)
