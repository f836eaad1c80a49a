"""Request and response messages of the CRM service."""

from __future__ import annotations

from dataclasses import dataclass, field

_U32_MAX = 0xFFFFFFFF


def _check_u32(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U32_MAX:
        raise ValueError(f"{name} must be an unsigned 32-bit integer, got {value!r}")


@dataclass
class WelcomeRequest:
    """Welcome users who registered `interval` days ago with the given contents."""

    id: str = ""
    interval: int = 0
    content_ids: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        _check_u32("interval", self.interval)
        self.content_ids = list(self.content_ids)
        for content_id in self.content_ids:
            _check_u32("content_id", content_id)


@dataclass(frozen=True)
class WelcomeResponse:
    id: str = ""


@dataclass
class RecallRequest:
    """Recall users whose last visit was `last_visit_interval` days ago."""

    id: str = ""
    last_visit_interval: int = 0
    content_ids: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        _check_u32("last_visit_interval", self.last_visit_interval)
        self.content_ids = list(self.content_ids)
        for content_id in self.content_ids:
            _check_u32("content_id", content_id)


@dataclass(frozen=True)
class RecallResponse:
    id: str = ""


@dataclass(frozen=True)
class RemindRequest:
    """Remind users with unfinished contents who last visited some days ago."""

    id: str = ""
    last_visit_interval: int = 0

    def __post_init__(self) -> None:
        _check_u32("last_visit_interval", self.last_visit_interval)


@dataclass(frozen=True)
class RemindResponse:
    id: str = ""