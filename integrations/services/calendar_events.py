"""
Calendar event adapter - turns holiday payloads into the engine's event map

This service is responsible for:
- Grouping Hebcal-style items ({"date", "title", "category"}) by local date
- Accepting an already grouped {date: [titles]} mapping
- Dropping item categories that never affect day classification

It does NOT fetch anything: payloads are supplied by the caller.
"""

import logging
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Mapping

logger = logging.getLogger(__name__)

# Hebcal categories carrying times or readings, not day classifications
IGNORED_CATEGORIES = {"candles", "havdalah", "parashat", "zmanim", "omer", "dafyomi"}


class CalendarEventAdapter:
    """Build {ISO date: [event titles]} maps from calendar payloads"""

    @staticmethod
    def _date_key(value: Any) -> str:
        # "2024-10-02T18:11:00+03:00" belongs to 2024-10-02
        return str(value).split("T", 1)[0].strip()

    @classmethod
    def from_items(cls, items: Iterable[Mapping[str, Any]]) -> Dict[str, List[str]]:
        """
        Group Hebcal-style items by date.

        Items without a date or title, and items of ignored categories,
        are skipped. Title order within a date is preserved.
        """
        event_map: Dict[str, List[str]] = OrderedDict()
        skipped = 0
        for item in items:
            if not isinstance(item, Mapping):
                skipped += 1
                continue
            day = cls._date_key(item.get("date", ""))
            title = str(item.get("title") or "").strip()
            if not day or not title or item.get("category") in IGNORED_CATEGORIES:
                skipped += 1
                continue
            event_map.setdefault(day, []).append(title)

        if skipped:
            logger.debug(
                "Skipped calendar items", extra={"skipped": skipped, "days": len(event_map)}
            )
        return dict(event_map)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> Dict[str, List[str]]:
        event_map: Dict[str, List[str]] = {}
        for day, titles in mapping.items():
            if isinstance(titles, str):
                titles = [titles]
            cleaned = [str(t).strip() for t in titles or () if str(t).strip()]
            if cleaned:
                event_map.setdefault(cls._date_key(day), []).extend(cleaned)
        return event_map

    @classmethod
    def to_event_map(cls, payload: Any) -> Dict[str, List[str]]:
        """
        Convert any supported payload into an event map.

        Supported payloads:
            - Hebcal response dict: {"items": [...]}
            - list of items: [{"date": ..., "title": ...}, ...]
            - grouped mapping: {"2024-10-03": ["Rosh Hashana 5785"], ...}
            - None / empty: no events
        """
        if not payload:
            return {}
        if isinstance(payload, Mapping):
            if "items" in payload:
                return cls.from_items(payload.get("items") or [])
            return cls.from_mapping(payload)
        if isinstance(payload, (list, tuple)):
            return cls.from_items(payload)

        raise TypeError(f"Unsupported calendar payload: {type(payload).__name__}")
