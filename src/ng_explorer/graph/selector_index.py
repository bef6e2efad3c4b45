"""
Selector index: markup tag name to declaring components.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List

from ng_explorer.analyzer.models import SourceUnit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectorEntry:
    """A component registered under a tag name."""

    file: str
    class_name: str
    selector: str


def split_selector(selector: str) -> List[str]:
    """
    Split a component selector into element selectors.

    Comma-separated alternatives are returned individually; attribute
    (``[x]``) and class (``.x``) selectors are dropped.

    Args:
        selector: Selector string as declared

    Returns:
        Element selector parts in declaration order

    Examples:
        >>> split_selector("app-item, [appItem], .item")
        ['app-item']
    """
    parts = []
    for part in selector.split(","):
        part = part.strip()
        if not part or part.startswith("[") or part.startswith("."):
            continue
        parts.append(part)
    return parts


class SelectorIndex:
    """Maps tag names to the components that declare them.

    Entries are only added; update() never removes unrelated entries.
    """

    def __init__(self):
        self._entries: Dict[str, List[SelectorEntry]] = {}

    def __contains__(self, tag: str) -> bool:
        return tag in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def rebuild(self, units: Iterable[SourceUnit]) -> None:
        """Clear the index and register every component in the given units."""
        self.clear()
        added = sum(self.update(unit) for unit in units)
        logger.debug(f"Selector index rebuilt: {len(self._entries)} tags, {added} entries")

    def update(self, unit: SourceUnit) -> int:
        """
        Register the components of one unit.

        Args:
            unit: Newly loaded or re-parsed unit

        Returns:
            Number of new entries
        """
        added = 0
        for cls in unit.classes:
            if not cls.is_component or not cls.selector:
                continue
            for part in split_selector(cls.selector):
                entries = self._entries.setdefault(part, [])
                if any(e.file == unit.file_path and e.class_name == cls.name for e in entries):
                    continue
                entries.append(SelectorEntry(file=unit.file_path, class_name=cls.name, selector=part))
                added += 1
        return added

    def lookup(self, tag: str) -> List[SelectorEntry]:
        """Entries for a tag, in registration order."""
        return list(self._entries.get(tag, []))

    def tags(self) -> List[str]:
        return sorted(self._entries)
