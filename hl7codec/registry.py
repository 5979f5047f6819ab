"""
Segment registry.

Maps a segment name to its Layout. Names the registry does not know
resolve to GENERIC_LAYOUT, which declares no aliases and keeps every
field verbatim, so unknown segment types never lose data.

The registry is populated once at start-up and read afterwards. It has
no locking; callers that register layouts while messages are being
processed on other threads must synchronize themselves.
"""

import logging
from typing import Dict, Iterable, List

from .layout import Layout

logger = logging.getLogger(__name__)

GENERIC_LAYOUT = Layout("Default").freeze()


class SegmentRegistry:
    """Lookup table from three-character segment name to Layout."""

    def __init__(self, layouts: Iterable[Layout] = ()):
        self._layouts: Dict[str, Layout] = {}
        for layout in layouts:
            self.register(layout)

    def register(self, layout: Layout) -> Layout:
        """
        Register a layout under its name and freeze it.

        Registering a second layout with the same name replaces the first.
        """
        if layout.name in self._layouts:
            logger.warning("Replacing registered layout for segment %s", layout.name)

        layout.freeze()
        self._layouts[layout.name] = layout
        logger.debug("Registered layout %r", layout)
        return layout

    def resolve(self, name: str) -> Layout:
        """
        Return the layout registered for ``name``.

        Lookup is an exact match; anything unknown gets GENERIC_LAYOUT.
        """
        layout = self._layouts.get(name)
        if layout is None:
            logger.debug("No layout registered for %r, using generic layout", name)
            return GENERIC_LAYOUT
        return layout

    def create(self, name: str, raw="", delimiters=None):
        """Build a new Segment of the layout registered for ``name``."""
        from .segment import Segment

        layout = self.resolve(name)
        if layout is GENERIC_LAYOUT and not raw:
            raw = [name, ""]
        return Segment(raw, layout=layout, delimiters=delimiters)

    @property
    def names(self) -> List[str]:
        return sorted(self._layouts)

    def __contains__(self, name: str) -> bool:
        return name in self._layouts

    def __len__(self) -> int:
        return len(self._layouts)
