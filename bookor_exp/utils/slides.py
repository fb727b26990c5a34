from __future__ import annotations

from typing import Dict, Iterable, Optional


class SlideController:
    """Keeps exactly one named panel visible."""

    def __init__(self, panels: Iterable[str], initial: Optional[str] = None) -> None:
        self.visibility: Dict[str, bool] = {name: False for name in panels}
        self.pending: Optional[str] = None
        if not self.visibility:
            raise ValueError("[SLIDES] At least one panel is required.")
        if initial is not None:
            self.show_slide(initial)

    @property
    def current(self) -> Optional[str]:
        for name, visible in self.visibility.items():
            if visible:
                return name
        return None

    def show_slide(self, name: str) -> None:
        if name not in self.visibility:
            raise ValueError(f"[SLIDES] Unknown panel: {name!r}")
        for panel in self.visibility:
            self.visibility[panel] = False
        self.visibility[name] = True
        self.pending = None

    def hide_all(self) -> None:
        for panel in self.visibility:
            self.visibility[panel] = False

    def hide_then(self, name: str) -> None:
        """Hide every panel now and remember `name` for `show_pending()`."""
        if name not in self.visibility:
            raise ValueError(f"[SLIDES] Unknown panel: {name!r}")
        self.hide_all()
        self.pending = name

    def show_pending(self) -> Optional[str]:
        name = self.pending
        if name is not None:
            self.show_slide(name)
        return name
