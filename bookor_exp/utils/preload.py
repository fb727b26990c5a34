from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Union

from utils.dev_log import dev_log


def preload_images(manifest: Iterable[str], base_dir: Union[str, Path]) -> Dict[str, bytes]:
    """
    Read every image in the manifest into memory.

    Keys are the manifest entries as given. Files that are missing or
    unreadable are left out of the result; callers render a fallback.
    """
    root = Path(base_dir)
    loaded: Dict[str, bytes] = {}
    for rel_path in manifest:
        path = root / rel_path
        try:
            loaded[rel_path] = path.read_bytes()
        except OSError:
            dev_log("PRELOAD", f"skipped {rel_path}")
    dev_log("PRELOAD", f"loaded {len(loaded)} assets from {root}")
    return loaded
