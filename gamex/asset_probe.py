"""Locating asset files along a list of search paths."""

from __future__ import annotations

import os


def file_exists(path: str) -> bool:
    """True if ``path`` names an existing file or directory."""
    return os.path.exists(path)


class AssetProbe:
    """Finds an asset by trying each search path prefix in turn."""

    _instance: AssetProbe | None = None

    def __init__(self, assets_dir: str | None = None) -> None:
        if assets_dir is None:
            assets_dir = os.environ.get("GAMEX_ASSETS_DIR")
        self._search_paths: list[str] = ["", "assets/", "../assets/"]
        if assets_dir is not None:
            self._search_paths.append(assets_dir)

    @property
    def search_paths(self) -> list[str]:
        return list(self._search_paths)

    def add_search_path(self, path: str) -> None:
        self._search_paths.append(path)

    def probe_asset(self, asset_name: str) -> str | None:
        """Return the first existing ``prefix + asset_name``, or None."""
        for prefix in self._search_paths:
            full_path = prefix + asset_name
            if file_exists(full_path):
                return full_path
        return None

    @staticmethod
    def public_instance() -> AssetProbe:
        """The shared probe used when none is given."""
        if AssetProbe._instance is None:
            AssetProbe._instance = AssetProbe()
        return AssetProbe._instance