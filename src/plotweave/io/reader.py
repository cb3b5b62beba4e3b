"""Preset reader for loading JSON parameter files.

This module provides the PresetReader class for loading parameter presets.
Three layouts are accepted:

- A flat mapping of parameters: ``{"freqX": 3, "freqY": 2}``
- A single preset record: ``{"id": ..., "preset_system": ..., "params": {...}}``
- A preset library: a list of records, or ``{"presets": [...]}``
"""

import json
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from plotweave.exceptions import PresetLoadError


@dataclass(slots=True)
class Preset:
    """A named parameter set.

    Attributes:
        id: Stable preset id (file stem for flat mappings)
        params: Flat parameter mapping passed to ``resolve_params``
        name: Display name
        system: Algorithm id the preset was made for, if recorded
    """

    id: str
    params: dict[str, Any] = field(default_factory=dict)
    name: str | None = None
    system: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], fallback_id: str) -> "Preset":
        params = data.get("params")
        if not isinstance(params, dict):
            raise ValueError(f"preset '{data.get('id', fallback_id)}' has no params mapping")
        system = data.get("preset_system", data.get("system", data.get("algorithm")))
        return cls(
            id=str(data.get("id", fallback_id)),
            params=dict(params),
            name=data.get("name"),
            system=str(system) if system is not None else None,
        )


def _parse_presets(data: Any, stem: str) -> list[Preset]:
    if isinstance(data, dict) and isinstance(data.get("presets"), list):
        data = data["presets"]
    if isinstance(data, list):
        presets = []
        for index, record in enumerate(data):
            if not isinstance(record, dict):
                raise ValueError(f"preset #{index} is not an object")
            presets.append(Preset.from_dict(record, f"{stem}-{index}"))
        return presets
    if isinstance(data, dict):
        if "params" in data:
            return [Preset.from_dict(data, stem)]
        return [Preset(id=stem, params=dict(data))]
    raise ValueError("expected a JSON object or array")


class PresetReader:
    """Loads parameter presets from a JSON file.

    Example:
        reader = PresetReader(Path("flowers.json"))
        reader.load()
        for preset in reader.iter_presets("petalis"):
            print(preset.name)
    """

    def __init__(self, preset_path: Path) -> None:
        """Initialize the preset reader.

        Args:
            preset_path: Path to the JSON preset file
        """
        self._preset_path = preset_path
        self._presets: list[Preset] | None = None

    def load(self) -> None:
        """Read and parse the preset file.

        Raises:
            PresetLoadError: If the file is missing, unreadable or malformed
        """
        if not self._preset_path.exists():
            raise PresetLoadError(str(self._preset_path), "file not found")

        try:
            data = json.loads(self._preset_path.read_text(encoding="utf-8"))
            self._presets = _parse_presets(data, self._preset_path.stem)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValueError) as e:
            raise PresetLoadError(str(self._preset_path), str(e)) from e

    @property
    def presets(self) -> list[Preset]:
        """Return every preset in file order.

        Raises:
            RuntimeError: If the file has not been loaded yet
        """
        if self._presets is None:
            raise RuntimeError("Presets not loaded. Call load() first.")
        return list(self._presets)

    def iter_presets(self, system: str | None = None) -> Iterator[Preset]:
        """Iterate presets, optionally only those recorded for ``system``."""
        for preset in self.presets:
            if system is None or preset.system in (None, system):
                yield preset

    def get_preset(self, preset_id: str) -> Preset | None:
        """Get a preset by id, or None if absent."""
        for preset in self.presets:
            if preset.id == preset_id:
                return preset
        return None

    def first_params(self, system: str | None = None) -> dict[str, Any]:
        """Parameters of the first preset matching ``system``.

        Raises:
            PresetLoadError: If no preset matches
        """
        for preset in self.iter_presets(system):
            return dict(preset.params)
        raise PresetLoadError(str(self._preset_path), f"no preset for '{system}'")

    def __enter__(self) -> "PresetReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self._presets = None
