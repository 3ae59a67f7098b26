"""Runtime settings for building ring buffers from YAML or plain mappings."""

from __future__ import annotations

from collections import ChainMap
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import numpy as np
import yaml

from ..core.errors import InvalidArgumentError
from ..core.policy import SHRINK_TRUNCATE, normalize_shrink_policy

SETTINGS_SECTION = "ring_buffer"


@dataclass(slots=True)
class BufferSettings:
    """
    Knobs used when a ring buffer is created from configuration.

    ``dtype`` is any name NumPy understands; ``"object"`` stores arbitrary
    Python values. ``shrink_policy`` decides what ``set_capacity`` does when
    the new capacity is smaller than the current number of elements.
    """

    capacity: int = 16
    dtype: str = "object"
    shrink_policy: str = SHRINK_TRUNCATE

    def sanitized(self) -> BufferSettings:
        """Return a validated copy with normalized values."""
        try:
            capacity = int(self.capacity)
        except (TypeError, ValueError) as exc:
            raise InvalidArgumentError(f"capacity must be an integer, got {self.capacity!r}") from exc
        if capacity <= 0:
            raise InvalidArgumentError(f"capacity must be positive, got {capacity}")

        dtype = self.dtype.strip() if isinstance(self.dtype, str) else self.dtype
        try:
            dtype_name = np.dtype(dtype).name
        except TypeError as exc:
            raise InvalidArgumentError(f"unknown dtype {self.dtype!r}") from exc

        return BufferSettings(
            capacity=capacity,
            dtype=dtype_name,
            shrink_policy=normalize_shrink_policy(self.shrink_policy),
        )


def settings_from_mapping(data: Mapping[str, Any] | None) -> BufferSettings:
    """
    Build :class:`BufferSettings` from ``data``.

    Keys inside a ``ring_buffer:`` section win over top-level keys of the
    same name; anything that is not a settings field is ignored.
    """
    if not data:
        return BufferSettings()
    section = data.get(SETTINGS_SECTION)
    lookup = ChainMap(section, data) if isinstance(section, Mapping) else data
    values = {f.name: lookup[f.name] for f in fields(BufferSettings) if f.name in lookup}
    return BufferSettings(**values).sanitized()


def load_settings(path: str | Path | None) -> BufferSettings:
    """
    Load settings from the YAML file at ``path``.

    ``None`` or a missing file gives the default :class:`BufferSettings`; an
    empty file does too.
    """
    if path is None:
        return BufferSettings()
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return BufferSettings()
    document = yaml.safe_load(text)
    if document is None:
        return BufferSettings()
    if not isinstance(document, Mapping):
        raise ValueError(f"{path}: expected a mapping of settings, got {type(document).__name__}")
    return settings_from_mapping(document)


__all__ = [
    "BufferSettings",
    "SETTINGS_SECTION",
    "load_settings",
    "settings_from_mapping",
]
