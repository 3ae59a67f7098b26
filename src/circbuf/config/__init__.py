"""Configuration objects and helpers for circbuf.

Buffer settings can be described in YAML (optionally nested under a
``ring_buffer`` key) and turned into a validated :class:`BufferSettings`,
which :meth:`circbuf.RingBuffer.from_settings` consumes.
"""

from .runtime import BufferSettings, load_settings, settings_from_mapping

__all__ = ["BufferSettings", "load_settings", "settings_from_mapping"]
