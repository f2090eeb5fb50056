#!/usr/bin/env python3
"""
SVG Palette Store

File-backed persistence for the theme library and the working session. Each
store holds one JSON blob under a fixed, versioned key and is rewritten in
full on every save (last writer wins).

Neither load() nor save() raises: a missing or corrupt blob loads as None,
and a snapshot that is too large for the quota is reported by save()
returning False while the caller's in-memory state stays authoritative.
"""

import json
import logging
import os


logger = logging.getLogger(__name__)

LIBRARY_STORAGE_KEY = 'svg_palette_pro_library_v4'
SESSION_STORAGE_KEY = 'svg_palette_pro_session_v4'

DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024


class JsonStateStore:
    """One persisted JSON blob stored as <directory>/<key>.json."""

    def __init__(self, directory, key, quota_bytes=DEFAULT_QUOTA_BYTES):
        self.directory = directory
        self.key = key
        self.quota_bytes = quota_bytes

    @property
    def path(self):
        return os.path.join(self.directory, f"{self.key}.json")

    def load(self):
        """Return the stored snapshot, or None if there is nothing usable."""
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            logger.error("Failed to load %s: %s", self.key, exc)
            return None

    def save(self, snapshot):
        """
        Write the snapshot, replacing whatever was stored before.

        Returns:
            True on success, False if the snapshot exceeds the quota or
            could not be written
        """
        try:
            payload = json.dumps(snapshot)
        except (TypeError, ValueError) as exc:
            logger.warning("Cannot serialize %s: %s", self.key, exc)
            return False

        size = len(payload.encode('utf-8'))
        if self.quota_bytes is not None and size > self.quota_bytes:
            logger.warning("%s too large to persist fully (%d bytes, quota %d)",
                           self.key, size, self.quota_bytes)
            return False

        tmp_path = self.path + '.tmp'
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                f.write(payload)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            logger.warning("Failed to persist %s: %s", self.key, exc)
            return False
        return True

    def clear(self):
        """Remove the stored snapshot if there is one."""
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Failed to clear %s: %s", self.key, exc)
