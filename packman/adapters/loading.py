"""
Settings-driven adapter loading.

Each loader imports the class named by one PACKMAN setting, instantiates
it once and caches the instance until reset().
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from packman.conf import packman_settings

logger = logging.getLogger(__name__)


class AdapterLoader:
    """Lazily load and cache the adapter configured under ``setting``."""

    def __init__(self, setting: str, label: str, example: str):
        self.setting = setting
        self.label = label
        self.example = example
        self._lock = threading.Lock()
        self._instance: Any = None

    def get(self) -> Any:
        """
        Raises:
            ImproperlyConfigured: If the setting is empty or import fails
        """
        if self._instance is None:
            with self._lock:
                if self._instance is None:  # double-checked
                    self._instance = self._load()
        return self._instance

    def reset(self) -> None:
        self._instance = None

    def _load(self):
        path = getattr(packman_settings, self.setting)

        if not path:
            raise ImproperlyConfigured(
                f"PACKMAN['{self.setting}'] must be configured. "
                f"Example: '{self.example}'"
            )

        try:
            adapter_class = import_string(path)
        except ImportError as e:
            raise ImproperlyConfigured(
                f"Failed to import {self.label} '{path}': {e}"
            ) from e

        logger.debug("Loaded %s: %s", self.label, path)
        return adapter_class()
