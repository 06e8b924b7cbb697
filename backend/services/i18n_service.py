"""Message catalog for the site's translated strings.

Bundles are `<locale>.json` files. A non-default locale is deep-merged
over the default bundle, so a key missing from a translation falls back
to the default text instead of disappearing.
"""

import json
import threading
from pathlib import Path
from typing import Any

from loguru import logger


def deep_merge(defaults: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Fill keys missing from `override` with `defaults`, recursively.

    Values present in `override` win unless both sides are dicts, in which
    case they are merged. Keys only present in `override` are kept.
    """
    result: dict[str, Any] = {}
    for key, default_value in defaults.items():
        if key not in override:
            result[key] = default_value
            continue
        override_value = override[key]
        if isinstance(default_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(default_value, override_value)
        else:
            result[key] = override_value

    for key, override_value in override.items():
        if key not in result:
            result[key] = override_value
    return result


class MessageCatalog:
    """Locale-keyed message bundles with default-locale fallback."""

    def __init__(
        self,
        messages_dir: str | Path,
        default_locale: str = "en",
        supported_locales: list[str] | None = None,
    ) -> None:
        self.messages_dir = Path(messages_dir)
        self.default_locale = default_locale
        self.supported_locales = list(supported_locales or [default_locale])
        if default_locale not in self.supported_locales:
            self.supported_locales.insert(0, default_locale)
        self._merged: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def _read_bundle(self, locale: str) -> dict[str, Any]:
        path = self.messages_dir / f"{locale}.json"
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{path} does not contain a JSON object")
        return data

    def resolve_locale(self, locale: str | None) -> str:
        """Map a requested locale ("fr", "fr-CA", None) onto a supported one."""
        if not locale:
            return self.default_locale
        primary = locale.replace("_", "-").split("-")[0].strip().lower()
        return primary if primary in self.supported_locales else self.default_locale

    def bundle(self, locale: str | None) -> tuple[str, dict[str, Any]]:
        """
        Get the merged messages for a locale.

        Args:
            locale: Requested locale; unsupported values get the default.

        Returns:
            Tuple of (resolved_locale, messages)

        Raises:
            OSError, ValueError: If the default bundle itself cannot be read.
        """
        resolved = self.resolve_locale(locale)

        with self._lock:
            cached = self._merged.get(resolved)
            if cached is not None:
                return resolved, cached

            defaults = self._read_bundle(self.default_locale)
            if resolved == self.default_locale:
                messages = defaults
            else:
                try:
                    translated = self._read_bundle(resolved)
                except (OSError, ValueError) as e:
                    logger.warning(
                        f"Message bundle for '{resolved}' unavailable, using defaults: {e}"
                    )
                    translated = {}
                messages = deep_merge(defaults, translated)

            self._merged[resolved] = messages
            return resolved, messages

    def translate(self, locale: str | None, key: str, **params: Any) -> str:
        """
        Look up a dotted key ("contact.errors.nameRequired").

        Falls back to the default locale and finally to the key itself.
        `{name}` placeholders are filled from `params`.
        """
        _, messages = self.bundle(locale)
        value = _lookup(messages, key)
        if value is None and self.resolve_locale(locale) != self.default_locale:
            value = _lookup(self.bundle(self.default_locale)[1], key)
        if value is None:
            return key
        if params:
            try:
                return value.format(**params)
            except (KeyError, IndexError, ValueError):
                return value
        return value

    def clear(self) -> None:
        with self._lock:
            self._merged.clear()


def _lookup(messages: dict[str, Any], key: str) -> str | None:
    node: Any = messages
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None
