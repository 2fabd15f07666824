"""
Localized message strings.

Templates are rendered with Jinja2; unknown locales fall back to en-US and
unknown keys render as the key itself so a missing translation never breaks
a send.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from jinja2 import BaseLoader, Environment, StrictUndefined, TemplateError

from ..core.config import settings

logger = logging.getLogger(__name__)

CATALOG: Dict[str, Dict[str, str]] = {
    "en-US": {
        "ALERT_HAPPENED": "Hey <@{{ u }}>! The **{{ s }}** is in your daily shop!\nIt will be gone <t:{{ t }}:R>.",
        "AUTH_ERROR_ALERTS_HAPPENED": (
            "**<@{{ u }}>, your login has expired!** One of your alerts came up, but I could not "
            "check your shop. Use `/login` again to keep receiving alerts."
        ),
        "REMOVE_ALERT_BUTTON": "Remove Alert",
        "ALERT_TEST": "This is a test alert. If you can see this, alerts will work in this channel!",
    },
    "de": {
        "ALERT_HAPPENED": "Hey <@{{ u }}>! **{{ s }}** ist in deinem täglichen Shop!\nVerschwindet <t:{{ t }}:R>.",
        "AUTH_ERROR_ALERTS_HAPPENED": (
            "**<@{{ u }}>, dein Login ist abgelaufen!** Ein Alarm wurde ausgelöst, aber ich konnte "
            "deinen Shop nicht prüfen. Nutze `/login` erneut."
        ),
        "REMOVE_ALERT_BUTTON": "Alarm entfernen",
        "ALERT_TEST": "Dies ist ein Testalarm. Wenn du ihn siehst, funktionieren Alarme in diesem Kanal!",
    },
}


class StringCatalog:
    """Jinja2 backed translator"""

    def __init__(self, catalog: Optional[Dict[str, Dict[str, str]]] = None, default_locale: Optional[str] = None):
        self.catalog = catalog if catalog is not None else CATALOG
        self.default_locale = default_locale or settings.default_locale
        self.env = Environment(loader=BaseLoader(), undefined=StrictUndefined, autoescape=False)

    def _lookup(self, locale: str, key: str) -> Optional[str]:
        for candidate in (locale, locale.split("-")[0], self.default_locale):
            strings = self.catalog.get(candidate)
            if strings and key in strings:
                return strings[key]
        return None

    def format(self, locale: str, key: str, params: Optional[Dict[str, Any]] = None) -> str:
        source = self._lookup(locale or self.default_locale, key)
        if source is None:
            logger.warning(f"Missing string {key} for locale {locale}")
            return key
        try:
            return self.env.from_string(source).render(**(params or {}))
        except TemplateError as e:
            logger.error(f"Error rendering string {key} for locale {locale}: {e}")
            return source
