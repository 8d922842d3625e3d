"""Display labels for modules, severity levels and report headings.

Only a handful of catalogs ship with the package; any other supported
language falls back to English.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_LANGUAGE = "en"

SUPPORTED_LANGUAGES: dict[str, str] = {
    "da": "Dansk",
    "en": "English",
    "fi": "Suomi",
    "fr": "Français",
    "nb": "Norsk (bokmål)",
    "sv": "Svenska",
}


@dataclass(frozen=True, slots=True)
class LabelCatalog:
    language: str
    module_names: Mapping[str, str]
    severity_names: Mapping[str, str]
    headings: Mapping[str, str]

    def module_label(self, name: str) -> str:
        """Localized module name; unknown modules pass through unchanged."""
        return self.module_names.get(name.lower(), name)

    def severity_label(self, level: str) -> str:
        return self.severity_names[str(level).lower()]

    def heading(self, key: str) -> str:
        return self.headings[key]


_EN = LabelCatalog(
    language="en",
    module_names={
        "system": "System",
        "basic": "Basic",
        "address": "Address",
        "connectivity": "Connectivity",
        "consistency": "Consistency",
        "delegation": "Delegation",
        "dnssec": "DNSSEC",
        "nameserver": "Nameserver",
        "syntax": "Syntax",
        "zone": "Zone",
    },
    severity_names={
        "info": "Info",
        "notice": "Notice",
        "warning": "Warning",
        "error": "Error",
        "critical": "Critical",
    },
    headings={"module": "Module", "level": "Level", "message": "Message"},
)

_SV = LabelCatalog(
    language="sv",
    module_names={
        "system": "System",
        "basic": "Grundläggande",
        "address": "Adress",
        "connectivity": "Anslutning",
        "consistency": "Konsekvens",
        "delegation": "Delegering",
        "dnssec": "DNSSEC",
        "nameserver": "Namnserver",
        "syntax": "Syntax",
        "zone": "Zon",
    },
    severity_names={
        "info": "Info",
        "notice": "Notis",
        "warning": "Varning",
        "error": "Fel",
        "critical": "Kritisk",
    },
    headings={"module": "Modul", "level": "Nivå", "message": "Meddelande"},
)

_FR = LabelCatalog(
    language="fr",
    module_names={
        "system": "Système",
        "basic": "Basique",
        "address": "Adresse",
        "connectivity": "Connectivité",
        "consistency": "Cohérence",
        "delegation": "Délégation",
        "dnssec": "DNSSEC",
        "nameserver": "Serveur de noms",
        "syntax": "Syntaxe",
        "zone": "Zone",
    },
    severity_names={
        "info": "Info",
        "notice": "Notice",
        "warning": "Avertissement",
        "error": "Erreur",
        "critical": "Critique",
    },
    headings={"module": "Module", "level": "Niveau", "message": "Message"},
)

_CATALOGS: dict[str, LabelCatalog] = {c.language: c for c in (_EN, _SV, _FR)}


def catalog_for(language: str | None) -> LabelCatalog:
    """Return the catalog for a language code, falling back to English."""
    if not language:
        return _EN
    return _CATALOGS.get(language.lower(), _EN)
