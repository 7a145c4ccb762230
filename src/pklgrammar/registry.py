"""Language registry: lookup by display name or alias."""

from __future__ import annotations

from dataclasses import dataclass, field

from pklgrammar.rules import Language


@dataclass
class LanguageRegistry:
    """Registered grammars, keyed case-insensitively by name and aliases."""

    _languages: dict[str, Language] = field(default_factory=dict, init=False)

    def register(self, language: Language) -> None:
        """Register a language under its name and every alias.

        Re-registering the same value is a no-op; a different language
        claiming a taken name raises ValueError.
        """
        keys = [language.name, *language.aliases]
        for key in keys:
            existing = self._languages.get(key.lower())
            if existing is not None and existing is not language:
                raise ValueError(f"language name '{key}' is already registered to {existing.name}")
        for key in keys:
            self._languages[key.lower()] = language

    def get(self, name: str) -> Language:
        """Look up a language by name or alias. Raises KeyError if unknown."""
        try:
            return self._languages[name.lower()]
        except KeyError:
            raise KeyError(f"unknown language '{name}'") from None

    def names(self) -> list[str]:
        """Display names of all registered languages, sorted."""
        return sorted({lang.name for lang in self._languages.values()})


REGISTRY = LanguageRegistry()


def register_language(language: Language) -> None:
    REGISTRY.register(language)


def get_language(name: str) -> Language:
    return REGISTRY.get(name)
