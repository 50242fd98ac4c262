"""Option catalog models.

The catalog is static reference data loaded once at startup. Lookups here are
pure; nothing in the service layer ever mutates a catalog.
"""

import re
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_SUMMON_NAME = "召喚物"

_DIGITS_RE = re.compile(r"(\d+)")


def reading_sort_key(text: str) -> list:
    """Case-insensitive sort key that orders embedded numbers by value."""
    return [int(part) if part.isdecimal() else part for part in _DIGITS_RE.split(text.casefold())]


class CharacterOption(BaseModel):
    name: str
    alias: Optional[str] = None
    yomi: Optional[str] = None
    type: Optional[str] = None
    unique_key_options: list[str] = Field(default_factory=list, alias="uniqueKeyOptions")

    model_config = {"populate_by_name": True}


class WeaponOption(BaseModel):
    name: str
    yomi: Optional[str] = None
    type: str


class SummonOption(BaseModel):
    name: str
    alias: Optional[str] = None


class OptionCatalog(BaseModel):
    """Every selectable value the editor offers."""

    characters: list[CharacterOption] = Field(default_factory=list)
    weapons: list[WeaponOption] = Field(default_factory=list)
    common_keys: list[str] = Field(default_factory=list, alias="commonKeys")
    summons: list[SummonOption] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    def character_option(self, name: str) -> CharacterOption | None:
        return next((o for o in self.characters if o.name == name), None)

    def alias_for_name(self, name: Optional[str]) -> str:
        """Display alias for a character name; falls back to the name itself."""
        if not name:
            return ""
        option = self.character_option(name)
        return (option.alias if option and option.alias else None) or name

    def category_for_name(self, name: Optional[str]) -> Optional[str]:
        option = self.character_option(name) if name else None
        return option.type if option else None

    def unique_key_options_for_name(self, name: Optional[str]) -> list[str]:
        option = self.character_option(name) if name else None
        return list(option.unique_key_options) if option else []

    def weapon_names_for_type(self, ctype: Optional[str]) -> list[str]:
        """Weapons usable by a category, sorted by reading. No category means all."""
        usable = [w for w in self.weapons if not ctype or w.type == ctype]
        usable.sort(key=lambda w: reading_sort_key(w.yomi or w.name))
        return [w.name for w in usable]

    def summon_option(self, name: str) -> SummonOption | None:
        return next((o for o in self.summons if o.name == name), None)

    def alias_for_summon(self, name: Optional[str]) -> str:
        if not name:
            return ""
        option = self.summon_option(name)
        return (option.alias if option and option.alias else None) or name

    def default_summon_name(self) -> str:
        return self.summons[0].name if self.summons else DEFAULT_SUMMON_NAME
