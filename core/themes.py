"""Card themes - opaque glyph tables used only for display."""

from enum import Enum


class CardTheme(Enum):
    """Selectable card faces."""

    OLYMPICS = "olympics"
    FANTASY = "fantasy"
    VEHICLES = "vehicles"
    THANKSGIVING = "thanksgiving"
    SPORTS = "sports"
    EASTER = "easter"

    def __str__(self) -> str:
        return self.display_name

    @property
    def display_name(self) -> str:
        """Return the label shown in the theme picker."""
        return THEME_NAMES[self]

    @property
    def icon(self) -> str:
        """Return the theme's picker icon."""
        return THEME_ICONS[self]

    @property
    def glyphs(self) -> tuple[str, ...]:
        """Return the card faces, indexed by symbol index."""
        return THEME_GLYPHS[self]

    def glyph(self, symbol_index: int) -> str:
        """Return the face for a symbol index."""
        return self.glyphs[symbol_index]

    @classmethod
    def from_string(cls, s: str) -> "CardTheme":
        """Look up a theme by its key, e.g. 'fantasy'."""
        try:
            return cls(s.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown theme: {s}") from None


THEME_NAMES: dict[CardTheme, str] = {
    CardTheme.OLYMPICS: "Winter",
    CardTheme.FANTASY: "Fantasy",
    CardTheme.VEHICLES: "Vehicles",
    CardTheme.THANKSGIVING: "Holiday",
    CardTheme.SPORTS: "Sports",
    CardTheme.EASTER: "Easter",
}

THEME_ICONS: dict[CardTheme, str] = {
    CardTheme.OLYMPICS: "❄️",
    CardTheme.FANTASY: "🏰",
    CardTheme.VEHICLES: "🚗",
    CardTheme.THANKSGIVING: "🦃",
    CardTheme.SPORTS: "⚽",
    CardTheme.EASTER: "🐰",
}

THEME_GLYPHS: dict[CardTheme, tuple[str, ...]] = {
    CardTheme.OLYMPICS: ("⛷️", "🏂", "⛸️", "🎿", "🛷", "🏒", "🥌", "❄️", "🏔️", "🥇"),
    CardTheme.FANTASY: ("🦄", "👸", "🏰", "🐉", "🧚", "🧙‍♂️", "🗡️", "👑", "🔮", "🧝‍♀️"),
    CardTheme.VEHICLES: ("🚗", "🚕", "🚙", "🚌", "🚎", "🏎️", "🚓", "🚑", "🚒", "🚛"),
    CardTheme.THANKSGIVING: ("🦃", "🥧", "🌽", "🥔", "🥖", "🍗", "🍽️", "🍁", "🎃", "👨‍👩‍👧‍👦"),
    CardTheme.SPORTS: ("⚽", "🏀", "🏈", "⚾", "🎾", "🏐", "🏉", "🎳", "🏓", "⛳"),
    CardTheme.EASTER: ("🐰", "🥚", "🐣", "🌷", "🦋", "🐑", "🌸", "🧺", "🐥", "🌈"),
}
