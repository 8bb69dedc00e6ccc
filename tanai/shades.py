"""
Shade catalogue — the one place skin shades are mapped to bands and Fitzpatrick types.

Every other module asks this table; nothing inspects shade labels as strings.
"""

import re

from tanai.schemas import ShadeInfo, SkinBand, SkinShade

SHADE_BANDS: dict[SkinShade, SkinBand] = {
    SkinShade.VERY_LIGHT: SkinBand.LIGHT,
    SkinShade.LIGHT: SkinBand.LIGHT,
    SkinShade.LIGHT_MEDIUM: SkinBand.LIGHT,
    SkinShade.MEDIUM: SkinBand.MEDIUM,
    SkinShade.MEDIUM_DEEP: SkinBand.MEDIUM,
    SkinShade.DEEP: SkinBand.DARK,
}

FITZPATRICK_TYPES: dict[str, SkinShade] = {
    "I": SkinShade.VERY_LIGHT,
    "II": SkinShade.LIGHT,
    "III": SkinShade.LIGHT_MEDIUM,
    "IV": SkinShade.MEDIUM,
    "V": SkinShade.MEDIUM_DEEP,
    "VI": SkinShade.DEEP,
}

DEFAULT_SHADE = SkinShade.MEDIUM

# Longest numerals first so "III" is not read as "I"
_FITZPATRICK_PATTERN = re.compile(r"\btype\s+(VI|IV|V|III|II|I)\b", re.IGNORECASE)


def band_for(shade: SkinShade) -> SkinBand:
    return SHADE_BANDS[shade]


def fitzpatrick_for(shade: SkinShade) -> str:
    for numeral, mapped in FITZPATRICK_TYPES.items():
        if mapped is shade:
            return numeral
    raise KeyError(shade)


def darker_shades(current: SkinShade) -> list[SkinShade]:
    """Shades strictly darker than `current`, lightest first."""
    return [shade for shade in SkinShade if shade.order > current.order]


def target_choices(current: SkinShade) -> list[SkinShade]:
    """Valid target shades: keeping the current shade, or going darker."""
    return [current] + darker_shades(current)


def shade_from_fitzpatrick(text: str) -> SkinShade:
    """Map free text like 'Fitzpatrick Type III, warm undertone' onto a shade.

    Falls back to DEFAULT_SHADE when no type numeral is present.
    """
    match = _FITZPATRICK_PATTERN.search(text or "")
    if not match:
        return DEFAULT_SHADE
    return FITZPATRICK_TYPES[match.group(1).upper()]


def shade_from_label(label: str) -> SkinShade:
    """Resolve a display label ('Light Medium') or enum value ('light_medium')."""
    key = label.strip().lower().replace(" ", "_").replace("-", "_")
    try:
        return SkinShade(key)
    except ValueError:
        raise ValueError(f"Unknown skin shade: {label!r}") from None


def shade_catalogue() -> list[ShadeInfo]:
    return [
        ShadeInfo(
            shade=shade,
            label=shade.label,
            order=shade.order,
            band=band_for(shade),
            fitzpatrick=fitzpatrick_for(shade),
        )
        for shade in SkinShade
    ]
