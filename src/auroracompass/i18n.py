"""Simple two-language (ko/en) translation helper."""

from auroracompass.geometry import cardinal_direction
from auroracompass.models import LookCandidate
from auroracompass.scoring import activity_level

_STRINGS: dict[str, dict[str, str]] = {
    "activity_quiet": {
        "ko": "조용함",
        "en": "Quiet",
    },
    "activity_minor": {
        "ko": "약한 활동",
        "en": "Minor Activity",
    },
    "activity_moderate": {
        "ko": "보통 활동",
        "en": "Moderate Activity",
    },
    "activity_high": {
        "ko": "강한 활동",
        "en": "High Activity",
    },
    "activity_storm": {
        "ko": "폭풍 수준",
        "en": "Storm Conditions",
    },
    "look_above": {
        "ko": "{direction} 방향, 지평선 위 {elevation:.1f}°를 보세요",
        "en": "Look {direction}, {elevation:.1f}° above the horizon",
    },
    "look_below": {
        "ko": "현재 지평선 아래 {elevation:.1f}°",
        "en": "Currently {elevation:.1f}° below horizon",
    },
    "no_data": {
        "ko": "오로라 데이터 없음",
        "en": "No aurora data",
    },
    "no_location": {
        "ko": "위치 권한을 켜주세요",
        "en": "Enable Location",
    },
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key


def activity_text(probability: float, lang: str = "en") -> str:
    """Localized activity label for a forecast probability."""
    return t(f"activity_{activity_level(probability)}", lang)


def look_hint(candidate: LookCandidate | None, lang: str = "en") -> str:
    """One-line instruction telling the observer where to look."""
    if candidate is None:
        return t("no_data", lang)
    geometry = candidate.geometry
    if geometry.above_horizon:
        return t("look_above", lang).format(
            direction=cardinal_direction(geometry.azimuth_deg),
            elevation=geometry.elevation_deg,
        )
    return t("look_below", lang).format(elevation=abs(geometry.elevation_deg))
