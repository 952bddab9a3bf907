"""Simple two-language (ko/en) translation helper."""

_STRINGS: dict[str, dict[str, str]] = {
    "page_title": {
        "ko": "천체 시계",
        "en": "Celestial Clock",
    },
    "awaiting_location": {
        "ko": "위치 정보를 기다리는 중이에요...",
        "en": "Awaiting location access to personalize your sky...",
    },
    "advisory_location": {
        "ko": "위치 접근이 거부되어 기본 위치의 하늘을 보여드려요.",
        "en": "Location access denied. Displaying generic data.",
    },
    "briefing_title": {
        "ko": "오늘의 하늘",
        "en": "Cosmic Briefing",
    },
    "sunrise": {
        "ko": "해돋이",
        "en": "Sunrise",
    },
    "sunset": {
        "ko": "해넘이",
        "en": "Sunset",
    },
    "moonrise": {
        "ko": "달돋이",
        "en": "Moonrise",
    },
    "moonset": {
        "ko": "달넘이",
        "en": "Moonset",
    },
    "none_today": {
        "ko": "없음",
        "en": "None today",
    },
    "illuminated": {
        "ko": "{percent}% 밝음",
        "en": "{percent}% illuminated",
    },
    "cycle_day": {
        "ko": "주기 {day}일째",
        "en": "Day {day} of cycle",
    },
    "btn_set_alarm": {
        "ko": "진짜 해돋이 알람 맞추기",
        "en": "Set True Sunrise Alarm",
    },
    "btn_clear_alarm": {
        "ko": "알람 끄기",
        "en": "Clear Alarm",
    },
    "btn_dismiss": {
        "ko": "확인",
        "en": "Dismiss",
    },
    "alarm_set_for": {
        "ko": "해돋이 알람: {time}",
        "en": "Sunrise alarm set for {time}",
    },
    "alarm_unavailable": {
        "ko": "알람을 맞출 수 없어요. ({error})",
        "en": "Could not set the alarm. ({error})",
    },
    "ringing_title": {
        "ko": "좋은 아침이에요!",
        "en": "Good Morning!",
    },
    "ringing_body": {
        "ko": "지금 계신 곳에 해가 뜨고 있어요.",
        "en": "The sun is rising at your location.",
    },
    "btn_zoom_in": {
        "ko": "＋",
        "en": "＋",
    },
    "btn_zoom_out": {
        "ko": "－",
        "en": "－",
    },
    "btn_reset_view": {
        "ko": "↺ 초기화",
        "en": "Reset View",
    },
    "footer": {
        "ko": "천체 시계 - 우주와 나를 잇는 시계",
        "en": "Celestial Clock - Your personal connection to the cosmos",
    },
    "New Moon": {"ko": "삭", "en": "New Moon"},
    "Waxing Crescent": {"ko": "초승달", "en": "Waxing Crescent"},
    "First Quarter": {"ko": "상현달", "en": "First Quarter"},
    "Waxing Gibbous": {"ko": "차오르는 달", "en": "Waxing Gibbous"},
    "Full Moon": {"ko": "보름달", "en": "Full Moon"},
    "Waning Gibbous": {"ko": "기우는 달", "en": "Waning Gibbous"},
    "Third Quarter": {"ko": "하현달", "en": "Third Quarter"},
    "Waning Crescent": {"ko": "그믐달", "en": "Waning Crescent"},
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key
