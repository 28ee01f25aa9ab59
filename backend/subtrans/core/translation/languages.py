"""Language code to display name mapping used in prompts."""

LANGUAGE_NAMES = {
    "ko": "Korean",
    "en": "English",
    "uk": "Ukrainian",
    "ja": "Japanese",
    "ru": "Russian",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "zh": "Chinese",
}


def language_name(code: str) -> str:
    """Return the English name for a language code.

    Unknown codes are returned unchanged so that callers may pass a full
    language name directly.
    """
    return LANGUAGE_NAMES.get(code, code)
