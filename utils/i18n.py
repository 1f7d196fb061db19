"""Message strings for direct messages and console output.

Two languages ship with the bot: English ("en") and Portuguese ("pt").
Unknown keys fall back to English, then to the key itself.
"""

from __future__ import annotations

from typing import Any

__all__ = ["t", "set_language", "get_language", "available_languages"]

_STRINGS: dict[str, dict[str, str]] = {
    "en": {
        "dm.greeting.game": "Hey {username}! Saw you're playing {game}, here are some memes for you:",
        "dm.greeting.listening": "Hey {username}! Saw you're listening to {track}, here are some memes for you:",
        "dm.closing.game": "Have fun playing! 🎮",
        "dm.closing.listening": "Enjoy the music! 🎧",
        "track.song": "{song} by {artist}",
        "track.player": "{track} on {player}",
        "search.query": "{subject} meme",
        "search.title": "{subject} meme",
        "signal.game": "playing {name}",
        "signal.listening": "listening to {track}",
    },
    "pt": {
        "dm.greeting.game": "E aí {username}! Vi que você está jogando {game}, aqui vão alguns memes pra você:",
        "dm.greeting.listening": "E aí {username}! Vi que você está ouvindo {track}, aqui vão alguns memes pra você:",
        "dm.closing.game": "Divirta-se jogando! 🎮",
        "dm.closing.listening": "Curta a música! 🎧",
        "track.song": "{song} de {artist}",
        "track.player": "{track} no {player}",
        "search.query": "{subject} meme",
        "search.title": "meme de {subject}",
        "signal.game": "jogando {name}",
        "signal.listening": "ouvindo {track}",
    },
}

_language = "en"


def available_languages() -> list[str]:
    return sorted(_STRINGS)


def set_language(language: str) -> str:
    """Switch the active language; unknown codes keep English."""
    global _language
    lang = (language or "").strip().lower()
    _language = lang if lang in _STRINGS else "en"
    return _language


def get_language() -> str:
    return _language


def t(key: str, **kwargs: Any) -> str:
    """Look up `key` in the active language and format it with kwargs."""
    template = _STRINGS[_language].get(key) or _STRINGS["en"].get(key) or key
    try:
        return template.format(**kwargs)
    except (KeyError, IndexError):
        return template
