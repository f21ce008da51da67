"""Key name normalization."""

from selenium.webdriver.common.keys import Keys


KEY_MAPPING = {
    "ENTER": Keys.ENTER,
    "RETURN": Keys.RETURN,
    "TAB": Keys.TAB,
    "ESCAPE": Keys.ESCAPE,
    "ESC": Keys.ESCAPE,
    "SPACE": Keys.SPACE,
    "BACKSPACE": Keys.BACKSPACE,
    "DELETE": Keys.DELETE,
    "DEL": Keys.DELETE,
    "ARROW_UP": Keys.ARROW_UP,
    "ARROWUP": Keys.ARROW_UP,
    "UP": Keys.ARROW_UP,
    "ARROW_DOWN": Keys.ARROW_DOWN,
    "ARROWDOWN": Keys.ARROW_DOWN,
    "DOWN": Keys.ARROW_DOWN,
    "ARROW_LEFT": Keys.ARROW_LEFT,
    "ARROWLEFT": Keys.ARROW_LEFT,
    "LEFT": Keys.ARROW_LEFT,
    "ARROW_RIGHT": Keys.ARROW_RIGHT,
    "ARROWRIGHT": Keys.ARROW_RIGHT,
    "RIGHT": Keys.ARROW_RIGHT,
    "PAGE_UP": Keys.PAGE_UP,
    "PAGEUP": Keys.PAGE_UP,
    "PAGE_DOWN": Keys.PAGE_DOWN,
    "PAGEDOWN": Keys.PAGE_DOWN,
    "HOME": Keys.HOME,
    "END": Keys.END,
    "F1": Keys.F1,
    "F2": Keys.F2,
    "F3": Keys.F3,
    "F4": Keys.F4,
    "F5": Keys.F5,
    "F6": Keys.F6,
    "F7": Keys.F7,
    "F8": Keys.F8,
    "F9": Keys.F9,
    "F10": Keys.F10,
    "F11": Keys.F11,
    "F12": Keys.F12,
}


def normalize_key(key: str) -> str:
    """Map a key name (Enter, ArrowDown, esc...) to its Selenium key; other text passes through."""
    return KEY_MAPPING.get(key.strip().upper(), key) if key else key


__all__ = [
    'KEY_MAPPING',
    'normalize_key',
]
