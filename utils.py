# -*- coding: utf-8 -*-

import re
import os
import sys
import math

try:
    from PIL import Image, ImageDraw, ImageFont
    HAS_PILLOW = True
except ImportError:
    HAS_PILLOW = False
    if 'PIL' not in sys.modules:
        print("Warning: 'Pillow' library not found. Tray icon creation will be skipped.")
        print("Install with: pip install Pillow")

DEFAULT_ICON_NAME = "speedreader_icon.png"

# --- Hilfsfunktionen ---

def calculate_delay(wpm):
    """Calculates the display duration per word (seconds) based on WPM."""
    if wpm <= 0: return float('inf')
    return 60.0 / wpm

def split_words(text):
    """
    Splits raw text into word tokens on runs of whitespace.

    Args:
        text (str): The raw input text.

    Returns:
        list: Non-empty word tokens in reading order. Empty for non-strings.
    """
    if not isinstance(text, str): return []
    return [w for w in re.split(r'\s+', text) if w]

def calculate_orp_index(word):
    """
    Calculates the Optimal Recognition Point (ORP) index within a word.

    The ORP sits slightly left of centre and moves right in steps as the
    word grows: 1 char -> 0, up to 5 -> 1, up to 9 -> 2, up to 13 -> 3,
    anything longer -> 4.

    Returns:
        int: Index of the ORP character. 0 for empty words.
    """
    n = len(word)
    if n <= 1: return 0
    if n <= 5: return 1
    if n <= 9: return 2
    if n <= 13: return 3
    return 4

def format_time_remaining(seconds):
    """Formats a remaining-time estimate as '42s', '3m 05s' or '1h 12m'."""
    total = int(math.ceil(max(0.0, seconds)))
    if total < 60: return f"{total}s"
    if total < 3600:
        minutes, secs = divmod(total, 60)
        return f"{minutes}m {secs:02d}s"
    hours, rest = divmod(total, 3600)
    return f"{hours}h {rest // 60:02d}m"

def resource_path(relative_path):
    """Path to a bundled resource, both as script and as PyInstaller build."""
    try:
        # PyInstaller unpacks into a temp folder stored in _MEIPASS
        base_path = sys._MEIPASS
    except AttributeError:
        base_path = os.path.abspath(".")
    return os.path.join(base_path, relative_path)


def create_default_icon(filename=DEFAULT_ICON_NAME):
    """Creates or loads the default tray icon using Pillow."""
    if not HAS_PILLOW:
        print("Pillow library required for icons. Returning None.")
        return None

    if os.path.exists(filename):
        try:
            img = Image.open(filename)
            if img.size == (64, 64): print(f"Loaded existing icon '{filename}'."); return img
            else: print(f"Existing icon '{filename}' has wrong size. Recreating.")
        except (OSError, ValueError) as e: print(f"Error opening icon '{filename}': {e}. Recreating.")

    try:
        img = Image.new('RGB', (64, 64), color='#262626'); d = ImageDraw.Draw(img)
        try: fnt = ImageFont.truetype("arial.ttf", 44)
        except OSError: print("Arial font not found, using default PIL font."); fnt = ImageFont.load_default()
        # ORP-style mark: red letter on dark background
        d.text((16, 6), "W", font=fnt, fill='#EF4444')
        img.save(filename); print(f"Default icon '{filename}' created."); return img
    except OSError as e: print(f"Could not create default icon '{filename}': {e}"); return None
