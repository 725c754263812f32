"""Runtime settings, read from the environment (or a .env file at the project root)."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent.parent / ".env")

# --- Window ---
WIDTH = int(os.getenv("HEARTFIELD_WIDTH", "960"))
HEIGHT = int(os.getenv("HEARTFIELD_HEIGHT", "720"))
FPS = int(os.getenv("HEARTFIELD_FPS", "60"))  # 0 = as fast as the display allows
PIXEL_SCALE = int(os.getenv("HEARTFIELD_PIXEL_SCALE", "1"))
TITLE = os.getenv("HEARTFIELD_TITLE", "Heartfield")

# --- Heart geometry ---
HEART_SCALE = float(os.getenv("HEARTFIELD_HEART_SCALE", "9"))
LAYERS = int(os.getenv("HEARTFIELD_LAYERS", "8"))
DENSITY = float(os.getenv("HEARTFIELD_DENSITY", "2.2"))

# --- Sound ---
SOUND_ENABLED = os.getenv("HEARTFIELD_SOUND", "false").lower() == "true"
LOCALE = os.getenv("HEARTFIELD_LOCALE", "vi")
AUDIO_DEVICE = os.getenv("HEARTFIELD_AUDIO_DEVICE") or None
