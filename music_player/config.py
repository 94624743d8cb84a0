APP_TITLE = "Music Player"

SUPPORTED_EXTENSIONS = (".mp3", ".wav", ".m4a", ".ogg")

DEFAULT_VOLUME = 0.7
DEFAULT_ADVANCE_POLICY = "continuous"
DEFAULT_WRAP_AROUND = True

EVENT_PUMP_INTERVAL_MS = 50
WATCHDOG_INTERVAL_MS = 250

# mixer reports "not busy" for a moment right after play()
COMPLETION_GRACE_SEC = 1.2
