import json
from datetime import datetime

LOG_FILE = "log.json"


def set_log_file(path) -> None:
    """Redirect the JSON event log."""
    global LOG_FILE
    LOG_FILE = str(path)


def log_event(event_type: str, message: str, extra: dict = None):
    """
    Logs events to a JSON file for debugging & monitoring.
    """
    entry = {
        "time": datetime.now().isoformat(),
        "type": event_type,
        "message": message
    }
    if extra:
        entry["extra"] = extra

    print(f"[{event_type}] {message}")

    try:
        with open(LOG_FILE, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, ensure_ascii=False) + "\n")
    except OSError as e:
        print(f"Log write error: {e}")
