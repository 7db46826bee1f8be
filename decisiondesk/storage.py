import json
import os
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .logs import get_logger

THEMES = ("light", "dark")
DEFAULT_THEME = "light"

PROFILE_FILE = "profile.json"
SETTINGS_FILE = "settings.json"
HISTORY_FILE = "decision_history.jsonl"

logger = get_logger("storage")


def now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def new_id(prefix: str = "dec") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def append_jsonl(path: str, record: Dict) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(json.dumps(record, ensure_ascii=False) + "\n")


def read_jsonl(path: str, limit: int = 200) -> List[Dict]:
    if not os.path.exists(path):
        return []
    rows: List[Dict] = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                row = json.loads(line)
            except json.JSONDecodeError:
                logger.warning("skipping unreadable line in %s", path)
                continue
            if isinstance(row, dict):
                rows.append(row)
    return rows[-limit:]


def overwrite_jsonl(path: str, rows: List[Dict]) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for r in rows:
            f.write(json.dumps(r, ensure_ascii=False) + "\n")


def read_json(path: str) -> Optional[Dict]:
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        logger.warning("could not read %s, treating it as missing", path)
        return None
    return data if isinstance(data, dict) else None


def write_json(path: str, data: Dict) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


class Storage:
    """Key-value persistence for profile, theme and decision history.

    Everything lives under one data directory:
    - profile.json                the onboarding profile
    - settings.json               {"theme": "light" | "dark"}
    - decision_history.jsonl      one saved decision per line
    """

    def __init__(self, data_dir: str):
        self.data_dir = data_dir

    def _path(self, name: str) -> str:
        return os.path.join(self.data_dir, name)

    @property
    def history_path(self) -> str:
        return self._path(HISTORY_FILE)

    # profile
    def get_profile(self) -> Optional[Dict]:
        profile = read_json(self._path(PROFILE_FILE))
        return profile or None

    def save_profile(self, profile: Dict) -> None:
        write_json(self._path(PROFILE_FILE), dict(profile))
        logger.info("profile saved")

    # theme
    def get_theme(self) -> str:
        settings = read_json(self._path(SETTINGS_FILE)) or {}
        theme = settings.get("theme")
        return theme if theme in THEMES else DEFAULT_THEME

    def save_theme(self, theme: str) -> None:
        settings = read_json(self._path(SETTINGS_FILE)) or {}
        settings["theme"] = theme
        write_json(self._path(SETTINGS_FILE), settings)

    # decisions
    def list_decisions(self, limit: int = 500) -> List[Dict]:
        return read_jsonl(self.history_path, limit=limit)

    def save_decision(self, record: Dict) -> Dict:
        saved = dict(record)
        saved.setdefault("decision_id", new_id())
        saved["saved_at_utc"] = now_iso()
        append_jsonl(self.history_path, saved)
        logger.info("decision %s saved", saved["decision_id"])
        return saved

    def update_follow_up(self, decision_id: str, outcome: str, notes: str) -> bool:
        """
        Updates an existing decision record by decision_id.
        Returns True if updated, False if not found.
        """
        rows = read_jsonl(self.history_path, limit=50000)
        updated = False

        for r in rows:
            if r.get("decision_id") == decision_id:
                r["follow_up"] = {
                    "outcome": outcome,
                    "notes": notes,
                    "updated_at_utc": now_iso(),
                }
                updated = True
                break

        if updated:
            overwrite_jsonl(self.history_path, rows)
        return updated

    def delete_decision(self, decision_id: str) -> bool:
        rows = read_jsonl(self.history_path, limit=50000)
        kept = [r for r in rows if r.get("decision_id") != decision_id]
        if len(kept) == len(rows):
            return False
        overwrite_jsonl(self.history_path, kept)
        logger.info("decision %s deleted", decision_id)
        return True
