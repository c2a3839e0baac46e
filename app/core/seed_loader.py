import json
import os
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional

from app.core.config import settings

logger = logging.getLogger("app")

DEFAULT_SEED_PATH = Path(__file__).resolve().parent.parent / "data" / "seed_data.json"

def resolve_seed_path(path: Optional[str] = None) -> Path:
    path = path or settings.SEED_DATA_PATH
    return Path(path) if path else DEFAULT_SEED_PATH

def load_seed_data(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Loads the initial marketplace dataset from JSON file.
    Raises FileNotFoundError if the file is missing, ValueError if it is not valid JSON.
    Returns: Dict with "users", "hosts", "bookings", "chats", "chatMessages" lists.
    """
    seed_path = resolve_seed_path(path)
    if not os.path.exists(seed_path):
        logger.critical(f"❌ Seed data file '{seed_path}' not found!")
        raise FileNotFoundError(f"Seed data file not found at {seed_path}")

    try:
        with open(seed_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.critical(f"❌ Invalid JSON in seed data: {e}")
        raise ValueError(f"Invalid JSON in seed data file: {e}")

    if not isinstance(data, dict):
        raise ValueError("Seed data must be a JSON object")

    logger.info(f"✅ Seed data loaded from {seed_path.name}: " + ", ".join(f"{k}={len(v)}" for k, v in data.items() if isinstance(v, list)))
    return data

def get_seed_records(data: Dict[str, Any], section: str) -> List[Dict[str, Any]]:
    """
    Helper to get one section of the dataset (users, hosts...).
    Returns: list of records, empty if the section is absent.
    """
    records = data.get(section) or []
    if not isinstance(records, list):
        raise ValueError(f"Seed section '{section}' must be a list")
    return records

def build_chat_board_seed(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Attaches each seeded chat message to the board it belongs to."""
    messages = get_seed_records(data, "chatMessages")
    return [
        {**chat, "messages": [m for m in messages if m.get("chatId") == chat.get("id")]}
        for chat in get_seed_records(data, "chats")
    ]
