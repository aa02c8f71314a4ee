# io_utils.py - rollcut
# Reading the rooms CSV, parsing config, turning config into layout settings.

import csv
from typing import Dict, List, Mapping

from models import (
    CUTTING_MARGIN, DEFAULT_ROLL_WIDTH, STAIR_DEPTH, ROTATION_PER_ROOM,
    LayoutSettings, RoomSpec
)
from orientation import validate_rotation_policy


# ------------------------------
# Boolean parser
# ------------------------------

def parse_bool(val: str) -> bool:
    if val is None:
        return False
    v = val.strip().lower()
    return v in ("1", "true", "yes", "y", "on")


# ------------------------------
# Config parser (strict one key per line)
# ------------------------------

def parse_properties(path: str) -> Dict[str, str]:
    """
    Conservative parser:
    - One key=value per line
    - Lines without '=' are ignored
    - '#' at start of line = comment
    """
    props: Dict[str, str] = {}
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, val = line.split("=", 1)
            props[key.strip()] = val.strip()
    return props


def config_float(cfg: Mapping[str, str], key: str, default: float) -> float:
    raw = cfg.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Config value '{key}' must be a number, got '{raw}'.") from None


def load_settings(cfg: Mapping[str, str]) -> LayoutSettings:
    """Layout settings from config keys, defaults for anything missing."""
    policy = (cfg.get("rotation-policy") or ROTATION_PER_ROOM).strip().lower()
    settings = LayoutSettings(
        roll_width=config_float(cfg, "roll-width", DEFAULT_ROLL_WIDTH),
        cutting_margin=config_float(cfg, "cutting-margin", CUTTING_MARGIN),
        stair_depth=config_float(cfg, "stair-depth", STAIR_DEPTH),
        rotation_policy=validate_rotation_policy(policy)
    )
    if settings.roll_width <= 0:
        raise ValueError(f"Config value 'roll-width' must be positive, got {settings.roll_width:g}.")
    return settings


# ------------------------------
# Rooms CSV
# ------------------------------

def parse_rooms(path: str) -> List[RoomSpec]:
    """
    Columns: name, length, width (required), stairs, stair_count (optional).
    Dimensions are kept as text; the layout engine drops unusable rooms.
    """
    rooms: List[RoomSpec] = []
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)

        required = {"name", "length", "width"}
        missing = required - set(reader.fieldnames or [])
        if missing:
            raise ValueError(
                f"rooms.csv missing required columns: {', '.join(sorted(missing))}"
            )

        for row in reader:
            if not any((v or "").strip() for v in row.values() if isinstance(v, str)):
                continue

            is_stairs = parse_bool(row.get("stairs"))
            name = (row.get("name") or "").strip()
            if not name:
                name = "Staircase" if is_stairs else f"Room {len(rooms) + 1}"

            rooms.append(
                RoomSpec(
                    name=name,
                    length=(row.get("length") or "").strip(),
                    width=(row.get("width") or "").strip(),
                    is_stairs=is_stairs,
                    stair_count=(row.get("stair_count") or "0").strip()
                )
            )

    return rooms
