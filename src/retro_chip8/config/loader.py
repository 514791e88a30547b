import re
import yaml
from typing import Dict, Any
from .models import SystemConfig, MachineConfig, DisplayConfig, DEFAULT_KEYMAP

_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r', encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return self._parse_config(data or {})

    def load_from_string(self, text: str) -> SystemConfig:
        return self._parse_config(yaml.safe_load(text) or {})

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        if not isinstance(data, dict):
            raise ValueError("Configuration root must be a mapping.")

        machine_data = data.get("machine", {}) or {}
        machine = MachineConfig(
            ticks_per_frame=self._parse_positive(machine_data.get("ticks_per_frame", 10), "ticks_per_frame"),
            frame_rate=self._parse_positive(machine_data.get("frame_rate", 60), "frame_rate"),
            trace=self._parse_bool(machine_data.get("trace", False), "trace"),
        )

        display_data = data.get("display", {}) or {}
        display = DisplayConfig(
            scale=self._parse_positive(display_data.get("scale", 20), "scale"),
            foreground=self._parse_color(display_data.get("foreground", "#32A956")),
            background=self._parse_color(display_data.get("background", "#000000")),
        )

        # Parse Keymap
        keymap = dict(DEFAULT_KEYMAP)
        if "keymap" in data:
            keymap = {}
            for key_name, index in (data.get("keymap") or {}).items():
                value = self._parse_int(index)
                if not 0 <= value < 16:
                    raise ValueError(f"Keypad index out of range for key '{key_name}': {value}")
                keymap[self._normalize_key_name(key_name)] = value

        return SystemConfig(machine=machine, display=display, keymap=keymap)

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.lower().startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")

    def _parse_positive(self, value: Any, name: str) -> int:
        parsed = self._parse_int(value)
        if parsed <= 0:
            raise ValueError(f"'{name}' must be a positive integer, got {parsed}")
        return parsed

    def _parse_color(self, value: Any) -> str:
        if not isinstance(value, str) or not _COLOR_PATTERN.match(value):
            raise ValueError(f"Invalid color '{value}', expected #RRGGBB")
        return value.upper()

    def _parse_bool(self, value: Any, name: str) -> bool:
        if not isinstance(value, bool):
            raise ValueError(f"'{name}' must be true or false, got {value!r}")
        return value

    # @intent:responsibility 1文字のキー名（"q" など）は大文字に揃え、"Space" や "F1" のような名前はQtの表記のまま残します。
    def _normalize_key_name(self, key_name: Any) -> str:
        name = str(key_name)
        return name.upper() if len(name) == 1 else name
