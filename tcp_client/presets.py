"""
Canned hex commands for common relay controllers.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class PresetGroup(str, Enum):
    """Preset grouping shown to operators."""
    RELAY = "relay"
    COMMON = "common"


@dataclass(frozen=True)
class HexPreset:
    """A named hex command."""
    label: str
    code: str
    group: PresetGroup


PRESETS: List[HexPreset] = [
    HexPreset("Relay1 ON", "A0 01 01 A2", PresetGroup.RELAY),
    HexPreset("Relay1 OFF", "A0 01 00 A1", PresetGroup.RELAY),
    HexPreset("Relay2 ON", "A0 02 01 A3", PresetGroup.RELAY),
    HexPreset("Relay2 OFF", "A0 02 00 A2", PresetGroup.RELAY),
    HexPreset("Ping", "FF 00 00", PresetGroup.COMMON),
    HexPreset("Status", "FF 01 00", PresetGroup.COMMON),
    HexPreset("Reset", "FF 02 00", PresetGroup.COMMON),
    HexPreset("On", "01 01 01", PresetGroup.COMMON),
    HexPreset("Off", "01 00 00", PresetGroup.COMMON),
    HexPreset("Toggle", "01 02 00", PresetGroup.COMMON),
]


def get_preset(label: str) -> Optional[HexPreset]:
    """Find a preset by label, ignoring case."""
    wanted = label.strip().lower()
    for preset in PRESETS:
        if preset.label.lower() == wanted:
            return preset
    return None


def presets_by_group(group: PresetGroup) -> List[HexPreset]:
    """Presets in one group, in display order."""
    return [preset for preset in PRESETS if preset.group == group]
