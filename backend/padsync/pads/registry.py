# backend/padsync/pads/registry.py
import re
from dataclasses import dataclass
from fastapi import Depends, HTTPException
from ..shared.config import Settings, get_settings

KEY_RE = re.compile(r"^[a-z][a-z0-9_]*$")


@dataclass(frozen=True)
class PadSpec:
    key: str
    title: str

    @property
    def save_action(self) -> str:
        """nonce 에 묶는 액션 이름 (패드마다 다름)"""
        return f"{self.key}_save"


def load_pads(cfg: Settings) -> dict[str, PadSpec]:
    pads: dict[str, PadSpec] = {}
    for key, title in cfg.pads_list:
        if not KEY_RE.match(key):
            raise ValueError(f"invalid pad key: {key!r}")
        pads[key] = PadSpec(key=key, title=title)
    return pads


def get_pads(cfg: Settings = Depends(get_settings)) -> dict[str, PadSpec]:
    return load_pads(cfg)


def get_pad(key: str, pads: dict[str, PadSpec] = Depends(get_pads)) -> PadSpec:
    pad = pads.get(key)
    if not pad:
        raise HTTPException(404, "Unknown pad")
    return pad
