# services/chat.py
# Styled chat text: segments, line sinks, and encoders for the formats a
# Minecraft host understands (plain text, legacy "§" codes, JSON text components).

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

# name -> legacy formatting code
CHAT_COLORS: Dict[str, str] = {
    "black": "0",
    "dark_blue": "1",
    "dark_green": "2",
    "dark_aqua": "3",
    "dark_red": "4",
    "dark_purple": "5",
    "gold": "6",
    "gray": "7",
    "dark_gray": "8",
    "blue": "9",
    "green": "a",
    "aqua": "b",
    "red": "c",
    "light_purple": "d",
    "yellow": "e",
    "white": "f",
}
_BOLD_CODE = "l"
_RESET_CODE = "r"


def is_chat_color(name: str) -> bool:
    return (name or "").lower() in CHAT_COLORS


@dataclass(frozen=True)
class Segment:
    text: str
    color: Optional[str] = None
    bold: bool = False
    hover: Optional[str] = None


ChatLine = List[Segment]


class OutputSink(Protocol):
    def send(self, line: ChatLine) -> None:
        ...


class ListSink:
    """Collects lines in memory; what the HTTP layer hands back to the host."""

    def __init__(self):
        self.lines: List[ChatLine] = []

    def send(self, line: ChatLine) -> None:
        self.lines.append(line)


def to_plain(line: Sequence[Segment]) -> str:
    return "".join(s.text for s in line)


def to_legacy(line: Sequence[Segment]) -> str:
    out = []
    for s in line:
        if not s.text:
            continue
        codes = "§" + _RESET_CODE
        if s.color in CHAT_COLORS:
            codes += "§" + CHAT_COLORS[s.color]
        if s.bold:
            codes += "§" + _BOLD_CODE
        out.append(codes + s.text)
    return "".join(out)


def to_component(line: Sequence[Segment]) -> Dict[str, Any]:
    """JSON text component, e.g. for /tellraw."""
    extra = []
    for s in line:
        part: Dict[str, Any] = {"text": s.text, "bold": bool(s.bold)}
        if s.color:
            part["color"] = s.color
        if s.hover:
            part["hoverEvent"] = {"action": "show_text", "contents": s.hover}
        extra.append(part)
    return {"text": "", "extra": extra}


def to_component_json(line: Sequence[Segment]) -> str:
    return json.dumps(to_component(line), ensure_ascii=False, separators=(",", ":"))


ENCODERS = {
    "plain": to_plain,
    "legacy": to_legacy,
    "json": to_component_json,
}
