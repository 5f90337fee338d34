# services/leaderboard_renderer.py
# Chat rendering of the playtime leaderboard.
# Chat has no fixed-width font, so alignment is done in characters: every
# name column is padded to one common width that already includes the 3
# character podium slot ("1. "), and the border is sized from the widest line.

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from statscore.core.utils import format_daily_playtime
from statscore.services.chat import ChatLine, OutputSink, Segment
from statscore.services.leaderboard import LeaderboardEntry, is_excluded, normalize_exclusions

BASE_PADDING = 16
RANK_LENGTH = 3
HEADER_TEXT = "Playtime:"
EMPTY_TEXT = "No playtime data available"
BORDER_CHAR = "="
DAYS_GAP = "    "
DEFAULT_NAME_COLOR = "white"


@dataclass(frozen=True)
class HourBand:
    min_hours: float
    max_hours: float
    digit_colors: Tuple[str, ...]  # more than one color: one per digit position
    unit_color: str
    star: Optional[str] = None
    star_color: Optional[str] = None


@dataclass(frozen=True)
class PodiumStyle:
    rank: int
    color: str
    bold: bool


HOUR_BANDS: Tuple[HourBand, ...] = (
    HourBand(0, 100, ("gray",), "gray"),
    HourBand(100, 200, ("white",), "white"),
    HourBand(200, 300, ("gold",), "gold"),
    HourBand(300, 400, ("aqua",), "aqua"),
    HourBand(400, 500, ("dark_green",), "dark_green"),
    HourBand(500, 600, ("dark_aqua",), "dark_aqua"),
    HourBand(600, 700, ("dark_red",), "dark_red"),
    HourBand(700, 800, ("light_purple",), "light_purple"),
    HourBand(800, 900, ("blue",), "blue"),
    HourBand(900, 1000, ("dark_purple",), "dark_purple"),
    HourBand(1000, 1100, ("gold", "yellow", "green", "aqua"), "light_purple", "✫", "red"),
    HourBand(1100, 1200, ("white",), "gray", "✪", "gray"),
    HourBand(1200, 1300, ("yellow",), "gray", "✪", "gold"),
    HourBand(1300, 1400, ("aqua",), "gray", "✪", "dark_aqua"),
    HourBand(1400, 1500, ("green",), "gray", "✪", "dark_green"),
    HourBand(1500, 1600, ("dark_aqua",), "gray", "✪", "blue"),
    HourBand(1600, 1700, ("red",), "gray", "✪", "dark_red"),
    HourBand(1700, 1800, ("light_purple",), "gray", "✪", "dark_purple"),
    HourBand(1800, 1900, ("blue",), "gray", "✪", "dark_blue"),
    HourBand(1900, 2000, ("dark_purple",), "gray", "✪", "dark_gray"),
    HourBand(2000, 2100, ("gray", "white", "white", "gray"), "dark_gray", "✪", "gray"),
)

PODIUM: Dict[int, PodiumStyle] = {
    1: PodiumStyle(1, "gold", True),
    2: PodiumStyle(2, "white", True),
    3: PodiumStyle(3, "dark_purple", True),
}
NO_PODIUM = PodiumStyle(0, "white", False)


def find_band(hours: float) -> HourBand:
    for band in HOUR_BANDS:
        if band.min_hours <= hours < band.max_hours:
            return band
    # above the table (and anything the table cannot place) uses the top band
    return HOUR_BANDS[-1]


def podium_for(position: int) -> PodiumStyle:
    return PODIUM.get(position, NO_PODIUM)


def hours_text(hours: float) -> str:
    return f"{int(hours)}" if hours >= 1000.0 else f"{hours:.2f}"


def days_text(hours: float) -> str:
    return f"({hours / 24.0:.2f}d)"


def format_hours(hours: float, band: Optional[HourBand] = None, hover: Optional[str] = None) -> List[Segment]:
    band = band or find_band(hours)
    segments: List[Segment] = []
    if band.star:
        segments.append(Segment(band.star + " ", band.star_color))
    text = hours_text(hours)
    if len(band.digit_colors) > 1:
        for i, ch in enumerate(text):
            color = band.digit_colors[i] if i < len(band.digit_colors) else "white"
            segments.append(Segment(ch, color, hover=hover))
    else:
        segments.append(Segment(text, band.digit_colors[0], hover=hover))
    segments.append(Segment("h", band.unit_color, hover=hover))
    return segments


class LeaderboardRenderer:
    def __init__(self, base_padding: int = BASE_PADDING):
        self.base_padding = base_padding

    # ---------- layout ----------

    def name_column_width(self, entries: Sequence[LeaderboardEntry]) -> int:
        longest = max((len(e.name + ":") for e in entries), default=0)
        return max(self.base_padding, longest + RANK_LENGTH)

    def line_width(self, position: int, hours: float, column: int) -> int:
        width = RANK_LENGTH if position in PODIUM else 0
        width += column
        width += len(hours_text(hours)) + 1  # +1 for the "h"
        if hours >= 1000.0:
            width += 1  # star glyph
        if hours >= 100.0:
            width += len(days_text(hours)) + len(DAYS_GAP)
        return width

    def border_width(self, entries: Sequence[LeaderboardEntry], column: int) -> int:
        widest = max((self.line_width(i, e.lifetime_hours, column) for i, e in enumerate(entries, 1)), default=0)
        return max(widest, len(HEADER_TEXT)) + 3

    # ---------- lines ----------

    def entry_line(self, entry: LeaderboardEntry, position: int, column: int,
                   colors: Mapping[str, str]) -> ChatLine:
        podium = podium_for(position)
        line: ChatLine = []
        if podium is not NO_PODIUM:
            line.append(Segment(f"{podium.rank}.", podium.color, podium.bold))
            line.append(Segment(" "))

        name = entry.name + ":"
        pad_to = column - RANK_LENGTH if podium is not NO_PODIUM else column
        line.append(Segment(name.ljust(pad_to), colors.get(entry.name.lower(), DEFAULT_NAME_COLOR)))

        hover = format_daily_playtime(entry.daily_seconds)
        line.extend(format_hours(entry.lifetime_hours, hover=hover))

        if entry.lifetime_hours >= 100.0:
            line.append(Segment(DAYS_GAP + days_text(entry.lifetime_hours), podium.color, True))
        return line

    def render(self, entries: Iterable[LeaderboardEntry], colors: Optional[Mapping[str, str]] = None,
               exclusions: Optional[Iterable[str]] = None) -> List[ChatLine]:
        excluded = normalize_exclusions(exclusions)
        ranked = [e for e in entries if not is_excluded(e.name, excluded)]
        colors = {k.lower(): v for k, v in (colors or {}).items()}

        if not ranked:
            return [[Segment(EMPTY_TEXT, "yellow")]]

        column = self.name_column_width(ranked)
        border = [Segment(BORDER_CHAR * self.border_width(ranked, column), "gold", True)]

        lines: List[ChatLine] = [border, [Segment(HEADER_TEXT, "dark_green")]]
        for position, entry in enumerate(ranked, 1):
            lines.append(self.entry_line(entry, position, column, colors))
            if position == 3 and len(ranked) > 3:
                lines.append([Segment("")])
        lines.append(border)
        return lines

    def display(self, entries: Iterable[LeaderboardEntry], sink: OutputSink,
                colors: Optional[Mapping[str, str]] = None, exclusions: Optional[Iterable[str]] = None) -> int:
        """Send the rendered board to ``sink`` one line at a time, top to bottom."""
        lines = self.render(entries, colors, exclusions)
        for line in lines:
            sink.send(line)
        return len(lines)
