from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Callable, Literal, Mapping

from PIL import ImageColor

from graphing_plot.errors import ColorError


RGBA = tuple[int, int, int, int]
PlotMode = Literal["static", "interactive"]


@dataclass(frozen=True)
class ColorConfig:
    """Colors per semantic role; values are CSS color strings."""

    background: str = "#ffffff"
    grid_background: str = "#f8f8f8"
    grid_lines: str = "#e0e0e0"
    grid_main_lines: str = "#000000"
    origin: str = "#ffff00"
    x_intercept: str = "#ff0000"
    y_intercept: str = "#ff0000"
    point: str = "#ff000080"
    point_select: str = "#0000ff"

    def __post_init__(self) -> None:
        for f in fields(self):
            parse_color(getattr(self, f.name), role=f.name)

    def rgba(self, role: str) -> RGBA:
        if role not in _ROLE_NAMES:
            raise ColorError(f"Unknown color role: {role}")
        return parse_color(getattr(self, role), role=role)

    def with_overrides(self, overrides: Mapping[str, Any] | None = None) -> "ColorConfig":
        if not overrides:
            return self
        for key in overrides:
            if key not in _ROLE_NAMES:
                raise ColorError(f"Unknown color role: {key}")
        return replace(self, **{k: str(v) for k, v in overrides.items()})

    def as_dict(self) -> dict[str, str]:
        return asdict(self)


_ROLE_NAMES = frozenset(f.name for f in fields(ColorConfig))


def parse_color(value: str, *, role: str = "color") -> RGBA:
    if not isinstance(value, str) or not value.strip():
        raise ColorError(f"`{role}` must be a non-empty color string")
    try:
        rgb = ImageColor.getrgb(value.strip())
    except ValueError as exc:
        raise ColorError(f"`{role}` is not a recognised color: {value!r}") from exc
    if len(rgb) == 4:
        return (rgb[0], rgb[1], rgb[2], rgb[3])
    return (rgb[0], rgb[1], rgb[2], 255)


# Built after parse_color; construction validates every role.
STATIC_DEFAULTS = ColorConfig(grid_background="#f0f0f0", grid_lines="#f0f0f0")
INTERACTIVE_DEFAULTS = ColorConfig()


def default_colors(mode: PlotMode = "interactive") -> ColorConfig:
    return STATIC_DEFAULTS if mode == "static" else INTERACTIVE_DEFAULTS


def contrast_text_color(background: str) -> str:
    r, g, b, _ = parse_color(background, role="background")
    luminance = 0.299 * r + 0.587 * g + 0.114 * b
    return "#000000" if luminance >= 160 else "#ffffff"


_PROMPTS: tuple[tuple[str, str, str], ...] = (
    ("background", "Website background (default: white): ", "Background color (default: white): "),
    ("grid_background", "Grid background (default: slightly darker white): ", "Grid background (default: light grey): "),
    ("grid_lines", "Grid lines (default: light grey): ", "Grid lines (default: light grey): "),
    ("grid_main_lines", "Grid main lines (default: black): ", "Grid main lines (default: black): "),
    ("origin", "Origin (default: yellow): ", "Origin (default: yellow): "),
    ("x_intercept", "X intercept points (default: red): ", "X intercept points (default: red): "),
    ("y_intercept", "Y intercept points (default: red): ", "Y intercept points (default: red): "),
    ("point", "Grid points (default: translucent red): ", "Grid points (default: translucent red): "),
    ("point_select", "Selected points (default: blue): ", "Selected points (default: blue): "),
)


def prompt_for_colors(
    mode: PlotMode = "interactive",
    *,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> ColorConfig:
    """Ask for each color role; an empty answer keeps the default."""
    output_fn("\nColor Customization")
    output_fn("Choose colors for your plot (or press Enter for defaults):\n")
    base = default_colors(mode)
    chosen: dict[str, str] = {}
    for role, interactive_prompt, static_prompt in _PROMPTS:
        prompt = interactive_prompt if mode == "interactive" else static_prompt
        while True:
            answer = input_fn(prompt).strip()
            if not answer:
                break
            try:
                parse_color(answer, role=role)
            except ColorError as exc:
                output_fn(f"  {exc}; try again or press Enter for the default.")
                continue
            chosen[role] = answer
            break
    output_fn("\nColors set!")
    return base.with_overrides(chosen)
