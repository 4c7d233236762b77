from .canvas import blend_into, fill_rect, new_canvas, to_image
from .draw_lines import draw_line, draw_polyline
from .draw_markers import draw_circle
from .draw_text import draw_text, text_size

__all__ = [
    "blend_into",
    "draw_circle",
    "draw_line",
    "draw_polyline",
    "draw_text",
    "fill_rect",
    "new_canvas",
    "text_size",
    "to_image",
]
