from .canvas import blend_mask, draw_hline, draw_vline, fill_rect, new_canvas
from .draw_lines import clip_segment, draw_segment
from .draw_polygon import fill_polygon

__all__ = [
    "blend_mask",
    "clip_segment",
    "draw_hline",
    "draw_segment",
    "draw_vline",
    "fill_polygon",
    "fill_rect",
    "new_canvas",
]
