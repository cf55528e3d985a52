# inventory/signature/pad.py
"""
Freehand signature capture.

Pointer samples (mouse or touch) are grouped into strokes on a fixed-size
surface and rendered to a PNG data URI with Pillow. The payload is handed to
the caller and stored verbatim on the ledger entry; nothing here persists.
"""
import base64
import io
from collections.abc import Iterable, Sequence
from typing import NamedTuple

from PIL import Image, ImageDraw

from config import settings

DATA_URI_PREFIX = "data:image/png;base64,"


class Point(NamedTuple):
    x: float
    y: float


def to_surface(client_x: float, client_y: float, left: float = 0.0, top: float = 0.0) -> Point:
    """Convert viewport coordinates to surface coordinates given the surface's top-left corner."""
    return Point(client_x - left, client_y - top)


class SignaturePad:
    """
    Capture surface. Width is fixed at creation (the container width at mount),
    height is settings.SIGNATURE_HEIGHT.

    A stroke only counts once the pointer has moved while pressed; a bare tap
    does not make the pad saveable.
    """

    def __init__(
        self,
        width: int | None = None,
        height: int | None = None,
        *,
        line_width: int = 2,
        color: str = "#000000",
    ):
        self.width = int(width or settings.SIGNATURE_DEFAULT_WIDTH)
        self.height = int(height or settings.SIGNATURE_HEIGHT)
        self.line_width = line_width
        self.color = color
        self._strokes: list[list[Point]] = []
        self._drawing = False
        self._has_signature = False

    @property
    def strokes(self) -> tuple[tuple[Point, ...], ...]:
        return tuple(tuple(s) for s in self._strokes)

    @property
    def is_drawing(self) -> bool:
        return self._drawing

    @property
    def can_save(self) -> bool:
        return self._has_signature

    def begin_stroke(self, x: float, y: float) -> None:
        """Pointer down (mousedown / touchstart)."""
        self._drawing = True
        self._strokes.append([Point(x, y)])

    def move_to(self, x: float, y: float) -> None:
        """Pointer move; ignored unless a stroke is in progress."""
        if not self._drawing:
            return
        self._strokes[-1].append(Point(x, y))
        self._has_signature = True

    def end_stroke(self) -> None:
        """Pointer up or pointer left the surface."""
        self._drawing = False

    def clear(self) -> None:
        """Discard every stroke and go back to the empty state."""
        self._strokes.clear()
        self._drawing = False
        self._has_signature = False

    def render(self) -> bytes:
        """PNG bytes of the current strokes on a transparent background."""
        image = Image.new("RGBA", (self.width, self.height), (0, 0, 0, 0))
        draw = ImageDraw.Draw(image)
        radius = self.line_width / 2
        for stroke in self._strokes:
            if len(stroke) < 2:
                continue
            draw.line(stroke, fill=self.color, width=self.line_width, joint="curve")
            # round caps
            for x, y in (stroke[0], stroke[-1]):
                draw.ellipse((x - radius, y - radius, x + radius, y + radius), fill=self.color)
        buf = io.BytesIO()
        image.save(buf, format="PNG")
        return buf.getvalue()

    def save(self) -> str | None:
        """
        Signature payload as a data URI, or None while nothing has been drawn
        (saving is disabled in that state).
        """
        if not self._has_signature:
            return None
        return DATA_URI_PREFIX + base64.b64encode(self.render()).decode("ascii")


def capture_signature(strokes: Iterable[Sequence[tuple[float, float]]], width: int | None = None) -> str | None:
    """Replay recorded strokes on a fresh pad and return its payload."""
    pad = SignaturePad(width)
    for stroke in strokes:
        points = list(stroke)
        if not points:
            continue
        pad.begin_stroke(*points[0])
        for x, y in points[1:]:
            pad.move_to(x, y)
        pad.end_stroke()
    return pad.save()


def decode_payload(payload: str) -> bytes:
    """PNG bytes of a payload produced by SignaturePad.save()."""
    if not payload.startswith(DATA_URI_PREFIX):
        raise ValueError("Not a PNG data URI")
    return base64.b64decode(payload[len(DATA_URI_PREFIX):])
