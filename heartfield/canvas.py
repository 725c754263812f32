"""RGB float pixel buffer with alpha-blended drawing primitives."""

import colorsys

import numpy as np

from heartfield.render import Fade, Lines, Shape, Sprites, Text

# Type alias for RGB tuples
Color = tuple[int, int, int]

# Simple 3x5 bitmap font for digits and basic ASCII (space through ~)
# Each char is 3 pixels wide, 5 pixels tall, stored as 5 rows of 3-bit bitmaps
_FONT_3X5 = {
    ' ': [0b000, 0b000, 0b000, 0b000, 0b000],
    '!': [0b010, 0b010, 0b010, 0b000, 0b010],
    '0': [0b111, 0b101, 0b101, 0b101, 0b111],
    '1': [0b010, 0b110, 0b010, 0b010, 0b111],
    '2': [0b111, 0b001, 0b111, 0b100, 0b111],
    '3': [0b111, 0b001, 0b111, 0b001, 0b111],
    '4': [0b101, 0b101, 0b111, 0b001, 0b001],
    '5': [0b111, 0b100, 0b111, 0b001, 0b111],
    '6': [0b111, 0b100, 0b111, 0b101, 0b111],
    '7': [0b111, 0b001, 0b010, 0b010, 0b010],
    '8': [0b111, 0b101, 0b111, 0b101, 0b111],
    '9': [0b111, 0b101, 0b111, 0b001, 0b111],
    ':': [0b000, 0b010, 0b000, 0b010, 0b000],
    '.': [0b000, 0b000, 0b000, 0b000, 0b010],
    '-': [0b000, 0b000, 0b111, 0b000, 0b000],
    '+': [0b000, 0b010, 0b111, 0b010, 0b000],
    '(': [0b001, 0b010, 0b010, 0b010, 0b001],
    ')': [0b100, 0b010, 0b010, 0b010, 0b100],
    '/': [0b001, 0b001, 0b010, 0b100, 0b100],
    'A': [0b010, 0b101, 0b111, 0b101, 0b101],
    'Â': [0b010, 0b101, 0b111, 0b101, 0b101],
    'B': [0b110, 0b101, 0b110, 0b101, 0b110],
    'C': [0b011, 0b100, 0b100, 0b100, 0b011],
    'D': [0b110, 0b101, 0b101, 0b101, 0b110],
    'E': [0b111, 0b100, 0b110, 0b100, 0b111],
    'F': [0b111, 0b100, 0b110, 0b100, 0b100],
    'G': [0b011, 0b100, 0b101, 0b101, 0b011],
    'H': [0b101, 0b101, 0b111, 0b101, 0b101],
    'I': [0b111, 0b010, 0b010, 0b010, 0b111],
    'J': [0b001, 0b001, 0b001, 0b101, 0b010],
    'K': [0b101, 0b110, 0b100, 0b110, 0b101],
    'L': [0b100, 0b100, 0b100, 0b100, 0b111],
    'M': [0b101, 0b111, 0b111, 0b101, 0b101],
    'N': [0b101, 0b111, 0b111, 0b111, 0b101],
    'O': [0b010, 0b101, 0b101, 0b101, 0b010],
    'P': [0b110, 0b101, 0b110, 0b100, 0b100],
    'Q': [0b010, 0b101, 0b101, 0b111, 0b011],
    'R': [0b110, 0b101, 0b110, 0b101, 0b101],
    'S': [0b011, 0b100, 0b010, 0b001, 0b110],
    'T': [0b111, 0b010, 0b010, 0b010, 0b010],
    'U': [0b101, 0b101, 0b101, 0b101, 0b111],
    'V': [0b101, 0b101, 0b101, 0b101, 0b010],
    'W': [0b101, 0b101, 0b111, 0b111, 0b101],
    'X': [0b101, 0b101, 0b010, 0b101, 0b101],
    'Y': [0b101, 0b101, 0b010, 0b010, 0b010],
    'Z': [0b111, 0b001, 0b010, 0b100, 0b111],
}


class Canvas:
    """RGB pixel buffer with alpha-blended drawing primitives.

    Pixels are stored as a float32 array of shape (height, width, 3) holding
    0-255 channel values, so repeated translucent fades accumulate smoothly.
    Every primitive takes an ``alpha`` in 0-1; values above 1 are clamped.

    Sprite and line batches are composited in one pass per batch: each pixel
    keeps the product of the batch's (1 - alpha) and is tinted with the
    alpha-weighted mean of the colors that touched it. A lone mark blends
    exactly like a single "over" operation.
    """

    def __init__(self, width: int = 960, height: int = 720):
        self.width = width
        self.height = height
        self.buffer = np.zeros((height, width, 3), dtype=np.float32)
        self._handlers = {
            Fade: lambda c: self.fade(c.color, c.alpha),
            Sprites: self.sprites,
            Lines: self.lines,
            Text: lambda c: self.text(c.x, c.y, c.text, c.color, scale=c.scale),
        }

    def resize(self, width: int, height: int) -> None:
        """Reallocate the buffer at a new size (contents are cleared)."""
        self.width = width
        self.height = height
        self.buffer = np.zeros((height, width, 3), dtype=np.float32)

    def fade(self, color: Color, alpha: float) -> None:
        """Blend a translucent full-canvas rectangle over the previous frame."""
        self.buffer += (np.asarray(color, dtype=np.float32) - self.buffer) * min(alpha, 1.0)

    def rect(self, x: int, y: int, w: int, h: int, color: Color, alpha: float = 1.0) -> None:
        """Draw a filled rectangle."""
        x0, y0 = max(0, x), max(0, y)
        x1, y1 = min(self.width, x + w), min(self.height, y + h)
        if x0 >= x1 or y0 >= y1:
            return
        region = self.buffer[y0:y1, x0:x1]
        region += (np.asarray(color, dtype=np.float32) - region) * min(alpha, 1.0)

    def sprites(self, batch: Sprites) -> None:
        """Stamp every sprite of a batch, grouped by painted radius."""
        alpha = np.minimum(batch.alpha, 1.0)
        reach = batch.reach()
        visible = ((alpha > 0) & (reach > 0)
                   & (batch.x + reach >= 0) & (batch.x - reach < self.width)
                   & (batch.y + reach >= 0) & (batch.y - reach < self.height))
        bucket = np.ceil(reach).astype(np.intp)

        indices, weights, colors = [], [], []
        for r in np.unique(bucket[visible]):
            rows = np.flatnonzero(visible & (bucket == r))
            offsets = np.arange(-r, r + 2)
            dy, dx = (o.ravel() for o in np.meshgrid(offsets, offsets, indexing="ij"))
            cx = batch.x[rows, None]
            cy = batch.y[rows, None]
            px = np.floor(cx).astype(np.intp) + dx
            py = np.floor(cy).astype(np.intp) + dy
            coverage = self._coverage(batch, rows, px - cx, py - cy) * alpha[rows, None]
            hit = ((coverage > 0) & (px >= 0) & (px < self.width)
                   & (py >= 0) & (py < self.height))
            indices.append((py * self.width + px)[hit])
            weights.append(coverage[hit])
            colors.append(np.broadcast_to(batch.color[rows, None, :],
                                          coverage.shape + (3,))[hit])
        if indices:
            self._accumulate(np.concatenate(indices), np.concatenate(weights),
                             np.concatenate(colors))

    @staticmethod
    def _coverage(batch: Sprites, rows: np.ndarray, fx: np.ndarray, fy: np.ndarray) -> np.ndarray:
        """Per-pixel opacity (0-1) of each sprite row at offsets (fx, fy) from its center."""
        radius = batch.radius[rows, None]
        if batch.shape is Shape.SQUARE:
            cos_a = np.cos(batch.angle[rows, None])
            sin_a = np.sin(batch.angle[rows, None])
            u = fx * cos_a + fy * sin_a
            v = fy * cos_a - fx * sin_a
            return ((np.abs(u) <= radius) & (np.abs(v) <= radius)).astype(np.float64)
        d = np.hypot(fx, fy)
        if batch.shape is Shape.GLOW:
            offsets, levels = zip(*batch.stops)
            with np.errstate(divide="ignore", invalid="ignore"):
                level = np.interp(d / radius, offsets, levels)
            return np.where(d <= batch.extent[rows, None], level, 0.0)
        if batch.shape is Shape.RING:
            return (np.abs(d - radius) <= 0.5).astype(np.float64)
        return (d <= radius).astype(np.float64)

    def lines(self, batch: Lines) -> None:
        """Draw a batch of one-pixel lines, one DDA sample per step along the major axis."""
        if not len(batch) or batch.alpha <= 0:
            return
        x0, y0 = np.rint(batch.x0), np.rint(batch.y0)
        x1, y1 = np.rint(batch.x1), np.rint(batch.y1)
        steps = np.maximum(np.abs(x1 - x0), np.abs(y1 - y0)).astype(np.intp)
        counts = steps + 1
        owner = np.repeat(np.arange(len(batch)), counts)
        t = np.arange(counts.sum()) - np.repeat(np.cumsum(counts) - counts, counts)
        frac = t / np.maximum(steps, 1)[owner]
        px = np.rint(x0[owner] + (x1 - x0)[owner] * frac).astype(np.intp)
        py = np.rint(y0[owner] + (y1 - y0)[owner] * frac).astype(np.intp)
        hit = (px >= 0) & (px < self.width) & (py >= 0) & (py < self.height)
        weight = np.full(int(hit.sum()), min(batch.alpha, 1.0))
        color = np.broadcast_to(np.asarray(batch.color, dtype=np.float64), (len(weight), 3))
        self._accumulate((py * self.width + px)[hit], weight, color)

    def _accumulate(self, index: np.ndarray, weight: np.ndarray, color: np.ndarray) -> None:
        size = self.width * self.height
        with np.errstate(divide="ignore"):
            transmit = np.exp(np.bincount(index, np.log1p(-weight), minlength=size))
        total = np.bincount(index, weight, minlength=size)
        touched = np.flatnonzero(total > 0)
        if not len(touched):
            return
        tint = np.stack([np.bincount(index, weight * color[:, ch], minlength=size)[touched]
                         for ch in range(3)], axis=1) / total[touched, None]
        keep = transmit[touched, None]
        flat = self.buffer.reshape(-1, 3)
        flat[touched] = flat[touched] * keep + tint * (1.0 - keep)

    def text(self, x: int, y: int, string: str, color: Color, spacing: int = 1,
             scale: int = 1) -> None:
        """Draw text using built-in 3x5 pixel font, each font pixel ``scale`` px wide."""
        cursor_x = x
        for ch in string.upper():
            glyph = _FONT_3X5.get(ch)
            if glyph is None:
                cursor_x += (3 + spacing) * scale
                continue
            for row_idx, row_bits in enumerate(glyph):
                for col in range(3):
                    if row_bits & (1 << (2 - col)):
                        self.rect(cursor_x + col * scale, y + row_idx * scale, scale, scale, color)
            cursor_x += (3 + spacing) * scale

    def draw(self, commands) -> None:
        """Execute a sequence of draw commands in order."""
        for command in commands:
            self._handlers[type(command)](command)

    @staticmethod
    def hsv(h: float, s: float = 1.0, v: float = 1.0) -> Color:
        """Convert HSV to RGB color tuple. h is 0-360, s and v are 0-1."""
        r, g, b = colorsys.hsv_to_rgb(h / 360.0, s, v)
        return (int(r * 255), int(g * 255), int(b * 255))

    @staticmethod
    def hex(color: int) -> Color:
        """Convert 0xRRGGBB integer to (R, G, B) tuple."""
        return ((color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF)

    def get_buffer(self) -> bytes:
        """Get the entire pixel buffer as 8-bit RGB bytes."""
        return np.clip(self.buffer, 0, 255).astype(np.uint8).tobytes()
