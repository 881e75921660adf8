"""
Reference renderers for finished symbols.

Display code maps dark/light modules to its own colours; these helpers cover
the terminal and image-file cases.
"""

import logging

from PIL import Image

from qrshield.matrix import QrSymbol

logger = logging.getLogger(__name__)


def to_string(symbol: QrSymbol, border: int = 4) -> str:
    """Convert a symbol to block characters with a quiet zone border."""
    blank = "  " * (symbol.size + 2 * border)
    lines = [blank] * border

    for row in symbol.modules:
        line = "  " * border
        for cell in row:
            line += "██" if cell == 1 else "  "
        line += "  " * border
        lines.append(line)

    lines.extend([blank] * border)
    return "\n".join(lines)


def to_image(symbol: QrSymbol, scale: int = 10, border: int = 4) -> Image.Image:
    """
    Render a symbol as a 1-bit Pillow image.

    Args:
        symbol: Symbol to draw
        scale: Pixels per module
        border: Quiet zone width in modules
    """
    if scale < 1:
        raise ValueError(f"Scale must be positive, got {scale}")
    img_size = (symbol.size + 2 * border) * scale
    img = Image.new('1', (img_size, img_size), 1)  # White background
    pixels = img.load()

    for y, row in enumerate(symbol.modules):
        for x, cell in enumerate(row):
            if cell != 1:
                continue
            for dy in range(scale):
                for dx in range(scale):
                    pixels[(border + x) * scale + dx, (border + y) * scale + dy] = 0

    return img


def save_png(symbol: QrSymbol, filename: str, scale: int = 10, border: int = 4) -> None:
    to_image(symbol, scale, border).save(filename)
    logger.info("Saved QR code to %s", filename)
