import pytest
from PIL import Image

from qrshield.encoder import encode
from qrshield.render import save_png, to_image, to_string


@pytest.fixture
def symbol():
    return encode("render me", "M")


def test_to_string(symbol):
    lines = to_string(symbol, border=1).split("\n")
    assert len(lines) == symbol.size + 2
    assert all(len(line) == 2 * (symbol.size + 2) for line in lines)
    assert lines[0].strip() == ""
    assert lines[1].startswith("  ██████████████  ")


def test_to_image_pixels(symbol):
    img = to_image(symbol, scale=2, border=1)
    assert img.mode == "1"
    assert img.size == ((symbol.size + 2) * 2, (symbol.size + 2) * 2)
    assert img.getpixel((0, 0)) == 255
    assert img.getpixel((2, 2)) == 0    # top-left finder corner
    assert img.getpixel((4, 4)) == 255  # light ring inside the finder


def test_bad_scale(symbol):
    with pytest.raises(ValueError):
        to_image(symbol, scale=0)


def test_save_png(symbol, tmp_path):
    path = tmp_path / "symbol.png"
    save_png(symbol, str(path), scale=3, border=4)
    with Image.open(path) as img:
        assert img.size == ((symbol.size + 8) * 3,) * 2
