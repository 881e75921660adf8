from qrshield.__main__ import main
from tests.conftest import SATOSHI_ADDRESS


def test_plain_symbol(capsys):
    assert main([SATOSHI_ADDRESS]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Version 4-Q, mask ")
    assert "██" in out


def test_explicit_mask_and_level(capsys):
    assert main([SATOSHI_ADDRESS, "--level", "L", "--mask", "6"]) == 0
    assert capsys.readouterr().out.startswith("Version 3-L, mask 6")


def test_payload_too_large(capsys):
    assert main(["x" * 200, "--level", "H"]) == 1
    assert capsys.readouterr().err.startswith("Error: ")


def test_invalid_mask(capsys):
    assert main([SATOSHI_ADDRESS, "--mask", "9"]) == 1
    assert "Mask id" in capsys.readouterr().err


def test_protected_set(capsys):
    assert main([SATOSHI_ADDRESS, "--protection", "low", "--seed", "1"]) == 0
    out = capsys.readouterr().out
    for index in range(4):
        assert f"Variation {index}: version 4-Q, mask {index}" in out
    assert "Variation 4" not in out


def test_protected_set_with_count(capsys):
    assert main([SATOSHI_ADDRESS, "--protection", "high", "--variations", "2"]) == 0
    out = capsys.readouterr().out
    assert "Variation 1: version 4-L, mask 1" in out
    assert "Variation 2" not in out


def test_png_files(tmp_path, capsys):
    single = tmp_path / "plain.png"
    assert main([SATOSHI_ADDRESS, "--png", str(single)]) == 0
    assert single.exists()

    assert main([SATOSHI_ADDRESS, "--protection", "low", "--png", str(tmp_path / "set.png")]) == 0
    assert sorted(p.name for p in tmp_path.glob("set-*.png")) == [
        "set-0.png", "set-1.png", "set-2.png", "set-3.png"]
