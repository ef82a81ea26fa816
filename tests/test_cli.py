from PIL import Image

from sigmosaic.cli import main
from tests.conftest import checkerboard, solid


def _write_inputs(tmp_path):
    portrait = tmp_path / "portrait.png"
    signature = tmp_path / "signature.png"
    Image.fromarray(solid(8, 4, (40, 80, 160))).save(portrait)
    Image.fromarray(checkerboard()).save(signature)
    return portrait, signature


def test_writes_collage(tmp_path, capsys):
    portrait, signature = _write_inputs(tmp_path)
    output = tmp_path / "out.jpg"
    code = main([str(portrait), str(signature), "-o", str(output), "--grid-width", "4", "--tile-size", "5"])

    assert code == 0
    assert capsys.readouterr().out.strip() == str(output)
    with Image.open(output) as image:
        assert image.format == "JPEG"
        assert image.size == (20, 10)


def test_cap_flags(tmp_path):
    portrait, signature = _write_inputs(tmp_path)
    output = tmp_path / "capped.jpg"
    args = [str(portrait), str(signature), "-o", str(output), "--grid-width", "8", "--tile-size", "5"]
    assert main(args + ["--max-width", "25", "--max-height", "10", "-j", "1"]) == 0
    with Image.open(output) as image:
        assert image.size == (25, 10)


def test_missing_input(tmp_path, capsys):
    _, signature = _write_inputs(tmp_path)
    code = main([str(tmp_path / "nope.png"), str(signature)])
    assert code == 1
    assert "File not found" in capsys.readouterr().err


def test_invalid_option_value(tmp_path):
    portrait, signature = _write_inputs(tmp_path)
    assert main([str(portrait), str(signature), "-o", str(tmp_path / "x.jpg"), "--visibility", "3"]) == 1
    assert not (tmp_path / "x.jpg").exists()


def test_unreadable_image(tmp_path):
    portrait, _ = _write_inputs(tmp_path)
    bogus = tmp_path / "bogus.png"
    bogus.write_text("hello")
    assert main([str(portrait), str(bogus), "-o", str(tmp_path / "y.jpg")]) == 1


def test_non_finite_gain(tmp_path):
    portrait, signature = _write_inputs(tmp_path)
    for gain in ("nan", "inf"):
        assert main([str(portrait), str(signature), "-o", str(tmp_path / "z.jpg"), "--gain", gain]) == 1
    assert not (tmp_path / "z.jpg").exists()
