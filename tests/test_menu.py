from __future__ import annotations

from pathlib import Path

import numpy as np

from bmpedit.codec import image_from_array, load_image, save_image
from bmpedit.menu import MenuSession


def _session(answers):
    feed = iter(answers)
    lines = []

    def read(prompt):
        try:
            return next(feed)
        except StopIteration:
            raise EOFError from None

    session = MenuSession(read=read, write=lines.append)
    return session, lines


def test_menu_load_edit_save(tmp_path: Path):
    source = tmp_path / "in.bmp"
    target = tmp_path / "out.bmp"
    save_image(source, image_from_array(np.full((3, 3), 10, dtype=np.uint8)))

    session, lines = _session(["1", str(source), "5", "6", "-5", "3", str(target), "15"])
    session.run()

    assert np.all(load_image(target).pixels == 240)
    assert "Negative filter applied." in lines
    assert "Brightness adjusted by -5." in lines
    assert lines[-1] == "Exiting..."


def test_menu_recovers_from_bad_input(tmp_path: Path):
    session, lines = _session(["abc", "99", "5", "1", str(tmp_path / "nope.bmp")])
    session.run()

    assert "Invalid number: 'abc'" in lines
    assert "Invalid choice. Try again." in lines
    assert "No image loaded." in lines
    assert any(line.startswith("Error:") for line in lines)
    assert session.image is None
    assert lines[-1] == "Exiting..."


def test_failed_load_keeps_previous_image(tmp_path: Path):
    good = tmp_path / "good.bmp"
    save_image(good, image_from_array(np.zeros((3, 3, 3), dtype=np.uint8)))

    session, lines = _session(["2", str(good), "1", str(good), "4"])
    session.run()

    assert session.image is not None
    assert session.image.bit_depth == 24
    assert any("Color Depth: 24" in line for line in lines)


def test_menu_equalize_reports_degenerate_image(tmp_path: Path):
    source = tmp_path / "flat.bmp"
    save_image(source, image_from_array(np.full((3, 3), 128, dtype=np.uint8)))

    session, lines = _session(["1", str(source), "14", "8", "9"])
    session.run()

    assert "Warning: image has a single intensity level, nothing to equalize." in lines
    assert any("grayscale requires a 24-bit image" in line for line in lines)
    assert "Box filter applied." in lines


def test_unopenable_paths_do_not_end_the_session(tmp_path: Path):
    source = tmp_path / "in.bmp"
    save_image(source, image_from_array(np.zeros((3, 3), dtype=np.uint8)))

    session, lines = _session(["1", "bad\x00name.bmp", "1", str(source), "3", "out\x00.bmp", "4"])
    session.run()

    assert sum(line.startswith("Error: Could not") for line in lines) == 2
    assert session.image is not None
    assert any("Width: 3" in line for line in lines)
    assert lines[-1] == "Exiting..."
