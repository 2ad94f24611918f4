"""Tests for candidate color extraction."""

import logging
import subprocess
from types import SimpleNamespace

import pytest
from PIL import Image

import hyprstyle.extract as extract
from hyprstyle.errors import ExtractionFailure

HISTOGRAM = """\
      5120: (30,30,46) #1E1E2E srgb(30,30,46)
      2048: (137,180,250) #89B4FA srgb(137,180,250)
       512: (148,226,213,255) #94E2D5FF srgba(148,226,213,1)
        12: (205,214,244) #CDD6F4 srgb(205,214,244)
"""

BLOCKS = [(200, 50, 50), (50, 200, 50), (50, 50, 200), (120, 120, 120)]


@pytest.fixture
def block_image(tmp_path):
    """A 40x40 image made of four solid color quadrants."""
    img = Image.new("RGB", (40, 40))
    for index, color in enumerate(BLOCKS):
        x, y = (index % 2) * 20, (index // 2) * 20
        img.paste(color, (x, y, x + 20, y + 20))
    path = tmp_path / "wall.png"
    img.save(path)
    return path


class TestParseHistogram:
    def test_extracts_six_digit_hex(self):
        assert extract.parse_histogram(HISTOGRAM) == ["#1e1e2e", "#89b4fa", "#cdd6f4"]

    def test_ignores_noise(self):
        assert extract.parse_histogram("\n\nconvert: warning\n") == []


class TestKMeans:
    def test_finds_block_colors(self, block_image):
        colors = extract.extract_kmeans(block_image, n_colors=4)
        assert sorted(colors) == sorted(f"#{r:02x}{g:02x}{b:02x}" for r, g, b in BLOCKS)

    def test_fewer_distinct_pixels_than_clusters(self, block_image):
        colors = extract.extract_candidates(block_image, n_colors=10)
        assert len(colors) == len(BLOCKS)


class TestExtractCandidates:
    def test_missing_image_is_fatal(self, tmp_path):
        with pytest.raises(ExtractionFailure):
            extract.extract_candidates(tmp_path / "missing.png")

    def test_unreadable_image_falls_back(self, tmp_path, caplog):
        path = tmp_path / "not-an-image.png"
        path.write_text("hello")
        with caplog.at_level(logging.WARNING, logger="hyprstyle"):
            assert extract.extract_candidates(path) == []
        assert "Color extraction failed" in caplog.text

    def test_imagemagick_falls_back_to_convert(self, block_image, monkeypatch):
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append(cmd[0])
            if cmd[0] == "magick":
                raise FileNotFoundError(cmd[0])
            assert kwargs["timeout"] == 3.0
            return SimpleNamespace(stdout=HISTOGRAM)

        monkeypatch.setattr(extract.subprocess, "run", fake_run)
        colors = extract.extract_candidates(block_image, method="imagemagick", timeout=3.0)
        assert calls == ["magick", "convert"]
        assert colors == ["#1e1e2e", "#89b4fa", "#cdd6f4"]

    def test_imagemagick_timeout_is_a_warning(self, block_image, monkeypatch, caplog):
        def fake_run(cmd, **kwargs):
            raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

        monkeypatch.setattr(extract.subprocess, "run", fake_run)
        with caplog.at_level(logging.WARNING, logger="hyprstyle"):
            assert extract.extract_candidates(block_image, method="imagemagick") == []
        assert "timed out" in caplog.text

    def test_imagemagick_missing_entirely(self, block_image, monkeypatch):
        def fake_run(cmd, **kwargs):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(extract.subprocess, "run", fake_run)
        assert extract.extract_candidates(block_image, method="imagemagick") == []

    def test_unknown_method(self, block_image):
        with pytest.raises(ValueError):
            extract.extract_candidates(block_image, method="median-cut")
