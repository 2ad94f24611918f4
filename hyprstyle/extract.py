"""Candidate color extraction from wallpaper images."""

import logging
import re
import subprocess
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError
from sklearn.cluster import KMeans

from .color import rgb_to_hex
from .errors import ExtractionFailure

logger = logging.getLogger(__name__)

METHODS = ("kmeans", "imagemagick")

# ImageMagick 7 ships `magick`; 6 only has `convert`
IMAGEMAGICK_COMMANDS = ("magick", "convert")

_HISTOGRAM_HEX_RE = re.compile(r"#([0-9A-Fa-f]{6})(?![0-9A-Fa-f])")


def extract_kmeans(image_path, n_colors=10):
    """Extract dominant colors using K-means clustering"""
    img = Image.open(image_path).convert("RGB")
    img.thumbnail((300, 300))
    pixels = np.array(img).reshape(-1, 3)

    # Remove extreme pixels
    mask = (pixels.sum(axis=1) > 30) & (pixels.sum(axis=1) < 735)
    filtered_pixels = pixels[mask]

    if len(filtered_pixels) < n_colors:
        filtered_pixels = pixels

    n_clusters = min(n_colors, len(np.unique(filtered_pixels, axis=0)))
    kmeans = KMeans(n_clusters=n_clusters, random_state=42, n_init=10)
    kmeans.fit(filtered_pixels)

    colors = []
    for center in kmeans.cluster_centers_:
        r, g, b = int(center[0]), int(center[1]), int(center[2])
        colors.append(rgb_to_hex(r, g, b))
    return colors


def parse_histogram(output):
    """Pull ``#rrggbb`` tokens out of ``-format %c histogram:info:-`` output.

    Lines look like ``  1234: (137,180,250) #89B4FA srgb(137,180,250)``;
    lines without a six digit hex are ignored.
    """
    colors = []
    for line in output.splitlines():
        match = _HISTOGRAM_HEX_RE.search(line)
        if match:
            colors.append("#" + match.group(1).lower())
    return colors


def run_imagemagick(image_path, n_colors=10, timeout=10.0):
    args = [
        str(image_path),
        "-resize", "100x100",
        "-colors", str(n_colors),
        "-depth", "8",
        "-format", "%c",
        "histogram:info:-",
    ]
    for command in IMAGEMAGICK_COMMANDS:
        try:
            result = subprocess.run(
                [command] + args,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=True,
            )
        except FileNotFoundError:
            logger.debug("%s not found", command)
            continue
        return result.stdout
    raise FileNotFoundError("ImageMagick not found (tried magick and convert)")


def extract_candidates(image_path, method="kmeans", n_colors=10, timeout=10.0):
    """Return candidate hex colors for ``image_path``.

    A missing or non-file path raises ``ExtractionFailure``. When the
    extractor itself fails the error is logged and an empty list returned,
    leaving the palette engine to fall back to its default candidates.
    """
    path = Path(image_path)
    if not path.is_file():
        raise ExtractionFailure(f"Image file not found: {path}")
    if method not in METHODS:
        raise ValueError(f"Unknown extraction method: {method}")

    logger.info("Extracting colors from %s (%s)...", path.name, method)
    try:
        if method == "kmeans":
            colors = extract_kmeans(path, n_colors=n_colors)
        else:
            colors = parse_histogram(run_imagemagick(path, n_colors=n_colors, timeout=timeout))
    except subprocess.TimeoutExpired:
        logger.warning("Color extraction timed out after %.0fs", timeout)
        return []
    except subprocess.CalledProcessError as exc:
        logger.warning("ImageMagick failed: %s", (exc.stderr or "").strip() or exc)
        return []
    except (OSError, UnidentifiedImageError, ValueError) as exc:
        logger.warning("Color extraction failed: %s", exc)
        return []

    logger.debug("Extracted %d candidate colors", len(colors))
    return colors
