"""
Pytest configuration and shared fixtures for test suite.
"""

import pytest
import tempfile
import shutil
from pathlib import Path
from PIL import Image
import numpy as np

from imagecompare.engine import PixelBuffer
from imagecompare.user_config import get_user_config


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir).resolve()
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def sample_images(temp_dir):
    """
    Create a set of sample images for testing.

    Returns:
        dict with paths to:
        - identical1.png, identical2.png (exact copies, red)
        - similar1.png, similar2.png (same red content, different compression)
        - red_large.png (red at a higher resolution)
        - unique.png (blue)
        - corrupted.txt (not an image, wrong extension)
        - broken.png (not an image, image extension)
    """
    images = {}

    # Create identical images (100x100 red square)
    img1 = Image.new('RGB', (100, 100), color='red')
    path1 = temp_dir / "identical1.png"
    img1.save(path1, 'PNG')
    images['identical1'] = str(path1)

    # Exact copy
    path2 = temp_dir / "identical2.png"
    img1.save(path2, 'PNG')
    images['identical2'] = str(path2)

    # Same content, different compression
    img2 = Image.new('RGB', (100, 100), color='red')
    path3 = temp_dir / "similar1.png"
    img2.save(path3, 'PNG', optimize=False)
    images['similar1'] = str(path3)

    path4 = temp_dir / "similar2.png"
    img2.save(path4, 'PNG', optimize=True, compress_level=9)
    images['similar2'] = str(path4)

    # Unique image (100x100 blue square)
    img3 = Image.new('RGB', (100, 100), color='blue')
    path5 = temp_dir / "unique.png"
    img3.save(path5, 'PNG')
    images['unique'] = str(path5)

    # Not an image and not scanned
    path6 = temp_dir / "corrupted.txt"
    path6.write_text("not an image")
    images['corrupted'] = str(path6)

    # Not an image but carries an image extension
    path7 = temp_dir / "broken.png"
    path7.write_text("definitely not a png")
    images['broken'] = str(path7)

    # Higher resolution version of red square
    img4 = Image.new('RGB', (200, 200), color='red')
    path8 = temp_dir / "red_large.png"
    img4.save(path8, 'PNG')
    images['red_large'] = str(path8)

    return images


@pytest.fixture
def red_paths(sample_images):
    """Paths of every red sample image."""
    return {
        sample_images[key]
        for key in ('identical1', 'identical2', 'similar1', 'similar2', 'red_large')
    }


@pytest.fixture
def noise_buffer():
    """100x100 opaque random-noise buffer; every 10x10 window is unique."""
    rng = np.random.RandomState(42)
    pixels = rng.randint(0, 256, size=(100, 100, 4)).astype(np.uint8)
    pixels[:, :, 3] = 255
    return PixelBuffer(pixels)


@pytest.fixture
def tile_buffer(noise_buffer):
    """10x10 cut-out of noise_buffer taken at x=20, y=30."""
    return noise_buffer.crop(20, 30, 10, 10)


@pytest.fixture
def locate_files(temp_dir, noise_buffer, tile_buffer):
    """noise_buffer and tile_buffer written as PNG files."""
    big = temp_dir / "big.png"
    small = temp_dir / "small.png"
    noise_buffer.to_image().save(big, 'PNG')
    tile_buffer.to_image().save(small, 'PNG')
    return str(big), str(small)


@pytest.fixture
def red_buffer():
    return PixelBuffer.solid(16, 16, (255, 0, 0))


@pytest.fixture
def blue_buffer():
    return PixelBuffer.solid(16, 16, (0, 0, 255))


@pytest.fixture
def isolated_config(temp_dir, monkeypatch):
    """Point the user config at an empty temporary directory."""
    config_dir = temp_dir / "config"
    monkeypatch.setenv('IMAGECOMPARE_CONFIG_DIR', str(config_dir))
    for var in ('IMAGECOMPARE_THRESHOLD', 'IMAGECOMPARE_WORKERS',
                'IMAGECOMPARE_MAX_PIXELS', 'IMAGECOMPARE_HIGHLIGHT_COLOR'):
        monkeypatch.delenv(var, raising=False)
    config = get_user_config()
    config.reload()
    yield config
    config.reload()
