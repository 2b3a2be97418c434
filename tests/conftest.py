import logging

import pytest
from PIL import Image

from heic2jpg.models import ConversionJob

# ============================================================================
# Logging Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging() reconfigures the root logger with force=True; undo it after each test."""
    root = logging.getLogger()
    level = root.level
    handlers = root.handlers[:]
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


# ============================================================================
# Image Fixtures
# ============================================================================

@pytest.fixture
def rgb_image():
    """A small solid-colour RGB image."""
    return Image.new("RGB", (64, 48), (200, 30, 30))


@pytest.fixture
def heic_file(tmp_path, rgb_image):
    """Writes a real HEIC file with pillow-heif and returns its path."""
    from pillow_heif import from_pillow

    path = tmp_path / "IMG_0001.HEIC"
    from_pillow(rgb_image).save(path, quality=90)
    return path


# ============================================================================
# Collaborator Fixtures
# ============================================================================

@pytest.fixture
def fake_decoder(rgb_image):
    """Decoder that ignores the stream content and returns an RGB image."""
    def decode(stream):
        stream.read()
        return rgb_image
    return decode


@pytest.fixture
def fake_encoder():
    """Encoder that writes a marker and the quality it was given."""
    def encode(stream, image, quality):
        stream.write(f"JPEG:{image.size[0]}x{image.size[1]}:q{quality}".encode())
    return encode


@pytest.fixture
def make_sources(tmp_path):
    """Factory creating N placeholder .heic files; returns their paths as str."""
    def _make(count, prefix="photo", ext=".heic"):
        src_dir = tmp_path / "src"
        src_dir.mkdir(exist_ok=True)
        paths = []
        for i in range(count):
            p = src_dir / f"{prefix}{i}{ext}"
            p.write_bytes(b"not really heic")
            paths.append(str(p))
        return paths
    return _make


@pytest.fixture
def make_jobs(tmp_path, make_sources):
    """Factory creating ConversionJobs writing into tmp_path/out."""
    def _make(count, quality=90):
        out = tmp_path / "out"
        out.mkdir(exist_ok=True)
        return [ConversionJob(p, str(out), quality) for p in make_sources(count)]
    return _make
