"""Tests for header-only image dimension probing."""

import pytest
from PIL import Image

from photo_gallery.core.exceptions import MalformedHeader
from photo_gallery.utils.dimensions import (
    ImageDimensions,
    parse_jpeg_dimensions,
    parse_png_dimensions,
    probe_dimensions,
    read_image_dimensions,
)

from image_bytes import jpeg_segment, make_jpeg, make_png


class TestPngDimensions:
    """Test PNG IHDR parsing."""

    @pytest.mark.parametrize("width,height", [(1, 1), (1200, 800), (800, 1200), (65536, 3), (2**31 - 1, 2**31 - 1)])
    def test_reads_ihdr_dimensions(self, width, height):
        assert parse_png_dimensions(make_png(width, height)) == ImageDimensions(width, height)

    def test_trailing_chunks_are_ignored(self):
        data = make_png(640, 480) + b"\x00\x00\x00\x00IEND\xaeB`\x82"
        assert parse_png_dimensions(data) == (640, 480)

    def test_bad_signature(self):
        data = bytearray(make_png(10, 10))
        data[1] = ord("X")
        with pytest.raises(MalformedHeader, match="signature"):
            parse_png_dimensions(bytes(data))

    def test_truncated_header(self):
        with pytest.raises(MalformedHeader):
            parse_png_dimensions(make_png(10, 10)[:20])

    def test_empty_buffer(self):
        with pytest.raises(MalformedHeader):
            parse_png_dimensions(b"")


class TestJpegDimensions:
    """Test JPEG marker scanning."""

    def test_baseline_frame(self):
        assert parse_jpeg_dimensions(make_jpeg(1200, 800)) == ImageDimensions(1200, 800)

    @pytest.mark.parametrize("app_length,comment_length", [(0, 0), (14, 5), (1000, 0), (65000, 300)])
    def test_frame_after_app_and_comment_segments(self, app_length, comment_length):
        segments = [
            jpeg_segment(0xE0, b"J" * app_length),
            jpeg_segment(0xE1, b"Exif\x00\x00" + b"\x01" * app_length),
            jpeg_segment(0xFE, b"c" * comment_length),
        ]
        data = make_jpeg(321, 123, prefix_segments=segments)
        assert parse_jpeg_dimensions(data) == (321, 123)

    @pytest.mark.parametrize("marker", [0xC1, 0xC2, 0xC3, 0xC5, 0xC6, 0xC7, 0xC9, 0xCA, 0xCB, 0xCD, 0xCE, 0xCF])
    def test_other_start_of_frame_markers(self, marker):
        assert parse_jpeg_dimensions(make_jpeg(50, 60, sof_marker=marker)) == (50, 60)

    @pytest.mark.parametrize("marker", [0xC4, 0xC8, 0xCC])
    def test_table_markers_are_skipped(self, marker):
        # Payload that would read as 9999x9999 if mistaken for a frame header
        decoy = jpeg_segment(marker, b"\x08\x27\x0f\x27\x0f\x03")
        assert parse_jpeg_dimensions(make_jpeg(10, 20, prefix_segments=[decoy])) == (10, 20)

    def test_fill_bytes_before_marker(self):
        data = make_jpeg(64, 48)
        padded = data[:2] + b"\xff\xff\xff" + data[2:]
        assert parse_jpeg_dimensions(padded) == (64, 48)

    def test_bad_start_of_image(self):
        with pytest.raises(MalformedHeader, match="Invalid JPEG header"):
            parse_jpeg_dimensions(b"\x00\xd8" + make_jpeg(1, 1)[2:])

    def test_scan_before_frame(self):
        data = b"\xff\xd8" + jpeg_segment(0xDA, b"\x00" * 10) + make_jpeg(5, 5)[2:]
        with pytest.raises(MalformedHeader, match="Failed to locate"):
            parse_jpeg_dimensions(data)

    def test_end_of_image_before_frame(self):
        with pytest.raises(MalformedHeader):
            parse_jpeg_dimensions(b"\xff\xd8\xff\xd9")

    def test_truncated_frame(self):
        data = make_jpeg(100, 100)
        sof_offset = data.index(b"\xff\xc0")
        with pytest.raises(MalformedHeader):
            parse_jpeg_dimensions(data[:sof_offset + 6])

    def test_segment_running_past_buffer(self):
        data = b"\xff\xd8" + b"\xff\xe0\x40\x00" + b"\x00" * 10
        with pytest.raises(MalformedHeader):
            parse_jpeg_dimensions(data)


class TestProbeDimensions:
    """Test extension dispatch."""

    def test_unsupported_extension_has_no_dimensions(self):
        assert probe_dimensions(b"GIF89a", ".gif") is None
        assert probe_dimensions(b"<svg/>", ".svg") is None

    @pytest.mark.parametrize("extension", [".png", ".PNG", "png"])
    def test_png_extensions(self, extension):
        assert probe_dimensions(make_png(3, 4), extension) == (3, 4)

    @pytest.mark.parametrize("extension", [".jpg", ".jpeg", ".JPG", "jpeg"])
    def test_jpeg_extensions(self, extension):
        assert probe_dimensions(make_jpeg(3, 4), extension) == (3, 4)

    def test_wrong_format_for_extension(self):
        with pytest.raises(MalformedHeader):
            probe_dimensions(make_png(3, 4), ".jpg")


class TestReadImageDimensions:
    """Test probing files written by a real encoder."""

    def test_png_file(self, temp_dir):
        path = temp_dir / "wide.png"
        Image.new("RGB", (37, 21), "red").save(path, "PNG")
        assert read_image_dimensions(path) == (37, 21)

    def test_baseline_jpeg_file(self, temp_dir):
        path = temp_dir / "photo.jpg"
        Image.new("RGB", (120, 80), "blue").save(path, "JPEG", quality=85)
        assert read_image_dimensions(path) == (120, 80)

    def test_progressive_jpeg_file(self, temp_dir):
        path = temp_dir / "photo.jpeg"
        Image.new("RGB", (80, 120), "green").save(path, "JPEG", progressive=True)
        assert read_image_dimensions(path) == (80, 120)

    def test_missing_file_raises_os_error(self, temp_dir):
        with pytest.raises(OSError):
            read_image_dimensions(temp_dir / "missing.png")

    def test_unsupported_file_is_not_read(self, temp_dir):
        assert read_image_dimensions(temp_dir / "missing.webp") is None
