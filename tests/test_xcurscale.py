"""Nearest neighbor scaling of cursor images."""

import pytest

import xcurfile
import xcurscale
from cursor_fixtures import RED

A, B, C, D = 0xFF112233, 0x80402010, 0x00000000, 0x7F00FF7F

def rows(image):
	return [list(image.pixels[y * image.width:(y + 1) * image.width]) for y in range(image.height)]

def test_single_pixel_scaled_by_three():
	image = xcurfile.ImageChunk(1, 1, 0, 0, 0, [RED])

	scaled = xcurscale.scale(image, 3)

	assert (scaled.width, scaled.height) == (3, 3)
	assert (scaled.xhot, scaled.yhot) == (0, 0)
	assert scaled.pixels == (RED,) * 9

def test_blocks_are_replicated():
	image = xcurfile.ImageChunk(2, 2, 1, 1, 0, [A, B, C, D])

	scaled = xcurscale.scale(image, 2)

	assert rows(scaled) == [
		[A, A, B, B],
		[A, A, B, B],
		[C, C, D, D],
		[C, C, D, D],
	]
	assert (scaled.xhot, scaled.yhot) == (2, 2)

def test_non_square_image():
	image = xcurfile.ImageChunk(3, 1, 2, 0, 0, [A, B, C])

	scaled = xcurscale.scale(image, 2)

	assert rows(scaled) == [[A, A, B, B, C, C], [A, A, B, B, C, C]]
	assert (scaled.xhot, scaled.yhot) == (4, 0)

def test_factor_one_is_identity():
	image = xcurfile.ImageChunk(2, 2, 1, 0, 40, [A, B, C, D])

	scaled = xcurscale.scale(image, 1)

	assert scaled == image
	assert scaled is not image

def test_delay_and_version_are_kept():
	image = xcurfile.ImageChunk(1, 1, 0, 0, 123, [A], version=2)

	scaled = xcurscale.scale(image, 4)

	assert scaled.delay == 123
	assert scaled.version == 2

def test_source_image_is_unchanged():
	image = xcurfile.ImageChunk(2, 2, 1, 1, 0, [A, B, C, D])
	copy = xcurfile.ImageChunk(2, 2, 1, 1, 0, [A, B, C, D])

	xcurscale.scale(image, 3)

	assert image == copy

def test_scaling_is_deterministic():
	image = xcurfile.ImageChunk(2, 2, 1, 1, 0, [A, B, C, D])

	assert xcurscale.scale(image, 5) == xcurscale.scale(image, 5)

def test_composition_matches_single_step():
	pixels = [0x01000000 * (i + 1) + i for i in range(6)]
	image = xcurfile.ImageChunk(3, 2, 2, 1, 10, pixels)

	assert xcurscale.scale(xcurscale.scale(image, 2), 3) == xcurscale.scale(image, 6)

@pytest.mark.parametrize('width, height, xhot, yhot', [
	(1, 1, 0, 0), (4, 3, 3, 2), (5, 7, 0, 6), (2, 9, 1, 8)])
@pytest.mark.parametrize('factor', [1, 2, 3, 7])
def test_hotspot_stays_inside(width, height, xhot, yhot, factor):
	image = xcurfile.ImageChunk(width, height, xhot, yhot, 0, [A] * (width * height))

	scaled = xcurscale.scale(image, factor)

	assert scaled.xhot < scaled.width
	assert scaled.yhot < scaled.height
	assert (scaled.xhot, scaled.yhot) == (xhot * factor, yhot * factor)

@pytest.mark.parametrize('factor', [0, -2, 1.5, '2', True, None])
def test_invalid_factor(factor):
	image = xcurfile.ImageChunk(1, 1, 0, 0, 0, [RED])

	with pytest.raises(xcurfile.InvalidFactor):
		xcurscale.scale(image, factor)

def test_result_larger_than_maximum_size():
	image = xcurfile.ImageChunk(1, 1, 0, 0, 0, [RED])

	with pytest.raises(xcurfile.InvalidFactor):
		xcurscale.scale(image, xcurfile.MAX_IMAGE_SIZE + 1)

def test_to_pil_channel_order():
	image = xcurfile.ImageChunk(2, 1, 0, 0, 0, [RED, 0x80102030])

	img = xcurscale.to_pil(image)

	assert img.mode == 'RGBA'
	assert img.size == (2, 1)
	assert img.getpixel((0, 0)) == (0xFF, 0x00, 0x00, 0xFF)
	assert img.getpixel((1, 0)) == (0x10, 0x20, 0x30, 0x80)

def test_from_pil_reverses_to_pil():
	image = xcurfile.ImageChunk(2, 2, 1, 0, 9, [A, B, C, D])

	assert xcurscale.from_pil(xcurscale.to_pil(image), 1, 0, 9) == image

def test_from_pil_defaults_to_current_image_version():
	img = xcurscale.to_pil(xcurfile.ImageChunk(1, 1, 0, 0, 0, [RED]))

	assert xcurscale.from_pil(img, 0, 0, 0).version == xcurfile.IMAGE_VERSION
