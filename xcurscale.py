#
# scale Xcursor images by an integer factor
#
# Copyright (C) 2019 Max Resch <resch.max@gmail.com>
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.
#

# Pixels are scaled with Pillow's nearest neighbor filter, every source pixel
# becomes a solid factor x factor block. Nearest neighbor never premultiplies
# RGBA, so the ARGB values (already premultiplied in Xcursor files) come out
# exactly as they went in.

import struct
import dataclasses
import PIL.Image

from xcurfile import ImageChunk, InvalidFactor, IMAGE_VERSION, MAX_IMAGE_SIZE

# an ARGB u32 stored little endian is B, G, R, A in memory
_RAW_MODE = 'BGRA'

def check_factor(factor):
	""" Reject anything that is not a positive integer scale factor """

	if isinstance(factor, bool) or not isinstance(factor, int):
		raise InvalidFactor("scale factor must be an integer, got {!r}".format(factor))
	if factor < 1:
		raise InvalidFactor("scale factor must be at least 1, got {}".format(factor))

def to_pil(image):
	""" `ImageChunk` as RGBA Pillow image """

	data = struct.pack('<{}I'.format(len(image.pixels)), *image.pixels)
	return PIL.Image.frombytes('RGBA', (image.width, image.height), data, 'raw', _RAW_MODE)

def from_pil(img, xhot, yhot, delay, version=IMAGE_VERSION):
	img = img.convert('RGBA') if img.mode != 'RGBA' else img
	(width, height) = img.size
	data = img.tobytes('raw', _RAW_MODE)
	pixels = struct.unpack('<{}I'.format(width * height), data)
	return ImageChunk(width, height, xhot, yhot, delay, pixels, version)

def scale(image, factor):
	"""
	Scale `image` by the integer `factor` using nearest neighbor block replication

	Width, height and hotspot are multiplied by `factor`, the delay is kept.
	A new `ImageChunk` is returned, `image` is left alone.
	"""

	check_factor(factor)
	if factor == 1:
		return dataclasses.replace(image)

	width = image.width * factor
	height = image.height * factor
	if width > MAX_IMAGE_SIZE or height > MAX_IMAGE_SIZE:
		raise InvalidFactor("scaling {}x{} by {} exceeds the maximum image size {}".format(
			image.width, image.height, factor, MAX_IMAGE_SIZE))

	with to_pil(image) as img:
		scaled = img.resize((width, height), PIL.Image.NEAREST)
	with scaled:
		return from_pil(scaled, image.xhot * factor, image.yhot * factor,
			image.delay, image.version)
