#
# read and write Xcursor files
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
# Layout of Xcursor files, all fields are little endian u32:
#
#   header:  magic "Xcur", header size, file version, ntoc
#   toc:     ntoc times (type, subtype, position)
#   image:   header size (36), type, subtype, version,
#            width, height, xhot, yhot, delay, width*height ARGB pixels
#
# See https://www.x.org/archive/X11R7.7/doc/man/man3/Xcursor.3.xhtml
#

import struct
from dataclasses import dataclass, field

MAGIC = b'Xcur'
FILE_VERSION = 0x00010000
FILE_HEADER_LEN = 16
TOC_ENTRY_LEN = 12

IMAGE_TYPE = 0xfffd0002
IMAGE_VERSION = 1
IMAGE_HEADER_LEN = 36
# largest width/height libXcursor accepts
MAX_IMAGE_SIZE = 0x7fff

COMMENT_TYPE = 0xfffe0001

_file_header = struct.Struct('<4sIII')
_toc_entry = struct.Struct('<III')
_image_header = struct.Struct('<9I')

class ConversionError(Exception):
	"""Base class of every error raised while converting a cursor file"""

class ParseError(ConversionError):
	"""The input is not a well formed Xcursor file"""

class NotAnXcursorFile(ParseError):
	pass

class UnsupportedVersion(ParseError):
	pass

class TruncatedFile(ParseError):
	"""A declared header, table or chunk extends past the end of the data"""

class InconsistentChunkHeader(ParseError):
	pass

class TruncatedPixelData(ParseError):
	pass

class GeometryError(ConversionError):
	"""Image dimensions, hotspot and pixel buffer do not agree"""

class PixelCountMismatch(GeometryError):
	pass

class HotspotOutOfBounds(GeometryError):
	pass

class ScaleError(ConversionError):
	pass

class InvalidFactor(ScaleError):
	pass

@dataclass
class ImageChunk:
	"""One cursor image, pixels are ARGB ints in row-major order"""

	width: int
	height: int
	xhot: int
	yhot: int
	delay: int
	pixels: tuple
	version: int = IMAGE_VERSION

	def __post_init__(self):
		self.pixels = tuple(self.pixels)
		if len(self.pixels) != self.width * self.height:
			raise PixelCountMismatch("image is {}x{} but has {} pixels".format(
				self.width, self.height, len(self.pixels)))
		if not (0 <= self.xhot < self.width and 0 <= self.yhot < self.height):
			raise HotspotOutOfBounds("hotspot ({},{}) outside of {}x{} image".format(
				self.xhot, self.yhot, self.width, self.height))

	def byteLength(self):
		return IMAGE_HEADER_LEN + 4 * len(self.pixels)

@dataclass
class OpaqueChunk:
	"""Chunk that is not interpreted, e.g. comments"""

	data: bytes

	def byteLength(self):
		return len(self.data)

@dataclass
class TocEntry:
	type: int
	subtype: int
	chunk: object
	# offset in the file this entry was read from, recomputed on write
	position: int = field(default=None, compare=False)

	def isImage(self):
		return isinstance(self.chunk, ImageChunk)

@dataclass
class CursorFile:
	version: int = FILE_VERSION
	entries: list = field(default_factory=list)
	header_extra: bytes = b''

	magic = MAGIC

	@property
	def ntoc(self):
		return len(self.entries)

	def images(self):
		""" image entries in table of contents order """

		return [e for e in self.entries if e.isImage()]

def _read(fmt, data, offset, what):
	if offset + fmt.size > len(data):
		raise TruncatedFile("{} at offset {} needs {} bytes, only {} left".format(
			what, offset, fmt.size, max(len(data) - offset, 0)))
	return fmt.unpack_from(data, offset)

def _parse_image(data, toc_type, subtype, position):
	(header, chunk_type, chunk_subtype, version,
		width, height, xhot, yhot, delay) = _read(_image_header, data, position, 'image header')

	if header != IMAGE_HEADER_LEN:
		raise InconsistentChunkHeader("image at offset {} declares header size {}, expected {}".format(
			position, header, IMAGE_HEADER_LEN))
	if chunk_type != toc_type or chunk_subtype != subtype:
		raise InconsistentChunkHeader(
			"image at offset {} is type {:#x}/{} but table of contents says {:#x}/{}".format(
				position, chunk_type, chunk_subtype, toc_type, subtype))
	if width > MAX_IMAGE_SIZE or height > MAX_IMAGE_SIZE:
		raise InconsistentChunkHeader("image at offset {} is too large: {}x{}".format(
			position, width, height))

	start = position + IMAGE_HEADER_LEN
	count = width * height
	if start + 4 * count > len(data):
		raise TruncatedPixelData("image at offset {} declares {}x{} pixels, only {} present".format(
			position, width, height, max(len(data) - start, 0) // 4))
	pixels = struct.unpack_from('<{}I'.format(count), data, start)

	return ImageChunk(width, height, xhot, yhot, delay, pixels, version)

def parse(data):
	"""
	Parse the bytes of an Xcursor file into a `CursorFile`

	Raises a `ParseError` or `GeometryError` subclass on malformed input,
	nothing is returned in that case.
	"""

	data = bytes(data)
	if data[:4] != MAGIC:
		raise NotAnXcursorFile("missing Xcursor magic")
	(_, header, version, ntoc) = _read(_file_header, data, 0, 'file header')

	if version >> 16 != FILE_VERSION >> 16:
		raise UnsupportedVersion("unsupported Xcursor file version {:#010x}".format(version))
	if header < FILE_HEADER_LEN:
		raise InconsistentChunkHeader("file header size {} is smaller than {}".format(
			header, FILE_HEADER_LEN))
	if header + ntoc * TOC_ENTRY_LEN > len(data):
		raise TruncatedFile("table of contents with {} entries exceeds file size {}".format(
			ntoc, len(data)))
	header_extra = data[FILE_HEADER_LEN:header]

	toc = [_toc_entry.unpack_from(data, header + i * TOC_ENTRY_LEN) for i in range(ntoc)]
	positions = sorted(set(position for (_, _, position) in toc))

	entries = []
	for (toc_type, subtype, position) in toc:
		if position >= len(data):
			raise TruncatedFile("chunk offset {} is beyond file size {}".format(position, len(data)))
		if toc_type == IMAGE_TYPE:
			chunk = _parse_image(data, toc_type, subtype, position)
		else:
			following = [p for p in positions if p > position]
			end = following[0] if following else len(data)
			chunk = OpaqueChunk(data[position:end])
		entries.append(TocEntry(toc_type, subtype, chunk, position))

	return CursorFile(version, entries, header_extra)

def _write_image(out, entry):
	image = entry.chunk
	out.extend(_image_header.pack(
		IMAGE_HEADER_LEN, entry.type, entry.subtype, image.version,
		image.width, image.height, image.xhot, image.yhot, image.delay))
	out.extend(struct.pack('<{}I'.format(len(image.pixels)), *image.pixels))

def serialize(cursor):
	"""
	Write a `CursorFile` as Xcursor bytes

	Chunk positions are laid out from scratch: chunks follow the table of
	contents back to back, in table of contents order.
	"""

	header = FILE_HEADER_LEN + len(cursor.header_extra)
	position = header + cursor.ntoc * TOC_ENTRY_LEN

	out = bytearray()
	out += _file_header.pack(MAGIC, header, cursor.version, cursor.ntoc)
	out += cursor.header_extra
	for entry in cursor.entries:
		out += _toc_entry.pack(entry.type, entry.subtype, position)
		position += entry.chunk.byteLength()

	for entry in cursor.entries:
		if entry.isImage():
			_write_image(out, entry)
		else:
			out += entry.chunk.data

	return bytes(out)
