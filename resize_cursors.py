#!/usr/bin/env python3
#
# resize Xcursor files
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

# Every image of every input cursor is scaled by the integer --scale factor,
# e.g. a scale of 2 applied to a 32x32 pixel cursor results in a 64x64 pixel
# cursor with the hotspot moved along. Nominal sizes in the table of contents
# are kept so themes still select images by the size they were made for.
# Comments and other chunks are copied unchanged.

import argparse
import sys

import xcurfile
import xcurscale

def scale_factor(value):
	try:
		factor = int(value)
		xcurscale.check_factor(factor)
	except (ValueError, xcurfile.InvalidFactor):
		raise argparse.ArgumentTypeError("invalid scale factor: '{}'".format(value))
	return factor

args_parser = argparse.ArgumentParser('xcursor-resize', description='Resize Xcursor files')
args_parser.add_argument('-d','--debug',action='store_true',dest='debug',help='Enable extra debugging info')
args_parser.add_argument('-v','--verbose',action='store_true',dest='verbose',help='Enable info output')
args_parser.add_argument('-t','--test',action='store_true',dest='test',help='Write a PNG of every scaled image next to the output file')
args_parser.add_argument('-s','--scale',action='store',dest='scale',type=scale_factor,required=True,
	help='Integer scale factor applied to each cursor image')
args_parser.add_argument('-i','--ignore-unrecognized',action='store_true',dest='ignore_unrecognized',
	help='Skip input files that are not Xcursor files instead of failing')
args_parser.add_argument('-o','--output',action='append',dest='output_files',
	help='Output file name, repeat once per input file (default: overwrite the input files)')
args_parser.add_argument('input_files',nargs='+',help='Xcursor files to resize (no directories, use a glob)')

options = argparse.Namespace(debug=False, verbose=False, ignore_unrecognized=False, test=False)

def dbg(msg):
	if options.debug:
		print(msg, file=sys.stderr)

def warn(msg):
	print("WARNING: " + msg, file=sys.stderr)

def info(msg):
	if options.verbose:
		print(msg, file=sys.stdout)

def fatalError(msg):
	print("FATAL ERROR: " + msg, file=sys.stderr)
	sys.exit(20)

def convert(data, factor):
	"""
	Scale every image of the Xcursor file `data` by `factor` and return the new file

	Errors of the reader and the scaler are passed on as they are, they all
	derive from `xcurfile.ConversionError`.
	"""

	xcurscale.check_factor(factor)
	cursor = xcurfile.parse(data)
	for entry in cursor.entries:
		if entry.isImage():
			entry.chunk = xcurscale.scale(entry.chunk, factor)
	return xcurfile.serialize(cursor)

def writePreviews(data, output_file):
	""" save every image of the cursor file `data` as `output_file`_`size`_`n`.png """

	cursor = xcurfile.parse(data)
	for (n, entry) in enumerate(cursor.images()):
		name = '{}_{}_{}.png'.format(output_file, entry.subtype, n)
		dbg("preview: {} ({}x{})".format(name, entry.chunk.width, entry.chunk.height))
		with xcurscale.to_pil(entry.chunk) as img:
			img.save(name)

def resizeFile(input_file, output_file, factor):
	""" returns False if the file was skipped """

	with open(input_file, 'rb') as f:
		data = f.read()

	try:
		output = convert(data, factor)
	except xcurfile.NotAnXcursorFile:
		if options.ignore_unrecognized:
			info("Skipping {}, not an Xcursor file".format(input_file))
			return False
		raise

	dbg("{}: {} -> {} bytes".format(input_file, len(data), len(output)))
	with open(output_file, 'wb') as f:
		f.write(output)
	if options.test:
		writePreviews(output, output_file)
	return True

def main(argv=None):
	global options
	options = args_parser.parse_args(argv)

	output_files = options.output_files
	if output_files is None:
		output_files = options.input_files
	elif len(output_files) != len(options.input_files):
		fatalError("if output filenames are provided, there must be as many output filenames as input filenames\n"
			"(got {} input filenames and {} output filenames)".format(
				len(options.input_files), len(output_files)))

	converted = 0
	for (input_file, output_file) in zip(options.input_files, output_files):
		info("Scaling {} by {} into {}".format(input_file, options.scale, output_file))
		try:
			if resizeFile(input_file, output_file, options.scale):
				converted += 1
		except xcurfile.NotAnXcursorFile:
			fatalError("{} doesn't seem to be a valid Xcursor file".format(input_file))
		except xcurfile.ConversionError as e:
			fatalError("{}: {}".format(input_file, e))
		except OSError as e:
			fatalError("{}: {}".format(input_file, e.strerror or e))

	if converted == 0:
		warn("no cursor files were converted")
	info("All Done.")
	return 0

if __name__ == '__main__':
	sys.exit(main())
