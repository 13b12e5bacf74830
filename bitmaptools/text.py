#!/usr/bin/python

# Bitmap Tools, a module and set of tools for decoding bitmap images
# Copyright (C) 2007-2016  Brian Langenberger

# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with this program; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301  USA

"""a text strings module"""


# Labels
LAB_BMPINFO_USAGE = \
    u"%(prog)s [OPTIONS] <image 1> [image 2] ..."

LAB_BMPINFO_DESCRIPTION = \
    u"displays information about Windows and OS/2 bitmap files"

LAB_OPTIONS_VERBOSE = \
    u"display decoding details as images are read"

LAB_OPTIONS_PALETTE = \
    u"list the entries of each image's color palette"

LAB_OPTIONS_HEADERS_ONLY = \
    u"read the headers only, without decoding any pixels"

LAB_BMPINFO_FILENAMES = \
    u"BMP files to display"

LAB_BMPINFO_FILE = \
    u"{filename}:"

LAB_BMPINFO_FIELD = \
    u"  {label:>20}: {value}"

LAB_BMPINFO_PALETTE_ENTRY = \
    u"  {index:>4d}: #{red:02X}{green:02X}{blue:02X}"

LAB_BMPINFO_DIALECT = u"Header"
LAB_BMPINFO_SIZE = u"Dimensions"
LAB_BMPINFO_ORIENTATION = u"Orientation"
LAB_BMPINFO_BPP = u"Bits per pixel"
LAB_BMPINFO_COMPRESSION = u"Compression"
LAB_BMPINFO_IMAGE_SIZE = u"Image data size"
LAB_BMPINFO_ROW_STRIDE = u"Row stride"
LAB_BMPINFO_FILE_SIZE = u"File size"
LAB_BMPINFO_RESOLUTION = u"Resolution"
LAB_BMPINFO_COLORS = u"Palette colors"
LAB_BMPINFO_MASKS = u"Bit masks"
LAB_BMPINFO_COLOR_SPACE = u"Color space"
LAB_BMPINFO_GAMMA = u"Gamma"
LAB_BMPINFO_INTENT = u"Rendering intent"
LAB_BMPINFO_PROFILE = u"ICC profile"
LAB_BMPINFO_PRE_ROTATED = u"Pre-rotated"

LAB_TOP_DOWN = u"top-down"
LAB_BOTTOM_UP = u"bottom-up"

LAB_DIMENSIONS = u"{width:d} \u00D7 {height:d}"
LAB_RESOLUTION = u"{x:d} \u00D7 {y:d} pixels per meter"
LAB_BYTES = u"{:d} bytes"
LAB_DECLARED_BYTES = u"{actual:d} bytes (header declares {declared:d})"
LAB_MASKS = u"R=0x{red:08X} G=0x{green:08X} B=0x{blue:08X} A=0x{alpha:08X}"
LAB_GAMMA = u"R={red:.4f} G={green:.4f} B={blue:.4f}"
LAB_PROFILE_EMBEDDED = u"embedded, {:d} bytes"
LAB_PROFILE_LINKED = u"linked to \"{}\""
LAB_YES = u"yes"


# the names of each container's 2 byte magic tag
CONTAINER_NAMES = {b"BM": u"Windows bitmap",
                   b"BA": u"OS/2 bitmap array",
                   b"CI": u"OS/2 color icon",
                   b"CP": u"OS/2 color pointer",
                   b"IC": u"OS/2 icon",
                   b"PT": u"OS/2 pointer"}


# Compression methods
COMP_RGB = u"none"
COMP_RLE8 = u"RLE-8"
COMP_RLE4 = u"RLE-4"
COMP_BITFIELDS = u"bit fields"
COMP_JPEG = u"JPEG"
COMP_PNG = u"PNG"
COMP_ALPHABITFIELDS = u"alpha bit fields"
COMP_CMYK = u"CMYK"
COMP_CMYK_RLE8 = u"CMYK RLE-8"
COMP_CMYK_RLE4 = u"CMYK RLE-4"
COMP_HUFFMAN_1D = u"Huffman 1D"
COMP_RLE24 = u"RLE-24"
COMP_UNKNOWN = u"unknown ({:d})"


# Header dialects
DIALECT_CORE_12 = u"OS/2 1.x / Windows 2.x core header (12 bytes)"
DIALECT_OS2_V2 = u"OS/2 2.x header ({:d} bytes)"
DIALECT_INFO_40 = u"Windows 3.x info header (40 bytes)"
DIALECT_INFO_40_NT = u"Windows NT info header with RGB masks (52 bytes)"
DIALECT_INFO_40_CE = u"Windows CE info header with RGBA masks (56 bytes)"
DIALECT_V4_108 = u"Windows 95 / NT 4 version 4 header (108 bytes)"
DIALECT_V5_124 = u"Windows 98 / 2000 version 5 header (124 bytes)"


# Color spaces and rendering intents
COLOR_SPACE_CALIBRATED_RGB = u"calibrated RGB"
COLOR_SPACE_DEVICE_RGB = u"device RGB"
COLOR_SPACE_DEVICE_CMYK = u"device CMYK"
COLOR_SPACE_SRGB = u"sRGB"
COLOR_SPACE_WINDOWS = u"Windows default"
COLOR_SPACE_LINKED = u"linked profile"
COLOR_SPACE_EMBEDDED = u"embedded profile"
COLOR_SPACE_UNKNOWN = u"unknown (0x{:08X})"

INTENT_BUSINESS = u"saturation"
INTENT_GRAPHICS = u"relative colorimetric"
INTENT_IMAGES = u"perceptual"
INTENT_ABS_COLORIMETRIC = u"absolute colorimetric"
INTENT_UNKNOWN = u"unknown ({:d})"


# Errors
ERR_UNSUPPORTED_IMAGE_TYPE = \
    u"unsupported image type \"{}\""

ERR_FILE_NOT_FOUND = \
    u"file \"{}\" not found"

ERR_BMP_TRUNCATED_HEADER = \
    u"BMP header is truncated"

ERR_BMP_UNSUPPORTED_CONTAINER = \
    u"\"{tag}\" {name} files are not supported"

ERR_BMP_UNKNOWN_CONTAINER = \
    u"not a BMP file"

ERR_BMP_UNSUPPORTED_HEADER_SIZE = \
    u"unsupported DIB header size of {:d} bytes"

ERR_BMP_NEGATIVE_WIDTH = \
    u"BMP width cannot be negative"

ERR_BMP_INVALID_PLANES = \
    u"BMP must have 1 color plane, not {:d}"

ERR_BMP_UNSUPPORTED_PIXEL_FORMAT = \
    u"unsupported bits-per-pixel of {:d}"

ERR_BMP_INVALID_COMPRESSION_FOR_DEPTH = \
    u"{compression} compression is invalid for {bps:d} bits-per-pixel"

ERR_BMP_UNSUPPORTED_PAYLOAD = \
    u"{} compressed BMP pixel data is not supported"

ERR_BMP_TRUNCATED_PALETTE = \
    u"unable to read all {:d} palette colors"

ERR_BMP_TRUNCATED_PIXELS = \
    u"BMP pixel data is truncated"

ERR_BMP_TRUNCATED_RLE = \
    u"BMP run-length encoded data is truncated"

ERR_BMP_DECLARED_SIZE = \
    u"{width:d} \u00D7 {height:d} image cannot fit " + \
    u"in the remaining {remaining:d} bytes of the file"

ERR_BMP_TOO_LARGE = \
    u"image of {pixels:d} pixels exceeds the limit of {limit:d}"
