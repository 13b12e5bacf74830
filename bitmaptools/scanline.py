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

import bitmaptools
from bitmaptools import (UnsupportedPixelFormat,
                         InvalidCompressionForDepth,
                         UnsupportedPayloadCodec,
                         TruncatedPixelData,
                         DeclaredSizeExceedsStream,
                         ImageTooLarge)
from bitmaptools.bmpheader import (COMPRESSION_RGB,
                                   COMPRESSION_RLE8,
                                   COMPRESSION_RLE4,
                                   COMPRESSION_BITFIELDS,
                                   COMPRESSION_ALPHABITFIELDS,
                                   COMPRESSION_RLE24)
from bitmaptools.rle import decode_rle, RLE8, RLE4, RLE24
from bitmaptools import logger


SUPPORTED_BITS_PER_PIXEL = (1, 2, 4, 8, 16, 24, 32)

# the bits-per-pixel each compression method may be used with
COMPRESSION_DEPTHS = {COMPRESSION_RGB: SUPPORTED_BITS_PER_PIXEL,
                      COMPRESSION_RLE8: (8,),
                      COMPRESSION_RLE4: (4,),
                      COMPRESSION_RLE24: (24,),
                      COMPRESSION_BITFIELDS: (16, 32),
                      COMPRESSION_ALPHABITFIELDS: (16, 32)}

RLE_MODES = {COMPRESSION_RLE8: RLE8,
             COMPRESSION_RLE4: RLE4,
             COMPRESSION_RLE24: RLE24}


class PixelGrid(object):
    """a width by height grid of (red, green, blue, alpha) pixels
    where row 0 is the top of the image"""

    def __init__(self, width, height, data=None):
        self.width = width
        self.height = height
        if data is None:
            self.data = bytearray(width * height * 4)
        else:
            if len(data) != width * height * 4:
                raise ValueError("pixel data must be width * height * 4 bytes")
            self.data = bytearray(data)

    def __repr__(self):
        return "PixelGrid({:d}, {:d})".format(self.width, self.height)

    def __len__(self):
        return self.height

    def __getitem__(self, y):
        """returns row y as a list of (red, green, blue, alpha) tuples"""

        if (y < 0) or (y >= self.height):
            raise IndexError("row index out of range")
        start = y * self.width * 4
        return [tuple(self.data[i:i + 4])
                for i in range(start, start + self.width * 4, 4)]

    def __iter__(self):
        for y in range(self.height):
            yield self[y]

    def __eq__(self, grid):
        return (isinstance(grid, PixelGrid) and
                (self.width == grid.width) and
                (self.height == grid.height) and
                (self.data == grid.data))

    def __ne__(self, grid):
        return not self.__eq__(grid)

    def pixel(self, x, y):
        """returns the (red, green, blue, alpha) tuple at x, y"""

        if not ((0 <= x < self.width) and (0 <= y < self.height)):
            raise IndexError("pixel ({:d}, {:d}) out of range".format(x, y))
        i = (y * self.width + x) * 4
        return tuple(self.data[i:i + 4])

    def set_row(self, y, pixels):
        """sets row y from a list of width (red, green, blue, alpha) tuples"""

        start = y * self.width * 4
        row = bytearray(self.width * 4)
        for (i, rgba) in enumerate(pixels):
            row[i * 4:i * 4 + 4] = bytes(rgba)
        self.data[start:start + self.width * 4] = row

    def to_bytes(self):
        """returns the whole grid as packed RGBA bytes, top row first"""

        return bytes(self.data)


def validate_format(info_header):
    """raises UnsupportedPayloadCodec, UnsupportedPixelFormat
    or InvalidCompressionForDepth if the header's pixel format
    cannot be decoded"""

    compression = info_header.compression
    bits_per_pixel = info_header.bits_per_pixel

    if compression not in COMPRESSION_DEPTHS:
        raise UnsupportedPayloadCodec(compression)
    if bits_per_pixel not in SUPPORTED_BITS_PER_PIXEL:
        raise UnsupportedPixelFormat(bits_per_pixel)
    if bits_per_pixel not in COMPRESSION_DEPTHS[compression]:
        raise InvalidCompressionForDepth(compression, bits_per_pixel)


def __indexed_row__(data, width, bits_per_pixel, table):
    if bits_per_pixel == 8:
        return [table[b] for b in data[0:width]]

    per_byte = 8 // bits_per_pixel
    mask = (1 << bits_per_pixel) - 1
    row = []
    for x in range(width):
        shift = 8 - bits_per_pixel * ((x % per_byte) + 1)
        row.append(table[(data[x // per_byte] >> shift) & mask])
    return row


def __bgr_row__(data, width):
    return [(data[i + 2], data[i + 1], data[i], 255)
            for i in range(0, width * 3, 3)]


def __bitfield_row__(data, width, bytes_per_pixel, masks):
    return [masks.extract(int.from_bytes(data[i:i + bytes_per_pixel],
                                         "little"))
            for i in range(0, width * bytes_per_pixel, bytes_per_pixel)]


def __rgb24__(value):
    return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF, 255)


def check_declared_size(reader, info_header):
    """raises DeclaredSizeExceedsStream if the remaining stream
    cannot possibly hold the image the header declares

    for uncompressed data every row must be present,
    though the last row need not carry its stride padding,
    for run-length data each delta command skips at most 255 rows
    so the remaining bytes bound the rows that can be reached"""

    width = info_header.width
    height = info_header.height
    remaining = reader.remaining()

    if height == 0:
        return

    if info_header.is_compressed():
        reachable = (remaining // 4 + 1) * 255
        if height > reachable:
            raise DeclaredSizeExceedsStream(width, height, remaining)
    elif ((info_header.row_stride * (height - 1) +
           (width * info_header.bits_per_pixel + 7) // 8) > remaining):
        raise DeclaredSizeExceedsStream(width, height, remaining)


def check_pixel_limit(info_header):
    """raises ImageTooLarge if the image exceeds the configured max_pixels"""

    limit = bitmaptools.MAX_PIXELS
    pixels = info_header.width * info_header.height
    if (limit > 0) and (pixels > limit):
        raise ImageTooLarge(pixels, limit)


def assemble_pixels(reader, info_header, palette):
    """given a ByteReader positioned at the start of the pixel data,
    the resolved InfoHeader and a Palette (which may be empty)
    returns a PixelGrid with row 0 at the top of the image

    raises UnsupportedPayloadCodec, UnsupportedPixelFormat,
    InvalidCompressionForDepth, DeclaredSizeExceedsStream,
    ImageTooLarge, TruncatedPixelData or TruncatedRleStream"""

    validate_format(info_header)
    check_declared_size(reader, info_header)
    check_pixel_limit(info_header)

    width = info_header.width
    height = info_header.height
    bits_per_pixel = info_header.bits_per_pixel
    grid = PixelGrid(width, height)

    if info_header.top_down:
        rows = range(height)
    else:
        rows = range(height - 1, -1, -1)

    if info_header.is_compressed():
        mode = RLE_MODES[info_header.compression]
        logger.log(u"decoding {:d} bit run-length data".format(mode),
                   logger.DEBUG)
        values = decode_rle(reader, width, height, mode)
        if mode == RLE24:
            convert = __rgb24__
        else:
            table = palette.rgba_table()
            convert = table.__getitem__
        for (r, y) in enumerate(rows):
            grid.set_row(y, [convert(v) for v in
                             values[r * width:(r + 1) * width]])
        return grid

    stride = info_header.row_stride
    row_bytes = (width * bits_per_pixel + 7) // 8

    if bits_per_pixel <= 8:
        table = palette.rgba_table()
        convert = lambda data: __indexed_row__(data, width,
                                               bits_per_pixel, table)
    elif bits_per_pixel == 24:
        convert = lambda data: __bgr_row__(data, width)
    else:
        masks = info_header.bit_masks()
        convert = lambda data: __bitfield_row__(data, width,
                                                bits_per_pixel // 8, masks)

    for (r, y) in enumerate(rows):
        try:
            data = reader.read_bytes(row_bytes)
            if r < height - 1:
                reader.skip_bytes(stride - row_bytes)
        except IOError:
            raise TruncatedPixelData()
        grid.set_row(y, convert(data))

    return grid
