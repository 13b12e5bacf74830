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

"""run-length decoding of BMP pixel data

the three variants share one command set:

  count, value      - an encoded run of count pixels
  0, 0              - end of line
  0, 1              - end of bitmap
  0, 2, dx, dy      - move right dx pixels and up dy rows
  0, n (n >= 3)     - an absolute run of n literal pixels,
                      padded to an even number of bytes

RLE-4 packs two alternating pixels into each value byte, high nibble first
and RLE-24 stores each value as 3 bytes of blue, green and red"""

from bitmaptools import TruncatedRleStream
from bitmaptools import logger


RLE8 = 8
RLE4 = 4
RLE24 = 24

ESCAPE_END_OF_LINE = 0
ESCAPE_END_OF_BITMAP = 1
ESCAPE_DELTA = 2


def __read_value__(reader, mode):
    if mode == RLE24:
        return int.from_bytes(reader.read_bytes(3), "little")
    else:
        return reader.read(8)


def __absolute_run__(reader, mode, count):
    """returns a list of count literal values
    having consumed the run and its padding byte, if any"""

    if mode == RLE8:
        data = reader.read_bytes(count + (count % 2))
        return list(data[0:count])
    elif mode == RLE4:
        byte_count = (count + 1) // 2
        data = reader.read_bytes(byte_count + (byte_count % 2))
        values = []
        for i in range(count):
            if i % 2:
                values.append(data[i // 2] & 0x0F)
            else:
                values.append(data[i // 2] >> 4)
        return values
    else:
        byte_count = count * 3
        data = reader.read_bytes(byte_count + (byte_count % 2))
        return [int.from_bytes(data[i:i + 3], "little")
                for i in range(0, byte_count, 3)]


def decode_rle(reader, width, height, mode):
    """given a ByteReader positioned at the start of RLE data,
    the image's width and height in pixels,
    and one of RLE8, RLE4 or RLE24
    returns a list of width * height values in stream row order

    values are palette indexes for RLE8 and RLE4
    and 0xRRGGBB integers for RLE24
    pixels no command writes are left at 0
    and pixels addressed outside the image are discarded

    raises TruncatedRleStream if the stream ends inside a command"""

    if mode not in (RLE8, RLE4, RLE24):
        raise ValueError("unknown RLE mode {!r}".format(mode))

    total = width * height
    values = [0] * total
    position = 0

    while reader.remaining() > 0:
        try:
            count = reader.read(8)
            if count != 0:
                value = __read_value__(reader, mode)
                start = min(position, total)
                end = min(position + count, total)
                if mode == RLE4:
                    high = value >> 4
                    low = value & 0x0F
                    for i in range(start, end):
                        values[i] = low if ((i - position) % 2) else high
                else:
                    values[start:end] = [value] * (end - start)
                position += count
                continue

            escape = reader.read(8)
            if escape == ESCAPE_END_OF_LINE:
                if width > 0:
                    extra = position % width
                    if extra:
                        position += width - extra
            elif escape == ESCAPE_END_OF_BITMAP:
                break
            elif escape == ESCAPE_DELTA:
                (dx, dy) = reader.parse("8u 8u")
                position += dx + dy * width
            else:
                run = __absolute_run__(reader, mode, escape)
                start = min(position, total)
                end = min(position + escape, total)
                values[start:end] = run[0:end - start]
                position += escape
        except IOError:
            raise TruncatedRleStream()

    if position < total:
        logger.log(u"RLE data ended {:d} pixels short of the image".format(
                   total - position), logger.DEBUG)

    return values
