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

from bitmaptools import TruncatedPalette
from bitmaptools import logger


BLACK = (0, 0, 0)


class Palette(object):
    """an ordered list of (red, green, blue) colors"""

    def __init__(self, colors):
        self.colors = list(colors)

    def __repr__(self):
        return "Palette({!r})".format(self.colors)

    def __len__(self):
        return len(self.colors)

    def __iter__(self):
        return iter(self.colors)

    def __getitem__(self, index):
        return self.colors[index]

    def __eq__(self, palette):
        return (isinstance(palette, Palette) and
                (self.colors == palette.colors))

    def __ne__(self, palette):
        return not self.__eq__(palette)

    def color(self, index):
        """returns the (red, green, blue) color at index
        or black if index is outside the palette"""

        if 0 <= index < len(self.colors):
            return self.colors[index]
        else:
            return BLACK

    def rgba_table(self, size=256):
        """returns a list of size (red, green, blue, 255) tuples
        with entries past the end of the palette as opaque black"""

        return [self.color(i) + (255,) for i in range(size)]


def read_palette(reader, info_header, file_header):
    """given a ByteReader positioned at the color table,
    the resolved InfoHeader and FileHeader,
    returns a Palette of info_header.palette_color_count entries

    entries are blue, green, red triples for the core header
    and blue, green, red, reserved quads for all others

    raises TruncatedPalette if the table would run into the pixel data
    or past the end of the stream"""

    count = info_header.palette_color_count
    entry_size = info_header.dialect.palette_entry_size
    table_size = count * entry_size

    if ((file_header.pixel_offset != 0) and
        (reader.tell() + table_size > file_header.pixel_offset)):
        raise TruncatedPalette(count)

    try:
        data = reader.read_bytes(table_size)
    except IOError:
        raise TruncatedPalette(count)

    logger.log(u"read {:d} palette colors of {:d} bytes each".format(
               count, entry_size), logger.DEBUG)

    return Palette([(data[i + 2], data[i + 1], data[i])
                    for i in range(0, table_size, entry_size)])
