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

"""a byte-aligned, little-endian reader over an in-memory buffer"""

import re


FORMAT_TOKEN = re.compile(r"(\d+)\s*([usbpP])")


def parse_format(format):
    """given a format string such as "16u 16u 32s 4b 2P"
    returns a list of (count, type) tuples

    "u" and "s" are unsigned and signed integers of count bits,
    "p" skips count bits,
    "b" reads count bytes as a binary string,
    "P" skips count bytes

    raises ValueError if the format string is invalid
    or a bit count is not a whole number of bytes"""

    tokens = []
    position = 0
    for match in FORMAT_TOKEN.finditer(format):
        if format[position:match.start()].strip():
            raise ValueError("invalid format string {!r}".format(format))
        position = match.end()
        (count, type) = (int(match.group(1)), match.group(2))
        if (type in "usp") and (count % 8):
            raise ValueError("{:d} bits is not a whole number of bytes".format(
                count))
        tokens.append((count, type))
    if format[position:].strip():
        raise ValueError("invalid format string {!r}".format(format))
    return tokens


class ByteReader(object):
    """a bounds-checked reader over a block of binary data

    every read past the end of the data raises IOError
    and leaves the reader's position unchanged"""

    def __init__(self, data):
        """data is a binary string, bytearray
        or a file object opened for binary reading

        a file object is read from its current position to its end"""

        if hasattr(data, "read"):
            data = data.read()
        self.__data__ = bytes(data)
        self.__position__ = 0

    def __repr__(self):
        return "ByteReader(position={:d}, size={:d})".format(
            self.__position__, len(self.__data__))

    def size(self):
        """returns the total size of the data in bytes"""

        return len(self.__data__)

    def tell(self):
        """returns the current position as a byte offset"""

        return self.__position__

    def remaining(self):
        """returns the number of bytes left to read"""

        return len(self.__data__) - self.__position__

    def seek(self, position):
        """moves to the given absolute byte position

        raises IOError if position is outside the data"""

        if (position < 0) or (position > len(self.__data__)):
            raise IOError("seek to {:d} outside of {:d} bytes".format(
                position, len(self.__data__)))
        self.__position__ = position

    def __take__(self, count):
        if count < 0:
            raise ValueError("byte count must be >= 0")
        end = self.__position__ + count
        if end > len(self.__data__):
            raise IOError("I/O error reading stream")
        data = self.__data__[self.__position__:end]
        self.__position__ = end
        return data

    def read(self, bits):
        """reads an unsigned integer of the given bit size"""

        if bits % 8:
            raise ValueError("bits must be a multiple of 8")
        return int.from_bytes(self.__take__(bits // 8), "little")

    def read_signed(self, bits):
        """reads a two's complement signed integer of the given bit size"""

        if bits % 8:
            raise ValueError("bits must be a multiple of 8")
        return int.from_bytes(self.__take__(bits // 8), "little", signed=True)

    def read_bytes(self, count):
        """reads count bytes and returns them as a binary string"""

        return self.__take__(count)

    def peek_bytes(self, count):
        """returns up to count bytes without advancing the position"""

        return self.__data__[self.__position__:self.__position__ + count]

    def skip_bytes(self, count):
        """skips count bytes, raising IOError if that passes the end"""

        self.__take__(count)

    def parse(self, format):
        """reads the values described by format string
        and returns them as a list

        the whole format is bounds-checked before anything is read"""

        tokens = parse_format(format)
        data = self.__take__(sum([count // 8 if (type in "usp") else count
                                  for (count, type) in tokens]))
        values = []
        offset = 0
        for (count, type) in tokens:
            if type == "u":
                values.append(
                    int.from_bytes(data[offset:offset + count // 8],
                                   "little"))
                offset += count // 8
            elif type == "s":
                values.append(
                    int.from_bytes(data[offset:offset + count // 8],
                                   "little",
                                   signed=True))
                offset += count // 8
            elif type == "b":
                values.append(data[offset:offset + count])
                offset += count
            elif type == "p":
                offset += count // 8
            else:
                offset += count
        return values
