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

"""the Bitmap Tools module, for decoding Windows and OS/2 BMP images"""

import sys
import os
import os.path
from configparser import RawConfigParser, NoSectionError, NoOptionError


VERSION = "1.0"


class RawConfigParser(RawConfigParser):
    """extends RawConfigParser to provide additional methods"""

    def get_default(self, section, option, default):
        """returns a default if option is not found in section"""

        try:
            return self.get(section, option)
        except NoSectionError:
            return default
        except NoOptionError:
            return default

    def set_default(self, section, option, value):
        try:
            self.set(section, option, value)
        except NoSectionError:
            self.add_section(section)
            self.set(section, option, value)

    def getint_default(self, section, option, default):
        """returns a default int if option is not found in section"""

        try:
            return self.getint(section, option)
        except NoSectionError:
            return default
        except NoOptionError:
            return default

    def getboolean_default(self, section, option, default):
        """returns a default boolean if option is not found in section"""

        try:
            return self.getboolean(section, option)
        except NoSectionError:
            return default
        except NoOptionError:
            return default


config = RawConfigParser()
config.read([os.path.join("/etc", "bitmaptools.cfg"),
             os.path.join(sys.prefix, "etc", "bitmaptools.cfg"),
             os.path.expanduser('~/.bitmaptools.cfg')])

# the largest width * height a decode will allocate, 0 for no limit
DEFAULT_MAX_PIXELS = 1 << 28
MAX_PIXELS = config.getint_default("Decoding", "max_pixels",
                                   DEFAULT_MAX_PIXELS)

LOG_LEVEL = config.get_default("Logging", "level", "WARNING")


class Messenger(object):
    """this class is for displaying formatted output in a consistent way"""

    def __init__(self, silent=False):
        self.__stdout__ = sys.stdout
        self.__stderr__ = sys.stderr
        if silent:
            self.__print__ = self.__print_silent__
        else:
            self.__print__ = self.__print_stream__

    def __print_silent__(self, string, stream, add_newline, flush):
        assert(isinstance(string, str))
        # do nothing
        pass

    def __print_stream__(self, string, stream, add_newline, flush):
        """prints string to the given stream
        and if 'add_newline' is True, appends a newline
        if 'flush' is True, flushes the stream"""

        assert(isinstance(string, str))
        stream.write(string)
        if add_newline:
            stream.write(os.linesep)
        if flush:
            stream.flush()

    def output(self, s):
        """displays an output message string to stdout

        this appends a newline to that message"""

        self.__print__(string=s,
                       stream=self.__stdout__,
                       add_newline=True,
                       flush=False)

    def info(self, s):
        """displays an informative message string to stderr

        this appends a newline to that message"""

        self.__print__(string=s,
                       stream=self.__stderr__,
                       add_newline=True,
                       flush=False)

    # output() is for a program's primary data
    # info() is for incidental information

    def error(self, s):
        """displays an error message string to stderr

        this appends a newline to that message"""

        self.__print__(string=u"*** Error: {}".format(s),
                       stream=self.__stderr__,
                       add_newline=True,
                       flush=False)

    def os_error(self, oserror):
        """displays an properly formatted OSError exception to stderr

        this appends a newline to that message"""

        self.error(u"[Errno {:d}] {}: '{}'".format(
                        oserror.errno,
                        oserror.strerror,
                        oserror.filename))

    def warning(self, s):
        """displays a warning message string to stderr

        this appends a newline to that message"""

        self.__print__(string=u"*** Warning: {}".format(s),
                       stream=self.__stderr__,
                       add_newline=True,
                       flush=False)


class UnsupportedFile(Exception):
    """raised by open() if the file can be opened but not identified"""

    pass


class InvalidImage(Exception):
    """raised if an image cannot be parsed correctly"""

    def __init__(self, error_message):
        Exception.__init__(self, error_message)
        self.error_message = error_message

    def __str__(self):
        return self.error_message


class InvalidBMP(InvalidImage):
    """raised if a BMP cannot be decoded correctly

    every failure of a BMP decode is one of its subclasses,
    so catching InvalidBMP catches all of them"""

    def __reduce__(self):
        return (InvalidBMP, (self.error_message,))


class TruncatedHeader(InvalidBMP):
    """raised if the stream ends inside the file or DIB header"""

    def __init__(self):
        from bitmaptools.text import ERR_BMP_TRUNCATED_HEADER

        InvalidBMP.__init__(self, ERR_BMP_TRUNCATED_HEADER)

    def __reduce__(self):
        return (TruncatedHeader, ())


class UnsupportedContainerTag(InvalidBMP):
    """raised if the file's magic tag is not "BM"

    tag is the 2 byte magic value as a binary string"""

    def __init__(self, tag):
        from bitmaptools.text import (ERR_BMP_UNSUPPORTED_CONTAINER,
                                      ERR_BMP_UNKNOWN_CONTAINER,
                                      CONTAINER_NAMES)

        if tag in CONTAINER_NAMES:
            InvalidBMP.__init__(
                self,
                ERR_BMP_UNSUPPORTED_CONTAINER.format(
                    tag=tag.decode("ascii"),
                    name=CONTAINER_NAMES[tag]))
        else:
            InvalidBMP.__init__(self, ERR_BMP_UNKNOWN_CONTAINER)
        self.tag = tag

    def __reduce__(self):
        return (UnsupportedContainerTag, (self.tag,))


class UnsupportedHeaderSize(InvalidBMP):
    """raised if the DIB header size matches no known dialect"""

    def __init__(self, header_size):
        from bitmaptools.text import ERR_BMP_UNSUPPORTED_HEADER_SIZE

        InvalidBMP.__init__(
            self,
            ERR_BMP_UNSUPPORTED_HEADER_SIZE.format(header_size))
        self.header_size = header_size

    def __reduce__(self):
        return (UnsupportedHeaderSize, (self.header_size,))


class UnsupportedPixelFormat(InvalidBMP):
    """raised if the bits-per-pixel value is not decodable"""

    def __init__(self, bits_per_pixel):
        from bitmaptools.text import ERR_BMP_UNSUPPORTED_PIXEL_FORMAT

        InvalidBMP.__init__(
            self,
            ERR_BMP_UNSUPPORTED_PIXEL_FORMAT.format(bits_per_pixel))
        self.bits_per_pixel = bits_per_pixel

    def __reduce__(self):
        return (UnsupportedPixelFormat, (self.bits_per_pixel,))


class InvalidCompressionForDepth(InvalidBMP):
    """raised if the compression method cannot be used
    with the image's bits-per-pixel"""

    def __init__(self, compression, bits_per_pixel):
        from bitmaptools.text import ERR_BMP_INVALID_COMPRESSION_FOR_DEPTH
        from bitmaptools.bmpheader import compression_name

        InvalidBMP.__init__(
            self,
            ERR_BMP_INVALID_COMPRESSION_FOR_DEPTH.format(
                compression=compression_name(compression),
                bps=bits_per_pixel))
        self.compression = compression
        self.bits_per_pixel = bits_per_pixel

    def __reduce__(self):
        return (InvalidCompressionForDepth,
                (self.compression, self.bits_per_pixel))


class UnsupportedPayloadCodec(InvalidBMP):
    """raised if the pixel data is stored with a codec
    this module does not decode, such as JPEG or PNG"""

    def __init__(self, compression):
        from bitmaptools.text import ERR_BMP_UNSUPPORTED_PAYLOAD
        from bitmaptools.bmpheader import compression_name

        InvalidBMP.__init__(
            self,
            ERR_BMP_UNSUPPORTED_PAYLOAD.format(compression_name(compression)))
        self.compression = compression

    def __reduce__(self):
        return (UnsupportedPayloadCodec, (self.compression,))


class TruncatedPalette(InvalidBMP):
    """raised if the color table cannot be read in full"""

    def __init__(self, color_count):
        from bitmaptools.text import ERR_BMP_TRUNCATED_PALETTE

        InvalidBMP.__init__(self,
                            ERR_BMP_TRUNCATED_PALETTE.format(color_count))
        self.color_count = color_count

    def __reduce__(self):
        return (TruncatedPalette, (self.color_count,))


class TruncatedPixelData(InvalidBMP):
    """raised if the stream ends inside uncompressed pixel data"""

    def __init__(self):
        from bitmaptools.text import ERR_BMP_TRUNCATED_PIXELS

        InvalidBMP.__init__(self, ERR_BMP_TRUNCATED_PIXELS)

    def __reduce__(self):
        return (TruncatedPixelData, ())


class TruncatedRleStream(InvalidBMP):
    """raised if the stream ends inside a run-length command"""

    def __init__(self):
        from bitmaptools.text import ERR_BMP_TRUNCATED_RLE

        InvalidBMP.__init__(self, ERR_BMP_TRUNCATED_RLE)

    def __reduce__(self):
        return (TruncatedRleStream, ())


class DeclaredSizeExceedsStream(InvalidBMP):
    """raised if the header declares more pixel data
    than the stream could possibly hold"""

    def __init__(self, width, height, remaining):
        from bitmaptools.text import ERR_BMP_DECLARED_SIZE

        InvalidBMP.__init__(
            self,
            ERR_BMP_DECLARED_SIZE.format(width=width,
                                         height=height,
                                         remaining=remaining))
        self.width = width
        self.height = height
        self.remaining = remaining

    def __reduce__(self):
        return (DeclaredSizeExceedsStream,
                (self.width, self.height, self.remaining))


class ImageTooLarge(InvalidBMP):
    """raised if width * height exceeds the configured max_pixels"""

    def __init__(self, pixels, limit):
        from bitmaptools.text import ERR_BMP_TOO_LARGE

        InvalidBMP.__init__(
            self,
            ERR_BMP_TOO_LARGE.format(pixels=pixels, limit=limit))
        self.pixels = pixels
        self.limit = limit

    def __reduce__(self):
        return (ImageTooLarge, (self.pixels, self.limit))


class UnknownImageType(Exception):
    """raised if filename_to_type finds no possibilities"""

    def __init__(self, suffix):
        self.suffix = suffix

    def error_msg(self, messenger):
        from bitmaptools.text import ERR_UNSUPPORTED_IMAGE_TYPE

        messenger.error(ERR_UNSUPPORTED_IMAGE_TYPE.format(self.suffix))


def image_type(file_data):
    """given a binary string of file data
    returns an image class that data is a type of
    or None if the data's type is unknown"""

    from bitmaptools.image import BMPImage
    from bitmaptools.text import CONTAINER_NAMES

    tag = file_data[0:2]
    if (tag == b"BM") or (tag in CONTAINER_NAMES):
        # the other OS/2 containers share the BMP file header
        # and are rejected by BMPImage itself
        return BMPImage
    else:
        return None


def filename_to_type(path):
    """given a path to a file, return its image type based on suffix

    for example:
    >>> filename_to_type("/foo/file.bmp")
    <class 'bitmaptools.image.BMPImage'>

    raises UnknownImageType exception if the type is unknown
    """

    (path, ext) = os.path.splitext(path)
    if len(ext) > 0:
        ext = ext[1:].lower()   # remove the "."
        if ext in TYPE_MAP:
            return TYPE_MAP[ext]
        else:
            raise UnknownImageType(ext)
    else:
        raise UnknownImageType(ext)


# save a reference to Python's regular open function
__open__ = open


def open(filename):
    """returns a decoded image located at the given filename path

    the decoder is chosen from the filename's suffix
    raises UnsupportedFile if the suffix is unknown
    raises InvalidImage if the file appears to be something we support,
    but has errors of some sort
    raises IOError if some problem occurs attempting to open the file
    """

    try:
        image_class = filename_to_type(filename)
    except UnknownImageType:
        raise UnsupportedFile(filename)

    with __open__(filename, "rb") as f:
        return image_class.read(f)


from bitmaptools.image import BMPImage

TYPE_MAP = {"bmp": BMPImage,
            "dib": BMPImage,
            "rle": BMPImage}
