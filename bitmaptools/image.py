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


from bitmaptools import TruncatedPixelData
from bitmaptools.bytereader import ByteReader
from bitmaptools.bmpheader import (read_file_header,
                                   read_info_header,
                                   FILE_HEADER_SIZE,
                                   PROFILE_EMBEDDED,
                                   PROFILE_LINKED)
from bitmaptools.palette import Palette, read_palette
from bitmaptools.scanline import assemble_pixels
from bitmaptools import logger


#######################
#BMP
#######################


class ImageMetrics:
    """a container for image data"""

    def __init__(self, width, height, bits_per_pixel, color_count, mime_type):
        """fields are as follows:

        width          - image width as an integer number of pixels
        height         - image height as an integer number of pixels
        bits_per_pixel - the number of bits per pixel as an integer
        color_count    - for palette-based images, the total number of colors
        mime_type      - the image's MIME type, as a string
        """

        self.width = width
        self.height = height
        self.bits_per_pixel = bits_per_pixel
        self.color_count = color_count
        self.mime_type = mime_type

    def __repr__(self):
        return "ImageMetrics({!r},{!r},{!r},{!r},{!r})".format(
            self.width,
            self.height,
            self.bits_per_pixel,
            self.color_count,
            self.mime_type)


def read_profile(reader, info_header):
    """returns an (embedded profile bytes, linked profile filename) tuple
    for a version 5 header, either of which may be None

    the profile offset counts from the start of the DIB header;
    a profile outside of the stream is skipped with a warning"""

    if ((info_header.color_space_type not in (PROFILE_EMBEDDED,
                                              PROFILE_LINKED)) or
        (info_header.profile_size == 0)):
        return (None, None)

    start = FILE_HEADER_SIZE + info_header.profile_offset
    end = start + info_header.profile_size
    if (info_header.profile_offset == 0) or (end > reader.size()):
        logger.log(u"color profile at {:d} ({:d} bytes) is outside the file".format(
                   start, info_header.profile_size), logger.WARNING)
        return (None, None)

    position = reader.tell()
    reader.seek(start)
    data = reader.read_bytes(info_header.profile_size)
    reader.seek(position)

    if info_header.color_space_type == PROFILE_EMBEDDED:
        return (data, None)
    else:
        return (None, data.split(b"\x00", 1)[0].decode("cp1252"))


class BMPImage(ImageMetrics):
    """a fully decoded BMP image

    file_header      - the FileHeader
    info_header      - the resolved InfoHeader
    palette          - a Palette, empty for images without one
    pixels           - a PixelGrid, or None if only metrics were read
    icc_profile      - embedded ICC profile data as bytes, or None
    profile_filename - a linked ICC profile's filename, or None
    """

    def __init__(self, file_header, info_header, palette, pixels,
                 icc_profile=None, profile_filename=None):
        ImageMetrics.__init__(self,
                              info_header.width,
                              info_header.height,
                              info_header.bits_per_pixel,
                              len(palette),
                              u'image/x-ms-bmp')
        self.file_header = file_header
        self.info_header = info_header
        self.palette = palette
        self.pixels = pixels
        self.icc_profile = icc_profile
        self.profile_filename = profile_filename

    def __repr__(self):
        return "BMPImage({})".format(
            ",".join(["{}={!r}".format(attr, getattr(self, attr))
                      for attr in ["width",
                                   "height",
                                   "bits_per_pixel",
                                   "color_count",
                                   "dialect",
                                   "compression",
                                   "top_down"]]))

    @property
    def dialect(self):
        return self.info_header.dialect

    @property
    def compression(self):
        return self.info_header.compression

    @property
    def top_down(self):
        return self.info_header.top_down

    def gamma(self):
        """returns the (red, green, blue) gamma values"""

        return self.info_header.gamma()

    @classmethod
    def __decode__(cls, reader, decode_pixels):
        file_header = read_file_header(reader)
        info_header = read_info_header(reader, file_header)

        if info_header.is_indexed():
            palette = read_palette(reader, info_header, file_header)
        else:
            palette = Palette([])

        (icc_profile, profile_filename) = read_profile(reader, info_header)

        if not decode_pixels:
            return cls(file_header, info_header, palette, None,
                       icc_profile, profile_filename)

        # an offset of 0 means the pixels follow the palette
        if file_header.pixel_offset != 0:
            if reader.tell() != file_header.pixel_offset:
                logger.log(u"skipping to pixel data at {:d} from {:d}".format(
                           file_header.pixel_offset, reader.tell()),
                           logger.DEBUG)
            try:
                reader.seek(file_header.pixel_offset)
            except IOError:
                raise TruncatedPixelData()

        pixels = assemble_pixels(reader, info_header, palette)

        return cls(file_header, info_header, palette, pixels,
                   icc_profile, profile_filename)

    @classmethod
    def parse(cls, file_data):
        """given a binary string of BMP file data
        returns a decoded BMPImage

        raises InvalidBMP, or one of its subclasses,
        if the data cannot be decoded"""

        return cls.__decode__(ByteReader(file_data), True)

    @classmethod
    def read(cls, file):
        """given a binary file object, returns a decoded BMPImage

        raises InvalidBMP, or one of its subclasses,
        if the data cannot be decoded"""

        return cls.__decode__(ByteReader(file), True)

    @classmethod
    def metrics(cls, file_data):
        """given a binary string of BMP file data
        returns a BMPImage with its headers and palette
        but without decoding any pixels"""

        return cls.__decode__(ByteReader(file_data), False)
