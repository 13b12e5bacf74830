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

"""BMP file header and DIB header parsing

the DIB header has grown from 12 to 124 bytes over the years,
each revision a byte-compatible superset of the one before,
so the header's own size field is what decides how it is read"""

from construct import Struct, Bytes, Int16ul, Int32ul, Int32sl

from bitmaptools import (InvalidBMP,
                         TruncatedHeader,
                         UnsupportedContainerTag,
                         UnsupportedHeaderSize)
from bitmaptools.bitfields import BitMasks, standard_masks
from bitmaptools import logger


FILE_HEADER_SIZE = 14

CORE_HEADER_SIZE = 12
OS2_V2_MIN_SIZE = 16
OS2_V2_MAX_SIZE = 64
INFO_HEADER_SIZE = 40
INFO_NT_HEADER_SIZE = 52
INFO_CE_HEADER_SIZE = 56
V4_HEADER_SIZE = 108
V5_HEADER_SIZE = 124

# Windows compression methods
COMPRESSION_RGB = 0
COMPRESSION_RLE8 = 1
COMPRESSION_RLE4 = 2
COMPRESSION_BITFIELDS = 3
COMPRESSION_JPEG = 4
COMPRESSION_PNG = 5
COMPRESSION_ALPHABITFIELDS = 6
COMPRESSION_CMYK = 11
COMPRESSION_CMYK_RLE8 = 12
COMPRESSION_CMYK_RLE4 = 13

# OS/2 2.x reuses codes 3 and 4 for its own methods,
# which are given distinct values once the dialect is known
OS2_HUFFMAN_1D = 3
OS2_RLE24 = 4
OS2_COMPRESSION_BASE = 0x100
COMPRESSION_HUFFMAN_1D = OS2_COMPRESSION_BASE | OS2_HUFFMAN_1D
COMPRESSION_RLE24 = OS2_COMPRESSION_BASE | OS2_RLE24

UNCOMPRESSED = frozenset([COMPRESSION_RGB,
                          COMPRESSION_BITFIELDS,
                          COMPRESSION_ALPHABITFIELDS])

# Windows Mobile may OR this into the compression method
SOURCE_PRE_ROTATE_MASK = 0x8000

# color space types
LCS_CALIBRATED_RGB = 0x00000000
LCS_DEVICE_RGB = 0x00000001
LCS_DEVICE_CMYK = 0x00000002
LCS_SRGB = 0x73524742             # "sRGB"
LCS_WINDOWS_COLOR_SPACE = 0x57696E20  # "Win "
PROFILE_LINKED = 0x4C494E4B       # "LINK"
PROFILE_EMBEDDED = 0x4D424544     # "MBED"

# rendering intents
LCS_GM_BUSINESS = 1
LCS_GM_GRAPHICS = 2
LCS_GM_IMAGES = 4
LCS_GM_ABS_COLORIMETRIC = 8


#######################
#structures
#######################


FILE_HEADER = Struct(
    "magic" / Bytes(2),
    "file_size" / Int32ul,
    "reserved1" / Int16ul,
    "reserved2" / Int16ul,
    "pixel_offset" / Int32ul)

CORE_HEADER = Struct(
    "header_size" / Int32ul,
    "width" / Int16ul,
    "height" / Int16ul,
    "planes" / Int16ul,
    "bits_per_pixel" / Int16ul)

INFO_FIELDS = ["header_size" / Int32ul,
               "width" / Int32sl,
               "height" / Int32sl,
               "planes" / Int16ul,
               "bits_per_pixel" / Int16ul,
               "compression" / Int32ul,
               "image_size" / Int32ul,
               "x_pixels_per_meter" / Int32sl,
               "y_pixels_per_meter" / Int32sl,
               "palette_color_count" / Int32ul,
               "important_color_count" / Int32ul]

RGB_MASK_FIELDS = ["red_mask" / Int32ul,
                   "green_mask" / Int32ul,
                   "blue_mask" / Int32ul]

ALPHA_MASK_FIELDS = ["alpha_mask" / Int32ul]

CIEXYZ = Struct(
    "x" / Int32sl,
    "y" / Int32sl,
    "z" / Int32sl)

CIEXYZ_TRIPLE = Struct(
    "red" / CIEXYZ,
    "green" / CIEXYZ,
    "blue" / CIEXYZ)

V4_FIELDS = ["color_space_type" / Int32ul,
             "endpoints" / CIEXYZ_TRIPLE,
             "gamma_red" / Int32ul,
             "gamma_green" / Int32ul,
             "gamma_blue" / Int32ul]

V5_FIELDS = ["intent" / Int32ul,
             "profile_offset" / Int32ul,
             "profile_size" / Int32ul,
             "reserved" / Int32ul]

OS2_V2_FIELDS = ["os2_units" / Int16ul,
                 "os2_reserved" / Int16ul,
                 "os2_recording" / Int16ul,
                 "os2_rendering" / Int16ul,
                 "os2_size1" / Int32ul,
                 "os2_size2" / Int32ul,
                 "os2_color_encoding" / Int32ul,
                 "os2_identifier" / Int32ul]

INFO_HEADER = Struct(*INFO_FIELDS)

INFO_NT_HEADER = Struct(*(INFO_FIELDS + RGB_MASK_FIELDS))

INFO_CE_HEADER = Struct(*(INFO_FIELDS +
                          RGB_MASK_FIELDS +
                          ALPHA_MASK_FIELDS))

V4_HEADER = Struct(*(INFO_FIELDS +
                     RGB_MASK_FIELDS +
                     ALPHA_MASK_FIELDS +
                     V4_FIELDS))

V5_HEADER = Struct(*(INFO_FIELDS +
                     RGB_MASK_FIELDS +
                     ALPHA_MASK_FIELDS +
                     V4_FIELDS +
                     V5_FIELDS))

OS2_V2_HEADER = Struct(*(INFO_FIELDS + OS2_V2_FIELDS))


def field_boundaries(structure):
    """returns a list of byte offsets at which each field of structure ends"""

    boundaries = []
    offset = 0
    for subcon in structure.subcons:
        offset += subcon.sizeof()
        boundaries.append(offset)
    return boundaries


#######################
#dialects
#######################


class Dialect(object):
    """one revision of the DIB header

    name               - a short tag such as "INFO_40"
    min_size, max_size - the header sizes this dialect covers
    palette_entry_size - bytes per color table entry, 3 or 4
    structure          - the construct Struct of the full header
    is_os2             - True if compression codes follow OS/2 2.x
    """

    def __init__(self, name, min_size, max_size, palette_entry_size,
                 structure, is_os2=False):
        self.name = name
        self.min_size = min_size
        self.max_size = max_size
        self.palette_entry_size = palette_entry_size
        self.structure = structure
        self.is_os2 = is_os2
        self.boundaries = field_boundaries(structure)
        assert(structure.sizeof() == max_size)

    def __repr__(self):
        return "Dialect({})".format(self.name)

    def description(self, header_size):
        """returns a human-readable description of this dialect
        for a header of the given size"""

        import bitmaptools.text

        if self is OS2_V2:
            return bitmaptools.text.DIALECT_OS2_V2.format(header_size)
        else:
            return getattr(bitmaptools.text, "DIALECT_" + self.name)

    def parse(self, header_data):
        """given the header's bytes, including its size field,
        returns a dict of every field in this dialect

        bytes beyond max_size are ignored
        and any field not entirely inside header_data is 0"""

        available = min(len(header_data), self.max_size)
        present = max([0] + [b for b in self.boundaries if b <= available])
        padded = (header_data[0:present] +
                  b"\x00" * (self.max_size - present))
        container = self.structure.parse(padded)

        fields = {}
        for subcon in self.structure.subcons:
            fields[subcon.name] = container[subcon.name]
        return fields


CORE_12 = Dialect("CORE_12", CORE_HEADER_SIZE, CORE_HEADER_SIZE, 3,
                  CORE_HEADER)
OS2_V2 = Dialect("OS2_V2", OS2_V2_MIN_SIZE, OS2_V2_MAX_SIZE, 4,
                 OS2_V2_HEADER, is_os2=True)
INFO_40 = Dialect("INFO_40", INFO_HEADER_SIZE, INFO_HEADER_SIZE, 4,
                  INFO_HEADER)
INFO_40_NT = Dialect("INFO_40_NT", INFO_NT_HEADER_SIZE, INFO_NT_HEADER_SIZE,
                     4, INFO_NT_HEADER)
INFO_40_CE = Dialect("INFO_40_CE", INFO_CE_HEADER_SIZE, INFO_CE_HEADER_SIZE,
                     4, INFO_CE_HEADER)
V4_108 = Dialect("V4_108", V4_HEADER_SIZE, V4_HEADER_SIZE, 4, V4_HEADER)
V5_124 = Dialect("V5_124", V5_HEADER_SIZE, V5_HEADER_SIZE, 4, V5_HEADER)

DIALECTS = [CORE_12, OS2_V2, INFO_40, INFO_40_NT, INFO_40_CE, V4_108, V5_124]

# Windows header sizes matched before the OS/2 2.x range is considered
EXACT_DIALECTS = {CORE_HEADER_SIZE: CORE_12,
                  INFO_HEADER_SIZE: INFO_40,
                  INFO_NT_HEADER_SIZE: INFO_40_NT,
                  INFO_CE_HEADER_SIZE: INFO_40_CE,
                  V4_HEADER_SIZE: V4_108,
                  V5_HEADER_SIZE: V5_124}


def is_known_header_size(header_size):
    return ((header_size in EXACT_DIALECTS) or
            (OS2_V2_MIN_SIZE <= header_size <= OS2_V2_MAX_SIZE))


def resolve_dialect(header_size, bits_per_pixel=0, compression=0):
    """returns the Dialect for a DIB header of the given size

    bits_per_pixel and compression are only consulted
    for 40 byte headers, which OS/2 2.x and Windows 3.x share:
    16 and 32 bits-per-pixel exist only on Windows,
    otherwise compression codes 3 and 4 mean OS/2 Huffman 1D and RLE-24

    raises UnsupportedHeaderSize if no dialect matches"""

    if header_size == INFO_HEADER_SIZE:
        if bits_per_pixel in (16, 32):
            return INFO_40
        elif compression in (OS2_HUFFMAN_1D, OS2_RLE24):
            return OS2_V2
        else:
            return INFO_40
    elif header_size in EXACT_DIALECTS:
        return EXACT_DIALECTS[header_size]
    elif OS2_V2_MIN_SIZE <= header_size <= OS2_V2_MAX_SIZE:
        return OS2_V2
    else:
        raise UnsupportedHeaderSize(header_size)


def compression_name(compression):
    """returns a human-readable name for a compression method"""

    import bitmaptools.text as text

    return {COMPRESSION_RGB: text.COMP_RGB,
            COMPRESSION_RLE8: text.COMP_RLE8,
            COMPRESSION_RLE4: text.COMP_RLE4,
            COMPRESSION_BITFIELDS: text.COMP_BITFIELDS,
            COMPRESSION_JPEG: text.COMP_JPEG,
            COMPRESSION_PNG: text.COMP_PNG,
            COMPRESSION_ALPHABITFIELDS: text.COMP_ALPHABITFIELDS,
            COMPRESSION_CMYK: text.COMP_CMYK,
            COMPRESSION_CMYK_RLE8: text.COMP_CMYK_RLE8,
            COMPRESSION_CMYK_RLE4: text.COMP_CMYK_RLE4,
            COMPRESSION_HUFFMAN_1D: text.COMP_HUFFMAN_1D,
            COMPRESSION_RLE24: text.COMP_RLE24}.get(
        compression, text.COMP_UNKNOWN.format(compression))


def color_space_name(color_space_type):
    import bitmaptools.text as text

    return {LCS_CALIBRATED_RGB: text.COLOR_SPACE_CALIBRATED_RGB,
            LCS_DEVICE_RGB: text.COLOR_SPACE_DEVICE_RGB,
            LCS_DEVICE_CMYK: text.COLOR_SPACE_DEVICE_CMYK,
            LCS_SRGB: text.COLOR_SPACE_SRGB,
            LCS_WINDOWS_COLOR_SPACE: text.COLOR_SPACE_WINDOWS,
            PROFILE_LINKED: text.COLOR_SPACE_LINKED,
            PROFILE_EMBEDDED: text.COLOR_SPACE_EMBEDDED}.get(
        color_space_type, text.COLOR_SPACE_UNKNOWN.format(color_space_type))


def intent_name(intent):
    import bitmaptools.text as text

    return {LCS_GM_BUSINESS: text.INTENT_BUSINESS,
            LCS_GM_GRAPHICS: text.INTENT_GRAPHICS,
            LCS_GM_IMAGES: text.INTENT_IMAGES,
            LCS_GM_ABS_COLORIMETRIC: text.INTENT_ABS_COLORIMETRIC}.get(
        intent, text.INTENT_UNKNOWN.format(intent))


#######################
#file header
#######################


class FileHeader(object):
    """the 14 byte BITMAPFILEHEADER

    file_size is always the actual length of the stream,
    while declared_file_size is whatever the header claims"""

    def __init__(self, magic, declared_file_size, file_size,
                 reserved1, reserved2, pixel_offset):
        self.magic = magic
        self.declared_file_size = declared_file_size
        self.file_size = file_size
        self.reserved1 = reserved1
        self.reserved2 = reserved2
        self.pixel_offset = pixel_offset

    def __repr__(self):
        return "FileHeader({})".format(
            ",".join(["{}={!r}".format(attr, getattr(self, attr))
                      for attr in ["magic",
                                   "declared_file_size",
                                   "file_size",
                                   "pixel_offset"]]))


def read_file_header(reader):
    """given a ByteReader positioned at the start of a BMP file
    returns a FileHeader

    raises UnsupportedContainerTag if the magic tag isn't "BM"
    raises TruncatedHeader if the stream is too short"""

    magic = reader.peek_bytes(2)
    if magic != b"BM":
        raise UnsupportedContainerTag(magic)

    try:
        header = FILE_HEADER.parse(reader.read_bytes(FILE_HEADER_SIZE))
    except IOError:
        raise TruncatedHeader()

    if header.file_size != reader.size():
        logger.log(u"file size corrected from {:d} to {:d}".format(
                   header.file_size, reader.size()), logger.DEBUG)

    return FileHeader(magic=header.magic,
                      declared_file_size=header.file_size,
                      file_size=reader.size(),
                      reserved1=header.reserved1,
                      reserved2=header.reserved2,
                      pixel_offset=header.pixel_offset)


#######################
#DIB header
#######################


class InfoHeader(object):
    """the resolved DIB header, whatever its dialect

    height is always positive, with top_down set
    if the file stored a negative height

    compression is one of the COMPRESSION_* values,
    with OS/2-only methods already told apart
    and the pre-rotation flag already removed"""

    FIELDS = ["header_size", "dialect",
              "width", "height", "top_down",
              "planes", "bits_per_pixel",
              "compression", "raw_compression", "source_pre_rotated",
              "image_size", "row_stride",
              "x_pixels_per_meter", "y_pixels_per_meter",
              "palette_color_count", "important_color_count",
              "red_mask", "green_mask", "blue_mask", "alpha_mask",
              "masks_from_file",
              "color_space_type", "endpoints",
              "gamma_red", "gamma_green", "gamma_blue",
              "intent", "profile_offset", "profile_size",
              "os2_units", "os2_recording", "os2_rendering",
              "os2_size1", "os2_size2",
              "os2_color_encoding", "os2_identifier"]

    def __init__(self, **fields):
        for field in self.FIELDS:
            setattr(self, field, fields.pop(field, 0))
        if len(fields) > 0:
            raise TypeError("unknown InfoHeader fields {}".format(
                ", ".join(sorted(fields.keys()))))

    def __repr__(self):
        return "InfoHeader({})".format(
            ",".join(["{}={!r}".format(attr, getattr(self, attr))
                      for attr in ["dialect",
                                   "width",
                                   "height",
                                   "top_down",
                                   "bits_per_pixel",
                                   "compression"]]))

    def bit_masks(self):
        """returns this header's masks as a BitMasks object"""

        return BitMasks(self.red_mask,
                        self.green_mask,
                        self.blue_mask,
                        self.alpha_mask)

    def is_indexed(self):
        """returns True if pixels are indexes into a color palette"""

        return 0 < self.bits_per_pixel <= 8

    def is_compressed(self):
        return self.compression not in UNCOMPRESSED

    def minimum_row_stride(self):
        """returns the bytes of one uncompressed row
        padded to a 4 byte boundary"""

        return 4 * ((self.width * self.bits_per_pixel + 31) // 32)

    def gamma(self):
        """returns the (red, green, blue) gamma values
        converted from their 16.16 fixed point form"""

        return (self.gamma_red / 65536.0,
                self.gamma_green / 65536.0,
                self.gamma_blue / 65536.0)

    def endpoint_coordinates(self):
        """returns the red, green and blue CIE XYZ endpoints
        as ((x, y, z), (x, y, z), (x, y, z)) floats
        converted from their 2.30 fixed point form"""

        return tuple([tuple([v / float(1 << 30) for v in endpoint])
                      for endpoint in self.endpoints])


def __endpoints__(container):
    if not container:
        return ((0, 0, 0), (0, 0, 0), (0, 0, 0))
    return tuple([(container[color].x,
                   container[color].y,
                   container[color].z)
                  for color in ["red", "green", "blue"]])


def read_info_header(reader, file_header):
    """given a ByteReader positioned just after the file header
    and that FileHeader, returns a resolved InfoHeader

    the reader is left after the header's declared size,
    plus any bit masks that follow a 40 byte header

    raises UnsupportedHeaderSize, TruncatedHeader or InvalidBMP"""

    from bitmaptools.text import ERR_BMP_NEGATIVE_WIDTH, ERR_BMP_INVALID_PLANES

    try:
        header_size = reader.read(32)
    except IOError:
        raise TruncatedHeader()

    if not is_known_header_size(header_size):
        raise UnsupportedHeaderSize(header_size)

    try:
        header_data = (header_size.to_bytes(4, "little") +
                       reader.read_bytes(header_size - 4))
    except IOError:
        raise TruncatedHeader()

    # peek at the two fields needed to settle the 40 byte case
    if header_size >= 16:
        peek_bpp = int.from_bytes(header_data[14:16], "little")
    else:
        peek_bpp = 0
    if header_size >= 20:
        peek_compression = int.from_bytes(header_data[16:20], "little")
    else:
        peek_compression = 0

    dialect = resolve_dialect(header_size, peek_bpp, peek_compression)
    fields = dialect.parse(header_data)
    logger.log(u"{:d} byte DIB header resolved to {}".format(
               header_size, dialect.name), logger.DEBUG)

    fields["dialect"] = dialect
    fields["endpoints"] = __endpoints__(fields.get("endpoints"))
    fields.pop("os2_reserved", None)
    fields.pop("reserved", None)

    if fields["width"] < 0:
        raise InvalidBMP(ERR_BMP_NEGATIVE_WIDTH)

    if fields["planes"] != 1:
        raise InvalidBMP(ERR_BMP_INVALID_PLANES.format(fields["planes"]))

    if fields["height"] < 0:
        fields["height"] = -fields["height"]
        fields["top_down"] = True
    else:
        fields["top_down"] = False

    compression = fields.get("compression", COMPRESSION_RGB)
    fields["raw_compression"] = compression
    if ((compression & SOURCE_PRE_ROTATE_MASK) and
        (compression <= 0xFFFF) and
        (compression & ~SOURCE_PRE_ROTATE_MASK) not in
            (COMPRESSION_CMYK, COMPRESSION_CMYK_RLE8, COMPRESSION_CMYK_RLE4)):
        compression &= ~SOURCE_PRE_ROTATE_MASK
        fields["source_pre_rotated"] = True
    else:
        fields["source_pre_rotated"] = False

    if dialect.is_os2 and (compression in (OS2_HUFFMAN_1D, OS2_RLE24)):
        compression |= OS2_COMPRESSION_BASE
    fields["compression"] = compression

    bits_per_pixel = fields["bits_per_pixel"]

    # Windows NT 4 and CE may store their bit masks
    # after a plain 40 byte header, before the pixel data
    fields["masks_from_file"] = ((dialect.max_size >= INFO_NT_HEADER_SIZE) and
                                 (header_size >= INFO_NT_HEADER_SIZE) and
                                 not dialect.is_os2)
    if ((dialect is INFO_40) and
        (compression in (COMPRESSION_BITFIELDS,
                         COMPRESSION_ALPHABITFIELDS)) and
        (bits_per_pixel in (16, 32))):
        mask_count = 3 if (compression == COMPRESSION_BITFIELDS) else 4
        if (file_header.pixel_offset - reader.tell()) >= (mask_count * 4):
            try:
                masks = reader.parse(" ".join(["32u"] * mask_count))
            except IOError:
                raise TruncatedHeader()
            fields["red_mask"] = masks[0]
            fields["green_mask"] = masks[1]
            fields["blue_mask"] = masks[2]
            if mask_count == 4:
                fields["alpha_mask"] = masks[3]
            fields["masks_from_file"] = True
            logger.log(u"{:d} bit masks read after the header".format(
                       mask_count), logger.DEBUG)

    if (bits_per_pixel in (16, 32)) and not (fields.get("red_mask", 0) or
                                             fields.get("green_mask", 0) or
                                             fields.get("blue_mask", 0) or
                                             fields.get("alpha_mask", 0)):
        (fields["red_mask"],
         fields["green_mask"],
         fields["blue_mask"],
         fields["alpha_mask"]) = standard_masks(bits_per_pixel)
        fields["masks_from_file"] = False
        logger.log(u"using standard {:d} bit masks".format(bits_per_pixel),
                   logger.DEBUG)

    width = fields["width"]
    height = fields["height"]
    minimum_stride = 4 * ((width * bits_per_pixel + 31) // 32)
    image_size = fields.get("image_size", 0)
    if (image_size == 0) and (compression in UNCOMPRESSED):
        image_size = minimum_stride * height
        fields["image_size"] = image_size
        logger.log(u"image size derived as {:d} bytes".format(image_size),
                   logger.DEBUG)

    if height == 0:
        fields["row_stride"] = minimum_stride
    elif compression in UNCOMPRESSED:
        fields["row_stride"] = max(image_size // height, minimum_stride)
    else:
        fields["row_stride"] = image_size // height

    if 0 < bits_per_pixel <= 8:
        max_colors = 1 << bits_per_pixel
        if dialect is CORE_12:
            # the core header has no color count,
            # so it is whatever fits before the pixel data
            gap = (file_header.pixel_offset -
                   FILE_HEADER_SIZE - CORE_HEADER_SIZE)
            colors = gap // dialect.palette_entry_size
            fields["palette_color_count"] = colors
        colors = fields.get("palette_color_count", 0)
        if (colors <= 0) or (colors > max_colors):
            logger.log(u"palette color count corrected from {:d} to {:d}".format(
                       colors, max_colors), logger.DEBUG)
            fields["palette_color_count"] = max_colors
            fields["important_color_count"] = max_colors
        elif dialect is CORE_12:
            fields["important_color_count"] = colors

    return InfoHeader(**fields)
