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


import unittest
import bitmaptools
import struct
import test_streams
from io import BytesIO

from bitmaptools import bmpheader
from bitmaptools.bitfields import RGB565, ARGB8888
from bitmaptools.image import BMPImage
from bitmaptools.scanline import PixelGrid


RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)

GRAY256 = [(i, i, i) for i in range(256)]


class PixelGridTest(unittest.TestCase):
    def test_grid(self):
        grid = PixelGrid(2, 1)
        self.assertEqual(grid[0], [(0, 0, 0, 0), (0, 0, 0, 0)])
        grid.set_row(0, [RED, (1, 2, 3, 4)])
        self.assertEqual(grid.pixel(1, 0), (1, 2, 3, 4))
        self.assertEqual(grid.to_bytes(), b"\xFF\x00\x00\xFF\x01\x02\x03\x04")
        self.assertEqual(len(grid), 1)
        self.assertEqual(list(grid), [[RED, (1, 2, 3, 4)]])
        self.assertEqual(grid, PixelGrid(2, 1, grid.to_bytes()))
        self.assertRaises(IndexError, grid.pixel, 2, 0)
        self.assertRaises(IndexError, grid.__getitem__, 1)
        self.assertRaises(ValueError, PixelGrid, 2, 2, b"\x00" * 4)


class BMPImageTest(unittest.TestCase):
    def test_orientation(self):
        bottom_up = BMPImage.parse(test_streams.quad_bmp(top_down=False))
        top_down = BMPImage.parse(test_streams.quad_bmp(top_down=True))

        self.assertFalse(bottom_up.top_down)
        self.assertTrue(top_down.top_down)
        self.assertEqual(top_down.height, 2)
        self.assertEqual(bottom_up.pixels, top_down.pixels)
        self.assertEqual(bottom_up.pixels[0], [RED, GREEN])
        self.assertEqual(bottom_up.pixels[1], [BLUE, WHITE])

    def test_metrics(self):
        image = BMPImage.metrics(test_streams.quad_bmp())
        self.assertIsNone(image.pixels)
        self.assertEqual(image.width, 2)
        self.assertEqual(image.height, 2)
        self.assertEqual(image.bits_per_pixel, 24)
        self.assertEqual(image.color_count, 0)
        self.assertEqual(image.mime_type, u"image/x-ms-bmp")
        self.assertIs(image.dialect, bmpheader.INFO_40)
        self.assertEqual(image.compression, bmpheader.COMPRESSION_RGB)

    def test_read(self):
        image = BMPImage.read(BytesIO(test_streams.quad_bmp()))
        self.assertEqual(image.pixels[0], [RED, GREEN])

    def test_1bpp(self):
        image = BMPImage.parse(test_streams.bmp(
            test_streams.info_header(3, 2, 1, colors=2),
            palette=test_streams.quad_palette([(0, 0, 0), (255, 255, 255)]),
            pixels=test_streams.indexed_rows([[1, 0, 1],
                                              [0, 1, 0]], 1)))
        self.assertEqual(image.color_count, 2)
        self.assertEqual(image.pixels[0], [WHITE, BLACK, WHITE])
        self.assertEqual(image.pixels[1], [BLACK, WHITE, BLACK])

    def test_2bpp(self):
        image = BMPImage.parse(test_streams.bmp(
            test_streams.info_header(5, 1, 2),
            palette=test_streams.quad_palette(test_streams.GRAY4),
            pixels=test_streams.indexed_rows([[0, 1, 2, 3, 3]], 2)))
        self.assertEqual(image.pixels[0],
                         [BLACK,
                          (85, 85, 85, 255),
                          (170, 170, 170, 255),
                          WHITE,
                          WHITE])

    def test_4bpp(self):
        colors = [(i * 17, 0, 0) for i in range(16)]
        image = BMPImage.parse(test_streams.bmp(
            test_streams.info_header(3, 1, 4),
            palette=test_streams.quad_palette(colors),
            pixels=test_streams.indexed_rows([[15, 1, 2]], 4)))
        self.assertEqual(image.color_count, 16)
        self.assertEqual(image.pixels[0], [RED,
                                           (17, 0, 0, 255),
                                           (34, 0, 0, 255)])

    def test_8bpp_stride(self):
        rows = [list(range(0, 11)), list(range(11, 22))]
        image = BMPImage.parse(test_streams.bmp(
            test_streams.info_header(11, 2, 8),
            palette=test_streams.quad_palette(GRAY256),
            pixels=test_streams.indexed_rows(rows, 8)))
        self.assertEqual(image.info_header.row_stride, 12)
        self.assertEqual(image.pixels[0], [(i, i, i, 255) for i in rows[0]])
        self.assertEqual(image.pixels[1], [(i, i, i, 255) for i in rows[1]])

    def test_index_outside_palette(self):
        image = BMPImage.parse(test_streams.bmp(
            test_streams.info_header(2, 1, 8, colors=2),
            palette=test_streams.quad_palette([(255, 0, 0), (0, 255, 0)]),
            pixels=test_streams.indexed_rows([[1, 5]], 8)))
        self.assertEqual(image.pixels[0], [GREEN, BLACK])

    def test_core_header(self):
        image = BMPImage.parse(test_streams.bmp(
            test_streams.core_header(2, 1, 8),
            palette=test_streams.triple_palette([(0, 0, 255), (0, 255, 0)]),
            pixels=test_streams.indexed_rows([[1, 0]], 8)))
        self.assertIs(image.dialect, bmpheader.CORE_12)
        self.assertEqual(image.pixels[0], [GREEN, BLUE])

    def test_24bpp_padded_stride(self):
        pixels = b"".join([test_streams.pad_row(b"\x00\x00\xFF") +
                           b"\xEE" * 4
                           for i in range(2)])
        image = BMPImage.parse(test_streams.bmp(
            test_streams.info_header(1, 2, 24, image_size=16),
            pixels=pixels))
        self.assertEqual(image.info_header.row_stride, 8)
        self.assertEqual(image.pixels[0], [RED])
        self.assertEqual(image.pixels[1], [RED])

    def test_16bpp_rgb(self):
        image = BMPImage.parse(test_streams.bmp(
            test_streams.info_header(3, 1, 16),
            pixels=test_streams.sample_rows([[0x7FFF, 0x7C00, 0x0000]], 16)))
        self.assertEqual(image.pixels[0], [WHITE, RED, BLACK])

    def test_16bpp_bitfields(self):
        image = BMPImage.parse(test_streams.bmp(
            test_streams.info_header(2, 1, 16, compression=3),
            palette=struct.pack("<III", *RGB565[0:3]),
            pixels=test_streams.sample_rows([[0xF800, 0x001F]], 16)))
        self.assertEqual(image.pixels[0], [RED, BLUE])

    def test_32bpp(self):
        image = BMPImage.parse(test_streams.bmp(
            test_streams.info_header(1, 1, 32),
            pixels=test_streams.sample_rows([[0xFF112233]], 32)))
        self.assertEqual(image.pixels[0], [(0x11, 0x22, 0x33, 255)])

        image = BMPImage.parse(test_streams.bmp(
            test_streams.info_header(1, 1, 32, compression=6),
            palette=struct.pack("<IIII", *ARGB8888),
            pixels=test_streams.sample_rows([[0x80112233]], 32)))
        self.assertEqual(image.pixels[0], [(0x11, 0x22, 0x33, 0x80)])

        image = BMPImage.parse(test_streams.bmp(
            test_streams.info_header(1, -1, 32, compression=3,
                                     size=124, masks=ARGB8888),
            pixels=test_streams.sample_rows([[0x00FF0000]], 32)))
        self.assertEqual(image.pixels[0], [(255, 0, 0, 0)])

    def test_pixel_offset(self):
        # unused bytes between the header and the pixels are skipped
        image = BMPImage.parse(test_streams.bmp(
            test_streams.info_header(1, 1, 24),
            palette=b"\xAA" * 6,
            pixels=test_streams.bgr_rows([[(0, 255, 0)]])))
        self.assertEqual(image.pixels[0], [GREEN])

        # an offset of 0 means the pixels follow the header
        image = BMPImage.parse(test_streams.bmp(
            test_streams.info_header(1, 1, 24),
            pixels=test_streams.bgr_rows([[(0, 0, 255)]]),
            pixel_offset=0))
        self.assertEqual(image.pixels[0], [BLUE])

        self.assertRaises(bitmaptools.TruncatedPixelData,
                          BMPImage.parse,
                          test_streams.bmp(
                              test_streams.info_header(1, 1, 24),
                              pixels=b"\x00" * 4,
                              pixel_offset=500))

    def test_empty(self):
        image = BMPImage.parse(test_streams.bmp(
            test_streams.info_header(0, 0, 24)))
        self.assertEqual(image.width, 0)
        self.assertEqual(image.height, 0)
        self.assertEqual(image.pixels.to_bytes(), b"")


class RLEImageTest(unittest.TestCase):
    def test_rle8(self):
        image = BMPImage.parse(test_streams.bmp(
            test_streams.info_header(3, 2, 8, compression=1, colors=3),
            palette=test_streams.quad_palette([(0, 0, 0),
                                               (255, 0, 0),
                                               (0, 255, 0)]),
            pixels=bytes([0x03, 0x01, 0x00, 0x00,
                          0x03, 0x02, 0x00, 0x01])))
        self.assertEqual(image.compression, bmpheader.COMPRESSION_RLE8)
        self.assertEqual(image.pixels[0], [GREEN, GREEN, GREEN])
        self.assertEqual(image.pixels[1], [RED, RED, RED])

    def test_rle8_unwritten(self):
        image = BMPImage.parse(test_streams.bmp(
            test_streams.info_header(2, 1, 8, compression=1, colors=2),
            palette=test_streams.quad_palette([(0, 0, 255), (255, 0, 0)]),
            pixels=bytes([0x01, 0x01, 0x00, 0x01])))
        self.assertEqual(image.pixels[0], [RED, BLUE])

    def test_rle4(self):
        colors = [(0, 0, 0)] * 16
        colors[1] = (255, 0, 0)
        colors[2] = (0, 255, 0)
        image = BMPImage.parse(test_streams.bmp(
            test_streams.info_header(4, 1, 4, compression=2),
            palette=test_streams.quad_palette(colors),
            pixels=bytes([0x04, 0x12, 0x00, 0x01])))
        self.assertEqual(image.pixels[0], [RED, GREEN, RED, GREEN])

    def test_rle24(self):
        image = BMPImage.parse(test_streams.bmp(
            test_streams.info_header(2, 1, 24, compression=4),
            pixels=bytes([0x02, 0x10, 0x20, 0x30, 0x00, 0x01])))
        self.assertIs(image.dialect, bmpheader.OS2_V2)
        self.assertEqual(image.compression, bmpheader.COMPRESSION_RLE24)
        self.assertEqual(image.pixels[0], [(0x30, 0x20, 0x10, 255)] * 2)

    def test_truncated(self):
        self.assertRaises(bitmaptools.TruncatedRleStream,
                          BMPImage.parse,
                          test_streams.bmp(
                              test_streams.info_header(4, 1, 4,
                                                       compression=2),
                              palette=test_streams.quad_palette(
                                  [(0, 0, 0)] * 16),
                              pixels=bytes([0x00, 0x05, 0x12])))


class ErrorTest(unittest.TestCase):
    def test_declared_size(self):
        data = test_streams.bmp(
            test_streams.info_header(100000, 100000, 32),
            pixels=b"\x00" * 50)
        with self.assertRaises(bitmaptools.DeclaredSizeExceedsStream) as cm:
            BMPImage.parse(data)
        self.assertEqual(cm.exception.width, 100000)
        self.assertEqual(cm.exception.height, 100000)
        self.assertEqual(cm.exception.remaining, 50)

        # headers alone can still be read
        image = BMPImage.metrics(data)
        self.assertEqual(image.width, 100000)

        self.assertRaises(bitmaptools.DeclaredSizeExceedsStream,
                          BMPImage.parse,
                          test_streams.bmp(
                              test_streams.info_header(10, 100000, 8,
                                                       compression=1),
                              palette=test_streams.quad_palette(GRAY256),
                              pixels=b"\x00\x01"))

    def test_declared_size_last_row(self):
        # a single row wider than the stream
        with self.assertRaises(bitmaptools.DeclaredSizeExceedsStream) as cm:
            BMPImage.parse(test_streams.bmp(
                test_streams.info_header(1000000, 1, 32),
                pixels=b"\x00" * 50))
        self.assertEqual(cm.exception.height, 1)
        self.assertEqual(cm.exception.remaining, 50)

        # every row but the last
        self.assertRaises(bitmaptools.DeclaredSizeExceedsStream,
                          BMPImage.parse,
                          test_streams.bmp(
                              test_streams.info_header(1000, 2, 32),
                              pixels=b"\x00" * 4000))

        # the last row may omit its padding
        image = BMPImage.parse(test_streams.quad_bmp()[0:-2])
        self.assertEqual(image.pixels,
                         BMPImage.parse(test_streams.quad_bmp()).pixels)

    def test_too_large(self):
        limit = bitmaptools.MAX_PIXELS
        bitmaptools.MAX_PIXELS = 3
        try:
            with self.assertRaises(bitmaptools.ImageTooLarge) as cm:
                BMPImage.parse(test_streams.quad_bmp())
            self.assertEqual(cm.exception.pixels, 4)
            self.assertEqual(cm.exception.limit, 3)
        finally:
            bitmaptools.MAX_PIXELS = limit

    def test_too_large_by_default(self):
        # a single end of bitmap command addressing a billion pixels
        limit = bitmaptools.MAX_PIXELS
        bitmaptools.MAX_PIXELS = bitmaptools.DEFAULT_MAX_PIXELS
        try:
            with self.assertRaises(bitmaptools.ImageTooLarge) as cm:
                BMPImage.parse(test_streams.bmp(
                    test_streams.info_header(10 ** 9, 1, 8, compression=1),
                    palette=test_streams.quad_palette(GRAY256),
                    pixels=b"\x00\x01"))
            self.assertEqual(cm.exception.pixels, 10 ** 9)
            self.assertEqual(cm.exception.limit,
                             bitmaptools.DEFAULT_MAX_PIXELS)
        finally:
            bitmaptools.MAX_PIXELS = limit

    def test_partial_last_row(self):
        data = test_streams.quad_bmp()
        self.assertRaises(bitmaptools.DeclaredSizeExceedsStream,
                          BMPImage.parse, data[0:-3])

    def test_container(self):
        data = test_streams.quad_bmp()
        self.assertRaises(bitmaptools.UnsupportedContainerTag,
                          BMPImage.parse, b"IC" + data[2:])

    def test_payload_codecs(self):
        for compression in [4, 5, 11, 12, 13, 99]:
            self.assertRaises(bitmaptools.UnsupportedPayloadCodec,
                              BMPImage.parse,
                              test_streams.bmp(
                                  test_streams.info_header(
                                      1, 1, 0, compression=compression,
                                      size=52),
                                  pixels=b"\xFF\xD8\xFF\xE0"))

        # OS/2 Huffman 1D, whatever the bits-per-pixel
        for (bits_per_pixel, palette) in [(1, GRAY256[0:2]), (8, GRAY256)]:
            with self.assertRaises(bitmaptools.UnsupportedPayloadCodec) as cm:
                BMPImage.parse(test_streams.bmp(
                    test_streams.info_header(8, 1, bits_per_pixel,
                                             compression=3),
                    palette=test_streams.quad_palette(palette),
                    pixels=b"\x00" * 8))
            self.assertEqual(cm.exception.compression,
                             bmpheader.COMPRESSION_HUFFMAN_1D)

    def test_pixel_format(self):
        with self.assertRaises(bitmaptools.UnsupportedPixelFormat) as cm:
            BMPImage.parse(test_streams.bmp(
                test_streams.info_header(1, 1, 64),
                pixels=b"\x00" * 8))
        self.assertEqual(cm.exception.bits_per_pixel, 64)

    def test_compression_for_depth(self):
        for (bits_per_pixel, compression, size) in [(24, 1, 40),
                                                    (24, 2, 40),
                                                    (24, 6, 40),
                                                    (8, 2, 40),
                                                    (4, 1, 40),
                                                    (24, 3, 52),
                                                    (8, 3, 52)]:
            if bits_per_pixel <= 8:
                palette = test_streams.quad_palette(GRAY256)
            else:
                palette = b""
            self.assertRaises(bitmaptools.InvalidCompressionForDepth,
                              BMPImage.parse,
                              test_streams.bmp(
                                  test_streams.info_header(
                                      1, 1, bits_per_pixel,
                                      compression=compression,
                                      size=size),
                                  palette=palette,
                                  pixels=b"\x00" * 4))


class ProfileTest(unittest.TestCase):
    def profile_bmp(self, color_space_type, profile_offset, profile):
        header = test_streams.info_header(
            1, 1, 24, size=124,
            tail=test_streams.v5_tail(color_space_type=color_space_type,
                                      profile_offset=profile_offset,
                                      profile_size=len(profile)))
        return (test_streams.bmp(header,
                                 pixels=test_streams.pad_row(b"\x01\x02\x03")) +
                profile)

    def test_embedded(self):
        image = BMPImage.parse(self.profile_bmp(bmpheader.PROFILE_EMBEDDED,
                                                128,
                                                b"ICCDATA!"))
        self.assertEqual(image.icc_profile, b"ICCDATA!")
        self.assertIsNone(image.profile_filename)
        self.assertEqual(image.pixels[0], [(3, 2, 1, 255)])

    def test_linked(self):
        image = BMPImage.parse(self.profile_bmp(bmpheader.PROFILE_LINKED,
                                                128,
                                                b"C:\\prof.icm\x00\x00"))
        self.assertIsNone(image.icc_profile)
        self.assertEqual(image.profile_filename, u"C:\\prof.icm")

    def test_outside_file(self):
        with self.assertLogs("bitmaptools", level="WARNING"):
            image = BMPImage.parse(
                self.profile_bmp(bmpheader.PROFILE_EMBEDDED,
                                 1000,
                                 b"ICCDATA!"))
        self.assertIsNone(image.icc_profile)
        self.assertEqual(image.pixels[0], [(3, 2, 1, 255)])


if (__name__ == '__main__'):
    unittest.main()
