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


# (red, green, blue, alpha) masks
RGB555 = (0x00007C00, 0x000003E0, 0x0000001F, 0x00000000)
RGB565 = (0x0000F800, 0x000007E0, 0x0000001F, 0x00000000)
RGB888 = (0x00FF0000, 0x0000FF00, 0x000000FF, 0x00000000)
ARGB8888 = (0x00FF0000, 0x0000FF00, 0x000000FF, 0xFF000000)
RGB101010 = (0x3FF00000, 0x000FFC00, 0x000003FF, 0x00000000)


def standard_masks(bits_per_pixel):
    """returns the (red, green, blue, alpha) masks
    implied for uncompressed data of the given bits-per-pixel"""

    if bits_per_pixel == 16:
        return RGB555
    else:
        return RGB888


def mask_quantum(mask):
    """given a channel mask, returns a (shift, quantum) tuple

    quantum is the number of contiguous bits set
    starting from the mask's least significant set bit
    shift is how far those bits must move left
    for the most significant of them to land on bit 31

    a mask of 0 returns (0, 0)"""

    mask &= 0xFFFFFFFF
    if mask == 0:
        return (0, 0)

    lsb = 0
    while not (mask & (1 << lsb)):
        lsb += 1

    quantum = 0
    while (lsb + quantum < 32) and (mask & (1 << (lsb + quantum))):
        quantum += 1

    return (32 - (lsb + quantum), quantum)


def expand_channel(sample, mask, shift, quantum, default):
    """extracts one channel from sample and scales it to 8 bits

    channels narrower than 8 bits have their most significant bits
    replicated into the vacated low bits, so a full-scale 5 bit value
    becomes 0xFF rather than 0xF8"""

    if mask == 0:
        return default

    value = (((sample & mask) << shift) & 0xFFFFFFFF) >> 24
    bits = quantum
    while 0 < bits < 8:
        value |= value >> bits
        bits *= 2
    return value


class BitMasks(object):
    """red, green, blue and alpha masks
    with each channel's shift and quantum precomputed"""

    def __init__(self, red, green, blue, alpha=0):
        self.red = red & 0xFFFFFFFF
        self.green = green & 0xFFFFFFFF
        self.blue = blue & 0xFFFFFFFF
        self.alpha = alpha & 0xFFFFFFFF

        (self.red_shift, self.red_quantum) = mask_quantum(self.red)
        (self.green_shift, self.green_quantum) = mask_quantum(self.green)
        (self.blue_shift, self.blue_quantum) = mask_quantum(self.blue)
        (self.alpha_shift, self.alpha_quantum) = mask_quantum(self.alpha)

    def __repr__(self):
        return "BitMasks(0x{:08X}, 0x{:08X}, 0x{:08X}, 0x{:08X})".format(
            self.red, self.green, self.blue, self.alpha)

    def __eq__(self, masks):
        return (isinstance(masks, BitMasks) and
                (self.masks() == masks.masks()))

    def __ne__(self, masks):
        return not self.__eq__(masks)

    def masks(self):
        """returns a (red, green, blue, alpha) tuple of masks"""

        return (self.red, self.green, self.blue, self.alpha)

    def is_empty(self):
        """returns True if no channel has a mask"""

        return not (self.red or self.green or self.blue or self.alpha)

    def extract(self, sample):
        """given a raw 16 or 32 bit pixel value
        returns an (red, green, blue, alpha) tuple of 8 bit values

        a channel without a mask is 0, or 255 for alpha"""

        return (expand_channel(sample, self.red,
                               self.red_shift, self.red_quantum, 0),
                expand_channel(sample, self.green,
                               self.green_shift, self.green_quantum, 0),
                expand_channel(sample, self.blue,
                               self.blue_shift, self.blue_quantum, 0),
                expand_channel(sample, self.alpha,
                               self.alpha_shift, self.alpha_quantum, 255))
