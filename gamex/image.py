"""8-bit and floating-point RGBA images with file loading and storing."""

from __future__ import annotations

import io
import math
import os
import struct
from dataclasses import dataclass
from typing import NamedTuple

from PIL import Image as _PILImage

from gamex.asset_probe import AssetProbe

_LDR_FORMATS = {"png": "PNG", "jpg": "JPEG", "jpeg": "JPEG", "bmp": "BMP", "tga": "TGA"}
_GAMMA = 2.2


class ImageError(Exception):
    """Raised when an image cannot be loaded or stored."""


class Pixel(NamedTuple):
    r: int
    g: int
    b: int
    a: int


class PixelHDR(NamedTuple):
    r: float
    g: float
    b: float
    a: float


def _extension(path) -> str:
    path = os.fspath(path)
    return path[path.rfind(".") + 1 :]


def _check_size(width: int, height: int, count: int) -> None:
    if width < 0 or height < 0:
        raise ValueError("image dimensions must not be negative")
    if count != width * height:
        raise ValueError(f"expected {width * height} pixels, got {count}")


def _resolve(path, probe: AssetProbe | None) -> str:
    probe = probe or AssetProbe.public_instance()
    real_path = probe.probe_asset(os.fspath(path))
    if real_path is None:
        raise ImageError(f"Failed to load image: {path}")
    return real_path


def _is_radiance(path: str) -> bool:
    with open(path, "rb") as fh:
        head = fh.read(10)
    return head.startswith((b"#?RADIANCE", b"#?RGBE"))


def _open_rgba(path: str) -> tuple[int, int, bytes]:
    try:
        with _PILImage.open(path) as im:
            rgba = im.convert("RGBA")
    except OSError as exc:
        raise ImageError(f"Failed to load image: {path}") from exc
    return rgba.width, rgba.height, rgba.tobytes()


def _rgbe_to_pixel(r: int, g: int, b: int, e: int) -> PixelHDR:
    if e == 0:
        return PixelHDR(0.0, 0.0, 0.0, 1.0)
    f = math.ldexp(1.0, e - (128 + 8))
    return PixelHDR(r * f, g * f, b * f, 1.0)


def _pixel_to_rgbe(pixel: PixelHDR) -> bytes:
    r, g, b = (max(0.0, c) for c in pixel[:3])
    v = max(r, g, b)
    if v < 1e-32:
        return bytes(4)
    mantissa, exponent = math.frexp(v)
    scale = mantissa * 256.0 / v
    return bytes((int(r * scale), int(g * scale), int(b * scale), exponent + 128))


def _read_rle_channel(body: bytes, pos: int, width: int) -> tuple[bytes, int]:
    channel = bytearray()
    while len(channel) < width:
        if pos >= len(body):
            raise ImageError("truncated HDR data")
        count = body[pos]
        pos += 1
        left = width - len(channel)
        if count > 128:
            count -= 128
            if count == 0 or count > left or pos >= len(body):
                raise ImageError("bad RLE data in HDR")
            channel += bytes((body[pos],)) * count
            pos += 1
        else:
            if count == 0 or count > left or pos + count > len(body):
                raise ImageError("bad RLE data in HDR")
            channel += body[pos : pos + count]
            pos += count
    return bytes(channel), pos


def _read_radiance(path: str) -> tuple[int, int, list[PixelHDR]]:
    with open(path, "rb") as fh:
        stream = io.BytesIO(fh.read())
    if not stream.readline().startswith((b"#?RADIANCE", b"#?RGBE")):
        raise ImageError(f"not a Radiance HDR file: {path}")
    valid_format = False
    while True:
        line = stream.readline()
        if not line:
            raise ImageError("truncated HDR header")
        line = line.strip()
        if not line:
            break
        if line == b"FORMAT=32-bit_rle_rgbe":
            valid_format = True
    if not valid_format:
        raise ImageError("unsupported HDR format")
    resolution = stream.readline().split()
    if len(resolution) != 4 or resolution[0] != b"-Y" or resolution[2] != b"+X":
        raise ImageError("unsupported HDR orientation")
    try:
        height, width = int(resolution[1]), int(resolution[3])
    except ValueError as exc:
        raise ImageError("bad HDR resolution") from exc

    body = stream.read()
    pos = 0
    pixels: list[PixelHDR] = []
    rows_left = height
    if 8 <= width < 32768:
        while rows_left:
            head = body[pos : pos + 4]
            if len(head) < 4:
                raise ImageError("truncated HDR data")
            if head[0] != 2 or head[1] != 2 or head[2] & 0x80:
                break
            if (head[2] << 8) | head[3] != width:
                raise ImageError("invalid decoded scanline length")
            pos += 4
            channels = []
            for _ in range(4):
                channel, pos = _read_rle_channel(body, pos, width)
                channels.append(channel)
            pixels.extend(_rgbe_to_pixel(*q) for q in zip(*channels))
            rows_left -= 1
    if rows_left:
        needed = rows_left * width * 4
        flat = body[pos : pos + needed]
        if len(flat) < needed:
            raise ImageError("truncated HDR data")
        pixels.extend(_rgbe_to_pixel(*q) for q in struct.iter_unpack("4B", flat))
    return width, height, pixels


def _write_radiance(path, width: int, height: int, pixels: list[PixelHDR]) -> None:
    out = bytearray(b"#?RADIANCE\nFORMAT=32-bit_rle_rgbe\n\n")
    out += f"-Y {height} +X {width}\n".encode("ascii")
    encoded = [_pixel_to_rgbe(p) for p in pixels]
    if width:
        rle = 8 <= width < 32768
        for start in range(0, len(encoded), width):
            scan = encoded[start : start + width]
            if not rle:
                out += b"".join(scan)
                continue
            out += bytes((2, 2, width >> 8, width & 0xFF))
            for component in range(4):
                channel = bytes(e[component] for e in scan)
                for chunk_start in range(0, width, 128):
                    chunk = channel[chunk_start : chunk_start + 128]
                    out.append(len(chunk))
                    out += chunk
    with open(path, "wb") as fh:
        fh.write(out)


def _to_byte(value: float) -> int:
    return min(255, max(0, int(value)))


@dataclass
class Image:
    """An 8-bit RGBA image stored row by row."""

    width: int
    height: int
    pixels: list[Pixel]

    def __post_init__(self) -> None:
        self.pixels = [Pixel(*p) for p in self.pixels]
        _check_size(self.width, self.height, len(self.pixels))
        for pixel in self.pixels:
            if not all(0 <= c <= 255 for c in pixel):
                raise ValueError(f"pixel component out of range: {pixel}")

    @classmethod
    def filled(cls, width: int, height: int, pixel) -> Image:
        return cls(width, height, [Pixel(*pixel)] * (width * height))

    @classmethod
    def from_bytes(cls, width: int, height: int, data) -> Image:
        """Image from packed RGBA bytes; missing trailing bytes are zero."""
        data = bytes(data)
        needed = width * height * 4
        if len(data) > needed:
            raise ValueError(f"expected at most {needed} bytes, got {len(data)}")
        padded = data + bytes(needed - len(data))
        return cls(width, height, [Pixel(*p) for p in struct.iter_unpack("4B", padded)])

    @classmethod
    def from_hdr(cls, image_hdr: ImageHDR) -> Image:
        """Clamp each component to [0, 1] and scale to 0..255, truncating."""
        return cls(
            image_hdr.width,
            image_hdr.height,
            [
                Pixel(*(int(min(max(c, 0.0), 1.0) * 255.0) for c in p))
                for p in image_hdr.pixels
            ],
        )

    @classmethod
    def load(cls, path, probe: AssetProbe | None = None) -> Image:
        real_path = _resolve(path, probe)
        if _is_radiance(real_path):
            width, height, hdr = _read_radiance(real_path)
            pixels = [
                Pixel(
                    *(_to_byte(max(c, 0.0) ** (1.0 / _GAMMA) * 255.0 + 0.5) for c in p[:3]),
                    _to_byte(p.a * 255.0 + 0.5),
                )
                for p in hdr
            ]
            return cls(width, height, pixels)
        width, height, data = _open_rgba(real_path)
        return cls.from_bytes(width, height, data)

    def _raw(self) -> bytes:
        return b"".join(bytes(p) for p in self.pixels)

    def store(self, path) -> None:
        """Write the image in the format its file extension names."""
        ext = _extension(path)
        fmt = _LDR_FORMATS.get(ext)
        if fmt is None:
            raise ImageError(f"Unsupported image format: {ext}")
        im = _PILImage.frombytes("RGBA", (self.width, self.height), self._raw())
        if fmt == "JPEG":
            im.convert("RGB").save(path, format=fmt, quality=100)
        else:
            im.save(path, format=fmt)


@dataclass
class ImageHDR:
    """A floating-point RGBA image stored row by row."""

    width: int
    height: int
    pixels: list[PixelHDR]

    def __post_init__(self) -> None:
        self.pixels = [PixelHDR(*(float(c) for c in p)) for p in self.pixels]
        _check_size(self.width, self.height, len(self.pixels))

    @classmethod
    def filled(cls, width: int, height: int, pixel) -> ImageHDR:
        return cls(width, height, [PixelHDR(*pixel)] * (width * height))

    @classmethod
    def from_floats(cls, width: int, height: int, data) -> ImageHDR:
        """Image from packed RGBA floats; missing trailing values are zero."""
        values = [float(v) for v in data]
        needed = width * height * 4
        if len(values) > needed:
            raise ValueError(f"expected at most {needed} values, got {len(values)}")
        values.extend([0.0] * (needed - len(values)))
        components = iter(values)
        return cls(width, height, [PixelHDR(*q) for q in zip(*[components] * 4)])

    @classmethod
    def load(cls, path, probe: AssetProbe | None = None) -> ImageHDR:
        real_path = _resolve(path, probe)
        if _is_radiance(real_path):
            return cls(*_read_radiance(real_path))
        width, height, data = _open_rgba(real_path)
        pixels = [
            PixelHDR(
                *((c / 255.0) ** _GAMMA for c in q[:3]),
                q[3] / 255.0,
            )
            for q in struct.iter_unpack("4B", data)
        ]
        return cls(width, height, pixels)

    def store(self, path) -> None:
        """Write a Radiance HDR file; alpha is not kept."""
        ext = _extension(path)
        if ext != "hdr":
            raise ImageError(f"Unsupported image format: {ext}")
        _write_radiance(path, self.width, self.height, self.pixels)