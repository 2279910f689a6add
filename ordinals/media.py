"""Content types of inscriptions and how they are displayed."""

from __future__ import annotations

import struct
from enum import Enum
from pathlib import Path


class Media(Enum):
    AUDIO = "audio"
    IFRAME = "iframe"
    IMAGE = "image"
    MODEL = "model"
    PDF = "pdf"
    TEXT = "text"
    UNKNOWN = "unknown"
    VIDEO = "video"

    @classmethod
    def parse(cls, content_type: str) -> Media:
        for name, media, _ in TABLE:
            if name == content_type:
                return media
        raise ValueError(f"unknown content type: {content_type}")


TABLE: tuple[tuple[str, Media, tuple[str, ...]], ...] = (
    ("application/json", Media.TEXT, ("json",)),
    ("application/pdf", Media.PDF, ("pdf",)),
    ("application/pgp-signature", Media.TEXT, ("asc",)),
    ("application/protobuf", Media.UNKNOWN, ("binpb",)),
    ("application/yaml", Media.TEXT, ("yaml", "yml")),
    ("audio/flac", Media.AUDIO, ("flac",)),
    ("audio/mpeg", Media.AUDIO, ("mp3",)),
    ("audio/wav", Media.AUDIO, ("wav",)),
    ("image/apng", Media.IMAGE, ("apng",)),
    ("image/avif", Media.IMAGE, ()),
    ("image/gif", Media.IMAGE, ("gif",)),
    ("image/jpeg", Media.IMAGE, ("jpg", "jpeg")),
    ("image/png", Media.IMAGE, ("png",)),
    ("image/svg+xml", Media.IFRAME, ("svg",)),
    ("image/webp", Media.IMAGE, ("webp",)),
    ("model/gltf+json", Media.MODEL, ("gltf",)),
    ("model/gltf-binary", Media.MODEL, ("glb",)),
    ("model/stl", Media.UNKNOWN, ("stl",)),
    ("text/css", Media.TEXT, ("css",)),
    ("text/html", Media.IFRAME, ()),
    ("text/html;charset=utf-8", Media.IFRAME, ("html",)),
    ("text/javascript", Media.TEXT, ("js",)),
    ("text/markdown", Media.TEXT, ()),
    ("text/markdown;charset=utf-8", Media.TEXT, ("md",)),
    ("text/plain", Media.TEXT, ()),
    ("text/plain;charset=utf-8", Media.TEXT, ("txt",)),
    ("video/mp4", Media.VIDEO, ("mp4",)),
    ("video/webm", Media.VIDEO, ("webm",)),
)

_CONTAINERS = {b"moov", b"trak", b"mdia", b"minf", b"stbl"}


def content_type_for_path(path) -> str:
    """Content type for a file, chosen by its extension."""
    path = Path(path)
    stem, dot, extension = path.name.rpartition(".")
    if not dot or not stem:
        raise ValueError("file must have extension")
    extension = extension.lower()

    if extension == "mp4":
        _check_mp4_codec(path)

    for content_type, _, extensions in TABLE:
        if extension in extensions:
            return content_type

    supported = sorted(extensions[0] for _, _, extensions in TABLE if extensions)
    raise ValueError(
        f"unsupported file extension `.{extension}`, supported extensions: {' '.join(supported)}"
    )


def _boxes(data: bytes):
    pos = 0
    while pos + 8 <= len(data):
        size, kind = struct.unpack(">I4s", data[pos : pos + 8])
        header = 8
        if size == 1:
            if pos + 16 > len(data):
                raise ValueError("truncated mp4 box")
            (size,) = struct.unpack(">Q", data[pos + 8 : pos + 16])
            header = 16
        elif size == 0:
            size = len(data) - pos
        if size < header or pos + size > len(data):
            raise ValueError("malformed mp4 box")
        yield kind, data[pos + header : pos + size]
        pos += size


def _tracks(data: bytes):
    for kind, payload in _boxes(data):
        if kind == b"trak":
            yield payload
        elif kind in _CONTAINERS:
            yield from _tracks(payload)


def _find(data: bytes, path: tuple[bytes, ...]) -> bytes | None:
    for kind, payload in _boxes(data):
        if kind == path[0]:
            return payload if len(path) == 1 else _find(payload, path[1:])
    return None


def _check_mp4_codec(path: Path) -> None:
    data = path.read_bytes()
    if _find(data, (b"moov",)) is None:
        raise ValueError("mp4 file has no moov box")
    for track in _tracks(data):
        hdlr = _find(track, (b"mdia", b"hdlr"))
        if hdlr is None or len(hdlr) < 12:
            raise ValueError("mp4 track has no handler")
        if hdlr[8:12] != b"vide":
            continue
        stsd = _find(track, (b"mdia", b"minf", b"stbl", b"stsd"))
        entries = list(_boxes(stsd[8:])) if stsd is not None and len(stsd) >= 8 else []
        if not entries:
            raise ValueError("mp4 video track has no sample description")
        codec = entries[0][0]
        if codec != b"avc1":
            raise ValueError(
                "Unsupported video codec, only H.264 is supported in MP4: "
                + codec.decode("latin-1")
            )