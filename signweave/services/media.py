"""Media helpers: data URIs and WAV container assembly."""

from __future__ import annotations

import base64
import binascii
import io
import logging
import re
import struct
import wave
from dataclasses import dataclass

from signweave.errors import EncodingError, MediaFormatError

logger = logging.getLogger(__name__)

WAV_MEDIA_TYPE = "audio/wav"
WAV_HEADER_SIZE = 44  # RIFF + fmt + data chunk headers for plain PCM.

_DATA_URI_PATTERN = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?P<params>(?:;[\w.+-]+=[^;,]*)*);base64,(?P<payload>.*)$",
    re.DOTALL,
)


@dataclass(frozen=True)
class MediaDataUri:
    """Decoded form of a ``data:<mime>;base64,<payload>`` string."""

    mime_type: str
    payload: bytes

    @property
    def media_class(self) -> str:
        return self.mime_type.split("/", 1)[0]

    @property
    def subtype(self) -> str:
        return self.mime_type.split("/", 1)[1]

    def to_uri(self) -> str:
        return build_data_uri(self.mime_type, self.payload)


def parse_data_uri(value: str) -> MediaDataUri:
    """Split a base64 data URI into its MIME type and decoded payload."""

    if not isinstance(value, str):
        raise MediaFormatError("Data URI must be a string.")
    match = _DATA_URI_PATTERN.match(value.strip())
    if match is None:
        raise MediaFormatError("Expected a 'data:<mime-type>;base64,<payload>' URI.")
    try:
        payload = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MediaFormatError("Data URI payload is not valid base64.") from exc
    return MediaDataUri(mime_type=match.group("mime").lower(), payload=payload)


def build_data_uri(mime_type: str, payload: bytes) -> str:
    """Encode raw bytes as a base64 data URI."""

    return f"data:{mime_type};base64,{base64.b64encode(payload).decode('ascii')}"


def encode_audio_container(
    samples: bytes,
    channels: int = 1,
    sample_rate: int = 24000,
    bit_depth: int = 16,
) -> str:
    """Wrap raw little-endian PCM samples in a WAV container and base64 it.

    The samples are copied verbatim after the 44-byte header; nothing is
    resampled or compressed, so identical input always yields identical bytes.
    """

    if channels < 1:
        raise EncodingError(f"Invalid channel count: {channels}")
    if sample_rate < 1:
        raise EncodingError(f"Invalid sample rate: {sample_rate}")
    if bit_depth < 8 or bit_depth % 8:
        raise EncodingError(f"Unsupported bit depth: {bit_depth}")

    try:
        with io.BytesIO() as buffer:
            with wave.open(buffer, "wb") as wave_file:
                wave_file.setnchannels(channels)
                wave_file.setsampwidth(bit_depth // 8)
                wave_file.setframerate(sample_rate)
                wave_file.writeframes(bytes(samples))
            container = buffer.getvalue()
    except (wave.Error, struct.error, OSError, TypeError) as exc:
        raise EncodingError(f"Failed to write WAV container: {exc}") from exc

    if len(container) != WAV_HEADER_SIZE + len(samples):
        raise EncodingError(
            f"WAV writer flushed {len(container)} bytes, "
            f"expected {WAV_HEADER_SIZE + len(samples)}."
        )

    logger.debug(
        "Encoded %s PCM bytes as WAV channels=%s rate=%s depth=%s",
        len(samples),
        channels,
        sample_rate,
        bit_depth,
    )
    return base64.b64encode(container).decode("ascii")


__all__ = [
    "MediaDataUri",
    "WAV_HEADER_SIZE",
    "WAV_MEDIA_TYPE",
    "build_data_uri",
    "encode_audio_container",
    "parse_data_uri",
]
