# wav2mono/io.py
"""
Audio container I/O for dual-mono detection and reduction.

Design goals:
- readable and explicit
- header inspection without touching sample data
- native-width sample blocks (no float conversion here; see wav2mono.normalise)
- bit-exact write-back of native-width samples
- clear errors when a file cannot be decoded

Decoding and encoding are delegated to libsndfile via soundfile. libsndfile
hands 8-bit and 24-bit PCM back left-justified in 16/32-bit containers; this
module shifts them to their native width on read and back on write, so every
value seen by the rest of the package is the sample exactly as stored.
"""

from __future__ import annotations

import enum
import logging
import os
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

import numpy as np

try:
    import soundfile as sf
except ImportError as import_error:  # pragma: no cover
    raise ImportError(
        "soundfile is required for WAV reading and writing. Install with: pip install soundfile"
    ) from import_error

from wav2mono.errors import UnreadableContainerError, UnsupportedEncodingError, WriteFailureError


logger = logging.getLogger(__name__)

DEFAULT_BLOCK_FRAMES = 65_536


class SampleFormat(str, enum.Enum):
    INTEGER = "Integer"
    FLOAT = "Float"


@dataclass(frozen=True)
class AudioSpec:
    """
    Stream parameters as declared by the container header.
    """
    channel_count: int
    sample_rate: int             # Hz
    bit_depth: int               # 8, 16, 24, 32 (64 for double-precision float)
    sample_format: SampleFormat

    def with_channel_count(self, channel_count: int) -> "AudioSpec":
        return AudioSpec(
            channel_count=channel_count,
            sample_rate=self.sample_rate,
            bit_depth=self.bit_depth,
            sample_format=self.sample_format,
        )


@dataclass(frozen=True)
class AudioFileInfo:
    """
    Header-level view of one audio file.

    container_format and subtype are libsndfile names (e.g. "WAV", "PCM_24")
    and are reused verbatim when writing a reduced copy.
    """
    file_path: Path
    spec: AudioSpec
    container_format: str
    subtype: str
    frame_count: int


class SampleEncoding(enum.Enum):
    """
    Closed set of sample encodings the core can analyse and extract.

    Each member carries (sample_format, bit_depth, native numpy dtype,
    dtype libsndfile decodes into, left shift applied by libsndfile).
    """
    INT8 = (SampleFormat.INTEGER, 8, np.int8, "int16", 8)
    INT16 = (SampleFormat.INTEGER, 16, np.int16, "int16", 0)
    INT24 = (SampleFormat.INTEGER, 24, np.int32, "int32", 8)
    INT32 = (SampleFormat.INTEGER, 32, np.int32, "int32", 0)
    FLOAT32 = (SampleFormat.FLOAT, 32, np.float32, "float32", 0)

    def __init__(self, sample_format, bit_depth, native_dtype, codec_dtype, codec_shift):
        self.sample_format = sample_format
        self.bit_depth = bit_depth
        self.native_dtype = native_dtype
        self.codec_dtype = codec_dtype
        self.codec_shift = codec_shift

    @classmethod
    def from_spec(cls, spec: AudioSpec, file_path: Optional[Path] = None) -> "SampleEncoding":
        """
        Return the encoding for a spec, or raise UnsupportedEncodingError.
        """
        for encoding in cls:
            if encoding.sample_format == spec.sample_format and encoding.bit_depth == spec.bit_depth:
                return encoding

        raise UnsupportedEncodingError(
            sample_format=spec.sample_format.value,
            bit_depth=spec.bit_depth,
            file_path=file_path,
        )


# libsndfile subtype -> (bit_depth, sample_format)
_SUBTYPE_LAYOUTS: Dict[str, Tuple[int, SampleFormat]] = {
    "PCM_S8": (8, SampleFormat.INTEGER),
    "PCM_U8": (8, SampleFormat.INTEGER),
    "PCM_16": (16, SampleFormat.INTEGER),
    "PCM_24": (24, SampleFormat.INTEGER),
    "PCM_32": (32, SampleFormat.INTEGER),
    "FLOAT": (32, SampleFormat.FLOAT),
    "DOUBLE": (64, SampleFormat.FLOAT),
}


def read_audio_info(audio_file_path: str | Path) -> AudioFileInfo:
    """
    Read the header of an audio file.

    Raises UnreadableContainerError if libsndfile cannot open the file or
    the sample layout is not plain PCM / IEEE float.
    """
    audio_file_path = Path(audio_file_path)

    try:
        header = sf.info(str(audio_file_path))
    except (RuntimeError, OSError) as decode_error:
        raise UnreadableContainerError(audio_file_path, str(decode_error)) from decode_error

    layout = _SUBTYPE_LAYOUTS.get(header.subtype)
    if layout is None:
        raise UnreadableContainerError(
            audio_file_path,
            f"unsupported container variant {header.format}/{header.subtype}",
        )

    if header.channels < 1 or header.samplerate < 1:
        raise UnreadableContainerError(
            audio_file_path,
            f"invalid header (channels={header.channels}, sample_rate={header.samplerate})",
        )

    bit_depth, sample_format = layout
    spec = AudioSpec(
        channel_count=int(header.channels),
        sample_rate=int(header.samplerate),
        bit_depth=bit_depth,
        sample_format=sample_format,
    )

    return AudioFileInfo(
        file_path=audio_file_path,
        spec=spec,
        container_format=str(header.format),
        subtype=str(header.subtype),
        frame_count=int(header.frames),
    )


def read_audio_spec(audio_file_path: str | Path) -> AudioSpec:
    return read_audio_info(audio_file_path).spec


def iter_raw_blocks(
    audio_file_path: str | Path,
    encoding: SampleEncoding,
    block_frames: int = DEFAULT_BLOCK_FRAMES,
) -> Iterator[np.ndarray]:
    """
    Yield blocks of native-width samples, shape (frames, channels).

    Every call opens its own handle positioned at the start of the data, so
    two traversals of the same file never share cursor state. The handle is
    closed when the generator is exhausted or closed.
    """
    if block_frames <= 0:
        raise ValueError("block_frames must be positive")

    audio_file_path = Path(audio_file_path)

    try:
        sound_file = sf.SoundFile(str(audio_file_path), mode="r")
    except (RuntimeError, OSError) as decode_error:
        raise UnreadableContainerError(audio_file_path, str(decode_error)) from decode_error

    with sound_file:
        blocks = sound_file.blocks(
            blocksize=block_frames,
            dtype=encoding.codec_dtype,
            always_2d=True,
        )
        while True:
            try:
                codec_block = next(blocks)
            except StopIteration:
                return
            except (RuntimeError, OSError) as decode_error:
                raise UnreadableContainerError(audio_file_path, str(decode_error)) from decode_error

            yield codec_block_to_native(codec_block, encoding)


def codec_block_to_native(codec_block: np.ndarray, encoding: SampleEncoding) -> np.ndarray:
    """
    Undo libsndfile's left-justification for 8/24-bit PCM.
    """
    if encoding.codec_shift:
        return (codec_block >> encoding.codec_shift).astype(encoding.native_dtype)

    return codec_block.astype(encoding.native_dtype, copy=False)


def native_block_to_codec(native_block: np.ndarray, encoding: SampleEncoding) -> np.ndarray:
    """
    Inverse of codec_block_to_native.
    """
    codec_block = np.asarray(native_block).astype(encoding.codec_dtype)

    if encoding.codec_shift:
        return codec_block << encoding.codec_shift

    return codec_block


# -------------------------------------------------------------------
# Trailing partial frame (WAV only)
# -------------------------------------------------------------------

_RIFF_WAV_CONTAINERS = ("WAV", "WAVEX")


def locate_wav_data_chunk(audio_file_path: str | Path) -> Optional[Tuple[int, int]]:
    """
    Return (offset, size) of the data chunk of a little-endian RIFF/WAVE file.

    size is clipped to the bytes actually present, so a truncated file
    reports what is really there. Returns None for anything that is not
    plain RIFF/WAVE or has no data chunk.
    """
    audio_file_path = Path(audio_file_path)
    file_size = audio_file_path.stat().st_size

    with open(audio_file_path, "rb") as wav_file:
        riff_header = wav_file.read(12)
        if len(riff_header) < 12 or riff_header[:4] != b"RIFF" or riff_header[8:12] != b"WAVE":
            return None

        while True:
            chunk_header = wav_file.read(8)
            if len(chunk_header) < 8:
                return None

            chunk_id = chunk_header[:4]
            chunk_size = struct.unpack("<I", chunk_header[4:])[0]

            if chunk_id == b"data":
                data_offset = wav_file.tell()
                return data_offset, min(chunk_size, file_size - data_offset)

            # chunks are word aligned
            wav_file.seek(chunk_size + (chunk_size & 1), os.SEEK_CUR)


def decode_wav_sample_bytes(sample_bytes: bytes, encoding: SampleEncoding) -> np.ndarray:
    """
    Decode little-endian WAV sample bytes to native-width samples.
    """
    if encoding is SampleEncoding.INT8:
        # 8-bit WAV is unsigned, offset 128
        unsigned = np.frombuffer(sample_bytes, dtype=np.uint8).astype(np.int16)
        return (unsigned - 128).astype(np.int8)

    if encoding is SampleEncoding.INT24:
        byte_triples = np.frombuffer(sample_bytes, dtype=np.uint8).reshape((-1, 3)).astype(np.int32)
        values = byte_triples[:, 0] | (byte_triples[:, 1] << 8) | (byte_triples[:, 2] << 16)
        return np.where(values >= 1 << 23, values - (1 << 24), values).astype(np.int32)

    little_endian_dtype = np.dtype(encoding.native_dtype).newbyteorder("<")
    return np.frombuffer(sample_bytes, dtype=little_endian_dtype).astype(encoding.native_dtype)


def read_trailing_partial_frame(
    info: AudioFileInfo,
    encoding: SampleEncoding,
    frames_decoded: int,
) -> np.ndarray:
    """
    Return the whole samples of an incomplete last frame, shape (samples,).

    libsndfile stops at the last complete frame; a data chunk that ends
    part-way through a frame still holds samples for its first channel(s).
    frames_decoded is the number of complete frames already read. Returns
    an empty array when there is no partial frame or the container is not
    RIFF/WAVE.
    """
    no_samples = np.zeros((0,), dtype=encoding.native_dtype)

    if info.container_format not in _RIFF_WAV_CONTAINERS:
        return no_samples

    try:
        data_chunk = locate_wav_data_chunk(info.file_path)
    except OSError as read_error:
        raise UnreadableContainerError(info.file_path, str(read_error)) from read_error

    if data_chunk is None:
        return no_samples

    data_offset, data_size = data_chunk
    bytes_per_sample = encoding.bit_depth // 8
    block_align = bytes_per_sample * info.spec.channel_count

    leftover_bytes = data_size - frames_decoded * block_align
    if leftover_bytes < bytes_per_sample or leftover_bytes >= block_align:
        return no_samples

    whole_sample_bytes = (leftover_bytes // bytes_per_sample) * bytes_per_sample

    try:
        with open(info.file_path, "rb") as wav_file:
            wav_file.seek(data_offset + frames_decoded * block_align)
            sample_bytes = wav_file.read(whole_sample_bytes)
    except OSError as read_error:
        raise UnreadableContainerError(info.file_path, str(read_error)) from read_error

    if len(sample_bytes) < whole_sample_bytes:
        return no_samples

    logger.debug(
        "%s: trailing partial frame with %d of %d samples",
        info.file_path,
        whole_sample_bytes // bytes_per_sample,
        info.spec.channel_count,
    )
    return decode_wav_sample_bytes(sample_bytes, encoding)


class RawSampleWriter:
    """
    Streams native-width samples into a new container.

    Use as a context manager; the container is finalised on close.
    """

    def __init__(
        self,
        output_file_path: str | Path,
        spec: AudioSpec,
        container_format: str = "WAV",
        subtype: Optional[str] = None,
    ):
        self.output_file_path = Path(output_file_path)
        self.spec = spec
        self.encoding = SampleEncoding.from_spec(spec)
        self.container_format = container_format
        self.subtype = subtype or default_subtype_for(self.encoding)
        self._sound_file = None

    def __enter__(self) -> "RawSampleWriter":
        try:
            self._sound_file = sf.SoundFile(
                str(self.output_file_path),
                mode="w",
                samplerate=self.spec.sample_rate,
                channels=self.spec.channel_count,
                format=self.container_format,
                subtype=self.subtype,
            )
        except (RuntimeError, OSError, ValueError, TypeError) as open_error:
            raise WriteFailureError(self.output_file_path, str(open_error)) from open_error
        return self

    def write(self, native_samples: np.ndarray) -> None:
        native_samples = np.asarray(native_samples)
        if native_samples.size == 0:
            return

        if native_samples.ndim == 1:
            native_samples = native_samples.reshape((-1, 1))

        if native_samples.shape[1] != self.spec.channel_count:
            raise ValueError(
                f"Expected {self.spec.channel_count} channel(s), got shape {native_samples.shape}"
            )

        try:
            self._sound_file.write(native_block_to_codec(native_samples, self.encoding))
        except (RuntimeError, OSError) as write_error:
            raise WriteFailureError(self.output_file_path, str(write_error)) from write_error

    def close(self) -> None:
        if self._sound_file is None:
            return

        sound_file, self._sound_file = self._sound_file, None
        try:
            sound_file.close()
        except (RuntimeError, OSError) as close_error:
            raise WriteFailureError(self.output_file_path, str(close_error)) from close_error

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


def default_subtype_for(encoding: SampleEncoding) -> str:
    # 8-bit WAV is unsigned on disk
    return {
        SampleEncoding.INT8: "PCM_U8",
        SampleEncoding.INT16: "PCM_16",
        SampleEncoding.INT24: "PCM_24",
        SampleEncoding.INT32: "PCM_32",
        SampleEncoding.FLOAT32: "FLOAT",
    }[encoding]


def write_raw_samples(
    output_file_path: str | Path,
    native_samples: np.ndarray,
    spec: AudioSpec,
    container_format: str = "WAV",
    subtype: Optional[str] = None,
) -> Path:
    """
    Write a whole array of native-width samples, shape (frames,) or (frames, channels).
    """
    output_file_path = Path(output_file_path)

    with RawSampleWriter(output_file_path, spec, container_format, subtype) as writer:
        writer.write(native_samples)

    logger.debug("Wrote %s (%s)", output_file_path, spec)
    return output_file_path


def read_raw_samples(audio_file_path: str | Path) -> Tuple[np.ndarray, AudioFileInfo]:
    """
    Convenience: read an entire file as native-width samples, shape (frames, channels).
    """
    info = read_audio_info(audio_file_path)
    encoding = SampleEncoding.from_spec(info.spec, info.file_path)

    blocks = list(iter_raw_blocks(info.file_path, encoding))
    if not blocks:
        return np.zeros((0, info.spec.channel_count), dtype=encoding.native_dtype), info

    return np.concatenate(blocks, axis=0), info
