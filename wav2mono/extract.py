# wav2mono/extract.py
"""
Channel extraction: keep channel 0 of a multi-channel file, bit-exact.

Samples are copied in their native encoding (no normalisation, no
dithering). The output container keeps sample rate, bit depth, sample
format and codec; only the channel count becomes 1.

The output is written to a hidden temporary file beside the target and
renamed into place after the writer has been closed, so a failed write
never leaves a partial file under the final name.

A WAV data chunk cut off part-way through a frame still yields that
frame's channel-0 sample when all of its bytes are present.
"""

from __future__ import annotations

import logging
import os
import uuid
from contextlib import closing
from pathlib import Path
from typing import Optional

import numpy as np

from wav2mono.errors import WriteFailureError
from wav2mono.io import (
    DEFAULT_BLOCK_FRAMES,
    AudioFileInfo,
    RawSampleWriter,
    SampleEncoding,
    iter_raw_blocks,
    read_audio_info,
    read_trailing_partial_frame,
)


logger = logging.getLogger(__name__)


def take_first_channel(interleaved_samples: np.ndarray, channel_count: int) -> np.ndarray:
    """
    Return channel 0 from a flat interleaved stream (c0, c1, ..., c0, c1, ...).

    A trailing partial frame still contributes its channel-0 sample.
    """
    if channel_count < 1:
        raise ValueError(f"channel_count must be positive, got {channel_count}")

    interleaved_samples = np.asarray(interleaved_samples).reshape(-1)
    return interleaved_samples[::channel_count]


def extract_first_channel(
    input_wav_file_path: str | Path,
    output_wav_file_path: str | Path,
    info: Optional[AudioFileInfo] = None,
    block_frames: int = DEFAULT_BLOCK_FRAMES,
    overwrite: bool = True,
) -> Path:
    """
    Write channel 0 of input_wav_file_path to output_wav_file_path.

    The input is re-opened from the start of its data; nothing is shared
    with any earlier traversal. Raises WriteFailureError if the output
    cannot be created or finalised, or if it already exists and overwrite
    is False.
    """
    input_wav_file_path = Path(input_wav_file_path)
    output_wav_file_path = Path(output_wav_file_path)

    if info is None:
        info = read_audio_info(input_wav_file_path)

    encoding = SampleEncoding.from_spec(info.spec, input_wav_file_path)
    channel_count = info.spec.channel_count
    mono_spec = info.spec.with_channel_count(1)

    if not overwrite and output_wav_file_path.exists():
        raise WriteFailureError(output_wav_file_path, "destination already exists")

    try:
        output_wav_file_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as mkdir_error:
        raise WriteFailureError(output_wav_file_path, str(mkdir_error)) from mkdir_error

    temp_path = output_wav_file_path.with_name(
        f".{output_wav_file_path.name}.{uuid.uuid4().hex}.part"
    )

    try:
        written_frames = 0
        with RawSampleWriter(
            temp_path,
            mono_spec,
            container_format=info.container_format,
            subtype=info.subtype,
        ) as writer:
            raw_blocks = iter_raw_blocks(input_wav_file_path, encoding, block_frames)
            with closing(raw_blocks):
                for raw_block in raw_blocks:
                    first_channel = take_first_channel(raw_block, channel_count)
                    writer.write(first_channel)
                    written_frames += int(first_channel.size)

            # data cut off mid-frame: keep channel 0 if it made it to disk
            trailing_samples = read_trailing_partial_frame(info, encoding, written_frames)
            first_channel = take_first_channel(trailing_samples, channel_count)
            writer.write(first_channel)
            written_frames += int(first_channel.size)

        if not overwrite and output_wav_file_path.exists():
            raise WriteFailureError(output_wav_file_path, "destination already exists")

        try:
            os.replace(temp_path, output_wav_file_path)
        except OSError as rename_error:
            raise WriteFailureError(output_wav_file_path, str(rename_error)) from rename_error
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise

    logger.debug(
        "Extracted channel 0 of %s -> %s (%d frames, %s)",
        input_wav_file_path,
        output_wav_file_path,
        written_frames,
        info.subtype,
    )
    return output_wav_file_path
