# wavgen/signals.py
"""
Deterministic test-signal generators for dual-mono detection.

Generators return mono NumPy arrays (float32, range [-1, 1]). The helpers
at the bottom pair them into stereo layouts (identical, phase-inverted,
independently dithered) and quantise them into native-width samples of
any supported encoding, ready for wav2mono.io.write_raw_samples.

Design goals:
- clarity over cleverness
- deterministic and repeatable signals
- exact control over the integer values that end up on disk
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np

from wav2mono.io import AudioSpec, SampleEncoding, write_raw_samples


# -------------------------------------------------------------------
# Data container
# -------------------------------------------------------------------

@dataclass(frozen=True)
class GeneratedSignal:
    """
    Container for a generated signal.
    """
    samples: np.ndarray      # shape (num_samples,) or (num_samples, num_channels), float32
    sample_rate_hz: int


# -------------------------------------------------------------------
# Utility helpers
# -------------------------------------------------------------------

def seconds_to_samples(duration_seconds: float, sample_rate_hz: int) -> int:
    """
    Convert duration in seconds to integer sample count.
    """
    if duration_seconds < 0.0:
        raise ValueError("Duration must be non-negative")

    return int(round(duration_seconds * sample_rate_hz))


def dbfs_to_amplitude(level_dbfs: float) -> float:
    return float(10.0 ** (level_dbfs / 20.0))


# -------------------------------------------------------------------
# Signal generators
# -------------------------------------------------------------------

def generate_sine(
    sample_rate_hz: int = 48_000,
    frequency_hz: float = 1000.0,
    duration_seconds: float = 2.0,
    level_dbfs: float = -20.0,
    initial_phase_radians: float = 0.0,
) -> GeneratedSignal:
    """
    Generate a sustained sine wave with the given peak level.
    """
    number_of_samples = seconds_to_samples(duration_seconds, sample_rate_hz)

    time_axis_seconds = (
        np.arange(number_of_samples, dtype=np.float64)
        / float(sample_rate_hz)
    )

    sine_samples = dbfs_to_amplitude(level_dbfs) * np.sin(
        2.0 * np.pi * frequency_hz * time_axis_seconds
        + initial_phase_radians
    )

    return GeneratedSignal(
        samples=sine_samples.astype(np.float32),
        sample_rate_hz=sample_rate_hz,
    )


def generate_silence(
    sample_rate_hz: int = 48_000,
    duration_seconds: float = 1.0,
) -> GeneratedSignal:
    number_of_samples = seconds_to_samples(duration_seconds, sample_rate_hz)
    return GeneratedSignal(
        samples=np.zeros((number_of_samples,), dtype=np.float32),
        sample_rate_hz=sample_rate_hz,
    )


def generate_noise(
    sample_rate_hz: int = 48_000,
    duration_seconds: float = 1.0,
    level_dbfs: float = -80.0,
    random_seed: int = 0,
) -> GeneratedSignal:
    """
    Generate white noise with the given RMS level.
    """
    number_of_samples = seconds_to_samples(duration_seconds, sample_rate_hz)
    random_generator = np.random.default_rng(random_seed)

    noise_samples = random_generator.standard_normal(number_of_samples)
    noise_samples *= dbfs_to_amplitude(level_dbfs)

    return GeneratedSignal(
        samples=noise_samples.astype(np.float32),
        sample_rate_hz=sample_rate_hz,
    )


# -------------------------------------------------------------------
# Stereo layouts
# -------------------------------------------------------------------

def make_stereo(left_samples: np.ndarray, right_samples: np.ndarray) -> np.ndarray:
    left_samples = np.asarray(left_samples, dtype=np.float32)
    right_samples = np.asarray(right_samples, dtype=np.float32)

    if left_samples.shape != right_samples.shape or left_samples.ndim != 1:
        raise ValueError(
            f"Expected two 1D channels of equal length, got {left_samples.shape} and {right_samples.shape}"
        )

    return np.stack([left_samples, right_samples], axis=1)


def duplicate_mono_to_stereo(mono_samples: np.ndarray) -> np.ndarray:
    """
    Duplicate a mono signal to stereo (L = R).
    """
    return make_stereo(mono_samples, mono_samples)


def phase_inverted_stereo(mono_samples: np.ndarray) -> np.ndarray:
    """
    Stereo with R = -L.
    """
    mono_samples = np.asarray(mono_samples, dtype=np.float32)
    return make_stereo(mono_samples, -mono_samples)


def dithered_stereo(
    mono_samples: np.ndarray,
    dither_level_dbfs: float = -90.0,
    random_seed: int = 0,
) -> np.ndarray:
    """
    Same signal on both channels plus independent low-level noise on each.
    """
    mono_samples = np.asarray(mono_samples, dtype=np.float32)
    random_generator = np.random.default_rng(random_seed)
    dither_amplitude = dbfs_to_amplitude(dither_level_dbfs)

    left_noise = random_generator.standard_normal(mono_samples.size) * dither_amplitude
    right_noise = random_generator.standard_normal(mono_samples.size) * dither_amplitude

    return make_stereo(mono_samples + left_noise, mono_samples + right_noise)


def prepend_silence(samples: np.ndarray, sample_rate_hz: int, silence_seconds: float) -> np.ndarray:
    """
    Prefix zeros along the time axis (works for mono and multi-channel arrays).
    """
    samples = np.asarray(samples, dtype=np.float32)
    silence_frames = seconds_to_samples(silence_seconds, sample_rate_hz)

    padding_shape = (silence_frames,) + samples.shape[1:]
    return np.concatenate([np.zeros(padding_shape, dtype=np.float32), samples], axis=0)


# -------------------------------------------------------------------
# Quantisation and writing
# -------------------------------------------------------------------

_QUANTISATION_RANGES = {
    SampleEncoding.INT8: (127.0, -128, 127),
    SampleEncoding.INT16: (32_767.0, -32_768, 32_767),
    SampleEncoding.INT24: (8_388_607.0, -8_388_608, 8_388_607),
    SampleEncoding.INT32: (2_147_483_647.0, -2_147_483_648, 2_147_483_647),
}


def quantise(float_samples: np.ndarray, encoding: SampleEncoding) -> np.ndarray:
    """
    Convert float amplitudes to native-width samples of the given encoding.

    Integer encodings round to nearest and clip to the representable range.
    """
    float_samples = np.asarray(float_samples, dtype=np.float64)

    if encoding is SampleEncoding.FLOAT32:
        return float_samples.astype(np.float32)

    scale, lowest, highest = _QUANTISATION_RANGES[encoding]
    integer_samples = np.clip(np.round(float_samples * scale), lowest, highest).astype(np.int64)
    return integer_samples.astype(encoding.native_dtype)


def write_fixture_wav(
    output_file_path: str | Path,
    float_samples: np.ndarray,
    sample_rate_hz: int,
    encoding: SampleEncoding = SampleEncoding.INT16,
) -> Path:
    """
    Quantise and write mono (N,) or multi-channel (N, C) samples to a WAV file.
    """
    output_file_path = Path(output_file_path)
    native_samples = quantise(float_samples, encoding)

    if native_samples.ndim == 1:
        native_samples = native_samples.reshape((-1, 1))

    spec = AudioSpec(
        channel_count=int(native_samples.shape[1]),
        sample_rate=int(sample_rate_hz),
        bit_depth=encoding.bit_depth,
        sample_format=encoding.sample_format,
    )

    output_file_path.parent.mkdir(parents=True, exist_ok=True)
    return write_raw_samples(output_file_path, native_samples, spec)
