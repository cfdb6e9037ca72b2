from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from wav2mono.io import SampleEncoding
from wavgen.signals import (
    duplicate_mono_to_stereo,
    generate_sine,
    phase_inverted_stereo,
    write_fixture_wav,
)


SAMPLE_RATE_HZ = 48_000


@pytest.fixture
def sine_signal():
    return generate_sine(
        sample_rate_hz=SAMPLE_RATE_HZ,
        frequency_hz=1000.0,
        duration_seconds=2.0,
        level_dbfs=-20.0,
    )


@pytest.fixture
def dual_mono_wav(tmp_path: Path, sine_signal) -> Path:
    return write_fixture_wav(
        tmp_path / "dual_mono.wav",
        duplicate_mono_to_stereo(sine_signal.samples),
        SAMPLE_RATE_HZ,
        SampleEncoding.INT16,
    )


@pytest.fixture
def inverted_wav(tmp_path: Path, sine_signal) -> Path:
    return write_fixture_wav(
        tmp_path / "inverted.wav",
        phase_inverted_stereo(sine_signal.samples),
        SAMPLE_RATE_HZ,
        SampleEncoding.INT16,
    )


@pytest.fixture
def mono_wav(tmp_path: Path, sine_signal) -> Path:
    return write_fixture_wav(
        tmp_path / "mono.wav",
        sine_signal.samples,
        SAMPLE_RATE_HZ,
        SampleEncoding.INT16,
    )


@pytest.fixture
def quad_wav(tmp_path: Path, sine_signal) -> Path:
    quad_samples = np.stack([sine_signal.samples] * 4, axis=1)
    return write_fixture_wav(
        tmp_path / "quad.wav",
        quad_samples,
        SAMPLE_RATE_HZ,
        SampleEncoding.INT16,
    )


@pytest.fixture
def corrupt_wav(tmp_path: Path) -> Path:
    corrupt_path = tmp_path / "corrupt.wav"
    corrupt_path.write_bytes(b"this is not a wave file\n" * 8)
    return corrupt_path
