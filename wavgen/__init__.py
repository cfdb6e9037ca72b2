# wavgen/__init__.py
"""
wavgen package

Test-signal generation for dual-mono detection.

This package contains:
- signal generators, stereo layouts and quantisation (wavgen.signals)
- command line interface entrypoint (wavgen.cli)

Typical usage:
    from wavgen.signals import generate_sine, duplicate_mono_to_stereo, write_fixture_wav
"""

from .signals import (
    GeneratedSignal,
    dbfs_to_amplitude,
    dithered_stereo,
    duplicate_mono_to_stereo,
    generate_noise,
    generate_silence,
    generate_sine,
    make_stereo,
    phase_inverted_stereo,
    prepend_silence,
    quantise,
    seconds_to_samples,
    write_fixture_wav,
)

__all__ = [
    "GeneratedSignal",
    "dbfs_to_amplitude",
    "dithered_stereo",
    "duplicate_mono_to_stereo",
    "generate_noise",
    "generate_silence",
    "generate_sine",
    "make_stereo",
    "phase_inverted_stereo",
    "prepend_silence",
    "quantise",
    "seconds_to_samples",
    "write_fixture_wav",
]
