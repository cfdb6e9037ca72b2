# wavgen/cli.py
"""
Command Line Interface (CLI) for generating dual-mono / stereo test files.

Usage examples:
  python -m wavgen.cli --help
  python -m wavgen.cli dual_mono --output fixtures/dual.wav
  python -m wavgen.cli inverted --encoding int24 --output fixtures/inverted.wav
  python -m wavgen.cli dual_mono --leading_silence_seconds 1 --encoding float32
  python -m wavgen.cli all --output-dir fixtures

All outputs are 2-channel WAV at 48 kHz, 16-bit by default.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

import numpy as np

from wav2mono.io import SampleEncoding
from wavgen.signals import (
    dithered_stereo,
    duplicate_mono_to_stereo,
    generate_sine,
    generate_silence,
    phase_inverted_stereo,
    prepend_silence,
    write_fixture_wav,
)


DEFAULT_SAMPLE_RATE_HZ = 48_000

ENCODINGS_BY_NAME = {
    "int8": SampleEncoding.INT8,
    "int16": SampleEncoding.INT16,
    "int24": SampleEncoding.INT24,
    "int32": SampleEncoding.INT32,
    "float32": SampleEncoding.FLOAT32,
}

LAYOUT_NAMES = ["dual_mono", "inverted", "dithered", "silence"]


def ensure_wav_suffix(output_file_path: Path) -> Path:
    if output_file_path.suffix.lower() != ".wav":
        return output_file_path.with_suffix(".wav")
    return output_file_path


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    top_level_parser = argparse.ArgumentParser(
        prog="wavgen",
        description="Generate stereo WAV test files for dual-mono detection.",
    )

    top_level_parser.add_argument(
        "--output-dir",
        dest="output_directory",
        type=str,
        default="test_tones",
        help="Directory to write generated WAV files (default: ./test_tones).",
    )

    top_level_parser.add_argument(
        "--sample_rate_hz",
        type=int,
        default=DEFAULT_SAMPLE_RATE_HZ,
        help="Sample rate in Hz (default: 48000).",
    )

    top_level_parser.add_argument(
        "--encoding",
        type=str,
        default="int16",
        choices=sorted(ENCODINGS_BY_NAME),
        help="Sample encoding (default: int16).",
    )

    top_level_parser.add_argument(
        "--duration_seconds",
        type=float,
        default=2.0,
        help="Signal duration in seconds, excluding leading silence (default: 2).",
    )

    top_level_parser.add_argument(
        "--level_dbfs",
        type=float,
        default=-20.0,
        help="Sine peak level in dBFS (default: -20).",
    )

    top_level_parser.add_argument(
        "--frequency_hz",
        type=float,
        default=1000.0,
        help="Sine frequency in Hz (default: 1000).",
    )

    top_level_parser.add_argument(
        "--leading_silence_seconds",
        type=float,
        default=0.0,
        help="Digital silence prepended to the signal (default: 0).",
    )

    subparsers = top_level_parser.add_subparsers(
        dest="command_name",
        required=True,
        help="Layout to generate. Use: wavgen <layout> --help",
    )

    for layout_name, layout_help in [
        ("dual_mono", "Identical sine on both channels (L = R)."),
        ("inverted", "Sine on L, phase-inverted sine on R (R = -L)."),
        ("dithered", "Identical sine plus independent -90 dBFS noise per channel."),
        ("silence", "Digital silence on both channels."),
    ]:
        layout_parser = subparsers.add_parser(layout_name, help=layout_help)
        layout_parser.add_argument(
            "--output",
            type=str,
            default=f"{layout_name}.wav",
            help=f"Output file name inside --output-dir (default: {layout_name}.wav).",
        )

    subparsers.add_parser(
        "all",
        help="Generate every layout with the current settings.",
    )

    return top_level_parser.parse_args(argv)


def generate_layout(layout_name: str, parsed_arguments: argparse.Namespace) -> np.ndarray:
    sample_rate_hz = int(parsed_arguments.sample_rate_hz)

    if layout_name == "silence":
        silence = generate_silence(sample_rate_hz, float(parsed_arguments.duration_seconds))
        stereo_samples = duplicate_mono_to_stereo(silence.samples)
    else:
        sine_signal = generate_sine(
            sample_rate_hz=sample_rate_hz,
            frequency_hz=float(parsed_arguments.frequency_hz),
            duration_seconds=float(parsed_arguments.duration_seconds),
            level_dbfs=float(parsed_arguments.level_dbfs),
        )

        if layout_name == "dual_mono":
            stereo_samples = duplicate_mono_to_stereo(sine_signal.samples)
        elif layout_name == "inverted":
            stereo_samples = phase_inverted_stereo(sine_signal.samples)
        elif layout_name == "dithered":
            stereo_samples = dithered_stereo(sine_signal.samples)
        else:
            raise ValueError(f"Unknown layout: {layout_name}")

    return prepend_silence(
        stereo_samples,
        sample_rate_hz,
        float(parsed_arguments.leading_silence_seconds),
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    parsed_arguments = parse_arguments(argv)

    command_name = str(parsed_arguments.command_name)
    output_dir = Path(parsed_arguments.output_directory)
    encoding = ENCODINGS_BY_NAME[str(parsed_arguments.encoding)]
    sample_rate_hz = int(parsed_arguments.sample_rate_hz)

    if command_name == "all":
        jobs = [(name, Path(f"{name}.wav")) for name in LAYOUT_NAMES]
    else:
        jobs = [(command_name, Path(parsed_arguments.output))]

    for layout_name, output_name in jobs:
        output_file_path = ensure_wav_suffix(output_dir / output_name)
        stereo_samples = generate_layout(layout_name, parsed_arguments)

        write_fixture_wav(output_file_path, stereo_samples, sample_rate_hz, encoding)

        print(
            f"Wrote {output_file_path} ({stereo_samples.shape[0]} samples, {sample_rate_hz} Hz, "
            f"2 channel(s), {parsed_arguments.encoding})"
        )


if __name__ == "__main__":
    main()
