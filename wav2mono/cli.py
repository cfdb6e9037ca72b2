# wav2mono/cli.py
"""
Command Line Interface (CLI) for dual-mono detection and reduction.

Usage examples:
  python -m wav2mono.cli --help
  python -m wav2mono.cli classify --input take1.wav take2.wav
  python -m wav2mono.cli convert --input take1.wav --output take1_mono.wav
  python -m wav2mono.cli route recordings/ --recursive --jobs 4
  python -m wav2mono.cli plot --input take1.wav --output plots/take1_side.png --no-show

Notes:
- classify never writes anything.
- convert writes --output only when the input is dual-mono.
- route sorts files into mono/, stereo/ and multichannel/ next to each input.
- exit status is 1 if any file failed, 0 otherwise.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from wav2mono.classify import (
    ClassificationSettings,
    classify_stereo_file,
    summarise_stereo_analysis_text,
)
from wav2mono.errors import Wav2MonoError
from wav2mono.io import read_audio_info
from wav2mono.pipeline import process_wav_file
from wav2mono.route import RoutingSettings, find_wav_files, route_wav_files


def add_classification_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--silence-db",
        dest="silence_threshold_dbfs",
        type=float,
        default=-60.0,
        help="Leading frames with both channels at or below this level are skipped (default: -60 dBFS).",
    )

    parser.add_argument(
        "--diff-db",
        dest="mono_diff_threshold_dbfs",
        type=float,
        default=-60.0,
        help="Side-signal RMS below this level means dual-mono (default: -60 dBFS).",
    )

    parser.add_argument(
        "--max-seconds",
        dest="max_analyze_seconds",
        type=float,
        default=10.0,
        help="Seconds of audio analysed after the signal starts (default: 10).",
    )


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    top_level_parser = argparse.ArgumentParser(
        prog="wav2mono",
        description="Detect dual-mono stereo WAV files and reduce them to mono without re-quantising.",
    )

    top_level_parser.add_argument(
        "--log-level",
        dest="log_level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING).",
    )

    subparsers = top_level_parser.add_subparsers(
        dest="command_name",
        required=True,
        help="Command to run. Use: wav2mono <command> --help",
    )

    # ------------------------------------------------------------------
    # classify (report only)
    # ------------------------------------------------------------------
    classify_parser = subparsers.add_parser(
        "classify",
        help="Report DualMono / TrueStereo for stereo files without writing anything.",
    )

    classify_parser.add_argument(
        "--input",
        dest="input_wav_file_paths",
        type=str,
        nargs="+",
        required=True,
        help="One or more input WAV files.",
    )

    add_classification_arguments(classify_parser)

    # ------------------------------------------------------------------
    # convert (single file, explicit output)
    # ------------------------------------------------------------------
    convert_parser = subparsers.add_parser(
        "convert",
        help="Write channel 0 of a dual-mono file to --output; other files are left alone.",
    )

    convert_parser.add_argument(
        "--input",
        dest="input_wav_file_path",
        type=str,
        required=True,
        help="Path to input WAV file.",
    )

    convert_parser.add_argument(
        "--output",
        dest="output_wav_file_path",
        type=str,
        required=True,
        help="Path for the mono WAV (written only if the input is dual-mono).",
    )

    add_classification_arguments(convert_parser)

    # ------------------------------------------------------------------
    # route (sort into mono/ stereo/ multichannel/)
    # ------------------------------------------------------------------
    route_parser = subparsers.add_parser(
        "route",
        help="Classify files and sort them into mono/, stereo/ and multichannel/ sub-folders.",
    )

    route_parser.add_argument(
        "paths",
        type=str,
        nargs="+",
        help="WAV files and/or folders containing WAV files.",
    )

    route_parser.add_argument(
        "--recursive",
        action="store_true",
        help="Search sub-folders too.",
    )

    route_parser.add_argument(
        "--keep-originals",
        dest="keep_originals",
        action="store_true",
        help="Copy instead of move, and keep originals of reduced files.",
    )

    route_parser.add_argument(
        "--jobs",
        type=int,
        default=1,
        help="Number of files processed in parallel (default: 1).",
    )

    add_classification_arguments(route_parser)

    # ------------------------------------------------------------------
    # plot (mid / side levels over the analysed window)
    # ------------------------------------------------------------------
    plot_parser = subparsers.add_parser(
        "plot",
        help="Plot mid and side RMS levels of a stereo file against the dual-mono threshold.",
    )

    plot_parser.add_argument(
        "--input",
        dest="input_wav_file_path",
        type=str,
        required=True,
        help="Path to input stereo WAV file.",
    )

    plot_parser.add_argument(
        "--output",
        dest="output_png_path",
        type=str,
        default=None,
        help="If provided, saves a PNG instead of showing the plot.",
    )

    plot_parser.add_argument(
        "--no-show",
        dest="no_show",
        action="store_true",
        help="Do not show the plot interactively (save only if --output is provided).",
    )

    plot_parser.add_argument(
        "--window-seconds",
        dest="window_seconds",
        type=float,
        default=0.05,
        help="RMS window length in seconds (default: 0.05).",
    )

    add_classification_arguments(plot_parser)

    return top_level_parser.parse_args(argv)


def classification_settings_from_arguments(parsed_arguments: argparse.Namespace) -> ClassificationSettings:
    return ClassificationSettings(
        silence_threshold_dbfs=float(parsed_arguments.silence_threshold_dbfs),
        mono_diff_threshold_dbfs=float(parsed_arguments.mono_diff_threshold_dbfs),
        max_analyze_seconds=float(parsed_arguments.max_analyze_seconds),
    )


def run_classify(input_wav_file_paths: List[str], settings: ClassificationSettings) -> int:
    failures = 0

    for input_wav_file_path in input_wav_file_paths:
        try:
            info = read_audio_info(input_wav_file_path)
            if info.spec.channel_count != 2:
                print(f"{input_wav_file_path}: {info.spec.channel_count} channel(s), not analysed")
                continue
            analysis = classify_stereo_file(info.file_path, spec=info.spec, settings=settings)
        except Wav2MonoError as classify_error:
            print(f"{input_wav_file_path}: ERROR {classify_error}")
            failures += 1
            continue

        print(f"{input_wav_file_path}: {summarise_stereo_analysis_text(analysis)}")

    return 1 if failures else 0


def run_convert(input_wav_file_path: str, output_wav_file_path: str, settings: ClassificationSettings) -> int:
    try:
        result = process_wav_file(input_wav_file_path, output_wav_file_path, settings)
    except (Wav2MonoError, OSError) as convert_error:
        print(f"{input_wav_file_path}: ERROR {convert_error}")
        return 1

    print(result.message)
    return 0


def run_route(parsed_arguments: argparse.Namespace, settings: ClassificationSettings) -> int:
    wav_files = find_wav_files(parsed_arguments.paths, recursive=bool(parsed_arguments.recursive))

    if not wav_files:
        print("No .wav files found.")
        return 0

    routing_settings = RoutingSettings(keep_originals=bool(parsed_arguments.keep_originals))
    entries = route_wav_files(
        wav_files,
        routing_settings=routing_settings,
        classification_settings=settings,
        jobs=int(parsed_arguments.jobs),
    )

    failures = [entry for entry in entries if not entry.ok]
    for entry in entries:
        if entry.ok:
            print(f"OK     {entry.outcome.message}")
        else:
            print(f"FAILED {entry.input_path}: {entry.error}")

    print(f"\nTotal: {len(entries)}  Failed: {len(failures)}")
    return 1 if failures else 0


def run_plot(parsed_arguments: argparse.Namespace, settings: ClassificationSettings) -> int:
    from wav2mono.plotting import SideLevelViewSettings, plot_side_level_from_wav_file

    input_wav_file_path = str(parsed_arguments.input_wav_file_path)
    view_settings = SideLevelViewSettings(window_seconds=float(parsed_arguments.window_seconds))

    try:
        analysis = plot_side_level_from_wav_file(
            input_wav_file_path,
            classification_settings=settings,
            view_settings=view_settings,
            output_path=parsed_arguments.output_png_path,
            show_interactive=not bool(parsed_arguments.no_show),
        )
    except (Wav2MonoError, ValueError, OSError) as plot_error:
        print(f"{input_wav_file_path}: ERROR {plot_error}")
        return 1

    print(f"{input_wav_file_path}: {summarise_stereo_analysis_text(analysis)}")
    if parsed_arguments.output_png_path is not None:
        print(f"Saved plot to {parsed_arguments.output_png_path}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parsed_arguments = parse_arguments(argv)

    logging.basicConfig(
        level=getattr(logging, parsed_arguments.log_level),
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
    )

    command_name = str(parsed_arguments.command_name)
    settings = classification_settings_from_arguments(parsed_arguments)

    if settings.max_analyze_seconds <= 0.0:
        print("--max-seconds must be positive")
        return 2

    if command_name == "classify":
        return run_classify(list(parsed_arguments.input_wav_file_paths), settings)

    if command_name == "convert":
        return run_convert(
            str(parsed_arguments.input_wav_file_path),
            str(Path(parsed_arguments.output_wav_file_path)),
            settings,
        )

    if command_name == "route":
        if int(parsed_arguments.jobs) < 1:
            print("--jobs must be at least 1")
            return 2
        return run_route(parsed_arguments, settings)

    if command_name == "plot":
        return run_plot(parsed_arguments, settings)

    raise ValueError(f"Unknown command: {command_name}")


if __name__ == "__main__":
    raise SystemExit(main())
