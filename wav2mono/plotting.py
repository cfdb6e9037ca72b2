# wav2mono/plotting.py
"""
Side-signal level plots for inspecting a stereo classification.

Plots, over the window the classifier actually analysed (leading silence
skipped, at most max_analyze_seconds):
- short-window RMS of the mid signal (L + R) / 2, in dBFS
- short-window RMS of the side signal L - R, in dBFS
- the dual-mono threshold as a horizontal line

Design goals:
- consistent plot appearance
- explicit labels, units, and titles
- no hidden global matplotlib state
"""

from __future__ import annotations

from contextlib import closing
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np
import matplotlib.pyplot as plt

from wav2mono.classify import (
    ClassificationSettings,
    StereoAnalysis,
    classify_stereo_file,
    summarise_stereo_analysis_text,
)
from wav2mono.io import SampleEncoding, iter_raw_blocks, read_audio_info
from wav2mono.normalise import normalise_samples


DEFAULT_FIGURE_SIZE = (10.0, 6.0)
DEFAULT_DPI = 100


@dataclass(frozen=True)
class SideLevelViewSettings:
    window_seconds: float = 0.05
    level_floor_dbfs: float = -120.0


@dataclass(frozen=True)
class SideLevelTrace:
    """
    Windowed mid / side RMS levels (linear), one value per window.
    """
    time_seconds: np.ndarray     # window start, relative to the start of the file
    mid_rms: np.ndarray
    side_rms: np.ndarray


# -------------------------------------------------------------------
# Figure helpers
# -------------------------------------------------------------------

def create_figure_and_axis(
    title: Optional[str] = None,
    figure_size: Tuple[float, float] = DEFAULT_FIGURE_SIZE,
) -> Tuple[plt.Figure, plt.Axes]:
    figure, axis = plt.subplots(figsize=figure_size, dpi=DEFAULT_DPI)

    if title is not None:
        axis.set_title(title)

    axis.grid(True)
    return figure, axis


def finalize_and_show_or_save(
    figure: plt.Figure,
    output_path: Optional[str | Path] = None,
    show_interactive: bool = True,
) -> None:
    """
    Save the figure as PNG if output_path is given, otherwise show it
    (unless show_interactive=False). The figure is always closed.
    """
    if output_path is not None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        figure.savefig(output_path, bbox_inches="tight")
        plt.close(figure)
        return

    if show_interactive:
        plt.show()

    plt.close(figure)


def amplitude_to_dbfs(amplitude: np.ndarray, floor_dbfs: float) -> np.ndarray:
    amplitude = np.maximum(np.asarray(amplitude, dtype=np.float64), 10.0 ** (floor_dbfs / 20.0))
    return 20.0 * np.log10(amplitude)


# -------------------------------------------------------------------
# Level computation
# -------------------------------------------------------------------

def compute_side_level_trace(
    normalised_stereo: np.ndarray,
    sample_rate_hz: int,
    window_seconds: float = 0.05,
    start_offset_frames: int = 0,
) -> SideLevelTrace:
    """
    Non-overlapping windowed RMS of mid and side. A trailing partial
    window is measured over the frames it has.
    """
    if window_seconds <= 0.0:
        raise ValueError("window_seconds must be positive")

    if normalised_stereo.ndim != 2 or normalised_stereo.shape[1] != 2:
        raise ValueError(f"Expected stereo samples shaped (frames, 2), got {normalised_stereo.shape}")

    window_frames = max(1, int(round(window_seconds * sample_rate_hz)))
    left = normalised_stereo[:, 0].astype(np.float64)
    right = normalised_stereo[:, 1].astype(np.float64)

    mid = 0.5 * (left + right)
    side = left - right

    window_starts = np.arange(0, left.size, window_frames)
    mid_rms: List[float] = []
    side_rms: List[float] = []
    for window_start in window_starts:
        mid_window = mid[window_start:window_start + window_frames]
        side_window = side[window_start:window_start + window_frames]
        mid_rms.append(float(np.sqrt(np.mean(mid_window ** 2))))
        side_rms.append(float(np.sqrt(np.mean(side_window ** 2))))

    return SideLevelTrace(
        time_seconds=(window_starts + start_offset_frames) / float(sample_rate_hz),
        mid_rms=np.asarray(mid_rms, dtype=np.float64),
        side_rms=np.asarray(side_rms, dtype=np.float64),
    )


def load_analysed_window(
    input_wav_file_path: Path,
    encoding: SampleEncoding,
    analysis: StereoAnalysis,
    block_frames: int,
) -> np.ndarray:
    """
    Re-read the frames the classifier analysed, normalised, shape (frames, 2).
    """
    first_frame = analysis.silence_skipped
    last_frame = analysis.silence_skipped + analysis.analyzed_count

    collected: List[np.ndarray] = []
    frames_seen = 0

    raw_blocks = iter_raw_blocks(input_wav_file_path, encoding, block_frames)
    with closing(raw_blocks):
        for raw_block in raw_blocks:
            block_start = frames_seen
            frames_seen += raw_block.shape[0]
            if frames_seen <= first_frame:
                continue

            keep_from = max(0, first_frame - block_start)
            keep_to = min(raw_block.shape[0], last_frame - block_start)
            if keep_to > keep_from:
                collected.append(normalise_samples(raw_block[keep_from:keep_to], encoding))

            if frames_seen >= last_frame:
                break

    if not collected:
        return np.zeros((0, 2), dtype=np.float32)

    return np.concatenate(collected, axis=0)


# -------------------------------------------------------------------
# Entry point
# -------------------------------------------------------------------

def plot_side_level_from_wav_file(
    input_wav_file_path: str | Path,
    classification_settings: Optional[ClassificationSettings] = None,
    view_settings: Optional[SideLevelViewSettings] = None,
    output_path: Optional[str | Path] = None,
    show_interactive: bool = True,
) -> StereoAnalysis:
    """
    Classify a stereo file and plot its mid / side levels against the threshold.
    """
    if classification_settings is None:
        classification_settings = ClassificationSettings()
    if view_settings is None:
        view_settings = SideLevelViewSettings()

    input_wav_file_path = Path(input_wav_file_path)
    info = read_audio_info(input_wav_file_path)

    analysis = classify_stereo_file(input_wav_file_path, spec=info.spec, settings=classification_settings)
    encoding = SampleEncoding.from_spec(info.spec, input_wav_file_path)

    analysed_window = load_analysed_window(
        input_wav_file_path,
        encoding,
        analysis,
        classification_settings.block_frames,
    )
    trace = compute_side_level_trace(
        analysed_window,
        info.spec.sample_rate,
        window_seconds=view_settings.window_seconds,
        start_offset_frames=analysis.silence_skipped,
    )

    figure, axis = create_figure_and_axis(
        title=f"{input_wav_file_path.name}: {summarise_stereo_analysis_text(analysis)}"
    )

    floor_dbfs = view_settings.level_floor_dbfs
    axis.plot(trace.time_seconds, amplitude_to_dbfs(trace.mid_rms, floor_dbfs), label="Mid RMS")
    axis.plot(trace.time_seconds, amplitude_to_dbfs(trace.side_rms, floor_dbfs), label="Side RMS")
    axis.axhline(
        float(amplitude_to_dbfs(np.array([analysis.mono_diff_threshold]), floor_dbfs)[0]),
        color="red",
        linestyle="--",
        label="Dual-mono threshold",
    )

    axis.set_xlabel("Time (seconds)")
    axis.set_ylabel("Level (dBFS)")
    axis.set_ylim(bottom=floor_dbfs)
    axis.legend(loc="best")

    finalize_and_show_or_save(figure, output_path=output_path, show_interactive=show_interactive)
    return analysis
