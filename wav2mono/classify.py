# wav2mono/classify.py
"""
Stereo classification: is a two-channel asset genuinely stereo or dual-mono?

Policy (energy / RMS of the side signal):
- skip the leading run of frames where both |L| and |R| are at or below the
  silence threshold (-60 dBFS by default); once a louder frame is seen, every
  later frame is analysed, quiet or not
- accumulate side^2 = (L - R)^2 in float64 over at most max_analyze_seconds
  of audio after the signal starts
- side_rms = sqrt(sum / count); below the diff threshold (-60 dBFS) -> DualMono
- nothing analysed (silent or empty file) -> DualMono

This tolerates low-level dither and isolated noise spikes between channels.
A strict per-sample tolerance with early exit is deliberately not offered:
the two policies disagree near the threshold.

Blocks are processed with NumPy, but the result is identical to walking
the (L, R) pairs one at a time.
"""

from __future__ import annotations

import enum
import logging
import math
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import numpy as np

from wav2mono.io import (
    DEFAULT_BLOCK_FRAMES,
    AudioSpec,
    SampleEncoding,
    iter_raw_blocks,
    read_audio_info,
)
from wav2mono.normalise import normalise_samples


logger = logging.getLogger(__name__)


class ClassificationVerdict(str, enum.Enum):
    DUAL_MONO = "DualMono"
    TRUE_STEREO = "TrueStereo"


def dbfs_to_linear(level_dbfs: float) -> float:
    return float(10.0 ** (level_dbfs / 20.0))


def linear_to_dbfs(amplitude: float) -> float:
    if amplitude <= 0.0:
        return float("-inf")
    return float(20.0 * math.log10(amplitude))


@dataclass(frozen=True)
class ClassificationSettings:
    silence_threshold_dbfs: float = -60.0
    mono_diff_threshold_dbfs: float = -60.0
    max_analyze_seconds: float = 10.0
    block_frames: int = DEFAULT_BLOCK_FRAMES

    @property
    def silence_threshold(self) -> float:
        return dbfs_to_linear(self.silence_threshold_dbfs)

    @property
    def mono_diff_threshold(self) -> float:
        return dbfs_to_linear(self.mono_diff_threshold_dbfs)

    def max_analyze_samples(self, sample_rate_hz: int) -> int:
        if self.max_analyze_seconds <= 0.0:
            raise ValueError("max_analyze_seconds must be positive")
        return max(1, int(round(self.max_analyze_seconds * sample_rate_hz)))


@dataclass
class AnalysisState:
    """
    Mutable accumulator for one classification call.
    """
    side_energy_accumulator: float = 0.0
    analyzed_count: int = 0
    silence_elapsed: int = 0
    started: bool = False

    def accumulate(
        self,
        left: np.ndarray,
        right: np.ndarray,
        silence_threshold: float,
        max_analyze_samples: int,
    ) -> bool:
        """
        Consume one block of normalised (L, R) pairs.

        Returns True once the analysis window is full.
        """
        if self.analyzed_count >= max_analyze_samples:
            return True

        if not self.started:
            audible = (np.abs(left) > silence_threshold) | (np.abs(right) > silence_threshold)
            audible_indices = np.flatnonzero(audible)

            if audible_indices.size == 0:
                self.silence_elapsed += int(left.size)
                return False

            first_audible = int(audible_indices[0])
            self.silence_elapsed += first_audible
            self.started = True
            left = left[first_audible:]
            right = right[first_audible:]

        remaining = max_analyze_samples - self.analyzed_count
        left = left[:remaining]
        right = right[:remaining]

        side = (left - right).astype(np.float64)
        self.side_energy_accumulator += float(np.dot(side, side))
        self.analyzed_count += int(side.size)

        return self.analyzed_count >= max_analyze_samples

    def side_rms(self) -> float:
        if self.analyzed_count == 0:
            return 0.0
        return math.sqrt(self.side_energy_accumulator / self.analyzed_count)


@dataclass(frozen=True)
class StereoAnalysis:
    verdict: ClassificationVerdict
    side_rms: float
    analyzed_count: int
    silence_skipped: int          # leading silent frames, not analysed
    max_analyze_samples: int
    mono_diff_threshold: float

    @property
    def side_rms_dbfs(self) -> float:
        return linear_to_dbfs(self.side_rms)


def analyse_stereo_blocks(
    raw_blocks: Iterable[np.ndarray],
    encoding: SampleEncoding,
    sample_rate_hz: int,
    settings: Optional[ClassificationSettings] = None,
) -> StereoAnalysis:
    """
    Classify a stream of native-width stereo blocks, each shaped (frames, 2).

    Stops pulling blocks as soon as the analysis window is full.
    """
    if settings is None:
        settings = ClassificationSettings()

    silence_threshold = settings.silence_threshold
    mono_diff_threshold = settings.mono_diff_threshold
    max_analyze_samples = settings.max_analyze_samples(sample_rate_hz)

    state = AnalysisState()

    for raw_block in raw_blocks:
        if raw_block.ndim != 2 or raw_block.shape[1] != 2:
            raise ValueError(f"Expected stereo blocks shaped (frames, 2), got {raw_block.shape}")

        normalised_block = normalise_samples(raw_block, encoding)
        window_full = state.accumulate(
            normalised_block[:, 0],
            normalised_block[:, 1],
            silence_threshold=silence_threshold,
            max_analyze_samples=max_analyze_samples,
        )
        if window_full:
            break

    side_rms = state.side_rms()

    if state.analyzed_count == 0:
        verdict = ClassificationVerdict.DUAL_MONO
    elif side_rms < mono_diff_threshold:
        verdict = ClassificationVerdict.DUAL_MONO
    else:
        verdict = ClassificationVerdict.TRUE_STEREO

    logger.debug(
        "side_rms=%.3g analyzed=%d silence_skipped=%d (%.3f s) threshold=%.3g -> %s",
        side_rms,
        state.analyzed_count,
        state.silence_elapsed,
        state.silence_elapsed / float(sample_rate_hz),
        mono_diff_threshold,
        verdict.value,
    )

    return StereoAnalysis(
        verdict=verdict,
        side_rms=side_rms,
        analyzed_count=state.analyzed_count,
        silence_skipped=state.silence_elapsed,
        max_analyze_samples=max_analyze_samples,
        mono_diff_threshold=mono_diff_threshold,
    )


def classify_stereo_file(
    input_wav_file_path: str | Path,
    spec: Optional[AudioSpec] = None,
    settings: Optional[ClassificationSettings] = None,
) -> StereoAnalysis:
    """
    Classify a two-channel file as DualMono or TrueStereo.

    Raises UnsupportedEncodingError for encodings outside the supported set
    and UnreadableContainerError for files that cannot be decoded.
    """
    if settings is None:
        settings = ClassificationSettings()

    input_wav_file_path = Path(input_wav_file_path)

    if spec is None:
        spec = read_audio_info(input_wav_file_path).spec

    if spec.channel_count != 2:
        raise ValueError(
            f"Stereo classification needs 2 channels, got {spec.channel_count} for {input_wav_file_path}"
        )

    encoding = SampleEncoding.from_spec(spec, input_wav_file_path)

    raw_blocks = iter_raw_blocks(input_wav_file_path, encoding, settings.block_frames)
    with closing(raw_blocks):
        return analyse_stereo_blocks(raw_blocks, encoding, spec.sample_rate, settings)


def summarise_stereo_analysis_text(analysis: StereoAnalysis) -> str:
    side_rms_text = (
        "-inf dBFS" if analysis.side_rms <= 0.0 else f"{analysis.side_rms_dbfs:.1f} dBFS"
    )
    return (
        f"{analysis.verdict.value}: side_rms={side_rms_text}, "
        f"analyzed={analysis.analyzed_count} frames, "
        f"leading silence={analysis.silence_skipped} frames"
    )
