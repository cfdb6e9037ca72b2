# wav2mono/pipeline.py
"""
Per-asset pipeline: inspect channel count, classify stereo, reduce dual-mono.

    1 channel   -> already mono, no analysis, bytes untouched
    2 channels  -> classify
                     TrueStereo -> bytes untouched
                     DualMono   -> channel 0 written to mono_output_path
    3+ channels -> not analysed, bytes untouched

process_wav_file never moves, copies or deletes the input; that is left to
the caller (see wav2mono.route). The returned result says whether the
original has been superseded by a reduced file.

Calls share no state, so different files may be processed concurrently.
The same file must not be processed by two calls at once.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from wav2mono.classify import (
    ClassificationSettings,
    ClassificationVerdict,
    StereoAnalysis,
    classify_stereo_file,
)
from wav2mono.errors import PathFailureError
from wav2mono.extract import extract_first_channel
from wav2mono.io import AudioSpec, read_audio_info


logger = logging.getLogger(__name__)


class Disposition(str, enum.Enum):
    MONO = "mono"
    TRUE_STEREO = "true_stereo"
    DUAL_MONO_REDUCED = "dual_mono_reduced"
    MULTICHANNEL = "multichannel"


@dataclass(frozen=True)
class ProcessingResult:
    input_path: Path
    spec: AudioSpec
    disposition: Disposition
    message: str
    analysis: Optional[StereoAnalysis] = None
    output_path: Optional[Path] = None     # set only for DUAL_MONO_REDUCED

    @property
    def replaced_original(self) -> bool:
        return self.disposition is Disposition.DUAL_MONO_REDUCED

    @property
    def verdict(self) -> Optional[ClassificationVerdict]:
        return self.analysis.verdict if self.analysis is not None else None


def validate_input_path(input_path: str | Path) -> Path:
    """
    Reject paths without a file name or parent directory before any I/O.
    """
    if not str(input_path):
        raise PathFailureError(input_path, "empty path")

    input_path = Path(input_path)

    if input_path.name in ("", ".", ".."):
        raise PathFailureError(input_path, "no file name")

    if input_path.parent == input_path:
        raise PathFailureError(input_path, "no parent directory")

    return input_path


def process_wav_file(
    input_path: str | Path,
    mono_output_path: str | Path,
    settings: Optional[ClassificationSettings] = None,
    overwrite: bool = True,
) -> ProcessingResult:
    """
    Run the pipeline on one file.

    mono_output_path is only written when the file is dual-mono. Its parent
    directory is created then, and only then. It must differ from input_path.
    """
    if settings is None:
        settings = ClassificationSettings()

    input_path = validate_input_path(input_path)
    mono_output_path = validate_input_path(mono_output_path)
    file_name = input_path.name

    if mono_output_path.resolve() == input_path.resolve():
        raise PathFailureError(mono_output_path, "mono output would overwrite the input")

    info = read_audio_info(input_path)
    spec = info.spec

    if spec.channel_count == 1:
        return ProcessingResult(
            input_path=input_path,
            spec=spec,
            disposition=Disposition.MONO,
            message=f"{file_name} is already mono (1 channel); left unchanged.",
        )

    if spec.channel_count > 2:
        return ProcessingResult(
            input_path=input_path,
            spec=spec,
            disposition=Disposition.MULTICHANNEL,
            message=f"{file_name} has {spec.channel_count} channels; not analysed, left unchanged.",
        )

    analysis = classify_stereo_file(input_path, spec=spec, settings=settings)

    if analysis.verdict is ClassificationVerdict.TRUE_STEREO:
        logger.info("%s: true stereo (side_rms=%.3g)", input_path, analysis.side_rms)
        return ProcessingResult(
            input_path=input_path,
            spec=spec,
            disposition=Disposition.TRUE_STEREO,
            message=f"{file_name} is true stereo; left unchanged.",
            analysis=analysis,
        )

    extract_first_channel(
        input_path,
        mono_output_path,
        info=info,
        block_frames=settings.block_frames,
        overwrite=overwrite,
    )
    logger.info("%s: dual-mono, channel 0 written to %s", input_path, mono_output_path)

    return ProcessingResult(
        input_path=input_path,
        spec=spec,
        disposition=Disposition.DUAL_MONO_REDUCED,
        message=f"{file_name} is dual-mono; channel 0 extracted to {mono_output_path}.",
        analysis=analysis,
        output_path=mono_output_path,
    )
