# wav2mono/__init__.py
"""
wav2mono package

Detects stereo files that are really mono (both channels carry the same
signal) and reduces them to one channel without changing a single sample.

This package contains:
- container header / native sample I/O (wav2mono.io)
- sample normalisation to float amplitudes (wav2mono.normalise)
- side-signal RMS classifier (wav2mono.classify)
- bit-exact channel-0 extraction (wav2mono.extract)
- per-file pipeline (wav2mono.pipeline)
- mono/ stereo/ multichannel/ folder routing (wav2mono.route)
- mid / side level plots (wav2mono.plotting)
- command line interface entrypoint (wav2mono.cli)

Typical usage:
    from wav2mono import process_wav_file
    result = process_wav_file("take1.wav", "mono/take1.wav")
"""

from .classify import (
    AnalysisState,
    ClassificationSettings,
    ClassificationVerdict,
    StereoAnalysis,
    analyse_stereo_blocks,
    classify_stereo_file,
)
from .errors import (
    PathFailureError,
    UnreadableContainerError,
    UnsupportedEncodingError,
    Wav2MonoError,
    WriteFailureError,
)
from .extract import extract_first_channel, take_first_channel
from .io import (
    AudioFileInfo,
    AudioSpec,
    SampleEncoding,
    SampleFormat,
    iter_raw_blocks,
    read_audio_info,
    read_audio_spec,
    read_raw_samples,
    write_raw_samples,
)
from .normalise import normalise_samples
from .pipeline import Disposition, ProcessingResult, process_wav_file
from .route import RoutingSettings, find_wav_files, route_wav_file, route_wav_files

__all__ = [
    "AnalysisState",
    "AudioFileInfo",
    "AudioSpec",
    "ClassificationSettings",
    "ClassificationVerdict",
    "Disposition",
    "PathFailureError",
    "ProcessingResult",
    "RoutingSettings",
    "SampleEncoding",
    "SampleFormat",
    "StereoAnalysis",
    "UnreadableContainerError",
    "UnsupportedEncodingError",
    "Wav2MonoError",
    "WriteFailureError",
    "analyse_stereo_blocks",
    "classify_stereo_file",
    "extract_first_channel",
    "find_wav_files",
    "iter_raw_blocks",
    "normalise_samples",
    "process_wav_file",
    "read_audio_info",
    "read_audio_spec",
    "read_raw_samples",
    "route_wav_file",
    "route_wav_files",
    "take_first_channel",
    "write_raw_samples",
]
