# wav2mono/route.py
"""
Directory router: sort processed files into sibling sub-directories.

For an input <dir>/<name>.wav:
  mono (1 channel)       -> <dir>/mono/<name>.wav          (moved)
  dual-mono stereo       -> <dir>/mono/<name>.wav          (reduced copy; original removed)
  true stereo            -> <dir>/stereo/<name>.wav        (moved)
  3+ channels            -> <dir>/multichannel/<name>.wav  (moved)

With keep_originals, files are copied instead of moved and reduced
originals are kept. A file that already sits in its destination directory
is left where it is, so routing a routed folder again moves nothing.

An existing file at the destination is never overwritten; the input is
reported as failed and left where it is.

Errors are per file: the original is left untouched and batch routing
carries on with the next file.
"""

from __future__ import annotations

import concurrent.futures
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from wav2mono.classify import ClassificationSettings
from wav2mono.errors import Wav2MonoError, WriteFailureError
from wav2mono.pipeline import Disposition, ProcessingResult, process_wav_file, validate_input_path


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoutingSettings:
    mono_dir_name: str = "mono"
    stereo_dir_name: str = "stereo"
    multichannel_dir_name: str = "multichannel"
    keep_originals: bool = False

    def directory_name_for(self, disposition: Disposition) -> str:
        if disposition in (Disposition.MONO, Disposition.DUAL_MONO_REDUCED):
            return self.mono_dir_name
        if disposition is Disposition.TRUE_STEREO:
            return self.stereo_dir_name
        return self.multichannel_dir_name


@dataclass(frozen=True)
class RoutingOutcome:
    result: ProcessingResult
    destination: Path
    original_removed: bool

    @property
    def message(self) -> str:
        return f"{self.result.message} -> {self.destination}"


@dataclass(frozen=True)
class BatchEntry:
    input_path: Path
    outcome: Optional[RoutingOutcome] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def route_wav_file(
    input_path: str | Path,
    routing_settings: Optional[RoutingSettings] = None,
    classification_settings: Optional[ClassificationSettings] = None,
) -> RoutingOutcome:
    if routing_settings is None:
        routing_settings = RoutingSettings()

    input_path = validate_input_path(input_path)
    parent_directory = input_path.parent
    mono_output_path = parent_directory / routing_settings.mono_dir_name / input_path.name

    result = process_wav_file(input_path, mono_output_path, classification_settings, overwrite=False)

    if result.replaced_original:
        destination = result.output_path
        original_removed = False
        if not routing_settings.keep_originals:
            input_path.unlink()
            original_removed = True
        return RoutingOutcome(result=result, destination=destination, original_removed=original_removed)

    target_directory_name = routing_settings.directory_name_for(result.disposition)
    if parent_directory.name == target_directory_name:
        return RoutingOutcome(result=result, destination=input_path, original_removed=False)

    target_directory = parent_directory / target_directory_name
    target_directory.mkdir(parents=True, exist_ok=True)
    destination = target_directory / input_path.name

    if destination.exists():
        raise WriteFailureError(destination, "destination already exists")

    if routing_settings.keep_originals:
        shutil.copy2(str(input_path), str(destination))
        original_removed = False
    else:
        shutil.move(str(input_path), str(destination))
        original_removed = True

    return RoutingOutcome(result=result, destination=destination, original_removed=original_removed)


def find_wav_files(paths: Iterable[str | Path], recursive: bool = False) -> List[Path]:
    """
    Expand directories into their .wav files (extension matched case-insensitively).
    Explicit file paths are kept as given if they end in .wav.
    """
    wav_files: List[Path] = []

    for path in paths:
        path = Path(path)
        if path.is_dir():
            candidates = path.rglob("*") if recursive else path.glob("*")
            wav_files.extend(
                sorted(
                    candidate
                    for candidate in candidates
                    if candidate.is_file()
                    and candidate.suffix.lower() == ".wav"
                    and not candidate.name.startswith(".")
                )
            )
        elif path.suffix.lower() == ".wav":
            wav_files.append(path)
        else:
            logger.warning("Skipping %s: not a .wav file", path)

    return wav_files


def _route_batch_entry(
    input_path: Path,
    routing_settings: RoutingSettings,
    classification_settings: Optional[ClassificationSettings],
) -> BatchEntry:
    try:
        outcome = route_wav_file(input_path, routing_settings, classification_settings)
    except (Wav2MonoError, OSError) as routing_error:
        logger.warning("Failed: %s: %s", input_path, routing_error)
        return BatchEntry(input_path=input_path, error=str(routing_error))

    return BatchEntry(input_path=input_path, outcome=outcome)


def route_wav_files(
    paths: Iterable[str | Path],
    routing_settings: Optional[RoutingSettings] = None,
    classification_settings: Optional[ClassificationSettings] = None,
    jobs: int = 1,
) -> List[BatchEntry]:
    """
    Route many files. Each file is handled at most once, even if listed
    twice; results come back in input order.
    """
    if routing_settings is None:
        routing_settings = RoutingSettings()

    if jobs < 1:
        raise ValueError("jobs must be at least 1")

    unique_paths: List[Path] = []
    seen_paths = set()
    for path in paths:
        path = Path(path)
        resolved_path = path.resolve()
        if resolved_path in seen_paths:
            continue
        seen_paths.add(resolved_path)
        unique_paths.append(path)

    if jobs == 1 or len(unique_paths) <= 1:
        return [
            _route_batch_entry(path, routing_settings, classification_settings)
            for path in unique_paths
        ]

    with concurrent.futures.ThreadPoolExecutor(max_workers=jobs) as executor:
        futures = [
            executor.submit(_route_batch_entry, path, routing_settings, classification_settings)
            for path in unique_paths
        ]
        return [future.result() for future in futures]
