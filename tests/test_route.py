import numpy as np
import pytest

from wav2mono.errors import WriteFailureError
from wav2mono.io import read_audio_info, read_raw_samples
from wav2mono.pipeline import Disposition
from wav2mono.route import RoutingSettings, find_wav_files, route_wav_file, route_wav_files


def test_dual_mono_is_reduced_into_mono_folder(tmp_path, dual_mono_wav):
    stereo, _ = read_raw_samples(dual_mono_wav)

    outcome = route_wav_file(dual_mono_wav)

    assert outcome.destination == tmp_path / "mono" / "dual_mono.wav"
    assert outcome.original_removed
    assert not dual_mono_wav.exists()

    mono, info = read_raw_samples(outcome.destination)
    assert info.spec.channel_count == 1
    np.testing.assert_array_equal(mono[:, 0], stereo[:, 0])


def test_keep_originals_keeps_reduced_original(tmp_path, dual_mono_wav):
    outcome = route_wav_file(dual_mono_wav, RoutingSettings(keep_originals=True))

    assert not outcome.original_removed
    assert dual_mono_wav.exists()
    assert read_audio_info(outcome.destination).spec.channel_count == 1


def test_true_stereo_is_moved_unchanged(tmp_path, inverted_wav):
    original_bytes = inverted_wav.read_bytes()

    outcome = route_wav_file(inverted_wav)

    assert outcome.result.disposition is Disposition.TRUE_STEREO
    assert outcome.destination == tmp_path / "stereo" / "inverted.wav"
    assert outcome.destination.read_bytes() == original_bytes
    assert not inverted_wav.exists()


def test_mono_and_multichannel_are_copied_with_keep_originals(tmp_path, mono_wav, quad_wav):
    settings = RoutingSettings(keep_originals=True)

    mono_outcome = route_wav_file(mono_wav, settings)
    quad_outcome = route_wav_file(quad_wav, settings)

    assert mono_outcome.destination == tmp_path / "mono" / "mono.wav"
    assert quad_outcome.destination == tmp_path / "multichannel" / "quad.wav"
    assert mono_outcome.destination.read_bytes() == mono_wav.read_bytes()
    assert quad_outcome.destination.read_bytes() == quad_wav.read_bytes()
    assert not mono_outcome.original_removed


def test_routing_a_routed_file_again_moves_nothing(tmp_path, mono_wav):
    first = route_wav_file(mono_wav)
    routed_bytes = first.destination.read_bytes()

    second = route_wav_file(first.destination)

    assert second.destination == first.destination
    assert not second.original_removed
    assert first.destination.read_bytes() == routed_bytes


def test_custom_directory_names(tmp_path, inverted_wav):
    outcome = route_wav_file(inverted_wav, RoutingSettings(stereo_dir_name="wide"))

    assert outcome.destination == tmp_path / "wide" / "inverted.wav"


def test_batch_continues_after_a_failure(tmp_path, corrupt_wav, dual_mono_wav, inverted_wav):
    corrupt_bytes = corrupt_wav.read_bytes()

    entries = route_wav_files([corrupt_wav, dual_mono_wav, inverted_wav])

    assert [entry.input_path for entry in entries] == [corrupt_wav, dual_mono_wav, inverted_wav]
    assert not entries[0].ok
    assert "corrupt.wav" in entries[0].error
    assert entries[1].ok and entries[2].ok
    assert corrupt_wav.read_bytes() == corrupt_bytes


def test_batch_handles_duplicate_paths_once(tmp_path, dual_mono_wav):
    entries = route_wav_files([dual_mono_wav, tmp_path / "." / "dual_mono.wav"])

    assert len(entries) == 1
    assert entries[0].ok


def test_parallel_batch_keeps_input_order(tmp_path, dual_mono_wav, inverted_wav, mono_wav, quad_wav):
    paths = [dual_mono_wav, inverted_wav, mono_wav, quad_wav]

    entries = route_wav_files(paths, jobs=3)

    assert [entry.input_path for entry in entries] == paths
    assert [entry.outcome.result.disposition for entry in entries] == [
        Disposition.DUAL_MONO_REDUCED,
        Disposition.TRUE_STEREO,
        Disposition.MONO,
        Disposition.MULTICHANNEL,
    ]


def test_batch_rejects_non_positive_jobs(dual_mono_wav):
    with pytest.raises(ValueError):
        route_wav_files([dual_mono_wav], jobs=0)


def test_find_wav_files(tmp_path):
    (tmp_path / "a.wav").write_bytes(b"")
    (tmp_path / "B.WAV").write_bytes(b"")
    (tmp_path / "notes.txt").write_text("x")
    (tmp_path / ".hidden.wav").write_bytes(b"")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "c.wav").write_bytes(b"")

    flat = find_wav_files([tmp_path])
    recursive = find_wav_files([tmp_path], recursive=True)

    assert [path.name for path in flat] == ["B.WAV", "a.wav"]
    assert sorted(path.name for path in recursive) == ["B.WAV", "a.wav", "c.wav"]
    assert find_wav_files([tmp_path / "notes.txt"]) == []


def test_existing_reduced_file_is_not_overwritten(tmp_path, dual_mono_wav):
    existing = tmp_path / "mono" / "dual_mono.wav"
    existing.parent.mkdir()
    existing.write_bytes(b"earlier take")
    original_bytes = dual_mono_wav.read_bytes()

    with pytest.raises(WriteFailureError, match="already exists"):
        route_wav_file(dual_mono_wav)

    assert existing.read_bytes() == b"earlier take"
    assert dual_mono_wav.read_bytes() == original_bytes
    assert sorted(path.name for path in existing.parent.iterdir()) == ["dual_mono.wav"]


def test_existing_stereo_file_is_not_overwritten(tmp_path, inverted_wav):
    existing = tmp_path / "stereo" / "inverted.wav"
    existing.parent.mkdir()
    existing.write_bytes(b"earlier take")

    with pytest.raises(WriteFailureError, match="already exists"):
        route_wav_file(inverted_wav)

    assert existing.read_bytes() == b"earlier take"
    assert inverted_wav.exists()


def test_recursive_batch_with_name_clash_reports_failure(tmp_path, mono_wav):
    first = route_wav_file(mono_wav, RoutingSettings(keep_originals=True))

    entries = route_wav_files(find_wav_files([tmp_path], recursive=True), jobs=2)

    assert sorted((entry.input_path, entry.ok) for entry in entries) == [
        (first.destination, True),
        (mono_wav, False),
    ]
    assert first.destination.read_bytes() == mono_wav.read_bytes()
