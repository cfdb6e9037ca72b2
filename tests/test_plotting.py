import numpy as np
import pytest

from wav2mono.classify import ClassificationSettings, ClassificationVerdict
from wav2mono.io import SampleEncoding
from wav2mono.plotting import (
    compute_side_level_trace,
    load_analysed_window,
    plot_side_level_from_wav_file,
)
from wavgen.signals import duplicate_mono_to_stereo, generate_sine, prepend_silence, write_fixture_wav


def test_side_level_trace_windows():
    stereo = np.zeros((250, 2), dtype=np.float32)
    stereo[:, 0] = 0.5
    stereo[:, 1] = -0.5

    trace = compute_side_level_trace(stereo, sample_rate_hz=1_000, window_seconds=0.1, start_offset_frames=500)

    np.testing.assert_allclose(trace.time_seconds, [0.5, 0.6, 0.7])
    np.testing.assert_allclose(trace.side_rms, [1.0, 1.0, 1.0])
    np.testing.assert_allclose(trace.mid_rms, [0.0, 0.0, 0.0])


def test_side_level_trace_rejects_bad_input():
    with pytest.raises(ValueError):
        compute_side_level_trace(np.zeros((10, 2)), 1_000, window_seconds=0.0)

    with pytest.raises(ValueError):
        compute_side_level_trace(np.zeros((10, 3)), 1_000)


def test_analysed_window_skips_leading_silence(tmp_path):
    sine = generate_sine(sample_rate_hz=8_000, duration_seconds=1.0, initial_phase_radians=np.pi / 2.0)
    stereo = prepend_silence(duplicate_mono_to_stereo(sine.samples), 8_000, 0.5)
    path = write_fixture_wav(tmp_path / "padded.wav", stereo, 8_000, SampleEncoding.FLOAT32)

    settings = ClassificationSettings(max_analyze_seconds=0.25, block_frames=1_000)
    analysis = plot_side_level_from_wav_file(
        path,
        classification_settings=settings,
        output_path=tmp_path / "side.png",
        show_interactive=False,
    )
    window = load_analysed_window(path, SampleEncoding.FLOAT32, analysis, block_frames=1_000)

    assert analysis.verdict is ClassificationVerdict.DUAL_MONO
    assert analysis.silence_skipped == 4_000
    assert window.shape == (2_000, 2)
    np.testing.assert_array_equal(window, stereo[4_000:6_000])
    assert (tmp_path / "side.png").exists()


def test_plot_of_silent_file(tmp_path):
    path = write_fixture_wav(tmp_path / "silence.wav", np.zeros((800, 2)), 8_000, SampleEncoding.INT16)

    analysis = plot_side_level_from_wav_file(path, output_path=tmp_path / "silence.png", show_interactive=False)

    assert analysis.analyzed_count == 0
    assert (tmp_path / "silence.png").exists()
