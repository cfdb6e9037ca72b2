import numpy as np
import pytest

from wav2mono.classify import ClassificationVerdict, classify_stereo_file
from wav2mono.io import SampleEncoding, read_audio_info
from wavgen.cli import main as wavgen_main
from wavgen.signals import (
    dbfs_to_amplitude,
    generate_noise,
    generate_sine,
    make_stereo,
    phase_inverted_stereo,
    prepend_silence,
    quantise,
    seconds_to_samples,
)


def test_sine_peak_level():
    sine = generate_sine(sample_rate_hz=48_000, frequency_hz=1000.0, duration_seconds=1.0, level_dbfs=-20.0)

    assert sine.samples.shape == (48_000,)
    assert sine.samples.dtype == np.float32
    assert np.max(np.abs(sine.samples)) == pytest.approx(dbfs_to_amplitude(-20.0), rel=1e-4)


def test_noise_is_deterministic():
    first = generate_noise(random_seed=7)
    second = generate_noise(random_seed=7)

    np.testing.assert_array_equal(first.samples, second.samples)


def test_negative_duration_is_rejected():
    with pytest.raises(ValueError):
        seconds_to_samples(-1.0, 48_000)


def test_make_stereo_requires_matching_channels():
    with pytest.raises(ValueError):
        make_stereo(np.zeros(10), np.zeros(11))


def test_phase_inverted_layout():
    stereo = phase_inverted_stereo(np.array([0.5, -0.25], dtype=np.float32))

    np.testing.assert_array_equal(stereo, [[0.5, -0.5], [-0.25, 0.25]])


def test_prepend_silence_to_stereo():
    stereo = np.ones((4, 2), dtype=np.float32)

    padded = prepend_silence(stereo, sample_rate_hz=10, silence_seconds=0.3)

    assert padded.shape == (7, 2)
    assert not padded[:3].any()


@pytest.mark.parametrize(
    "encoding, expected",
    [
        (SampleEncoding.INT8, [127, -128, 64]),
        (SampleEncoding.INT16, [32_767, -32_768, 16_384]),
        (SampleEncoding.INT24, [8_388_607, -8_388_608, 4_194_304]),
    ],
)
def test_quantise_rounds_and_clips(encoding, expected):
    native = quantise(np.array([1.5, -2.0, 0.5]), encoding)

    assert native.dtype == encoding.native_dtype
    np.testing.assert_array_equal(native, expected)


def test_quantise_float_is_unclipped():
    native = quantise(np.array([1.5, -2.0]), SampleEncoding.FLOAT32)

    assert native.dtype == np.float32
    np.testing.assert_array_equal(native, [1.5, -2.0])


def test_wavgen_cli_writes_every_layout(tmp_path, capsys):
    wavgen_main(["--output-dir", str(tmp_path), "--encoding", "int24", "--duration_seconds", "0.5", "all"])

    expected_verdicts = {
        "dual_mono.wav": ClassificationVerdict.DUAL_MONO,
        "inverted.wav": ClassificationVerdict.TRUE_STEREO,
        "dithered.wav": ClassificationVerdict.DUAL_MONO,
        "silence.wav": ClassificationVerdict.DUAL_MONO,
    }
    for file_name, expected_verdict in expected_verdicts.items():
        info = read_audio_info(tmp_path / file_name)
        assert info.spec.bit_depth == 24
        assert info.spec.channel_count == 2
        assert classify_stereo_file(info.file_path).verdict is expected_verdict

    assert capsys.readouterr().out.count("Wrote ") == 4


def test_wavgen_cli_adds_wav_suffix_and_leading_silence(tmp_path):
    wavgen_main([
        "--output-dir", str(tmp_path),
        "--encoding", "float32",
        "--duration_seconds", "1",
        "--leading_silence_seconds", "1",
        "dual_mono",
        "--output", "padded",
    ])

    analysis = classify_stereo_file(tmp_path / "padded.wav")
    assert analysis.verdict is ClassificationVerdict.DUAL_MONO
    assert analysis.silence_skipped >= 48_000
