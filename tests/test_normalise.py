import numpy as np
import pytest

from wav2mono.io import SampleEncoding
from wav2mono.normalise import normalise_samples


@pytest.mark.parametrize(
    "encoding, full_scale",
    [
        (SampleEncoding.INT8, 127),
        (SampleEncoding.INT16, 32_767),
        (SampleEncoding.INT24, 8_388_607),
        (SampleEncoding.INT32, 2_147_483_647),
    ],
)
def test_integer_full_scale_maps_to_one(encoding, full_scale):
    native = np.array([full_scale, -full_scale, 0], dtype=encoding.native_dtype)

    normalised = normalise_samples(native, encoding)

    assert normalised.dtype == np.float32
    np.testing.assert_allclose(normalised, [1.0, -1.0, 0.0], atol=1e-7)


def test_most_negative_16_bit_value_lands_just_below_minus_one():
    normalised = normalise_samples(np.array([-32_768], dtype=np.int16), SampleEncoding.INT16)

    assert normalised[0] == pytest.approx(-32_768 / 32_767)


def test_24_bit_uses_23_bit_divisor():
    normalised = normalise_samples(np.array([4_194_304], dtype=np.int32), SampleEncoding.INT24)

    assert normalised[0] == pytest.approx(4_194_304 / 8_388_607)


def test_float_is_passed_through_unclamped():
    native = np.array([1.5, -0.25, 0.0], dtype=np.float32)

    np.testing.assert_array_equal(normalise_samples(native, SampleEncoding.FLOAT32), native)


def test_non_finite_samples_become_silence():
    native = np.array([np.nan, np.inf, -np.inf, 0.5], dtype=np.float32)

    np.testing.assert_array_equal(
        normalise_samples(native, SampleEncoding.FLOAT32),
        np.array([0.0, 0.0, 0.0, 0.5], dtype=np.float32),
    )


def test_block_shape_is_preserved():
    native = np.zeros((10, 2), dtype=np.int16)

    assert normalise_samples(native, SampleEncoding.INT16).shape == (10, 2)
