# wav2mono/normalise.py
"""
Sample normalisation: native-width samples -> float32 amplitude in [-1, 1].

One scale per encoding. Integer PCM is divided by the largest positive
value of its width, so full-scale positive maps to exactly 1.0 (the most
negative value lands marginally below -1.0). Float input is passed through
unclamped.

Normalised values are only ever used for analysis and are never written back.
"""

from __future__ import annotations

from typing import Dict

import numpy as np

from wav2mono.io import SampleEncoding


NORMALISATION_DIVISORS: Dict[SampleEncoding, float] = {
    SampleEncoding.INT8: 127.0,
    SampleEncoding.INT16: 32_767.0,
    SampleEncoding.INT24: 8_388_607.0,          # 2^23 - 1
    SampleEncoding.INT32: 2_147_483_647.0,
    SampleEncoding.FLOAT32: 1.0,
}


def normalise_samples(native_samples: np.ndarray, encoding: SampleEncoding) -> np.ndarray:
    """
    Convert native-width samples of any shape to float32 amplitudes.

    Samples that decode to NaN or +/-inf are treated as silence (0.0) so a
    single damaged frame cannot decide or abort the analysis.
    """
    native_samples = np.asarray(native_samples)

    if encoding is SampleEncoding.FLOAT32:
        float_samples = native_samples.astype(np.float32, copy=True)
    else:
        # float64 keeps 32-bit integers exact before the division
        float_samples = (
            native_samples.astype(np.float64) / NORMALISATION_DIVISORS[encoding]
        ).astype(np.float32)

    return np.nan_to_num(float_samples, nan=0.0, posinf=0.0, neginf=0.0)
