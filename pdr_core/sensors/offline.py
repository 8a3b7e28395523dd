"""
Offline (batch) step detection for recorded sessions.

The streaming StepDetector makes its decision sample by sample. For a
recorded session it is useful to cross-check it against a batch detector
that sees the whole signal at once:

    1. a_mag[k]     = ||a_k||
    2. a_dyn[k]     = a_mag[k] - g
    3. a_filt       = zero-phase 4th-order Butterworth low-pass of a_dyn
    4. step indices = peaks of a_filt with height >= h_min and spacing >= d_min

The zero-phase filter uses future samples, so this detector is only
meaningful offline.
"""

from typing import Optional, Tuple

import numpy as np
from scipy import signal


def detect_steps_offline(
    accel_series: np.ndarray,
    dt: float,
    g: float = 9.81,
    min_peak_height: float = 1.0,
    min_peak_distance: float = 0.3,
    lowpass_cutoff: Optional[float] = 5.0,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Detect steps as peaks of the gravity-removed acceleration magnitude.

    Args:
        accel_series: Raw accelerometer samples. Shape: (N, 3). Units: m/s².
        dt: Sample interval. Units: seconds.
        g: Gravity magnitude removed from the norm. Units: m/s².
        min_peak_height: Minimum peak height after gravity removal.
                         Units: m/s². Default: 1.0.
        min_peak_distance: Minimum time between two peaks. Units: seconds.
                           Default: 0.3 (same order as the streaming
                           debounce).
        lowpass_cutoff: Low-pass cutoff. Units: Hz. None disables the
                        filter; a cutoff at or above Nyquist is ignored.

    Returns:
        Tuple of (step_indices, processed_magnitude):
            step_indices: Sample indices of the detected peaks. Shape: (n,).
            processed_magnitude: Filtered dynamic magnitude. Shape: (N,).

    Raises:
        ValueError: If accel_series is not (N, 3), or dt or
                    min_peak_distance is not positive.
    """
    accel_series = np.asarray(accel_series, dtype=np.float64)
    if accel_series.ndim != 2 or accel_series.shape[1] != 3:
        raise ValueError(
            f"accel_series must have shape (N, 3), got {accel_series.shape}"
        )
    if dt <= 0:
        raise ValueError(f"dt must be positive, got {dt}")
    if min_peak_distance <= 0:
        raise ValueError(f"min_peak_distance must be positive, got {min_peak_distance}")

    accel_dynamic = np.linalg.norm(accel_series, axis=1) - g

    accel_filtered = accel_dynamic
    if lowpass_cutoff is not None:
        normalized_cutoff = lowpass_cutoff / (0.5 / dt)
        # filtfilt needs a signal longer than its padding
        if normalized_cutoff < 1.0 and len(accel_dynamic) > 27:
            b, a = signal.butter(4, normalized_cutoff, btype='low')
            accel_filtered = signal.filtfilt(b, a, accel_dynamic)

    min_distance_samples = max(1, int(min_peak_distance / dt))
    peak_indices, _ = signal.find_peaks(
        accel_filtered,
        height=min_peak_height,
        distance=min_distance_samples,
    )
    return peak_indices, accel_filtered


def step_times_ms(step_indices: np.ndarray, timestamps_ms: np.ndarray) -> np.ndarray:
    """Map detected step indices to their sample timestamps (ms)."""
    return np.asarray(timestamps_ms)[np.asarray(step_indices, dtype=int)]


def match_steps(
    reference_ms: np.ndarray,
    detected_ms: np.ndarray,
    tolerance_ms: int = 250,
) -> Tuple[int, int, int]:
    """
    Greedy one-to-one matching of detected step times against a reference.

    Args:
        reference_ms: Reference step times (e.g. offline peaks). Units: ms.
        detected_ms: Step times to evaluate (e.g. streaming events).
        tolerance_ms: Maximum time difference for a match. Units: ms.

    Returns:
        (matched, missed, extra) counts.

    Example:
        >>> match_steps(np.array([500, 1000]), np.array([520, 1400]))
        (1, 1, 1)
    """
    reference = sorted(int(t) for t in reference_ms)
    detected = sorted(int(t) for t in detected_ms)
    used = [False] * len(detected)
    matched = 0
    for ref in reference:
        best = None
        for j, det in enumerate(detected):
            if used[j] or abs(det - ref) > tolerance_ms:
                continue
            if best is None or abs(det - ref) < abs(detected[best] - ref):
                best = j
        if best is not None:
            used[best] = True
            matched += 1
    return matched, len(reference) - matched, len(detected) - matched
