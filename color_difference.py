#!/usr/bin/env python3
"""
Perceptual color distances (delta E) between CIE L*a*b* colors.

Both metrics broadcast over numpy arrays shaped (..., 3), so one color can be
scored against a whole grid of candidates at once.
"""

import itertools

import numpy as np

POW7_25 = 6103515625  # 25**7


def _result(value):
    value = np.asarray(value)
    return float(value) if value.ndim == 0 else value


def _channels(lab):
    values = np.asarray(lab, dtype=float)
    return values[..., 0], values[..., 1], values[..., 2]


def cie76(lab1, lab2):
    """Calculate the CIE76 difference (Euclidean distance in Lab)."""
    L1, a1, b1 = _channels(lab1)
    L2, a2, b2 = _channels(lab2)
    return _result(np.sqrt((L1 - L2) ** 2 + (a1 - a2) ** 2 + (b1 - b2) ** 2))


def ciede2000(lab1, lab2):
    """Calculate the CIEDE2000 color difference with k_L = k_C = k_H = 1."""
    L1, a1, b1 = _channels(lab1)
    L2, a2, b2 = _channels(lab2)

    # Chroma in the original a*b* plane
    C1 = np.sqrt(a1 * a1 + b1 * b1)
    C2 = np.sqrt(a2 * a2 + b2 * b2)
    C_bar_7 = ((C1 + C2) / 2) ** 7

    G = 0.5 * (1 - np.sqrt(C_bar_7 / (C_bar_7 + POW7_25)))
    a1_prime = (1 + G) * a1
    a2_prime = (1 + G) * a2

    C1_prime = np.sqrt(a1_prime * a1_prime + b1 * b1)
    C2_prime = np.sqrt(a2_prime * a2_prime + b2 * b2)
    h1_prime = (np.degrees(np.arctan2(b1, a1_prime)) + 360) % 360
    h2_prime = (np.degrees(np.arctan2(b2, a2_prime)) + 360) % 360

    delta_L_prime = L2 - L1
    delta_C_prime = C2_prime - C1_prime

    achromatic = C1_prime * C2_prime == 0
    h_diff = np.abs(h1_prime - h2_prime)
    h_sum = h1_prime + h2_prime

    delta_h_prime = np.where(
        achromatic, 0.0,
        np.where(h_diff <= 180, h2_prime - h1_prime,
                 np.where(h2_prime <= h1_prime,
                          h2_prime - h1_prime + 360,
                          h2_prime - h1_prime - 360)))
    delta_H_prime = 2 * np.sqrt(C1_prime * C2_prime) * np.sin(np.radians(delta_h_prime / 2))

    L_bar_prime = (L1 + L2) / 2
    C_bar_prime = (C1_prime + C2_prime) / 2
    h_bar_prime = np.where(
        achromatic, 0.0,
        np.where(h_diff <= 180, h_sum / 2,
                 np.where(h_sum < 360, (h_sum + 360) / 2, (h_sum - 360) / 2)))

    L_50_sq = (L_bar_prime - 50) ** 2
    S_L = 1 + (0.015 * L_50_sq) / np.sqrt(20 + L_50_sq)
    S_C = 1 + 0.045 * C_bar_prime
    T = (1
         - 0.17 * np.cos(np.radians(h_bar_prime - 30))
         + 0.24 * np.cos(np.radians(2 * h_bar_prime))
         + 0.32 * np.cos(np.radians(3 * h_bar_prime + 6))
         - 0.20 * np.cos(np.radians(4 * h_bar_prime - 63)))
    S_H = 1 + 0.015 * T * C_bar_prime

    delta_theta = 30 * np.exp(-(((h_bar_prime - 275) / 25) ** 2))
    C_bar_prime_7 = C_bar_prime ** 7
    R_C = 2 * np.sqrt(C_bar_prime_7 / (C_bar_prime_7 + POW7_25))
    R_T = -np.sin(np.radians(2 * delta_theta)) * R_C

    L_term = delta_L_prime / S_L
    C_term = delta_C_prime / S_C
    H_term = delta_H_prime / S_H
    squared = L_term ** 2 + C_term ** 2 + H_term ** 2 + R_T * C_term * H_term
    return _result(np.sqrt(np.maximum(squared, 0.0)))


def distance_matrix(colors, metric=ciede2000):
    """Square matrix of pairwise distances, zero on the diagonal."""
    lab = np.asarray(colors, dtype=float).reshape(-1, 3)
    return metric(lab[:, np.newaxis, :], lab[np.newaxis, :, :])


def min_pairwise_distance(colors, metric=ciede2000):
    """Calculate minimum pairwise distance; inf for fewer than two colors."""
    if len(colors) < 2:
        return float('inf')

    min_dist = float('inf')
    for lab1, lab2 in itertools.combinations(colors, 2):
        min_dist = min(min_dist, metric(lab1, lab2))
    return min_dist
