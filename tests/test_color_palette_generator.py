"""Tests for color_palette_generator — farthest-point search and palette helpers."""

import itertools

import numpy as np
import pytest
import matplotlib.pyplot as plt

from color_difference import ciede2000
from color_palette_generator import (
    BLACK, LIGHTNESS_STEPS, WHITE, NoFeasibleColorError, extend_palette,
    generate_color, generate_palette, lab_slice_image, main, palette_statistics,
    visualize_palette,
)
from color_spaces import Lab, Rgb, lab_to_rgb, rgb_is_valid, rgb_to_lab


def grid_points(lightness_values, regions_per_row, domain_radius=128):
    """Grid in traversal order: L, then a* index, then b* index."""
    step = domain_radius * 2 / regions_per_row
    for L in lightness_values:
        for i, j in itertools.product(range(regions_per_row), repeat=2):
            yield Lab(float(L), i * step - domain_radius, j * step - domain_radius)


def brute_force_color(existing, lightness_values, regions_per_row):
    best_dist, best = -1.0, None
    for lab in grid_points(lightness_values, regions_per_row):
        if not rgb_is_valid(lab_to_rgb(lab)):
            continue
        nearest = min((ciede2000(lab, color) for color in existing), default=float('inf'))
        if nearest > best_dist:
            best_dist, best = nearest, lab
    return best


class TestGenerateColor:
    def test_empty_palette_picks_first_feasible_point(self):
        expected = next(lab for lab in grid_points(LIGHTNESS_STEPS, 64)
                        if rgb_is_valid(lab_to_rgb(lab)))
        assert generate_color([]) == expected

    def test_matches_brute_force_on_coarse_grid(self):
        existing = [BLACK, WHITE, Lab(50, 40, 40)]
        found = generate_color(existing, lightness_values=(30, 50, 70), regions_per_row=8)
        assert found == brute_force_color(existing, (30, 50, 70), 8)

    def test_result_is_in_gamut_and_on_grid(self):
        lab = generate_color([BLACK, WHITE])
        assert rgb_is_valid(lab_to_rgb(lab))
        assert lab.l in LIGHTNESS_STEPS
        assert (lab.a + 128) % 4 == 0
        assert (lab.b + 128) % 4 == 0

    def test_converts_other_color_types(self):
        rgbs = [Rgb(0, 0, 0), Rgb(255, 255, 255), Rgb(255, 0, 0)]
        labs = [rgb_to_lab(rgb) for rgb in rgbs]
        assert generate_color(rgbs) == generate_color(labs)
        assert generate_color([tuple(lab) for lab in labs]) == generate_color(labs)

    def test_does_not_modify_input(self):
        existing = [Rgb(0, 0, 0), Rgb(255, 255, 255)]
        generate_color(existing)
        assert existing == [Rgb(0, 0, 0), Rgb(255, 255, 255)]

    def test_no_feasible_point_is_an_error(self):
        with pytest.raises(NoFeasibleColorError):
            generate_color([BLACK], lightness_values=())
        assert issubclass(NoFeasibleColorError, ValueError)


class TestGeneratePalette:
    def test_small_sizes(self):
        assert generate_palette(0) == []
        assert generate_palette(1) == [Lab(0, 0, 0)]
        assert generate_palette(2) == [Lab(0, 0, 0), Lab(100, 0, 0)]

    def test_five_distinct_valid_colors(self):
        palette = generate_palette(5)
        assert len(palette) == 5
        assert len(set(palette)) == 5
        for lab in palette:
            assert rgb_is_valid(lab_to_rgb(lab))

    def test_third_color_is_farthest_from_black_and_white(self):
        palette = generate_palette(3)
        assert palette[2] == generate_color([BLACK, WHITE])

    def test_deterministic(self):
        assert generate_palette(4) == generate_palette(4)

    def test_callback_sees_growing_palette(self):
        sizes = []
        generate_palette(3, callback=lambda palette: sizes.append(len(palette)))
        assert sizes == [1, 2, 3]

    def test_negative_size(self):
        with pytest.raises(ValueError):
            generate_palette(-1)


class TestExtendPalette:
    def test_adds_new_colors_only(self):
        existing = [Rgb(255, 0, 0), Rgb(0, 0, 255)]
        added = extend_palette(existing, 3)
        assert len(added) == 3
        existing_lab = [rgb_to_lab(rgb) for rgb in existing]
        for lab in added:
            assert lab not in existing_lab
            assert rgb_is_valid(lab_to_rgb(lab))
        assert added[0] == generate_color(existing_lab)

    def test_zero_count(self):
        assert extend_palette([BLACK], 0) == []


class TestPaletteHelpers:
    def test_statistics(self):
        assert palette_statistics([BLACK]) is None
        stats = palette_statistics([BLACK, WHITE])
        assert stats['min'] == pytest.approx(100.0)
        assert stats['max'] == pytest.approx(100.0)
        assert stats['mean'] == pytest.approx(100.0)

    def test_lab_slice_image(self):
        image = lab_slice_image(50, size=64)
        assert image.shape == (64, 64, 4)
        assert image[31, 32, 3] == 1.0  # a* = 0, b* = 0
        assert image[0, 0, 3] == 0.0  # a* = -128, b* = 124
        assert np.all(image[image[..., 3] == 0, :3] == 0)

    def test_visualize_palette(self):
        fig = visualize_palette(generate_palette(3), show=False)
        assert len(fig.axes) >= 2
        plt.close(fig)

    def test_visualize_empty_palette(self):
        with pytest.raises(ValueError):
            visualize_palette([], show=False)


class TestMain:
    def test_prints_report(self, capsys):
        assert main(['-n', '3', '--no-show']) == 0
        out = capsys.readouterr().out
        assert 'COLOR PALETTE STATISTICS' in out
        assert '#000000' in out

    def test_saves_visualization(self, tmp_path):
        output = tmp_path / 'palette.png'
        assert main(['-n', '2', '--no-show', '--output', str(output)]) == 0
        assert output.exists()
        plt.close('all')

    def test_saves_gamut_slice_next_to_output(self, tmp_path, capsys):
        output = tmp_path / 'palette.png'
        assert main(['-n', '2', '--no-show', '--output', str(output), '--slice', '50']) == 0
        assert output.exists()
        assert (tmp_path / 'palette_L50.png').exists()
        assert 'Gamut slice saved to' in capsys.readouterr().out
        plt.close('all')

    def test_slice_without_output_or_window_draws_nothing(self):
        plt.close('all')
        assert main(['-n', '1', '--no-show', '--slice', '50']) == 0
        assert plt.get_fignums() == []

    def test_extends_existing_colors(self, capsys):
        assert main(['-n', '1', '--no-show', '--existing', '#ff0000', 'lab(50,0,0)']) == 0
        out = capsys.readouterr().out
        assert 'Color 3: ' in out
        assert 'Color 4: ' not in out

    def test_rejects_unknown_color(self):
        with pytest.raises(SystemExit) as excinfo:
            main(['--existing', 'bogus', '--no-show'])
        assert excinfo.value.code == 2
