#!/usr/bin/env python3
"""
Generate palettes of mutually distinguishable colors with maximal CIEDE2000 distance.

Each new color is the point of a discretized L*a*b* grid, inside the RGB gamut,
whose distance to the nearest color already in the palette is the greatest.
"""

import argparse
import functools
import os
import sys

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from color_difference import ciede2000, distance_matrix
from color_spaces import (
    Lab, convert, Hsl, lab_to_rgb, parse_color, rgb_clamp, rgb_is_valid,
    rgb_to_hex, to_lab,
)

# Search grid: L* every 5 units, a* and b* on a 64x64 grid over [-128, 128)
LIGHTNESS_STEPS = tuple(range(0, 100, 5))
DOMAIN_RADIUS = 128
REGIONS_PER_ROW = 64

BLACK = Lab(0.0, 0.0, 0.0)
WHITE = Lab(100.0, 0.0, 0.0)


class NoFeasibleColorError(ValueError):
    """Raised when no grid point of the search lies inside the RGB gamut."""


@functools.lru_cache(maxsize=8)
def _feasible_candidates(lightness_values, regions_per_row, domain_radius):
    """Grid points (row-major: L, then a*, then b*) that convert to a valid RGB."""
    region_radius = domain_radius * 2 / regions_per_row
    axis = np.arange(regions_per_row) * region_radius - domain_radius

    L, A, B = np.meshgrid(np.asarray(lightness_values, dtype=float), axis, axis,
                          indexing='ij')
    grid = np.stack([L.ravel(), A.ravel(), B.ravel()], axis=-1)

    candidates = grid[rgb_is_valid(lab_to_rgb(grid))]
    candidates.flags.writeable = False
    return candidates


def generate_color(existing=(), lightness_values=LIGHTNESS_STEPS,
                   regions_per_row=REGIONS_PER_ROW, domain_radius=DOMAIN_RADIUS):
    """Find the grid color farthest (CIEDE2000) from its nearest palette color.

    ``existing`` may hold colors of any type; they are converted to Lab first.
    With an empty palette every candidate is unconstrained and the first in-gamut
    grid point wins. Ties go to the first candidate in grid order.
    """
    palette = [to_lab(color) for color in existing]
    candidates = _feasible_candidates(tuple(lightness_values), regions_per_row,
                                      domain_radius)
    if len(candidates) == 0:
        raise NoFeasibleColorError("No grid point lies inside the RGB gamut")

    nearest = np.full(len(candidates), np.inf)
    for color in palette:
        nearest = np.minimum(nearest, ciede2000(candidates, color))

    # argmax returns the first index reaching the maximum
    best = int(np.argmax(nearest))
    return Lab(*(float(c) for c in candidates[best]))


def generate_palette(n, callback=None):
    """Generate ``n`` colors: black, white, then farthest-point picks.

    ``callback(palette)`` is called with the palette so far after every color.
    """
    if n < 0:
        raise ValueError(f"Palette size must be non-negative, got {n}")

    palette = []
    for i in range(n):
        if i == 0:
            lab = BLACK
        elif i == 1:
            lab = WHITE
        else:
            lab = generate_color(palette)
        palette.append(lab)
        if callback is not None:
            callback(list(palette))
    return palette


def extend_palette(existing, count, callback=None):
    """Add ``count`` farthest-point colors to an existing palette.

    Returns only the new colors, in the order they were generated.
    """
    if count < 0:
        raise ValueError(f"Color count must be non-negative, got {count}")

    palette = [to_lab(color) for color in existing]
    added = []
    for _ in range(count):
        lab = generate_color(palette)
        palette.append(lab)
        added.append(lab)
        if callback is not None:
            callback(list(added))
    return added


def palette_statistics(palette):
    """Minimum, maximum and mean pairwise CIEDE2000 distances, or None below two colors."""
    if len(palette) < 2:
        return None
    matrix = distance_matrix(palette)
    distances = matrix[np.triu_indices(len(palette), k=1)]
    return {
        'min': float(np.min(distances)),
        'max': float(np.max(distances)),
        'mean': float(np.mean(distances)),
    }


def display_rgb(lab):
    """RGB used to show a Lab color (clamped into the gamut)."""
    return rgb_clamp(lab_to_rgb(lab))


def lab_slice_image(lightness, size=256, domain_radius=DOMAIN_RADIUS):
    """RGBA image of the a*/b* plane at ``lightness``; out-of-gamut pixels are transparent.

    Columns go from a* = -radius to the right, rows from b* = +radius downwards.
    """
    step = domain_radius * 2 / size
    a_axis = np.arange(size) * step - domain_radius
    b_axis = domain_radius - step - np.arange(size) * step
    A, B = np.meshgrid(a_axis, b_axis)
    lab = np.stack([np.full_like(A, float(lightness)), A, B], axis=-1)

    rgb = lab_to_rgb(lab)
    valid = rgb_is_valid(rgb)

    image = np.zeros((size, size, 4))
    image[..., :3] = np.clip(rgb, 0, 255) / 255.0
    image[..., 3] = valid.astype(float)
    image[~valid, :3] = 0.0
    return image


def draw_lab_slice(lightness, ax=None, size=256):
    """Draw the in-gamut a*/b* plane for one lightness value."""
    if ax is None:
        _, ax = plt.subplots(figsize=(6, 6))
    extent = (-DOMAIN_RADIUS, DOMAIN_RADIUS, -DOMAIN_RADIUS, DOMAIN_RADIUS)
    ax.imshow(lab_slice_image(lightness, size=size), extent=extent)
    ax.set_xlabel('a*')
    ax.set_ylabel('b*')
    ax.set_title(f"L* = {lightness:g}", fontsize=12, fontweight='bold')
    return ax


def visualize_palette(palette, output=None, show=True):
    """Plot swatches and the CIEDE2000 distance matrix of a Lab palette."""
    if not palette:
        raise ValueError("Cannot visualize an empty palette")

    n_colors = len(palette)
    fig, axes = plt.subplots(2, 1, figsize=(max(6, 2 * n_colors), 8),
                             gridspec_kw={'height_ratios': [2, 1]})

    # Top plot: Color swatches
    ax1 = axes[0]
    ax1.set_xlim(0, n_colors)
    ax1.set_ylim(0, 1)
    ax1.set_aspect('equal')

    for i, lab in enumerate(palette):
        rgb = display_rgb(lab)
        rect = Rectangle((i, 0), 1, 1, facecolor=np.asarray(rgb) / 255.0,
                         edgecolor='black', linewidth=2)
        ax1.add_patch(rect)

        text_color = 'white' if lab.l < 50 else 'black'
        ax1.text(i + 0.5, 0.75, rgb_to_hex(rgb), ha='center', va='center',
                 fontsize=11, fontweight='bold', color=text_color, family='monospace')
        ax1.text(i + 0.5, 0.55, str(rgb), ha='center', va='center',
                 fontsize=8, color=text_color, family='monospace')
        ax1.text(i + 0.5, 0.40, str(convert(rgb, Hsl)), ha='center', va='center',
                 fontsize=8, color=text_color, family='monospace')
        ax1.text(i + 0.5, 0.25, f"L*a*b* {lab.l:.0f}/{lab.a:.0f}/{lab.b:.0f}",
                 ha='center', va='center', fontsize=8, color=text_color)

    ax1.set_xticks([])
    ax1.set_yticks([])
    ax1.set_title("Farthest-Point CIEDE2000 Palette", fontsize=14, fontweight='bold',
                  pad=20)

    # Bottom plot: Distance matrix
    ax2 = axes[1]
    matrix = distance_matrix(palette)
    im = ax2.imshow(matrix, cmap='YlOrRd', aspect='auto')
    ax2.set_xticks(range(n_colors))
    ax2.set_yticks(range(n_colors))
    ax2.set_xticklabels([rgb_to_hex(display_rgb(lab)) for lab in palette],
                        rotation=45, fontsize=7)
    ax2.set_yticklabels([rgb_to_hex(display_rgb(lab)) for lab in palette], fontsize=7)
    ax2.set_title("CIEDE2000 Distance Matrix", fontsize=12, fontweight='bold', pad=15)

    cbar = plt.colorbar(im, ax=ax2)
    cbar.set_label('ΔE 2000', rotation=270, labelpad=20)

    for i in range(n_colors):
        for j in range(n_colors):
            if i != j:
                ax2.text(j, i, f'{matrix[i, j]:.1f}', ha="center", va="center",
                         color="black", fontsize=8)

    plt.tight_layout()

    if output:
        fig.savefig(output, dpi=150, bbox_inches='tight')
        print(f"\nVisualization saved to: {output}")
    if show:
        plt.show()
    return fig


def print_palette_report(palette):
    """Print every color and the pairwise distance summary."""
    print("\n" + "=" * 70)
    print("COLOR PALETTE STATISTICS")
    print("=" * 70)

    for i, lab in enumerate(palette, 1):
        rgb = display_rgb(lab)
        print(f"Color {i}: {rgb_to_hex(rgb)} | {rgb} | {convert(rgb, Hsl)}")
        print(f"  L*={lab.l:.1f} a*={lab.a:.1f} b*={lab.b:.1f}")

    stats = palette_statistics(palette)
    if stats is None:
        print("=" * 70)
        return

    print("\n" + "-" * 70)
    print("PAIRWISE CIEDE2000 DISTANCES:")
    print("-" * 70)
    matrix = distance_matrix(palette)
    for i in range(len(palette)):
        for j in range(i + 1, len(palette)):
            print(f"  C{i + 1} ↔ C{j + 1}: {matrix[i, j]:.2f}")

    print("\n" + "-" * 70)
    print("SUMMARY STATISTICS:")
    print("-" * 70)
    print(f"  Minimum: {stats['min']:.2f}")
    print(f"  Maximum: {stats['max']:.2f}")
    print(f"  Average: {stats['mean']:.2f}")
    print("=" * 70)


def build_parser():
    parser = argparse.ArgumentParser(
        prog='color-palette-gen',
        description="Generate a palette of colors with maximal CIEDE2000 distance.")
    parser.add_argument('-n', '--colors', type=int, default=6,
                        help="number of colors to generate (default: 6)")
    parser.add_argument('--existing', nargs='+', default=[], metavar='COLOR',
                        help="colors to extend instead of starting from black and "
                             "white, e.g. '#ff0000' or 'lab(50,20,-30)'")
    parser.add_argument('--output', metavar='PATH',
                        help="save the palette visualization to PATH")
    parser.add_argument('--no-show', action='store_true',
                        help="do not open a plot window")
    parser.add_argument('--slice', type=float, metavar='L',
                        help="also draw the in-gamut a*/b* plane at lightness L; with "
                             "--output it is saved as <name>_L<L><ext>")
    return parser


def main(argv=None):
    """Main function."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.colors < 0:
        parser.error("--colors must be non-negative")

    existing = []
    for text in args.existing:
        color = parse_color(text)
        if color is None:
            parser.error(f"unrecognized color: {text!r}")
        existing.append(to_lab(color))

    print(f"Generating {args.colors} colors with maximal CIEDE2000 distance...")

    def progress(colors):
        lab = colors[-1]
        print(f"Color {len(colors):3d}: {rgb_to_hex(display_rgb(lab))} "
              f"(L*={lab.l:.0f}, a*={lab.a:.0f}, b*={lab.b:.0f})")

    try:
        if existing:
            palette = existing + extend_palette(existing, args.colors, callback=progress)
        else:
            palette = generate_palette(args.colors, callback=progress)
    except NoFeasibleColorError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print_palette_report(palette)

    show = not args.no_show
    if palette and (show or args.output):
        visualize_palette(palette, output=args.output, show=False)
    if args.slice is not None and (show or args.output):
        ax = draw_lab_slice(args.slice)
        if args.output:
            stem, ext = os.path.splitext(args.output)
            slice_output = f"{stem}_L{args.slice:g}{ext or '.png'}"
            ax.figure.savefig(slice_output, dpi=150, bbox_inches='tight')
            print(f"Gamut slice saved to: {slice_output}")
    if show:
        plt.show()
    return 0


if __name__ == "__main__":
    sys.exit(main())
