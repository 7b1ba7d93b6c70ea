#!/usr/bin/env python3
"""
Streamlit web app for interactive farthest-point palette generation.
"""

import streamlit as st
import numpy as np
import matplotlib.pyplot as plt

from color_difference import distance_matrix
from color_palette_generator import (
    NoFeasibleColorError, display_rgb, draw_lab_slice, extend_palette,
    generate_palette, palette_statistics,
)
from color_spaces import Hsl, convert, parse_color, rgb_to_hex, to_lab

st.set_page_config(page_title="Color Palette Generator", layout="wide")

st.title("🎨 Distinguishable Color Palette Generator")

col1, col2 = st.columns(2)

with col1:
    st.subheader("Configuration")

    existing_colors_input = st.text_area(
        "Existing colors (comma or newline separated):",
        value="",
        height=100,
        help="Hex codes like #FF8800 or notations like lab(50,20,-30). "
             "When given, the palette is grown from these colors instead of black and white."
    )

    n_colors = st.slider(
        "Number of colors to generate:",
        min_value=1,
        max_value=32,
        value=6,
    )

    # Parse existing colors
    existing_colors = []
    for text in existing_colors_input.replace("\n", ",").split(","):
        text = text.strip()
        if not text:
            continue
        color = parse_color(text)
        if color is None:
            st.error(f"Unrecognized color: {text}")
            continue
        lab = to_lab(color)
        if lab not in existing_colors:
            existing_colors.append(lab)

    generate = st.button("Generate palette")

with col2:
    st.subheader("Gamut slice")
    slice_lightness = st.slider("Lightness (L*)", min_value=0, max_value=100, value=50)
    fig, ax = plt.subplots(figsize=(4, 4))
    draw_lab_slice(slice_lightness, ax=ax, size=128)
    st.pyplot(fig)
    plt.close(fig)

if generate:
    progress = st.progress(0.0, text="Generating colors...")

    def _ui_callback(palette):
        progress.progress(len(palette) / n_colors,
                          text=f"Generated {len(palette)} of {n_colors} colors")

    try:
        if existing_colors:
            st.session_state['palette'] = existing_colors + extend_palette(
                existing_colors, n_colors, callback=_ui_callback)
        else:
            st.session_state['palette'] = generate_palette(n_colors, callback=_ui_callback)
    except NoFeasibleColorError as e:
        st.error(str(e))

palette = st.session_state.get('palette')

if palette:
    # Display color swatches as native HTML
    st.subheader("Generated Color Palette")
    cols = st.columns(len(palette))
    for col, lab in zip(cols, palette):
        with col:
            rgb = display_rgb(lab)
            hex_code = rgb_to_hex(rgb)
            text_color = 'white' if lab.l < 50 else '#333333'
            swatch_html = f"""
            <div style="
                background-color: {hex_code};
                border: 2px solid #333;
                border-radius: 8px;
                padding: 12px;
                text-align: center;
                color: {text_color};
                font-family: monospace;
                box-shadow: 0 2px 8px rgba(0,0,0,0.2);
                min-height: 140px;
                display: flex;
                flex-direction: column;
                justify-content: flex-end;
            ">
                <div style="font-size: 12px; font-weight: bold; margin-bottom: 4px;">{hex_code}</div>
                <div style="font-size: 9px; margin-bottom: 4px;">{rgb}</div>
                <div style="font-size: 9px;">{convert(rgb, Hsl)}</div>
            </div>
            """
            st.markdown(swatch_html, unsafe_allow_html=True)

    # Color details table
    st.subheader("Color Details")
    color_data = []
    for lab in palette:
        rgb = display_rgb(lab)
        color_data.append({
            "Hex": rgb_to_hex(rgb),
            "RGB": str(rgb),
            "HSL": str(convert(rgb, Hsl)),
            "L*": f"{lab.l:.1f}",
            "a*": f"{lab.a:.1f}",
            "b*": f"{lab.b:.1f}",
        })
    st.dataframe(color_data, width="stretch")

    # Distance matrix
    st.subheader("CIEDE2000 Distance Matrix")
    matrix = distance_matrix(palette)
    max_distance = np.max(matrix)
    html_parts = ['''
<style>
.distance-matrix {
    border-collapse: collapse;
    margin: 20px auto;
    font-family: monospace;
}
.distance-matrix td, .distance-matrix th {
    border: 1px solid #ddd;
    text-align: center;
    min-width: 50px;
    height: 50px;
    padding: 4px;
}
.distance-matrix .color-cell {
    width: 40px;
    height: 40px;
    border: 2px solid #333;
    margin: 0 auto;
}
.distance-matrix .diagonal {
    background-color: #f0f0f0;
    color: #999;
}
</style>
<table class="distance-matrix">
<thead>
<tr>
<th></th>
''']
    hex_codes = [rgb_to_hex(display_rgb(lab)) for lab in palette]
    for hex_code in hex_codes:
        html_parts.append(f'<th><div class="color-cell" style="background-color: {hex_code};"></div></th>')
    html_parts.append('</tr>\n</thead>\n<tbody>\n')
    for i, hex_i in enumerate(hex_codes):
        html_parts.append(f'<tr><th><div class="color-cell" style="background-color: {hex_i};"></div></th>')
        for j in range(len(hex_codes)):
            if i == j:
                html_parts.append('<td class="diagonal">&mdash;</td>')
                continue
            intensity = matrix[i, j] / max_distance if max_distance > 0 else 0
            g = int(255 * (1 - intensity * 0.7))
            b = int(100 * (1 - intensity))
            html_parts.append(f'<td style="background-color: rgb(255, {g}, {b});">{matrix[i, j]:.1f}</td>')
        html_parts.append('</tr>\n')
    html_parts.append('</tbody>\n</table>')
    st.markdown(''.join(html_parts), unsafe_allow_html=True)

    # Distance statistics
    stats = palette_statistics(palette)
    if stats is not None:
        st.subheader("Distance Statistics")
        stat_cols = st.columns(3)
        with stat_cols[0]:
            st.metric("Min Pairwise Distance", f"{stats['min']:.2f}")
        with stat_cols[1]:
            st.metric("Max Pairwise Distance", f"{stats['max']:.2f}")
        with stat_cols[2]:
            st.metric("Avg Pairwise Distance", f"{stats['mean']:.2f}")
