"""
Beacon Map Visualization

Interactive 3-D view of a merged beacon map and the recovered scanner
positions using Plotly.
"""

from typing import Optional

import numpy as np
import plotly.graph_objects as go

from ..alignment.scanner_merge import MergeResult


class BeaconMapVisualizer:
    """Plot beacons and scanner origins of a MergeResult."""

    def __init__(self, marker_size: int = 3):
        self.marker_size = marker_size

    def build_figure(self, result: MergeResult, title: Optional[str] = None) -> go.Figure:
        beacons = result.beacons.to_array()
        positions = result.scanner_positions
        scanners = np.array(list(positions.values()), dtype=np.int64).reshape(-1, 3)

        fig = go.Figure()
        fig.add_trace(go.Scatter3d(
            x=beacons[:, 0], y=beacons[:, 1], z=beacons[:, 2],
            mode='markers',
            marker=dict(size=self.marker_size, color='steelblue'),
            name=f'Beacons ({len(beacons)})',
        ))
        fig.add_trace(go.Scatter3d(
            x=scanners[:, 0], y=scanners[:, 1], z=scanners[:, 2],
            mode='markers+text',
            marker=dict(size=self.marker_size * 2, color='crimson', symbol='diamond'),
            text=[f'scanner {s}' for s in positions],
            name=f'Scanners ({len(scanners)})',
        ))
        fig.update_layout(
            title=title or f'Unified beacon map (anchor: scanner {result.anchor})',
            scene=dict(xaxis_title='X', yaxis_title='Y', zaxis_title='Z', aspectmode='data'),
        )
        return fig

    def show(self, result: MergeResult, title: Optional[str] = None) -> None:
        self.build_figure(result, title=title).show(renderer="browser")
