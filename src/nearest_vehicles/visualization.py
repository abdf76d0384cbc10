#!/usr/bin/env python3
"""
Result visualization using folium maps.
"""

from typing import List, Sequence, Tuple
import logging
import folium
from folium.template import Template

from .geometry import ReferencePoint
from .metrics import QueryMetrics
from .nearest import QueryResult
from .records import PositionRecord

logger = logging.getLogger(__name__)

REFERENCE_COLOR = "#2E86AB"
RECORD_COLOR = "#D23C4C"


class NearestLegend(folium.MacroElement):
    """Legend showing how many reference points and results are drawn."""

    def __init__(self, metrics: QueryMetrics):
        super().__init__()
        self.query_count = metrics.query_count
        self.result_count = metrics.result_count

        self._template = Template(
            """
        {% macro html(this, kwargs) %}
        <div id="nearest-legend" style="
            position: fixed;
            bottom: 50px;
            left: 50px;
            width: 230px;
            background-color: white;
            border: 2px solid grey;
            z-index: 9999;
            font-size: 13px;
            padding: 12px;
            font-family: Arial, sans-serif;
            border-radius: 5px;
            box-shadow: 0 2px 5px rgba(0,0,0,0.2);
        ">
            <b>Legend</b><br>
            <div style="margin: 4px 0; line-height: 1.3;">
                <span style="color: #2E86AB; font-size: 18px;">&#9679;</span>
                Reference Points ({{ this.query_count }})
            </div>
            <div style="margin: 4px 0; line-height: 1.3;">
                <span style="color: #D23C4C; font-size: 18px;">&#9679;</span>
                Nearest Vehicles ({{ this.result_count }})
            </div>
        </div>
        {% endmacro %}
        """
        )


def record_to_html(record: PositionRecord, distance: float) -> str:
    """
    Format a record into HTML for popup display.

    Args:
        record: The record to format
        distance: Distance from its reference point in meters

    Returns:
        HTML-formatted string
    """
    return (
        f"<b>{record.registration}</b>"
        f"<br><b>Vehicle ID:</b> {record.vehicle_id}"
        f"<br><b>Recorded:</b> {record.recorded_at:%Y-%m-%d %H:%M:%S} UTC"
        f"<br><b>Position:</b> {record.latitude:.6f}, {record.longitude:.6f}"
        f"<br><b>Distance:</b> {distance:.0f} m"
    )


def _bounds(
    references: Sequence[ReferencePoint], results: Sequence[QueryResult]
) -> Tuple[float, float, float, float]:
    lats = [p.latitude for p in references] + [r.record.latitude for r in results]
    lons = [p.longitude for p in references] + [r.record.longitude for r in results]
    return min(lats), min(lons), max(lats), max(lons)


def create_results_map(
    references: Sequence[ReferencePoint],
    results: List[QueryResult],
    output_filename: str,
    metrics: QueryMetrics,
) -> None:
    """
    Create an interactive map of reference points and their nearest records,
    save as HTML.

    Args:
        references: Reference points that were searched around
        results: Results of find_nearest_for_all
        output_filename: Path where HTML map file should be saved
        metrics: QueryMetrics for the legend

    Raises:
        ValueError: If there are no reference points
    """
    if not references:
        raise ValueError("Cannot create map without reference points")

    south, west, north, east = _bounds(references, results)
    center_lat = (south + north) / 2
    center_lon = (west + east) / 2

    logger.debug(f"Creating map centered at ({center_lat:.4f}, {center_lon:.4f})")

    results_map = folium.Map(location=[center_lat, center_lon], tiles=None)

    folium.TileLayer(
        tiles="CartoDB positron",
        attr=(
            "&copy; <a href='https://www.openstreetmap.org/copyright'>OpenStreetMap</a> "
            "contributors &copy; <a href='https://carto.com/attributions'>CARTO</a>"
        ),
        name="Standard",
        control=True,
        show=True,
    ).add_to(results_map)

    folium.TileLayer(
        tiles="https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}",
        attr=(
            "Tiles &copy; Esri &mdash; Source: Esri, i-cubed, USDA, USGS, AEX, GeoEye, "
            "Getmapping, Aerogrid, IGN, IGP, UPR-EGP, and the GIS User Community"
        ),
        name="Satellite",
        control=True,
        show=False,
    ).add_to(results_map)

    folium.LayerControl().add_to(results_map)

    for point in references:
        folium.CircleMarker(
            [point.latitude, point.longitude],
            radius=6,
            color=REFERENCE_COLOR,
            fill=True,
            popup=f"Reference point {point.label}",
        ).add_to(results_map)

    for result in results:
        record = result.record
        folium.CircleMarker(
            [record.latitude, record.longitude],
            radius=4,
            color=RECORD_COLOR,
            fill=True,
            popup=folium.Popup(record_to_html(record, result.distance), max_width=300),
        ).add_to(results_map)

        reference = references[result.index]
        folium.PolyLine(
            [
                [reference.latitude, reference.longitude],
                [record.latitude, record.longitude],
            ],
            color=RECORD_COLOR,
            weight=2,
            opacity=0.6,
            dash_array="4",
        ).add_to(results_map)

    results_map.add_child(NearestLegend(metrics))
    results_map.fit_bounds([[south, west], [north, east]])
    results_map.save(output_filename)

    logger.debug(
        f"Map saved to {output_filename} with {metrics.query_count} reference points "
        f"and {metrics.result_count} results"
    )
