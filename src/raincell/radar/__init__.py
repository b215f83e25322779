"""Radar data processing modules.

- locator: Find composite files for a time window
- projection: Rebuild the grid projection from the grid-mapping record
- loader: Read composite files into RadarFrame objects
- roi: Restrict frames to a longitude/latitude box
- binarizer: Quality mask and precipitation threshold
- cell_segmenter: Connected-component labelling
- cell_analyzer: Cell property extraction
"""

from raincell.radar.frame import PrecipitationCell, ProjectionDescriptor, RadarFrame
from raincell.radar.locator import locate_radar_files
from raincell.radar.projection import resolve_projection
from raincell.radar.loader import RadarFrameBuilder, load_radar_frame
from raincell.radar.roi import BoundingBox, select_region
from raincell.radar.binarizer import RadarBinarizer, binarize
from raincell.radar.cell_segmenter import RadarCellSegmenter
from raincell.radar.cell_analyzer import RadarCellAnalyzer, extract_cells

__all__ = [
    "PrecipitationCell",
    "ProjectionDescriptor",
    "RadarFrame",
    "locate_radar_files",
    "resolve_projection",
    "RadarFrameBuilder",
    "load_radar_frame",
    "BoundingBox",
    "select_region",
    "RadarBinarizer",
    "binarize",
    "RadarCellSegmenter",
    "RadarCellAnalyzer",
    "extract_cells",
]
