"""`raincell` - precipitation cell detection from radar accumulation composites.

Subpackages:
- radar: File location, georeferencing, raster building, ROI, binarization, cell extraction
- pipeline: Per-file processor and batch orchestrator
- schemas: Pydantic configuration
- contracts: Stage invariants
"""

__version__ = "0.1.0"
