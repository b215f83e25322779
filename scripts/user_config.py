"""raincell user configuration.

This is the user-facing configuration file. Modify settings here to point
the pipeline at a composite archive and a time window. Expert defaults
live in raincell.schemas.param.

Usage:
    from raincell.schemas import load_user_config
    from raincell.pipeline import PipelineOrchestrator

    config = load_user_config("scripts/user_config.py")
    results = PipelineOrchestrator(config).start()
"""

CONFIG = {
    # ========================================================================
    # ARCHIVE & TIME WINDOW
    # ========================================================================
    "BASE_DIR": "/data/meteo-france/composites",  # <base>/YYYYMM/YYYYMMDD/*.nc
    "START_TIME": "2025-06-02 15:00",  # first accumulation start (inclusive)
    "END_TIME": "2025-06-02 23:00",    # last accumulation start (inclusive)
    "TIME_STEP_MINUTES": 5,

    # ========================================================================
    # BINARIZATION
    # ========================================================================
    "QUALITY_THRESHOLD": 10,        # QUALITY code, 0-100
    "PRECIPITATION_THRESHOLD": 50,  # ACRR, hundredths of mm (0.5 mm)

    # ========================================================================
    # REGION OF INTEREST (lon_min, lon_max, lat_min, lat_max)
    # ========================================================================
    "ROI": (-3.0, 9.0, 43.0, 49.0),  # the Alps

    # ========================================================================
    # CELLS & OPERATION
    # ========================================================================
    "MIN_CELL_PIXELS": 1,           # 1 keeps every 8-connected component
    "FAILURE_POLICY": "fail_fast",  # or "skip_file"
    "LOG_LEVEL": "INFO",
    "LOG_FILE": None,
}
