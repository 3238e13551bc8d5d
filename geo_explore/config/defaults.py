# geo_explore/config/defaults.py
"""Default configuration values for both analysis pipelines"""

from pathlib import Path

# Project path
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / 'data'
LOGS_DIR = PROJECT_ROOT / 'logs'
OUTPUT_DIR = PROJECT_ROOT / 'outputs'

PATHS = {
    'project_root': str(PROJECT_ROOT),
    'data_dir': str(DATA_DIR),
    'logs_dir': str(LOGS_DIR),
    'output_dir': str(OUTPUT_DIR),
}

LOGGING = {
    'level': 'INFO',
    'console': True,
    'file': True,
    'log_file': 'geo_explore.log',
    'max_file_size': 10 * 1024 * 1024,  # 10MB
    'backup_count': 3,
}

# Spatial point pattern pipeline
POINT_PATTERN = {
    'points_layer': 'points',
    'window_layer': 'boundary',
    'target_epsg': 32610,  # UTM zone 10N
    'assume_epsg': 4326,   # used only when a layer carries no CRS
    'mark_columns': [],
    'density': {
        'sigmas': [500.0, 1000.0, 2000.0],  # metres; try several
        'dimyx': 128,
    },
    'envelope': {
        'functions': ['G', 'L'],
        'nsim': 99,
        'nsim_l': 39,  # L is far more expensive than G
        'nrank': 1,
        'n_r': 128,
        'seed': 42,
        'n_workers': 1,
    },
}

# Time series pipeline
TIME_SERIES = {
    'date_column': 'Date',
    'date_format': '%m/%d/%Y',
    'value_column': 'value',
    'key_column': None,
    'granularity': 'month',
    'aggregate_func': 'mean',
    'range': {
        'start': None,
        'end': None,
    },
    'rolling': {
        'func': 'mean',
        'before': 3,
        'after': 3,
    },
    'autocorrelation': {
        'max_lag': 24,
    },
    'decomposition': {
        'seasonal_window': 'periodic',
        'period': None,
        'robust': False,
    },
}

PLOTTING = {
    'mode': 'static',  # static, interactive
    'figsize': [10, 7],
    'dpi': 150,
    'cmap': 'viridis',
    'basemap': False,
    'save': True,
}
