"""
Path configuration for RouteWise
================================
Centralizes all file paths used throughout the project.
"""

import os

# Get the project root (one level up from routewise/)
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Directories
DATA_DIR = os.path.join(PROJECT_ROOT, 'data')
CONFIG_DIR = os.path.join(PROJECT_ROOT, 'config')
REPORTS_DIR = os.path.join(PROJECT_ROOT, 'reports')

# Ensure directories exist
for dir_path in [DATA_DIR, CONFIG_DIR, REPORTS_DIR]:
    os.makedirs(dir_path, exist_ok=True)

# Data files (history exports, route config, today's volumes)
def get_data_path(filename):
    return os.path.join(DATA_DIR, filename)

# Config files
def get_config_path(filename):
    return os.path.join(CONFIG_DIR, filename)

# Report files
def get_report_path(filename):
    return os.path.join(REPORTS_DIR, filename)

# Specific file paths (for convenience)
HISTORY_FILE = get_data_path('route_history.csv')
ROUTE_CONFIG_FILE = get_data_path('route_config.json')
TODAY_VOLUMES_FILE = get_data_path('today_volumes.json')
WAYPOINT_HISTORY_FILE = get_data_path('waypoint_history.json')

ENGINE_SETTINGS_FILE = get_config_path('engine_settings.json')
PREDICTION_LOG_FILE = get_report_path('prediction_log.csv')
