"""Default provider endpoint, storage locations and refresh timing."""

DEFAULT_FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast"
API_KEY_ENV = "OPENWEATHERMAP_API_KEY"

DEFAULT_REFRESH_INTERVAL = 300.0  # 5 minutes

DEFAULT_DB_PATH = "data/weatherboard.db"
DEFAULT_STORAGE_KEY = "cities"
DEFAULT_CONFIG = "weatherboard.yaml"
