ALLOW_ORIGINS_MAP = {
    "local": ["*"],
    "dev": [
        "http://localhost:3000",
        "http://localhost:5173",
    ],
    "prod": [
        "http://localhost:3000",
    ],
}

API_PREFIX = "/api"

# NOTE: IP당 15분 동안 최대 100회 (/api 경로만 집계)
RATE_LIMIT_WINDOW_SECONDS = 15 * 60
RATE_LIMIT_MAX_REQUESTS = 100
