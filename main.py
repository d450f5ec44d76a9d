"""
Metrics Manager API Server

Runs the metrics engine inside a small FastAPI host exposing its latest values
and health status.

Environment Variables:
    METRICS_ENABLE: Enable the metrics engine (default: false)
    METRICS_INTERVAL_MS: Time between two dispatch passes in ms (default: 60000)
    METRICS_VERBOSE: Emit extended meter/histogram/timer fields (default: false)
    METRICS_LISTENERS: Comma separated listener identifiers (default: console)
    METRICS_PROVIDERS: Comma separated built-in bundles (default: gc,memory,threads,process)
    APPLICATION_ID: Identifier passed to listeners
    METRICS_LOG_FILE: Optional rotating log file path
    HOST: Server host address (default: 0.0.0.0)
    PORT: Server port (default: 8005)
    DEBUG: Enable debug mode with auto-reload (default: false)

CLI Usage:
    python main.py

    # Sample every 5 seconds to the console and the /api/v1/metrics endpoint
    METRICS_ENABLE=true METRICS_INTERVAL_MS=5000 METRICS_LISTENERS=console,memory python main.py
"""

import uvicorn

from metrics_manager.core.config import settings

if __name__ == "__main__":
    port = settings.PORT
    host = settings.HOST

    print(f"Starting {settings.PROJECT_NAME} on {host}:{port}")
    print(f"Metrics: {'enabled' if settings.METRICS_ENABLE else 'disabled'}")

    uvicorn.run(
        "metrics_manager.app:app",
        host=host,
        port=port,
        reload=bool(settings.DEBUG),
    )
