# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Use .env (local, gitignored) for machine-specific values.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKTRACKER_APP_NAME": "App display name (default: task-tracker).",
    "TASKTRACKER_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Storage
    "TASKTRACKER_DATA_DIR": "Local data directory (default: .local/task-tracker).",
    "TASKTRACKER_STORE": "Task store backend: memory | json (default: memory).",
    "TASKTRACKER_TASKS_PATH": "Task JSON file for the json backend (default: <data_dir>/tasks.json).",
    "TASKTRACKER_USERS_PATH": "User JSON file (default: <data_dir>/users.json).",
    # HTTP server
    "TASKTRACKER_SERVER_ENABLED": "Start the REST API + HTML views (true/false, default: true).",
    "TASKTRACKER_HTTP_HOST": "Bind address (default: 127.0.0.1).",
    "TASKTRACKER_HTTP_PORT": "Bind port (default: 8080).",
    # Console
    "TASKTRACKER_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    "TASKTRACKER_CONSOLE_TRANSPORT": "local (in-process calls) | http (REST API). Default: local.",
    "TASKTRACKER_API_BASE_URL": "REST API used by the http transport (default: http://<host>:<port>).",
}
