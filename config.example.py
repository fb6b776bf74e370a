# config.example.py

"""
Documentation-only module (safe to commit).

Settings are loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKRUNNER_APP_NAME": "App display name (default: taskrunner).",
    "TASKRUNNER_LOG_LEVEL": "Console logging level (default: INFO).",
    "TASKRUNNER_LOG_DIR": "Directory for taskrunner.log (default: unset, console only).",
    # Default runner options
    "TASKRUNNER_CONCURRENCY": "Max tasks dispatched per batch, >= 1 (default: 1).",
    "TASKRUNNER_INTER_BATCH_DELAY_MS": (
        "Debounce window and pause before every batch, in ms, >= 0 (default: 500)."
    ),
    "TASKRUNNER_AUTO_START": "Start the runner on construction (true/false, default: true).",
    "TASKRUNNER_RETRY_ON_FAILURE": (
        "Re-submit failed payloads at the tail of the queue, without limit (true/false, default: false)."
    ),
}
