"""
Task subsystem.

Components:
- task_models.py: data structures (TaskRecord, RunnerState, LoopState, events)
- task_store.py: in-memory FIFO store with monotonic ids
- trigger.py: debounced trigger for the dispatch loop
- notifier.py: typed, ordered event fan-out
- task_runner.py: the dispatch loop and start/pause/stop state machine
- task_api.py: small high-level helpers used by callers
"""
