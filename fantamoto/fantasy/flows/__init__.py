"""
Prefect flows for the MotoGP sync pipeline.

Flows handle:
- Task orchestration
- Automatic retries of upstream calls
- Per-item error isolation
- SyncLog bookkeeping and scheduling

Structure:
- sync_riders.py: Rider roster sync
- sync_calendar.py: Season calendar sync
- sync_results.py: Race results sync and manual results entry
- calculate_scores.py: Team scoring for a race session
- orchestrator.py: SyncLog-wrapped jobs, results polling and cron schedules
"""
