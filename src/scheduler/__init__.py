"""Scheduler module for running the stock trackers in-process.

The primary trigger for the trackers is an external cron-like job running
``python -m src.cli check <tracker_id>``. When ``SCHEDULER_ENABLED`` is set,
the API server also runs every registered tracker on an interval
(``CHECK_INTERVAL_MINUTES``, default 30).
"""
