"""Scheduler module for recurring gift claims.

Schedule overview (defaults, local time):
  - every 10 minutes at :30 seconds - 10 minute chest
  - every 4 hours at 00:30          - 4 hour chest
  - 10:00:30 daily                  - 24 hour chest and the daily bundles,
                                      one job per bundle
"""
