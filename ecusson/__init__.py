"""
Ecusson - Source Package

A personal daily-spending tracker: tap to add what you spent today, and
see today, the last 28 days and the year so far at a glance, in the app,
on a home screen widget and in a live activity.

DESIGN PRINCIPLES:
1. One ledger, one writer per process
2. The shared blob is the only channel between processes
3. Readers never fail to render (unreadable ledger = empty ledger)
4. Totals are always recomputed from the log, never cached
5. Host services are optional, best-effort capabilities
"""

__version__ = "1.0.0"
__author__ = "Ecusson Team"
