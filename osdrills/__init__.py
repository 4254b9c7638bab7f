"""Small models of operating-system mechanisms: atomics, locks, cooperative scheduling, async patterns and paging."""

__version__ = "0.1.0"