"""LearnFeed Backend.

Activity feed aggregation for learner and instructor event logs: collects
both populations, ranks events by recency, groups them into day buckets
and classifies each event for display.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
