# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for LearnFeed.

This package contains domain services that encapsulate business logic.

Domains:
    activity: Activity feed collection, ranking, bucketing and classification.
"""
