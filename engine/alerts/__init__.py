"""
Alert matching package.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.alerts.filters import AlertFilters, apply_filters, sanitize_search_text
from engine.alerts.matcher import AlertMatcher
from engine.alerts.proximity import StoredAsCivil, StoredAsUtc, within_tolerance

__all__ = [
    "AlertFilters",
    "AlertMatcher",
    "StoredAsCivil",
    "StoredAsUtc",
    "apply_filters",
    "sanitize_search_text",
    "within_tolerance",
]
