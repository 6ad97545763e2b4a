"""
Narrative summaries of anomalies and their correlated alerts.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.summary.narrative import AnomalyContext, build_context, build_messages, parse_analysis, summarize

__all__ = ["AnomalyContext", "build_context", "build_messages", "parse_analysis", "summarize"]
