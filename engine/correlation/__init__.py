"""
Correlation of operational alerts with metric anomalies through declarative mapping rules, and the ranking applied to the correlated list shown during incident investigation.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.correlation.rules import correlate, rule_matches
from engine.correlation.ranking import rank

__all__ = ["correlate", "rank", "rule_matches"]
