"""
Civil (business) time handling: fixed-offset conversion between UTC instants and the business zone.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.timeutil.civil import CIVIL_FORMAT, TimeConverter, default_converter, parse_instant

__all__ = ["CIVIL_FORMAT", "TimeConverter", "default_converter", "parse_instant"]
