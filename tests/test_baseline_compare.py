"""
Test cases for percentage deltas between current observations and baselines.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest

from engine.baseline import delta, deltas


def test_delta_percentage_convention():
    assert delta(80, 100) == pytest.approx(-20.0)
    assert delta(150, 100) == pytest.approx(50.0)


def test_delta_unavailable_baseline():
    assert delta(10, None) is None
    assert delta(10, 0) is None
    assert delta(0, 0) is None


def test_deltas_keep_labels_and_none():
    result = deltas(50, {"day1": 100, "day7": None})
    assert result == {"day1": pytest.approx(-50.0), "day7": None}
