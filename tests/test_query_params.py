"""
Test cases for rendering store query predicates into REST query parameters.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from datasources.query import QueryParams


def test_full_query_rendering():
    query = QueryParams(
        eq={"is_active": True},
        in_={"priority": ["p1", "p2"]},
        gte={"triggered_at": "2025-12-20T08:00:00+00:00"},
        lte={"triggered_at": "2025-12-20T09:00:00+00:00"},
        limit=50,
    ).order_by("triggered_at", ascending=False)
    assert query.to_params() == [
        ("select", "*"),
        ("is_active", "eq.true"),
        ("priority", "in.(p1,p2)"),
        ("triggered_at", "gte.2025-12-20T08:00:00+00:00"),
        ("triggered_at", "lte.2025-12-20T09:00:00+00:00"),
        ("order", "triggered_at.desc"),
        ("limit", "50"),
    ]


def test_reserved_characters_are_quoted():
    query = QueryParams(select="dt", in_={"source": ["a,b", "plain"]}, eq={"team": 'x "y"'})
    params = dict(query.to_params())
    assert params["source"] == 'in.("a,b",plain)'
    assert params["team"] == 'eq."x \\"y\\""'


def test_empty_in_list_is_dropped():
    assert QueryParams(in_={"severity": []}).to_params() == [("select", "*")]
