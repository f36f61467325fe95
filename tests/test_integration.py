"""End-to-end scheduling cycles against a mock extender service."""

import json

import httpx
import pytest

from scheduler_extender import (
    CandidateList,
    ExtenderLogicError,
    HostPriority,
    PlacementRequest,
    SchedulerExtender,
    TransportError,
)

CONFIG = {
    "url_prefix": "http://ext",
    "filter_verb": "filter",
    "prioritize_verb": "prioritize",
    "weight": 2,
}


class TestSchedulingCycle:
    def test_filter_then_prioritize(self, make_extender, pod, nodes):
        extender, stub = make_extender(
            {
                "/v1/filter": {
                    "nodes": {"items": [{"metadata": {"name": "A"}}, {"metadata": {"name": "C"}}]},
                    "error": "",
                },
                "/v1/prioritize": [{"host": "A", "score": 5}, {"host": "C", "score": 10}],
            },
            **CONFIG,
        )
        assert isinstance(extender, SchedulerExtender)

        filtered = extender.filter(pod, nodes)
        assert filtered.names() == ["A", "C"]

        scores, weight = extender.prioritize(pod, filtered)
        assert scores == [HostPriority(host="A", score=5), HostPriority(host="C", score=10)]
        assert weight == 2

        assert [r.url.path for r in stub.requests] == ["/v1/filter", "/v1/prioritize"]
        prioritize_body = json.loads(stub.requests[1].content)
        assert [n["metadata"]["name"] for n in prioritize_body["nodes"]["items"]] == ["A", "C"]

    def test_filter_rejection(self, make_extender, pod, nodes):
        extender, _ = make_extender(
            {"/v1/filter": {"nodes": {"items": []}, "error": "node pool exhausted"}}, **CONFIG
        )
        with pytest.raises(ExtenderLogicError) as exc_info:
            extender.filter(pod, nodes)
        assert str(exc_info.value) == "node pool exhausted"

    def test_weighted_totals_across_extenders(self, make_extender, pod, nodes):
        """The scheduler core combines weight * score from each extender."""
        scoring, _ = make_extender(
            {
                "/v1/prioritize": [
                    {"host": "A", "score": 1},
                    {"host": "B", "score": 3},
                    {"host": "C", "score": 2},
                ]
            },
            url_prefix="http://scoring",
            prioritize_verb="prioritize",
            weight=10,
        )
        filter_only, stub = make_extender(
            {"/v1/filter": {"nodes": {"items": [{"metadata": {"name": "B"}}]}}},
            url_prefix="http://filtering",
            filter_verb="filter",
            weight=100,
        )

        totals = {name: 0 for name in nodes.names()}
        for extender in (scoring, filter_only):
            scores, weight = extender.prioritize(pod, nodes)
            for entry in scores:
                totals[entry.host] += entry.score * weight

        assert totals == {"A": 10, "B": 30, "C": 20}
        assert stub.requests == []

    def test_unreachable_extender(self, make_extender, nodes):
        extender, stub = make_extender(
            {"/v1/prioritize": httpx.ConnectError("name resolution failed")}, **CONFIG
        )
        with pytest.raises(TransportError):
            extender.prioritize(PlacementRequest(metadata={"name": "batch-7"}), nodes)
        assert len(stub.requests) == 1

    def test_empty_candidate_list(self, make_extender, pod):
        extender, stub = make_extender(
            {"/v1/filter": {"nodes": {"items": []}}, "/v1/prioritize": []}, **CONFIG
        )
        assert extender.filter(pod, CandidateList()).names() == []
        assert extender.prioritize(pod, CandidateList()) == ([], 2)
        assert len(stub.requests) == 2
