"""Pytest fixtures shared across all tests."""

from __future__ import annotations

import pytest


@pytest.fixture
def clients() -> list[dict]:
    """Clean client rows."""
    return [
        {
            "ClientID": "C1",
            "ClientName": "Acme Corp",
            "PriorityLevel": "3",
            "RequestedTaskIDs": "T1,T2",
            "GroupTag": "Sales",
            "AttributesJSON": '{"budget": 1000}',
        },
        {
            "ClientID": "C2",
            "ClientName": "Globex",
            "PriorityLevel": 5,
            "RequestedTaskIDs": "T3",
            "GroupTag": "Ops",
            "AttributesJSON": "",
        },
    ]


@pytest.fixture
def workers() -> list[dict]:
    return [
        {
            "WorkerID": "W1",
            "WorkerName": "Ada",
            "Skills": "python,sql",
            "AvailableSlots": "[1, 2, 3]",
            "MaxLoadPerPhase": "2",
            "GroupTag": "GroupA",
        },
        {
            "WorkerID": "W2",
            "WorkerName": "Grace",
            "Skills": "cobol",
            "AvailableSlots": "2,4",
            "MaxLoadPerPhase": 1,
            "GroupTag": "GroupB",
        },
    ]


@pytest.fixture
def tasks() -> list[dict]:
    return [
        {
            "TaskID": "T1",
            "TaskName": "Design",
            "Duration": "2",
            "RequiredSkills": "python",
            "Category": 2,
            "MaxConcurrent": "1",
        },
        {
            "TaskID": "T2",
            "TaskName": "Build",
            "Duration": 5,
            "RequiredSkills": "sql",
            "Category": 5,
            "MaxConcurrent": "0",
        },
    ]
