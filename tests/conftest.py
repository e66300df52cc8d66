import copy

import pytest
import pandas as pd

from pod_sorter.sorter.config import DEFAULT_CONFIG


@pytest.fixture
def default_config():
    return copy.deepcopy(DEFAULT_CONFIG)

@pytest.fixture
def preference_config():
    # Only the stated preference counts, one point each
    return {
        "roles": [
            {"name": "Finance", "cap": 10},
            {"name": "Space", "cap": 5},
            {"name": "Media", "cap": 5},
        ],
        "over_role": "Finance",
        "pods": ["Pod 1", "Pod 2", "Pod 3", "Pod 4", "Pod 5"],
        "signals": {
            role: [{"field": "preference", "match": "equals", "value": role, "weight": 1.0}]
            for role in ("Finance", "Space", "Media")
        },
        "email_domain_pattern": r"^[^@\s]+@example\.edu$",
        "allow_list": [],
    }

@pytest.fixture
def sample_candidates():
    return [
        {"email": "ana@example.edu", "name": "Ana", "trait": "Analytical", "preference": "Finance",
         "tags": ["Economics"], "aspiration": "Investment banking"},
        {"email": "ben@example.edu", "name": "Ben", "trait": "Organizer", "preference": "Space",
         "tags": ["Architecture"], "aspiration": "Run operations for a venue"},
        {"email": "cal@example.edu", "name": "Cal", "trait": "Creative", "preference": "Media",
         "tags": ["Film Studies"], "aspiration": "Documentary director"},
        {"email": "dee@example.edu", "name": "Dee", "trait": "", "preference": "",
         "tags": [], "aspiration": ""},
    ]

@pytest.fixture
def sample_responses_csv(tmp_path):
    p = tmp_path / "responses.csv"
    data = """Email,Name,Trait,Preference,Tags,Aspiration
Ana@Example.edu,Ana,Analytical,Finance,"Economics, Math",Investment banking
ben@example.edu,Ben,Organizer,Space,Architecture,Run operations for a venue
ana@example.edu,Ana B,Creative,Media,"[""Film Studies""]",Documentary director
,Nobody,,,,
"""
    p.write_text(data, encoding='utf-8')
    return p
