"""
Mayo Clinic 2025 diastolic function algorithm.

Young et al., J Am Soc Echocardiogr (2025). Applies to patients with EF ≥ 50%
and without heart failure or significant valve disease: four criteria are
collected, a majority decides normal vs elevated filling pressure, and the
E/A ratio then sets the grade.
"""

from __future__ import annotations
from typing import Any


def _criterion(node_id: str) -> dict[str, Any]:
    return {"parameter": node_id, "positive": ["abnormal"], "negative": ["normal"]}


MAYO2025: dict[str, Any] = {
    "id": "mayo2025",
    "name": "Young et al. Diastolic Function (2025)",
    "description": "From the Mayo Clinic",
    "citation": {
        "authors": "Young, Kathleen A. et al.",
        "title": (
            "Association of Impaired Relaxation Mitral Inflow Pattern (Grade 1 Diastolic Function) "
            "With Long-Term Noncardiovascular and Cardiovascular Mortality"
        ),
        "journal": "Journal of the American Society of Echocardiography (2025)",
        "url": "https://onlinejase.com/article/S0894-7317(25)00036-7/abstract",
    },
    "modes": [
        {
            "id": "standard",
            "name": "Mayo Standard Algorithm",
            "description": (
                "This algorithm applies to patients with an EF ≥ 50% and without heart failure "
                "or significant valve disease"
            ),
            "start_node_id": "initialDataCollection",
        },
    ],
    "aliases": {
        "septal_e_prime": ["initialDataCollection"],
        "ee_ratio": ["eToERatio"],
        "tr_velocity": ["trVelocity"],
        "la_volume": ["laVolume"],
    },
    "outcome_labels": {
        "normal": "Normal diastolic function",
        "grade-1": "Grade 1 diastolic dysfunction (impaired relaxation)",
        "grade-2": "Grade 2 diastolic dysfunction (pseudonormal)",
        "grade-3": "Grade 3 diastolic dysfunction (restrictive filling)",
        "indeterminate": "Indeterminate diastolic function",
        "insufficient_info": "Insufficient data to grade diastolic function",
    },
    "nodes": {
        "initialDataCollection": {
            "id": "initialDataCollection",
            "kind": "input",
            "prompt": "What is the septal e' velocity?",
            "options": [
                {"value": "normal", "label": "≥ 7 cm/s"},
                {"value": "abnormal", "label": "< 7 cm/s"},
                {"value": "unavailable", "label": "Unavailable"},
            ],
            "edges": {"*": "eToERatio"},
        },
        "eToERatio": {
            "id": "eToERatio",
            "kind": "input",
            "prompt": "What is the E/e' ratio?",
            "options": [
                {"value": "abnormal", "label": "> 15"},
                {"value": "normal", "label": "≤ 15"},
                {"value": "unavailable", "label": "Unavailable"},
            ],
            "edges": {"*": "trVelocity"},
        },
        "trVelocity": {
            "id": "trVelocity",
            "kind": "input",
            "prompt": "What is the TR velocity?",
            "options": [
                {"value": "abnormal", "label": "> 2.8 m/s"},
                {"value": "normal", "label": "≤ 2.8 m/s"},
                {"value": "unavailable", "label": "Unavailable"},
            ],
            "edges": {"*": "laVolume"},
        },
        "laVolume": {
            "id": "laVolume",
            "kind": "input",
            "prompt": "What is the LA volume index?",
            "options": [
                {"value": "abnormal", "label": "> 34 mL/m²"},
                {"value": "normal", "label": "≤ 34 mL/m²"},
                {"value": "unavailable", "label": "Unavailable"},
            ],
            "edges": {"*": "criteriaEvaluate"},
        },
        "criteriaEvaluate": {
            "id": "criteriaEvaluate",
            "kind": "logic",
            "note": "≥ 3 of 4 criteria, or 2 of 3 when exactly three are available, decide.",
            "rule": {
                "kind": "majority_vote",
                "criteria": [
                    _criterion("septal_e_prime"),
                    _criterion("ee_ratio"),
                    _criterion("tr_velocity"),
                    _criterion("la_volume"),
                ],
                "rules": [
                    {"target": "resultInsufficientData",
                     "when": [{"tally": "available", "op": "<", "count": 3}]},
                    {"target": "normalFillingPressure",
                     "when": [{"tally": "negative", "op": ">=", "count": 3}]},
                    {"target": "normalFillingPressure", "when": [
                        {"tally": "available", "op": "==", "count": 3},
                        {"tally": "negative", "op": "==", "count": 2},
                    ]},
                    {"target": "elevatedFillingPressure",
                     "when": [{"tally": "positive", "op": ">=", "count": 3}]},
                    {"target": "elevatedFillingPressure", "when": [
                        {"tally": "available", "op": "==", "count": 3},
                        {"tally": "positive", "op": "==", "count": 2},
                    ]},
                ],
                # includes 2 normal / 2 abnormal with all four available
                "otherwise": "resultIndeterminate",
            },
        },
        "normalFillingPressure": {
            "id": "normalFillingPressure",
            "kind": "input",
            "prompt": "What is the E/A ratio?",
            "options": [
                {"value": "greater", "label": "> 0.8"},
                {"value": "less_equal", "label": "≤ 0.8"},
            ],
            "edges": {"greater": "resultNormal", "less_equal": "resultGrade1"},
        },
        "elevatedFillingPressure": {
            "id": "elevatedFillingPressure",
            "kind": "input",
            "prompt": "What is the E/A ratio?",
            "options": [
                {"value": "greater_equal", "label": "≥ 2"},
                {"value": "less", "label": "< 2"},
            ],
            "edges": {"less": "resultGrade2", "greater_equal": "resultGrade3"},
        },

        "resultNormal": {"id": "resultNormal", "kind": "result", "result_key": "normal"},
        "resultGrade1": {"id": "resultGrade1", "kind": "result", "result_key": "grade-1"},
        "resultGrade2": {"id": "resultGrade2", "kind": "result", "result_key": "grade-2"},
        "resultGrade3": {"id": "resultGrade3", "kind": "result", "result_key": "grade-3"},
        "resultIndeterminate": {"id": "resultIndeterminate", "kind": "result", "result_key": "indeterminate"},
        "resultInsufficientData": {"id": "resultInsufficientData", "kind": "result", "result_key": "insufficient_info"},
    },
}
