"""
ASE/EACVI 2016 diastolic function algorithm.

Nagueh et al., Recommendations for the Evaluation of Left Ventricular Diastolic
Function by Echocardiography (J Am Soc Echocardiogr 2016;29:277-314).

Two entry points share one grading sub-graph:
- ``integrated``: starts at LVEF. Normal LVEF without myocardial disease is
  screened with four criteria; a positive majority re-converges on the
  reduced-LVEF path, which reuses the criteria already measured.
- ``reduced``: starts directly at the mitral inflow pattern.
"""

from __future__ import annotations
from typing import Any

POSITIVE_EE = ["positive", "positive_septal", "positive_lateral"]

ASE2016: dict[str, Any] = {
    "id": "ase2016",
    "name": "ASE/EACVI Diastolic Function (2016)",
    "description": "Recommendations for the Evaluation of Left Ventricular Diastolic Function by Echocardiography",
    "citation": {
        "authors": "Nagueh, S., Smiseth, O., Appleton, C. et al.",
        "title": (
            "Recommendations for the Evaluation of Left Ventricular Diastolic Function by "
            "Echocardiography: An Update from the American Society of Echocardiography and "
            "the European Association of Cardiovascular Imaging"
        ),
        "journal": "Journal of the American Society of Echocardiography, 29(4), 277-314. (2016)",
        "url": "https://pubmed.ncbi.nlm.nih.gov/27037982/",
    },
    "modes": [
        {
            "id": "integrated",
            "name": "ASE 2016 Integrated Assessment",
            "description": "Complete assessment starting with LVEF evaluation",
            "start_node_id": "initialAssessment",
        },
        {
            "id": "reduced",
            "name": "ASE 2016 Reduced LVEF",
            "description": "Reduced LVEF (<50%): grading starts at the mitral inflow pattern",
            "start_node_id": "reducedPath_MitralInflow",
        },
    ],
    # Most specific (most recently asked) source first
    "aliases": {
        "lvef": ["initialAssessment"],
        "mitral_inflow": ["reducedPath_MitralInflow"],
        "ee_ratio": ["reducedPath_EeRatio", "normalPath_EeRatio"],
        "e_prime": ["normalPath_EPrime"],
        "tr_velocity": ["reducedPath_TRVelocity", "normalPath_TRVelocity"],
        "la_volume": ["reducedPath_LAVolume", "normalPath_LAVolume"],
        "pv_flow": ["reducedPath_PVFlow"],
    },
    "outcome_labels": {
        "normal": "Normal diastolic function",
        "grade-1": "Grade I diastolic dysfunction (normal LAP)",
        "grade-2": "Grade II diastolic dysfunction (elevated LAP)",
        "grade-3": "Grade III diastolic dysfunction (elevated LAP)",
        "indeterminate": "Indeterminate diastolic function",
        "insufficient_info": "Insufficient information to grade diastolic function",
    },
    "nodes": {
        "initialAssessment": {
            "id": "initialAssessment",
            "kind": "input",
            "prompt": "What is the left ventricular ejection fraction (LVEF)?",
            "options": [
                {"value": "normal", "label": "Normal LVEF (≥50%) without myocardial disease"},
                {"value": "normal_with_disease", "label": "Normal LVEF with myocardial disease (ischemia, LVH, CMP)"},
                {"value": "reduced", "label": "Reduced LVEF (<50%)"},
            ],
            "edges": {
                "normal": "normalPath_EeRatio",
                "reduced": "reducedPath_MitralInflow",
                "normal_with_disease": "reducedPath_MitralInflow",
            },
        },

        # ---- normal LVEF without myocardial disease ----
        "normalPath_EeRatio": {
            "id": "normalPath_EeRatio",
            "kind": "input",
            "prompt": "What is the average E/e' ratio?",
            "options": [
                {"value": "positive", "label": "> 14"},
                {"value": "negative", "label": "≤ 14"},
                {"value": "positive_septal", "label": "Septal E/e' > 15 (only septal available)"},
                {"value": "positive_lateral", "label": "Lateral E/e' > 13 (only lateral available)"},
                {"value": "unavailable", "label": "Unavailable"},
            ],
            "edges": {"*": "normalPath_EPrime"},
        },
        "normalPath_EPrime": {
            "id": "normalPath_EPrime",
            "kind": "input",
            "prompt": "What are the e' velocities?",
            "options": [
                {"value": "negative", "label": "Septal ≥ 7 AND Lateral ≥ 10 cm/s"},
                {"value": "positive", "label": "Septal < 7 OR Lateral < 10 cm/s"},
                {"value": "unavailable", "label": "Unavailable"},
            ],
            "edges": {"*": "normalPath_TRVelocity"},
        },
        "normalPath_TRVelocity": {
            "id": "normalPath_TRVelocity",
            "kind": "input",
            "prompt": "What is the TR Velocity?",
            "options": [
                {"value": "positive", "label": "> 2.8 m/s"},
                {"value": "negative", "label": "≤ 2.8 m/s"},
                {"value": "unavailable", "label": "Unavailable"},
            ],
            "edges": {"*": "normalPath_LAVolume"},
        },
        "normalPath_LAVolume": {
            "id": "normalPath_LAVolume",
            "kind": "input",
            "prompt": "What is the indexed LA Volume?",
            "options": [
                {"value": "positive", "label": "> 34 ml/m²"},
                {"value": "negative", "label": "≤ 34 ml/m²"},
                {"value": "unavailable", "label": "Unavailable"},
            ],
            "edges": {"*": "normalPath_Evaluate"},
        },
        "normalPath_Evaluate": {
            "id": "normalPath_Evaluate",
            "kind": "logic",
            "note": "More than half of the available criteria decide; a positive majority continues on the reduced path.",
            "rule": {
                "kind": "majority_vote",
                "criteria": [
                    {"parameter": "normalPath_EeRatio", "positive": POSITIVE_EE, "negative": ["negative"]},
                    {"parameter": "normalPath_EPrime", "positive": ["positive"], "negative": ["negative"]},
                    {"parameter": "normalPath_TRVelocity", "positive": ["positive"], "negative": ["negative"]},
                    {"parameter": "normalPath_LAVolume", "positive": ["positive"], "negative": ["negative"]},
                ],
                "rules": [
                    {"target": "resultNormal",
                     "when": [{"tally": "negative", "op": ">", "per_available": 0.5}]},
                    {"target": "reducedPath_MitralInflow",
                     "when": [{"tally": "positive", "op": ">", "per_available": 0.5}]},
                ],
                "otherwise": "resultIndeterminate",
            },
        },

        # ---- reduced LVEF or myocardial disease ----
        "reducedPath_MitralInflow": {
            "id": "reducedPath_MitralInflow",
            "kind": "input",
            "prompt": "What is the Mitral Inflow Pattern (E/A ratio)?",
            "options": [
                {"value": "gte2", "label": "E/A ≥ 2"},
                {"value": "mid_range", "label": "E/A between 0.8 and 1.99"},
                {"value": "lt08_high_e", "label": "E/A ≤ 0.8 AND E > 50 cm/s"},
                {"value": "lt08_low_e", "label": "E/A ≤ 0.8 AND E ≤ 50 cm/s"},
            ],
            "edges": {
                "gte2": "resultGrade3",
                "lt08_low_e": "resultGrade1",
                "lt08_high_e": "reducedPath_CheckParameterAvailability",
                "mid_range": "reducedPath_CheckParameterAvailability",
            },
        },
        "reducedPath_CheckParameterAvailability": {
            "id": "reducedPath_CheckParameterAvailability",
            "kind": "logic",
            "note": "Skip questions already answered on the normal-LVEF path.",
            "rule": {
                "kind": "alias_reuse",
                "required": [
                    {"parameter": "ee_ratio", "ask": "reducedPath_EeRatio"},
                    {"parameter": "tr_velocity", "ask": "reducedPath_TRVelocity"},
                    {"parameter": "la_volume", "ask": "reducedPath_LAVolume"},
                ],
                "then": "reducedPath_Evaluate",
            },
        },
        "reducedPath_EeRatio": {
            "id": "reducedPath_EeRatio",
            "kind": "input",
            "prompt": "What is the average E/e' ratio?",
            "options": [
                {"value": "positive", "label": "> 14"},
                {"value": "positive_septal", "label": "Septal E/e' > 15 (only septal available)"},
                {"value": "positive_lateral", "label": "Lateral E/e' > 13 (only lateral available)"},
                {"value": "negative", "label": "≤ 14 (or below septal/lateral thresholds)"},
                {"value": "unavailable", "label": "Unavailable"},
            ],
            "edges": {"*": "reducedPath_CheckTRAvailability"},
        },
        "reducedPath_CheckTRAvailability": {
            "id": "reducedPath_CheckTRAvailability",
            "kind": "logic",
            "rule": {
                "kind": "alias_reuse",
                "required": [{"parameter": "tr_velocity", "ask": "reducedPath_TRVelocity"}],
                "then": "reducedPath_CheckLAAvailability",
            },
        },
        "reducedPath_TRVelocity": {
            "id": "reducedPath_TRVelocity",
            "kind": "input",
            "prompt": "What is the TR Velocity?",
            "options": [
                {"value": "positive", "label": "> 2.8 m/s"},
                {"value": "negative", "label": "≤ 2.8 m/s"},
                {"value": "unavailable", "label": "Unavailable"},
            ],
            "edges": {"*": "reducedPath_CheckLAAvailability"},
        },
        "reducedPath_CheckLAAvailability": {
            "id": "reducedPath_CheckLAAvailability",
            "kind": "logic",
            "rule": {
                "kind": "alias_reuse",
                "required": [{"parameter": "la_volume", "ask": "reducedPath_LAVolume"}],
                "then": "reducedPath_CheckPVFlowNeed",
            },
        },
        "reducedPath_LAVolume": {
            "id": "reducedPath_LAVolume",
            "kind": "input",
            "prompt": "What is the indexed LA Volume?",
            "options": [
                {"value": "positive", "label": "> 34 ml/m²"},
                {"value": "negative", "label": "≤ 34 ml/m²"},
                {"value": "unavailable", "label": "Unavailable"},
            ],
            "edges": {"*": "reducedPath_CheckPVFlowNeed"},
        },
        "reducedPath_CheckPVFlowNeed": {
            "id": "reducedPath_CheckPVFlowNeed",
            "kind": "logic",
            "note": "Pulmonary vein flow is only asked for reduced LVEF with a criterion unavailable.",
            "rule": {
                "kind": "conditional",
                "cases": [
                    {
                        "target": "reducedPath_PVFlow",
                        "all_of": [{"parameter": "lvef", "values": ["reduced"], "match_missing": True}],
                        "any_of": [
                            {"parameter": "ee_ratio", "values": ["unavailable"]},
                            {"parameter": "tr_velocity", "values": ["unavailable"]},
                            {"parameter": "la_volume", "values": ["unavailable"]},
                        ],
                    },
                ],
                "otherwise": "reducedPath_Evaluate",
            },
        },
        "reducedPath_PVFlow": {
            "id": "reducedPath_PVFlow",
            "kind": "input",
            "prompt": "What is the pulmonary vein S/D ratio?",
            "options": [
                {"value": "negative", "label": "≥ 1"},
                {"value": "positive", "label": "< 1"},
                {"value": "unavailable", "label": "Unavailable"},
            ],
            "edges": {"*": "reducedPath_Evaluate"},
        },
        "reducedPath_Evaluate": {
            "id": "reducedPath_Evaluate",
            "kind": "logic",
            "note": "Mitral inflow extremes decide directly; otherwise grade by the available criteria.",
            "rule": {
                "kind": "shortcut",
                "shortcuts": [
                    {"target": "resultGrade3",
                     "all_of": [{"parameter": "mitral_inflow", "values": ["gte2"]}]},
                    {"target": "resultGrade1",
                     "all_of": [{"parameter": "mitral_inflow", "values": ["lt08_low_e"]}]},
                ],
                "then": {
                    "kind": "majority_vote",
                    "criteria": [
                        {"parameter": "ee_ratio", "positive": POSITIVE_EE},
                        {"parameter": "tr_velocity", "positive": ["positive"]},
                        {"parameter": "la_volume", "positive": ["positive"]},
                        {"parameter": "pv_flow", "positive": ["positive"]},
                    ],
                    "rules": [
                        {"target": "resultGrade2", "when": [
                            {"tally": "available", "op": ">=", "count": 3},
                            {"tally": "positive", "op": ">=", "count": 2},
                        ]},
                        {"target": "resultGrade1", "when": [
                            {"tally": "available", "op": ">=", "count": 3},
                            {"tally": "negative", "op": ">=", "count": 2},
                        ]},
                        {"target": "resultIndeterminate", "when": [
                            {"tally": "available", "op": ">=", "count": 3},
                        ]},
                        {"target": "resultGrade2", "when": [
                            {"tally": "available", "op": "==", "count": 2},
                            {"tally": "positive", "op": "==", "count": 2},
                        ]},
                        {"target": "resultGrade1", "when": [
                            {"tally": "available", "op": "==", "count": 2},
                            {"tally": "negative", "op": "==", "count": 2},
                        ]},
                        {"target": "resultIndeterminate", "when": [
                            {"tally": "available", "op": "==", "count": 2},
                        ]},
                    ],
                    "otherwise": "resultInsufficientInfo",
                },
            },
        },

        # ---- results ----
        "resultNormal": {"id": "resultNormal", "kind": "result", "result_key": "normal"},
        "resultGrade1": {"id": "resultGrade1", "kind": "result", "result_key": "grade-1"},
        "resultGrade2": {"id": "resultGrade2", "kind": "result", "result_key": "grade-2"},
        "resultGrade3": {"id": "resultGrade3", "kind": "result", "result_key": "grade-3"},
        "resultIndeterminate": {"id": "resultIndeterminate", "kind": "result", "result_key": "indeterminate"},
        "resultInsufficientInfo": {"id": "resultInsufficientInfo", "kind": "result", "result_key": "insufficient_info"},
    },
}
