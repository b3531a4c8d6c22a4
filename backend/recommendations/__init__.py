"""
Symptom-based juice recommendation engine.

Responsibilities:
- Map reported symptoms to ingredients worth recommending or avoiding.
- Treat the caller's allergies as ingredients that are always avoided.
- Score and rank available products with deterministic heuristics.
- Fall back to a random, conflict-free shortlist when nothing scores.
"""
