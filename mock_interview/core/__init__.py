"""
Core interview rules.

Session lifecycle, turn orchestration and final feedback aggregation.
Nothing in here talks HTTP; the store and the interviewer client are injected.
"""
