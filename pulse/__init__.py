"""
Pulse — Seller Trust Scoring
Re-exports for convenience.
"""
from pulse.trust.engine import compute_pulse_score, finalize_score, score_seller_payload
from pulse.trust.models import ENGINE_VERSION

__version__ = ENGINE_VERSION
