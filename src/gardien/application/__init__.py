"""
Application layer.

Orchestrates domain services: challenge issuance, challenge extraction
and signed message verification.
"""
