"""
Services Layer

Weekly-event engine:
- attendance_resolver: who is eligible to play
- pairing_engine / match_scheduler / scoring_engine: pure computations
- draw_orchestrator / scoring_service: persistence around the engines

Services accept domain inputs (IDs, sessions, snapshots) and never depend on
HTTP request/response objects.
"""
