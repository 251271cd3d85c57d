"""
MotoGP data processing layer.

Plain functions and helpers used by the Prefect flows.

Structure:
- api_client.py: httpx client for the MotoGP results API
- payloads.py: typed views of the loosely-typed upstream JSON
- exceptions.py: error taxonomy (NotFound, UpstreamUnavailable, InvalidState)
- rider_matching.py: resolve classification entries to Rider rows
- race_weekend.py: race weekend detection (gates polling cadence)
- scoring.py: team scoring algorithm (pure functions)
- standings.py: ascending standings (lower total is better)
- utils.py: rider value, status mapping and query helpers
"""
