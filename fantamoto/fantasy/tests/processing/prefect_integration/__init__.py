"""
Prefect integration tests.

These tests run the sync jobs with the Prefect runtime (flow and task runs,
subflows, retries configuration) against a Django test database. The MotoGP
API is served by an httpx.MockTransport.

Requirements:
- prefect.testing.utilities.prefect_test_harness
- FastPrefectTasksMixin so failing fetches don't wait between retries
"""
