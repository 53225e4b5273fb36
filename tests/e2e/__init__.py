"""
Browser-driven scenarios against a running storefront deployment.

The target comes from ``runner.base_url`` (``E2E_BASE_URL``). Scenarios
tolerate a deployment that is still starting (503) and are skipped when it
cannot be reached at all.
"""
