"""
Loaderkit Test Suite

Unit tests for the resolver, cache, fetcher and endpoints, plus pipeline
tests for loader provisioning, staleness checks and the CLI.
"""
