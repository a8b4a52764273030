"""Crawl engine: page fetching, retries, link discovery, source downloads and orchestration."""
