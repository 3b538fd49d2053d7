"""Tests that concurrent requests keep short codes unique.

Handlers share no in-process state; uniqueness is decided by the store.
These tests fire many simultaneous requests at the app and check that every
one gets a correct, consistent answer.
"""

import asyncio

import pytest


@pytest.mark.asyncio
class TestConcurrentRequests:
    """Prove the service behaves under many simultaneous requests."""

    async def test_concurrent_same_custom_slug(self, client, sample_urls):
        """Racing creates with one slug: exactly one 201, the rest 409."""
        concurrency = 20
        tasks = [
            client.post(
                "/api/links",
                json={"url": sample_urls[i % len(sample_urls)], "custom_slug": "hot-slug"},
                headers={"X-User-Id": f"user_{i}"},
            )
            for i in range(concurrency)
        ]
        responses = await asyncio.gather(*tasks)

        statuses = sorted(r.status_code for r in responses)
        assert statuses == [201] + [409] * (concurrency - 1)
        for r in responses:
            if r.status_code == 409:
                assert r.json()["error"] == "This custom slug is already taken"

    async def test_concurrent_generated_codes_unique(self, client, owner_headers):
        """Many creates without a slug all succeed with distinct codes."""
        concurrency = 30
        urls = [f"https://example.com/page_{i}" for i in range(concurrency)]
        tasks = [client.post("/api/links", json={"url": url}, headers=owner_headers) for url in urls]
        responses = await asyncio.gather(*tasks, return_exceptions=True)

        short_codes = []
        for i, r in enumerate(responses):
            if isinstance(r, Exception):
                pytest.fail(f"Request {i} raised: {r}")
            assert r.status_code == 201, f"Request {i}: status {r.status_code} body={r.text}"
            short_codes.append(r.json()["short_code"])

        assert len(short_codes) == len(set(short_codes)), "All short_codes must be unique under concurrency"

    async def test_concurrent_redirect_requests(self, client, owner_headers):
        """Many concurrent redirects of one code all return the same 301."""
        created = await client.post(
            "/api/links",
            json={"url": "https://example.com/redirect-target"},
            headers=owner_headers,
        )
        short_code = created.json()["short_code"]

        tasks = [client.get(f"/l/{short_code}", follow_redirects=False) for _ in range(25)]
        responses = await asyncio.gather(*tasks, return_exceptions=True)

        for i, r in enumerate(responses):
            if isinstance(r, Exception):
                pytest.fail(f"Request {i} raised: {r}")
            assert r.status_code == 301, f"Request {i}: status {r.status_code}"
            assert r.headers.get("location") == "https://example.com/redirect-target"

    async def test_concurrent_update_and_delete(self, client, owner_headers, other_owner_headers):
        """Owner and non-owner racing on one link: only the owner's writes land."""
        created = (
            await client.post(
                "/api/links",
                json={"url": "https://example.com/start", "custom_slug": "raced"},
                headers=owner_headers,
            )
        ).json()
        link_id = created["link_id"]

        responses = await asyncio.gather(
            *[
                client.put(f"/api/links/{link_id}", json={"url": "https://evil.test"}, headers=other_owner_headers)
                for _ in range(10)
            ],
            client.put(f"/api/links/{link_id}", json={"url": "https://example.com/owner"}, headers=owner_headers),
            *[client.delete(f"/api/links/{link_id}", headers=other_owner_headers) for _ in range(10)],
        )

        assert [r.status_code for r in responses[:10]] == [404] * 10
        assert responses[10].status_code == 200
        assert [r.status_code for r in responses[11:]] == [404] * 10

        redirect = await client.get("/l/raced", follow_redirects=False)
        assert redirect.headers["location"] == "https://example.com/owner"
