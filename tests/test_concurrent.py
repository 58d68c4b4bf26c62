"""Concurrent requests against the API."""

import asyncio

import httpx
import pytest

from backend.app.main import app

# (code, expected complexity)
TEST_CODES = [
    ("for i in range(n): print(i)", "O(n)"),
    (
        "def bubble_sort(arr):\n    for i in range(len(arr)):\n        for j in range(len(arr)-i-1):\n"
        "            if arr[j] > arr[j+1]:\n                arr[j], arr[j+1] = arr[j+1], arr[j]",
        "O(n²)",
    ),
    (
        "def binary_search(arr, target):\n    left, right = 0, len(arr)-1\n    while left <= right:\n"
        "        mid = (left+right)//2\n        if arr[mid] == target:\n            return mid\n"
        "        elif arr[mid] < target:\n            left = mid+1\n        else:\n            right = mid-1\n"
        "    return -1",
        "O(n)",
    ),
    ("result = [x*2 for x in range(n)]", "O(n)"),
    ("def factorial(n):\n    if n <= 1:\n        return 1\n    return n * factorial(n-1)", "O(2^n)"),
]


async def make_request(client: httpx.AsyncClient, code: str) -> dict:
    response = await client.post("/analyze", json={"code": code})
    assert response.status_code == 200
    return response.json()


@pytest.mark.asyncio
async def test_concurrent_requests():
    """Twenty requests in flight at once all get their own result."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        cases = [TEST_CODES[i % len(TEST_CODES)] for i in range(20)]
        results = await asyncio.gather(*(make_request(client, code) for code, _ in cases))

    for (_, expected), result in zip(cases, results):
        assert result["complexity"] == expected


def test_concurrent_engine_calls():
    """The engine can be shared between threads."""
    from concurrent.futures import ThreadPoolExecutor

    from timescope import analyze

    codes = [code for code, _ in TEST_CODES] * 8
    with ThreadPoolExecutor(max_workers=8) as pool:
        labels = [result.complexity.label for result in pool.map(analyze, codes)]

    assert labels == [expected for _, expected in TEST_CODES] * 8
