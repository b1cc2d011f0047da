"""DynamoDB-backed rate limit store, shared across instances.

Items carry an `expires_at` attribute so DynamoDB's TTL feature deletes
stale callers; enable TTL on that attribute when creating the table.
"""

import asyncio
from decimal import Decimal

from src.ratelimit.models import RateLimitEntry
from src.ratelimit.store import RateLimitStore


class DynamoDBRateLimitStore(RateLimitStore):
    """Stores one item per caller, keyed by `caller_id`."""

    def __init__(self, table_name: str, region: str = "us-east-1", window_seconds: int = 3600):
        self._table_name = table_name
        self._region = region
        self._window_seconds = window_seconds
        self._table = None

    def _get_table(self):
        """Lazy-init boto3 Table resource."""
        if self._table is None:
            import boto3

            dynamodb = boto3.resource("dynamodb", region_name=self._region)
            self._table = dynamodb.Table(self._table_name)
        return self._table

    async def get(self, caller_id: str) -> RateLimitEntry | None:
        return await asyncio.to_thread(self._get_item, caller_id)

    async def put(self, caller_id: str, entry: RateLimitEntry) -> None:
        await asyncio.to_thread(self._put_item, caller_id, entry)

    async def delete(self, caller_id: str) -> None:
        await asyncio.to_thread(self._get_table().delete_item, Key={"caller_id": caller_id})

    def _get_item(self, caller_id: str) -> RateLimitEntry | None:
        resp = self._get_table().get_item(Key={"caller_id": caller_id}, ConsistentRead=True)
        item = resp.get("Item")
        if not item:
            return None
        return RateLimitEntry(
            count=int(item["count"]),
            window_start=float(item["window_start"]),
        )

    def _put_item(self, caller_id: str, entry: RateLimitEntry) -> None:
        # boto3 rejects floats; numbers go over the wire as Decimal
        self._get_table().put_item(Item={
            "caller_id": caller_id,
            "count": entry.count,
            "window_start": Decimal(str(entry.window_start)),
            "expires_at": int(entry.window_start + self._window_seconds) + 1,
        })
