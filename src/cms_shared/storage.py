"""Persisted key/value storage backed by DynamoDB.

Plays the role a browser's localStorage plays for a single-page admin: the
session blob and the bearer token survive process restarts (Lambda cold
starts included) under fixed keys.

Key design:
  PK=STORAGE#<key>  SK=VALUE  value=<string>
"""

from datetime import datetime, timezone

import boto3

from cms_shared.config import AWS_REGION, DYNAMODB_KWARGS, STORAGE_TABLE


def _dynamodb():
    return boto3.resource("dynamodb", region_name=AWS_REGION, **DYNAMODB_KWARGS)


def get_storage_table():
    return _dynamodb().Table(STORAGE_TABLE)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _key(name: str) -> dict:
    return {"PK": f"STORAGE#{name}", "SK": "VALUE"}


class ClientStorage:
    """getItem / setItem / removeItem over one DynamoDB table."""

    def __init__(self, table=None):
        self._table = table if table is not None else get_storage_table()

    def get_item(self, name: str) -> str | None:
        item = self._table.get_item(Key=_key(name)).get("Item")
        if not item:
            return None
        return item.get("value")

    def set_item(self, name: str, value: str) -> None:
        self._table.put_item(
            Item={**_key(name), "value": value, "updatedAt": now_iso()}
        )

    def remove_item(self, name: str) -> None:
        # DeleteItem on a missing key is a no-op in DynamoDB
        self._table.delete_item(Key=_key(name))
