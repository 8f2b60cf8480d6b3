"""DynamoDB access for the booking tables.

Table names are `{prefix}-{table}` where the prefix defaults to
DYNAMODB_TABLE_PREFIX (booking-{environment}). Item-level calls go through
the boto3 resource; multi-item transactions go through the low-level client
and therefore take AttributeValue-formatted items (see serialize()).
"""

from collections.abc import Callable
from typing import Any

import boto3
from boto3.dynamodb.conditions import Key
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import ClientError

from booking_core.config import get_settings

_service: "DynamoDBService | None" = None


def get_dynamodb_service(table_prefix: str | None = None) -> "DynamoDBService":
    """Shared DynamoDBService, created on first use so boto3 clients are reused."""
    global _service
    if _service is None:
        _service = DynamoDBService(table_prefix)
    return _service


def reset_dynamodb_service() -> None:
    """Drop the shared instance so the next call builds one inside a moto context."""
    global _service
    _service = None


class DynamoDBService:
    """Thin wrapper over the booking tables."""

    def __init__(self, table_prefix: str | None = None) -> None:
        self.name_prefix = table_prefix or get_settings().table_prefix
        self._resource = boto3.resource("dynamodb")
        self._client = boto3.client("dynamodb")
        self._serializer = TypeSerializer()

    def table_name(self, table: str) -> str:
        return f"{self.name_prefix}-{table}"

    def _table(self, table: str) -> Any:
        return self._resource.Table(self.table_name(table))

    def serialize(self, item: dict[str, Any]) -> dict[str, Any]:
        """Plain item to AttributeValue format, dropping None values."""
        return {k: self._serializer.serialize(v) for k, v in item.items() if v is not None}

    def get_item(self, table: str, key: dict[str, Any]) -> dict[str, Any] | None:
        """Fetch one item by primary key, None when absent."""
        item: dict[str, Any] | None = self._table(table).get_item(Key=key).get("Item")
        return item

    def put_item(self, table: str, item: dict[str, Any]) -> None:
        self._table(table).put_item(Item=item)

    def update_item(
        self,
        table: str,
        key: dict[str, Any],
        update_expression: str,
        expression_attribute_values: dict[str, Any],
        expression_attribute_names: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Apply an update expression and return the item as stored afterwards.

        Args:
            table: Table name without prefix
            key: Primary key
            update_expression: SET/REMOVE expression
            expression_attribute_values: Placeholder values (:name)
            expression_attribute_names: Placeholder names (#name), for reserved words
        """
        kwargs: dict[str, Any] = {
            "Key": key,
            "UpdateExpression": update_expression,
            "ExpressionAttributeValues": expression_attribute_values,
            "ReturnValues": "ALL_NEW",
        }
        if expression_attribute_names:
            kwargs["ExpressionAttributeNames"] = expression_attribute_names
        attrs: dict[str, Any] = self._table(table).update_item(**kwargs).get("Attributes", {})
        return attrs

    def query_by_gsi(
        self,
        table: str,
        index_name: str,
        partition_key_name: str,
        partition_key_value: str,
        sort_key_condition: Any | None = None,
        scan_index_forward: bool = True,
    ) -> list[dict[str, Any]]:
        """All items of one GSI partition, optionally narrowed on the sort key.

        Args:
            table: Table name without prefix
            index_name: GSI name
            partition_key_name: GSI partition key attribute
            partition_key_value: Partition to read
            sort_key_condition: boto3 Key condition on the GSI sort key
            scan_index_forward: False for descending sort key order
        """
        key_condition = Key(partition_key_name).eq(partition_key_value)
        if sort_key_condition is not None:
            key_condition = key_condition & sort_key_condition
        return self._read_all(
            self._table(table).query,
            IndexName=index_name,
            KeyConditionExpression=key_condition,
            ScanIndexForward=scan_index_forward,
        )

    def scan(self, table: str) -> list[dict[str, Any]]:
        """Every item of a table. Reserved for administrative views."""
        return self._read_all(self._table(table).scan)

    @staticmethod
    def _read_all(operation: Callable[..., dict[str, Any]], **kwargs: Any) -> list[dict[str, Any]]:
        # Follows LastEvaluatedKey until the result set is exhausted
        items: list[dict[str, Any]] = []
        while True:
            response = operation(**kwargs)
            items.extend(response.get("Items", []))
            if "LastEvaluatedKey" not in response:
                return items
            kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]

    def transact_write(self, items: list[dict[str, Any]]) -> bool:
        """Write all items atomically.

        Returns:
            False when a condition cancelled the transaction, True otherwise.
            Any other client error propagates.
        """
        try:
            self._client.transact_write_items(TransactItems=items)  # type: ignore[arg-type]
        except ClientError as e:
            if e.response["Error"]["Code"] == "TransactionCanceledException":
                return False
            raise
        return True
