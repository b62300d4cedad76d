"""Base repository class for DynamoDB operations."""

import os
from typing import Any, Generic, TypeVar

import boto3
import structlog
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from sitecms.models.base import BaseModel
from sitecms.utils.exceptions import NotFoundError, StoreUnavailableError

logger = structlog.get_logger()

T = TypeVar("T", bound=BaseModel)

# Error codes that mean "try again later" rather than "your request is wrong".
TRANSIENT_ERROR_CODES = {
    "ProvisionedThroughputExceededException",
    "RequestLimitExceeded",
    "ThrottlingException",
    "InternalServerError",
    "ServiceUnavailable",
    "TransactionInProgressException",
}


def _is_transient(error: Exception) -> bool:
    if isinstance(error, BotoCoreError):
        return True
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code") in TRANSIENT_ERROR_CODES
    return False


class BaseRepository(Generic[T]):
    """Base repository for DynamoDB single-table design.

    Records are written whole: ``put`` overwrites, last write wins.
    """

    def __init__(
        self,
        model_class: type[T],
        table_name: str | None = None,
    ):
        """Initialize repository.

        Args:
            model_class: The Pydantic model class for this repository.
            table_name: DynamoDB table name. Defaults to TABLE_NAME env var.
        """
        self.model_class = model_class
        self.table_name = table_name or os.environ.get("TABLE_NAME", "sitecms-dev")
        self._dynamodb = None
        self._table = None

    @property
    def dynamodb(self):
        """Get DynamoDB resource (lazy initialization)."""
        if self._dynamodb is None:
            self._dynamodb = boto3.resource("dynamodb")
        return self._dynamodb

    @property
    def table(self):
        """Get DynamoDB table (lazy initialization)."""
        if self._table is None:
            self._table = self.dynamodb.Table(self.table_name)
        return self._table

    def _build_key(self, pk: str, sk: str) -> dict[str, str]:
        """Build key dictionary for DynamoDB operations."""
        return {"PK": pk, "SK": sk}

    def _raise_store_error(self, operation: str, error: Exception, **context: Any) -> None:
        """Log a store failure and re-raise it, wrapping transient ones."""
        logger.error(f"DynamoDB {operation} failed", error=str(error), **context)
        if _is_transient(error):
            raise StoreUnavailableError(
                f"Content store temporarily unavailable during {operation}",
                {"operation": operation},
            ) from error
        raise error

    def get(self, pk: str, sk: str) -> T | None:
        """Get an item by its primary key.

        Reads are strongly consistent so a read right after a put sees it.

        Args:
            pk: Partition key value.
            sk: Sort key value.

        Returns:
            Model instance or None if not found.
        """
        try:
            response = self.table.get_item(Key=self._build_key(pk, sk), ConsistentRead=True)
        except (ClientError, BotoCoreError) as e:
            self._raise_store_error("get_item", e, pk=pk, sk=sk)

        item = response.get("Item")
        if not item:
            return None
        return self.model_class.from_dynamodb(item)

    def get_or_raise(self, pk: str, sk: str, resource_type: str, resource_id: str) -> T:
        """Get an item or raise NotFoundError."""
        item = self.get(pk, sk)
        if not item:
            raise NotFoundError(resource_type, resource_id)
        return item

    def put(self, item: T, touch: bool = True) -> T:
        """Put an item into DynamoDB, replacing any existing item.

        Args:
            item: Model instance to save.
            touch: Refresh ``updated_at`` before writing.

        Returns:
            The saved model instance.
        """
        if touch:
            item.update_timestamp()

        db_item = item.to_dynamodb()
        db_item.update(item.get_keys())

        try:
            self.table.put_item(Item=db_item)
        except (ClientError, BotoCoreError) as e:
            self._raise_store_error("put_item", e, pk=db_item["PK"], sk=db_item["SK"])

        logger.debug(
            "Item saved",
            pk=db_item["PK"],
            sk=db_item["SK"],
            model=self.model_class.__name__,
            version=db_item.get("version"),
        )
        return item

    def delete(self, pk: str, sk: str) -> bool:
        """Delete an item.

        Args:
            pk: Partition key value.
            sk: Sort key value.

        Returns:
            True if deleted, False if not found.
        """
        try:
            self.table.delete_item(
                Key=self._build_key(pk, sk),
                ConditionExpression="attribute_exists(PK)",
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                return False
            self._raise_store_error("delete_item", e, pk=pk, sk=sk)
        except BotoCoreError as e:
            self._raise_store_error("delete_item", e, pk=pk, sk=sk)

        logger.debug("Item deleted", pk=pk, sk=sk)
        return True

    def query(
        self,
        pk: str,
        sk_begins_with: str | None = None,
        limit: int | None = None,
        last_key: dict | None = None,
    ) -> tuple[list[T], dict | None]:
        """Query items by partition key.

        Args:
            pk: Partition key value.
            sk_begins_with: Sort key prefix for begins_with condition.
            limit: Maximum items to return.
            last_key: Last evaluated key for pagination.

        Returns:
            Tuple of (items, last_evaluated_key).
        """
        if sk_begins_with:
            key_condition = "PK = :pk AND begins_with(SK, :sk_prefix)"
            expr_values = {":pk": pk, ":sk_prefix": sk_begins_with}
        else:
            key_condition = "PK = :pk"
            expr_values = {":pk": pk}

        kwargs: dict[str, Any] = {
            "KeyConditionExpression": key_condition,
            "ExpressionAttributeValues": expr_values,
            "ConsistentRead": True,
        }
        if limit:
            kwargs["Limit"] = limit
        if last_key:
            kwargs["ExclusiveStartKey"] = last_key

        try:
            response = self.table.query(**kwargs)
        except (ClientError, BotoCoreError) as e:
            self._raise_store_error("query", e, pk=pk)

        items = [self.model_class.from_dynamodb(item) for item in response.get("Items", [])]
        return items, response.get("LastEvaluatedKey")

    def scan_by_prefix(
        self,
        pk_prefix: str,
        sk: str | None = None,
    ) -> list[T]:
        """Scan every item whose partition key starts with ``pk_prefix``.

        Follows ``LastEvaluatedKey`` until the table is exhausted.

        Args:
            pk_prefix: Partition key prefix, e.g. ``PAGE#``.
            sk: Optional exact sort key filter.

        Returns:
            All matching model instances.
        """
        filter_expression = Attr("PK").begins_with(pk_prefix)
        if sk is not None:
            filter_expression = filter_expression & Attr("SK").eq(sk)

        kwargs: dict[str, Any] = {"FilterExpression": filter_expression}
        items: list[T] = []
        pages = 0

        while True:
            try:
                response = self.table.scan(**kwargs)
            except (ClientError, BotoCoreError) as e:
                self._raise_store_error("scan", e, pk_prefix=pk_prefix, sk=sk)

            items.extend(self.model_class.from_dynamodb(item) for item in response.get("Items", []))
            pages += 1

            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            kwargs["ExclusiveStartKey"] = last_key

        logger.debug("Scan completed", pk_prefix=pk_prefix, sk=sk, count=len(items), pages=pages)
        return items
