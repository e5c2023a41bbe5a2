"""DynamoDB-backed survey record store, response cache and audit log."""

import json
import logging
import time
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_dynamodb.service_resource import Table

from survey_api.models.audit_models import AuditEntry
from survey_api.models.survey_models import SurveyRecord
from survey_api.services.errors import CacheError, PersistenceError
from survey_api.services.storage_interfaces import AuditSink, Cache, RecordStore
from survey_api.utils.config import Settings

logger = logging.getLogger(__name__)

AWS_ERRORS = (ClientError, BotoCoreError)


def convert_floats_to_decimal(obj: Any) -> Any:
    """
    Recursively convert all float values to Decimal for DynamoDB compatibility.
    DynamoDB doesn't support Python float type - requires Decimal instead.
    """
    if isinstance(obj, list):
        return [convert_floats_to_decimal(item) for item in obj]  # type: ignore[misc]
    elif isinstance(obj, dict):
        return {key: convert_floats_to_decimal(value) for key, value in obj.items()}  # type: ignore[misc]
    elif isinstance(obj, float):
        return Decimal(str(obj))
    else:
        return obj


def convert_decimal_to_float(obj: Any) -> Any:
    """
    Recursively convert all Decimal values back to float for JSON serialization.
    This is needed when retrieving data from DynamoDB.
    """
    if isinstance(obj, list):
        return [convert_decimal_to_float(item) for item in obj]  # type: ignore[misc]
    elif isinstance(obj, dict):
        return {key: convert_decimal_to_float(value) for key, value in obj.items()}  # type: ignore[misc]
    elif isinstance(obj, Decimal):
        return float(obj)
    else:
        return obj


class DynamoDBRecordStore(RecordStore):
    """Survey responses table, keyed by response id."""

    def __init__(self, table: Table):
        self.table = table

    def put(self, key: str, record: SurveyRecord) -> None:
        item = convert_floats_to_decimal(record.model_dump(mode="json", exclude_none=True))
        item["id"] = key
        try:
            self.table.put_item(Item=item)
        except AWS_ERRORS as e:
            logger.error("Failed to store survey response %s: %s", key, e)
            raise PersistenceError("Failed to store survey response") from e

    def get(self, key: str) -> Optional[SurveyRecord]:
        try:
            response = self.table.get_item(Key={"id": key})
        except AWS_ERRORS as e:
            logger.error("Failed to fetch survey response %s: %s", key, e)
            raise PersistenceError("Failed to fetch survey response") from e
        item = response.get("Item")
        if not item:
            return None
        return SurveyRecord.model_validate(convert_decimal_to_float(item))

    def query(
        self, predicate: Optional[Callable[[SurveyRecord], bool]] = None
    ) -> List[SurveyRecord]:
        items: List[Dict[str, Any]] = []
        scan_kwargs: Dict[str, Any] = {}
        try:
            while True:
                response = self.table.scan(**scan_kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_key
        except AWS_ERRORS as e:
            logger.error("Failed to scan survey responses: %s", e)
            raise PersistenceError("Failed to read survey responses") from e

        records = [SurveyRecord.model_validate(convert_decimal_to_float(i)) for i in items]
        if predicate is None:
            return records
        return [r for r in records if predicate(r)]


class DynamoDBCache(Cache):
    """
    Cache table storing JSON strings with an ``expiresAt`` epoch attribute.

    DynamoDB TTL deletion is lazy, so expiry is also checked on read.
    """

    def __init__(self, table: Table, clock: Callable[[], float] = time.time):
        self.table = table
        self._clock = clock

    def get(self, key: str) -> Optional[Any]:
        try:
            response = self.table.get_item(Key={"cacheKey": key})
        except AWS_ERRORS as e:
            raise CacheError(f"Cache read failed for {key}") from e
        item = response.get("Item")
        if not item:
            return None
        if int(item.get("expiresAt", 0)) <= self._clock():
            return None
        return json.loads(item["value"])

    def put(self, key: str, value: Any, ttl_seconds: int) -> None:
        try:
            self.table.put_item(
                Item={
                    "cacheKey": key,
                    "value": json.dumps(value),
                    "expiresAt": int(self._clock()) + int(ttl_seconds),
                }
            )
        except AWS_ERRORS as e:
            raise CacheError(f"Cache write failed for {key}") from e


class DynamoDBAuditSink(AuditSink):
    """Append-only audit log table."""

    def __init__(self, table: Table):
        self.table = table

    def append(self, entry: AuditEntry) -> None:
        item = entry.model_dump(mode="json")
        item["details"] = json.dumps(item["details"])
        # Append-only: never overwrite an existing entry
        self.table.put_item(Item=item, ConditionExpression="attribute_not_exists(id)")


class DynamoDBService:
    """Builds the DynamoDB-backed collaborators from settings."""

    def __init__(self, settings: Settings):
        """Initialize DynamoDB tables."""
        dynamodb = boto3.resource(  # type: ignore[misc]
            "dynamodb",
            region_name=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
        )
        self.responses_table: Table = dynamodb.Table(settings.dynamodb_responses_table)
        self.cache_table: Table = dynamodb.Table(settings.dynamodb_cache_table)
        self.audit_table: Table = dynamodb.Table(settings.dynamodb_audit_table)

        self.records = DynamoDBRecordStore(self.responses_table)
        self.cache = DynamoDBCache(self.cache_table)
        self.audit = DynamoDBAuditSink(self.audit_table)
