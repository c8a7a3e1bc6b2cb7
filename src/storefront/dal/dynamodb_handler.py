"""
DynamoDB implementation of the record store.

This module provides the data access layer over the shared storefront table,
with consistent mapping of DynamoDB failures to service errors, metrics and
trace annotations for every operation.
"""

import functools
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Optional, Sequence

import boto3
from aws_lambda_powertools.metrics import MetricUnit
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from storefront.dal.errors import DALError, RecordNotFoundError
from storefront.handlers.utils.errors import (
    BaseServiceError,
    ErrorSeverity,
    ExternalServiceError,
    ValidationError,
)
from storefront.handlers.utils.observability import logger, metrics, tracer
from storefront.models.output import PutResult
from storefront.models.records import CONTEXT_ATTRIBUTE, ID_ATTRIBUTE, RecordContext, record_key

# DynamoDB error code -> (service error code, retry after seconds)
CLIENT_ERROR_CODES = {
    'ResourceNotFoundException': ("TABLE_NOT_FOUND", None),
    'ProvisionedThroughputExceededException': ("THROUGHPUT_EXCEEDED", 60),
    'ThrottlingException': ("THROTTLING_ERROR", 30),
    'RequestLimitExceeded': ("THROTTLING_ERROR", 30),
}


class DynamoDBStore:
    """Record store backed by a DynamoDB table with (context, id) as primary key."""

    def __init__(
        self,
        table_name: str,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        max_workers: int = 8,
    ):
        """
        Initialize DynamoDB store.

        Args:
            table_name: Name of the DynamoDB table
            region_name: AWS region name
            endpoint_url: DynamoDB endpoint URL (for local testing)
            max_workers: Thread pool size for batch upserts
        """
        self.table_name = table_name
        self.max_workers = max_workers

        session_config = {}
        if region_name:
            session_config['region_name'] = region_name
        if endpoint_url:
            session_config['endpoint_url'] = endpoint_url

        self.dynamodb = boto3.resource('dynamodb', **session_config)
        self.table = self.dynamodb.Table(table_name)
        # Clients are thread-safe, resources are not
        self._client = self.table.meta.client

        logger.info("DynamoDB store initialized", extra={
            "table_name": table_name,
            "region_name": region_name,
            "endpoint_url": endpoint_url,
        })

    def _handle_dynamodb_errors(self, operation: str, key: Optional[Dict[str, Any]] = None):
        """
        Decorator mapping boto3 failures of one store operation to service errors.

        When ``key`` is given, a failed condition check means the keyed record
        does not exist and is raised as RecordNotFoundError.
        """

        def decorator(func):
            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                started = time.perf_counter()
                try:
                    result = func(*args, **kwargs)
                except BaseServiceError:
                    raise
                except ClientError as e:
                    raise self._map_client_error(operation, e, key) from e
                except BotoCoreError as e:
                    metrics.add_metric(name=f"DynamoDB{operation}Error", unit=MetricUnit.Count, value=1)
                    logger.error(f"DynamoDB {operation} could not reach the service", extra={
                        "error": str(e),
                        "table_name": self.table_name,
                    })
                    raise ExternalServiceError(
                        message=f"Database connection error: {e}",
                        service_name="DynamoDB",
                        error_code="DATABASE_CONNECTION_ERROR",
                    ) from e

                metrics.add_metric(
                    name=f"DynamoDB{operation}Duration",
                    unit=MetricUnit.Milliseconds,
                    value=(time.perf_counter() - started) * 1000,
                )
                tracer.put_annotation("dynamodb_operation", operation)
                tracer.put_annotation("table_name", self.table_name)
                return result

            return wrapper
        return decorator

    def _map_client_error(self, operation: str, error: ClientError, key: Optional[Dict[str, Any]]) -> BaseServiceError:
        code = error.response['Error']['Code']
        message = error.response['Error']['Message']

        if code == 'ConditionalCheckFailedException' and key is not None:
            logger.info(f"DynamoDB {operation} target does not exist", extra={
                "table_name": self.table_name,
                "key": key,
            })
            return RecordNotFoundError(table_name=self.table_name, key=key)

        metrics.add_metric(name=f"DynamoDB{operation}Error", unit=MetricUnit.Count, value=1)
        logger.error(f"DynamoDB {operation} failed", extra={
            "error_code": code,
            "error_message": message,
            "table_name": self.table_name,
        })

        error_code, retry_after = CLIENT_ERROR_CODES.get(code, (f"DYNAMODB_{code}", None))
        return DALError(
            message=f"DynamoDB {operation} failed on {self.table_name}: {message}",
            operation=operation,
            table_name=self.table_name,
            error_code=error_code,
            severity=ErrorSeverity.HIGH if code in CLIENT_ERROR_CODES else ErrorSeverity.MEDIUM,
            retry_after=retry_after,
        )

    @staticmethod
    def _require_key(record: Dict[str, Any]) -> None:
        if not record.get(CONTEXT_ATTRIBUTE) or not record.get(ID_ATTRIBUTE):
            raise ValidationError(
                message="Record must carry context and id",
                field_errors=[
                    {"field": name, "message": "required"}
                    for name in (CONTEXT_ATTRIBUTE, ID_ATTRIBUTE)
                    if not record.get(name)
                ],
            )

    @tracer.capture_method
    def get_by_key(self, context: RecordContext, record_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a single record.

        Args:
            context: Partition of the record
            record_id: Id of the record within its partition

        Returns:
            Record data or None if not found

        Raises:
            DALError: If DynamoDB operation fails
        """

        @self._handle_dynamodb_errors("GetItem")
        def _get_item():
            response = self.table.get_item(Key=record_key(context, record_id))
            return response.get('Item')

        return _get_item()

    @tracer.capture_method
    def put_item(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create or fully replace a record.

        Args:
            record: Record data including context and id

        Returns:
            The stored record

        Raises:
            ValidationError: If the record has no context or id
            DALError: If DynamoDB operation fails
        """
        self._require_key(record)

        @self._handle_dynamodb_errors("PutItem")
        def _put_item():
            self.table.put_item(Item=record)
            logger.info("Record stored", extra={
                "table_name": self.table_name,
                "context": record[CONTEXT_ATTRIBUTE],
                "record_id": record[ID_ATTRIBUTE],
            })
            return record

        return _put_item()

    def _put_one(self, record: Dict[str, Any]) -> PutResult:
        context = str(record.get(CONTEXT_ATTRIBUTE, ''))
        record_id = str(record.get(ID_ATTRIBUTE, ''))
        try:
            self._require_key(record)
            self._client.put_item(TableName=self.table_name, Item=record)
        except ValidationError as e:
            return PutResult(context=context, id=record_id, success=False, error=e.error_code)
        except ClientError as e:
            return PutResult(context=context, id=record_id, success=False, error=e.response['Error']['Code'])
        except BotoCoreError as e:
            return PutResult(context=context, id=record_id, success=False, error=type(e).__name__)
        return PutResult(context=context, id=record_id, success=True)

    @tracer.capture_method
    def put_items(self, records: Sequence[Dict[str, Any]]) -> List[PutResult]:
        """
        Upsert records concurrently.

        Writes that succeed stay in place when others fail; the caller decides
        whether to retry or roll back.

        Args:
            records: Records including context and id

        Returns:
            One result per record, in input order
        """
        if not records:
            return []

        results: List[Optional[PutResult]] = [None] * len(records)
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(records))) as executor:
            future_to_index = {
                executor.submit(self._put_one, record): index
                for index, record in enumerate(records)
            }
            for future in as_completed(future_to_index):
                results[future_to_index[future]] = future.result()

        failed = [result for result in results if not result.success]
        if failed:
            metrics.add_metric(name="DynamoDBBatchPutError", unit=MetricUnit.Count, value=len(failed))
            logger.error("Batch upsert finished with failures", extra={
                "table_name": self.table_name,
                "failed": [result.model_dump() for result in failed],
            })
        logger.info("Batch upsert finished", extra={
            "table_name": self.table_name,
            "total": len(records),
            "failed": len(failed),
        })
        return results

    @tracer.capture_method
    def update_field(self, context: RecordContext, record_id: str, field: str, value: Any) -> Dict[str, Any]:
        """
        Set one attribute of an existing record.

        Args:
            context: Partition of the record
            record_id: Id of the record
            field: Attribute name
            value: New attribute value

        Returns:
            The record after the update

        Raises:
            RecordNotFoundError: If no record has this key
            DALError: If DynamoDB operation fails
        """
        key = record_key(context, record_id)

        @self._handle_dynamodb_errors("UpdateItem", key=key)
        def _update_item():
            response = self.table.update_item(
                Key=key,
                UpdateExpression="SET #field = :value",
                ConditionExpression="attribute_exists(#id)",
                ExpressionAttributeNames={"#field": field, "#id": ID_ATTRIBUTE},
                ExpressionAttributeValues={":value": value},
                ReturnValues="ALL_NEW",
            )
            logger.info("Record field updated", extra={
                "table_name": self.table_name,
                "key": key,
                "field": field,
            })
            return response.get('Attributes', {})

        return _update_item()

    @tracer.capture_method
    def query_by_context(self, context: RecordContext) -> List[Dict[str, Any]]:
        """
        Read every record of a partition, following pagination.

        Args:
            context: Partition to read

        Returns:
            Records in no guaranteed order
        """

        @self._handle_dynamodb_errors("Query")
        def _query():
            query_kwargs: Dict[str, Any] = {
                'KeyConditionExpression': Key(CONTEXT_ATTRIBUTE).eq(RecordContext(context).value),
            }
            records: List[Dict[str, Any]] = []
            while True:
                response = self.table.query(**query_kwargs)
                records.extend(response.get('Items', []))
                last_key = response.get('LastEvaluatedKey')
                if not last_key:
                    break
                query_kwargs['ExclusiveStartKey'] = last_key

            logger.debug("Partition queried", extra={
                "table_name": self.table_name,
                "context": RecordContext(context).value,
                "count": len(records),
            })
            return records

        return _query()

    @tracer.capture_method
    def delete_by_key(self, context: RecordContext, record_id: str) -> bool:
        """
        Delete a record.

        Args:
            context: Partition of the record
            record_id: Id of the record

        Returns:
            True if a record was deleted, False if none existed
        """
        key = record_key(context, record_id)

        @self._handle_dynamodb_errors("DeleteItem")
        def _delete_item():
            response = self.table.delete_item(Key=key, ReturnValues='ALL_OLD')
            deleted = bool(response.get('Attributes'))
            logger.info("Record deleted" if deleted else "Record not found for deletion", extra={
                "table_name": self.table_name,
                "key": key,
            })
            return deleted

        return _delete_item()
