"""Application services."""
from .schema_validator import OrderSchema, SchemaValidator
from .record_partitioner import PartitionResult, RecordPartitioner
from .aggregation_engine import AggregationEngine, AggregationReport
from .analytics_service import OrderAnalyticsService
from .order_query_service import OrderQueryService

__all__ = [
    "AggregationEngine",
    "AggregationReport",
    "OrderAnalyticsService",
    "OrderQueryService",
    "OrderSchema",
    "PartitionResult",
    "RecordPartitioner",
    "SchemaValidator",
]
