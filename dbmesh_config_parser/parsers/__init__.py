from .resource_parser import (
    ResourceParser,
    parse_resource,
    KIND_VIRTUAL_DATABASE,
    KIND_TRAFFIC_STRATEGY,
    KIND_DATABASE_ENDPOINT
)

__all__ = [
    'ResourceParser',
    'parse_resource',
    'KIND_VIRTUAL_DATABASE',
    'KIND_TRAFFIC_STRATEGY',
    'KIND_DATABASE_ENDPOINT'
]
