"""
共享测试夹具

提供与真实集群清单同构的 VirtualDatabase、TrafficStrategy、DatabaseEndpoint 文档，
以及解析后的资源模型。所有夹具都不访问文件系统或网络。
"""
import copy

import pytest

from dbmesh_config_parser.config import CompilerConfig, set_config
from dbmesh_config_parser.models.resource_models import (
    MasterHighAvailability, Probe, ReplicationLagProbe
)
from dbmesh_config_parser.parsers.resource_parser import ResourceParser


RULES = [
    {
        'name': 'write-rule',
        'regex': ['^insert'],
        'target': 'readwrite',
        'type': 'regex',
        'algorithmName': 'roundrobin',
    },
    {
        'name': 'read-rule',
        'regex': ['^select'],
        'target': 'read',
        'type': 'regex',
        'algorithmName': 'roundrobin',
    },
]

MASTER_HIGH_AVAILABILITY = {
    'user': 'monitor',
    'password': 'monitor',
    'monitorInterval': 1000,
    'connectionProbe': {
        'probe': {'periodMilliseconds': 2000, 'failureThreshold': 3, 'timeoutMilliseconds': 200},
    },
    'pingProbe': {
        'probe': {'periodMilliseconds': 1000, 'timeoutMilliseconds': 100, 'failureThreshold': 3},
    },
    'replicationLagProbe': {
        'probe': {'periodMilliseconds': 1000, 'timeoutMilliseconds': 3, 'failureThreshold': 3},
        'maxReplicationLag': 3,
    },
    'readOnlyProbe': {
        'probe': {'periodMilliseconds': 1000, 'timeoutMilliseconds': 3, 'failureThreshold': 3},
    },
}


def _strategy_doc(load_balance):
    spec = {
        'selector': {'matchLabels': {'source': 'catalogue'}},
        'circuitBreaks': [{'regex': ['^select']}],
        'concurrencyControls': [
            {'regex': ['^insert'], 'duration': '10s', 'maxConcurrency': 10},
        ],
    }
    if load_balance is not None:
        spec['loadBalance'] = load_balance
    return {
        'apiVersion': 'core.database-mesh.io/v1alpha1',
        'kind': 'TrafficStrategy',
        'metadata': {'name': 'catalogue', 'namespace': 'demotest'},
        'spec': spec,
    }


@pytest.fixture(autouse=True)
def reset_global_config():
    """每个测试前后恢复默认全局配置"""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def parser():
    return ResourceParser()


@pytest.fixture
def virtual_database_doc():
    return {
        'apiVersion': 'core.database-mesh.io/v1alpha1',
        'kind': 'VirtualDatabase',
        'metadata': {'name': 'catalogue'},
        'spec': {
            'services': [
                {
                    'name': 'catalogue',
                    'trafficStrategy': 'catalogue',
                    'databaseService': {
                        'databaseMySQL': {
                            'host': '127.0.0.1',
                            'port': 3306,
                            'db': 'socksdb',
                            'user': 'root',
                            'password': 'fake_password',
                            'serverVersion': '5.7.37',
                            'poolSize': 3,
                        },
                    },
                },
            ],
        },
    }


@pytest.fixture
def endpoint_doc():
    return {
        'apiVersion': 'core.database-mesh.io/v1alpha1',
        'kind': 'DatabaseEndpoint',
        'metadata': {
            'name': 'catalogue',
            'namespace': 'demotest',
            'annotations': {'database-mesh.io/role': 'read-write'},
            'labels': {'source': 'catalogue'},
        },
        'spec': {
            'database': {
                'MySQL': {
                    'db': 'socksdb',
                    'host': 'catalogue-db.demotest',
                    'password': 'fake_password',
                    'port': 3306,
                    'user': 'root',
                },
            },
        },
    }


@pytest.fixture
def simple_strategy_doc():
    return _strategy_doc({'simpleLoadBalance': {'kind': 'roundrobin'}})


@pytest.fixture
def static_strategy_doc():
    return _strategy_doc({
        'readWriteSplitting': {
            'static': {'defaultTarget': 'readwrite', 'rules': copy.deepcopy(RULES)},
        },
    })


@pytest.fixture
def dynamic_strategy_doc():
    return _strategy_doc({
        'readWriteSplitting': {
            'dynamic': {
                'defaultTarget': 'readwrite',
                'rules': copy.deepcopy(RULES),
                'discovery': {'masterHighAvailability': copy.deepcopy(MASTER_HIGH_AVAILABILITY)},
            },
        },
    })


@pytest.fixture
def unset_strategy_doc():
    return _strategy_doc(None)


@pytest.fixture
def service(parser, virtual_database_doc):
    return parser.parse_virtual_database(virtual_database_doc)[0]


@pytest.fixture
def endpoint(parser, endpoint_doc):
    return parser.parse_database_endpoint(endpoint_doc)


@pytest.fixture
def simple_strategy(parser, simple_strategy_doc):
    return parser.parse_traffic_strategy(simple_strategy_doc)


@pytest.fixture
def static_strategy(parser, static_strategy_doc):
    return parser.parse_traffic_strategy(static_strategy_doc)


@pytest.fixture
def dynamic_strategy(parser, dynamic_strategy_doc):
    return parser.parse_traffic_strategy(dynamic_strategy_doc)


@pytest.fixture
def unset_strategy(parser, unset_strategy_doc):
    return parser.parse_traffic_strategy(unset_strategy_doc)


@pytest.fixture
def master_high_availability():
    return MasterHighAvailability(
        user='monitor',
        password='monitor',
        monitor_interval=1000,
        connection_probe=Probe(period_milliseconds=2000, timeout_milliseconds=200, failure_threshold=3),
        ping_probe=Probe(period_milliseconds=1000, timeout_milliseconds=100, failure_threshold=3),
        replication_lag_probe=ReplicationLagProbe(
            period_milliseconds=1000, timeout_milliseconds=3, failure_threshold=3,
            max_replication_lag=3
        ),
        read_only_probe=Probe(period_milliseconds=1000, timeout_milliseconds=3, failure_threshold=3),
    )


@pytest.fixture
def strict_config():
    return CompilerConfig(require_endpoints=True)
