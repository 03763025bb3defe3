"""ServiceResolver 测试"""
import pytest

from dbmesh_config_parser.builders.service_resolver import ServiceResolver
from dbmesh_config_parser.models.errors import ShapeViolationError
from dbmesh_config_parser.models.resource_models import (
    VirtualDatabaseService, DatabaseService, DatabaseMySQL
)


def test_resolves_mysql_backend(service):
    binding = ServiceResolver().resolve(service)

    assert binding.name == 'catalogue'
    assert binding.backend_type == 'mysql'
    assert binding.listen_addr == '127.0.0.1:3306'
    assert binding.db == 'socksdb'
    assert binding.user == 'root'
    assert binding.password == 'fake_password'
    assert binding.server_version == '5.7.37'
    assert binding.pool_size == 3


def test_listen_addr_joins_host_and_port():
    service = VirtualDatabaseService(
        name='orders',
        database_service=DatabaseService(mysql=DatabaseMySQL(host='0.0.0.0', port=13306)),
    )
    assert ServiceResolver().resolve(service).listen_addr == '0.0.0.0:13306'


def test_missing_backend_is_rejected():
    service = VirtualDatabaseService(name='orders', database_service=DatabaseService())
    with pytest.raises(ShapeViolationError) as exc_info:
        ServiceResolver().resolve(service)
    assert 'exactly one backend kind' in exc_info.value.invariant
