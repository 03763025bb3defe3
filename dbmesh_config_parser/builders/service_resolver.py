"""
服务解析器
从虚拟数据库服务的后端声明中提取连接参数、身份字段和监听地址
"""
import logging
from dataclasses import dataclass

from dbmesh_config_parser.models.errors import ShapeViolationError
from dbmesh_config_parser.models.resource_models import (
    VirtualDatabaseService, BackendType, DatabaseMySQL
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceBinding:
    """服务解析结果"""
    name: str
    backend_type: str
    listen_addr: str
    db: str = ""
    user: str = ""
    password: str = ""
    server_version: str = ""
    pool_size: int = 0


class ServiceResolver:
    """服务解析器"""

    def _resolve_mysql(self, name: str, mysql: DatabaseMySQL) -> ServiceBinding:
        return ServiceBinding(
            name=name,
            backend_type=BackendType.MYSQL.value,
            listen_addr=f"{mysql.host}:{mysql.port}",
            db=mysql.db,
            user=mysql.user,
            password=mysql.password,
            server_version=mysql.server_version,
            pool_size=mysql.pool_size
        )

    def resolve(self, service: VirtualDatabaseService) -> ServiceBinding:
        """
        解析服务

        Args:
            service: 虚拟数据库服务

        Returns:
            ServiceBinding

        Raises:
            ShapeViolationError: 没有或多于一个后端类型被填充
        """
        backends = service.database_service.populated_backends()
        if len(backends) != 1:
            kinds = [kind.value for kind, _ in backends]
            raise ShapeViolationError(
                "databaseService: exactly one backend kind",
                f"服务 {service.name} 必须且只能声明一种后端，实际为: {kinds or '无'}"
            )

        kind, backend = backends[0]
        if kind == BackendType.MYSQL:
            binding = self._resolve_mysql(service.name, backend)
        else:
            raise ShapeViolationError("databaseService.backend", f"无法解析后端类型: {kind.value}")

        logger.debug(f"服务 {service.name}: 后端 {binding.backend_type}, 监听 {binding.listen_addr}")
        return binding
