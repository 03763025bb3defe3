"""
Proxy 构建器
持有 (服务, 流量策略, 端点) 三元组，依次调用各编译器组装不可变的 Proxy 描述符
"""
import logging
from typing import List, Optional, Sequence

from dbmesh_config_parser.config import CompilerConfig, get_config
from dbmesh_config_parser.builders.service_resolver import ServiceResolver
from dbmesh_config_parser.builders.loadbalance_compiler import LoadBalanceCompiler
from dbmesh_config_parser.builders.plugin_compiler import PluginCompiler
from dbmesh_config_parser.models.errors import UnresolvedReferenceError
from dbmesh_config_parser.models.resource_models import (
    VirtualDatabaseService, TrafficStrategy, DatabaseEndpoint
)
from dbmesh_config_parser.models.proxy_models import Proxy
from dbmesh_config_parser.utils.selector import filter_endpoints
from dbmesh_config_parser.utils.validation import validate_endpoint_role

logger = logging.getLogger(__name__)


class ProxyBuilder:
    """Proxy 构建器"""

    def __init__(self,
                 virtual_database_service: VirtualDatabaseService,
                 traffic_strategy: TrafficStrategy,
                 database_endpoints: Sequence[DatabaseEndpoint] = (),
                 config: Optional[CompilerConfig] = None):
        self.virtual_database_service = virtual_database_service
        self.traffic_strategy = traffic_strategy
        self.database_endpoints = tuple(database_endpoints)
        self.config = config or get_config()

        self.service_resolver = ServiceResolver()
        self.loadbalance_compiler = LoadBalanceCompiler(validate_regex=self.config.validate_regex)
        self.plugin_compiler = PluginCompiler(validate_regex=self.config.validate_regex)

    def _resolve_endpoints(self) -> List[DatabaseEndpoint]:
        """按策略选择器匹配端点"""
        strategy = self.traffic_strategy
        matched = filter_endpoints(strategy.selector, list(self.database_endpoints))
        # 只校验被选中的端点
        if self.config.validate_endpoint_roles:
            for ep in matched:
                validate_endpoint_role(ep, self.config.role_annotation_key)

        if not matched:
            if self.config.require_endpoints:
                raise UnresolvedReferenceError(strategy.name)
            logger.warning(f"流量策略 {strategy.namespace}/{strategy.name} 没有匹配到任何端点，节点列表为空")
        return matched

    def build(self) -> Proxy:
        """
        构建 Proxy 描述符

        任一前置条件不满足时抛出 ProxyConfigError 子类，不会返回部分结果

        Returns:
            Proxy
        """
        service = self.virtual_database_service
        strategy = self.traffic_strategy

        binding = self.service_resolver.resolve(service)
        endpoints = self._resolve_endpoints()

        if strategy.load_balance is None:
            logger.warning(f"流量策略 {strategy.name} 未配置负载均衡，仅输出身份与后端字段")
        simple_lb, rws = self.loadbalance_compiler.compile(strategy.load_balance, endpoints)

        plugin = self.plugin_compiler.compile(strategy.circuit_breaks, strategy.concurrency_controls)

        proxy = Proxy(
            name=binding.name,
            backend_type=binding.backend_type,
            listen_addr=binding.listen_addr,
            db=binding.db,
            user=binding.user,
            password=binding.password,
            server_version=binding.server_version,
            pool_size=binding.pool_size,
            simple_loadbalance=simple_lb,
            read_write_splitting=rws,
            plugin=plugin
        )
        logger.info(f"Proxy {proxy.name} 构建完成 (策略 {strategy.name}, {len(endpoints)} 个端点)")
        return proxy


def build_proxy(service: VirtualDatabaseService,
                strategy: TrafficStrategy,
                endpoints: Sequence[DatabaseEndpoint] = (),
                config: Optional[CompilerConfig] = None) -> Proxy:
    """构建 Proxy 描述符的便捷函数"""
    return ProxyBuilder(service, strategy, endpoints, config).build()
