"""
Proxy 描述符模型
编译输出，字段名即与代理进程之间的线上契约
"""
from typing import Dict, Any, Optional, Tuple
from dataclasses import dataclass, field, fields

DISCOVERY_TYPE_MHA = "mha"


@dataclass(frozen=True)
class SimpleLoadBalanceConfig:
    """简单负载均衡配置"""
    balancer_type: str
    nodes: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'balance_type': self.balancer_type,
            'nodes': list(self.nodes)
        }


@dataclass(frozen=True)
class RuleConfig:
    """读写分离规则"""
    name: str
    type: str
    regex: Tuple[str, ...] = ()
    target: str = ""
    algorithm_name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'name': self.name, 'type': self.type}
        # generic 规则没有 regex 和 target
        if self.regex:
            result['regex'] = list(self.regex)
        if self.target:
            result['target'] = self.target
        result['algorithm_name'] = self.algorithm_name
        return result


@dataclass(frozen=True)
class MasterHighAvailabilityConfig:
    """扁平化后的主库高可用发现配置"""
    user: str = ""
    password: str = ""
    monitor_interval: int = 0
    connect_interval: int = 0
    connect_timeout: int = 0
    connect_max_failures: int = 0
    ping_interval: int = 0
    ping_timeout: int = 0
    ping_max_failures: int = 0
    replication_lag_interval: int = 0
    replication_lag_timeout: int = 0
    replication_lag_max_failures: int = 0
    max_replication_lag: int = 0
    read_only_interval: int = 0
    read_only_timeout: int = 0
    read_only_max_failures: int = 0
    type: str = DISCOVERY_TYPE_MHA

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'type': self.type}
        for f in fields(self):
            if f.name != 'type':
                result[f.name] = getattr(self, f.name)
        return result


@dataclass(frozen=True)
class StaticSplittingConfig:
    """静态读写分离配置"""
    default_target: str = ""
    rules: Tuple[RuleConfig, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'default_target': self.default_target,
            'rule': [r.to_dict() for r in self.rules]
        }


@dataclass(frozen=True)
class DynamicSplittingConfig:
    """动态读写分离配置"""
    discovery: MasterHighAvailabilityConfig
    default_target: str = ""
    rules: Tuple[RuleConfig, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'default_target': self.default_target,
            'rule': [r.to_dict() for r in self.rules],
            'discovery': self.discovery.to_dict()
        }


@dataclass(frozen=True)
class ReadWriteSplittingConfig:
    """读写分离配置"""
    static: Optional[StaticSplittingConfig] = None
    dynamic: Optional[DynamicSplittingConfig] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.static is not None:
            result['static'] = self.static.to_dict()
        if self.dynamic is not None:
            result['dynamic'] = self.dynamic.to_dict()
        return result


@dataclass(frozen=True)
class CircuitBreakConfig:
    regex: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {'regex': list(self.regex)}


@dataclass(frozen=True)
class ConcurrencyControlConfig:
    regex: Tuple[str, ...] = ()
    duration: int = 0  # 纳秒
    max_concurrency: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'regex': list(self.regex),
            'duration': self.duration,
            'max_concurrency': self.max_concurrency
        }


@dataclass(frozen=True)
class PluginConfig:
    """插件配置：熔断与并发控制"""
    circuit_breaks: Tuple[CircuitBreakConfig, ...] = ()
    concurrency_controls: Tuple[ConcurrencyControlConfig, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'circuit_break': [c.to_dict() for c in self.circuit_breaks],
            'concurrency_control': [c.to_dict() for c in self.concurrency_controls]
        }


@dataclass(frozen=True)
class Proxy:
    """编译后的代理描述符"""
    name: str
    backend_type: str
    listen_addr: str
    db: str = ""
    user: str = ""
    password: str = ""
    server_version: str = ""
    pool_size: int = 0
    simple_loadbalance: Optional[SimpleLoadBalanceConfig] = None
    read_write_splitting: Optional[ReadWriteSplittingConfig] = None
    plugin: PluginConfig = field(default_factory=PluginConfig)

    def to_dict(self) -> Dict[str, Any]:
        """转换为线上格式字典，缺省的段落不输出"""
        result: Dict[str, Any] = {
            'name': self.name,
            'backend_type': self.backend_type,
            'db': self.db,
            'user': self.user,
            'password': self.password,
            'server_version': self.server_version,
            'pool_size': self.pool_size,
            'listen_addr': self.listen_addr,
        }
        if self.simple_loadbalance is not None:
            result['simple_loadbalance'] = self.simple_loadbalance.to_dict()
        if self.read_write_splitting is not None:
            result['read_write_splitting'] = self.read_write_splitting.to_dict()
        result['plugin'] = self.plugin.to_dict()
        return result
