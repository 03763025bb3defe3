"""
输入资源模型
表示控制面提供的三类资源：VirtualDatabase 服务、TrafficStrategy 和 DatabaseEndpoint。
负载均衡与读写分离的互斥变体用封闭的联合类型表示，解析时即保证“只有一个被填充”。
"""
from typing import Dict, List, Optional, Tuple, Union, Any
from dataclasses import dataclass, field
from enum import Enum

from kubernetes.client import V1ObjectMeta, V1LabelSelector


class BackendType(Enum):
    """后端数据库类型"""
    MYSQL = "mysql"


class LoadBalanceAlgorithm(Enum):
    """负载均衡算法"""
    ROUND_ROBIN = "roundrobin"
    RANDOM = "random"


class TargetRole(Enum):
    """读写分离规则的目标分组"""
    READ = "read"
    READ_WRITE = "readwrite"


class EndpointRole(Enum):
    """数据库端点角色（来自注解）"""
    READ = "read"
    READ_WRITE = "read-write"


RULE_TYPE_REGEX = "regex"
RULE_TYPE_GENERIC = "generic"

# 端点角色注解键
DATABASE_ENDPOINT_ROLE_KEY = "database-mesh.io/role"


@dataclass(frozen=True)
class DatabaseMySQL:
    """虚拟数据库服务的 MySQL 后端声明"""
    host: str
    port: int
    db: str = ""
    user: str = ""
    password: str = ""
    server_version: str = ""
    pool_size: int = 0


@dataclass(frozen=True)
class DatabaseService:
    """后端声明，只能填充一种后端类型"""
    mysql: Optional[DatabaseMySQL] = None

    def populated_backends(self) -> List[Tuple[BackendType, Any]]:
        """返回所有已填充的后端"""
        backends = []
        if self.mysql is not None:
            backends.append((BackendType.MYSQL, self.mysql))
        return backends


@dataclass(frozen=True)
class VirtualDatabaseService:
    """网格暴露的虚拟数据库服务"""
    name: str
    database_service: DatabaseService
    traffic_strategy: str = ""  # 按名称引用的流量策略


@dataclass(frozen=True)
class MySQL:
    """端点的 MySQL 连接参数"""
    host: str
    port: int
    db: str = ""
    user: str = ""
    password: str = ""


@dataclass(frozen=True)
class DatabaseEndpoint:
    """物理数据库端点"""
    metadata: V1ObjectMeta
    mysql: Optional[MySQL] = None

    @property
    def name(self) -> str:
        return self.metadata.name or ""

    @property
    def namespace(self) -> str:
        return self.metadata.namespace or "default"

    @property
    def labels(self) -> Dict[str, str]:
        return self.metadata.labels or {}

    @property
    def annotations(self) -> Dict[str, str]:
        return self.metadata.annotations or {}

    def role(self, key: str = DATABASE_ENDPOINT_ROLE_KEY) -> Optional[str]:
        """读取角色注解，未设置时返回 None"""
        return self.annotations.get(key)


@dataclass(frozen=True)
class Probe:
    """健康探测参数（毫秒）"""
    period_milliseconds: int = 0
    timeout_milliseconds: int = 0
    failure_threshold: int = 0


@dataclass(frozen=True)
class ReplicationLagProbe(Probe):
    """复制延迟探测，额外携带最大允许延迟"""
    max_replication_lag: int = 0


@dataclass(frozen=True)
class MasterHighAvailability:
    """主库高可用发现配置"""
    user: str = ""
    password: str = ""
    monitor_interval: int = 0
    connection_probe: Optional[Probe] = None
    ping_probe: Optional[Probe] = None
    replication_lag_probe: Optional[ReplicationLagProbe] = None
    read_only_probe: Optional[Probe] = None


@dataclass(frozen=True)
class ReadWriteSplittingRule:
    """读写分离路由规则"""
    name: str
    type: str = RULE_TYPE_REGEX
    regex: Tuple[str, ...] = ()
    target: str = ""
    algorithm_name: str = LoadBalanceAlgorithm.ROUND_ROBIN.value


@dataclass(frozen=True)
class ReadWriteSplittingStatic:
    """静态读写分离：固定规则表"""
    default_target: str = ""
    rules: Tuple[ReadWriteSplittingRule, ...] = ()


@dataclass(frozen=True)
class ReadWriteSplittingDynamic:
    """动态读写分离：规则表 + 拓扑发现"""
    discovery: MasterHighAvailability
    default_target: str = ""
    rules: Tuple[ReadWriteSplittingRule, ...] = ()


ReadWriteSplittingMode = Union[ReadWriteSplittingStatic, ReadWriteSplittingDynamic]


@dataclass(frozen=True)
class ReadWriteSplitting:
    """读写分离，静态与动态二选一"""
    mode: ReadWriteSplittingMode


@dataclass(frozen=True)
class SimpleLoadBalance:
    """简单负载均衡"""
    kind: str = LoadBalanceAlgorithm.ROUND_ROBIN.value


LoadBalanceVariant = Union[SimpleLoadBalance, ReadWriteSplitting]


@dataclass(frozen=True)
class CircuitBreak:
    """熔断规则：匹配到的语句会被拦截"""
    regex: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ConcurrencyControl:
    """并发控制规则"""
    regex: Tuple[str, ...] = ()
    duration: int = 0  # 纳秒
    max_concurrency: int = 0


@dataclass(frozen=True)
class TrafficStrategy:
    """流量策略"""
    metadata: V1ObjectMeta
    selector: Optional[V1LabelSelector] = None
    load_balance: Optional[LoadBalanceVariant] = None
    circuit_breaks: Tuple[CircuitBreak, ...] = ()
    concurrency_controls: Tuple[ConcurrencyControl, ...] = ()

    @property
    def name(self) -> str:
        return self.metadata.name or ""

    @property
    def namespace(self) -> str:
        return self.metadata.namespace or "default"


@dataclass
class ResourceSet:
    """一次解析得到的全部资源"""
    services: List[VirtualDatabaseService] = field(default_factory=list)
    strategies: List[TrafficStrategy] = field(default_factory=list)
    endpoints: List[DatabaseEndpoint] = field(default_factory=list)
