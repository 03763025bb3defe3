"""
数据库网格配置模型
"""

# 输入资源模型
from .resource_models import (
    BackendType,
    LoadBalanceAlgorithm,
    TargetRole,
    EndpointRole,
    DatabaseMySQL,
    DatabaseService,
    VirtualDatabaseService,
    MySQL,
    DatabaseEndpoint,
    Probe,
    ReplicationLagProbe,
    MasterHighAvailability,
    ReadWriteSplittingRule,
    ReadWriteSplittingStatic,
    ReadWriteSplittingDynamic,
    ReadWriteSplitting,
    SimpleLoadBalance,
    CircuitBreak,
    ConcurrencyControl,
    TrafficStrategy,
    ResourceSet
)

# 输出描述符模型
from .proxy_models import (
    Proxy,
    SimpleLoadBalanceConfig,
    ReadWriteSplittingConfig,
    StaticSplittingConfig,
    DynamicSplittingConfig,
    RuleConfig,
    MasterHighAvailabilityConfig,
    PluginConfig,
    CircuitBreakConfig,
    ConcurrencyControlConfig
)

from .errors import (
    ProxyConfigError,
    ShapeViolationError,
    UnsupportedBackendError,
    InvalidRegexError,
    InvalidRuleError,
    InvalidEndpointError,
    UnresolvedReferenceError,
    UnsupportedAlgorithmError,
    ManifestError
)

__all__ = [
    # 输入资源
    'BackendType',
    'LoadBalanceAlgorithm',
    'TargetRole',
    'EndpointRole',
    'DatabaseMySQL',
    'DatabaseService',
    'VirtualDatabaseService',
    'MySQL',
    'DatabaseEndpoint',
    'Probe',
    'ReplicationLagProbe',
    'MasterHighAvailability',
    'ReadWriteSplittingRule',
    'ReadWriteSplittingStatic',
    'ReadWriteSplittingDynamic',
    'ReadWriteSplitting',
    'SimpleLoadBalance',
    'CircuitBreak',
    'ConcurrencyControl',
    'TrafficStrategy',
    'ResourceSet',

    # 输出描述符
    'Proxy',
    'SimpleLoadBalanceConfig',
    'ReadWriteSplittingConfig',
    'StaticSplittingConfig',
    'DynamicSplittingConfig',
    'RuleConfig',
    'MasterHighAvailabilityConfig',
    'PluginConfig',
    'CircuitBreakConfig',
    'ConcurrencyControlConfig',

    # 错误
    'ProxyConfigError',
    'ShapeViolationError',
    'UnsupportedBackendError',
    'InvalidRegexError',
    'InvalidRuleError',
    'InvalidEndpointError',
    'UnresolvedReferenceError',
    'UnsupportedAlgorithmError',
    'ManifestError'
]
