"""
配置编译错误
所有错误都只作用于单次构建，不会修改之前生成的描述符
"""
from typing import Optional


class ProxyConfigError(Exception):
    """配置编译错误基类"""


class ShapeViolationError(ProxyConfigError):
    """互斥字段约束被破坏（没有或多于一个变体被填充）"""

    def __init__(self, invariant: str, message: Optional[str] = None):
        self.invariant = invariant
        super().__init__(message or f"违反配置约束: {invariant}")


class UnsupportedBackendError(ShapeViolationError):
    """不支持的后端类型"""

    def __init__(self, backend_kind: str):
        self.backend_kind = backend_kind
        super().__init__(
            "databaseService.backend",
            f"不支持的后端类型: {backend_kind}"
        )


class InvalidRegexError(ProxyConfigError):
    """非法正则表达式"""

    def __init__(self, pattern: str, location: str, reason: str = ""):
        self.pattern = pattern
        self.location = location
        detail = f": {reason}" if reason else ""
        super().__init__(f"{location} 中的正则表达式非法 '{pattern}'{detail}")


class InvalidRuleError(ProxyConfigError):
    """读写分离规则结构非法"""


class InvalidEndpointError(ProxyConfigError):
    """数据库端点非法（如角色注解取值错误）"""


class UnresolvedReferenceError(ProxyConfigError):
    """选择器没有匹配到任何端点"""

    def __init__(self, strategy_name: str):
        self.strategy_name = strategy_name
        super().__init__(f"流量策略 {strategy_name} 的选择器没有匹配到任何数据库端点")


class UnsupportedAlgorithmError(ProxyConfigError):
    """不支持的负载均衡算法"""

    def __init__(self, algorithm: str, location: str):
        self.algorithm = algorithm
        self.location = location
        super().__init__(f"{location} 使用了不支持的负载均衡算法: {algorithm}")


class ManifestError(ProxyConfigError):
    """资源清单格式错误"""
