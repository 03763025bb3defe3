"""
构建期校验
正则表达式、负载均衡算法、规则结构和端点角色
"""
import re
from typing import Iterable, Optional

from dbmesh_config_parser.models.errors import (
    InvalidRegexError, InvalidRuleError, InvalidEndpointError, UnsupportedAlgorithmError
)
from dbmesh_config_parser.models.resource_models import (
    LoadBalanceAlgorithm, TargetRole, EndpointRole, ReadWriteSplittingRule,
    DatabaseEndpoint, RULE_TYPE_REGEX, RULE_TYPE_GENERIC
)

SUPPORTED_ALGORITHMS = {a.value for a in LoadBalanceAlgorithm}
SUPPORTED_TARGETS = {t.value for t in TargetRole}
SUPPORTED_ROLES = {r.value for r in EndpointRole}


# 代理端使用 Rust regex 引擎，不支持环视和反向引用
_UNSUPPORTED_CONSTRUCT = re.compile(r'\\[1-9]|\(\?P=|\(\?<?[=!]|\\.')


def _find_unsupported_construct(pattern: str) -> Optional[str]:
    for match in _UNSUPPORTED_CONSTRUCT.finditer(pattern):
        token = match.group(0)
        if token.startswith('(') or token[1].isdigit():
            return token
    return None


def validate_patterns(patterns: Iterable[str], location: str):
    """逐个编译正则表达式，失败立即报错"""
    for pattern in patterns:
        if not isinstance(pattern, str):
            raise InvalidRegexError(str(pattern), location, "不是字符串")
        try:
            re.compile(pattern)
        except re.error as e:
            raise InvalidRegexError(pattern, location, str(e)) from e
        token = _find_unsupported_construct(pattern)
        if token is not None:
            raise InvalidRegexError(pattern, location, f"代理端不支持环视或反向引用: {token}")


def validate_algorithm(algorithm: str, location: str):
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise UnsupportedAlgorithmError(algorithm, location)


def validate_default_target(target: str, location: str):
    # 空值由代理端按 readwrite 处理
    if target and target not in SUPPORTED_TARGETS:
        raise InvalidRuleError(f"{location} 的默认目标非法: {target}")


def validate_rule(rule: ReadWriteSplittingRule, location: str, check_regex: bool = True):
    """校验单条读写分离规则"""
    location = f"{location}.{rule.name or '<unnamed>'}"
    if not rule.name:
        raise InvalidRuleError(f"{location}: 规则名称不能为空")

    if rule.type == RULE_TYPE_REGEX:
        if not rule.regex:
            raise InvalidRuleError(f"{location}: regex 规则的正则列表不能为空")
        if rule.target not in SUPPORTED_TARGETS:
            raise InvalidRuleError(f"{location}: 规则目标非法: {rule.target!r}")
        if check_regex:
            validate_patterns(rule.regex, location)
    elif rule.type == RULE_TYPE_GENERIC:
        if rule.regex or rule.target:
            raise InvalidRuleError(f"{location}: generic 规则不能携带 regex 或 target")
    else:
        raise InvalidRuleError(f"{location}: 不支持的规则类型: {rule.type!r}")

    validate_algorithm(rule.algorithm_name, location)


def validate_endpoint_role(endpoint: DatabaseEndpoint, key: str):
    """角色注解存在时必须是 read 或 read-write"""
    role = endpoint.role(key)
    if role is not None and role not in SUPPORTED_ROLES:
        raise InvalidEndpointError(
            f"端点 {endpoint.namespace}/{endpoint.name} 的角色注解 {key}={role!r} 非法，"
            f"可选值: {sorted(SUPPORTED_ROLES)}"
        )
