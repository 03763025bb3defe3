"""
负载均衡编译器
根据流量策略的负载均衡变体生成简单负载均衡或读写分离描述
"""
import logging
from typing import List, Optional, Sequence, Tuple

from dbmesh_config_parser.builders.discovery_compiler import DiscoveryCompiler
from dbmesh_config_parser.models.errors import ShapeViolationError
from dbmesh_config_parser.models.resource_models import (
    LoadBalanceVariant, SimpleLoadBalance, ReadWriteSplitting, ReadWriteSplittingStatic,
    ReadWriteSplittingDynamic, ReadWriteSplittingRule, DatabaseEndpoint
)
from dbmesh_config_parser.models.proxy_models import (
    SimpleLoadBalanceConfig, ReadWriteSplittingConfig, StaticSplittingConfig,
    DynamicSplittingConfig, RuleConfig
)
from dbmesh_config_parser.utils.validation import (
    validate_algorithm, validate_rule, validate_default_target
)

logger = logging.getLogger(__name__)

LoadBalanceSections = Tuple[Optional[SimpleLoadBalanceConfig], Optional[ReadWriteSplittingConfig]]


class LoadBalanceCompiler:
    """负载均衡编译器"""

    def __init__(self, discovery_compiler: Optional[DiscoveryCompiler] = None,
                 validate_regex: bool = True):
        self.discovery_compiler = discovery_compiler or DiscoveryCompiler()
        self.validate_regex = validate_regex

    def _compile_rules(self, rules: Sequence[ReadWriteSplittingRule], location: str) -> Tuple[RuleConfig, ...]:
        compiled = []
        for rule in rules:
            validate_rule(rule, location, check_regex=self.validate_regex)
            compiled.append(RuleConfig(
                name=rule.name,
                type=rule.type,
                regex=tuple(rule.regex),
                target=rule.target,
                algorithm_name=rule.algorithm_name
            ))
        return tuple(compiled)

    def _compile_simple(self, simple: SimpleLoadBalance,
                        endpoints: List[DatabaseEndpoint]) -> SimpleLoadBalanceConfig:
        validate_algorithm(simple.kind, "simpleLoadBalance")
        # 节点顺序即端点输入顺序
        nodes = tuple(ep.name for ep in endpoints)
        logger.debug(f"简单负载均衡: 算法 {simple.kind}, 节点 {list(nodes)}")
        return SimpleLoadBalanceConfig(balancer_type=simple.kind, nodes=nodes)

    def _compile_static(self, static: ReadWriteSplittingStatic) -> StaticSplittingConfig:
        location = "readWriteSplitting.static"
        validate_default_target(static.default_target, location)
        return StaticSplittingConfig(
            default_target=static.default_target,
            rules=self._compile_rules(static.rules, f"{location}.rules")
        )

    def _compile_dynamic(self, dynamic: ReadWriteSplittingDynamic) -> DynamicSplittingConfig:
        location = "readWriteSplitting.dynamic"
        validate_default_target(dynamic.default_target, location)
        return DynamicSplittingConfig(
            default_target=dynamic.default_target,
            rules=self._compile_rules(dynamic.rules, f"{location}.rules"),
            discovery=self.discovery_compiler.compile(dynamic.discovery)
        )

    def _compile_read_write_splitting(self, rws: ReadWriteSplitting) -> ReadWriteSplittingConfig:
        mode = rws.mode
        if isinstance(mode, ReadWriteSplittingStatic):
            logger.debug("读写分离: static")
            return ReadWriteSplittingConfig(static=self._compile_static(mode))
        if isinstance(mode, ReadWriteSplittingDynamic):
            logger.debug("读写分离: dynamic")
            return ReadWriteSplittingConfig(dynamic=self._compile_dynamic(mode))
        raise ShapeViolationError(
            "readWriteSplitting: exactly one of static/dynamic",
            f"无法识别的读写分离模式: {type(mode).__name__}"
        )

    def compile(self, load_balance: Optional[LoadBalanceVariant],
                endpoints: List[DatabaseEndpoint]) -> LoadBalanceSections:
        """
        编译负载均衡配置

        Args:
            load_balance: 流量策略的负载均衡变体，None 表示未配置
            endpoints: 已按选择器匹配的端点

        Returns:
            (simple_loadbalance, read_write_splitting)，最多一个非 None
        """
        if load_balance is None:
            return None, None
        if isinstance(load_balance, SimpleLoadBalance):
            return self._compile_simple(load_balance, endpoints), None
        if isinstance(load_balance, ReadWriteSplitting):
            return None, self._compile_read_write_splitting(load_balance)
        raise ShapeViolationError(
            "loadBalance: at most one of simpleLoadBalance/readWriteSplitting",
            f"无法识别的负载均衡变体: {type(load_balance).__name__}"
        )
