"""
插件编译器
原样复制熔断与并发控制规则，只校验结构
"""
import logging
from typing import Iterable

from dbmesh_config_parser.models.errors import InvalidRuleError
from dbmesh_config_parser.models.resource_models import CircuitBreak, ConcurrencyControl
from dbmesh_config_parser.models.proxy_models import (
    PluginConfig, CircuitBreakConfig, ConcurrencyControlConfig
)
from dbmesh_config_parser.utils.validation import validate_patterns

logger = logging.getLogger(__name__)


class PluginCompiler:
    """插件编译器"""

    def __init__(self, validate_regex: bool = True):
        self.validate_regex = validate_regex

    def _check_regex(self, regex, location: str):
        if not regex:
            raise InvalidRuleError(f"{location}: 正则列表不能为空")
        if self.validate_regex:
            validate_patterns(regex, location)

    def compile(self,
                circuit_breaks: Iterable[CircuitBreak],
                concurrency_controls: Iterable[ConcurrencyControl]) -> PluginConfig:
        cbs = []
        for i, cb in enumerate(circuit_breaks):
            self._check_regex(cb.regex, f"circuitBreaks[{i}]")
            cbs.append(CircuitBreakConfig(regex=tuple(cb.regex)))

        ccs = []
        for i, cc in enumerate(concurrency_controls):
            location = f"concurrencyControls[{i}]"
            self._check_regex(cc.regex, location)
            if cc.duration < 0:
                raise InvalidRuleError(f"{location}: duration 不能为负数")
            if cc.max_concurrency < 0:
                raise InvalidRuleError(f"{location}: maxConcurrency 不能为负数")
            ccs.append(ConcurrencyControlConfig(
                regex=tuple(cc.regex),
                duration=cc.duration,
                max_concurrency=cc.max_concurrency
            ))

        logger.debug(f"插件: {len(cbs)} 条熔断规则, {len(ccs)} 条并发控制规则")
        return PluginConfig(circuit_breaks=tuple(cbs), concurrency_controls=tuple(ccs))
