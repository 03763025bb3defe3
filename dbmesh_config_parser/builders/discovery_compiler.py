"""
拓扑发现编译器
将嵌套的主库高可用探测配置扁平化为单层标量记录
"""
import logging
from typing import Dict, Optional, Tuple

from dbmesh_config_parser.models.resource_models import MasterHighAvailability, Probe
from dbmesh_config_parser.models.proxy_models import (
    MasterHighAvailabilityConfig, DISCOVERY_TYPE_MHA
)

logger = logging.getLogger(__name__)

# (探测字段, 输出字段前缀)
PROBE_PREFIXES: Tuple[Tuple[str, str], ...] = (
    ('connection_probe', 'connect'),
    ('ping_probe', 'ping'),
    ('replication_lag_probe', 'replication_lag'),
    ('read_only_probe', 'read_only'),
)


def flatten_probe(probe: Optional[Probe], prefix: str) -> Dict[str, int]:
    """
    探测配置 -> 扁平字段

    period -> <prefix>_interval, timeout -> <prefix>_timeout,
    failure_threshold -> <prefix>_max_failures；未配置的探测全部为 0
    """
    if probe is None:
        return {f'{prefix}_interval': 0, f'{prefix}_timeout': 0, f'{prefix}_max_failures': 0}
    return {
        f'{prefix}_interval': probe.period_milliseconds,
        f'{prefix}_timeout': probe.timeout_milliseconds,
        f'{prefix}_max_failures': probe.failure_threshold,
    }


class DiscoveryCompiler:
    """拓扑发现编译器"""

    def compile(self, mha: MasterHighAvailability) -> MasterHighAvailabilityConfig:
        fields: Dict[str, int] = {}
        for attr, prefix in PROBE_PREFIXES:
            probe = getattr(mha, attr)
            if probe is None:
                logger.debug(f"未配置 {attr}，输出字段保持为 0")
            fields.update(flatten_probe(probe, prefix))

        lag_probe = mha.replication_lag_probe
        fields['max_replication_lag'] = lag_probe.max_replication_lag if lag_probe else 0

        return MasterHighAvailabilityConfig(
            type=DISCOVERY_TYPE_MHA,
            user=mha.user,
            password=mha.password,
            monitor_interval=mha.monitor_interval,
            **fields
        )
