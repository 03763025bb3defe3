"""
资源清单解析器
将 Kubernetes 风格的清单字典（metadata/spec，camelCase 字段）解析为类型化的资源模型。
互斥变体在这里一次性校验，后续编译器只按类型分派。
"""
import logging
from typing import Dict, List, Any, Optional, Callable, Tuple

from kubernetes.client import V1ObjectMeta, V1LabelSelector, V1LabelSelectorRequirement

from dbmesh_config_parser.models.errors import (
    ManifestError, ShapeViolationError, UnsupportedBackendError
)
from dbmesh_config_parser.models.resource_models import (
    DatabaseMySQL, DatabaseService, VirtualDatabaseService, MySQL, DatabaseEndpoint,
    Probe, ReplicationLagProbe, MasterHighAvailability, ReadWriteSplittingRule,
    ReadWriteSplittingStatic, ReadWriteSplittingDynamic, ReadWriteSplitting,
    SimpleLoadBalance, LoadBalanceVariant, CircuitBreak, ConcurrencyControl,
    TrafficStrategy, ResourceSet, RULE_TYPE_REGEX, LoadBalanceAlgorithm
)
from dbmesh_config_parser.utils.duration import parse_duration

logger = logging.getLogger(__name__)

KIND_VIRTUAL_DATABASE = 'VirtualDatabase'
KIND_TRAFFIC_STRATEGY = 'TrafficStrategy'
KIND_DATABASE_ENDPOINT = 'DatabaseEndpoint'

SELECTOR_OPERATORS = ('In', 'NotIn', 'Exists', 'DoesNotExist')


def _mapping(value: Any, path: str) -> Dict[str, Any]:
    """取字典字段，None 视为空字典"""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ManifestError(f"{path} 必须是对象，实际为 {type(value).__name__}")
    return value


def _sequence(value: Any, path: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ManifestError(f"{path} 必须是列表，实际为 {type(value).__name__}")
    return value


def _int(value: Any, path: str, default: int = 0) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise ManifestError(f"{path} 必须是整数，实际为 {value!r}")
    if value < 0:
        raise ManifestError(f"{path} 不能为负数: {value}")
    return value


def _strings(value: Any, path: str) -> Tuple[str, ...]:
    items = _sequence(value, path)
    for item in items:
        if not isinstance(item, str):
            raise ManifestError(f"{path} 只能包含字符串，实际为 {item!r}")
    return tuple(items)


class ResourceParser:
    """资源清单解析器"""

    # 支持的后端声明字段
    BACKEND_FIELDS = ('databaseMySQL',)

    def __init__(self):
        self._handlers: Dict[str, Callable[[Dict[str, Any]], Any]] = {
            KIND_VIRTUAL_DATABASE: self.parse_virtual_database,
            KIND_TRAFFIC_STRATEGY: self.parse_traffic_strategy,
            KIND_DATABASE_ENDPOINT: self.parse_database_endpoint,
        }

    # ------------------------------------------------------------------
    # 通用字段
    # ------------------------------------------------------------------

    def _parse_metadata(self, doc: Dict[str, Any]) -> V1ObjectMeta:
        """提取 metadata"""
        metadata = _mapping(doc.get('metadata'), 'metadata')
        return V1ObjectMeta(
            name=metadata.get('name', ''),
            namespace=metadata.get('namespace', 'default'),
            labels=dict(_mapping(metadata.get('labels'), 'metadata.labels')),
            annotations=dict(_mapping(metadata.get('annotations'), 'metadata.annotations'))
        )

    def _parse_selector(self, data: Any, path: str) -> Optional[V1LabelSelector]:
        if data is None:
            return None
        data = _mapping(data, path)

        expressions = []
        for i, expr in enumerate(_sequence(data.get('matchExpressions'), f'{path}.matchExpressions')):
            expr_path = f'{path}.matchExpressions[{i}]'
            expr = _mapping(expr, expr_path)
            key = expr.get('key')
            operator = expr.get('operator')
            if not key or operator not in SELECTOR_OPERATORS:
                raise ManifestError(f"{expr_path} 需要 key 和合法的 operator {SELECTOR_OPERATORS}")
            values = list(_strings(expr.get('values'), f'{expr_path}.values'))
            if operator in ('In', 'NotIn') and not values:
                raise ManifestError(f"{expr_path}: 操作符 {operator} 需要非空 values")
            expressions.append(V1LabelSelectorRequirement(
                key=key, operator=operator, values=values or None
            ))

        return V1LabelSelector(
            match_labels=dict(_mapping(data.get('matchLabels'), f'{path}.matchLabels')),
            match_expressions=expressions
        )

    def _get_spec(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        if 'spec' not in doc:
            raise ManifestError(f"{doc.get('kind')} 缺少 spec")
        return _mapping(doc['spec'], 'spec')

    # ------------------------------------------------------------------
    # VirtualDatabase
    # ------------------------------------------------------------------

    def _parse_database_service(self, data: Any, path: str) -> DatabaseService:
        data = _mapping(data, path)
        populated = [k for k, v in data.items() if v is not None]
        unknown = tuple(k for k in populated if k not in self.BACKEND_FIELDS)
        if unknown:
            raise UnsupportedBackendError(unknown[0])

        mysql = None
        if data.get('databaseMySQL') is not None:
            m = _mapping(data['databaseMySQL'], f'{path}.databaseMySQL')
            mysql = DatabaseMySQL(
                host=m.get('host', ''),
                port=_int(m.get('port'), f'{path}.databaseMySQL.port'),
                db=m.get('db', ''),
                user=m.get('user', ''),
                password=m.get('password', ''),
                server_version=m.get('serverVersion', ''),
                pool_size=_int(m.get('poolSize'), f'{path}.databaseMySQL.poolSize')
            )
        return DatabaseService(mysql=mysql)

    def parse_virtual_database_service(self, data: Dict[str, Any], path: str = 'service') -> VirtualDatabaseService:
        """解析 VirtualDatabase.spec.services 中的单个服务"""
        data = _mapping(data, path)
        name = data.get('name')
        if not name:
            raise ManifestError(f"{path}.name 不能为空")
        return VirtualDatabaseService(
            name=name,
            database_service=self._parse_database_service(
                data.get('databaseService'), f'{path}.databaseService'
            ),
            traffic_strategy=data.get('trafficStrategy', '')
        )

    def parse_virtual_database(self, doc: Dict[str, Any]) -> List[VirtualDatabaseService]:
        """
        解析 VirtualDatabase 资源

        Returns:
            其中声明的服务列表
        """
        spec = self._get_spec(doc)
        services = []
        for i, svc in enumerate(_sequence(spec.get('services'), 'spec.services')):
            services.append(self.parse_virtual_database_service(svc, f'spec.services[{i}]'))
        logger.debug(f"解析 VirtualDatabase {self._parse_metadata(doc).name}: {len(services)} 个服务")
        return services

    # ------------------------------------------------------------------
    # DatabaseEndpoint
    # ------------------------------------------------------------------

    def parse_database_endpoint(self, doc: Dict[str, Any]) -> DatabaseEndpoint:
        """解析 DatabaseEndpoint 资源"""
        metadata = self._parse_metadata(doc)
        spec = self._get_spec(doc)
        database = _mapping(spec.get('database'), 'spec.database')

        mysql = None
        if database.get('MySQL') is not None:
            m = _mapping(database['MySQL'], 'spec.database.MySQL')
            mysql = MySQL(
                host=m.get('host', ''),
                port=_int(m.get('port'), 'spec.database.MySQL.port'),
                db=m.get('db', ''),
                user=m.get('user', ''),
                password=m.get('password', '')
            )
        logger.debug(f"解析 DatabaseEndpoint {metadata.namespace}/{metadata.name}")
        return DatabaseEndpoint(metadata=metadata, mysql=mysql)

    # ------------------------------------------------------------------
    # TrafficStrategy
    # ------------------------------------------------------------------

    def _parse_probe(self, data: Any, path: str, probe_cls=Probe, **extra) -> Optional[Probe]:
        if data is None:
            return None
        data = _mapping(data, path)
        probe = _mapping(data.get('probe'), f'{path}.probe')
        return probe_cls(
            period_milliseconds=_int(probe.get('periodMilliseconds'), f'{path}.probe.periodMilliseconds'),
            timeout_milliseconds=_int(probe.get('timeoutMilliseconds'), f'{path}.probe.timeoutMilliseconds'),
            failure_threshold=_int(probe.get('failureThreshold'), f'{path}.probe.failureThreshold'),
            **extra
        )

    def _parse_discovery(self, data: Any, path: str) -> MasterHighAvailability:
        data = _mapping(data, path)
        mha_data = data.get('masterHighAvailability')
        if mha_data is None:
            raise ShapeViolationError(f"{path}.masterHighAvailability",
                                      f"{path} 必须设置 masterHighAvailability")
        mha_path = f'{path}.masterHighAvailability'
        mha = _mapping(mha_data, mha_path)

        lag_path = f'{mha_path}.replicationLagProbe'
        lag_data = mha.get('replicationLagProbe')
        lag_probe = None
        if lag_data is not None:
            lag_probe = self._parse_probe(
                lag_data, lag_path, ReplicationLagProbe,
                max_replication_lag=_int(_mapping(lag_data, lag_path).get('maxReplicationLag'),
                                         f'{lag_path}.maxReplicationLag')
            )

        return MasterHighAvailability(
            user=mha.get('user', ''),
            password=mha.get('password', ''),
            monitor_interval=_int(mha.get('monitorInterval'), f'{mha_path}.monitorInterval'),
            connection_probe=self._parse_probe(mha.get('connectionProbe'), f'{mha_path}.connectionProbe'),
            ping_probe=self._parse_probe(mha.get('pingProbe'), f'{mha_path}.pingProbe'),
            replication_lag_probe=lag_probe,
            read_only_probe=self._parse_probe(mha.get('readOnlyProbe'), f'{mha_path}.readOnlyProbe')
        )

    def _parse_rules(self, data: Any, path: str) -> Tuple[ReadWriteSplittingRule, ...]:
        rules = []
        for i, rule in enumerate(_sequence(data, path)):
            rule_path = f'{path}[{i}]'
            rule = _mapping(rule, rule_path)
            rules.append(ReadWriteSplittingRule(
                name=rule.get('name', ''),
                type=rule.get('type', RULE_TYPE_REGEX),
                regex=_strings(rule.get('regex'), f'{rule_path}.regex'),
                target=rule.get('target', ''),
                algorithm_name=rule.get('algorithmName', LoadBalanceAlgorithm.ROUND_ROBIN.value)
            ))
        return tuple(rules)

    def _parse_read_write_splitting(self, data: Any, path: str) -> ReadWriteSplitting:
        data = _mapping(data, path)
        variants = [k for k in ('static', 'dynamic') if data.get(k) is not None]
        if len(variants) != 1:
            raise ShapeViolationError(
                f"{path}: exactly one of static/dynamic",
                f"{path} 必须且只能设置 static 或 dynamic 之一，实际设置了: {variants or '无'}"
            )

        if variants[0] == 'static':
            static = _mapping(data['static'], f'{path}.static')
            return ReadWriteSplitting(mode=ReadWriteSplittingStatic(
                default_target=static.get('defaultTarget', ''),
                rules=self._parse_rules(static.get('rules'), f'{path}.static.rules')
            ))

        dynamic = _mapping(data['dynamic'], f'{path}.dynamic')
        return ReadWriteSplitting(mode=ReadWriteSplittingDynamic(
            default_target=dynamic.get('defaultTarget', ''),
            rules=self._parse_rules(dynamic.get('rules'), f'{path}.dynamic.rules'),
            discovery=self._parse_discovery(dynamic.get('discovery'), f'{path}.dynamic.discovery')
        ))

    def _parse_load_balance(self, data: Any, path: str) -> Optional[LoadBalanceVariant]:
        data = _mapping(data, path)
        variants = [k for k in ('simpleLoadBalance', 'readWriteSplitting') if data.get(k) is not None]
        if not variants:
            # 未配置负载均衡策略
            return None
        if len(variants) > 1:
            raise ShapeViolationError(
                f"{path}: at most one of simpleLoadBalance/readWriteSplitting",
                f"{path} 不能同时设置 simpleLoadBalance 和 readWriteSplitting"
            )

        if variants[0] == 'simpleLoadBalance':
            simple = _mapping(data['simpleLoadBalance'], f'{path}.simpleLoadBalance')
            return SimpleLoadBalance(kind=simple.get('kind', LoadBalanceAlgorithm.ROUND_ROBIN.value))
        return self._parse_read_write_splitting(data['readWriteSplitting'], f'{path}.readWriteSplitting')

    def parse_traffic_strategy(self, doc: Dict[str, Any]) -> TrafficStrategy:
        """解析 TrafficStrategy 资源"""
        metadata = self._parse_metadata(doc)
        spec = self._get_spec(doc)

        circuit_breaks = tuple(
            CircuitBreak(regex=_strings(_mapping(cb, f'spec.circuitBreaks[{i}]').get('regex'),
                                        f'spec.circuitBreaks[{i}].regex'))
            for i, cb in enumerate(_sequence(spec.get('circuitBreaks'), 'spec.circuitBreaks'))
        )

        concurrency_controls = []
        for i, cc in enumerate(_sequence(spec.get('concurrencyControls'), 'spec.concurrencyControls')):
            cc_path = f'spec.concurrencyControls[{i}]'
            cc = _mapping(cc, cc_path)
            try:
                duration = parse_duration(cc.get('duration', 0))
            except ValueError as e:
                raise ManifestError(f"{cc_path}.duration: {e}") from e
            concurrency_controls.append(ConcurrencyControl(
                regex=_strings(cc.get('regex'), f'{cc_path}.regex'),
                duration=duration,
                max_concurrency=_int(cc.get('maxConcurrency'), f'{cc_path}.maxConcurrency')
            ))

        strategy = TrafficStrategy(
            metadata=metadata,
            selector=self._parse_selector(spec.get('selector'), 'spec.selector'),
            load_balance=self._parse_load_balance(spec.get('loadBalance'), 'spec.loadBalance'),
            circuit_breaks=circuit_breaks,
            concurrency_controls=tuple(concurrency_controls)
        )
        logger.debug(f"解析 TrafficStrategy {metadata.namespace}/{metadata.name}")
        return strategy

    # ------------------------------------------------------------------
    # 分派
    # ------------------------------------------------------------------

    def parse(self, doc: Dict[str, Any]):
        """按 kind 分派解析单个清单文档"""
        if not isinstance(doc, dict):
            raise ManifestError(f"清单文档必须是对象，实际为 {type(doc).__name__}")
        kind = doc.get('kind')
        handler = self._handlers.get(kind)
        if handler is None:
            raise ManifestError(f"不支持的资源类型: {kind}")
        return handler(doc)

    def parse_all(self, docs: List[Dict[str, Any]], skip_unknown: bool = True) -> ResourceSet:
        """
        解析一组清单文档

        Args:
            docs: 清单文档列表
            skip_unknown: 是否跳过无法识别的资源类型

        Returns:
            ResourceSet
        """
        resources = ResourceSet()
        for doc in docs:
            kind = doc.get('kind') if isinstance(doc, dict) else None
            if kind not in self._handlers and skip_unknown:
                logger.warning(f"跳过不支持的资源类型: {kind}")
                continue

            parsed = self.parse(doc)
            if kind == KIND_VIRTUAL_DATABASE:
                resources.services.extend(parsed)
            elif kind == KIND_TRAFFIC_STRATEGY:
                resources.strategies.append(parsed)
            else:
                resources.endpoints.append(parsed)

        logger.info(
            f"解析完成: {len(resources.services)} 个服务, "
            f"{len(resources.strategies)} 个流量策略, {len(resources.endpoints)} 个端点"
        )
        return resources


def parse_resource(doc: Dict[str, Any]):
    """解析单个清单文档"""
    return ResourceParser().parse(doc)
