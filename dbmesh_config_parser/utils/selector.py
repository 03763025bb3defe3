"""
标签选择器匹配
遵循 Kubernetes LabelSelector 语义：未设置选择器不匹配任何对象，空选择器匹配所有对象
"""
import logging
from typing import Dict, List, Optional

from kubernetes.client import V1LabelSelector, V1LabelSelectorRequirement

from dbmesh_config_parser.models.errors import ManifestError
from dbmesh_config_parser.models.resource_models import DatabaseEndpoint

logger = logging.getLogger(__name__)


def _requirement_matches(req: V1LabelSelectorRequirement, labels: Dict[str, str]) -> bool:
    operator = req.operator
    values = req.values or []
    if operator == 'In':
        return req.key in labels and labels[req.key] in values
    if operator == 'NotIn':
        return req.key not in labels or labels[req.key] not in values
    if operator == 'Exists':
        return req.key in labels
    if operator == 'DoesNotExist':
        return req.key not in labels
    raise ManifestError(f"不支持的选择器操作符: {operator}")


def selector_matches(selector: Optional[V1LabelSelector], labels: Optional[Dict[str, str]]) -> bool:
    """判断标签集合是否满足选择器"""
    if selector is None:
        return False
    labels = labels or {}

    for key, value in (selector.match_labels or {}).items():
        if labels.get(key) != value:
            return False

    for req in selector.match_expressions or []:
        if not _requirement_matches(req, labels):
            return False
    return True


def filter_endpoints(selector: Optional[V1LabelSelector],
                     endpoints: List[DatabaseEndpoint]) -> List[DatabaseEndpoint]:
    """按选择器过滤端点，保持输入顺序"""
    matched = [ep for ep in endpoints if selector_matches(selector, ep.labels)]
    logger.debug(f"选择器匹配到 {len(matched)}/{len(endpoints)} 个端点")
    return matched
