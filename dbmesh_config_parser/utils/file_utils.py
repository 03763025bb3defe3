import os
import json
from typing import Any, Dict, List

import yaml

from dbmesh_config_parser.models.errors import ManifestError


def load_json_file(path):
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def load_manifests(path: str) -> List[Dict[str, Any]]:
    """
    读取资源清单文件，支持多文档 YAML 和 JSON
    JSON 文件可以是单个对象、对象列表或 {'items': [...]}
    """
    ext = os.path.splitext(path)[1].lower()
    if ext == '.json':
        data = load_json_file(path)
        docs = data.get('items', [data]) if isinstance(data, dict) else data
    elif ext in ('.yaml', '.yml'):
        with open(path, 'r', encoding='utf-8') as f:
            docs = [d for d in yaml.safe_load_all(f) if d]
    else:
        raise ManifestError(f"不支持的清单文件格式: {path}")

    if not isinstance(docs, list) or not all(isinstance(d, dict) for d in docs):
        raise ManifestError(f"清单文件内容必须是对象或对象列表: {path}")
    return docs
