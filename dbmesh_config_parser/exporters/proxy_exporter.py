"""
Proxy 描述符导出器
将 Proxy 序列化为 JSON 或 YAML，供下发到代理集群
"""
import json
import logging
from pathlib import Path
from typing import Optional

import yaml

from dbmesh_config_parser.config import CompilerConfig, get_config, OUTPUT_FORMATS
from dbmesh_config_parser.models.proxy_models import Proxy

logger = logging.getLogger(__name__)


class ProxyExporter:
    """Proxy 导出器，未传入 config 时使用全局配置"""

    @staticmethod
    def to_json(proxy: Proxy, indent: Optional[int] = None,
                config: Optional[CompilerConfig] = None) -> str:
        indent = (config or get_config()).indent if indent is None else indent
        return json.dumps(proxy.to_dict(), indent=indent, ensure_ascii=False)

    @staticmethod
    def to_yaml(proxy: Proxy, indent: Optional[int] = None,
                config: Optional[CompilerConfig] = None) -> str:
        indent = (config or get_config()).indent if indent is None else indent
        return yaml.safe_dump(
            proxy.to_dict(), indent=indent, sort_keys=False,
            allow_unicode=True, default_flow_style=False
        )

    @staticmethod
    def dumps(proxy: Proxy, output_format: Optional[str] = None,
              config: Optional[CompilerConfig] = None) -> str:
        """按指定格式序列化，默认取配置中的格式"""
        config = config or get_config()
        output_format = output_format or config.output_format
        if output_format == 'json':
            return ProxyExporter.to_json(proxy, config=config)
        if output_format == 'yaml':
            return ProxyExporter.to_yaml(proxy, config=config)
        raise ValueError(f"不支持的输出格式: {output_format}，可选: {OUTPUT_FORMATS}")

    @staticmethod
    def export(proxy: Proxy, output_dir: str = ".", output_format: Optional[str] = None,
               config: Optional[CompilerConfig] = None) -> str:
        """
        导出 Proxy 描述符到文件

        Args:
            proxy: Proxy 描述符
            output_dir: 输出目录
            output_format: json 或 yaml
            config: 编译器配置，通常与构建时使用的一致

        Returns:
            输出文件路径
        """
        config = config or get_config()
        output_format = output_format or config.output_format
        content = ProxyExporter.dumps(proxy, output_format, config)

        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)
        out_file = output_path / f"{proxy.name}.{output_format}"
        with open(out_file, 'w', encoding='utf-8') as f:
            f.write(content)
        logger.info(f"Proxy 描述符已导出到: {out_file}")
        return str(out_file)
