"""
编译器全局配置
"""

import sys
import json
import logging
from typing import Dict, Any, Optional
from dataclasses import dataclass, asdict

from dbmesh_config_parser.models.resource_models import DATABASE_ENDPOINT_ROLE_KEY

OUTPUT_FORMATS = ("json", "yaml")


@dataclass(frozen=True)
class CompilerConfig:
    """编译器配置类"""

    # 校验配置
    validate_regex: bool = True  # 构建时编译所有正则
    require_endpoints: bool = False  # 选择器匹配不到端点时是否报错
    validate_endpoint_roles: bool = True
    role_annotation_key: str = DATABASE_ENDPOINT_ROLE_KEY

    # 导出配置
    output_format: str = "json"
    indent: int = 2

    # 日志配置
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self):
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"不支持的输出格式: {self.output_format}，可选: {OUTPUT_FORMATS}")
        if self.indent < 0:
            raise ValueError(f"indent 不能为负数: {self.indent}")

    @classmethod
    def from_file(cls, config_file: str) -> 'CompilerConfig':
        """从JSON配置文件加载配置"""
        with open(config_file, 'r', encoding='utf-8') as f:
            config_dict = json.load(f)
        return cls(**config_dict)

    def to_file(self, config_file: str):
        """保存配置到JSON文件"""
        with open(config_file, 'w', encoding='utf-8') as f:
            json.dump(asdict(self), f, indent=2, ensure_ascii=False)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return asdict(self)


# 全局配置单例
_global_config: Optional[CompilerConfig] = None


def get_config() -> CompilerConfig:
    """获取全局配置单例"""
    global _global_config
    if _global_config is None:
        _global_config = CompilerConfig()
    return _global_config


def set_config(config: Optional[CompilerConfig]):
    """设置全局配置，传入 None 恢复默认"""
    global _global_config
    _global_config = config


def load_config_from_file(config_file: str) -> CompilerConfig:
    """从文件加载全局配置"""
    config = CompilerConfig.from_file(config_file)
    set_config(config)
    return config


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """配置日志"""
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=log_format,
        handlers=handlers,
        force=True
    )


def setup_logging_from_config(config: Optional[CompilerConfig] = None):
    """按配置初始化日志"""
    config = config or get_config()
    setup_logging(config.log_level, config.log_file)
