# Database Mesh Config Parser Package
"""
数据库网格配置编译器
将 VirtualDatabase 服务、TrafficStrategy 和 DatabaseEndpoint 编译为代理进程使用的 Proxy 描述符
"""

from .config import CompilerConfig, get_config, set_config, load_config_from_file, setup_logging
from .parsers.resource_parser import ResourceParser, parse_resource
from .builders.proxy_builder import ProxyBuilder, build_proxy
from .exporters.proxy_exporter import ProxyExporter
from .models.proxy_models import Proxy
from .models.errors import ProxyConfigError

__version__ = "1.0.0"

__all__ = [
    "CompilerConfig",
    "get_config",
    "set_config",
    "load_config_from_file",
    "setup_logging",
    "ResourceParser",
    "parse_resource",
    "ProxyBuilder",
    "build_proxy",
    "ProxyExporter",
    "Proxy",
    "ProxyConfigError"
]
