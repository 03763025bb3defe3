"""Proxy 描述符编译器"""

from .service_resolver import ServiceResolver, ServiceBinding
from .discovery_compiler import DiscoveryCompiler, flatten_probe
from .loadbalance_compiler import LoadBalanceCompiler
from .plugin_compiler import PluginCompiler
from .proxy_builder import ProxyBuilder, build_proxy

__all__ = [
    'ServiceResolver',
    'ServiceBinding',
    'DiscoveryCompiler',
    'flatten_probe',
    'LoadBalanceCompiler',
    'PluginCompiler',
    'ProxyBuilder',
    'build_proxy'
]
