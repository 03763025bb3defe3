from .proxy_exporter import ProxyExporter

__all__ = ['ProxyExporter']
