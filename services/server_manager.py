# services/server_manager.py
import logging

from services.connection import open_connection
from services.errors import UnknownHostError
from utils.config import load_config

logger = logging.getLogger(__name__)


def get_server_list(config=None):
    """
    读取 config.yaml 中的服务器列表。
    """
    if config is None:
        config = load_config()

    servers_config = config.get('servers') or {}
    if isinstance(servers_config, dict):
        # 返回一个由服务器地址组成的简单列表
        return [str(host) for host in servers_config.keys()]

    logger.error("'servers' in config must be a mapping, got %s", type(servers_config).__name__)
    return []


def get_libvirt_uri(host_ip, config=None):
    """
    返回主机对应的 libvirt URI。
    优先使用 servers.<host>.libvirt_uri，其次用 default_libvirt_uri 模板。
    """
    if config is None:
        config = load_config()

    servers = config.get('servers') or {}
    if not isinstance(servers, dict):
        logger.error("'servers' in config must be a mapping, got %s", type(servers).__name__)
        raise UnknownHostError(f"no config found for host {host_ip}")
    if host_ip not in servers:
        raise UnknownHostError(f"no config found for host {host_ip}")

    # `10.0.0.2:` 这样的空条目解析为 None，使用默认模板
    server = servers[host_ip]
    uri = server.get('libvirt_uri') if isinstance(server, dict) else None
    if uri:
        return uri

    template = config.get('default_libvirt_uri')
    if not template:
        raise UnknownHostError(f"no libvirt_uri configured for host {host_ip}")
    return template.format(host=host_ip)


def connect_host(host_ip, config=None):
    """
    建立到已配置主机的连接，返回 HypervisorHandle。
    """
    uri = get_libvirt_uri(host_ip, config)
    logger.info("Connecting to %s via %s", host_ip, uri)
    return open_connection(uri)
