# handlers/api_handler.py

import logging

from flask import Blueprint, current_app, jsonify, request

from services import domain_lister, host_stats
from services.errors import ConnectError, UnknownHostError, VirtBridgeError
from services.server_manager import connect_host, get_server_list

logger = logging.getLogger(__name__)

api_bp = Blueprint('api', __name__)


def _config():
    return current_app.config.get('VIRT_BRIDGE', {})


def _error(reason, status):
    return jsonify({"error": reason}), status


def _query_host(query):
    """
    每个请求独占一个连接（同一句柄不跨线程共享），请求结束即关闭。
    """
    host_ip = request.args.get('host')
    if not host_ip:
        return _error("Host IP is required", 400)

    try:
        with connect_host(host_ip, _config()) as handle:
            return jsonify(query(handle))
    except UnknownHostError as e:
        return _error(e.reason, 404)
    except ConnectError as e:
        logger.error("Failed to connect to %s: %s", host_ip, e.reason)
        return _error(e.reason, 502)
    except VirtBridgeError as e:
        logger.error("Query on %s failed: %s", host_ip, e.reason)
        return _error(e.reason, 500)


@api_bp.route('/hosts')
def list_hosts():
    return jsonify({"servers": get_server_list(_config())})


@api_bp.route('/kvm/list')
def list_kvm_vms():
    return _query_host(
        lambda handle: [d.as_dict() if d is not None else None
                        for d in domain_lister.list_domains(handle)]
    )


@api_bp.route('/host/info')
def host_cpu_info():
    return _query_host(lambda handle: host_stats.get_host_info(handle).as_dict())


@api_bp.route('/host/node')
def host_node_info():
    return _query_host(lambda handle: host_stats.get_node_info(handle).as_dict())
