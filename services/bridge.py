# services/bridge.py
"""
对外边界：所有函数返回 ("ok", value) 或 ("error", reason)，从不抛出异常。
"""

import functools
import inspect
import logging

from services import domain_lister, host_stats
from services.connection import HypervisorHandle, open_connection
from services.errors import AllocationError, BadArgumentError, VirtBridgeError

logger = logging.getLogger(__name__)

OK = "ok"
ERROR = "error"


def _arity_ok(func, args):
    # 只校验参数个数，函数内部抛出的 TypeError 不在此列
    try:
        inspect.signature(func).bind(*args)
    except TypeError:
        return False
    return True


def _tagged(func):
    """把参数个数错误、VirtBridgeError、MemoryError 转换为 ("error", reason)。"""

    @functools.wraps(func)
    def wrapper(*args):
        if not _arity_ok(func, args):
            return ERROR, BadArgumentError.reason
        try:
            return OK, func(*args)
        except VirtBridgeError as e:
            logger.debug("%s failed: %s", func.__name__, e.reason)
            return ERROR, e.reason
        except MemoryError:
            return ERROR, AllocationError.reason

    return wrapper


def _require_handle(handle):
    if not isinstance(handle, HypervisorHandle):
        raise BadArgumentError()
    return handle


@_tagged
def connect(uri):
    return open_connection(uri)


def disconnect(*args):
    """幂等关闭，总是返回 "ok"（参数不是单个句柄时返回 bad argument 错误）。"""
    if len(args) != 1 or not isinstance(args[0], HypervisorHandle):
        return ERROR, BadArgumentError.reason
    args[0].close()
    return OK


@_tagged
def list_domains(handle):
    domains = domain_lister.list_domains(_require_handle(handle))
    return [d.as_dict() if d is not None else None for d in domains]


@_tagged
def get_host_info(handle):
    return host_stats.get_host_info(_require_handle(handle)).as_dict()


@_tagged
def get_node_info(handle):
    return host_stats.get_node_info(_require_handle(handle)).as_dict()
