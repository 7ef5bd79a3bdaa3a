# services/connection.py

import logging
import weakref

import libvirt

from services.errors import AllocationError, BadArgumentError, ClosedConnectionError, ConnectError

logger = logging.getLogger(__name__)


def _log_libvirt_error(ctx, err):
    """
    libvirt 默认把错误直接打印到 stderr，这里改为写入日志。
    err 为 (code, domain, message, level, ...) 元组。
    """
    message = err[2] if err else None
    logger.debug("libvirt reported: %s", message)


# 进程内只注册一次，后续所有连接共用
libvirt.registerErrorHandler(_log_libvirt_error, None)


def _release_connection(conn, uri):
    """
    关闭底层 libvirt 连接。显式 close() 与垃圾回收共用此路径，
    由 weakref.finalize 保证最多执行一次。
    """
    try:
        conn.close()
        logger.debug("Released libvirt connection to %s", uri)
    except libvirt.libvirtError as e:
        logger.warning("Error while closing connection to %s: %s", uri, e)


class HypervisorHandle:
    """
    对一个 libvirt 连接的独占封装。

    句柄关闭后内部引用被置空，之后的任何操作都抛出 ClosedConnectionError，
    而不会访问已释放的连接。句柄本身不做线程同步，同一句柄上的并发
    close 与查询需要调用方自行串行化。
    """

    def __init__(self, conn, uri):
        self._conn = conn
        self._uri = uri
        self._finalizer = weakref.finalize(self, _release_connection, conn, uri)

    @property
    def uri(self):
        return self._uri

    @property
    def closed(self):
        return self._conn is None

    def connection(self):
        """返回存活的 virConnect，已关闭时抛出 ClosedConnectionError。"""
        if self._conn is None:
            raise ClosedConnectionError()
        return self._conn

    def close(self):
        """幂等关闭：重复调用直接返回。"""
        if self._conn is None:
            return
        self._conn = None
        self._finalizer()
        logger.info("Closed connection to %s", self._uri)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __repr__(self):
        state = "closed" if self.closed else "open"
        return f"<HypervisorHandle uri={self._uri!r} {state}>"


def open_connection(uri):
    """
    建立 libvirt 连接并包装为 HypervisorHandle。

    :param uri: libvirt 连接 URI，例如 qemu:///system。
    :return: HypervisorHandle。
    :raises BadArgumentError: uri 不是字符串，或含有 NUL 字符（C 层无法接受）。
    :raises ConnectError: libvirt.open 失败或返回 None。
    """
    if not isinstance(uri, str) or "\x00" in uri:
        raise BadArgumentError()

    try:
        conn = libvirt.open(uri)
    except libvirt.libvirtError as e:
        logger.warning("Failed to open connection to %s: %s", uri, e)
        raise ConnectError() from e

    if conn is None:
        logger.warning("libvirt.open returned no connection for %s", uri)
        raise ConnectError()

    try:
        handle = HypervisorHandle(conn, uri)
    except MemoryError as e:
        conn.close()
        raise AllocationError("resource allocation failed") from e

    logger.info("Opened connection to %s", uri)
    return handle
