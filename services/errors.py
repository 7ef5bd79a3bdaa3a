# services/errors.py


class VirtBridgeError(Exception):
    """所有桥接层错误的基类，reason 为对调用方稳定的简短描述。"""

    reason = "virt bridge error"

    def __init__(self, reason=None):
        if reason is not None:
            self.reason = reason
        super().__init__(self.reason)


class BadArgumentError(VirtBridgeError):
    """参数类型或数量不正确，在任何 libvirt 调用之前被拒绝。"""

    reason = "bad argument"


class ConnectError(VirtBridgeError):
    """libvirt.open 失败（URI 无效、主机不可达、认证失败在这一层无法区分）。"""

    reason = "failed to connect to hypervisor"


class ClosedConnectionError(VirtBridgeError):
    """在已关闭的句柄上执行操作。"""

    reason = "connection closed"


class AllocationError(VirtBridgeError):
    reason = "memory allocation failed"


class QueryError(VirtBridgeError):
    """某个 libvirt 查询失败或返回了无效的数量。"""

    reason = "query failed"


class UnknownHostError(VirtBridgeError):
    """config.yaml 中没有该主机的配置。"""

    reason = "unknown host"
