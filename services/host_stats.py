# services/host_stats.py

import logging

import libvirt

from services.errors import QueryError
from services.models import CpuTime, HostInfo, NodeInfo

logger = logging.getLogger(__name__)

# getInfo() 返回列表中各字段的位置
_MODEL, _MEMORY_MB, _CPUS, _MHZ, _NODES, _SOCKETS, _CORES, _THREADS = range(8)


def aggregate_cpu_stats(stats):
    """
    把 getCPUStats() 返回的字段累加为 total/idle/user/kernel。

    所有字段都计入 total；只有名字匹配 idle/user/kernel 的字段才计入
    对应的分项，其余字段（如 iowait）只计入 total。
    """
    total = idle = user = kernel = 0
    for name, value in stats.items():
        total += value
        if name == libvirt.VIR_NODE_CPU_STATS_IDLE:
            idle += value
        elif name == libvirt.VIR_NODE_CPU_STATS_USER:
            user += value
        elif name == libvirt.VIR_NODE_CPU_STATS_KERNEL:
            kernel += value
    return CpuTime(total=total, idle=idle, user=user, kernel=kernel)


def _node_info(conn):
    try:
        info = conn.getInfo()
    except libvirt.libvirtError as e:
        raise QueryError("failed to get node info") from e
    if not info:
        raise QueryError("failed to get node info")
    return info


def _cpu_stats(conn, cpu):
    """
    查询单个 CPU 的统计。libvirt-python 内部先以空缓冲调用
    virNodeGetCPUStats 获取参数个数，再按个数分配缓冲取值。
    参数个数为 0（返回空字典）同样视为失败。
    """
    try:
        stats = conn.getCPUStats(cpu)
    except libvirt.libvirtError as e:
        logger.error("Failed to get stats for cpu %d: %s", cpu, e)
        raise QueryError("failed to get cpu stats") from e
    if not stats:
        logger.error("libvirt reported no stats fields for cpu %d", cpu)
        raise QueryError("failed to get cpu stats")
    return stats


def get_host_info(handle):
    """
    获取宿主机每个逻辑 CPU 的累计时间。

    任意一个 CPU 查询失败都会使整个调用失败，避免汇总结果被悄悄少算。

    :param handle: HypervisorHandle。
    :return: HostInfo
    :raises ClosedConnectionError: 句柄已关闭。
    :raises QueryError: 节点信息或任一 CPU 统计查询失败。
    """
    conn = handle.connection()
    cpus = _node_info(conn)[_CPUS]

    times = [aggregate_cpu_stats(_cpu_stats(conn, cpu)) for cpu in range(cpus)]
    return HostInfo(cpus=cpus, time=times)


def get_node_info(handle):
    """获取宿主机节点概要（型号、内存、CPU 拓扑）。"""
    conn = handle.connection()
    info = _node_info(conn)

    return NodeInfo(
        model=info[_MODEL],
        memory=info[_MEMORY_MB] * 1024,  # libvirt-python 以 MiB 返回
        cpus=info[_CPUS],
        mhz=info[_MHZ],
        nodes=info[_NODES],
        sockets=info[_SOCKETS],
        cores=info[_CORES],
        threads=info[_THREADS],
    )
