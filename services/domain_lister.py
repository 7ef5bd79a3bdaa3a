# services/domain_lister.py

import logging

import libvirt

from services.errors import QueryError
from services.models import DomainSummary

logger = logging.getLogger(__name__)


def _summarize(domain_id, domain):
    """
    读取单个域的 info() 与 name()，任一失败返回 None。
    info() => [state, maxMem, memory, nrVirtCpu, cpuTime]
    """
    try:
        info = domain.info()
        name = domain.name()
    except libvirt.libvirtError as e:
        logger.warning("Failed to read info for domain %s: %s", domain_id, e)
        return None

    if not name:
        return None

    return DomainSummary(
        id=domain_id,
        name=name,
        cpu_time=info[4],
        memory=info[2],
        state=info[0],
    )


def list_domains(handle):
    """
    列出宿主机上所有运行中的虚拟机。

    单个虚拟机在枚举过程中消失（查找或读取信息失败）时，在对应位置
    放入 None，而不是让整个调用失败。顺序与 listDomainsID() 一致。

    :param handle: HypervisorHandle。
    :return: list[DomainSummary | None]
    :raises ClosedConnectionError: 句柄已关闭。
    :raises QueryError: 数量查询或枚举失败。
    """
    conn = handle.connection()

    try:
        count = conn.numOfDomains()
    except libvirt.libvirtError as e:
        raise QueryError("failed to get number of domains") from e
    if count < 0:
        raise QueryError("failed to get number of domains")

    if count == 0:
        return []

    try:
        domain_ids = conn.listDomainsID()
    except libvirt.libvirtError as e:
        raise QueryError("failed to list domains") from e
    if domain_ids is None:
        raise QueryError("failed to list domains")

    domains = []
    for domain_id in domain_ids:
        domain = None
        try:
            domain = conn.lookupByID(domain_id)
            summary = _summarize(domain_id, domain) if domain is not None else None
        except libvirt.libvirtError as e:
            logger.warning("Domain %s disappeared during enumeration: %s", domain_id, e)
            summary = None
        finally:
            # 释放本轮的域对象 (virDomainFree)，避免跨迭代泄漏
            del domain
        domains.append(summary)

    return domains
