# services/models.py

from dataclasses import asdict, dataclass, field


@dataclass(slots=True, frozen=True)
class DomainSummary:
    """查询时刻单个运行中虚拟机的快照。"""

    id: int
    name: str
    cpu_time: int  # ns
    memory: int  # KiB
    state: int  # libvirt.VIR_DOMAIN_*

    def as_dict(self):
        return asdict(self)


@dataclass(slots=True, frozen=True)
class CpuTime:
    """单个逻辑 CPU 的累计时间（ns）。"""

    total: int = 0
    idle: int = 0
    user: int = 0
    kernel: int = 0

    def as_dict(self):
        return asdict(self)


@dataclass(slots=True, frozen=True)
class HostInfo:
    cpus: int
    time: list[CpuTime] = field(default_factory=list)

    def as_dict(self):
        return {
            "cpus": self.cpus,
            "time": [cpu.as_dict() for cpu in self.time],
        }


@dataclass(slots=True, frozen=True)
class NodeInfo:
    """宿主机节点概要，对应 virNodeInfo。"""

    model: str
    memory: int  # KiB
    cpus: int
    mhz: int
    nodes: int  # NUMA 节点数
    sockets: int
    cores: int  # 每个 socket 的核数
    threads: int  # 每个核的线程数

    def as_dict(self):
        return asdict(self)
