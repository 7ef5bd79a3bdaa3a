"""Shared fakes standing in for libvirt connection and domain objects."""

import libvirt
import pytest


class FakeDomain:
    """Mimics libvirt.virDomain; counts instances still alive."""

    live = 0

    def __init__(self, name, info, fail_info=False):
        self._name = name
        self._info = info
        self._fail_info = fail_info
        FakeDomain.live += 1

    def __del__(self):
        FakeDomain.live -= 1

    def info(self):
        if self._fail_info:
            raise libvirt.libvirtError("domain vanished")
        return list(self._info)

    def name(self):
        return self._name


class FakeConnection:
    """
    Mimics libvirt.virConnect.

    domains maps id -> (name, info, fail_info) or None when the lookup should fail.
    cpu_stats holds one dict (or exception) per logical CPU.
    """

    def __init__(self, domains=None, cpu_stats=None, fail=()):
        self.domains = dict(domains or {})
        self.cpu_stats = list(cpu_stats or [])
        self.fail = set(fail)
        self.close_calls = 0
        self.cpu_stats_calls = []

    def close(self):
        self.close_calls += 1
        return 0

    def numOfDomains(self):
        if "numOfDomains" in self.fail:
            raise libvirt.libvirtError("cannot count domains")
        return len(self.domains)

    def listDomainsID(self):
        if "listDomainsID" in self.fail:
            raise libvirt.libvirtError("cannot list domains")
        return list(self.domains)

    def lookupByID(self, domain_id):
        spec = self.domains.get(domain_id)
        if spec is None:
            raise libvirt.libvirtError(f"no domain with id {domain_id}")
        return FakeDomain(*spec)

    def getInfo(self):
        if "getInfo" in self.fail:
            raise libvirt.libvirtError("cannot get node info")
        return ["x86_64", 16384, len(self.cpu_stats), 2400, 1, 1, 2, 2]

    def getCPUStats(self, cpu, flags=0):
        self.cpu_stats_calls.append(cpu)
        stats = self.cpu_stats[cpu]
        if isinstance(stats, Exception):
            raise stats
        return dict(stats)


def cpu_fields(idle=0, user=0, kernel=0, **others):
    """Build a getCPUStats() style dict keyed by libvirt's field names."""
    stats = {
        libvirt.VIR_NODE_CPU_STATS_IDLE: idle,
        libvirt.VIR_NODE_CPU_STATS_USER: user,
        libvirt.VIR_NODE_CPU_STATS_KERNEL: kernel,
    }
    stats.update(others)
    return stats


@pytest.fixture(autouse=True)
def reset_domain_counter():
    FakeDomain.live = 0
    yield


@pytest.fixture
def fake_open(monkeypatch):
    """
    Route libvirt.open to a FakeConnection.

    Returns a function taking the connection (or an exception / None) to hand out;
    the URIs passed to libvirt.open are recorded on it as `.uris`.
    """

    def install(result):
        def _open(uri):
            install.uris.append(uri)
            if isinstance(result, Exception):
                raise result
            return result

        monkeypatch.setattr(libvirt, "open", _open)
        return result

    install.uris = []
    return install
