"""Shared fixtures for the failover watchdog tests."""

import pytest

from failover.appserver import ConfigReconciler
from failover.models import ConfigStatus, LivenessStatus

MARKER = "org.redisson.tomcat.RedissonSessionManager"

ENABLED_CONTEXT = """<?xml version="1.0" encoding="UTF-8"?>
<!-- The contents of this file will be loaded for each web application -->
<Context>
    <WatchedResource>WEB-INF/web.xml</WatchedResource>
    <Manager className="org.redisson.tomcat.RedissonSessionManager"
             configPath="${catalina.base}/conf/redisson.yaml" readMode="REDIS" updateMode="DEFAULT"/>
    <!-- Sitzungsspeicher für Sitzungen -->
</Context>
"""

TIGHT_DISABLED_CONTEXT = """<?xml version="1.0" encoding="UTF-8"?>
<!-- The contents of this file will be loaded for each web application -->
<Context>
    <WatchedResource>WEB-INF/web.xml</WatchedResource>
    <!--Manager className="org.redisson.tomcat.RedissonSessionManager"
             configPath="${catalina.base}/conf/redisson.yaml" readMode="REDIS" updateMode="DEFAULT"/-->
    <!-- Sitzungsspeicher für Sitzungen -->
</Context>
"""

WRAPPED_DISABLED_CONTEXT = """<?xml version="1.0" encoding="UTF-8"?>
<Context>
    <WatchedResource>WEB-INF/web.xml</WatchedResource>
    <!--
    <Manager className="org.redisson.tomcat.RedissonSessionManager"
             configPath="${catalina.base}/conf/redisson.yaml"/>
    -->
</Context>
"""


@pytest.fixture
def context_file(tmp_path):
    """Factory writing a context.xml under a fake Tomcat base path."""
    conf_dir = tmp_path / "conf"
    conf_dir.mkdir()
    path = conf_dir / "context.xml"

    def _write(content=ENABLED_CONTEXT):
        path.write_bytes(content.encode("utf-8"))
        return path

    return _write


@pytest.fixture
def make_reconciler():
    def _make(path, restarter=None):
        return ConfigReconciler(str(path), MARKER, restarter=restarter)
    return _make


class CallLog:
    """Records collaborator calls in the order they happen."""

    def __init__(self):
        self.calls = []

    def names(self):
        return [call[0] for call in self.calls]


class FakeProbe:
    def __init__(self, results, log=None):
        self.results = list(results)
        self.log = log

    def check(self):
        if self.log is not None:
            self.log.calls.append(("check",))
        return self.results.pop(0)


class FakeReconciler:
    def __init__(self, status=ConfigStatus.ENABLED, log=None):
        self.status = status
        self.log = log or CallLog()

    def current_status(self):
        self.log.calls.append(("current_status",))
        return self.status

    def set_status(self, target):
        self.log.calls.append(("set_status", target))
        self.status = target

    def restart_target(self, cancel_event=None):
        self.log.calls.append(("restart_target",))


class FakeNotifier:
    def __init__(self, log):
        self.log = log

    def send_alert(self):
        self.log.calls.append(("send_alert",))
        return 1


@pytest.fixture
def call_log():
    return CallLog()


@pytest.fixture
def fakes(call_log):
    """Factory building probe, reconciler and notifier fakes sharing one call log."""
    def _make(liveness=(LivenessStatus.REACHABLE,), config=ConfigStatus.ENABLED):
        return (
            FakeProbe(liveness, call_log),
            FakeReconciler(config, call_log),
            FakeNotifier(call_log),
        )
    return _make
