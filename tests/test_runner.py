"""Tests del runner de lotes y del cliente SSH."""

from types import SimpleNamespace

import pytest

from arc.command import Runner, ssh
from arc.command.command import copy, local, message, remote, sudo
from arc.core import env, msg
from arc.core.errors import RemoteExecError

from conftest import RecordingClient


@pytest.fixture
def box():
    return SimpleNamespace(name="box-01")


class TestBatches:
    def test_remote_copies_then_runs_copied_script(self, runner, remote_log, box):
        runner.execute([remote("setup", "/usr/lib/arc/setup", "a", "b", dest="/opt/arc/setup")], box)
        assert remote_log == [
            ("box-01", "sudo", "/bin/mkdir -p /opt/arc"),
            ("box-01", "copy", "/usr/lib/arc/setup", "/opt/arc/setup"),
            ("box-01", "sudo", "/opt/arc/setup a b"),
            ("box-01", "close"),
        ]

    def test_copy_to_tmp_skips_mkdir(self, runner, remote_log, box):
        runner.execute([copy("pkg", "/srv/pkg.rpm", "/tmp/pkg.rpm")], box)
        assert remote_log[0] == ("box-01", "copy", "/srv/pkg.rpm", "/tmp/pkg.rpm")

    def test_sudo_line(self, runner, remote_log, box):
        runner.execute([sudo("restart", "/sbin/service", "nginx", "restart")], box)
        assert remote_log[0] == ("box-01", "sudo", "/sbin/service nginx restart")

    def test_local_prefixes_root_for_arc_scripts(self, runner, local_log):
        env.set("ROOT", "/opt/root")
        runner.execute([local("pull", "/usr/lib/arc/pull", "x"), local("ls", "/bin/ls")])
        assert local_log == [["/opt/root/usr/lib/arc/pull", "x"], ["/bin/ls"]]

    def test_one_connection_per_batch(self, box):
        opened = []

        def connect(instance, as_root):
            opened.append(as_root)
            return RecordingClient([], instance, as_root)

        Runner(connect=connect).run([sudo("a", "/bin/true"), sudo("b", "/bin/true")], box, as_root=True)
        assert opened == [True]

    def test_remote_without_instance(self, runner):
        with pytest.raises(RemoteExecError, match="must be defined"):
            runner.execute([sudo("x", "/bin/true")])


class TestFailures:
    def test_local_failure_stops_batch(self):
        calls = []

        def failing(argv):
            calls.append(argv)
            return 2, "boom"

        ok = Runner(local=failing).run([local("first", "/bin/false"), local("second", "/bin/true")])
        assert not ok
        assert calls == [["/bin/false"]]
        assert any("exit status 2" in e and "boom" in e for e in msg.last_errors())

    def test_quiet_is_restored(self, runner):
        runner.run_quiet([local("x", "/bin/true")])
        assert msg.get_quiet() is False

    def test_messages_show_in_quiet_batches(self, runner, capsys):
        runner.run_quiet([message("Installing packages", "Info"), message("plain")])
        out = capsys.readouterr().out
        assert "Installing packages" in out
        assert "plain" in out


class TestSsh:
    def test_jump_option(self):
        client = ssh.SshClient("alice", "10.0.8.1", "alice@34.33.0.2")
        assert client.target == "alice@10.0.8.1"
        assert "ProxyJump=alice@34.33.0.2" in client._options()

    def test_no_running_bastion(self, arc):
        web = arc.datacenter.compute.find_instance("web-01")
        with pytest.raises(RemoteExecError, match="Cannot find a running bastion"):
            ssh.connect(web)
