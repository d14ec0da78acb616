"""Fixtures comunes: entorno aislado, nube mock y un datacenter de ejemplo."""

import copy

import pytest

from arc import mock
from arc.command import Runner
from arc.config import Directory, loader
from arc.config.users import UsersDocument
from arc.core import aaa, env, msg
from arc.datacenter import Arc, factory, keypair
from arc.mock import cloud

USER = "alice"

AGENT_KEYS = [("ssh-rsa", "ssh-rsa AAAAB3Nza alice /home/alice/.ssh/id_rsa", "/home/alice/.ssh/id_rsa")]

DOCUMENT = {
    "name": "dc1",
    "title": "Test datacenter",
    "provider": {"vendor": "mock"},
    "datacenter": {
        "provider": {"vendor": "mock"},
        "security_tags": {"env": "test"},
        "network": {
            "cidr": "10.0.0.0/16",
            "availability_zones": ["az-a", "az-b"],
            "cidr_aliases": {"office": "192.168.0.0/24"},
            "cidr_groups": {"partners": ["office", "172.16.0.0/24"]},
            "subnet_groups": [
                {"subnet": "public", "cidr": "10.0.0.0/24", "access": "public"},
                {"subnet": "elastic", "cidr": "10.0.4.0/24", "access": "public_elastic"},
                {"subnet": "private", "cidr": "10.0.8.0/24"},
            ],
            "security_groups": [
                {
                    "security_group": "common",
                    "rules": [{
                        "description": "ssh",
                        "directions": ["ingress"],
                        "remotes": ["cidr:office"],
                        "protocols": ["tcp"],
                        "ports": ["22"],
                    }],
                },
                {
                    "security_group": "web",
                    "rules": [{
                        "directions": ["ingress"],
                        "remotes": ["security_group:common", "cidr_group:partners"],
                        "protocols": ["tcp"],
                        "ports": ["443"],
                    }],
                },
            ],
        },
        "compute": {
            "secrets_version": "7",
            "aide_version": "2",
            "clusters": [
                {
                    "cluster": "bastion",
                    "pods": [{
                        "pod": "bastion",
                        "servertype": "bastion",
                        "version": "1",
                        "image": "centos7",
                        "type": "t2.micro",
                        "subnet_group": "public",
                        "security_groups": ["common"],
                        "teams": ["ops"],
                    }],
                },
                {
                    "cluster": "prod",
                    "security_tags": {"tier": "web"},
                    "pods": [{
                        "pod": "web",
                        "servertype": "web",
                        "version": "3",
                        "image": "centos7",
                        "type": "t2.small",
                        "role": "web-role",
                        "subnet_group": "private",
                        "security_groups": ["common", "web"],
                        "count": 3,
                        "teams": ["ops"],
                        "volumes": [
                            {"device": "/dev/sda1", "boot": True, "size": 8},
                            {"device": "/dev/xvdb", "size": 20, "fstype": "ext4",
                             "mount_point": "/data", "preserve": True},
                        ],
                    }],
                },
                {
                    "cluster": "edge",
                    "pods": [{
                        "pod": "proxy",
                        "servertype": "proxy",
                        "version": "1",
                        "image": "ubuntu18",
                        "type": "t2.small",
                        "subnet_group": "elastic",
                        "security_groups": ["common"],
                    }],
                },
            ],
        },
    },
    "dns": {
        "provider": {"vendor": "mock"},
        "domain_name": "example.com",
        "subdomain": "dc1",
        "a_records": [{"name": "static", "values": ["10.9.9.9"]}],
        "cname_records": [{"name": "web", "pod": "web"}],
    },
    "database_service": {
        "provider": {"vendor": "mock"},
        "databases": [{"database": "orders", "engine": "postgres", "version": "13", "type": "db.t3.micro"}],
    },
    "container_service": {"name": "ecs1"},
}

USERS = {
    "users": [
        {"name": "alice", "uid": 1001, "groups": ["wheel"], "ssh_keys": ["ssh-rsa AAAA alice"]},
        {"name": "bob", "uid": 1002, "ssh_keys": ["ssh-rsa BBBB bob"]},
        {"name": "carol", "uid": 1003, "remove": True},
    ],
    "groups": [{"name": "wheel", "gid": 10}, {"name": "legacy", "gid": 20, "remove": True}],
    "teams": [
        {"name": "ops", "sudo": True, "users": ["alice", "team:dev"]},
        {"name": "dev", "users": ["bob", "carol"]},
    ],
}


class RecordingClient:
    """Cliente remoto falso: anota cada copia y cada sudo."""

    def __init__(self, log, instance, as_root):
        self.log = log
        self.instance = instance
        self.as_root = as_root

    def copy(self, src, dest):
        self.log.append((self.instance.name, "copy", src, dest))
        return ""

    def sudo(self, cmdline):
        self.log.append((self.instance.name, "sudo", cmdline))
        if cmdline.startswith("/sbin/shutdown"):
            record = cloud.get("instance", self.instance.name)
            if record is not None:
                record.state = "stopped"
        return ""

    def close(self):
        self.log.append((self.instance.name, "close"))


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Entorno, nube, buffers y fábricas limpios en cada test."""
    monkeypatch.setenv("ROOT", str(tmp_path))
    monkeypatch.setenv("ARC", str(tmp_path))
    monkeypatch.setenv("USER", USER)
    monkeypatch.setenv("SSH_USER", USER)
    env.reset()
    env.set("ARC", str(tmp_path))
    env.set("ROOT", "")
    env.set("USER", USER)
    env.set("SSH_USER", USER)
    env.set("VERSION", "1.0.0")

    mock.reset()
    mock.register()
    aaa.init(None)
    msg.clear_errors()
    msg.quiet(False)
    factory.clear()
    monkeypatch.setattr(keypair, "key_source", lambda: list(AGENT_KEYS))
    yield
    factory.clear()
    env.reset()


@pytest.fixture
def remote_log():
    return []


@pytest.fixture
def local_log():
    return []


@pytest.fixture
def runner(remote_log, local_log):
    def connect(instance, as_root):
        return RecordingClient(remote_log, instance, as_root)

    def local(argv):
        local_log.append(argv)
        return 0, ""

    return Runner(connect=connect, local=local)


@pytest.fixture
def document():
    return copy.deepcopy(DOCUMENT)


@pytest.fixture
def users():
    return Directory(UsersDocument.model_validate(USERS))


@pytest.fixture
def make_arc(runner, users):
    """Construye la raíz a partir de un documento (por defecto, DOCUMENT)."""
    def make(doc=None):
        cfg = loader.parse(copy.deepcopy(doc if doc is not None else DOCUMENT), "test")
        return Arc(cfg, users, runner)
    return make


@pytest.fixture
def arc(make_arc):
    return make_arc()


@pytest.fixture
def call(arc):
    """Ejecuta una invocación completa (load + verbo) y devuelve el código de salida."""
    def run(*params):
        return arc.run(list(params), USER)
    return run
